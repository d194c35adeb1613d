from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Make the voteboard package importable when running tests from a checkout
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from voteboard.core import config as core_config  # noqa: E402
from voteboard.repositories.json_storage import JSONStore  # noqa: E402
from voteboard.services.session_service import reset_sessions  # noqa: E402


@pytest.fixture()
def data_file(tmp_path):
    return tmp_path / "data" / "database.json"


@pytest.fixture()
def store(data_file):
    """Opened store on a fresh temporary file."""
    with JSONStore(data_file) as s:
        yield s


@pytest.fixture()
def env(monkeypatch, data_file):
    """Point settings at the temporary data file and reset the settings cache."""
    monkeypatch.setenv("DATA_FILE", str(data_file))
    monkeypatch.setenv("FRONTEND_URL", "http://localhost:5173")
    monkeypatch.delenv("DEV_MODE", raising=False)
    monkeypatch.delenv("VOTER_ROLES", raising=False)
    monkeypatch.delenv("ADMIN_ROLES", raising=False)
    core_config.get_settings.cache_clear()
    reset_sessions()

    yield monkeypatch

    core_config.get_settings.cache_clear()
    reset_sessions()
