"""
Configuration helpers for the Voteboard backend.

Exposes a frozen Settings object read from environment variables (data file
path, role lists, dev-mode override, frontend origin) so that routers and
services do not fetch os.environ directly.
"""

from dataclasses import dataclass
from functools import lru_cache
import os


@dataclass(frozen=True)
class Settings:
    """Typed view of environment variables."""

    app_env: str
    dev_mode: bool
    voter_roles: tuple[str, ...]
    admin_roles: tuple[str, ...]
    data_file: str
    frontend_url: str
    session_ttl_seconds: int
    log_level: str


def _int(value: str | None, default: int = 0) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _bool(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _roles(value: str | None) -> tuple[str, ...]:
    if not value:
        return ()
    return tuple(role.strip() for role in value.split(",") if role.strip())


@lru_cache
def get_settings() -> Settings:
    """Read the current environment and build a Settings instance."""
    return Settings(
        app_env=(os.getenv("APP_ENV") or "dev").lower(),
        dev_mode=_bool(os.getenv("DEV_MODE"), False),
        voter_roles=_roles(os.getenv("VOTER_ROLES")),
        admin_roles=_roles(os.getenv("ADMIN_ROLES")),
        data_file=os.getenv("DATA_FILE") or os.path.join(".", "data", "database.json"),
        frontend_url=(os.getenv("FRONTEND_URL") or "http://localhost:5173").rstrip("/"),
        session_ttl_seconds=_int(os.getenv("SESSION_TTL_SECONDS", "86400"), 86400),
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
    )
