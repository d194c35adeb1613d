"""Session helpers (issue tokens, cookies, validation)."""
from __future__ import annotations

import secrets
import threading
import time
from typing import Dict, Tuple

from fastapi import Request, Response

from voteboard.core.config import get_settings

SESSION_COOKIE_NAME = "session"


class _SessionRegistry:
    """Process-local token -> (discord_id, expires_at) map."""

    def __init__(self) -> None:
        self._sessions: Dict[str, Tuple[str, float]] = {}
        self._lock = threading.Lock()

    def issue(self, discord_id: str, ttl_seconds: int) -> str:
        token = secrets.token_urlsafe(32)
        now = time.time()
        with self._lock:
            expired = [t for t, (_, expires_at) in self._sessions.items() if expires_at < now]
            for t in expired:
                del self._sessions[t]
            self._sessions[token] = (discord_id, now + ttl_seconds)
        return token

    def resolve(self, token: str) -> str | None:
        now = time.time()
        with self._lock:
            entry = self._sessions.get(token)
            if not entry:
                return None
            discord_id, expires_at = entry
            if expires_at < now:
                del self._sessions[token]
                return None
            return discord_id

    def drop(self, token: str) -> None:
        with self._lock:
            self._sessions.pop(token, None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def clear(self) -> None:
        with self._lock:
            self._sessions.clear()


_registry = _SessionRegistry()


def issue_session(discord_id: str) -> str:
    """Create a new session token for the given user."""
    settings = get_settings()
    ttl = max(60, settings.session_ttl_seconds)
    return _registry.issue(discord_id, ttl)


def current_discord_id(request: Request) -> str | None:
    """Return the discordId bound to the current session cookie, if any."""
    token = request.cookies.get(SESSION_COOKIE_NAME)
    if not token:
        return None
    return _registry.resolve(token)


def set_session_cookie(response: Response, token: str) -> None:
    settings = get_settings()
    secure_cookie = settings.app_env == "prod"
    response.set_cookie(
        SESSION_COOKIE_NAME,
        token,
        httponly=True,
        secure=secure_cookie,
        samesite="lax",
        max_age=settings.session_ttl_seconds,
        path="/",
    )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(SESSION_COOKIE_NAME, path="/")


def delete_session(token: str | None) -> None:
    if not token:
        return
    _registry.drop(token)


def reset_sessions() -> None:
    """Forget every session (tests and shutdown)."""
    _registry.clear()
