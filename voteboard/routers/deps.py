"""Request-scoped accessors and permission dependencies."""
from __future__ import annotations

from typing import Any, Callable, Mapping, Optional

from fastapi import HTTPException, Request

from voteboard.domain.policy import RolePolicy, can_vote, is_admin
from voteboard.repositories.json_storage import JSONStore
from voteboard.services.user_service import UserService


def get_store(request: Request) -> JSONStore:
    store = getattr(getattr(request.app, "state", None), "store", None)
    if store is None:
        raise RuntimeError("JSONStore not configured")
    return store


def get_policy(request: Request) -> RolePolicy:
    policy = getattr(getattr(request.app, "state", None), "policy", None)
    if policy is None:
        raise RuntimeError("RolePolicy not configured")
    return policy


def get_current_user(request: Request) -> Optional[dict]:
    return UserService(get_store(request)).current_user(request)


def _require(check: Callable[[Optional[Mapping[str, Any]], RolePolicy], bool], message: str):
    def _dependency(request: Request) -> Optional[dict]:
        user = get_current_user(request)
        if not check(user, get_policy(request)):
            raise HTTPException(403, message)
        return user

    return _dependency


require_voter = _require(can_vote, "Insufficient permissions to vote")
require_admin = _require(is_admin, "Admin permissions required")
