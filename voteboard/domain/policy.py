"""Access policy: vote/admin eligibility from a user's role set.

These predicates are pure. The HTTP layer evaluates them per request before
calling any store mutation; the store itself performs no authorization.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Optional

from voteboard.core.config import Settings


@dataclass(frozen=True)
class RolePolicy:
    """Externally configured role ids plus the global development override."""

    voter_roles: tuple[str, ...] = ()
    admin_roles: tuple[str, ...] = ()
    dev_mode: bool = False

    @classmethod
    def from_settings(cls, settings: Settings) -> "RolePolicy":
        return cls(
            voter_roles=tuple(settings.voter_roles),
            admin_roles=tuple(settings.admin_roles),
            dev_mode=settings.dev_mode,
        )


def has_role(user: Optional[Mapping[str, Any]], required_roles: Iterable[str], policy: RolePolicy) -> bool:
    """True when the user holds any of ``required_roles``.

    A missing user, or one without a ``roles`` entry, never passes, not even
    in dev mode. With a user present, dev mode allows everything.
    """
    if not user or user.get("roles") is None:
        return False
    if policy.dev_mode:
        return True
    held = set(user.get("roles") or ())
    return any(role in held for role in required_roles)


def can_vote(user: Optional[Mapping[str, Any]], policy: RolePolicy) -> bool:
    return has_role(user, policy.voter_roles, policy) or has_role(user, policy.admin_roles, policy)


def is_admin(user: Optional[Mapping[str, Any]], policy: RolePolicy) -> bool:
    return has_role(user, policy.admin_roles, policy)


def with_permissions(user: Mapping[str, Any], policy: RolePolicy) -> dict:
    """Copy of ``user`` carrying the ``canVote``/``isAdmin`` flags shown to clients."""
    payload = dict(user)
    payload["canVote"] = can_vote(user, policy)
    payload["isAdmin"] = is_admin(user, policy)
    return payload
