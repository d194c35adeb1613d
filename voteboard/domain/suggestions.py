"""Domain values for suggestions and votes."""
from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Iterable, Mapping


class SuggestionStatus(str, Enum):
    OPEN = "Open"
    PLANNED = "Planned"
    IN_PROGRESS = "In Progress"
    REJECTED = "Rejected"


# Fields an update is allowed to touch; updatedAt is always refreshed by the store.
MUTABLE_FIELDS = ("status", "title", "description")

DEFAULT_VOTE_VALUE = 1


def utc_now_iso() -> str:
    """Current UTC time as an ISO-8601 string with millisecond precision."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def vote_value(vote: Mapping[str, Any]) -> int:
    """Signed value of a vote record; a missing or zero value counts as an upvote."""
    value = vote.get("voteValue")
    if not value:
        return DEFAULT_VOTE_VALUE
    return int(value)


def vote_total(votes: Iterable[Mapping[str, Any]]) -> int:
    return sum(vote_value(vote) for vote in votes)


def mutable_subset(partial: Mapping[str, Any]) -> tuple[dict, list[str]]:
    """Split a partial update into (allowed fields, ignored keys)."""
    allowed = {key: partial[key] for key in MUTABLE_FIELDS if key in partial}
    ignored = sorted(key for key in partial if key not in MUTABLE_FIELDS)
    return allowed, ignored
