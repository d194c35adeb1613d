"""
JSON-file persistence for suggestions, votes and users.

The whole document lives in a single file and is re-read and rewritten on
every operation; the file is the only source of truth between calls.
"""

from __future__ import annotations

import json
import logging
import os
import threading
import uuid
from pathlib import Path
from typing import Any, Mapping, Optional

from voteboard.domain.suggestions import (
    DEFAULT_VOTE_VALUE,
    SuggestionStatus,
    mutable_subset,
    utc_now_iso,
    vote_total,
)

logger = logging.getLogger(__name__)

COLLECTIONS = ("suggestions", "votes", "users")


class StoreError(Exception):
    """Base class for store failures."""


class StorageError(StoreError):
    """Raised when the data file cannot be read, parsed or written."""


class StoreClosedError(StoreError):
    """Raised when a closed store is used."""


def empty_document() -> dict:
    return {name: [] for name in COLLECTIONS}


def db_defaults(db: dict) -> dict:
    for name in COLLECTIONS:
        db.setdefault(name, [])
    return db


def _annotate(suggestion: dict, votes: list[dict]) -> dict:
    matching = [vote for vote in votes if vote.get("suggestionId") == suggestion.get("id")]
    return {**suggestion, "votes": vote_total(matching), "voters": matching}


class JSONStore:
    """CRUD over the suggestion/vote/user document.

    Not-found is signalled with ``None``/``False``; I/O problems raise
    :class:`StorageError`. Each read-modify-write cycle holds the instance
    lock, so threads sharing one store cannot lose each other's updates.
    Separate processes or separate instances on the same file are not
    coordinated.
    """

    def __init__(self, path: str | os.PathLike) -> None:
        self.path = Path(path)
        self._lock = threading.RLock()
        self._open = False

    # -------------------------- lifecycle --------------------------
    def open(self) -> "JSONStore":
        with self._lock:
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                if not self.path.exists():
                    self._write(empty_document())
            except OSError as exc:
                raise StorageError(f"Could not initialise {self.path}: {exc}") from exc
            self._open = True
        logger.info("JSON store opened at %s", self.path)
        return self

    def close(self) -> None:
        with self._lock:
            self._open = False
        logger.info("JSON store closed")

    @property
    def is_open(self) -> bool:
        return self._open

    def __enter__(self) -> "JSONStore":
        return self.open()

    def __exit__(self, *exc_info) -> None:
        self.close()

    # -------------------------- raw document --------------------------
    def load(self) -> dict:
        self._ensure_open()
        try:
            with self.path.open("r", encoding="utf-8") as f:
                return db_defaults(json.load(f))
        except (OSError, json.JSONDecodeError) as exc:
            raise StorageError(f"Could not read {self.path}: {exc}") from exc

    def save(self, db: dict) -> None:
        self._ensure_open()
        self._write(db)

    def _write(self, db: dict) -> None:
        tmp = self.path.with_name(self.path.name + ".tmp")
        try:
            tmp.write_text(json.dumps(db, ensure_ascii=False, indent=2), encoding="utf-8")
            os.replace(tmp, self.path)
        except OSError as exc:
            raise StorageError(f"Could not write {self.path}: {exc}") from exc

    def transaction(self) -> threading.RLock:
        """Hold the store lock across several calls (check-then-act sequences)."""
        return self._lock

    def _ensure_open(self) -> None:
        if not self._open:
            raise StoreClosedError("Store is not open")

    # -------------------------- suggestions --------------------------
    def list_suggestions(self) -> list[dict]:
        with self._lock:
            db = self.load()
        return [_annotate(s, db["votes"]) for s in db["suggestions"]]

    def create_suggestion(self, fields: Mapping[str, Any]) -> dict:
        now = utc_now_iso()
        suggestion = {
            **fields,
            "id": str(uuid.uuid4()),
            "status": SuggestionStatus.OPEN.value,
            "createdAt": now,
            "updatedAt": now,
        }
        with self._lock:
            db = self.load()
            db["suggestions"].append(suggestion)
            self.save(db)
        return {**suggestion, "votes": 0, "voters": []}

    def get_suggestion(self, suggestion_id: str) -> Optional[dict]:
        with self._lock:
            db = self.load()
        for suggestion in db["suggestions"]:
            if suggestion.get("id") == suggestion_id:
                return _annotate(suggestion, db["votes"])
        return None

    def update_suggestion(self, suggestion_id: str, partial: Mapping[str, Any]) -> Optional[dict]:
        """Merge the mutable fields of ``partial`` and refresh ``updatedAt``."""
        allowed, ignored = mutable_subset(partial)
        if ignored:
            logger.debug("Ignoring non-mutable fields on suggestion %s: %s", suggestion_id, ignored)
        with self._lock:
            db = self.load()
            for index, suggestion in enumerate(db["suggestions"]):
                if suggestion.get("id") == suggestion_id:
                    updated = {**suggestion, **allowed, "updatedAt": utc_now_iso()}
                    db["suggestions"][index] = updated
                    self.save(db)
                    return _annotate(updated, db["votes"])
        return None

    def delete_suggestion(self, suggestion_id: str) -> bool:
        """Remove the suggestion record only; its votes stay in the document."""
        with self._lock:
            db = self.load()
            for index, suggestion in enumerate(db["suggestions"]):
                if suggestion.get("id") == suggestion_id:
                    del db["suggestions"][index]
                    self.save(db)
                    return True
        return False

    # -------------------------- votes --------------------------
    def list_votes(self, suggestion_id: str) -> list[dict]:
        with self._lock:
            db = self.load()
        return [v for v in db["votes"] if v.get("suggestionId") == suggestion_id]

    def has_voted(self, suggestion_id: str, user_id: str) -> bool:
        with self._lock:
            db = self.load()
        return any(
            v.get("suggestionId") == suggestion_id and v.get("userId") == user_id for v in db["votes"]
        )

    def add_vote(self, suggestion_id: str, user_id: str, vote_value: int = DEFAULT_VOTE_VALUE) -> dict:
        """Append a vote unconditionally. Deduplication is the caller's job."""
        vote = {
            "id": str(uuid.uuid4()),
            "suggestionId": suggestion_id,
            "userId": user_id,
            "voteValue": vote_value,
            "createdAt": utc_now_iso(),
        }
        with self._lock:
            db = self.load()
            db["votes"].append(vote)
            self.save(db)
        return vote

    def remove_vote(self, suggestion_id: str, user_id: str) -> bool:
        """Delete the first vote matching the pair, if any."""
        with self._lock:
            db = self.load()
            for index, vote in enumerate(db["votes"]):
                if vote.get("suggestionId") == suggestion_id and vote.get("userId") == user_id:
                    del db["votes"][index]
                    self.save(db)
                    return True
        return False

    # -------------------------- users --------------------------
    def get_user(self, discord_id: str) -> Optional[dict]:
        with self._lock:
            db = self.load()
        for user in db["users"]:
            if user.get("discordId") == discord_id:
                return user
        return None

    def create_user(self, user: Mapping[str, Any]) -> dict:
        record = dict(user)
        with self._lock:
            db = self.load()
            db["users"].append(record)
            self.save(db)
        return record

    def update_user(self, discord_id: str, updates: Mapping[str, Any]) -> Optional[dict]:
        with self._lock:
            db = self.load()
            for index, user in enumerate(db["users"]):
                if user.get("discordId") == discord_id:
                    db["users"][index] = {**user, **updates}
                    self.save(db)
                    return db["users"][index]
        return None
