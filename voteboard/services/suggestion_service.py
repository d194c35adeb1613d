"""Suggestion use cases (submission, triage, removal)."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from voteboard.repositories.json_storage import JSONStore
from voteboard.services.errors import MissingFieldError, SuggestionNotFoundError

logger = logging.getLogger(__name__)

ANONYMOUS_ID = "anonymous"
ANONYMOUS_NAME = "Anonymous"


class SuggestionService:
    """Checks required fields and delegates persistence to the store."""

    def __init__(self, store: JSONStore) -> None:
        self.store = store

    def list(self) -> list[dict]:
        return self.store.list_suggestions()

    def get(self, suggestion_id: str) -> Optional[dict]:
        return self.store.get_suggestion(suggestion_id)

    def votes_for(self, suggestion_id: str) -> list[dict]:
        return self.store.list_votes(suggestion_id)

    def create(
        self,
        title: str | None,
        description: str | None,
        *,
        author_id: str | None = None,
        author_name: str | None = None,
    ) -> dict:
        title = (title or "").strip()
        description = (description or "").strip()
        if not title or not description:
            raise MissingFieldError("Title and description are required")
        suggestion = self.store.create_suggestion(
            {
                "title": title,
                "description": description,
                "authorId": author_id or ANONYMOUS_ID,
                "authorName": author_name or ANONYMOUS_NAME,
            }
        )
        logger.info("Suggestion %s created by %s", suggestion["id"], suggestion["authorId"])
        return suggestion

    def update(self, suggestion_id: str, changes: Mapping[str, Any]) -> dict:
        suggestion = self.store.update_suggestion(suggestion_id, changes)
        if suggestion is None:
            raise SuggestionNotFoundError(suggestion_id)
        logger.info("Suggestion %s updated: %s", suggestion_id, sorted(changes))
        return suggestion

    def delete(self, suggestion_id: str) -> None:
        if not self.store.delete_suggestion(suggestion_id):
            raise SuggestionNotFoundError(suggestion_id)
        # Votes are left in place; they remain visible through votes_for().
        logger.info("Suggestion %s deleted", suggestion_id)
