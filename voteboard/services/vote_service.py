"""Vote toggling on top of the store's add/remove primitives."""

from __future__ import annotations

import logging
from typing import Optional

from voteboard.domain.suggestions import DEFAULT_VOTE_VALUE
from voteboard.repositories.json_storage import JSONStore
from voteboard.services.errors import MissingFieldError

logger = logging.getLogger(__name__)

VOTE_ADDED = "added"
VOTE_REMOVED = "removed"


class VoteService:
    def __init__(self, store: JSONStore) -> None:
        self.store = store

    def toggle_vote(self, suggestion_id: str, user_id: str | None, vote_value: Optional[int] = None) -> str:
        """Add the user's vote, or remove it if one already exists.

        A second call removes the earlier vote whatever ``vote_value`` is;
        it never replaces the stored value.
        """
        if not user_id:
            raise MissingFieldError("User ID is required")
        with self.store.transaction():
            if self.store.has_voted(suggestion_id, user_id):
                self.store.remove_vote(suggestion_id, user_id)
                logger.debug("Vote by %s removed from %s", user_id, suggestion_id)
                return VOTE_REMOVED
            self.store.add_vote(suggestion_id, user_id, vote_value or DEFAULT_VOTE_VALUE)
        logger.debug("Vote by %s added to %s", user_id, suggestion_id)
        return VOTE_ADDED
