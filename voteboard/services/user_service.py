"""
User lookups and the development-mode mock login.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import Request

from voteboard.repositories.json_storage import JSONStore
from voteboard.services.session_service import current_discord_id

logger = logging.getLogger(__name__)

# Role ids handed to the mock user; they only matter outside dev mode.
MOCK_ROLES = ["111111111111111111", "222222222222222222", "123456789012345678"]

MOCK_USER = {
    "id": "dev_user_123",
    "discordId": "dev_user_123",
    "username": "DevUser",
    "discriminator": "0001",
    "avatar": None,
    "email": "dev@example.com",
    "roles": MOCK_ROLES,
}


class UserService:
    def __init__(self, store: JSONStore) -> None:
        self.store = store

    def get(self, discord_id: str) -> Optional[dict]:
        return self.store.get_user(discord_id)

    def upsert(self, profile: dict) -> dict:
        """Create the user on first sight, otherwise overwrite the stored profile."""
        discord_id = profile["discordId"]
        with self.store.transaction():
            if self.store.get_user(discord_id) is None:
                logger.info("Registering user %s", discord_id)
                return self.store.create_user(profile)
            return self.store.update_user(discord_id, profile)

    def login_mock_user(self) -> dict:
        return self.upsert(dict(MOCK_USER, roles=list(MOCK_ROLES)))

    def current_user(self, request: Request) -> Optional[dict]:
        discord_id = current_discord_id(request)
        if not discord_id:
            return None
        return self.store.get_user(discord_id)
