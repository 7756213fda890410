"""
repositories/user_repo.py
--------------------------
Data access layer for subscriber records.
Records live in the `user_storage` namespace under `user:<id>`.
"""

from typing import Optional

from db.kv_store import KeyValueStore, PostgresKeyValueStore
from db.init_db import USER_STORAGE_TABLE
from models.user import USER_KEY_PREFIX, User, storage_key
from utils.errors import StorageError
from utils.logger import get_logger

logger = get_logger(__name__)


class UserRepository:
    """Repository for CRUD operations on subscriber records."""

    def __init__(self, store: Optional[KeyValueStore] = None):
        self.store = store or PostgresKeyValueStore(USER_STORAGE_TABLE)

    def get(self, user_id: str) -> Optional[User]:
        """
        Fetch a subscriber by Telegram ID.

        Returns:
            User or None.

        Raises:
            StorageError: If the store fails or the record is unreadable.
        """
        return self._load(storage_key(user_id))

    def put(self, user: User) -> None:
        """Create or overwrite a subscriber record."""
        self.store.put(user.key, user.to_json())

    def delete(self, user_id: str) -> None:
        """Remove a subscriber. Removing an unknown user is a no-op."""
        self.store.delete(storage_key(user_id))

    def list_all(self) -> list[User]:
        """
        Load every subscriber.

        A record that cannot be read is logged and skipped so one bad
        row never hides the rest of the subscriber list.

        Raises:
            StorageError: If the key listing itself fails.
        """
        users = []
        for key in self.store.list_keys(USER_KEY_PREFIX):
            try:
                user = self._load(key)
            except StorageError as e:
                logger.error(f"Skipping subscriber {key}: {e}")
                continue
            if user is None:
                logger.warning(f"Subscriber {key} disappeared while listing")
                continue
            users.append(user)
        return users

    # ── HELPERS ───────────────────────────────────────────

    def _load(self, key: str) -> Optional[User]:
        raw = self.store.get(key)
        if raw is None:
            return None
        try:
            return User.from_json(raw)
        except ValueError as e:
            raise StorageError(f"Corrupt user record at {key}: {e}") from e
