"""
models/user.py
--------------
Domain model for a quote subscriber.
"""

import json
from dataclasses import dataclass, field

DEFAULT_RECENT_LIMIT = 10


@dataclass
class User:
    """
    A Telegram user subscribed to daily quotes.

    Attributes:
        id: Telegram sender ID as a string; also the chat used for delivery.
        name: Username, or first name when the user has no username.
        recent_quotes: Identifiers of the last quotes sent, oldest first.
    """
    id: str
    name: str
    recent_quotes: list[str] = field(default_factory=list)

    @property
    def key(self) -> str:
        return storage_key(self.id)

    def remember(self, quote_id: str, limit: int = DEFAULT_RECENT_LIMIT) -> None:
        """Append a sent quote and evict the oldest ones beyond `limit`."""
        self.recent_quotes.append(quote_id)
        if len(self.recent_quotes) > limit:
            del self.recent_quotes[: len(self.recent_quotes) - limit]

    def to_json(self) -> str:
        return json.dumps(
            {"id": self.id, "name": self.name, "recent_quotes": self.recent_quotes},
            ensure_ascii=False,
        )

    @classmethod
    def from_json(cls, raw: str) -> "User":
        """
        Parse a stored record.

        Raises:
            ValueError: If the payload is not a valid user record.
        """
        data = json.loads(raw)
        if not isinstance(data, dict) or "id" not in data:
            raise ValueError("user record must be an object with an 'id'")
        recent = data.get("recent_quotes") or []
        if not isinstance(recent, list):
            raise ValueError("'recent_quotes' must be a list")
        return cls(
            id=str(data["id"]),
            name=str(data.get("name", "")),
            recent_quotes=[str(q) for q in recent],
        )

    def __str__(self) -> str:
        return f"{self.id} ({self.name})"


USER_KEY_PREFIX = "user:"


def storage_key(user_id: str) -> str:
    """Key under which a user's record is stored."""
    return f"{USER_KEY_PREFIX}{user_id}"
