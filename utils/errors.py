"""
utils/errors.py
---------------
Exception types shared by all layers of the bot.
"""

from typing import Optional


class QuoteBotError(Exception):
    """Base class for all bot errors."""


class FetchError(QuoteBotError):
    """The quote catalog could not be retrieved from the content API."""

    def __init__(self, message: str, status_code: Optional[int] = None, body: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class EmptyCatalogError(QuoteBotError):
    """A quote was requested from an empty catalog."""


class DeliveryError(QuoteBotError):
    """Telegram refused or failed to deliver a message."""

    def __init__(self, chat_id: str, payload: str):
        super().__init__(f"Failed to send message to {chat_id}: {payload}")
        self.chat_id = chat_id
        self.payload = payload


class StorageError(QuoteBotError):
    """A durable-store operation failed or returned unreadable data."""


class NotRegisteredError(QuoteBotError):
    """The command needs a subscriber record that does not exist."""

    def __init__(self, user_id: str):
        super().__init__(f"User {user_id} is not registered")
        self.user_id = user_id
