"""
services/quote_service.py
-------------------------
Sends one quote to one subscriber and records it in their history.
Shared by the /quote command and the daily broadcast.
"""

from typing import Optional, Sequence

from config import MESSAGE_PARSE_MODE, RECENT_QUOTES_LIMIT
from models.quote import QuoteEntry
from models.user import User
from repositories.user_repo import UserRepository
from services.notifier import Notifier, format_quote, normalize_parse_mode
from services.quote_selector import select_quote
from services.quote_source import QuoteSource
from utils.errors import NotRegisteredError, StorageError
from utils.logger import get_logger

logger = get_logger(__name__)


class QuoteService:
    """
    Handles quote delivery for a single user.

    Responsibilities:
        - Pick a quote that avoids the user's recent history.
        - Send it through the Notifier.
        - Persist the updated history after a successful send only.
    """

    def __init__(
        self,
        notifier: Notifier,
        users: Optional[UserRepository] = None,
        source: Optional[QuoteSource] = None,
        parse_mode: str = MESSAGE_PARSE_MODE,
        history_limit: int = RECENT_QUOTES_LIMIT,
    ):
        self.notifier = notifier
        self.users = users or UserRepository()
        self.source = source or QuoteSource()
        # Fails at startup rather than on every send
        self.parse_mode = normalize_parse_mode(parse_mode)
        self.history_limit = history_limit

    async def send_quote(self, user_id: str, chat_id: str) -> QuoteEntry:
        """
        Deliver a quote on demand.

        Raises:
            NotRegisteredError: If the user has no subscription record.
            FetchError, StorageError, EmptyCatalogError, DeliveryError
        """
        user = self.users.get(user_id)
        if user is None:
            raise NotRegisteredError(user_id)
        catalog = await self.source.get_catalog()
        return await self.deliver(user, catalog, chat_id=chat_id)

    async def deliver(self, user: User, catalog: Sequence[QuoteEntry], chat_id: Optional[str] = None) -> QuoteEntry:
        """
        Select, send and record one quote for `user`.

        Once the message is out, a failure to save the history is logged
        and not raised: the user did get the quote.

        Args:
            chat_id: Target chat; defaults to the user's own id.

        Returns:
            The QuoteEntry that was sent.
        """
        entry = select_quote(catalog, user)
        await self.notifier.send(chat_id or user.id, format_quote(entry, self.parse_mode), self.parse_mode)
        logger.info(f"Quote {entry.identifier} sent to user {user}")

        user.remember(entry.identifier, self.history_limit)
        self._save_history(user)
        return entry

    def _save_history(self, user: User) -> None:
        try:
            # A /stop handled while the message was in flight must stay deleted
            if self.users.get(user.id) is None:
                logger.info(f"User {user} unsubscribed before their history was saved")
                return
            self.users.put(user)
        except StorageError as e:
            logger.error(f"Quote sent but history not saved for user {user}: {e}")
