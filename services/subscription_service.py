"""
services/subscription_service.py
--------------------------------
Business logic behind the bot commands: subscribe, unsubscribe,
on-demand quote, and help.

Every public method replies to the user and never raises; failures
are logged and answered with an apology.
"""

from typing import Optional

from models.message import InboundMessage
from models.user import User
from repositories.user_repo import UserRepository
from services.notifier import Notifier
from services.quote_service import QuoteService
from utils.errors import DeliveryError, FetchError, NotRegisteredError
from utils.logger import get_logger

logger = get_logger(__name__)

HELP_TEXT = (
    "I'm a book quotes bot. Available commands:\n"
    "/start - Subscribe to daily quotes\n"
    "/stop - Unsubscribe from quotes\n"
    "/quote - Get a quote immediately"
)
NOT_REGISTERED_TEXT = "You're not registered. Please send /start to register for quotes."
FETCH_FAILED_TEXT = "We were not able to retrieve quotes right now. Please try again later."
QUOTE_FAILED_TEXT = "Sorry, something went wrong while trying to send you a quote."
GENERIC_FAILURE_TEXT = "Sorry, something went wrong. Please try again later."
UNSUBSCRIBED_TEXT = "You've been unsubscribed from daily book quotes. We hope you enjoyed the service!"


class SubscriptionService:
    """Implements the reply for each inbound command."""

    def __init__(
        self,
        notifier: Notifier,
        quotes: QuoteService,
        users: Optional[UserRepository] = None,
    ):
        self.notifier = notifier
        self.quotes = quotes
        self.users = users or quotes.users

    async def register(self, message: InboundMessage) -> None:
        """/start: create the subscriber if unknown, then greet."""
        name = message.display_name
        try:
            if self.users.get(message.sender_id) is None:
                self.users.put(User(id=message.sender_id, name=name))
                logger.info(f"User {message.sender_id} ({name}) subscribed")
                reply = (
                    f"Welcome, {name}! You've been registered to receive daily book quotes. "
                    f"You'll receive your first quote soon."
                )
            else:
                reply = f"Hello again, {name}! You're already registered to receive daily book quotes."
            await self.notifier.send(message.chat_id, reply)
        except Exception as e:
            logger.error(f"/start failed for user {message.sender_id}: {e}")
            await self._reply_safely(message.chat_id, GENERIC_FAILURE_TEXT)

    async def unregister(self, message: InboundMessage) -> None:
        """/stop: delete the subscriber (idempotent) and confirm."""
        try:
            self.users.delete(message.sender_id)
            logger.info(f"User {message.sender_id} ({message.display_name}) removed from subscribers")
            await self.notifier.send(message.chat_id, UNSUBSCRIBED_TEXT)
        except Exception as e:
            logger.error(f"/stop failed for user {message.sender_id}: {e}")
            await self._reply_safely(message.chat_id, GENERIC_FAILURE_TEXT)

    async def send_quote(self, message: InboundMessage) -> None:
        """/quote: deliver a quote right away."""
        try:
            await self.quotes.send_quote(message.sender_id, message.chat_id)
        except NotRegisteredError:
            logger.info(f"/quote from unregistered user {message.sender_id}")
            await self._reply_safely(message.chat_id, NOT_REGISTERED_TEXT)
        except FetchError as e:
            logger.error(f"/quote for user {message.sender_id}: catalog fetch failed: {e}")
            await self._reply_safely(message.chat_id, FETCH_FAILED_TEXT)
        except Exception as e:
            logger.error(f"/quote failed for user {message.sender_id} ({type(e).__name__}): {e}")
            await self._reply_safely(message.chat_id, QUOTE_FAILED_TEXT)

    async def send_help(self, message: InboundMessage) -> None:
        """Any other message: list the commands."""
        await self._reply_safely(message.chat_id, HELP_TEXT)

    async def _reply_safely(self, chat_id: str, text: str) -> None:
        try:
            await self.notifier.send(chat_id, text)
        except DeliveryError as e:
            logger.error(f"Could not reply to chat {chat_id}: {e}")
