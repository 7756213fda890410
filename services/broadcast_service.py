"""
services/broadcast_service.py
-----------------------------
Daily fan-out of quotes to every subscriber.
"""

from dataclasses import dataclass
from typing import Optional

from repositories.user_repo import UserRepository
from services.quote_service import QuoteService
from services.quote_source import QuoteSource
from utils.errors import FetchError, StorageError
from utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class BroadcastResult:
    """Outcome of one broadcast run."""
    total: int = 0
    delivered: int = 0
    failed: int = 0
    skipped: int = 0
    aborted: bool = False

    def __str__(self) -> str:
        if self.aborted:
            return "aborted"
        return f"{self.delivered}/{self.total} delivered, {self.failed} failed, {self.skipped} skipped"


class BroadcastService:
    """
    Sends one quote to each subscriber.

    The catalog is loaded once per run; a failure for one subscriber is
    logged and does not stop the others.
    """

    def __init__(
        self,
        quotes: QuoteService,
        users: Optional[UserRepository] = None,
        source: Optional[QuoteSource] = None,
    ):
        self.quotes = quotes
        self.users = users or quotes.users
        self.source = source or quotes.source

    async def run_broadcast(self) -> BroadcastResult:
        """
        Run one broadcast. Never raises.

        Returns:
            BroadcastResult with per-run counts.
        """
        logger.info("Running scheduled quote sending...")
        try:
            subscribers = self.users.list_all()
        except StorageError as e:
            logger.error(f"Broadcast aborted, could not list subscribers: {e}")
            return BroadcastResult(aborted=True)

        if not subscribers:
            logger.info("No users registered for quotes")
            return BroadcastResult()

        try:
            catalog = await self.source.get_catalog()
        except (FetchError, StorageError) as e:
            logger.error(f"Broadcast aborted, failed to load quotes: {e}")
            return BroadcastResult(total=len(subscribers), aborted=True)

        result = BroadcastResult(total=len(subscribers))
        for listed in subscribers:
            try:
                # The record may have changed or been removed (/stop) since listing
                user = self.users.get(listed.id)
                if user is None:
                    result.skipped += 1
                    logger.info(f"User {listed} unsubscribed during the broadcast, skipping")
                    continue
                await self.quotes.deliver(user, catalog)
                result.delivered += 1
            except Exception as e:
                result.failed += 1
                logger.error(f"Failed to deliver daily quote to user {listed} ({type(e).__name__}): {e}")

        logger.info(f"Finished sending daily quotes: {result}")
        return result
