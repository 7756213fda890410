"""FastAPI application serving the Telegram webhook."""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Header, HTTPException, Request
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel
from telegram import Update
from telegram.ext import Application

from config import DEBUG_TOKEN, WEBHOOK_SECRET, WEBHOOK_URL
from security.auth import is_debug_authorized
from services.broadcast_service import BroadcastService
from utils.logger import get_logger

logger = get_logger(__name__)

WEBHOOK_PATH = "/webhook"


class BroadcastResponse(BaseModel):
    """Response model for a manual broadcast."""

    status: str
    total: int
    delivered: int
    failed: int
    skipped: int
    aborted: bool


def create_api_app(
    application: Application,
    broadcast: BroadcastService,
    webhook_url: str = WEBHOOK_URL,
    webhook_secret: str = WEBHOOK_SECRET,
    debug_token: str = DEBUG_TOKEN,
) -> FastAPI:
    """Create the FastAPI app wrapping a telegram Application."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        async with application:
            # run_polling/run_webhook normally call post_init
            if application.post_init:
                await application.post_init(application)
            if webhook_url:
                await application.bot.set_webhook(
                    url=f"{webhook_url.rstrip('/')}{WEBHOOK_PATH}",
                    secret_token=webhook_secret or None,
                    allowed_updates=["message"],
                )
                logger.info(f"Webhook registered at {webhook_url}")
            await application.start()
            yield
            await application.stop()

    api = FastAPI(title="Book Quotes Bot", version="0.1.0", lifespan=lifespan)

    @api.post(WEBHOOK_PATH)
    async def telegram_webhook(
        request: Request,
        x_telegram_bot_api_secret_token: Optional[str] = Header(default=None),
    ) -> PlainTextResponse:
        """Queue the update for the bot's handlers and acknowledge at once."""
        if webhook_secret and x_telegram_bot_api_secret_token != webhook_secret:
            raise HTTPException(status_code=403, detail="Invalid secret token")
        data = await request.json()
        update = Update.de_json(data, application.bot)
        if update is None or update.effective_message is None:
            return PlainTextResponse("No message in the update")
        await application.update_queue.put(update)
        return PlainTextResponse("OK")

    @api.get("/debug/send-quotes", response_model=BroadcastResponse)
    async def send_quotes_now(authorization: Optional[str] = Header(default=None)) -> dict:
        """Run the daily broadcast synchronously."""
        if not is_debug_authorized(authorization, debug_token):
            raise HTTPException(status_code=401, detail="Unauthorized")
        result = await broadcast.run_broadcast()
        return {
            "status": "aborted" if result.aborted else "completed",
            "total": result.total,
            "delivered": result.delivered,
            "failed": result.failed,
            "skipped": result.skipped,
            "aborted": result.aborted,
        }

    @api.get("/health", response_class=PlainTextResponse)
    async def health() -> str:
        return "OK"

    @api.get("/", response_class=PlainTextResponse)
    async def index() -> str:
        return "Book Quotes Bot is running!"

    return api
