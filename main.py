"""
main.py
-------
Entry point for the Book Quotes Telegram bot.

Responsibilities:
    - Initialize the database connection pool and schema.
    - Configure the Telegram bot with all handlers.
    - Schedule the daily quote broadcast.
    - Run in polling mode, or behind the FastAPI webhook server.
"""

from datetime import time as dt_time, timezone

import uvicorn
from telegram import BotCommand
from telegram.ext import (
    Application,
    CommandHandler,
    ContextTypes,
    MessageHandler,
    filters,
)

from api import create_api_app
from config import (
    API_HOST,
    API_PORT,
    BOT_MODE,
    DAILY_QUOTE_HOUR,
    DAILY_QUOTE_MINUTE,
    TELEGRAM_BOT_TOKEN,
)
from db.connection import close_pool, init_pool
from db.init_db import create_tables
from handlers.command_handler import (
    SERVICE_KEY,
    error_handler,
    fallback_message,
    quote_command,
    start_command,
    stop_command,
)
from services.broadcast_service import BroadcastService
from services.notifier import Notifier
from services.quote_service import QuoteService
from services.subscription_service import SubscriptionService
from utils.logger import get_logger

logger = get_logger(__name__)

BROADCAST_KEY = "broadcast_service"


async def send_daily_quotes(context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Scheduled job: send one quote to every subscriber.
    The job queue runs it as a background task.
    """
    broadcast: BroadcastService = context.bot_data[BROADCAST_KEY]
    await broadcast.run_broadcast()


async def set_bot_commands(application: Application) -> None:
    """Register bot commands menu in Telegram on startup."""
    commands = [
        BotCommand("start", "Subscribe to daily quotes"),
        BotCommand("stop", "Unsubscribe from quotes"),
        BotCommand("quote", "Get a quote immediately"),
    ]
    await application.bot.set_my_commands(commands)
    logger.info("Bot commands menu registered successfully.")


def build_application(webhook: bool = False) -> Application:
    """Build the Telegram application with services, handlers and jobs."""
    builder = Application.builder().token(TELEGRAM_BOT_TOKEN).post_init(set_bot_commands)
    if webhook:
        # Updates arrive through the FastAPI app instead of getUpdates
        builder = builder.updater(None)
    app = builder.build()

    # ── Services ──────────────────────────────────────────
    notifier = Notifier(app.bot)
    quotes = QuoteService(notifier)
    app.bot_data[SERVICE_KEY] = SubscriptionService(notifier, quotes)
    app.bot_data[BROADCAST_KEY] = BroadcastService(quotes)

    # ── Handlers ──────────────────────────────────────────
    app.add_handler(CommandHandler("start", start_command))
    app.add_handler(CommandHandler("stop", stop_command))
    app.add_handler(CommandHandler("quote", quote_command))
    app.add_handler(MessageHandler(filters.ALL, fallback_message))
    app.add_error_handler(error_handler)

    # ── Daily broadcast ───────────────────────────────────
    job_queue = app.job_queue
    if job_queue:
        job_queue.run_daily(
            send_daily_quotes,
            time=dt_time(hour=DAILY_QUOTE_HOUR, minute=DAILY_QUOTE_MINUTE, tzinfo=timezone.utc),
            name="daily_quotes",
        )
        logger.info(f"Scheduled daily quotes at {DAILY_QUOTE_HOUR:02d}:{DAILY_QUOTE_MINUTE:02d} UTC")
    else:
        logger.warning("JobQueue unavailable; install python-telegram-bot[job-queue] for daily quotes")

    return app


def main() -> None:
    """Initialize and run the bot."""

    # ── 1. Database setup ─────────────────────────────────
    logger.info("Initializing database...")
    init_pool()
    create_tables()

    try:
        if BOT_MODE == "webhook":
            # ── 2a. Webhook server ────────────────────────
            app = build_application(webhook=True)
            api = create_api_app(app, app.bot_data[BROADCAST_KEY])
            logger.info(f"Book Quotes Bot serving webhook on {API_HOST}:{API_PORT}")
            uvicorn.run(api, host=API_HOST, port=API_PORT, log_level="info")
        else:
            # ── 2b. Long polling ──────────────────────────
            app = build_application()
            logger.info("Book Quotes Bot is running! Press Ctrl+C to stop.")
            app.run_polling(drop_pending_updates=True, allowed_updates=["message"])
    finally:
        # ── 3. Cleanup on shutdown ────────────────────────
        close_pool()
        logger.info("Book Quotes Bot stopped.")


if __name__ == "__main__":
    main()
