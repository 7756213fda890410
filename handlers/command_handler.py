"""
handlers/command_handler.py
---------------------------
Handles /start, /stop, /quote and every other message.
"""

from typing import Optional

from telegram import Update
from telegram.ext import ContextTypes

from models.message import InboundMessage
from services.subscription_service import SubscriptionService
from utils.logger import get_logger

logger = get_logger(__name__)

SERVICE_KEY = "subscription_service"


def to_inbound(update: Update) -> Optional[InboundMessage]:
    """Extract sender, chat, text and display name from an update."""
    user = update.effective_user
    chat = update.effective_chat
    message = update.effective_message
    if user is None or chat is None or message is None:
        return None
    return InboundMessage(
        sender_id=str(user.id),
        chat_id=str(chat.id),
        text=message.text or "",
        display_name=user.username or user.first_name,
    )


def _service(context: ContextTypes.DEFAULT_TYPE) -> SubscriptionService:
    return context.bot_data[SERVICE_KEY]


async def start_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /start command - subscribe the user."""
    message = to_inbound(update)
    if message:
        await _service(context).register(message)


async def stop_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /stop command - unsubscribe the user."""
    message = to_inbound(update)
    if message:
        await _service(context).unregister(message)


async def quote_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /quote command - send a quote right away."""
    message = to_inbound(update)
    if message:
        await _service(context).send_quote(message)


async def fallback_message(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Any other message gets the list of commands."""
    message = to_inbound(update)
    if message:
        await _service(context).send_help(message)


async def error_handler(update: object, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Log exceptions that escaped a handler."""
    logger.error(f"Unhandled error while processing update {update}: {context.error}")
