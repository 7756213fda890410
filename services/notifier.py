"""
services/notifier.py
--------------------
Outbound Telegram messages and quote formatting.
"""

import html
from typing import Optional

from telegram import Bot, LinkPreviewOptions
from telegram.constants import ParseMode
from telegram.error import TelegramError
from telegram.helpers import escape_markdown

from config import BLOG_BASE_URL
from models.quote import QuoteEntry
from utils.errors import DeliveryError
from utils.logger import get_logger

logger = get_logger(__name__)


_QUOTE_PARSE_MODES = {
    "html": ParseMode.HTML,
    "markdown": ParseMode.MARKDOWN,
    "markdownv2": ParseMode.MARKDOWN_V2,
}


def normalize_parse_mode(value: str) -> ParseMode:
    """
    Map a configured markup name (any case) to a Telegram ParseMode.

    Raises:
        ValueError: If the dialect cannot render quotes with links.
    """
    try:
        return _QUOTE_PARSE_MODES[str(value).strip().lower()]
    except KeyError:
        raise ValueError(
            f"Unsupported parse mode for quotes: {value!r} (use HTML, Markdown or MarkdownV2)"
        ) from None


def format_quote(entry: QuoteEntry, parse_mode: str = ParseMode.HTML, base_url: str = BLOG_BASE_URL) -> str:
    """
    Render a quote in bold followed by a link to its post.

    Args:
        parse_mode: HTML, Markdown or MarkdownV2, in any case.
    """
    mode = normalize_parse_mode(parse_mode)
    url = f"{base_url}{entry.link}"
    if mode == ParseMode.MARKDOWN_V2:
        return (
            f"*{escape_markdown(entry.text, version=2)}*\n\n"
            f"[{escape_markdown(entry.title, version=2)}]"
            f"({escape_markdown(url, version=2, entity_type='text_link')})"
        )
    if mode == ParseMode.MARKDOWN:
        return f"*{escape_markdown(entry.text)}*\n\n[{escape_markdown(entry.title)}]({url})"
    return (
        f"<b>{html.escape(entry.text)}</b>\n\n"
        f'<a href="{html.escape(url, quote=True)}">{html.escape(entry.title)}</a>'
    )


class Notifier:
    """Sends one message to one chat per call, without retries."""

    def __init__(self, bot: Bot):
        self.bot = bot

    async def send(self, chat_id: str, text: str, parse_mode: Optional[str] = None) -> None:
        """
        Send `text` to `chat_id`.

        Args:
            parse_mode: Telegram markup dialect, or None for plain text.

        Raises:
            DeliveryError: If Telegram rejects the message or is unreachable.
        """
        try:
            await self.bot.send_message(
                chat_id=chat_id,
                text=text,
                parse_mode=parse_mode,
                link_preview_options=LinkPreviewOptions(is_disabled=True),
            )
        except TelegramError as e:
            logger.error(f"Failed to send message to {chat_id}: {e.message}")
            raise DeliveryError(chat_id, e.message) from e
        logger.debug(f"Message delivered to {chat_id}")
