"""
config.py
---------
Central configuration module. Loads all environment variables
from the .env file and exposes them as typed constants.
"""

import os
from dotenv import load_dotenv

load_dotenv()


# ── Telegram ──────────────────────────────────────────────
TELEGRAM_BOT_TOKEN: str = os.getenv("TELEGRAM_BOT_TOKEN", "")

# 'HTML', 'Markdown' or 'MarkdownV2' (any case); used for quote messages only
MESSAGE_PARSE_MODE: str = os.getenv("MESSAGE_PARSE_MODE", "HTML")

# ── PostgreSQL ────────────────────────────────────────────
DB_HOST: str = os.getenv("DB_HOST", "localhost")
DB_PORT: int = int(os.getenv("DB_PORT", "5432"))
DB_NAME: str = os.getenv("DB_NAME", "book_quotes")
DB_USER: str = os.getenv("DB_USER", "book_quotes_user")
DB_PASS: str = os.getenv("DB_PASS", "")

DATABASE_URL: str = (
    f"postgresql://{DB_USER}:{DB_PASS}@{DB_HOST}:{DB_PORT}/{DB_NAME}"
)

# ── Quotes ────────────────────────────────────────────────
QUOTES_API_URL: str = os.getenv("QUOTES_API_URL", "https://chillyhill.me/api/book-quotes")
BLOG_BASE_URL: str = os.getenv("BLOG_BASE_URL", "https://chillyhill.me")
QUOTES_CACHE_KEY: str = os.getenv("QUOTES_CACHE_KEY", "daily_quotes")
QUOTES_CACHE_TTL_SECONDS: int = int(os.getenv("QUOTES_CACHE_TTL_SECONDS", "86400"))
HTTP_TIMEOUT_SECONDS: float = float(os.getenv("HTTP_TIMEOUT_SECONDS", "10"))
RECENT_QUOTES_LIMIT: int = int(os.getenv("RECENT_QUOTES_LIMIT", "10"))

# ── Schedule (UTC) ────────────────────────────────────────
DAILY_QUOTE_HOUR: int = int(os.getenv("DAILY_QUOTE_HOUR", "9"))
DAILY_QUOTE_MINUTE: int = int(os.getenv("DAILY_QUOTE_MINUTE", "0"))

# ── Transport ─────────────────────────────────────────────
BOT_MODE: str = os.getenv("BOT_MODE", "polling").lower()  # 'polling' | 'webhook'
WEBHOOK_URL: str = os.getenv("WEBHOOK_URL", "")
WEBHOOK_SECRET: str = os.getenv("WEBHOOK_SECRET", "")
API_HOST: str = os.getenv("API_HOST", "0.0.0.0")
API_PORT: int = int(os.getenv("API_PORT", "8000"))

# ── Security ──────────────────────────────────────────────
# Bearer token for /debug/send-quotes; the endpoint is closed when empty.
DEBUG_TOKEN: str = os.getenv("DEBUG_TOKEN", "")

# ── Logging ───────────────────────────────────────────────
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
