"""
services/quote_source.py
------------------------
Retrieves the quote catalog from the content API, cached as a whole
in the `quotes_cache` namespace for a fixed time-to-live.
"""

import json
from typing import Optional

import httpx

from config import HTTP_TIMEOUT_SECONDS, QUOTES_API_URL, QUOTES_CACHE_KEY, QUOTES_CACHE_TTL_SECONDS
from db.init_db import QUOTES_CACHE_TABLE
from db.kv_store import KeyValueStore, PostgresKeyValueStore
from models.quote import QuoteEntry, parse_catalog
from utils.errors import FetchError, StorageError
from utils.logger import get_logger

logger = get_logger(__name__)

_BODY_PREVIEW = 200


class QuoteSource:
    """
    Read-through cache in front of the quotes API.

    The cache is either absent or holds a complete catalog that was
    returned by an earlier successful fetch.
    """

    def __init__(
        self,
        cache: Optional[KeyValueStore] = None,
        api_url: str = QUOTES_API_URL,
        cache_key: str = QUOTES_CACHE_KEY,
        ttl_seconds: int = QUOTES_CACHE_TTL_SECONDS,
        timeout: float = HTTP_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.cache = cache or PostgresKeyValueStore(QUOTES_CACHE_TABLE)
        self.api_url = api_url
        self.cache_key = cache_key
        self.ttl_seconds = ttl_seconds
        self.timeout = timeout
        self._transport = transport

    async def get_catalog(self) -> list[QuoteEntry]:
        """
        Return the catalog, from cache when possible.

        Raises:
            FetchError: Cache miss and the API call failed.
            StorageError: The cache is unreachable or holds unreadable data.
        """
        cached = self.cache.get(self.cache_key)
        if cached is not None:
            try:
                return parse_catalog(json.loads(cached))
            except ValueError as e:
                raise StorageError(f"Cached catalog at '{self.cache_key}' is unreadable: {e}") from e

        catalog = await self._fetch()
        self.cache.put(
            self.cache_key,
            json.dumps([entry.to_dict() for entry in catalog], ensure_ascii=False),
            ttl_seconds=self.ttl_seconds,
        )
        logger.info(f"Cached {len(catalog)} quotes for {self.ttl_seconds}s")
        return catalog

    async def _fetch(self) -> list[QuoteEntry]:
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.get(self.api_url)
        except httpx.HTTPError as e:
            logger.error(f"Quotes API request failed: {e}")
            raise FetchError(f"Quotes API request failed: {e}") from e

        if not response.is_success:
            body = response.text[:_BODY_PREVIEW]
            logger.error(f"Quotes API returned {response.status_code}: {body}")
            raise FetchError(
                f"Quotes API returned {response.status_code}",
                status_code=response.status_code,
                body=body,
            )

        try:
            catalog = parse_catalog(response.json())
        except ValueError as e:
            logger.error(f"Quotes API returned a malformed catalog: {e}")
            raise FetchError(f"Malformed catalog: {e}", status_code=response.status_code) from e

        if not catalog:
            raise FetchError("Quotes API returned an empty catalog", status_code=response.status_code)
        return catalog
