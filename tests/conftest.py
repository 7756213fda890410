"""Pytest configuration and fixtures."""

from typing import Iterator, Optional
from unittest.mock import AsyncMock, Mock

import pytest

from models.quote import QuoteEntry
from repositories.user_repo import UserRepository
from services.broadcast_service import BroadcastService
from services.quote_service import QuoteService
from services.subscription_service import SubscriptionService


class InMemoryKeyValueStore:
    """KeyValueStore kept in a dict; records every write for assertions."""

    def __init__(self):
        self.data: dict[str, str] = {}
        self.ttls: dict[str, Optional[int]] = {}
        self.writes: list[str] = []

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def put(self, key: str, value: str, ttl_seconds: Optional[int] = None) -> None:
        self.data[key] = value
        self.ttls[key] = ttl_seconds
        self.writes.append(key)

    def delete(self, key: str) -> None:
        self.data.pop(key, None)

    def list_keys(self, prefix: str, page_size: int = 1000) -> Iterator[str]:
        return iter(sorted(k for k in self.data if k.startswith(prefix)))


def make_catalog(size: int) -> list[QuoteEntry]:
    return [
        QuoteEntry(identifier=f"q{i}", text=f"Quote number {i}", title=f"Book {i}", link=f"/posts/{i}")
        for i in range(1, size + 1)
    ]


@pytest.fixture
def user_store():
    return InMemoryKeyValueStore()


@pytest.fixture
def cache_store():
    return InMemoryKeyValueStore()


@pytest.fixture
def users(user_store):
    return UserRepository(user_store)


@pytest.fixture
def catalog():
    return make_catalog(3)


@pytest.fixture
def notifier():
    """Notifier whose sends always succeed."""
    mock = Mock()
    mock.send = AsyncMock(return_value=None)
    return mock


@pytest.fixture
def source(catalog):
    """QuoteSource returning the `catalog` fixture."""
    mock = Mock()
    mock.get_catalog = AsyncMock(return_value=catalog)
    return mock


@pytest.fixture
def quote_service(notifier, users, source):
    return QuoteService(notifier, users=users, source=source, parse_mode="HTML", history_limit=10)


@pytest.fixture
def subscription_service(notifier, quote_service, users):
    return SubscriptionService(notifier, quote_service, users=users)


@pytest.fixture
def broadcast_service(quote_service, users, source):
    return BroadcastService(quote_service, users=users, source=source)


@pytest.fixture
def catalog_of():
    """Factory for catalogs of a given size."""
    return make_catalog
