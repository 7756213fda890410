"""Tests for QuoteService."""

import pytest

from models.user import User
from services.quote_service import QuoteService
from utils.errors import DeliveryError, NotRegisteredError, StorageError


class TestQuoteService:
    """Tests for single-user delivery."""

    async def test_deliver_sends_and_records(self, quote_service, notifier, users, catalog):
        user = User(id="1", name="ann")
        users.put(user)

        entry = await quote_service.deliver(user, catalog)

        notifier.send.assert_awaited_once()
        chat_id, text, parse_mode = notifier.send.call_args.args
        assert chat_id == "1"
        assert entry.text in text
        assert parse_mode == "HTML"
        assert users.get("1").recent_quotes == [entry.identifier]

    async def test_deliver_to_explicit_chat(self, quote_service, notifier, catalog):
        await quote_service.deliver(User(id="1", name="ann"), catalog, chat_id="-100")
        assert notifier.send.call_args.args[0] == "-100"

    async def test_failed_send_leaves_history_untouched(self, quote_service, notifier, users, user_store, catalog):
        user = User(id="1", name="ann", recent_quotes=["q1"])
        users.put(user)
        user_store.writes.clear()
        notifier.send.side_effect = DeliveryError("1", "blocked")

        with pytest.raises(DeliveryError):
            await quote_service.deliver(user, catalog)

        assert user.recent_quotes == ["q1"]
        assert users.get("1").recent_quotes == ["q1"]
        assert user_store.writes == []

    async def test_history_is_bounded_and_most_recent(self, notifier, users, source, catalog_of):
        service = QuoteService(notifier, users=users, source=source, history_limit=10)
        catalog = catalog_of(25)
        user = User(id="1", name="ann")
        users.put(user)

        sent = []
        for _ in range(25):
            entry = await service.deliver(user, catalog)
            sent.append(entry.identifier)
            stored = users.get("1").recent_quotes
            assert len(stored) <= 10
            assert stored == sent[-10:]

    async def test_send_quote_requires_registration(self, quote_service, source):
        with pytest.raises(NotRegisteredError):
            await quote_service.send_quote("404", "404")
        source.get_catalog.assert_not_awaited()

    async def test_send_quote_loads_catalog(self, quote_service, users, source):
        users.put(User(id="1", name="ann"))
        entry = await quote_service.send_quote("1", "1")
        source.get_catalog.assert_awaited_once()
        assert users.get("1").recent_quotes == [entry.identifier]

    async def test_history_save_failure_after_send_is_not_raised(
        self, quote_service, notifier, users, user_store, catalog, monkeypatch
    ):
        user = User(id="1", name="ann")
        users.put(user)

        def broken_put(key, value, ttl_seconds=None):
            raise StorageError("write failed")

        monkeypatch.setattr(user_store, "put", broken_put)

        entry = await quote_service.deliver(user, catalog)

        notifier.send.assert_awaited_once()
        assert entry in catalog
        assert users.get("1").recent_quotes == []

    async def test_history_not_recreated_after_unsubscribe(self, quote_service, notifier, users, catalog):
        user = User(id="1", name="ann")
        users.put(user)

        async def send(chat_id, text, parse_mode=None):
            users.delete("1")

        notifier.send.side_effect = send

        await quote_service.deliver(user, catalog)

        assert users.get("1") is None

    def test_parse_mode_is_normalized(self, notifier, users, source):
        service = QuoteService(notifier, users=users, source=source, parse_mode="html")
        assert service.parse_mode == "HTML"

    def test_unknown_parse_mode_fails_at_construction(self, notifier, users, source):
        with pytest.raises(ValueError):
            QuoteService(notifier, users=users, source=source, parse_mode="BBCode")
