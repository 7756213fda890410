"""Tests for the webhook HTTP API."""

from unittest.mock import AsyncMock, Mock

import pytest
from fastapi.testclient import TestClient
from telegram import Update

from api import create_api_app
from services.broadcast_service import BroadcastResult


@pytest.fixture
def application():
    app = Mock()
    app.update_queue.put = AsyncMock()
    return app


@pytest.fixture
def broadcast():
    mock = Mock()
    mock.run_broadcast = AsyncMock(return_value=BroadcastResult(total=3, delivered=2, failed=1))
    return mock


@pytest.fixture
def client(application, broadcast):
    # No `with` block: the lifespan (which starts the real bot) does not run
    api = create_api_app(
        application,
        broadcast,
        webhook_url="",
        webhook_secret="s3cret",
        debug_token="debug-token",
    )
    return TestClient(api)


class TestBasicRoutes:
    """Tests for health and banner routes."""

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.text == "OK"

    def test_index(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert "running" in response.text


class TestDebugBroadcast:
    """Tests for GET /debug/send-quotes."""

    def test_requires_token(self, client, broadcast):
        assert client.get("/debug/send-quotes").status_code == 401
        broadcast.run_broadcast.assert_not_awaited()

    def test_rejects_wrong_token(self, client, broadcast):
        response = client.get("/debug/send-quotes", headers={"Authorization": "Bearer nope"})
        assert response.status_code == 401
        broadcast.run_broadcast.assert_not_awaited()

    def test_runs_broadcast(self, client, broadcast):
        response = client.get("/debug/send-quotes", headers={"Authorization": "Bearer debug-token"})

        assert response.status_code == 200
        assert response.json() == {
            "status": "completed", "total": 3, "delivered": 2, "failed": 1, "skipped": 0, "aborted": False,
        }
        broadcast.run_broadcast.assert_awaited_once()

    def test_reports_aborted_run(self, client, broadcast):
        broadcast.run_broadcast.return_value = BroadcastResult(aborted=True)
        response = client.get("/debug/send-quotes", headers={"Authorization": "Bearer debug-token"})
        assert response.json()["status"] == "aborted"


class TestWebhook:
    """Tests for POST /webhook."""

    def test_rejects_bad_secret(self, client, application):
        response = client.post(
            "/webhook",
            json={"update_id": 1},
            headers={"X-Telegram-Bot-Api-Secret-Token": "wrong"},
        )
        assert response.status_code == 403
        application.update_queue.put.assert_not_awaited()

    def test_queues_update(self, client, application, monkeypatch):
        update = Mock()
        de_json = Mock(return_value=update)
        monkeypatch.setattr(Update, "de_json", de_json)

        response = client.post(
            "/webhook",
            json={"update_id": 1, "message": {"text": "/quote"}},
            headers={"X-Telegram-Bot-Api-Secret-Token": "s3cret"},
        )

        assert response.status_code == 200
        assert de_json.call_args.args[0]["update_id"] == 1
        application.update_queue.put.assert_awaited_once_with(update)

    def test_acknowledges_update_without_message(self, client, application, monkeypatch):
        update = Mock()
        update.effective_message = None
        monkeypatch.setattr(Update, "de_json", Mock(return_value=update))

        response = client.post(
            "/webhook",
            json={"update_id": 2},
            headers={"X-Telegram-Bot-Api-Secret-Token": "s3cret"},
        )

        assert response.status_code == 200
        application.update_queue.put.assert_not_awaited()
