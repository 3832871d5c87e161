"""Tests for the action dispatchers."""

import json

import httpx
import pytest
import respx

from random_items.core.dispatcher import DispatchError, LogDispatcher, WebhookDispatcher

WEBHOOK_URL = "https://mock-host.test/items"


def test_log_dispatcher_records_and_logs(caplog):
    caplog.set_level("INFO")
    dispatcher = LogDispatcher()
    dispatcher.dispatch("Coin", "id-1", True)
    dispatcher.dispatch("Duck", "id-2", False)
    assert dispatcher.dispatched == [("Coin", "id-1", True), ("Duck", "id-2", False)]
    assert "Spawning in world: Coin" in caplog.text
    assert "Adding to inventory: Duck id-2" in caplog.text


def test_log_dispatcher_without_subject():
    dispatcher = LogDispatcher(has_subject=lambda: False)
    with pytest.raises(DispatchError, match="No active subject"):
        dispatcher.dispatch("Coin", "id-1", True)
    assert dispatcher.dispatched == []


def test_webhook_posts_payload():
    with respx.mock:
        route = respx.post(WEBHOOK_URL).mock(return_value=httpx.Response(204))
        dispatcher = WebhookDispatcher(WEBHOOK_URL, api_key="secret")
        dispatcher.dispatch("Coin", "id-1", False)
        dispatcher.close()

    assert route.called
    request = route.calls.last.request
    assert json.loads(request.content) == {
        "title": "Coin",
        "repository_id": "id-1",
        "mode": "inventory",
    }
    assert request.headers["Authorization"] == "Bearer secret"


def test_webhook_conflict_means_no_subject():
    with respx.mock:
        respx.post(WEBHOOK_URL).mock(return_value=httpx.Response(409, text="no player"))
        dispatcher = WebhookDispatcher(WEBHOOK_URL)
        with pytest.raises(DispatchError, match="No active subject"):
            dispatcher.dispatch("Coin", "id-1", True)


def test_webhook_server_error():
    with respx.mock:
        respx.post(WEBHOOK_URL).mock(return_value=httpx.Response(500, text="Internal Server Error"))
        dispatcher = WebhookDispatcher(WEBHOOK_URL)
        with pytest.raises(DispatchError, match="500"):
            dispatcher.dispatch("Coin", "id-1", True)


def test_webhook_transport_error():
    with respx.mock:
        respx.post(WEBHOOK_URL).mock(side_effect=httpx.ConnectError("refused"))
        dispatcher = WebhookDispatcher(WEBHOOK_URL)
        with pytest.raises(DispatchError, match="failed"):
            dispatcher.dispatch("Coin", "id-1", True)
