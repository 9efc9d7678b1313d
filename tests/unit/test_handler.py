"""Tests for the event handler."""

import pytest
from conftest import make_services

import handler
from trip_concierge.orchestration.nodes import GREETING
from trip_concierge.services import SessionService


@pytest.fixture(autouse=True)
def session_service():
    service = SessionService(make_services())
    handler.set_service(service)
    yield service
    handler.set_service(None)


def test_route_chat():
    action, params = handler.route_event({"sessionId": "abc", "message": "Hello"})

    assert action == "chat"
    assert params["session_id"] == "abc"
    assert params["message"] == "Hello"
    assert params["format"] == "json"


def test_route_accepts_snake_case_session_id():
    action, params = handler.route_event({"action": "state", "session_id": "abc"})

    assert action == "state"
    assert params["session_id"] == "abc"


async def test_chat():
    response = await handler.async_handler({"sessionId": "abc", "message": "Dallas"})

    assert response["status"] == "ok"
    assert response["sessionId"] == "abc"
    assert response["isSearching"] is False
    assert "traveling from Dallas" in response["reply"]


async def test_chat_without_session_id():
    response = await handler.async_handler({"message": "Dallas"})

    assert response["status"] == "ok"
    assert response["sessionId"]


async def test_reset(session_service):
    await handler.async_handler({"sessionId": "abc", "message": "Dallas"})

    response = await handler.async_handler({"action": "reset", "sessionId": "abc"})

    assert response == {"status": "ok", "reply": GREETING, "sessionId": "abc"}
    assert session_service.snapshot("abc")["origin_city"] is None


async def test_reset_requires_session_id():
    response = await handler.async_handler({"action": "reset"})

    assert response["status"] == "error"
    assert "sessionId" in response["error"]


async def test_state():
    await handler.async_handler({"sessionId": "abc", "message": "Dallas"})

    response = await handler.async_handler({"action": "state", "sessionId": "abc"})

    assert response["status"] == "ok"
    assert response["state"]["origin_city"] == "Dallas"


async def test_state_unknown_session():
    response = await handler.async_handler({"action": "state", "sessionId": "nope"})

    assert response == {"status": "error", "error": "Unknown session"}


async def test_graph_json():
    response = await handler.async_handler({"action": "graph"})

    assert response["status"] == "ok"
    assert "ask_origin" in response["graph"]["nodes"]
    assert response["graph"]["edges"]


async def test_graph_mermaid():
    response = await handler.async_handler({"action": "graph", "format": "mermaid"})

    assert "ask_origin" in response["mermaid"]


async def test_unknown_action():
    response = await handler.async_handler({"action": "book_flight"})

    assert response == {"status": "error", "error": "Unknown action: book_flight"}


async def test_errors_are_reported(session_service, monkeypatch):
    async def broken(session_id, text):
        raise RuntimeError("engine exploded")

    monkeypatch.setattr(session_service, "process_input", broken)

    response = await handler.async_handler({"sessionId": "abc", "message": "hi"})

    assert response == {"status": "error", "error": "engine exploded"}


def test_sync_handler():
    response = handler.handler({"sessionId": "abc", "message": "Dallas"})

    assert response["status"] == "ok"
    assert response["sessionId"] == "abc"
