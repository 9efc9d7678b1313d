"""
Event handler for the trip planning conversation.

Entry point for HTTP or serverless fronts. Routes events by their "action"
field: chat, reset, graph and state. Sessions live in a module-level service
for as long as the process does.
"""

from typing import Any

from trip_concierge.config import config
from trip_concierge.orchestration.nodes import NodeServices
from trip_concierge.services.session_service import SessionService
from trip_concierge.utils.logging import get_logger

logger = get_logger(__name__)

_service: SessionService | None = None


def _get_service() -> SessionService:
    global _service
    if _service is None:
        _service = SessionService(NodeServices.from_config(config))
    return _service


def set_service(service: SessionService | None) -> None:
    """Replace the session service, mainly for tests."""
    global _service
    _service = service


def route_event(event: dict[str, Any]) -> tuple[str, dict[str, Any]]:
    """Parse event and extract action + parameters."""
    action = event.get("action", "chat")
    params: dict[str, Any] = {
        "session_id": event.get("sessionId") or event.get("session_id"),
        "message": event.get("message", ""),
        "format": event.get("format", "json"),
    }
    return action, params


async def _handle_chat(params: dict[str, Any]) -> dict[str, Any]:
    reply = await _get_service().process_input(params["session_id"], params["message"])
    return {
        "status": "ok",
        "reply": reply.reply_text,
        "isSearching": reply.is_searching,
        "sessionId": reply.session_id,
    }


async def _handle_reset(params: dict[str, Any]) -> dict[str, Any]:
    if not params["session_id"]:
        return {"status": "error", "error": "No sessionId provided"}
    reply = await _get_service().reset(params["session_id"])
    return {"status": "ok", "reply": reply.reply_text, "sessionId": reply.session_id}


async def _handle_graph(params: dict[str, Any]) -> dict[str, Any]:
    service = _get_service()
    if params["format"] == "mermaid":
        return {"status": "ok", "mermaid": service.graph_mermaid()}
    return {"status": "ok", "graph": service.graph_export().model_dump()}


async def _handle_state(params: dict[str, Any]) -> dict[str, Any]:
    snapshot = _get_service().snapshot(params["session_id"] or "")
    if snapshot is None:
        return {"status": "error", "error": "Unknown session"}
    return {"status": "ok", "state": snapshot}


# Action handlers map
_HANDLERS = {
    "chat": _handle_chat,
    "reset": _handle_reset,
    "graph": _handle_graph,
    "state": _handle_state,
}


async def async_handler(event: dict[str, Any]) -> dict[str, Any]:
    """Main async handler."""
    action, params = route_event(event)

    handler_fn = _HANDLERS.get(action)
    if not handler_fn:
        return {"status": "error", "error": f"Unknown action: {action}"}

    try:
        return await handler_fn(params)
    except Exception as e:
        logger.error(f"Error handling {action}: {e}")
        return {"status": "error", "error": str(e)}


def handler(event: dict[str, Any], context: Any = None) -> dict[str, Any]:
    """Synchronous entry point."""
    import asyncio

    return asyncio.run(async_handler(event))


handle_event = async_handler
