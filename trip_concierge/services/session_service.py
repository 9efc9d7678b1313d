"""
Session service keeping one conversation engine per session.

Sessions are independent: each has its own engine and its own lock, so
messages of one session are handled strictly one after another while other
sessions proceed concurrently. Nothing is persisted.
"""

import asyncio
from collections.abc import Callable
from typing import Any

from trip_concierge.data.models import ChatReply, GraphExport
from trip_concierge.orchestration.core import build_conversation_graph
from trip_concierge.orchestration.engine import ConversationEngine
from trip_concierge.orchestration.nodes import GREETING, NodeServices
from trip_concierge.utils.helpers import generate_session_id
from trip_concierge.utils.logging import get_logger

logger = get_logger(__name__)


class SessionService:
    """Routes messages to the conversation engine of their session."""

    def __init__(
        self,
        services: NodeServices | None = None,
        engine_factory: Callable[[], ConversationEngine] | None = None,
    ):
        self.services = services or NodeServices()
        self._engine_factory = engine_factory or (
            lambda: ConversationEngine(self.services)
        )
        self._engines: dict[str, ConversationEngine] = {}
        self._locks: dict[str, asyncio.Lock] = {}

    def _engine(self, session_id: str) -> ConversationEngine:
        if session_id not in self._engines:
            logger.info(f"Starting session {session_id}")
            self._engines[session_id] = self._engine_factory()
            self._locks[session_id] = asyncio.Lock()
        return self._engines[session_id]

    def has_session(self, session_id: str) -> bool:
        return session_id in self._engines

    async def process_input(self, session_id: str | None, text: str) -> ChatReply:
        """
        Handle one user message for a session.

        Args:
            session_id: Session key; a new one is generated when missing
            text: Raw user message

        Returns:
            The reply with the searching flag and the session id
        """
        session_id = session_id or generate_session_id()
        engine = self._engine(session_id)

        async with self._locks[session_id]:
            reply = await engine.process_input(text)
            searching = engine.is_searching()

        logger.debug(f"Session {session_id} now at {engine.current_node}")
        return ChatReply(reply_text=reply, is_searching=searching, session_id=session_id)

    async def reset(self, session_id: str) -> ChatReply:
        """Start the session over with a fresh state."""
        engine = self._engine(session_id)
        async with self._locks[session_id]:
            engine.reset()
        return ChatReply(reply_text=GREETING, session_id=session_id)

    def end_session(self, session_id: str) -> None:
        self._engines.pop(session_id, None)
        self._locks.pop(session_id, None)

    def snapshot(self, session_id: str) -> dict[str, Any] | None:
        """Serialized state of a session, or None for an unknown session."""
        engine = self._engines.get(session_id)
        if engine is None:
            return None
        return engine.snapshot()

    def graph_export(self) -> GraphExport:
        return build_conversation_graph(self.services).export()

    def graph_mermaid(self) -> str:
        return build_conversation_graph(self.services).to_mermaid()

    @staticmethod
    def greeting() -> str:
        return GREETING
