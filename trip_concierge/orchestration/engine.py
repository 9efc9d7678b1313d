"""
Conversation engine driving the trip planning graph.

The engine owns the live ConversationState of one session and advances it
one user message at a time: the active node consumes the input, the edge
table (or the node's own override) picks the next node, and that node is
primed without input to produce the next question or action.
"""

import re

from trip_concierge.agents.gateways import ReasoningGateway
from trip_concierge.data.models import GraphExport
from trip_concierge.orchestration.core.graph import ConversationGraph, GraphNode
from trip_concierge.orchestration.core.graph_builder import build_conversation_graph
from trip_concierge.orchestration.nodes import (
    GREETING,
    NodeServices,
    personalization_prompt,
)
from trip_concierge.orchestration.states import (
    ASK_NODES,
    END,
    START,
    ConversationState,
    NodeId,
)
from trip_concierge.utils.error_handling import GatewayError, call_with_timeout
from trip_concierge.utils.logging import get_logger

logger = get_logger(__name__)

RESET_PATTERN = re.compile(r"start over|reset", re.IGNORECASE)
RESET_MESSAGE = (
    "No problem! Let's start fresh. ✈️ What city will you be traveling from?"
)
SEARCH_STARTED_MESSAGE = "Starting your travel search..."
LOST_NODE_MESSAGE = "Something went wrong. Please type 'start over' to begin again."
SEARCH_ANNOUNCEMENT = "Let me search"

# Sent by chat clients to collect the result of a search announced earlier
CONTINUE_SENTINEL = "__CONTINUE_SEARCH__"


class ConversationEngine:
    """
    Step-wise executor of the conversation graph for a single session.

    Example:
        engine = ConversationEngine(NodeServices.from_config(config))
        reply = await engine.process_input("Dallas")
    """

    def __init__(
        self,
        services: NodeServices | None = None,
        graph: ConversationGraph | None = None,
    ):
        self.services = services or NodeServices()
        self.graph = graph or build_conversation_graph(self.services)
        self.state = ConversationState()
        self._last_reply: str | None = None

    @property
    def current_node(self) -> str:
        return self.state.current_node

    @property
    def reasoning(self) -> ReasoningGateway | None:
        return self.services.reasoning

    def reset(self) -> None:
        """Replace the state with a fresh one."""
        logger.info("Resetting conversation")
        self.state = ConversationState()
        self._last_reply = None

    def snapshot(self) -> dict:
        return self.state.snapshot()

    def export_graph(self) -> GraphExport:
        return self.graph.export()

    def is_searching(self) -> bool:
        """True while a search is running or has just been announced."""
        return self.state.current_node == NodeId.SEARCH_OPTIONS or (
            self._last_reply is not None and SEARCH_ANNOUNCEMENT in self._last_reply
        )

    async def process_input(self, text: str) -> str:
        """
        Advance the conversation by one user message.

        Args:
            text: Raw user message

        Returns:
            Text to show to the user
        """
        reply = await self._step((text or "").strip())
        self._last_reply = reply
        return reply

    async def _step(self, text: str) -> str:
        if RESET_PATTERN.search(text):
            self.reset()
            return RESET_MESSAGE

        self.state = self.state.apply(
            {"last_user_input": text, "validation_error": None}
        )

        node = self.graph.get_node(self.state.current_node)
        if node is None:
            if self.state.current_node != START:
                logger.warning(
                    f"No node named {self.state.current_node}, starting from the beginning"
                )
            node = self.graph.get_node(NodeId.ASK_ORIGIN)
            self.state = self.state.apply({"current_node": node.id})

        await self._execute(node)

        if self.state.validation_error:
            logger.info(f"Validation error in {node.id}: {self.state.validation_error}")
            self.state = self.state.apply({"last_user_input": None})
            return self.state.response_message or self.state.validation_error

        if self.state.current_node == END or self.state.conversation_complete:
            logger.info("Conversation complete")
            self.state = self.state.apply({"last_user_input": None})
            return self.state.response_message or ""

        return await self._prime(self.state.current_node)

    async def _execute(self, node: GraphNode) -> None:
        """Run a node and move to the node its update resolves to."""
        logger.debug(f"Executing node {node.id}")
        update = await node.execute(self.state)

        merged = self.state.apply(
            {key: value for key, value in update.items() if key != "current_node"}
        )
        next_node = self.graph.resolve_transition(node.id, update, merged)
        self.state = merged.apply({"current_node": next_node})

        if next_node != node.id:
            logger.info(f"Transition {node.id} -> {next_node}")

    async def _prime(self, node_id: str) -> str:
        """Run the newly active node without input to get its outbound text."""
        node = self.graph.get_node(node_id)
        if node is None:
            logger.warning(f"No node named {node_id} to continue with")
            return LOST_NODE_MESSAGE

        self.state = self.state.apply({"last_user_input": None})
        await self._execute(node)
        base_text = self.state.response_message or ""

        if node.id == NodeId.SEARCH_OPTIONS:
            return base_text or SEARCH_STARTED_MESSAGE

        if node.id in ASK_NODES:
            return await self.personalize(node.id, base_text)

        return base_text

    async def personalize(self, node_id: str, base_text: str) -> str:
        """
        Rephrase an ask node's question with the trip collected so far.

        Returns the base text unchanged if the node has no personalization or
        the reasoning gateway is unavailable or fails.
        """
        prompt = personalization_prompt(node_id, self.state)
        if prompt is None or self.reasoning is None:
            return base_text

        try:
            text = await call_with_timeout(
                self.reasoning.complete(prompt), self.services.timeout, "reasoning"
            )
        except GatewayError as e:
            logger.warning(f"Personalizing {node_id} failed, using base question: {e!s}")
            return base_text
        return text.strip() or base_text

    @staticmethod
    def greeting() -> str:
        return GREETING
