"""
Orchestration package for the trip planning conversation.

This package implements the conversation graph: its state, its nodes and
routing conditions, the concurrent category searches and the engine that
advances a session one message at a time.
"""

from trip_concierge.orchestration.core import (
    ConversationGraph,
    build_conversation_graph,
)
from trip_concierge.orchestration.engine import CONTINUE_SENTINEL, ConversationEngine
from trip_concierge.orchestration.nodes import GREETING, NodeServices
from trip_concierge.orchestration.parallel import search_categories
from trip_concierge.orchestration.states import ConversationState, NodeId

__all__ = [
    "CONTINUE_SENTINEL",
    "GREETING",
    "ConversationEngine",
    "ConversationGraph",
    "ConversationState",
    "NodeId",
    "NodeServices",
    "build_conversation_graph",
    "search_categories",
]
