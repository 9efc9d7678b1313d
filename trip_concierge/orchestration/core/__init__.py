"""
Core orchestration components for the trip planning conversation.

This package contains the graph primitives and the builder that wires the
node implementations into the conversation topology.
"""

from trip_concierge.orchestration.core.graph import (
    ConditionalEdge,
    ConversationGraph,
    FixedEdge,
    GraphNode,
)
from trip_concierge.orchestration.core.graph_builder import build_conversation_graph

__all__ = [
    "ConditionalEdge",
    "ConversationGraph",
    "FixedEdge",
    "GraphNode",
    "build_conversation_graph",
]
