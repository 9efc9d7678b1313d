"""
State models for the trip planning conversation.

This package contains the ConversationState model and the node identifiers
of the conversation graph.
"""

from trip_concierge.orchestration.states.conversation_state import (
    RESULT_FIELDS,
    ConversationState,
)
from trip_concierge.orchestration.states.node_ids import (
    ADVANCE,
    ASK_NODES,
    END,
    START,
    NodeId,
)

__all__ = [
    "ADVANCE",
    "ASK_NODES",
    "END",
    "RESULT_FIELDS",
    "START",
    "ConversationState",
    "NodeId",
]
