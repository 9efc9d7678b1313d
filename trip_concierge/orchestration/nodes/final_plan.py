"""
Final plan generation node for the conversation graph.
"""

from typing import Any

from trip_concierge.agents.plan_synthesis import compose_plan
from trip_concierge.orchestration.nodes.base_node import NodeServices
from trip_concierge.orchestration.states import ADVANCE, ConversationState
from trip_concierge.utils.logging import get_logger

logger = get_logger(__name__)


async def generate_final_plan(
    state: ConversationState, services: NodeServices
) -> dict[str, Any]:
    """
    Compose the closing plan and finish the conversation.

    Search notes are only shown when no results came back, which is the case
    after a failed search.

    Args:
        state: Current conversation state
        services: Gateways and settings

    Returns:
        Partial state update carrying the plan text
    """
    trip = state.trip_details()
    notes = state.search_issues if not state.has_results else []
    logger.info(f"Generating final plan for {trip.categories_text}")

    plan = await compose_plan(
        trip,
        state.search_results(),
        services.reasoning,
        services.timeout,
        allocation=state.budget_allocation,
        notes=notes,
    )

    logger.info("Final plan generated")
    return {
        "response_message": plan,
        "conversation_complete": True,
        "current_node": ADVANCE,
    }
