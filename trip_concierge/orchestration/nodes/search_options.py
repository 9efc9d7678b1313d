"""
Search node for the conversation graph.

Allocates the budget, searches the selected categories in parallel and
validates the results against the budget and the trip length. A failed
search does not stop the conversation: the plan is generated with general
recommendations and a note explaining why.
"""

from typing import Any

from trip_concierge.agents.budget_allocation import allocate_budget
from trip_concierge.agents.validation import validate_results
from trip_concierge.orchestration.nodes.base_node import NodeServices
from trip_concierge.orchestration.parallel import search_categories
from trip_concierge.orchestration.states import (
    ADVANCE,
    RESULT_FIELDS,
    ConversationState,
    NodeId,
)
from trip_concierge.utils.error_handling import GatewayError
from trip_concierge.utils.logging import get_logger

logger = get_logger(__name__)


async def search_options(
    state: ConversationState, services: NodeServices
) -> dict[str, Any]:
    """
    Search and validate travel options for the selected categories.

    Re-entering the node after results exist goes straight to the plan; the
    validation handler clears the results to force a new search.

    Args:
        state: Current conversation state
        services: Gateways and settings

    Returns:
        Partial state update with results, issues and the routing decision
    """
    if not state.planning_type or not state.awaiting_search:
        logger.info("Nothing to search, moving on to the plan")
        return {"current_node": NodeId.GENERATE_PLAN}

    trip = state.trip_details()
    attempt = state.search_retry_count + 1
    logger.info(
        f"Search attempt {attempt} for {trip.categories_text} "
        f"({trip.origin_city} -> {trip.destination_city}, "
        f"{trip.transportation_type.value})"
    )

    try:
        if services.search is None:
            raise GatewayError("search credentials are not configured", "search")

        allocation = await allocate_budget(
            trip,
            services.reasoning,
            services.timeout,
            default_budget=services.system.default_budget,
        )
        results = await search_categories(
            state.planning_type,
            trip,
            services.search,
            services.timeout,
            allocation=allocation,
            settings=services.search_settings,
        )
        validation = await validate_results(
            trip, results, services.reasoning, services.timeout
        )
    except GatewayError as e:
        logger.error(f"Search failed: {e!s}")
        return {
            "search_retry_count": attempt,
            "search_issues": [
                f"Failed to fetch search results: {e!s}. "
                "Generating plan with general recommendations."
            ],
            "budget_allocation": None,
            "current_node": NodeId.GENERATE_PLAN,
        }

    update: dict[str, Any] = {
        "search_retry_count": attempt,
        "budget_allocation": allocation,
        "budget_issues": validation.budget_issues,
        "schedule_issues": validation.schedule_issues,
        "search_issues": validation.all_issues,
        "flights_budget_exceeded": validation.flights_budget_exceeded,
        "total_budget_exceeded": validation.total_budget_exceeded,
        "accommodation_budget_exceeded": validation.accommodation_budget_exceeded,
        "validation_message_shown": False,
        "current_node": ADVANCE,
    }
    for category in state.planning_type:
        update[RESULT_FIELDS[category]] = results.get(category) or []
    return update
