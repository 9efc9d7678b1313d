"""
Parallel execution of category searches.

The selected planning categories are searched concurrently. The first
gateway failure aborts the whole batch; the search node turns that into a
note on the plan instead of partial results.
"""

import asyncio

from trip_concierge.agents.gateways import SearchGateway
from trip_concierge.config import SearchSettings
from trip_concierge.data.models import (
    BudgetAllocation,
    PlanningCategory,
    SearchResult,
    TripDetails,
)
from trip_concierge.prompts.search_queries import build_query, search_config_for
from trip_concierge.utils.error_handling import call_with_timeout
from trip_concierge.utils.logging import get_logger

logger = get_logger(__name__)


async def search_category(
    category: PlanningCategory,
    trip: TripDetails,
    search: SearchGateway,
    timeout: float,
    allocation: BudgetAllocation | None = None,
    settings: SearchSettings | None = None,
) -> list[SearchResult]:
    """Run the query for one category and return its raw results."""
    query = build_query(category, trip, allocation)
    logger.debug(f"Searching {category.value}: {query}")

    response = await call_with_timeout(
        search.search(query, search_config_for(category, settings)), timeout, "search"
    )
    logger.info(f"{category.value} search returned {len(response.results)} results")
    return response.results


async def search_categories(
    categories: list[PlanningCategory],
    trip: TripDetails,
    search: SearchGateway,
    timeout: float,
    allocation: BudgetAllocation | None = None,
    settings: SearchSettings | None = None,
) -> dict[PlanningCategory, list[SearchResult]]:
    """
    Search every selected category concurrently.

    Args:
        categories: Categories to search
        trip: Collected trip parameters
        search: Search gateway
        timeout: Seconds allowed for each search call
        allocation: Budget split used to phrase the queries
        settings: Search defaults

    Returns:
        Results per category, in the order given

    Raises:
        GatewayError: If any of the searches fails or times out
    """
    logger.info(f"Executing {len(categories)} searches in parallel")

    results = await asyncio.gather(
        *(
            search_category(category, trip, search, timeout, allocation, settings)
            for category in categories
        )
    )
    return dict(zip(categories, results, strict=True))
