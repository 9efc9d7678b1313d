"""
Search query templates.

Turns the collected trip parameters into short natural-language queries for
the search gateway, one per planning category. The search service rejects
long queries, so every query is compacted below MAX_QUERY_LENGTH.
"""

import re

from trip_concierge.config import SearchSettings
from trip_concierge.data.models import (
    BudgetAllocation,
    PlanningCategory,
    SearchConfig,
    TransportationType,
    TripDetails,
    TripPurpose,
)
from trip_concierge.utils.helpers import days_between, nights_between, truncate_text

MAX_QUERY_LENGTH = 400
DEFAULT_TRANSPORTATION_BUDGET = 200
ACTIVITIES_SHARE_OF_BUDGET = 0.3


def compact_query(query: str) -> str:
    """Collapse whitespace and cut the query below the length limit."""
    compacted = re.sub(r"\s+", " ", query).strip()
    return truncate_text(compacted, MAX_QUERY_LENGTH - 1, suffix="")


def _per_unit(amount: float, units: int) -> int:
    return round(amount / max(units, 1))


def transportation_query(
    trip: TripDetails, allocation: BudgetAllocation | None = None
) -> str:
    """Build the flight or bus query, budgeted per person."""
    travelers = trip.traveler_count
    allocated = (
        allocation.transportation if allocation else DEFAULT_TRANSPORTATION_BUDGET
    )
    per_person = _per_unit(allocated, travelers)

    if trip.transportation_type == TransportationType.BUSES:
        query = (
            f"bus from {trip.origin_city} to {trip.destination_city} "
            f"{trip.start_date} to {trip.end_date} {travelers} people "
            f"max ${per_person}/person prices schedules"
        )
    else:
        query = (
            f"flights {trip.origin_city} to {trip.destination_city} "
            f"{trip.start_date} to {trip.end_date} {travelers} passengers "
            f"budget ${per_person}/person prices times airlines"
        )
    return compact_query(query)


def accommodation_query(
    trip: TripDetails, allocation: BudgetAllocation | None = None
) -> str:
    """Build the hotel query, budgeted per night."""
    travelers = trip.traveler_count
    nights = nights_between(trip.start_date, trip.end_date)

    if allocation:
        per_night: int | str = _per_unit(allocation.accommodation, nights)
    elif trip.budget_amount:
        per_night = _per_unit(trip.budget_amount / travelers, nights)
    else:
        per_night = "variable"

    prefix = "business hotels" if trip.purpose == TripPurpose.BUSINESS else "hotels"
    query = (
        f"{prefix} {trip.destination_city} {trip.start_date} to "
        f"{trip.end_date} {travelers} people {nights} nights "
        f"budget ${per_night}/night prices location"
    )
    return compact_query(query)


def activities_query(
    trip: TripDetails, allocation: BudgetAllocation | None = None
) -> str:
    """Build the things-to-do query, budgeted per day and steered by interests."""
    travelers = trip.traveler_count
    days = days_between(trip.start_date, trip.end_date)

    if allocation:
        per_day: int | str = _per_unit(allocation.activities, days)
    elif trip.budget_amount:
        per_day = round(
            trip.budget_amount / days / travelers * ACTIVITIES_SHARE_OF_BUDGET
        )
    else:
        per_day = "variable"

    interests = f" {trip.interests}" if trip.interests else ""
    query = (
        f"things to do {trip.destination_city}{interests} {trip.start_date} "
        f"to {trip.end_date} {travelers} people {days} days "
        f"budget ${per_day}/day attractions tours prices"
    )
    return compact_query(query)


def build_query(
    category: PlanningCategory,
    trip: TripDetails,
    allocation: BudgetAllocation | None = None,
) -> str:
    """Dispatch to the template for a planning category."""
    if category == PlanningCategory.TRANSPORTATION:
        return transportation_query(trip, allocation)
    if category == PlanningCategory.ACCOMMODATION:
        return accommodation_query(trip, allocation)
    return activities_query(trip, allocation)


def search_config_for(
    category: PlanningCategory, settings: SearchSettings | None = None
) -> SearchConfig:
    """
    Search configuration for a category.

    All categories currently share the configured defaults.
    """
    settings = settings or SearchSettings()
    return SearchConfig(
        max_results=settings.max_results,
        search_depth=settings.search_depth,
        include_answer=settings.include_answer,
    )
