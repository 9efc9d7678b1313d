"""
Unit tests for the final plan composition.
"""

import pytest
from conftest import FailingReasoning, FakeReasoning

from trip_concierge.agents.budget_allocation import fallback_allocation
from trip_concierge.agents.plan_synthesis import (
    CLOSING_HINT,
    compose_plan,
    general_advice,
    list_top_results,
)
from trip_concierge.data.models import (
    PlanningCategory,
    SearchResult,
    TransportationType,
    TripDetails,
    TripPurpose,
)
from trip_concierge.prompts.templates import FALLBACK_ITINERARY


@pytest.fixture
def trip():
    return TripDetails(
        origin_city="Dallas",
        destination_city="Orlando",
        start_date="2026-03-16",
        end_date="2026-03-20",
        travelers=2,
        budget="$2000",
        budget_amount=2000,
        purpose=TripPurpose.VACATION,
        planning_type=[PlanningCategory.ACCOMMODATION, PlanningCategory.ACTIVITIES],
        interests="food",
    )


def numbered_results(count):
    return [
        SearchResult(title=f"Option {i}", content="details", url=f"https://x/{i}")
        for i in range(1, count + 1)
    ]


def test_list_top_results_limits_count():
    listing = list_top_results(numbered_results(6), 3)

    assert listing.splitlines() == [
        "1. [Option 1](https://x/1)",
        "2. [Option 2](https://x/2)",
        "3. [Option 3](https://x/3)",
    ]


def test_general_advice_for_business_accommodation(trip):
    trip = trip.model_copy(update={"purpose": TripPurpose.BUSINESS})

    advice = general_advice(PlanningCategory.ACCOMMODATION, trip)

    assert "Business hotels" in advice
    assert "for 2 people" in advice


def test_general_advice_for_activities_uses_interests(trip):
    advice = general_advice(PlanningCategory.ACTIVITIES, trip)

    assert advice.startswith("Based on your interest in food:")
    assert "Food tours" in advice


async def test_plan_without_gateway_lists_results(trip):
    results = {
        PlanningCategory.ACCOMMODATION: numbered_results(4),
        PlanningCategory.ACTIVITIES: numbered_results(7),
    }

    plan = await compose_plan(trip, results, None, timeout=1)

    assert "📍 **Route:** Dallas → Orlando" in plan
    assert "3. [Option 3](https://x/3)" in plan
    assert "5. [Option 5](https://x/5)" in plan
    assert "6. [Option 6]" not in plan
    assert FALLBACK_ITINERARY.strip() in plan
    assert plan.endswith(CLOSING_HINT)


async def test_plan_uses_reasoning_rankings(trip):
    reasoning = FakeReasoning(
        "Stay at Option 1.", "Do Option 2 first.", "Day 1: arrive and explore."
    )
    results = {
        PlanningCategory.ACCOMMODATION: numbered_results(2),
        PlanningCategory.ACTIVITIES: numbered_results(2),
    }

    plan = await compose_plan(trip, results, reasoning, timeout=1)

    assert len(reasoning.prompts) == 3
    assert "Day 1: arrive and explore." in plan
    assert "[Option 1](https://x/1)" not in plan


async def test_failed_rankings_fall_back(trip):
    results = {PlanningCategory.ACCOMMODATION: numbered_results(2)}

    plan = await compose_plan(trip, results, FailingReasoning(), timeout=1)

    assert "1. [Option 1](https://x/1)" in plan
    assert FALLBACK_ITINERARY.strip() in plan


async def test_plan_without_results_gives_advice_and_notes(trip):
    notes = ["Failed to fetch search results: search gateway failed: timed out."]

    plan = await compose_plan(trip, {}, FakeReasoning(), timeout=1, notes=notes)

    assert "📝 **Search Notes:**" in plan
    assert notes[0] in plan
    assert "Top attractions in Orlando" in plan
    assert "Suggested Itinerary" not in plan


async def test_plan_summarizes_allocation_and_buses(trip):
    trip = trip.model_copy(update={"transportation_type": TransportationType.BUSES})

    plan = await compose_plan(
        trip, {}, None, timeout=1, allocation=fallback_allocation(2000, trip.transportation_type)
    )

    assert "- Transportation: $240" in plan
    assert "🚌 **Getting there:** by bus" in plan
