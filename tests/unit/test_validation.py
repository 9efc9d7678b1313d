"""
Unit tests for the validation engine.
"""

import json

import pytest
from conftest import FailingReasoning, FakeReasoning

from trip_concierge.agents.validation import (
    FLIGHTS_BUDGET_MARKER,
    TOTAL_BUDGET_MARKER,
    check_schedule,
    find_transport_prices,
    parse_cost_estimate,
    validate_locally,
    validate_results,
)
from trip_concierge.data.models import (
    PlanningCategory,
    SearchResult,
    TransportationType,
    TripDetails,
)


@pytest.fixture
def trip():
    return TripDetails(
        origin_city="Dallas",
        destination_city="Orlando",
        start_date="2026-03-16",
        end_date="2026-03-20",
        travelers=2,
        budget="$1000",
        budget_amount=1000,
        planning_type=list(PlanningCategory),
    )


def estimate_reply(**overrides):
    estimate = {
        "transportationCostPerPerson": 150,
        "transportationTotalCost": 300,
        "accommodationTotalCost": 400,
        "activitiesEstimate": 100,
        "foodEstimate": 150,
        "totalEstimatedCost": 950,
        "flightsBudgetExceeded": False,
        "totalBudgetExceeded": False,
        "budgetIssues": [],
    }
    estimate.update(overrides)
    return json.dumps(estimate)


def test_fallback_flags_flights_over_threshold(trip, flight_results):
    result = validate_locally(trip, {PlanningCategory.TRANSPORTATION: flight_results})

    assert result.flights_budget_exceeded
    assert result.source == "fallback"
    assert result.budget_issues == [
        f"{FLIGHTS_BUDGET_MARKER}: Flight costs (estimated $1,200 = $600 x 2 people) "
        "exceed 40% of your $1,000 budget. Threshold is $400."
    ]


def test_fallback_ignores_buses(trip, flight_results):
    trip = trip.model_copy(update={"transportation_type": TransportationType.BUSES})

    result = validate_locally(trip, {PlanningCategory.TRANSPORTATION: flight_results})

    assert not result.flights_budget_exceeded
    assert result.budget_issues == []


def test_fallback_flags_expensive_accommodation(trip):
    hotels = [SearchResult(title="Suite", content="Nightly rate $200", url="u")]

    result = validate_locally(trip, {PlanningCategory.ACCOMMODATION: hotels})

    assert result.accommodation_budget_exceeded
    assert "for 4 nights" in result.budget_issues[0]


def test_fallback_without_numeric_budget_raises_no_issue(trip, flight_results):
    trip = trip.model_copy(update={"budget": "flexible", "budget_amount": None})

    result = validate_locally(trip, {PlanningCategory.TRANSPORTATION: flight_results})

    assert not result.has_issues


def test_transport_prices_skip_implausible_values():
    text = "Fees $5, fares from $250 and charter $25000, or 300 USD"

    assert sorted(find_transport_prices(text)) == [250, 300]


def test_schedule_issue_on_short_trip(trip, activity_results):
    trip = trip.model_copy(update={"end_date": "2026-03-18"})

    issues = check_schedule(trip, {PlanningCategory.ACTIVITIES: activity_results})

    assert issues == ["Some activities found require more time than your 2-day trip allows"]


def test_no_schedule_issue_on_long_trip(trip, activity_results):
    assert check_schedule(trip, {PlanningCategory.ACTIVITIES: activity_results}) == []


async def test_reasoning_total_issue_is_listed_first(trip, flight_results):
    reply = estimate_reply(
        transportationCostPerPerson=500,
        transportationTotalCost=1000,
        totalEstimatedCost=1800,
        budgetIssues=["Hotels near the parks are pricey"],
    )

    result = await validate_results(
        trip,
        {PlanningCategory.TRANSPORTATION: flight_results},
        FakeReasoning(reply),
        timeout=1,
    )

    assert result.source == "reasoning"
    assert result.total_budget_exceeded
    assert result.flights_budget_exceeded
    assert result.budget_issues[0].startswith(TOTAL_BUDGET_MARKER)
    assert "by $800" in result.budget_issues[0]
    assert result.budget_issues[1] == "Hotels near the parks are pricey"
    assert result.budget_issues[2].startswith(FLIGHTS_BUDGET_MARKER)


async def test_reasoning_within_budget_has_no_issues(trip, hotel_results):
    result = await validate_results(
        trip,
        {PlanningCategory.ACCOMMODATION: hotel_results},
        FakeReasoning(estimate_reply()),
        timeout=1,
    )

    assert not result.has_issues
    assert result.estimate.total_estimated_cost == 950


async def test_total_flag_without_excess_amount(trip):
    reply = estimate_reply(totalBudgetExceeded=True)

    result = await validate_results(trip, {}, FakeReasoning(reply), timeout=1)

    assert result.total_budget_exceeded
    assert "is likely to exceed your budget" in result.budget_issues[0]


async def test_negative_estimate_uses_fallback(trip, flight_results):
    reply = estimate_reply(totalEstimatedCost=-50)

    result = await validate_results(
        trip,
        {PlanningCategory.TRANSPORTATION: flight_results},
        FakeReasoning(reply),
        timeout=1,
    )

    assert result.source == "fallback"
    assert result.flights_budget_exceeded


async def test_gateway_failure_uses_fallback(trip, flight_results):
    reasoning = FailingReasoning()

    result = await validate_results(
        trip, {PlanningCategory.TRANSPORTATION: flight_results}, reasoning, timeout=1
    )

    assert reasoning.calls == 1
    assert result.source == "fallback"
    assert result.budget_issues[0].startswith(FLIGHTS_BUDGET_MARKER)


async def test_schedule_checked_on_reasoning_path(trip, activity_results):
    trip = trip.model_copy(update={"end_date": "2026-03-17"})

    result = await validate_results(
        trip,
        {PlanningCategory.ACTIVITIES: activity_results},
        FakeReasoning(estimate_reply()),
        timeout=1,
    )

    assert result.source == "reasoning"
    assert result.schedule_issues


def test_estimate_without_total_is_rejected():
    assert parse_cost_estimate(json.dumps({"foodEstimate": 100})) is None


def test_estimate_with_text_amount_is_rejected():
    assert parse_cost_estimate(json.dumps({"totalEstimatedCost": "a lot"})) is None
