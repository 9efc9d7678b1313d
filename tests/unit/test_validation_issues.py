"""
Unit tests for the validation-handling node.
"""

import pytest

from trip_concierge.data.models import (
    BudgetAllocation,
    PlanningCategory,
    SearchResult,
    TransportationType,
)
from trip_concierge.orchestration.nodes.validation_issues import (
    compose_issue_message,
    handle_validation_issues,
    search_reset,
)
from trip_concierge.orchestration.states import ConversationState, NodeId

FLIGHTS_ISSUE = (
    "FLIGHTS_BUDGET_EXCEEDED: Flight costs (estimated $1,200 = $600 x 2 people) "
    "exceed 40% of your $1,000 budget. Threshold is $400."
)
TOTAL_ISSUE = "TOTAL_BUDGET_EXCEEDED: Total trip cost ($1,800) exceeds your budget."


@pytest.fixture
def flagged_state():
    result = [SearchResult(title="t", content="c", url="u")]
    return ConversationState(
        origin_city="Dallas",
        destination_city="Orlando",
        start_date="2026-03-16",
        end_date="2026-03-20",
        travelers=2,
        budget="$1000",
        budget_amount=1000,
        planning_type=list(PlanningCategory),
        transportation_results=result,
        accommodation_results=result,
        activities_results=result,
        budget_allocation=BudgetAllocation(
            transportation=400, accommodation=300, food=200, activities=80, contingency=20
        ),
        budget_issues=[FLIGHTS_ISSUE],
        search_issues=[FLIGHTS_ISSUE],
        flights_budget_exceeded=True,
        current_node=NodeId.HANDLE_VALIDATION_ISSUES,
    )


def shown(state, text=None):
    return state.apply({"validation_message_shown": True, "last_user_input": text})


def assert_search_reset(update):
    assert update["transportation_results"] is None
    assert update["accommodation_results"] is None
    assert update["activities_results"] is None
    assert update["budget_issues"] == []
    assert update["schedule_issues"] == []
    assert update["budget_allocation"] is None
    assert update["flights_budget_exceeded"] is False
    assert update["total_budget_exceeded"] is False
    assert update["validation_message_shown"] is False


async def test_first_entry_announces_flight_options(flagged_state, services):
    update = await handle_validation_issues(flagged_state, services)

    message = update["response_message"]
    assert message.startswith("⚠️ **I found some issues with the search results:**")
    assert f"- {FLIGHTS_ISSUE}" in message
    assert '1. Search for buses instead (reply: "buses" or "yes")' in message
    assert update["validation_message_shown"] is True
    assert update["current_node"] == NodeId.HANDLE_VALIDATION_ISSUES


def test_total_issue_gets_critical_menu(flagged_state):
    state = flagged_state.apply(
        {"budget_issues": [TOTAL_ISSUE, FLIGHTS_ISSUE], "total_budget_exceeded": True}
    )

    message = compose_issue_message(state)

    assert "❌ **Critical Budget Issue:**" in message
    assert TOTAL_ISSUE in message
    assert "2. **Search for buses**" in message
    assert FLIGHTS_ISSUE not in message


def test_total_issue_detected_by_marker_alone(flagged_state):
    state = flagged_state.apply({"budget_issues": [TOTAL_ISSUE]})

    assert "Critical Budget Issue" in compose_issue_message(state)


def test_other_budget_issues_offer_generic_menu(flagged_state):
    state = flagged_state.apply(
        {
            "budget_issues": ["Accommodation costs may exceed 50% of your budget"],
            "flights_budget_exceeded": False,
        }
    )

    message = compose_issue_message(state)

    assert '3. Change your preferences (reply: "change preferences")' in message


def test_schedule_issues_offer_date_change(flagged_state):
    state = flagged_state.apply(
        {"budget_issues": [], "schedule_issues": ["Too short for the festival"]}
    )

    message = compose_issue_message(state)

    assert "📅 **Schedule Issues:**" in message
    assert '"adjust dates" or "continue"' in message
    assert "Budget Issues" not in message


async def test_waits_without_input(flagged_state, services):
    update = await handle_validation_issues(shown(flagged_state), services)

    assert update == {"current_node": NodeId.HANDLE_VALIDATION_ISSUES}


@pytest.mark.parametrize("reply", ["buses", "Yes please"])
async def test_buses_forces_full_research(flagged_state, services, reply):
    update = await handle_validation_issues(shown(flagged_state, reply), services)

    assert update["current_node"] == NodeId.SEARCH_OPTIONS
    assert update["transportation_type"] == TransportationType.BUSES
    assert update["response_message"].startswith("Great! Let me search for bus options")
    assert_search_reset(update)


async def test_buses_without_budget_issue_falls_through(flagged_state, services):
    state = flagged_state.apply({"budget_issues": [], "flights_budget_exceeded": False})

    update = await handle_validation_issues(shown(state, "yes"), services)

    assert update == {"current_node": NodeId.GENERATE_PLAN}


async def test_continue_clears_issues(flagged_state, services):
    update = await handle_validation_issues(shown(flagged_state, "OK, continue"), services)

    assert update["current_node"] == NodeId.GENERATE_PLAN
    assert update["budget_issues"] == []
    assert update["schedule_issues"] == []
    assert "transportation_results" not in update


async def test_adjust_dates_goes_back(flagged_state, services):
    update = await handle_validation_issues(shown(flagged_state, "adjust dates"), services)

    assert update["current_node"] == NodeId.ASK_START_DATE
    assert update["start_date"] is None
    assert update["end_date"] is None
    assert_search_reset(update)


async def test_new_budget_triggers_search(flagged_state, services):
    update = await handle_validation_issues(shown(flagged_state, " $2,500 "), services)

    assert update["current_node"] == NodeId.SEARCH_OPTIONS
    assert update["budget"] == "$2,500"
    assert update["budget_amount"] == 2500
    assert update["response_message"] == (
        "Got it! Updated your budget to $2,500. Let me search again for better options..."
    )
    assert_search_reset(update)


async def test_change_preferences(flagged_state, services):
    update = await handle_validation_issues(
        shown(flagged_state, "change preferences"), services
    )

    assert update["current_node"] == NodeId.ASK_PLANNING_TYPE
    assert update["planning_type"] is None
    assert_search_reset(update)


async def test_anything_else_generates_plan(flagged_state, services):
    update = await handle_validation_issues(shown(flagged_state, "hmm"), services)

    assert update == {"current_node": NodeId.GENERATE_PLAN}


async def test_repeated_resets_do_not_share_lists(flagged_state, services):
    first = await handle_validation_issues(shown(flagged_state, "$2500"), services)
    second = await handle_validation_issues(shown(flagged_state, "$3000"), services)

    first["budget_issues"].append("stale")

    assert second["budget_issues"] == []
    assert search_reset()["budget_issues"] == []
    assert first["schedule_issues"] is not second["schedule_issues"]
