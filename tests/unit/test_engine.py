"""
Unit tests for the conversation engine step protocol.
"""

import pytest
from conftest import FailingReasoning, FakeReasoning, FakeSearch, make_services

from trip_concierge.data.models import PlanningCategory, TransportationType
from trip_concierge.orchestration.engine import (
    CONTINUE_SENTINEL,
    RESET_MESSAGE,
    ConversationEngine,
)
from trip_concierge.orchestration.nodes.ask_nodes import GREETING
from trip_concierge.orchestration.states import END, START, ConversationState, NodeId
from trip_concierge.utils.error_handling import GatewayError

SCENARIO = [
    "Dallas",
    "Orlando",
    "March 16",
    "March 20",
    "2",
    "$2000",
    "vacation",
    "activities and hotels",
]


async def drive(engine, messages):
    replies = []
    for message in messages:
        replies.append(await engine.process_input(message))
    return replies


@pytest.fixture
def engine(services):
    return ConversationEngine(services)


async def test_first_message_starts_at_origin(engine):
    assert engine.current_node == START

    reply = await engine.process_input("Dallas")

    assert engine.current_node == NodeId.ASK_DESTINATION
    assert engine.state.origin_city == "Dallas"
    assert "traveling from Dallas" in reply


async def test_empty_first_message_returns_greeting(engine):
    reply = await engine.process_input("")

    assert reply == GREETING
    assert engine.current_node == NodeId.ASK_ORIGIN


async def test_scenario_reaches_search_with_collected_values(engine):
    await drive(engine, SCENARIO[:-1])

    assert engine.current_node == NodeId.ASK_PLANNING_TYPE

    state = engine.state
    assert state.origin_city == "Dallas"
    assert state.destination_city == "Orlando"
    assert state.start_date == "2026-03-16"
    assert state.end_date == "2026-03-20"
    assert state.travelers == 2
    assert state.budget == "$2000"
    assert state.budget_amount == 2000

    reply = await engine.process_input(SCENARIO[-1])

    assert "Let me search" in reply
    assert engine.state.planning_type == [
        PlanningCategory.ACCOMMODATION,
        PlanningCategory.ACTIVITIES,
    ]
    assert engine.state.travelers == 2
    assert engine.state.search_retry_count == 1
    assert engine.is_searching()


async def test_validation_error_keeps_node(engine):
    await engine.process_input("Dallas")

    reply = await engine.process_input("Dallas")

    assert engine.current_node == NodeId.ASK_DESTINATION
    assert reply.startswith("You're already in Dallas!")
    assert engine.state.last_user_input is None
    assert engine.state.validation_error is not None


async def test_accepted_input_clears_validation_error(engine):
    await drive(engine, ["Dallas", "Dallas", "Orlando"])

    assert engine.current_node == NodeId.ASK_START_DATE
    assert engine.state.validation_error is None


@pytest.mark.parametrize("phrase", ["start over", "Please RESET", "let's Start Over!"])
async def test_reset_from_any_node(engine, phrase):
    await drive(engine, SCENARIO[:5])
    assert engine.current_node == NodeId.ASK_BUDGET

    reply = await engine.process_input(phrase)

    assert reply == RESET_MESSAGE
    assert engine.state == ConversationState()


async def test_reset_after_plan(engine):
    engine.state = ConversationState(current_node=END, conversation_complete=True)

    assert await engine.process_input("start over") == RESET_MESSAGE
    assert engine.current_node == START


async def test_unknown_node_restarts_at_origin(engine):
    engine.state = ConversationState(current_node="no_such_node")

    await engine.process_input("Dallas")

    assert engine.state.origin_city == "Dallas"
    assert engine.current_node == NodeId.ASK_DESTINATION


async def test_questions_are_personalized():
    reasoning = FakeReasoning(default="So exciting! Where are you headed? 🌍")
    engine = ConversationEngine(make_services(reasoning=reasoning))

    reply = await engine.process_input("Dallas")

    assert reply == "So exciting! Where are you headed? 🌍"
    assert "User is traveling from Dallas" in reasoning.prompts[-1]


async def test_personalization_failure_keeps_base_question():
    engine = ConversationEngine(make_services(reasoning=FailingReasoning()))

    reply = await engine.process_input("Dallas")

    assert reply.startswith("Great! You'll be traveling from Dallas.")


async def test_search_failure_leads_to_plan_with_note(engine):
    await drive(engine, SCENARIO)
    assert engine.current_node == NodeId.GENERATE_PLAN

    plan = await engine.process_input(CONTINUE_SENTINEL)

    assert engine.current_node == END
    assert engine.state.conversation_complete
    assert "search credentials are not configured" in plan
    assert "Generating plan with general recommendations." in plan
    assert not engine.is_searching()


NAN_ALLOCATION = (
    '{"transportation": NaN, "accommodation": 600, "food": 400, '
    '"activities": 300, "contingency": 100}'
)


def allocation_only(prompt):
    if "budget allocation expert" in prompt:
        return NAN_ALLOCATION
    raise GatewayError("service unavailable", "reasoning")


async def test_non_finite_allocation_reply_uses_fixed_split(hotel_results):
    services = make_services(
        reasoning=FakeReasoning(default=allocation_only),
        search=FakeSearch({"hotels": hotel_results}),
    )
    engine = ConversationEngine(services)

    reply = await drive(engine, SCENARIO)

    assert "Let me search" in reply[-1]
    assert engine.state.budget_allocation.source == "fallback"
    assert engine.state.budget_allocation.transportation == 800


async def test_flights_over_budget_route_to_issue_menu(flight_results, hotel_results):
    search = FakeSearch({"flights": flight_results, "hotels": hotel_results})
    engine = ConversationEngine(make_services(search=search))
    messages = [*SCENARIO[:5], "$1000", "vacation", "everything"]

    reply = await drive(engine, messages)

    assert "Let me search" in reply[-1]
    assert engine.current_node == NodeId.HANDLE_VALIDATION_ISSUES
    assert engine.state.flights_budget_exceeded

    menu = await engine.process_input(CONTINUE_SENTINEL)

    assert "I found some issues" in menu
    assert "Threshold is $400." in menu
    assert engine.current_node == NodeId.HANDLE_VALIDATION_ISSUES
    assert engine.state.validation_message_shown

    reply = await engine.process_input("buses")

    assert reply.startswith("Great! Let me search for bus options")
    assert engine.is_searching()
    assert engine.state.transportation_type == TransportationType.BUSES
    assert engine.state.search_retry_count == 2
    assert any(query.startswith("bus from Dallas") for query, _ in search.queries)

    plan = await engine.process_input(CONTINUE_SENTINEL)

    assert engine.state.conversation_complete
    assert "🚌 **Transportation:**" in plan


async def test_continue_from_menu_generates_plan(flight_results):
    engine = ConversationEngine(make_services(search=FakeSearch({"flights": flight_results})))
    await drive(engine, [*SCENARIO[:5], "$1000", "vacation", "flights only", CONTINUE_SENTINEL])

    plan = await engine.process_input("continue")

    assert engine.current_node == END
    assert "Fantastic! I've compiled your personalized travel plan" in plan
    assert engine.state.budget_issues == []


async def test_snapshot_is_serializable(engine):
    await engine.process_input("Dallas")

    snapshot = engine.snapshot()

    assert snapshot["origin_city"] == "Dallas"
    assert snapshot["current_node"] == "ask_destination"
    assert snapshot["transportation_type"] == "flights"
