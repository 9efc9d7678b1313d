"""
Validation-handling node for the conversation graph.

The first visit announces the budget and schedule issues of the last search
with a menu of options. Later visits read the user's choice and either
re-route the conversation (new search, new dates, new preferences) or accept
the issues and continue to the plan.
"""

import re
from typing import Any

from trip_concierge.agents.validation import TOTAL_BUDGET_MARKER
from trip_concierge.data.models import TransportationType
from trip_concierge.orchestration.nodes.base_node import NodeServices
from trip_concierge.orchestration.states import ConversationState, NodeId
from trip_concierge.utils.helpers import parse_amount
from trip_concierge.utils.logging import get_logger

logger = get_logger(__name__)

AMOUNT_PATTERN = re.compile(r"\$?\d+")

SCHEDULE_PROMPT = (
    "Would you like to adjust your travel dates or continue with the current "
    'results? (Reply: "adjust dates" or "continue")'
)


def search_reset() -> dict[str, Any]:
    """Fields cleared whenever the conversation goes back for another search."""
    return {
        "transportation_results": None,
        "accommodation_results": None,
        "activities_results": None,
        "budget_issues": [],
        "schedule_issues": [],
        "search_issues": [],
        "flights_budget_exceeded": False,
        "total_budget_exceeded": False,
        "accommodation_budget_exceeded": False,
        "budget_allocation": None,
        "validation_message_shown": False,
    }


def total_budget_issue(state: ConversationState) -> str | None:
    """The total-budget issue text, if the total budget was exceeded."""
    issue = next(
        (i for i in state.budget_issues if i.startswith(TOTAL_BUDGET_MARKER)), None
    )
    if issue is None and state.total_budget_exceeded and state.budget_issues:
        issue = state.budget_issues[0]
    return issue


def compose_issue_message(state: ConversationState) -> str:
    """Summary of the issues with the options available for each kind."""
    lines = ["⚠️ **I found some issues with the search results:**", ""]

    if state.schedule_issues:
        lines.append("📅 **Schedule Issues:**")
        lines += [f"- {issue}" for issue in state.schedule_issues]
        lines += ["", SCHEDULE_PROMPT, ""]

    if state.budget_issues:
        lines.append("💰 **Budget Issues:**")
        critical = total_budget_issue(state)
        if critical is not None:
            lines += [
                "",
                "❌ **Critical Budget Issue:**",
                critical,
                "",
                "**Your Options:**",
                '1. **Increase budget** - Reply with new budget amount (e.g., "$900" or "900")',
                '2. **Search for buses** - Reply "buses" to look for cheaper transportation',
                '3. **Reduce trip scope** - Reply "change preferences" to adjust your plans',
            ]
        else:
            lines += [f"- {issue}" for issue in state.budget_issues]
            lines += ["", "**Options:**"]
            if (
                state.flights_budget_exceeded
                and state.transportation_type == TransportationType.FLIGHTS
            ):
                lines += [
                    '1. Search for buses instead (reply: "buses" or "yes")',
                    "2. Increase your budget (reply with new budget amount)",
                    '3. Continue with current options (reply: "continue")',
                ]
            else:
                lines += [
                    "1. Increase your budget (reply with new budget amount)",
                    '2. Continue with budget-friendly alternatives (reply: "continue")',
                    '3. Change your preferences (reply: "change preferences")',
                ]

    return "\n".join(lines).rstrip()


def interpret_choice(state: ConversationState, text: str) -> dict[str, Any]:
    """
    Map the user's reply to the issue menu onto a state update.

    Commands are matched as case-insensitive substrings, first match wins.
    """
    choice = text.lower()
    budget_blocked = (
        state.flights_budget_exceeded
        or state.total_budget_exceeded
        or total_budget_issue(state) is not None
    )

    if ("bus" in choice or "yes" in choice) and budget_blocked:
        return {
            **search_reset(),
            "transportation_type": TransportationType.BUSES,
            "response_message": "Great! Let me search for bus options instead. "
            "This should be more budget-friendly... 🚌",
            "current_node": NodeId.SEARCH_OPTIONS,
        }

    if any(word in choice for word in ("continue", "ok", "fine")):
        return {
            "budget_issues": [],
            "schedule_issues": [],
            "search_issues": [],
            "validation_message_shown": False,
            "current_node": NodeId.GENERATE_PLAN,
        }

    if "adjust" in choice or "change dates" in choice:
        return {
            **search_reset(),
            "start_date": None,
            "end_date": None,
            "response_message": "Let's adjust your travel dates. When would you "
            "like to start your trip?",
            "current_node": NodeId.ASK_START_DATE,
        }

    if AMOUNT_PATTERN.search(choice) or "budget" in choice:
        new_budget = text.strip()
        return {
            **search_reset(),
            "budget": new_budget,
            "budget_amount": parse_amount(new_budget),
            "response_message": f"Got it! Updated your budget to {new_budget}. "
            "Let me search again for better options...",
            "current_node": NodeId.SEARCH_OPTIONS,
        }

    if "change preferences" in choice:
        return {
            **search_reset(),
            "planning_type": None,
            "response_message": "What would you like to change? (transportation, "
            "accommodation, or activities)",
            "current_node": NodeId.ASK_PLANNING_TYPE,
        }

    return {"current_node": NodeId.GENERATE_PLAN}


async def handle_validation_issues(
    state: ConversationState, services: NodeServices
) -> dict[str, Any]:
    if not state.validation_message_shown:
        logger.info(
            f"Announcing {len(state.budget_issues)} budget and "
            f"{len(state.schedule_issues)} schedule issues"
        )
        return {
            "response_message": compose_issue_message(state),
            "validation_message_shown": True,
            "current_node": NodeId.HANDLE_VALIDATION_ISSUES,
        }

    if not state.last_user_input:
        return {"current_node": NodeId.HANDLE_VALIDATION_ISSUES}

    update = interpret_choice(state, state.last_user_input)
    logger.info(f"Issue menu choice routes to {update['current_node']}")
    return update
