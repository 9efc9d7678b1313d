"""
Ask nodes that collect the trip parameters.

Each node follows the same contract. Called without input it returns its
question. Called with input it either rejects it (validation error plus a
clarifying question, nothing else changes) or stores the normalized value
and advances along the edge table.
"""

import re
from collections.abc import Callable
from datetime import date
from typing import Any

from trip_concierge.agents.intent_parsing import parse_date, parse_planning_request
from trip_concierge.data.models import ALL_CATEGORIES, TripPurpose
from trip_concierge.orchestration.nodes.base_node import NodeServices, accept, reject
from trip_concierge.orchestration.states import ConversationState, NodeId
from trip_concierge.prompts.templates import PERSONALIZE_QUESTION, render_template
from trip_concierge.utils.helpers import format_price, parse_amount, pluralize
from trip_concierge.utils.logging import get_logger

logger = get_logger(__name__)

GREETING = (
    "Hello! ✈️ I'm your Travel Planning Assistant! Let's plan your perfect "
    "trip. What city will you be traveling from?"
)

CITY_PATTERN = re.compile(r"^[A-Za-z\s,\-]+$")
MIN_CITY_LENGTH = 2

MAX_TRIP_DAYS = 365

NUMBER_WORDS = {
    "one": 1,
    "two": 2,
    "three": 3,
    "four": 4,
    "five": 5,
    "six": 6,
    "seven": 7,
    "eight": 8,
    "nine": 9,
    "ten": 10,
}
NUMBER_WORD_PATTERN = re.compile(r"\b(" + "|".join(NUMBER_WORDS) + r")\b")
NUMBER_PATTERN = re.compile(r"-?\d+(?:\.\d+)?")
MIN_TRAVELERS = 1
MAX_TRAVELERS = 50

BUDGET_PATTERNS = [
    re.compile(r"\$?\d+[\d,]*(\s*-\s*\$?\d+[\d,]*)?"),
    re.compile(r"\d+[\d,]*\s*(usd|dollars?|euros?|gbp|pounds?)", re.IGNORECASE),
    re.compile(r"flexible|no\s*limit|unlimited", re.IGNORECASE),
]
LOW_BUDGET_THRESHOLD = 100

PURPOSE_SYNONYMS: list[tuple[TripPurpose, tuple[str, ...]]] = [
    (TripPurpose.BUSINESS, ("business", "work")),
    (TripPurpose.VACATION, ("vacation", "leisure", "holiday", "pleasure")),
]


def _people(count: int | None) -> str:
    return f"{count} {pluralize(count, 'person', 'people')}"


def _validate_city(text: str, role: str, example: str) -> dict[str, Any] | None:
    if len(text) < MIN_CITY_LENGTH:
        return reject(
            f"Please provide a valid {role} city name.",
            f"I need a city name with at least {MIN_CITY_LENGTH} characters. "
            f"🌍 Which city is your {role}?",
        )
    if not CITY_PATTERN.match(text):
        return reject(
            "Please provide a valid city name (letters only).",
            f"That doesn't look like a city name. 🌍 Please provide your {role} "
            f"city (e.g., {example}).",
        )
    return None


async def ask_origin(state: ConversationState, services: NodeServices) -> dict[str, Any]:
    if not state.last_user_input:
        return {"response_message": GREETING}

    text = state.last_user_input.strip()
    error = _validate_city(text, "origin", "Dallas, New York, Los Angeles")
    if error:
        return error
    return accept(origin_city=text)


async def ask_destination(
    state: ConversationState, services: NodeServices
) -> dict[str, Any]:
    if not state.last_user_input:
        return {
            "response_message": f"Great! You'll be traveling from {state.origin_city}. "
            f"🌍 Now, which city are you planning to visit?"
        }

    text = state.last_user_input.strip()
    error = _validate_city(text, "destination", "Orlando, Miami, San Francisco")
    if error:
        return error
    if state.origin_city and text.lower() == state.origin_city.lower():
        return reject(
            "Destination should be different from origin.",
            f"You're already in {state.origin_city}! 😄 Where would you like to "
            f"travel to from there?",
        )
    return accept(destination_city=text)


async def ask_start_date(
    state: ConversationState, services: NodeServices
) -> dict[str, Any]:
    if not state.last_user_input:
        return {
            "response_message": f"Wonderful! {state.destination_city} sounds exciting! "
            f"📅 When would you like to start your trip? (Please provide the start date)"
        }

    today = services.today()
    parsed = await parse_date(
        state.last_user_input.strip(), today, services.reasoning, services.timeout
    )
    if parsed is None:
        return reject(
            "That doesn't seem like a valid date.",
            "That doesn't seem like a valid date. 📅 Could you provide your "
            f"departure date in a format like MM/DD/YYYY or Jan 15, {today.year}?",
        )
    if parsed < today:
        return reject(
            "The start date should be in the future.",
            "It looks like that date is in the past! 📅 When in the future would "
            "you like to start your trip?",
        )
    return accept(start_date=parsed.isoformat())


async def ask_end_date(state: ConversationState, services: NodeServices) -> dict[str, Any]:
    if not state.last_user_input:
        return {
            "response_message": f"Got it! Starting {state.start_date}. 📅 And when "
            f"will you be returning? (Please provide the end date)"
        }

    today = services.today()
    parsed = await parse_date(
        state.last_user_input.strip(),
        today,
        services.reasoning,
        services.timeout,
        start_date=state.start_date,
    )
    if parsed is None:
        return reject(
            "That doesn't seem like a valid date.",
            "That doesn't seem like a valid date. 📅 Could you provide your "
            f"return date in a format like MM/DD/YYYY or Jan 20, {today.year}?",
        )

    start = date.fromisoformat(state.start_date) if state.start_date else today
    if parsed <= start:
        return reject(
            "End date should be after the start date.",
            f"Your return date should be after {start.isoformat()}. 📅 When will "
            f"you be coming back?",
        )

    span = (parsed - start).days
    if span > MAX_TRIP_DAYS:
        return reject(
            "That trip duration seems unusually long (over a year).",
            f"A trip of {span} days seems quite long! 😅 Could you provide a "
            f"return date within a year of {start.isoformat()}?",
        )
    return accept(end_date=parsed.isoformat())


def parse_travelers(text: str) -> int | None:
    """
    First whole number in the text, or the first number word one to ten.

    A negative or fractional number yields None rather than its digits.
    """
    match = NUMBER_PATTERN.search(text)
    if match:
        number = match.group(0)
        if number.startswith("-") or "." in number:
            return None
        return int(number)
    word = NUMBER_WORD_PATTERN.search(text.lower())
    if word:
        return NUMBER_WORDS[word.group(1)]
    return None


async def ask_travelers(
    state: ConversationState, services: NodeServices
) -> dict[str, Any]:
    if not state.last_user_input:
        return {
            "response_message": f"Excellent! So you'll be traveling from "
            f"{state.start_date} to {state.end_date}. 👥 How many people will "
            f"be traveling?"
        }

    travelers = parse_travelers(state.last_user_input)
    if travelers is None or travelers < MIN_TRAVELERS:
        return reject(
            "Please provide a valid number of travelers.",
            "I need a valid number! 👥 How many people will be traveling? "
            "(e.g., 1, 2, 3, or type 'two', 'three', etc.)",
        )
    if travelers > MAX_TRAVELERS:
        return reject(
            "That's quite a large group!",
            f"Wow, {travelers} people! 👥 I can plan for groups of up to "
            f"{MAX_TRAVELERS}. How many people will be traveling?",
        )
    return accept(travelers=travelers)


def is_valid_budget(text: str) -> bool:
    return any(pattern.search(text) for pattern in BUDGET_PATTERNS)


async def ask_budget(state: ConversationState, services: NodeServices) -> dict[str, Any]:
    if not state.last_user_input:
        return {
            "response_message": f"Got it! {_people(state.travelers)} traveling. "
            f"💰 What's your budget for this trip? (You can provide an amount or range)"
        }

    text = state.last_user_input.strip()
    if not is_valid_budget(text):
        return reject(
            "Please provide a valid budget amount.",
            "I need a valid budget amount. 💰 You can say something like: $2000, "
            "1500-2000, flexible, or no limit. What's your budget?",
        )

    amount = parse_amount(text)
    # A low amount is confirmed by entering it a second time
    if (
        amount is not None
        and amount < LOW_BUDGET_THRESHOLD
        and state.low_budget_warning != amount
    ):
        return reject(
            "That budget seems quite low. Are you sure?",
            f"Just checking - did you mean {format_price(amount)}? That might be a "
            f"bit tight for a {state.destination_city} trip. 💰 Enter it again to "
            f"confirm, or provide your actual budget.",
            low_budget_warning=amount,
        )

    return accept(budget=text, budget_amount=amount, low_budget_warning=None)


def match_purpose(text: str) -> TripPurpose | None:
    lowered = text.lower()
    for purpose, synonyms in PURPOSE_SYNONYMS:
        if any(synonym in lowered for synonym in synonyms):
            return purpose
    return None


async def ask_purpose(state: ConversationState, services: NodeServices) -> dict[str, Any]:
    if not state.last_user_input:
        return {
            "response_message": f"Perfect! I've noted your budget of {state.budget}. "
            f"🎯 Is this trip for business or vacation?"
        }

    purpose = match_purpose(state.last_user_input)
    if purpose is None:
        return reject(
            "Please specify if this is a 'business' or 'vacation' trip.",
            "Please specify if this is a 'business' or 'vacation' trip. 🎯",
        )
    return accept(purpose=purpose)


async def ask_planning_type(
    state: ConversationState, services: NodeServices
) -> dict[str, Any]:
    if not state.last_user_input:
        purpose = state.purpose.value if state.purpose else "upcoming"
        return {
            "response_message": f"Great! This is a {purpose} trip. 🗺️ What would you "
            "like help planning? You can mention:\n"
            "1. Transportation (flights, local transport)\n"
            "2. Accommodation (hotels, stays)\n"
            "3. Activities & sightseeing\n\n"
            "Just tell me what interests you!"
        }

    text = state.last_user_input.strip()
    if len(text) < 2:
        message = (
            "Please tell me what you'd like help planning (transportation, "
            "accommodation, activities, or all)."
        )
        return reject(message, message)

    request = await parse_planning_request(text, services.reasoning, services.timeout)
    logger.info(
        f"Planning {[c.value for c in request.categories]} ({request.source}), "
        f"interests: {request.interests}"
    )

    if len(request.categories) == len(ALL_CATEGORIES):
        planning_text = "all three"
    else:
        planning_text = ", ".join(c.value for c in request.categories)

    return accept(
        planning_type=request.categories,
        interests=request.interests,
        response_message=f"Perfect! I'll help you plan {planning_text}. 🔍 Let me "
        f"search for the best options for your trip from {state.origin_city} to "
        f"{state.destination_city}...",
    )


ContextBuilder = Callable[[ConversationState], str]


def _route(state: ConversationState) -> str:
    return f"User is traveling from {state.origin_city} to {state.destination_city}"


def _dates(state: ConversationState) -> str:
    return f"{_route(state)}, from {state.start_date} to {state.end_date}"


# Context and requested information for each personalized question
PERSONALIZATION: dict[str, tuple[ContextBuilder, str]] = {
    NodeId.ASK_DESTINATION: (
        lambda s: f"User is traveling from {s.origin_city}",
        "their destination city",
    ),
    NodeId.ASK_START_DATE: (
        _route,
        "when they want to start their trip (start date)",
    ),
    NodeId.ASK_END_DATE: (
        lambda s: f"{_route(s)}, starting {s.start_date}",
        "when they want to return (end date)",
    ),
    NodeId.ASK_TRAVELERS: (_dates, "how many people are traveling"),
    NodeId.ASK_BUDGET: (
        lambda s: f"{_dates(s)}, with {_people(s.travelers)}",
        "their budget for the trip",
    ),
    NodeId.ASK_PURPOSE: (
        lambda s: f"{_dates(s)}, with {_people(s.travelers)}, budget: {s.budget}",
        "whether this is a business or vacation trip",
    ),
    NodeId.ASK_PLANNING_TYPE: (
        lambda s: (
            f"User is planning a {s.purpose.value if s.purpose else ''} trip from "
            f"{s.origin_city} to {s.destination_city}, from {s.start_date} to "
            f"{s.end_date}, with {_people(s.travelers)}, budget: {s.budget}"
        ),
        "what they need help planning (transportation, accommodation, activities)",
    ),
}


def personalization_prompt(node_id: str, state: ConversationState) -> str | None:
    """Prompt for a warmer phrasing of a node's question, if it has one."""
    entry = PERSONALIZATION.get(node_id)
    if entry is None:
        return None
    build_context, next_step = entry
    return render_template(
        PERSONALIZE_QUESTION, context=build_context(state), next_step=next_step
    )
