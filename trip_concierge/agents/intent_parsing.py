"""
Free-text interpretation for the ask nodes.

Dates and planning requests are first handed to the reasoning gateway; when
the gateway fails or replies with something unusable, a local parser takes
over so the conversation can always continue.
"""

import re
from datetime import date, datetime
from typing import Literal

from dateutil import parser as date_parser
from pydantic import BaseModel

from trip_concierge.agents.gateways import ReasoningGateway
from trip_concierge.data.models import ALL_CATEGORIES, PlanningCategory
from trip_concierge.prompts.templates import (
    PARSE_DATE,
    PARSE_PLANNING_TYPE,
    render_template,
)
from trip_concierge.utils.error_handling import GatewayError, call_with_timeout
from trip_concierge.utils.helpers import extract_json_object
from trip_concierge.utils.logging import get_logger

logger = get_logger(__name__)

ISO_DATE_PATTERN = re.compile(r"\b(\d{4}-\d{2}-\d{2})\b")

CATEGORY_KEYWORDS: dict[PlanningCategory, tuple[str, ...]] = {
    PlanningCategory.TRANSPORTATION: ("transportation", "transport", "flight"),
    PlanningCategory.ACCOMMODATION: ("accommodation", "hotel", "stay", "lodging"),
    PlanningCategory.ACTIVITIES: ("activit", "sightseeing", "things to do"),
}
ALL_CATEGORIES_PATTERN = re.compile(r"\b(all|everything|three|both)\b")

INTEREST_KEYWORDS: list[tuple[str, tuple[str, ...]]] = [
    ("adventure", ("adventure",)),
    ("culture", ("culture", "history")),
    ("food", ("food", "dining")),
    ("nature", ("nature", "outdoor")),
    ("shopping", ("shopping",)),
    ("relaxation", ("relax", "spa")),
]


class PlanningRequest(BaseModel):
    """Categories and interests extracted from the planning answer."""

    categories: list[PlanningCategory]
    interests: str | None = None
    source: Literal["reasoning", "fallback"] = "fallback"


def extract_iso_date(text: str | None) -> date | None:
    """Return the first valid YYYY-MM-DD date found in the text."""
    if not text:
        return None
    match = ISO_DATE_PATTERN.search(text)
    if not match:
        return None
    try:
        return date.fromisoformat(match.group(1))
    except ValueError:
        return None


def parse_date_locally(text: str, today: date) -> date | None:
    """
    Parse a date with dateutil, assuming the reference year when none is given.

    Args:
        text: User input such as "March 16" or "3/16/2026"
        today: Reference date supplying the default year

    Returns:
        The parsed date, or None if the text is not a date
    """
    iso = extract_iso_date(text)
    if iso:
        return iso

    default = datetime(today.year, today.month, today.day)
    try:
        return date_parser.parse(text, default=default).date()
    except (ValueError, OverflowError):
        return None


async def parse_date(
    text: str,
    today: date,
    reasoning: ReasoningGateway | None,
    timeout: float,
    start_date: str | None = None,
) -> date | None:
    """
    Resolve free-text date input to a calendar date.

    Args:
        text: User input
        today: Reference "current date"
        reasoning: Reasoning gateway, or None to parse locally only
        timeout: Seconds allowed for the gateway call
        start_date: Already accepted trip start date, given to the model as
            context when parsing an end date

    Returns:
        The parsed date, or None if neither path understood the input
    """
    if reasoning is not None:
        prompt = render_template(
            PARSE_DATE,
            user_input=text,
            today=today.strftime("%B %d, %Y"),
            year=today.year,
            extra_context=f"Trip start date: {start_date}\n" if start_date else "",
            example=f"{today.year}-03-16",
        )
        try:
            reply = await call_with_timeout(
                reasoning.complete(prompt), timeout, "reasoning"
            )
            parsed = extract_iso_date(reply)
            if parsed:
                logger.debug(f"Reasoning parsed date {text!r} as {parsed}")
                return parsed
            logger.warning(f"Unusable date from reasoning gateway: {reply!r}")
        except GatewayError as e:
            logger.warning(f"Date parsing falling back to local parser: {e!s}")

    return parse_date_locally(text, today)


def match_categories(text: str) -> list[PlanningCategory]:
    """Keyword match planning categories, in canonical order."""
    lowered = text.lower()
    if ALL_CATEGORIES_PATTERN.search(lowered):
        return list(ALL_CATEGORIES)
    return [
        category
        for category in ALL_CATEGORIES
        if any(keyword in lowered for keyword in CATEGORY_KEYWORDS[category])
    ]


def match_interests(text: str) -> str | None:
    """Keyword match interest themes as a comma-separated string."""
    lowered = text.lower()
    found = [
        interest
        for interest, keywords in INTEREST_KEYWORDS
        if any(keyword in lowered for keyword in keywords)
    ]
    return ", ".join(found) or None


def _categories_from_reply(values: object) -> list[PlanningCategory]:
    if not isinstance(values, list):
        return []
    wanted = {str(value).strip().lower() for value in values}
    return [category for category in ALL_CATEGORIES if category.value in wanted]


async def parse_planning_request(
    text: str, reasoning: ReasoningGateway | None, timeout: float
) -> PlanningRequest:
    """
    Classify the planning answer into categories and interests.

    An answer that names no category under either path selects all three.
    """
    if reasoning is not None:
        prompt = render_template(PARSE_PLANNING_TYPE, user_input=text)
        try:
            reply = await call_with_timeout(
                reasoning.complete(prompt), timeout, "reasoning"
            )
            parsed = extract_json_object(reply)
            if parsed is not None:
                categories = _categories_from_reply(parsed.get("planningTypes"))
                interests = parsed.get("interests")
                if not isinstance(interests, str):
                    interests = ""
                return PlanningRequest(
                    categories=categories or list(ALL_CATEGORIES),
                    interests=interests.strip() or None,
                    source="reasoning",
                )
            logger.warning("Planning reply held no JSON object, using keywords")
        except GatewayError as e:
            logger.warning(f"Planning parsing falling back to keywords: {e!s}")

    categories = match_categories(text)
    return PlanningRequest(
        categories=categories or list(ALL_CATEGORIES),
        interests=match_interests(text),
    )
