"""
Final trip plan composition.

Builds the closing message: the collected trip parameters, ranked options
for each selected category, the budget allocation and a day-by-day
itinerary. Each reasoning call has its own deterministic fallback, so a plan
is always produced.
"""

import asyncio

from trip_concierge.agents.gateways import ReasoningGateway
from trip_concierge.data.models import (
    BudgetAllocation,
    PlanningCategory,
    SearchResult,
    TransportationType,
    TripDetails,
    TripPurpose,
)
from trip_concierge.prompts.templates import (
    DAILY_ITINERARY,
    FALLBACK_ITINERARY,
    RANK_ACCOMMODATION,
    RANK_ACTIVITIES,
    RANK_TRANSPORTATION,
    render_template,
)
from trip_concierge.utils.error_handling import GatewayError, call_with_timeout
from trip_concierge.utils.helpers import days_between, format_price, pluralize, truncate_text
from trip_concierge.utils.logging import get_logger

logger = get_logger(__name__)

TOP_RESULTS = {
    PlanningCategory.TRANSPORTATION: 3,
    PlanningCategory.ACCOMMODATION: 3,
    PlanningCategory.ACTIVITIES: 5,
}
RANKING_PROMPTS = {
    PlanningCategory.TRANSPORTATION: RANK_TRANSPORTATION,
    PlanningCategory.ACCOMMODATION: RANK_ACCOMMODATION,
    PlanningCategory.ACTIVITIES: RANK_ACTIVITIES,
}
RANKING_EXCERPT_LENGTH = 300

INTEREST_SUGGESTIONS = [
    (("adventure",), "Outdoor activities, hiking, water sports"),
    (("culture", "history"), "Museums, historical sites, local cultural experiences"),
    (("food",), "Food tours, local restaurants, cooking classes"),
    (("nature",), "Parks, gardens, nature walks, scenic viewpoints"),
    (("shopping",), "Local markets, shopping districts, boutique stores"),
    (("relax",), "Spas, beaches, quiet cafes, peaceful gardens"),
]

CLOSING_HINT = 'Would you like to start planning another trip? Just say "start over"! ✈️'

SearchResults = dict[PlanningCategory, list[SearchResult]]


def category_heading(category: PlanningCategory, trip: TripDetails) -> str:
    if category == PlanningCategory.TRANSPORTATION:
        icon = "🚌" if trip.transportation_type == TransportationType.BUSES else "✈️"
        return f"{icon} **Transportation:**"
    if category == PlanningCategory.ACCOMMODATION:
        return "🏨 **Accommodation:**"
    return "🎨 **Activities & Sightseeing:**"


def list_top_results(results: list[SearchResult], top_n: int) -> str:
    """Plain numbered listing of the first results as markdown links."""
    return "\n".join(
        f"{i}. [{r.title}]({r.url})" for i, r in enumerate(results[:top_n], start=1)
    )


def general_advice(category: PlanningCategory, trip: TripDetails) -> str:
    """Generic suggestions for a category that has no search results."""
    travelers = trip.traveler_count
    people = pluralize(travelers, "person", "people")

    if category == PlanningCategory.TRANSPORTATION:
        tickets = pluralize(travelers, "ticket", "tickets")
        lines = [
            f"Book {travelers} {tickets} from {trip.origin_city} to {trip.destination_city}",
            "Consider airport transfers or local transportation options",
            "Look into rental cars or public transit passes",
        ]
    elif category == PlanningCategory.ACCOMMODATION:
        if trip.purpose == TripPurpose.BUSINESS:
            lines = [
                "Business hotels near conference centers or downtown",
                "Look for hotels with meeting rooms and good WiFi",
            ]
        else:
            lines = [
                "Consider hotels, vacation rentals or apartments",
                "Look for places in convenient neighborhoods",
            ]
        lines.append(
            f"Book accommodations for {travelers} {people} that fit your "
            f"{trip.budget} budget"
        )
    else:
        lines = []
        interests = (trip.interests or "").lower()
        for keywords, suggestion in INTEREST_SUGGESTIONS:
            if any(keyword in interests for keyword in keywords):
                lines.append(suggestion)
        lines += [
            f"Top attractions in {trip.destination_city}",
            "Local experiences and hidden gems",
        ]
        if trip.interests:
            return f"Based on your interest in {trip.interests}:\n" + "\n".join(
                f"- {line}" for line in lines
            )

    return "\n".join(f"- {line}" for line in lines)


async def rank_options(
    category: PlanningCategory,
    trip: TripDetails,
    results: list[SearchResult],
    reasoning: ReasoningGateway | None,
    timeout: float,
) -> str:
    """
    Ask the reasoning gateway to pick and explain the best options.

    Falls back to listing the first results verbatim.
    """
    top_n = TOP_RESULTS[category]
    if reasoning is None:
        return list_top_results(results, top_n)

    label = "Activity" if category == PlanningCategory.ACTIVITIES else "Option"
    listing = "\n".join(
        f"{label} {i}: {r.title}\n"
        f"{truncate_text(r.content, RANKING_EXCERPT_LENGTH) or 'No details'}\n"
        f"URL: {r.url}\n"
        for i, r in enumerate(results, start=1)
    )
    prompt = render_template(
        RANKING_PROMPTS[category],
        origin=trip.origin_city,
        destination=trip.destination_city,
        start_date=trip.start_date,
        end_date=trip.end_date,
        travelers=trip.traveler_count,
        budget=trip.budget,
        purpose=trip.purpose.value if trip.purpose else "leisure",
        interests=trip.interests or "general travel",
        results=listing,
        top_n=top_n,
    )
    try:
        return await call_with_timeout(reasoning.complete(prompt), timeout, "reasoning")
    except GatewayError as e:
        logger.warning(f"Ranking {category.value} falling back to plain list: {e!s}")
        return list_top_results(results, top_n)


async def generate_itinerary(
    trip: TripDetails,
    results: SearchResults,
    reasoning: ReasoningGateway | None,
    timeout: float,
) -> str:
    """Day-by-day itinerary, or a generic paragraph if the gateway fails."""
    if reasoning is None:
        return FALLBACK_ITINERARY

    prompt = render_template(
        DAILY_ITINERARY,
        origin=trip.origin_city,
        destination=trip.destination_city,
        start_date=trip.start_date,
        end_date=trip.end_date,
        days=days_between(trip.start_date, trip.end_date),
        travelers=trip.traveler_count,
        budget=trip.budget,
        purpose=trip.purpose.value if trip.purpose else "leisure",
        interests=trip.interests or "general travel",
        transportation_count=len(results.get(PlanningCategory.TRANSPORTATION) or []),
        accommodation_count=len(results.get(PlanningCategory.ACCOMMODATION) or []),
        activities_count=len(results.get(PlanningCategory.ACTIVITIES) or []),
    )
    try:
        return await call_with_timeout(reasoning.complete(prompt), timeout, "reasoning")
    except GatewayError as e:
        logger.warning(f"Itinerary falling back to generic suggestions: {e!s}")
        return FALLBACK_ITINERARY


def trip_summary(trip: TripDetails) -> str:
    lines = [
        "🎉 Fantastic! I've compiled your personalized travel plan:",
        "",
        f"📍 **Route:** {trip.origin_city} → {trip.destination_city}",
        f"👥 **Travelers:** {trip.traveler_count} "
        f"{pluralize(trip.traveler_count, 'person', 'people')}",
        f"📅 **Dates:** {trip.start_date} to {trip.end_date}",
        f"💰 **Budget:** {trip.budget}",
        f"🎯 **Purpose:** {trip.purpose.value if trip.purpose else 'unspecified'}",
        f"🗺️ **Planning:** {trip.categories_text}",
    ]
    if trip.interests:
        lines.append(f"🎨 **Interests:** {trip.interests}")
    if trip.transportation_type == TransportationType.BUSES:
        lines.append("🚌 **Getting there:** by bus")
    return "\n".join(lines)


def allocation_summary(allocation: BudgetAllocation) -> str:
    return "\n".join(
        [
            "💵 **Budget Allocation:**",
            f"- Transportation: {format_price(allocation.transportation)}",
            f"- Accommodation: {format_price(allocation.accommodation)}",
            f"- Food: {format_price(allocation.food)}",
            f"- Activities: {format_price(allocation.activities)}",
            f"- Contingency: {format_price(allocation.contingency)}",
        ]
    )


async def compose_plan(
    trip: TripDetails,
    results: SearchResults,
    reasoning: ReasoningGateway | None,
    timeout: float,
    allocation: BudgetAllocation | None = None,
    notes: list[str] | None = None,
) -> str:
    """
    Compose the final plan text.

    Args:
        trip: Collected trip parameters
        results: Search results per category; missing or empty lists get
            general advice instead of ranked options
        reasoning: Reasoning gateway, or None to use the fallbacks only
        timeout: Seconds allowed for each gateway call
        allocation: Budget split to summarize, if one was made
        notes: Search notes to surface, such as a failed search

    Returns:
        Markdown-formatted plan ending with the start-over hint
    """
    categories = trip.planning_type or []
    searched = [c for c in categories if results.get(c)]

    rankings = await asyncio.gather(
        *(rank_options(c, trip, results[c], reasoning, timeout) for c in searched)
    )
    ranked = dict(zip(searched, rankings, strict=True))

    sections = [trip_summary(trip), "**Here are your personalized recommendations:**"]
    for category in categories:
        body = ranked.get(category) or general_advice(category, trip)
        sections.append(f"{category_heading(category, trip)}\n{body}")

    if allocation is not None:
        sections.append(allocation_summary(allocation))

    if notes:
        sections.append("📝 **Search Notes:**\n" + "\n".join(f"- {n}" for n in notes))

    if any(results.get(c) for c in PlanningCategory):
        sections.append(await generate_itinerary(trip, results, reasoning, timeout))

    sections.append(CLOSING_HINT)
    return "\n\n".join(sections)
