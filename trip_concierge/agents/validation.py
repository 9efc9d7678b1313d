"""
Budget and schedule validation of search results.

The reasoning gateway estimates what the whole trip will cost from the raw
search excerpts. When it is unavailable or its estimate is unusable, a
deterministic scan of the result text looks for prices and compares the
cheapest ones against fixed shares of the budget. Both paths produce the
same ``ValidationResult`` so routing does not depend on which one ran.

Issue strings for the two critical conditions start with a stable marker
(``TOTAL_BUDGET_EXCEEDED:`` or ``FLIGHTS_BUDGET_EXCEEDED:``); a total budget
issue is always listed first.
"""

import re

from pydantic import ValidationError as PydanticValidationError

from trip_concierge.agents.gateways import ReasoningGateway
from trip_concierge.data.models import (
    CostEstimate,
    PlanningCategory,
    SearchResult,
    TransportationType,
    TripDetails,
    ValidationResult,
)
from trip_concierge.prompts.templates import VALIDATE_COSTS, render_template
from trip_concierge.utils.error_handling import GatewayError, call_with_timeout
from trip_concierge.utils.helpers import (
    days_between,
    extract_json_object,
    format_price,
    nights_between,
    parse_amount,
    truncate_text,
)
from trip_concierge.utils.logging import get_logger

logger = get_logger(__name__)

TOTAL_BUDGET_MARKER = "TOTAL_BUDGET_EXCEEDED"
FLIGHTS_BUDGET_MARKER = "FLIGHTS_BUDGET_EXCEEDED"

TRANSPORTATION_BUDGET_SHARE = 0.40
ACCOMMODATION_BUDGET_SHARE = 0.50

TRANSPORT_PRICE_PATTERNS = [
    re.compile(r"\$\s*(\d+)"),
    re.compile(r"(\d+)\s*(?:USD|dollars?)", re.IGNORECASE),
    re.compile(r"price[:\s]+\$?\s*(\d+)", re.IGNORECASE),
]
ACCOMMODATION_PRICE_PATTERN = re.compile(r"\$(\d+)")
THOUSANDS_SEPARATOR = re.compile(r"(?<=\d),(?=\d{3}\b)")
MIN_PLAUSIBLE_PRICE = 10
MAX_PLAUSIBLE_PRICE = 10000

MULTI_DAY_MARKERS = ("multi-day", "week-long")
SHORT_TRIP_DAYS = 3

SUMMARY_RESULTS = 5
SUMMARY_EXCERPT_LENGTH = 400

ESTIMATE_FIELDS = {
    "transportationCostPerPerson": "transportation_cost_per_person",
    "transportationTotalCost": "transportation_total_cost",
    "accommodationTotalCost": "accommodation_total_cost",
    "activitiesEstimate": "activities_estimate",
    "foodEstimate": "food_estimate",
    "totalEstimatedCost": "total_estimated_cost",
    "explanation": "explanation",
}

SearchResults = dict[PlanningCategory, list[SearchResult]]


def budget_amount_of(trip: TripDetails) -> float | None:
    """Numeric budget, or None when the budget holds no number."""
    return trip.budget_amount or parse_amount(trip.budget)


def results_text(results: list[SearchResult]) -> str:
    """Flatten results into one searchable string, thousands separators removed."""
    text = "\n".join(f"{r.title}\n{r.content}\n{r.url}" for r in results)
    return THOUSANDS_SEPARATOR.sub("", text)


def find_transport_prices(text: str) -> list[int]:
    """All plausible prices mentioned in transportation results."""
    prices = []
    for pattern in TRANSPORT_PRICE_PATTERNS:
        for match in pattern.finditer(text):
            price = int(match.group(1))
            if MIN_PLAUSIBLE_PRICE < price < MAX_PLAUSIBLE_PRICE:
                prices.append(price)
    return prices


def find_accommodation_prices(text: str) -> list[int]:
    return [
        int(match.group(1))
        for match in ACCOMMODATION_PRICE_PATTERN.finditer(text)
        if int(match.group(1)) > 0
    ]


def check_schedule(trip: TripDetails, results: SearchResults) -> list[str]:
    """Flag multi-day activities on trips shorter than three days."""
    activities = results.get(PlanningCategory.ACTIVITIES)
    if not activities or not trip.start_date or not trip.end_date:
        return []

    duration = nights_between(trip.start_date, trip.end_date)
    text = results_text(activities).lower()
    if duration < SHORT_TRIP_DAYS and any(m in text for m in MULTI_DAY_MARKERS):
        return [
            f"Some activities found require more time than your "
            f"{duration}-day trip allows"
        ]
    return []


def validate_locally(trip: TripDetails, results: SearchResults) -> ValidationResult:
    """
    Deterministic validation from prices found in the result text.

    The cheapest transportation price is multiplied by the traveler count and
    compared with 40% of the budget (flights only). The cheapest nightly rate
    is multiplied by the night count and compared with 50% of the budget.
    """
    budget_issues: list[str] = []
    flights_exceeded = False
    accommodation_exceeded = False
    budget = budget_amount_of(trip)
    travelers = trip.traveler_count

    transportation = results.get(PlanningCategory.TRANSPORTATION)
    if (
        budget
        and transportation
        and trip.transportation_type == TransportationType.FLIGHTS
    ):
        prices = find_transport_prices(results_text(transportation))
        if prices:
            cheapest = min(prices)
            transport_cost = cheapest * travelers
            threshold = budget * TRANSPORTATION_BUDGET_SHARE
            logger.debug(
                f"Cheapest fare {format_price(cheapest)} x {travelers} = "
                f"{format_price(transport_cost)}, threshold {format_price(threshold)}"
            )
            if transport_cost > threshold:
                flights_exceeded = True
                budget_issues.append(
                    f"{FLIGHTS_BUDGET_MARKER}: Flight costs (estimated "
                    f"{format_price(transport_cost)} = {format_price(cheapest)} x "
                    f"{travelers} people) exceed 40% of your {format_price(budget)} "
                    f"budget. Threshold is {format_price(threshold)}."
                )
        else:
            logger.debug("No prices found in transportation results")

    accommodation = results.get(PlanningCategory.ACCOMMODATION)
    if budget and accommodation:
        prices = find_accommodation_prices(results_text(accommodation))
        if prices:
            nights = nights_between(trip.start_date, trip.end_date)
            stay_cost = min(prices) * nights
            if stay_cost > budget * ACCOMMODATION_BUDGET_SHARE:
                accommodation_exceeded = True
                budget_issues.append(
                    f"Accommodation costs (estimated {format_price(stay_cost)} for "
                    f"{nights} nights) may exceed 50% of your budget"
                )

    return ValidationResult(
        budget_issues=budget_issues,
        schedule_issues=check_schedule(trip, results),
        flights_budget_exceeded=flights_exceeded,
        accommodation_budget_exceeded=accommodation_exceeded,
        source="fallback",
    )


def summarize_results(results: list[SearchResult] | None, label: str) -> str:
    """Numbered excerpt of the first results for the validation prompt."""
    if not results:
        return f"No {label} results"
    return "\n\n".join(
        f"{i}. {r.title}\n"
        f"{truncate_text(r.content, SUMMARY_EXCERPT_LENGTH) or 'No details'}\n"
        f"URL: {r.url}"
        for i, r in enumerate(results[:SUMMARY_RESULTS], start=1)
    )


def parse_cost_estimate(reply: str) -> tuple[CostEstimate, dict] | None:
    """
    Parse the estimate embedded in a reasoning reply.

    Returns:
        The estimate and the raw object, or None if the reply holds no JSON,
        lacks a total, or has negative or non-numeric amounts
    """
    parsed = extract_json_object(reply)
    if parsed is None or "totalEstimatedCost" not in parsed:
        return None

    fields = {
        name: parsed[key]
        for key, name in ESTIMATE_FIELDS.items()
        if parsed.get(key) is not None
    }
    try:
        return CostEstimate.model_validate(fields), parsed
    except PydanticValidationError as e:
        logger.warning(f"Rejected cost estimate: {e.error_count()} invalid fields")
        return None


def result_from_estimate(
    trip: TripDetails,
    estimate: CostEstimate,
    raw: dict,
    schedule_issues: list[str],
) -> ValidationResult:
    """Turn a cost estimate into issue strings and flags."""
    budget = budget_amount_of(trip)
    if not budget:
        return ValidationResult(
            schedule_issues=schedule_issues, source="reasoning", estimate=estimate
        )

    is_flights = trip.transportation_type == TransportationType.FLIGHTS
    total_exceeded = (
        raw.get("totalBudgetExceeded") is True
        or estimate.total_estimated_cost > budget
    )
    flights_exceeded = is_flights and (
        raw.get("flightsBudgetExceeded") is True
        or estimate.transportation_total_cost > budget * TRANSPORTATION_BUDGET_SHARE
    )

    reported = raw.get("budgetIssues")
    if not isinstance(reported, list):
        reported = []
    budget_issues = [
        issue.strip()
        for issue in reported
        if isinstance(issue, str)
        and issue.strip()
        and not issue.startswith((TOTAL_BUDGET_MARKER, FLIGHTS_BUDGET_MARKER))
    ]

    if flights_exceeded:
        budget_issues.append(
            f"{FLIGHTS_BUDGET_MARKER}: Flight costs "
            f"({format_price(estimate.transportation_total_cost)} = "
            f"{format_price(estimate.transportation_cost_per_person)}/person x "
            f"{trip.traveler_count} people) exceed 40% of your "
            f"{trip.budget} budget."
        )

    if total_exceeded:
        total = estimate.total_estimated_cost
        if total > budget:
            detail = (
                f"exceeds your budget ({trip.budget}) by "
                f"{format_price(total - budget)}. You need at least "
                f"{format_price(total)} for this trip."
            )
        else:
            detail = f"is likely to exceed your budget ({trip.budget})."
        budget_issues.insert(
            0, f"{TOTAL_BUDGET_MARKER}: Total trip cost ({format_price(total)}) {detail}"
        )

    return ValidationResult(
        budget_issues=budget_issues,
        schedule_issues=schedule_issues,
        flights_budget_exceeded=flights_exceeded,
        total_budget_exceeded=total_exceeded,
        accommodation_budget_exceeded=(
            estimate.accommodation_total_cost > budget * ACCOMMODATION_BUDGET_SHARE
        ),
        source="reasoning",
        estimate=estimate,
    )


async def validate_results(
    trip: TripDetails,
    results: SearchResults,
    reasoning: ReasoningGateway | None,
    timeout: float,
) -> ValidationResult:
    """
    Cross-check fresh search results against the budget and schedule.

    Args:
        trip: Collected trip parameters
        results: Search results per selected category
        reasoning: Reasoning gateway, or None to validate locally only
        timeout: Seconds allowed for the gateway call

    Returns:
        Budget and schedule issues with the derived flags
    """
    if reasoning is not None:
        transport_label = (
            "FLIGHTS"
            if trip.transportation_type == TransportationType.FLIGHTS
            else "BUSES"
        )
        prompt = render_template(
            VALIDATE_COSTS,
            origin=trip.origin_city,
            destination=trip.destination_city,
            start_date=trip.start_date,
            end_date=trip.end_date,
            nights=nights_between(trip.start_date, trip.end_date),
            days=days_between(trip.start_date, trip.end_date),
            travelers=trip.traveler_count,
            budget=trip.budget,
            purpose=trip.purpose.value if trip.purpose else "unspecified",
            transport_type=trip.transportation_type.value,
            transport_label=transport_label,
            transportation_summary=summarize_results(
                results.get(PlanningCategory.TRANSPORTATION), "transportation"
            ),
            accommodation_summary=summarize_results(
                results.get(PlanningCategory.ACCOMMODATION), "accommodation"
            ),
            activities_summary=summarize_results(
                results.get(PlanningCategory.ACTIVITIES), "activities"
            ),
        )
        try:
            reply = await call_with_timeout(
                reasoning.complete(prompt), timeout, "reasoning"
            )
            parsed = parse_cost_estimate(reply)
            if parsed is not None:
                estimate, raw = parsed
                result = result_from_estimate(
                    trip, estimate, raw, check_schedule(trip, results)
                )
                _log_result(result)
                return result
            logger.warning("Unusable cost estimate, validating locally")
        except GatewayError as e:
            logger.warning(f"Validation falling back to local price scan: {e!s}")

    result = validate_locally(trip, results)
    _log_result(result)
    return result


def _log_result(result: ValidationResult) -> None:
    logger.info(
        f"Validation ({result.source}): {len(result.budget_issues)} budget issues, "
        f"{len(result.schedule_issues)} schedule issues"
    )
