"""
Budget allocation across the five trip spending categories.

The reasoning gateway proposes a split that reflects the destination and
group size. Its answer is only trusted when every amount is a non-negative
number and the amounts add up to the total; otherwise a fixed percentage
formula is used. Either way the returned allocation sums to the total, with
the contingency absorbing any rounding residue.
"""

import math

from pydantic import ValidationError as PydanticValidationError

from trip_concierge.agents.gateways import ReasoningGateway
from trip_concierge.data.models import BudgetAllocation, TransportationType, TripDetails
from trip_concierge.prompts.templates import ALLOCATE_BUDGET, render_template
from trip_concierge.utils.error_handling import GatewayError, call_with_timeout
from trip_concierge.utils.helpers import (
    days_between,
    extract_json_object,
    format_price,
    nights_between,
    parse_amount,
)
from trip_concierge.utils.logging import get_logger

logger = get_logger(__name__)

TRANSPORTATION_SHARE = {
    TransportationType.FLIGHTS: 0.40,
    TransportationType.BUSES: 0.12,
}
ACCOMMODATION_SHARE = 0.30
FOOD_SHARE = 0.20
ACTIVITIES_SHARE = 0.08

ALLOCATION_FIELDS = ("transportation", "accommodation", "food", "activities", "contingency")
MIN_SUM_TOLERANCE = 10.0
RELATIVE_SUM_TOLERANCE = 0.01


def resolve_total_budget(trip: TripDetails, default_budget: float) -> float:
    """Numeric trip budget, or the default when the budget holds no number."""
    if trip.budget_amount:
        return trip.budget_amount
    return parse_amount(trip.budget) or default_budget


def sum_tolerance(total: float) -> float:
    """Largest accepted gap between an allocation's sum and the total."""
    return max(MIN_SUM_TOLERANCE, total * RELATIVE_SUM_TOLERANCE)


def fallback_allocation(
    total: float, transport_type: TransportationType = TransportationType.FLIGHTS
) -> BudgetAllocation:
    """
    Split the budget with fixed percentages.

    Transportation takes 40% for flights or 12% for buses, accommodation 30%,
    food 20% and activities 8%. The contingency receives the remainder.
    """
    transportation = round(total * TRANSPORTATION_SHARE[transport_type], 2)
    accommodation = round(total * ACCOMMODATION_SHARE, 2)
    food = round(total * FOOD_SHARE, 2)
    activities = round(total * ACTIVITIES_SHARE, 2)
    contingency = round(total - (transportation + accommodation + food + activities), 2)

    return BudgetAllocation(
        transportation=transportation,
        accommodation=accommodation,
        food=food,
        activities=activities,
        contingency=max(0.0, contingency),
        explanation="Fixed percentage allocation",
        source="fallback",
    )


def allocation_from_reply(reply: str, total: float) -> BudgetAllocation | None:
    """
    Validate a reasoning reply and turn it into an allocation.

    Args:
        reply: Free-text model output expected to embed a JSON object
        total: Total budget the amounts must add up to

    Returns:
        The allocation with its residue folded into contingency, or None if
        the reply is missing fields, holds negative or non-numeric amounts,
        or does not sum to the total
    """
    parsed = extract_json_object(reply)
    if parsed is None:
        return None

    amounts: dict[str, float] = {}
    for name in ALLOCATION_FIELDS:
        value = parsed.get(name)
        if isinstance(value, bool) or not isinstance(value, int | float):
            logger.warning(f"Allocation field {name!r} is not numeric: {value!r}")
            return None
        try:
            amount = float(value)
        except OverflowError:
            amount = math.inf
        if not math.isfinite(amount):
            logger.warning(f"Allocation field {name!r} is not finite")
            return None
        if amount < 0:
            logger.warning(f"Allocation field {name!r} is negative: {value}")
            return None
        amounts[name] = amount

    residue = total - sum(amounts.values())
    if abs(residue) > sum_tolerance(total):
        logger.warning(
            f"Allocation sums to {sum(amounts.values()):.2f}, "
            f"expected {total:.2f}"
        )
        return None

    amounts["contingency"] = round(amounts["contingency"] + residue, 2)
    if amounts["contingency"] < 0:
        return None

    explanation = parsed.get("explanation")
    try:
        return BudgetAllocation(
            **amounts,
            explanation=explanation if isinstance(explanation, str) else None,
            source="reasoning",
        )
    except PydanticValidationError as e:
        logger.warning(f"Rejected allocation: {e.error_count()} invalid fields")
        return None


async def allocate_budget(
    trip: TripDetails,
    reasoning: ReasoningGateway | None,
    timeout: float,
    default_budget: float = 1000,
) -> BudgetAllocation:
    """
    Propose a five-way split of the trip budget.

    Args:
        trip: Collected trip parameters
        reasoning: Reasoning gateway, or None to use the fixed formula
        timeout: Seconds allowed for the gateway call
        default_budget: Total assumed when the budget holds no number

    Returns:
        An allocation that sums to the total budget
    """
    total = resolve_total_budget(trip, default_budget)

    if reasoning is not None:
        nights = nights_between(trip.start_date, trip.end_date)
        prompt = render_template(
            ALLOCATE_BUDGET,
            origin=trip.origin_city,
            destination=trip.destination_city,
            nights=nights,
            days=days_between(trip.start_date, trip.end_date),
            travelers=trip.traveler_count,
            total=f"{total:.0f}",
            purpose=trip.purpose.value if trip.purpose else "unspecified",
            transport_type=trip.transportation_type.value,
            categories=trip.categories_text,
        )
        try:
            reply = await call_with_timeout(
                reasoning.complete(prompt), timeout, "reasoning"
            )
            allocation = allocation_from_reply(reply, total)
            if allocation is not None:
                _log_allocation(allocation, total)
                return allocation
            logger.warning("Reasoning allocation rejected, using fixed percentages")
        except GatewayError as e:
            logger.warning(f"Budget allocation falling back to fixed percentages: {e!s}")

    allocation = fallback_allocation(total, trip.transportation_type)
    _log_allocation(allocation, total)
    return allocation


def _log_allocation(allocation: BudgetAllocation, total: float) -> None:
    breakdown = ", ".join(
        f"{name}={format_price(getattr(allocation, name))}" for name in ALLOCATION_FIELDS
    )
    logger.info(
        f"Budget allocation ({allocation.source}) of {format_price(total)}: {breakdown}"
    )
