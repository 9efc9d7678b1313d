"""
Helper utilities for the Trip Concierge system.

This module provides general utility functions used across the application:
identifiers, text truncation, amount parsing and JSON extraction from model
output.
"""

import json
import re
import uuid
from datetime import date, datetime
from typing import Any

AMOUNT_PATTERN = re.compile(r"\d[\d,]*(?:\.\d+)?")
JSON_OBJECT_PATTERN = re.compile(r"\{[\s\S]*\}")


def generate_session_id() -> str:
    """
    Generate a unique session ID for a conversation.

    Returns:
        A unique session ID string
    """
    timestamp = datetime.now().strftime("%Y%m%d%H%M%S")
    unique_part = str(uuid.uuid4())[:8]
    return f"trip-{timestamp}-{unique_part}"


def truncate_text(text: str, max_length: int = 100, suffix: str = "...") -> str:
    """
    Truncate text to a maximum length, adding a suffix if truncated.

    Args:
        text: Text to truncate
        max_length: Maximum length
        suffix: Suffix to add if truncated

    Returns:
        Truncated text
    """
    if len(text) <= max_length:
        return text

    return text[: max_length - len(suffix)] + suffix


def parse_amount(text: str | None) -> float | None:
    """
    Extract the first numeric amount from free text.

    Thousands separators are ignored, so "$2,000" yields 2000.0. A range such
    as "1500-2000" yields its first bound.

    Args:
        text: Text that may contain an amount

    Returns:
        The amount, or None if the text holds no number
    """
    if not text:
        return None

    match = AMOUNT_PATTERN.search(text)
    if not match:
        return None

    try:
        return float(match.group(0).replace(",", ""))
    except ValueError:
        return None


def format_price(amount: float) -> str:
    """Format a dollar amount without cents, e.g. ``$1,200``."""
    return f"${amount:,.0f}"


def extract_json_object(text: str | None) -> dict[str, Any] | None:
    """
    Extract the first JSON object embedded in free-form model output.

    Args:
        text: Model response text, possibly wrapped in prose or code fences

    Returns:
        The parsed object, or None if no valid object is found
    """
    if not text:
        return None

    match = JSON_OBJECT_PATTERN.search(text)
    if not match:
        return None

    try:
        parsed = json.loads(match.group(0))
    except json.JSONDecodeError:
        return None

    return parsed if isinstance(parsed, dict) else None


def nights_between(start: str | None, end: str | None) -> int:
    """
    Count the nights between two ISO dates, never less than one.

    Args:
        start: Trip start date (YYYY-MM-DD)
        end: Trip end date (YYYY-MM-DD)

    Returns:
        Number of nights, 1 if either date is missing or unparsable
    """
    if not start or not end:
        return 1
    try:
        nights = (date.fromisoformat(end) - date.fromisoformat(start)).days
    except ValueError:
        return 1
    return nights if nights > 0 else 1


def days_between(start: str | None, end: str | None) -> int:
    """Count trip days between two ISO dates, inclusive of both ends."""
    if not start or not end:
        return 1
    try:
        days = (date.fromisoformat(end) - date.fromisoformat(start)).days + 1
    except ValueError:
        return 1
    return days if days > 0 else 1


def pluralize(count: int | None, singular: str, plural: str) -> str:
    """Pick the singular or plural noun for a count."""
    return singular if count == 1 else plural
