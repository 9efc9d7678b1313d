"""
Utility modules for the Trip Concierge system.
"""

from trip_concierge.config import LogLevel
from trip_concierge.utils.error_handling import (
    APIError,
    GatewayError,
    TravelConciergeError,
    call_with_timeout,
)
from trip_concierge.utils.helpers import (
    days_between,
    extract_json_object,
    format_price,
    generate_session_id,
    nights_between,
    parse_amount,
    pluralize,
    truncate_text,
)
from trip_concierge.utils.logging import get_logger, setup_logging

__all__ = [
    "APIError",
    "GatewayError",
    "LogLevel",
    "TravelConciergeError",
    "call_with_timeout",
    "days_between",
    "extract_json_object",
    "format_price",
    "generate_session_id",
    "get_logger",
    "nights_between",
    "parse_amount",
    "pluralize",
    "setup_logging",
    "truncate_text",
]
