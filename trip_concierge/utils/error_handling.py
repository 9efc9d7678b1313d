"""
Error handling utilities for the Trip Concierge system.

This module provides the exception hierarchy and the helper used to bound
gateway calls in time, so that every call site can decide on its own fallback.
"""

import asyncio
import traceback
from collections.abc import Awaitable
from typing import TypeVar

from loguru import logger

T = TypeVar("T")


class TravelConciergeError(Exception):
    """Base exception class for all Trip Concierge errors."""

    def __init__(self, message: str, original_error: Exception | None = None):
        """
        Initialize a TravelConciergeError.

        Args:
            message: Error message
            original_error: The original exception that caused this error (optional)
        """
        self.original_error = original_error
        if original_error:
            message = f"{message} - Original error: {original_error!s}"
        super().__init__(message)


class APIError(TravelConciergeError):
    """Error raised when an external API request fails."""

    def __init__(
        self,
        message: str,
        service_name: str,
        status_code: int | None = None,
        original_error: Exception | None = None,
    ):
        """
        Initialize an APIError.

        Args:
            message: Error message
            service_name: Name of the API service
            status_code: HTTP status code (optional)
            original_error: The original exception that caused this error (optional)
        """
        self.service_name = service_name
        self.status_code = status_code
        status_str = f" (status: {status_code})" if status_code else ""
        full_message = f"Error in {service_name} API{status_str}: {message}"
        super().__init__(full_message, original_error)


class GatewayError(TravelConciergeError):
    """Error raised when a reasoning or search gateway call cannot be used."""

    def __init__(
        self, message: str, gateway: str, original_error: Exception | None = None
    ):
        self.gateway = gateway
        super().__init__(f"{gateway} gateway failed: {message}", original_error)


async def call_with_timeout(
    awaitable: Awaitable[T], timeout: float, gateway: str
) -> T:
    """
    Await a gateway call, converting timeouts and failures into GatewayError.

    Args:
        awaitable: The pending gateway call
        timeout: Maximum seconds to wait
        gateway: Gateway name used in log and error messages

    Returns:
        Result of the awaited call

    Raises:
        GatewayError: If the call times out or raises
    """
    try:
        return await asyncio.wait_for(awaitable, timeout=timeout)
    except TimeoutError as e:
        logger.warning(f"{gateway} call timed out after {timeout:.1f}s")
        raise GatewayError(f"timed out after {timeout:.1f}s", gateway, e) from e
    except GatewayError:
        raise
    except Exception as e:
        logger.warning(f"{gateway} call failed: {e!s}")
        logger.debug(f"Traceback: {traceback.format_exc()}")
        raise GatewayError(str(e), gateway, e) from e
