"""
Throttling and retries for the reasoning and search gateways.

Gemini and Tavily both limit requests per minute and per day. Each gateway
gets a ``GatewayLimiter`` that spaces requests with aiolimiter and counts
the day's usage; transient failures are retried with tenacity. An exhausted
daily quota raises ``APIError`` so the caller falls back instead of waiting
until midnight.
"""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import date
from functools import wraps
from typing import Any, TypeVar, cast

import aiohttp
from aiolimiter import AsyncLimiter
from loguru import logger
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from trip_concierge.utils.error_handling import APIError

F = TypeVar("F", bound=Callable[..., Any])

TRANSIENT_STATUS_CODES = frozenset({429, 500, 502, 503, 504})
TRANSIENT_ERRORS = (
    aiohttp.ClientConnectorError,
    aiohttp.ServerDisconnectedError,
    ConnectionError,
)


@dataclass(frozen=True)
class GatewayLimits:
    """Request limits and retry policy of one gateway."""

    gateway: str
    per_minute: int
    per_day: int
    attempts: int = 3
    min_backoff: float = 1.0
    max_backoff: float = 20.0


def is_transient(error: BaseException) -> bool:
    """Connection problems and throttling or server statuses are retried."""
    if isinstance(error, TRANSIENT_ERRORS):
        return True
    return isinstance(error, APIError) and error.status_code in TRANSIENT_STATUS_CODES


class GatewayLimiter:
    """Per-minute pacing plus a daily request budget for one gateway."""

    def __init__(self, limits: GatewayLimits):
        self.limits = limits
        self._pacer = AsyncLimiter(limits.per_minute, 60)
        self._day = date.today()
        self._used_today = 0

    @property
    def remaining_today(self) -> int:
        self._roll_day()
        return max(0, self.limits.per_day - self._used_today)

    def _roll_day(self) -> None:
        today = date.today()
        if today != self._day:
            self._day = today
            self._used_today = 0

    async def acquire(self) -> None:
        """
        Wait for a request slot.

        Raises:
            APIError: If the daily quota is used up
        """
        if self.remaining_today <= 0:
            raise APIError(
                f"daily quota of {self.limits.per_day} requests used up",
                self.limits.gateway,
            )
        await self._pacer.acquire()
        self._used_today += 1

    def retrying(self) -> AsyncRetrying:
        return AsyncRetrying(
            retry=retry_if_exception(is_transient),
            stop=stop_after_attempt(self.limits.attempts),
            wait=wait_exponential(
                multiplier=1, min=self.limits.min_backoff, max=self.limits.max_backoff
            ),
            reraise=True,
            before_sleep=_log_retry,
        )


def _log_retry(retry_state: RetryCallState) -> None:
    error = retry_state.outcome.exception() if retry_state.outcome else None
    wait = retry_state.next_action.sleep if retry_state.next_action else 0
    logger.warning(
        f"Attempt {retry_state.attempt_number} failed ({error!s}), "
        f"retrying in {wait:.1f}s"
    )


DEFAULT_LIMITS = (
    # Gemini free tier
    GatewayLimits(gateway="gemini", per_minute=15, per_day=1500),
    GatewayLimits(gateway="tavily", per_minute=60, per_day=1000),
)
FALLBACK_LIMITS = {"per_minute": 30, "per_day": 1000}

_limiters: dict[str, GatewayLimiter] = {}


def register_limits(limits: GatewayLimits) -> GatewayLimiter:
    """Install (or replace) the limiter of a gateway."""
    limiter = GatewayLimiter(limits)
    _limiters[limits.gateway] = limiter
    logger.debug(
        f"Limits for {limits.gateway}: {limits.per_minute}/min, {limits.per_day}/day"
    )
    return limiter


def limiter_for(gateway: str) -> GatewayLimiter:
    """The gateway's limiter, created with fallback limits on first use."""
    limiter = _limiters.get(gateway)
    if limiter is None:
        limiter = register_limits(GatewayLimits(gateway=gateway, **FALLBACK_LIMITS))
    return limiter


async def call_limited(
    gateway: str, func: Callable[..., Any], *args: Any, **kwargs: Any
) -> Any:
    """
    Run a coroutine function under the gateway's limits, retrying transient errors.

    Every attempt takes its own request slot.
    """
    limiter = limiter_for(gateway)
    async for attempt in limiter.retrying():
        with attempt:
            await limiter.acquire()
            return await func(*args, **kwargs)


def rate_limited(gateway: str) -> Callable[[F], F]:
    """Decorator applying ``call_limited`` to a coroutine function."""

    def decorator(func: F) -> F:
        @wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            return await call_limited(gateway, func, *args, **kwargs)

        return cast(F, wrapper)

    return decorator


class APIClient:
    """JSON-over-HTTP client whose requests go through the gateway limits."""

    def __init__(self, service_name: str, base_url: str, api_key: str | None = None):
        self.service_name = service_name
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key

    def _headers(self, extra: dict[str, str] | None) -> dict[str, str]:
        headers = dict(extra or {})
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    async def request(
        self,
        method: str,
        endpoint: str,
        json_data: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        """
        Send one request and decode the JSON body.

        Args:
            method: HTTP method
            endpoint: Path below the base URL
            json_data: Request body (optional)
            headers: Additional HTTP headers (optional)

        Returns:
            Decoded body, or ``{"text": ...}`` when the body is not JSON

        Raises:
            APIError: For a non-2xx status once retries are exhausted
        """
        url = f"{self.base_url}/{endpoint.lstrip('/')}"
        request_headers = self._headers(headers)

        async def send() -> dict[str, Any]:
            async with aiohttp.ClientSession() as session:
                async with session.request(
                    method.upper(), url, json=json_data, headers=request_headers
                ) as response:
                    body = await response.text()
                    if not response.ok:
                        if response.status == 429:
                            logger.warning(
                                f"{self.service_name} throttled the request "
                                f"(Retry-After: {response.headers.get('Retry-After')})"
                            )
                        raise APIError(
                            f"request to {endpoint} failed: {body}",
                            self.service_name,
                            status_code=response.status,
                        )
                    try:
                        return await response.json()
                    except aiohttp.ContentTypeError:
                        return {"text": body}

        return await call_limited(self.service_name, send)


def initialize_rate_limiting() -> None:
    """Register the default limits of both gateways."""
    for limits in DEFAULT_LIMITS:
        register_limits(limits)
    logger.info(f"Rate limits set for {len(DEFAULT_LIMITS)} gateways")
