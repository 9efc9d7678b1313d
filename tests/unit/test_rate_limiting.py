"""
Unit tests for gateway throttling and retries.
"""

import pytest

from trip_concierge.utils.error_handling import APIError
from trip_concierge.utils.rate_limiting import (
    GatewayLimits,
    call_limited,
    is_transient,
    limiter_for,
    rate_limited,
    register_limits,
)


@pytest.fixture
def fast_limits():
    return register_limits(
        GatewayLimits(
            gateway="test", per_minute=100, per_day=3, min_backoff=0, max_backoff=0
        )
    )


def test_transient_errors():
    assert is_transient(ConnectionError("reset"))
    assert is_transient(APIError("busy", "tavily", status_code=503))
    assert not is_transient(APIError("bad key", "tavily", status_code=401))
    assert not is_transient(ValueError("bad input"))


async def test_transient_failures_are_retried(fast_limits):
    calls = []

    async def flaky():
        calls.append(1)
        if len(calls) < 2:
            raise ConnectionError("reset")
        return "ok"

    assert await call_limited("test", flaky) == "ok"
    assert len(calls) == 2
    assert fast_limits.remaining_today == 1


async def test_permanent_failures_are_not_retried(fast_limits):
    calls = []

    async def unauthorized():
        calls.append(1)
        raise APIError("bad key", "test", status_code=401)

    with pytest.raises(APIError, match="bad key"):
        await call_limited("test", unauthorized)
    assert len(calls) == 1


async def test_daily_quota(fast_limits):
    @rate_limited("test")
    async def ping():
        return "pong"

    for _ in range(3):
        assert await ping() == "pong"

    with pytest.raises(APIError, match="daily quota of 3 requests used up"):
        await ping()


def test_unknown_gateway_gets_fallback_limits():
    limiter = limiter_for("unregistered-gateway")

    assert limiter.limits.per_minute == 30
    assert limiter_for("unregistered-gateway") is limiter
