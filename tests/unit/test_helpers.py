"""
Unit tests for helper utilities and configuration.
"""

import asyncio

import pytest

from trip_concierge.config import (
    APIConfig,
    ModelConfig,
    SearchSettings,
    SystemConfig,
    TripConciergeConfig,
)
from trip_concierge.utils.error_handling import GatewayError, call_with_timeout
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


@pytest.mark.parametrize(
    "text, expected",
    [
        ("$2,000", 2000.0),
        ("1500-2000", 1500.0),
        ("about 850.50 dollars", 850.5),
        ("flexible", None),
        (None, None),
    ],
)
def test_parse_amount(text, expected):
    assert parse_amount(text) == expected


def test_format_price():
    assert format_price(1200) == "$1,200"
    assert format_price(399.6) == "$400"


def test_extract_json_object():
    reply = 'Here you go:\n```json\n{"date": "2026-03-16"}\n```'

    assert extract_json_object(reply) == {"date": "2026-03-16"}
    assert extract_json_object("no json here") is None
    assert extract_json_object("{broken") is None


def test_trip_lengths():
    assert nights_between("2026-03-16", "2026-03-20") == 4
    assert days_between("2026-03-16", "2026-03-20") == 5
    assert nights_between("2026-03-20", "2026-03-16") == 1
    assert nights_between(None, "2026-03-20") == 1
    assert days_between("not a date", "2026-03-20") == 1


def test_truncate_and_pluralize():
    assert truncate_text("abcdefghij", 8) == "abcde..."
    assert truncate_text("short", 8) == "short"
    assert pluralize(1, "person", "people") == "person"
    assert pluralize(3, "person", "people") == "people"


def test_session_ids_are_unique():
    first, second = generate_session_id(), generate_session_id()

    assert first.startswith("trip-")
    assert first != second


async def test_call_with_timeout_wraps_failures():
    async def boom():
        raise RuntimeError("boom")

    with pytest.raises(GatewayError) as excinfo:
        await call_with_timeout(boom(), 1, "search")

    assert excinfo.value.gateway == "search"
    assert "search gateway failed: boom" in str(excinfo.value)


async def test_call_with_timeout_returns_result():
    async def answer():
        await asyncio.sleep(0)
        return 42

    assert await call_with_timeout(answer(), 1, "reasoning") == 42


def test_model_temperature_is_bounded():
    with pytest.raises(ValueError):
        ModelConfig(temperature=1.5)


def test_search_depth_is_checked():
    with pytest.raises(ValueError):
        SearchSettings(search_depth="deep")


def test_system_config_from_env(monkeypatch):
    monkeypatch.setenv("REFERENCE_DATE", "2026-01-17")
    monkeypatch.setenv("GATEWAY_TIMEOUT_SECONDS", "12")

    system = SystemConfig.from_env()

    assert system.today().isoformat() == "2026-01-17"
    assert system.gateway_timeout_seconds == 12


def test_missing_keys_fail_strict_validation():
    config = TripConciergeConfig(
        api=APIConfig(gemini_api_key="", tavily_api_key=None),
        system=SystemConfig(),
        model=ModelConfig(),
        search=SearchSettings(),
    )

    assert config.validate() is False
    with pytest.raises(TripConciergeConfig.ConfigurationError, match="GEMINI_API_KEY"):
        config.validate(raise_error=True)


def test_complete_config_is_valid():
    config = TripConciergeConfig(
        api=APIConfig(gemini_api_key="g", tavily_api_key="t"),
        system=SystemConfig(),
        model=ModelConfig(),
        search=SearchSettings(),
    )

    assert config.validate(raise_error=True)
