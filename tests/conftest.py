"""
Pytest configuration for the Trip Concierge tests.
"""

from datetime import date

import pytest

from trip_concierge.config import LogLevel, SearchSettings, SystemConfig
from trip_concierge.data.models import SearchConfig, SearchResponse, SearchResult
from trip_concierge.orchestration.nodes import NodeServices
from trip_concierge.utils import setup_logging
from trip_concierge.utils.error_handling import GatewayError

REFERENCE_DATE = date(2026, 1, 17)


class FakeReasoning:
    """
    Reasoning gateway replying from a script.

    Each reply is either a string, an exception to raise, or a callable
    receiving the prompt. Once the script runs out the default reply is used.
    """

    def __init__(self, *replies, default="OK"):
        self.replies = list(replies)
        self.default = default
        self.prompts: list[str] = []

    async def complete(self, prompt: str) -> str:
        self.prompts.append(prompt)
        reply = self.replies.pop(0) if self.replies else self.default
        if isinstance(reply, BaseException):
            raise reply
        if callable(reply):
            return reply(prompt)
        return reply


class FailingReasoning:
    """Reasoning gateway that is always down."""

    def __init__(self):
        self.calls = 0

    async def complete(self, prompt: str) -> str:
        self.calls += 1
        raise GatewayError("service unavailable", "reasoning")


class FakeSearch:
    """Search gateway returning canned results picked by query keyword."""

    def __init__(self, results: dict[str, list[SearchResult]] | None = None):
        self.results = results or {}
        self.queries: list[tuple[str, SearchConfig]] = []

    async def search(self, query: str, config: SearchConfig) -> SearchResponse:
        self.queries.append((query, config))
        for keyword, results in self.results.items():
            if keyword in query:
                return SearchResponse(results=results)
        return SearchResponse(results=[])


class FailingSearch:
    async def search(self, query: str, config: SearchConfig) -> SearchResponse:
        raise ConnectionError("search backend unreachable")


def make_services(reasoning=None, search=None, **system) -> NodeServices:
    settings = {"reference_date": REFERENCE_DATE, "gateway_timeout_seconds": 5, **system}
    return NodeServices(
        reasoning=reasoning,
        search=search,
        system=SystemConfig(**settings),
        search_settings=SearchSettings(),
    )


@pytest.fixture(scope="session", autouse=True)
def setup_test_logging():
    """Set up logging for tests."""
    setup_logging(LogLevel.DEBUG)


@pytest.fixture
def services():
    """Services without gateways: every call site uses its local fallback."""
    return make_services()


@pytest.fixture
def flight_results():
    return [
        SearchResult(
            title="Cheap flights Dallas to Orlando",
            content="Round trip fares from $600 per person. Nonstop options at $720.",
            url="https://example.com/flights",
        ),
        SearchResult(
            title="Orlando airfare deals",
            content="Economy tickets starting at 650 USD.",
            url="https://example.com/deals",
        ),
    ]


@pytest.fixture
def hotel_results():
    return [
        SearchResult(
            title="Orlando Resort Hotel",
            content="Rooms from $120 per night near the parks.",
            url="https://example.com/resort",
        ),
    ]


@pytest.fixture
def activity_results():
    return [
        SearchResult(
            title="Top things to do in Orlando",
            content="Theme parks, springs and a week-long festival pass.",
            url="https://example.com/things",
        ),
    ]
