"""
Contracts for the external collaborators the conversation depends on.

Both gateways are injected into the engine, so tests and alternative
providers only need to satisfy these protocols.
"""

from typing import Protocol, runtime_checkable

from trip_concierge.data.models import SearchConfig, SearchResponse


@runtime_checkable
class SearchGateway(Protocol):
    """Issues a bounded-length query to a web search service."""

    async def search(self, query: str, config: SearchConfig) -> SearchResponse: ...


@runtime_checkable
class ReasoningGateway(Protocol):
    """Sends a prompt to a text generation service and returns free text."""

    async def complete(self, prompt: str) -> str: ...
