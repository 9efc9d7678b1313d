"""
Research tools for the Trip Concierge system.

This module implements the Tavily integration used as the search gateway for
transportation, accommodation and activity lookups.
"""

import os
from typing import Any

from trip_concierge.data.models import SearchConfig, SearchResponse, SearchResult
from trip_concierge.utils.logging import get_logger
from trip_concierge.utils.rate_limiting import APIClient

logger = get_logger(__name__)

TAVILY_BASE_URL = "https://api.tavily.com"


class TavilySearch(APIClient):
    """Integration with Tavily AI search for travel research."""

    def __init__(self, api_key: str | None = None):
        """
        Initialize Tavily search.

        Args:
            api_key: Tavily API key (defaults to TAVILY_API_KEY environment variable)
        """
        api_key = api_key or os.environ.get("TAVILY_API_KEY")

        if not api_key:
            raise ValueError(
                "Tavily API key must be provided either as an argument or "
                "as TAVILY_API_KEY environment variable"
            )

        super().__init__(service_name="tavily", base_url=TAVILY_BASE_URL, api_key=api_key)

    async def search(self, query: str, config: SearchConfig) -> SearchResponse:
        """
        Perform a Tavily search.

        Args:
            query: Search query, already compacted by the caller
            config: Result count, depth and answer settings

        Returns:
            Ranked search results
        """
        logger.info(f"Performing Tavily search: {query}")

        request = {
            "query": query,
            "max_results": config.max_results,
            "search_depth": config.search_depth,
            "include_answer": config.include_answer,
        }

        payload = await self.request("POST", "/search", json_data=request)
        response = self._parse_response(payload)

        logger.info(f"Tavily returned {len(response.results)} results")
        return response

    @staticmethod
    def _parse_response(payload: dict[str, Any]) -> SearchResponse:
        results = [
            SearchResult(
                title=item.get("title") or "",
                content=item.get("content") or "",
                url=item.get("url") or "",
            )
            for item in payload.get("results") or []
            if isinstance(item, dict)
        ]
        answer = payload.get("answer")
        return SearchResponse(
            results=results, answer=answer if isinstance(answer, str) else None
        )
