"""
Shared dependencies and helpers for conversation nodes.

Every node is a plain coroutine ``(state, services) -> dict``. The services
bundle carries the gateways and settings a node may need; the graph builder
binds it once so the graph only sees ``(state) -> dict``.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Any

from trip_concierge.agents.gateways import ReasoningGateway, SearchGateway
from trip_concierge.config import SearchSettings, SystemConfig, TripConciergeConfig
from trip_concierge.orchestration.states import ADVANCE
from trip_concierge.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass
class NodeServices:
    """Gateways and settings available to node implementations."""

    reasoning: ReasoningGateway | None = None
    search: SearchGateway | None = None
    system: SystemConfig = field(default_factory=SystemConfig)
    search_settings: SearchSettings = field(default_factory=SearchSettings)

    @property
    def timeout(self) -> float:
        return self.system.gateway_timeout_seconds

    def today(self) -> date:
        return self.system.today()

    @classmethod
    def from_config(cls, config: TripConciergeConfig) -> "NodeServices":
        """
        Build the production gateways from configuration.

        A gateway whose API key is missing is left out; reasoning then falls
        back to local logic and searches fail with a note in the plan.
        """
        from trip_concierge.agents.reasoning import GeminiReasoningGateway
        from trip_concierge.agents.research_tools import TavilySearch

        reasoning = None
        if config.api.gemini_api_key:
            reasoning = GeminiReasoningGateway(
                model_config=config.model, api_key=config.api.gemini_api_key
            )
        else:
            logger.warning("GEMINI_API_KEY not set, reasoning gateway disabled")

        search = None
        if config.api.tavily_api_key:
            search = TavilySearch(api_key=config.api.tavily_api_key)
        else:
            logger.warning("TAVILY_API_KEY not set, search gateway disabled")

        return cls(
            reasoning=reasoning,
            search=search,
            system=config.system,
            search_settings=config.search,
        )


def reject(error: str, message: str, **fields: Any) -> dict[str, Any]:
    """Update for input that failed validation; the node stays active."""
    return {"validation_error": error, "response_message": message, **fields}


def accept(**fields: Any) -> dict[str, Any]:
    """Update for accepted input; the edge table picks the next node."""
    return {**fields, "validation_error": None, "current_node": ADVANCE}
