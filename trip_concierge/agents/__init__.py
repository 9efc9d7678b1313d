"""
Agent modules for the Trip Concierge system.

This package contains the gateways to the external services and the
planning engines built on top of them: budget allocation, result
validation, free-text parsing and plan synthesis.
"""

from trip_concierge.agents.base import (
    AgentConfig,
    BaseAgent,
    InvalidConfigurationError,
    TripConciergeAgentError,
)
from trip_concierge.agents.budget_allocation import allocate_budget, fallback_allocation
from trip_concierge.agents.gateways import ReasoningGateway, SearchGateway
from trip_concierge.agents.intent_parsing import (
    PlanningRequest,
    parse_date,
    parse_planning_request,
)
from trip_concierge.agents.plan_synthesis import compose_plan
from trip_concierge.agents.reasoning import GeminiReasoningGateway
from trip_concierge.agents.research_tools import TavilySearch
from trip_concierge.agents.validation import validate_locally, validate_results

__all__ = [
    "AgentConfig",
    "BaseAgent",
    "GeminiReasoningGateway",
    "InvalidConfigurationError",
    "PlanningRequest",
    "ReasoningGateway",
    "SearchGateway",
    "TavilySearch",
    "TripConciergeAgentError",
    "allocate_budget",
    "compose_plan",
    "fallback_allocation",
    "parse_date",
    "parse_planning_request",
    "validate_locally",
    "validate_results",
]
