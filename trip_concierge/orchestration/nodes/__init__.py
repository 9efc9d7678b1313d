"""
Node implementations for the trip planning conversation graph.
"""

from trip_concierge.orchestration.nodes.ask_nodes import (
    GREETING,
    ask_budget,
    ask_destination,
    ask_end_date,
    ask_origin,
    ask_planning_type,
    ask_purpose,
    ask_start_date,
    ask_travelers,
    personalization_prompt,
)
from trip_concierge.orchestration.nodes.base_node import NodeServices, accept, reject
from trip_concierge.orchestration.nodes.final_plan import generate_final_plan
from trip_concierge.orchestration.nodes.search_options import search_options
from trip_concierge.orchestration.nodes.validation_issues import (
    handle_validation_issues,
)

__all__ = [
    "GREETING",
    "NodeServices",
    "accept",
    "ask_budget",
    "ask_destination",
    "ask_end_date",
    "ask_origin",
    "ask_planning_type",
    "ask_purpose",
    "ask_start_date",
    "ask_travelers",
    "generate_final_plan",
    "handle_validation_issues",
    "personalization_prompt",
    "reject",
    "search_options",
]
