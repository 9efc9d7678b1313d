"""
Routing conditions for the conversation graph.
"""

from trip_concierge.orchestration.routing.conditions import (
    SEARCH_TARGETS,
    route_after_search,
)

__all__ = ["SEARCH_TARGETS", "route_after_search"]
