"""
Node identifiers for the conversation graph.

Besides the node ids, this module defines the start and end sentinels and
the ADVANCE marker a node returns to follow the edge table.
"""

from enum import StrEnum


class NodeId(StrEnum):
    """Identifiers of the executable nodes, in conversation order."""

    ASK_ORIGIN = "ask_origin"
    ASK_DESTINATION = "ask_destination"
    ASK_START_DATE = "ask_start_date"
    ASK_END_DATE = "ask_end_date"
    ASK_TRAVELERS = "ask_travelers"
    ASK_BUDGET = "ask_budget"
    ASK_PURPOSE = "ask_purpose"
    ASK_PLANNING_TYPE = "ask_planning_type"
    SEARCH_OPTIONS = "search_options"
    HANDLE_VALIDATION_ISSUES = "handle_validation_issues"
    GENERATE_PLAN = "generate_plan"


START = "__start__"
END = "__end__"

# Returned as current_node to let the edge table pick the next node
ADVANCE = "__advance__"

ASK_NODES = (
    NodeId.ASK_ORIGIN,
    NodeId.ASK_DESTINATION,
    NodeId.ASK_START_DATE,
    NodeId.ASK_END_DATE,
    NodeId.ASK_TRAVELERS,
    NodeId.ASK_BUDGET,
    NodeId.ASK_PURPOSE,
    NodeId.ASK_PLANNING_TYPE,
)
