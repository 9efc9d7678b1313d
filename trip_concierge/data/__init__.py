"""
Data models shared across the Trip Concierge system.
"""

from trip_concierge.data.models import (
    ALL_CATEGORIES,
    BudgetAllocation,
    ChatReply,
    CostEstimate,
    GraphEdgeExport,
    GraphExport,
    PlanningCategory,
    SearchConfig,
    SearchResponse,
    SearchResult,
    TransportationType,
    TripDetails,
    TripPurpose,
    ValidationResult,
)

__all__ = [
    "ALL_CATEGORIES",
    "BudgetAllocation",
    "ChatReply",
    "CostEstimate",
    "GraphEdgeExport",
    "GraphExport",
    "PlanningCategory",
    "SearchConfig",
    "SearchResponse",
    "SearchResult",
    "TransportationType",
    "TripDetails",
    "TripPurpose",
    "ValidationResult",
]
