"""
Data models for the Trip Concierge system.

This module defines the value types exchanged between the conversation graph,
the gateways and the planning engines: trip enums, search results, budget
allocations, validation outcomes and the session reply.
"""

from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class TripPurpose(str, Enum):
    """Why the traveler is going."""

    BUSINESS = "business"
    VACATION = "vacation"


class PlanningCategory(str, Enum):
    """Categories the assistant can search and plan for."""

    TRANSPORTATION = "transportation"
    ACCOMMODATION = "accommodation"
    ACTIVITIES = "activities"


ALL_CATEGORIES = [
    PlanningCategory.TRANSPORTATION,
    PlanningCategory.ACCOMMODATION,
    PlanningCategory.ACTIVITIES,
]


class TransportationType(str, Enum):
    """Long-distance transportation modes."""

    FLIGHTS = "flights"
    BUSES = "buses"


class TripDetails(BaseModel):
    """Trip parameters collected so far, as read by the planning engines."""

    origin_city: str | None = None
    destination_city: str | None = None
    start_date: str | None = None
    end_date: str | None = None
    travelers: int | None = None
    budget: str | None = None
    budget_amount: float | None = None
    purpose: TripPurpose | None = None
    planning_type: list[PlanningCategory] | None = None
    interests: str | None = None
    transportation_type: TransportationType = TransportationType.FLIGHTS

    @property
    def traveler_count(self) -> int:
        return self.travelers or 1

    @property
    def categories_text(self) -> str:
        return ", ".join(c.value for c in self.planning_type or [])


class SearchResult(BaseModel):
    """A single ranked result returned by the search gateway."""

    model_config = ConfigDict(frozen=True)

    title: str = ""
    content: str = ""
    url: str = ""


class SearchResponse(BaseModel):
    """Results of one search gateway query."""

    results: list[SearchResult] = Field(default_factory=list)
    answer: str | None = None


class SearchConfig(BaseModel):
    """Per-query search configuration."""

    max_results: int = 10
    search_depth: Literal["basic", "advanced"] = "advanced"
    include_answer: bool = True


class BudgetAllocation(BaseModel):
    """Five-way split of the total trip budget."""

    model_config = ConfigDict(allow_inf_nan=False)

    transportation: float = Field(ge=0)
    accommodation: float = Field(ge=0)
    food: float = Field(ge=0)
    activities: float = Field(ge=0)
    contingency: float = Field(ge=0)
    explanation: str | None = None
    source: Literal["reasoning", "fallback"] = "fallback"

    @property
    def total(self) -> float:
        """Sum of all five categories."""
        return (
            self.transportation
            + self.accommodation
            + self.food
            + self.activities
            + self.contingency
        )


class CostEstimate(BaseModel):
    """Trip cost estimate produced by the reasoning gateway."""

    model_config = ConfigDict(allow_inf_nan=False)

    transportation_cost_per_person: float = Field(default=0, ge=0)
    transportation_total_cost: float = Field(default=0, ge=0)
    accommodation_total_cost: float = Field(default=0, ge=0)
    activities_estimate: float = Field(default=0, ge=0)
    food_estimate: float = Field(default=0, ge=0)
    total_estimated_cost: float = Field(ge=0)
    explanation: str | None = None


class ValidationResult(BaseModel):
    """Budget and schedule issues found in a set of search results."""

    budget_issues: list[str] = Field(default_factory=list)
    schedule_issues: list[str] = Field(default_factory=list)
    flights_budget_exceeded: bool = False
    total_budget_exceeded: bool = False
    accommodation_budget_exceeded: bool = False
    source: Literal["reasoning", "fallback"] = "fallback"
    estimate: CostEstimate | None = None

    @property
    def all_issues(self) -> list[str]:
        """Budget issues followed by schedule issues."""
        return [*self.budget_issues, *self.schedule_issues]

    @property
    def has_issues(self) -> bool:
        return bool(self.budget_issues or self.schedule_issues)


class ChatReply(BaseModel):
    """Reply returned to a caller of the session entry point."""

    reply_text: str
    is_searching: bool = False
    session_id: str | None = None


class GraphEdgeExport(BaseModel):
    """One edge of the exported conversation graph."""

    source: str
    target: str | list[str]
    condition: bool = False


class GraphExport(BaseModel):
    """Read-only topology of the conversation graph."""

    nodes: list[str]
    edges: list[GraphEdgeExport]
