"""
State representation for the trip planning conversation.

This module defines the ConversationState model, the single record flowing
through every node of the conversation graph. Nodes never mutate it: they
return partial updates and the engine derives a new state from them.
"""

from typing import Any

from pydantic import BaseModel, Field

from trip_concierge.data.models import (
    BudgetAllocation,
    PlanningCategory,
    SearchResult,
    TransportationType,
    TripDetails,
    TripPurpose,
)
from trip_concierge.orchestration.states.node_ids import START

RESULT_FIELDS = {
    PlanningCategory.TRANSPORTATION: "transportation_results",
    PlanningCategory.ACCOMMODATION: "accommodation_results",
    PlanningCategory.ACTIVITIES: "activities_results",
}


class ConversationState(BaseModel):
    """
    State of one trip planning conversation.

    Collected answers stay absent until their ask node accepts them. Search
    results stay absent until a search has run; clearing all three forces
    the search node to search again.
    """

    # Collected trip parameters
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

    # Search and validation
    transportation_results: list[SearchResult] | None = None
    accommodation_results: list[SearchResult] | None = None
    activities_results: list[SearchResult] | None = None
    budget_allocation: BudgetAllocation | None = None
    budget_issues: list[str] = Field(default_factory=list)
    schedule_issues: list[str] = Field(default_factory=list)
    search_issues: list[str] = Field(default_factory=list)
    flights_budget_exceeded: bool = False
    total_budget_exceeded: bool = False
    accommodation_budget_exceeded: bool = False
    validation_message_shown: bool = False
    search_retry_count: int = 0
    low_budget_warning: float | None = None

    # Control flow
    current_node: str = START
    last_user_input: str | None = None
    validation_error: str | None = None
    conversation_complete: bool = False
    response_message: str | None = None

    def apply(self, update: dict[str, Any]) -> "ConversationState":
        """
        Return a new state with the update merged in.

        Keys in the update overwrite, absent keys are kept and None clears a
        field. The receiver is left untouched.
        """
        return self.model_copy(update=update)

    def trip_details(self) -> TripDetails:
        """Snapshot of the collected trip parameters."""
        return TripDetails(
            origin_city=self.origin_city,
            destination_city=self.destination_city,
            start_date=self.start_date,
            end_date=self.end_date,
            travelers=self.travelers,
            budget=self.budget,
            budget_amount=self.budget_amount,
            purpose=self.purpose,
            planning_type=self.planning_type,
            interests=self.interests,
            transportation_type=self.transportation_type,
        )

    def search_results(self) -> dict[PlanningCategory, list[SearchResult]]:
        """Results per category, for categories that have been searched."""
        results = {}
        for category, field_name in RESULT_FIELDS.items():
            value = getattr(self, field_name)
            if value is not None:
                results[category] = value
        return results

    @property
    def has_results(self) -> bool:
        """True if any category returned at least one result."""
        return any(self.search_results().values())

    @property
    def awaiting_search(self) -> bool:
        """True while no category has been searched in this generation."""
        return all(getattr(self, name) is None for name in RESULT_FIELDS.values())

    def snapshot(self) -> dict[str, Any]:
        """JSON-compatible copy of the state for callers."""
        return self.model_dump(mode="json")
