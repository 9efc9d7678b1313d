"""
Routing conditions for the trip planning conversation.

Resolvers run against the state as it is after the source node's update has
been merged, every time the edge is traversed.
"""

from trip_concierge.orchestration.states import ConversationState, NodeId

SEARCH_TARGETS = [NodeId.HANDLE_VALIDATION_ISSUES, NodeId.GENERATE_PLAN]


def route_after_search(state: ConversationState) -> str:
    """
    Send the conversation to the issue menu when the search raised issues.

    Args:
        state: Conversation state after the search node ran

    Returns:
        Id of the validation-handling node or of the plan node
    """
    if state.schedule_issues or state.budget_issues:
        return NodeId.HANDLE_VALIDATION_ISSUES
    return NodeId.GENERATE_PLAN
