"""
Graph builder for the trip planning conversation.

This module wires the node implementations into the fixed conversation
topology. The services bundle is bound into every node here, so the graph
itself only deals with ``(state) -> update`` functions.
"""

from functools import partial

from trip_concierge.orchestration.core.graph import ConversationGraph
from trip_concierge.orchestration.nodes import (
    NodeServices,
    ask_budget,
    ask_destination,
    ask_end_date,
    ask_origin,
    ask_planning_type,
    ask_purpose,
    ask_start_date,
    ask_travelers,
    generate_final_plan,
    handle_validation_issues,
    search_options,
)
from trip_concierge.orchestration.routing import SEARCH_TARGETS, route_after_search
from trip_concierge.orchestration.states import ASK_NODES, END, START, NodeId
from trip_concierge.utils.logging import get_logger

logger = get_logger(__name__)

NODE_FUNCTIONS = {
    NodeId.ASK_ORIGIN: ask_origin,
    NodeId.ASK_DESTINATION: ask_destination,
    NodeId.ASK_START_DATE: ask_start_date,
    NodeId.ASK_END_DATE: ask_end_date,
    NodeId.ASK_TRAVELERS: ask_travelers,
    NodeId.ASK_BUDGET: ask_budget,
    NodeId.ASK_PURPOSE: ask_purpose,
    NodeId.ASK_PLANNING_TYPE: ask_planning_type,
    NodeId.SEARCH_OPTIONS: search_options,
    NodeId.HANDLE_VALIDATION_ISSUES: handle_validation_issues,
    NodeId.GENERATE_PLAN: generate_final_plan,
}


def build_conversation_graph(services: NodeServices | None = None) -> ConversationGraph:
    """
    Create the conversation graph.

    The graph implements this flow:
        START -> ask_origin -> ... -> ask_planning_type -> search_options
        search_options -> [conditional] -> handle_validation_issues OR generate_plan
        handle_validation_issues -> search_options
        generate_plan -> END

    The validation handler may also name ask_start_date, ask_planning_type or
    generate_plan directly, overriding its edge.

    Args:
        services: Gateways and settings bound into every node

    Returns:
        The conversation graph
    """
    logger.info("Creating conversation graph")
    services = services or NodeServices()

    graph = ConversationGraph()
    for node_id, function in NODE_FUNCTIONS.items():
        graph.add_node(node_id, partial(function, services=services))

    graph.add_edge(START, NodeId.ASK_ORIGIN)

    # Ask nodes form a chain ending at the search
    for source, target in zip(ASK_NODES, ASK_NODES[1:], strict=False):
        graph.add_edge(source, target)
    graph.add_edge(NodeId.ASK_PLANNING_TYPE, NodeId.SEARCH_OPTIONS)

    graph.add_conditional_edge(NodeId.SEARCH_OPTIONS, route_after_search, SEARCH_TARGETS)
    graph.add_edge(NodeId.HANDLE_VALIDATION_ISSUES, NodeId.SEARCH_OPTIONS)
    graph.add_edge(NodeId.GENERATE_PLAN, END)

    logger.info(f"Conversation graph created with {len(graph.nodes)} nodes")
    return graph
