"""
Conversation graph primitives.

A ConversationGraph holds named nodes and the edges between them. Edges are
either fixed or conditional; conditional edges run their resolver against
the state at traversal time and are never cached. A node may also name its
successor directly, which takes precedence over the edge table.
"""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from langgraph.graph import StateGraph

from trip_concierge.data.models import GraphEdgeExport, GraphExport
from trip_concierge.orchestration.states import ADVANCE, ConversationState
from trip_concierge.utils.logging import get_logger

logger = get_logger(__name__)

NodeFunction = Callable[[ConversationState], Awaitable[dict[str, Any]]]
EdgeResolver = Callable[[ConversationState], str]


@dataclass(frozen=True)
class GraphNode:
    """A named step of the conversation."""

    id: str
    execute: NodeFunction


@dataclass(frozen=True)
class FixedEdge:
    """Unconditional transition to a single target."""

    source: str
    target: str

    @property
    def possible_targets(self) -> list[str]:
        return [self.target]

    def resolve(self, state: ConversationState) -> str:
        return self.target


@dataclass(frozen=True)
class ConditionalEdge:
    """Transition chosen by a resolver over the latest state."""

    source: str
    resolver: EdgeResolver
    targets: tuple[str, ...]

    @property
    def possible_targets(self) -> list[str]:
        return list(self.targets)

    def resolve(self, state: ConversationState) -> str:
        target = self.resolver(state)
        if target not in self.targets:
            raise ValueError(
                f"Resolver for {self.source} returned unknown target {target!r}"
            )
        return target


GraphEdge = FixedEdge | ConditionalEdge


class ConversationGraph:
    """Node table and edge table of the conversation."""

    def __init__(self) -> None:
        self.nodes: dict[str, GraphNode] = {}
        self.edges: list[GraphEdge] = []

    def add_node(self, node_id: str, execute: NodeFunction) -> None:
        if node_id in self.nodes:
            raise ValueError(f"Node {node_id} already exists")
        self.nodes[node_id] = GraphNode(id=node_id, execute=execute)

    def add_edge(self, source: str, target: str) -> None:
        self.edges.append(FixedEdge(source=source, target=target))

    def add_conditional_edge(
        self, source: str, resolver: EdgeResolver, targets: list[str]
    ) -> None:
        self.edges.append(
            ConditionalEdge(source=source, resolver=resolver, targets=tuple(targets))
        )

    def get_node(self, node_id: str | None) -> GraphNode | None:
        if node_id is None:
            return None
        return self.nodes.get(node_id)

    def edge_from(self, source: str) -> GraphEdge | None:
        return next((edge for edge in self.edges if edge.source == source), None)

    def next_node(self, source: str, state: ConversationState) -> str | None:
        """Follow the edge leaving ``source`` against the given state."""
        edge = self.edge_from(source)
        if edge is None:
            return None
        return edge.resolve(state)

    def resolve_transition(
        self, source: str, update: dict[str, Any], state: ConversationState
    ) -> str:
        """
        Decide the active node after ``source`` produced ``update``.

        Args:
            source: Node that just executed
            update: The node's partial update
            state: State with the update already merged in

        Returns:
            ``source`` when the update names no successor, the edge table's
            choice for ADVANCE, otherwise the node the update names
        """
        if "current_node" not in update:
            return source

        requested = update["current_node"]
        if requested != ADVANCE:
            return requested

        target = self.next_node(source, state)
        if target is None:
            logger.warning(f"No edge leaves {source}, staying on it")
            return source
        return target

    def export(self) -> GraphExport:
        """Static topology for diagram rendering."""
        edges = [
            GraphEdgeExport(
                source=edge.source,
                target=edge.possible_targets
                if isinstance(edge, ConditionalEdge)
                else edge.target,
                condition=isinstance(edge, ConditionalEdge),
            )
            for edge in self.edges
        ]
        return GraphExport(nodes=list(self.nodes), edges=edges)

    def to_state_graph(self) -> StateGraph:
        """
        Mirror the topology as a LangGraph StateGraph.

        The mirror is only drawn, never run: its nodes are no-ops.
        """
        workflow = StateGraph(ConversationState)

        for node_id in self.nodes:
            workflow.add_node(node_id, _noop)

        for edge in self.edges:
            if isinstance(edge, ConditionalEdge):
                workflow.add_conditional_edges(
                    edge.source,
                    edge.resolver,
                    {target: target for target in edge.targets},
                )
            else:
                workflow.add_edge(edge.source, edge.target)

        return workflow

    def to_mermaid(self) -> str:
        """Mermaid flowchart text of the graph, drawn by LangGraph."""
        return self.to_state_graph().compile().get_graph().draw_mermaid()


def _noop(state: ConversationState) -> dict[str, Any]:
    return {}
