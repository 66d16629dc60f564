"""
Topic Graph Model
=================

In-memory prerequisite graph built on networkx.

The DiGraph is used strictly as an adjacency container: nothing in the
engine asks networkx for positions, and no force layout is ever run.

INVARIANTS:
- Every edge references two nodes present in the graph
- Adjacency is kept in both directions (O(1) amortized lookups)
- Insertion order of nodes and edges is preserved and drives determinism
- Input records are never mutated
"""

from __future__ import annotations
from typing import Any, Iterable, Iterator, List, Mapping, Optional, Tuple
import networkx as nx

from ..contracts.base import (
    GraphConstructionError, PrerequisiteEdge, TopicNode
)
from ..observability import DiagnosticsCollector, DiagnosticType


class TopicGraph:
    """
    Directed prerequisite graph (prerequisite -> dependent).

    Wraps a networkx DiGraph and exposes only what layout needs.
    """

    def __init__(self):
        self._graph = nx.DiGraph()

    # =========================================================================
    # QUERIES
    # =========================================================================

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._graph

    def __len__(self) -> int:
        return self._graph.number_of_nodes()

    def __iter__(self) -> Iterator[str]:
        return iter(self._graph.nodes)

    def has_node(self, node_id: str) -> bool:
        return node_id in self._graph

    def has_edge(self, prerequisite_id: str, dependent_id: str) -> bool:
        return self._graph.has_edge(prerequisite_id, dependent_id)

    def node(self, node_id: str) -> TopicNode:
        return self._graph.nodes[node_id]["topic"]

    @property
    def node_ids(self) -> Tuple[str, ...]:
        return tuple(self._graph.nodes)

    @property
    def nodes(self) -> Tuple[TopicNode, ...]:
        return tuple(data["topic"] for _, data in self._graph.nodes(data=True))

    @property
    def edges(self) -> Tuple[PrerequisiteEdge, ...]:
        return tuple(PrerequisiteEdge(u, v) for u, v in self._graph.edges)

    @property
    def edge_count(self) -> int:
        return self._graph.number_of_edges()

    def prerequisites_of(self, node_id: str) -> Tuple[str, ...]:
        """Direct prerequisites, in edge insertion order."""
        if node_id not in self._graph:
            return ()
        return tuple(self._graph.predecessors(node_id))

    def dependents_of(self, node_id: str) -> Tuple[str, ...]:
        """Direct dependents ("effects"), in edge insertion order."""
        if node_id not in self._graph:
            return ()
        return tuple(self._graph.successors(node_id))

    def copy(self) -> TopicGraph:
        clone = TopicGraph()
        clone._graph = self._graph.copy()
        return clone

    # =========================================================================
    # MUTATION (used by sessions on their own live graph only)
    # =========================================================================

    def add_node(self, topic: TopicNode) -> bool:
        """Add a node. Returns False if the id is already present."""
        if topic.topic_id in self._graph:
            return False
        self._graph.add_node(topic.topic_id, topic=topic)
        return True

    def add_edge(self, edge: PrerequisiteEdge) -> bool:
        """Add an edge between present nodes. Returns False if skipped."""
        if edge.prerequisite_id not in self._graph or edge.dependent_id not in self._graph:
            return False
        if self._graph.has_edge(edge.prerequisite_id, edge.dependent_id):
            return False
        self._graph.add_edge(edge.prerequisite_id, edge.dependent_id)
        return True

    def remove_nodes(self, node_ids: Iterable[str]) -> None:
        """Remove nodes and every incident edge."""
        self._graph.remove_nodes_from([n for n in node_ids if n in self._graph])

    def remove_edges(self, edges: Iterable[Tuple[str, str]]) -> None:
        self._graph.remove_edges_from([e for e in edges if self._graph.has_edge(*e)])


# =============================================================================
# CONSTRUCTION
# =============================================================================

def _coerce_node(raw: Any) -> TopicNode:
    if isinstance(raw, TopicNode):
        return raw
    if isinstance(raw, Mapping):
        return TopicNode.from_mapping(raw)
    raise GraphConstructionError(
        f"Expected TopicNode or node mapping, got {type(raw).__name__}: {raw!r}"
    )


def build_graph(
    nodes: Iterable[Any],
    edges: Iterable[Any],
    diagnostics: Optional[DiagnosticsCollector] = None
) -> TopicGraph:
    """
    Build a TopicGraph from collaborator data.

    Non-node-shaped input raises GraphConstructionError.
    Dangling edges and duplicate ids are dropped and reported.
    """
    graph = TopicGraph()

    for raw in nodes:
        topic = _coerce_node(raw)
        if not graph.add_node(topic) and diagnostics is not None:
            diagnostics.report(
                DiagnosticType.DUPLICATE_NODE,
                f"Duplicate topic id {topic.topic_id!r}; keeping first occurrence",
                (topic.topic_id,)
            )

    dropped: List[PrerequisiteEdge] = []
    for raw in edges:
        edge = PrerequisiteEdge.coerce(raw)
        if edge.prerequisite_id not in graph or edge.dependent_id not in graph:
            dropped.append(edge)
            continue
        graph.add_edge(edge)

    if diagnostics is not None:
        for edge in dropped:
            missing = [
                n for n in (edge.prerequisite_id, edge.dependent_id) if n not in graph
            ]
            diagnostics.report(
                DiagnosticType.DANGLING_EDGE,
                f"Dropped edge {edge.prerequisite_id!r} -> {edge.dependent_id!r}: "
                f"unknown endpoint(s) {', '.join(repr(m) for m in missing)}",
                edge.key
            )

    return graph
