"""
Graph Model Tests

Construction, adjacency queries and the anomaly policy of build_graph.
"""

import pytest

from topicgraph.contracts import (
    GraphConstructionError, LearningStatus, PrerequisiteEdge, TopicKind, TopicNode,
)
from topicgraph.core.graph import build_graph
from topicgraph.observability import DiagnosticsCollector, DiagnosticType

from .fixtures import DIAMOND_EDGES, DIAMOND_NODES, topic


class TestBuildGraph:

    def test_diamond_adjacency(self):
        graph = build_graph(DIAMOND_NODES, DIAMOND_EDGES)

        assert len(graph) == 4
        assert graph.edge_count == 4
        assert graph.prerequisites_of("D") == ("B", "C")
        assert graph.dependents_of("A") == ("B", "C")
        assert graph.prerequisites_of("A") == ()

    def test_unknown_node_has_no_neighbours(self):
        graph = build_graph(DIAMOND_NODES, DIAMOND_EDGES)
        assert graph.prerequisites_of("nope") == ()
        assert graph.dependents_of("nope") == ()

    def test_insertion_order_is_preserved(self):
        graph = build_graph(DIAMOND_NODES, DIAMOND_EDGES)
        assert graph.node_ids == ("A", "B", "C", "D")
        assert [e.key for e in graph.edges] == [e.key for e in DIAMOND_EDGES]

    def test_accepts_mappings_and_pairs(self):
        graph = build_graph(
            [
                {"id": "a", "name": "Algebra", "type": "PRACTICE", "status": "LEARNED"},
                {"id": "b", "name": "Calculus", "prerequisiteCount": 1},
            ],
            [("a", "b")]
        )

        assert graph.node("a").kind is TopicKind.PRACTICE
        assert graph.node("a").status is LearningStatus.LEARNED
        assert graph.node("b").prerequisite_count == 1
        assert graph.has_edge("a", "b")

    def test_accepts_source_target_mappings(self):
        graph = build_graph([topic("a"), topic("b")], [{"source": "a", "target": "b"}])
        assert graph.edges == (PrerequisiteEdge("a", "b"),)

    def test_dangling_edge_is_dropped_and_reported(self):
        diagnostics = DiagnosticsCollector()
        graph = build_graph([topic("a")], [("a", "ghost")], diagnostics)

        assert graph.edge_count == 0
        entries = diagnostics.get_entries(DiagnosticType.DANGLING_EDGE)
        assert len(entries) == 1
        assert "ghost" in entries[0].message
        assert entries[0].node_ids == ("a", "ghost")

    def test_duplicate_node_keeps_first(self):
        diagnostics = DiagnosticsCollector()
        graph = build_graph([topic("a", "First"), topic("a", "Second")], [], diagnostics)

        assert graph.node("a").name == "First"
        assert diagnostics.has(DiagnosticType.DUPLICATE_NODE)

    def test_input_records_are_not_mutated(self):
        nodes = [{"id": "a", "name": "Algebra"}]
        edges = [["a", "a"]]
        build_graph(nodes, edges)
        assert nodes == [{"id": "a", "name": "Algebra"}]
        assert edges == [["a", "a"]]


class TestMalformedInput:
    """Non-node-shaped data is a contract violation and fails fast."""

    def test_non_node_raises(self):
        with pytest.raises(GraphConstructionError):
            build_graph(["not a node"], [])

    def test_node_mapping_without_name_raises(self):
        with pytest.raises(GraphConstructionError):
            build_graph([{"id": "a"}], [])

    def test_unknown_kind_raises(self):
        with pytest.raises(GraphConstructionError):
            build_graph([{"id": "a", "name": "A", "type": "LECTURE"}], [])

    def test_malformed_edge_raises(self):
        with pytest.raises(GraphConstructionError):
            build_graph([topic("a")], [42])

    def test_construction_error_is_a_value_error(self):
        with pytest.raises(ValueError):
            TopicNode("", "empty id")


class TestMutation:

    def test_add_edge_requires_both_endpoints(self):
        graph = build_graph([topic("a")], [])
        assert graph.add_edge(PrerequisiteEdge("a", "b")) is False

    def test_remove_nodes_drops_incident_edges(self):
        graph = build_graph(DIAMOND_NODES, DIAMOND_EDGES)
        graph.remove_nodes(["B"])
        assert "B" not in graph
        assert graph.prerequisites_of("D") == ("C",)

    def test_copy_is_independent(self):
        graph = build_graph(DIAMOND_NODES, DIAMOND_EDGES)
        clone = graph.copy()
        clone.remove_nodes(["A"])
        assert "A" in graph
