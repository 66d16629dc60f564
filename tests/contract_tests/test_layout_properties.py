"""
Property Tests for Layout Contracts
Verifies termination, level monotonicity, non-overlap and determinism
over arbitrary (possibly cyclic) prerequisite graphs.
"""

from hypothesis import given, settings, strategies as st
from hypothesis.strategies import composite

from topicgraph.config import EngineConfig
from topicgraph.contracts import PrerequisiteEdge, TopicNode
from topicgraph.core.graph import build_graph
from topicgraph.core.levels import assign_global_levels
from topicgraph.observability import DiagnosticsCollector, DiagnosticType
from topicgraph.session.global_view import layout_global

from ..fixtures import overlapping_pairs

# =============================================================================
# STRATEGIES (Generators)
# =============================================================================

NAMES = [
    "Sets",
    "Logic",
    "Algebra",
    "Linear Algebra Fundamentals",
    "Introduction to Mathematical Reasoning and Proof Techniques",
    "Supercalifragilisticexpialidocious",
    "Topology",
]


@composite
def topic_graphs(draw, max_nodes=12, allow_cycles=True):
    """Generates (nodes, edges); ids are t0..tN, edges may be cyclic."""
    count = draw(st.integers(min_value=1, max_value=max_nodes))
    nodes = [
        TopicNode(topic_id=f"t{i}", name=draw(st.sampled_from(NAMES)))
        for i in range(count)
    ]

    pairs = draw(st.lists(
        st.tuples(st.integers(0, count - 1), st.integers(0, count - 1)),
        max_size=count * 2,
    ))
    edges = []
    for source, target in pairs:
        if source == target:
            continue
        if not allow_cycles and source > target:
            source, target = target, source
        edges.append(PrerequisiteEdge(f"t{source}", f"t{target}"))
    return nodes, edges


# =============================================================================
# LEVELS
# =============================================================================

@given(topic_graphs())
def test_levels_terminate_with_non_negative_integers(data):
    nodes, edges = data
    graph = build_graph(nodes, edges)
    assignment = assign_global_levels(graph)

    assert set(assignment.levels) == set(graph.node_ids)
    assert all(isinstance(level, int) and level >= 0 for level in assignment.levels.values())


@given(topic_graphs())
def test_unbroken_edges_point_down(data):
    nodes, edges = data
    graph = build_graph(nodes, edges)
    assignment = assign_global_levels(graph)

    for edge in graph.edges:
        if edge.key in assignment.broken_edges:
            continue
        assert assignment[edge.dependent_id] > assignment[edge.prerequisite_id]


@given(topic_graphs(allow_cycles=False))
def test_acyclic_graphs_report_no_cycles(data):
    nodes, edges = data
    diagnostics = DiagnosticsCollector()
    assignment = assign_global_levels(build_graph(nodes, edges), diagnostics)

    assert assignment.broken_edges == frozenset()
    assert not diagnostics.has(DiagnosticType.CYCLE_DETECTED)


@given(topic_graphs(allow_cycles=False))
def test_roots_are_level_zero(data):
    nodes, edges = data
    graph = build_graph(nodes, edges)
    assignment = assign_global_levels(graph)

    for node_id in graph.node_ids:
        if not graph.prerequisites_of(node_id):
            assert assignment[node_id] == 0


# =============================================================================
# PLACEMENT AND ROUTING
# =============================================================================

@settings(max_examples=50)
@given(topic_graphs())
def test_global_layout_has_no_overlaps(data):
    nodes, edges = data
    layout = layout_global(build_graph(nodes, edges))
    assert overlapping_pairs(layout.nodes) == []


@settings(max_examples=50)
@given(topic_graphs())
def test_global_layout_is_deterministic(data):
    nodes, edges = data
    first = layout_global(build_graph(nodes, edges))
    second = layout_global(build_graph(nodes, edges))
    assert first == second


@settings(max_examples=50)
@given(topic_graphs())
def test_rows_follow_levels(data):
    nodes, edges = data
    layout = layout_global(build_graph(nodes, edges))
    row_of = {}
    for node in layout.nodes:
        row_of.setdefault(node.level, set()).add(node.y)
    assert all(len(ys) == 1 for ys in row_of.values())


@settings(max_examples=50)
@given(topic_graphs())
def test_routes_anchor_on_box_edges(data):
    nodes, edges = data
    layout = layout_global(build_graph(nodes, edges), EngineConfig())

    for edge in layout.edges:
        source = layout.node(edge.source_id)
        target = layout.node(edge.target_id)
        assert edge.path is not None
        assert (edge.path.source_point.x, edge.path.source_point.y) == (source.x, source.bottom)
        assert (edge.path.target_point.x, edge.path.target_point.y) == (target.x, target.top)
