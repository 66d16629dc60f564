"""
Global Column Placement Tests

Deterministic levelled grid: pitches, centring, two-pass slot claims.
"""

import pytest

from topicgraph.config import EngineConfig, GlobalLayoutConfig
from topicgraph.contracts import ViewMode
from topicgraph.core.graph import build_graph
from topicgraph.core.levels import assign_global_levels
from topicgraph.core.placement import GlobalLayout
from topicgraph.session.global_view import layout_global

from .fixtures import (
    DIAMOND_EDGES, DIAMOND_NODES, MIXED_EDGES, MIXED_NODES, overlapping_pairs, topic,
)


def _place(nodes, edges, config=None):
    graph = build_graph(nodes, edges)
    return GlobalLayout(config).layout(graph, assign_global_levels(graph))


class TestPitches:

    def test_minimum_pitches_for_small_labels(self):
        graph = build_graph(DIAMOND_NODES, DIAMOND_EDGES)
        assert GlobalLayout().pitches(graph) == (120.0, 120.0)

    def test_pitch_exceeds_largest_box(self):
        graph = build_graph(MIXED_NODES, MIXED_EDGES)
        row_pitch, column_pitch = GlobalLayout().pitches(graph)
        widest = max(n.dimensions.width for n in graph.nodes)
        tallest = max(n.dimensions.height for n in graph.nodes)
        assert column_pitch > widest
        assert row_pitch > tallest


class TestDiamondScenario:
    """A -> B, A -> C, B -> D, C -> D"""

    def test_positions(self):
        positions = _place(DIAMOND_NODES, DIAMOND_EDGES)

        assert (positions["A"].x, positions["A"].y) == (400.0, 50.0)
        assert (positions["B"].x, positions["B"].y) == (340.0, 170.0)
        assert (positions["C"].x, positions["C"].y) == (460.0, 170.0)
        assert (positions["D"].x, positions["D"].y) == (400.0, 290.0)

    def test_siblings_symmetric_about_shared_axis(self):
        positions = _place(DIAMOND_NODES, DIAMOND_EDGES)
        mean_x = (positions["B"].x + positions["C"].x) / 2
        assert mean_x == pytest.approx(positions["A"].x)
        assert mean_x == pytest.approx(positions["D"].x)

    def test_positions_are_pinned(self):
        positions = _place(DIAMOND_NODES, DIAMOND_EDGES)
        assert all(p.fixed for p in positions.values())


class TestSlotAssignment:

    def test_root_row_is_centred(self):
        positions = _place([topic(t) for t in "abc"], [])
        assert [positions[t].x for t in "abc"] == [280.0, 400.0, 520.0]

    def test_child_follows_off_centre_parent(self):
        # d sits under c, the rightmost root
        positions = _place([topic(t) for t in "abcd"], [("c", "d")])
        assert positions["c"].x == 520.0
        assert positions["d"].x == positions["c"].x

    def test_contested_slot_goes_to_earlier_node(self):
        positions = _place(
            [topic("r"), topic("x"), topic("y")],
            [("r", "x"), ("r", "y")]
        )
        assert positions["x"].x < positions["y"].x

    def test_slots_are_distinct_within_a_level(self):
        positions = _place(MIXED_NODES, MIXED_EDGES)
        by_level = {}
        for node_id, p in positions.items():
            by_level.setdefault(p.level, []).append(p.x)
        for xs in by_level.values():
            assert len(xs) == len(set(xs))

    def test_custom_canvas_moves_the_axis(self):
        config = GlobalLayoutConfig(canvas_width=1000.0, top_margin=10.0)
        positions = _place([topic("solo")], [], config)
        assert (positions["solo"].x, positions["solo"].y) == (500.0, 10.0)

    def test_empty_graph(self):
        assert _place([], []) == {}


class TestGlobalLayoutResult:

    def test_no_overlap_on_mixed_dataset(self):
        result = layout_global(build_graph(MIXED_NODES, MIXED_EDGES))
        assert overlapping_pairs(result.nodes) == []

    def test_every_edge_routed(self):
        result = layout_global(build_graph(MIXED_NODES, MIXED_EDGES))
        assert result.mode is ViewMode.GLOBAL
        assert len(result.edges) == len(MIXED_EDGES)
        assert all(e.path is not None for e in result.edges)

    def test_repeatable(self):
        graph = build_graph(MIXED_NODES, MIXED_EDGES)
        assert layout_global(graph) == layout_global(graph)

    def test_config_flows_through(self):
        config = EngineConfig(global_layout=GlobalLayoutConfig(canvas_width=2000.0))
        result = layout_global(build_graph([topic("solo")], []), config)
        assert result.node("solo").x == 1000.0
