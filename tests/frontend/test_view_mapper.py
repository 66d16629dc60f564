"""
View Mapper Contract Tests
==========================

Verifies that render views copy layout geometry verbatim and derive
colours, icons, badges and dimming from node data and session state.
"""

import asyncio

from frontend.mapper import GraphViewMapper
from frontend.visualization.graph import NodeRole, ViewAvailability
from frontend.visualization.style import (
    DEFAULT_BORDER, DIMMED_OPACITY, FILL_COLORS, KIND_ICONS, STATUS_COLORS,
)
from topicgraph.contracts import Direction, LearningStatus, TopicKind, ViewMode
from topicgraph.session import GlobalGraphSession, LocalGraphSession

from ..fixtures import diamond_provider, mixed_provider


PRE = Direction.PREREQUISITES
EFF = Direction.EFFECTS


def _global_session(provider=None):
    session = GlobalGraphSession(provider or mixed_provider())
    asyncio.run(session.load())
    return session


def _local_session(center_id="D"):
    session = LocalGraphSession(diamond_provider(), center_id)
    asyncio.run(session.initialize())
    return session


class TestGeometryIsCopied:

    def test_nodes_match_layout(self):
        session = _global_session()
        view = GraphViewMapper().map_global(session)

        for rendered, positioned in zip(view.nodes, session.layout().nodes):
            assert rendered.node_id == positioned.node_id
            assert (rendered.x, rendered.y) == (positioned.x, positioned.y)
            assert (rendered.width, rendered.height) == (positioned.width, positioned.height)
            assert rendered.display_lines == positioned.display_lines

    def test_edge_path_is_svg_of_geometry(self):
        session = _global_session(diamond_provider())
        view = GraphViewMapper().map_global(session)

        edge = view.edges[0]
        assert edge.edge_id == "A->B"
        assert edge.path == edge.geometry.to_svg_path()
        assert edge.path.startswith("M ")

    def test_view_carries_mode_and_center(self):
        view = GraphViewMapper().map_local(_local_session())
        assert view.mode is ViewMode.LOCAL
        assert view.center_id == "D"
        assert view.view_id == "topic-graph:local:D"
        assert view.availability is ViewAvailability.AVAILABLE


class TestNodeStyling:

    def test_status_drives_border(self):
        view = GraphViewMapper().map_global(_global_session())

        assert view.node("root1").border_color == STATUS_COLORS[LearningStatus.LEARNED]
        assert view.node("root3").border_color == STATUS_COLORS[LearningStatus.LEARNING]
        assert view.node("mid1").border_color == DEFAULT_BORDER

    def test_kind_drives_icon(self):
        view = GraphViewMapper().map_global(_global_session())

        assert view.node("root2").icon == KIND_ICONS[TopicKind.PRACTICE]
        assert view.node("root3").icon == KIND_ICONS[TopicKind.PROJECT]
        assert view.node("top1").icon == KIND_ICONS[TopicKind.THEORY]

    def test_selection_and_hover_drive_fill(self):
        session = _global_session()
        session.select("mid1")
        view = GraphViewMapper().map_global(session, hovered_id="mid2")

        assert view.node("mid1").fill_color == FILL_COLORS["selected"]
        assert view.node("mid1").is_selected
        assert view.node("mid2").fill_color == FILL_COLORS["hovered"]
        assert view.node("mid3").fill_color == FILL_COLORS["default"]


class TestHighlight:

    def test_non_highlighted_nodes_are_dimmed(self):
        session = _global_session(diamond_provider())
        session.highlight(["A", "B"])
        view = GraphViewMapper().map_global(session)

        assert view.node("A").opacity == 1.0
        assert view.node("C").opacity == DIMMED_OPACITY
        assert view.node("C").fill_color == FILL_COLORS["dimmed"]

    def test_edges_lit_only_between_highlighted_nodes(self):
        session = _global_session(diamond_provider())
        session.highlight(["A", "B"])
        edges = {e.edge_id: e for e in GraphViewMapper().map_global(session).edges}

        assert edges["A->B"].opacity == 1.0
        assert edges["A->C"].opacity == DIMMED_OPACITY

    def test_no_highlight_means_nothing_dimmed(self):
        view = GraphViewMapper().map_global(_global_session(diamond_provider()))
        assert {n.opacity for n in view.nodes} == {1.0}


class TestLocalBadges:

    def test_roles_follow_levels(self):
        view = GraphViewMapper().map_local(_local_session("B"))

        assert view.node("B").role is NodeRole.CENTER
        assert view.node("A").role is NodeRole.PREREQUISITE
        assert view.node("D").role is NodeRole.EFFECT

    def test_collapsed_badges_show_counts(self):
        view = GraphViewMapper().map_local(_local_session("D"))

        assert view.node("B").badge(PRE).label == "↑1"
        assert not view.node("B").badge(PRE).expanded
        assert view.node("B").badge(EFF) is None

    def test_center_opened_on_load(self):
        view = GraphViewMapper().map_local(_local_session("D"))

        badge = view.node("D").badge(PRE)
        assert badge.label == "-"
        assert badge.expanded
        assert view.node("D").badge(EFF) is None

    def test_expanded_badge_shows_dash(self):
        session = _local_session("D")
        asyncio.run(session.expand("B", PRE))
        view = GraphViewMapper().map_local(session)

        badge = view.node("B").badge(PRE)
        assert badge.label == "-"
        assert badge.expanded
        assert view.node("A").badge(EFF) is None

    def test_center_shows_both_directions(self):
        view = GraphViewMapper().map_local(_local_session("B"))
        directions = [b.direction for b in view.node("B").badges]
        assert directions == [PRE, EFF]

    def test_global_view_has_no_badges(self):
        view = GraphViewMapper().map_global(_global_session(diamond_provider()))
        assert all(n.badges == () and n.role is None for n in view.nodes)


class TestUnavailableViews:

    def test_unloaded_session_maps_to_empty(self):
        view = GraphViewMapper().map_global(GlobalGraphSession(diamond_provider()))
        assert view.availability is ViewAvailability.EMPTY
        assert view.nodes == ()

    def test_failed_view_carries_message(self):
        view = GraphViewMapper().failed(ViewMode.LOCAL, "Topic service unavailable")
        assert view.availability is ViewAvailability.ERROR
        assert view.error_message == "Topic service unavailable"

    def test_viewport_becomes_transform(self):
        session = _local_session()
        session.zoom(2.0)
        session.pan(10, -5)
        view = GraphViewMapper().map_local(session)
        assert view.transform == "translate(10.0,-5.0) scale(2.0)"
