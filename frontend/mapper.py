"""
Layout to View Mapper

Converts engine layout results into read-only render views.

MAPPING BOUNDARY:
=================
This is the ONLY place where layout results become render contracts.
All conversion happens here, nowhere else.

MAPPING RULES:
==============
1. Never move a node: geometry is copied, not recomputed
2. Always include explicit availability
3. Preserve layout ordering
"""

from __future__ import annotations
from typing import AbstractSet, Callable, Optional, Tuple

from topicgraph.contracts import (
    Direction, LayoutResult, PositionedNode, RoutedEdge, ViewMode, Viewport,
)
from topicgraph.session import GlobalGraphSession, LocalGraphSession

from frontend.visualization.graph import (
    ExpandBadge, GraphView, NodeRole, RenderEdge, RenderNode, ViewAvailability,
)
from frontend.visualization.style import (
    DIMMED_OPACITY, border_color, fill_color, kind_icon,
)


ExpandedPredicate = Callable[[str, Direction], bool]


class GraphViewMapper:
    """
    Maps layout results to render views.

    SINGLE POINT OF CONVERSION:
    ===========================
    All layout -> render conversion goes through this class.
    """

    def __init__(self, view_id_prefix: str = "topic-graph"):
        self._prefix = view_id_prefix

    # =========================================================================
    # SESSION MAPPING
    # =========================================================================

    def map_global(self, session: GlobalGraphSession, hovered_id: Optional[str] = None) -> GraphView:
        layout = session.layout()
        if layout is None:
            return self.empty(ViewMode.GLOBAL, session.viewport)
        return self.map_layout(
            layout,
            viewport=session.viewport,
            selected_id=session.selected_id,
            hovered_id=hovered_id,
            highlighted=session.highlighted,
        )

    def map_local(self, session: LocalGraphSession, hovered_id: Optional[str] = None) -> GraphView:
        layout = session.layout()
        if layout is None:
            return self.empty(ViewMode.LOCAL, session.viewport)
        return self.map_layout(
            layout,
            viewport=session.viewport,
            selected_id=session.selected_id,
            hovered_id=hovered_id,
            expanded=session.is_expanded,
        )

    # =========================================================================
    # LAYOUT MAPPING
    # =========================================================================

    def map_layout(
        self,
        layout: LayoutResult,
        viewport: Optional[Viewport] = None,
        selected_id: Optional[str] = None,
        hovered_id: Optional[str] = None,
        highlighted: AbstractSet[str] = frozenset(),
        expanded: Optional[ExpandedPredicate] = None
    ) -> GraphView:
        nodes = tuple(
            self._map_node(n, layout, selected_id, hovered_id, highlighted, expanded)
            for n in layout.nodes
        )
        edges = tuple(self._map_edge(e, highlighted) for e in layout.edges)

        return GraphView(
            view_id=self._view_id(layout),
            mode=layout.mode,
            nodes=nodes,
            edges=edges,
            viewport=viewport or Viewport(),
            availability=ViewAvailability.AVAILABLE if nodes else ViewAvailability.EMPTY,
            center_id=layout.center_id,
        )

    def empty(self, mode: ViewMode, viewport: Optional[Viewport] = None) -> GraphView:
        return GraphView(
            view_id=f"{self._prefix}:{mode.value}:empty",
            mode=mode,
            nodes=(),
            edges=(),
            viewport=viewport or Viewport(),
            availability=ViewAvailability.EMPTY,
        )

    def failed(self, mode: ViewMode, message: str, viewport: Optional[Viewport] = None) -> GraphView:
        """View for a failed load; the caller shows `message` and offers a retry."""
        return GraphView(
            view_id=f"{self._prefix}:{mode.value}:error",
            mode=mode,
            nodes=(),
            edges=(),
            viewport=viewport or Viewport(),
            availability=ViewAvailability.ERROR,
            error_message=message,
        )

    # =========================================================================
    # INTERNALS
    # =========================================================================

    def _view_id(self, layout: LayoutResult) -> str:
        if layout.center_id is not None:
            return f"{self._prefix}:{layout.mode.value}:{layout.center_id}"
        return f"{self._prefix}:{layout.mode.value}"

    def _map_node(
        self,
        node: PositionedNode,
        layout: LayoutResult,
        selected_id: Optional[str],
        hovered_id: Optional[str],
        highlighted: AbstractSet[str],
        expanded: Optional[ExpandedPredicate]
    ) -> RenderNode:
        is_selected = node.node_id == selected_id
        dimmed = bool(highlighted) and node.node_id not in highlighted

        role = None
        badges: Tuple[ExpandBadge, ...] = ()
        if layout.mode is ViewMode.LOCAL:
            role = self._role(node, layout)
            badges = self._badges(node, role, expanded)

        return RenderNode(
            node_id=node.node_id,
            x=node.x,
            y=node.y,
            width=node.width,
            height=node.height,
            kind=node.kind,
            status=node.status,
            display_lines=node.display_lines,
            icon=kind_icon(node.kind),
            border_color=border_color(node.status),
            fill_color=fill_color(is_selected, node.node_id == hovered_id, dimmed),
            opacity=DIMMED_OPACITY if dimmed else 1.0,
            is_selected=is_selected,
            role=role,
            badges=badges,
        )

    @staticmethod
    def _role(node: PositionedNode, layout: LayoutResult) -> NodeRole:
        if node.node_id == layout.center_id:
            return NodeRole.CENTER
        return NodeRole.PREREQUISITE if node.level < 0 else NodeRole.EFFECT

    @staticmethod
    def _badges(
        node: PositionedNode,
        role: NodeRole,
        expanded: Optional[ExpandedPredicate]
    ) -> Tuple[ExpandBadge, ...]:
        badges = []
        is_open = expanded or (lambda _node_id, _direction: False)

        if node.prerequisite_count > 0 and role in (NodeRole.CENTER, NodeRole.PREREQUISITE):
            opened = is_open(node.node_id, Direction.PREREQUISITES)
            badges.append(ExpandBadge(
                Direction.PREREQUISITES, "-" if opened else f"↑{node.prerequisite_count}", opened
            ))
        if node.effect_count > 0 and role in (NodeRole.CENTER, NodeRole.EFFECT):
            opened = is_open(node.node_id, Direction.EFFECTS)
            badges.append(ExpandBadge(
                Direction.EFFECTS, "-" if opened else f"↓{node.effect_count}", opened
            ))
        return tuple(badges)

    @staticmethod
    def _map_edge(edge: RoutedEdge, highlighted: AbstractSet[str]) -> RenderEdge:
        lit = not highlighted or (edge.source_id in highlighted and edge.target_id in highlighted)
        return RenderEdge(
            edge_id=edge.edge_id,
            source_id=edge.source_id,
            target_id=edge.target_id,
            path=edge.path.to_svg_path() if edge.path is not None else None,
            geometry=edge.path,
            opacity=1.0 if lit else DIMMED_OPACITY,
        )
