"""
Graph Visualization Contracts

Responsibility:
Deterministic, render-ready description of one layout pass.
Geometry is final; the drawing layer only paints it.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from topicgraph.contracts import (
    Direction, LearningStatus, PathGeometry, TopicKind, ViewMode, Viewport,
)


class ViewAvailability(Enum):
    """Whether a view has anything to draw."""
    AVAILABLE = "available"
    EMPTY = "empty"
    ERROR = "error"


class NodeRole(Enum):
    """Side of the centre a node sits on in the local view."""
    PREREQUISITE = "prerequisite"
    CENTER = "center"
    EFFECT = "effect"


@dataclass(frozen=True)
class ExpandBadge:
    """Expand/collapse toggle drawn on a node edge."""
    direction: Direction
    label: str        # "↑3" / "↓2" when collapsed, "-" when expanded
    expanded: bool


@dataclass(frozen=True)
class RenderNode:
    """Renderable topic node."""
    node_id: str
    x: float
    y: float
    width: float
    height: float
    kind: TopicKind
    status: Optional[LearningStatus]
    display_lines: Tuple[str, ...]
    icon: str
    border_color: str
    fill_color: str
    opacity: float
    is_selected: bool
    role: Optional[NodeRole] = None
    badges: Tuple[ExpandBadge, ...] = ()

    def badge(self, direction: Direction) -> Optional[ExpandBadge]:
        for badge in self.badges:
            if badge.direction is direction:
                return badge
        return None


@dataclass(frozen=True)
class RenderEdge:
    """Renderable edge. `path` is None for a degenerate edge (draw nothing)."""
    edge_id: str
    source_id: str
    target_id: str
    path: Optional[str]
    geometry: Optional[PathGeometry]
    opacity: float = 1.0


@dataclass(frozen=True)
class GraphView:
    """
    Pre-layouted topic graph.
    Layout is stable; the viewport is applied as one transform.
    """
    view_id: str
    mode: ViewMode
    nodes: Tuple[RenderNode, ...]
    edges: Tuple[RenderEdge, ...]
    viewport: Viewport
    availability: ViewAvailability
    center_id: Optional[str] = None
    error_message: Optional[str] = None

    def node(self, node_id: str) -> Optional[RenderNode]:
        for node in self.nodes:
            if node.node_id == node_id:
                return node
        return None

    @property
    def transform(self) -> str:
        v = self.viewport
        return f"translate({v.translate_x},{v.translate_y}) scale({v.scale})"
