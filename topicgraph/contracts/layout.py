"""
Layout Output Contracts

What a layout pass hands to the render adapter.
All types are immutable; a new LayoutResult is produced per pass.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Tuple

from .base import LearningStatus, Point, TopicKind


class ViewMode(Enum):
    GLOBAL = "global"
    LOCAL = "local"


class MutationOutcome(Enum):
    """What happened to a local-session mutation request."""
    APPLIED = "applied"
    NO_OP = "no_op"        # already in the requested state
    STALE = "stale"        # superseded by a newer recenter, silently dropped


@dataclass(frozen=True)
class PositionedNode:
    """A topic with final geometry for one layout pass."""
    node_id: str
    name: str
    x: float
    y: float
    width: float
    height: float
    level: int
    kind: TopicKind
    status: Optional[LearningStatus]
    display_lines: Tuple[str, ...]
    prerequisite_count: int = 0
    effect_count: int = 0

    @property
    def top(self) -> float:
        return self.y - self.height / 2

    @property
    def bottom(self) -> float:
        return self.y + self.height / 2

    @property
    def left(self) -> float:
        return self.x - self.width / 2

    @property
    def right(self) -> float:
        return self.x + self.width / 2

    def overlaps(self, other: PositionedNode) -> bool:
        """Axis-aligned rectangle intersection (touching edges do not count)."""
        return (
            self.left < other.right and other.left < self.right
            and self.top < other.bottom and other.top < self.bottom
        )


@dataclass(frozen=True)
class PathGeometry:
    """Cubic Bezier connector from source bottom-mid to target top-mid."""
    source_point: Point
    control_point_1: Point
    control_point_2: Point
    target_point: Point

    def to_svg_path(self) -> str:
        s, c1, c2, t = self.source_point, self.control_point_1, self.control_point_2, self.target_point
        return f"M {s.x:g},{s.y:g} C {c1.x:g},{c1.y:g} {c2.x:g},{c2.y:g} {t.x:g},{t.y:g}"


@dataclass(frozen=True)
class RoutedEdge:
    """An edge after routing. `path` is None for a degenerate (no-op) edge."""
    source_id: str
    target_id: str
    path: Optional[PathGeometry]

    @property
    def edge_id(self) -> str:
        return f"{self.source_id}->{self.target_id}"


@dataclass(frozen=True)
class LayoutResult:
    """
    Complete output of one layout pass.

    Nodes are in graph insertion order, edges in edge insertion order.
    """
    mode: ViewMode
    nodes: Tuple[PositionedNode, ...]
    edges: Tuple[RoutedEdge, ...]
    levels: Dict[str, int] = field(default_factory=dict)
    center_id: Optional[str] = None

    def node(self, node_id: str) -> Optional[PositionedNode]:
        for node in self.nodes:
            if node.node_id == node_id:
                return node
        return None

    @property
    def node_ids(self) -> Tuple[str, ...]:
        return tuple(n.node_id for n in self.nodes)
