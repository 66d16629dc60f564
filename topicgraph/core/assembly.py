"""
Layout Assembly

Joins graph, levels and final positions into a LayoutResult, routing
every edge once all positions are known.
"""

from __future__ import annotations
from typing import Dict, List, Mapping, Optional

from .graph import TopicGraph
from .levels import LevelAssignment
from .measure import measure
from .routing import route_edge
from ..config import MeasureConfig, RoutingConfig
from ..contracts.base import Position
from ..contracts.layout import LayoutResult, PositionedNode, RoutedEdge, ViewMode
from ..observability import DiagnosticsCollector, DiagnosticType


def assemble_layout(
    mode: ViewMode,
    graph: TopicGraph,
    levels: LevelAssignment,
    positions: Mapping[str, Position],
    measure_config: Optional[MeasureConfig] = None,
    routing_config: Optional[RoutingConfig] = None,
    diagnostics: Optional[DiagnosticsCollector] = None,
    center_id: Optional[str] = None
) -> LayoutResult:
    """Positioned nodes in graph order, routed edges in edge order."""
    nodes: Dict[str, PositionedNode] = {}
    for topic in graph.nodes:
        position = positions.get(topic.topic_id)
        if position is None:
            continue
        dims = measure(topic.name, measure_config)
        nodes[topic.topic_id] = PositionedNode(
            node_id=topic.topic_id,
            name=topic.name,
            x=position.x,
            y=position.y,
            width=dims.width,
            height=dims.height,
            level=position.level,
            kind=topic.kind,
            status=topic.status,
            display_lines=dims.lines,
            prerequisite_count=topic.prerequisite_count,
            effect_count=topic.effect_count,
        )

    edges: List[RoutedEdge] = []
    for edge in graph.edges:
        source = nodes.get(edge.prerequisite_id)
        target = nodes.get(edge.dependent_id)
        path = route_edge(source, target, routing_config) if source and target else None

        if path is None and diagnostics is not None:
            diagnostics.report(
                DiagnosticType.DEGENERATE_EDGE,
                f"Edge {edge.prerequisite_id!r} -> {edge.dependent_id!r} has no drawable path",
                edge.key
            )
        edges.append(RoutedEdge(edge.prerequisite_id, edge.dependent_id, path))

    return LayoutResult(
        mode=mode,
        nodes=tuple(nodes.values()),
        edges=tuple(edges),
        levels=dict(levels.levels),
        center_id=center_id,
    )
