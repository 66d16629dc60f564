"""
Edge Router

Connector geometry between two positioned nodes. Both views lay out
top-to-bottom by increasing level, so every edge leaves the bottom-mid
of its source and enters the top-mid of its target.
"""

from __future__ import annotations
from typing import Optional

from ..config import RoutingConfig
from ..contracts.base import Point
from ..contracts.layout import PathGeometry, PositionedNode


_DEFAULT_CONFIG = RoutingConfig()


def route_edge(
    source: PositionedNode,
    target: PositionedNode,
    config: Optional[RoutingConfig] = None
) -> Optional[PathGeometry]:
    """
    Cubic S-curve from source to target.

    Control points sit straight below the source and straight above the
    target, `min(ratio * vertical distance, cap)` away. Returns None when
    both nodes share the same centre.
    """
    config = config or _DEFAULT_CONFIG

    if source.x == target.x and source.y == target.y:
        return None

    start = Point(source.x, source.bottom)
    end = Point(target.x, target.top)

    vertical_distance = abs(end.y - start.y)
    offset = min(vertical_distance * config.control_ratio, config.control_cap)

    return PathGeometry(
        source_point=start,
        control_point_1=Point(start.x, start.y + offset),
        control_point_2=Point(end.x, end.y - offset),
        target_point=end,
    )
