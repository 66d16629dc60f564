"""
Layout Core

Pure, synchronous computation: graph model, measurement, levels,
placement and routing. No I/O, no module-level mutable state.
"""

from .graph import TopicGraph, build_graph
from .measure import measure, wrap_label
from .levels import LevelAssignment, assign_global_levels, assign_local_levels
from .placement import GlobalLayout
from .zones import PositionStore, ZoneLayout, ZoneTable
from .routing import route_edge
from .assembly import assemble_layout

__all__ = [
    'TopicGraph', 'build_graph',
    'measure', 'wrap_label',
    'LevelAssignment', 'assign_global_levels', 'assign_local_levels',
    'GlobalLayout',
    'PositionStore', 'ZoneLayout', 'ZoneTable',
    'route_edge',
    'assemble_layout',
]
