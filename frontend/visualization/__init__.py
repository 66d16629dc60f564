"""
Visualization Contracts

Render-ready views of a layout pass plus the visual tables they use.
"""

from .graph import (
    ViewAvailability, NodeRole, ExpandBadge, RenderNode, RenderEdge, GraphView,
)
from .style import (
    STATUS_COLORS, KIND_ICONS, FILL_COLORS, DIMMED_OPACITY,
    border_color, kind_icon, fill_color,
)

__all__ = [
    'ViewAvailability', 'NodeRole', 'ExpandBadge', 'RenderNode', 'RenderEdge', 'GraphView',
    'STATUS_COLORS', 'KIND_ICONS', 'FILL_COLORS', 'DIMMED_OPACITY',
    'border_color', 'kind_icon', 'fill_color',
]
