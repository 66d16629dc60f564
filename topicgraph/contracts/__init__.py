"""
Contracts

Immutable records shared by every layer of the layout engine.
"""

from .base import (
    ErrorCode, Error, Result, GraphConstructionError,
    TopicKind, LearningStatus, Direction,
    NodeDimensions, TopicNode, PrerequisiteEdge,
    Position, Zone, ExpansionKey, Point, Viewport,
)
from .layout import (
    ViewMode, MutationOutcome, PositionedNode, PathGeometry,
    RoutedEdge, LayoutResult,
)

__all__ = [
    'ErrorCode', 'Error', 'Result', 'GraphConstructionError',
    'TopicKind', 'LearningStatus', 'Direction',
    'NodeDimensions', 'TopicNode', 'PrerequisiteEdge',
    'Position', 'Zone', 'ExpansionKey', 'Point', 'Viewport',
    'ViewMode', 'MutationOutcome', 'PositionedNode', 'PathGeometry',
    'RoutedEdge', 'LayoutResult',
]
