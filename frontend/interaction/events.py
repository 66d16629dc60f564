"""
Interaction Contracts

Responsibility:
Define valid user actions on a topic graph and their intent.
No execution logic - just pure intent modeling.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from topicgraph.contracts import Direction


class InteractionType(Enum):
    """Types of user interaction."""
    NODE_SELECTED = "node_selected"
    NODE_ACTIVATED = "node_activated"      # double-click, recentre trigger
    NODE_HOVERED = "node_hovered"
    EXPAND_REQUESTED = "expand_requested"
    COLLAPSE_REQUESTED = "collapse_requested"


_NEEDS_DIRECTION = (InteractionType.EXPAND_REQUESTED, InteractionType.COLLAPSE_REQUESTED)

# Selection and hover may be cleared with node_id=None
_MAY_CLEAR = (InteractionType.NODE_SELECTED, InteractionType.NODE_HOVERED)


@dataclass(frozen=True)
class InteractionEvent:
    """A specific user intent."""
    event_type: InteractionType
    node_id: Optional[str]
    direction: Optional[Direction] = None
    source_component: str = "graph"
    occurred_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __post_init__(self):
        if self.event_type in _NEEDS_DIRECTION and self.direction is None:
            raise ValueError(f"{self.event_type.value} requires a direction")
        if self.event_type not in _MAY_CLEAR and not self.node_id:
            raise ValueError(f"{self.event_type.value} requires a node_id")

    @staticmethod
    def selected(node_id: Optional[str]) -> InteractionEvent:
        return InteractionEvent(InteractionType.NODE_SELECTED, node_id)

    @staticmethod
    def activated(node_id: str) -> InteractionEvent:
        return InteractionEvent(InteractionType.NODE_ACTIVATED, node_id)

    @staticmethod
    def hovered(node_id: Optional[str]) -> InteractionEvent:
        return InteractionEvent(InteractionType.NODE_HOVERED, node_id)

    @staticmethod
    def expand(node_id: str, direction: Direction) -> InteractionEvent:
        return InteractionEvent(InteractionType.EXPAND_REQUESTED, node_id, direction)

    @staticmethod
    def collapse(node_id: str, direction: Direction) -> InteractionEvent:
        return InteractionEvent(InteractionType.COLLAPSE_REQUESTED, node_id, direction)
