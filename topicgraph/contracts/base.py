"""
Base Contracts and Shared Types

These are the foundational types used across the layout engine.
All types here are IMMUTABLE and represent pure data.

BOUNDARY ENFORCEMENT:
=====================
- Every layer may import from this module, this module imports from none
- All records are frozen dataclasses
- Geometry records carry no behaviour beyond trivial accessors
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Mapping, Optional, Tuple
from enum import Enum, auto


# =============================================================================
# ERROR STATES (Explicit, never silent)
# =============================================================================

class ErrorCode(Enum):
    """
    Explicit error codes for recoverable failures.
    Data anomalies are diagnostics, not errors - see observability.
    """
    # Collaborator errors
    FETCH_FAILED = auto()
    MALFORMED_PAYLOAD = auto()

    # Session errors
    NODE_NOT_FOUND = auto()
    SESSION_NOT_INITIALIZED = auto()


@dataclass(frozen=True)
class Error:
    """
    Immutable error representation with full context.
    Errors are data, not exceptions - they can be stored and inspected.
    """
    code: ErrorCode
    message: str
    timestamp: datetime
    context: Tuple[Tuple[str, str], ...] = field(default_factory=tuple)

    @staticmethod
    def create(code: ErrorCode, message: str) -> Error:
        return Error(code=code, message=message, timestamp=datetime.now(timezone.utc))

    def with_context(self, key: str, value: str) -> Error:
        """Return new Error with additional context (immutable)."""
        return Error(
            code=self.code,
            message=self.message,
            timestamp=self.timestamp,
            context=self.context + ((key, value),)
        )


@dataclass(frozen=True)
class Result:
    """
    Generic result type for operations that can fail.
    Either contains a value OR an error, never both.
    """
    value: Optional[object] = None
    error: Optional[Error] = None

    @property
    def is_success(self) -> bool:
        return self.error is None

    @property
    def is_failure(self) -> bool:
        return self.error is not None

    @staticmethod
    def success(value: object) -> Result:
        return Result(value=value, error=None)

    @staticmethod
    def failure(error: Error) -> Result:
        return Result(value=None, error=error)


class GraphConstructionError(ValueError):
    """
    Raised when a collaborator hands over data that is not node/edge shaped.

    This is a contract violation, not a data anomaly, so it fails fast.
    """


# =============================================================================
# TOPIC ENUMERATIONS
# =============================================================================

class TopicKind(Enum):
    """Kind of learning content. Drives the icon glyph only."""
    THEORY = "THEORY"
    PRACTICE = "PRACTICE"
    PROJECT = "PROJECT"


class LearningStatus(Enum):
    """Learner progress on a topic. Drives the border colour only."""
    NOT_LEARNED = "NOT_LEARNED"
    WANT_TO_LEARN = "WANT_TO_LEARN"
    LEARNING = "LEARNING"
    LEARNED = "LEARNED"
    LEARNED_AND_VALIDATED = "LEARNED_AND_VALIDATED"


class Direction(Enum):
    """Direction of a local-view expansion relative to a node."""
    PREREQUISITES = "prerequisites"
    EFFECTS = "effects"

    @property
    def opposite(self) -> Direction:
        if self is Direction.PREREQUISITES:
            return Direction.EFFECTS
        return Direction.PREREQUISITES

    @property
    def level_step(self) -> int:
        """Level delta from a node to its neighbours in this direction."""
        return -1 if self is Direction.PREREQUISITES else 1


# =============================================================================
# GRAPH RECORDS
# =============================================================================

@dataclass(frozen=True)
class NodeDimensions:
    """Rendered box size of a node plus its wrapped label lines."""
    width: float
    height: float
    lines: Tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class TopicNode:
    """
    Immutable topic as seen by the layout engine.

    `name` is already resolved to a single display string by the
    localization collaborator. Dimensions are derived from it and
    cannot be set independently.
    """
    topic_id: str
    name: str
    kind: TopicKind = TopicKind.THEORY
    status: Optional[LearningStatus] = None
    prerequisite_count: int = 0
    effect_count: int = 0

    def __post_init__(self):
        if not self.topic_id or not isinstance(self.topic_id, str):
            raise GraphConstructionError("TopicNode topic_id must be a non-empty string")
        if not isinstance(self.name, str):
            raise GraphConstructionError(
                f"TopicNode {self.topic_id!r} name must be a string, got {type(self.name).__name__}"
            )

    @property
    def dimensions(self) -> NodeDimensions:
        from ..core.measure import measure
        return measure(self.name)

    @staticmethod
    def from_mapping(data: Mapping[str, Any]) -> TopicNode:
        """
        Build a node from collaborator JSON.

        Accepts `id`/`topic_id`, `name`, `type`/`kind`, `status`,
        `prerequisiteCount`/`prerequisite_count`, `effectCount`/`effect_count`.
        """
        topic_id = data.get("id", data.get("topic_id"))
        if topic_id is None or "name" not in data:
            raise GraphConstructionError(f"Node mapping needs 'id' and 'name': {dict(data)!r}")

        try:
            kind = TopicKind(data.get("kind", data.get("type", TopicKind.THEORY.value)))
            raw_status = data.get("status")
            status = LearningStatus(raw_status) if raw_status else None
        except ValueError as exc:
            raise GraphConstructionError(f"Node {topic_id!r}: {exc}") from exc

        return TopicNode(
            topic_id=str(topic_id),
            name=data["name"],
            kind=kind,
            status=status,
            prerequisite_count=int(data.get("prerequisiteCount", data.get("prerequisite_count", 0))),
            effect_count=int(data.get("effectCount", data.get("effect_count", 0))),
        )


@dataclass(frozen=True)
class PrerequisiteEdge:
    """Directed relation: prerequisite must be learned before dependent."""
    prerequisite_id: str
    dependent_id: str

    @property
    def key(self) -> Tuple[str, str]:
        return (self.prerequisite_id, self.dependent_id)

    @staticmethod
    def coerce(raw: Any) -> PrerequisiteEdge:
        """Accept an edge record, a (source, target) pair or a source/target mapping."""
        if isinstance(raw, PrerequisiteEdge):
            return raw
        if isinstance(raw, Mapping):
            source = raw.get("source", raw.get("prerequisite_id"))
            target = raw.get("target", raw.get("dependent_id"))
        elif isinstance(raw, (tuple, list)) and len(raw) == 2:
            source, target = raw
        else:
            raise GraphConstructionError(f"Edge must be a pair or source/target mapping: {raw!r}")

        if not isinstance(source, str) or not isinstance(target, str):
            raise GraphConstructionError(f"Edge endpoints must be string ids: {raw!r}")
        return PrerequisiteEdge(prerequisite_id=source, dependent_id=target)


# =============================================================================
# LAYOUT RECORDS
# =============================================================================

@dataclass(frozen=True)
class Position:
    """
    Pinned node position.

    Positions are never integrated by physics; `fixed` is always True.
    `level` records the row the position was computed for.
    """
    x: float
    y: float
    level: int
    fixed: bool = True


@dataclass(frozen=True)
class Zone:
    """Horizontal band reserved for a node and its expanded descendants."""
    owner_id: str
    level: int
    center_x: float
    width: float
    order: int = 0

    @property
    def left(self) -> float:
        return self.center_x - self.width / 2

    @property
    def right(self) -> float:
        return self.center_x + self.width / 2


@dataclass(frozen=True)
class ExpansionKey:
    """(node, direction) pair tracking whether a branch is shown."""
    topic_id: str
    direction: Direction


@dataclass(frozen=True)
class Point:
    x: float
    y: float


@dataclass(frozen=True)
class Viewport:
    """
    Zoom/pan state of a view.

    Preserved across re-layouts; only the user moves it.
    """
    scale: float = 1.0
    translate_x: float = 0.0
    translate_y: float = 0.0

    MIN_SCALE = 0.1
    MAX_SCALE = 4.0

    def zoomed(self, scale: float) -> Viewport:
        clamped = min(self.MAX_SCALE, max(self.MIN_SCALE, scale))
        return Viewport(scale=clamped, translate_x=self.translate_x, translate_y=self.translate_y)

    def panned(self, dx: float, dy: float) -> Viewport:
        return Viewport(
            scale=self.scale,
            translate_x=self.translate_x + dx,
            translate_y=self.translate_y + dy
        )
