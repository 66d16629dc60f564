"""
Diagnostics Layer

RESPONSIBILITY: Record data-integrity anomalies found during layout
OUTPUTS: DiagnosticEntry records, mirrored to the standard logger

WHAT THIS LAYER MUST NOT DO:
============================
- Modify layout behavior
- Raise on anomalies (they are neutralized by the caller, then reported)
- Deduplicate or reinterpret entries

Collectors are append-only. Each session owns its own collector so
two sessions never see each other's entries.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Iterable, List, Optional, Tuple
import logging


logger = logging.getLogger("topicgraph.diagnostics")


class DiagnosticType(Enum):
    """Anomalies the engine tolerates and reports."""
    DANGLING_EDGE = "dangling_edge"
    DUPLICATE_NODE = "duplicate_node"
    CYCLE_DETECTED = "cycle_detected"
    UNREACHABLE_NODE = "unreachable_node"
    DEGENERATE_EDGE = "degenerate_edge"
    FETCH_FAILED = "fetch_failed"


@dataclass(frozen=True)
class DiagnosticEntry:
    """Single recorded anomaly."""
    sequence: int
    diagnostic_type: DiagnosticType
    component: str
    message: str
    node_ids: Tuple[str, ...] = field(default_factory=tuple)
    recorded_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class DiagnosticsCollector:
    """
    Append-only diagnostics channel.

    Entries are kept for inspection (tests, UI badges) and written to
    the `topicgraph.diagnostics` logger at WARNING level.
    """

    def __init__(self, component: str = "topicgraph"):
        self._component = component
        self._entries: List[DiagnosticEntry] = []
        self._sequence: int = 0

    def report(
        self,
        diagnostic_type: DiagnosticType,
        message: str,
        node_ids: Iterable[str] = ()
    ) -> DiagnosticEntry:
        """Record an anomaly and log it."""
        self._sequence += 1
        entry = DiagnosticEntry(
            sequence=self._sequence,
            diagnostic_type=diagnostic_type,
            component=self._component,
            message=message,
            node_ids=tuple(node_ids),
        )
        self._entries.append(entry)
        logger.warning("[%s] %s: %s", self._component, diagnostic_type.value, message)
        return entry

    def get_entries(
        self,
        diagnostic_type: Optional[DiagnosticType] = None
    ) -> List[DiagnosticEntry]:
        """Get entries, optionally filtered by type."""
        if diagnostic_type is None:
            return list(self._entries)
        return [e for e in self._entries if e.diagnostic_type == diagnostic_type]

    def has(self, diagnostic_type: DiagnosticType) -> bool:
        return any(e.diagnostic_type == diagnostic_type for e in self._entries)

    @property
    def component(self) -> str:
        return self._component

    @property
    def entry_count(self) -> int:
        return len(self._entries)


__all__ = [
    'DiagnosticType',
    'DiagnosticEntry',
    'DiagnosticsCollector',
]
