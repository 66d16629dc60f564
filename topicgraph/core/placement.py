"""
Global Column Placement
=======================

Grid layout for the all-topics view.

ALGORITHM:
==========
1. Row and column pitch exceed the largest node box, so two nodes in
   distinct grid cells can never overlap.
2. Level 0 is laid left-to-right, centred on the canvas.
3. Every later level computes a preferred x per node (mean x of its
   positioned prerequisites, canvas centre if none) and assigns grid
   slots in two greedy passes:
     a. in ascending preferred x, claim the slot closest to the preferred
        slot index if it is still open
     b. everyone left takes the nearest open slot (lower index on ties)
   No exact crossing minimisation is attempted.
4. Positions are final. No force simulation ever runs.
"""

from __future__ import annotations
from math import ceil
from typing import Dict, List, Optional, Tuple
import numpy as np

from .graph import TopicGraph
from .levels import LevelAssignment
from .measure import measure
from ..config import GlobalLayoutConfig, MeasureConfig
from ..contracts.base import NodeDimensions, Position


class GlobalLayout:
    """Deterministic levelled grid placement."""

    def __init__(
        self,
        config: Optional[GlobalLayoutConfig] = None,
        measure_config: Optional[MeasureConfig] = None
    ):
        self._config = config or GlobalLayoutConfig()
        self._measure_config = measure_config or MeasureConfig()

    def pitches(self, graph: TopicGraph) -> Tuple[float, float]:
        """(row pitch, column pitch) for this dataset."""
        dims = [self._dims(graph, n) for n in graph.node_ids]
        max_width = max((d.width for d in dims), default=0.0)
        max_height = max((d.height for d in dims), default=0.0)

        row_pitch = max(self._config.min_row_pitch, max_height + self._config.row_gap)
        column_pitch = max(self._config.min_column_pitch, max_width + self._config.column_gap)
        return row_pitch, column_pitch

    def layout(self, graph: TopicGraph, levels: LevelAssignment) -> Dict[str, Position]:
        """Compute pinned positions for every node in `graph`."""
        positions: Dict[str, Position] = {}
        if len(graph) == 0:
            return positions

        row_pitch, column_pitch = self.pitches(graph)
        center_x = self._config.canvas_width / 2
        buckets = levels.by_level()

        for level in sorted(buckets):
            node_ids = buckets[level]
            y = self._config.top_margin + level * row_pitch

            if level == min(buckets):
                xs = self._row_xs(len(node_ids), center_x, column_pitch)
                for node_id, x in zip(node_ids, xs):
                    positions[node_id] = Position(x=x, y=y, level=level)
                continue

            preferred = [self._preferred_x(graph, n, positions, center_x) for n in node_ids]
            slot_xs = self._slot_grid(len(node_ids), preferred, center_x, column_pitch)
            assignment = self._assign_slots(preferred, slot_xs, column_pitch)

            for index, node_id in enumerate(node_ids):
                positions[node_id] = Position(x=float(slot_xs[assignment[index]]), y=y, level=level)

        return positions

    # =========================================================================
    # INTERNALS
    # =========================================================================

    def _dims(self, graph: TopicGraph, node_id: str) -> NodeDimensions:
        return measure(graph.node(node_id).name, self._measure_config)

    @staticmethod
    def _row_xs(count: int, center_x: float, pitch: float) -> List[float]:
        start = center_x - (count - 1) * pitch / 2
        return [start + i * pitch for i in range(count)]

    @staticmethod
    def _preferred_x(
        graph: TopicGraph,
        node_id: str,
        positions: Dict[str, Position],
        center_x: float
    ) -> float:
        placed = [positions[p].x for p in graph.prerequisites_of(node_id) if p in positions]
        if not placed:
            return center_x
        return float(np.mean(placed))

    @staticmethod
    def _slot_grid(
        count: int,
        preferred: List[float],
        center_x: float,
        pitch: float
    ) -> np.ndarray:
        """
        Slot centres for one level.

        `count + 2k` slots keep the row's parity (a single node can sit
        exactly on the centre) and reach every preferred x.
        """
        base_half_span = (count - 1) / 2
        needed = max(abs(x - center_x) for x in preferred) / pitch
        extra = max(0, ceil(needed - base_half_span))
        slots = count + 2 * extra

        offsets = np.arange(slots) - (slots - 1) / 2
        return center_x + offsets * pitch

    @staticmethod
    def _assign_slots(
        preferred: List[float],
        slot_xs: np.ndarray,
        pitch: float
    ) -> List[int]:
        """Two-pass greedy slot claim. Returns slot index per candidate."""
        slot_indices = np.arange(len(slot_xs), dtype=float)
        ideal = (np.asarray(preferred) - slot_xs[0]) / pitch

        # Stable sort: input order breaks ties between equal preferences
        order = sorted(range(len(preferred)), key=lambda i: preferred[i])
        is_open = np.ones(len(slot_xs), dtype=bool)
        assignment: Dict[int, int] = {}

        for candidate in order:
            closest = int(np.argmin(np.abs(slot_indices - ideal[candidate])))
            if is_open[closest]:
                assignment[candidate] = closest
                is_open[closest] = False

        for candidate in order:
            if candidate in assignment:
                continue
            distance = np.abs(slot_indices - ideal[candidate])
            distance[~is_open] = np.inf
            nearest = int(np.argmin(distance))
            assignment[candidate] = nearest
            is_open[nearest] = False

        return [assignment[i] for i in range(len(preferred))]
