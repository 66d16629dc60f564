"""
Local Zone Placement
====================

Tree layout for the focal-topic view.

Every placed node owns a ZONE: a horizontal band on its row wide enough
for the node and, recursively, its expanded descendants. Child zones are
nested under the parent zone centre, so growing one branch only touches
that branch.

STORES (owned by the session, passed in):
- ZoneTable: zones keyed by (node_id, level), survive across passes
- PositionStore: pinned positions keyed by node_id, survive across passes

PASS GUARANTEES:
================
1. A node already pinned at its current level keeps its position
2. New nodes are placed; parent zones may only widen
3. required_width is memoized per pass (deep expansions stay linear)
4. Spacing never goes below min_sibling_spacing; overlap is tolerated
   before negative spacing is
"""

from __future__ import annotations
from typing import Callable, Dict, Iterator, List, Mapping, Optional, Sequence, Set, Tuple

from .graph import TopicGraph
from .levels import LevelAssignment
from .measure import measure
from ..config import LocalLayoutConfig, MeasureConfig
from ..contracts.base import Direction, Position, Zone


ExpandedPredicate = Callable[[str, Direction], bool]


# =============================================================================
# PERSISTENT STORES
# =============================================================================

class ZoneTable:
    """Zones keyed by (node_id, level)."""

    def __init__(self):
        self._zones: Dict[Tuple[str, int], Zone] = {}

    def get(self, node_id: str, level: int) -> Optional[Zone]:
        return self._zones.get((node_id, level))

    def put(self, zone: Zone) -> None:
        self._zones[(zone.owner_id, zone.level)] = zone

    def discard_node(self, node_id: str) -> None:
        for key in [k for k in self._zones if k[0] == node_id]:
            del self._zones[key]

    def keys(self) -> Set[Tuple[str, int]]:
        return set(self._zones)

    def clear(self) -> None:
        self._zones.clear()

    def __contains__(self, key: object) -> bool:
        return key in self._zones

    def __len__(self) -> int:
        return len(self._zones)

    def __iter__(self) -> Iterator[Zone]:
        return iter(list(self._zones.values()))


class PositionStore:
    """Pinned positions keyed by node_id."""

    def __init__(self):
        self._positions: Dict[str, Position] = {}

    def get(self, node_id: str) -> Optional[Position]:
        return self._positions.get(node_id)

    def put(self, node_id: str, position: Position) -> None:
        self._positions[node_id] = position

    def discard(self, node_id: str) -> None:
        self._positions.pop(node_id, None)

    def snapshot(self) -> Dict[str, Position]:
        return dict(self._positions)

    def clear(self) -> None:
        self._positions.clear()

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._positions

    def __len__(self) -> int:
        return len(self._positions)


# =============================================================================
# LAYOUT
# =============================================================================

class ZoneLayout:
    """Stateless entry point; all state lives in the stores passed in."""

    def __init__(
        self,
        config: Optional[LocalLayoutConfig] = None,
        measure_config: Optional[MeasureConfig] = None
    ):
        self._config = config or LocalLayoutConfig()
        self._measure_config = measure_config or MeasureConfig()

    @property
    def config(self) -> LocalLayoutConfig:
        return self._config

    def layout(
        self,
        graph: TopicGraph,
        center_id: str,
        levels: LevelAssignment,
        expanded: ExpandedPredicate,
        zones: ZoneTable,
        positions: PositionStore,
        parent_hints: Optional[Mapping[str, Sequence[str]]] = None
    ) -> Dict[str, Position]:
        """Run one pass and return the position of every node in `graph`."""
        layout_pass = _ZonePass(
            graph=graph,
            center_id=center_id,
            levels=levels.levels,
            expanded=expanded,
            zones=zones,
            positions=positions,
            parent_hints=parent_hints or {},
            config=self._config,
            measure_config=self._measure_config,
        )
        return layout_pass.run()

    def required_width(
        self,
        graph: TopicGraph,
        center_id: str,
        levels: LevelAssignment,
        expanded: ExpandedPredicate,
        node_id: str,
        parent_hints: Optional[Mapping[str, Sequence[str]]] = None
    ) -> float:
        """Zone width a node needs at its current level, without placing anything."""
        layout_pass = _ZonePass(
            graph=graph,
            center_id=center_id,
            levels=levels.levels,
            expanded=expanded,
            zones=ZoneTable(),
            positions=PositionStore(),
            parent_hints=parent_hints or {},
            config=self._config,
            measure_config=self._measure_config,
        )
        return layout_pass.required_width(node_id, levels[node_id])


class _ZonePass:
    """Mutable working state of a single layout pass."""

    def __init__(
        self,
        graph: TopicGraph,
        center_id: str,
        levels: Dict[str, int],
        expanded: ExpandedPredicate,
        zones: ZoneTable,
        positions: PositionStore,
        parent_hints: Mapping[str, Sequence[str]],
        config: LocalLayoutConfig,
        measure_config: MeasureConfig
    ):
        self.graph = graph
        self.center_id = center_id
        self.levels = levels
        self.expanded = expanded
        self.zones = zones
        self.positions = positions
        self.hints = parent_hints
        self.config = config
        self.measure_config = measure_config

        self._width_memo: Dict[Tuple[str, int], float] = {}
        self._occupied: Dict[int, List[Tuple[float, float]]] = {}

        self.parent_of: Dict[str, Optional[str]] = {
            node_id: self._structural_parent(node_id)
            for node_id in graph.node_ids if node_id != center_id
        }
        self.children_of: Dict[str, List[str]] = {}
        for node_id in graph.node_ids:
            parent_id = self.parent_of.get(node_id)
            if parent_id is not None:
                self.children_of.setdefault(parent_id, []).append(node_id)

    # =========================================================================
    # STRUCTURE
    # =========================================================================

    def _structural_parent(self, node_id: str) -> Optional[str]:
        """
        Neighbour one level closer to the centre that brought this node in.

        Claim order from the session wins; graph adjacency is the fallback.
        """
        level = self.levels.get(node_id)
        if level is None or level == 0:
            return None

        parent_level = level - 1 if level > 0 else level + 1
        if level > 0:
            neighbours = self.graph.prerequisites_of(node_id)
        else:
            neighbours = self.graph.dependents_of(node_id)

        for candidate in list(self.hints.get(node_id, ())) + list(neighbours):
            if candidate in self.graph and self.levels.get(candidate) == parent_level:
                if candidate in neighbours:
                    return candidate
        return None

    def required_width(self, node_id: str, level: int, _visiting: Optional[Set[str]] = None) -> float:
        """Own box plus expanded subtree, memoized per pass."""
        key = (node_id, level)
        if key in self._width_memo:
            return self._width_memo[key]

        visiting = _visiting if _visiting is not None else set()
        base = max(
            self.config.base_zone_width,
            measure(self.graph.node(node_id).name, self.measure_config).width + self.config.zone_padding
        )
        if node_id in visiting:
            return base
        visiting.add(node_id)

        children_width = 0.0
        sides = []
        if level >= 0 and self.expanded(node_id, Direction.EFFECTS):
            sides.append(level + 1)
        if level <= 0 and self.expanded(node_id, Direction.PREREQUISITES):
            sides.append(level - 1)

        for child_level in sides:
            children = [
                c for c in self.children_of.get(node_id, ())
                if self.levels.get(c) == child_level
            ]
            if children:
                side_width = sum(self.required_width(c, child_level, visiting) for c in children)
                side_width += (len(children) - 1) * self.config.child_spacing
                children_width = max(children_width, side_width)

        visiting.discard(node_id)
        width = max(base, children_width)
        self._width_memo[key] = width
        return width

    # =========================================================================
    # PASS
    # =========================================================================

    def run(self) -> Dict[str, Position]:
        for node_id in [n for n in self.positions.snapshot() if n not in self.graph]:
            self.positions.discard(node_id)
            self.zones.discard_node(node_id)

        if self.center_id not in self.graph:
            return {}

        by_level: Dict[int, List[str]] = {}
        for node_id in self.graph.node_ids:
            by_level.setdefault(self.levels[node_id], []).append(node_id)

        for level in sorted(by_level, key=lambda lv: (abs(lv), lv)):
            if level == 0:
                self._place_center()
            self._place_level(level, [n for n in by_level[level] if n != self.center_id])

        return {
            node_id: self.positions.get(node_id)
            for node_id in self.graph.node_ids
        }

    def _row_y(self, level: int) -> float:
        return self.config.canvas_height / 2 + level * self.config.row_pitch

    def _pinned(self, node_id: str, level: int) -> Optional[Position]:
        stored = self.positions.get(node_id)
        if stored is None:
            return None
        if stored.level != level:
            self.positions.discard(node_id)
            self.zones.discard_node(node_id)
            return None
        return stored

    def _center_cap(self) -> float:
        return self.config.canvas_width * self.config.center_zone_fraction

    def _place_center(self) -> None:
        center = self.center_id
        width = min(self.required_width(center, 0), self._center_cap())

        pinned = self._pinned(center, 0)
        if pinned is None:
            pinned = Position(x=self.config.canvas_width / 2, y=self._row_y(0), level=0)
            self.positions.put(center, pinned)

        existing = self.zones.get(center, 0)
        if existing is not None:
            width = max(width, existing.width)
        zone = Zone(owner_id=center, level=0, center_x=pinned.x, width=width, order=0)
        self.zones.put(zone)
        self._occupy(0, zone)

    def _place_level(self, level: int, node_ids: List[str]) -> None:
        groups: Dict[str, List[str]] = {}
        orphans: List[str] = []

        for node_id in node_ids:
            parent_id = self.parent_of.get(node_id)
            if parent_id is None or self.zones.get(parent_id, self.levels[parent_id]) is None:
                orphans.append(node_id)
            else:
                groups.setdefault(parent_id, []).append(node_id)

        for parent_id, siblings in groups.items():
            parent_zone = self._widen_parent(parent_id)
            self._place_siblings(level, parent_zone, siblings)

        for node_id in orphans:
            self._place_independent(level, node_id, node_ids)

    def _widen_parent(self, parent_id: str) -> Zone:
        parent_level = self.levels[parent_id]
        zone = self.zones.get(parent_id, parent_level)
        required = self.required_width(parent_id, parent_level)
        if parent_id == self.center_id:
            required = min(required, self._center_cap())

        if required > zone.width:
            zone = Zone(
                owner_id=zone.owner_id, level=zone.level, center_x=zone.center_x,
                width=required, order=zone.order
            )
            self.zones.put(zone)
        return zone

    def _place_siblings(self, level: int, parent_zone: Zone, siblings: List[str]) -> None:
        widths = [self.required_width(s, level) for s in siblings]
        pinned = {s: self._pinned(s, level) for s in siblings}
        fresh = [i for i, s in enumerate(siblings) if pinned[s] is None]

        centers: Dict[int, float] = {}
        if fresh and len(fresh) == len(siblings):
            for i, x in enumerate(self._symmetric_centers(parent_zone, widths)):
                centers[i] = x
        elif fresh:
            cursor = max(
                pinned[s].x + max(widths[i], self._zone_width(s, level)) / 2
                for i, s in enumerate(siblings) if pinned[s] is not None
            )
            for i in fresh:
                cursor += self.config.child_spacing + widths[i] / 2
                centers[i] = cursor
                cursor += widths[i] / 2

        if centers:
            left = min(centers[i] - widths[i] / 2 for i in centers)
            right = max(centers[i] + widths[i] / 2 for i in centers)
            shift = self._clearance(level, left, right)
            for i in centers:
                centers[i] += shift

        for index, node_id in enumerate(siblings):
            if index in centers:
                x = centers[index]
                self.positions.put(node_id, Position(x=x, y=self._row_y(level), level=level))
                width = widths[index]
            else:
                x = pinned[node_id].x
                width = max(widths[index], self._zone_width(node_id, level))

            zone = Zone(owner_id=node_id, level=level, center_x=x, width=width, order=index)
            self.zones.put(zone)
            self._occupy(level, zone)

    def _symmetric_centers(self, parent_zone: Zone, widths: List[float]) -> List[float]:
        """Sibling group centred under the parent; each child gets its own width."""
        count = len(widths)
        if count == 1:
            return [parent_zone.center_x]

        total = sum(widths)
        spacing = max(self.config.min_sibling_spacing, (parent_zone.width - total) / (count + 1))
        group_width = total + (count - 1) * spacing

        centers = []
        cursor = parent_zone.center_x - group_width / 2
        for width in widths:
            centers.append(cursor + width / 2)
            cursor += width + spacing
        return centers

    def _place_independent(self, level: int, node_id: str, level_ids: List[str]) -> None:
        """No resolvable parent: even spacing across the canvas row."""
        width = self.required_width(node_id, level)
        pinned = self._pinned(node_id, level)

        if pinned is None:
            count = len(level_ids)
            canvas = self.config.canvas_width
            spacing = min(self.config.independent_spacing, (canvas - self.config.independent_margin) / count)
            start = (canvas - (count - 1) * spacing) / 2
            x = start + level_ids.index(node_id) * spacing
            x += self._clearance(level, x - width / 2, x + width / 2)
            self.positions.put(node_id, Position(x=x, y=self._row_y(level), level=level))
        else:
            x = pinned.x
            width = max(width, self._zone_width(node_id, level))

        zone = Zone(owner_id=node_id, level=level, center_x=x, width=width, order=level_ids.index(node_id))
        self.zones.put(zone)
        self._occupy(level, zone)

    # =========================================================================
    # COLLISION
    # =========================================================================

    def _zone_width(self, node_id: str, level: int) -> float:
        zone = self.zones.get(node_id, level)
        return zone.width if zone is not None else 0.0

    def _occupy(self, level: int, zone: Zone) -> None:
        self._occupied.setdefault(level, []).append((zone.left, zone.right))

    def _clearance(self, level: int, left: float, right: float) -> float:
        """
        Smallest horizontal shift that keeps [left, right] clear of the
        zones already placed on this row (0 if nothing is in the way).
        """
        occupied = self._occupied.get(level, [])
        gap = self.config.min_sibling_spacing

        def is_clear(shift: float) -> bool:
            return all(
                right + shift + gap <= lo or left + shift >= hi + gap
                for lo, hi in occupied
            )

        candidates = [0.0]
        for lo, hi in occupied:
            candidates.append(lo - gap - right)
            candidates.append(hi + gap - left)

        for shift in sorted(candidates, key=lambda s: (abs(s), s)):
            if is_clear(shift):
                return shift
        return 0.0
