"""
Level Assignment
================

Integer rows for the two views.

GLOBAL MODE:
    level(n) = 0 if n has no prerequisites, else 1 + max(level(p)).
    Memoized depth-first evaluation over an explicit stack. A prerequisite
    that is still on the visiting stack is a back-edge: it contributes
    level 0 and is reported as a cycle.

LOCAL MODE:
    Breadth-first from the centre (level 0). Prerequisites get L-1,
    dependents get L+1. First visit wins; no node is reassigned.

Neither mode raises on bad data. Cyclic input yields locally
inconsistent but finite levels plus a diagnostic.
"""

from __future__ import annotations
from collections import deque
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterator, List, Mapping, Optional, Set, Tuple

from .graph import TopicGraph
from ..contracts.base import Direction
from ..observability import DiagnosticsCollector, DiagnosticType


@dataclass(frozen=True)
class LevelAssignment:
    """Levels for one layout pass."""
    levels: Dict[str, int]
    broken_edges: FrozenSet[Tuple[str, str]] = field(default_factory=frozenset)
    unreachable: FrozenSet[str] = field(default_factory=frozenset)

    def __getitem__(self, node_id: str) -> int:
        return self.levels[node_id]

    def get(self, node_id: str, default: Optional[int] = None) -> Optional[int]:
        return self.levels.get(node_id, default)

    def by_level(self) -> Dict[int, List[str]]:
        """Bucket node ids by level, preserving assignment order."""
        buckets: Dict[int, List[str]] = {}
        for node_id, level in self.levels.items():
            buckets.setdefault(level, []).append(node_id)
        return buckets


def assign_global_levels(
    graph: TopicGraph,
    diagnostics: Optional[DiagnosticsCollector] = None
) -> LevelAssignment:
    """Longest-prerequisite-chain levels with cycle breaking."""
    levels: Dict[str, int] = {}
    broken: Set[Tuple[str, str]] = set()

    for root in graph.node_ids:
        if root in levels:
            continue

        # Explicit DFS stack of (node, remaining prerequisites)
        stack: List[Tuple[str, Iterator[str]]] = [(root, iter(graph.prerequisites_of(root)))]
        best: Dict[str, int] = {root: -1}
        visiting: Set[str] = {root}

        while stack:
            node_id, prerequisites = stack[-1]
            descended = False

            for prereq in prerequisites:
                if prereq in levels:
                    best[node_id] = max(best[node_id], levels[prereq])
                elif prereq in visiting:
                    best[node_id] = max(best[node_id], 0)
                    if (prereq, node_id) not in broken:
                        broken.add((prereq, node_id))
                        if diagnostics is not None:
                            diagnostics.report(
                                DiagnosticType.CYCLE_DETECTED,
                                f"Prerequisite cycle through {prereq!r} -> {node_id!r}; "
                                f"edge treated as level 0",
                                (prereq, node_id)
                            )
                else:
                    visiting.add(prereq)
                    best[prereq] = -1
                    stack.append((prereq, iter(graph.prerequisites_of(prereq))))
                    descended = True
                    break

            if descended:
                continue

            stack.pop()
            visiting.discard(node_id)
            levels[node_id] = best.pop(node_id) + 1

            if stack:
                parent_id = stack[-1][0]
                best[parent_id] = max(best[parent_id], levels[node_id])

    # Report in graph order regardless of discovery order
    ordered = {node_id: levels[node_id] for node_id in graph.node_ids}
    return LevelAssignment(levels=ordered, broken_edges=frozenset(broken))


def assign_local_levels(
    graph: TopicGraph,
    center_id: str,
    fallback_sides: Optional[Mapping[str, Direction]] = None,
    diagnostics: Optional[DiagnosticsCollector] = None
) -> LevelAssignment:
    """
    Signed distance from the centre by breadth-first search.

    `fallback_sides` tells which side an unreachable node was introduced
    on; it lands at -1 (prerequisites) or +1 (effects).
    """
    levels: Dict[str, int] = {}
    if center_id not in graph:
        return LevelAssignment(levels=levels)

    levels[center_id] = 0
    queue = deque([center_id])

    while queue:
        node_id = queue.popleft()
        level = levels[node_id]

        for prereq in graph.prerequisites_of(node_id):
            if prereq not in levels:
                levels[prereq] = level - 1
                queue.append(prereq)

        for dependent in graph.dependents_of(node_id):
            if dependent not in levels:
                levels[dependent] = level + 1
                queue.append(dependent)

    unreachable = [n for n in graph.node_ids if n not in levels]
    sides = fallback_sides or {}
    for node_id in unreachable:
        side = sides.get(node_id, Direction.EFFECTS)
        levels[node_id] = side.level_step
        if diagnostics is not None:
            diagnostics.report(
                DiagnosticType.UNREACHABLE_NODE,
                f"Topic {node_id!r} is not connected to centre {center_id!r}; "
                f"placed at level {levels[node_id]}",
                (node_id,)
            )

    return LevelAssignment(levels=levels, unreachable=frozenset(unreachable))
