"""
Expansion State
===============

Which (node, direction) branches of a local view are open, and which
open branch is responsible for each visible node and edge.

CLAIMS:
=======
Every node and edge merged by an expansion records a claim naming that
expansion. A node reached by two expansions (a shared prerequisite)
holds two claims but is present once. Claim order is introduction
order; the first claim is the node's structural parent.

CASCADE COLLAPSE:
=================
Collapsing a key removes every node whose claims all belong to removed
keys. A removed node's own open keys are removed with it, and the
check repeats until nothing changes. The centre is never removed.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable, List, Set, Tuple

from ..contracts.base import Direction, ExpansionKey


EdgeKey = Tuple[str, str]


@dataclass(frozen=True)
class CollapsePlan:
    """Everything one collapse removes."""
    keys: FrozenSet[ExpansionKey] = field(default_factory=frozenset)
    nodes: FrozenSet[str] = field(default_factory=frozenset)
    edges: FrozenSet[EdgeKey] = field(default_factory=frozenset)

    @property
    def is_empty(self) -> bool:
        return not (self.keys or self.nodes or self.edges)


class ExpansionState:
    """Per-session expansion flags and claims."""

    def __init__(self):
        self._expanded: Dict[ExpansionKey, None] = {}
        self._node_claims: Dict[str, List[ExpansionKey]] = {}
        self._edge_claims: Dict[EdgeKey, List[ExpansionKey]] = {}

    # =========================================================================
    # QUERIES
    # =========================================================================

    def is_expanded(self, topic_id: str, direction: Direction) -> bool:
        return ExpansionKey(topic_id, direction) in self._expanded

    @property
    def expanded_keys(self) -> FrozenSet[ExpansionKey]:
        return frozenset(self._expanded)

    def node_claims(self, node_id: str) -> Tuple[ExpansionKey, ...]:
        return tuple(self._node_claims.get(node_id, ()))

    def edge_claims(self, edge: EdgeKey) -> Tuple[ExpansionKey, ...]:
        return tuple(self._edge_claims.get(edge, ()))

    def parent_hints(self) -> Dict[str, Tuple[str, ...]]:
        """Node id -> ids of the expanding nodes, in claim order."""
        return {
            node_id: tuple(key.topic_id for key in claims)
            for node_id, claims in self._node_claims.items()
        }

    def introduced_sides(self) -> Dict[str, Direction]:
        """Node id -> direction of the expansion that first brought it in."""
        return {
            node_id: claims[0].direction
            for node_id, claims in self._node_claims.items() if claims
        }

    # =========================================================================
    # MUTATION
    # =========================================================================

    def mark_expanded(self, key: ExpansionKey) -> None:
        self._expanded[key] = None

    def claim_node(self, node_id: str, key: ExpansionKey) -> None:
        claims = self._node_claims.setdefault(node_id, [])
        if key not in claims:
            claims.append(key)

    def claim_edge(self, edge: EdgeKey, key: ExpansionKey) -> None:
        claims = self._edge_claims.setdefault(edge, [])
        if key not in claims:
            claims.append(key)

    def reset(self) -> None:
        self._expanded.clear()
        self._node_claims.clear()
        self._edge_claims.clear()

    def plan_collapse(self, key: ExpansionKey, center_id: str) -> CollapsePlan:
        """Compute the cascade for collapsing `key` without applying it."""
        if key not in self._expanded:
            return CollapsePlan()

        removed_keys: Set[ExpansionKey] = {key}
        removed_nodes: Set[str] = set()

        changed = True
        while changed:
            changed = False
            for node_id, claims in self._node_claims.items():
                if node_id == center_id or node_id in removed_nodes:
                    continue
                if claims and all(c in removed_keys for c in claims):
                    removed_nodes.add(node_id)
                    changed = True
                    for open_key in self._expanded:
                        if open_key.topic_id == node_id:
                            removed_keys.add(open_key)

        removed_edges = {
            edge for edge, claims in self._edge_claims.items()
            if edge[0] in removed_nodes or edge[1] in removed_nodes
            or (claims and all(c in removed_keys for c in claims))
        }

        return CollapsePlan(
            keys=frozenset(removed_keys),
            nodes=frozenset(removed_nodes),
            edges=frozenset(removed_edges),
        )

    def apply_collapse(self, plan: CollapsePlan) -> None:
        for key in plan.keys:
            self._expanded.pop(key, None)

        for node_id in plan.nodes:
            self._node_claims.pop(node_id, None)
        for edge in plan.edges:
            self._edge_claims.pop(edge, None)

        self._drop_claims(self._node_claims, plan.keys)
        self._drop_claims(self._edge_claims, plan.keys)

    @staticmethod
    def _drop_claims(table: Dict, keys: Iterable[ExpansionKey]) -> None:
        dropped = set(keys)
        for claims in table.values():
            claims[:] = [c for c in claims if c not in dropped]
