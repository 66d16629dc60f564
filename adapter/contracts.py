"""
Adapter Contracts

Typed payloads exchanged between the topic data collaborator and the
layout engine.

BOUNDARY ENFORCEMENT:
=====================
- All types are FROZEN (immutable)
- Payloads carry engine records (TopicNode, PrerequisiteEdge), never raw JSON
- Conversion from collaborator JSON happens once, in `from_json`

WHY SEPARATE CONTRACTS:
=======================
Engine contracts (topicgraph/contracts/) define layout-internal records.
These adapter contracts define the INTERFACE between the engine and
whatever transport serves topic data. They are deliberately distinct to
enforce the boundary.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Tuple

from topicgraph.contracts import PrerequisiteEdge, TopicNode


def _nodes(raw: Iterable[Any]) -> Tuple[TopicNode, ...]:
    return tuple(n if isinstance(n, TopicNode) else TopicNode.from_mapping(n) for n in raw)


def _edges(raw: Iterable[Any]) -> Tuple[PrerequisiteEdge, ...]:
    return tuple(PrerequisiteEdge.coerce(e) for e in raw)


@dataclass(frozen=True)
class FullGraphPayload:
    """Every topic and prerequisite relation for one language."""
    nodes: Tuple[TopicNode, ...] = field(default_factory=tuple)
    edges: Tuple[PrerequisiteEdge, ...] = field(default_factory=tuple)

    @staticmethod
    def from_json(data: Mapping[str, Any]) -> FullGraphPayload:
        return FullGraphPayload(
            nodes=_nodes(data.get("nodes", ())),
            edges=_edges(data.get("edges", ())),
        )


@dataclass(frozen=True)
class NeighborhoodPayload:
    """
    One hop around a focal topic.

    INVARIANT: `edges` only reference the centre, prerequisites and effects.
    """
    center: TopicNode
    prerequisites: Tuple[TopicNode, ...] = field(default_factory=tuple)
    effects: Tuple[TopicNode, ...] = field(default_factory=tuple)
    edges: Tuple[PrerequisiteEdge, ...] = field(default_factory=tuple)

    @property
    def all_nodes(self) -> Tuple[TopicNode, ...]:
        return (self.center,) + self.prerequisites + self.effects

    @staticmethod
    def from_json(data: Mapping[str, Any]) -> NeighborhoodPayload:
        center = data["center"]
        return NeighborhoodPayload(
            center=center if isinstance(center, TopicNode) else TopicNode.from_mapping(center),
            prerequisites=_nodes(data.get("prerequisites", ())),
            effects=_nodes(data.get("effects", ())),
            edges=_edges(data.get("edges", ())),
        )


@dataclass(frozen=True)
class ExpansionPayload:
    """
    Neighbours of one topic in one direction.

    `new_nodes` may include topics the caller already shows; the caller
    de-duplicates.
    """
    new_nodes: Tuple[TopicNode, ...] = field(default_factory=tuple)
    new_edges: Tuple[PrerequisiteEdge, ...] = field(default_factory=tuple)

    @staticmethod
    def from_json(data: Mapping[str, Any]) -> ExpansionPayload:
        return ExpansionPayload(
            new_nodes=_nodes(data.get("newNodes", data.get("new_nodes", ()))),
            new_edges=_edges(data.get("newEdges", data.get("new_edges", ()))),
        )
