"""
In-Memory Topic Provider
========================

Deterministic provider backed by a fixed node/edge list, for tests and
demos.

GUARANTEES:
- Same dataset + same request -> identical payload
- Explicit failure modes can be triggered
- No external dependencies
"""

from __future__ import annotations
import asyncio
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Tuple

from topicgraph.contracts import (
    Direction, PrerequisiteEdge, TopicNode
)

from ..contracts import ExpansionPayload, FullGraphPayload, NeighborhoodPayload
from .base import FetchResponse, ProviderErrorCode, TopicGraphProvider


class InMemoryTopicProvider(TopicGraphProvider):
    """
    Serves slices of one in-memory topic graph.

    Edges with unknown endpoints are kept as given: the engine is the
    component that reports them.
    """

    def __init__(
        self,
        nodes: Iterable[Any],
        edges: Iterable[Any],
        latency_ms: float = 0.0,
        failure_mode: Optional[ProviderErrorCode] = None
    ):
        """
        Args:
            nodes: TopicNode records or node-shaped mappings
            edges: PrerequisiteEdge records, pairs or source/target mappings
            latency_ms: Simulated latency per fetch
            failure_mode: If set, all fetches fail with this error
        """
        self._nodes: Dict[str, TopicNode] = {}
        for raw in nodes:
            topic = raw if isinstance(raw, TopicNode) else TopicNode.from_mapping(raw)
            self._nodes.setdefault(topic.topic_id, topic)
        self._edges: Tuple[PrerequisiteEdge, ...] = tuple(PrerequisiteEdge.coerce(e) for e in edges)

        self._latency_ms = latency_ms
        self._failure_mode = failure_mode
        self._calls: List[Tuple[str, ...]] = []

    @property
    def provider_id(self) -> str:
        return "memory"

    @property
    def calls(self) -> Tuple[Tuple[str, ...], ...]:
        """Every fetch made so far, as (operation, *arguments)."""
        return tuple(self._calls)

    def set_failure_mode(self, failure_mode: Optional[ProviderErrorCode]) -> None:
        self._failure_mode = failure_mode

    def set_latency(self, latency_ms: float) -> None:
        self._latency_ms = latency_ms

    # =========================================================================
    # FETCHES
    # =========================================================================

    async def fetch_full_topic_graph(self, language: str) -> FetchResponse:
        self._calls.append(("full", language))
        failure = await self._simulate()
        if failure is not None:
            return failure

        return self._ok(FullGraphPayload(nodes=tuple(self._nodes.values()), edges=self._edges))

    async def fetch_local_neighborhood(self, center_id: str, language: str) -> FetchResponse:
        self._calls.append(("neighborhood", center_id, language))
        failure = await self._simulate()
        if failure is not None:
            return failure

        center = self._nodes.get(center_id)
        if center is None:
            return FetchResponse.failed(ProviderErrorCode.NOT_FOUND, f"Unknown topic {center_id!r}")

        prerequisites = self._neighbours(center_id, Direction.PREREQUISITES)
        effects = self._neighbours(center_id, Direction.EFFECTS)
        visible = {center_id} | {n.topic_id for n in prerequisites} | {n.topic_id for n in effects}
        edges = tuple(
            e for e in self._edges
            if center_id in e.key and e.prerequisite_id in visible and e.dependent_id in visible
        )

        return self._ok(NeighborhoodPayload(
            center=center,
            prerequisites=prerequisites,
            effects=effects,
            edges=edges,
        ))

    async def fetch_expansion(
        self,
        topic_id: str,
        direction: Direction,
        language: Optional[str] = None
    ) -> FetchResponse:
        self._calls.append(("expansion", topic_id, direction.value))
        failure = await self._simulate()
        if failure is not None:
            return failure

        if topic_id not in self._nodes:
            return FetchResponse.failed(ProviderErrorCode.NOT_FOUND, f"Unknown topic {topic_id!r}")

        neighbours = self._neighbours(topic_id, direction)
        if direction is Direction.PREREQUISITES:
            edges = tuple(e for e in self._edges if e.dependent_id == topic_id)
        else:
            edges = tuple(e for e in self._edges if e.prerequisite_id == topic_id)

        return self._ok(ExpansionPayload(new_nodes=neighbours, new_edges=edges))

    # =========================================================================
    # INTERNALS
    # =========================================================================

    def _neighbours(self, topic_id: str, direction: Direction) -> Tuple[TopicNode, ...]:
        found: Dict[str, TopicNode] = {}
        for edge in self._edges:
            if direction is Direction.PREREQUISITES and edge.dependent_id == topic_id:
                neighbour = edge.prerequisite_id
            elif direction is Direction.EFFECTS and edge.prerequisite_id == topic_id:
                neighbour = edge.dependent_id
            else:
                continue
            if neighbour in self._nodes and neighbour != topic_id:
                found.setdefault(neighbour, self._nodes[neighbour])
        return tuple(found.values())

    async def _simulate(self) -> Optional[FetchResponse]:
        """Simulate latency and configured failure."""
        if self._latency_ms > 0:
            await asyncio.sleep(self._latency_ms / 1000.0)

        if self._failure_mode is not None:
            return FetchResponse.failed(
                self._failure_mode,
                f"Memory provider configured to fail: {self._failure_mode.value}",
                fetched_at=datetime.now(timezone.utc),
                latency_ms=self._latency_ms
            )
        return None

    def _ok(self, payload: Any) -> FetchResponse:
        return FetchResponse.ok(payload, fetched_at=datetime.now(timezone.utc), latency_ms=self._latency_ms)


__all__ = ['InMemoryTopicProvider']
