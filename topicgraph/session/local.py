"""
Local Graph Session
===================

One focal topic's worth of exploration.

OWNS (never shared between sessions):
- the live subgraph
- expansion flags and claims
- zone table and position store
- diagnostics, viewport, selection

CONCURRENCY MODEL:
==================
Layout work is synchronous. The only suspension point is the provider
fetch. Mutations (initialize, recenter, expand, collapse) queue FIFO
behind one loop-bound asyncio.Lock, so they never interleave.

Each request captures the session generation when it is made. A
recenter bumps the generation at request time, so every request queued
before it (and any response still in flight) is discarded as STALE.

FAILURE SEMANTICS:
==================
A failed fetch leaves every store untouched and returns a failed
Result. Nothing is partially merged.
"""

from __future__ import annotations
import asyncio
import logging
from typing import Awaitable, Callable, Dict, FrozenSet, Optional, Tuple

from adapter.providers.base import FetchResponse, ProviderErrorCode, TopicGraphProvider

from ..config import EngineConfig
from ..contracts.base import (
    Direction, Error, ErrorCode, ExpansionKey, GraphConstructionError,
    Position, PrerequisiteEdge, Result, TopicNode, Viewport,
)
from ..contracts.layout import LayoutResult, MutationOutcome, ViewMode
from ..core.assembly import assemble_layout
from ..core.graph import TopicGraph, build_graph
from ..core.levels import assign_local_levels
from ..core.zones import PositionStore, ZoneLayout, ZoneTable
from ..observability import DiagnosticsCollector, DiagnosticType
from .expansion import ExpansionState
from .locking import SessionLock


logger = logging.getLogger(__name__)


class LocalGraphSession:
    """
    Incremental expansion state machine for a focal-topic view.

    Usage:
        session = LocalGraphSession(provider, "D")
        await session.initialize()
        await session.expand("B", Direction.PREREQUISITES)
        result = session.layout()
    """

    def __init__(
        self,
        provider: TopicGraphProvider,
        center_id: str,
        config: Optional[EngineConfig] = None,
        language: Optional[str] = None,
        diagnostics: Optional[DiagnosticsCollector] = None
    ):
        self._provider = provider
        self._config = config or EngineConfig()
        self._language = language or self._config.language
        self._diagnostics = diagnostics or DiagnosticsCollector("local_session")
        self._zone_layout = ZoneLayout(self._config.local_layout, self._config.measure)

        self._center_id = center_id
        self._graph = TopicGraph()
        self._expansion = ExpansionState()
        self._zones = ZoneTable()
        self._positions = PositionStore()

        self._lock = SessionLock()
        self._generation = 0
        self._initialized = False
        self._layout: Optional[LayoutResult] = None

        self._viewport = Viewport()
        self._selected_id: Optional[str] = None

    # =========================================================================
    # STATE ACCESS
    # =========================================================================

    @property
    def center_id(self) -> str:
        return self._center_id

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def graph(self) -> TopicGraph:
        """Copy of the live subgraph."""
        return self._graph.copy()

    @property
    def node_ids(self) -> Tuple[str, ...]:
        return self._graph.node_ids

    @property
    def expanded_keys(self) -> FrozenSet[ExpansionKey]:
        return self._expansion.expanded_keys

    def is_expanded(self, node_id: str, direction: Direction) -> bool:
        return self._expansion.is_expanded(node_id, direction)

    @property
    def zone_keys(self) -> FrozenSet[Tuple[str, int]]:
        return frozenset(self._zones.keys())

    @property
    def positions(self) -> Dict[str, Position]:
        return self._positions.snapshot()

    @property
    def diagnostics(self) -> DiagnosticsCollector:
        return self._diagnostics

    @property
    def viewport(self) -> Viewport:
        return self._viewport

    @property
    def selected_id(self) -> Optional[str]:
        return self._selected_id

    def layout(self) -> Optional[LayoutResult]:
        """Result of the most recent layout pass (None before initialize)."""
        return self._layout

    # =========================================================================
    # VIEW STATE (synchronous, no layout impact)
    # =========================================================================

    def select(self, node_id: Optional[str]) -> bool:
        """Select a visible node, or clear with None. Returns False if unknown."""
        if node_id is not None and node_id not in self._graph:
            return False
        self._selected_id = node_id
        return True

    def zoom(self, scale: float) -> Viewport:
        self._viewport = self._viewport.zoomed(scale)
        return self._viewport

    def pan(self, dx: float, dy: float) -> Viewport:
        self._viewport = self._viewport.panned(dx, dy)
        return self._viewport

    # =========================================================================
    # MUTATIONS
    # =========================================================================

    async def initialize(self) -> Result:
        """Load the neighbourhood of the current centre (fresh session)."""
        self._generation += 1
        return await self._load(self._center_id, self._generation)

    async def recenter(self, new_center_id: str) -> Result:
        """
        Hard reset onto a new centre.

        Re-activating the current centre of a loaded session is a no-op.
        """
        if self._initialized and new_center_id == self._center_id and not self._lock.locked():
            return Result.success(MutationOutcome.NO_OP)

        self._generation += 1
        return await self._load(new_center_id, self._generation)

    async def expand(self, node_id: str, direction: Direction) -> Result:
        """Fetch and merge the neighbours of `node_id` in `direction`."""
        generation = self._generation
        async with self._lock:
            rejected = self._check(generation, node_id)
            if rejected is not None:
                return rejected

            key = ExpansionKey(node_id, direction)
            if self._expansion.is_expanded(node_id, direction):
                return Result.success(MutationOutcome.NO_OP)

            response = await self._fetch(
                f"expand {node_id!r} {direction.value}",
                lambda: self._provider.fetch_expansion(node_id, direction, self._language)
            )
            if generation != self._generation:
                return Result.success(MutationOutcome.STALE)
            if not response.success:
                return self._fetch_failure(response, node_id)

            try:
                topics = [self._coerce_topic(t) for t in response.payload.new_nodes]
                edges = [PrerequisiteEdge.coerce(e) for e in response.payload.new_edges]
            except GraphConstructionError as exc:
                return self._malformed(exc, node_id)

            self._merge(key, topics, edges)
            self._relayout()
            return Result.success(MutationOutcome.APPLIED)

    async def collapse(self, node_id: str, direction: Direction) -> Result:
        """Close a branch and everything only it was holding open."""
        generation = self._generation
        async with self._lock:
            rejected = self._check(generation, node_id)
            if rejected is not None:
                return rejected

            key = ExpansionKey(node_id, direction)
            if not self._expansion.is_expanded(node_id, direction):
                return Result.success(MutationOutcome.NO_OP)

            plan = self._expansion.plan_collapse(key, self._center_id)
            self._graph.remove_edges(plan.edges)
            self._graph.remove_nodes(plan.nodes)
            for removed in plan.nodes:
                self._zones.discard_node(removed)
                self._positions.discard(removed)
            self._expansion.apply_collapse(plan)

            if self._selected_id in plan.nodes:
                self._selected_id = None

            self._relayout()
            return Result.success(MutationOutcome.APPLIED)

    # =========================================================================
    # INTERNALS
    # =========================================================================

    def _check(self, generation: int, node_id: str) -> Optional[Result]:
        if generation != self._generation:
            return Result.success(MutationOutcome.STALE)
        if not self._initialized:
            return Result.failure(Error.create(
                ErrorCode.SESSION_NOT_INITIALIZED,
                "Local session has not been initialized"
            ))
        if node_id not in self._graph:
            return Result.failure(Error.create(
                ErrorCode.NODE_NOT_FOUND,
                f"Topic {node_id!r} is not visible in this session"
            ).with_context("center_id", self._center_id))
        return None

    async def _load(self, center_id: str, generation: int) -> Result:
        async with self._lock:
            if generation != self._generation:
                return Result.success(MutationOutcome.STALE)

            response = await self._fetch(
                f"neighbourhood of {center_id!r}",
                lambda: self._provider.fetch_local_neighborhood(center_id, self._language)
            )
            if generation != self._generation:
                return Result.success(MutationOutcome.STALE)
            if not response.success:
                return self._fetch_failure(response, center_id)

            payload = response.payload
            try:
                graph = build_graph(payload.all_nodes, payload.edges, self._diagnostics)
            except GraphConstructionError as exc:
                return self._malformed(exc, center_id)
            if payload.center.topic_id != center_id:
                return self._malformed(
                    GraphConstructionError(
                        f"Neighbourhood centre {payload.center.topic_id!r} does not match {center_id!r}"
                    ),
                    center_id
                )

            self._reset(center_id, graph, payload.prerequisites, payload.effects)
            self._relayout()
            return Result.success(MutationOutcome.APPLIED)

    def _reset(self, center_id, graph, prerequisites, effects) -> None:
        self._center_id = center_id
        self._graph = graph
        self._expansion.reset()
        self._zones.clear()
        self._positions.clear()
        self._selected_id = None
        self._initialized = True

        for direction, topics in (
            (Direction.PREREQUISITES, prerequisites),
            (Direction.EFFECTS, effects),
        ):
            key = ExpansionKey(center_id, direction)
            present = [t.topic_id for t in topics if t.topic_id in graph and t.topic_id != center_id]
            for topic_id in present:
                self._expansion.claim_node(topic_id, key)
            if present:
                self._expansion.mark_expanded(key)

        prerequisite_ids = {t.topic_id for t in prerequisites}
        for edge in graph.edges:
            touches_prerequisite = edge.prerequisite_id in prerequisite_ids or edge.dependent_id in prerequisite_ids
            side = Direction.PREREQUISITES if touches_prerequisite else Direction.EFFECTS
            self._expansion.claim_edge(edge.key, ExpansionKey(center_id, side))

    def _merge(self, key: ExpansionKey, topics, edges) -> None:
        for topic in topics:
            if topic.topic_id == key.topic_id:
                continue
            self._graph.add_node(topic)
            self._expansion.claim_node(topic.topic_id, key)

        for edge in edges:
            if edge.prerequisite_id not in self._graph or edge.dependent_id not in self._graph:
                missing = [n for n in edge.key if n not in self._graph]
                self._diagnostics.report(
                    DiagnosticType.DANGLING_EDGE,
                    f"Dropped edge {edge.prerequisite_id!r} -> {edge.dependent_id!r}: "
                    f"unknown endpoint(s) {', '.join(repr(m) for m in missing)}",
                    edge.key
                )
                continue
            self._graph.add_edge(edge)
            self._expansion.claim_edge(edge.key, key)

        self._expansion.mark_expanded(key)

    def _relayout(self) -> None:
        levels = assign_local_levels(
            self._graph,
            self._center_id,
            fallback_sides=self._expansion.introduced_sides(),
            diagnostics=self._diagnostics
        )
        positions = self._zone_layout.layout(
            self._graph,
            self._center_id,
            levels,
            self._expansion.is_expanded,
            self._zones,
            self._positions,
            parent_hints=self._expansion.parent_hints()
        )
        self._layout = assemble_layout(
            ViewMode.LOCAL,
            self._graph,
            levels,
            positions,
            measure_config=self._config.measure,
            routing_config=self._config.routing,
            diagnostics=self._diagnostics,
            center_id=self._center_id
        )

    async def _fetch(
        self,
        description: str,
        fetch: Callable[[], Awaitable[FetchResponse]]
    ) -> FetchResponse:
        """Run a provider fetch, converting unexpected exceptions into a failed response."""
        try:
            return await fetch()
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            logger.exception("Provider %s raised while fetching %s", self._provider.provider_id, description)
            return FetchResponse.failed(ProviderErrorCode.UNEXPECTED, f"{type(exc).__name__}: {exc}")

    def _fetch_failure(self, response: FetchResponse, topic_id: str) -> Result:
        code = ErrorCode.NODE_NOT_FOUND if response.error_code is ProviderErrorCode.NOT_FOUND else ErrorCode.FETCH_FAILED
        self._diagnostics.report(
            DiagnosticType.FETCH_FAILED,
            f"Fetch for {topic_id!r} failed: {response.error_code.value}: {response.error_message}",
            (topic_id,)
        )
        error = Error.create(code, response.error_message or response.error_code.value)
        return Result.failure(
            error.with_context("topic_id", topic_id).with_context("provider_error", response.error_code.value)
        )

    def _malformed(self, exc: GraphConstructionError, topic_id: str) -> Result:
        self._diagnostics.report(
            DiagnosticType.FETCH_FAILED,
            f"Malformed payload for {topic_id!r}: {exc}",
            (topic_id,)
        )
        return Result.failure(
            Error.create(ErrorCode.MALFORMED_PAYLOAD, str(exc)).with_context("topic_id", topic_id)
        )

    @staticmethod
    def _coerce_topic(raw) -> TopicNode:
        if isinstance(raw, TopicNode):
            return raw
        return TopicNode.from_mapping(raw)
