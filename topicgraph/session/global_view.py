"""
Global Graph Session

All-topics view: one full fetch, one deterministic grid layout, plus
the selection and highlight state the drawing layer needs.
"""

from __future__ import annotations
import asyncio
import logging
from typing import FrozenSet, Iterable, Optional

from adapter.providers.base import FetchResponse, ProviderErrorCode, TopicGraphProvider

from ..config import EngineConfig
from ..contracts.base import Error, ErrorCode, GraphConstructionError, Result, Viewport
from ..contracts.layout import LayoutResult, MutationOutcome, ViewMode
from ..core.assembly import assemble_layout
from ..core.graph import TopicGraph, build_graph
from ..core.levels import assign_global_levels
from ..core.placement import GlobalLayout
from ..observability import DiagnosticsCollector, DiagnosticType
from .locking import SessionLock


logger = logging.getLogger(__name__)


def layout_global(
    graph: TopicGraph,
    config: Optional[EngineConfig] = None,
    diagnostics: Optional[DiagnosticsCollector] = None
) -> LayoutResult:
    """Levels, grid placement and routing for a complete graph."""
    config = config or EngineConfig()
    levels = assign_global_levels(graph, diagnostics)
    positions = GlobalLayout(config.global_layout, config.measure).layout(graph, levels)
    return assemble_layout(
        ViewMode.GLOBAL,
        graph,
        levels,
        positions,
        measure_config=config.measure,
        routing_config=config.routing,
        diagnostics=diagnostics,
    )


class GlobalGraphSession:
    """Loads and lays out the full topic graph for one language."""

    def __init__(
        self,
        provider: TopicGraphProvider,
        config: Optional[EngineConfig] = None,
        diagnostics: Optional[DiagnosticsCollector] = None
    ):
        self._provider = provider
        self._config = config or EngineConfig()
        self._diagnostics = diagnostics or DiagnosticsCollector("global_session")

        self._lock = SessionLock()
        self._generation = 0
        self._graph: Optional[TopicGraph] = None
        self._layout: Optional[LayoutResult] = None
        self._language: Optional[str] = None

        self._viewport = Viewport()
        self._selected_id: Optional[str] = None
        self._activated_id: Optional[str] = None
        self._highlighted: FrozenSet[str] = frozenset()

    @property
    def diagnostics(self) -> DiagnosticsCollector:
        return self._diagnostics

    @property
    def language(self) -> Optional[str]:
        return self._language

    @property
    def viewport(self) -> Viewport:
        return self._viewport

    @property
    def selected_id(self) -> Optional[str]:
        return self._selected_id

    @property
    def activated_id(self) -> Optional[str]:
        """Last node double-clicked; the caller opens a local view on it."""
        return self._activated_id

    @property
    def highlighted(self) -> FrozenSet[str]:
        return self._highlighted

    def layout(self) -> Optional[LayoutResult]:
        return self._layout

    async def load(self, language: Optional[str] = None) -> Result:
        """Fetch every topic and lay the grid out. A newer load supersedes an older one."""
        language = language or self._config.language
        self._generation += 1
        generation = self._generation

        async with self._lock:
            if generation != self._generation:
                return Result.success(MutationOutcome.STALE)

            try:
                response = await self._provider.fetch_full_topic_graph(language)
            except asyncio.CancelledError:
                raise
            except Exception as exc:
                logger.exception("Provider %s raised during full graph fetch", self._provider.provider_id)
                response = FetchResponse.failed(ProviderErrorCode.UNEXPECTED, f"{type(exc).__name__}: {exc}")

            if generation != self._generation:
                return Result.success(MutationOutcome.STALE)
            if not response.success:
                self._diagnostics.report(
                    DiagnosticType.FETCH_FAILED,
                    f"Full graph fetch failed: {response.error_code.value}: {response.error_message}"
                )
                return Result.failure(
                    Error.create(ErrorCode.FETCH_FAILED, response.error_message or response.error_code.value)
                    .with_context("language", language)
                )

            try:
                graph = build_graph(response.payload.nodes, response.payload.edges, self._diagnostics)
            except GraphConstructionError as exc:
                return Result.failure(
                    Error.create(ErrorCode.MALFORMED_PAYLOAD, str(exc)).with_context("language", language)
                )

            self._graph = graph
            self._language = language
            self._layout = layout_global(graph, self._config, self._diagnostics)
            self._selected_id = None
            self._activated_id = None
            self._highlighted = frozenset()
            return Result.success(MutationOutcome.APPLIED)

    # =========================================================================
    # INTERACTION
    # =========================================================================

    def select(self, node_id: Optional[str]) -> bool:
        if node_id is not None and (self._graph is None or node_id not in self._graph):
            return False
        self._selected_id = node_id
        return True

    def activate(self, node_id: str) -> bool:
        if self._graph is None or node_id not in self._graph:
            return False
        self._selected_id = node_id
        self._activated_id = node_id
        return True

    def highlight(self, node_ids: Iterable[str]) -> FrozenSet[str]:
        """Highlight visible nodes; everything else renders dimmed. Empty clears."""
        present = self._graph.node_ids if self._graph is not None else ()
        self._highlighted = frozenset(n for n in node_ids if n in present)
        return self._highlighted

    def zoom(self, scale: float) -> Viewport:
        self._viewport = self._viewport.zoomed(scale)
        return self._viewport

    def pan(self, dx: float, dy: float) -> Viewport:
        self._viewport = self._viewport.panned(dx, dy)
        return self._viewport
