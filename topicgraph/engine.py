"""
Topic Graph Engine

Facade wiring a provider and one configuration into sessions.

Every call to `local_session` returns an independent session with its
own stores; two widgets on one page never share positions.
"""

from __future__ import annotations
from typing import Any, Iterable, Optional

from adapter.providers.base import TopicGraphProvider

from .config import EngineConfig
from .contracts.layout import LayoutResult
from .core.graph import build_graph
from .observability import DiagnosticsCollector
from .session.global_view import GlobalGraphSession, layout_global
from .session.local import LocalGraphSession


class TopicGraphEngine:
    """Entry point for embedding applications."""

    def __init__(self, provider: TopicGraphProvider, config: Optional[EngineConfig] = None):
        self._provider = provider
        self._config = config or EngineConfig()

    @property
    def config(self) -> EngineConfig:
        return self._config

    def global_session(self) -> GlobalGraphSession:
        return GlobalGraphSession(self._provider, self._config)

    def local_session(self, center_id: str, language: Optional[str] = None) -> LocalGraphSession:
        return LocalGraphSession(self._provider, center_id, self._config, language=language)

    def layout_global_graph(
        self,
        nodes: Iterable[Any],
        edges: Iterable[Any],
        diagnostics: Optional[DiagnosticsCollector] = None
    ) -> LayoutResult:
        """Synchronous global layout of caller-supplied data (no provider involved)."""
        graph = build_graph(nodes, edges, diagnostics)
        return layout_global(graph, self._config, diagnostics)
