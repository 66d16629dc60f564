"""
Topic Graph Layout Engine

Deterministic layout for prerequisite graphs of learning topics.

LAYERS:
=======
contracts/       Immutable records (nodes, edges, positions, results, errors)
core/            Pure layout: graph model, measure, levels, placement, routing
session/         Stateful views: global grid, local incremental expansion
observability/   Diagnostics channel for tolerated data anomalies

Data arrives through `adapter` providers; render output is consumed by
`frontend`.
"""

import importlib

from .config import (
    EngineConfig, GlobalLayoutConfig, LocalLayoutConfig, MeasureConfig, RoutingConfig,
)
from .contracts import (
    Direction, Error, ErrorCode, GraphConstructionError, LayoutResult,
    LearningStatus, MutationOutcome, PathGeometry, PositionedNode,
    PrerequisiteEdge, Result, RoutedEdge, TopicKind, TopicNode, ViewMode,
)
from .core import build_graph, measure, route_edge
from .observability import DiagnosticsCollector, DiagnosticType

__version__ = "0.1.0"

# Engine and sessions import `adapter`, whose payloads import
# `topicgraph.contracts`; they load on first access so either package
# can be imported first.
_LAZY_EXPORTS = {
    'TopicGraphEngine': '.engine',
    'GlobalGraphSession': '.session',
    'LocalGraphSession': '.session',
}


def __getattr__(name):
    if name in _LAZY_EXPORTS:
        module = importlib.import_module(_LAZY_EXPORTS[name], __name__)
        return getattr(module, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    'EngineConfig', 'GlobalLayoutConfig', 'LocalLayoutConfig', 'MeasureConfig', 'RoutingConfig',
    'Direction', 'Error', 'ErrorCode', 'GraphConstructionError', 'LayoutResult',
    'LearningStatus', 'MutationOutcome', 'PathGeometry', 'PositionedNode',
    'PrerequisiteEdge', 'Result', 'RoutedEdge', 'TopicKind', 'TopicNode', 'ViewMode',
    'build_graph', 'measure', 'route_edge',
    'TopicGraphEngine',
    'DiagnosticsCollector', 'DiagnosticType',
    'GlobalGraphSession', 'LocalGraphSession',
]
