"""
Topic Data Adapter Package

ARCHITECTURAL BOUNDARY:
=======================
This package is the ONLY interface between the layout engine and
whatever serves topic data. All fetches MUST flow through a provider.

DIRECTION OF DEPENDENCY:
========================
data source -> adapter -> topicgraph sessions

NEVER:
- Sessions talking to a transport directly
- Providers computing layout
- Providers raising for expected failures

DESIGN PRINCIPLES:
==================
1. Pure interface - no layout logic
2. Typed payloads only
3. Failures are explicit FetchResponse values
"""

from .contracts import (
    ExpansionPayload,
    FullGraphPayload,
    NeighborhoodPayload,
)
from .providers import (
    FetchResponse,
    InMemoryTopicProvider,
    ProviderErrorCode,
    TopicGraphProvider,
)

__all__ = [
    'ExpansionPayload',
    'FullGraphPayload',
    'NeighborhoodPayload',
    'FetchResponse',
    'InMemoryTopicProvider',
    'ProviderErrorCode',
    'TopicGraphProvider',
]
