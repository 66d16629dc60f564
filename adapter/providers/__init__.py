"""
Topic Data Providers Package
============================

Provider implementations for topic data fetches.

Available providers:
- InMemoryTopicProvider: Deterministic in-memory dataset for tests and demos
"""

from .base import (
    TopicGraphProvider,
    FetchResponse,
    ProviderErrorCode,
)
from .memory import InMemoryTopicProvider

__all__ = [
    'TopicGraphProvider',
    'FetchResponse',
    'ProviderErrorCode',
    'InMemoryTopicProvider',
]
