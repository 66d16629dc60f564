"""
Topic Data Provider Abstraction Layer
=====================================

Abstract interface for whatever serves topic data (HTTP API, database,
in-memory fixture).

BOUNDARY ENFORCEMENT:
- Providers are stateless lookup handlers
- Fetches are the only suspending operations in the system
- Failures are explicit, never silent
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Generic, Optional, TypeVar
from enum import Enum

from topicgraph.contracts import Direction


class ProviderErrorCode(Enum):
    """Explicit failure codes for topic data fetches."""
    TIMEOUT = "timeout"
    NOT_FOUND = "not_found"
    INVALID_RESPONSE = "invalid_response"
    NETWORK_ERROR = "network_error"
    UNEXPECTED = "unexpected"


PayloadT = TypeVar("PayloadT")


@dataclass(frozen=True)
class FetchResponse(Generic[PayloadT]):
    """
    Immutable response from a provider.

    INVARIANT: Either (success=True, payload set) or (success=False, error set)
    """
    success: bool
    payload: Optional[PayloadT] = None

    # Failure info (only set if success=False)
    error_code: Optional[ProviderErrorCode] = None
    error_message: Optional[str] = None

    # Invocation metadata
    fetched_at: Optional[datetime] = None
    latency_ms: float = 0.0

    def __post_init__(self):
        if self.success and self.payload is None:
            raise ValueError("Successful response must have payload")
        if not self.success and self.error_code is None:
            raise ValueError("Failed response must have error_code")

    @staticmethod
    def ok(payload: PayloadT, fetched_at: Optional[datetime] = None, latency_ms: float = 0.0) -> FetchResponse:
        return FetchResponse(success=True, payload=payload, fetched_at=fetched_at, latency_ms=latency_ms)

    @staticmethod
    def failed(
        error_code: ProviderErrorCode,
        message: str,
        fetched_at: Optional[datetime] = None,
        latency_ms: float = 0.0
    ) -> FetchResponse:
        return FetchResponse(
            success=False,
            error_code=error_code,
            error_message=message,
            fetched_at=fetched_at,
            latency_ms=latency_ms
        )


class TopicGraphProvider(ABC):
    """
    Abstract topic data provider.

    GUARANTEES:
    - Every fetch returns a FetchResponse, never raises
    - Returned payloads contain engine records, already validated

    EXPLICIT FAILURE STATES:
    - TIMEOUT: Fetch exceeded its deadline
    - NOT_FOUND: Requested topic does not exist
    - INVALID_RESPONSE: Collaborator data couldn't be converted
    - NETWORK_ERROR: Connection failed
    - UNEXPECTED: Anything else
    """

    @abstractmethod
    async def fetch_full_topic_graph(self, language: str) -> FetchResponse:
        """Every topic and edge, for the global view."""
        pass

    @abstractmethod
    async def fetch_local_neighborhood(self, center_id: str, language: str) -> FetchResponse:
        """Centre plus direct prerequisites and effects, for a local view."""
        pass

    @abstractmethod
    async def fetch_expansion(
        self,
        topic_id: str,
        direction: Direction,
        language: Optional[str] = None
    ) -> FetchResponse:
        """Direct neighbours of `topic_id` in `direction`, with connecting edges."""
        pass

    @property
    @abstractmethod
    def provider_id(self) -> str:
        """Unique provider identifier."""
        pass
