"""
Interaction Router

Turns interaction events into session calls and re-emits them to
listeners (the embedding application).

ROUTING RULES:
==============
- Local view: activate recentres, expand/collapse mutate the session
- Global view: activate marks the node for the caller to open locally
- Listeners are told first, then the session acts
- The most recent events are kept in arrival order (bounded)
"""

from __future__ import annotations
from collections import deque
from typing import Deque, List, Optional, Tuple

from topicgraph.contracts import Direction, Error, ErrorCode, Result
from topicgraph.session import GlobalGraphSession, LocalGraphSession

from .events import InteractionEvent, InteractionType


class InteractionListener:
    """Override the callbacks you care about; the rest do nothing."""

    def on_node_selected(self, node_id: Optional[str]) -> None:
        pass

    def on_node_activated(self, node_id: str) -> None:
        pass

    def on_node_hovered(self, node_id: Optional[str]) -> None:
        pass

    def on_expand_requested(self, node_id: str, direction: Direction) -> None:
        pass

    def on_collapse_requested(self, node_id: str, direction: Direction) -> None:
        pass


class InteractionRouter:
    """Routes events for at most one local and one global session."""

    def __init__(
        self,
        local_session: Optional[LocalGraphSession] = None,
        global_session: Optional[GlobalGraphSession] = None,
        history_limit: int = 100
    ):
        self._local = local_session
        self._global = global_session
        self._listeners: List[InteractionListener] = []
        self._history: Deque[InteractionEvent] = deque(maxlen=history_limit)
        self._hovered_id: Optional[str] = None

    @property
    def history(self) -> Tuple[InteractionEvent, ...]:
        """Most recent events, oldest first; at most `history_limit`."""
        return tuple(self._history)

    @property
    def hovered_id(self) -> Optional[str]:
        return self._hovered_id

    def add_listener(self, listener: InteractionListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: InteractionListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    async def toggle(self, node_id: str, direction: Direction) -> Result:
        """Badge click: expand a collapsed branch, collapse an open one."""
        if self._local is not None and self._local.is_expanded(node_id, direction):
            return await self.dispatch(InteractionEvent.collapse(node_id, direction))
        return await self.dispatch(InteractionEvent.expand(node_id, direction))

    async def dispatch(self, event: InteractionEvent) -> Result:
        self._history.append(event)
        kind = event.event_type

        if kind is InteractionType.NODE_HOVERED:
            self._hovered_id = event.node_id
            for listener in self._listeners:
                listener.on_node_hovered(event.node_id)
            return Result.success(event.node_id)

        if kind is InteractionType.NODE_SELECTED:
            for listener in self._listeners:
                listener.on_node_selected(event.node_id)
            session = self._local if self._local is not None else self._global
            if session is None:
                return self._no_session(event)
            return Result.success(session.select(event.node_id))

        if kind is InteractionType.NODE_ACTIVATED:
            for listener in self._listeners:
                listener.on_node_activated(event.node_id)
            if self._local is not None:
                return await self._local.recenter(event.node_id)
            if self._global is not None:
                return Result.success(self._global.activate(event.node_id))
            return self._no_session(event)

        if self._local is None:
            return self._no_session(event)

        if kind is InteractionType.EXPAND_REQUESTED:
            for listener in self._listeners:
                listener.on_expand_requested(event.node_id, event.direction)
            return await self._local.expand(event.node_id, event.direction)

        for listener in self._listeners:
            listener.on_collapse_requested(event.node_id, event.direction)
        return await self._local.collapse(event.node_id, event.direction)

    @staticmethod
    def _no_session(event: InteractionEvent) -> Result:
        return Result.failure(Error.create(
            ErrorCode.SESSION_NOT_INITIALIZED,
            f"No session can handle {event.event_type.value}"
        ))
