"""Holder for the single shared session state snapshot."""

from __future__ import annotations

import logging

from core.event_bus import EventBus, EventHandler, Unsubscribe
from windowing.models import SessionState

logger = logging.getLogger("webtop.state_store")

SNAPSHOT_EVENT = "session.snapshot"


class SessionStore:
    """Owns the current `SessionState` and swaps it atomically on commit.

    Managers never mutate a snapshot in place: they build a new frozen
    state and hand it to `commit`, so subscribers only ever observe
    complete states.
    """

    def __init__(self, event_bus: EventBus, state: SessionState) -> None:
        self.event_bus = event_bus
        self._state = state
        self._revision = 0

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def revision(self) -> int:
        """Number of commits since construction."""
        return self._revision

    def commit(self, state: SessionState, operation: str) -> SessionState:
        """Publish `state` as the new snapshot."""
        self._state = state
        self._revision += 1
        logger.debug("commit #%s after %s", self._revision, operation)
        self.event_bus.emit(
            SNAPSHOT_EVENT,
            {"state": state, "operation": operation, "revision": self._revision},
        )
        return state

    def subscribe(self, handler: EventHandler) -> Unsubscribe:
        """Subscribe a view to snapshots."""
        return self.event_bus.subscribe(SNAPSHOT_EVENT, handler)
