"""Simple in-process event bus for decoupled event emission."""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Callable
from typing import Any

EventHandler = Callable[[dict[str, Any]], None]
Unsubscribe = Callable[[], None]


class EventBus:
    """Dispatches events to subscribers by event name."""

    def __init__(self) -> None:
        self._handlers: dict[str, list[EventHandler]] = defaultdict(list)

    def subscribe(self, event_name: str, handler: EventHandler) -> Unsubscribe:
        """Register a callback for an event and return its release function."""
        self._handlers[event_name].append(handler)

        def unsubscribe() -> None:
            handlers = self._handlers.get(event_name, [])
            if handler in handlers:
                handlers.remove(handler)

        return unsubscribe

    def emit(self, event_name: str, payload: dict[str, Any]) -> None:
        """Emit an event to all subscribers."""
        # Copy so handlers may unsubscribe while being dispatched.
        for handler in list(self._handlers.get(event_name, [])):
            handler(payload)

    def subscriber_count(self, event_name: str) -> int:
        return len(self._handlers.get(event_name, []))
