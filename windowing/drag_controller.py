"""Pointer-driven move and resize gestures.

A gesture goes Idle -> Dragging (or Resizing) -> Idle. Pointer listeners
are attached to the input bus when a gesture starts and detached when it
ends, whichever way it ends: pointer-up, pointer-cancel, a new gesture,
the window disappearing, or the controller being closed by its view.
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any

from core.event_bus import EventBus, Unsubscribe
from windowing.models import Point, Size
from windowing.window_manager import WindowManager

logger = logging.getLogger("webtop.drag_controller")

POINTER_MOVE = "pointer.move"
POINTER_UP = "pointer.up"
POINTER_CANCEL = "pointer.cancel"


class GesturePhase(enum.Enum):
    IDLE = "idle"
    DRAGGING = "dragging"
    RESIZING = "resizing"


@dataclass
class _Gesture:
    window_id: str
    phase: GesturePhase
    anchor: Point
    start_size: Size | None = None


def pointer_from_payload(payload: dict[str, Any]) -> Point:
    return Point(x=float(payload["x"]), y=float(payload["y"]))


class DragResizeController:
    """Turns pointer event streams into window geometry updates."""

    def __init__(self, window_manager: WindowManager, input_bus: EventBus) -> None:
        self.window_manager = window_manager
        self.input_bus = input_bus
        self._gesture: _Gesture | None = None
        self._releases: list[Unsubscribe] = []

    @property
    def phase(self) -> GesturePhase:
        return self._gesture.phase if self._gesture else GesturePhase.IDLE

    @property
    def active_window_id(self) -> str | None:
        return self._gesture.window_id if self._gesture else None

    def begin_move(self, window_id: str, pointer: Point) -> bool:
        """Pointer-down on a title bar.

        The window is focused first. Maximized windows are focused but not
        dragged. Returns True when a drag started.
        """
        self.release()
        window = self.window_manager.get_window(window_id)
        if window is None:
            return False
        self.window_manager.focus_window(window_id)
        if window.is_maximized:
            return False
        offset = Point(x=pointer.x - window.position.x, y=pointer.y - window.position.y)
        self._start(_Gesture(window_id=window_id, phase=GesturePhase.DRAGGING, anchor=offset))
        return True

    def begin_resize(self, window_id: str, pointer: Point) -> bool:
        """Pointer-down on a resize handle."""
        self.release()
        window = self.window_manager.get_window(window_id)
        if window is None:
            return False
        self.window_manager.focus_window(window_id)
        if window.is_maximized:
            return False
        self._start(
            _Gesture(
                window_id=window_id,
                phase=GesturePhase.RESIZING,
                anchor=pointer,
                start_size=window.size,
            )
        )
        return True

    def pointer_move(self, pointer: Point) -> None:
        gesture = self._gesture
        if gesture is None:
            return
        window = self.window_manager.get_window(gesture.window_id)
        if window is None:
            logger.debug("Window %s vanished mid-gesture", gesture.window_id)
            self.release()
            return
        if gesture.phase is GesturePhase.DRAGGING:
            self.window_manager.update_window_position(
                gesture.window_id,
                Point(x=pointer.x - gesture.anchor.x, y=pointer.y - gesture.anchor.y),
            )
        elif gesture.start_size is not None:
            self.window_manager.update_window_size(
                gesture.window_id,
                Size(
                    width=gesture.start_size.width + pointer.x - gesture.anchor.x,
                    height=gesture.start_size.height + pointer.y - gesture.anchor.y,
                ),
            )

    def pointer_up(self) -> None:
        self.release()

    def release(self) -> None:
        """Return to idle and detach pointer listeners."""
        releases, self._releases = self._releases, []
        for unsubscribe in releases:
            unsubscribe()
        if self._gesture is not None:
            logger.debug("Ended %s of window %s", self._gesture.phase.value, self._gesture.window_id)
        self._gesture = None

    def close(self) -> None:
        """Called when the owning view unmounts."""
        self.release()

    @contextmanager
    def dragging(self, window_id: str, pointer: Point) -> Iterator[bool]:
        """Scope a move gesture; listeners are released on exit."""
        try:
            yield self.begin_move(window_id, pointer)
        finally:
            self.release()

    @contextmanager
    def resizing(self, window_id: str, pointer: Point) -> Iterator[bool]:
        """Scope a resize gesture; listeners are released on exit."""
        try:
            yield self.begin_resize(window_id, pointer)
        finally:
            self.release()

    def _start(self, gesture: _Gesture) -> None:
        self._gesture = gesture
        self._releases = [
            self.input_bus.subscribe(
                POINTER_MOVE, lambda payload: self.pointer_move(pointer_from_payload(payload))
            ),
            self.input_bus.subscribe(POINTER_UP, lambda _payload: self.pointer_up()),
            self.input_bus.subscribe(POINTER_CANCEL, lambda _payload: self.release()),
        ]
        logger.debug("Started %s of window %s", gesture.phase.value, gesture.window_id)
