"""Window collection, geometry and focus management."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from core.event_bus import EventBus, Unsubscribe
from core.state_store import SessionStore
from windowing.focus_policy import FocusZOrderPolicy
from windowing.models import Geometry, Point, SessionState, Size, WindowInstance

logger = logging.getLogger("webtop.window_manager")

WINDOW_OPENED = "window.opened"
WINDOW_CLOSED = "window.closed"
DESKTOP_SWITCHED = "desktop.switched"


class WindowManager:
    """Opens, closes, stacks and moves windows.

    Unknown ids are ignored rather than rejected: the shell may hold stale
    references (a double-clicked close button, a drag outliving its
    window) and none of those should raise.
    """

    def __init__(
        self,
        store: SessionStore,
        event_bus: EventBus,
        policy: FocusZOrderPolicy | None = None,
        config: dict[str, Any] | None = None,
    ) -> None:
        cfg = config or {}
        shell = cfg.get("shell", {})
        windows = cfg.get("windows", {})
        viewport = shell.get("viewport", {})
        default_size = windows.get("default_size", {})
        min_size = windows.get("min_size", {})
        cascade = windows.get("cascade", {})

        self.store = store
        self.event_bus = event_bus
        self.policy = policy or FocusZOrderPolicy()
        self.menu_bar_height = float(shell.get("menu_bar_height", 32))
        self.viewport = Size(
            width=float(viewport.get("width", 1440)),
            height=float(viewport.get("height", 900)),
        )
        self.default_size = Size(
            width=float(default_size.get("width", 800)),
            height=float(default_size.get("height", 600)),
        )
        self.min_size = Size(
            width=float(min_size.get("width", 200)),
            height=float(min_size.get("height", 150)),
        )
        self.cascade_origin = Point(
            x=float(cascade.get("origin_x", 100)),
            y=float(cascade.get("origin_y", 100)),
        )
        self.cascade_step = float(cascade.get("step", 30))

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def state(self) -> SessionState:
        return self.store.state

    @property
    def windows(self) -> tuple[WindowInstance, ...]:
        """Every open window on every desktop."""
        return self.store.state.windows

    @property
    def visible_windows(self) -> list[WindowInstance]:
        return self.store.state.visible_windows()

    @property
    def focused_window_id(self) -> str | None:
        return self.store.state.focused_window_id

    def get_window(self, window_id: str) -> WindowInstance | None:
        return self.store.state.window(window_id)

    def on_window_open(self, callback: Callable[[], None]) -> Unsubscribe:
        """Call `callback` whenever a new window is created."""
        return self.event_bus.subscribe(WINDOW_OPENED, lambda _payload: callback())

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def open_window(self, window_id: str, title: str, content: Any = None) -> WindowInstance:
        """Create a window on the current desktop, or focus it if already open.

        Re-opening an open id keeps the existing title and content.
        """
        state = self.store.state
        existing = state.window(window_id)
        if existing is not None:
            logger.debug("Window %s already open, focusing", window_id)
            self.focus_window(window_id)
            return self.store.state.window(window_id) or existing

        offset = len(state.windows_on(state.current_desktop_id)) * self.cascade_step
        window = WindowInstance(
            id=window_id,
            title=title,
            content=content,
            position=self._clamp(
                Point(x=self.cascade_origin.x + offset, y=self.cascade_origin.y + offset)
            ),
            size=self.default_size,
            z_index=state.next_z_index,
            desktop_id=state.current_desktop_id,
        )
        self.store.commit(
            state.model_copy(
                update={
                    "windows": state.windows + (window,),
                    "focused_window_id": window.id,
                    "next_z_index": state.next_z_index + 1,
                }
            ),
            "open_window",
        )
        logger.info("Opened window %s on desktop %s", window_id, window.desktop_id)
        self.event_bus.emit(WINDOW_OPENED, {"window": window})
        return window

    def close_window(self, window_id: str) -> None:
        state = self.store.state
        window = state.window(window_id)
        if window is None:
            return
        remaining = tuple(w for w in state.windows if w.id != window_id)
        focused = state.focused_window_id
        if focused == window_id:
            focused = self.policy.next_focus(remaining, state.current_desktop_id)
        self.store.commit(
            state.model_copy(update={"windows": remaining, "focused_window_id": focused}),
            "close_window",
        )
        logger.info("Closed window %s", window_id)
        self.event_bus.emit(WINDOW_CLOSED, {"window": window})

    # ------------------------------------------------------------------
    # State toggles
    # ------------------------------------------------------------------

    def minimize_window(self, window_id: str) -> None:
        """Hide a window, keeping its geometry for the restore."""
        state = self.store.state
        window = state.window(window_id)
        if window is None or window.is_minimized:
            return
        update: dict[str, Any] = {"is_minimized": True}
        if window.is_maximized:
            update.update(self._restored_geometry(window))
        windows = state.replace_window(window.model_copy(update=update))
        focused = state.focused_window_id
        if focused == window_id:
            focused = self.policy.next_focus(windows, state.current_desktop_id, window_id)
        self.store.commit(
            state.model_copy(update={"windows": windows, "focused_window_id": focused}),
            "minimize_window",
        )
        logger.debug("Minimized window %s", window_id)

    def maximize_window(self, window_id: str) -> None:
        """Toggle between the maximized frame and the saved geometry."""
        state = self.store.state
        window = state.window(window_id)
        if window is None:
            return
        if window.is_maximized:
            updated = window.model_copy(update=self._restored_geometry(window))
            self.store.commit(
                state.model_copy(update={"windows": state.replace_window(updated)}),
                "maximize_window",
            )
            logger.debug("Restored window %s", window_id)
            return

        update: dict[str, Any] = {
            "is_maximized": True,
            "is_minimized": False,
            "prior_geometry": window.geometry,
            **self._maximized_frame(),
        }
        changes: dict[str, Any] = {}
        previous_desktop = state.current_desktop_id
        if window.is_minimized:
            # Coming back from the dock is a focus: raised, focused, and its
            # desktop becomes current.
            update["z_index"] = state.next_z_index
            changes["next_z_index"] = state.next_z_index + 1
            changes["focused_window_id"] = window_id
            changes["current_desktop_id"] = window.desktop_id
        changes["windows"] = state.replace_window(window.model_copy(update=update))
        self.store.commit(state.model_copy(update=changes), "maximize_window")
        logger.debug("Maximized window %s", window_id)
        if window.is_minimized and window.desktop_id != previous_desktop:
            self.event_bus.emit(
                DESKTOP_SWITCHED, {"from": previous_desktop, "to": window.desktop_id}
            )

    def focus_window(self, window_id: str) -> None:
        """Raise a window to the top of the stack and give it focus.

        A minimized window is restored. A window on another desktop brings
        that desktop to the front with it.
        """
        state = self.store.state
        window = state.window(window_id)
        if window is None:
            return
        updated = window.model_copy(
            update={"z_index": state.next_z_index, "is_minimized": False}
        )
        previous_desktop = state.current_desktop_id
        self.store.commit(
            state.model_copy(
                update={
                    "windows": state.replace_window(updated),
                    "focused_window_id": window_id,
                    "next_z_index": state.next_z_index + 1,
                    "current_desktop_id": window.desktop_id,
                }
            ),
            "focus_window",
        )
        if window.desktop_id != previous_desktop:
            logger.info(
                "Switched to desktop %s to focus window %s", window.desktop_id, window_id
            )
            self.event_bus.emit(
                DESKTOP_SWITCHED, {"from": previous_desktop, "to": window.desktop_id}
            )

    # ------------------------------------------------------------------
    # Geometry
    # ------------------------------------------------------------------

    def update_window_position(self, window_id: str, position: Point) -> None:
        state = self.store.state
        window = state.window(window_id)
        if window is None or window.is_maximized:
            return
        updated = window.model_copy(update={"position": self._clamp(position)})
        self.store.commit(
            state.model_copy(update={"windows": state.replace_window(updated)}),
            "update_window_position",
        )
        logger.debug("Moved window %s to %s", window_id, updated.position)

    def update_window_size(self, window_id: str, size: Size) -> None:
        state = self.store.state
        window = state.window(window_id)
        if window is None or window.is_maximized:
            return
        floored = Size(
            width=max(size.width, self.min_size.width),
            height=max(size.height, self.min_size.height),
        )
        updated = window.model_copy(update={"size": floored})
        self.store.commit(
            state.model_copy(update={"windows": state.replace_window(updated)}),
            "update_window_size",
        )
        logger.debug("Resized window %s to %s", window_id, floored)

    def set_viewport(self, viewport: Size) -> None:
        """Record a new viewport size and refit maximized windows to it."""
        self.viewport = viewport
        state = self.store.state
        if not any(w.is_maximized for w in state.windows):
            return
        frame = self._maximized_frame()
        windows = tuple(
            w.model_copy(update=frame) if w.is_maximized else w for w in state.windows
        )
        self.store.commit(state.model_copy(update={"windows": windows}), "set_viewport")

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _clamp(self, position: Point) -> Point:
        if position.y >= self.menu_bar_height:
            return position
        return Point(x=position.x, y=self.menu_bar_height)

    def _maximized_frame(self) -> dict[str, Any]:
        return {
            "position": Point(x=0, y=self.menu_bar_height),
            "size": Size(
                width=self.viewport.width,
                height=self.viewport.height - self.menu_bar_height,
            ),
        }

    @staticmethod
    def _restored_geometry(window: WindowInstance) -> dict[str, Any]:
        prior = window.prior_geometry or Geometry(position=window.position, size=window.size)
        return {
            "is_maximized": False,
            "position": prior.position,
            "size": prior.size,
            "prior_geometry": None,
        }
