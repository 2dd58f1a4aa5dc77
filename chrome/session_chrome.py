"""Shell chrome flags: dock visibility, dark mode, lock state and clock text."""

from __future__ import annotations

import logging
from typing import Any

from pydantic import BaseModel, ConfigDict

from core.event_bus import EventBus, Unsubscribe
from core.state_store import SessionStore
from windowing.window_manager import WINDOW_CLOSED, WINDOW_OPENED

logger = logging.getLogger("webtop.chrome")

CHROME_CHANGED = "chrome.changed"
CLOCK_TICK = "clock.tick"


class ChromeState(BaseModel):
    """Observable chrome flags."""

    model_config = ConfigDict(frozen=True)

    is_dock_visible: bool = True
    is_dark_mode: bool = False
    is_locked: bool = False
    current_time: str = ""


class SessionChrome:
    """Plain observable flags consumed by the menu bar, dock and lock screen."""

    def __init__(
        self,
        event_bus: EventBus,
        store: SessionStore,
        config: dict[str, Any] | None = None,
    ) -> None:
        cfg = config or {}
        self.event_bus = event_bus
        self.store = store
        self.auto_hide_dock = bool(cfg.get("dock", {}).get("auto_hide", True))
        self._passcode = str(cfg.get("lock", {}).get("passcode", ""))
        self._state = ChromeState(
            is_dark_mode=bool(cfg.get("appearance", {}).get("dark_mode", False)),
            is_locked=bool(cfg.get("lock", {}).get("start_locked", False)),
        )
        self._subscriptions: list[Unsubscribe] = [
            event_bus.subscribe(WINDOW_OPENED, self._on_window_opened),
            event_bus.subscribe(WINDOW_CLOSED, self._on_window_closed),
            event_bus.subscribe(CLOCK_TICK, self._on_clock_tick),
        ]

    @property
    def state(self) -> ChromeState:
        return self._state

    @property
    def is_dock_visible(self) -> bool:
        return self._state.is_dock_visible

    @property
    def is_dark_mode(self) -> bool:
        return self._state.is_dark_mode

    @property
    def is_locked(self) -> bool:
        return self._state.is_locked

    @property
    def current_time(self) -> str:
        return self._state.current_time

    def set_dock_visible(self, visible: bool) -> None:
        self._update(is_dock_visible=visible)

    def reveal_dock(self) -> None:
        """Pointer reached the bottom edge of the screen."""
        if not self._state.is_dock_visible:
            self._update(is_dock_visible=True)

    def set_dark_mode(self, dark: bool) -> None:
        self._update(is_dark_mode=dark)

    def toggle_dark_mode(self) -> bool:
        self._update(is_dark_mode=not self._state.is_dark_mode)
        return self._state.is_dark_mode

    def lock(self) -> None:
        if self._state.is_locked:
            return
        self._update(is_locked=True)
        logger.info("Session locked")

    def unlock(self, passcode: str) -> bool:
        """Unlock with the configured passcode; returns whether it succeeded."""
        if not self._state.is_locked:
            return True
        if passcode != self._passcode:
            logger.warning("Rejected unlock attempt")
            return False
        self._update(is_locked=False)
        logger.info("Session unlocked")
        return True

    def close(self) -> None:
        for unsubscribe in self._subscriptions:
            unsubscribe()
        self._subscriptions = []

    def _on_window_opened(self, _payload: dict[str, Any]) -> None:
        if self.auto_hide_dock and self._state.is_dock_visible:
            self._update(is_dock_visible=False)

    def _on_window_closed(self, _payload: dict[str, Any]) -> None:
        state = self.store.state
        if not state.windows_on(state.current_desktop_id) and not self._state.is_dock_visible:
            self._update(is_dock_visible=True)

    def _on_clock_tick(self, payload: dict[str, Any]) -> None:
        self._update(current_time=str(payload["time"]))

    def _update(self, **changes: Any) -> None:
        updated = self._state.model_copy(update=changes)
        if updated == self._state:
            return
        self._state = updated
        self.event_bus.emit(CHROME_CHANGED, {"chrome": updated})
