"""Session construction: one explicit object wired by injection."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any

from chrome.clock import SessionClock
from chrome.dock import Dock
from chrome.session_chrome import SessionChrome
from core.config import load_effective_config
from core.event_bus import EventBus
from core.state_store import SessionStore
from windowing.desktop_manager import VirtualDesktopManager
from windowing.drag_controller import DragResizeController
from windowing.focus_policy import FocusZOrderPolicy
from windowing.models import initial_state
from windowing.window_manager import WindowManager


@dataclass
class SessionBundle:
    """Holds initialized session components."""

    config: dict[str, Any]
    event_bus: EventBus
    input_bus: EventBus
    store: SessionStore
    windows: WindowManager
    desktops: VirtualDesktopManager
    drag: DragResizeController
    chrome: SessionChrome
    clock: SessionClock
    dock: Dock

    def close(self) -> None:
        """Detach scoped listeners when the shell unmounts."""
        self.drag.close()
        self.chrome.close()


class SessionBuilder:
    """Creates and wires session components for the shell or the CLI."""

    def __init__(
        self,
        root: Path | None = None,
        overrides: dict[str, Any] | None = None,
        now: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.root = root.resolve() if root else None
        self.overrides = overrides or {}
        self.now = now

    def build(self) -> SessionBundle:
        config = load_effective_config(self.root, self.overrides)

        event_bus = EventBus()
        input_bus = EventBus()
        store = SessionStore(
            event_bus,
            initial_state(int(config.get("desktops", {}).get("initial_count", 1))),
        )
        policy = FocusZOrderPolicy()
        windows = WindowManager(store, event_bus, policy=policy, config=config)
        desktops = VirtualDesktopManager(store, event_bus, policy=policy, config=config)

        return SessionBundle(
            config=config,
            event_bus=event_bus,
            input_bus=input_bus,
            store=store,
            windows=windows,
            desktops=desktops,
            drag=DragResizeController(windows, input_bus),
            chrome=SessionChrome(event_bus, store, config=config),
            clock=SessionClock(event_bus, config=config, now=self.now),
            dock=Dock(windows, config=config),
        )
