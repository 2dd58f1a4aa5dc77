"""Plain-text rendering of session snapshots."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from chrome.session_chrome import ChromeState
from core.event_bus import EventBus, Unsubscribe
from core.state_store import SNAPSHOT_EVENT
from windowing.models import SessionState, WindowContent, WindowInstance
from windowing.window_manager import WINDOW_CLOSED, WINDOW_OPENED


def _fmt(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else f"{value:.1f}"


def describe_window(window: WindowInstance, focused: bool) -> str:
    flags = []
    if window.is_minimized:
        flags.append("minimized")
    if window.is_maximized:
        flags.append("maximized")
    marker = "*" if focused else " "
    suffix = f" [{', '.join(flags)}]" if flags else ""
    return (
        f"{marker} {window.id} {window.title!r} desktop={window.desktop_id} z={window.z_index} "
        f"at ({_fmt(window.position.x)},{_fmt(window.position.y)}) "
        f"size {_fmt(window.size.width)}x{_fmt(window.size.height)}{suffix}"
    )


def render_state(state: SessionState, chrome: ChromeState | None = None) -> list[str]:
    desktops = ", ".join(
        f"[{d}]" if d == state.current_desktop_id else str(d) for d in state.available_desktop_ids
    )
    lines = [f"desktops: {desktops}  focused: {state.focused_window_id or '-'}"]
    for window in sorted(state.windows, key=lambda w: (w.desktop_id, w.z_index)):
        lines.append("  " + describe_window(window, window.id == state.focused_window_id))
    if chrome is not None:
        lines.append(
            f"  dock={'shown' if chrome.is_dock_visible else 'hidden'} "
            f"dark={'on' if chrome.is_dark_mode else 'off'} "
            f"locked={'yes' if chrome.is_locked else 'no'}"
        )
    return lines


class TextView:
    """Subscribes to the session and mounts hosted content as windows come and go.

    The view only ever receives snapshots; nothing in the session holds a
    reference back to it.
    """

    def __init__(self, event_bus: EventBus, echo: Callable[[str], None]) -> None:
        self.echo = echo
        self.latest: SessionState | None = None
        self._subscriptions: list[Unsubscribe] = [
            event_bus.subscribe(WINDOW_OPENED, self._on_opened),
            event_bus.subscribe(WINDOW_CLOSED, self._on_closed),
            event_bus.subscribe(SNAPSHOT_EVENT, self._on_snapshot),
        ]

    def _on_snapshot(self, payload: dict[str, Any]) -> None:
        self.latest = payload["state"]

    def _on_opened(self, payload: dict[str, Any]) -> None:
        content = payload["window"].content
        if isinstance(content, WindowContent):
            content.mount()

    def _on_closed(self, payload: dict[str, Any]) -> None:
        content = payload["window"].content
        if isinstance(content, WindowContent):
            content.unmount()

    def show(self, chrome: ChromeState | None = None) -> None:
        if self.latest is None:
            return
        for line in render_state(self.latest, chrome):
            self.echo(line)

    def close(self) -> None:
        for unsubscribe in self._subscriptions:
            unsubscribe()
        self._subscriptions = []
