"""Dock launcher registry."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from windowing.models import WindowInstance, WindowSpec
from windowing.window_manager import WindowManager

DEFAULT_DOCK_APPS: list[dict[str, str]] = [
    {"id": "browser", "title": "Safari"},
    {"id": "texteditor", "title": "TextEdit"},
    {"id": "calculator", "title": "Calculator"},
    {"id": "files", "title": "Files"},
]


@dataclass
class DockItem:
    """Dock icon plus its running indicators."""

    id: str
    title: str
    is_open: bool
    is_minimized: bool


class Dock:
    """Launches registered apps through the window manager."""

    def __init__(self, window_manager: WindowManager, config: dict[str, Any] | None = None) -> None:
        self.window_manager = window_manager
        self._apps: dict[str, WindowSpec] = {}
        apps = (config or {}).get("dock", {}).get("apps", DEFAULT_DOCK_APPS)
        for app in apps:
            self.register(WindowSpec(id=str(app["id"]), title=str(app["title"])))

    def register(self, spec: WindowSpec) -> None:
        self._apps[spec.id] = spec

    def launch(self, app_id: str) -> WindowInstance | None:
        spec = self._apps.get(app_id)
        if spec is None:
            return None
        return self.window_manager.open_window(spec.id, spec.title, spec.content)

    def items(self) -> list[DockItem]:
        """Icons in registration order, with the indicators the dock draws."""
        state = self.window_manager.state
        items = []
        for spec in self._apps.values():
            window = state.window(spec.id)
            items.append(
                DockItem(
                    id=spec.id,
                    title=spec.title,
                    is_open=window is not None,
                    is_minimized=bool(window and window.is_minimized),
                )
            )
        return items
