"""Replay scripted shell interactions against a session."""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path
from typing import Any

import yaml

from core.session import SessionBundle
from windowing.drag_controller import POINTER_CANCEL, POINTER_MOVE, POINTER_UP
from windowing.models import Point, Size

logger = logging.getLogger("webtop.scenario")

StepHandler = Callable[[SessionBundle, dict[str, Any]], Any]


class ScenarioError(ValueError):
    """Raised for malformed scenario files or steps."""


class StaticContent:
    """Minimal hosted content: remembers whether a view has it mounted."""

    def __init__(self, label: str) -> None:
        self.label = label
        self.mounted = False

    def mount(self) -> None:
        self.mounted = True

    def unmount(self) -> None:
        self.mounted = False

    def __repr__(self) -> str:
        return f"StaticContent({self.label!r})"


def _require(step: dict[str, Any], *keys: str) -> list[Any]:
    missing = [key for key in keys if key not in step]
    if missing:
        raise ScenarioError(f"step {step.get('op')!r} is missing {', '.join(missing)}")
    return [step[key] for key in keys]


def _point(step: dict[str, Any]) -> Point:
    x, y = _require(step, "x", "y")
    return Point(x=float(x), y=float(y))


def _open(bundle: SessionBundle, step: dict[str, Any]) -> Any:
    (window_id,) = _require(step, "id")
    title = str(step.get("title", window_id))
    return bundle.windows.open_window(str(window_id), title, StaticContent(title))


def _by_id(method: str) -> StepHandler:
    def handler(bundle: SessionBundle, step: dict[str, Any]) -> Any:
        (window_id,) = _require(step, "id")
        return getattr(bundle.windows, method)(str(window_id))

    return handler


def _move(bundle: SessionBundle, step: dict[str, Any]) -> Any:
    (window_id,) = _require(step, "id")
    bundle.windows.update_window_position(str(window_id), _point(step))


def _resize(bundle: SessionBundle, step: dict[str, Any]) -> Any:
    window_id, width, height = _require(step, "id", "width", "height")
    bundle.windows.update_window_size(str(window_id), Size(width=float(width), height=float(height)))


def _set_viewport(bundle: SessionBundle, step: dict[str, Any]) -> Any:
    width, height = _require(step, "width", "height")
    bundle.windows.set_viewport(Size(width=float(width), height=float(height)))


def _create_desktop(bundle: SessionBundle, step: dict[str, Any]) -> Any:
    desktop_id = bundle.desktops.create_new_desktop()
    if step.get("switch", False):
        bundle.desktops.set_current_desktop(desktop_id)
    return desktop_id


def _delete_desktop(bundle: SessionBundle, step: dict[str, Any]) -> Any:
    (desktop_id,) = _require(step, "id")
    return bundle.desktops.delete_desktop(int(desktop_id))


def _switch_desktop(bundle: SessionBundle, step: dict[str, Any]) -> Any:
    (desktop_id,) = _require(step, "id")
    bundle.desktops.set_current_desktop(int(desktop_id))


def _begin_move(bundle: SessionBundle, step: dict[str, Any]) -> Any:
    (window_id,) = _require(step, "id")
    return bundle.drag.begin_move(str(window_id), _point(step))


def _begin_resize(bundle: SessionBundle, step: dict[str, Any]) -> Any:
    (window_id,) = _require(step, "id")
    return bundle.drag.begin_resize(str(window_id), _point(step))


def _pointer_move(bundle: SessionBundle, step: dict[str, Any]) -> Any:
    point = _point(step)
    bundle.input_bus.emit(POINTER_MOVE, {"x": point.x, "y": point.y})


def _launch(bundle: SessionBundle, step: dict[str, Any]) -> Any:
    (app_id,) = _require(step, "app")
    return bundle.dock.launch(str(app_id))


def _unlock(bundle: SessionBundle, step: dict[str, Any]) -> Any:
    (passcode,) = _require(step, "passcode")
    return bundle.chrome.unlock(str(passcode))


def _dark_mode(bundle: SessionBundle, step: dict[str, Any]) -> Any:
    bundle.chrome.set_dark_mode(bool(step.get("enabled", True)))


STEP_HANDLERS: dict[str, StepHandler] = {
    "open_window": _open,
    "close_window": _by_id("close_window"),
    "minimize_window": _by_id("minimize_window"),
    "maximize_window": _by_id("maximize_window"),
    "focus_window": _by_id("focus_window"),
    "move_window": _move,
    "resize_window": _resize,
    "set_viewport": _set_viewport,
    "create_desktop": _create_desktop,
    "delete_desktop": _delete_desktop,
    "switch_desktop": _switch_desktop,
    "begin_move": _begin_move,
    "begin_resize": _begin_resize,
    "pointer_move": _pointer_move,
    "pointer_up": lambda bundle, _step: bundle.input_bus.emit(POINTER_UP, {}),
    "pointer_cancel": lambda bundle, _step: bundle.input_bus.emit(POINTER_CANCEL, {}),
    "launch": _launch,
    "lock": lambda bundle, _step: bundle.chrome.lock(),
    "unlock": _unlock,
    "dark_mode": _dark_mode,
    "reveal_dock": lambda bundle, _step: bundle.chrome.reveal_dock(),
}


def load_scenario(path: Path) -> dict[str, Any]:
    """Read a scenario file: a list of steps, or a mapping with `steps` and `config`."""
    if not path.exists():
        raise ScenarioError(f"Scenario file not found: {path}")
    with path.open("r", encoding="utf-8") as fh:
        data = yaml.safe_load(fh) or []
    if isinstance(data, list):
        data = {"steps": data}
    if not isinstance(data, dict) or not isinstance(data.get("steps", []), list):
        raise ScenarioError(f"Scenario must be a list of steps: {path}")
    config = data.get("config", {}) or {}
    if not isinstance(config, dict):
        raise ScenarioError("Scenario config must be a mapping")
    return {"steps": data.get("steps", []), "config": config}


def run_step(bundle: SessionBundle, step: Any) -> Any:
    if not isinstance(step, dict) or "op" not in step:
        raise ScenarioError(f"Each step needs an 'op': {step!r}")
    handler = STEP_HANDLERS.get(str(step["op"]))
    if handler is None:
        raise ScenarioError(f"Unknown operation: {step['op']!r}")
    logger.debug("Running step %s", step)
    return handler(bundle, step)
