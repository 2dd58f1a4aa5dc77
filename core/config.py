"""Configuration loading for the desktop session."""

from __future__ import annotations

import copy
from pathlib import Path
from typing import Any

import yaml

ORPHAN_POLICIES = ("close", "migrate")
MIN_MENU_BAR_HEIGHT = 32

DEFAULT_CONFIG: dict[str, Any] = {
    "shell": {
        "menu_bar_height": 32,
        "viewport": {"width": 1440, "height": 900},
    },
    "windows": {
        "default_size": {"width": 800, "height": 600},
        "min_size": {"width": 200, "height": 150},
        "cascade": {"origin_x": 100, "origin_y": 100, "step": 30},
    },
    "desktops": {
        "initial_count": 1,
        "orphan_policy": "close",
    },
    "dock": {"auto_hide": True},
    "appearance": {"dark_mode": False},
    "lock": {"passcode": "123", "start_locked": False},
    "clock": {"interval_seconds": 1.0, "format": "%H:%M"},
    "logging": {"level": "WARNING"},
}


def load_yaml(path: Path) -> dict[str, Any]:
    """Load YAML from file, returning empty mapping when missing."""
    if not path.exists():
        return {}
    with path.open("r", encoding="utf-8") as fh:
        data = yaml.safe_load(fh) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file must contain a mapping: {path}")
    return data


def merge_dicts(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge dictionaries."""
    merged: dict[str, Any] = dict(base)
    for key, value in override.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merged[key] = merge_dicts(merged[key], value)
        else:
            merged[key] = value
    return merged


def _positive(value: Any, name: str) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{name} must be a number, got {value!r}") from exc
    if number <= 0:
        raise ValueError(f"{name} must be positive, got {value!r}")
    return number


def validate_config(config: dict[str, Any]) -> dict[str, Any]:
    """Reject values the window manager cannot honour."""
    shell = config.get("shell", {})
    menu_bar = float(shell.get("menu_bar_height", MIN_MENU_BAR_HEIGHT))
    if menu_bar < MIN_MENU_BAR_HEIGHT:
        raise ValueError(
            f"shell.menu_bar_height must be at least {MIN_MENU_BAR_HEIGHT}, got {menu_bar:g}"
        )
    viewport = shell.get("viewport", {})
    _positive(viewport.get("width"), "shell.viewport.width")
    viewport_height = _positive(viewport.get("height"), "shell.viewport.height")
    if viewport_height <= menu_bar:
        raise ValueError("shell.viewport.height must exceed the menu bar height")

    windows = config.get("windows", {})
    default_size = windows.get("default_size", {})
    min_size = windows.get("min_size", {})
    for axis in ("width", "height"):
        default_value = _positive(default_size.get(axis), f"windows.default_size.{axis}")
        min_value = _positive(min_size.get(axis), f"windows.min_size.{axis}")
        if min_value > default_value:
            raise ValueError(f"windows.min_size.{axis} exceeds windows.default_size.{axis}")

    desktops = config.get("desktops", {})
    if int(desktops.get("initial_count", 0)) < 1:
        raise ValueError("desktops.initial_count must be at least 1")
    policy = desktops.get("orphan_policy")
    if policy not in ORPHAN_POLICIES:
        raise ValueError(
            f"desktops.orphan_policy must be one of {', '.join(ORPHAN_POLICIES)}, got {policy!r}"
        )

    _positive(config.get("clock", {}).get("interval_seconds"), "clock.interval_seconds")
    return config


def load_effective_config(
    root: Path | None = None,
    overrides: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Merge built-in defaults, `config/default.yaml` under `root`, and overrides."""
    merged = copy.deepcopy(DEFAULT_CONFIG)
    if root is not None:
        merged = merge_dicts(merged, load_yaml(root / "config" / "default.yaml"))
    if overrides:
        merged = merge_dicts(merged, overrides)
    return validate_config(merged)
