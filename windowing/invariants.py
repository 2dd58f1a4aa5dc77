"""Consistency checks for session snapshots."""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field

from windowing.focus_policy import FocusZOrderPolicy
from windowing.models import SessionState

logger = logging.getLogger("webtop.invariants")


@dataclass
class ValidationResult:
    """Outcome of validating one snapshot."""

    errors: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def add_error(self, message: str) -> None:
        self.errors.append(message)
        logger.error("Invalid session state: %s", message)


def validate_state(state: SessionState, menu_bar_height: float = 32) -> ValidationResult:
    """Check a snapshot against the window manager's invariants."""
    result = ValidationResult()
    windows = state.windows

    duplicates = [wid for wid, count in Counter(w.id for w in windows).items() if count > 1]
    if duplicates:
        result.add_error(f"duplicate window ids: {sorted(duplicates)}")

    z_values = [w.z_index for w in windows]
    if len(set(z_values)) != len(z_values):
        result.add_error(f"z-index values are not distinct: {sorted(z_values)}")
    if z_values and max(z_values) >= state.next_z_index:
        result.add_error(
            f"next_z_index {state.next_z_index} does not exceed max z-index {max(z_values)}"
        )

    if not state.available_desktop_ids:
        result.add_error("no desktops")
    if len(set(state.available_desktop_ids)) != len(state.available_desktop_ids):
        result.add_error("duplicate desktop ids")
    if state.current_desktop_id not in state.available_desktop_ids:
        result.add_error(f"current desktop {state.current_desktop_id} does not exist")
    if state.available_desktop_ids and max(state.available_desktop_ids) >= state.next_desktop_id:
        result.add_error("next_desktop_id would reuse an existing id")

    for window in windows:
        if window.desktop_id not in state.available_desktop_ids:
            result.add_error(f"window {window.id} is on missing desktop {window.desktop_id}")
        if window.position.y < menu_bar_height:
            result.add_error(f"window {window.id} sits above the menu bar (y={window.position.y})")
        if window.is_minimized and window.is_maximized:
            result.add_error(f"window {window.id} is both minimized and maximized")
        if window.is_maximized and window.prior_geometry is None:
            result.add_error(f"maximized window {window.id} has no saved geometry")

    expected_focus = FocusZOrderPolicy().next_focus(windows, state.current_desktop_id)
    if state.focused_window_id != expected_focus:
        result.add_error(
            f"focused window {state.focused_window_id!r} is not the topmost visible "
            f"window {expected_focus!r}"
        )
    return result
