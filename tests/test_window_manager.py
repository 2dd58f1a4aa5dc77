"""Window lifecycle, focus and geometry tests."""

from __future__ import annotations

from typing import Any

import pytest
from pydantic import ValidationError

from core.session import SessionBuilder, SessionBundle
from windowing.invariants import validate_state
from windowing.models import Point, Size
from windowing.window_manager import DESKTOP_SWITCHED


def build_session(overrides: dict[str, Any] | None = None) -> SessionBundle:
    return SessionBuilder(overrides=overrides).build()


def test_open_focus_close_walkthrough() -> None:
    session = build_session()
    wm = session.windows

    wm.open_window("A", "Notes")
    assert [(w.id, w.z_index) for w in wm.windows] == [("A", 1)]
    assert wm.focused_window_id == "A"

    wm.open_window("B", "Terminal")
    assert wm.get_window("B").z_index == 2
    assert wm.focused_window_id == "B"

    wm.focus_window("A")
    assert wm.get_window("A").z_index == 3
    assert wm.focused_window_id == "A"

    wm.close_window("A")
    assert wm.focused_window_id == "B"
    assert [w.id for w in wm.windows] == ["B"]


def test_new_windows_cascade_with_default_size() -> None:
    session = build_session()
    first = session.windows.open_window("A", "Notes")
    second = session.windows.open_window("B", "Files")

    assert first.position == Point(x=100, y=100)
    assert second.position == Point(x=130, y=130)
    assert first.size == Size(width=800, height=600)
    assert first.desktop_id == 1
    assert not first.is_minimized and not first.is_maximized


def test_reopening_an_open_id_focuses_existing_window() -> None:
    session = build_session()
    wm = session.windows
    opened: list[int] = []
    wm.on_window_open(lambda: opened.append(1))

    wm.open_window("A", "Notes", content="first")
    wm.open_window("B", "Terminal")
    wm.minimize_window("A")
    again = wm.open_window("A", "Renamed", content="second")

    assert len(wm.windows) == 2
    assert again.title == "Notes"
    assert again.content == "first"
    assert not again.is_minimized
    assert wm.focused_window_id == "A"
    assert again.z_index == 3
    assert len(opened) == 2


def test_on_window_open_unsubscribe() -> None:
    session = build_session()
    calls: list[str] = []
    unsubscribe = session.windows.on_window_open(lambda: calls.append("open"))

    session.windows.open_window("A", "Notes")
    unsubscribe()
    session.windows.open_window("B", "Files")

    assert calls == ["open"]


def test_close_transfers_focus_to_highest_visible_window() -> None:
    session = build_session()
    wm = session.windows
    for window_id in ("A", "B", "C"):
        wm.open_window(window_id, window_id)

    wm.minimize_window("B")
    assert wm.focused_window_id == "C"

    wm.close_window("C")
    assert wm.focused_window_id == "A"

    wm.close_window("A")
    assert wm.focused_window_id is None
    assert [w.id for w in wm.windows] == ["B"]


def test_closing_unfocused_window_keeps_focus() -> None:
    session = build_session()
    wm = session.windows
    wm.open_window("A", "A")
    wm.open_window("B", "B")

    wm.close_window("A")

    assert wm.focused_window_id == "B"


def test_unknown_ids_are_ignored() -> None:
    session = build_session()
    wm = session.windows
    wm.open_window("A", "Notes")
    revision = session.store.revision
    before = session.store.state

    wm.close_window("missing")
    wm.minimize_window("missing")
    wm.maximize_window("missing")
    wm.focus_window("missing")
    wm.update_window_position("missing", Point(x=1, y=1))
    wm.update_window_size("missing", Size(width=300, height=300))

    assert session.store.revision == revision
    assert session.store.state is before


def test_minimize_then_focus_restores_window() -> None:
    session = build_session()
    wm = session.windows
    wm.open_window("A", "Notes")
    wm.update_window_position("A", Point(x=220, y=240))
    wm.open_window("B", "Files")

    wm.focus_window("A")
    wm.minimize_window("A")
    assert wm.get_window("A").is_minimized
    assert wm.focused_window_id == "B"
    assert wm.get_window("A").position == Point(x=220, y=240)

    wm.focus_window("A")
    restored = wm.get_window("A")
    assert restored.is_minimized is False
    assert wm.focused_window_id == "A"
    assert restored.position == Point(x=220, y=240)


def test_minimizing_last_visible_window_clears_focus() -> None:
    session = build_session()
    session.windows.open_window("A", "Notes")

    session.windows.minimize_window("A")

    assert session.windows.focused_window_id is None
    assert session.windows.visible_windows == []


def test_maximize_round_trip_restores_geometry() -> None:
    session = build_session()
    wm = session.windows
    wm.open_window("A", "Notes")
    wm.update_window_position("A", Point(x=250, y=300))
    wm.update_window_size("A", Size(width=640, height=480))

    wm.maximize_window("A")
    maximized = wm.get_window("A")
    assert maximized.is_maximized
    assert maximized.position == Point(x=0, y=32)
    assert maximized.size == Size(width=1440, height=868)
    assert maximized.prior_geometry is not None
    assert maximized.prior_geometry.position == Point(x=250, y=300)

    wm.maximize_window("A")
    restored = wm.get_window("A")
    assert not restored.is_maximized
    assert restored.position == Point(x=250, y=300)
    assert restored.size == Size(width=640, height=480)
    assert restored.prior_geometry is None


def test_move_and_resize_rejected_while_maximized() -> None:
    session = build_session()
    wm = session.windows
    wm.open_window("A", "Notes")
    wm.maximize_window("A")
    frame = wm.get_window("A")

    wm.update_window_position("A", Point(x=500, y=500))
    wm.update_window_size("A", Size(width=300, height=300))

    assert wm.get_window("A").position == frame.position
    assert wm.get_window("A").size == frame.size
    wm.maximize_window("A")
    assert wm.get_window("A").position == Point(x=100, y=100)


def test_position_is_clamped_below_menu_bar() -> None:
    session = build_session()
    session.windows.open_window("A", "Notes")

    session.windows.update_window_position("A", Point(x=-40, y=5))

    assert session.windows.get_window("A").position == Point(x=-40, y=32)


def test_size_has_minimum_floor() -> None:
    session = build_session()
    session.windows.open_window("A", "Notes")

    session.windows.update_window_size("A", Size(width=50, height=400))
    assert session.windows.get_window("A").size == Size(width=200, height=400)

    session.windows.update_window_size("A", Size(width=10, height=10))
    assert session.windows.get_window("A").size == Size(width=200, height=150)


def test_minimizing_maximized_window_leaves_it_restored() -> None:
    session = build_session()
    wm = session.windows
    wm.open_window("A", "Notes")
    wm.maximize_window("A")

    wm.minimize_window("A")
    window = wm.get_window("A")

    assert window.is_minimized and not window.is_maximized
    assert window.position == Point(x=100, y=100)
    assert window.size == Size(width=800, height=600)


def test_maximizing_minimized_window_brings_it_to_front() -> None:
    session = build_session()
    wm = session.windows
    wm.open_window("A", "Notes")
    wm.open_window("B", "Files")
    wm.minimize_window("A")

    wm.maximize_window("A")
    window = wm.get_window("A")

    assert window.is_maximized and not window.is_minimized
    assert wm.focused_window_id == "A"
    assert window.z_index > wm.get_window("B").z_index


def test_maximizing_minimized_window_on_other_desktop_focuses_it() -> None:
    session = build_session()
    wm = session.windows
    switches: list[dict[str, Any]] = []
    session.event_bus.subscribe(DESKTOP_SWITCHED, switches.append)
    wm.open_window("A", "Notes")
    wm.minimize_window("A")
    desktop = session.desktops.create_new_desktop()
    session.desktops.set_current_desktop(desktop)
    wm.open_window("B", "Files")

    wm.maximize_window("A")
    state = session.store.state
    window = state.window("A")

    assert window.is_maximized and not window.is_minimized
    assert state.current_desktop_id == 1
    assert state.focused_window_id == "A"
    assert window.z_index == 3
    assert state.window("B").z_index == 2
    assert switches[-1] == {"from": desktop, "to": 1}
    assert validate_state(state).is_valid


def test_viewport_change_refits_maximized_windows() -> None:
    session = build_session()
    wm = session.windows
    wm.open_window("A", "Notes")
    wm.open_window("B", "Files")
    wm.maximize_window("A")

    wm.set_viewport(Size(width=1024, height=768))

    assert wm.get_window("A").size == Size(width=1024, height=736)
    assert wm.get_window("B").size == Size(width=800, height=600)


def test_custom_menu_bar_height_and_sizes() -> None:
    session = build_session(
        {
            "shell": {"menu_bar_height": 40},
            "windows": {"min_size": {"width": 300, "height": 200}},
        }
    )
    session.windows.open_window("A", "Notes")

    session.windows.update_window_position("A", Point(x=0, y=0))
    session.windows.update_window_size("A", Size(width=0, height=0))

    window = session.windows.get_window("A")
    assert window.position.y == 40
    assert window.size == Size(width=300, height=200)


def test_snapshots_are_immutable_and_published() -> None:
    session = build_session()
    received: list[Any] = []
    session.store.subscribe(lambda payload: received.append(payload))
    before = session.store.state

    window = session.windows.open_window("A", "Notes")

    assert before.windows == ()
    assert received[-1]["state"] is session.store.state
    assert received[-1]["operation"] == "open_window"
    with pytest.raises(ValidationError):
        window.title = "changed"
