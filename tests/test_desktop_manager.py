"""Virtual desktop tests."""

from __future__ import annotations

from typing import Any

from core.session import SessionBuilder, SessionBundle
from windowing.window_manager import DESKTOP_SWITCHED, WINDOW_CLOSED


def build_session(overrides: dict[str, Any] | None = None) -> SessionBundle:
    return SessionBuilder(overrides=overrides).build()


def test_session_starts_with_one_desktop() -> None:
    session = build_session()

    assert session.desktops.available_desktop_ids == (1,)
    assert session.desktops.current_desktop_id == 1
    assert [d.label for d in session.desktops.desktops()] == ["Desktop 1"]


def test_initial_desktop_count_is_configurable() -> None:
    session = build_session({"desktops": {"initial_count": 2}})

    assert session.desktops.available_desktop_ids == (1, 2)
    assert session.desktops.create_new_desktop() == 3


def test_windows_follow_current_desktop() -> None:
    session = build_session()
    wm, desktops = session.windows, session.desktops
    wm.open_window("B", "Terminal")
    b_before = wm.get_window("B")

    new_id = desktops.create_new_desktop()
    assert new_id == 2
    assert desktops.available_desktop_ids == (1, 2)

    desktops.set_current_desktop(2)
    assert wm.focused_window_id is None
    wm.open_window("C", "Calculator")

    assert wm.get_window("C").desktop_id == 2
    assert [w.id for w in wm.visible_windows] == ["C"]
    assert wm.get_window("B") == b_before

    desktops.set_current_desktop(1)
    assert wm.focused_window_id == "B"
    assert [w.id for w in wm.visible_windows] == ["B"]
    assert wm.get_window("B") == b_before


def test_switch_event_and_ignored_switches() -> None:
    session = build_session()
    switches: list[dict[str, Any]] = []
    session.event_bus.subscribe(DESKTOP_SWITCHED, switches.append)
    session.desktops.create_new_desktop()
    revision = session.store.revision

    session.desktops.set_current_desktop(7)
    session.desktops.set_current_desktop(1)
    assert session.store.revision == revision
    assert switches == []

    session.desktops.set_current_desktop(2)
    assert switches == [{"from": 1, "to": 2}]


def test_deleting_last_desktop_is_rejected() -> None:
    session = build_session()
    session.windows.open_window("A", "Notes")
    before = session.store.state

    assert session.desktops.delete_desktop(1) is False
    assert session.desktops.available_desktop_ids == (1,)
    assert session.store.state is before


def test_deleting_unknown_desktop_returns_false() -> None:
    session = build_session()
    session.desktops.create_new_desktop()

    assert session.desktops.delete_desktop(9) is False
    assert session.desktops.available_desktop_ids == (1, 2)


def test_delete_desktop_closes_its_windows_by_default() -> None:
    session = build_session()
    wm, desktops = session.windows, session.desktops
    closed: list[str] = []
    session.event_bus.subscribe(WINDOW_CLOSED, lambda payload: closed.append(payload["window"].id))
    wm.open_window("B", "Terminal")
    desktops.create_new_desktop()
    desktops.set_current_desktop(2)
    wm.open_window("C", "Calculator")

    assert desktops.delete_desktop(1) is True

    assert desktops.available_desktop_ids == (2,)
    assert desktops.current_desktop_id == 2
    assert wm.get_window("B") is None
    assert [w.id for w in wm.windows] == ["C"]
    assert wm.focused_window_id == "C"
    assert closed == ["B"]


def test_delete_current_desktop_switches_to_lowest_remaining() -> None:
    session = build_session()
    wm, desktops = session.windows, session.desktops
    wm.open_window("A", "Notes")
    wm.open_window("B", "Files")
    desktops.create_new_desktop()
    third = desktops.create_new_desktop()
    desktops.set_current_desktop(third)
    wm.open_window("C", "Calculator")

    assert desktops.delete_desktop(third) is True

    assert desktops.current_desktop_id == 1
    assert desktops.available_desktop_ids == (1, 2)
    assert wm.focused_window_id == "B"
    assert wm.get_window("C") is None


def test_delete_desktop_can_migrate_windows() -> None:
    session = build_session({"desktops": {"orphan_policy": "migrate"}})
    wm, desktops = session.windows, session.desktops
    wm.open_window("B", "Terminal")
    desktops.create_new_desktop()
    desktops.set_current_desktop(2)
    wm.open_window("C", "Calculator")
    wm.focus_window("B")
    desktops.set_current_desktop(2)

    assert desktops.delete_desktop(1) is True

    assert wm.get_window("B").desktop_id == 2
    assert {w.id for w in wm.visible_windows} == {"B", "C"}
    # B was focused more recently than C.
    assert wm.focused_window_id == "B"


def test_desktop_ids_are_never_reused() -> None:
    session = build_session()
    desktops = session.desktops

    second = desktops.create_new_desktop()
    assert desktops.delete_desktop(second) is True
    third = desktops.create_new_desktop()

    assert (second, third) == (2, 3)
    assert desktops.available_desktop_ids == (1, 3)


def test_focusing_window_on_other_desktop_switches_to_it() -> None:
    session = build_session()
    wm, desktops = session.windows, session.desktops
    wm.open_window("A", "Notes")
    desktops.create_new_desktop()
    desktops.set_current_desktop(2)

    wm.open_window("A", "Notes")

    assert desktops.current_desktop_id == 1
    assert wm.focused_window_id == "A"
    assert len(wm.windows) == 1
