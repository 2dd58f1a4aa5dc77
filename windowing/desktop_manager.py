"""Virtual desktop bookkeeping."""

from __future__ import annotations

import logging
from typing import Any

from core.event_bus import EventBus
from core.state_store import SessionStore
from windowing.focus_policy import FocusZOrderPolicy
from windowing.models import Desktop, desktop_label
from windowing.window_manager import DESKTOP_SWITCHED, WINDOW_CLOSED

logger = logging.getLogger("webtop.desktop_manager")


class VirtualDesktopManager:
    """Creates, deletes and switches virtual desktops.

    Windows are tied to a desktop only through their ``desktop_id``; the
    window collection in the shared store stays the single source of truth.
    """

    def __init__(
        self,
        store: SessionStore,
        event_bus: EventBus,
        policy: FocusZOrderPolicy | None = None,
        config: dict[str, Any] | None = None,
    ) -> None:
        cfg = (config or {}).get("desktops", {})
        self.store = store
        self.event_bus = event_bus
        self.policy = policy or FocusZOrderPolicy()
        self.orphan_policy = str(cfg.get("orphan_policy", "close"))

    @property
    def current_desktop_id(self) -> int:
        return self.store.state.current_desktop_id

    @property
    def available_desktop_ids(self) -> tuple[int, ...]:
        return self.store.state.available_desktop_ids

    def desktops(self) -> list[Desktop]:
        return [
            Desktop(id=desktop_id, label=desktop_label(desktop_id))
            for desktop_id in self.store.state.available_desktop_ids
        ]

    def create_new_desktop(self) -> int:
        """Allocate a desktop id that has never been used in this session."""
        state = self.store.state
        desktop_id = state.next_desktop_id
        self.store.commit(
            state.model_copy(
                update={
                    "available_desktop_ids": state.available_desktop_ids + (desktop_id,),
                    "next_desktop_id": desktop_id + 1,
                }
            ),
            "create_new_desktop",
        )
        logger.info("Created desktop %s", desktop_id)
        return desktop_id

    def delete_desktop(self, desktop_id: int) -> bool:
        """Remove a desktop; returns False when nothing was deleted.

        The last remaining desktop cannot be deleted. Windows left on the
        deleted desktop are closed or moved to the surviving current desktop
        depending on ``desktops.orphan_policy``.
        """
        state = self.store.state
        if desktop_id not in state.available_desktop_ids:
            logger.debug("Ignoring delete of unknown desktop %s", desktop_id)
            return False
        if len(state.available_desktop_ids) <= 1:
            logger.warning("Refusing to delete desktop %s: it is the last one", desktop_id)
            return False

        remaining_ids = tuple(d for d in state.available_desktop_ids if d != desktop_id)
        previous_current = state.current_desktop_id
        current = previous_current if previous_current != desktop_id else min(remaining_ids)

        orphans = state.windows_on(desktop_id)
        if self.orphan_policy == "migrate":
            windows = tuple(
                w.model_copy(update={"desktop_id": current}) if w.desktop_id == desktop_id else w
                for w in state.windows
            )
            closed = ()
        else:
            windows = tuple(w for w in state.windows if w.desktop_id != desktop_id)
            closed = orphans

        focused = state.focused_window_id
        if current != previous_current or orphans:
            focused = self.policy.next_focus(windows, current)

        self.store.commit(
            state.model_copy(
                update={
                    "windows": windows,
                    "available_desktop_ids": remaining_ids,
                    "current_desktop_id": current,
                    "focused_window_id": focused,
                }
            ),
            "delete_desktop",
        )
        logger.info(
            "Deleted desktop %s (%s window(s) %s)",
            desktop_id,
            len(orphans),
            "migrated" if self.orphan_policy == "migrate" else "closed",
        )
        for window in closed:
            self.event_bus.emit(WINDOW_CLOSED, {"window": window})
        if current != previous_current:
            self.event_bus.emit(DESKTOP_SWITCHED, {"from": previous_current, "to": current})
        return True

    def set_current_desktop(self, desktop_id: int) -> None:
        """Show another desktop; its topmost window takes focus.

        Windows elsewhere are left untouched, only hidden from the view.
        """
        state = self.store.state
        if desktop_id not in state.available_desktop_ids:
            return
        if desktop_id == state.current_desktop_id:
            return
        previous = state.current_desktop_id
        self.store.commit(
            state.model_copy(
                update={
                    "current_desktop_id": desktop_id,
                    "focused_window_id": self.policy.next_focus(state.windows, desktop_id),
                }
            ),
            "set_current_desktop",
        )
        logger.info("Switched from desktop %s to %s", previous, desktop_id)
        self.event_bus.emit(DESKTOP_SWITCHED, {"from": previous, "to": desktop_id})
