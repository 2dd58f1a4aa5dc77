"""Focus transfer and stacking rules."""

from __future__ import annotations

from collections.abc import Iterable

from windowing.models import WindowInstance


class FocusZOrderPolicy:
    """Decides which window is on top and which one receives focus.

    The same rule serves close, minimize and desktop switches: among the
    non-minimized windows of a desktop (optionally excluding one id) the
    window with the highest z-index wins.
    """

    def stacking_order(
        self,
        windows: Iterable[WindowInstance],
        desktop_id: int,
        excluded_id: str | None = None,
    ) -> list[WindowInstance]:
        """Focusable windows of `desktop_id`, bottom to top."""
        candidates = [
            w
            for w in windows
            if w.desktop_id == desktop_id and not w.is_minimized and w.id != excluded_id
        ]
        return sorted(candidates, key=lambda w: w.z_index)

    def topmost(
        self,
        windows: Iterable[WindowInstance],
        desktop_id: int,
        excluded_id: str | None = None,
    ) -> WindowInstance | None:
        order = self.stacking_order(windows, desktop_id, excluded_id)
        return order[-1] if order else None

    def next_focus(
        self,
        windows: Iterable[WindowInstance],
        desktop_id: int,
        excluded_id: str | None = None,
    ) -> str | None:
        """Id of the window that should hold focus, or None."""
        top = self.topmost(windows, desktop_id, excluded_id)
        return top.id if top else None
