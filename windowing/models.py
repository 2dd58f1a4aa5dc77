"""Window, desktop and session snapshot models."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field


class Point(BaseModel):
    """Top-left corner or pointer location in viewport pixels."""

    model_config = ConfigDict(frozen=True)

    x: float
    y: float


class Size(BaseModel):
    """Window dimensions in pixels."""

    model_config = ConfigDict(frozen=True)

    width: float
    height: float


class Geometry(BaseModel):
    """Position and size saved while a window is maximized."""

    model_config = ConfigDict(frozen=True)

    position: Point
    size: Size


@runtime_checkable
class WindowContent(Protocol):
    """Capability a view layer expects from hosted application content.

    The window manager stores content as an opaque handle and never calls it;
    views mount content when a window opens and unmount it when it closes.
    """

    def mount(self) -> None: ...

    def unmount(self) -> None: ...


class WindowInstance(BaseModel):
    """One open window."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    id: str
    title: str
    content: Any = None
    position: Point
    size: Size
    z_index: int
    is_minimized: bool = False
    is_maximized: bool = False
    desktop_id: int
    prior_geometry: Geometry | None = None

    @property
    def geometry(self) -> Geometry:
        return Geometry(position=self.position, size=self.size)


class Desktop(BaseModel):
    """A virtual desktop as presented to the shell chrome."""

    model_config = ConfigDict(frozen=True)

    id: int
    label: str


class SessionState(BaseModel):
    """Immutable snapshot of every window and the desktop pointer."""

    model_config = ConfigDict(frozen=True)

    windows: tuple[WindowInstance, ...] = ()
    focused_window_id: str | None = None
    current_desktop_id: int = 1
    available_desktop_ids: tuple[int, ...] = (1,)
    next_z_index: int = 1
    next_desktop_id: int = 2

    def window(self, window_id: str) -> WindowInstance | None:
        for window in self.windows:
            if window.id == window_id:
                return window
        return None

    def windows_on(self, desktop_id: int) -> tuple[WindowInstance, ...]:
        return tuple(w for w in self.windows if w.desktop_id == desktop_id)

    def visible_windows(self) -> list[WindowInstance]:
        """Windows a view should draw, bottom to top."""
        visible = [
            w
            for w in self.windows
            if w.desktop_id == self.current_desktop_id and not w.is_minimized
        ]
        return sorted(visible, key=lambda w: w.z_index)

    def replace_window(self, updated: WindowInstance) -> tuple[WindowInstance, ...]:
        """Return the window tuple with `updated` swapped in by id."""
        return tuple(updated if w.id == updated.id else w for w in self.windows)


def initial_state(desktop_count: int = 1) -> SessionState:
    """Fresh session with desktops numbered from 1."""
    ids = tuple(range(1, desktop_count + 1))
    return SessionState(
        current_desktop_id=ids[0],
        available_desktop_ids=ids,
        next_desktop_id=desktop_count + 1,
    )


def desktop_label(desktop_id: int) -> str:
    return f"Desktop {desktop_id}"


class WindowSpec(BaseModel):
    """What a launcher passes when asking for a window."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    id: str = Field(min_length=1)
    title: str
    content: Any = None
