"""Menu bar clock."""

from __future__ import annotations

import time
from collections.abc import Callable
from datetime import datetime
from typing import Any

from chrome.session_chrome import CLOCK_TICK
from core.event_bus import EventBus


class SessionClock:
    """Emits the formatted wall-clock time once per interval.

    Reads the time only; it has no access to the window collection.
    """

    def __init__(
        self,
        event_bus: EventBus,
        config: dict[str, Any] | None = None,
        now: Callable[[], datetime] = datetime.now,
    ) -> None:
        cfg = (config or {}).get("clock", {})
        self.event_bus = event_bus
        self.interval_seconds = float(cfg.get("interval_seconds", 1.0))
        self.time_format = str(cfg.get("format", "%H:%M"))
        self._now = now

    def tick(self) -> str:
        text = self._now().strftime(self.time_format)
        self.event_bus.emit(CLOCK_TICK, {"time": text})
        return text

    def run(self, ticks: int, sleep: Callable[[float], None] = time.sleep) -> list[str]:
        """Tick `ticks` times, sleeping one interval between ticks."""
        emitted: list[str] = []
        for index in range(ticks):
            if index:
                sleep(self.interval_seconds)
            emitted.append(self.tick())
        return emitted
