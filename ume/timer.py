"""A simple accumulating elapsed-time timer."""

from __future__ import annotations

import time
from typing import Any


class Timer:
    """Accumulates wall time over any number of start/stop intervals."""

    def __init__(self) -> None:
        self._running = False
        self._accum = 0.0
        self._start = 0.0

    def start(self) -> None:
        """Begin an interval."""
        if self._running:
            raise RuntimeError("timer is already running")
        self._running = True
        self._start = time.perf_counter()

    def stop(self) -> None:
        """End the current interval and add it to the total."""
        now = time.perf_counter()
        if not self._running:
            raise RuntimeError("timer is not running")
        self._running = False
        self._accum += now - self._start

    def seconds(self) -> float:
        """Total accumulated time in seconds."""
        return self._accum

    def clear(self) -> None:
        """Stop the timer and reset the total to zero."""
        self._running = False
        self._accum = 0.0

    def __enter__(self) -> "Timer":
        self.start()
        return self

    def __exit__(self, *args: Any) -> None:
        self.stop()

    def __str__(self) -> str:
        return f"{self.seconds():g}s"