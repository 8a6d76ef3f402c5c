"""A bounded, thread-safe channel for printing lines while a line is edited."""

from __future__ import annotations

import queue
from typing import Generic, TypeVar

T = TypeVar("T")

EXTERNAL_PRINTER_DEFAULT_CAPACITY = 20


class ExternalPrinter(Generic[T]):
    """Queue of messages to show above the line being edited."""

    def __init__(self, max_cap: int = EXTERNAL_PRINTER_DEFAULT_CAPACITY) -> None:
        if max_cap < 1:
            raise ValueError("max_cap must be at least 1")
        self.max_cap = max_cap
        self._queue: queue.Queue[T] = queue.Queue(maxsize=max_cap)

    def print(self, line: T) -> None:
        """Queue a line, blocking while the queue is full."""
        self._queue.put(line)

    def get_line(self) -> T | None:
        """Return the oldest queued line, or None without blocking."""
        try:
            return self._queue.get_nowait()
        except queue.Empty:
            return None