"""Bounded timing log for expensive session computations."""

from __future__ import annotations

import time
from collections import deque
from dataclasses import dataclass
from typing import Callable, Iterator, TypeVar

from .logging_config import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class PerfEntry:
    label: str
    ms: float
    ts: float  # wall-clock seconds since the epoch


class PerfLog:
    """Keeps the most recent ``size`` timings, oldest dropped first."""

    def __init__(self, size: int = 200):
        if size < 1:
            raise ValueError("size must be at least 1")
        self._entries: deque[PerfEntry] = deque(maxlen=size)

    @property
    def size(self) -> int:
        return self._entries.maxlen or 0

    def record(self, label: str, ms: float) -> PerfEntry:
        entry = PerfEntry(label=label, ms=ms, ts=time.time())
        self._entries.append(entry)
        logger.debug(f"{label}: {ms:.1f} ms")
        return entry

    def timed(self, label: str, fn: Callable[[], T]) -> T:
        """Run ``fn`` and record how long it took, even when it raises."""
        start = time.perf_counter()
        try:
            return fn()
        finally:
            self.record(label, (time.perf_counter() - start) * 1000.0)

    def entries(self) -> list[PerfEntry]:
        return list(self._entries)

    def last(self, label: str) -> PerfEntry | None:
        for entry in reversed(self._entries):
            if entry.label == label:
                return entry
        return None

    def clear(self) -> None:
        self._entries.clear()

    def __iter__(self) -> Iterator[PerfEntry]:
        return iter(list(self._entries))

    def __len__(self) -> int:
        return len(self._entries)
