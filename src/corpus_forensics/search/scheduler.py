"""Background task scheduling for chunked index construction.

The engine only needs "call this again later". A host implements
:class:`BackgroundScheduler` with whatever yield point it has (an idle
callback, a timer, an event loop); :class:`CooperativeScheduler` is a plain
FIFO the host drains at its own yield points.
"""

from __future__ import annotations

from collections import deque
from typing import Callable, Optional, Protocol

from ..logging_config import get_logger
from .index import CorpusSearchIndex
from .models import IndexProgress

logger = get_logger(__name__)

Task = Callable[[], None]


class BackgroundScheduler(Protocol):
    def schedule(self, fn: Task) -> None:
        """Arrange for ``fn`` to be called eventually."""
        ...


class CooperativeScheduler:
    """FIFO of pending tasks, drained explicitly by the host."""

    def __init__(self) -> None:
        self._queue: deque[Task] = deque()

    def schedule(self, fn: Task) -> None:
        self._queue.append(fn)

    @property
    def pending(self) -> int:
        return len(self._queue)

    def run_pending(self, max_tasks: Optional[int] = None) -> int:
        """Run tasks queued before this call (at most ``max_tasks``); return how many ran.

        Tasks scheduled while running wait for the next call, so each call is
        one bounded turn.
        """
        budget = len(self._queue)
        if max_tasks is not None:
            budget = min(budget, max_tasks)
        for _ in range(budget):
            self._queue.popleft()()
        return budget

    def run_until_idle(self, max_turns: int = 100_000) -> int:
        """Drain the queue completely; return the number of tasks run."""
        ran = 0
        turns = 0
        while self._queue and turns < max_turns:
            ran += self.run_pending()
            turns += 1
        return ran

    def clear(self) -> None:
        self._queue.clear()


class IndexBuilder:
    """Drives ``index_batch`` through a scheduler until the index is done.

    Cancellation only stops further scheduling; the index itself holds no
    external resources and is simply discarded by its owner.
    """

    def __init__(
        self,
        index: CorpusSearchIndex,
        scheduler: BackgroundScheduler,
        batch_size: int = 3,
        on_progress: Optional[Callable[[IndexProgress], None]] = None,
    ):
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1")
        self.index = index
        self.scheduler = scheduler
        self.batch_size = batch_size
        self.on_progress = on_progress
        self._cancelled = False
        self._started = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def start(self) -> None:
        if self._started:
            return
        self._started = True
        self.scheduler.schedule(self._step)

    def cancel(self) -> None:
        self._cancelled = True

    def _step(self) -> None:
        if self._cancelled:
            logger.debug("Index build cancelled")
            return
        more = self.index.index_batch(self.batch_size)
        if self.on_progress is not None:
            self.on_progress(self.index.progress)
        if more and not self._cancelled:
            self.scheduler.schedule(self._step)
