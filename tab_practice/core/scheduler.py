"""Deferred calls drained from the host's main loop."""

import heapq
import itertools
import time
from typing import Callable, List, Tuple

from ..logger import get_logger
from .interfaces import IScheduler

logger = get_logger(__name__)


class DeferredScheduler(IScheduler):
    """Queue of callbacks that become due after a delay.

    Nothing runs on its own: the owner calls process_pending() from its main
    loop, so every callback runs on the same thread as the event handlers.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        """Initialize the scheduler.

        Args:
            clock: Monotonic time source in seconds, injectable for tests
        """
        self._clock = clock
        self._pending: List[Tuple[float, int, Callable[[], None]]] = []
        self._counter = itertools.count()

    def call_later(self, delay: float, callback: Callable[[], None]) -> None:
        due = self._clock() + max(0.0, delay)
        heapq.heappush(self._pending, (due, next(self._counter), callback))
        logger.debug(f"Deferred call scheduled in {delay:.3f}s")

    def pending_count(self) -> int:
        return len(self._pending)

    def process_pending(self) -> int:
        """Run every callback that is due. Should be called from the main loop.

        Returns:
            Number of callbacks run
        """
        now = self._clock()
        ran = 0
        while self._pending and self._pending[0][0] <= now:
            _, _, callback = heapq.heappop(self._pending)
            try:
                callback()
            except Exception as e:
                logger.error(f"Error in deferred call: {e}")
            ran += 1
        return ran

    def run_until_idle(self, sleep: Callable[[float], None] = time.sleep) -> None:
        """Block until every queued callback has run."""
        while self._pending:
            wait = self._pending[0][0] - self._clock()
            if wait > 0:
                sleep(wait)
            self.process_pending()
