"""Delay queue driving timed cache evictions.

A single min-heap of due times is drained by one background thread instead
of starting an OS timer per entry. The queue can also be drained manually
with ``run_pending``, which is how tests advance a fake clock.
"""

import heapq
import itertools
import threading
import time
from typing import Callable, List, Optional, Tuple
import logging

logger = logging.getLogger(__name__)


def monotonic_ms() -> float:
    """Default scheduler clock in milliseconds."""
    return time.monotonic() * 1000.0


class EvictionScheduler:
    """Runs callbacks once their due time (in clock milliseconds) has passed.

    Attributes:
        clock: Callable returning the current time in milliseconds
    """

    def __init__(self, clock: Optional[Callable[[], float]] = None):
        """Initialize scheduler.

        Args:
            clock: Millisecond clock (monotonic wall clock if None)
        """
        self.clock = clock or monotonic_ms

        # Heap of (due_ms, sequence, callback); sequence keeps ordering stable
        self._queue: List[Tuple[float, int, Callable[[], None]]] = []
        self._counter = itertools.count()
        self._condition = threading.Condition()
        self._thread: Optional[threading.Thread] = None
        self._running = False

    def schedule(self, due_ms: float, callback: Callable[[], None]) -> int:
        """Queue a callback to run at ``due_ms``.

        Returns:
            Sequence number identifying the scheduled callback
        """
        with self._condition:
            seq = next(self._counter)
            heapq.heappush(self._queue, (due_ms, seq, callback))
            # Wake the loop in case this is now the earliest deadline
            self._condition.notify()
        return seq

    def cancel_all(self) -> int:
        """Drop every pending callback.

        Returns:
            Number of callbacks cancelled
        """
        with self._condition:
            cancelled = len(self._queue)
            self._queue.clear()
            self._condition.notify()
        if cancelled:
            logger.debug(f"Cancelled {cancelled} pending evictions")
        return cancelled

    @property
    def pending(self) -> int:
        """Number of callbacks still waiting to run."""
        with self._condition:
            return len(self._queue)

    def next_due(self) -> Optional[float]:
        """Due time of the earliest pending callback, if any."""
        with self._condition:
            return self._queue[0][0] if self._queue else None

    def _pop_due(self, now_ms: float) -> List[Callable[[], None]]:
        due = []
        with self._condition:
            while self._queue and self._queue[0][0] <= now_ms:
                _, _, callback = heapq.heappop(self._queue)
                due.append(callback)
        return due

    def run_pending(self, now_ms: Optional[float] = None) -> int:
        """Run every callback due at or before ``now_ms``.

        Callbacks run outside the scheduler lock. A failing callback is
        logged and does not prevent the others from running.

        Args:
            now_ms: Reference time (scheduler clock if None)

        Returns:
            Number of callbacks run
        """
        if now_ms is None:
            now_ms = self.clock()

        due = self._pop_due(now_ms)
        for callback in due:
            try:
                callback()
            except Exception:
                logger.exception("Scheduled eviction failed")
        return len(due)

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """Start the background loop (no-op if already running)."""
        with self._condition:
            if self.is_running:
                return
            self._running = True
            self._thread = threading.Thread(
                target=self._loop, name="eviction-scheduler", daemon=True
            )
            self._thread.start()
        logger.info("Eviction scheduler started")

    def stop(self, timeout: Optional[float] = 1.0) -> None:
        """Stop the background loop. Pending callbacks stay queued."""
        with self._condition:
            if self._thread is None:
                return
            self._running = False
            self._condition.notify_all()
            thread = self._thread
            self._thread = None
        if thread is not threading.current_thread():
            thread.join(timeout)
        logger.info("Eviction scheduler stopped")

    def _loop(self) -> None:
        while True:
            with self._condition:
                if not self._running:
                    return
                wait_s = None
                if self._queue:
                    wait_s = max(0.0, (self._queue[0][0] - self.clock()) / 1000.0)
                if wait_s is None or wait_s > 0:
                    self._condition.wait(wait_s)
                    continue
            self.run_pending()

    def __repr__(self) -> str:
        return f"EvictionScheduler(pending={self.pending}, running={self.is_running})"
