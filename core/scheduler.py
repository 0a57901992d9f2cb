"""
Core Module - Scheduler.

============================================================
RESPONSIBILITY
============================================================
Provides cancellable delayed callbacks.

- One abstraction for "run this after N seconds"
- Every scheduled callback returns a handle that can be cancelled
- A cancelled callback never runs

============================================================
IMPLEMENTATIONS
============================================================
- AsyncioScheduler: production, backed by the running event loop
- ManualScheduler: deterministic, time only moves on advance()

============================================================
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, List, Optional, Tuple
import asyncio
import heapq
import logging

from .clock import MockClock
from .exceptions import SchedulerError


logger = logging.getLogger(__name__)


# ============================================================
# SCHEDULER PROTOCOL
# ============================================================

class ScheduledHandle(ABC):
    """Handle to a pending delayed callback."""

    @abstractmethod
    def cancel(self) -> None:
        """Prevent the callback from running. Idempotent."""
        pass

    @abstractmethod
    def cancelled(self) -> bool:
        pass


class SchedulerProtocol(ABC):
    """Abstract interface for delayed callbacks."""

    @abstractmethod
    def call_later(
        self,
        delay_seconds: float,
        callback: Callable[..., Any],
        *args: Any,
    ) -> ScheduledHandle:
        """
        Schedule callback(*args) after delay_seconds.

        Raises:
            SchedulerError: If the callback cannot be scheduled
        """
        pass


# ============================================================
# ASYNCIO SCHEDULER (PRODUCTION)
# ============================================================

class _TimerHandleAdapter(ScheduledHandle):
    """Wraps asyncio.TimerHandle."""

    def __init__(self, handle: asyncio.TimerHandle):
        self._handle = handle

    def cancel(self) -> None:
        self._handle.cancel()

    def cancelled(self) -> bool:
        return self._handle.cancelled()


class AsyncioScheduler(SchedulerProtocol):
    """
    Scheduler backed by an asyncio event loop.

    When no loop is given, the loop running at call time is used, so
    call_later must then be invoked from inside a coroutine or callback.
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop

    def call_later(
        self,
        delay_seconds: float,
        callback: Callable[..., Any],
        *args: Any,
    ) -> ScheduledHandle:
        if delay_seconds < 0:
            raise SchedulerError(
                f"Negative delay: {delay_seconds}",
                context={"delay_seconds": delay_seconds},
            )

        loop = self._loop
        if loop is None:
            try:
                loop = asyncio.get_running_loop()
            except RuntimeError as e:
                raise SchedulerError(
                    "No running event loop to schedule on",
                    cause=e,
                ) from e

        return _TimerHandleAdapter(loop.call_later(delay_seconds, callback, *args))


# ============================================================
# MANUAL SCHEDULER (TESTING)
# ============================================================

class ManualTimer(ScheduledHandle):
    """Pending callback owned by a ManualScheduler."""

    def __init__(
        self,
        when: float,
        callback: Callable[..., Any],
        args: Tuple[Any, ...],
    ):
        self.when = when
        self._callback = callback
        self._args = args
        self._cancelled = False
        self._fired = False

    def cancel(self) -> None:
        self._cancelled = True

    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def fired(self) -> bool:
        return self._fired

    def _run(self) -> None:
        self._fired = True
        self._callback(*self._args)


class ManualScheduler(SchedulerProtocol):
    """
    Deterministic scheduler for tests.

    Time starts at 0.0 and only moves through advance(). Due callbacks
    run in (due time, scheduling order). If a MockClock is attached it is
    advanced in step, so timestamps taken inside callbacks match the
    scheduled time.
    """

    def __init__(self, clock: Optional[MockClock] = None):
        self._clock = clock
        self._now = 0.0
        self._seq = 0
        self._queue: List[Tuple[float, int, ManualTimer]] = []

    @property
    def time(self) -> float:
        """Seconds elapsed since creation."""
        return self._now

    @property
    def pending_count(self) -> int:
        """Number of callbacks that are neither cancelled nor fired."""
        return sum(1 for _, _, timer in self._queue if not timer.cancelled())

    def call_later(
        self,
        delay_seconds: float,
        callback: Callable[..., Any],
        *args: Any,
    ) -> ManualTimer:
        if delay_seconds < 0:
            raise SchedulerError(
                f"Negative delay: {delay_seconds}",
                context={"delay_seconds": delay_seconds},
            )

        timer = ManualTimer(self._now + delay_seconds, callback, args)
        heapq.heappush(self._queue, (timer.when, self._seq, timer))
        self._seq += 1
        return timer

    def advance(self, seconds: float) -> int:
        """
        Move time forward and run every callback that falls due.

        Callbacks scheduled by running callbacks are honored if they fall
        due within the same window.

        Returns:
            Number of callbacks run
        """
        if seconds < 0:
            raise SchedulerError(f"Cannot move time backwards: {seconds}")

        target = self._now + seconds
        fired = 0

        while self._queue and self._queue[0][0] <= target:
            when, _, timer = heapq.heappop(self._queue)
            if timer.cancelled():
                continue
            self._move_to(when)
            timer._run()
            fired += 1

        self._move_to(target)
        logger.debug(f"ManualScheduler advanced to t={self._now:.3f}s, fired={fired}")
        return fired

    def _move_to(self, when: float) -> None:
        step = when - self._now
        if step <= 0:
            return
        self._now = when
        if self._clock is not None:
            self._clock.advance(step)


__all__ = [
    "ScheduledHandle",
    "SchedulerProtocol",
    "AsyncioScheduler",
    "ManualTimer",
    "ManualScheduler",
]
