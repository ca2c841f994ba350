"""
JournalApp Client — Timers
============================

What:  The clock the autosave machinery runs on.
Why:   Debounce, retry backoff and the "Saved" indicator are all timers.
       Injecting the scheduler lets tests step through a 2-second debounce
       and a 1/2/4-second backoff instantly and deterministically.

Implementations:
    AsyncioScheduler  real event-loop timers; each callback runs as a task
    ManualScheduler   virtual clock advanced explicitly by tests
"""

import asyncio
import heapq
import itertools
import logging
from typing import Awaitable, Callable, List, Optional, Protocol, Set, Tuple

logger = logging.getLogger(__name__)

Callback = Callable[[], Awaitable[None]]


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    """Anything that can tell the time and run a coroutine function later."""

    def now(self) -> float: ...

    def call_later(self, delay: float, callback: Callback) -> TimerHandle: ...


# ══════════════════════════════════════════════════════════════════════════
# Event loop scheduler
# ══════════════════════════════════════════════════════════════════════════


class AsyncioScheduler:
    """Timers on the running asyncio loop."""

    def __init__(self) -> None:
        self._tasks: Set[asyncio.Task] = set()

    def now(self) -> float:
        return asyncio.get_running_loop().time()

    def call_later(self, delay: float, callback: Callback) -> asyncio.TimerHandle:
        loop = asyncio.get_running_loop()
        return loop.call_later(max(delay, 0.0), self._spawn, callback)

    def _spawn(self, callback: Callback) -> None:
        task = asyncio.get_running_loop().create_task(callback())
        # Keep a strong reference until the task finishes
        self._tasks.add(task)
        task.add_done_callback(self._finished)

    def _finished(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.error("Scheduled callback failed", exc_info=task.exception())


# ══════════════════════════════════════════════════════════════════════════
# Virtual clock scheduler
# ══════════════════════════════════════════════════════════════════════════


class ManualTimer:
    def __init__(self, when: float, callback: Callback):
        self.when = when
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """
    Deterministic scheduler for tests.

    Nothing runs until advance() is awaited. Callbacks run in due order and
    are awaited inline, so when advance() returns every save it triggered
    has completed. `delays` records every delay ever requested.

    Usage:
        scheduler = ManualScheduler()
        reconciler.edit("Hello")
        await scheduler.advance(2.0)   # debounce fires, save completes
    """

    def __init__(self, start: float = 0.0):
        self._now = start
        self._queue: List[Tuple[float, int, ManualTimer]] = []
        self._counter = itertools.count()
        self.delays: List[float] = []

    def now(self) -> float:
        return self._now

    def call_later(self, delay: float, callback: Callback) -> ManualTimer:
        self.delays.append(delay)
        timer = ManualTimer(self._now + max(delay, 0.0), callback)
        heapq.heappush(self._queue, (timer.when, next(self._counter), timer))
        return timer

    @property
    def pending(self) -> int:
        """Number of timers still waiting to fire."""
        return sum(1 for _, _, timer in self._queue if not timer.cancelled)

    def next_due(self) -> Optional[float]:
        live = [when for when, _, timer in self._queue if not timer.cancelled]
        return min(live) if live else None

    async def advance(self, seconds: float) -> None:
        """Move the clock forward, running every callback that falls due."""
        target = self._now + seconds
        while self._queue and self._queue[0][0] <= target:
            when, _, timer = heapq.heappop(self._queue)
            if timer.cancelled:
                continue
            self._now = max(self._now, when)
            await timer.callback()
        self._now = target

    async def run_all(self, limit: int = 100) -> None:
        """Fire pending timers one after another until none are left."""
        for _ in range(limit):
            due = self.next_due()
            if due is None:
                return
            await self.advance(due - self._now)
        raise RuntimeError(f"Timers still pending after {limit} rounds")
