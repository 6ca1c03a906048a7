# plant/scheduler.py
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Protocol

logger = logging.getLogger(__name__)

Callback = Callable[[], None]


class ScheduledHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    """What the core needs from a clock driver. The core itself owns no timer."""

    def schedule_periodic(self, interval_ms: int, fn: Callback) -> ScheduledHandle: ...


# ======================================================
# Manual (virtual time, tests and step-by-step UIs)
# ======================================================
@dataclass
class _ManualJob:
    interval_ms: int
    fn: Callback
    next_due_ms: int
    cancelled: bool = False

    def cancel(self) -> None:
        self.cancelled = True


@dataclass
class ManualScheduler:
    now_ms: int = 0
    jobs: List[_ManualJob] = field(default_factory=list)

    def schedule_periodic(self, interval_ms: int, fn: Callback) -> _ManualJob:
        if interval_ms <= 0:
            raise ValueError("interval_ms must be positive")
        job = _ManualJob(interval_ms=int(interval_ms), fn=fn, next_due_ms=self.now_ms + int(interval_ms))
        self.jobs.append(job)
        return job

    def advance(self, ms: int) -> int:
        """Move virtual time forward, firing due callbacks in time order. Returns calls made."""
        target = self.now_ms + int(ms)
        calls = 0

        while True:
            live = [j for j in self.jobs if not j.cancelled and j.next_due_ms <= target]
            if not live:
                break
            job = min(live, key=lambda j: j.next_due_ms)
            self.now_ms = job.next_due_ms
            job.next_due_ms += job.interval_ms
            job.fn()
            calls += 1

        self.now_ms = target
        self.jobs = [j for j in self.jobs if not j.cancelled]
        return calls


# ======================================================
# asyncio (one event loop = one execution context)
# ======================================================
class AsyncioScheduler:
    """
    Periodic callbacks as asyncio tasks. Must be used from inside a running loop.
    A callback that raises is logged and the loop keeps its period.
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop
        self._tasks: List[asyncio.Task] = []

    def schedule_periodic(self, interval_ms: int, fn: Callback) -> asyncio.Task:
        if interval_ms <= 0:
            raise ValueError("interval_ms must be positive")
        loop = self._loop or asyncio.get_running_loop()
        task = loop.create_task(self._periodic(interval_ms / 1000.0, fn))
        self._tasks.append(task)
        return task

    async def _periodic(self, interval_s: float, fn: Callback) -> None:
        while True:
            await asyncio.sleep(interval_s)
            try:
                fn()
            except Exception:
                logger.exception("periodic callback %r failed", fn)

    def cancel_all(self) -> None:
        for t in self._tasks:
            t.cancel()
        self._tasks.clear()

    async def aclose(self) -> None:
        tasks = list(self._tasks)
        self.cancel_all()
        await asyncio.gather(*tasks, return_exceptions=True)
