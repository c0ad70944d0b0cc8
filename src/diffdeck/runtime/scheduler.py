"""Scheduling seam between the core and the host event loop.

The scroll coordinator never sleeps or spawns threads; it asks a
``Scheduler`` to run callbacks later (indicator expiry) or on the next turn
of the loop (guard release). ``AsyncioScheduler`` backs real hosts such as
Textual, ``ManualScheduler`` drives a virtual clock for tests and for hosts
that poll timers themselves.
"""

from __future__ import annotations

import asyncio
import heapq
import itertools
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Protocol

Callback = Callable[[], None]


class TimerHandle(Protocol):
    """Cancellable reference to a scheduled callback."""

    def cancel(self) -> None: ...

    def cancelled(self) -> bool: ...


class Scheduler(Protocol):
    """What the core needs from a host event loop."""

    def call_later(self, delay_ms: int, callback: Callback) -> TimerHandle:
        """Run ``callback`` once after ``delay_ms`` milliseconds."""
        ...

    def call_soon(self, callback: Callback) -> TimerHandle:
        """Run ``callback`` on the next turn of the loop."""
        ...


class AsyncioScheduler:
    """Adapter over an asyncio event loop."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def call_later(self, delay_ms: int, callback: Callback) -> TimerHandle:
        return self.loop.call_later(max(delay_ms, 0) / 1000.0, callback)

    def call_soon(self, callback: Callback) -> TimerHandle:
        return self.loop.call_soon(callback)


@dataclass(order=True)
class ManualTimer:
    deadline: float
    sequence: int
    callback: Callback = field(compare=False)
    _cancelled: bool = field(default=False, compare=False)

    def cancel(self) -> None:
        self._cancelled = True

    def cancelled(self) -> bool:
        return self._cancelled


class ManualScheduler:
    """Deterministic scheduler driven by explicit ``advance`` calls."""

    def __init__(self) -> None:
        self.now_ms: float = 0.0
        self._timers: List[ManualTimer] = []
        self._soon: List[ManualTimer] = []
        self._counter = itertools.count()

    def call_later(self, delay_ms: int, callback: Callback) -> ManualTimer:
        timer = ManualTimer(
            deadline=self.now_ms + max(delay_ms, 0),
            sequence=next(self._counter),
            callback=callback,
        )
        heapq.heappush(self._timers, timer)
        return timer

    def call_soon(self, callback: Callback) -> ManualTimer:
        timer = ManualTimer(
            deadline=self.now_ms, sequence=next(self._counter), callback=callback
        )
        self._soon.append(timer)
        return timer

    @property
    def pending(self) -> int:
        live_timers = sum(1 for timer in self._timers if not timer.cancelled())
        live_soon = sum(1 for timer in self._soon if not timer.cancelled())
        return live_timers + live_soon

    def run_soon(self) -> int:
        """Run every callback queued for the next turn; return how many ran."""

        ran = 0
        while self._soon:
            batch, self._soon = self._soon, []
            for timer in batch:
                if not timer.cancelled():
                    timer.callback()
                    ran += 1
        return ran

    def advance(self, delay_ms: float) -> int:
        """Move the clock forward, draining next-turn work and due timers."""

        ran = self.run_soon()
        target = self.now_ms + delay_ms
        while self._timers and self._timers[0].deadline <= target:
            timer = heapq.heappop(self._timers)
            if timer.cancelled():
                continue
            self.now_ms = timer.deadline
            timer.callback()
            ran += 1
            ran += self.run_soon()
        self.now_ms = target
        return ran


__all__ = [
    "AsyncioScheduler",
    "Callback",
    "ManualScheduler",
    "ManualTimer",
    "Scheduler",
    "TimerHandle",
]
