"""Single-slot cancellable timers on top of an asyncio-style ``call_later``."""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional, Protocol

logger = logging.getLogger(__name__)


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    """Anything with the event loop's ``call_later`` signature."""

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> TimerHandle: ...


class SlotTimer:
    """Holds at most one pending callback; arming again cancels the previous one."""

    def __init__(self, scheduler: Scheduler, name: str = "timer") -> None:
        self._scheduler = scheduler
        self._name = name
        self._handle: Optional[TimerHandle] = None
        self._generation = 0

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def arm(self, delay_ms: float, callback: Callable[[], None]) -> None:
        self.cancel()
        self._generation += 1
        generation = self._generation

        def fire() -> None:
            # A handle cancelled after it was already dequeued may still run.
            if generation != self._generation:
                return
            self._handle = None
            callback()

        self._handle = self._scheduler.call_later(max(0.0, delay_ms) / 1000.0, fire)
        logger.debug("Armed %s for %.0f ms", self._name, delay_ms)

    def cancel(self) -> None:
        if self._handle is None:
            return
        self._handle.cancel()
        self._handle = None
        self._generation += 1
        logger.debug("Cancelled %s", self._name)


class RepeatingTimer:
    """Re-arms itself after every tick until stopped."""

    def __init__(self, scheduler: Scheduler, interval_ms: float, callback: Callable[[], None], name: str = "interval") -> None:
        self._slot = SlotTimer(scheduler, name)
        self._interval_ms = interval_ms
        self._callback = callback
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    def start(self) -> None:
        if self._running:
            return
        self._running = True
        self._slot.arm(self._interval_ms, self._tick)

    def stop(self) -> None:
        self._running = False
        self._slot.cancel()

    def _tick(self) -> None:
        if not self._running:
            return
        self._slot.arm(self._interval_ms, self._tick)
        self._callback()
