"""One-second countdown with a single expiry callback."""

from __future__ import annotations

import logging
import time
from typing import Callable

logger = logging.getLogger(__name__)


class Countdown:
    """
    Counts whole seconds down to zero and fires on_expire exactly once.

    The countdown does not schedule itself. Callers either call tick() once
    per second, or call poll() whenever convenient and let the countdown
    catch up against its clock.
    """

    def __init__(
        self,
        seconds: int,
        on_expire: Callable[[], None] | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if seconds < 0:
            raise ValueError("Countdown length cannot be negative")
        self._total = seconds
        self._remaining = seconds
        self._on_expire = on_expire
        self._clock = clock
        self._started_at: float | None = None
        self._ticks_applied = 0
        self._running = False
        self._expired = False

    @property
    def total(self) -> int:
        return self._total

    @property
    def remaining(self) -> int:
        return self._remaining

    @property
    def elapsed(self) -> int:
        return self._total - self._remaining

    @property
    def running(self) -> bool:
        return self._running

    @property
    def expired(self) -> bool:
        return self._expired

    def start(self) -> None:
        """Start counting. A zero-length countdown expires immediately."""
        if self._running or self._expired:
            return
        self._running = True
        self._started_at = self._clock()
        self._ticks_applied = 0
        if self._remaining == 0:
            self._expire()

    def stop(self) -> None:
        """Stop without firing the expiry callback."""
        self._running = False

    def tick(self) -> None:
        """Advance by one second."""
        if not self._running:
            return
        self._remaining = max(0, self._remaining - 1)
        self._ticks_applied += 1
        if self._remaining == 0:
            self._expire()

    def poll(self) -> int:
        """Apply every whole second that passed on the clock since start."""
        if self._running and self._started_at is not None:
            due = int(self._clock() - self._started_at) - self._ticks_applied
            for _ in range(due):
                if not self._running:
                    break
                self.tick()
        return self._remaining

    def _expire(self) -> None:
        self._running = False
        if self._expired:
            return
        self._expired = True
        logger.info("Countdown of %ss expired", self._total)
        if self._on_expire is not None:
            self._on_expire()
