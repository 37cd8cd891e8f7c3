"""Background thread that keeps an attempt's countdown moving."""

from __future__ import annotations

import logging
import threading
from typing import Callable

from studysync.session.attempt import AttemptSession

logger = logging.getLogger(__name__)


class SessionTicker:
    """
    Polls a session's countdown once per interval on a daemon thread.

    Callers that touch the session while the ticker runs must hold the same
    lock, so a timer-triggered submit never interleaves with their changes.

    Args:
        session: The attempt whose countdown is polled
        lock: Lock shared with every other user of the session
        interval: Seconds between polls
        on_poll: Called under the lock after every poll
    """

    def __init__(
        self,
        session: AttemptSession,
        lock: threading.Lock | None = None,
        interval: float = 1.0,
        on_poll: Callable[[], None] | None = None,
    ) -> None:
        if interval <= 0:
            raise ValueError("Ticker interval must be positive")
        self.session = session
        self.lock = lock or threading.Lock()
        self.interval = interval
        self._on_poll = on_poll
        self._stopped = threading.Event()
        self._thread: threading.Thread | None = None

    def __enter__(self) -> "SessionTicker":
        self.start()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop()

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.running:
            return
        self._stopped.clear()
        self._thread = threading.Thread(
            target=self._run, name="studysync-countdown", daemon=True
        )
        self._thread.start()

    def stop(self) -> None:
        """Stop polling and wait for the thread to finish its current poll."""
        self._stopped.set()
        if self._thread is not None and self._thread is not threading.current_thread():
            self._thread.join(timeout=self.interval + 5)
        self._thread = None

    def _run(self) -> None:
        while not self._stopped.wait(self.interval):
            with self.lock:
                if self.session.closed or self.session.is_submitted:
                    break
                self.session.poll_timer()
                if self._on_poll is not None:
                    self._on_poll()
        logger.debug("Countdown ticker stopped")
