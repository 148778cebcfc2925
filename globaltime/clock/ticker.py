# Copyright (c) 2025-2026 Luc Vincent. All Rights Reserved.
"""Background tick source that resamples the clock once per interval."""

import logging
import threading
import time
from datetime import datetime, timezone
from typing import Callable, Optional

from .model import NoTimezoneConfigured

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    """Get the current instant as an aware UTC datetime."""
    return datetime.now(timezone.utc)


class TickSource:
    """
    Calls a callback with the current instant at a fixed cadence.

    The callback runs on a daemon thread. With a one second interval the
    ticks are aligned to wall-clock second boundaries so the second hand
    moves in step with the real second.
    """

    def __init__(
        self,
        callback: Callable[[datetime], None],
        interval_seconds: float = 1.0,
        clock: Optional[Callable[[], datetime]] = None
    ):
        """
        Initialize the tick source.

        Args:
            callback: Called with an aware UTC datetime on every tick.
            interval_seconds: Seconds between ticks.
            clock: Function returning the current instant (for tests).
        """
        if interval_seconds <= 0:
            raise ValueError(f"Tick interval must be positive, got {interval_seconds}")

        self._callback = callback
        self._interval = interval_seconds
        self._clock = clock or utc_now
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._lock = threading.Lock()
        self._tick_count = 0

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def running(self) -> bool:
        return (
            self._thread is not None and
            self._thread.is_alive() and
            not self._stop_event.is_set()
        )

    @property
    def tick_count(self) -> int:
        with self._lock:
            return self._tick_count

    def start(self) -> None:
        """Start ticking in the background."""
        if self.running:
            return
        # Each thread gets its own stop event so a thread that is still
        # winding down from stop() can never be revived
        self._stop_event = threading.Event()
        self._thread = threading.Thread(
            target=self._run, args=(self._stop_event,), name="clock-tick", daemon=True
        )
        self._thread.start()
        logger.debug(f"Tick source started ({self._interval}s interval)")

    def stop(self, timeout: float = 2.0) -> None:
        """Stop ticking and wait for the thread to exit."""
        self._stop_event.set()
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout)
            if thread.is_alive():
                logger.warning("Tick thread did not stop in time")
                return
        self._thread = None

    def fire(self) -> None:
        """Tick once, synchronously, on the calling thread."""
        try:
            self._callback(self._clock())
        except NoTimezoneConfigured as e:
            logger.warning(f"Skipping tick: {e}")
        except Exception as e:
            logger.warning(f"Tick callback failed: {e}")
        with self._lock:
            self._tick_count += 1

    def _seconds_until_next_tick(self) -> float:
        if self._interval != 1.0:
            return self._interval
        # Land just after the next whole second
        fraction = time.time() % 1.0
        return 1.0 - fraction + 0.005

    def _run(self, stop_event: threading.Event) -> None:
        while not stop_event.is_set():
            self.fire()
            stop_event.wait(self._seconds_until_next_tick())
        logger.debug("Tick source stopped")
