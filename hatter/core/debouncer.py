"""
Debouncer — Collapse bursts of editor events into one run

Cursor moves and keystrokes arrive faster than hats need repainting.
Each run() restarts the timer; only the last request in a burst executes.
Superseded requests are never started, so nothing is interrupted mid-flight.

Thread-safe. The callback runs on the timer thread, or on the caller's
thread when flush() is used.
"""

import logging
import threading
from typing import Callable, Optional


LOGGER = logging.getLogger("hatter.debouncer")


class Debouncer:
    """Run a callback once after events stop arriving for `delay` seconds."""

    def __init__(self, callback: Callable[[], None], delay: float = 0.05):
        if delay < 0:
            raise ValueError("delay must be >= 0")
        self._callback = callback
        self._delay = delay
        self._lock = threading.Lock()
        self._timer: Optional[threading.Timer] = None
        self._generation = 0
        self._disposed = False
        self.superseded = 0

    @property
    def pending(self) -> bool:
        with self._lock:
            return self._timer is not None

    def run(self) -> None:
        """Request a run, superseding any pending one."""
        with self._lock:
            if self._disposed:
                raise RuntimeError("Debouncer is disposed")
            if self._timer is not None:
                self._timer.cancel()
                self.superseded += 1
            self._generation += 1
            generation = self._generation
            timer = threading.Timer(self._delay, self._fire, args=(generation,))
            timer.daemon = True
            self._timer = timer
        timer.start()

    def flush(self) -> bool:
        """
        Run the pending request now, on the caller's thread.

        Returns:
            True if a request was pending and ran
        """
        with self._lock:
            if self._timer is None:
                return False
            self._timer.cancel()
            self._timer = None
            self._generation += 1
        self._callback()
        return True

    def dispose(self) -> None:
        """Cancel any pending request. Further run() calls fail."""
        with self._lock:
            self._disposed = True
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            self._generation += 1

    def _fire(self, generation: int) -> None:
        with self._lock:
            # A later run(), flush() or dispose() owns this slot now
            if generation != self._generation:
                return
            self._timer = None
        try:
            self._callback()
        except Exception:
            # Timer threads have no caller to propagate to
            LOGGER.exception("debounced_callback_failed")
