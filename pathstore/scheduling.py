"""Debounced execution of a callback."""

import logging
import threading
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)


class Debouncer:
    """Run a callback once a burst of requests has gone quiet.

    Each `schedule()` replaces any pending run. A zero delay runs the callback
    synchronously in the caller. Delayed runs happen on a `threading.Timer`;
    an exception raised there is logged at ERROR and then reaches
    `threading.excepthook`, not the code that scheduled the run.

    Example:
        debouncer = Debouncer(store.save)
        debouncer.schedule(100)
        debouncer.schedule(100)  # replaces the first request
        debouncer.flush()        # run now instead of waiting
    """

    def __init__(self, callback: Callable[[], Any]):
        self._callback = callback
        self._timer: Optional[threading.Timer] = None
        self._lock = threading.Lock()

    @property
    def pending(self) -> bool:
        """Whether a delayed run is waiting."""
        return self._timer is not None

    def schedule(self, delay: float) -> None:
        """Request a run after `delay` milliseconds.

        Args:
            delay: Milliseconds to wait; 0 runs immediately
        """
        self.cancel()
        if not delay:
            self._callback()
            return

        with self._lock:
            timer = threading.Timer(delay / 1000.0, self._fire)
            timer.daemon = True
            self._timer = timer
            timer.start()
        logger.debug("Scheduled run in %sms", delay)

    def cancel(self) -> bool:
        """Drop the pending run, if any.

        Returns:
            True if a pending run was cancelled
        """
        with self._lock:
            timer, self._timer = self._timer, None
        if timer is None:
            return False
        timer.cancel()
        return True

    def flush(self) -> bool:
        """Run the pending callback now.

        Returns:
            True if a run was pending and has now happened
        """
        if not self.cancel():
            return False
        self._callback()
        return True

    def _fire(self) -> None:
        with self._lock:
            if self._timer is not threading.current_thread():
                # Superseded or cancelled after the timer had started
                return
            self._timer = None
        try:
            self._callback()
        except Exception:
            logger.exception("Delayed run of %r failed", self._callback)
            raise
