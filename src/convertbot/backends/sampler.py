"""Periodic progress sampling.

ProgressSampler polls a value on its own daemon thread at a fixed
interval. One sampler belongs to one backend run and is stopped exactly
once, whichever way the run ends.
"""

import logging
import threading
from collections.abc import Callable

logger = logging.getLogger(__name__)

# Default sampling interval (seconds)
DEFAULT_INTERVAL = 0.1


class ProgressSampler:
    """Cancellable periodic task.

    Example:
        sampler = ProgressSampler(0.1, lambda: on_progress(session.progress))
        sampler.start()
        ...
        sampler.stop()
    """

    def __init__(
        self,
        interval: float = DEFAULT_INTERVAL,
        callback: Callable[[], None] | None = None,
    ) -> None:
        if interval <= 0:
            raise ValueError(f"interval must be positive, got {interval}")
        self._interval = interval
        self._callback = callback
        self._stop_event = threading.Event()
        self._lock = threading.Lock()
        self._thread: threading.Thread | None = None
        self._stopped = False

    @property
    def running(self) -> bool:
        """True between start() and stop()."""
        with self._lock:
            return self._thread is not None and not self._stopped

    def start(self) -> None:
        """Start ticking.

        Raises:
            RuntimeError: If the sampler was already started.
        """
        with self._lock:
            if self._thread is not None or self._stopped:
                raise RuntimeError("ProgressSampler can only be started once")
            self._thread = threading.Thread(
                target=self._loop, name="progress-sampler", daemon=True
            )
            self._thread.start()

    def stop(self) -> bool:
        """Stop ticking. Safe to call more than once and from the callback.

        Returns:
            True on the call that actually stopped the sampler.
        """
        with self._lock:
            if self._stopped:
                return False
            self._stopped = True
            thread = self._thread
        self._stop_event.set()
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=self._interval * 10 + 1.0)
        return True

    def _loop(self) -> None:
        while not self._stop_event.wait(self._interval):
            if self._callback is None:
                continue
            try:
                self._callback()
            except Exception as e:
                logger.warning("Progress callback error: %s", e)
