"""Event delivery contexts.

Session events are produced on worker threads. An EventContext decides
where listeners run: inline on the worker, on a thread that drains a
queue (a CLI main loop), or on an asyncio event loop.
"""

import asyncio
import logging
import queue
import threading
from collections.abc import Callable
from typing import Protocol

from convertbot.domain.models import SessionEvent, is_terminal

logger = logging.getLogger(__name__)

Listener = Callable[[SessionEvent], None]


class EventContext(Protocol):
    """Where listener calls execute."""

    def deliver(self, listener: Listener, event: SessionEvent) -> None:
        """Arrange for listener(event) to run in this context."""
        ...


def _invoke(listener: Listener, event: SessionEvent) -> None:
    try:
        listener(event)
    except Exception as e:
        logger.warning("Event listener raised for %s: %s", type(event).__name__, e)


class InlineEventContext:
    """Calls listeners directly on the producing thread."""

    def deliver(self, listener: Listener, event: SessionEvent) -> None:
        _invoke(listener, event)


class QueueEventContext:
    """Queues listener calls for a consumer thread to run.

    The consumer calls pump() (or drain()) from the thread that should
    observe events.
    """

    def __init__(self) -> None:
        self._queue: queue.Queue[tuple[Listener, SessionEvent]] = queue.Queue()

    def deliver(self, listener: Listener, event: SessionEvent) -> None:
        self._queue.put((listener, event))

    def pump(self, timeout: float | None = None) -> SessionEvent | None:
        """Run one queued listener call.

        Args:
            timeout: Seconds to wait for an event; None blocks.

        Returns:
            The delivered event, or None if the wait timed out.
        """
        try:
            listener, event = self._queue.get(timeout=timeout)
        except queue.Empty:
            return None
        _invoke(listener, event)
        return event

    def drain(self) -> int:
        """Run every queued listener call without waiting.

        Returns:
            Number of events delivered.
        """
        count = 0
        while True:
            try:
                listener, event = self._queue.get_nowait()
            except queue.Empty:
                return count
            _invoke(listener, event)
            count += 1

    def run_until_terminal(self, poll_interval: float = 0.1) -> SessionEvent:
        """Pump events until a terminal event has been delivered."""
        while True:
            event = self.pump(timeout=poll_interval)
            if event is not None and is_terminal(event):
                return event


class AsyncioEventContext:
    """Schedules listener calls on an asyncio event loop."""

    def __init__(self, loop: asyncio.AbstractEventLoop) -> None:
        self._loop = loop

    def deliver(self, listener: Listener, event: SessionEvent) -> None:
        self._loop.call_soon_threadsafe(_invoke, listener, event)


class EventStream:
    """Ordered event stream for one session.

    Once a terminal event has been emitted, further emits are dropped.
    """

    def __init__(self, listener: Listener, context: EventContext) -> None:
        self._listener = listener
        self._context = context
        self._lock = threading.RLock()
        self._closed = False

    @property
    def closed(self) -> bool:
        with self._lock:
            return self._closed

    def emit(self, event: SessionEvent) -> bool:
        """Deliver an event unless the stream is closed.

        Returns:
            True if the event was handed to the context.
        """
        with self._lock:
            if self._closed:
                logger.debug("Dropping %s after terminal event", type(event).__name__)
                return False
            if is_terminal(event):
                self._closed = True
            self._context.deliver(self._listener, event)
            return True
