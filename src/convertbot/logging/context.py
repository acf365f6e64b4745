"""Session context for structured logging.

Provides context propagation for session worker threads using contextvars,
so every log record emitted while a conversion runs carries its session id
and source path.
"""

from __future__ import annotations

import contextvars
import logging
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Generator

_session_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "session_id", default=None
)
_source_path: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "source_path", default=None
)


def get_session_context() -> tuple[str | None, str | None]:
    """Get current session context.

    Returns:
        Tuple of (session_id, source_path), either may be None.
    """
    return _session_id.get(), _source_path.get()


@contextmanager
def session_context(
    session_id: str,
    source_path: Path | str | None = None,
) -> Generator[None, None, None]:
    """Context manager that tags log records with a session.

    Example:
        with session_context("a1b2c3d4", "/videos/clip.mov"):
            logger.info("Converting")  # Record carries session_id/source_path
    """
    id_token = _session_id.set(session_id)
    path_token = _source_path.set(str(source_path) if source_path else None)
    try:
        yield
    finally:
        _session_id.reset(id_token)
        _source_path.reset(path_token)


class SessionContextFilter(logging.Filter):
    """Logging filter that injects session context into log records.

    Adds session_id and source_path attributes for JSON output and a
    compact session_tag (``[a1b2c3d4] ``) for text output.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        """Inject session context into the record. Never filters."""
        session_id, source_path = get_session_context()

        record.session_id = session_id
        record.source_path = source_path
        record.session_tag = f"[{session_id}] " if session_id else ""

        return True
