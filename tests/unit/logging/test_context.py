"""Unit tests for logging context module."""

import logging
import threading
from pathlib import Path

from convertbot.logging.context import (
    SessionContextFilter,
    get_session_context,
    session_context,
)


class TestSessionContext:
    """Tests for session_context() and get_session_context()."""

    def test_default_context_is_none(self) -> None:
        assert get_session_context() == (None, None)

    def test_sets_and_restores(self) -> None:
        with session_context("a1b2c3d4", Path("/videos/clip.mov")):
            assert get_session_context() == ("a1b2c3d4", "/videos/clip.mov")
        assert get_session_context() == (None, None)

    def test_restored_after_exception(self) -> None:
        try:
            with session_context("a1b2c3d4"):
                raise RuntimeError("boom")
        except RuntimeError:
            pass
        assert get_session_context() == (None, None)

    def test_nested(self) -> None:
        with session_context("outer", "/a.mov"):
            with session_context("inner"):
                assert get_session_context() == ("inner", None)
            assert get_session_context() == ("outer", "/a.mov")

    def test_threads_are_isolated(self) -> None:
        """A context set on one thread is not visible on another."""
        seen: list[tuple] = []

        with session_context("main-session"):
            thread = threading.Thread(
                target=lambda: seen.append(get_session_context())
            )
            thread.start()
            thread.join()

        assert seen == [(None, None)]


class TestSessionContextFilter:
    """Tests for SessionContextFilter."""

    def _record(self) -> logging.LogRecord:
        return logging.LogRecord("test", logging.INFO, __file__, 1, "msg", (), None)

    def test_injects_fields(self) -> None:
        record = self._record()
        with session_context("a1b2c3d4", "/videos/clip.mov"):
            assert SessionContextFilter().filter(record) is True

        assert record.session_id == "a1b2c3d4"
        assert record.source_path == "/videos/clip.mov"
        assert record.session_tag == "[a1b2c3d4] "

    def test_empty_tag_outside_session(self) -> None:
        record = self._record()
        SessionContextFilter().filter(record)
        assert record.session_id is None
        assert record.session_tag == ""
