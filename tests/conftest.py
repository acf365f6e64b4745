"""Shared test fixtures for ConvertBot."""

import os
import shutil
import tempfile
import threading
import time
from collections.abc import Callable
from pathlib import Path
from unittest.mock import patch

import pytest

from convertbot.domain.enums import OutputFileType, PresetName
from convertbot.export.interface import ExportStatus


class FakeExportSession:
    """In-memory ExportSession.

    Walks through progress_steps on a thread, then finishes with
    final_status. With hold=True it waits for release() (or a cancel)
    before finishing.
    """

    def __init__(
        self,
        preset: PresetName,
        supported_file_types: set[OutputFileType],
        final_status: ExportStatus = ExportStatus.COMPLETED,
        error: str | None = None,
        progress_steps: tuple[float, ...] = (0.25, 0.5, 0.75),
        step_delay: float = 0.02,
        hold: bool = False,
    ) -> None:
        self.preset = preset
        self.supported_file_types = frozenset(supported_file_types)
        self.output_path: Path | None = None
        self.output_file_type: OutputFileType | None = None
        self.progress = 0.0
        self.status = ExportStatus.WAITING
        self.error: str | None = None
        self._final_status = final_status
        self._final_error = error
        self._steps = progress_steps
        self._delay = step_delay
        self._hold = hold
        self.started = threading.Event()
        self._release = threading.Event()
        self._cancelled = threading.Event()
        self.completion_calls = 0

    def release(self) -> None:
        self._release.set()

    def export_async(self, completion_handler: Callable[[], None]) -> None:
        self.status = ExportStatus.EXPORTING
        threading.Thread(
            target=self._run, args=(completion_handler,), daemon=True
        ).start()

    def cancel_export(self) -> None:
        self._cancelled.set()
        self._release.set()

    def _run(self, completion_handler: Callable[[], None]) -> None:
        self.started.set()
        for step in self._steps:
            if self._cancelled.is_set():
                break
            time.sleep(self._delay)
            self.progress = step
        if self._hold:
            self._release.wait(timeout=10)
        if self._cancelled.is_set():
            self.status = ExportStatus.CANCELLED
        else:
            if self._final_status is ExportStatus.COMPLETED:
                self.progress = 1.0
            self.status = self._final_status
            self.error = self._final_error
        self.completion_calls += 1
        completion_handler()


class FakeSessionFactory:
    """ExportSessionFactory returning prepared sessions per preset."""

    def __init__(self, sessions: dict[PresetName, FakeExportSession | None]):
        self.sessions = sessions
        self.created: list[PresetName] = []

    def create(self, source: Path, preset: PresetName) -> FakeExportSession | None:
        self.created.append(preset)
        return self.sessions.get(preset)


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test isolation."""
    dir_path = tempfile.mkdtemp()
    yield Path(dir_path)
    shutil.rmtree(dir_path, ignore_errors=True)


@pytest.fixture
def make_session() -> Callable[..., FakeExportSession]:
    """Return a builder for FakeExportSession objects."""
    return FakeExportSession


@pytest.fixture
def make_factory() -> Callable[..., FakeSessionFactory]:
    """Return a builder for FakeSessionFactory objects."""
    return FakeSessionFactory


@pytest.fixture
def media_dir(temp_dir: Path) -> Path:
    """Directory with one small placeholder file per source kind."""
    directory = temp_dir / "media"
    directory.mkdir()
    for name in ("clip.mov", "clip.avi", "song.wav", "notes.txt"):
        (directory / name).write_bytes(b"\x00" * 16)
    return directory


@pytest.fixture(autouse=True)
def convertbot_data_dir(temp_dir: Path):
    """Point CONVERTBOT_DATA_DIR at an empty directory for every test.

    Keeps a real ~/.convertbot/config.toml from leaking into tests.
    """
    data_dir = temp_dir / ".convertbot"
    data_dir.mkdir(parents=True, exist_ok=True)

    env = {"CONVERTBOT_DATA_DIR": str(data_dir)}
    with patch.dict(os.environ, env):
        for var in (
            "CONVERTBOT_CONFIG_PATH",
            "CONVERTBOT_FFMPEG_PATH",
            "CONVERTBOT_FFPROBE_PATH",
            "CONVERTBOT_PROGRESS_INTERVAL_MS",
            "CONVERTBOT_PROBE_TIMEOUT",
            "CONVERTBOT_LOG_LEVEL",
        ):
            os.environ.pop(var, None)
        yield data_dir
