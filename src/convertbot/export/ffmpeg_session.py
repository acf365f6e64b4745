"""FFmpeg-backed export sessions.

FFmpegExportSession runs one ffmpeg process for a preset bound to a probed
asset. Progress comes from ``-progress pipe:1`` and is stored for sampling;
the caller never receives pushes from here. The completion handler runs
once, on the session's worker thread.
"""

import logging
import subprocess  # nosec B404 - subprocess is required for ffmpeg execution
import threading
from collections import deque
from collections.abc import Callable
from pathlib import Path

from convertbot.domain.enums import OutputFileType, PresetName
from convertbot.exceptions import ExportFailedError, ToolMissingError
from convertbot.export.interface import ExportStatus
from convertbot.export.presets import codec_arguments, supported_file_types
from convertbot.export.probe import AssetInfo, AssetProbeError, probe_asset
from convertbot.tools.detection import INSTALL_HINTS, find_tool
from convertbot.tools.ffmpeg_progress import ProgressBlockReader

logger = logging.getLogger(__name__)

# Lines of ffmpeg stderr kept for failure messages
STDERR_TAIL_LINES = 20


class FFmpegExportSession:
    """Export session that transcodes with an ffmpeg subprocess."""

    def __init__(
        self,
        asset: AssetInfo,
        preset: PresetName,
        ffmpeg_path: Path,
    ) -> None:
        self.asset = asset
        self.preset = preset
        self.supported_file_types = supported_file_types(preset, asset)
        self.output_path: Path | None = None
        self.output_file_type: OutputFileType | None = None
        self._ffmpeg_path = ffmpeg_path
        self._lock = threading.Lock()
        self._progress = 0.0
        self._status = ExportStatus.WAITING
        self._error: str | None = None
        self._process: subprocess.Popen[str] | None = None
        self._cancel_requested = False
        self._thread: threading.Thread | None = None

    @property
    def progress(self) -> float:
        with self._lock:
            return self._progress

    @property
    def status(self) -> ExportStatus:
        with self._lock:
            return self._status

    @property
    def error(self) -> str | None:
        with self._lock:
            return self._error

    def build_command(self) -> list[str]:
        """Build the ffmpeg command line for the configured output.

        Raises:
            ValueError: If output_path or output_file_type is unset, or the
                file type is not supported by this session.
        """
        if self.output_path is None or self.output_file_type is None:
            raise ValueError("output_path and output_file_type must be set")
        if self.output_file_type not in self.supported_file_types:
            raise ValueError(
                f"{self.preset.value} cannot write {self.output_file_type.value}"
            )

        cmd = [
            str(self._ffmpeg_path),
            "-hide_banner",
            "-nostdin",
            "-n",
            "-i",
            str(self.asset.path),
            *codec_arguments(self.preset, self.output_file_type),
        ]
        if self.output_file_type.is_mpeg4_family:
            cmd.extend(["-movflags", "+faststart"])
        cmd.extend(
            [
                "-f",
                self.output_file_type.muxer,
                "-progress",
                "pipe:1",
                "-nostats",
                str(self.output_path),
            ]
        )
        return cmd

    def export_async(self, completion_handler: Callable[[], None]) -> None:
        """Start the export on a worker thread.

        Args:
            completion_handler: Called once after the status turns terminal.

        Raises:
            RuntimeError: If the session was already started.
            ValueError: If the output is not configured.
        """
        cmd = self.build_command()
        with self._lock:
            if self._status is not ExportStatus.WAITING:
                raise RuntimeError("Export session already started")
            self._status = ExportStatus.EXPORTING

        self._thread = threading.Thread(
            target=self._run,
            args=(cmd, completion_handler),
            name=f"export-{self.preset.value}",
            daemon=True,
        )
        self._thread.start()

    def cancel_export(self) -> None:
        with self._lock:
            self._cancel_requested = True
            process = self._process
        if process is not None and process.poll() is None:
            logger.debug("Terminating ffmpeg (pid %d)", process.pid)
            process.terminate()

    def _run(self, cmd: list[str], completion_handler: Callable[[], None]) -> None:
        assert self.output_path is not None
        existed_before = True
        try:
            existed_before = self.output_path.exists()
            self._export(cmd)
        except Exception as e:
            logger.exception("Export failed unexpectedly")
            self._kill_process()
            self._finish(ExportStatus.FAILED, f"Export failed: {e}")
        finally:
            if self.status is not ExportStatus.COMPLETED and not existed_before:
                self._remove_partial_output()
            completion_handler()

    def _export(self, cmd: list[str]) -> None:
        stderr_tail: deque[str] = deque(maxlen=STDERR_TAIL_LINES)

        with self._lock:
            cancelled_early = self._cancel_requested
        if cancelled_early:
            self._finish(ExportStatus.CANCELLED, None)
            return

        try:
            rc = self._execute(cmd, stderr_tail)
        except OSError as e:
            logger.error("Could not start ffmpeg: %s", e)
            self._finish(ExportStatus.FAILED, f"Could not start ffmpeg: {e}")
            return

        with self._lock:
            cancelled = self._cancel_requested
        if rc == 0 and not cancelled:
            with self._lock:
                self._progress = 1.0
            self._finish(ExportStatus.COMPLETED, None)
        elif cancelled:
            self._finish(ExportStatus.CANCELLED, None)
        else:
            detail = "".join(stderr_tail).strip()
            logger.warning("ffmpeg exited with code %d: %s", rc, detail)
            self._finish(ExportStatus.FAILED, detail or f"ffmpeg exited with code {rc}")

    def _execute(self, cmd: list[str], stderr_tail: deque[str]) -> int:
        logger.debug("Running: %s", " ".join(cmd))
        process = subprocess.Popen(  # nosec B603
            cmd,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            errors="replace",
        )
        with self._lock:
            self._process = process
            cancel_now = self._cancel_requested
        if cancel_now:
            process.terminate()

        def read_stderr() -> None:
            try:
                assert process.stderr is not None
                for line in process.stderr:
                    stderr_tail.append(line)
            except (ValueError, OSError) as e:
                logger.debug("Stderr reader stopped: %s", e)

        reader = threading.Thread(target=read_stderr, daemon=True)
        reader.start()

        duration = self.asset.duration
        progress_reader = ProgressBlockReader()
        assert process.stdout is not None
        for line in process.stdout:
            block = progress_reader.feed(line)
            if block is None:
                continue
            fraction = block.get_fraction(duration)
            with self._lock:
                if fraction > self._progress:
                    self._progress = min(fraction, 0.99)
            if block.finished:
                logger.debug(
                    "ffmpeg wrote %s bytes at speed %s", block.total_size, block.speed
                )

        rc = process.wait()
        reader.join(timeout=5.0)
        with self._lock:
            self._process = None
        return rc

    def _kill_process(self) -> None:
        with self._lock:
            process = self._process
            self._process = None
        if process is not None and process.poll() is None:
            logger.debug("Killing ffmpeg (pid %d)", process.pid)
            process.kill()
            process.wait()

    def _finish(self, status: ExportStatus, error: str | None) -> None:
        with self._lock:
            self._status = status
            self._error = error

    def _remove_partial_output(self) -> None:
        assert self.output_path is not None
        try:
            self.output_path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning("Could not remove partial output %s: %s", self.output_path, e)


class FFmpegExportSessionFactory:
    """Creates FFmpegExportSession objects for source files.

    The last probed asset is cached so trying several presets against the
    same source runs ffprobe once. The cache is keyed on path, mtime and
    size, so a source rewritten in place is probed again.
    """

    def __init__(
        self,
        ffmpeg_path: Path | None = None,
        ffprobe_path: Path | None = None,
        probe_timeout: int = 60,
    ) -> None:
        self._ffmpeg_path = ffmpeg_path
        self._ffprobe_path = ffprobe_path
        self._probe_timeout = probe_timeout
        self._cached: tuple[tuple[Path, int, int], AssetInfo] | None = None

    def _require(self, name: str, configured: Path | None) -> Path:
        path = find_tool(name, configured)
        if path is None:
            raise ToolMissingError(name, INSTALL_HINTS.get(name, ""))
        return path

    def _probe(self, source: Path) -> AssetInfo:
        try:
            st = source.stat()
            key: tuple[Path, int, int] | None = (source, st.st_mtime_ns, st.st_size)
        except OSError:
            key = None
        if key is not None and self._cached is not None and self._cached[0] == key:
            return self._cached[1]
        ffprobe = self._require("ffprobe", self._ffprobe_path)
        try:
            asset = probe_asset(ffprobe, source, timeout=self._probe_timeout)
        except AssetProbeError as e:
            raise ExportFailedError(str(e)) from e
        logger.debug(
            "Probed %s: video=%s audio=%s duration=%s",
            source.name,
            asset.video_codecs,
            asset.audio_codecs,
            asset.duration,
        )
        self._cached = (key, asset) if key is not None else None
        return asset

    def create(self, source: Path, preset: PresetName) -> FFmpegExportSession | None:
        """Create a session for source, or None if the preset cannot apply.

        Raises:
            ToolMissingError: If ffmpeg or ffprobe cannot be found.
            ExportFailedError: If the source cannot be probed.
        """
        ffmpeg = self._require("ffmpeg", self._ffmpeg_path)
        asset = self._probe(source)
        session = FFmpegExportSession(asset, preset, ffmpeg)
        if not session.supported_file_types:
            logger.debug("Preset %s has no output types for %s", preset.value, source.name)
            return None
        return session
