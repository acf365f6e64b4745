"""Native transcode backend.

Tries preset candidates in order against the source asset and runs the
first export session that supports the target file type. While the
export runs, a ProgressSampler reads the session's progress counter at a
fixed interval and forwards each sample.
"""

import logging
import threading

from convertbot.backends.interface import BackendJob, ProgressCallback
from convertbot.backends.sampler import DEFAULT_INTERVAL, ProgressSampler
from convertbot.domain.models import Cancelled, ConversionOutcome, Succeeded
from convertbot.exceptions import (
    ExportFailedError,
    InternalInconsistencyError,
    NoCompatiblePresetError,
)
from convertbot.export.interface import (
    ExportSession,
    ExportSessionFactory,
    ExportStatus,
)

logger = logging.getLogger(__name__)


class NativeTranscodeBackend:
    """Backend driving ExportSession objects."""

    supports_cancel = True

    def __init__(
        self,
        session_factory: ExportSessionFactory,
        progress_interval: float = DEFAULT_INTERVAL,
    ) -> None:
        self._factory = session_factory
        self._progress_interval = progress_interval
        self._lock = threading.Lock()
        self._active_job: BackendJob | None = None
        self._active: ExportSession | None = None

    def select_session(self, job: BackendJob) -> ExportSession:
        """Return the first candidate session supporting the target type.

        Raises:
            NoCompatiblePresetError: If no candidate is accepted.
            ConversionError: If the factory cannot open the source.
        """
        file_type = job.target.file_type
        for preset in job.candidates:
            session = self._factory.create(job.source, preset)
            if session is None:
                logger.debug("Preset %s could not be bound", preset.value)
                continue
            if file_type in session.supported_file_types:
                logger.info("Using preset %s for %s", preset.value, file_type.value)
                return session
            logger.debug(
                "Preset %s does not support %s", preset.value, file_type.value
            )
        raise NoCompatiblePresetError()

    def run(self, job: BackendJob, on_progress: ProgressCallback) -> ConversionOutcome:
        """Run the export and classify its terminal status.

        Raises:
            NoCompatiblePresetError: If no candidate preset applies.
            ExportFailedError: If the export session fails.
            InternalInconsistencyError: If the session finishes in a
                non-terminal status.
        """
        session = self.select_session(job)
        session.output_path = job.destination
        session.output_file_type = job.target.file_type

        done = threading.Event()
        sampler = ProgressSampler(
            self._progress_interval, lambda: on_progress(session.progress)
        )

        def on_complete() -> None:
            sampler.stop()
            done.set()

        with self._lock:
            self._active_job = job
            self._active = session

        try:
            sampler.start()
            session.export_async(on_complete)
            # cancel() sets the event before looking up the active session
            if job.cancel_event.is_set():
                session.cancel_export()
            done.wait()
        finally:
            sampler.stop()
            with self._lock:
                self._active_job = None
                self._active = None

        return self._classify(session)

    def _classify(self, session: ExportSession) -> ConversionOutcome:
        status = session.status
        if status is ExportStatus.COMPLETED:
            assert session.output_path is not None
            return Succeeded(session.output_path)
        if status is ExportStatus.FAILED:
            raise ExportFailedError(session.error)
        if status is ExportStatus.CANCELLED:
            return Cancelled()
        raise InternalInconsistencyError(
            f"Export finished with non-terminal status {status.value}"
        )

    def cancel(self, job: BackendJob) -> bool:
        """Cancel the job's export, or flag it so it stops once started."""
        job.cancel_event.set()
        with self._lock:
            session = self._active if self._active_job is job else None
        if session is not None:
            logger.info("Cancelling export")
            session.cancel_export()
        return True
