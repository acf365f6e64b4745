"""Conversion orchestrator.

Owns the session state machine:

    Idle -> Classifying -> BackendSelected -> InProgress -> terminal

One session may be active per orchestrator. submit() returns a handle at
once and the session runs on a worker thread; its listener receives
status lines, non-decreasing progress fractions and exactly one terminal
event through the configured EventContext.
"""

from __future__ import annotations

import logging
import threading
import uuid
from dataclasses import dataclass, field
from pathlib import Path

from convertbot.backends.external import ExternalToolBackend
from convertbot.backends.interface import BackendJob, TranscodeBackend
from convertbot.backends.native import NativeTranscodeBackend
from convertbot.classifier import FormatClassifier, is_legacy_container
from convertbot.completion import CompletionHooks
from convertbot.config.models import ConvertBotConfig
from convertbot.destination import DestinationResolver
from convertbot.dispatch import (
    EventContext,
    EventStream,
    InlineEventContext,
    Listener,
)
from convertbot.domain.enums import (
    BackendChoice,
    MediaKind,
    PresetName,
    SessionPhase,
    TargetFormat,
)
from convertbot.domain.models import (
    Cancelled,
    ConversionOutcome,
    ConversionRequest,
    Failed,
    ProgressEvent,
    StatusEvent,
    Succeeded,
)
from convertbot.exceptions import (
    BusyError,
    ConversionError,
    InternalInconsistencyError,
    InvalidRequestError,
)
from convertbot.export.ffmpeg_session import FFmpegExportSessionFactory
from convertbot.logging.context import session_context
from convertbot.presets import PresetSelector

logger = logging.getLogger(__name__)


@dataclass
class ConversionSession:
    """Mutable state of one conversion, owned by the orchestrator."""

    request: ConversionRequest
    session_id: str = field(default_factory=lambda: uuid.uuid4().hex[:8])
    phase: SessionPhase = SessionPhase.IDLE
    progress: float = 0.0
    kind: MediaKind | None = None
    backend_choice: BackendChoice | None = None
    destination: Path | None = None
    backend: TranscodeBackend | None = None
    job: BackendJob | None = None
    outcome: ConversionOutcome | None = None


class SessionHandle:
    """Caller-side view of a submitted session."""

    def __init__(self, session: ConversionSession, lock: threading.RLock) -> None:
        self._session = session
        self._lock = lock
        self._done = threading.Event()
        self._worker: threading.Thread | None = None
        # Thread running the completion hooks after a success, if any
        self.completion_thread: threading.Thread | None = None

    @property
    def session_id(self) -> str:
        return self._session.session_id

    @property
    def phase(self) -> SessionPhase:
        with self._lock:
            return self._session.phase

    @property
    def destination(self) -> Path | None:
        with self._lock:
            return self._session.destination

    @property
    def progress(self) -> float:
        with self._lock:
            return self._session.progress

    @property
    def outcome(self) -> ConversionOutcome | None:
        with self._lock:
            return self._session.outcome

    @property
    def done(self) -> bool:
        return self._done.is_set()

    def cancel(self) -> bool:
        """Request cancellation of the running conversion.

        Returns:
            True if the backend accepted the request. False when the session
            is not in progress or its backend cannot cancel.
        """
        with self._lock:
            if self._session.phase is not SessionPhase.IN_PROGRESS:
                return False
            backend = self._session.backend
            job = self._session.job
        if backend is None or job is None or not backend.supports_cancel:
            return False
        logger.info("Cancel requested for session %s", self.session_id)
        return backend.cancel(job)

    def wait(self, timeout: float | None = None) -> ConversionOutcome | None:
        """Block until the session is terminal.

        Called from a listener running on the worker thread, it returns the
        recorded outcome at once instead of waiting on itself.

        Returns:
            The outcome, or None if the timeout expired first.
        """
        if threading.current_thread() is self._worker:
            return self.outcome
        if not self._done.wait(timeout):
            return None
        return self.outcome

    def _mark_done(self) -> None:
        self._done.set()


class ConversionOrchestrator:
    """Drives conversion requests through classification and a backend."""

    def __init__(
        self,
        native_backend: TranscodeBackend,
        external_backend: TranscodeBackend,
        *,
        classifier: FormatClassifier | None = None,
        resolver: DestinationResolver | None = None,
        selector: PresetSelector | None = None,
        completion_hooks: CompletionHooks | None = None,
        event_context: EventContext | None = None,
    ) -> None:
        self.native_backend = native_backend
        self.external_backend = external_backend
        self.classifier = classifier or FormatClassifier()
        self.resolver = resolver or DestinationResolver()
        self.selector = selector or PresetSelector()
        self.completion_hooks = completion_hooks
        self.event_context = event_context or InlineEventContext()
        self._lock = threading.RLock()
        self._session: ConversionSession | None = None

    @classmethod
    def from_config(
        cls,
        config: ConvertBotConfig | None = None,
        event_context: EventContext | None = None,
    ) -> ConversionOrchestrator:
        """Build an orchestrator with the default backends and hooks."""
        config = config or ConvertBotConfig()
        factory = FFmpegExportSessionFactory(
            ffmpeg_path=config.tools.ffmpeg,
            ffprobe_path=config.tools.ffprobe,
            probe_timeout=config.conversion.probe_timeout,
        )
        notifications = config.notifications
        return cls(
            NativeTranscodeBackend(
                factory, progress_interval=config.conversion.progress_interval
            ),
            ExternalToolBackend(tool_path=config.tools.ffmpeg),
            completion_hooks=CompletionHooks(
                reveal_file=notifications.reveal_file,
                play_sound=notifications.play_sound,
                post_notification=notifications.post_notification,
            ),
            event_context=event_context,
        )

    @property
    def phase(self) -> SessionPhase:
        """Phase of the active session, IDLE when there is none."""
        with self._lock:
            if self._session is None:
                return SessionPhase.IDLE
            return self._session.phase

    def legal_targets(
        self, source: Path, content_type: str | None = None
    ) -> frozenset[TargetFormat]:
        """Return the targets a source may be converted to."""
        return self.classifier.legal_targets(
            self.classifier.classify(Path(source), content_type)
        )

    def submit(self, request: ConversionRequest, listener: Listener) -> SessionHandle:
        """Start a conversion.

        Args:
            request: What to convert.
            listener: Receives the session's events.

        Returns:
            Handle for the new session.

        Raises:
            BusyError: If a session is already active.
        """
        with self._lock:
            if self._session is not None:
                raise BusyError()
            session = ConversionSession(request=request)
            session.phase = SessionPhase.CLASSIFYING
            self._session = session

        handle = SessionHandle(session, self._lock)
        stream = EventStream(listener, self.event_context)
        worker = threading.Thread(
            target=self._run_session,
            args=(session, handle, stream),
            name=f"conversion-{session.session_id}",
            daemon=True,
        )
        handle._worker = worker
        worker.start()
        return handle

    def _run_session(
        self,
        session: ConversionSession,
        handle: SessionHandle,
        stream: EventStream,
    ) -> None:
        request = session.request
        with session_context(session.session_id, request.source):
            logger.info(
                "Converting %s to %s", request.source.name, request.target.value
            )
            try:
                outcome = self._drive(session, stream)
            except ConversionError as e:
                logger.warning("Conversion failed: %s", e.reason)
                outcome = Failed(e)
            except Exception as e:
                logger.exception("Unexpected error during conversion")
                outcome = Failed(InternalInconsistencyError(f"Unexpected error: {e}"))
            self._finish(session, handle, stream, outcome)

    def _drive(
        self, session: ConversionSession, stream: EventStream
    ) -> ConversionOutcome:
        request = session.request

        # Classifying
        kind = self.classifier.validate(
            request.source, request.target, request.content_type
        )
        if not request.source.is_file():
            raise InvalidRequestError(f"Source file not found: {request.source}")
        stream.emit(StatusEvent(f"Preparing {kind.value}…"))

        # BackendSelected
        if is_legacy_container(request.source):
            choice, backend = BackendChoice.EXTERNAL_TOOL, self.external_backend
        else:
            choice, backend = BackendChoice.NATIVE, self.native_backend
        with self._lock:
            session.kind = kind
            session.backend_choice = choice
            session.backend = backend
            session.phase = SessionPhase.BACKEND_SELECTED
        logger.debug("Backend selected: %s", choice.value)

        destination = self.resolver.resolve(request.source, request.target.extension)
        candidates: tuple[PresetName, ...] = ()
        if choice is BackendChoice.NATIVE:
            candidates = self.selector.presets(
                kind, request.target, request.compress, request.quality
            )
            logger.debug("Preset candidates: %s", [p.value for p in candidates])

        # InProgress
        job = BackendJob(
            source=request.source,
            destination=destination,
            target=request.target,
            candidates=candidates,
        )
        with self._lock:
            session.destination = destination
            session.job = job
            session.progress = 0.0
            session.phase = SessionPhase.IN_PROGRESS
        if choice is BackendChoice.EXTERNAL_TOOL:
            stream.emit(StatusEvent("Converting AVI via FFmpeg…"))
        else:
            stream.emit(StatusEvent(f"Converting {kind.value}…"))

        return backend.run(
            job, lambda fraction: self._on_progress(session, stream, fraction)
        )

    def _on_progress(
        self, session: ConversionSession, stream: EventStream, fraction: float
    ) -> None:
        fraction = min(max(fraction, 0.0), 1.0)
        with self._lock:
            if session.phase is not SessionPhase.IN_PROGRESS:
                return
            # 1.0 is reserved for Succeeded
            if fraction < session.progress or fraction >= 1.0:
                return
            session.progress = fraction
            stream.emit(ProgressEvent(fraction))

    def _finish(
        self,
        session: ConversionSession,
        handle: SessionHandle,
        stream: EventStream,
        outcome: ConversionOutcome,
    ) -> None:
        if isinstance(outcome, Succeeded):
            phase = SessionPhase.SUCCEEDED
            status = f"Saved to {outcome.destination.name}"
        elif isinstance(outcome, Cancelled):
            phase = SessionPhase.CANCELLED
            status = "Cancelled."
        else:
            phase = SessionPhase.FAILED
            status = "Failed."

        # Once the phase is terminal, _on_progress drops late samples, so the
        # final events can be emitted without holding the lock.
        with self._lock:
            if isinstance(outcome, Succeeded):
                session.progress = 1.0
            session.phase = phase
            session.outcome = outcome
            self._session = None
        try:
            if isinstance(outcome, Succeeded):
                stream.emit(ProgressEvent(1.0))
            stream.emit(StatusEvent(status))
            stream.emit(outcome)
            logger.info("Session finished: %s", phase.value)
            if isinstance(outcome, Succeeded) and self.completion_hooks is not None:
                try:
                    handle.completion_thread = self.completion_hooks.fire(
                        outcome.destination
                    )
                except Exception:
                    logger.exception("Could not start completion hooks")
        finally:
            handle._mark_done()
