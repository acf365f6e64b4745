"""Transcode backend protocol.

Both backends share one capability: run a job to a terminal outcome and,
optionally, cancel it. Backends report failures by raising ConversionError
subclasses; the orchestrator turns them into Failed outcomes.
"""

import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

from convertbot.domain.enums import PresetName, TargetFormat
from convertbot.domain.models import ConversionOutcome

ProgressCallback = Callable[[float], None]


@dataclass(frozen=True)
class BackendJob:
    """Everything a backend needs to run one conversion.

    candidates is empty for the external tool backend. cancel_event is set
    once cancellation of this job has been requested; it never outlives
    the job.
    """

    source: Path
    destination: Path
    target: TargetFormat
    candidates: tuple[PresetName, ...] = ()
    cancel_event: threading.Event = field(
        default_factory=threading.Event, compare=False, repr=False
    )


class TranscodeBackend(Protocol):
    """Protocol for conversion backends."""

    @property
    def supports_cancel(self) -> bool:
        """True if cancel() can stop a running job."""
        ...

    def run(self, job: BackendJob, on_progress: ProgressCallback) -> ConversionOutcome:
        """Run the job to completion, blocking the calling thread.

        Args:
            job: Job to run.
            on_progress: Called with sampled progress fractions.

        Returns:
            Succeeded or Cancelled.

        Raises:
            ConversionError: On any failure.
        """
        ...

    def cancel(self, job: BackendJob) -> bool:
        """Request cancellation of a job.

        The request applies to this job only. A job that has not started
        yet is cancelled as soon as its export starts.

        Returns:
            False if the backend cannot cancel.
        """
        ...
