"""Export session protocol.

An export session binds one preset to one source asset. It declares which
output file types it can write, runs asynchronously, exposes a progress
counter that callers sample, and reports a terminal status through a
completion handler.
"""

from collections.abc import Callable
from enum import Enum
from pathlib import Path
from typing import Protocol

from convertbot.domain.enums import OutputFileType, PresetName


class ExportStatus(Enum):
    """Lifecycle status of an export session."""

    WAITING = "waiting"
    EXPORTING = "exporting"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"


class ExportSession(Protocol):
    """Protocol for a single asynchronous export."""

    preset: PresetName
    supported_file_types: frozenset[OutputFileType]
    output_path: Path | None
    output_file_type: OutputFileType | None

    @property
    def progress(self) -> float:
        """Completed fraction between 0.0 and 1.0."""
        ...

    @property
    def status(self) -> ExportStatus:
        """Current status."""
        ...

    @property
    def error(self) -> str | None:
        """Underlying error description when status is FAILED."""
        ...

    def export_async(self, completion_handler: Callable[[], None]) -> None:
        """Start exporting; call completion_handler once when finished.

        output_path and output_file_type must be set first.
        """
        ...

    def cancel_export(self) -> None:
        """Request cancellation. The session reports CANCELLED once honored."""
        ...


class ExportSessionFactory(Protocol):
    """Creates export sessions bound to a preset and a source asset."""

    def create(self, source: Path, preset: PresetName) -> ExportSession | None:
        """Create a session, or return None if the preset cannot be bound.

        Raises:
            ConversionError: If the asset cannot be opened at all (missing
                tools, unreadable source).
        """
        ...
