"""Domain models for ConvertBot.

Requests, outcomes and the events delivered to session listeners. All of
these are frozen dataclasses so they can be handed across threads.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Union

from convertbot.domain.enums import FailureKind, QualityLevel, TargetFormat

if TYPE_CHECKING:
    from convertbot.exceptions import ConversionError


@dataclass(frozen=True)
class ConversionRequest:
    """A single conversion request.

    quality is only consulted when compress is True.
    """

    source: Path
    target: TargetFormat
    compress: bool = False
    quality: QualityLevel = QualityLevel.HIGH
    content_type: str | None = None
    """Declared MIME type of the source, when the caller knows it."""

    def __post_init__(self) -> None:
        """Normalize the source path."""
        if not isinstance(self.source, Path):
            object.__setattr__(self, "source", Path(self.source))


@dataclass(frozen=True)
class Succeeded:
    """Terminal event: the destination file was written."""

    destination: Path


@dataclass(frozen=True)
class Failed:
    """Terminal event: the session failed."""

    error: ConversionError

    @property
    def kind(self) -> FailureKind:
        """Taxonomy entry of the failure."""
        return self.error.kind

    @property
    def reason(self) -> str:
        """Human-readable failure reason."""
        return self.error.reason


@dataclass(frozen=True)
class Cancelled:
    """Terminal event: the export honored a cancel request."""


ConversionOutcome = Union[Succeeded, Failed, Cancelled]


@dataclass(frozen=True)
class ProgressEvent:
    """Fractional progress between 0.0 and 1.0."""

    fraction: float


@dataclass(frozen=True)
class StatusEvent:
    """Human-readable status line for display."""

    message: str


SessionEvent = Union[ProgressEvent, StatusEvent, Succeeded, Failed, Cancelled]

TERMINAL_EVENT_TYPES = (Succeeded, Failed, Cancelled)


def is_terminal(event: SessionEvent) -> bool:
    """Return True if the event ends a session."""
    return isinstance(event, TERMINAL_EVENT_TYPES)
