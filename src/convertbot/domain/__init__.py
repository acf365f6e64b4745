"""Domain types for ConvertBot."""

from convertbot.domain.enums import (
    AUDIO_TARGETS,
    COMPRESSED_AUDIO_TARGETS,
    VIDEO_TARGETS,
    BackendChoice,
    FailureKind,
    MediaKind,
    OutputFileType,
    PresetName,
    QualityLevel,
    SessionPhase,
    TargetFormat,
)
from convertbot.domain.models import (
    Cancelled,
    ConversionOutcome,
    ConversionRequest,
    Failed,
    ProgressEvent,
    SessionEvent,
    StatusEvent,
    Succeeded,
    is_terminal,
)

__all__ = [
    # Enums
    "AUDIO_TARGETS",
    "COMPRESSED_AUDIO_TARGETS",
    "VIDEO_TARGETS",
    "BackendChoice",
    "FailureKind",
    "MediaKind",
    "OutputFileType",
    "PresetName",
    "QualityLevel",
    "SessionPhase",
    "TargetFormat",
    # Models
    "Cancelled",
    "ConversionOutcome",
    "ConversionRequest",
    "Failed",
    "ProgressEvent",
    "SessionEvent",
    "StatusEvent",
    "Succeeded",
    "is_terminal",
]
