"""Domain enums for ConvertBot.

This module contains the enumerations shared by the classifier, the preset
selector, both backends and the orchestrator.
"""

from enum import Enum


class MediaKind(Enum):
    """Kind of media a source file holds.

    UNKNOWN blocks conversion.
    """

    VIDEO = "video"
    AUDIO = "audio"
    UNKNOWN = "unknown"


class TargetFormat(Enum):
    """Output format a conversion may produce.

    The value is the file extension written to disk.
    """

    # Video containers
    MOV = "mov"
    MP4 = "mp4"
    M4V = "m4v"

    # Audio formats
    M4A = "m4a"
    AAC = "aac"
    WAV = "wav"
    CAF = "caf"
    AIFF = "aiff"

    @property
    def extension(self) -> str:
        """File extension (without dot) for this format."""
        return self.value

    @property
    def kind(self) -> MediaKind:
        """Media kind this format belongs to."""
        if self in VIDEO_TARGETS:
            return MediaKind.VIDEO
        return MediaKind.AUDIO

    @property
    def file_type(self) -> "OutputFileType":
        """Output file type the backend is asked to produce.

        AAC shares the MPEG-4 audio file type with M4A; only the
        extension differs.
        """
        return _FILE_TYPES[self]

    @property
    def is_compressed_audio(self) -> bool:
        """True for lossy audio formats that have a native encoder preset."""
        return self in COMPRESSED_AUDIO_TARGETS

    @property
    def description(self) -> str:
        """Display label used in caller-facing choices."""
        return self.value.upper()

    @classmethod
    def from_string(cls, value: str) -> "TargetFormat":
        """Parse a format identifier, accepting a leading dot and any case.

        Raises:
            ValueError: If the identifier is not a known format.
        """
        normalized = value.strip().lstrip(".").casefold()
        for member in cls:
            if member.value == normalized:
                return member
        raise ValueError(f"Unknown target format: {value}")


class OutputFileType(Enum):
    """Container file types an export session can declare support for.

    The value is the ffmpeg muxer name used to write it.
    """

    QUICKTIME_MOVIE = "mov"
    MPEG4 = "mp4"
    APPLE_M4V = "m4v"
    APPLE_M4A = "ipod"
    WAVE = "wav"
    CORE_AUDIO = "caf"
    AIFF = "aiff"

    @property
    def muxer(self) -> str:
        """ffmpeg muxer name (M4V is written by the mp4 muxer)."""
        if self is OutputFileType.APPLE_M4V:
            return "mp4"
        return self.value

    @property
    def is_mpeg4_family(self) -> bool:
        """True for ISO base media outputs that take -movflags."""
        return self in (
            OutputFileType.QUICKTIME_MOVIE,
            OutputFileType.MPEG4,
            OutputFileType.APPLE_M4V,
            OutputFileType.APPLE_M4A,
        )


class QualityLevel(Enum):
    """Requested quality when compression is enabled."""

    PASSTHROUGH = "passthrough"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class PresetName(Enum):
    """Named encoder configurations understood by the native backend."""

    PASSTHROUGH = "passthrough"
    HIGHEST_QUALITY = "highest_quality"
    MEDIUM_QUALITY = "medium_quality"
    LOW_QUALITY = "low_quality"
    APPLE_M4A = "apple_m4a"


class BackendChoice(Enum):
    """Backend that executes a session. Fixed once selected."""

    NATIVE = "native"
    EXTERNAL_TOOL = "external_tool"


class SessionPhase(Enum):
    """Phases of a conversion session.

    IDLE -> CLASSIFYING -> BACKEND_SELECTED -> IN_PROGRESS -> terminal.
    """

    IDLE = "idle"
    CLASSIFYING = "classifying"
    BACKEND_SELECTED = "backend_selected"
    IN_PROGRESS = "in_progress"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        """True for SUCCEEDED, FAILED and CANCELLED."""
        return self in (
            SessionPhase.SUCCEEDED,
            SessionPhase.FAILED,
            SessionPhase.CANCELLED,
        )


class FailureKind(Enum):
    """Taxonomy of terminal failures."""

    INVALID_REQUEST = "invalid_request"
    NO_COMPATIBLE_PRESET = "no_compatible_preset"
    TOOL_MISSING = "tool_missing"
    SPAWN_ERROR = "spawn_error"
    EXTERNAL_EXIT_NONZERO = "external_exit_nonzero"
    EXPORT_FAILED = "export_failed"
    INTERNAL_INCONSISTENCY = "internal_inconsistency"
    BUSY = "busy"


VIDEO_TARGETS = frozenset({TargetFormat.MOV, TargetFormat.MP4, TargetFormat.M4V})
AUDIO_TARGETS = frozenset(
    {
        TargetFormat.M4A,
        TargetFormat.AAC,
        TargetFormat.WAV,
        TargetFormat.CAF,
        TargetFormat.AIFF,
    }
)
COMPRESSED_AUDIO_TARGETS = frozenset({TargetFormat.M4A, TargetFormat.AAC})

_FILE_TYPES: dict[TargetFormat, OutputFileType] = {
    TargetFormat.MOV: OutputFileType.QUICKTIME_MOVIE,
    TargetFormat.MP4: OutputFileType.MPEG4,
    TargetFormat.M4V: OutputFileType.APPLE_M4V,
    TargetFormat.M4A: OutputFileType.APPLE_M4A,
    TargetFormat.AAC: OutputFileType.APPLE_M4A,
    TargetFormat.WAV: OutputFileType.WAVE,
    TargetFormat.CAF: OutputFileType.CORE_AUDIO,
    TargetFormat.AIFF: OutputFileType.AIFF,
}
