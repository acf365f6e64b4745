"""Centralized exit codes for all CLI commands.

Exit code ranges:
    0: Success
    1-9: General errors
    10-19: Request validation errors
    30-39: Tool/dependency errors
    40-49: Conversion errors
    60-69: Doctor warning states
"""

from enum import IntEnum

from convertbot.domain.enums import FailureKind


class ExitCode(IntEnum):
    """Exit codes for ConvertBot CLI commands."""

    # Success (0)
    SUCCESS = 0

    # General errors (1-9)
    GENERAL_ERROR = 1
    INTERRUPTED = 2
    CANCELLED = 3
    BUSY = 4

    # Validation errors (10-19)
    INVALID_REQUEST = 10
    CONFIG_ERROR = 11

    # Tool/dependency errors (30-39)
    TOOL_NOT_AVAILABLE = 30
    SPAWN_ERROR = 31

    # Conversion errors (40-49)
    CONVERSION_FAILED = 40
    NO_COMPATIBLE_PRESET = 41
    EXTERNAL_TOOL_FAILED = 42
    INTERNAL_ERROR = 43

    # Doctor warning states (60-69)
    WARNINGS = 60
    CRITICAL = 61


FAILURE_EXIT_CODES: dict[FailureKind, ExitCode] = {
    FailureKind.INVALID_REQUEST: ExitCode.INVALID_REQUEST,
    FailureKind.NO_COMPATIBLE_PRESET: ExitCode.NO_COMPATIBLE_PRESET,
    FailureKind.TOOL_MISSING: ExitCode.TOOL_NOT_AVAILABLE,
    FailureKind.SPAWN_ERROR: ExitCode.SPAWN_ERROR,
    FailureKind.EXTERNAL_EXIT_NONZERO: ExitCode.EXTERNAL_TOOL_FAILED,
    FailureKind.EXPORT_FAILED: ExitCode.CONVERSION_FAILED,
    FailureKind.INTERNAL_INCONSISTENCY: ExitCode.INTERNAL_ERROR,
    FailureKind.BUSY: ExitCode.BUSY,
}
