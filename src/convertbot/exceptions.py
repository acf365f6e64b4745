"""Custom exceptions for conversion sessions.

Every error is terminal for its session. Backends raise these; the
orchestrator turns them into a single Failed outcome.
"""

from convertbot.domain.enums import FailureKind


class ConversionError(Exception):
    """Base exception for conversion errors.

    Attributes:
        kind: Taxonomy entry describing the failure.
    """

    kind: FailureKind = FailureKind.INTERNAL_INCONSISTENCY

    @property
    def reason(self) -> str:
        """Human-readable reason for presentation by the caller."""
        return str(self) or self.kind.value.replace("_", " ")


class InvalidRequestError(ConversionError):
    """Raised when the source/target combination is not legal."""

    kind = FailureKind.INVALID_REQUEST


class NoCompatiblePresetError(ConversionError):
    """Raised when no candidate preset supports the requested file type."""

    kind = FailureKind.NO_COMPATIBLE_PRESET

    def __init__(self, message: str | None = None) -> None:
        super().__init__(
            message
            or "No compatible export preset available. Try a different format."
        )


class ToolMissingError(ConversionError):
    """Raised when a required external executable cannot be located.

    Attributes:
        tool_name: Name of the missing tool.
    """

    kind = FailureKind.TOOL_MISSING

    def __init__(self, tool_name: str, hint: str = "") -> None:
        self.tool_name = tool_name
        message = f"Required tool not available: {tool_name}."
        if hint:
            message = f"{message} {hint}"
        super().__init__(message)


class SpawnError(ConversionError):
    """Raised when the external process could not be started."""

    kind = FailureKind.SPAWN_ERROR


class ExternalExitNonzeroError(ConversionError):
    """Raised when the external process ran and exited with a failure code.

    Attributes:
        exit_code: Process return code.
        output: Captured combined output, kept for diagnostics only.
    """

    kind = FailureKind.EXTERNAL_EXIT_NONZERO

    def __init__(self, exit_code: int, output: str = "") -> None:
        self.exit_code = exit_code
        self.output = output
        super().__init__(f"FFmpeg conversion failed with code {exit_code}.")


class ExportFailedError(ConversionError):
    """Raised when the native export session reports failure.

    The underlying reason is passed through opaquely.
    """

    kind = FailureKind.EXPORT_FAILED

    def __init__(self, underlying_reason: str | None = None) -> None:
        self.underlying_reason = underlying_reason
        super().__init__(underlying_reason or "Unknown conversion error.")


class InternalInconsistencyError(ConversionError):
    """Raised for states the session model considers unreachable."""

    kind = FailureKind.INTERNAL_INCONSISTENCY


class BusyError(ConversionError):
    """Raised by submit() while another session is active."""

    kind = FailureKind.BUSY

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or "A conversion is already in progress.")
