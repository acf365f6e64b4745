"""External tool backend.

Runs ``<tool> -i <source> <destination>`` for legacy containers the
native backend cannot open. The output is captured for diagnostics but
never parsed, so no intermediate progress is reported. A running process
cannot be cancelled.
"""

import logging
import subprocess  # nosec B404 - subprocess is required for the external transcoder
from pathlib import Path

from convertbot.backends.interface import BackendJob, ProgressCallback
from convertbot.domain.models import ConversionOutcome, Succeeded
from convertbot.exceptions import (
    ExternalExitNonzeroError,
    SpawnError,
    ToolMissingError,
)
from convertbot.tools.detection import INSTALL_HINTS, find_tool

logger = logging.getLogger(__name__)


class ExternalToolBackend:
    """Backend spawning an external command-line transcoder."""

    supports_cancel = False

    def __init__(self, tool_path: Path | None = None, tool_name: str = "ffmpeg"):
        self.tool_path = tool_path
        self.tool_name = tool_name

    def build_command(self, executable: Path, job: BackendJob) -> list[str]:
        return [str(executable), "-i", str(job.source), str(job.destination)]

    def run(self, job: BackendJob, on_progress: ProgressCallback) -> ConversionOutcome:
        """Run the tool and map its exit status.

        on_progress is never called.

        Raises:
            ToolMissingError: If the executable cannot be located.
            SpawnError: If the process could not be started.
            ExternalExitNonzeroError: If the process exited with a nonzero code.
        """
        executable = find_tool(self.tool_name, self.tool_path)
        if executable is None:
            raise ToolMissingError(self.tool_name, INSTALL_HINTS.get(self.tool_name, ""))

        cmd = self.build_command(executable, job)
        logger.debug("Running: %s", " ".join(cmd))
        try:
            result = subprocess.run(  # nosec B603
                cmd,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                errors="replace",
                check=False,
            )
        except OSError as e:
            logger.error("Failed to start %s: %s", self.tool_name, e)
            raise SpawnError(f"Could not start {self.tool_name}: {e}") from e

        if result.returncode != 0:
            tail = "\n".join(result.stdout.strip().splitlines()[-10:])
            logger.warning(
                "%s exited with code %d:\n%s", self.tool_name, result.returncode, tail
            )
            raise ExternalExitNonzeroError(result.returncode, result.stdout)

        logger.debug("%s output:\n%s", self.tool_name, result.stdout)
        return Succeeded(job.destination)

    def cancel(self, job: BackendJob) -> bool:
        """Cancellation is not supported once the process is spawned."""
        return False
