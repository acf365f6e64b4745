"""Short-lived helper process invocations.

ffprobe, ``-version`` checks and the desktop helpers run by the completion
hooks all go through run_command. The long-running ffmpeg export uses Popen
directly in export.ffmpeg_session.
"""

from __future__ import annotations

import logging
import subprocess  # nosec B404 - subprocess is required for ffmpeg invocation
import time
from collections.abc import Sequence
from pathlib import Path
from typing import NamedTuple

logger = logging.getLogger(__name__)


class CommandResult(NamedTuple):
    """Captured output of a finished helper process."""

    stdout: str
    stderr: str
    returncode: int


def run_command(args: Sequence[str | Path], timeout: float = 120) -> CommandResult:
    """Run a helper to completion and capture its text output.

    Output is decoded with errors="replace" since ffprobe echoes container
    tags verbatim.

    Raises:
        subprocess.TimeoutExpired: If the helper overruns timeout. The child
            is killed before this is raised.
        OSError: If the executable cannot be started.
    """
    argv = [str(arg) for arg in args]
    tool = Path(argv[0]).name
    logger.debug("Running: %s", " ".join(argv), extra={"command": tool})

    started = time.monotonic()
    try:
        completed = subprocess.run(  # nosec B603 - argv built by callers
            argv,
            capture_output=True,
            text=True,
            errors="replace",
            timeout=timeout,
            check=False,
        )
    except subprocess.TimeoutExpired:
        logger.warning(
            "%s timed out after %ss", tool, timeout, extra={"command": tool}
        )
        raise

    logger.debug(
        "%s exited with code %d after %.3fs",
        tool,
        completed.returncode,
        time.monotonic() - started,
        extra={"command": tool, "returncode": completed.returncode},
    )
    return CommandResult(
        completed.stdout or "", completed.stderr or "", completed.returncode
    )
