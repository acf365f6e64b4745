"""Completion side channel.

After a successful conversion the destination is revealed in the file
browser, a sound plays and a desktop notification is posted. Each of
these is best-effort: failures are logged and never reach the session.
"""

import logging
import shutil
import subprocess  # nosec B404 - subprocess is required for desktop integration
import sys
import threading
from pathlib import Path
from typing import Protocol

from convertbot.core.subprocess_utils import run_command

logger = logging.getLogger(__name__)

NOTIFICATION_TITLE = "Conversion Complete"
COMPLETION_SOUND = "Glass"

# Desktop helpers should return almost immediately
HOOK_TIMEOUT = 10

_MACOS_SOUND_DIR = Path("/System/Library/Sounds")
_FREEDESKTOP_SOUND = Path("/usr/share/sounds/freedesktop/stereo/complete.oga")


class DesktopCollaborator(Protocol):
    """The three completion collaborators."""

    def reveal_file(self, path: Path) -> None: ...

    def play_sound(self) -> None: ...

    def post_notification(self, title: str, body: str) -> None: ...


def _run_if_available(args: list[str | Path]) -> bool:
    """Run a desktop helper if its executable exists.

    Returns:
        True if the helper ran and exited 0.
    """
    if shutil.which(str(args[0])) is None:
        logger.debug("Desktop helper %s not available", args[0])
        return False
    try:
        _, stderr, rc = run_command(args, timeout=HOOK_TIMEOUT)
    except (OSError, subprocess.TimeoutExpired) as e:
        logger.debug("Desktop helper %s failed: %s", args[0], e)
        return False
    if rc != 0:
        logger.debug("Desktop helper %s exited %d: %s", args[0], rc, stderr.strip())
        return False
    return True


def _applescript_string(text: str) -> str:
    return '"' + text.replace("\\", "\\\\").replace('"', '\\"') + '"'


class DesktopIntegration:
    """Platform-specific desktop collaborators."""

    def __init__(self, platform: str | None = None) -> None:
        self.platform = platform or sys.platform

    def reveal_file(self, path: Path) -> None:
        if self.platform == "darwin":
            _run_if_available(["open", "-R", path])
        elif self.platform == "win32":
            _run_if_available(["explorer", f"/select,{path}"])
        else:
            _run_if_available(["xdg-open", path.parent])

    def play_sound(self) -> None:
        if self.platform == "darwin":
            _run_if_available(
                ["afplay", _MACOS_SOUND_DIR / f"{COMPLETION_SOUND}.aiff"]
            )
        elif self.platform == "win32":
            import winsound

            winsound.MessageBeep(winsound.MB_OK)
        elif not (
            _FREEDESKTOP_SOUND.exists()
            and _run_if_available(["paplay", _FREEDESKTOP_SOUND])
        ):
            _run_if_available(["canberra-gtk-play", "-i", "complete"])

    def post_notification(self, title: str, body: str) -> None:
        if self.platform == "darwin":
            script = (
                f"display notification {_applescript_string(body)} "
                f"with title {_applescript_string(title)}"
            )
            _run_if_available(["osascript", "-e", script])
        elif self.platform == "win32":
            logger.debug("Notifications are not supported on Windows: %s", body)
        else:
            _run_if_available(["notify-send", title, body])


class CompletionHooks:
    """Fires the enabled completion collaborators on a daemon thread."""

    def __init__(
        self,
        integration: DesktopCollaborator | None = None,
        reveal_file: bool = True,
        play_sound: bool = True,
        post_notification: bool = True,
    ) -> None:
        self.integration = integration or DesktopIntegration()
        self.reveal_file = reveal_file
        self.play_sound = play_sound
        self.post_notification = post_notification

    @property
    def enabled(self) -> bool:
        return self.reveal_file or self.play_sound or self.post_notification

    def fire(self, destination: Path) -> threading.Thread | None:
        """Run the hooks for a written destination without blocking.

        Returns:
            The hook thread, or None if every hook is disabled.
        """
        if not self.enabled:
            return None
        thread = threading.Thread(
            target=self.run, args=(destination,), name="completion-hooks", daemon=True
        )
        thread.start()
        return thread

    def run(self, destination: Path) -> None:
        """Run the hooks synchronously, swallowing their failures."""
        steps = []
        if self.reveal_file:
            steps.append(("reveal_file", lambda: self.integration.reveal_file(destination)))
        if self.play_sound:
            steps.append(("play_sound", self.integration.play_sound))
        if self.post_notification:
            steps.append(
                (
                    "post_notification",
                    lambda: self.integration.post_notification(
                        NOTIFICATION_TITLE, f"{destination.name} is ready."
                    ),
                )
            )
        for name, step in steps:
            try:
                step()
            except Exception as e:
                logger.debug("Completion hook %s failed: %s", name, e)
