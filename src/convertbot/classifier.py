"""Media kind classification and legal target lookup.

A declared content type (MIME type) wins when present; otherwise a fixed
extension allow-list decides. Content-type detection fails for unusual or
missing extensions, so the allow-list still has to gate which targets are
offered.
"""

import logging
import mimetypes
from pathlib import Path

from convertbot.domain.enums import (
    AUDIO_TARGETS,
    VIDEO_TARGETS,
    MediaKind,
    TargetFormat,
)
from convertbot.exceptions import InvalidRequestError

logger = logging.getLogger(__name__)

VIDEO_EXTENSIONS = frozenset({"mp4", "mov", "m4v", "avi"})
AUDIO_EXTENSIONS = frozenset({"m4a", "wav", "caf", "aac", "aiff"})

# Only input format the native backend cannot open
LEGACY_CONTAINER_EXTENSIONS = frozenset({"avi"})

# mimetypes does not know every extension on every platform
_EXTRA_TYPES = {
    ".m4v": "video/x-m4v",
    ".m4a": "audio/mp4",
    ".caf": "audio/x-caf",
    ".aiff": "audio/x-aiff",
    ".avi": "video/x-msvideo",
}


def _extension(path: Path) -> str:
    return path.suffix.lstrip(".").casefold()


def guess_content_type(path: Path) -> str | None:
    """Guess the MIME type of a file from its name.

    Args:
        path: File path.

    Returns:
        MIME type string, or None if the extension is not registered.
    """
    content_type, _ = mimetypes.guess_type(path.name, strict=False)
    if content_type is None:
        content_type = _EXTRA_TYPES.get(path.suffix.casefold())
    return content_type


def is_legacy_container(path: Path) -> bool:
    """Return True if the source must go through the external tool."""
    return _extension(path) in LEGACY_CONTAINER_EXTENSIONS


class FormatClassifier:
    """Decides the media kind of a source and which targets are legal."""

    def classify(self, path: Path, content_type: str | None = None) -> MediaKind:
        """Classify a source file.

        Args:
            path: Source file path.
            content_type: Declared MIME type, if available.

        Returns:
            VIDEO, AUDIO or UNKNOWN.
        """
        if content_type:
            kind = self._classify_content_type(content_type)
            if kind is not MediaKind.UNKNOWN:
                return kind
            logger.debug(
                "Content type %r of %s is neither video nor audio, "
                "falling back to extension",
                content_type,
                path.name,
            )

        ext = _extension(path)
        if ext in VIDEO_EXTENSIONS:
            return MediaKind.VIDEO
        if ext in AUDIO_EXTENSIONS:
            return MediaKind.AUDIO
        return MediaKind.UNKNOWN

    @staticmethod
    def _classify_content_type(content_type: str) -> MediaKind:
        top_level, _, _ = content_type.strip().casefold().partition("/")
        if top_level == "video":
            return MediaKind.VIDEO
        if top_level == "audio":
            return MediaKind.AUDIO
        return MediaKind.UNKNOWN

    def legal_targets(self, kind: MediaKind) -> frozenset[TargetFormat]:
        """Return the fixed target list for a media kind.

        UNKNOWN has no legal targets.
        """
        if kind is MediaKind.VIDEO:
            return VIDEO_TARGETS
        if kind is MediaKind.AUDIO:
            return AUDIO_TARGETS
        return frozenset()

    def validate(
        self,
        path: Path,
        target: TargetFormat,
        content_type: str | None = None,
    ) -> MediaKind:
        """Classify a source and check the target is legal for it.

        Args:
            path: Source file path.
            target: Requested output format.
            content_type: Declared MIME type, if available.

        Returns:
            The classified media kind.

        Raises:
            InvalidRequestError: If the source is unrecognized or the target
                does not belong to its kind.
        """
        kind = self.classify(path, content_type)
        if kind is MediaKind.UNKNOWN:
            raise InvalidRequestError(
                f"{path.name} is not a recognized video or audio file."
            )
        if target not in self.legal_targets(kind):
            raise InvalidRequestError(
                f"Cannot convert {kind.value} file {path.name} "
                f"to {target.description}."
            )
        return kind
