"""Preset candidate selection.

Produces the ordered list of presets the native backend tries; the first
one whose session supports the target file type wins.

Compression requested for an uncompressed audio target has no true
compressed preset, so the list degrades to the M4A encoder followed by
lossless fallbacks. The result may not be smaller than the source.
"""

from convertbot.domain.enums import MediaKind, PresetName, QualityLevel, TargetFormat
from convertbot.exceptions import InvalidRequestError

_QUALITY_PRESETS: dict[QualityLevel, PresetName] = {
    QualityLevel.PASSTHROUGH: PresetName.PASSTHROUGH,
    QualityLevel.HIGH: PresetName.HIGHEST_QUALITY,
    QualityLevel.MEDIUM: PresetName.MEDIUM_QUALITY,
    QualityLevel.LOW: PresetName.LOW_QUALITY,
}

_LOSSLESS_FALLBACK = (PresetName.PASSTHROUGH, PresetName.HIGHEST_QUALITY)


class PresetSelector:
    """Maps a request onto an ordered tuple of preset candidates."""

    def presets(
        self,
        kind: MediaKind,
        target: TargetFormat,
        compress: bool,
        quality: QualityLevel = QualityLevel.HIGH,
    ) -> tuple[PresetName, ...]:
        """Return the candidates to try, in order.

        Args:
            kind: Classified media kind of the source.
            target: Requested output format.
            compress: Whether the caller asked for a smaller file.
            quality: Quality level, used for video when compress is True.

        Returns:
            Non-empty tuple of at most three presets.

        Raises:
            InvalidRequestError: If kind is UNKNOWN.
        """
        if kind is MediaKind.VIDEO:
            if compress:
                return (_QUALITY_PRESETS[quality],)
            return _LOSSLESS_FALLBACK

        if kind is MediaKind.AUDIO:
            if compress:
                if target.is_compressed_audio:
                    return (PresetName.APPLE_M4A,)
                return (PresetName.APPLE_M4A, *_LOSSLESS_FALLBACK)
            if target is TargetFormat.M4A:
                return (PresetName.APPLE_M4A, PresetName.PASSTHROUGH)
            if target is TargetFormat.AAC:
                return (PresetName.APPLE_M4A,)
            return _LOSSLESS_FALLBACK

        raise InvalidRequestError(f"No presets for media kind {kind.value}")
