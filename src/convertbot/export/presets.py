"""Export preset definitions.

Each preset declares which output file types it can write for a given
asset and the ffmpeg codec arguments it uses. PASSTHROUGH only supports a
file type when every source stream can be stream-copied into it.
"""

from convertbot.domain.enums import OutputFileType, PresetName
from convertbot.export.probe import AssetInfo

VIDEO_FILE_TYPES = frozenset(
    {
        OutputFileType.QUICKTIME_MOVIE,
        OutputFileType.MPEG4,
        OutputFileType.APPLE_M4V,
    }
)
AUDIO_FILE_TYPES = frozenset(
    {
        OutputFileType.APPLE_M4A,
        OutputFileType.WAVE,
        OutputFileType.CORE_AUDIO,
        OutputFileType.AIFF,
    }
)

_MPEG4_VIDEO = frozenset({"h264", "hevc", "mpeg4", "av1"})
_MPEG4_AUDIO = frozenset({"aac", "alac", "mp3", "ac3", "eac3"})
_PCM_LE = frozenset({"pcm_s16le", "pcm_s24le", "pcm_s32le", "pcm_f32le", "pcm_f64le"})
_PCM_BE = frozenset({"pcm_s16be", "pcm_s24be", "pcm_s32be", "pcm_f32be", "pcm_f64be"})

# Codecs that may be stream-copied into each file type
_COPYABLE_VIDEO: dict[OutputFileType, frozenset[str]] = {
    OutputFileType.QUICKTIME_MOVIE: _MPEG4_VIDEO | {"prores", "mjpeg", "dnxhd"},
    OutputFileType.MPEG4: _MPEG4_VIDEO,
    OutputFileType.APPLE_M4V: frozenset({"h264", "hevc"}),
}
_COPYABLE_AUDIO: dict[OutputFileType, frozenset[str]] = {
    OutputFileType.QUICKTIME_MOVIE: _MPEG4_AUDIO | _PCM_LE | _PCM_BE,
    OutputFileType.MPEG4: _MPEG4_AUDIO,
    OutputFileType.APPLE_M4V: frozenset({"aac", "ac3", "alac"}),
    OutputFileType.APPLE_M4A: frozenset({"aac", "alac"}),
    OutputFileType.WAVE: _PCM_LE | {"pcm_u8"},
    OutputFileType.CORE_AUDIO: _PCM_LE | _PCM_BE | {"aac", "alac"},
    OutputFileType.AIFF: _PCM_BE | {"pcm_s8"},
}

# Lossless encoders for uncompressed audio file types
_PCM_ENCODERS: dict[OutputFileType, str] = {
    OutputFileType.WAVE: "pcm_s16le",
    OutputFileType.CORE_AUDIO: "pcm_s16le",
    OutputFileType.AIFF: "pcm_s16be",
}

# (video crf, x264 preset, aac bitrate)
_QUALITY_SETTINGS: dict[PresetName, tuple[int, str, str]] = {
    PresetName.HIGHEST_QUALITY: (18, "slow", "256k"),
    PresetName.MEDIUM_QUALITY: (23, "medium", "128k"),
    PresetName.LOW_QUALITY: (28, "fast", "64k"),
}


def _passthrough_types(asset: AssetInfo) -> frozenset[OutputFileType]:
    supported: set[OutputFileType] = set()
    if asset.has_video:
        for file_type in VIDEO_FILE_TYPES:
            if set(asset.video_codecs) <= _COPYABLE_VIDEO[file_type] and set(
                asset.audio_codecs
            ) <= _COPYABLE_AUDIO[file_type]:
                supported.add(file_type)
    if asset.has_audio:
        for file_type in AUDIO_FILE_TYPES:
            if set(asset.audio_codecs) <= _COPYABLE_AUDIO[file_type]:
                supported.add(file_type)
    return frozenset(supported)


def supported_file_types(
    preset: PresetName, asset: AssetInfo
) -> frozenset[OutputFileType]:
    """Return the file types a preset can write for an asset.

    Args:
        preset: Preset to bind.
        asset: Probed source asset.

    Returns:
        Possibly empty set of supported file types.
    """
    if preset is PresetName.PASSTHROUGH:
        return _passthrough_types(asset)

    if preset is PresetName.APPLE_M4A:
        return frozenset({OutputFileType.APPLE_M4A}) if asset.has_audio else frozenset()

    if asset.has_video:
        return VIDEO_FILE_TYPES
    if not asset.has_audio:
        return frozenset()
    if preset is PresetName.HIGHEST_QUALITY:
        return AUDIO_FILE_TYPES
    return frozenset({OutputFileType.APPLE_M4A})


def codec_arguments(preset: PresetName, file_type: OutputFileType) -> list[str]:
    """Build stream mapping and codec arguments for ffmpeg.

    Args:
        preset: Preset in use.
        file_type: Output file type (must be supported by the preset).

    Returns:
        ffmpeg arguments placed between the input and the output.
    """
    audio_only = file_type in AUDIO_FILE_TYPES

    if audio_only:
        args = ["-map", "0:a", "-vn"]
    else:
        args = ["-map", "0:v", "-map", "0:a?"]

    if preset is PresetName.PASSTHROUGH:
        return [*args, "-c", "copy"]

    if preset is PresetName.APPLE_M4A:
        return [*args, "-c:a", "aac", "-b:a", "256k"]

    crf, x264_preset, audio_bitrate = _QUALITY_SETTINGS[preset]
    if audio_only:
        encoder = _PCM_ENCODERS.get(file_type)
        if encoder is not None:
            return [*args, "-c:a", encoder]
        return [*args, "-c:a", "aac", "-b:a", audio_bitrate]

    return [
        *args,
        "-c:v",
        "libx264",
        "-crf",
        str(crf),
        "-preset",
        x264_preset,
        "-pix_fmt",
        "yuv420p",
        "-c:a",
        "aac",
        "-b:a",
        audio_bitrate,
    ]
