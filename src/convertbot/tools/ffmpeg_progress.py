"""Reader for ffmpeg's ``-progress pipe:1`` output.

ffmpeg writes key=value lines in blocks; each block closes with
``progress=continue``, or ``progress=end`` for the last one. Only the
output position matters for a completed fraction; size and speed are kept
for debug logging.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

_CLOCK = re.compile(r"^(\d+):(\d{2}):(\d{2}(?:\.\d+)?)$")


@dataclass
class FFmpegProgress:
    """One completed progress block."""

    out_time_us: int | None = None
    total_size: int | None = None
    speed: str | None = None
    finished: bool = False

    def get_fraction(self, duration_seconds: float | None) -> float:
        """Fraction of duration_seconds written so far, 0.0 when unknown."""
        if not duration_seconds or duration_seconds <= 0:
            return 0.0
        if self.out_time_us is None or self.out_time_us < 0:
            return 0.0
        return min(1.0, self.out_time_us / 1_000_000 / duration_seconds)


def _parse_clock(value: str) -> int | None:
    match = _CLOCK.match(value)
    if match is None:
        return None
    hours, minutes, seconds = match.groups()
    total = int(hours) * 3600 + int(minutes) * 60 + float(seconds)
    return int(total * 1_000_000)


def parse_progress_line(line: str) -> tuple[str, str] | None:
    """Split a progress line into (key, value), None for anything else."""
    key, sep, value = line.strip().partition("=")
    if not sep or not key:
        return None
    return key.strip(), value.strip()


class ProgressBlockReader:
    """Accumulates progress lines into FFmpegProgress blocks."""

    def __init__(self) -> None:
        self._fields: dict[str, str] = {}

    def feed(self, line: str) -> FFmpegProgress | None:
        """Consume one line.

        Returns:
            The finished block when line closes one, otherwise None.
        """
        parsed = parse_progress_line(line)
        if parsed is None:
            return None
        key, value = parsed
        if key != "progress":
            self._fields[key] = value
            return None
        block = self._build(finished=value == "end")
        self._fields = {}
        return block

    def _build(self, finished: bool) -> FFmpegProgress:
        fields = self._fields
        # out_time_ms is microseconds too; ffmpeg kept the old name
        out_time_us = None
        for key in ("out_time_us", "out_time_ms"):
            if fields.get(key, "N/A").lstrip("-").isdigit():
                out_time_us = int(fields[key])
                break
        if out_time_us is None and "out_time" in fields:
            out_time_us = _parse_clock(fields["out_time"])

        total_size = fields.get("total_size", "")
        speed = fields.get("speed")
        return FFmpegProgress(
            out_time_us=out_time_us,
            total_size=int(total_size) if total_size.isdigit() else None,
            speed=None if speed in (None, "N/A") else speed,
            finished=finished,
        )
