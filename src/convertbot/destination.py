"""Destination path resolution.

The destination sits next to the source with the extension replaced. When
that name is taken a counter is inserted before the extension:
``name (1).ext``, ``name (2).ext``, ... The check happens at resolution
time only; a file created by another process afterwards is not detected.
"""

from pathlib import Path


class DestinationResolver:
    """Computes a non-colliding destination path for a conversion."""

    def resolve(self, source: Path, extension: str) -> Path:
        """Resolve the destination for a source and target extension.

        Args:
            source: Source file path.
            extension: Target extension, with or without a leading dot.

        Returns:
            First candidate path that does not exist.
        """
        ext = extension.lstrip(".")
        directory = source.parent
        stem = source.stem

        candidate = directory / f"{stem}.{ext}"
        counter = 0
        while candidate.exists():
            counter += 1
            candidate = directory / f"{stem} ({counter}).{ext}"
        return candidate
