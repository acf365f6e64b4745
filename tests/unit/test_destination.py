"""Unit tests for destination path resolution."""

from pathlib import Path

from convertbot.destination import DestinationResolver


class TestDestinationResolver:
    """Tests for DestinationResolver.resolve()."""

    def test_replaces_extension(self, temp_dir: Path) -> None:
        """Destination keeps the directory and stem."""
        source = temp_dir / "clip.mov"
        assert DestinationResolver().resolve(source, "mp4") == temp_dir / "clip.mp4"

    def test_accepts_leading_dot(self, temp_dir: Path) -> None:
        source = temp_dir / "clip.mov"
        assert DestinationResolver().resolve(source, ".mp4") == temp_dir / "clip.mp4"

    def test_first_collision(self, temp_dir: Path) -> None:
        """An existing destination gets the (1) suffix."""
        (temp_dir / "clip.mp4").touch()
        result = DestinationResolver().resolve(temp_dir / "clip.mov", "mp4")
        assert result == temp_dir / "clip (1).mp4"

    def test_n_collisions(self, temp_dir: Path) -> None:
        """With N taken names the suffix is exactly (N)."""
        (temp_dir / "clip.mp4").touch()
        for n in range(1, 5):
            (temp_dir / f"clip ({n}).mp4").touch()
        result = DestinationResolver().resolve(temp_dir / "clip.mov", "mp4")
        assert result == temp_dir / "clip (5).mp4"

    def test_gap_is_filled(self, temp_dir: Path) -> None:
        """The smallest free counter is used."""
        (temp_dir / "clip.mp4").touch()
        (temp_dir / "clip (2).mp4").touch()
        result = DestinationResolver().resolve(temp_dir / "clip.mov", "mp4")
        assert result == temp_dir / "clip (1).mp4"

    def test_idempotent_without_writes(self, temp_dir: Path) -> None:
        """Resolving twice without creating files returns the same path."""
        (temp_dir / "clip.mp4").touch()
        resolver = DestinationResolver()
        first = resolver.resolve(temp_dir / "clip.mov", "mp4")
        second = resolver.resolve(temp_dir / "clip.mov", "mp4")
        assert first == second
        assert not first.exists()

    def test_source_with_same_extension(self, temp_dir: Path) -> None:
        """Converting to the source's own format never targets the source."""
        source = temp_dir / "clip.mp4"
        source.touch()
        assert DestinationResolver().resolve(source, "mp4") == temp_dir / "clip (1).mp4"
