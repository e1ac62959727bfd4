"""Tests for model asset lookup."""

from pathlib import Path

import pytest

from roadloop.assets import extent_from_bounds, resolve_model_path


class TestResolveModelPath:
    """Tests for ordered candidate lookup."""

    def test_first_existing_candidate_wins(self, tmp_path: Path) -> None:
        (tmp_path / "models").mkdir()
        (tmp_path / "models" / "barrier.glb").write_bytes(b"glb")
        (tmp_path / "barrier.glb").write_bytes(b"glb")

        path = resolve_model_path(
            ["assets/barrier.glb", "models/barrier.glb", "barrier.glb"], tmp_path
        )

        assert path == tmp_path / "models" / "barrier.glb"

    def test_absolute_candidate(self, tmp_path: Path) -> None:
        target = tmp_path / "road.glb"
        target.write_bytes(b"glb")

        assert resolve_model_path([target], "/nonexistent") == target

    def test_missing_lists_every_candidate(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError) as excinfo:
            resolve_model_path(["a.glb", "b/c.glb"], tmp_path)

        message = str(excinfo.value)
        assert "a.glb" in message
        assert "c.glb" in message


class TestExtentFromBounds:
    """Tests for bounding box conversion."""

    def test_anchor_relative_bounds(self) -> None:
        extent = extent_from_bounds((-1.5, 0.0, 8.0), (1.5, 2.0, 12.0), anchor_z=10.0)

        assert extent.half_width == 1.5
        assert extent.local_min_z == -2.0
        assert extent.local_max_z == 2.0
        assert extent.length == 4.0

    def test_inverted_bounds_raise(self) -> None:
        with pytest.raises(ValueError, match="Invalid bounds"):
            extent_from_bounds((1.0, 0.0, 0.0), (-1.0, 1.0, 1.0))
