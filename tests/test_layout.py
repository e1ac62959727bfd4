"""Tests for layout export and import."""

import json
import logging
from pathlib import Path

import pytest
from pydantic import ValidationError

from roadloop.config import WorldConfig
from roadloop.data import ObjectCategory
from roadloop.layout import (
    LayoutItem,
    Vector3,
    apply_layout,
    dump_layout,
    export_layout,
    read_layout,
)
from roadloop.world import World


@pytest.fixture
def world(world_config: WorldConfig) -> World:
    return World(world_config).build()


class TestLayout:
    """Tests for layout round trips through a file."""

    def test_export_contains_every_registered_object(self, world: World) -> None:
        items = export_layout(world.context)

        assert len(items) == len(world.context.registry)
        assert items[0].name == "road_segment_1"
        mirror = next(item for item in items if item.name == "streetlight_mirror_1")
        assert mirror.rotation.y == pytest.approx(3.141592653589793)

    def test_dump_and_read(self, world: World, tmp_path: Path) -> None:
        path = tmp_path / "layouts" / "scene.json"
        items = export_layout(world.context)

        dump_layout(items, path)
        loaded = read_layout(path)

        assert path.exists()
        assert [item.name for item in loaded] == [item.name for item in items]
        assert loaded[5].position == items[5].position

    def test_read_missing_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            read_layout(tmp_path / "nope.json")

    def test_read_rejects_malformed_entries(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.json"
        path.write_text(json.dumps([{"position": {"x": 1.0}}]), encoding="utf-8")

        with pytest.raises(ValidationError):
            read_layout(path)

    def test_apply_moves_objects_and_skips_unknown(
        self, world: World, caplog: pytest.LogCaptureFixture
    ) -> None:
        items = [
            LayoutItem(name="barrier_1", position=Vector3(x=2.5, y=0.75, z=300.0)),
            LayoutItem(name="ghost_7", position=Vector3(z=1.0)),
        ]

        with caplog.at_level(logging.WARNING):
            applied = apply_layout(world.context, items)

        assert applied == 1
        barrier = world.context.get("barrier_1")
        assert barrier.position.as_tuple() == (2.5, 0.75, 300.0)
        assert "Object not found in registry: ghost_7" in caplog.text

    def test_mirror_x_is_forced(self, world: World, world_config: WorldConfig) -> None:
        x_mirror = world_config.streetlights.x_mirror
        items = [LayoutItem(name="streetlight_mirror_3", position=Vector3(x=5.0, z=42.0))]

        apply_layout(world.context, items, mirror_x=x_mirror)
        light = world.context.get("streetlight_mirror_3")
        assert light.position.x == x_mirror
        assert light.position.z == 42.0

        light.position.x = 9.0
        exported = export_layout(world.context, mirror_x=x_mirror)
        entry = next(item for item in exported if item.name == "streetlight_mirror_3")
        assert entry.position.x == x_mirror

    def test_overlapping_barriers_are_reported(
        self, world: World, caplog: pytest.LogCaptureFixture
    ) -> None:
        barriers = world.pool(ObjectCategory.BARRIER)
        for obj in barriers:
            obj.position.z += 10_000.0 + 100.0 * obj.id
        items = [
            LayoutItem(name="barrier_1", position=Vector3(x=2.0, y=0.75, z=50.0)),
            LayoutItem(name="barrier_2", position=Vector3(x=2.5, y=0.75, z=50.5)),
        ]

        with caplog.at_level(logging.WARNING):
            apply_layout(world.context, items)

        assert "barrier_1 / barrier_2" in caplog.text
