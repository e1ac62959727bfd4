"""Tests for World orchestration."""

import logging
import math

import pytest

from roadloop.assets import ModelReady
from roadloop.config import WorldConfig
from roadloop.context import SceneContext
from roadloop.data import Extent, ObjectCategory
from roadloop.world import World


class TestWorld:
    """Tests for World class."""

    def test_build_registers_every_object(self, world_config: WorldConfig) -> None:
        world = World(world_config).build()
        context = world.context

        assert len(world.pool(ObjectCategory.ROAD_SEGMENT)) == 30
        assert len(world.pool(ObjectCategory.STREETLIGHT_REGULAR)) == 6
        assert len(world.pool(ObjectCategory.STREETLIGHT_MIRROR)) == 6
        assert len(world.pool(ObjectCategory.BARRIER)) == 30
        assert len(context.registry) == 72

        assert context.get("road_segment_1") is world.pool(ObjectCategory.ROAD_SEGMENT).objects[0]
        assert context.get("streetlight_6").category is ObjectCategory.STREETLIGHT_REGULAR
        assert context.get("streetlight_mirror_1").category is ObjectCategory.STREETLIGHT_MIRROR
        assert context.get("barrier_30") is not None

    def test_barrier_variants_cycle(self, world_config: WorldConfig) -> None:
        world = World(world_config).build()
        variants = [obj.variant for obj in world.pool(ObjectCategory.BARRIER)]

        assert variants[:5] == world_config.barriers.variants
        assert variants[5] == variants[0]

    def test_mirror_streetlights_face_backwards(self, world_config: WorldConfig) -> None:
        world = World(world_config).build()

        mirror = world.context.get("streetlight_mirror_2")
        regular = world.context.get("streetlight_2")
        assert mirror.rotation == (0.0, math.pi, 0.0)
        assert regular.rotation == (0.0, 0.0, 0.0)
        assert mirror.position.x == world_config.streetlights.x_mirror

    def test_pools_appear_when_models_are_ready(self, world_config: WorldConfig) -> None:
        world = World(world_config)
        assert world.tick(10.0) == {}

        created = world.on_model_ready(
            ModelReady(ObjectCategory.STREETLIGHT_MIRROR, Extent.symmetric(0.3, 0.3))
        )

        assert len(created) == 12
        assert set(world.tick(20.0)) == {
            ObjectCategory.STREETLIGHT_REGULAR,
            ObjectCategory.STREETLIGHT_MIRROR,
        }
        with pytest.raises(KeyError, match="not initialized"):
            world.pool(ObjectCategory.BARRIER)

    def test_repeated_model_ready_is_ignored(
        self, world_config: WorldConfig, caplog: pytest.LogCaptureFixture
    ) -> None:
        world = World(world_config).build()
        event = ModelReady(ObjectCategory.ROAD_SEGMENT, Extent.symmetric(3.0, 40.0))

        with caplog.at_level(logging.WARNING):
            assert world.on_model_ready(event) == []

        assert "already initialized" in caplog.text
        assert len(world.pool(ObjectCategory.ROAD_SEGMENT)) == 30

    def test_barrier_model_extent_feeds_constraints(self, world_config: WorldConfig) -> None:
        world = World(world_config)
        world.on_model_ready(ModelReady(ObjectCategory.BARRIER, Extent.symmetric(0.5, 1.0)))

        assert world.generator is not None
        assert world.generator.constraints.half_width == 0.5
        assert world.pool(ObjectCategory.BARRIER).objects[0].extent.local_max_z == 1.0

    def test_tick_updates_context(self, world_config: WorldConfig) -> None:
        context = SceneContext()
        world = World(world_config, context=context).build()

        world.tick(12.5)
        world.tick(13.0)

        assert context.camera_z == 13.0
        assert context.tick_count == 2

    def test_same_seed_builds_same_world(self, world_config: WorldConfig) -> None:
        first = World(world_config).build()
        second = World(world_config).build()

        assert (
            first.pool(ObjectCategory.BARRIER).positions()
            == second.pool(ObjectCategory.BARRIER).positions()
        )

    def test_road_stays_ahead_of_camera(self, world_config: WorldConfig) -> None:
        world = World(world_config).build()
        road = world.pool(ObjectCategory.ROAD_SEGMENT)

        camera_z = 0.0
        for _ in range(5000):
            camera_z += 1.0
            world.tick(camera_z)
            assert road.frontmost_far_edge() > camera_z + world_config.visible_range

    def test_blocked_barriers_scans_between_barriers(self, world_config: WorldConfig) -> None:
        """各バリア位置では通れても、その間で塞がれていれば検出する."""
        world = World(world_config).build()
        barriers = world.pool(ObjectCategory.BARRIER)
        for obj in barriers:
            obj.position.z = 10_000.0 + 100.0 * obj.id
        first, second = barriers.objects[:2]
        first.position.x, first.position.z = -1.0, 100.0
        second.position.x, second.position.z = 1.1, 103.0

        assert world.blocked_z() == [101.5]
        assert world.blocked_barriers() == [first, second]

    def test_default_world_is_never_blocked(self, world_config: WorldConfig) -> None:
        world = World(world_config).build()

        assert world.blocked_z() == []
        assert world.blocked_barriers() == []
