"""Tests for the Hydra drive entry point."""

import pytest
from hydra import compose, initialize_config_module

from roadloop.cli import run_drive
from roadloop.context import SceneContext
from roadloop.data import ObjectCategory


@pytest.fixture
def cfg():
    with initialize_config_module(version_base=None, config_module="roadloop.conf"):
        yield compose(
            config_name="config",
            overrides=["drive.ticks=400", "drive.speed=0.5", "+world.seed=7"],
        )


def test_run_drive_advances_camera(cfg) -> None:
    context = SceneContext()

    world = run_drive(cfg, context)

    assert context.tick_count == 400
    assert context.camera_z == pytest.approx(200.0)
    assert world.config.seed == 7
    assert world.blocked_barriers() == []
    assert world.stats is not None and world.stats.total >= 30
    assert len(world.pool(ObjectCategory.BARRIER)) == 30
