"""Shared fixtures."""

import numpy as np
import pytest

from roadloop.config import WorldConfig, load_world_config
from roadloop.placement import PlacementConstraints


@pytest.fixture
def world_config() -> WorldConfig:
    """Packaged defaults with a fixed seed."""
    return load_world_config(overrides={"seed": 1234})


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(42)


@pytest.fixture
def default_constraints(world_config: WorldConfig) -> PlacementConstraints:
    return PlacementConstraints.from_policy(world_config.barriers, world_config.road)


@pytest.fixture
def loose_constraints() -> PlacementConstraints:
    """Small, permissive constraints for crafting saturated scenarios."""
    return PlacementConstraints(
        min_distance=1.0,
        x_tolerance=2.0,
        same_side_z_spacing=1.0,
        opposite_side_z_spacing=0.0,
        left_threshold=-0.5,
        right_threshold=0.5,
        z_tolerance=2.0,
        half_width=0.25,
        left_band=(-3.0, -1.0),
        right_band=(1.0, 3.0),
        road_left_edge=-3.0,
        road_right_edge=3.0,
        required_passage_width=1.6,
        max_attempts=300,
        secondary_attempts=100,
    )
