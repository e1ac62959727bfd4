"""Endless-road scenery recycling."""

from roadloop.config import WorldConfig, load_world_config
from roadloop.context import SceneContext
from roadloop.world import World

__version__ = "0.1.0"

__all__ = [
    "SceneContext",
    "World",
    "WorldConfig",
    "load_world_config",
]
