#!/usr/bin/env python3
"""Simulate a drive along the endless road from Hydra configuration."""

import logging
from collections import Counter

import hydra
from hydra.utils import to_absolute_path
from omegaconf import DictConfig, OmegaConf

from roadloop.config import load_world_config
from roadloop.context import SceneContext
from roadloop.data import ObjectCategory
from roadloop.layout import dump_layout, export_layout
from roadloop.utils.logging import configure_logging
from roadloop.world import World

logger = logging.getLogger(__name__)


def run_drive(cfg: DictConfig, context: SceneContext) -> World:
    """Build the world and advance the camera for ``cfg.drive.ticks`` ticks.

    Args:
        cfg: Hydra configuration object
        context: Scene context shared with logging

    Returns:
        The world after the drive
    """
    world_path = cfg.get("world_config")
    if world_path:
        world_path = to_absolute_path(world_path)
    overrides = OmegaConf.to_container(cfg.get("world", {}), resolve=True) or {}
    config = load_world_config(world_path, overrides)

    world = World(config, context=context).build()

    camera_z = float(cfg.drive.start_z)
    relocations: Counter[ObjectCategory] = Counter()
    blocked_ticks = 0

    for _ in range(int(cfg.drive.ticks)):
        camera_z += float(cfg.drive.speed)
        moved = world.tick(camera_z)
        for category, objects in moved.items():
            relocations[category] += len(objects)

        if moved.get(ObjectCategory.BARRIER):
            blocked_z = world.blocked_z()
            if blocked_z:
                blocked_ticks += 1
                names = [obj.name for obj in world.blocked_barriers()]
                logger.warning(f"Lane blocked at z={blocked_z[0]:.2f} around: {names}")

    for category, count in relocations.items():
        logger.info(f"{category.value}: {count} relocations")

    stats = world.stats
    if stats is not None:
        tiers = ", ".join(f"{tier.name.lower()}={count}" for tier, count in stats.counts.items())
        logger.info(
            f"Barrier placements: {stats.total} ({tiers}), "
            f"fallback rate={stats.fallback_rate:.3%}"
        )
    if blocked_ticks:
        logger.warning(f"Lane clearance violated on {blocked_ticks} ticks")

    return world


@hydra.main(version_base=None, config_path="conf", config_name="config")
def main(cfg: DictConfig) -> None:
    """Run a headless drive with Hydra configuration.

    Args:
        cfg: Hydra configuration object
    """
    context = SceneContext()
    configure_logging(context, cfg.get("log_level", "INFO"))
    logger.debug(f"Configuration:\n{OmegaConf.to_yaml(cfg)}")

    world = run_drive(cfg, context)

    export_path = cfg.layout.get("export_path")
    if export_path:
        items = export_layout(context, mirror_x=world.config.streetlights.x_mirror)
        dump_layout(items, to_absolute_path(export_path))

    logger.info(f"Drive finished at z={context.camera_z:.2f} after {context.tick_count} ticks")


if __name__ == "__main__":
    main()
