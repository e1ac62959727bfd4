"""Scenery world: pools for every category driven by the camera position."""

import logging
import math

import numpy as np

from roadloop.assets import ModelReady
from roadloop.config import WorldConfig
from roadloop.context import SceneContext
from roadloop.data import Extent, ObjectCategory, PlacedObject
from roadloop.geometry.spatial import find_blocked_z
from roadloop.placement import PlacementConstraints, PlacementGenerator, PlacementStats
from roadloop.pool import (
    ChainedSegmentStrategy,
    ConstrainedSearchStrategy,
    GridStrategy,
    RecyclablePool,
)

logger = logging.getLogger(__name__)

# Road first so scenery never recycles against a stale road end.
TICK_ORDER = (
    ObjectCategory.ROAD_SEGMENT,
    ObjectCategory.STREETLIGHT_REGULAR,
    ObjectCategory.STREETLIGHT_MIRROR,
    ObjectCategory.BARRIER,
)

NAME_PREFIXES = {
    ObjectCategory.ROAD_SEGMENT: "road_segment",
    ObjectCategory.STREETLIGHT_REGULAR: "streetlight",
    ObjectCategory.STREETLIGHT_MIRROR: "streetlight_mirror",
    ObjectCategory.BARRIER: "barrier",
}

STREETLIGHT_CATEGORIES = (ObjectCategory.STREETLIGHT_REGULAR, ObjectCategory.STREETLIGHT_MIRROR)


class World:
    """Own the scenery pools and recycle them as the camera advances."""

    def __init__(
        self,
        config: WorldConfig,
        context: SceneContext | None = None,
        rng: np.random.Generator | None = None,
    ) -> None:
        """Initialize world.

        Args:
            config: Validated world configuration
            context: Scene context (a new one is created if omitted)
            rng: Random number generator (seeded from ``config.seed`` if omitted)
        """
        self.config = config
        self.context = context if context is not None else SceneContext()
        self.rng = rng if rng is not None else np.random.default_rng(config.seed)
        self.pools: dict[ObjectCategory, RecyclablePool] = {}
        self.generator: PlacementGenerator | None = None

    def default_extent(self, category: ObjectCategory) -> Extent:
        """Extent used when no model reported its own."""
        if category is ObjectCategory.ROAD_SEGMENT:
            half_length = self.config.road_segments.segment_length / 2.0
            return Extent.symmetric(self.config.road.width / 2.0, half_length)
        if category in STREETLIGHT_CATEGORIES:
            lights = self.config.streetlights
            return Extent.symmetric(lights.half_width, lights.half_length)
        barriers = self.config.barriers
        return Extent.symmetric(barriers.half_width, barriers.half_length)

    def _create_pool(self, category: ObjectCategory, extent: Extent) -> RecyclablePool:
        threshold = self.config.recycle_threshold

        if category is ObjectCategory.ROAD_SEGMENT:
            road = self.config.road_segments
            strategy = ChainedSegmentStrategy(road.segment_overlap, road.start_z, road.x, road.y)
            return RecyclablePool(category, strategy, threshold)

        if category in STREETLIGHT_CATEGORIES:
            lights = self.config.streetlights
            mirror = category is ObjectCategory.STREETLIGHT_MIRROR
            strategy = GridStrategy(
                spacing=lights.spacing,
                x=lights.x_mirror if mirror else lights.x_regular,
                y=lights.y,
                z_offset=lights.mirror_z_offset if mirror else 0.0,
                start_z=lights.start_z,
            )
            return RecyclablePool(category, strategy, threshold)

        barriers = self.config.barriers
        constraints = PlacementConstraints.from_policy(barriers, self.config.road).model_copy(
            update={"half_width": extent.half_width}
        )
        self.generator = PlacementGenerator(constraints, self.rng)
        strategy = ConstrainedSearchStrategy(
            self.generator, barriers.window, barriers.ahead_distance, barriers.y
        )
        return RecyclablePool(category, strategy, threshold)

    def _initialize_pool(self, category: ObjectCategory, extent: Extent) -> list[PlacedObject]:
        pool = self._create_pool(category, extent)
        prefix = NAME_PREFIXES[category]

        if category is ObjectCategory.ROAD_SEGMENT:
            created = pool.initialize(self.config.road_segments.count, extent, prefix)
        elif category in STREETLIGHT_CATEGORIES:
            if category is ObjectCategory.STREETLIGHT_MIRROR:
                rotation = (0.0, math.pi, 0.0)
            else:
                rotation = (0.0, 0.0, 0.0)
            created = pool.initialize(
                self.config.streetlights.count, extent, prefix, rotation=rotation
            )
        else:
            barriers = self.config.barriers
            created = pool.initialize(barriers.count, extent, prefix, variants=barriers.variants)

        self.pools[category] = pool
        self.context.register_all(created)
        return created

    def on_model_ready(self, event: ModelReady) -> list[PlacedObject]:
        """Create the pool(s) for a category whose model finished loading.

        Streetlight readiness creates both the regular and mirrored pools.

        Args:
            event: Readiness event carrying the model extent

        Returns:
            Newly created objects
        """
        if event.category in STREETLIGHT_CATEGORIES:
            categories = STREETLIGHT_CATEGORIES
        else:
            categories = (event.category,)

        created = []
        for category in categories:
            if category in self.pools:
                logger.warning(f"Pool for {category.value} already initialized, ignoring model")
                continue
            created.extend(self._initialize_pool(category, event.extent))
        return created

    def build(self) -> "World":
        """Initialize every pool from the configured default extents."""
        for category in (
            ObjectCategory.ROAD_SEGMENT,
            ObjectCategory.STREETLIGHT_REGULAR,
            ObjectCategory.BARRIER,
        ):
            self.on_model_ready(ModelReady(category=category, extent=self.default_extent(category)))
        return self

    def pool(self, category: ObjectCategory) -> RecyclablePool:
        try:
            return self.pools[category]
        except KeyError:
            msg = f"Pool for {category.value} is not initialized"
            raise KeyError(msg) from None

    @property
    def stats(self) -> PlacementStats | None:
        """Barrier placement statistics, once the barrier pool exists."""
        return self.generator.stats if self.generator is not None else None

    def tick(self, camera_z: float) -> dict[ObjectCategory, list[PlacedObject]]:
        """Advance the world to a new camera position.

        Args:
            camera_z: Camera longitudinal position for this tick

        Returns:
            Relocated objects per initialized category
        """
        self.context.camera_z = camera_z
        self.context.tick_count += 1

        moved = {}
        for category in TICK_ORDER:
            pool = self.pools.get(category)
            if pool is None:
                continue
            moved[category] = pool.tick(camera_z)
        return moved

    def blocked_z(self) -> list[float]:
        """z values along the barrier span where no passage of the required width remains."""
        pool = self.pools.get(ObjectCategory.BARRIER)
        if pool is None or self.generator is None:
            return []

        c = self.generator.constraints
        return find_blocked_z(
            pool.planar_positions(),
            c.z_tolerance,
            c.road_left_edge,
            c.road_right_edge,
            c.required_passage_width,
            c.half_width,
            c.lane_scan_step,
        )

    def blocked_barriers(self) -> list[PlacedObject]:
        """Barriers taking part in a blockage, in pool order."""
        blocked = self.blocked_z()
        if not blocked:
            return []

        tolerance = self.generator.constraints.z_tolerance
        return [
            obj
            for obj in self.pools[ObjectCategory.BARRIER]
            if any(abs(obj.position.z - z) <= tolerance for z in blocked)
        ]
