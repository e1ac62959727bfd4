"""Finite object pool that recycles objects from behind the camera to ahead of it."""

import logging
from collections.abc import Iterator, Sequence

from roadloop.data import Extent, ObjectCategory, PlacedObject, PlacementTier, PlanarPoint
from roadloop.pool.strategy import RelocationStrategy

logger = logging.getLogger(__name__)


class RecyclablePool[S: RelocationStrategy]:
    """Pool of scenery objects of one category.

    Objects are created once by :meth:`initialize` and then only moved by
    :meth:`tick`. Identity, extent, variant and rotation never change.
    """

    def __init__(
        self, category: ObjectCategory, strategy: S, recycle_threshold: float
    ) -> None:
        """Initialize pool.

        Args:
            category: Category of every object in the pool
            strategy: Relocation strategy
            recycle_threshold: Distance behind the camera after which objects are recycled
        """
        if recycle_threshold < 0:
            msg = f"recycle_threshold must be >= 0, got {recycle_threshold}"
            raise ValueError(msg)
        self.category = category
        self.strategy: S = strategy
        self.recycle_threshold = recycle_threshold
        self.objects: list[PlacedObject] = []

    def __len__(self) -> int:
        return len(self.objects)

    def __iter__(self) -> Iterator[PlacedObject]:
        return iter(self.objects)

    @property
    def initialized(self) -> bool:
        return bool(self.objects)

    def initialize(
        self,
        count: int,
        extent: Extent,
        name_prefix: str,
        variants: Sequence[str] = (),
        rotation: tuple[float, float, float] = (0.0, 0.0, 0.0),
    ) -> list[PlacedObject]:
        """Populate the pool.

        Args:
            count: Number of objects to create
            extent: Extent shared by every object
            name_prefix: Object names are ``{name_prefix}_{n}`` starting at 1
            variants: Model variants assigned round-robin
            rotation: Fixed rotation of every object

        Returns:
            The created objects in spawn order

        Raises:
            RuntimeError: If the pool was already initialized
        """
        if self.objects:
            msg = f"Pool '{self.category.value}' is already initialized"
            raise RuntimeError(msg)

        for object_id in range(count):
            position = self.strategy.initial_position(object_id, extent, self.objects)
            self.objects.append(
                PlacedObject(
                    id=object_id,
                    name=f"{name_prefix}_{object_id + 1}",
                    category=self.category,
                    position=position,
                    extent=extent,
                    variant=variants[object_id % len(variants)] if variants else None,
                    rotation=rotation,
                )
            )

        if self.objects:
            logger.info(
                f"Initialized {self.category.value} pool with {count} objects "
                f"(z=[{self.objects[0].position.z:.2f}, {self.objects[-1].position.z:.2f}])"
            )
        return list(self.objects)

    def needs_recycling(self, obj: PlacedObject, camera_z: float) -> bool:
        return obj.far_edge < camera_z - self.recycle_threshold

    def tick(self, camera_z: float) -> list[PlacedObject]:
        """Recycle every object that fell behind the camera.

        Objects are processed in pool order; each relocation sees the current
        positions of all other objects, including ones moved earlier in the
        same tick.

        Args:
            camera_z: Current camera longitudinal position

        Returns:
            Objects that were relocated
        """
        moved = []
        for obj in self.objects:
            if not self.needs_recycling(obj, camera_z):
                continue
            others = [other for other in self.objects if other is not obj]
            new_position = self.strategy.relocate(obj, others, camera_z)
            old_z = obj.position.z
            obj.position.x = new_position.x
            obj.position.y = new_position.y
            obj.position.z = new_position.z
            moved.append(obj)
            logger.debug(f"Recycled {obj.name}: z {old_z:.2f} -> {new_position.z:.2f}")

        for obj in self.objects:
            self.strategy.correct_drift(obj)

        return moved

    def positions(self) -> list[tuple[float, float, float]]:
        return [obj.position.as_tuple() for obj in self.objects]

    def planar_positions(self, exclude: PlacedObject | None = None) -> list[PlanarPoint]:
        return [
            PlanarPoint(obj.position.x, obj.position.z)
            for obj in self.objects
            if obj is not exclude
        ]

    def frontmost_far_edge(self, exclude: PlacedObject | None = None) -> float:
        """Largest far edge among pooled objects, or -inf when there are none."""
        edges = [obj.far_edge for obj in self.objects if obj is not exclude]
        return max(edges, default=float("-inf"))

    @property
    def placement_tiers(self) -> dict[int, PlacementTier]:
        """Tier of the latest placement per object id (constrained pools only)."""
        return dict(self.strategy.tiers)
