"""Per-category relocation strategies."""

from abc import ABC, abstractmethod
from collections.abc import Sequence

from roadloop.data import (
    Extent,
    PlacedObject,
    PlacementTier,
    PlanarPoint,
    Position,
    SideHint,
    ZWindow,
)
from roadloop.placement import PlacementGenerator


class RelocationStrategy(ABC):
    """Base class for computing initial and recycled positions."""

    @abstractmethod
    def initial_position(
        self, object_id: int, extent: Extent, placed: Sequence[PlacedObject]
    ) -> Position:
        """Compute the spawn position of a new object.

        Args:
            object_id: Id the object will receive
            extent: Extent of the object
            placed: Objects already created in the pool, in spawn order

        Returns:
            Initial position
        """
        raise NotImplementedError

    @abstractmethod
    def relocate(
        self, obj: PlacedObject, others: Sequence[PlacedObject], camera_z: float
    ) -> Position:
        """Compute the position of an object that fell behind the camera.

        Args:
            obj: Object being recycled
            others: Every other object of the pool
            camera_z: Current camera longitudinal position

        Returns:
            New position ahead of the camera
        """
        raise NotImplementedError

    def correct_drift(self, obj: PlacedObject) -> None:
        """Re-assert invariant coordinates of an object. Called every tick."""

    @property
    def tiers(self) -> dict[int, PlacementTier]:
        """Tier of the latest placement per object id. Empty unless sampled."""
        return {}


class ChainedSegmentStrategy(RelocationStrategy):
    """Butt road segments end to end with a small overlap to hide seams."""

    def __init__(self, segment_overlap: float, start_z: float, x: float, y: float) -> None:
        self.segment_overlap = segment_overlap
        self.start_z = start_z
        self.x = x
        self.y = y

    def _anchor_after(self, far_edge: float, extent: Extent) -> float:
        return far_edge - self.segment_overlap - extent.local_min_z

    def initial_position(
        self, object_id: int, extent: Extent, placed: Sequence[PlacedObject]
    ) -> Position:
        if not placed:
            return Position(self.x, self.y, self.start_z)
        return Position(self.x, self.y, self._anchor_after(placed[-1].far_edge, extent))

    def relocate(
        self, obj: PlacedObject, others: Sequence[PlacedObject], camera_z: float
    ) -> Position:
        if not others:
            # Single segment: start it at the camera.
            return Position(self.x, self.y, camera_z - obj.extent.local_min_z)
        frontmost = max(other.far_edge for other in others)
        return Position(self.x, self.y, self._anchor_after(frontmost, obj.extent))


class GridStrategy(RelocationStrategy):
    """Keep objects on a fixed arithmetic grid along z.

    Recycled positions are snapped to the grid instead of accumulated, so
    spacing stays exact however many times objects are recycled.
    """

    def __init__(
        self,
        spacing: float,
        x: float,
        y: float,
        z_offset: float = 0.0,
        start_z: float = 0.0,
        lone_reference_ahead: float = 10.0,
    ) -> None:
        """Initialize strategy.

        Args:
            spacing: Grid spacing along z
            x: Lateral position of every object
            y: Vertical position of every object
            z_offset: Grid offset along z
            start_z: z of the first object before the offset
            lone_reference_ahead: Distance ahead of the camera used as the
                frontmost reference when no other object exists
        """
        self.spacing = spacing
        self.x = x
        self.y = y
        self.z_offset = z_offset
        self.start_z = start_z
        self.lone_reference_ahead = lone_reference_ahead

    def snap_after(self, frontmost_z: float) -> float:
        """Next grid slot after ``frontmost_z``."""
        slot = round((frontmost_z - self.z_offset) / self.spacing)
        return slot * self.spacing + self.spacing + self.z_offset

    def initial_position(
        self, object_id: int, extent: Extent, placed: Sequence[PlacedObject]
    ) -> Position:
        z = self.start_z + self.z_offset + object_id * self.spacing
        return Position(self.x, self.y, z)

    def relocate(
        self, obj: PlacedObject, others: Sequence[PlacedObject], camera_z: float
    ) -> Position:
        if others:
            frontmost = max(other.position.z for other in others)
        else:
            frontmost = camera_z + self.lone_reference_ahead
        return Position(self.x, self.y, self.snap_after(frontmost))

    def correct_drift(self, obj: PlacedObject) -> None:
        obj.position.x = self.x
        obj.position.y = self.y


class ConstrainedSearchStrategy(RelocationStrategy):
    """Place objects with the placement generator, avoiding the rest of the pool."""

    def __init__(
        self,
        generator: PlacementGenerator,
        initial_window: ZWindow,
        ahead_distance: float,
        y: float,
        initial_side_hints: Sequence[SideHint] = (SideHint.RIGHT, SideHint.LEFT),
    ) -> None:
        """Initialize strategy.

        Args:
            generator: Placement generator
            initial_window: z range used when the pool is first populated
            ahead_distance: Distance ahead of the camera where recycled objects land
            y: Ground placement height
            initial_side_hints: Side hints for the first objects; the rest use EITHER
        """
        self.generator = generator
        self.initial_window = initial_window
        self.ahead_distance = ahead_distance
        self.y = y
        self.initial_side_hints = tuple(initial_side_hints)
        self._tiers: dict[int, PlacementTier] = {}

    @property
    def tiers(self) -> dict[int, PlacementTier]:
        return self._tiers

    @staticmethod
    def _planar(objects: Sequence[PlacedObject]) -> list[PlanarPoint]:
        return [PlanarPoint(o.position.x, o.position.z) for o in objects]

    def recycle_window(self, camera_z: float) -> ZWindow:
        return self.initial_window.shifted(camera_z + self.ahead_distance)

    def initial_position(
        self, object_id: int, extent: Extent, placed: Sequence[PlacedObject]
    ) -> Position:
        if object_id < len(self.initial_side_hints):
            side = self.initial_side_hints[object_id]
        else:
            side = SideHint.EITHER
        result = self.generator.generate(side, self._planar(placed), self.initial_window)
        self._tiers[object_id] = result.tier
        return Position(result.x, self.y, result.z)

    def relocate(
        self, obj: PlacedObject, others: Sequence[PlacedObject], camera_z: float
    ) -> Position:
        result = self.generator.generate(
            SideHint.EITHER, self._planar(others), self.recycle_window(camera_z)
        )
        self._tiers[obj.id] = result.tier
        return Position(result.x, self.y, result.z)
