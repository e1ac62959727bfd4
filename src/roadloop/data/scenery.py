"""Scenery object data structures."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class ObjectCategory(str, Enum):
    """シーナリーの種類."""

    ROAD_SEGMENT = "road_segment"
    STREETLIGHT_REGULAR = "streetlight_regular"
    STREETLIGHT_MIRROR = "streetlight_mirror"
    BARRIER = "barrier"


@dataclass
class Position:
    """World position (x: lateral, y: vertical, z: longitudinal)."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def as_tuple(self) -> tuple[float, float, float]:
        return (self.x, self.y, self.z)


@dataclass(frozen=True)
class Extent:
    """Approximate bounding extent of an object relative to its anchor.

    ``half_width`` is used for lateral collision math. ``local_min_z`` and
    ``local_max_z`` are the longitudinal bounds relative to ``position.z``.
    """

    half_width: float
    local_min_z: float
    local_max_z: float

    @classmethod
    def symmetric(cls, half_width: float, half_length: float) -> Extent:
        return cls(half_width=half_width, local_min_z=-half_length, local_max_z=half_length)

    @property
    def length(self) -> float:
        return self.local_max_z - self.local_min_z

    def near_edge(self, z: float) -> float:
        return z + self.local_min_z

    def far_edge(self, z: float) -> float:
        return z + self.local_max_z


@dataclass
class PlacedObject:
    """A pooled scenery instance.

    Only ``position`` changes after creation; the owning pool mutates it.
    """

    id: int
    name: str
    category: ObjectCategory
    position: Position
    extent: Extent
    variant: str | None = None
    rotation: tuple[float, float, float] = field(default=(0.0, 0.0, 0.0))

    @property
    def near_edge(self) -> float:
        return self.extent.near_edge(self.position.z)

    @property
    def far_edge(self) -> float:
        return self.extent.far_edge(self.position.z)
