"""Placement request/result data structures."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import NamedTuple


class PlanarPoint(NamedTuple):
    """Ground-plane position (lateral x, longitudinal z)."""

    x: float
    z: float


class SideHint(str, Enum):
    """Which lateral band a new object should prefer."""

    LEFT = "left"
    RIGHT = "right"
    EITHER = "either"


class PlacementTier(IntEnum):
    """Tier that produced a placement, from strictest to the unvalidated fallback."""

    STRICT = 1
    ANY_SIDE = 2
    FALLBACK = 3


@dataclass(frozen=True)
class ZWindow:
    """Longitudinal range [min_z, max_z] used for sampling."""

    min_z: float
    max_z: float

    def __post_init__(self) -> None:
        if self.max_z < self.min_z:
            msg = f"Invalid z window: max_z ({self.max_z}) < min_z ({self.min_z})"
            raise ValueError(msg)

    @property
    def length(self) -> float:
        return self.max_z - self.min_z

    def shifted(self, anchor: float) -> ZWindow:
        """Return a window of the same length starting at ``anchor``."""
        return ZWindow(min_z=anchor, max_z=anchor + self.length)

    def contains(self, z: float) -> bool:
        return self.min_z <= z <= self.max_z


@dataclass(frozen=True)
class PlacementResult:
    """Outcome of a placement request."""

    x: float
    z: float
    tier: PlacementTier
    attempts: int

    @property
    def is_fallback(self) -> bool:
        return self.tier is PlacementTier.FALLBACK

    @property
    def point(self) -> PlanarPoint:
        return PlanarPoint(self.x, self.z)
