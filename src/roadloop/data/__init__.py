"""Core data structures."""

from roadloop.data.placement import (
    PlacementResult,
    PlacementTier,
    PlanarPoint,
    SideHint,
    ZWindow,
)
from roadloop.data.scenery import Extent, ObjectCategory, PlacedObject, Position

__all__ = [
    "Extent",
    "ObjectCategory",
    "PlacedObject",
    "PlacementResult",
    "PlacementTier",
    "PlanarPoint",
    "Position",
    "SideHint",
    "ZWindow",
]
