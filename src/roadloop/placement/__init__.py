"""Placement generation."""

from roadloop.placement.generator import PlacementConstraints, PlacementGenerator, PlacementStats

__all__ = ["PlacementConstraints", "PlacementGenerator", "PlacementStats"]
