"""Geometry helpers for placement and collision checks."""

from roadloop.geometry.footprint import check_overlap, find_overlaps, get_footprint
from roadloop.geometry.spatial import (
    as_positions,
    find_blocked_z,
    free_passages,
    has_lane_clearance,
    has_lane_clearance_around,
    has_opposite_side_spacing,
    has_same_side_spacing,
    is_far_enough,
    lane_checkpoints,
)

__all__ = [
    "as_positions",
    "check_overlap",
    "find_blocked_z",
    "find_overlaps",
    "free_passages",
    "get_footprint",
    "has_lane_clearance",
    "has_lane_clearance_around",
    "has_opposite_side_spacing",
    "has_same_side_spacing",
    "is_far_enough",
    "lane_checkpoints",
]
