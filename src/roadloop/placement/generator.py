"""Constrained random placement of scenery objects.

Candidates are drawn by bounded rejection sampling in three tiers of
decreasing strictness. The last tier is an unvalidated edge placement so a
request always terminates with a position.
"""

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import numpy as np
from pydantic import Field

from roadloop.config import StrictConfig
from roadloop.data import PlacementResult, PlacementTier, SideHint, ZWindow
from roadloop.geometry.spatial import (
    PositionsLike,
    as_positions,
    has_lane_clearance_around,
    has_opposite_side_spacing,
    has_same_side_spacing,
    is_far_enough,
)

if TYPE_CHECKING:
    from roadloop.config import BarrierPolicy, RoadGeometry

logger = logging.getLogger(__name__)


class PlacementConstraints(StrictConfig):
    """Rules a placed object must satisfy against already placed ones."""

    min_distance: float = Field(..., ge=0.0)
    x_tolerance: float = Field(..., ge=0.0)
    same_side_z_spacing: float = Field(..., ge=0.0)
    opposite_side_z_spacing: float = Field(..., ge=0.0)
    left_threshold: float
    right_threshold: float
    z_tolerance: float = Field(..., ge=0.0)
    half_width: float = Field(..., gt=0.0)
    left_band: tuple[float, float]
    right_band: tuple[float, float]
    road_left_edge: float
    road_right_edge: float
    required_passage_width: float = Field(..., gt=0.0)
    lane_scan_step: float = Field(0.1, gt=0.0)
    max_attempts: int = Field(200, ge=1)
    secondary_attempts: int = Field(100, ge=0)

    @classmethod
    def from_policy(cls, barriers: "BarrierPolicy", road: "RoadGeometry") -> "PlacementConstraints":
        """Build constraints from the barrier policy and road geometry."""
        return cls(
            min_distance=barriers.min_distance,
            x_tolerance=barriers.x_tolerance,
            same_side_z_spacing=barriers.same_side_z_spacing,
            opposite_side_z_spacing=barriers.opposite_side_z_spacing,
            left_threshold=barriers.left_threshold,
            right_threshold=barriers.right_threshold,
            z_tolerance=barriers.z_tolerance,
            half_width=barriers.half_width,
            left_band=barriers.left_band,
            right_band=barriers.right_band,
            road_left_edge=road.left_edge,
            road_right_edge=road.right_edge,
            required_passage_width=road.required_passage_width,
            lane_scan_step=barriers.lane_scan_step,
            max_attempts=barriers.max_attempts,
            secondary_attempts=barriers.secondary_attempts,
        )


@dataclass
class PlacementStats:
    """Counts of placements per tier."""

    counts: dict[PlacementTier, int] = field(
        default_factory=lambda: dict.fromkeys(PlacementTier, 0)
    )
    attempts: int = 0

    def record(self, result: PlacementResult) -> None:
        self.counts[result.tier] += 1
        self.attempts += result.attempts

    @property
    def total(self) -> int:
        return sum(self.counts.values())

    @property
    def fallback_rate(self) -> float:
        if self.total == 0:
            return 0.0
        return self.counts[PlacementTier.FALLBACK] / self.total


class PlacementGenerator:
    """Propose positions that satisfy the placement constraints."""

    def __init__(self, constraints: PlacementConstraints, rng: np.random.Generator) -> None:
        """Initialize generator.

        Args:
            constraints: Placement rules
            rng: Random number generator
        """
        self.constraints = constraints
        self.rng = rng
        self.stats = PlacementStats()

    def _band_for(self, side: SideHint) -> tuple[float, float]:
        if side is SideHint.RIGHT:
            return self.constraints.right_band
        if side is SideHint.LEFT:
            return self.constraints.left_band
        bands = (self.constraints.left_band, self.constraints.right_band)
        return bands[1] if self.rng.random() > 0.5 else bands[0]

    def _outer_edge(self, band: tuple[float, float]) -> float:
        """Band edge farthest from the road centre."""
        centre = (self.constraints.road_left_edge + self.constraints.road_right_edge) / 2.0
        return max(band, key=lambda edge: abs(edge - centre))

    def _sample(self, side: SideHint, window: ZWindow) -> tuple[float, float]:
        low, high = self._band_for(side)
        x = float(self.rng.uniform(low, high))
        z = float(self.rng.uniform(window.min_z, window.max_z))
        return x, z

    def is_valid(self, candidate: tuple[float, float], existing: PositionsLike) -> bool:
        """Check a candidate against every placement rule.

        Args:
            candidate: Candidate ``(x, z)``
            existing: Positions to avoid

        Returns:
            True if all rules pass
        """
        c = self.constraints
        arr = as_positions(existing)
        x, z = candidate

        if not is_far_enough(candidate, arr, c.min_distance):
            return False
        if not has_same_side_spacing(x, z, arr, c.x_tolerance, c.same_side_z_spacing):
            return False
        if not has_opposite_side_spacing(
            x, z, arr, c.opposite_side_z_spacing, c.left_threshold, c.right_threshold
        ):
            return False
        return has_lane_clearance_around(
            z,
            np.vstack([arr, [[x, z]]]),
            c.z_tolerance,
            c.road_left_edge,
            c.road_right_edge,
            c.required_passage_width,
            c.half_width,
            c.lane_scan_step,
        )

    def generate(
        self, side_hint: SideHint, existing: PositionsLike, window: ZWindow
    ) -> PlacementResult:
        """Generate a position for a new object.

        Args:
            side_hint: Preferred lateral band
            existing: Positions of already placed objects
            window: Longitudinal range to sample in

        Returns:
            The first accepted candidate, or the edge fallback when both
            sampling tiers are exhausted
        """
        arr = as_positions(existing)
        attempts = 0

        tiers = (
            (PlacementTier.STRICT, side_hint, self.constraints.max_attempts),
            (PlacementTier.ANY_SIDE, SideHint.EITHER, self.constraints.secondary_attempts),
        )
        for tier, side, draws in tiers:
            for _ in range(draws):
                attempts += 1
                x, z = self._sample(side, window)
                if self.is_valid((x, z), arr):
                    result = PlacementResult(x=x, z=z, tier=tier, attempts=attempts)
                    self.stats.record(result)
                    return result
            logger.debug(
                f"Placement tier {tier.name} exhausted after {draws} draws "
                f"(window=[{window.min_z:.1f}, {window.max_z:.1f}], existing={len(arr)})"
            )

        band = self._band_for(SideHint.EITHER)
        x = self._outer_edge(band)
        z = float(self.rng.uniform(window.min_z, window.max_z))
        result = PlacementResult(x=x, z=z, tier=PlacementTier.FALLBACK, attempts=attempts)
        self.stats.record(result)
        logger.debug(f"Using fallback placement x={x:.2f}, z={z:.2f}")
        return result
