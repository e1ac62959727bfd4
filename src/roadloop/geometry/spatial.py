"""Spatial predicates for scenery placement.

All functions are pure and operate on a candidate position and the ground-plane
positions ``(x, z)`` of objects that are already placed. ``existing`` may be a
sequence of pairs or an ``(N, 2)`` numpy array.
"""

from collections.abc import Sequence

import numpy as np
import numpy.typing as npt

PositionsLike = Sequence[tuple[float, float]] | npt.NDArray[np.float64]

LEFT = -1
NEITHER = 0
RIGHT = 1


def as_positions(existing: PositionsLike) -> npt.NDArray[np.float64]:
    """Coerce positions into an ``(N, 2)`` float array."""
    arr = np.asarray(existing, dtype=np.float64)
    if arr.size == 0:
        return np.empty((0, 2), dtype=np.float64)
    if arr.ndim != 2 or arr.shape[1] != 2:
        msg = f"Expected positions with shape (N, 2), got {arr.shape}"
        raise ValueError(msg)
    return arr


def classify_side(x: float, left_threshold: float, right_threshold: float) -> int:
    """Return LEFT, RIGHT or NEITHER for a lateral offset."""
    if x < left_threshold:
        return LEFT
    if x > right_threshold:
        return RIGHT
    return NEITHER


def is_far_enough(
    candidate: tuple[float, float], existing: PositionsLike, min_distance: float
) -> bool:
    """Check the Euclidean distance from ``candidate`` to every existing position.

    Args:
        candidate: Candidate ``(x, z)``
        existing: Already placed positions
        min_distance: Minimum allowed distance

    Returns:
        True if no existing position is closer than ``min_distance``
    """
    arr = as_positions(existing)
    if len(arr) == 0:
        return True
    distances = np.hypot(arr[:, 0] - candidate[0], arr[:, 1] - candidate[1])
    return bool(np.all(distances >= min_distance))


def _blocking_extents(
    z: float,
    existing: PositionsLike,
    z_tolerance: float,
    road_left_edge: float,
    road_right_edge: float,
    half_width: float,
) -> tuple[npt.NDArray[np.float64], npt.NDArray[np.float64]]:
    """Lateral extents of objects near ``z`` that intersect the road band."""
    arr = as_positions(existing)
    near = arr[np.abs(arr[:, 1] - z) <= z_tolerance]
    lo = near[:, 0] - half_width
    hi = near[:, 0] + half_width
    on_road = (hi > road_left_edge) & (lo < road_right_edge)
    return lo[on_road], hi[on_road]


def has_lane_clearance(
    z: float,
    existing: PositionsLike,
    z_tolerance: float,
    road_left_edge: float,
    road_right_edge: float,
    required_passage_width: float,
    half_width: float,
    step: float = 0.1,
) -> bool:
    """Check that a car can still pass objects located around ``z``.

    Objects within ``z_tolerance`` of ``z`` occupy ``[x - half_width, x + half_width]``.
    Passage offsets are scanned across ``[road_left_edge, road_right_edge -
    required_passage_width]`` every ``step`` (the right end is always tested).

    Args:
        z: Longitudinal position to test
        existing: Object positions (including any candidate being evaluated)
        z_tolerance: Longitudinal distance within which objects count as "at" z
        road_left_edge: Left edge of the drivable band
        road_right_edge: Right edge of the drivable band
        required_passage_width: Width of the gap a car needs
        half_width: Lateral half-extent of each object
        step: Scan resolution

    Returns:
        True if a clear passage exists or no nearby object touches the road
    """
    lo, hi = _blocking_extents(
        z, existing, z_tolerance, road_left_edge, road_right_edge, half_width
    )
    if len(lo) == 0:
        return True

    last = road_right_edge - required_passage_width
    if last < road_left_edge:
        return False

    offsets = np.append(np.arange(road_left_edge, last, step), last)
    blocked = (lo[None, :] < offsets[:, None] + required_passage_width) & (
        hi[None, :] > offsets[:, None]
    )
    return bool(np.any(~blocked.any(axis=1)))


def lane_checkpoints(
    z_values: Sequence[float] | npt.NDArray[np.float64], z_tolerance: float
) -> npt.NDArray[np.float64]:
    """Longitudinal positions at which lane clearance has to be tested.

    Any group of objects that are all within ``z_tolerance`` of one z is also
    within ``z_tolerance`` of the midpoint of its nearest and farthest members.
    Testing every object's own z plus every pairwise midpoint no more than
    ``2 * z_tolerance`` apart therefore covers every z on the road.

    Args:
        z_values: Object z positions
        z_tolerance: Longitudinal distance within which objects count as "at" z

    Returns:
        Sorted unique checkpoints
    """
    zs = np.unique(np.asarray(z_values, dtype=np.float64))
    i, j = np.triu_indices(len(zs), k=1)
    close = (zs[j] - zs[i]) <= 2.0 * z_tolerance
    midpoints = (zs[i][close] + zs[j][close]) / 2.0
    return np.unique(np.concatenate([zs, midpoints]))


def has_lane_clearance_around(
    z: float,
    existing: PositionsLike,
    z_tolerance: float,
    road_left_edge: float,
    road_right_edge: float,
    required_passage_width: float,
    half_width: float,
    step: float = 0.1,
) -> bool:
    """Check lane clearance everywhere an object at ``z`` counts.

    Unlike :func:`has_lane_clearance`, this also catches an object at ``z``
    sealing the road together with a neighbour up to ``2 * z_tolerance``
    away, at a z between the two.

    Args:
        z: Longitudinal position of the object being evaluated
        existing: Object positions, including the one at ``z``
        z_tolerance: Longitudinal distance within which objects count as "at" z
        road_left_edge: Left edge of the drivable band
        road_right_edge: Right edge of the drivable band
        required_passage_width: Width of the gap a car needs
        half_width: Lateral half-extent of each object
        step: Scan resolution

    Returns:
        True if a passage stays open at every checkpoint within ``z_tolerance`` of ``z``
    """
    arr = as_positions(existing)
    nearby = arr[np.abs(arr[:, 1] - z) <= 2.0 * z_tolerance, 1]
    points = lane_checkpoints(np.append(nearby, z), z_tolerance)
    points = points[np.abs(points - z) <= z_tolerance]
    return all(
        has_lane_clearance(
            float(point),
            arr,
            z_tolerance,
            road_left_edge,
            road_right_edge,
            required_passage_width,
            half_width,
            step,
        )
        for point in points
    )


def find_blocked_z(
    existing: PositionsLike,
    z_tolerance: float,
    road_left_edge: float,
    road_right_edge: float,
    required_passage_width: float,
    half_width: float,
    step: float = 0.1,
) -> list[float]:
    """Checkpoints along the whole object span where no passage is left.

    Returns:
        Blocked z values in increasing order (empty when the road is passable)
    """
    arr = as_positions(existing)
    if len(arr) == 0:
        return []
    return [
        float(point)
        for point in lane_checkpoints(arr[:, 1], z_tolerance)
        if not has_lane_clearance(
            float(point),
            arr,
            z_tolerance,
            road_left_edge,
            road_right_edge,
            required_passage_width,
            half_width,
            step,
        )
    ]


def free_passages(
    z: float,
    existing: PositionsLike,
    z_tolerance: float,
    road_left_edge: float,
    road_right_edge: float,
    half_width: float,
) -> list[tuple[float, float]]:
    """Maximal lateral intervals of the road band left free around ``z``."""
    lo, hi = _blocking_extents(
        z, existing, z_tolerance, road_left_edge, road_right_edge, half_width
    )
    intervals = sorted(zip(lo.tolist(), hi.tolist(), strict=True))

    passages = []
    cursor = road_left_edge
    for start, end in intervals:
        if start > cursor:
            passages.append((cursor, min(start, road_right_edge)))
        cursor = max(cursor, end)
        if cursor >= road_right_edge:
            break
    if cursor < road_right_edge:
        passages.append((cursor, road_right_edge))
    return passages


def has_same_side_spacing(
    x: float, z: float, existing: PositionsLike, x_tolerance: float, min_z_spacing: float
) -> bool:
    """Require ``min_z_spacing`` to every object within ``x_tolerance`` laterally."""
    arr = as_positions(existing)
    same_side = np.abs(arr[:, 0] - x) <= x_tolerance
    return bool(np.all(np.abs(arr[same_side, 1] - z) >= min_z_spacing))


def has_opposite_side_spacing(
    x: float,
    z: float,
    existing: PositionsLike,
    min_z_spacing: float,
    left_threshold: float,
    right_threshold: float,
) -> bool:
    """Require ``min_z_spacing`` to every object on the opposite side of the road.

    Two objects on opposite shoulders that are close in z can seal the lane
    between them even when each one is clear on its own.
    """
    side = classify_side(x, left_threshold, right_threshold)
    if side == NEITHER:
        return True

    arr = as_positions(existing)
    if side == LEFT:
        opposite = arr[:, 0] > right_threshold
    else:
        opposite = arr[:, 0] < left_threshold
    return bool(np.all(np.abs(arr[opposite, 1] - z) >= min_z_spacing))
