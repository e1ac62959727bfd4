"""Ground-plane footprints and overlap detection."""

from collections.abc import Iterable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from shapely.geometry import Polygon

    from roadloop.data import PlacedObject


def get_footprint(obj: "PlacedObject") -> "Polygon":
    """Get the axis-aligned ground footprint of an object.

    Args:
        obj: Placed object

    Returns:
        Shapely Polygon in (x, z) coordinates
    """
    from shapely.geometry import box

    x = obj.position.x
    half_width = obj.extent.half_width
    return box(x - half_width, obj.near_edge, x + half_width, obj.far_edge)


def check_overlap(footprint_a: "Polygon", footprint_b: "Polygon") -> bool:
    """Check whether two footprints share area (touching edges do not count)."""
    return footprint_a.intersects(footprint_b) and not footprint_a.touches(footprint_b)


def find_overlaps(objects: Iterable["PlacedObject"]) -> list[tuple[str, str]]:
    """Find all pairs of objects whose footprints overlap.

    Args:
        objects: Objects to check

    Returns:
        List of ``(name_a, name_b)`` pairs in input order
    """
    items = [(obj.name, get_footprint(obj)) for obj in objects]
    overlaps = []
    for i, (name_a, fp_a) in enumerate(items):
        for name_b, fp_b in items[i + 1 :]:
            if check_overlap(fp_a, fp_b):
                overlaps.append((name_a, name_b))
    return overlaps
