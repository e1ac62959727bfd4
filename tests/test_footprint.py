"""Tests for footprint overlap detection."""

from roadloop.data import Extent, ObjectCategory, PlacedObject, Position
from roadloop.geometry import check_overlap, find_overlaps, get_footprint


def make_barrier(index: int, x: float, z: float) -> PlacedObject:
    return PlacedObject(
        id=index,
        name=f"barrier_{index + 1}",
        category=ObjectCategory.BARRIER,
        position=Position(x=x, y=0.75, z=z),
        extent=Extent.symmetric(0.75, 0.75),
    )


def test_footprint_bounds() -> None:
    footprint = get_footprint(make_barrier(0, 2.0, 10.0))

    assert footprint.bounds == (1.25, 9.25, 2.75, 10.75)


def test_touching_footprints_do_not_overlap() -> None:
    a = get_footprint(make_barrier(0, 0.0, 0.0))
    b = get_footprint(make_barrier(1, 1.5, 0.0))

    assert not check_overlap(a, b)


def test_find_overlaps() -> None:
    barriers = [
        make_barrier(0, 2.0, 10.0),
        make_barrier(1, 2.5, 10.5),
        make_barrier(2, -2.0, 10.0),
        make_barrier(3, 2.0, 30.0),
    ]

    assert find_overlaps(barriers) == [("barrier_1", "barrier_2")]
