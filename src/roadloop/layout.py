"""Scenery layout export and import.

A layout is a JSON list of named object transforms. Mirrored streetlights
always carry the configured mirror x, whatever was stored.
"""

import json
import logging
from collections.abc import Sequence
from pathlib import Path

from pydantic import BaseModel, Field, TypeAdapter

from roadloop.context import SceneContext
from roadloop.data import ObjectCategory
from roadloop.geometry.footprint import find_overlaps

logger = logging.getLogger(__name__)


class Vector3(BaseModel):
    """x/y/z triple."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0


class LayoutItem(BaseModel):
    """One object entry of a layout file."""

    name: str = Field(..., description="Registered object name")
    position: Vector3 = Field(..., description="World position")
    rotation: Vector3 = Field(default_factory=Vector3, description="Euler rotation [rad]")


_LAYOUT_ADAPTER = TypeAdapter(list[LayoutItem])


def export_layout(context: SceneContext, mirror_x: float | None = None) -> list[LayoutItem]:
    """Snapshot every registered object.

    Args:
        context: Scene context
        mirror_x: Lateral position forced on mirrored streetlights

    Returns:
        Layout items in registration order
    """
    items = []
    for obj in context.objects():
        x = obj.position.x
        if mirror_x is not None and obj.category is ObjectCategory.STREETLIGHT_MIRROR:
            x = mirror_x
        rx, ry, rz = obj.rotation
        items.append(
            LayoutItem(
                name=obj.name,
                position=Vector3(x=x, y=obj.position.y, z=obj.position.z),
                rotation=Vector3(x=rx, y=ry, z=rz),
            )
        )
    return items


def dump_layout(items: Sequence[LayoutItem], file_path: str | Path) -> None:
    """Write a layout to a JSON file."""
    file_path = Path(file_path)
    file_path.parent.mkdir(parents=True, exist_ok=True)
    data = [item.model_dump() for item in items]
    with open(file_path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)
    logger.info(f"Exported layout with {len(items)} objects to {file_path}")


def read_layout(file_path: str | Path) -> list[LayoutItem]:
    """Read and validate a layout JSON file.

    Raises:
        FileNotFoundError: If the file does not exist
        pydantic.ValidationError: If an entry is malformed
    """
    file_path = Path(file_path)
    if not file_path.exists():
        raise FileNotFoundError(f"Layout file not found: {file_path}")

    with open(file_path, encoding="utf-8") as f:
        data = json.load(f)
    return _LAYOUT_ADAPTER.validate_python(data)


def apply_layout(
    context: SceneContext, items: Sequence[LayoutItem], mirror_x: float | None = None
) -> int:
    """Move registered objects to the positions stored in a layout.

    Unknown names are skipped with a warning. Rotation is fixed per object and
    is not applied.

    Args:
        context: Scene context
        items: Layout entries
        mirror_x: Lateral position forced on mirrored streetlights

    Returns:
        Number of entries applied
    """
    applied = 0
    for item in items:
        obj = context.get(item.name)
        if obj is None:
            logger.warning(f"Object not found in registry: {item.name}")
            continue

        x = item.position.x
        if mirror_x is not None and obj.category is ObjectCategory.STREETLIGHT_MIRROR:
            x = mirror_x
        obj.position.x = x
        obj.position.y = item.position.y
        obj.position.z = item.position.z
        applied += 1

    barriers = [obj for obj in context.objects() if obj.category is ObjectCategory.BARRIER]
    for name_a, name_b in find_overlaps(barriers):
        logger.warning(f"Barriers overlap after layout load: {name_a} / {name_b}")

    logger.info(f"Applied {applied}/{len(items)} layout entries")
    return applied
