"""Model asset lookup and readiness events.

Asset loading itself happens outside the core. The core only learns that a
model is ready and how large it is.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from roadloop.data import Extent, ObjectCategory

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ModelReady:
    """A category's model finished loading."""

    category: ObjectCategory
    extent: Extent
    source: Path | None = None


def resolve_model_path(candidates: Sequence[str | Path], search_root: str | Path) -> Path:
    """Return the first candidate path that exists.

    Args:
        candidates: Relative (or absolute) paths, tried in order
        search_root: Directory relative paths are resolved against

    Returns:
        Resolved path of the first existing candidate

    Raises:
        FileNotFoundError: If no candidate exists
    """
    root = Path(search_root).expanduser()
    tried = []
    for candidate in candidates:
        path = Path(candidate).expanduser()
        if not path.is_absolute():
            path = root / path
        if path.is_file():
            logger.info(f"Resolved model file: {path}")
            return path
        logger.debug(f"Model file not found at {path}, trying next candidate")
        tried.append(str(path))

    msg = f"Model file not found. Tried: {tried}"
    raise FileNotFoundError(msg)


def extent_from_bounds(
    min_xyz: Sequence[float], max_xyz: Sequence[float], anchor_z: float = 0.0
) -> Extent:
    """Derive an extent from a model's bounding box.

    Args:
        min_xyz: Bounding box minimum (x, y, z)
        max_xyz: Bounding box maximum (x, y, z)
        anchor_z: z of the model's anchor, for offsets relative to the anchor

    Returns:
        Extent with the lateral half width and anchor-relative z bounds
    """
    if any(hi < lo for lo, hi in zip(min_xyz, max_xyz, strict=True)):
        msg = f"Invalid bounds: min={tuple(min_xyz)}, max={tuple(max_xyz)}"
        raise ValueError(msg)
    return Extent(
        half_width=(max_xyz[0] - min_xyz[0]) / 2.0,
        local_min_z=min_xyz[2] - anchor_z,
        local_max_z=max_xyz[2] - anchor_z,
    )
