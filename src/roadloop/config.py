"""Scenery policy configuration.

Defaults are shipped in ``default.param.yaml``; user files and overrides are
merged on top and validated here. Contradictory settings (for example a
required passage wider than the road) fail at load time.
"""

import importlib.resources
import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from roadloop.data import ZWindow

logger = logging.getLogger(__name__)


class StrictConfig(BaseModel):
    """Base configuration with strict validation (extra fields are forbidden)."""

    model_config = ConfigDict(extra="forbid")


class RoadGeometry(StrictConfig):
    """Lateral geometry of the drivable band."""

    left_edge: float = Field(..., description="Left edge of the drivable band")
    right_edge: float = Field(..., description="Right edge of the drivable band")
    car_width: float = Field(..., gt=0.0, description="Nominal car width")
    passage_margin: float = Field(..., ge=0.0, description="Extra clearance around the car")

    @property
    def width(self) -> float:
        return self.right_edge - self.left_edge

    @property
    def required_passage_width(self) -> float:
        return self.car_width + self.passage_margin

    @model_validator(mode="after")
    def _check_passable(self) -> "RoadGeometry":
        if self.left_edge >= self.right_edge:
            msg = (
                f"road.left_edge ({self.left_edge}) must be less than "
                f"road.right_edge ({self.right_edge})"
            )
            raise ValueError(msg)
        if self.required_passage_width >= self.width:
            msg = (
                f"Required passage width ({self.required_passage_width}) must be smaller than "
                f"the road width ({self.width}); lane clearance could never be satisfied"
            )
            raise ValueError(msg)
        return self


class RoadSegmentPolicy(StrictConfig):
    """Road segment chaining."""

    count: int = Field(..., ge=1, description="Number of pooled road segments")
    segment_length: float = Field(..., gt=0.0, description="Default segment length")
    segment_overlap: float = Field(..., ge=0.0, description="Overlap between butted segments")
    start_z: float = Field(..., description="Anchor z of the first segment")
    x: float = Field(..., description="Lateral anchor of every segment")
    y: float = Field(..., description="Vertical anchor of every segment")

    @model_validator(mode="after")
    def _check_overlap(self) -> "RoadSegmentPolicy":
        if self.segment_overlap >= self.segment_length:
            msg = (
                f"road_segments.segment_overlap ({self.segment_overlap}) must be smaller than "
                f"segment_length ({self.segment_length})"
            )
            raise ValueError(msg)
        return self


class StreetlightPolicy(StrictConfig):
    """Fixed grid for regular and mirrored streetlights."""

    count: int = Field(..., ge=1, description="Number of streetlights per side")
    spacing: float = Field(..., gt=0.0, description="Grid spacing along z")
    x_regular: float = Field(..., description="Lateral position of regular streetlights")
    x_mirror: float = Field(..., description="Lateral position of mirrored streetlights")
    y: float = Field(..., description="Vertical position of every streetlight")
    mirror_z_offset: float = Field(..., ge=0.0, description="Grid offset of mirrored streetlights")
    start_z: float = Field(..., description="z of the first regular streetlight")
    half_width: float = Field(..., gt=0.0)
    half_length: float = Field(..., gt=0.0)

    @model_validator(mode="after")
    def _check_offset(self) -> "StreetlightPolicy":
        if self.mirror_z_offset >= self.spacing:
            msg = (
                f"streetlights.mirror_z_offset ({self.mirror_z_offset}) must be smaller than "
                f"spacing ({self.spacing})"
            )
            raise ValueError(msg)
        return self


class BarrierPolicy(StrictConfig):
    """Constrained random placement of barriers."""

    count: int = Field(..., ge=1, description="Number of pooled barriers")
    min_distance: float = Field(..., ge=0.0, description="Minimum pairwise distance")
    same_side_z_spacing: float = Field(..., ge=0.0)
    opposite_side_z_spacing: float = Field(..., ge=0.0)
    x_tolerance: float = Field(..., ge=0.0, description="Lateral distance counted as same side")
    z_tolerance: float = Field(..., ge=0.0, description="Longitudinal reach of lane clearance")
    left_threshold: float = Field(..., description="x below which an object is on the left")
    right_threshold: float = Field(..., description="x above which an object is on the right")
    half_width: float = Field(..., gt=0.0)
    half_length: float = Field(..., gt=0.0)
    y: float = Field(..., description="Ground placement height")
    left_band: tuple[float, float] = Field(..., description="Lateral sampling band (left)")
    right_band: tuple[float, float] = Field(..., description="Lateral sampling band (right)")
    initial_window: tuple[float, float] = Field(..., description="z range for initial placement")
    ahead_distance: float = Field(..., gt=0.0, description="Distance ahead of the camera")
    max_attempts: int = Field(..., ge=1)
    secondary_attempts: int = Field(..., ge=0)
    lane_scan_step: float = Field(..., gt=0.0)
    variants: list[str] = Field(default_factory=list, description="Model variants, cycled")

    @property
    def window(self) -> ZWindow:
        return ZWindow(min_z=self.initial_window[0], max_z=self.initial_window[1])

    @model_validator(mode="after")
    def _check_ranges(self) -> "BarrierPolicy":
        for name in ("left_band", "right_band", "initial_window"):
            low, high = getattr(self, name)
            if low >= high:
                msg = f"barriers.{name} must be increasing, got [{low}, {high}]"
                raise ValueError(msg)
        if self.left_threshold > self.right_threshold:
            msg = "barriers.left_threshold must not exceed barriers.right_threshold"
            raise ValueError(msg)
        return self


class WorldConfig(StrictConfig):
    """Complete scenery configuration."""

    seed: int | None = Field(None, description="Random seed (None for entropy)")
    recycle_threshold: float = Field(..., ge=0.0, description="Distance behind the camera")
    visible_range: float = Field(..., gt=0.0, description="Visible draw distance")
    road: RoadGeometry
    road_segments: RoadSegmentPolicy
    streetlights: StreetlightPolicy
    barriers: BarrierPolicy

    @model_validator(mode="after")
    def _check_ahead_distance(self) -> "WorldConfig":
        if self.barriers.ahead_distance <= self.visible_range:
            msg = (
                f"barriers.ahead_distance ({self.barriers.ahead_distance}) must exceed "
                f"visible_range ({self.visible_range}) or recycled barriers pop into view"
            )
            raise ValueError(msg)
        return self


DEFAULTS_RESOURCE = "default.param.yaml"


def _read_defaults() -> dict[str, Any]:
    resource = importlib.resources.files("roadloop").joinpath(DEFAULTS_RESOURCE)
    return _as_layer(yaml.safe_load(resource.read_text(encoding="utf-8")), "packaged defaults")


def _read_user_file(path: Path) -> dict[str, Any]:
    if not path.exists():
        raise FileNotFoundError(f"World config file not found: {path}")
    with open(path, encoding="utf-8") as f:
        return _as_layer(yaml.safe_load(f), f"world config file {path}")


def _as_layer(data: Any, layer: str) -> dict[str, Any]:
    if data is None:
        return {}
    if not isinstance(data, dict):
        msg = f"The {layer} must be a mapping, got {type(data).__name__}"
        raise ValueError(msg)
    return data


def _overlay(base: dict[str, Any], layer: dict[str, Any]) -> dict[str, Any]:
    """Overlay ``layer`` on ``base``; nested sections merge key by key."""
    merged = dict(base)
    for key, value in layer.items():
        section = merged.get(key)
        merged[key] = (
            _overlay(section, value)
            if isinstance(section, dict) and isinstance(value, dict)
            else value
        )
    return merged


def load_world_config(
    path: str | Path | None = None, overrides: dict[str, Any] | None = None
) -> WorldConfig:
    """Load and validate the world configuration.

    Layers are applied in order: packaged defaults, the user file, overrides.

    Args:
        path: Optional YAML file merged over the packaged defaults
        overrides: Optional dictionary merged last

    Returns:
        Validated WorldConfig

    Raises:
        FileNotFoundError: If ``path`` does not exist
        ValueError: If a layer is not a mapping
        pydantic.ValidationError: If the merged configuration is inconsistent
    """
    layers = ["packaged defaults"]
    data = _read_defaults()
    if path is not None:
        path = Path(path)
        data = _overlay(data, _read_user_file(path))
        layers.append(str(path))
    if overrides:
        data = _overlay(data, _as_layer(overrides, "overrides"))
        layers.append("overrides")

    try:
        config = WorldConfig.model_validate(data)
    except ValidationError:
        logger.error(f"Invalid world configuration from layers: {', '.join(layers)}")
        raise
    logger.info(f"Loaded world configuration from {', '.join(layers)}")
    return config


__all__ = [
    "BarrierPolicy",
    "RoadGeometry",
    "RoadSegmentPolicy",
    "StreetlightPolicy",
    "StrictConfig",
    "WorldConfig",
    "load_world_config",
]
