"""Configuration settings for Region Borders."""

import re
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field, field_validator

_HEX_COLOR = re.compile(r"^#?([0-9a-fA-F]{6})$")


class LocatorKind(str, Enum):
    """Strategy used to find the mesh triangle containing a UV point."""

    LINEAR = "linear"
    GRID = "grid"


class TracerConfig(BaseModel):
    """Configuration for contour tracing."""

    min_contour_length: int = Field(
        default=10,
        ge=0,
        description="Contours with this many points or fewer are discarded as noise",
    )
    max_contour_points: int = Field(
        default=20000,
        ge=1,
        description="Hard cap on points per contour (degenerate loop protection)",
    )


class OverlayConfig(BaseModel):
    """Configuration for the anti-aliased border overlay."""

    line_thickness: float = Field(
        default=1.5,
        ge=0.5,
        le=10.0,
        description="Radius in pixels of the disk stamped at each border pixel",
    )
    line_color: str = Field(
        default="#000000",
        description="Line colour as a hex RGB string",
    )

    @field_validator("line_color")
    @classmethod
    def _validate_color(cls, value: str) -> str:
        match = _HEX_COLOR.match(value.strip())
        if match is None:
            raise ValueError(f"Expected a hex colour like '#1a2b3c', got '{value}'")
        return f"#{match.group(1).lower()}"

    def rgb(self) -> tuple[float, float, float]:
        """Get the line colour as normalised RGB floats.

        Returns:
            Tuple of (r, g, b) in [0, 1]
        """
        hex_value = self.line_color.lstrip("#")
        return (
            int(hex_value[0:2], 16) / 255.0,
            int(hex_value[2:4], 16) / 255.0,
            int(hex_value[4:6], 16) / 255.0,
        )


class DistanceFieldConfig(BaseModel):
    """Configuration for distance field generation."""

    spread: int = Field(
        default=64,
        ge=8,
        le=128,
        description="Distance in pixels that maps to 1.0 in the output field",
    )


class ProjectionConfig(BaseModel):
    """Configuration for UV to surface projection."""

    locator: LocatorKind = Field(
        default=LocatorKind.LINEAR,
        description="Triangle lookup strategy (linear scan or UV grid index)",
    )
    grid_resolution: int = Field(
        default=64,
        ge=1,
        le=4096,
        description="Cells per UV axis for the grid locator",
    )
    mesh_position: tuple[float, float, float] = Field(
        default=(0.0, 0.0, 0.0),
        description="World-space position of the mesh",
    )
    mesh_rotation: tuple[float, float, float, float] = Field(
        default=(1.0, 0.0, 0.0, 0.0),
        description="Mesh rotation as a (w, x, y, z) quaternion",
    )
    mesh_scale: tuple[float, float, float] = Field(
        default=(1.0, 1.0, 1.0),
        description="Per-axis scale of the mesh",
    )


class ProcessingConfig(BaseModel):
    """Configuration for parallel processing."""

    max_workers: int | None = Field(
        default=None,
        description="Max worker processes (None = auto, 1 = in-process)",
    )


class OutputConfig(BaseModel):
    """Configuration for persisted artefacts."""

    output_dir: Path = Field(
        default=Path("BorderData"),
        description="Directory for border polyline files",
    )
    border_prefix: str = Field(
        default="Border",
        min_length=1,
        description="File name prefix for border polylines",
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    log_file: Path | None = Field(
        default=None,
        description="Path to log file",
    )
    log_level: str = Field(
        default="WARNING",
        description="Console log level",
    )
    file_log_level: str = Field(
        default="DEBUG",
        description="File log level (more verbose)",
    )


class RegionBordersSettings(BaseModel):
    """Main application settings."""

    tracer: TracerConfig = Field(default_factory=TracerConfig)
    overlay: OverlayConfig = Field(default_factory=OverlayConfig)
    distance: DistanceFieldConfig = Field(default_factory=DistanceFieldConfig)
    projection: ProjectionConfig = Field(default_factory=ProjectionConfig)
    processing: ProcessingConfig = Field(default_factory=ProcessingConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def get_default_settings() -> RegionBordersSettings:
    """Get default application settings."""
    return RegionBordersSettings()
