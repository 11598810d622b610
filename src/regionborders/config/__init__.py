"""Configuration management for regionborders.

This module provides configuration management using Pydantic models.
Configuration can be provided via CLI arguments or defaults.

Key classes:
- TracerConfig: Contour tracing settings
- OverlayConfig: Anti-aliased overlay settings
- DistanceFieldConfig: Jump flooding settings
- ProjectionConfig: UV lookup settings
- ProcessingConfig: Worker settings
- OutputConfig: Artefact naming and location
- LoggingConfig: Logging settings
- RegionBordersSettings: Main application settings
"""

from regionborders.config.settings import (
    DistanceFieldConfig,
    LocatorKind,
    LoggingConfig,
    OutputConfig,
    OverlayConfig,
    ProcessingConfig,
    ProjectionConfig,
    RegionBordersSettings,
    TracerConfig,
    get_default_settings,
)

__all__ = [
    "DistanceFieldConfig",
    "LocatorKind",
    "LoggingConfig",
    "OutputConfig",
    "OverlayConfig",
    "ProcessingConfig",
    "ProjectionConfig",
    "RegionBordersSettings",
    "TracerConfig",
    "get_default_settings",
]
