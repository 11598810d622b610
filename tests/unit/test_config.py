"""Tests for configuration models."""

import pytest
from pydantic import ValidationError

from regionborders.config import (
    DistanceFieldConfig,
    LocatorKind,
    OverlayConfig,
    ProjectionConfig,
    RegionBordersSettings,
    TracerConfig,
    get_default_settings,
)


class TestDefaults:
    def test_default_settings(self):
        settings = get_default_settings()

        assert isinstance(settings, RegionBordersSettings)
        assert settings.tracer.min_contour_length == 10
        assert settings.tracer.max_contour_points == 20000
        assert settings.overlay.line_thickness == 1.5
        assert settings.distance.spread == 64
        assert settings.projection.locator == LocatorKind.LINEAR
        assert settings.output.border_prefix == "Border"
        assert settings.logging.log_file is None


class TestOverlayConfig:
    @pytest.mark.parametrize(
        "value,expected",
        [("#000000", "#000000"), ("FFaa00", "#ffaa00"), (" #12ab34 ", "#12ab34")],
    )
    def test_colour_normalised(self, value, expected):
        assert OverlayConfig(line_color=value).line_color == expected

    @pytest.mark.parametrize("value", ["red", "#12345", "#1234567", "#gg0000"])
    def test_invalid_colour(self, value):
        with pytest.raises(ValidationError):
            OverlayConfig(line_color=value)

    def test_rgb(self):
        assert OverlayConfig(line_color="#ff0033").rgb() == pytest.approx((1.0, 0.0, 0.2))

    @pytest.mark.parametrize("thickness", [0.4, 10.5])
    def test_thickness_bounds(self, thickness):
        with pytest.raises(ValidationError):
            OverlayConfig(line_thickness=thickness)


class TestBounds:
    def test_spread_bounds(self):
        with pytest.raises(ValidationError):
            DistanceFieldConfig(spread=4)
        with pytest.raises(ValidationError):
            DistanceFieldConfig(spread=256)

    def test_negative_min_length(self):
        with pytest.raises(ValidationError):
            TracerConfig(min_contour_length=-1)

    def test_locator_from_string(self):
        assert ProjectionConfig(locator="grid").locator == LocatorKind.GRID
