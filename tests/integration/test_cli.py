"""Tests for the command-line interface."""

from pathlib import Path

import numpy as np
import pytest
from PIL import Image
from typer.testing import CliRunner

from regionborders import __version__
from regionborders.cli.app import app

runner = CliRunner()


@pytest.fixture
def id_map(tmp_path: Path) -> Path:
    """8x8 map with a 4x4 square in the middle."""
    pixels = np.zeros((8, 8, 3), dtype=np.uint8)
    pixels[2:6, 2:6] = (255, 255, 255)
    path = tmp_path / "regions.png"
    Image.fromarray(pixels).save(path)
    return path


@pytest.fixture
def mesh(tmp_path: Path) -> Path:
    vertices = np.array([[0, 0, 0], [1, 0, 0], [1, 1, 0], [0, 1, 0]], dtype=float)
    path = tmp_path / "globe.npz"
    np.savez(
        path,
        vertices=vertices,
        uvs=vertices[:, :2],
        triangles=np.array([[0, 1, 2], [0, 2, 3]]),
    )
    return path


class TestCli:
    def test_version(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_info_quiet_prints_count(self, id_map):
        result = runner.invoke(app, ["info", str(id_map), "--quiet"])
        assert result.exit_code == 0
        assert result.output.strip() == "2"

    def test_info_table(self, id_map):
        result = runner.invoke(app, ["info", str(id_map)])
        assert result.exit_code == 0
        assert "contours" in result.output

    def test_extract(self, tmp_path, id_map, mesh):
        out = tmp_path / "borders"
        result = runner.invoke(
            app,
            ["extract", str(id_map), "--mesh", str(mesh), "-o", str(out), "-j", "1", "-q"],
        )

        assert result.exit_code == 0, result.output
        assert sorted(p.name for p in out.iterdir()) == ["Border_0.json", "Border_1.json"]

    def test_extract_missing_mesh(self, tmp_path, id_map):
        result = runner.invoke(
            app, ["extract", str(id_map), "--mesh", str(tmp_path / "none.obj"), "-j", "1"]
        )
        assert result.exit_code == 1
        assert "Could not load mesh" in result.output

    def test_extract_invalid_locator(self, id_map, mesh):
        result = runner.invoke(
            app, ["extract", str(id_map), "--mesh", str(mesh), "--locator", "octree"]
        )
        assert result.exit_code == 1

    def test_overlay(self, tmp_path, id_map):
        out = tmp_path / "overlay.png"
        result = runner.invoke(app, ["overlay", str(id_map), "-o", str(out), "-c", "#ff0000"])

        assert result.exit_code == 0, result.output
        with Image.open(out) as image:
            assert image.mode == "RGBA"
            assert image.getpixel((2, 1)) == (255, 0, 0, 255)

    def test_overlay_invalid_colour(self, id_map):
        result = runner.invoke(app, ["overlay", str(id_map), "-c", "blue"])
        assert result.exit_code == 1
        assert "Invalid colour" in result.output

    def test_sdf_default_path(self, id_map):
        result = runner.invoke(app, ["sdf", str(id_map), "-s", "8", "-q"])

        assert result.exit_code == 0, result.output
        assert (id_map.parent / "regions-sdf.tiff").exists()

    def test_missing_input(self, tmp_path):
        result = runner.invoke(app, ["sdf", str(tmp_path / "missing.png")])
        assert result.exit_code == 1
        assert "not found" in result.output

    def test_verbose_and_quiet(self, id_map):
        result = runner.invoke(app, ["overlay", str(id_map), "-v", "-q"])
        assert result.exit_code == 1
