"""Tests for UV point location and surface projection."""

import math

import numpy as np
import pytest

from regionborders.config import LocatorKind, ProjectionConfig
from regionborders.core.projector import SurfaceProjector
from regionborders.core.uv_index import (
    GridLocator,
    LinearScanLocator,
    barycentric,
    create_locator,
)
from regionborders.domain import Contour, MeshTransform, PixelCoord, SurfaceMesh
from regionborders.exceptions import ProjectionError


def unit_square_mesh(transform: MeshTransform | None = None) -> SurfaceMesh:
    """Flat unit square in the z=0 plane whose UVs equal its x, y."""
    vertices = np.array([[0, 0, 0], [1, 0, 0], [1, 1, 0], [0, 1, 0]], dtype=float)
    return SurfaceMesh(
        vertices=vertices,
        uvs=vertices[:, :2],
        triangles=np.array([[0, 1, 2], [0, 2, 3]]),
        transform=transform or MeshTransform(),
    )


def lower_triangle_mesh() -> SurfaceMesh:
    """Single triangle covering u + v <= 1."""
    vertices = np.array([[0, 0, 0], [1, 0, 0], [0, 1, 0]], dtype=float)
    return SurfaceMesh(vertices=vertices, uvs=vertices[:, :2], triangles=np.array([[0, 1, 2]]))


def tiled_mesh(tiles: int = 4) -> SurfaceMesh:
    """Unit square split into tiles x tiles quads, two triangles each."""
    coords = np.linspace(0.0, 1.0, tiles + 1)
    uu, vv = np.meshgrid(coords, coords)
    uvs = np.column_stack([uu.ravel(), vv.ravel()])
    vertices = np.column_stack([uvs, np.sin(uvs[:, 0] * math.pi)])

    triangles = []
    for row in range(tiles):
        for col in range(tiles):
            a = row * (tiles + 1) + col
            b, c, d = a + 1, a + tiles + 2, a + tiles + 1
            triangles.append([a, b, c])
            triangles.append([a, c, d])
    return SurfaceMesh(vertices=vertices, uvs=uvs, triangles=np.array(triangles))


class TestBarycentric:
    """Tests for the scalar barycentric helper."""

    def test_inside_point(self):
        weights = barycentric((0.25, 0.25), (0.0, 0.0), (1.0, 0.0), (0.0, 1.0))
        assert weights == pytest.approx((0.5, 0.25, 0.25))

    def test_corner_reproduces_vertex(self):
        weights = barycentric((1.0, 0.0), (0.0, 0.0), (1.0, 0.0), (0.0, 1.0))
        assert weights == pytest.approx((0.0, 1.0, 0.0))

    def test_outside_point_has_negative_weight(self):
        weights = barycentric((1.0, 1.0), (0.0, 0.0), (1.0, 0.0), (0.0, 1.0))
        assert weights is not None
        assert min(weights) < 0

    def test_degenerate_triangle(self):
        """Collinear corners have no barycentric coordinates."""
        assert barycentric((0.5, 0.5), (0.0, 0.0), (1.0, 1.0), (2.0, 2.0)) is None


class TestLocators:
    """Tests for triangle lookup strategies."""

    def test_first_triangle_wins_on_shared_edge(self):
        """The diagonal belongs to both triangles; index order decides."""
        hit = LinearScanLocator(unit_square_mesh()).locate((0.5, 0.5))

        assert hit is not None
        assert hit.triangle == 0
        np.testing.assert_allclose(hit.weights, [0.5, 0.0, 0.5])

    def test_second_triangle(self):
        hit = LinearScanLocator(unit_square_mesh()).locate((0.25, 0.75))
        assert hit is not None
        assert hit.triangle == 1

    def test_miss_outside_layout(self):
        assert LinearScanLocator(unit_square_mesh()).locate((1.5, 0.5)) is None

    def test_degenerate_triangle_skipped(self):
        """A zero-area UV triangle before a valid one never matches."""
        vertices = np.array([[0, 0, 0], [1, 0, 0], [0, 1, 0]], dtype=float)
        uvs = np.array([[0.0, 0.0], [1.0, 0.0], [0.0, 1.0]])
        mesh = SurfaceMesh(
            vertices=vertices,
            uvs=uvs,
            triangles=np.array([[0, 1, 1], [0, 1, 2]]),
        )

        for locator in (LinearScanLocator(mesh), GridLocator(mesh, resolution=4)):
            hit = locator.locate((0.25, 0.0))
            assert hit is not None
            assert hit.triangle == 1

    def test_grid_matches_linear_scan(self):
        """Both strategies return the same triangle and weights."""
        mesh = tiled_mesh()
        linear = LinearScanLocator(mesh)
        grid = GridLocator(mesh, resolution=7)

        rng = np.random.default_rng(42)
        queries = [tuple(p) for p in rng.uniform(-0.1, 1.1, size=(300, 2))]
        queries += [tuple(uv) for uv in mesh.uvs]

        for uv in queries:
            a, b = linear.locate(uv), grid.locate(uv)
            if a is None:
                assert b is None
            else:
                assert b is not None
                assert a.triangle == b.triangle
                np.testing.assert_allclose(a.weights, b.weights)

    def test_grid_resolution_must_be_positive(self):
        with pytest.raises(ValueError):
            GridLocator(unit_square_mesh(), resolution=0)

    def test_create_locator(self):
        mesh = unit_square_mesh()
        assert isinstance(create_locator(mesh), LinearScanLocator)
        assert isinstance(
            create_locator(mesh, ProjectionConfig(locator=LocatorKind.GRID)), GridLocator
        )


class TestSurfaceProjector:
    """Tests for contour projection."""

    def test_pixel_maps_through_uv(self):
        """Pixel (2, 2) of a 4x4 grid sits at UV (0.5, 0.5)."""
        projector = SurfaceProjector(unit_square_mesh())
        contour = Contour(points=[PixelCoord(2, 2)])

        polyline = projector.project(contour, width=4, height=4)

        np.testing.assert_allclose(polyline.points, [[0.5, 0.5, 0.0]])

    def test_interpolates_vertex_positions(self):
        """Points follow the mesh surface, not the UV plane."""
        mesh = tiled_mesh()
        projector = SurfaceProjector(mesh)

        point = projector.project_uv((0.5, 0.25))

        assert point is not None
        np.testing.assert_allclose(point, [0.5, 0.25, 1.0], atol=1e-12)

    def test_misses_are_skipped(self):
        """Pixels outside the UV layout are dropped, order is kept."""
        projector = SurfaceProjector(lower_triangle_mesh())
        contour = Contour(
            points=[PixelCoord(1, 1), PixelCoord(3, 3), PixelCoord(2, 1)],
            closed=True,
        )

        polyline = projector.project(contour, width=4, height=4, contour_index=7)

        np.testing.assert_allclose(polyline.points, [[0.25, 0.25, 0.0], [0.5, 0.25, 0.0]])
        assert polyline.contour_index == 7
        assert polyline.closed

    def test_fully_outside_contour_is_empty(self):
        projector = SurfaceProjector(lower_triangle_mesh())
        contour = Contour(points=[PixelCoord(3, 3), PixelCoord(3, 2)])

        polyline = projector.project(contour, width=4, height=4)

        assert polyline.is_empty()
        assert polyline.points.shape == (0, 3)

    def test_transform_applied_after_interpolation(self):
        """Scale then translation are applied to the interpolated point."""
        transform = MeshTransform(position=(0.0, 0.0, 1.0), scale=(2.0, 2.0, 2.0))
        projector = SurfaceProjector(unit_square_mesh(transform))

        polyline = projector.project(Contour(points=[PixelCoord(2, 2)]), width=4, height=4)

        np.testing.assert_allclose(polyline.points, [[1.0, 1.0, 1.0]])

    def test_rotation(self):
        """A quarter turn about z maps (x, y) to (-y, x)."""
        half = math.sqrt(0.5)
        transform = MeshTransform(rotation=(half, 0.0, 0.0, half))
        projector = SurfaceProjector(unit_square_mesh(transform))

        polyline = projector.project(Contour(points=[PixelCoord(2, 1)]), width=4, height=4)

        np.testing.assert_allclose(polyline.points, [[-0.25, 0.5, 0.0]], atol=1e-12)

    def test_grid_locator_config(self):
        config = ProjectionConfig(locator=LocatorKind.GRID, grid_resolution=8)
        projector = SurfaceProjector(unit_square_mesh(), config=config)

        assert isinstance(projector.locator, GridLocator)
        np.testing.assert_allclose(projector.project_uv((0.5, 0.5)), [0.5, 0.5, 0.0])

    def test_invalid_grid_size(self):
        projector = SurfaceProjector(unit_square_mesh())
        with pytest.raises(ProjectionError):
            projector.project(Contour(points=[PixelCoord(0, 0)]), width=0, height=4)
