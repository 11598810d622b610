"""Tests for domain models to verify they work correctly."""

import numpy as np
import pytest

from regionborders.domain import (
    BorderPolyline3D,
    Contour,
    DistanceField,
    IndexedGrid,
    MeshTransform,
    PixelCoord,
    RasterOverlay,
    SurfaceMesh,
    pack_rgb,
)


class TestPixelCoord:
    """Tests for PixelCoord class."""

    def test_to_tuple(self) -> None:
        assert PixelCoord(3, 4).to_tuple() == (3, 4)

    def test_immutable(self) -> None:
        """Test that coordinates are immutable."""
        p = PixelCoord(1, 2)
        with pytest.raises(AttributeError):
            p.x = 5  # type: ignore[misc]

    def test_hashable(self) -> None:
        assert len({PixelCoord(1, 2), PixelCoord(1, 2), PixelCoord(2, 1)}) == 2


class TestIndexedGrid:
    """Tests for IndexedGrid class."""

    def test_pack_rgb_ignores_alpha(self) -> None:
        pixels = np.array([[[1, 2, 3, 0], [1, 2, 3, 255]]], dtype=np.uint8)
        keys = pack_rgb(pixels)
        assert keys.tolist() == [[0x010203, 0x010203]]

    def test_pack_rgb_rejects_greyscale(self) -> None:
        with pytest.raises(ValueError):
            pack_rgb(np.zeros((2, 2), dtype=np.uint8))

    def test_dimensions(self) -> None:
        grid = IndexedGrid.from_ids(np.zeros((3, 5), dtype=int))
        assert grid.width == 5
        assert grid.height == 3
        assert grid.shape == (3, 5)
        assert repr(grid) == "IndexedGrid(width=5, height=3)"

    def test_keys_are_read_only_copy(self) -> None:
        """The grid does not alias or allow mutation of its input."""
        ids = np.zeros((2, 2), dtype=int)
        grid = IndexedGrid.from_ids(ids)

        ids[0, 0] = 9
        assert grid.key_at(0, 0) == 0
        with pytest.raises(ValueError):
            grid.keys[0, 0] = 1

    def test_in_bounds(self) -> None:
        grid = IndexedGrid.from_ids(np.zeros((2, 3), dtype=int))
        assert grid.in_bounds(2, 1)
        assert not grid.in_bounds(3, 0)
        assert not grid.in_bounds(0, -1)

    def test_rejects_float_ids(self) -> None:
        with pytest.raises(ValueError, match="integers"):
            IndexedGrid.from_ids(np.zeros((2, 2)))

    def test_rejects_empty_grid(self) -> None:
        with pytest.raises(ValueError):
            IndexedGrid(np.zeros((0, 4), dtype=int))


class TestContour:
    """Tests for Contour class."""

    def test_start_and_length(self) -> None:
        contour = Contour(points=[PixelCoord(1, 0), PixelCoord(2, 0)], closed=True)
        assert len(contour) == 2
        assert contour.start == PixelCoord(1, 0)

    def test_empty_contour_has_no_start(self) -> None:
        with pytest.raises(ValueError):
            _ = Contour(points=[]).start

    def test_bounding_box(self) -> None:
        contour = Contour(points=[PixelCoord(3, 1), PixelCoord(1, 4), PixelCoord(2, 2)])
        assert contour.bounding_box() == (1, 1, 3, 4)

    def test_to_array(self) -> None:
        contour = Contour(points=[PixelCoord(3, 1), PixelCoord(1, 4)])
        assert contour.to_array().tolist() == [[3, 1], [1, 4]]
        assert Contour(points=[]).to_array().shape == (0, 2)

    def test_serialization(self) -> None:
        """Test contour serialization and deserialization."""
        contour = Contour(points=[PixelCoord(0, 1), PixelCoord(1, 1)], truncated=True)

        restored = Contour.from_dict(contour.to_dict())

        assert restored.points == contour.points
        assert restored.truncated
        assert not restored.closed


class TestBorderPolyline3D:
    """Tests for BorderPolyline3D class."""

    def test_points_reshaped(self) -> None:
        polyline = BorderPolyline3D(points=[1.0, 2.0, 3.0, 4.0, 5.0, 6.0], contour_index=0)
        assert polyline.points.shape == (2, 3)
        assert len(polyline) == 2

    def test_empty(self) -> None:
        polyline = BorderPolyline3D(points=np.zeros((0, 3)), contour_index=2)
        assert polyline.is_empty()
        assert polyline.to_dict() == {"contour_index": 2, "closed": False, "points": []}


class TestMeshTransform:
    """Tests for MeshTransform class."""

    def test_identity(self) -> None:
        transform = MeshTransform()
        points = np.array([[1.0, 2.0, 3.0]])

        assert transform.is_identity()
        np.testing.assert_array_equal(transform.transform_points(points), points)
        np.testing.assert_allclose(transform.matrix(), np.eye(4))

    def test_scale_then_translate(self) -> None:
        transform = MeshTransform(position=(1.0, 0.0, 0.0), scale=(2.0, 3.0, 4.0))

        result = transform.transform_points(np.array([[1.0, 1.0, 1.0]]))

        np.testing.assert_allclose(result, [[3.0, 3.0, 4.0]])

    def test_serialization(self) -> None:
        transform = MeshTransform(rotation=(0.0, 1.0, 0.0, 0.0), scale=(1.0, 2.0, 1.0))
        assert MeshTransform.from_dict(transform.to_dict()) == transform


class TestSurfaceMesh:
    """Tests for SurfaceMesh class."""

    @pytest.fixture
    def mesh(self) -> SurfaceMesh:
        vertices = np.array([[0, 0, 0], [1, 0, 0], [0, 1, 0]], dtype=float)
        return SurfaceMesh(vertices=vertices, uvs=vertices[:, :2], triangles=[[0, 1, 2]])

    def test_counts(self, mesh: SurfaceMesh) -> None:
        assert mesh.vertex_count == 3
        assert mesh.triangle_count == 1
        assert repr(mesh) == "SurfaceMesh(vertices=3, triangles=1)"

    def test_triangle_accessors(self, mesh: SurfaceMesh) -> None:
        assert mesh.triangle_uvs().shape == (1, 3, 2)
        np.testing.assert_array_equal(mesh.triangle_vertices(0)[1], [1.0, 0.0, 0.0])

    def test_arrays_read_only(self, mesh: SurfaceMesh) -> None:
        with pytest.raises(ValueError):
            mesh.vertices[0, 0] = 5.0

    def test_uv_count_must_match(self) -> None:
        with pytest.raises(ValueError, match="UV"):
            SurfaceMesh(vertices=np.zeros((3, 3)), uvs=np.zeros((2, 2)), triangles=[[0, 1, 2]])

    def test_triangle_index_range(self) -> None:
        with pytest.raises(ValueError, match="out of range"):
            SurfaceMesh(vertices=np.zeros((3, 3)), uvs=np.zeros((3, 2)), triangles=[[0, 1, 3]])

    def test_serialization(self, mesh: SurfaceMesh) -> None:
        restored = SurfaceMesh.from_dict(mesh.to_dict())
        np.testing.assert_array_equal(restored.vertices, mesh.vertices)
        np.testing.assert_array_equal(restored.triangles, mesh.triangles)
        assert restored.transform == mesh.transform


class TestRasterArtifacts:
    """Tests for DistanceField and RasterOverlay."""

    def test_distance_field(self) -> None:
        field = DistanceField(values=np.zeros((2, 5)), spread=8.0)
        assert field.values.dtype == np.float32
        assert (field.width, field.height) == (5, 2)

    def test_overlay_shape_checked(self) -> None:
        with pytest.raises(ValueError):
            RasterOverlay(np.zeros((2, 2, 3)))

    def test_overlay_empty(self) -> None:
        pixels = np.zeros((2, 2, 4), dtype=np.uint8)
        assert RasterOverlay(pixels).is_empty()
        pixels[1, 1, 3] = 1
        assert not RasterOverlay(pixels).is_empty()
