"""Point location in a mesh's UV layout.

Finding the triangle that contains a UV point is the expensive part of the
surface projection. The ``UVLocator`` protocol hides the strategy:

- LinearScanLocator: tests every triangle, first hit in index order wins
- GridLocator: buckets triangles by UV bounding box into a uniform grid and
  tests only the triangles of the point's cell, still in index order, so it
  returns exactly what the linear scan returns

Zero-area UV triangles never match.
"""

from typing import NamedTuple, Protocol

import numpy as np

from regionborders.config import LocatorKind, ProjectionConfig
from regionborders.domain import SurfaceMesh


class UVHit(NamedTuple):
    """A located UV point.

    Attributes:
        triangle: Index of the containing triangle
        weights: Barycentric weights (u, v, w) for the triangle's corners
    """

    triangle: int
    weights: np.ndarray


class UVLocator(Protocol):
    """Capability to find the mesh triangle containing a UV point."""

    def locate(self, uv: tuple[float, float]) -> UVHit | None:
        """Return the first containing triangle, or None if no triangle matches."""
        ...


def barycentric(
    p: tuple[float, float],
    a: tuple[float, float],
    b: tuple[float, float],
    c: tuple[float, float],
) -> tuple[float, float, float] | None:
    """Calculate barycentric coordinates of p relative to triangle (a, b, c).

    Args:
        p: The point
        a: First triangle corner
        b: Second triangle corner
        c: Third triangle corner

    Returns:
        Weights (u, v, w) with p = u*a + v*b + w*c, or None if the triangle
        has zero area

    Examples:
        >>> barycentric((0.25, 0.25), (0.0, 0.0), (1.0, 0.0), (0.0, 1.0))
        (0.5, 0.25, 0.25)
    """
    v0 = (b[0] - a[0], b[1] - a[1])
    v1 = (c[0] - a[0], c[1] - a[1])
    v2 = (p[0] - a[0], p[1] - a[1])

    d00 = v0[0] * v0[0] + v0[1] * v0[1]
    d01 = v0[0] * v1[0] + v0[1] * v1[1]
    d11 = v1[0] * v1[0] + v1[1] * v1[1]
    d20 = v2[0] * v0[0] + v2[1] * v0[1]
    d21 = v2[0] * v1[0] + v2[1] * v1[1]

    denom = d00 * d11 - d01 * d01
    if denom == 0.0:
        return None

    v = (d11 * d20 - d01 * d21) / denom
    w = (d00 * d21 - d01 * d20) / denom
    return (1.0 - v - w, v, w)


class _TriangleTable:
    """Per-triangle terms of the barycentric formula, shared by the locators."""

    def __init__(self, mesh: SurfaceMesh) -> None:
        corners = mesh.triangle_uvs()
        self.a = corners[:, 0, :]
        v0 = corners[:, 1, :] - self.a
        v1 = corners[:, 2, :] - self.a

        self.v0 = v0
        self.v1 = v1
        self.d00 = np.einsum("ij,ij->i", v0, v0)
        self.d01 = np.einsum("ij,ij->i", v0, v1)
        self.d11 = np.einsum("ij,ij->i", v1, v1)

        denom = self.d00 * self.d11 - self.d01 * self.d01
        self.valid = denom != 0.0
        self.denom = np.where(self.valid, denom, 1.0)

    def first_hit(self, uv: tuple[float, float], candidates: np.ndarray | None) -> UVHit | None:
        """Test candidate triangles (all if None) in order and return the first hit."""
        if candidates is None:
            sel = slice(None)
            indices = None
        else:
            if len(candidates) == 0:
                return None
            sel = candidates
            indices = candidates

        v2 = np.asarray(uv, dtype=np.float64) - self.a[sel]
        d20 = np.einsum("ij,ij->i", v2, self.v0[sel])
        d21 = np.einsum("ij,ij->i", v2, self.v1[sel])

        d00, d01, d11 = self.d00[sel], self.d01[sel], self.d11[sel]
        denom = self.denom[sel]
        v = (d11 * d20 - d01 * d21) / denom
        w = (d00 * d21 - d01 * d20) / denom
        u = 1.0 - v - w

        hits = np.flatnonzero(self.valid[sel] & (u >= 0) & (v >= 0) & (w >= 0))
        if len(hits) == 0:
            return None

        k = int(hits[0])
        triangle = k if indices is None else int(indices[k])
        return UVHit(triangle, np.array([u[k], v[k], w[k]]))


class LinearScanLocator:
    """Tests every triangle of the mesh for each query."""

    def __init__(self, mesh: SurfaceMesh) -> None:
        self._table = _TriangleTable(mesh)

    def locate(self, uv: tuple[float, float]) -> UVHit | None:
        return self._table.first_hit(uv, None)


class GridLocator:
    """Uniform UV grid over triangle bounding boxes.

    Triangles are bucketed into every cell their UV bounding box overlaps.
    Cell coordinates are clamped to the grid, which keeps lookups correct for
    UVs outside [0, 1].
    """

    def __init__(self, mesh: SurfaceMesh, resolution: int = 64) -> None:
        if resolution < 1:
            raise ValueError(f"Grid resolution must be positive, got {resolution}")

        self._table = _TriangleTable(mesh)
        self._resolution = resolution

        corners = mesh.triangle_uvs()
        buckets: list[list[int]] = [[] for _ in range(resolution * resolution)]
        if len(corners):
            lo = self._cells(corners.min(axis=1))
            hi = self._cells(corners.max(axis=1))
            for index in np.flatnonzero(self._table.valid):
                for cy in range(lo[index, 1], hi[index, 1] + 1):
                    row = cy * resolution
                    for cx in range(lo[index, 0], hi[index, 0] + 1):
                        buckets[row + cx].append(int(index))

        self._buckets = [np.array(b, dtype=np.int64) for b in buckets]

    def _cells(self, uv: np.ndarray) -> np.ndarray:
        cells = np.floor(np.asarray(uv, dtype=np.float64) * self._resolution)
        return np.clip(cells, 0, self._resolution - 1).astype(np.int64)

    def locate(self, uv: tuple[float, float]) -> UVHit | None:
        cx, cy = self._cells(np.asarray(uv))
        return self._table.first_hit(uv, self._buckets[cy * self._resolution + cx])


def create_locator(mesh: SurfaceMesh, config: ProjectionConfig | None = None) -> UVLocator:
    """Build the locator selected by the projection config."""
    config = config or ProjectionConfig()
    if config.locator == LocatorKind.GRID:
        return GridLocator(mesh, resolution=config.grid_resolution)
    return LinearScanLocator(mesh)
