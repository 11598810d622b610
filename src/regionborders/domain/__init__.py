"""Domain models for regionborders.

This module contains the core domain models representing region grids,
contours, meshes and the produced artefacts. All models are designed to be:

- Immutable where possible (frozen dataclasses, read-only arrays)
- Serializable for inter-process communication (parallel projection)
- Independent of Pillow and trimesh implementation details

Key classes:
- IndexedGrid: Read-only raster of region keys
- PixelCoord: Integer pixel coordinate
- Contour: Ordered loop of border pixels
- SurfaceMesh: Triangulated surface with UVs
- BorderPolyline3D: Projected world-space border line
- DistanceField: Normalised distance to the nearest border
- RasterOverlay: Anti-aliased RGBA border image
"""

from regionborders.domain.contour import BorderPolyline3D, Contour
from regionborders.domain.grid import IndexedGrid, PixelCoord, pack_rgb
from regionborders.domain.mesh import MeshTransform, SurfaceMesh
from regionborders.domain.raster import DistanceField, RasterOverlay

__all__: list[str] = [
    # Inputs
    "IndexedGrid",
    "PixelCoord",
    "MeshTransform",
    "SurfaceMesh",
    # Intermediate and outputs
    "Contour",
    "BorderPolyline3D",
    "DistanceField",
    "RasterOverlay",
    # Helpers
    "pack_rgb",
]
