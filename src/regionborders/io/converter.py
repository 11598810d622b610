"""Conversion between library objects and domain models.

Images decode with row 0 at the top, while the pipeline works in texture
space where row 0 is the bottom row (so that pixel (x, y) has UV
(x / width, y / height)). Every conversion here flips rows accordingly.
"""

import numpy as np
import trimesh
from PIL import Image

from regionborders.domain import (
    DistanceField,
    IndexedGrid,
    MeshTransform,
    RasterOverlay,
    SurfaceMesh,
)


def image_to_grid(image: Image.Image) -> IndexedGrid:
    """Convert a decoded image to an indexed grid in texture row order.

    Args:
        image: Any Pillow image (palette, greyscale, RGB, RGBA, ...)

    Returns:
        IndexedGrid keyed by RGB colour
    """
    rgba = np.asarray(image.convert("RGBA"))
    return IndexedGrid.from_rgb(np.flipud(rgba))


def overlay_to_image(overlay: RasterOverlay) -> Image.Image:
    """Convert an overlay to an RGBA image in top-down row order."""
    return Image.fromarray(np.ascontiguousarray(np.flipud(overlay.pixels)))


def distance_field_to_image(field: DistanceField) -> Image.Image:
    """Convert a distance field to a 32-bit float ("F" mode) image."""
    return Image.fromarray(np.ascontiguousarray(np.flipud(field.values), dtype=np.float32))


def image_to_distance_values(image: Image.Image) -> np.ndarray:
    """Read a float image back into texture row order."""
    return np.flipud(np.asarray(image, dtype=np.float32))


def trimesh_to_domain(
    mesh: trimesh.Trimesh,
    transform: MeshTransform | None = None,
) -> SurfaceMesh:
    """Convert a trimesh mesh with texture coordinates to a SurfaceMesh.

    Args:
        mesh: Loaded trimesh mesh
        transform: World transform for the mesh (identity if None)

    Returns:
        SurfaceMesh with the mesh's vertices, UVs and faces

    Raises:
        ValueError: If the mesh carries no per-vertex UV coordinates
    """
    uv = getattr(mesh.visual, "uv", None)
    if uv is None or len(uv) != len(mesh.vertices):
        raise ValueError("mesh has no per-vertex UV coordinates")

    return SurfaceMesh(
        vertices=np.asarray(mesh.vertices, dtype=np.float64),
        uvs=np.asarray(uv, dtype=np.float64),
        triangles=np.asarray(mesh.faces, dtype=np.int64),
        transform=transform or MeshTransform(),
    )
