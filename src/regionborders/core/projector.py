"""Projection of traced contours onto a surface mesh.

Each contour pixel (x, y) is converted to the UV point (x / width, y / height),
located in the mesh's UV layout and mapped to 3D by interpolating the
containing triangle's vertex positions with the barycentric weights. The
mesh's world transform is applied after interpolation.

Pixels that fall in no triangle (UV seams, holes in the layout) are skipped,
so a polyline can be shorter than its contour.
"""

import logging

import numpy as np

from regionborders.config import ProjectionConfig
from regionborders.core.uv_index import UVLocator, create_locator
from regionborders.domain import BorderPolyline3D, Contour, SurfaceMesh
from regionborders.exceptions import ProjectionError

logger = logging.getLogger(__name__)


class SurfaceProjector:
    """Maps pixel contours to world-space polylines through a mesh's UVs.

    Example:
        projector = SurfaceProjector(mesh)
        polyline = projector.project(contour, width=2048, height=1024)
    """

    def __init__(
        self,
        mesh: SurfaceMesh,
        locator: UVLocator | None = None,
        config: ProjectionConfig | None = None,
    ) -> None:
        """Initialize the projector.

        Args:
            mesh: Surface to project onto
            locator: Triangle lookup strategy (built from config if None)
            config: Projection settings used when no locator is given
        """
        self.mesh = mesh
        self.locator = locator if locator is not None else create_locator(mesh, config)

    def project_uv(self, uv: tuple[float, float]) -> np.ndarray | None:
        """Map one UV point to object space.

        Args:
            uv: Texture coordinate (u, v)

        Returns:
            Object-space point of shape (3,), or None if no triangle contains uv
        """
        hit = self.locator.locate(uv)
        if hit is None:
            return None
        corners = self.mesh.triangle_vertices(hit.triangle)
        return hit.weights @ corners

    def project(
        self,
        contour: Contour,
        width: int,
        height: int,
        contour_index: int = 0,
    ) -> BorderPolyline3D:
        """Project a contour onto the mesh.

        Args:
            contour: Traced pixel contour
            width: Width of the source grid in pixels
            height: Height of the source grid in pixels
            contour_index: Index recorded on the resulting polyline

        Returns:
            World-space polyline with one point per located pixel

        Raises:
            ProjectionError: If the grid size is not positive
        """
        if width <= 0 or height <= 0:
            raise ProjectionError(contour_index, f"invalid grid size {width}x{height}")

        local_points: list[np.ndarray] = []
        skipped = 0

        for pixel in contour.points:
            point = self.project_uv((pixel.x / width, pixel.y / height))
            if point is None:
                skipped += 1
                continue
            local_points.append(point)

        if skipped:
            logger.debug(
                "Contour %d: %d of %d pixels outside the UV layout",
                contour_index,
                skipped,
                len(contour),
            )

        if local_points:
            world = self.mesh.transform.transform_points(np.vstack(local_points))
        else:
            world = np.zeros((0, 3), dtype=np.float64)

        return BorderPolyline3D(
            points=world,
            contour_index=contour_index,
            closed=contour.closed,
        )
