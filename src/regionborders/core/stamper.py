"""Anti-aliased disk stamping for border overlays.

Every input point stamps a disk whose edge fades over one pixel:
coverage = 1 - clamp01(distance - radius + 0.5). The colour is blended in by
coverage and the alpha only ever grows (alpha = max(alpha, coverage)), so
overlapping disks build a continuous line regardless of point order.
"""

import math
from collections.abc import Iterable
from typing import NamedTuple

import numpy as np

from regionborders.config import OverlayConfig
from regionborders.domain import PixelCoord, RasterOverlay


class DiskKernel(NamedTuple):
    """Offsets and coverage of a stamped disk.

    Attributes:
        dx: Column offsets from the centre
        dy: Row offsets from the centre
        coverage: Coverage in (0, 1] for each offset
    """

    dx: np.ndarray
    dy: np.ndarray
    coverage: np.ndarray


def disk_kernel(radius: float) -> DiskKernel:
    """Precompute the coverage of a disk of the given radius.

    Args:
        radius: Disk radius in pixels

    Returns:
        Kernel holding only offsets with positive coverage

    Raises:
        ValueError: If radius is not positive
    """
    if radius <= 0:
        raise ValueError(f"Disk radius must be positive, got {radius}")

    r_int = math.ceil(radius)
    offsets = np.arange(-r_int, r_int + 1)
    dy, dx = np.meshgrid(offsets, offsets, indexing="ij")
    dist = np.sqrt(dx * dx + dy * dy)
    coverage = 1.0 - np.clip(dist - radius + 0.5, 0.0, 1.0)

    keep = coverage > 0
    return DiskKernel(dx[keep], dy[keep], coverage[keep])


class RasterStamper:
    """Renders border points into a smooth RGBA overlay.

    Example:
        stamper = RasterStamper(OverlayConfig(line_thickness=1.5))
        overlay = stamper.stamp(border_pixels(grid), grid.width, grid.height)
    """

    def __init__(self, config: OverlayConfig | None = None) -> None:
        self.config = config or OverlayConfig()
        self._kernel = disk_kernel(self.config.line_thickness)
        self._color = np.array(self.config.rgb(), dtype=np.float64)

    def stamp(
        self,
        points: Iterable[PixelCoord],
        width: int,
        height: int,
    ) -> RasterOverlay:
        """Stamp a disk at every point onto a transparent canvas.

        Args:
            points: Disk centres in pixel coordinates
            width: Canvas width
            height: Canvas height

        Returns:
            The composited overlay
        """
        rgb = np.zeros((height, width, 3), dtype=np.float64)
        alpha = np.zeros((height, width), dtype=np.float64)
        kernel = self._kernel

        for point in points:
            xs = kernel.dx + point.x
            ys = kernel.dy + point.y
            inside = (xs >= 0) & (xs < width) & (ys >= 0) & (ys < height)
            if not inside.any():
                continue

            xs, ys = xs[inside], ys[inside]
            coverage = kernel.coverage[inside]

            existing = rgb[ys, xs]
            rgb[ys, xs] = existing + (self._color - existing) * coverage[:, None]
            alpha[ys, xs] = np.maximum(alpha[ys, xs], coverage)

        pixels = np.empty((height, width, 4), dtype=np.uint8)
        pixels[:, :, :3] = np.rint(np.clip(rgb, 0.0, 1.0) * 255.0)
        pixels[:, :, 3] = np.rint(np.clip(alpha, 0.0, 1.0) * 255.0)
        return RasterOverlay(pixels)
