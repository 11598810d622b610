"""Moore-neighbour contour tracing over the border skeleton.

The tracer scans the grid in raster order and, from every border pixel not
yet claimed, walks the 8-connected border skeleton until it returns to the
start pixel. A caller-owned ``visited`` buffer records the pixels claimed by
each finished contour, so contours of one pass never share a pixel and a
second scan with the same buffer finds nothing.
"""

import logging
from collections.abc import Callable

import numpy as np

from regionborders.config import TracerConfig
from regionborders.core.classifier import border_mask
from regionborders.domain import Contour, IndexedGrid, PixelCoord
from regionborders.exceptions import ProcessingCancelledError

logger = logging.getLogger(__name__)

# Direction ring as (dx, dy): L, UL, U, UR, R, DR, D, DL
DIRECTIONS: tuple[tuple[int, int], ...] = (
    (-1, 0),
    (-1, -1),
    (0, -1),
    (1, -1),
    (1, 0),
    (1, 1),
    (0, 1),
    (-1, 1),
)
_DIRECTION_INDEX: dict[tuple[int, int], int] = {d: i for i, d in enumerate(DIRECTIONS)}


def trace_contour(
    grid: IndexedGrid,
    start: PixelCoord,
    visited: np.ndarray,
    max_points: int = 20000,
    mask: np.ndarray | None = None,
) -> Contour:
    """Trace a single contour starting at a border pixel.

    ``previous`` starts one step to the left of ``start``. At every step the
    direction ring is searched clockwise, starting just after the direction
    pointing back at ``previous``; the first neighbour that is in bounds, a
    border pixel and not claimed by an earlier contour becomes the next pixel.

    The trace stops when it returns to ``start`` (closed), when no neighbour
    qualifies (open), or when ``max_points`` points were collected (truncated).
    All pixels of the contour are marked in ``visited`` before returning.

    Args:
        grid: The region grid
        start: Border pixel to start from
        visited: Boolean (height, width) buffer of pixels claimed so far
        max_points: Hard cap on contour length
        mask: Precomputed border mask (computed from the grid if None)

    Returns:
        The traced contour
    """
    if mask is None:
        mask = border_mask(grid)

    width, height = grid.width, grid.height
    sx, sy = start.x, start.y
    cx, cy = sx, sy
    px, py = sx - 1, sy

    points: list[tuple[int, int]] = [(sx, sy)]
    closed = False
    truncated = False

    while True:
        back = _DIRECTION_INDEX[(px - cx, py - cy)]
        next_pixel: tuple[int, int] | None = None

        for i in range(1, 9):
            dx, dy = DIRECTIONS[(back + i) % 8]
            nx, ny = cx + dx, cy + dy
            if 0 <= nx < width and 0 <= ny < height and mask[ny, nx] and not visited[ny, nx]:
                next_pixel = (nx, ny)
                break

        if next_pixel is None:
            break

        px, py = cx, cy
        cx, cy = next_pixel

        if (cx, cy) == (sx, sy):
            closed = True
            break
        if len(points) >= max_points:
            truncated = True
            break

        points.append((cx, cy))

    xs = np.fromiter((p[0] for p in points), dtype=np.int64, count=len(points))
    ys = np.fromiter((p[1] for p in points), dtype=np.int64, count=len(points))
    visited[ys, xs] = True

    return Contour(
        points=[PixelCoord(x, y) for x, y in points],
        closed=closed,
        truncated=truncated,
    )


class ContourTracer:
    """Extracts every border contour of a region grid.

    Example:
        tracer = ContourTracer(TracerConfig(min_contour_length=10))
        contours = tracer.trace_all(grid)
    """

    def __init__(self, config: TracerConfig | None = None) -> None:
        """Initialize the tracer.

        Args:
            config: Tracing thresholds (defaults if None)
        """
        self.config = config or TracerConfig()

    def trace_all(
        self,
        grid: IndexedGrid,
        visited: np.ndarray | None = None,
        cancel_check: Callable[[], bool] | None = None,
    ) -> list[Contour]:
        """Trace all contours in raster order.

        Args:
            grid: The region grid
            visited: Caller-owned boolean (height, width) buffer; pixels already
                marked are never traced again. A fresh buffer is used if None.
            cancel_check: Polled once per row; returning True cancels the scan

        Returns:
            Contours longer than ``min_contour_length``, in discovery order

        Raises:
            ValueError: If the visited buffer does not match the grid shape
            ProcessingCancelledError: If cancel_check requested cancellation
        """
        if visited is None:
            visited = np.zeros(grid.shape, dtype=bool)
        elif visited.shape != grid.shape or visited.dtype != np.bool_:
            raise ValueError(
                f"Visited buffer must be a bool array of shape {grid.shape}, "
                f"got {visited.dtype} {visited.shape}"
            )

        mask = border_mask(grid)
        contours: list[Contour] = []
        discarded = 0

        for y in range(grid.height):
            if cancel_check is not None and cancel_check():
                raise ProcessingCancelledError(
                    processed_count=len(contours), pending_count=grid.height - y
                )

            for x in np.flatnonzero(mask[y]):
                if visited[y, x]:
                    continue

                contour = trace_contour(
                    grid,
                    PixelCoord(int(x), y),
                    visited,
                    max_points=self.config.max_contour_points,
                    mask=mask,
                )

                if len(contour) > self.config.min_contour_length:
                    contours.append(contour)
                else:
                    discarded += 1

                if contour.truncated:
                    logger.warning(
                        "Contour at (%d, %d) truncated at %d points",
                        contour.start.x,
                        contour.start.y,
                        len(contour),
                    )

        logger.debug(
            "Traced %d contours (%d discarded as noise)", len(contours), discarded
        )
        return contours
