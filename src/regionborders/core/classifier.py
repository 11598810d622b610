"""Border classification for indexed region grids.

A pixel is a border pixel when at least one of its in-bounds up/down/left/right
neighbours has a different region key. Pixels on the grid edge are judged only
against the neighbours that exist.

``is_border`` and ``border_mask`` implement the same predicate. The tracer,
the distance field and the overlay all seed from the mask, so they agree on
which pixels are borders.
"""

import numpy as np

from regionborders.domain import IndexedGrid, PixelCoord


def is_border(grid: IndexedGrid, x: int, y: int) -> bool:
    """Determine whether pixel (x, y) lies on a region border.

    Args:
        grid: The region grid
        x: Column of the pixel
        y: Row of the pixel

    Returns:
        True if any existing 4-neighbour has a different key

    Examples:
        >>> grid = IndexedGrid.from_ids(np.array([[1, 2]]))
        >>> is_border(grid, 0, 0)
        True
    """
    keys = grid.keys
    center = keys[y, x]
    width, height = grid.width, grid.height

    if x > 0 and keys[y, x - 1] != center:
        return True
    if x < width - 1 and keys[y, x + 1] != center:
        return True
    if y > 0 and keys[y - 1, x] != center:
        return True
    if y < height - 1 and keys[y + 1, x] != center:
        return True
    return False


def border_mask(grid: IndexedGrid) -> np.ndarray:
    """Classify every pixel of the grid at once.

    Args:
        grid: The region grid

    Returns:
        Boolean array of shape (height, width), True on border pixels
    """
    keys = grid.keys
    mask = np.zeros(keys.shape, dtype=bool)

    horizontal = keys[:, 1:] != keys[:, :-1]
    mask[:, :-1] |= horizontal
    mask[:, 1:] |= horizontal

    vertical = keys[1:, :] != keys[:-1, :]
    mask[:-1, :] |= vertical
    mask[1:, :] |= vertical

    return mask


def border_pixels(grid: IndexedGrid) -> list[PixelCoord]:
    """List border pixels in raster (row-major) order."""
    ys, xs = np.nonzero(border_mask(grid))
    return [PixelCoord(int(x), int(y)) for x, y in zip(xs, ys, strict=True)]
