"""Indexed region grid representation.

This module defines the read-only input to the whole pipeline: a raster of
region identities. Colours are packed into a single integer key per pixel so
that region equality is a plain integer comparison on RGB (alpha is never
part of the key).
"""

from dataclasses import dataclass, field

import numpy as np


def pack_rgb(pixels: np.ndarray) -> np.ndarray:
    """Pack an RGB(A) pixel array into 24-bit integer keys.

    Args:
        pixels: Array of shape (height, width, 3) or (height, width, 4)

    Returns:
        Array of shape (height, width) with ``r << 16 | g << 8 | b``

    Raises:
        ValueError: If the array does not have 3 or 4 channels
    """
    if pixels.ndim != 3 or pixels.shape[2] not in (3, 4):
        raise ValueError(
            f"Expected an (h, w, 3) or (h, w, 4) colour array, got shape {pixels.shape}"
        )
    rgb = pixels[:, :, :3].astype(np.int64)
    return (rgb[:, :, 0] << 16) | (rgb[:, :, 1] << 8) | rgb[:, :, 2]


@dataclass(frozen=True, slots=True)
class PixelCoord:
    """An integer pixel coordinate.

    ``y`` counts rows in texture space (row 0 is the bottom of the image),
    so ``(x / width, y / height)`` is the pixel's UV coordinate.
    """

    x: int
    y: int

    def to_tuple(self) -> tuple[int, int]:
        """Convert to simple (x, y) tuple."""
        return (self.x, self.y)


@dataclass(frozen=True, eq=False)
class IndexedGrid:
    """A width x height raster of region keys.

    The key array is copied and made read-only on construction.

    Attributes:
        keys: Integer array of shape (height, width), indexed ``keys[y, x]``
    """

    keys: np.ndarray = field(repr=False)

    def __post_init__(self) -> None:
        keys = np.array(self.keys, dtype=np.int64, copy=True)
        if keys.ndim != 2:
            raise ValueError(f"Grid keys must be 2D, got shape {keys.shape}")
        if keys.size == 0:
            raise ValueError("Grid must contain at least one pixel")
        keys.setflags(write=False)
        object.__setattr__(self, "keys", keys)

    @classmethod
    def from_rgb(cls, pixels: np.ndarray) -> "IndexedGrid":
        """Build a grid from an RGB or RGBA colour array (alpha ignored)."""
        return cls(pack_rgb(np.asarray(pixels)))

    @classmethod
    def from_ids(cls, ids: np.ndarray) -> "IndexedGrid":
        """Build a grid from a 2D array of integer region IDs."""
        ids = np.asarray(ids)
        if not np.issubdtype(ids.dtype, np.integer):
            raise ValueError(f"Region IDs must be integers, got dtype {ids.dtype}")
        return cls(ids)

    @property
    def width(self) -> int:
        return int(self.keys.shape[1])

    @property
    def height(self) -> int:
        return int(self.keys.shape[0])

    @property
    def shape(self) -> tuple[int, int]:
        """Return (height, width)."""
        return (self.height, self.width)

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def key_at(self, x: int, y: int) -> int:
        """Get the region key of pixel (x, y)."""
        return int(self.keys[y, x])

    def __repr__(self) -> str:
        return f"IndexedGrid(width={self.width}, height={self.height})"
