"""Raster artefacts produced by the pipeline."""

from dataclasses import dataclass, field

import numpy as np


@dataclass(frozen=True, eq=False)
class DistanceField:
    """Normalised distance to the nearest border pixel.

    0.0 lies on a border pixel, 1.0 at or beyond ``spread`` pixels away.

    Attributes:
        values: float32 array of shape (height, width), texture row order
        spread: Distance in pixels mapped to 1.0
    """

    values: np.ndarray = field(repr=False)
    spread: float

    def __post_init__(self) -> None:
        values = np.array(self.values, dtype=np.float32, copy=True)
        values.setflags(write=False)
        object.__setattr__(self, "values", values)

    @property
    def width(self) -> int:
        return int(self.values.shape[1])

    @property
    def height(self) -> int:
        return int(self.values.shape[0])


@dataclass(frozen=True, eq=False)
class RasterOverlay:
    """An RGBA border overlay built from stamped anti-aliased disks.

    Attributes:
        pixels: uint8 array of shape (height, width, 4), texture row order
    """

    pixels: np.ndarray = field(repr=False)

    def __post_init__(self) -> None:
        pixels = np.array(self.pixels, dtype=np.uint8, copy=True)
        if pixels.ndim != 3 or pixels.shape[2] != 4:
            raise ValueError(f"Overlay must have shape (h, w, 4), got {pixels.shape}")
        pixels.setflags(write=False)
        object.__setattr__(self, "pixels", pixels)

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def alpha(self) -> np.ndarray:
        return self.pixels[:, :, 3]

    def is_empty(self) -> bool:
        """Check whether every pixel is fully transparent."""
        return not bool(self.alpha.any())
