"""Traced border contours and their projected 3D polylines.

This module defines:
- Contour: An ordered loop of pixel coordinates along a region border
- BorderPolyline3D: The world-space polyline a contour projects to
"""

from dataclasses import dataclass, field
from typing import Any

import numpy as np

from regionborders.domain.grid import PixelCoord


@dataclass
class Contour:
    """An ordered, directed sequence of border pixels.

    A contour is closed when tracing returned to its start pixel. An open
    contour ended at a dead end; a truncated one hit the point cap.

    Attributes:
        points: Pixel coordinates in tracing order
        closed: Whether the trace returned to its start pixel
        truncated: Whether the trace was stopped by the point cap
    """

    points: list[PixelCoord]
    closed: bool = False
    truncated: bool = False
    _cached_bbox: tuple[int, int, int, int] | None = field(
        default=None, repr=False, init=False
    )

    def __len__(self) -> int:
        return len(self.points)

    @property
    def start(self) -> PixelCoord:
        """First traced pixel.

        Raises:
            ValueError: If the contour has no points
        """
        if not self.points:
            raise ValueError("Empty contour has no start pixel")
        return self.points[0]

    def bounding_box(self) -> tuple[int, int, int, int]:
        """Calculate bounding box of the contour.

        Result is cached for efficiency.

        Returns:
            Tuple of (min_x, min_y, max_x, max_y)
        """
        if self._cached_bbox is not None:
            return self._cached_bbox

        if not self.points:
            self._cached_bbox = (0, 0, 0, 0)
            return self._cached_bbox

        xs = [p.x for p in self.points]
        ys = [p.y for p in self.points]

        self._cached_bbox = (min(xs), min(ys), max(xs), max(ys))
        return self._cached_bbox

    def to_array(self) -> np.ndarray:
        """Return the points as an (n, 2) integer array of (x, y)."""
        if not self.points:
            return np.zeros((0, 2), dtype=np.int64)
        return np.array([p.to_tuple() for p in self.points], dtype=np.int64)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for IPC.

        Returns:
            Dictionary representation of the contour
        """
        return {
            "points": [p.to_tuple() for p in self.points],
            "closed": self.closed,
            "truncated": self.truncated,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Contour":
        """Deserialize from dictionary.

        Args:
            data: Dictionary representation of a contour

        Returns:
            Contour instance
        """
        return cls(
            points=[PixelCoord(int(x), int(y)) for x, y in data["points"]],
            closed=data.get("closed", False),
            truncated=data.get("truncated", False),
        )


@dataclass
class BorderPolyline3D:
    """World-space border line, one point per successfully projected pixel.

    Attributes:
        points: Array of shape (k, 3)
        contour_index: Index of the source contour in its extraction pass
        closed: Whether the source contour was closed
    """

    points: np.ndarray
    contour_index: int
    closed: bool = False

    def __post_init__(self) -> None:
        self.points = np.asarray(self.points, dtype=np.float64).reshape(-1, 3)

    def __len__(self) -> int:
        return int(self.points.shape[0])

    def is_empty(self) -> bool:
        return len(self) == 0

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dictionary."""
        return {
            "contour_index": self.contour_index,
            "closed": self.closed,
            "points": self.points.tolist(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "BorderPolyline3D":
        """Deserialize from dictionary."""
        return cls(
            points=np.array(data["points"], dtype=np.float64),
            contour_index=data["contour_index"],
            closed=data.get("closed", False),
        )
