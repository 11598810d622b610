"""Distance field construction with the Jump Flooding Algorithm.

Every border pixel seeds itself; every other pixel starts with an infinitely
far seed. Each round looks at the 3x3 neighbourhood scaled by the current step
and adopts any neighbour's seed that is strictly closer. Steps halve from half
the next power of two of the larger grid side down to 1, which is ``width / 2``
for square power-of-two maps.

Rounds are double buffered: all pixels read the seeds as they were at the
start of the round, which makes every round data-parallel and the result
independent of traversal order.
"""

import logging
from collections.abc import Callable

import numpy as np

from regionborders.config import DistanceFieldConfig
from regionborders.core.classifier import border_mask
from regionborders.domain import DistanceField, IndexedGrid
from regionborders.exceptions import ProcessingCancelledError

logger = logging.getLogger(__name__)

# Neighbourhood examined each round, in a fixed order
_OFFSETS: tuple[tuple[int, int], ...] = tuple(
    (i, j) for j in (-1, 0, 1) for i in (-1, 0, 1)
)


def initial_step(width: int, height: int) -> int:
    """Return the first jump step for a grid of the given size."""
    longest = max(width, height)
    if longest <= 1:
        return 0
    return 1 << ((longest - 1).bit_length() - 1)


def seed_field(mask: np.ndarray) -> np.ndarray:
    """Build the initial seed buffer.

    Args:
        mask: Boolean (height, width) border mask

    Returns:
        float64 array of shape (height, width, 2) holding (x, y) seed
        coordinates, or +inf where a pixel has no seed yet
    """
    height, width = mask.shape
    ys, xs = np.mgrid[0:height, 0:width]
    seeds = np.full((height, width, 2), np.inf)
    seeds[mask, 0] = xs[mask]
    seeds[mask, 1] = ys[mask]
    return seeds


def _seed_distance(seeds: np.ndarray, xs: np.ndarray, ys: np.ndarray) -> np.ndarray:
    return np.hypot(seeds[:, :, 0] - xs, seeds[:, :, 1] - ys)


def jump_flood(
    seeds: np.ndarray,
    cancel_check: Callable[[], bool] | None = None,
) -> np.ndarray:
    """Propagate nearest seeds across the grid.

    Args:
        seeds: Initial seed buffer from ``seed_field``
        cancel_check: Polled between rounds; returning True cancels

    Returns:
        A new seed buffer with every pixel's resolved nearest seed

    Raises:
        ProcessingCancelledError: If cancel_check requested cancellation
    """
    height, width = seeds.shape[:2]
    ys, xs = np.mgrid[0:height, 0:width].astype(np.float64)
    current = seeds.copy()

    step = initial_step(width, height)
    rounds = 0
    while step >= 1:
        if cancel_check is not None and cancel_check():
            raise ProcessingCancelledError(processed_count=rounds, pending_count=step.bit_length())

        snapshot = current
        best = snapshot.copy()
        best_dist = _seed_distance(best, xs, ys)

        for i, j in _OFFSETS:
            if i == 0 and j == 0:
                continue
            dx, dy = i * step, j * step
            if abs(dx) >= width or abs(dy) >= height:
                continue

            # Destination pixels whose neighbour (x + dx, y + dy) is in bounds
            dst_y = slice(max(0, -dy), min(height, height - dy))
            dst_x = slice(max(0, -dx), min(width, width - dx))
            src_y = slice(max(0, dy), min(height, height + dy))
            src_x = slice(max(0, dx), min(width, width + dx))

            candidate = snapshot[src_y, src_x]
            candidate_dist = np.hypot(
                candidate[:, :, 0] - xs[dst_y, dst_x],
                candidate[:, :, 1] - ys[dst_y, dst_x],
            )
            closer = candidate_dist < best_dist[dst_y, dst_x]
            best[dst_y, dst_x][closer] = candidate[closer]
            best_dist[dst_y, dst_x][closer] = candidate_dist[closer]

        current = best
        rounds += 1
        step //= 2

    logger.debug("Jump flooding finished after %d rounds", rounds)
    return current


def nearest_seed_distances(seeds: np.ndarray) -> np.ndarray:
    """Euclidean distance from every pixel to its stored seed (inf if none)."""
    height, width = seeds.shape[:2]
    ys, xs = np.mgrid[0:height, 0:width].astype(np.float64)
    return _seed_distance(seeds, xs, ys)


class DistanceFieldBuilder:
    """Builds normalised border distance fields.

    Example:
        builder = DistanceFieldBuilder(DistanceFieldConfig(spread=64))
        field = builder.build(grid)
    """

    def __init__(self, config: DistanceFieldConfig | None = None) -> None:
        self.config = config or DistanceFieldConfig()

    def raw_distances(
        self,
        grid: IndexedGrid,
        cancel_check: Callable[[], bool] | None = None,
    ) -> np.ndarray:
        """Un-normalised distance from every pixel to its nearest border pixel.

        Args:
            grid: The region grid
            cancel_check: Polled between flood rounds

        Returns:
            float64 array of shape (height, width); inf everywhere if the grid
            has no border pixels
        """
        mask = border_mask(grid)
        if not mask.any():
            logger.warning(
                "Grid %dx%d has no border pixels; distance field is empty",
                grid.width,
                grid.height,
            )
        seeds = jump_flood(seed_field(mask), cancel_check=cancel_check)
        return nearest_seed_distances(seeds)

    def build(
        self,
        grid: IndexedGrid,
        cancel_check: Callable[[], bool] | None = None,
    ) -> DistanceField:
        """Build the distance field of a grid.

        Args:
            grid: The region grid
            cancel_check: Polled between flood rounds

        Returns:
            Distances divided by ``spread`` and clamped to [0, 1]
        """
        distances = self.raw_distances(grid, cancel_check=cancel_check)
        spread = float(self.config.spread)
        normalized = np.clip(distances / spread, 0.0, 1.0)
        return DistanceField(values=normalized.astype(np.float32), spread=spread)
