"""Pipeline orchestration for border artefact generation.

This module coordinates the three tool chains:
- borders: trace contours, project them onto a mesh (in parallel worker
  processes) and save one polyline per border
- overlay: stamp anti-aliased disks on every border pixel and save a PNG
- distance field: jump-flood the border pixels and save a float TIFF

Key components:
- project_contour: Top-level picklable function for parallel execution
- BorderProcessor: Main orchestrator class
"""

import time
import traceback
from collections.abc import Callable
from concurrent.futures import ProcessPoolExecutor, as_completed
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import numpy as np

from regionborders.config import ProjectionConfig, RegionBordersSettings
from regionborders.core.classifier import border_pixels
from regionborders.core.distance import DistanceFieldBuilder
from regionborders.core.projector import SurfaceProjector
from regionborders.core.stamper import RasterStamper
from regionborders.core.tracer import ContourTracer
from regionborders.domain import (
    BorderPolyline3D,
    Contour,
    DistanceField,
    IndexedGrid,
    MeshTransform,
    RasterOverlay,
    SurfaceMesh,
)
from regionborders.exceptions import ArtifactSaveError
from regionborders.io import ArtifactWriter, IdMapReader, MeshReader
from regionborders.utils import ProcessingLogger, ProcessingStats, configure_logging

# Projector of the current worker process, set by _init_worker
_worker_projector: SurfaceProjector | None = None


def _init_worker(mesh_dict: dict[str, Any], projection_dict: dict[str, Any]) -> None:
    """Build the worker's projector once per process."""
    global _worker_projector
    _worker_projector = SurfaceProjector(
        SurfaceMesh.from_dict(mesh_dict),
        config=ProjectionConfig(**projection_dict),
    )


def _project(
    projector: SurfaceProjector,
    contour_dict: dict[str, Any],
    contour_index: int,
    width: int,
    height: int,
) -> dict[str, Any]:
    start_time = time.time()

    try:
        contour = Contour.from_dict(contour_dict)
        polyline = projector.project(contour, width, height, contour_index=contour_index)

        duration_ms = (time.time() - start_time) * 1000
        return {
            "polyline": polyline.to_dict(),
            "skipped": len(contour) - len(polyline),
            "duration_ms": duration_ms,
        }

    except Exception as e:
        duration_ms = (time.time() - start_time) * 1000
        tb = traceback.format_exc()
        return {
            "error": str(e),
            "contour_index": contour_index,
            "traceback": tb,
            "duration_ms": duration_ms,
        }


def project_contour(
    contour_dict: dict[str, Any],
    contour_index: int,
    width: int,
    height: int,
) -> dict[str, Any]:
    """Project a single contour in a worker process.

    Top-level function designed to be picklable for use with ProcessPoolExecutor.
    The worker's mesh is installed once by the pool initializer.

    Args:
        contour_dict: Serialized contour (from Contour.to_dict())
        contour_index: Index of the contour in its extraction pass
        width: Source grid width
        height: Source grid height

    Returns:
        Dictionary containing either:
        - Success: {"polyline": dict, "skipped": int, "duration_ms": float}
        - Error: {"error": str, "contour_index": int, "traceback": str, "duration_ms": float}
    """
    if _worker_projector is None:
        return {
            "error": "worker projector not initialised",
            "contour_index": contour_index,
            "traceback": None,
            "duration_ms": 0.0,
        }
    return _project(_worker_projector, contour_dict, contour_index, width, height)


@dataclass
class ExtractionResult:
    """Outcome of a border extraction run.

    Attributes:
        contours: Contours kept by the tracer
        polylines: Projected polylines kept after projection, in contour order
        stats: Counters and timings of the run
        saved_paths: Files written (empty until saved)
    """

    contours: list[Contour]
    polylines: list[BorderPolyline3D]
    stats: ProcessingStats
    saved_paths: list[Path] = field(default_factory=list)


class BorderProcessor:
    """Orchestrates border artefact generation.

    Example:
        settings = RegionBordersSettings()
        processor = BorderProcessor(settings)
        result = processor.run_extract(
            id_map_path=Path("provinces.png"),
            mesh_path=Path("globe.obj"),
        )
    """

    def __init__(self, config: RegionBordersSettings) -> None:
        """Initialize the processor with configuration.

        Args:
            config: Application settings
        """
        self.config = config
        self.logger = configure_logging(
            log_file=config.logging.log_file,
            console_level=config.logging.log_level,
            file_level=config.logging.file_log_level,
        )
        self.processing_logger = ProcessingLogger(self.logger)
        self.tracer = ContourTracer(config.tracer)

    def load_grid(self, id_map_path: Path) -> IndexedGrid:
        """Load an ID map into a texture-space grid.

        Raises:
            ImageLoadError: If the image is missing or unreadable
        """
        with IdMapReader(id_map_path) as reader:
            grid = reader.to_grid()
        self.logger.info(
            "ID map loaded",
            path=str(id_map_path),
            width=grid.width,
            height=grid.height,
        )
        return grid

    def trace(self, grid: IndexedGrid, visited: np.ndarray | None = None) -> list[Contour]:
        """Trace the border contours of a grid."""
        contours = self.tracer.trace_all(grid, visited=visited)
        self.processing_logger.log_trace_complete(len(contours), grid.width, grid.height)
        return contours

    def extract_borders(
        self,
        grid: IndexedGrid,
        mesh: SurfaceMesh,
        max_workers: int | None = None,
        progress_callback: Callable[[int, int], None] | None = None,
    ) -> ExtractionResult:
        """Trace contours and project them onto the mesh.

        Args:
            grid: Region grid in texture row order
            mesh: Surface to project onto
            max_workers: Worker processes (None = config, 1 = in-process)
            progress_callback: Optional callback(completed, total)

        Returns:
            Extraction result with kept polylines in contour order

        Raises:
            KeyboardInterrupt: If processing is cancelled by user
        """
        self.processing_logger = ProcessingLogger(self.logger)
        stats = self.processing_logger.stats
        stats.start_time = time.time()

        if max_workers is None:
            max_workers = self.config.processing.max_workers

        contours = self.trace(grid)

        if max_workers == 1:
            results = self._project_sequential(contours, grid, mesh, progress_callback)
        else:
            results = self._project_parallel(
                contours, grid, mesh, max_workers, stats, progress_callback
            )

        polylines: list[BorderPolyline3D] = []
        for index in sorted(results):
            polyline = results[index]
            if polyline.is_empty():
                self.processing_logger.log_contour_vanished(index, len(contours[index]))
            elif len(polyline) <= self.config.tracer.min_contour_length:
                self.processing_logger.log_polyline_dropped(index, len(polyline))
            else:
                self.processing_logger.log_polyline_kept(index)
                polylines.append(polyline)

        stats.end_time = time.time()

        self.logger.info(
            "Border extraction complete",
            contours=len(contours),
            polylines=len(polylines),
            dropped=stats.polylines_dropped,
            errors=stats.error_count,
            duration_seconds=round(stats.duration_seconds, 2),
        )

        return ExtractionResult(contours=contours, polylines=polylines, stats=stats)

    def _handle_result(
        self, index: int, result: dict[str, Any], results: dict[int, BorderPolyline3D]
    ) -> None:
        if "error" in result:
            self.processing_logger.log_projection_error(
                contour_index=index,
                error=Exception(result["error"]),
                traceback=result.get("traceback"),
            )
            return

        polyline = BorderPolyline3D.from_dict(result["polyline"])
        results[index] = polyline
        self.processing_logger.log_contour_projected(
            contour_index=index,
            point_count=len(polyline),
            skipped=result["skipped"],
            duration_ms=result.get("duration_ms", 0.0),
        )

    def _project_sequential(
        self,
        contours: list[Contour],
        grid: IndexedGrid,
        mesh: SurfaceMesh,
        progress_callback: Callable[[int, int], None] | None,
    ) -> dict[int, BorderPolyline3D]:
        projector = SurfaceProjector(mesh, config=self.config.projection)
        results: dict[int, BorderPolyline3D] = {}
        total = len(contours)

        for index, contour in enumerate(contours):
            result = _project(projector, contour.to_dict(), index, grid.width, grid.height)
            self._handle_result(index, result, results)
            if progress_callback is not None:
                progress_callback(index + 1, total)

        return results

    def _project_parallel(
        self,
        contours: list[Contour],
        grid: IndexedGrid,
        mesh: SurfaceMesh,
        max_workers: int | None,
        stats: ProcessingStats,
        progress_callback: Callable[[int, int], None] | None,
    ) -> dict[int, BorderPolyline3D]:
        """Project contours in parallel using ProcessPoolExecutor."""
        results: dict[int, BorderPolyline3D] = {}
        if not contours:
            return results

        self.logger.info(
            "Starting parallel projection",
            contour_count=len(contours),
            max_workers=max_workers,
            triangles=mesh.triangle_count,
        )

        total = len(contours)
        completed = 0
        pending_futures: dict = {}

        with ProcessPoolExecutor(
            max_workers=max_workers,
            initializer=_init_worker,
            initargs=(mesh.to_dict(), self.config.projection.model_dump()),
        ) as executor:
            for index, contour in enumerate(contours):
                future = executor.submit(
                    project_contour,
                    contour.to_dict(),
                    index,
                    grid.width,
                    grid.height,
                )
                pending_futures[future] = index

            try:
                for future in as_completed(pending_futures):
                    index = pending_futures.pop(future)

                    try:
                        self._handle_result(index, future.result(), results)
                    except Exception as e:
                        # Executor-level error
                        self.processing_logger.log_projection_error(
                            contour_index=index,
                            error=e,
                            traceback=traceback.format_exc(),
                        )

                    completed += 1
                    if progress_callback is not None:
                        progress_callback(completed, total)

            except KeyboardInterrupt:
                self.logger.info("Cancellation requested by user")
                for f in pending_futures:
                    f.cancel()

                stats.was_cancelled = True
                stats.cancelled_count = len(pending_futures)

                executor.shutdown(wait=True, cancel_futures=True)
                raise

        return results

    def render_overlay(self, grid: IndexedGrid) -> RasterOverlay:
        """Stamp anti-aliased disks on every border pixel of the grid."""
        pixels = border_pixels(grid)
        overlay = RasterStamper(self.config.overlay).stamp(pixels, grid.width, grid.height)
        self.logger.info(
            "Overlay rendered",
            border_pixels=len(pixels),
            thickness=self.config.overlay.line_thickness,
        )
        return overlay

    def build_distance_field(
        self,
        grid: IndexedGrid,
        cancel_check: Callable[[], bool] | None = None,
    ) -> DistanceField:
        """Build the normalised border distance field of the grid."""
        field_ = DistanceFieldBuilder(self.config.distance).build(grid, cancel_check=cancel_check)
        self.logger.info(
            "Distance field built",
            width=field_.width,
            height=field_.height,
            spread=field_.spread,
        )
        return field_

    def run_extract(
        self,
        id_map_path: Path,
        mesh_path: Path,
        output_dir: Path | None = None,
        max_workers: int | None = None,
        progress_callback: Callable[[int, int], None] | None = None,
    ) -> ExtractionResult:
        """Load inputs, extract borders and save one polyline file per border.

        Both inputs are loaded before any computation starts.

        Raises:
            ImageLoadError: If the ID map cannot be loaded
            MeshLoadError: If the mesh cannot be loaded
            ArtifactSaveError: If saving failed; ``result`` holds the computed data
        """
        grid = self.load_grid(id_map_path)
        projection = self.config.projection
        transform = MeshTransform(
            position=projection.mesh_position,
            rotation=projection.mesh_rotation,
            scale=projection.mesh_scale,
        )
        mesh = MeshReader(mesh_path, transform=transform).load()
        self.logger.info("Mesh loaded", path=str(mesh_path), triangles=mesh.triangle_count)

        result = self.extract_borders(
            grid, mesh, max_workers=max_workers, progress_callback=progress_callback
        )

        writer = ArtifactWriter(
            output_dir or self.config.output.output_dir,
            prefix=self.config.output.border_prefix,
        )
        try:
            result.saved_paths = writer.write_polylines(result.polylines)
        except ArtifactSaveError as e:
            raise ArtifactSaveError(e.failures, result=result) from e

        for path in result.saved_paths:
            self.processing_logger.log_artifact_saved(path, "polyline")
        return result

    def run_overlay(
        self, id_map_path: Path, output_path: Path | None = None
    ) -> tuple[RasterOverlay, Path]:
        """Load an ID map, render its border overlay and save it as PNG.

        Raises:
            ImageLoadError: If the ID map cannot be loaded
            ArtifactSaveError: If saving failed; ``result`` holds the overlay
        """
        grid = self.load_grid(id_map_path)
        overlay = self.render_overlay(grid)

        if output_path is None:
            output_path = ArtifactWriter.get_artifact_path(id_map_path, "borders", ".png")
        try:
            ArtifactWriter.write_overlay(overlay, output_path)
        except ArtifactSaveError as e:
            raise ArtifactSaveError(e.failures, result=overlay) from e

        self.processing_logger.log_artifact_saved(output_path, "overlay")
        return overlay, output_path

    def run_distance_field(
        self, id_map_path: Path, output_path: Path | None = None
    ) -> tuple[DistanceField, Path]:
        """Load an ID map, build its distance field and save it as float TIFF.

        Raises:
            ImageLoadError: If the ID map cannot be loaded
            ArtifactSaveError: If saving failed; ``result`` holds the field
        """
        grid = self.load_grid(id_map_path)
        field_ = self.build_distance_field(grid)

        if output_path is None:
            output_path = ArtifactWriter.get_artifact_path(id_map_path, "sdf", ".tiff")
        try:
            ArtifactWriter.write_distance_field(field_, output_path)
        except ArtifactSaveError as e:
            raise ArtifactSaveError(e.failures, result=field_) from e

        self.processing_logger.log_artifact_saved(output_path, "distance_field")
        return field_, output_path
