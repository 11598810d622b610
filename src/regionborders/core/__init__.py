"""Core processing algorithms for regionborders.

This module contains the raster-to-vector border pipeline:

- Border classification (4-neighbour colour difference)
- Contour tracing (Moore-neighbour tracing with a shared visited buffer)
- Surface projection (UV point location and barycentric interpolation)
- Raster stamping (anti-aliased disks with max-alpha compositing)
- Distance fields (Jump Flooding Algorithm)

All algorithms are designed to be:
- Stateless between invocations (buffers are owned by the caller)
- Deterministic
- Safe for use in worker processes

Key functions:
- is_border: Scalar border predicate
- border_mask: Vectorised border predicate
- border_pixels: Border pixels in raster order
- trace_contour: Trace one contour from a start pixel
- barycentric: Barycentric coordinates in a UV triangle
- disk_kernel: Coverage of an anti-aliased disk
- jump_flood: Propagate nearest seeds

Key classes:
- ContourTracer: Extracts every contour of a grid
- SurfaceProjector: Projects contours onto a mesh
- LinearScanLocator / GridLocator: UV point location strategies
- RasterStamper: Builds border overlays
- DistanceFieldBuilder: Builds normalised distance fields
- BorderProcessor: Orchestrates the pipeline
"""

from regionborders.core.classifier import border_mask, border_pixels, is_border
from regionborders.core.distance import (
    DistanceFieldBuilder,
    jump_flood,
    nearest_seed_distances,
    seed_field,
)
from regionborders.core.processor import (
    BorderProcessor,
    ExtractionResult,
    project_contour,
)
from regionborders.core.projector import SurfaceProjector
from regionborders.core.stamper import DiskKernel, RasterStamper, disk_kernel
from regionborders.core.tracer import ContourTracer, trace_contour
from regionborders.core.uv_index import (
    GridLocator,
    LinearScanLocator,
    UVHit,
    UVLocator,
    barycentric,
    create_locator,
)

__all__ = [
    # Processor classes
    "BorderProcessor",
    # Tracer classes
    "ContourTracer",
    # Stamper classes
    "DiskKernel",
    # Distance classes
    "DistanceFieldBuilder",
    "ExtractionResult",
    # Projection classes
    "GridLocator",
    "LinearScanLocator",
    "RasterStamper",
    "SurfaceProjector",
    "UVHit",
    "UVLocator",
    # Functions
    "barycentric",
    "border_mask",
    "border_pixels",
    "create_locator",
    "disk_kernel",
    "is_border",
    "jump_flood",
    "nearest_seed_distances",
    "project_contour",
    "seed_field",
    "trace_contour",
]
