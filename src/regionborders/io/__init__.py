"""I/O layer for regionborders.

This module handles reading inputs and writing artefacts. It provides a clean
abstraction layer between Pillow/trimesh and the domain models.

Key responsibilities:
- Load ID map images into texture-space grids
- Load UV-mapped meshes
- Persist polylines, overlays and distance fields

Key classes:
- IdMapReader: Load ID maps
- MeshReader: Load meshes
- ArtifactWriter: Save artefacts
"""

from regionborders.io.reader import IdMapReader, MeshReader
from regionborders.io.writer import ArtifactWriter

__all__ = [
    "ArtifactWriter",
    "IdMapReader",
    "MeshReader",
]
