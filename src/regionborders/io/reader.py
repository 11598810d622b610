"""Readers for pipeline inputs.

This module provides:
- IdMapReader: Loads region ID images with Pillow
- MeshReader: Loads UV-mapped surface meshes with trimesh (or .npz archives)

Both fail before any computation starts when an input is missing or
unreadable.
"""

from pathlib import Path

import numpy as np
import trimesh
from PIL import Image

from regionborders.domain import IndexedGrid, MeshTransform, SurfaceMesh
from regionborders.exceptions import ImageLoadError, MeshLoadError
from regionborders.io.converter import image_to_grid, trimesh_to_domain


class IdMapReader:
    """Loads a region ID image and converts it to an IndexedGrid.

    Example:
        with IdMapReader(Path("provinces.png")) as reader:
            grid = reader.to_grid()
    """

    def __init__(self, image_path: Path) -> None:
        """Initialize the reader.

        Args:
            image_path: Path to any Pillow-decodable image
        """
        self._image_path = image_path
        self._image: Image.Image | None = None

    def load(self) -> None:
        """Load and decode the image.

        Raises:
            ImageLoadError: If the file is missing or cannot be decoded
        """
        if not self._image_path.exists():
            raise ImageLoadError(str(self._image_path), "file not found")
        if not self._image_path.is_file():
            raise ImageLoadError(str(self._image_path), "not a file")

        try:
            image = Image.open(self._image_path)
            image.load()
        except Exception as e:
            raise ImageLoadError(str(self._image_path), str(e)) from e

        self._image = image

    def _require_image(self) -> Image.Image:
        if self._image is None:
            raise RuntimeError("ID map not loaded. Call load() first.")
        return self._image

    @property
    def width(self) -> int:
        return self._require_image().width

    @property
    def height(self) -> int:
        return self._require_image().height

    @property
    def mode(self) -> str:
        """Pillow mode of the decoded image (e.g. 'RGB', 'P')."""
        return self._require_image().mode

    def to_grid(self) -> IndexedGrid:
        """Convert the loaded image to a grid in texture row order.

        Raises:
            RuntimeError: If the image has not been loaded yet
        """
        return image_to_grid(self._require_image())

    def close(self) -> None:
        """Close the image and free resources."""
        if self._image is not None:
            self._image.close()
            self._image = None

    def __enter__(self) -> "IdMapReader":
        """Context manager entry."""
        self.load()
        return self

    def __exit__(self, _exc_type: object, _exc_val: object, _exc_tb: object) -> None:
        """Context manager exit."""
        self.close()


class MeshReader:
    """Loads a UV-mapped surface mesh.

    Supported inputs are anything trimesh can load as a single mesh with
    texture coordinates (OBJ, PLY, GLB, ...) and ``.npz`` archives holding
    ``vertices``, ``uvs`` and ``triangles`` arrays.
    """

    NPZ_KEYS = ("vertices", "uvs", "triangles")

    def __init__(self, mesh_path: Path, transform: MeshTransform | None = None) -> None:
        self._mesh_path = mesh_path
        self._transform = transform or MeshTransform()

    def load(self) -> SurfaceMesh:
        """Load the mesh.

        Returns:
            The surface mesh with the reader's world transform

        Raises:
            MeshLoadError: If the file is missing, unreadable or lacks UVs
        """
        if not self._mesh_path.exists():
            raise MeshLoadError(str(self._mesh_path), "file not found")

        try:
            if self._mesh_path.suffix.lower() == ".npz":
                return self._load_npz()
            mesh = trimesh.load(str(self._mesh_path), force="mesh", process=False)
            return trimesh_to_domain(mesh, self._transform)
        except MeshLoadError:
            raise
        except Exception as e:
            raise MeshLoadError(str(self._mesh_path), str(e)) from e

    def _load_npz(self) -> SurfaceMesh:
        with np.load(self._mesh_path) as archive:
            missing = [key for key in self.NPZ_KEYS if key not in archive]
            if missing:
                raise MeshLoadError(
                    str(self._mesh_path), f"archive is missing {', '.join(missing)}"
                )
            return SurfaceMesh(
                vertices=archive["vertices"],
                uvs=archive["uvs"],
                triangles=archive["triangles"],
                transform=self._transform,
            )
