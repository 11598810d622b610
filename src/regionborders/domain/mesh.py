"""Triangulated surface mesh used for UV to world-space projection.

The mesh is supplied by the caller and never modified. Only the pieces the
projector needs are kept: vertex positions, per-vertex UVs, triangle indices
and the object's world transform.
"""

from dataclasses import dataclass, field
from typing import Any

import numpy as np
from trimesh import transformations


@dataclass(frozen=True)
class MeshTransform:
    """Object-to-world transform of a mesh.

    Applied as scale, then rotation, then translation.

    Attributes:
        position: World-space translation (x, y, z)
        rotation: Unit quaternion (w, x, y, z)
        scale: Per-axis scale (x, y, z)
    """

    position: tuple[float, float, float] = (0.0, 0.0, 0.0)
    rotation: tuple[float, float, float, float] = (1.0, 0.0, 0.0, 0.0)
    scale: tuple[float, float, float] = (1.0, 1.0, 1.0)

    def is_identity(self) -> bool:
        return (
            self.position == (0.0, 0.0, 0.0)
            and self.rotation == (1.0, 0.0, 0.0, 0.0)
            and self.scale == (1.0, 1.0, 1.0)
        )

    def matrix(self) -> np.ndarray:
        """Build the 4x4 homogeneous transform matrix (T * R * S)."""
        translate = transformations.translation_matrix(self.position)
        rotate = transformations.quaternion_matrix(self.rotation)
        scale = np.diag([*self.scale, 1.0])
        return transformations.concatenate_matrices(translate, rotate, scale)

    def transform_points(self, points: np.ndarray) -> np.ndarray:
        """Map object-space points of shape (n, 3) to world space."""
        points = np.asarray(points, dtype=np.float64).reshape(-1, 3)
        if self.is_identity() or len(points) == 0:
            return points.copy()
        return transformations.transform_points(points, self.matrix())

    def to_dict(self) -> dict[str, Any]:
        return {
            "position": list(self.position),
            "rotation": list(self.rotation),
            "scale": list(self.scale),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "MeshTransform":
        return cls(
            position=tuple(data["position"]),
            rotation=tuple(data["rotation"]),
            scale=tuple(data["scale"]),
        )


@dataclass(frozen=True, eq=False)
class SurfaceMesh:
    """A triangulated surface with a UV parametrisation.

    Arrays are copied and made read-only on construction.

    Attributes:
        vertices: Object-space positions, shape (n, 3)
        uvs: Per-vertex texture coordinates, shape (n, 2)
        triangles: Vertex indices, shape (m, 3)
        transform: Object-to-world transform applied after interpolation
    """

    vertices: np.ndarray = field(repr=False)
    uvs: np.ndarray = field(repr=False)
    triangles: np.ndarray = field(repr=False)
    transform: MeshTransform = field(default_factory=MeshTransform)

    def __post_init__(self) -> None:
        vertices = np.array(self.vertices, dtype=np.float64, copy=True)
        uvs = np.array(self.uvs, dtype=np.float64, copy=True)
        triangles = np.array(self.triangles, dtype=np.int64, copy=True).reshape(-1, 3)

        if vertices.ndim != 2 or vertices.shape[1] != 3:
            raise ValueError(f"Vertices must have shape (n, 3), got {vertices.shape}")
        if uvs.shape != (len(vertices), 2):
            raise ValueError(
                f"Expected one UV per vertex with shape ({len(vertices)}, 2), got {uvs.shape}"
            )
        if triangles.size and (triangles.min() < 0 or triangles.max() >= len(vertices)):
            raise ValueError("Triangle indices reference vertices out of range")

        for array in (vertices, uvs, triangles):
            array.setflags(write=False)
        object.__setattr__(self, "vertices", vertices)
        object.__setattr__(self, "uvs", uvs)
        object.__setattr__(self, "triangles", triangles)

    @property
    def vertex_count(self) -> int:
        return int(self.vertices.shape[0])

    @property
    def triangle_count(self) -> int:
        return int(self.triangles.shape[0])

    def triangle_uvs(self) -> np.ndarray:
        """UV corners of every triangle, shape (m, 3, 2)."""
        return self.uvs[self.triangles]

    def triangle_vertices(self, index: int) -> np.ndarray:
        """Object-space corners of one triangle, shape (3, 3)."""
        return self.vertices[self.triangles[index]]

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for IPC."""
        return {
            "vertices": self.vertices.tolist(),
            "uvs": self.uvs.tolist(),
            "triangles": self.triangles.tolist(),
            "transform": self.transform.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SurfaceMesh":
        """Deserialize from dictionary."""
        return cls(
            vertices=np.array(data["vertices"], dtype=np.float64).reshape(-1, 3),
            uvs=np.array(data["uvs"], dtype=np.float64).reshape(-1, 2),
            triangles=np.array(data["triangles"], dtype=np.int64).reshape(-1, 3),
            transform=MeshTransform.from_dict(data["transform"]),
        )

    def __repr__(self) -> str:
        return (
            f"SurfaceMesh(vertices={self.vertex_count}, triangles={self.triangle_count})"
        )
