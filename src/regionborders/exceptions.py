"""Exception hierarchy for Region Borders."""

from typing import Any


class RegionBordersError(Exception):
    """Base exception for all Region Borders errors."""

    pass


class InputError(RegionBordersError):
    """Errors related to loading pipeline inputs."""

    pass


class ImageLoadError(InputError):
    """Error loading an ID map image."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to load ID map '{path}': {reason}")


class MeshLoadError(InputError):
    """Error loading a surface mesh."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to load mesh '{path}': {reason}")


class OutputError(RegionBordersError):
    """Errors related to writing output artefacts."""

    pass


class ArtifactSaveError(OutputError):
    """One or more artefacts could not be written.

    The in-memory result is kept on the exception so a caller can retry
    the write without recomputing anything.
    """

    def __init__(
        self,
        failures: list[tuple[str, str]],
        result: Any = None,
    ) -> None:
        self.failures = failures
        self.result = result
        details = "; ".join(f"{path}: {reason}" for path, reason in failures)
        super().__init__(f"Failed to save {len(failures)} artefact(s): {details}")


class GeometryError(RegionBordersError):
    """Errors in geometric calculations."""

    pass


class ProjectionError(GeometryError):
    """Error projecting a contour onto a surface mesh."""

    def __init__(self, contour_index: int, reason: str) -> None:
        self.contour_index = contour_index
        self.reason = reason
        super().__init__(f"Projection failed for contour {contour_index}: {reason}")


class ProcessingCancelledError(RegionBordersError):
    """Processing was cancelled by user."""

    def __init__(self, processed_count: int, pending_count: int) -> None:
        self.processed_count = processed_count
        self.pending_count = pending_count
        super().__init__(
            f"Processing cancelled: {processed_count} completed, {pending_count} pending"
        )
