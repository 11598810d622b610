"""Artefact writer for pipeline outputs.

This module provides the ArtifactWriter class, which persists:
- border polylines as one JSON document per border ({prefix}_{n}.json)
- overlays as lossless PNG
- distance fields as 32-bit float TIFF
"""

import json
from pathlib import Path

from regionborders.domain import BorderPolyline3D, DistanceField, RasterOverlay
from regionborders.exceptions import ArtifactSaveError
from regionborders.io.converter import distance_field_to_image, overlay_to_image


class ArtifactWriter:
    """Writes pipeline artefacts to disk.

    Polyline writes are attempted one by one; failures are collected and
    reported together so a single bad path does not hide the others.

    Example:
        writer = ArtifactWriter(Path("BorderData"), prefix="Border")
        paths = writer.write_polylines(polylines)
    """

    def __init__(self, output_dir: Path, prefix: str = "Border") -> None:
        """Initialize the writer.

        Args:
            output_dir: Directory for polyline files (created on demand)
            prefix: File name prefix for polyline files
        """
        self._output_dir = output_dir
        self._prefix = prefix

    @property
    def output_dir(self) -> Path:
        return self._output_dir

    def polyline_path(self, index: int) -> Path:
        return self._output_dir / f"{self._prefix}_{index}.json"

    def write_polylines(self, polylines: list[BorderPolyline3D]) -> list[Path]:
        """Write each polyline to its own JSON file.

        Args:
            polylines: Polylines to persist, numbered in list order

        Returns:
            Paths of the written files

        Raises:
            ArtifactSaveError: If the directory or any file could not be written
        """
        try:
            self._output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ArtifactSaveError([(str(self._output_dir), str(e))]) from e

        written: list[Path] = []
        failures: list[tuple[str, str]] = []

        for index, polyline in enumerate(polylines):
            path = self.polyline_path(index)
            try:
                path.write_text(json.dumps(polyline.to_dict()), encoding="utf-8")
            except OSError as e:
                failures.append((str(path), str(e)))
                continue
            written.append(path)

        if failures:
            raise ArtifactSaveError(failures)

        return written

    @staticmethod
    def write_overlay(overlay: RasterOverlay, path: Path) -> Path:
        """Save an overlay as PNG.

        Raises:
            ArtifactSaveError: If the file could not be written
        """
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            overlay_to_image(overlay).save(path, format="PNG")
        except OSError as e:
            raise ArtifactSaveError([(str(path), str(e))]) from e
        return path

    @staticmethod
    def write_distance_field(field: DistanceField, path: Path) -> Path:
        """Save a distance field as a single-channel 32-bit float TIFF.

        Raises:
            ArtifactSaveError: If the file could not be written
        """
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            distance_field_to_image(field).save(path, format="TIFF")
        except OSError as e:
            raise ArtifactSaveError([(str(path), str(e))]) from e
        return path

    @staticmethod
    def get_artifact_path(input_path: Path, kind: str, extension: str) -> Path:
        """Generate an output path next to the input map.

        Converts: provinces.png, "borders", ".png" -> provinces-borders.png
                  provinces.png, "sdf", ".tiff" -> provinces-sdf.tiff

        Args:
            input_path: Source ID map path
            kind: Artefact kind appended to the stem
            extension: Output file extension including the dot

        Returns:
            Path beside the input
        """
        return input_path.parent / f"{input_path.stem}-{kind}{extension}"
