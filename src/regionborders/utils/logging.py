"""Logging utilities for Region Borders."""

import logging
from dataclasses import dataclass, field
from pathlib import Path

import structlog

_HANDLER_NAME = "regionborders"


@dataclass
class ProcessingStats:
    """Statistics from processing run."""

    contours_traced: int = 0
    contours_projected: int = 0
    polylines_kept: int = 0
    polylines_dropped: int = 0
    pixels_skipped: int = 0
    error_count: int = 0
    errors: list[tuple[int, str]] = field(default_factory=list)
    contour_timings_ms: list[float] = field(default_factory=list)
    was_cancelled: bool = False
    cancelled_count: int = 0
    start_time: float | None = None
    end_time: float | None = None

    @property
    def duration_seconds(self) -> float:
        """Calculate processing duration."""
        if self.start_time and self.end_time:
            return self.end_time - self.start_time
        return 0.0

    @property
    def avg_contour_time_ms(self) -> float | None:
        if not self.contour_timings_ms:
            return None
        return sum(self.contour_timings_ms) / len(self.contour_timings_ms)

    @property
    def min_contour_time_ms(self) -> float | None:
        return min(self.contour_timings_ms) if self.contour_timings_ms else None

    @property
    def max_contour_time_ms(self) -> float | None:
        return max(self.contour_timings_ms) if self.contour_timings_ms else None


def configure_logging(
    log_file: Path | None = None,
    console_level: str = "INFO",
    file_level: str = "DEBUG",
    quiet: bool = False,
) -> structlog.stdlib.BoundLogger:
    """Configure dual-output structured logging.

    Handlers installed by an earlier call are replaced, so configuring twice
    does not duplicate output.

    Args:
        log_file: Path to log file (no file output if None)
        console_level: Logging level for console output
        file_level: Logging level for file output
        quiet: If True, suppress console output except errors

    Returns:
        Configured structlog logger
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    for handler in list(root_logger.handlers):
        if handler.get_name() == _HANDLER_NAME:
            root_logger.removeHandler(handler)
            handler.close()

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.set_name(_HANDLER_NAME)
        file_handler.setLevel(getattr(logging, file_level.upper()))
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s | %(levelname)-8s | %(name)s | %(message)s")
        )
        root_logger.addHandler(file_handler)

    console_handler = logging.StreamHandler()
    console_handler.set_name(_HANDLER_NAME)
    console_handler.setLevel(logging.ERROR if quiet else getattr(logging, console_level.upper()))
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    root_logger.addHandler(console_handler)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logger = structlog.get_logger("regionborders")
    logger.debug(
        "Logging initialized",
        log_file=str(log_file) if log_file else None,
        level=file_level,
    )

    return logger


class ProcessingLogger:
    """Logger for tracking processing progress and statistics."""

    def __init__(self, logger: structlog.stdlib.BoundLogger) -> None:
        self._logger = logger
        self._stats = ProcessingStats()

    def log_trace_complete(self, contour_count: int, width: int, height: int) -> None:
        """Log the result of a tracing pass."""
        self._logger.info(
            "Contours traced",
            contours=contour_count,
            width=width,
            height=height,
        )
        self._stats.contours_traced += contour_count

    def log_contour_projected(
        self,
        contour_index: int,
        point_count: int,
        skipped: int,
        duration_ms: float,
    ) -> None:
        """Log successful contour projection."""
        self._logger.debug(
            "Contour projected",
            contour=contour_index,
            points=point_count,
            skipped=skipped,
            duration_ms=round(duration_ms, 2),
        )
        self._stats.contours_projected += 1
        self._stats.pixels_skipped += skipped
        self._stats.contour_timings_ms.append(duration_ms)

    def log_polyline_kept(self, contour_index: int) -> None:
        self._stats.polylines_kept += 1

    def log_polyline_dropped(self, contour_index: int, point_count: int) -> None:
        """Log a projected polyline that fell under the length threshold."""
        self._logger.debug(
            "Polyline dropped",
            contour=contour_index,
            points=point_count,
            reason="too short after projection",
        )
        self._stats.polylines_dropped += 1

    def log_contour_vanished(self, contour_index: int, pixel_count: int) -> None:
        """Log a contour none of whose pixels could be projected."""
        self._logger.warning(
            "Border vanished: no pixel of the contour lies in the mesh UV layout",
            contour=contour_index,
            pixels=pixel_count,
        )
        self._stats.polylines_dropped += 1

    def log_projection_error(
        self,
        contour_index: int,
        error: Exception,
        traceback: str | None = None,
    ) -> None:
        """Log contour projection error."""
        self._logger.error(
            "Contour projection failed",
            contour=contour_index,
            error=str(error),
            error_type=type(error).__name__,
            traceback=traceback,
        )
        self._stats.error_count += 1
        self._stats.errors.append((contour_index, str(error)))

    def log_artifact_saved(self, path: Path, kind: str) -> None:
        self._logger.info("Artefact saved", path=str(path), kind=kind)

    @property
    def stats(self) -> ProcessingStats:
        """Get current processing statistics."""
        return self._stats
