"""File type detection for cataloged files."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Protocol

from mediacat.extractor.exiftool import ExiftoolResult
from mediacat.tree import UNKNOWN_TYPE, File, FileState, Volume

logger = logging.getLogger(__name__)

MIME_TYPE_KEYS = ("File:MIMEType", "MIMEType")


class BatchExtractor(Protocol):
    def extract_batch(self, file_paths: list[str]) -> list[ExiftoolResult]:
        ...


@dataclass
class DetectionStats:
    """Statistics for one type detection run."""

    files_checked: int = 0
    files_detected: int = 0
    files_unknown: int = 0
    files_failed: int = 0


def mime_type_of(metadata: dict) -> str | None:
    for key in MIME_TYPE_KEYS:
        value = metadata.get(key)
        if value:
            return str(value)
    return None


class TypeDetector:
    """Fills in the type of files whose type has never been detected."""

    def __init__(self, runner: BatchExtractor, batch_size: int = 100):
        self.runner = runner
        self.batch_size = batch_size

    def update(self, volumes: Iterable[Volume]) -> DetectionStats:
        stats = DetectionStats()
        pending: list[tuple[str, File]] = [
            (str(volume.resolve(file)), file)
            for volume in volumes
            for file in volume.iter_files()
            if file.file_type is None and file.state is not FileState.MISSING
        ]
        logger.info("Detecting type of %d files", len(pending))

        for start in range(0, len(pending), self.batch_size):
            batch = pending[start : start + self.batch_size]
            results = self.runner.extract_batch([path for path, _ in batch])
            for (path, file), result in zip(batch, results):
                self._apply(path, file, result, stats)

        logger.info(
            "Type detection: %d detected, %d unknown, %d failed",
            stats.files_detected,
            stats.files_unknown,
            stats.files_failed,
        )
        return stats

    def _apply(self, path: str, file: File, result: ExiftoolResult, stats: DetectionStats) -> None:
        stats.files_checked += 1
        if result.error:
            logger.warning("Type detection failed for %s: %s", path, result.error.strip())
            stats.files_failed += 1
            return

        mime_type = mime_type_of(result.metadata)
        if mime_type is None:
            file.file_type = UNKNOWN_TYPE
            stats.files_unknown += 1
        else:
            file.file_type = mime_type
            stats.files_detected += 1
        logger.debug("Type of %s: %s", path, file.file_type)
