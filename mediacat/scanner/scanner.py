"""Volume scanner implementation."""

import logging
import os
from pathlib import Path

from mediacat.scanner.filesystem import build_directory
from mediacat.scanner.progress import ProgressReporter, ScanStats
from mediacat.tree import Volume, normalize_path

logger = logging.getLogger(__name__)


class VolumeNotFoundError(Exception):
    """Raised when a volume path is not an existing directory."""


class VolumeScanner:
    """Walks a volume and builds a fresh tree of its current state."""

    def __init__(
        self,
        ignore_dir_names: frozenset[str] = frozenset(),
        ignore_file_names: frozenset[str] = frozenset(),
        progress_interval: int = 1000,
        max_path_length: int = 4096,
        report_progress: bool = False,
    ):
        self.ignore_dir_names = frozenset(ignore_dir_names)
        self.ignore_file_names = frozenset(ignore_file_names)
        self.max_path_length = max_path_length
        self.progress = ProgressReporter(interval=progress_interval) if report_progress else None
        self.stats = ScanStats()

    def scan(self, path: str | Path) -> Volume:
        """Scan the directory tree below ``path`` and return it as a new Volume."""
        root_path = Path(path)
        if not root_path.is_dir():
            raise VolumeNotFoundError(f"Volume path is not a directory: {root_path}")

        volume_path = normalize_path(os.path.abspath(root_path))
        self.stats = ScanStats()
        if self.progress is not None:
            self.progress.reset()

        logger.info("Scanning volume %s", volume_path)
        root = build_directory(
            root_path,
            "",
            self.stats,
            ignore_dir_names=self.ignore_dir_names,
            ignore_file_names=self.ignore_file_names,
            max_path_length=self.max_path_length,
            on_directory=self._on_directory,
        )
        logger.info(
            "Scanned volume %s: %d directories, %d files, %d bytes",
            volume_path,
            self.stats.directories_scanned,
            self.stats.files_scanned,
            self.stats.total_bytes,
        )
        if self.progress is not None:
            self.progress.report_completion(volume_path, self.stats)

        return Volume(path=volume_path, root=root)

    def _on_directory(self, relative_dir: str) -> None:
        if self.progress is not None:
            self.progress.report_if_needed(self.stats, relative_dir)
