"""Scanner module for filesystem traversal."""

from .filesystem import build_directory
from .progress import ProgressReporter, ScanStats
from .scanner import VolumeNotFoundError, VolumeScanner

__all__ = [
    "VolumeScanner",
    "VolumeNotFoundError",
    "build_directory",
    "ProgressReporter",
    "ScanStats",
]
