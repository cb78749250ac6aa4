"""Extractor module for file type detection."""

from .detector import DetectionStats, TypeDetector, mime_type_of
from .exiftool import ExiftoolNotFoundError, ExiftoolResult, ExiftoolRunner

__all__ = [
    "DetectionStats",
    "ExiftoolNotFoundError",
    "ExiftoolResult",
    "ExiftoolRunner",
    "TypeDetector",
    "mime_type_of",
]
