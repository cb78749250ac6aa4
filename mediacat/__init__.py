"""mediacat - catalog, hash and validate media collections."""

__version__ = "0.1.0"

from mediacat.database import Database
from mediacat.scanner import VolumeScanner

__all__ = ["Database", "VolumeScanner"]
