"""Tree model: volumes, directories and files."""

from .models import (
    DIRECTORY_SEPARATOR,
    UNKNOWN_ENTITY,
    UNKNOWN_TYPE,
    Directory,
    File,
    FileState,
    ParsedFilename,
    TreeError,
    VideoFileName,
    Volume,
    normalize_path,
    parse_filename,
)

__all__ = [
    "DIRECTORY_SEPARATOR",
    "UNKNOWN_ENTITY",
    "UNKNOWN_TYPE",
    "Directory",
    "File",
    "FileState",
    "ParsedFilename",
    "TreeError",
    "VideoFileName",
    "Volume",
    "normalize_path",
    "parse_filename",
]
