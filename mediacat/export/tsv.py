"""Tab-separated export of cataloged files."""

import csv
import logging
from collections.abc import Iterable
from datetime import datetime, timezone
from pathlib import Path

from mediacat.tree import Volume

logger = logging.getLogger(__name__)

COLUMNS = [
    "volume",
    "directory",
    "name",
    "size",
    "last_modified",
    "hash_value",
    "hash_created",
    "file_type",
    "state",
]


def export_tsv(volumes: Iterable[Volume], path: Path) -> int:
    """Write one row per file to ``path``. Returns the number of rows written."""
    count = 0
    with path.open("w", encoding="utf-8", newline="") as handle:
        writer = csv.writer(handle, delimiter="\t", lineterminator="\n")
        writer.writerow(COLUMNS)
        for volume in volumes:
            for file in volume.iter_files():
                writer.writerow(
                    [
                        volume.path,
                        file.parent.relative_path if file.parent is not None else "",
                        file.name,
                        file.size,
                        _format_timestamp(file.last_modified),
                        file.hash_value or "",
                        _format_timestamp(file.hash_created),
                        file.file_type or "",
                        file.state.name,
                    ]
                )
                count += 1
    logger.info("Exported %d files to %s", count, path)
    return count


def _format_timestamp(value: float | None) -> str:
    if value is None:
        return ""
    return datetime.fromtimestamp(value, tz=timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
