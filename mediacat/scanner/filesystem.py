"""Filesystem traversal that mirrors a directory tree into the tree model."""

import logging
import os
from collections.abc import Callable
from pathlib import Path

from mediacat.scanner.progress import ScanStats
from mediacat.tree import Directory, File

logger = logging.getLogger(__name__)


def build_directory(
    current_dir: Path,
    name: str,
    stats: ScanStats,
    ignore_dir_names: frozenset[str] = frozenset(),
    ignore_file_names: frozenset[str] = frozenset(),
    max_path_length: int = 4096,
    on_directory: Callable[[str], None] | None = None,
    relative_dir: str = "",
) -> Directory:
    """Build a Directory for ``current_dir`` and everything below it.

    Entries whose names are in the ignore sets are neither visited nor
    counted. Unreadable entries are logged and left out of the tree.
    """
    directory = Directory(name=name)
    stats.directories_scanned += 1

    files, subdirs = _list_entries(current_dir, ignore_dir_names, ignore_file_names, max_path_length, stats)

    for entry in files:
        file = _process_file(entry, stats)
        if file is not None:
            directory.add_file(file)

    if on_directory is not None:
        on_directory(relative_dir)

    for entry in subdirs:
        sub_relative = f"{relative_dir}/{entry.name}" if relative_dir else entry.name
        subdirectory = build_directory(
            Path(entry.path),
            entry.name,
            stats,
            ignore_dir_names,
            ignore_file_names,
            max_path_length,
            on_directory,
            sub_relative,
        )
        directory.add_directory(subdirectory)

    return directory


def _list_entries(
    directory: Path,
    ignore_dir_names: frozenset[str],
    ignore_file_names: frozenset[str],
    max_path_length: int,
    stats: ScanStats,
) -> tuple[list[os.DirEntry], list[os.DirEntry]]:
    files: list[os.DirEntry] = []
    subdirs: list[os.DirEntry] = []

    try:
        with os.scandir(directory) as entries:
            for entry in sorted(entries, key=lambda e: e.name):
                if not _is_utf8_name(entry.name):
                    logger.warning("Name is not valid UTF-8, skipping: %r", os.fsencode(entry.path))
                    stats.entries_skipped += 1
                    continue
                if len(entry.path) > max_path_length:
                    logger.warning("Path too long, skipping: %s", entry.path)
                    stats.entries_skipped += 1
                    continue
                try:
                    if entry.is_symlink():
                        continue
                    if entry.is_dir(follow_symlinks=False):
                        if entry.name not in ignore_dir_names:
                            subdirs.append(entry)
                    elif entry.is_file(follow_symlinks=False):
                        if entry.name not in ignore_file_names:
                            files.append(entry)
                except OSError as e:
                    logger.error("Error examining %s: %s", entry.path, e)
                    stats.entries_skipped += 1
    except PermissionError:
        logger.warning("Permission denied listing directory: %s", directory)
        stats.entries_skipped += 1
    except OSError as e:
        logger.error("Error listing directory %s: %s", directory, e)
        stats.entries_skipped += 1

    return files, subdirs


def _process_file(entry: os.DirEntry, stats: ScanStats) -> File | None:
    try:
        stat_result = entry.stat(follow_symlinks=False)
    except PermissionError:
        logger.warning("Permission denied: %s", entry.path)
        stats.entries_skipped += 1
        return None
    except FileNotFoundError:
        logger.warning("File disappeared during scan: %s", entry.path)
        stats.entries_skipped += 1
        return None
    except OSError as e:
        logger.error("Error processing %s: %s", entry.path, e)
        stats.entries_skipped += 1
        return None

    stats.files_scanned += 1
    stats.total_bytes += stat_result.st_size
    logger.debug("File %s (%d bytes)", entry.path, stat_result.st_size)

    return File(
        name=entry.name,
        size=stat_result.st_size,
        last_modified=stat_result.st_mtime,
    )


def _is_utf8_name(name: str) -> bool:
    """False for names decoded with surrogate escapes, which the catalog cannot store."""
    try:
        name.encode("utf-8")
    except UnicodeEncodeError:
        return False
    return True
