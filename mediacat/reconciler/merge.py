"""Merge scanned trees with the trees loaded from the catalog.

The merged tree reuses one-sided subtrees by reference and builds new nodes
where both sides exist. Inputs must not be used again after merging.
"""

import logging
from collections import Counter
from collections.abc import Iterable

from mediacat.tree import Directory, File, FileState, Volume

logger = logging.getLogger(__name__)


def merge_file(scanned: File | None, loaded: File | None) -> File | None:
    if scanned is None and loaded is None:
        return None
    if loaded is None:
        scanned.state = FileState.NEW
        return scanned
    if scanned is None:
        loaded.state = FileState.MISSING
        return loaded

    if scanned.size == loaded.size and scanned.last_modified == loaded.last_modified:
        state = FileState.IDENTICAL
    else:
        state = FileState.MODIFIED

    return File(
        name=scanned.name,
        size=scanned.size,
        last_modified=scanned.last_modified,
        file_type=loaded.file_type,
        state=state,
        hash_value=loaded.hash_value,
        hash_created=loaded.hash_created,
        entity_id=loaded.entity_id,
    )


def merge_directory(scanned: Directory | None, loaded: Directory | None) -> Directory | None:
    """Merge two directories with the same name, recursing into their children."""
    if scanned is None and loaded is None:
        return None
    if loaded is None:
        _mark_files(scanned, FileState.NEW)
        return scanned
    if scanned is None:
        _mark_files(loaded, FileState.MISSING)
        return loaded

    merged = Directory(name=scanned.name, entity_id=loaded.entity_id)

    for name in sorted(scanned.directory_names | loaded.directory_names):
        child = merge_directory(scanned.get_directory(name), loaded.get_directory(name))
        merged.add_directory(child)

    for name in sorted(scanned.file_names | loaded.file_names):
        file = merge_file(scanned.get_file(name), loaded.get_file(name))
        merged.add_file(file)

    return merged


def merge_volume(scanned: Volume | None, loaded: Volume | None) -> Volume | None:
    if scanned is None and loaded is None:
        return None
    if loaded is None:
        if scanned.root is not None:
            _mark_files(scanned.root, FileState.NEW)
        logger.info("New volume %s", scanned.path)
        return scanned
    if scanned is None:
        logger.info("Volume %s not scanned, keeping catalog state", loaded.path)
        return loaded

    return Volume(
        path=scanned.path,
        root=merge_directory(scanned.root, loaded.root),
        validator=scanned.validator,
        main=scanned.main,
    )


def merge_volumes(scanned: Iterable[Volume], loaded: Iterable[Volume]) -> list[Volume]:
    """Merge volume lists matched by path. The result is sorted by path."""
    scanned_by_path = {volume.path: volume for volume in scanned}
    loaded_by_path = {volume.path: volume for volume in loaded}

    merged = []
    for path in sorted(scanned_by_path.keys() | loaded_by_path.keys()):
        merged.append(merge_volume(scanned_by_path.get(path), loaded_by_path.get(path)))
    return merged


def count_states(volumes: Iterable[Volume]) -> Counter[FileState]:
    counts: Counter[FileState] = Counter()
    for volume in volumes:
        for file in volume.iter_files():
            counts[file.state] += 1
    return counts


def _mark_files(directory: Directory, state: FileState) -> None:
    for file in directory.iter_files():
        file.state = state
