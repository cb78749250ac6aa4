"""Budgeted content hashing over reconciled volumes."""

import logging
import math
import time
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from mediacat.exceptions import ConfigError
from mediacat.hashing.digest import compute_digest, new_hasher
from mediacat.hashing.strategies import HashBudget, HashProgress
from mediacat.tree import File, FileState, Volume

logger = logging.getLogger(__name__)


@dataclass
class HashStats:
    """Statistics for one hashing run."""

    candidates: int = 0
    total_bytes: int = 0
    files_hashed: int = 0
    bytes_hashed: int = 0
    files_first_hashed: int = 0
    files_confirmed: int = 0
    files_changed: int = 0
    files_failed: int = 0


def hash_priority_key(file: File) -> tuple[bool, float]:
    """Sort key putting unhashed files first, then the oldest hashes."""
    created = file.hash_created if file.hash_created is not None else -math.inf
    return (file.hash_value is not None, created)


class HashProcessor:
    """Hashes files in priority order until the budget is exhausted."""

    def __init__(
        self,
        algorithm: str,
        budget: HashBudget,
        clock: Callable[[], float] = time.time,
    ):
        try:
            new_hasher(algorithm)
        except ValueError as e:
            raise ConfigError(str(e)) from e
        self.algorithm = algorithm
        self.budget = budget
        self.clock = clock

    def update(self, volumes: Iterable[Volume]) -> HashStats:
        candidates = [
            (volume, file)
            for volume in volumes
            for file in volume.iter_files()
            if file.state is not FileState.MISSING
        ]
        candidates.sort(key=lambda pair: hash_priority_key(pair[1]))

        stats = HashStats(candidates=len(candidates))
        stats.total_bytes = sum(file.size for _, file in candidates)
        progress = HashProgress(total_bytes=stats.total_bytes)

        logger.info("Hashing up to %d files (%d bytes) with %s", stats.candidates, stats.total_bytes, self.algorithm)
        started = self.clock()
        for volume, file in candidates:
            progress.elapsed_seconds = self.clock() - started
            if self.budget.exhausted(progress):
                break

            self._hash_file(volume, file, stats)
            progress.files_hashed += 1
            progress.bytes_hashed += file.size

        stats.files_hashed = progress.files_hashed
        stats.bytes_hashed = progress.bytes_hashed
        logger.info(
            "Hashed %d of %d files: %d new, %d confirmed, %d changed, %d failed",
            stats.files_hashed,
            stats.candidates,
            stats.files_first_hashed,
            stats.files_confirmed,
            stats.files_changed,
            stats.files_failed,
        )
        return stats

    def _hash_file(self, volume: Volume, file: File, stats: HashStats) -> None:
        path = volume.resolve(file)
        try:
            value = compute_digest(path, self.algorithm, file.size)
        except OSError as e:
            logger.error("Cannot read %s: %s", path, e)
            file.state = FileState.CORRUPTED
            stats.files_failed += 1
            return

        now = self.clock()
        if file.hash_value is None:
            file.hash_value = value
            file.hash_created = now
            stats.files_first_hashed += 1
        elif file.hash_value == value:
            file.hash_created = now
            stats.files_confirmed += 1
        else:
            logger.warning("Hash of %s changed from %s to %s", path, file.hash_value, value)
            file.state = FileState.MODIFIED
            stats.files_changed += 1
