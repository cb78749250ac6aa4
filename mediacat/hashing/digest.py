"""Content digests over file streams."""

import hashlib
from pathlib import Path
from typing import BinaryIO

MIN_CHUNK_SIZE = 64 * 1024
MAX_CHUNK_SIZE = 8 * 1024 * 1024


def chunk_size_for(size: int) -> int:
    """Read size for a file of ``size`` bytes.

    A sixteenth of the file, kept between 64 KiB and 8 MiB, and never more
    than the file itself.
    """
    chunk = max(MIN_CHUNK_SIZE, min(MAX_CHUNK_SIZE, size // 16))
    return max(1, min(chunk, size))


def new_hasher(algorithm: str):
    """Return a fresh hashlib object, raising ValueError for unknown names."""
    try:
        return hashlib.new(algorithm)
    except (TypeError, ValueError) as e:
        raise ValueError(f"Unsupported hash algorithm: {algorithm!r}") from e


def digest_stream(stream: BinaryIO, algorithm: str = "sha256", chunk_size: int = MIN_CHUNK_SIZE) -> str:
    hasher = new_hasher(algorithm)
    while chunk := stream.read(chunk_size):
        hasher.update(chunk)
    return hasher.hexdigest()


def compute_digest(path: Path, algorithm: str = "sha256", size: int | None = None) -> str:
    """Hash the content of ``path``. OSError propagates to the caller."""
    if size is None:
        size = path.stat().st_size
    with path.open("rb") as stream:
        return digest_stream(stream, algorithm, chunk_size_for(size))
