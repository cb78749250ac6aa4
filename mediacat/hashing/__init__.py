"""Hashing module: budgets, digests and the hash processor."""

from .digest import chunk_size_for, compute_digest, digest_stream
from .processor import HashProcessor, HashStats, hash_priority_key
from .strategies import (
    DEFAULT_PERCENTAGE,
    HashBudget,
    HashProgress,
    HashStrategy,
    create_budget,
    parse_hash_strategy,
)

__all__ = [
    "DEFAULT_PERCENTAGE",
    "HashBudget",
    "HashProcessor",
    "HashProgress",
    "HashStats",
    "HashStrategy",
    "chunk_size_for",
    "compute_digest",
    "create_budget",
    "digest_stream",
    "hash_priority_key",
    "parse_hash_strategy",
]
