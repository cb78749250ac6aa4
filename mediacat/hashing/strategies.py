"""Hash budget strategies.

A budget decides, before each file, whether the hashing run may continue.
Every budget sees the same ``HashProgress`` snapshot, so the processor does
not need to know which kind of limit is in effect.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Protocol

DEFAULT_PERCENTAGE = 3.33


class HashStrategy(Enum):
    ALL = "all"
    NONE = "none"
    PERCENTAGE = "percentage"
    DATA = "data"
    TIME = "time"
    FILES = "files"


@dataclass
class HashProgress:
    """Work done so far in the current hashing run."""

    total_bytes: int = 0
    bytes_hashed: int = 0
    files_hashed: int = 0
    elapsed_seconds: float = 0.0


class HashBudget(Protocol):
    """Protocol for hash budgets."""

    def exhausted(self, progress: HashProgress) -> bool:
        """Return True when no further file may be hashed."""
        ...


class AllBudget:
    def exhausted(self, progress: HashProgress) -> bool:
        return False


class NoneBudget:
    def exhausted(self, progress: HashProgress) -> bool:
        return True


class PercentageBudget:
    """Stops once the hashed bytes reach a share of all candidate bytes.

    The file that crosses the threshold has already been hashed in full.
    """

    def __init__(self, percentage: float):
        self.percentage = clamp_percentage(percentage)

    def exhausted(self, progress: HashProgress) -> bool:
        if self.percentage <= 0:
            return True
        if progress.total_bytes <= 0:
            return False
        return 100 * progress.bytes_hashed / progress.total_bytes >= self.percentage


class DataBudget:
    def __init__(self, max_bytes: int):
        self.max_bytes = max_bytes

    def exhausted(self, progress: HashProgress) -> bool:
        return progress.bytes_hashed >= self.max_bytes


class FilesBudget:
    def __init__(self, max_files: int):
        self.max_files = max_files

    def exhausted(self, progress: HashProgress) -> bool:
        return progress.files_hashed >= self.max_files


class TimeBudget:
    def __init__(self, max_seconds: float):
        self.max_seconds = max_seconds

    def exhausted(self, progress: HashProgress) -> bool:
        return progress.elapsed_seconds >= self.max_seconds


def clamp_percentage(value: float) -> float:
    return max(0.0, min(100.0, float(value)))


def create_budget(
    strategy: HashStrategy,
    *,
    percentage: float = DEFAULT_PERCENTAGE,
    max_bytes: int | None = None,
    max_files: int | None = None,
    max_seconds: float | None = None,
) -> HashBudget:
    """Build the budget for a strategy.

    Raises:
        ValueError: If the limit the strategy needs is not given.
    """
    if strategy is HashStrategy.ALL:
        return AllBudget()
    if strategy is HashStrategy.NONE:
        return NoneBudget()
    if strategy is HashStrategy.PERCENTAGE:
        return PercentageBudget(percentage)
    if strategy is HashStrategy.DATA:
        if max_bytes is None:
            raise ValueError("Hash strategy 'data' needs max_bytes")
        return DataBudget(max_bytes)
    if strategy is HashStrategy.FILES:
        if max_files is None:
            raise ValueError("Hash strategy 'files' needs max_files")
        return FilesBudget(max_files)
    if max_seconds is None:
        raise ValueError("Hash strategy 'time' needs max_seconds")
    return TimeBudget(max_seconds)


_ALIASES = {
    "all": HashStrategy.ALL,
    "always": HashStrategy.ALL,
    "none": HashStrategy.NONE,
    "never": HashStrategy.NONE,
    "data": HashStrategy.DATA,
    "files": HashStrategy.FILES,
    "time": HashStrategy.TIME,
}


def parse_hash_strategy(text: str) -> tuple[HashStrategy, float | None]:
    """Parse a strategy setting such as ``always``, ``never`` or ``5%``.

    Returns the strategy and, for percentages, the clamped percentage.

    Raises:
        ValueError: If the text names no known strategy.
    """
    value = text.strip().lower()
    if value in _ALIASES:
        return _ALIASES[value], None

    if value.endswith("%"):
        try:
            percentage = float(value[:-1])
        except ValueError:
            raise ValueError(f"Invalid hash percentage: {text!r}") from None
        return HashStrategy.PERCENTAGE, clamp_percentage(percentage)

    available = ", ".join(sorted(_ALIASES)) + ", <n>%"
    raise ValueError(f"Unknown hash strategy: {text!r}. Available: {available}")
