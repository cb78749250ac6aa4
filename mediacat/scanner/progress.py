"""Progress reporting utilities for scanning."""

import sys
import time
from dataclasses import dataclass, field


@dataclass
class ScanStats:
    """Statistics for one volume scan."""

    files_scanned: int = 0
    directories_scanned: int = 0
    total_bytes: int = 0
    entries_skipped: int = 0
    start_time: float = field(default_factory=time.time)

    @property
    def elapsed_seconds(self) -> float:
        return time.time() - self.start_time


class ProgressReporter:
    """Reports scan progress to the user."""

    def __init__(self, interval: int = 1000):
        self.interval = interval
        self._last_report_count = 0

    def reset(self) -> None:
        self._last_report_count = 0

    def report_if_needed(self, stats: ScanStats, current_directory: str) -> None:
        if stats.files_scanned - self._last_report_count >= self.interval:
            self._print_progress(stats, current_directory)
            self._last_report_count = stats.files_scanned

    def report_completion(self, volume_path: str, stats: ScanStats) -> None:
        duration = format_duration(stats.elapsed_seconds)
        print(
            f"Scanned {volume_path}: {stats.files_scanned:,} files in "
            f"{stats.directories_scanned:,} directories, "
            f"{format_bytes(stats.total_bytes)} ({duration})",
            file=sys.stderr,
        )

    def _print_progress(self, stats: ScanStats, current_directory: str) -> None:
        print(f"[{stats.files_scanned:,} files] Scanning: /{current_directory}", file=sys.stderr)


def format_duration(seconds: float) -> str:
    hours, remainder = divmod(int(seconds), 3600)
    minutes, secs = divmod(remainder, 60)

    if hours > 0:
        return f"{hours}h {minutes}m {secs}s"
    if minutes > 0:
        return f"{minutes}m {secs}s"
    return f"{secs}s"


def format_bytes(size: int | None) -> str:
    if size is None:
        return "0 B"
    size_f = float(size)
    for unit in ["B", "KB", "MB", "GB", "TB"]:
        if size_f < 1024:
            return f"{size_f:.2f} {unit}"
        size_f /= 1024
    return f"{size_f:.2f} PB"
