"""Exiftool wrapper for file type detection."""

import json
import shutil
import subprocess
from dataclasses import dataclass


class ExiftoolNotFoundError(Exception):
    """Raised when exiftool is not installed."""


@dataclass
class ExiftoolResult:
    """Type tags reported by exiftool for one file."""

    source_file: str
    metadata: dict
    error: str | None = None


class ExiftoolRunner:
    """Runs exiftool over batches of files, asking only for type tags.

    ``-fast2`` stops reading a file once its header identified the format.
    """

    EXIFTOOL_ARGS = ["-json", "-G", "-fast2", "-FileType", "-MIMEType"]

    def __init__(self, executable: str = "exiftool") -> None:
        self.executable = self._find_executable(executable)
        self.version = self._check_exiftool()

    def _find_executable(self, executable: str) -> str:
        path = shutil.which(executable)
        if not path:
            raise ExiftoolNotFoundError(
                f"exiftool is required but not found at '{executable}'.\n"
                "Please install exiftool: https://exiftool.org/install.html"
            )
        return path

    def _check_exiftool(self) -> str:
        try:
            result = subprocess.run(
                [self.executable, "-ver"],
                capture_output=True,
                text=True,
                check=True,
            )
        except (OSError, subprocess.CalledProcessError) as e:
            raise ExiftoolNotFoundError(f"Cannot run {self.executable}: {e}") from e
        return result.stdout.strip()

    def extract_batch(self, file_paths: list[str]) -> list[ExiftoolResult]:
        """Return one result per path, in the order given."""
        if not file_paths:
            return []

        try:
            completed = subprocess.run(
                [self.executable, *self.EXIFTOOL_ARGS, *file_paths],
                capture_output=True,
                text=True,
                check=False,
            )
        except OSError as e:
            return _failed(file_paths, str(e))

        # exiftool exits with 1 when some files could not be read
        if completed.returncode not in (0, 1):
            return _failed(file_paths, completed.stderr or f"exit status {completed.returncode}")

        try:
            records = json.loads(completed.stdout) if completed.stdout.strip() else []
        except json.JSONDecodeError as e:
            return _failed(file_paths, f"JSON parse error: {e}")

        by_source = {record.get("SourceFile", ""): record for record in records}
        return [
            ExiftoolResult(path, by_source[path]) if path in by_source
            else ExiftoolResult(path, {}, "No output from exiftool")
            for path in file_paths
        ]


def _failed(file_paths: list[str], error: str) -> list[ExiftoolResult]:
    return [ExiftoolResult(path, {}, error) for path in file_paths]
