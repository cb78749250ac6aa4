"""In-memory tree model for cataloged volumes."""

import os
from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

DIRECTORY_SEPARATOR = "/"

# Stored as file type after detection found nothing, so detection is not repeated.
UNKNOWN_TYPE = "?"

# Stored as entity id after a lookup found nothing, so the lookup is not repeated.
UNKNOWN_ENTITY = "?"


class TreeError(Exception):
    """Raised when an operation would break the tree's containment rules."""


class FileState(Enum):
    """State of a file compared to the previous run."""

    UNKNOWN = 0
    NEW = 1
    IDENTICAL = 2
    MODIFIED = 3
    MISSING = 4
    CORRUPTED = 5


@dataclass
class ParsedFilename:
    """Parsed components of a filename."""

    full: str
    base: str
    extension: str | None


def parse_filename(filename: str) -> ParsedFilename:
    if not filename:
        return ParsedFilename(full=filename, base=filename, extension=None)

    dot_index = filename.rfind(".")

    if dot_index <= 0 or dot_index == len(filename) - 1:
        return ParsedFilename(full=filename, base=filename.rstrip("."), extension=None)

    extension = filename[dot_index + 1 :].lower()
    base = filename[:dot_index]

    return ParsedFilename(full=filename, base=base, extension=extension)


def normalize_path(path: str | Path) -> str:
    """Return ``path`` with the platform separator replaced by ``/``."""
    text = str(path)
    if os.sep == DIRECTORY_SEPARATOR:
        return text
    return text.replace(os.sep, DIRECTORY_SEPARATOR)


@dataclass
class VideoFileName:
    """Information decoded from a video file name."""

    title: str | None = None
    year: int | None = None
    resolution: int | None = None
    season: int | None = None
    first_episode: int | None = None
    last_episode: int | None = None
    episode_title: str | None = None


@dataclass(eq=False)
class File:
    """A file entry inside a directory."""

    name: str
    size: int = 0
    last_modified: float | None = None
    file_type: str | None = None
    state: FileState = FileState.UNKNOWN
    hash_value: str | None = None
    hash_created: float | None = None
    video_file_name: VideoFileName | None = None
    entity_id: str | None = None
    parent: "Directory | None" = field(default=None, repr=False)

    @property
    def relative_path(self) -> str:
        if self.parent is None:
            return self.name
        parent_path = self.parent.relative_path
        return f"{parent_path}/{self.name}" if parent_path else self.name


@dataclass(eq=False)
class Directory:
    """A directory owning uniquely named subdirectories and files.

    Adding a node that already belongs to another directory moves it, so a
    node is never reachable from two parents.
    """

    name: str = ""
    entity_id: str | None = None
    parent: "Directory | None" = field(default=None, repr=False)
    _subdirectories: dict[str, "Directory"] = field(default_factory=dict, init=False, repr=False)
    _files: dict[str, File] = field(default_factory=dict, init=False, repr=False)

    def add_directory(self, directory: "Directory") -> "Directory":
        if directory is self or self._is_descendant_of(directory):
            raise TreeError(f"Cannot add directory {directory.name!r} below itself")
        if directory.name in self._subdirectories:
            raise TreeError(f"Duplicate directory name {directory.name!r} in {self.relative_path!r}")
        if directory.parent is not None:
            directory.parent._subdirectories.pop(directory.name, None)
        directory.parent = self
        self._subdirectories[directory.name] = directory
        return directory

    def add_file(self, file: File) -> File:
        if file.name in self._files:
            raise TreeError(f"Duplicate file name {file.name!r} in {self.relative_path!r}")
        if file.parent is not None:
            file.parent._files.pop(file.name, None)
        file.parent = self
        self._files[file.name] = file
        return file

    def get_directory(self, name: str) -> "Directory | None":
        return self._subdirectories.get(name)

    def get_file(self, name: str) -> File | None:
        return self._files.get(name)

    def find_or_create_directory(self, name: str) -> "Directory":
        existing = self._subdirectories.get(name)
        if existing is not None:
            return existing
        return self.add_directory(Directory(name=name))

    @property
    def subdirectories(self) -> list["Directory"]:
        return [self._subdirectories[name] for name in sorted(self._subdirectories)]

    @property
    def files(self) -> list[File]:
        return [self._files[name] for name in sorted(self._files)]

    @property
    def directory_names(self) -> set[str]:
        return set(self._subdirectories)

    @property
    def file_names(self) -> set[str]:
        return set(self._files)

    @property
    def relative_path(self) -> str:
        if self.parent is None:
            return ""
        parent_path = self.parent.relative_path
        return f"{parent_path}/{self.name}" if parent_path else self.name

    def iter_files(self) -> Iterator[File]:
        """Yield all files below this directory, depth first."""
        yield from self.files
        for sub in self.subdirectories:
            yield from sub.iter_files()

    def iter_directories(self) -> Iterator["Directory"]:
        """Yield this directory and all directories below it, depth first."""
        yield self
        for sub in self.subdirectories:
            yield from sub.iter_directories()

    def _is_descendant_of(self, other: "Directory") -> bool:
        node = self.parent
        while node is not None:
            if node is other:
                return True
            node = node.parent
        return False


@dataclass(eq=False)
class Volume:
    """A directory tree mounted below a canonical path."""

    path: str
    root: Directory | None = None
    validator: str | None = None
    main: bool = True

    def iter_files(self) -> Iterator[File]:
        if self.root is None:
            return iter(())
        return self.root.iter_files()

    def resolve(self, node: File | Directory) -> Path:
        """Return the absolute filesystem path of a node in this volume."""
        relative = node.relative_path
        return Path(self.path) / relative if relative else Path(self.path)

    def display_path(self, node: File | Directory) -> str:
        relative = node.relative_path
        return f"{self.path}/{relative}" if relative else self.path
