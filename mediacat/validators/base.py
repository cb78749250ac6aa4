"""Shared machinery for structural validators."""

import logging
from datetime import date

from mediacat.enrichment import EntityLookup
from mediacat.tree import UNKNOWN_ENTITY, Directory, File, FileState, Volume
from mediacat.validators.messages import format_violation
from mediacat.validators.violations import Violation, ViolationKind

logger = logging.getLogger(__name__)


class Validator:
    """Base class for validators.

    Subclasses walk the volume tree and call ``add_violation``. Violations are
    kept in order of discovery, and their kinds as a set so callers can ask
    whether one kind occurred without counting occurrences.
    """

    name = ""
    min_year = 1

    def __init__(self, enrichment: EntityLookup | None = None, today: date | None = None):
        self.enrichment = enrichment
        self.today = today or date.today()
        self.violations: list[Violation] = []
        self.kinds: set[ViolationKind] = set()
        self._volume: Volume | None = None

    @property
    def max_year(self) -> int:
        return self.today.year + 1

    def validate(self, volume: Volume) -> frozenset[ViolationKind]:
        self.violations = []
        self.kinds = set()
        self._volume = volume
        try:
            if volume.root is not None:
                self.validate_root(volume.root)
        finally:
            self._volume = None
        logger.info("Validated %s as %s: %d violations", volume.path, self.name, len(self.violations))
        return frozenset(self.kinds)

    def validate_root(self, root: Directory) -> None:
        raise NotImplementedError

    def add_violation(self, node: File | Directory, kind: ViolationKind) -> None:
        violation = Violation(kind=kind, path=self.display_path(node))
        self.violations.append(violation)
        self.kinds.add(kind)
        logger.error(format_violation(violation))

    def display_path(self, node: File | Directory) -> str:
        if self._volume is None:
            return node.relative_path
        return self._volume.display_path(node)

    def contains(self, kind: ViolationKind) -> bool:
        return kind in self.kinds

    def contains_only(self, kind: ViolationKind) -> bool:
        return self.kinds == {kind}

    @property
    def is_empty(self) -> bool:
        return not self.kinds

    def check_year_directory(self, directory: Directory) -> int | None:
        """Parse a year directory name, returning None after reporting a violation."""
        name = directory.name
        if not (name.isascii() and name.isdigit()):
            self.add_violation(directory, ViolationKind.DIRECTORY_NOT_A_NUMBER)
            return None
        year = int(name)
        if year < self.min_year:
            self.add_violation(directory, ViolationKind.DIRECTORY_YEAR_TOO_SMALL)
            return None
        if year > self.max_year:
            self.add_violation(directory, ViolationKind.DIRECTORY_YEAR_TOO_LARGE)
            return None
        return year

    def mark_files(self, directory: Directory, kind: ViolationKind) -> None:
        for file in present_files(directory):
            self.add_violation(file, kind)


def present_files(directory: Directory) -> list[File]:
    """Files of a directory that were found on disk in this run."""
    return [file for file in directory.files if file.state is not FileState.MISSING]


def has_entity(node: File | Directory) -> bool:
    """True when the node carries an id from a successful lookup."""
    return node.entity_id is not None and node.entity_id != UNKNOWN_ENTITY
