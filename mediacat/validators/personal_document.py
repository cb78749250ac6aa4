"""Validator for personal document volumes.

Layout: root / person / year / day (``YYYY-MM-DD``) / files. XMP sidecars
must sit next to the file they describe.
"""

import re
from datetime import date

from mediacat.tree import Directory, parse_filename
from mediacat.validators.base import Validator, present_files
from mediacat.validators.violations import ViolationKind

MIN_DOCUMENT_YEAR = 1800

DAY_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2}")
SIDECAR_EXTENSION = "xmp"


def parse_day(name: str) -> date | None:
    if not DAY_PATTERN.fullmatch(name):
        return None
    try:
        return date.fromisoformat(name)
    except ValueError:
        return None


class PersonalDocumentValidator(Validator):
    name = "personal_document"
    min_year = MIN_DOCUMENT_YEAR

    def validate_root(self, root: Directory) -> None:
        self.mark_files(root, ViolationKind.FILE_IN_WRONG_DIRECTORY)
        for person in root.subdirectories:
            self.mark_files(person, ViolationKind.FILE_IN_WRONG_DIRECTORY)
            for year_dir in person.subdirectories:
                self._validate_year(year_dir)

    def _validate_year(self, directory: Directory) -> None:
        year = self.check_year_directory(directory)
        self.mark_files(directory, ViolationKind.FILE_IN_WRONG_DIRECTORY)
        for day in directory.subdirectories:
            self._validate_day(day, year)

    def _validate_day(self, directory: Directory, year: int | None) -> None:
        day = parse_day(directory.name)
        if day is None:
            self.add_violation(directory, ViolationKind.DAY_DIRECTORY_INVALID_NAME)
        elif year is not None and day.year != year:
            self.add_violation(directory, ViolationKind.DAY_DIRECTORY_YEAR_DIFFERS)

        for sub in directory.subdirectories:
            self._flag_too_deep(sub)
        self._check_sidecars(directory)

    def _flag_too_deep(self, directory: Directory) -> None:
        self.add_violation(directory, ViolationKind.DIRECTORY_TOO_DEEP)
        self.mark_files(directory, ViolationKind.FILE_IN_WRONG_DIRECTORY)
        for sub in directory.subdirectories:
            self._flag_too_deep(sub)

    def _check_sidecars(self, directory: Directory) -> None:
        files = present_files(directory)
        names = {file.name for file in files}
        stems = set()
        sidecars = []
        for file in files:
            parsed = parse_filename(file.name)
            if parsed.extension == SIDECAR_EXTENSION:
                sidecars.append((file, parsed.base))
            else:
                stems.add(parsed.base)

        for file, stem in sidecars:
            if stem not in stems and stem not in names:
                self.add_violation(file, ViolationKind.XMP_WITHOUT_FILE)
