"""Violation kinds reported by validators."""

from dataclasses import dataclass
from enum import Enum


class ViolationKind(Enum):
    NO_FILE_EXTENSION = "no_file_extension"
    FILE_EXTENSION_UNKNOWN = "file_extension_unknown"
    FILE_IN_WRONG_DIRECTORY = "file_in_wrong_directory"
    DIRECTORY_TOO_DEEP = "directory_too_deep"
    DIRECTORY_NOT_A_NUMBER = "directory_not_a_number"
    DIRECTORY_YEAR_TOO_SMALL = "directory_year_too_small"
    DIRECTORY_YEAR_TOO_LARGE = "directory_year_too_large"
    FILE_NO_YEAR = "file_no_year"
    FILE_DIR_YEAR_DIFFER = "file_dir_year_differ"
    FILE_TITLE_MISSING = "file_title_missing"
    FILE_NAME_STRUCTURE = "file_name_structure"

    NO_FILES_IN_ROOT_DIRECTORY = "no_files_in_root_directory"
    NO_FILES_IN_YEAR_DIRECTORY = "no_files_in_year_directory"
    NO_FILES_IN_SHOW_DIRECTORY = "no_files_in_show_directory"
    SEASON_DIRECTORY_NOT_A_NUMBER = "season_directory_not_a_number"
    SEASON_DIRECTORY_NUMBER_TOO_SMALL = "season_directory_number_too_small"
    DUPLICATE_SEASON_DIRECTORY = "duplicate_season_directory"
    EPISODE_FILE_NAME_STRUCTURE = "episode_file_name_structure"
    EPISODE_SEASON_AND_SEASON_DIRECTORY_DIFFER = "episode_season_and_season_directory_differ"
    EPISODE_SHOW_TITLE_DIFFERS = "episode_show_title_differs"

    DAY_DIRECTORY_INVALID_NAME = "day_directory_invalid_name"
    DAY_DIRECTORY_YEAR_DIFFERS = "day_directory_year_differs"
    XMP_WITHOUT_FILE = "xmp_without_file"


@dataclass(frozen=True)
class Violation:
    kind: ViolationKind
    path: str
