"""Human-readable descriptions of violations."""

from mediacat.validators.violations import Violation, ViolationKind

MESSAGES: dict[ViolationKind, str] = {
    ViolationKind.NO_FILE_EXTENSION: "file name has no extension",
    ViolationKind.FILE_EXTENSION_UNKNOWN: "file extension is not a known video format",
    ViolationKind.FILE_IN_WRONG_DIRECTORY: "file is not allowed in this directory",
    ViolationKind.DIRECTORY_TOO_DEEP: "directory is nested too deep",
    ViolationKind.DIRECTORY_NOT_A_NUMBER: "directory name is not a year",
    ViolationKind.DIRECTORY_YEAR_TOO_SMALL: "directory year is too small",
    ViolationKind.DIRECTORY_YEAR_TOO_LARGE: "directory year lies in the future",
    ViolationKind.FILE_NO_YEAR: "file name contains no year",
    ViolationKind.FILE_DIR_YEAR_DIFFER: "file name year differs from directory year",
    ViolationKind.FILE_TITLE_MISSING: "file name contains no title",
    ViolationKind.FILE_NAME_STRUCTURE: "file name has unexpected parts between title and year",
    ViolationKind.NO_FILES_IN_ROOT_DIRECTORY: "files are not allowed in the volume root",
    ViolationKind.NO_FILES_IN_YEAR_DIRECTORY: "files are not allowed in a year directory",
    ViolationKind.NO_FILES_IN_SHOW_DIRECTORY: "files are not allowed in a show directory",
    ViolationKind.SEASON_DIRECTORY_NOT_A_NUMBER: "season directory name is not a number",
    ViolationKind.SEASON_DIRECTORY_NUMBER_TOO_SMALL: "season number must be at least 1",
    ViolationKind.DUPLICATE_SEASON_DIRECTORY: "another directory already holds this season",
    ViolationKind.EPISODE_FILE_NAME_STRUCTURE: "episode file name lacks an SxxEyy token",
    ViolationKind.EPISODE_SEASON_AND_SEASON_DIRECTORY_DIFFER: "episode season differs from season directory",
    ViolationKind.EPISODE_SHOW_TITLE_DIFFERS: "episode show title differs from show directory",
    ViolationKind.DAY_DIRECTORY_INVALID_NAME: "day directory name is not a YYYY-MM-DD date",
    ViolationKind.DAY_DIRECTORY_YEAR_DIFFERS: "day directory year differs from year directory",
    ViolationKind.XMP_WITHOUT_FILE: "XMP sidecar has no matching file",
}


def describe(kind: ViolationKind) -> str:
    return MESSAGES.get(kind, kind.value.replace("_", " "))


def format_violation(violation: Violation) -> str:
    return f"Violation in {violation.path}: {describe(violation.kind)}"
