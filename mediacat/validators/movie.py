"""Validator for movie volumes.

Layout rules:

- The volume root holds only year directories, named by the release year.
- Year directories hold only files, no subdirectories.
- A file name consists of dot-separated parts: the title, optionally the
  vertical resolution (``1080p``), the release year and a video extension,
  e.g. ``Metropolis.1927.mkv`` or ``Alien.1080p.1979.mkv``.
- ``.vsmeta`` metadata files are named after the video they describe plus
  the ``.vsmeta`` suffix.
"""

import logging
import re

from mediacat.tree import UNKNOWN_ENTITY, Directory, File, VideoFileName
from mediacat.validators.base import Validator, present_files
from mediacat.validators.violations import ViolationKind

logger = logging.getLogger(__name__)

# First motion picture, Sallie Gardner at a Gallop.
MIN_MOVIE_YEAR = 1878

VIDEO_EXTENSIONS = frozenset(
    {
        "3gp", "avi", "divx", "flv", "m2ts", "m4v", "mkv", "mov", "mp4",
        "mpeg", "mpg", "mts", "ogv", "ts", "vob", "webm", "wmv",
    }
)
VIDEO_METADATA_EXTENSIONS = frozenset({"vsmeta"})

YEAR_PATTERN = re.compile(r"\d{4}")
RESOLUTION_PATTERN = re.compile(r"(\d+)[pP]")


class MovieValidator(Validator):
    name = "movie"
    min_year = MIN_MOVIE_YEAR

    def validate_root(self, root: Directory) -> None:
        self._validate_directory(root, 0)

    def _validate_directory(self, directory: Directory, level: int) -> None:
        if level > 1:
            self.add_violation(directory, ViolationKind.DIRECTORY_TOO_DEEP)

        year = self.check_year_directory(directory) if level == 1 else None

        for sub in directory.subdirectories:
            self._validate_directory(sub, level + 1)

        for file in present_files(directory):
            if level != 1:
                self.add_violation(file, ViolationKind.FILE_IN_WRONG_DIRECTORY)
            is_video = self.validate_file_name(file, year)
            if is_video:
                self._find_entity(file)

    def validate_file_name(self, file: File, dir_year: int | None) -> bool:
        """Check a file name and attach the decoded name to the file.

        Returns False for names that carry no decodable video name, and for
        metadata sidecars, which are checked but never looked up.
        """
        parts = file.name.split(".")
        if len(parts) < 2:
            self.add_violation(file, ViolationKind.NO_FILE_EXTENSION)
            return False

        is_sidecar = parts[-1].lower() in VIDEO_METADATA_EXTENSIONS
        if is_sidecar:
            parts.pop()
        extension = parts.pop() if parts else ""
        if extension.lower() not in VIDEO_EXTENSIONS:
            self.add_violation(file, ViolationKind.FILE_EXTENSION_UNKNOWN)

        video_name = VideoFileName()
        while parts:
            token = parts[-1]
            if video_name.year is None and YEAR_PATTERN.fullmatch(token):
                video_name.year = int(token)
            elif video_name.resolution is None and (match := RESOLUTION_PATTERN.fullmatch(token)):
                video_name.resolution = int(match.group(1))
            else:
                break
            parts.pop()

        if not any(parts):
            self.add_violation(file, ViolationKind.FILE_TITLE_MISSING)
        elif len(parts) > 1:
            self.add_violation(file, ViolationKind.FILE_NAME_STRUCTURE)

        if video_name.year is None:
            self.add_violation(file, ViolationKind.FILE_NO_YEAR)
        elif dir_year is not None and video_name.year != dir_year:
            self.add_violation(file, ViolationKind.FILE_DIR_YEAR_DIFFER)

        video_name.title = " ".join(parts) if any(parts) else None
        file.video_file_name = video_name
        return not is_sidecar

    def _find_entity(self, file: File) -> None:
        if self.enrichment is None or file.entity_id is not None:
            return
        video_name = file.video_file_name
        if video_name is None or not video_name.title or video_name.year is None:
            return
        entity = self.enrichment.find_movie(video_name.title, video_name.year)
        file.entity_id = entity or UNKNOWN_ENTITY
        logger.debug("Movie %s: entity %s", file.name, file.entity_id)
