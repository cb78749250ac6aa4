"""Validator for television series volumes.

Layout: root / year of first airing / show title / season number / episode
files named like ``Show Title S01E02 Episode Title.mkv``.
"""

import logging
import re
from dataclasses import dataclass

from mediacat.tree import UNKNOWN_ENTITY, Directory, File, VideoFileName
from mediacat.validators.base import Validator, has_entity, present_files
from mediacat.validators.violations import ViolationKind

logger = logging.getLogger(__name__)

# First television broadcasts.
MIN_TELEVISION_YEAR = 1926

EPISODE_PATTERN = re.compile(r"(.+)[sS](\d+)[eE](\d+)(.*)\.(.*)")
EPISODE_RANGE_PATTERN = re.compile(r"-?[eE](\d+)")
# Trailing "(US)", "(2005)" and similar disambiguation suffixes.
QUALIFIER_PATTERN = re.compile(r"(\s*\([^()]*\))+\s*$")


def parse_episode_file_name(name: str) -> VideoFileName | None:
    """Decode ``<show> S<season>E<episode>[E<last>] [title].<ext>``, None if the name does not match."""
    match = EPISODE_PATTERN.fullmatch(name)
    if match is None:
        return None

    first_episode = int(match.group(3))
    last_episode = first_episode
    rest = match.group(4)
    range_match = EPISODE_RANGE_PATTERN.match(rest)
    if range_match:
        last_episode = int(range_match.group(1))
        rest = rest[range_match.end() :]

    return VideoFileName(
        title=match.group(1).strip(),
        season=int(match.group(2)),
        first_episode=first_episode,
        last_episode=last_episode,
        episode_title=rest.strip(),
    )


def same_title(a: str | None, b: str | None) -> bool:
    return _normalize_title(a) == _normalize_title(b)


def _normalize_title(title: str | None) -> str:
    if not title:
        return ""
    title = re.sub(r"[\s._]+", " ", title).strip(" -")
    return QUALIFIER_PATTERN.sub("", title).strip(" -").casefold()


@dataclass
class _Season:
    directory: Directory
    number: int
    duplicate: bool = False


class TvSeriesValidator(Validator):
    name = "tv_series"
    min_year = MIN_TELEVISION_YEAR

    def validate_root(self, root: Directory) -> None:
        for sub in root.subdirectories:
            self._validate_year(sub)
        self.mark_files(root, ViolationKind.NO_FILES_IN_ROOT_DIRECTORY)

    def _validate_year(self, directory: Directory) -> None:
        logger.debug("Entering year directory %s", self.display_path(directory))
        year = self.check_year_directory(directory)
        self.mark_files(directory, ViolationKind.NO_FILES_IN_YEAR_DIRECTORY)
        for show in directory.subdirectories:
            self._validate_show(show, year)

    def _validate_show(self, show: Directory, year: int | None) -> None:
        logger.debug("Entering show directory %s", self.display_path(show))
        self.mark_files(show, ViolationKind.NO_FILES_IN_SHOW_DIRECTORY)
        self._find_show(show, year)

        seasons: list[_Season] = []
        seen: set[int] = set()
        for sub in show.subdirectories:
            if not (sub.name.isascii() and sub.name.isdigit()):
                self.add_violation(sub, ViolationKind.SEASON_DIRECTORY_NOT_A_NUMBER)
                continue
            number = int(sub.name)
            if number < 1:
                self.add_violation(sub, ViolationKind.SEASON_DIRECTORY_NUMBER_TOO_SMALL)
                continue
            if number in seen:
                self.add_violation(sub, ViolationKind.DUPLICATE_SEASON_DIRECTORY)
                seasons.append(_Season(sub, number, duplicate=True))
                continue
            seen.add(number)
            seasons.append(_Season(sub, number))

        self._find_seasons(show, [season for season in seasons if not season.duplicate])

        for season in seasons:
            self._validate_season(season.directory, show.name, season.number)

    def _validate_season(self, directory: Directory, show_name: str, number: int) -> None:
        for sub in directory.subdirectories:
            self.add_violation(sub, ViolationKind.DIRECTORY_TOO_DEEP)

        episodes: list[tuple[File, VideoFileName]] = []
        for file in present_files(directory):
            video_name = self._validate_episode(file, show_name, number)
            if video_name is not None:
                episodes.append((file, video_name))

        self._find_episodes(directory, episodes)

    def _validate_episode(self, file: File, show_name: str, number: int) -> VideoFileName | None:
        video_name = parse_episode_file_name(file.name)
        if video_name is None:
            self.add_violation(file, ViolationKind.EPISODE_FILE_NAME_STRUCTURE)
            return None

        file.video_file_name = video_name
        if video_name.season != number:
            self.add_violation(file, ViolationKind.EPISODE_SEASON_AND_SEASON_DIRECTORY_DIFFER)
        if not same_title(video_name.title, show_name):
            self.add_violation(file, ViolationKind.EPISODE_SHOW_TITLE_DIFFERS)
        return video_name

    def _find_show(self, show: Directory, year: int | None) -> None:
        if self.enrichment is None or show.entity_id is not None or year is None:
            return
        entity = self.enrichment.find_show(show.name, year)
        show.entity_id = entity or UNKNOWN_ENTITY

    def _find_seasons(self, show: Directory, seasons: list[_Season]) -> None:
        if self.enrichment is None or not has_entity(show):
            return
        missing = [season for season in seasons if season.directory.entity_id is None]
        if not missing:
            return
        found = self.enrichment.find_seasons(show.entity_id)
        for season in missing:
            season.directory.entity_id = found.get(season.number, UNKNOWN_ENTITY)
            logger.debug("Season %d of %s: entity %s", season.number, show.name, season.directory.entity_id)

    def _find_episodes(self, season: Directory, episodes: list[tuple[File, VideoFileName]]) -> None:
        if self.enrichment is None or not has_entity(season):
            return
        missing = [(file, name) for file, name in episodes if file.entity_id is None]
        if not missing:
            return
        found = self.enrichment.find_episodes(season.entity_id)
        for file, name in missing:
            file.entity_id = found.get(name.first_episode, UNKNOWN_ENTITY)
