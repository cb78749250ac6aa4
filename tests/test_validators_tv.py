"""Tests for the television series validator."""

from datetime import date

from mediacat.tree import UNKNOWN_ENTITY, Directory, File, Volume
from mediacat.validators import TvSeriesValidator, ViolationKind, parse_episode_file_name

TODAY = date(2024, 6, 1)


class FakeLookup:
    def __init__(self, shows=None, seasons=None, episodes=None):
        self.shows = shows or {}
        self.seasons = seasons or {}
        self.episodes = episodes or {}
        self.calls: list[str] = []

    def find_movie(self, title: str, year: int) -> str | None:
        return None

    def find_show(self, title: str, year: int) -> str | None:
        self.calls.append(f"show:{title}")
        return self.shows.get((title, year))

    def find_seasons(self, show_id: str) -> dict[int, str]:
        self.calls.append(f"seasons:{show_id}")
        return self.seasons.get(show_id, {})

    def find_episodes(self, season_id: str) -> dict[int, str]:
        self.calls.append(f"episodes:{season_id}")
        return self.episodes.get(season_id, {})


class TvTree:
    """Regular layout: 2019 / Show Title / 01 / Show Title S01E01.mp4."""

    def __init__(self):
        self.root = Directory()
        self.year = self.root.add_directory(Directory(name="2019"))
        self.show = self.year.add_directory(Directory(name="Show Title"))
        self.season = self.show.add_directory(Directory(name="01"))
        self.episode = self.season.add_file(File(name="Show Title S01E01.mp4"))
        self.volume = Volume(path="/media/tv", root=self.root, validator="tv_series")


class TestParseEpisodeFileName:
    """Tests for parse_episode_file_name function."""

    def test_without_episode_title(self):
        name = parse_episode_file_name("Episode Show Name S03E17.mkv")
        assert name.title == "Episode Show Name"
        assert name.season == 3
        assert name.first_episode == 17
        assert name.last_episode == 17
        assert name.episode_title == ""
        assert name.year is None

    def test_with_episode_title(self):
        name = parse_episode_file_name("Episode Show Name S03E17 The Episode Title.mkv")
        assert name.episode_title == "The Episode Title"

    def test_double_episode(self):
        name = parse_episode_file_name("Show s01e01-e02 Pilot.mkv")
        assert name.first_episode == 1
        assert name.last_episode == 2
        assert name.episode_title == "Pilot"

    def test_no_match(self):
        assert parse_episode_file_name("folder.jpg") is None


class TestTvLayout:
    """Tests for directory structure rules."""

    def test_regular_setup_is_valid(self):
        tree = TvTree()
        validator = TvSeriesValidator(today=TODAY)
        assert validator.validate(tree.volume) == frozenset()
        assert tree.episode.video_file_name.season == 1

    def test_file_in_root(self):
        tree = TvTree()
        tree.root.add_file(File(name="notes.txt"))
        validator = TvSeriesValidator(today=TODAY)
        validator.validate(tree.volume)
        assert validator.contains_only(ViolationKind.NO_FILES_IN_ROOT_DIRECTORY)

    def test_file_in_year_directory(self):
        tree = TvTree()
        tree.year.add_file(File(name="notes.txt"))
        validator = TvSeriesValidator(today=TODAY)
        validator.validate(tree.volume)
        assert validator.contains_only(ViolationKind.NO_FILES_IN_YEAR_DIRECTORY)

    def test_file_in_show_directory(self):
        tree = TvTree()
        tree.show.add_file(File(name="poster.jpg"))
        validator = TvSeriesValidator(today=TODAY)
        validator.validate(tree.volume)
        assert validator.contains_only(ViolationKind.NO_FILES_IN_SHOW_DIRECTORY)

    def test_year_before_television(self):
        tree = TvTree()
        tree.root.add_directory(Directory(name="1925"))
        validator = TvSeriesValidator(today=TODAY)
        validator.validate(tree.volume)
        assert validator.contains_only(ViolationKind.DIRECTORY_YEAR_TOO_SMALL)

    def test_season_not_a_number(self):
        tree = TvTree()
        tree.show.add_directory(Directory(name="Specials"))
        validator = TvSeriesValidator(today=TODAY)
        validator.validate(tree.volume)
        assert validator.contains_only(ViolationKind.SEASON_DIRECTORY_NOT_A_NUMBER)

    def test_season_zero(self):
        tree = TvTree()
        tree.show.add_directory(Directory(name="0"))
        validator = TvSeriesValidator(today=TODAY)
        validator.validate(tree.volume)
        assert validator.contains_only(ViolationKind.SEASON_DIRECTORY_NUMBER_TOO_SMALL)

    def test_duplicate_season_reported_once(self):
        tree = TvTree()
        tree.show.add_directory(Directory(name="1"))
        validator = TvSeriesValidator(today=TODAY)
        validator.validate(tree.volume)
        assert validator.contains_only(ViolationKind.DUPLICATE_SEASON_DIRECTORY)
        assert len(validator.violations) == 1
        assert validator.violations[0].path == "/media/tv/2019/Show Title/1"

    def test_directory_in_season(self):
        tree = TvTree()
        tree.season.add_directory(Directory(name="Subs"))
        validator = TvSeriesValidator(today=TODAY)
        validator.validate(tree.volume)
        assert validator.contains_only(ViolationKind.DIRECTORY_TOO_DEEP)


class TestEpisodeFiles:
    """Tests for episode file rules."""

    def test_episode_without_token(self):
        tree = TvTree()
        tree.season.add_file(File(name="cover.jpg"))
        validator = TvSeriesValidator(today=TODAY)
        validator.validate(tree.volume)
        assert validator.contains_only(ViolationKind.EPISODE_FILE_NAME_STRUCTURE)

    def test_episode_season_differs(self):
        tree = TvTree()
        tree.season.add_file(File(name="Show Title S02E01.mp4"))
        validator = TvSeriesValidator(today=TODAY)
        validator.validate(tree.volume)
        assert validator.contains_only(ViolationKind.EPISODE_SEASON_AND_SEASON_DIRECTORY_DIFFER)

    def test_episode_show_title_differs(self):
        tree = TvTree()
        tree.season.add_file(File(name="Other Show S01E02.mp4"))
        validator = TvSeriesValidator(today=TODAY)
        validator.validate(tree.volume)
        assert validator.contains_only(ViolationKind.EPISODE_SHOW_TITLE_DIFFERS)

    def test_title_comparison_ignores_separators_and_case(self):
        tree = TvTree()
        tree.season.add_file(File(name="show.title.S01E02.mp4"))
        validator = TvSeriesValidator(today=TODAY)
        assert validator.validate(tree.volume) == frozenset()

    def test_title_comparison_ignores_trailing_qualifiers(self):
        tree = TvTree()
        season = tree.year.add_directory(Directory(name="Other Show (US)")).add_directory(Directory(name="01"))
        season.add_file(File(name="Other Show S01E01.mp4"))
        season.add_file(File(name="Other.Show.(2005).S01E02.mp4"))
        validator = TvSeriesValidator(today=TODAY)
        assert validator.validate(tree.volume) == frozenset()

    def test_qualified_show_still_checks_title(self):
        tree = TvTree()
        season = tree.year.add_directory(Directory(name="Other Show (US)")).add_directory(Directory(name="01"))
        season.add_file(File(name="Show Title S01E01.mp4"))
        validator = TvSeriesValidator(today=TODAY)
        validator.validate(tree.volume)
        assert validator.contains_only(ViolationKind.EPISODE_SHOW_TITLE_DIFFERS)


class TestTvEnrichment:
    """Tests for entity lookups during validation."""

    def test_assigns_show_season_and_episode(self):
        tree = TvTree()
        lookup = FakeLookup(
            shows={("Show Title", 2019): "Q1"},
            seasons={"Q1": {1: "Q11"}},
            episodes={"Q11": {1: "Q111"}},
        )
        TvSeriesValidator(enrichment=lookup, today=TODAY).validate(tree.volume)
        assert tree.show.entity_id == "Q1"
        assert tree.season.entity_id == "Q11"
        assert tree.episode.entity_id == "Q111"

    def test_unmatched_nodes_marked_unknown(self):
        tree = TvTree()
        lookup = FakeLookup(shows={("Show Title", 2019): "Q1"})
        TvSeriesValidator(enrichment=lookup, today=TODAY).validate(tree.volume)
        assert tree.show.entity_id == "Q1"
        assert tree.season.entity_id == UNKNOWN_ENTITY
        assert tree.episode.entity_id is None

    def test_unknown_show_stops_lookups(self):
        tree = TvTree()
        lookup = FakeLookup()
        TvSeriesValidator(enrichment=lookup, today=TODAY).validate(tree.volume)
        assert tree.show.entity_id == UNKNOWN_ENTITY
        assert lookup.calls == ["show:Show Title"]

    def test_no_repeated_lookups(self):
        tree = TvTree()
        tree.show.entity_id = "Q1"
        tree.season.entity_id = "Q11"
        tree.episode.entity_id = "Q111"
        lookup = FakeLookup()
        TvSeriesValidator(enrichment=lookup, today=TODAY).validate(tree.volume)
        assert lookup.calls == []
