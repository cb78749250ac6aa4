"""Tests for config module."""

import os
from pathlib import Path

import pytest

from mediacat.config import (
    Config,
    ConfigError,
    canonical_volume_path,
    config_from_dict,
    load_config,
)
from mediacat.hashing import DEFAULT_PERCENTAGE, HashStrategy


class TestLoadConfig:
    """Tests for load_config function."""

    def test_defaults_when_default_file_missing(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("HOME", str(tmp_path))
        config = load_config()
        assert config.volumes == []
        assert config.hashes.strategy is HashStrategy.PERCENTAGE
        assert config.hashes.percentage == DEFAULT_PERCENTAGE

    def test_explicit_missing_file_is_error(self, tmp_path: Path):
        with pytest.raises(ConfigError):
            load_config(tmp_path / "nope.yaml")

    def test_invalid_yaml(self, tmp_path: Path):
        path = tmp_path / "config.yaml"
        path.write_text("volumes: [unclosed\n")
        with pytest.raises(ConfigError):
            load_config(path)

    def test_empty_file_gives_defaults(self, tmp_path: Path):
        path = tmp_path / "config.yaml"
        path.write_text("")
        assert isinstance(load_config(path), Config)

    def test_full_file(self, tmp_path: Path):
        path = tmp_path / "config.yaml"
        path.write_text(
            f"""
database: {tmp_path / "catalog.db"}
exiftool: /opt/bin/exiftool
ignore:
  directories: [.git, "@eaDir"]
  files: ".DS_Store, Thumbs.db"
scanner:
  progress_interval: 50
hashes:
  algorithm: SHA1
  strategy: 10%
wikidata:
  enabled: true
  timeout: 5
volumes:
  - path: {tmp_path / "movies"}
    validator: movie
  - path: {tmp_path / "backup"}
    main: false
""",
            encoding="utf-8",
        )

        config = load_config(path)

        assert config.database_path == tmp_path / "catalog.db"
        assert config.exiftool_path == "/opt/bin/exiftool"
        assert config.scanner.ignore_dir_names == {".git", "@eaDir"}
        assert config.scanner.ignore_file_names == {".DS_Store", "Thumbs.db"}
        assert config.scanner.progress_interval == 50
        assert config.hashes.algorithm == "sha1"
        assert config.hashes.strategy is HashStrategy.PERCENTAGE
        assert config.hashes.percentage == 10.0
        assert config.wikidata.enabled is True
        assert config.wikidata.timeout == 5.0
        assert [v.validator for v in config.volumes] == ["movie", None]
        assert [v.main for v in config.volumes] == [True, False]


class TestConfigFromDict:
    """Tests for config_from_dict validation."""

    def test_root_must_be_mapping(self):
        with pytest.raises(ConfigError):
            config_from_dict(["a"])

    def test_volume_as_plain_string(self, tmp_path: Path):
        config = config_from_dict({"volumes": [str(tmp_path)]})
        assert config.volumes[0].path == canonical_volume_path(tmp_path)
        assert config.volumes[0].validator is None
        assert config.volumes[0].main is True

    def test_volume_without_path(self):
        with pytest.raises(ConfigError):
            config_from_dict({"volumes": [{"validator": "movie"}]})

    def test_duplicate_volume(self, tmp_path: Path):
        with pytest.raises(ConfigError):
            config_from_dict({"volumes": [str(tmp_path), str(tmp_path) + os.sep]})

    def test_unknown_hash_strategy(self):
        with pytest.raises(ConfigError):
            config_from_dict({"hashes": {"strategy": "sometimes"}})

    def test_budget_strategy_requires_limit(self):
        with pytest.raises(ConfigError):
            config_from_dict({"hashes": {"strategy": "data"}})

    def test_budget_strategy_with_limit(self):
        config = config_from_dict({"hashes": {"strategy": "files", "max_files": 20}})
        assert config.hashes.strategy is HashStrategy.FILES
        assert config.hashes.max_files == 20

    @pytest.mark.parametrize("value", [0, -1, "ten", True])
    def test_positive_int_settings(self, value):
        with pytest.raises(ConfigError):
            config_from_dict({"scanner": {"progress_interval": value}})

    def test_section_must_be_mapping(self):
        with pytest.raises(ConfigError):
            config_from_dict({"hashes": "all"})


class TestCanonicalVolumePath:
    """Tests for canonical_volume_path function."""

    def test_relative_path_made_absolute(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.chdir(tmp_path)
        assert canonical_volume_path("media") == canonical_volume_path(Path.cwd() / "media")
        assert canonical_volume_path("media").endswith("/media")

    def test_trailing_separator_removed(self, tmp_path: Path):
        assert canonical_volume_path(str(tmp_path) + os.sep) == canonical_volume_path(tmp_path)
