"""Configuration module for mediacat."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from mediacat.exceptions import ConfigError
from mediacat.hashing.strategies import DEFAULT_PERCENTAGE, HashStrategy, parse_hash_strategy
from mediacat.tree import normalize_path

DEFAULT_CONFIG_PATH = Path("~/.mediacat/config.yaml")
DEFAULT_DATABASE_PATH = Path("~/.mediacat/catalog.db")
DEFAULT_SPARQL_ENDPOINT = "https://query.wikidata.org/sparql"


@dataclass
class ScannerConfig:
    progress_interval: int = 1000
    max_path_length: int = 4096
    ignore_dir_names: frozenset[str] = frozenset()
    ignore_file_names: frozenset[str] = frozenset()


@dataclass
class HashConfig:
    algorithm: str = "sha256"
    strategy: HashStrategy = HashStrategy.PERCENTAGE
    percentage: float = DEFAULT_PERCENTAGE
    max_bytes: int | None = None
    max_files: int | None = None
    max_seconds: float | None = None


@dataclass
class WikidataConfig:
    enabled: bool = False
    endpoint: str = DEFAULT_SPARQL_ENDPOINT
    timeout: float = 30.0
    user_agent: str = "mediacat/0.1 (media catalog)"


@dataclass
class VolumeConfig:
    path: str
    validator: str | None = None
    main: bool = True


@dataclass
class Config:
    database_path: Path = field(default_factory=lambda: DEFAULT_DATABASE_PATH.expanduser())
    exiftool_path: str | None = None
    scanner: ScannerConfig = field(default_factory=ScannerConfig)
    hashes: HashConfig = field(default_factory=HashConfig)
    wikidata: WikidataConfig = field(default_factory=WikidataConfig)
    volumes: list[VolumeConfig] = field(default_factory=list)


def load_config(path: Path | None = None) -> Config:
    """Load configuration from a YAML file, falling back to defaults if it does not exist."""
    config_path = (path or DEFAULT_CONFIG_PATH).expanduser()
    if not config_path.exists():
        if path is not None:
            raise ConfigError(f"Configuration file not found: {config_path}")
        return Config()

    try:
        with config_path.open("r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {config_path}: {exc}") from exc
    except OSError as exc:
        raise ConfigError(f"Unable to read {config_path}: {exc}") from exc

    return config_from_dict(data)


def config_from_dict(data: Any) -> Config:
    if not isinstance(data, dict):
        raise ConfigError("Configuration root must be a mapping")

    config = Config()

    if "database" in data:
        config.database_path = Path(str(data["database"])).expanduser()
    if data.get("exiftool"):
        config.exiftool_path = str(data["exiftool"])

    ignore = _section(data, "ignore")
    config.scanner = ScannerConfig(
        ignore_dir_names=_name_set(ignore.get("directories"), "ignore.directories"),
        ignore_file_names=_name_set(ignore.get("files"), "ignore.files"),
    )
    scanner = _section(data, "scanner")
    if "progress_interval" in scanner:
        config.scanner.progress_interval = _positive_int(scanner["progress_interval"], "scanner.progress_interval")
    if "max_path_length" in scanner:
        config.scanner.max_path_length = _positive_int(scanner["max_path_length"], "scanner.max_path_length")

    config.hashes = _hash_config(_section(data, "hashes"))
    config.wikidata = _wikidata_config(_section(data, "wikidata"))
    config.volumes = _volume_configs(data.get("volumes") or [])
    return config


def _section(data: dict, key: str) -> dict:
    value = data.get(key) or {}
    if not isinstance(value, dict):
        raise ConfigError(f"'{key}' must be a mapping")
    return value


def _name_set(value: Any, key: str) -> frozenset[str]:
    if value is None:
        return frozenset()
    if isinstance(value, str):
        return frozenset(name.strip() for name in value.split(",") if name.strip())
    if isinstance(value, list):
        return frozenset(str(name) for name in value)
    raise ConfigError(f"'{key}' must be a list or a comma-separated string")


def _positive_int(value: Any, key: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ConfigError(f"'{key}' must be a positive integer, got {value!r}")
    return value


def _hash_config(section: dict) -> HashConfig:
    hashes = HashConfig()
    if "algorithm" in section:
        hashes.algorithm = str(section["algorithm"]).lower()
    if "strategy" in section:
        try:
            hashes.strategy, percentage = parse_hash_strategy(str(section["strategy"]))
        except ValueError as exc:
            raise ConfigError(str(exc)) from exc
        if percentage is not None:
            hashes.percentage = percentage
    if "max_bytes" in section:
        hashes.max_bytes = _positive_int(section["max_bytes"], "hashes.max_bytes")
    if "max_files" in section:
        hashes.max_files = _positive_int(section["max_files"], "hashes.max_files")
    if "max_seconds" in section:
        try:
            hashes.max_seconds = float(section["max_seconds"])
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"'hashes.max_seconds' must be a number: {exc}") from exc

    required = {
        HashStrategy.DATA: ("max_bytes", hashes.max_bytes),
        HashStrategy.FILES: ("max_files", hashes.max_files),
        HashStrategy.TIME: ("max_seconds", hashes.max_seconds),
    }
    if hashes.strategy in required:
        key, value = required[hashes.strategy]
        if value is None:
            raise ConfigError(f"Hash strategy '{hashes.strategy.value}' requires 'hashes.{key}'")
    return hashes


def _wikidata_config(section: dict) -> WikidataConfig:
    wikidata = WikidataConfig()
    if "enabled" in section:
        wikidata.enabled = bool(section["enabled"])
    if "endpoint" in section:
        wikidata.endpoint = str(section["endpoint"])
    if "timeout" in section:
        try:
            wikidata.timeout = float(section["timeout"])
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"'wikidata.timeout' must be a number: {exc}") from exc
    if "user_agent" in section:
        wikidata.user_agent = str(section["user_agent"])
    return wikidata


def _volume_configs(entries: Any) -> list[VolumeConfig]:
    if not isinstance(entries, list):
        raise ConfigError("'volumes' must be a list")

    volumes: list[VolumeConfig] = []
    seen: set[str] = set()
    for index, entry in enumerate(entries, start=1):
        if isinstance(entry, str):
            entry = {"path": entry}
        if not isinstance(entry, dict) or not entry.get("path"):
            raise ConfigError(f"Volume #{index} needs a 'path'")

        path = canonical_volume_path(str(entry["path"]))
        if path in seen:
            raise ConfigError(f"Volume {path} is configured twice")
        seen.add(path)

        validator = entry.get("validator")
        volumes.append(
            VolumeConfig(
                path=path,
                validator=str(validator) if validator else None,
                main=bool(entry.get("main", True)),
            )
        )
    return volumes


def canonical_volume_path(path: str | Path) -> str:
    """Absolute, user-expanded path with ``/`` separators, used to match volumes across runs."""
    return normalize_path(os.path.abspath(os.path.expanduser(path)))
