"""Catalog run orchestration.

One run scans the configured volumes, merges them with the catalog,
detects file types, hashes within the configured budget, validates and
stores the result. Each phase completes before the next starts.
"""

import logging
import time
from collections import Counter
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from datetime import date

from mediacat.config import Config
from mediacat.database import CatalogRepository
from mediacat.enrichment import EntityLookup
from mediacat.exceptions import ConfigError
from mediacat.extractor import DetectionStats, TypeDetector
from mediacat.hashing import HashProcessor, HashStats, create_budget
from mediacat.reconciler import count_states, merge_volumes
from mediacat.scanner import ScanStats, VolumeNotFoundError, VolumeScanner
from mediacat.tree import FileState, Volume
from mediacat.validators import Validator, ValidatorFactory, Violation, create_validator

logger = logging.getLogger(__name__)


@dataclass
class PipelineResult:
    """Outcome of one catalog run."""

    volumes: list[Volume] = field(default_factory=list)
    scan_stats: dict[str, ScanStats] = field(default_factory=dict)
    states: Counter[FileState] = field(default_factory=Counter)
    hash_stats: HashStats | None = None
    detection_stats: DetectionStats | None = None
    violations: dict[str, list[Violation]] = field(default_factory=dict)

    @property
    def violation_count(self) -> int:
        return sum(len(found) for found in self.violations.values())


class CatalogPipeline:
    """Runs scan, merge, type detection, hashing, validation and storage."""

    def __init__(
        self,
        config: Config,
        repository: CatalogRepository,
        registry: Mapping[str, ValidatorFactory],
        type_detector: TypeDetector | None = None,
        enrichment: EntityLookup | None = None,
        validate: bool = True,
        report_progress: bool = False,
        today: date | None = None,
        clock: Callable[[], float] = time.time,
    ):
        self.config = config
        self.repository = repository
        self.registry = registry
        self.type_detector = type_detector
        self.enrichment = enrichment
        self.validate = validate
        self.report_progress = report_progress
        self.today = today
        self.clock = clock

    def run(self) -> PipelineResult:
        validators = self._create_validators()
        hasher = self._create_hash_processor()
        result = PipelineResult()

        loaded = self.repository.load_all()
        scanned = self._scan_volumes(result)

        result.volumes = merge_volumes(scanned, loaded)
        result.states = count_states(result.volumes)
        logger.info("Merged file states: %s", _format_states(result.states))

        scanned_paths = {volume.path for volume in scanned}
        active = [volume for volume in result.volumes if volume.path in scanned_paths]

        if self.type_detector is not None:
            result.detection_stats = self.type_detector.update(active)

        result.hash_stats = hasher.update(active)

        for volume in active:
            validator = validators.get(volume.path)
            if validator is None:
                continue
            validator.validate(volume)
            result.violations[volume.path] = list(validator.violations)

        self.repository.save_all(result.volumes)
        return result

    def _create_validators(self) -> dict[str, Validator]:
        if not self.validate:
            return {}
        return {
            volume.path: create_validator(self.registry, volume.validator, self.enrichment, self.today)
            for volume in self.config.volumes
            if volume.validator
        }

    def _create_hash_processor(self) -> HashProcessor:
        hashes = self.config.hashes
        try:
            budget = create_budget(
                hashes.strategy,
                percentage=hashes.percentage,
                max_bytes=hashes.max_bytes,
                max_files=hashes.max_files,
                max_seconds=hashes.max_seconds,
            )
        except ValueError as e:
            raise ConfigError(str(e)) from e
        return HashProcessor(hashes.algorithm, budget, clock=self.clock)

    def _scan_volumes(self, result: PipelineResult) -> list[Volume]:
        scanner_config = self.config.scanner
        scanner = VolumeScanner(
            ignore_dir_names=scanner_config.ignore_dir_names,
            ignore_file_names=scanner_config.ignore_file_names,
            progress_interval=scanner_config.progress_interval,
            max_path_length=scanner_config.max_path_length,
            report_progress=self.report_progress,
        )

        scanned = []
        for volume_config in self.config.volumes:
            try:
                volume = scanner.scan(volume_config.path)
            except VolumeNotFoundError as e:
                logger.warning("%s, keeping cataloged state", e)
                continue
            volume.validator = volume_config.validator
            volume.main = volume_config.main
            scanned.append(volume)
            result.scan_stats[volume.path] = scanner.stats
        return scanned


def _format_states(states: Counter[FileState]) -> str:
    return ", ".join(f"{state.name.lower()}={states[state]}" for state in FileState if states[state])
