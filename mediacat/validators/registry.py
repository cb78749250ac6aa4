"""Mapping of validator names to validator factories."""

from collections.abc import Callable, Mapping
from datetime import date
from types import MappingProxyType

from mediacat.enrichment import EntityLookup
from mediacat.exceptions import ConfigError
from mediacat.validators.base import Validator
from mediacat.validators.movie import MovieValidator
from mediacat.validators.personal_document import PersonalDocumentValidator
from mediacat.validators.tv_series import TvSeriesValidator

ValidatorFactory = Callable[[EntityLookup | None, date | None], Validator]


class UnknownValidatorError(ConfigError):
    """Raised when a volume names a validator that does not exist."""


def build_registry() -> Mapping[str, ValidatorFactory]:
    return MappingProxyType(
        {
            MovieValidator.name: MovieValidator,
            TvSeriesValidator.name: TvSeriesValidator,
            PersonalDocumentValidator.name: PersonalDocumentValidator,
        }
    )


def create_validator(
    registry: Mapping[str, ValidatorFactory],
    name: str,
    enrichment: EntityLookup | None = None,
    today: date | None = None,
) -> Validator:
    """Create the validator registered under ``name``."""
    if name not in registry:
        raise UnknownValidatorError(f"Unknown validator: {name}. Available: {sorted(registry)}")
    return registry[name](enrichment, today)
