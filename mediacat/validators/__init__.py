"""Validators module for structural checks of volume trees."""

from .base import Validator
from .messages import MESSAGES, format_violation
from .movie import MovieValidator
from .personal_document import PersonalDocumentValidator
from .registry import UnknownValidatorError, ValidatorFactory, build_registry, create_validator
from .tv_series import TvSeriesValidator, parse_episode_file_name
from .violations import Violation, ViolationKind

__all__ = [
    "MESSAGES",
    "MovieValidator",
    "PersonalDocumentValidator",
    "TvSeriesValidator",
    "UnknownValidatorError",
    "Validator",
    "ValidatorFactory",
    "Violation",
    "ViolationKind",
    "build_registry",
    "create_validator",
    "format_violation",
    "parse_episode_file_name",
]
