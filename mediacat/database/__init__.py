"""Database module for mediacat."""

from .connection import Database
from .repository import CatalogRepository, VolumeSummary
from .schema import create_schema

__all__ = [
    "CatalogRepository",
    "Database",
    "VolumeSummary",
    "create_schema",
]
