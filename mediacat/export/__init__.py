"""Export module for catalog data."""

from .tsv import COLUMNS, export_tsv

__all__ = ["COLUMNS", "export_tsv"]
