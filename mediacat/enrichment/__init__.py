"""Enrichment module for external entity lookups."""

from .lookup import EntityLookup
from .wikidata import EnrichmentUnavailableError, WikidataService

__all__ = ["EntityLookup", "EnrichmentUnavailableError", "WikidataService"]
