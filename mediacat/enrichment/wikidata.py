"""Wikidata SPARQL client."""

import logging

import requests

from mediacat.enrichment import queries

logger = logging.getLogger(__name__)


class EnrichmentUnavailableError(Exception):
    """Raised when the SPARQL endpoint cannot be reached."""


class WikidataService:
    """Looks up Wikidata entities for movies and television shows.

    The HTTP session is created on first use and kept for the rest of the
    run. A failed request drops the session so the next lookup reconnects.
    """

    def __init__(
        self,
        endpoint: str,
        timeout: float = 30.0,
        user_agent: str = "mediacat/0.1",
        session: requests.Session | None = None,
    ):
        self.endpoint = endpoint
        self.timeout = timeout
        self.user_agent = user_agent
        self._session = session

    @property
    def session(self) -> requests.Session:
        if self._session is None:
            self._session = requests.Session()
            self._session.headers.update(
                {
                    "User-Agent": self.user_agent,
                    "Accept": "application/sparql-results+json",
                }
            )
        return self._session

    def close(self) -> None:
        if self._session is not None:
            self._session.close()
            self._session = None

    def ping(self) -> None:
        """Run a trivial query, raising EnrichmentUnavailableError on failure."""
        try:
            payload = self._request(queries.PING)
        except (requests.RequestException, ValueError) as e:
            self.close()
            raise EnrichmentUnavailableError(f"Cannot reach SPARQL endpoint {self.endpoint}: {e}") from e
        if "boolean" not in payload:
            raise EnrichmentUnavailableError(f"Unexpected answer from SPARQL endpoint {self.endpoint}")

    def find_movie(self, title: str, year: int) -> str | None:
        rows = self._select(queries.build_movie_query(title, year))
        entity = queries.entity_from_uri(_value(rows[0], "movie")) if rows else None
        logger.info("Movie %r (%s): %s", title, year, entity or "not found")
        return entity

    def find_show(self, title: str, year: int) -> str | None:
        rows = self._select(queries.build_show_query(title, year))
        entity = queries.entity_from_uri(_value(rows[0], "show")) if rows else None
        logger.info("Television show %r (%s): %s", title, year, entity or "not found")
        return entity

    def find_seasons(self, show_id: str) -> dict[int, str]:
        return self._numbered(queries.build_seasons_query(show_id), "season", "seasNr")

    def find_episodes(self, season_id: str) -> dict[int, str]:
        return self._numbered(queries.build_episodes_query(season_id), "episode", "relNr")

    def _numbered(self, query: str, entity_key: str, number_key: str) -> dict[int, str]:
        result: dict[int, str] = {}
        for row in self._select(query):
            entity = queries.entity_from_uri(_value(row, entity_key))
            number = _value(row, number_key)
            if entity is None or number is None:
                continue
            try:
                result[int(number)] = entity
            except ValueError:
                logger.debug("Ignoring non-numeric %s %r for %s", number_key, number, entity)
        return result

    def _select(self, query: str) -> list[dict]:
        try:
            payload = self._request(query)
        except requests.RequestException as e:
            logger.error("SPARQL query failed: %s", e)
            self.close()
            return []
        except ValueError as e:
            logger.error("SPARQL endpoint returned invalid JSON: %s", e)
            return []
        return payload.get("results", {}).get("bindings", [])

    def _request(self, query: str) -> dict:
        response = self.session.get(
            self.endpoint,
            params={"query": query, "format": "json"},
            timeout=self.timeout,
        )
        response.raise_for_status()
        return response.json()


def _value(row: dict, key: str) -> str | None:
    cell = row.get(key)
    if not isinstance(cell, dict):
        return None
    return cell.get("value")
