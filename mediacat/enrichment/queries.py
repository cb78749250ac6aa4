"""SPARQL query templates for Wikidata lookups."""

FIND_MOVIE = """
SELECT DISTINCT ?movie WHERE {
  ?movie wdt:P31/wdt:P279* wd:Q11424 ;
         rdfs:label "@TITLE@"@en ;
         wdt:P577 ?published .
  FILTER(YEAR(?published) = @YEAR@)
}
LIMIT 1
"""

FIND_SHOW = """
SELECT DISTINCT ?show WHERE {
  ?show wdt:P31/wdt:P279* wd:Q5398426 ;
        rdfs:label "@TITLE@"@en ;
        wdt:P580 ?start .
  FILTER(YEAR(?start) = @YEAR@)
}
LIMIT 1
"""

FIND_SEASONS = """
SELECT ?season ?seasNr WHERE {
  ?season wdt:P31 wd:Q3464665 ;
          p:P179 ?series .
  ?series ps:P179 wd:@SHOW@ ;
          pq:P1545 ?seasNr .
}
"""

FIND_EPISODES = """
SELECT ?episode ?relNr WHERE {
  ?episode wdt:P31 wd:Q21191270 ;
           p:P4908 ?season .
  ?season ps:P4908 wd:@SEASON@ ;
          pq:P1545 ?relNr .
}
"""

PING = "ASK { wd:Q42 ?p ?o }"


def escape_literal(text: str) -> str:
    """Escape text for use inside a double-quoted SPARQL literal."""
    return (
        text.replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("\n", "\\n")
        .replace("\r", "\\r")
        .replace("\t", "\\t")
    )


def build_movie_query(title: str, year: int) -> str:
    return FIND_MOVIE.replace("@TITLE@", escape_literal(title)).replace("@YEAR@", str(int(year)))


def build_show_query(title: str, year: int) -> str:
    return FIND_SHOW.replace("@TITLE@", escape_literal(title)).replace("@YEAR@", str(int(year)))


def build_seasons_query(show_id: str) -> str:
    return FIND_SEASONS.replace("@SHOW@", _entity(show_id))


def build_episodes_query(season_id: str) -> str:
    return FIND_EPISODES.replace("@SEASON@", _entity(season_id))


def _entity(entity_id: str) -> str:
    if not entity_id.startswith("Q") or not entity_id[1:].isdigit():
        raise ValueError(f"Not a Wikidata item id: {entity_id!r}")
    return entity_id


def entity_from_uri(uri: str | None) -> str | None:
    """Return the last path segment of an entity URI."""
    if not uri:
        return None
    index = uri.rfind("/")
    return uri[index + 1 :] if index >= 0 else None
