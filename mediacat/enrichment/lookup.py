"""Interface between validators and external metadata services."""

from typing import Protocol


class EntityLookup(Protocol):
    """Protocol for entity lookup services.

    Every method returns None or an empty mapping when nothing is found.
    """

    def find_movie(self, title: str, year: int) -> str | None:
        ...

    def find_show(self, title: str, year: int) -> str | None:
        ...

    def find_seasons(self, show_id: str) -> dict[int, str]:
        """Map season numbers to season entity ids."""
        ...

    def find_episodes(self, season_id: str) -> dict[int, str]:
        """Map episode numbers within the season to episode entity ids."""
        ...
