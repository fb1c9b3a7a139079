"""Port (interface) for building statistics sections."""

from abc import ABC, abstractmethod
from typing import Any, Dict, List

from lycans.ingest import FetchMeta
from lycans.normalize import GameRecord


STATS_SECTIONS = ("report", "players", "series", "talking", "deaths", "achievements", "validation")


class PlayerNotFoundError(LookupError):
    """Raised when a requested player does not appear in the games."""


class StatsBuilderPort(ABC):
    """Port for computing one statistics section from loaded games."""

    @abstractmethod
    def build_section(
        self,
        section: str,
        games: List[GameRecord],
        meta: FetchMeta,
        roster: Dict[str, str],
        player_id: str | None = None,
    ) -> Dict[str, Any]:
        """Compute a JSON-ready statistics section.

        Args:
            section: One of ``STATS_SECTIONS``
            games: Games to analyze
            meta: Fetch metadata
            roster: Player id to display name mapping
            player_id: Player id or name, required for ``achievements``

        Returns:
            Section dictionary
        """
        ...
