"""Port (interface) for game log access."""

from abc import ABC, abstractmethod
from typing import Dict, List, Tuple

from lycans.ingest import FetchMeta
from lycans.normalize import GameRecord


class GameLogPort(ABC):
    """Port for loading recorded games from a game log source."""

    @abstractmethod
    def load_games(
        self,
        source: str | None = None,
        modded_only: bool = False,
    ) -> Tuple[List[GameRecord], FetchMeta]:
        """Load and filter the recorded games.

        Args:
            source: Optional data source name (``main`` or ``discord``)
            modded_only: Keep only games played with the mod enabled

        Returns:
            Tuple of (games, fetch metadata)
        """
        ...

    @abstractmethod
    def load_roster(self) -> Dict[str, str]:
        """Return the player id to display name mapping (may be empty)."""
        ...
