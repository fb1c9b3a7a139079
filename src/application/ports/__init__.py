"""Application ports (interfaces)."""

from .game_log import GameLogPort
from .stats_builder import STATS_SECTIONS, PlayerNotFoundError, StatsBuilderPort

__all__ = [
    "GameLogPort",
    "PlayerNotFoundError",
    "STATS_SECTIONS",
    "StatsBuilderPort",
]
