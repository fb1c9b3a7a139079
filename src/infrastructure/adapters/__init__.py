"""Infrastructure adapters."""

from .game_log_adapter import LycansGameLogAdapter, LycansStatsBuilderAdapter

__all__ = [
    "LycansGameLogAdapter",
    "LycansStatsBuilderAdapter",
]
