"""Use case for computing game log statistics."""

import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import asdict, dataclass
from functools import partial
from typing import Any, Dict

from ..ports.game_log import GameLogPort
from ..ports.stats_builder import STATS_SECTIONS, PlayerNotFoundError, StatsBuilderPort

logger = logging.getLogger(__name__)

# Thread pool for running blocking I/O and computations
_executor = ThreadPoolExecutor(max_workers=4)


@dataclass
class ComputeStatsRequest:
    """Request to compute one statistics section."""

    section: str
    source: str | None = None
    modded_only: bool = False
    player_id: str | None = None


@dataclass
class ComputeStatsResult:
    """Result of a statistics computation."""

    success: bool
    data: Dict[str, Any] | None = None
    error: str | None = None
    error_code: str | None = None
    metadata: Dict[str, Any] | None = None


class ComputeStatsUseCase:
    """Use case for computing statistics.

    This orchestrates the process of:
    1. Loading and filtering the game log
    2. Loading the player roster
    3. Building the requested section
    """

    def __init__(self, game_log: GameLogPort, stats_builder: StatsBuilderPort):
        self._game_log = game_log
        self._stats_builder = stats_builder

    async def execute(self, request: ComputeStatsRequest) -> ComputeStatsResult:
        if request.section not in STATS_SECTIONS:
            return ComputeStatsResult(
                success=False,
                error=f"Unknown section '{request.section}'",
                error_code="INVALID_REQUEST",
            )

        loop = asyncio.get_running_loop()
        try:
            load_func = partial(
                self._game_log.load_games,
                source=request.source,
                modded_only=request.modded_only,
            )
            games, meta = await loop.run_in_executor(_executor, load_func)
            if not games:
                return ComputeStatsResult(
                    success=False,
                    error="No games match the requested filters.",
                    error_code="NO_DATA",
                )

            roster = await loop.run_in_executor(_executor, self._game_log.load_roster)
            build_func = partial(
                self._stats_builder.build_section,
                request.section,
                games,
                meta,
                roster,
                request.player_id,
            )
            data = await loop.run_in_executor(_executor, build_func)
        except PlayerNotFoundError as e:
            return ComputeStatsResult(success=False, error=str(e), error_code="PLAYER_NOT_FOUND")
        except ValueError as e:
            return ComputeStatsResult(success=False, error=str(e), error_code="INVALID_REQUEST")
        except RuntimeError as e:
            logger.error("Game log unavailable: %s", e)
            return ComputeStatsResult(success=False, error=str(e), error_code="DATA_UNAVAILABLE")

        return ComputeStatsResult(
            success=True,
            data=data,
            metadata=asdict(meta),
        )
