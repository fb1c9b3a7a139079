"""REST API routes for game log statistics."""

from typing import Any, Dict, Optional

from fastapi import APIRouter, HTTPException, Query
from pydantic import BaseModel

from ...application.use_cases.compute_stats import (
    ComputeStatsRequest,
    ComputeStatsUseCase,
)
from ...infrastructure.adapters.game_log_adapter import (
    LycansGameLogAdapter,
    LycansStatsBuilderAdapter,
)

router = APIRouter(prefix="/api", tags=["stats"])

_STATUS_BY_CODE = {
    "INVALID_REQUEST": 400,
    "NO_DATA": 404,
    "PLAYER_NOT_FOUND": 404,
    "DATA_UNAVAILABLE": 503,
}


class ErrorResponse(BaseModel):
    """Error response model."""

    code: str
    message: str
    details: dict = {}


async def _compute(
    section: str,
    source: Optional[str],
    modded_only: bool,
    player_id: Optional[str] = None,
) -> Dict[str, Any]:
    use_case = ComputeStatsUseCase(LycansGameLogAdapter(), LycansStatsBuilderAdapter())
    result = await use_case.execute(
        ComputeStatsRequest(
            section=section,
            source=source,
            modded_only=modded_only,
            player_id=player_id,
        )
    )

    if not result.success:
        code = result.error_code or "INTERNAL_ERROR"
        details: Dict[str, Any] = {"section": section, "source": source, "moddedOnly": modded_only}
        if player_id:
            details["playerId"] = player_id
        raise HTTPException(
            status_code=_STATUS_BY_CODE.get(code, 500),
            detail={
                "error": ErrorResponse(
                    code=code,
                    message=result.error or "Statistics unavailable",
                    details=details,
                ).model_dump()
            },
        )
    return result.data or {}


@router.get("/stats/report")
async def get_report(
    source: Optional[str] = Query(None, description="Data source (main or discord)"),
    modded_only: bool = Query(False, alias="moddedOnly"),
):
    """Full statistics report (overview, players, talking, series, voting, validation)."""
    return await _compute("report", source, modded_only)


@router.get("/stats/players")
async def get_players(
    source: Optional[str] = Query(None),
    modded_only: bool = Query(False, alias="moddedOnly"),
):
    """Per-player participation, wins per camp and camp performance."""
    return await _compute("players", source, modded_only)


@router.get("/stats/series")
async def get_series(
    source: Optional[str] = Query(None),
    modded_only: bool = Query(False, alias="moddedOnly"),
):
    """Longest Villageois, Loup, win and loss series per player."""
    return await _compute("series", source, modded_only)


@router.get("/stats/talking")
async def get_talking(
    source: Optional[str] = Query(None),
    modded_only: bool = Query(False, alias="moddedOnly"),
):
    """Talk time normalized per hour of play."""
    return await _compute("talking", source, modded_only)


@router.get("/stats/deaths")
async def get_deaths(
    source: Optional[str] = Query(None),
    modded_only: bool = Query(False, alias="moddedOnly"),
):
    """Deaths by type and phase, killers, and hunter shots."""
    return await _compute("deaths", source, modded_only)


@router.get("/players/{player_id}/achievements")
async def get_player_achievements(
    player_id: str,
    source: Optional[str] = Query(None),
):
    """Achievements of one player, on all games and on modded games.

    Args:
        player_id: Player id (Steam ID) or name
        source: Optional data source filter

    Returns:
        Player id, display name and both achievement lists
    """
    return await _compute("achievements", source, False, player_id=player_id)


@router.get("/validation")
async def get_validation(
    source: Optional[str] = Query(None),
):
    """Consistency issues found in the game log."""
    return await _compute("validation", source, False)
