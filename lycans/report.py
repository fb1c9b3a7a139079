from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict, List, Optional

from .achievements import generate_player_achievements
from .deaths import compute_death_stats, compute_hunter_stats
from .features import compute_camp_performance, compute_overview, compute_player_stats
from .ingest import FetchMeta
from .normalize import GameRecord
from .series import SeriesData, SeriesRecord, compute_series, player_series
from .talking import compute_talking_stats, game_has_talking_data
from .validate import summarize_issues, validate_game_log
from .voting import compute_voting_stats


TOP_SERIES = 10


def _data_coverage(games: List[GameRecord]) -> Dict[str, Any]:
    total = len(games) or 1
    with_talking = sum(1 for g in games if game_has_talking_data(g))
    with_votes = sum(1 for g in games if any(p.votes for p in g.players))
    with_deaths = sum(1 for g in games if any(p.death_timing for p in g.players))
    return {
        "games": len(games),
        "with_talking_data": with_talking,
        "with_votes": with_votes,
        "with_death_timing": with_deaths,
        "talking_share": with_talking / total,
        "votes_share": with_votes / total,
    }


def _series_rows(rows: List[SeriesRecord]) -> List[Dict[str, Any]]:
    return [asdict(r) for r in rows[:TOP_SERIES]]


def _series_section(data: Optional[SeriesData]) -> Dict[str, Any]:
    if data is None:
        return {"total_games_analyzed": 0, "total_players": 0, "villageois": [], "loup": [], "win": [], "loss": []}
    return {
        "total_games_analyzed": data.total_games_analyzed,
        "total_players": data.total_players,
        "villageois": _series_rows(data.all_villageois_series),
        "loup": _series_rows(data.all_loups_series),
        "win": _series_rows(data.all_win_series),
        "loss": _series_rows(data.all_loss_series),
    }


def build_report(
    games: List[GameRecord],
    meta: FetchMeta,
    roster: Optional[Dict[str, str]] = None,
    player_id: Optional[str] = None,
) -> Dict[str, Any]:
    overview = compute_overview(games)
    players = compute_player_stats(games, roster)
    camp_performance = compute_camp_performance(games, roster=roster)
    talking = compute_talking_stats(games, roster)
    series = compute_series(games, roster)
    voting = compute_voting_stats(games, roster)
    issues = validate_game_log(games)

    talking_rows = []
    if talking is not None:
        talking_rows = sorted(
            (asdict(s) for s in talking.player_stats),
            key=lambda r: r["seconds_all_per_60min"],
            reverse=True,
        )

    report: Dict[str, Any] = {
        "meta": asdict(meta),
        "data_coverage": _data_coverage(games),
        "overview": overview,
        "players": players,
        "camp_performance": sorted(camp_performance, key=lambda r: r["performance"], reverse=True),
        "talking": {
            "total_games": talking.total_games if talking else 0,
            "games_with_talking_data": talking.games_with_talking_data if talking else 0,
            "player_stats": talking_rows,
        },
        "series": _series_section(series),
        "voting": voting,
        "deaths": compute_death_stats(games, roster),
        "hunters": compute_hunter_stats(games, roster),
        "validation": {
            **summarize_issues(issues),
            "issues": [i.to_dict() for i in issues],
        },
    }

    if player_id:
        achievements = generate_player_achievements(games, player_id, roster)
        report["player"] = {
            "player_id": player_id,
            "series": {
                k: asdict(v) if v else None
                for k, v in (player_series(series, player_id).items() if series else [])
            },
            "achievements": {k: [a.to_dict() for a in v] for k, v in achievements.items()},
        }
    return report
