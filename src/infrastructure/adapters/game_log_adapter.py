"""Adapters wrapping the lycans statistics package."""

from dataclasses import asdict
from typing import Any, Dict, List, Tuple

from lycans.achievements import generate_player_achievements
from lycans.config import data_config_from_env
from lycans.deaths import compute_death_stats, compute_hunter_stats
from lycans.features import compute_camp_performance, compute_overview, compute_player_stats
from lycans.ingest import FetchMeta, filter_games, load_game_log, resolve_player_id
from lycans.normalize import GameRecord, load_roster
from lycans.report import build_report
from lycans.series import compute_series
from lycans.talking import compute_talking_stats
from lycans.validate import summarize_issues, validate_game_log

from ...application.ports.game_log import GameLogPort
from ...application.ports.stats_builder import PlayerNotFoundError, StatsBuilderPort


class LycansGameLogAdapter(GameLogPort):
    """Adapter loading the game log from a file or URL."""

    def __init__(self, data: str | None = None, roster_file: str | None = None):
        """Initialize with the game log location.

        Args:
            data: Game log path or URL. If None, read from environment.
            roster_file: Roster path. If None, read from environment.
        """
        config = data_config_from_env()
        self._data = data or (str(config.data_file) if config.data_file else config.data_url)
        self._roster_file = roster_file or (str(config.roster_file) if config.roster_file else None)

    def load_games(
        self,
        source: str | None = None,
        modded_only: bool = False,
    ) -> Tuple[List[GameRecord], FetchMeta]:
        if not self._data:
            raise RuntimeError("No game log configured (set LYCANS_DATA_FILE or LYCANS_DATA_URL)")

        games, meta = load_game_log(self._data)
        games = filter_games(games, source=source, modded_only=modded_only)
        meta.games_analyzed = len(games)
        meta.data_source = source
        meta.modded_only = modded_only
        return games, meta

    def load_roster(self) -> Dict[str, str]:
        return load_roster(self._roster_file)


class LycansStatsBuilderAdapter(StatsBuilderPort):
    """Adapter computing statistics sections with the lycans package."""

    def build_section(
        self,
        section: str,
        games: List[GameRecord],
        meta: FetchMeta,
        roster: Dict[str, str],
        player_id: str | None = None,
    ) -> Dict[str, Any]:
        if section == "report":
            return build_report(games, meta, roster=roster)

        if section == "players":
            players = compute_player_stats(games, roster)
            return {
                "overview": compute_overview(games),
                "total_games": players["total_games"],
                "player_stats": players["player_stats"],
                "camp_performance": compute_camp_performance(games, roster=roster),
            }

        if section == "series":
            series = compute_series(games, roster)
            return asdict(series) if series else {}

        if section == "talking":
            talking = compute_talking_stats(games, roster)
            return asdict(talking) if talking else {}

        if section == "deaths":
            return {
                "deaths": compute_death_stats(games, roster),
                "hunters": compute_hunter_stats(games, roster),
            }

        if section == "achievements":
            if not player_id:
                raise ValueError("player_id is required for achievements")
            try:
                resolved_id, player_name = resolve_player_id(games, player_id, roster)
            except ValueError as exc:
                raise PlayerNotFoundError(str(exc)) from exc
            achievements = generate_player_achievements(games, resolved_id, roster)
            return {
                "player_id": resolved_id,
                "player_name": player_name,
                "achievements": {k: [a.to_dict() for a in v] for k, v in achievements.items()},
            }

        if section == "validation":
            issues = validate_game_log(games)
            return {**summarize_issues(issues), "issues": [i.to_dict() for i in issues]}

        raise ValueError(f"Unknown section '{section}'")
