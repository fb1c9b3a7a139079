"""Per-player achievements derived from the aggregate statistics.

An achievement is a rank in one leaderboard (participation, win rate, longest
series, talk time, camp performance). Every leaderboard is computed twice:
once on all games and once on the modded games only, the latter marked with
the ``(Parties Moddées)`` title suffix and a ``modded`` id suffix.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from typing import Any, Callable, Dict, List, Optional

from .camps import AMOUREUX, LOUP, VILLAGEOIS
from .features import compute_camp_performance, compute_player_stats
from .normalize import GameRecord
from .series import SeriesData, SeriesRecord, compute_series
from .talking import TalkingStats, compute_talking_stats
from .timeline import fill_displayed_ids


logger = logging.getLogger(__name__)

MODDED_SUFFIX = " (Parties Moddées)"


@dataclass
class Achievement:
    id: str
    title: str
    description: str
    type: str
    category: str
    rank: int
    value: float
    total_ranked: int
    redirect_to: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class AchievementThresholds:
    win_rate_min_games: int = 10
    expert_win_rate_min_games: int = 50
    villageois_series_min: int = 3
    loup_series_min: int = 2
    win_series_min: int = 3
    loss_series_min: int = 3
    talking_min_games: int = 20
    talking_top: int = 3
    hall_of_fame_min_games: int = 25
    special_roles_min_games: int = 10
    special_role_min_games_per_role: int = 3
    # camp -> minimum games in that camp
    camp_min_games: Dict[str, int] = field(
        default_factory=lambda: {
            VILLAGEOIS: 25,
            LOUP: 10,
            "Idiot du Village": 5,
            AMOUREUX: 5,
        }
    )


DEFAULT_THRESHOLDS = AchievementThresholds()

_CAMP_EMOJI = {
    VILLAGEOIS: "🏘️",
    LOUP: "🐺",
    "Idiot du Village": "🤡",
    AMOUREUX: "💕",
}


@dataclass
class _Leaderboards:
    """Aggregates shared by every player of one dataset."""

    player_stats: List[Dict[str, Any]]
    camp_performance: List[Dict[str, Any]]
    series: Optional[SeriesData]
    talking: Optional[TalkingStats]


def _ordinal(rank: int, feminine: bool = False) -> str:
    if rank == 1:
        return "1ère" if feminine else "1er"
    return f"{rank}ème"


def _variant(suffix: str) -> str:
    return "modded" if suffix else "all"


def _slug(text: str) -> str:
    return "-".join(text.lower().split())


def _rank_of(rows: List[Any], player_id: str, key: Callable[[Any], str]) -> Optional[int]:
    for idx, row in enumerate(rows):
        if key(row) == player_id:
            return idx + 1
    return None


def _build_leaderboards(games: List[GameRecord], roster: Optional[Dict[str, str]]) -> _Leaderboards:
    return _Leaderboards(
        player_stats=compute_player_stats(games, roster)["player_stats"],
        camp_performance=compute_camp_performance(games, roster=roster),
        series=compute_series(games, roster),
        talking=compute_talking_stats(games, roster),
    )


def process_general_achievements(
    player_stats: List[Dict[str, Any]],
    player_id: str,
    suffix: str = "",
    thresholds: AchievementThresholds = DEFAULT_THRESHOLDS,
) -> List[Achievement]:
    achievements: List[Achievement] = []
    if not player_stats:
        return achievements
    variant = _variant(suffix)
    redirect = {"tab": "players", "subTab": "playersGeneral"}

    by_games = sorted(player_stats, key=lambda r: r["games_played"], reverse=True)
    rank = _rank_of(by_games, player_id, lambda r: r["player"])
    if rank:
        games_played = by_games[rank - 1]["games_played"]
        achievements.append(
            Achievement(
                id=f"participation-{variant}",
                title=f"📊 Rang {rank} Participations{suffix}",
                description=f"{_ordinal(rank)} joueur le plus actif avec {games_played} parties",
                type="good",
                category="general",
                rank=rank,
                value=games_played,
                total_ranked=len(by_games),
                redirect_to=dict(redirect),
            )
        )

    boards = (
        ("winrate-10", "🏆", "Taux de Victoire", thresholds.win_rate_min_games),
        ("winrate-50", "🌟", "Taux de Victoire Expert", thresholds.expert_win_rate_min_games),
    )
    for prefix, emoji, label, min_games in boards:
        eligible = [r for r in player_stats if r["games_played"] >= min_games]
        eligible.sort(key=lambda r: r["win_percent"], reverse=True)
        rank = _rank_of(eligible, player_id, lambda r: r["player"])
        if not rank:
            continue
        win_percent = eligible[rank - 1]["win_percent"]
        achievements.append(
            Achievement(
                id=f"{prefix}-{variant}",
                title=f"{emoji} Rang {rank} {label}{suffix}",
                description=(
                    f"{_ordinal(rank)} meilleur taux de victoire: {win_percent}% "
                    f"(min. {min_games} parties)"
                ),
                type="good",
                category="general",
                rank=rank,
                value=win_percent,
                total_ranked=len(eligible),
                redirect_to=dict(redirect),
            )
        )
    return achievements


def process_series_achievements(
    series: Optional[SeriesData],
    player_id: str,
    suffix: str = "",
    thresholds: AchievementThresholds = DEFAULT_THRESHOLDS,
) -> List[Achievement]:
    achievements: List[Achievement] = []
    if series is None:
        return achievements
    variant = _variant(suffix)

    boards = (
        ("villageois-series", "🏘️", "Série Villageois", "série Villageois", series.all_villageois_series, thresholds.villageois_series_min, "good"),
        ("loup-series", "🐺", "Série Loup", "série Loup", series.all_loups_series, thresholds.loup_series_min, "good"),
        ("win-series", "🏆", "Série de Victoires", "série de victoires", series.all_win_series, thresholds.win_series_min, "good"),
        ("loss-series", "💀", "Série de Défaites", "série de défaites", series.all_loss_series, thresholds.loss_series_min, "bad"),
    )
    for prefix, emoji, label, phrase, rows, min_length, kind in boards:
        qualifying: List[SeriesRecord] = [r for r in rows if r.series_length >= min_length]
        qualifying.sort(key=lambda r: r.series_length, reverse=True)
        rank = _rank_of(qualifying, player_id, lambda r: r.player)
        if not rank:
            continue
        length = qualifying[rank - 1].series_length
        achievements.append(
            Achievement(
                id=f"{prefix}-{variant}",
                title=f"{emoji} Top {rank} {label}{suffix}",
                description=(
                    f"{_ordinal(rank, feminine=True)} plus longue {phrase}: "
                    f"{length} parties consécutives (min. {min_length})"
                ),
                type=kind,
                category="series",
                rank=rank,
                value=length,
                total_ranked=len(qualifying),
                redirect_to={"tab": "players", "subTab": "series", "chartSection": prefix},
            )
        )
    return achievements


def process_communication_achievements(
    talking: Optional[TalkingStats],
    player_id: str,
    suffix: str = "",
    thresholds: AchievementThresholds = DEFAULT_THRESHOLDS,
) -> List[Achievement]:
    if talking is None or not talking.player_stats:
        return []

    eligible = [s for s in talking.player_stats if s.games_played >= thresholds.talking_min_games]
    eligible.sort(key=lambda s: s.seconds_all_per_60min, reverse=True)
    rank = _rank_of(eligible, player_id, lambda s: s.player_id)
    if not rank or rank > thresholds.talking_top:
        return []

    per_hour = eligible[rank - 1].seconds_all_per_60min
    minutes, seconds = int(per_hour // 60), int(per_hour % 60)
    place = {1: "Champion", 2: "Vice-champion"}.get(rank, f"{rank}ème place")
    return [
        Achievement(
            id="communication-most-talkative" + "".join(f"-{w}" for w in suffix.lower().replace("(", "").replace(")", "").split()),
            title=f"🎤 Bavard N°{rank}{suffix}",
            description=f"{place} du temps de parole total avec {minutes}m {seconds}s par heure de jeu",
            type="good",
            category="communication",
            rank=rank,
            value=per_hour,
            total_ranked=len(eligible),
            redirect_to={
                "tab": "playerStats",
                "subTab": "talkingTime",
                "filters": {"moddedGames": bool(suffix), "minGames": thresholds.talking_min_games},
            },
        )
    ]


def _overall_performers(rows: List[Dict[str, Any]], min_games: int) -> List[Dict[str, Any]]:
    per_player: Dict[str, Dict[str, float]] = {}
    for row in rows:
        acc = per_player.setdefault(row["player"], {"weighted": 0.0, "games": 0, "total": row["total_games"]})
        acc["weighted"] += row["performance"] * row["games"]
        acc["games"] += row["games"]
    board = [
        {"player": pid, "games": int(acc["total"]), "performance": acc["weighted"] / acc["games"]}
        for pid, acc in per_player.items()
        if acc["total"] >= min_games and acc["games"]
    ]
    board.sort(key=lambda r: r["performance"], reverse=True)
    return board


def _special_role_performers(
    rows: List[Dict[str, Any]], min_games: int, min_per_role: int
) -> List[Dict[str, Any]]:
    per_player: Dict[str, Dict[str, float]] = {}
    for row in rows:
        if row["camp"] in (VILLAGEOIS, LOUP) or row["games"] < min_per_role:
            continue
        acc = per_player.setdefault(row["player"], {"games": 0, "wins": 0, "weighted": 0.0})
        acc["games"] += row["games"]
        acc["wins"] += row["wins"]
        acc["weighted"] += row["performance"] * row["games"]
    board = [
        {
            "player": pid,
            "games": int(acc["games"]),
            "win_rate": acc["wins"] / acc["games"] * 100.0,
            "performance": acc["weighted"] / acc["games"],
        }
        for pid, acc in per_player.items()
        if acc["games"] >= min_games
    ]
    board.sort(key=lambda r: r["performance"], reverse=True)
    return board


def process_performance_achievements(
    camp_performance: List[Dict[str, Any]],
    player_id: str,
    suffix: str = "",
    thresholds: AchievementThresholds = DEFAULT_THRESHOLDS,
) -> List[Achievement]:
    """Rank a player's win rate against each camp's global win rate.

    ``camp_performance`` holds the detailed rows of
    :func:`lycans.features.compute_camp_performance` (grouped ``Camp ...``
    rows are ignored here).
    """
    achievements: List[Achievement] = []
    rows = [r for r in camp_performance if not r["camp"].startswith("Camp ")]
    if not rows:
        return achievements
    variant = _variant(suffix)

    hall = _overall_performers(rows, thresholds.hall_of_fame_min_games)
    rank = _rank_of(hall, player_id, lambda r: r["player"])
    if rank:
        entry = hall[rank - 1]
        achievements.append(
            Achievement(
                id=f"hall-of-fame-{variant}",
                title=f"🏆 Top {rank} Hall of Fame{suffix}",
                description=(
                    f"{_ordinal(rank)} meilleur overperformer: {entry['performance']:+.1f}% "
                    f"({entry['games']} parties, min. {thresholds.hall_of_fame_min_games})"
                ),
                type="good",
                category="performance",
                rank=rank,
                value=entry["performance"],
                total_ranked=len(hall),
                redirect_to={"tab": "players", "subTab": "campPerformance", "chartSection": "hall-of-fame"},
            )
        )

    for camp, min_games in thresholds.camp_min_games.items():
        board = [r for r in rows if r["camp"] == camp and r["games"] >= min_games]
        board.sort(key=lambda r: r["performance"], reverse=True)
        rank = _rank_of(board, player_id, lambda r: r["player"])
        if not rank:
            continue
        entry = board[rank - 1]
        slug = _slug(camp.split(" ")[0])
        achievements.append(
            Achievement(
                id=f"{slug}-performance-{variant}",
                title=f"{_CAMP_EMOJI.get(camp, '⭐')} Top {rank} {camp}{suffix}",
                description=(
                    f"{_ordinal(rank)} meilleur {camp}: {entry['win_rate']:.1f}% "
                    f"({entry['performance']:+.1f}%) ({entry['games']} parties, min. {min_games})"
                ),
                type="good",
                category="performance",
                rank=rank,
                value=entry["win_rate"],
                total_ranked=len(board),
                redirect_to={"tab": "players", "subTab": "campPerformance", "chartSection": f"camp-{slug}"},
            )
        )

    special = _special_role_performers(
        rows, thresholds.special_roles_min_games, thresholds.special_role_min_games_per_role
    )
    rank = _rank_of(special, player_id, lambda r: r["player"])
    if rank:
        entry = special[rank - 1]
        achievements.append(
            Achievement(
                id=f"solo-performance-{variant}",
                title=f"⭐ Top {rank} Rôles Spéciaux{suffix}",
                description=(
                    f"{_ordinal(rank)} meilleur joueur rôles spéciaux: {entry['win_rate']:.1f}% "
                    f"({entry['performance']:+.1f}%) ({entry['games']} parties, "
                    f"min. {thresholds.special_roles_min_games})"
                ),
                type="good",
                category="performance",
                rank=rank,
                value=entry["win_rate"],
                total_ranked=len(special),
                redirect_to={"tab": "players", "subTab": "campPerformance", "chartSection": "solo-roles"},
            )
        )
    return achievements


def _player_achievements(
    boards: _Leaderboards,
    player_id: str,
    suffix: str,
    thresholds: AchievementThresholds,
) -> List[Achievement]:
    return (
        process_general_achievements(boards.player_stats, player_id, suffix, thresholds)
        + process_series_achievements(boards.series, player_id, suffix, thresholds)
        + process_communication_achievements(boards.talking, player_id, suffix, thresholds)
        + process_performance_achievements(boards.camp_performance, player_id, suffix, thresholds)
    )


def generate_player_achievements(
    games: List[GameRecord],
    player_id: str,
    roster: Optional[Dict[str, str]] = None,
    thresholds: Optional[AchievementThresholds] = None,
) -> Dict[str, List[Achievement]]:
    """Achievements of one player on all games and on modded games only."""
    thresholds = thresholds or DEFAULT_THRESHOLDS
    # modded series must reuse the numbering of the full log
    fill_displayed_ids(games)
    modded = [g for g in games if g.modded]
    return {
        "all_games": _player_achievements(_build_leaderboards(games, roster), player_id, "", thresholds),
        "modded_only": _player_achievements(
            _build_leaderboards(modded, roster), player_id, MODDED_SUFFIX, thresholds
        )
        if modded
        else [],
    }


def generate_all_achievements(
    games: List[GameRecord],
    roster: Optional[Dict[str, str]] = None,
    thresholds: Optional[AchievementThresholds] = None,
) -> Dict[str, Dict[str, List[Achievement]]]:
    thresholds = thresholds or DEFAULT_THRESHOLDS
    # modded series must reuse the numbering of the full log
    fill_displayed_ids(games)
    modded = [g for g in games if g.modded]
    all_boards = _build_leaderboards(games, roster)
    modded_boards = _build_leaderboards(modded, roster) if modded else None

    player_ids = sorted({p.player_id for g in games for p in g.players})
    logger.info("Computing achievements for %d players (%d games, %d modded)", len(player_ids), len(games), len(modded))
    result: Dict[str, Dict[str, List[Achievement]]] = {}
    for pid in player_ids:
        result[pid] = {
            "all_games": _player_achievements(all_boards, pid, "", thresholds),
            "modded_only": _player_achievements(modded_boards, pid, MODDED_SUFFIX, thresholds)
            if modded_boards
            else [],
        }
    return result
