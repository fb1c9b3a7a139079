from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional

from .normalize import GameRecord, canonical_name
from .timeline import game_duration_seconds


SECONDS_PER_HOUR = 3600.0


@dataclass
class PlayerTalkingStats:
    player_id: str
    player: str
    games_played: int
    total_seconds_outside: float
    total_seconds_during: float
    total_seconds_all: float
    total_game_duration_seconds: float
    seconds_outside_per_60min: float
    seconds_during_per_60min: float
    seconds_all_per_60min: float


@dataclass
class TalkingStats:
    player_stats: List[PlayerTalkingStats]
    total_games: int
    games_with_talking_data: int


def game_has_talking_data(game: GameRecord) -> bool:
    return any(p.seconds_talked_outside > 0 or p.seconds_talked_during > 0 for p in game.players)


def compute_talking_stats(
    games: List[GameRecord],
    roster: Optional[Dict[str, str]] = None,
) -> Optional[TalkingStats]:
    if not games:
        return None

    with_data = [g for g in games if game_has_talking_data(g)]
    if not with_data:
        return TalkingStats(player_stats=[], total_games=len(games), games_with_talking_data=0)

    totals: Dict[str, Dict[str, float]] = {}
    names: Dict[str, str] = {}
    for g in with_data:
        for p in g.players:
            # time spent in the game ends at death for eliminated players
            duration = game_duration_seconds(g.start_date, p.death_date or g.end_date)
            if not duration or duration <= 0:
                continue
            acc = totals.setdefault(
                p.player_id, {"games": 0, "outside": 0.0, "during": 0.0, "duration": 0.0}
            )
            acc["games"] += 1
            acc["outside"] += p.seconds_talked_outside
            acc["during"] += p.seconds_talked_during
            acc["duration"] += duration
            names[p.player_id] = canonical_name(p, roster)

    rows: List[PlayerTalkingStats] = []
    for pid, acc in totals.items():
        total_all = acc["outside"] + acc["during"]
        factor = SECONDS_PER_HOUR / acc["duration"] if acc["duration"] > 0 else 0.0
        rows.append(
            PlayerTalkingStats(
                player_id=pid,
                player=names[pid],
                games_played=int(acc["games"]),
                total_seconds_outside=acc["outside"],
                total_seconds_during=acc["during"],
                total_seconds_all=total_all,
                total_game_duration_seconds=acc["duration"],
                seconds_outside_per_60min=acc["outside"] * factor,
                seconds_during_per_60min=acc["during"] * factor,
                seconds_all_per_60min=total_all * factor,
            )
        )

    return TalkingStats(
        player_stats=rows,
        total_games=len(games),
        games_with_talking_data=len(with_data),
    )
