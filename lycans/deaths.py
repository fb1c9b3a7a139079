"""Death, kill and hunter statistics.

Deaths are read from ``death_type`` / ``killer_name`` / ``death_timing``.
Kills only count direct kills: votes, starvation, falls and deaths chained to
another player are deaths without a killer.
"""

from __future__ import annotations

from collections import Counter, defaultdict
from typing import Any, Dict, List, Optional

from .camps import DEFAULT_OPTIONS, VILLAGEOIS, camp_from_role, is_hunter, player_final_role
from .normalize import GameRecord, PlayerRecord, canonical_name
from .timeline import parse_death_timing


SURVIVOR = "SURVIVOR"
VOTED = "VOTED"
UNKNOWN = "UNKNOWN"
NOT_A_DEATH = ("", "N/A", SURVIVOR)
NOT_A_KILL = (VOTED, "STARVATION", "FALL", "BY_AVATAR_CHAIN", UNKNOWN) + NOT_A_DEATH
HUNTER_DEATH_TYPES = ("BULLET", "BULLET_HUMAN", "BULLET_WOLF")

TIMING_PHASES = {"J": "day", "N": "night", "M": "meeting", "U": "unknown"}


def _is_death(p: PlayerRecord) -> bool:
    return bool(p.death_type) and p.death_type not in NOT_A_DEATH


def _killer(game: GameRecord, victim: PlayerRecord) -> Optional[PlayerRecord]:
    if not victim.killer_name:
        return None
    return next((p for p in game.players if p.username == victim.killer_name), None)


def compute_death_stats(
    games: List[GameRecord], roster: Optional[Dict[str, str]] = None
) -> Optional[Dict[str, Any]]:
    if not games:
        return None

    games_played: Counter = Counter()
    names: Dict[str, str] = {}
    deaths: Dict[str, Dict[str, Any]] = {}
    kills: Dict[str, Dict[str, Any]] = {}
    by_type: Counter = Counter()
    by_phase: Counter = Counter()
    total_deaths = 0

    for g in games:
        for p in g.players:
            games_played[p.player_id] += 1
            names[p.player_id] = canonical_name(p, roster)

        for victim in g.players:
            if not _is_death(victim):
                continue
            total_deaths += 1
            by_type[victim.death_type] += 1
            timing = parse_death_timing(victim.death_timing)
            by_phase[TIMING_PHASES[timing[0]] if timing else "unknown"] += 1

            row = deaths.setdefault(
                victim.player_id, {"total": 0, "by_type": Counter(), "killed_by": Counter()}
            )
            row["total"] += 1
            row["by_type"][victim.death_type] += 1

            killer = _killer(g, victim)
            if killer is None:
                continue
            row["killed_by"][names[killer.player_id]] += 1
            if victim.death_type in NOT_A_KILL:
                continue
            k = kills.setdefault(killer.player_id, {"kills": 0, "by_type": Counter()})
            k["kills"] += 1
            k["by_type"][victim.death_type] += 1

    killer_stats = sorted(
        (
            {
                "player": pid,
                "player_name": names[pid],
                "kills": k["kills"],
                "percentage": k["kills"] / total_deaths * 100.0 if total_deaths else 0.0,
                "games_played": games_played[pid],
                "average_kills_per_game": k["kills"] / games_played[pid] if games_played[pid] else 0.0,
                "kills_by_death_type": dict(k["by_type"]),
            }
            for pid, k in kills.items()
        ),
        key=lambda r: r["kills"],
        reverse=True,
    )
    player_death_stats = sorted(
        (
            {
                "player": pid,
                "player_name": names[pid],
                "total_deaths": d["total"],
                "deaths_by_type": dict(d["by_type"]),
                "killed_by": dict(d["killed_by"]),
                "games_played": games_played[pid],
                "death_rate": d["total"] / games_played[pid] if games_played[pid] else 0.0,
            }
            for pid, d in deaths.items()
        ),
        key=lambda r: r["total_deaths"],
        reverse=True,
    )

    return {
        "total_deaths": total_deaths,
        "total_games": len(games),
        "average_deaths_per_game": total_deaths / len(games),
        "deaths_by_type": dict(by_type),
        "deaths_by_phase": dict(by_phase),
        "killer_stats": killer_stats,
        "player_death_stats": player_death_stats,
        "most_deadly_killer": killer_stats[0]["player_name"] if killer_stats else None,
    }


def compute_hunter_stats(
    games: List[GameRecord],
    roster: Optional[Dict[str, str]] = None,
    victim_camp: Optional[str] = None,
) -> Dict[str, Any]:
    """Shots fired by hunters.

    A shot on a villager is a bad shot, any other victim is a good one.
    ``victim_camp`` keeps only the shots on that camp.
    """
    hunters: Dict[str, Dict[str, Any]] = defaultdict(
        lambda: {"games": 0, "by_type": Counter(), "victim_camps": Counter()}
    )
    names: Dict[str, str] = {}

    for g in games:
        in_game = set()
        for p in g.players:
            if is_hunter(p, player_final_role(p)):
                in_game.add(p.player_id)
                names[p.player_id] = canonical_name(p, roster)
                hunters[p.player_id]["games"] += 1

        for victim in g.players:
            if victim.death_type not in HUNTER_DEATH_TYPES:
                continue
            killer = _killer(g, victim)
            if killer is None or killer.player_id not in in_game:
                continue
            camp = camp_from_role(victim.initial_role, DEFAULT_OPTIONS, victim.power)
            if victim_camp and camp != victim_camp:
                continue
            hunters[killer.player_id]["by_type"][victim.death_type] += 1
            hunters[killer.player_id]["victim_camps"][camp] += 1

    rows: List[Dict[str, Any]] = []
    for pid, h in hunters.items():
        total = sum(h["victim_camps"].values())
        bad = h["victim_camps"][VILLAGEOIS]
        good = total - bad
        rows.append(
            {
                "player": pid,
                "player_name": names[pid],
                "games_played_as_hunter": h["games"],
                "total_kills": total,
                "good_shots": good,
                "bad_shots": bad,
                "average_kills_per_game": total / h["games"] if h["games"] else 0.0,
                "average_good_shots_per_game": good / h["games"] if h["games"] else 0.0,
                "kills_by_death_type": dict(h["by_type"]),
                "victims_by_camp": dict(h["victim_camps"]),
            }
        )
    rows.sort(key=lambda r: r["total_kills"], reverse=True)

    best_average = max(rows, key=lambda r: r["average_good_shots_per_game"], default=None)
    return {
        "total_hunters": len(rows),
        "total_games": len(games),
        "hunter_stats": rows,
        "best_hunter": rows[0]["player_name"] if rows else None,
        "best_average_hunter": best_average["player_name"] if best_average else None,
    }
