from __future__ import annotations

from collections import Counter, defaultdict
from typing import Any, Dict, List, Optional

from .camps import (
    GROUPED_OPTIONS,
    LOUP,
    UNGROUPED_OPTIONS,
    VILLAGEOIS,
    CampGroupOptions,
    camp_bucket,
    camp_from_role,
    player_final_role,
    player_main_camp,
    winner_camp,
)
from .normalize import GameRecord, canonical_name


def _pct(num: float, den: float) -> float:
    return (num / den) * 100.0 if den else 0.0


def compute_player_stats(
    games: List[GameRecord], roster: Optional[Dict[str, str]] = None
) -> Dict[str, Any]:
    stats: Dict[str, Dict[str, Any]] = {}
    for g in games:
        for p in g.players:
            row = stats.get(p.player_id)
            if row is None:
                row = {
                    "player": p.player_id,
                    "player_name": canonical_name(p, roster),
                    "games_played": 0,
                    "wins": 0,
                    "camps": {
                        "villageois": {"played": 0, "won": 0},
                        "loup": {"played": 0, "won": 0},
                        "solo": {"played": 0, "won": 0},
                    },
                }
                stats[p.player_id] = row
            row["games_played"] += 1
            bucket = row["camps"][camp_bucket(player_main_camp(p))]
            bucket["played"] += 1
            if p.victorious:
                row["wins"] += 1
                bucket["won"] += 1

    total = len(games)
    rows: List[Dict[str, Any]] = []
    for row in stats.values():
        row["games_played_percent"] = round(_pct(row["games_played"], total), 1)
        row["win_percent"] = round(_pct(row["wins"], row["games_played"]), 1)
        rows.append(row)
    rows.sort(key=lambda r: (r["games_played"], r["wins"]), reverse=True)
    return {"total_games": total, "player_stats": rows}


def compute_camp_performance(
    games: List[GameRecord],
    min_games: int = 3,
    roster: Optional[Dict[str, str]] = None,
) -> List[Dict[str, Any]]:
    """Player win rate per camp compared with the camp's global win rate.

    Camps come from the final role. Detailed camps keep villager and wolf
    sub roles apart; grouped rows ("Camp Villageois", "Camp Loup") are added
    on top of them.
    """
    views = {
        "detailed": UNGROUPED_OPTIONS,
        "grouped": CampGroupOptions(regroup_villagers=True, regroup_wolf_sub_roles=True),
    }
    camp_totals: Dict[str, Dict[str, Counter]] = {k: defaultdict(Counter) for k in views}
    player_camps: Dict[str, Dict[str, Dict[str, Counter]]] = {k: defaultdict(lambda: defaultdict(Counter)) for k in views}
    player_totals: Dict[str, int] = defaultdict(int)
    names: Dict[str, str] = {}

    for g in games:
        for p in g.players:
            role = player_final_role(p)
            names[p.player_id] = canonical_name(p, roster)
            player_totals[p.player_id] += 1
            for view, options in views.items():
                camp = camp_from_role(role, options, p.power)
                camp_totals[view][camp]["games"] += 1
                player_camps[view][p.player_id][camp]["games"] += 1
                if p.victorious:
                    camp_totals[view][camp]["wins"] += 1
                    player_camps[view][p.player_id][camp]["wins"] += 1

    rows: List[Dict[str, Any]] = []
    for view in views:
        camp_rates = {c: _pct(t["wins"], t["games"]) for c, t in camp_totals[view].items()}
        for pid, camps in player_camps[view].items():
            for camp, counts in camps.items():
                if view == "grouped":
                    if camp not in (VILLAGEOIS, LOUP):
                        continue
                    label = "Camp Villageois" if camp == VILLAGEOIS else "Camp Loup"
                else:
                    label = camp
                if counts["games"] < min_games:
                    continue
                win_rate = _pct(counts["wins"], counts["games"])
                rows.append(
                    {
                        "player": pid,
                        "player_name": names[pid],
                        "camp": label,
                        "games": counts["games"],
                        "wins": counts["wins"],
                        "win_rate": win_rate,
                        "performance": win_rate - camp_rates[camp] if camp_rates[camp] else 0.0,
                        "total_games": player_totals[pid],
                    }
                )
    return rows


def compute_camp_win_rates(games: List[GameRecord]) -> List[Dict[str, Any]]:
    counts = Counter(winner_camp(g) for g in games)
    total = len(games)
    rows = [
        {"camp": camp, "wins": n, "win_rate": _pct(n, total)}
        for camp, n in counts.items()
    ]
    rows.sort(key=lambda r: r["wins"], reverse=True)
    return rows


def compute_camp_distribution(
    games: List[GameRecord], options: Optional[CampGroupOptions] = None
) -> List[Dict[str, Any]]:
    played: Counter = Counter()
    won: Counter = Counter()
    for g in games:
        for p in g.players:
            camp = camp_from_role(p.initial_role, options, p.power)
            played[camp] += 1
            if p.victorious:
                won[camp] += 1
    total = sum(played.values())
    rows = [
        {
            "camp": camp,
            "participations": n,
            "share": _pct(n, total),
            "wins": won[camp],
            "win_rate": _pct(won[camp], n),
        }
        for camp, n in played.items()
    ]
    rows.sort(key=lambda r: r["participations"], reverse=True)
    return rows


def compute_overview(games: List[GameRecord]) -> Dict[str, Any]:
    starts = sorted(g.start_date for g in games if g.start_date)
    return {
        "games": len(games),
        "modded_games": sum(1 for g in games if g.modded),
        "players": len({p.player_id for g in games for p in g.players}),
        "first_game": starts[0] if starts else None,
        "last_game": starts[-1] if starts else None,
        "winner_camps": compute_camp_win_rates(games),
        "camp_distribution": compute_camp_distribution(games, GROUPED_OPTIONS),
    }
