from __future__ import annotations

from typing import Any, Dict

from .timeline import format_duration


def render_text(report: Dict[str, Any]) -> str:
    meta = report.get("meta", {})
    overview = report.get("overview", {})
    players = report.get("players", {}).get("player_stats", [])
    talking = report.get("talking", {}).get("player_stats", [])
    series = report.get("series", {})
    deaths = report.get("deaths") or {}
    hunters = (report.get("hunters") or {}).get("hunter_stats", [])
    validation = report.get("validation", {})

    lines = []
    lines.append("LYCANS STATS REPORT")
    lines.append(f"Source: {meta.get('source')} | Mod version: {meta.get('mod_version') or '?'}")
    lines.append(f"Period: {overview.get('first_game') or '?'} -> {overview.get('last_game') or '?'}")
    lines.append("")

    lines.append("Overview")
    lines.append(
        f"Games: {overview.get('games', 0)} | Modded: {overview.get('modded_games', 0)} | "
        f"Players: {overview.get('players', 0)}"
    )
    for row in overview.get("winner_camps", [])[:5]:
        lines.append(f"- {row['camp']}: {row['wins']} wins ({row['win_rate']:.1f}%)")
    lines.append("")

    lines.append("Most active players")
    for row in players[:10]:
        lines.append(
            f"- {row['player_name']}: {row['games_played']} games | "
            f"{row['wins']} wins ({row['win_percent']:.1f}%)"
        )
    lines.append("")

    if talking:
        lines.append("Talk time per hour of play")
        for row in talking[:5]:
            lines.append(
                f"- {row['player']}: {format_duration(row['seconds_all_per_60min'])} "
                f"({row['games_played']} games)"
            )
        lines.append("")

    lines.append("Longest series")
    labels = (("villageois", "Villageois"), ("loup", "Loups"), ("win", "Victoires"), ("loss", "Défaites"))
    for key, label in labels:
        rows = series.get(key) or []
        if not rows:
            continue
        best = rows[0]
        ongoing = " (en cours)" if best.get("is_ongoing") else ""
        lines.append(
            f"- {label}: {best['player_name']} {best['series_length']} games "
            f"#{best['start_game']} -> #{best['end_game']}{ongoing}"
        )

    if deaths.get("total_deaths"):
        lines.append("")
        lines.append(
            f"Deaths: {deaths['total_deaths']} ({deaths['average_deaths_per_game']:.1f} per game)"
        )
        for row in deaths.get("killer_stats", [])[:5]:
            lines.append(f"- {row['player_name']}: {row['kills']} kills")

    if hunters:
        lines.append("")
        lines.append("Hunters")
        for row in hunters[:5]:
            lines.append(
                f"- {row['player_name']}: {row['good_shots']} good / {row['bad_shots']} bad shots "
                f"in {row['games_played_as_hunter']} games"
            )

    player = report.get("player")
    if player:
        lines.append("")
        lines.append(f"Achievements for {player.get('player_id')}")
        for scope, items in (player.get("achievements") or {}).items():
            for a in items:
                lines.append(f"- [{scope}] {a['title']}: {a['description']}")

    lines.append("")
    lines.append(
        f"Validation: {validation.get('total', 0)} issue(s) in {validation.get('games', 0)} game(s)"
    )
    for kind, count in (validation.get("by_type") or {}).items():
        lines.append(f"- {kind}: {count}")

    return "\n".join(lines)
