import pytest

from lycans.achievements import (
    AchievementThresholds,
    generate_all_achievements,
    generate_player_achievements,
    process_communication_achievements,
    process_general_achievements,
    process_performance_achievements,
)
from lycans.talking import compute_talking_stats


def _ids(items):
    return [a.id for a in items]


def test_player_gets_all_and_modded_variants(games) -> None:
    result = generate_player_achievements(games, "500")
    assert "participation-all" in _ids(result["all_games"])
    assert "participation-modded" in _ids(result["modded_only"])

    modded = next(a for a in result["modded_only"] if a.id == "participation-modded")
    assert modded.title.endswith(" (Parties Moddées)")


def test_loss_series_is_a_bad_achievement(games) -> None:
    result = generate_player_achievements(games, "500")
    loss = next(a for a in result["all_games"] if a.id == "loss-series-all")
    assert loss.type == "bad"
    assert loss.category == "series"
    assert loss.rank == 1
    assert loss.value == 3
    assert loss.title == "💀 Top 1 Série de Défaites"
    assert loss.description.startswith("1ère plus longue série de défaites")
    # only two modded games, below the minimum series length
    assert "loss-series-modded" not in _ids(result["modded_only"])


def test_wolf_series_minimum_is_two(games) -> None:
    result = generate_player_achievements(games, "200")
    assert "loup-series-all" in _ids(result["all_games"])


def test_general_rankings_respect_minimum_games() -> None:
    stats = [
        {"player": "a", "games_played": 60, "win_percent": 55.0},
        {"player": "b", "games_played": 12, "win_percent": 70.0},
        {"player": "c", "games_played": 4, "win_percent": 100.0},
    ]
    a = {x.id: x for x in process_general_achievements(stats, "a")}
    assert a["participation-all"].rank == 1
    assert a["winrate-10-all"].rank == 2
    assert a["winrate-50-all"].rank == 1
    assert a["winrate-50-all"].total_ranked == 1
    assert a["participation-all"].description.startswith("1er joueur")

    c = _ids(process_general_achievements(stats, "c"))
    assert c == ["participation-all"]


def test_most_talkative_top_three_only(games) -> None:
    talking = compute_talking_stats(games)
    thresholds = AchievementThresholds(talking_min_games=1, talking_top=1)
    alice = process_communication_achievements(talking, "100", "", thresholds)
    assert len(alice) == 1
    assert alice[0].title == "🎤 Bavard N°1"
    assert alice[0].id == "communication-most-talkative"
    assert alice[0].value == pytest.approx(180.0)
    assert "3m 0s" in alice[0].description

    assert process_communication_achievements(talking, "200", "", thresholds) == []
    modded = process_communication_achievements(talking, "100", " (Parties Moddées)", thresholds)
    assert modded[0].id == "communication-most-talkative-parties-moddées"

    # default threshold needs 20 games with voice data
    assert process_communication_achievements(talking, "100") == []


def test_camp_performance_rankings() -> None:
    rows = [
        {"player": "a", "camp": "Loup", "games": 12, "wins": 9, "win_rate": 75.0, "performance": 20.0, "total_games": 30},
        {"player": "b", "camp": "Loup", "games": 10, "wins": 5, "win_rate": 50.0, "performance": -5.0, "total_games": 40},
        {"player": "b", "camp": "Villageois", "games": 30, "wins": 18, "win_rate": 60.0, "performance": 10.0, "total_games": 40},
        {"player": "a", "camp": "Idiot du Village", "games": 6, "wins": 3, "win_rate": 50.0, "performance": 15.0, "total_games": 30},
        {"player": "a", "camp": "Amoureux", "games": 5, "wins": 2, "win_rate": 40.0, "performance": 5.0, "total_games": 30},
        {"player": "a", "camp": "Camp Loup", "games": 12, "wins": 9, "win_rate": 75.0, "performance": 20.0, "total_games": 30},
    ]
    a = {x.id: x for x in process_performance_achievements(rows, "a")}
    assert a["loup-performance-all"].rank == 1
    assert a["loup-performance-all"].total_ranked == 2
    assert a["idiot-performance-all"].rank == 1
    assert a["hall-of-fame-all"].rank == 1
    assert a["solo-performance-all"].value == pytest.approx(5 / 11 * 100)

    b = {x.id: x for x in process_performance_achievements(rows, "b")}
    assert b["villageois-performance-all"].rank == 1
    assert b["loup-performance-all"].rank == 2
    assert "solo-performance-all" not in b


def test_generate_all_achievements_covers_every_player(games) -> None:
    result = generate_all_achievements(games)
    assert sorted(result) == ["100", "200", "300", "400", "500"]
    assert all("all_games" in v and "modded_only" in v for v in result.values())
