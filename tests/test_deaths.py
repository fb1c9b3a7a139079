import pytest

from lycans.deaths import compute_death_stats, compute_hunter_stats
from lycans.normalize import GameRecord, PlayerRecord, RoleChange


def _player(name: str, role: str, death_type=None, killer=None, timing=None, power=None) -> PlayerRecord:
    return PlayerRecord(
        player_id=name,
        username=name,
        initial_role=role,
        victorious=False,
        power=power,
        death_type=death_type,
        killer_name=killer,
        death_timing=timing,
    )


def _game(game_id: str, *players: PlayerRecord) -> GameRecord:
    return GameRecord(
        game_id=game_id,
        start_date="2024-01-01T20:00:00Z",
        end_date="2024-01-01T20:30:00Z",
        players=list(players),
    )


def _hunter_game() -> GameRecord:
    return _game(
        "Ponce-20240101120000-1",
        _player("h", "Villageois Élite", power="Chasseur"),
        _player("w", "Loup", "BULLET_WOLF", "h", "N1"),
        _player("v", "Villageois", "BULLET_HUMAN", "h", "J2"),
        _player("x", "Villageois", "VOTED", None, "M1"),
        _player("y", "Villageois", "BY_WOLF", "w", "N1"),
        _player("s", "Villageois", "SURVIVOR"),
    )


def test_deaths_by_type_phase_and_killer() -> None:
    stats = compute_death_stats([_hunter_game()])
    assert stats["total_deaths"] == 4
    assert stats["average_deaths_per_game"] == pytest.approx(4.0)
    assert stats["deaths_by_phase"] == {"night": 2, "day": 1, "meeting": 1}
    assert "SURVIVOR" not in stats["deaths_by_type"]

    killers = {r["player"]: r for r in stats["killer_stats"]}
    assert killers["h"]["kills"] == 2
    assert killers["h"]["percentage"] == pytest.approx(50.0)
    assert killers["w"]["kills_by_death_type"] == {"BY_WOLF": 1}
    # a vote is a death without a killer
    assert set(killers) == {"h", "w"}
    assert stats["most_deadly_killer"] == "h"

    victims = {r["player"]: r for r in stats["player_death_stats"]}
    assert victims["w"]["killed_by"] == {"h": 1}
    assert victims["w"]["death_rate"] == pytest.approx(1.0)
    assert "s" not in victims


def test_deaths_on_sample_log(games) -> None:
    stats = compute_death_stats(games)
    assert stats["total_deaths"] == 2
    assert stats["total_games"] == 3
    assert [r["player_name"] for r in stats["killer_stats"]] == ["Bob"]
    assert compute_death_stats([]) is None


def test_hunter_good_and_bad_shots() -> None:
    legacy = _game(
        "Ponce-20240102120000-1",
        _player("h", "Chasseur"),
        _player("w", "Loup", "BULLET", "h", "N1"),
        # shot fired by someone who is not a hunter
        _player("v", "Villageois", "BULLET", "w", "N1"),
    )
    stats = compute_hunter_stats([_hunter_game(), legacy])
    assert stats["total_hunters"] == 1
    assert stats["best_hunter"] == "h"

    hunter = stats["hunter_stats"][0]
    assert hunter["games_played_as_hunter"] == 2
    assert hunter["total_kills"] == 3
    assert hunter["good_shots"] == 2
    assert hunter["bad_shots"] == 1
    assert hunter["victims_by_camp"] == {"Loup": 2, "Villageois": 1}
    assert hunter["average_good_shots_per_game"] == pytest.approx(1.0)


def test_hunter_shots_filtered_by_victim_camp() -> None:
    hunter = compute_hunter_stats([_hunter_game()], victim_camp="Loup")["hunter_stats"][0]
    assert hunter["total_kills"] == 1
    assert hunter["bad_shots"] == 0


def test_hunter_after_role_change() -> None:
    p = _player("h", "Villageois")
    p.role_changes = [RoleChange(new_role="Chasseur", date=None)]
    game = _game("Ponce-20240101120000-1", p, _player("w", "Loup", "BULLET", "h", "M2"))
    assert compute_hunter_stats([game])["hunter_stats"][0]["good_shots"] == 1
