import pytest

from lycans.talking import compute_talking_stats, game_has_talking_data


def test_only_games_with_voice_data_count(games) -> None:
    assert [game_has_talking_data(g) for g in games] == [True, False, False]

    stats = compute_talking_stats(games)
    assert stats.total_games == 3
    assert stats.games_with_talking_data == 1
    assert len(stats.player_stats) == 5


def test_talk_time_is_normalized_per_hour(games) -> None:
    stats = compute_talking_stats(games)
    alice = next(s for s in stats.player_stats if s.player_id == "100")
    assert alice.total_game_duration_seconds == pytest.approx(1800.0)
    assert alice.seconds_outside_per_60min == pytest.approx(120.0)
    assert alice.seconds_during_per_60min == pytest.approx(60.0)
    assert alice.seconds_all_per_60min == pytest.approx(180.0)


def test_duration_stops_at_death(games) -> None:
    stats = compute_talking_stats(games)
    bob = next(s for s in stats.player_stats if s.player_id == "200")
    assert bob.total_game_duration_seconds == pytest.approx(600.0)


def test_roster_names_and_empty_input(games) -> None:
    stats = compute_talking_stats(games, {"100": "Alice the Great"})
    assert any(s.player == "Alice the Great" for s in stats.player_stats)

    assert compute_talking_stats([]) is None
    empty = compute_talking_stats(games[1:])
    assert empty.player_stats == []
    assert empty.games_with_talking_data == 0
