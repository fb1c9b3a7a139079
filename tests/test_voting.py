import pytest

from lycans.normalize import GameRecord, PlayerRecord, Vote
from lycans.voting import compute_voting_stats


def _rows(stats, key):
    return {r["player"]: r for r in stats[key]}


def test_behavior_counts_votes_skips_and_abstentions(games) -> None:
    stats = compute_voting_stats(games[:1])
    behavior = _rows(stats, "behavior")

    alice = behavior["100"]
    assert alice["total_meetings"] == 1
    assert alice["voting_rate"] == pytest.approx(100.0)
    assert alice["aggressiveness"] == pytest.approx(100.0)
    assert alice["aggressiveness_by_camp"]["villageois"] == pytest.approx(100.0)
    assert alice["aggressiveness_by_camp"]["loup"] is None

    assert behavior["200"]["total_skips"] == 1
    assert behavior["200"]["aggressiveness"] == pytest.approx(-50.0)
    assert behavior["400"]["total_abstentions"] == 1
    assert behavior["400"]["aggressiveness"] == pytest.approx(-70.0)


def test_dead_players_do_not_attend_meetings(games) -> None:
    # Dave is killed on day 1 of the second game, before the first meeting
    behavior = _rows(compute_voting_stats(games[1:2]), "behavior")
    assert behavior["400"]["total_meetings"] == 0
    assert behavior["100"]["total_meetings"] == 1
    assert behavior["100"]["total_abstentions"] == 1


def test_accuracy_uses_opposing_camps(games) -> None:
    accuracy = _rows(compute_voting_stats(games[:1]), "accuracy")
    assert accuracy["100"]["votes_for_enemy_camp"] == 1
    assert accuracy["100"]["accuracy_rate"] == pytest.approx(100.0)
    # lovers are their own camp, so voting a villager counts as an enemy vote
    assert accuracy["500"]["votes_for_enemy_camp"] == 1
    assert accuracy["200"]["total_votes"] == 0


def test_targets_and_eliminations(games) -> None:
    targets = _rows(compute_voting_stats(games[:1]), "targets")
    bob = targets["200"]
    assert bob["total_times_targeted"] == 2
    assert bob["times_targeted_as_wolf"] == 2
    assert bob["times_targeted_by_enemy_camp"] == 2
    assert bob["eliminations_by_vote"] == 2
    assert bob["survival_rate"] == pytest.approx(0.0)

    assert targets["100"]["times_targeted_as_villager"] == 1
    assert targets["400"]["total_times_targeted"] == 0
    assert targets["400"]["survival_rate"] == pytest.approx(100.0)


def test_first_and_early_votes(games) -> None:
    first = _rows(compute_voting_stats(games[:1]), "first_votes")
    assert first["100"]["times_first_to_vote"] == 1
    assert first["100"]["times_early_vote"] == 1
    assert first["300"]["times_first_to_vote"] == 0
    assert first["300"]["times_early_vote"] == 0
    assert first["500"]["meetings_with_votes"] == 1
    # skips are not ranked
    assert "200" not in first


def _player(pid: str, role: str, death_timing=None, votes=()) -> PlayerRecord:
    return PlayerRecord(
        player_id=pid,
        username=pid,
        initial_role=role,
        victorious=False,
        death_timing=death_timing,
        votes=[Vote(day=day, target=target, date=date) for day, target, date in votes],
    )


def _game(*players: PlayerRecord) -> GameRecord:
    return GameRecord(
        game_id="Ponce-20240101120000-1",
        start_date="2024-01-01T20:00:00Z",
        end_date="2024-01-01T20:30:00Z",
        players=list(players),
    )


def test_votes_from_dead_players_are_ignored() -> None:
    game = _game(
        # killed during night 1, before the first meeting
        _player("a", "Villageois", death_timing="N1", votes=[(1, "b", "2024-01-01T20:05:00Z")]),
        _player("b", "Loup"),
        _player("c", "Villageois", votes=[(1, "a", "2024-01-01T20:06:00Z")]),
    )
    stats = compute_voting_stats([game])

    targets = _rows(stats, "targets")
    assert targets["b"]["total_times_targeted"] == 0
    assert targets["b"]["survival_rate"] == pytest.approx(100.0)
    assert targets["a"]["total_times_targeted"] == 1

    first = _rows(stats, "first_votes")
    assert "a" not in first
    assert first["c"]["times_first_to_vote"] == 1


def test_self_votes_are_not_friendly_fire() -> None:
    game = _game(
        _player("a", "Villageois", votes=[(1, "a", None)]),
        _player("b", "Villageois", votes=[(1, "a", None)]),
        _player("c", "Loup"),
    )
    accuracy = _rows(compute_voting_stats([game]), "accuracy")
    assert accuracy["a"]["votes_for_self"] == 1
    assert accuracy["a"]["votes_for_own_camp"] == 0
    assert accuracy["a"]["votes_for_enemy_camp"] == 0
    assert accuracy["b"]["votes_for_own_camp"] == 1
    assert accuracy["b"]["votes_for_self"] == 0
