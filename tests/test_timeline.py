from lycans.normalize import normalize_game_log
from lycans.timeline import (
    alive_at_meeting,
    assign_displayed_ids,
    displayed_labels,
    fill_displayed_ids,
    format_duration,
    format_game_date,
    game_duration_seconds,
    parse_death_timing,
    parse_game_id,
    sort_games,
)


def test_parse_game_id() -> None:
    assert parse_game_id("Ponce-20240101120000-1") == ("20240101120000", 1)
    assert parse_game_id("Nales-20240103120000") == ("20240103120000", 0)
    assert parse_game_id("Ponce-20240101120000-x") == ("20240101120000", 0)
    assert parse_game_id("legacy") == ("0", 0)


def test_displayed_ids_follow_chronology(games) -> None:
    mapping = assign_displayed_ids(list(reversed(games)))
    assert mapping == {
        "Ponce-20240101120000-1": "1",
        "Ponce-20240102120000-1": "2",
        "Nales-20240103120000-1": "3",
    }
    assert games[2].displayed_id == "3"

    assign_displayed_ids(games[2:], start=10)
    assert games[2].displayed_id == "11"


def test_sort_games_leaves_records_untouched(raw_log) -> None:
    games = normalize_game_log(raw_log)
    ordered = sort_games(reversed(games))
    assert [g.game_id for g in ordered] == [g.game_id for g in games]
    assert all(g.displayed_id is None for g in games)


def test_existing_displayed_ids_are_kept(raw_log) -> None:
    first, second, third = normalize_game_log(raw_log)
    third.displayed_id = "41"

    assert displayed_labels([first, second, third]) == {
        "Ponce-20240101120000-1": "42",
        "Ponce-20240102120000-1": "43",
        "Nales-20240103120000-1": "41",
    }
    assert [g.game_id for g in sort_games([first, second, third])][0] == "Nales-20240103120000-1"
    assert third.displayed_id == "41"
    assert first.displayed_id is None

    filled = fill_displayed_ids([first, second, third])
    assert filled == {"Ponce-20240101120000-1": "42", "Ponce-20240102120000-1": "43"}
    assert (first.displayed_id, second.displayed_id, third.displayed_id) == ("42", "43", "41")


def test_game_duration_iso_and_youtube() -> None:
    assert game_duration_seconds("2024-01-01T20:00:00Z", "2024-01-01T20:30:00Z") == 1800.0
    assert game_duration_seconds("2024-01-01T20:30:00Z", "2024-01-01T20:00:00Z") is None
    assert game_duration_seconds("https://youtu.be/abc?t=100", "https://youtu.be/abc?t=1h2m") == 3620.0
    assert game_duration_seconds("https://youtu.be/abc", "https://youtu.be/abc?t=50") is None
    assert game_duration_seconds(None, "2024-01-01T20:30:00Z") is None


def test_death_timing_and_meeting_presence() -> None:
    assert parse_death_timing("m2") == ("M", 2)
    assert parse_death_timing("X1") is None

    # a player voted out at meeting 1 still cast a vote in it
    assert alive_at_meeting("M1", 1)
    assert not alive_at_meeting("M1", 2)
    # killed during day or night 2: misses meeting 2
    assert alive_at_meeting("J2", 1)
    assert not alive_at_meeting("J2", 2)
    assert not alive_at_meeting("N1", 1)
    assert alive_at_meeting(None, 5)
    assert alive_at_meeting("U3", 9)


def test_formatting_helpers() -> None:
    assert format_duration(125) == "2:05"
    assert format_duration(59.6) == "1:00"
    assert format_game_date("2024-01-03T20:00:00Z") == "03/01/2024"
    assert format_game_date("not a date") == ""
