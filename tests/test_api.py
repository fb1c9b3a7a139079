from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from src.main import app


GAME_LOG = Path(__file__).parent / "fixtures" / "game_log_sample.json"


@pytest.fixture
def client(monkeypatch) -> TestClient:
    monkeypatch.setenv("LYCANS_DATA_FILE", str(GAME_LOG))
    monkeypatch.delenv("LYCANS_DATA_URL", raising=False)
    monkeypatch.delenv("LYCANS_ROSTER_FILE", raising=False)
    return TestClient(app)


def test_health(client) -> None:
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["data_configured"] is True


def test_players_with_source_filter(client) -> None:
    resp = client.get("/api/stats/players")
    assert resp.status_code == 200
    assert resp.json()["total_games"] == 3

    resp = client.get("/api/stats/players", params={"source": "discord"})
    assert resp.json()["total_games"] == 1


def test_series_and_talking(client) -> None:
    series = client.get("/api/stats/series").json()
    assert series["total_games_analyzed"] == 3

    talking = client.get("/api/stats/talking", params={"moddedOnly": "true"}).json()
    assert talking["total_games"] == 2


def test_modded_series_keep_global_game_numbers(client) -> None:
    series = client.get("/api/stats/series", params={"moddedOnly": "true"}).json()
    eve = next(r for r in series["all_loss_series"] if r["player"] == "500")
    assert eve["game_ids"] == ["2", "3"]


def test_deaths(client) -> None:
    body = client.get("/api/stats/deaths").json()
    assert body["deaths"]["total_deaths"] == 2
    assert body["hunters"]["total_hunters"] == 1


def test_player_achievements(client) -> None:
    resp = client.get("/api/players/500/achievements")
    assert resp.status_code == 200
    body = resp.json()
    assert body["player_name"] == "Eve"
    assert set(body["achievements"]) == {"all_games", "modded_only"}


def test_unknown_player(client) -> None:
    resp = client.get("/api/players/qqqq/achievements")
    assert resp.status_code == 404
    assert resp.json()["error"]["code"] == "PLAYER_NOT_FOUND"


def test_validation(client) -> None:
    resp = client.get("/api/validation")
    assert resp.status_code == 200
    assert resp.json()["total"] == 3


def test_unknown_source(client) -> None:
    resp = client.get("/api/stats/report", params={"source": "twitch"})
    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "INVALID_REQUEST"


def test_no_data_configured(monkeypatch) -> None:
    monkeypatch.delenv("LYCANS_DATA_FILE", raising=False)
    monkeypatch.delenv("LYCANS_DATA_URL", raising=False)
    resp = TestClient(app).get("/api/stats/players")
    assert resp.status_code == 503
    assert resp.json()["error"]["code"] == "DATA_UNAVAILABLE"
