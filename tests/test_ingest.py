from pathlib import Path

import pytest
import requests

from lycans.config import CacheConfig
from lycans.data_client import GameLogClient
from lycans.ingest import filter_games, load_game_log, resolve_player_id


FIXTURES = Path(__file__).parent / "fixtures"


class _FakeResponse:
    def __init__(self, status_code: int, body=None):
        self.status_code = status_code
        self._body = body

    def json(self):
        return self._body

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"HTTP {self.status_code}")


def _client(tmp_path: Path, enabled: bool = False) -> GameLogClient:
    return GameLogClient(cache=CacheConfig(enabled=enabled, base_dir=tmp_path))


def test_load_game_log_from_file() -> None:
    games, meta = load_game_log(str(FIXTURES / "game_log_sample.json"))
    assert len(games) == 3
    assert meta.mod_version == "0.243"
    assert meta.total_records == 3
    assert meta.games_analyzed == 3


def test_load_game_log_missing_file(tmp_path) -> None:
    with pytest.raises(ValueError):
        load_game_log(str(tmp_path / "missing.json"))

    broken = tmp_path / "broken.json"
    broken.write_text("{not json", encoding="utf-8")
    with pytest.raises(ValueError):
        load_game_log(str(broken))


def test_filter_games_by_source_and_mod(games) -> None:
    assert [g.game_id for g in filter_games(games, source="discord")] == ["Nales-20240103120000-1"]
    assert len(filter_games(games, source="main")) == 2
    assert len(filter_games(games, modded_only=True)) == 2
    assert len(filter_games(games, source="main", modded_only=True)) == 1
    with pytest.raises(ValueError):
        filter_games(games, source="twitch")


def test_resolve_player(games) -> None:
    assert resolve_player_id(games, "300") == ("300", "Carol")
    assert resolve_player_id(games, "alice") == ("100", "Alice")
    assert resolve_player_id(games, "Alice the Great", {"100": "Alice the Great"}) == ("100", "Alice the Great")
    assert resolve_player_id(games, "Caro") == ("300", "Carol")
    with pytest.raises(ValueError):
        resolve_player_id(games, "qqqq")


def test_client_retries_on_server_errors(tmp_path) -> None:
    client = _client(tmp_path)
    responses = [_FakeResponse(503), _FakeResponse(200, {"GameStats": []})]
    calls = []

    def fake_get(url, timeout):
        calls.append(url)
        return responses.pop(0)

    client.session.get = fake_get
    assert client.fetch_json("https://example.test/gameLog.json", backoff_s=0) == {"GameStats": []}
    assert len(calls) == 2


def test_client_raises_after_retries(tmp_path) -> None:
    client = _client(tmp_path)
    client.session.get = lambda url, timeout: _FakeResponse(500)
    with pytest.raises(RuntimeError):
        client.fetch_json("https://example.test/gameLog.json", retries=2, backoff_s=0)


def test_client_disk_cache(tmp_path) -> None:
    client = _client(tmp_path, enabled=True)
    client.session.get = lambda url, timeout: _FakeResponse(200, [{"Id": "Ponce-1"}])
    body = client.fetch_json("https://example.test/gameLog.json", backoff_s=0)
    assert body == {"GameStats": [{"Id": "Ponce-1"}]}
    assert len(list(tmp_path.glob("*.json"))) == 1

    def offline(url, timeout):
        raise requests.ConnectionError("offline")

    client.session.get = offline
    assert client.fetch_json("https://example.test/gameLog.json", backoff_s=0) == body


def test_load_game_log_numbers_games_before_filtering() -> None:
    games, _ = load_game_log(str(FIXTURES / "game_log_sample.json"))
    assert [g.displayed_id for g in games] == ["1", "2", "3"]
    assert [g.displayed_id for g in filter_games(games, modded_only=True)] == ["2", "3"]
