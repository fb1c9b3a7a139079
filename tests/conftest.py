import json
from pathlib import Path
from typing import List

import pytest

from lycans.normalize import GameRecord, normalize_game_log
from lycans.timeline import fill_displayed_ids


FIXTURES = Path(__file__).parent / "fixtures"
GAME_LOG = FIXTURES / "game_log_sample.json"


@pytest.fixture
def raw_log() -> dict:
    return json.loads(GAME_LOG.read_text(encoding="utf-8"))


@pytest.fixture
def games(raw_log: dict) -> List[GameRecord]:
    games = normalize_game_log(raw_log)
    fill_displayed_ids(games)
    return games
