from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from rapidfuzz.fuzz import partial_ratio

from .config import DATA_SOURCES
from .data_client import GameLogClient
from .normalize import GameRecord, canonical_name, normalize_game_log
from .timeline import fill_displayed_ids


logger = logging.getLogger(__name__)

MIN_NAME_SCORE = 0.6


@dataclass
class FetchMeta:
    source: str
    mod_version: Optional[str]
    total_records: int
    games_loaded: int
    games_analyzed: int
    data_source: Optional[str] = None
    modded_only: bool = False


def _is_url(path_or_url: str) -> bool:
    return path_or_url.startswith(("http://", "https://"))


def read_raw_game_log(path_or_url: str, client: Optional[GameLogClient] = None) -> Dict[str, Any]:
    if _is_url(path_or_url):
        client = client or GameLogClient()
        logger.info("Fetching game log from %s", path_or_url)
        return client.fetch_json(path_or_url)

    path = Path(path_or_url)
    if not path.exists():
        raise ValueError(f"Game log file not found: {path}")
    logger.info("Reading game log from %s", path)
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {path}: {exc}") from exc
    if isinstance(raw, list):
        raw = {"GameStats": raw}
    return raw


def load_game_log(
    path_or_url: str, client: Optional[GameLogClient] = None
) -> Tuple[List[GameRecord], FetchMeta]:
    raw = read_raw_game_log(path_or_url, client)
    games = normalize_game_log(raw)
    # numbered on the full log so filtered subsets keep the same displayed ids
    fill_displayed_ids(games)
    meta = FetchMeta(
        source=path_or_url,
        mod_version=raw.get("ModVersion"),
        total_records=int(raw.get("TotalRecords") or len(games)),
        games_loaded=len(games),
        games_analyzed=len(games),
    )
    logger.info("Loaded %d games (mod version %s)", len(games), meta.mod_version or "unknown")
    return games, meta


def filter_games(
    games: List[GameRecord],
    source: Optional[str] = None,
    modded_only: bool = False,
) -> List[GameRecord]:
    if source is not None and source not in DATA_SOURCES:
        raise ValueError(f"Unknown data source '{source}'. Expected one of: {', '.join(DATA_SOURCES)}")

    out = games
    if source is not None:
        prefix = DATA_SOURCES[source].id_prefix
        out = [g for g in out if g.game_id.startswith(prefix)]
    if modded_only:
        out = [g for g in out if g.modded]
    logger.debug("Filtered %d -> %d games (source=%s, modded_only=%s)", len(games), len(out), source, modded_only)
    return out


def _score_name(query: str, candidate: str) -> float:
    return float(partial_ratio(query.lower(), candidate.lower())) / 100.0


def resolve_player_id(
    games: List[GameRecord], query: str, roster: Optional[Dict[str, str]] = None
) -> Tuple[str, str]:
    """Find a player by id, exact name or closest name.

    Returns ``(player_id, display_name)``; raises ``ValueError`` when no
    player is close enough to ``query``.
    """
    names: Dict[str, str] = {}
    for g in games:
        for p in g.players:
            names[p.player_id] = canonical_name(p, roster)

    if query in names:
        return query, names[query]
    for pid, name in names.items():
        if name.lower() == query.lower():
            return pid, name

    best_id: Optional[str] = None
    best_score = -1.0
    for pid, name in names.items():
        score = _score_name(query, name)
        if score > best_score:
            best_score = score
            best_id = pid

    if best_id is None or best_score < MIN_NAME_SCORE:
        raise ValueError(f"Could not resolve player '{query}'.")
    logger.debug("Resolved player '%s' -> %s (score %.2f)", query, names[best_id], best_score)
    return best_id, names[best_id]
