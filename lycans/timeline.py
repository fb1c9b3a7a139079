from __future__ import annotations

import re
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Tuple
from urllib.parse import parse_qs, urlparse

from .normalize import GameRecord


_DEATH_TIMING_RE = re.compile(r"^([JNMU])(\d+)$")
_YOUTUBE_T_RE = re.compile(r"^(?:(\d+)h)?(?:(\d+)m)?(?:(\d+)s?)?$")


def parse_game_id(game_id: str) -> Tuple[str, int]:
    parts = game_id.split("-")
    if len(parts) == 3:
        try:
            trailing = int(parts[2])
        except ValueError:
            trailing = 0
        return parts[1], trailing
    if len(parts) == 2:
        return parts[1], 0
    return "0", 0


def _chronological_key(game: GameRecord) -> Tuple[str, int]:
    return parse_game_id(game.game_id)


def assign_displayed_ids(games: Iterable[GameRecord], start: int = 0) -> Dict[str, str]:
    """Number games chronologically, first game gets ``start + 1``.

    The numbering is written back to ``displayed_id`` on each record and
    also returned as a mapping from game id to displayed id.
    """
    ordered = sorted(games, key=_chronological_key)
    mapping: Dict[str, str] = {}
    for idx, game in enumerate(ordered):
        displayed = str(start + idx + 1)
        mapping[game.game_id] = displayed
        game.displayed_id = displayed
    return mapping


def _displayed_number(displayed_id: Optional[str]) -> int:
    try:
        return int(displayed_id or 0)
    except ValueError:
        return 0


def displayed_labels(games: Iterable[GameRecord]) -> Dict[str, str]:
    """Displayed id of every game, without touching the records.

    Games that already carry a displayed id keep it; the others are numbered
    chronologically after the highest existing number.
    """
    games = list(games)
    labels = {g.game_id: g.displayed_id for g in games if g.displayed_id is not None}
    start = max((_displayed_number(d) for d in labels.values()), default=0)
    missing = sorted((g for g in games if g.displayed_id is None), key=_chronological_key)
    for idx, game in enumerate(missing):
        labels[game.game_id] = str(start + idx + 1)
    return labels


def fill_displayed_ids(games: Iterable[GameRecord]) -> Dict[str, str]:
    """Write displayed ids on the games that lack one.

    Meant to run once on the full log, before any filtering, so that subsets
    share the same numbering.
    """
    games = list(games)
    start = max((_displayed_number(g.displayed_id) for g in games if g.displayed_id is not None), default=0)
    return assign_displayed_ids([g for g in games if g.displayed_id is None], start=start)


def sort_games(games: Iterable[GameRecord]) -> List[GameRecord]:
    games = list(games)
    labels = displayed_labels(games)
    return sorted(games, key=lambda g: (_displayed_number(labels[g.game_id]), _chronological_key(g)))


def parse_iso(ts: Optional[str]) -> Optional[datetime]:
    if not ts:
        return None
    try:
        return datetime.fromisoformat(ts.replace("Z", "+00:00"))
    except ValueError:
        return None


def _youtube_timestamp(url: str) -> Optional[int]:
    try:
        parsed = urlparse(url)
    except ValueError:
        return None
    if not parsed.scheme or not parsed.netloc:
        return None
    values = parse_qs(parsed.query).get("t")
    if not values:
        return None
    raw = values[0]
    if raw.isdigit():
        return int(raw)
    match = _YOUTUBE_T_RE.match(raw)
    if not match or not any(match.groups()):
        return None
    hours, minutes, seconds = (int(x or 0) for x in match.groups())
    return hours * 3600 + minutes * 60 + seconds


def game_duration_seconds(start: Optional[str], end: Optional[str]) -> Optional[float]:
    if not start or not end:
        return None

    start_dt = parse_iso(start)
    end_dt = parse_iso(end)
    if start_dt and end_dt:
        try:
            delta = (end_dt - start_dt).total_seconds()
        except TypeError:
            # naive vs aware timestamps
            return None
        return delta if delta > 0 else None

    # Legacy logs stored YouTube VOD links with a t= offset
    start_ts = _youtube_timestamp(start)
    end_ts = _youtube_timestamp(end)
    if start_ts is None or end_ts is None:
        return None
    duration = end_ts - start_ts
    return float(duration) if duration > 0 else None


def parse_death_timing(timing: Optional[str]) -> Optional[Tuple[str, int]]:
    if not timing:
        return None
    match = _DEATH_TIMING_RE.match(timing.strip().upper())
    if not match:
        return None
    return match.group(1), int(match.group(2))


def alive_at_meeting(death_timing: Optional[str], meeting: int) -> bool:
    # Day order: J1 -> N1 -> M1 -> J2 ...
    death = parse_death_timing(death_timing)
    if death is None:
        return True
    phase, number = death
    if phase == "M":
        return meeting <= number
    if phase in ("J", "N"):
        return meeting < number
    return True


def format_duration(seconds: float) -> str:
    minutes = int(seconds // 60)
    secs = int(round(seconds % 60))
    if secs == 60:
        minutes += 1
        secs = 0
    return f"{minutes}:{secs:02d}"


def format_game_date(ts: Optional[str]) -> str:
    dt = parse_iso(ts)
    if not dt:
        return ""
    return dt.strftime("%d/%m/%Y")
