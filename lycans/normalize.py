from __future__ import annotations

from dataclasses import dataclass, field
import json
import os
from pathlib import Path
from typing import Any, Dict, List, Optional


SKIP_TARGET = "Passé"


@dataclass
class Vote:
    day: int
    target: str
    date: Optional[str]

    @property
    def is_skip(self) -> bool:
        return self.target == SKIP_TARGET


@dataclass
class RoleChange:
    new_role: str
    date: Optional[str]


@dataclass
class PlayerRecord:
    player_id: str
    username: str
    initial_role: str
    victorious: bool
    color: Optional[str] = None
    role_changes: List[RoleChange] = field(default_factory=list)
    power: Optional[str] = None
    secondary_role: Optional[str] = None
    death_date: Optional[str] = None
    death_timing: Optional[str] = None
    death_type: Optional[str] = None
    killer_name: Optional[str] = None
    votes: List[Vote] = field(default_factory=list)
    seconds_talked_outside: float = 0.0
    seconds_talked_during: float = 0.0
    collected_loot: int = 0


@dataclass
class GameRecord:
    game_id: str
    start_date: str
    end_date: str
    players: List[PlayerRecord]
    displayed_id: Optional[str] = None
    map_name: Optional[str] = None
    harvest_goal: int = 0
    harvest_done: int = 0
    end_timing: Optional[str] = None
    version: Optional[str] = None
    modded: bool = False
    victory_type: Optional[str] = None


def _safe_int(value: Any) -> int:
    try:
        return int(value or 0)
    except (TypeError, ValueError):
        return 0


def _safe_float(value: Any) -> float:
    try:
        return float(value or 0)
    except (TypeError, ValueError):
        return 0.0


def _opt_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _normalize_votes(votes: List[Dict[str, Any]]) -> List[Vote]:
    out: List[Vote] = []
    for v in votes:
        target = _opt_str(v.get("Target"))
        if target is None:
            continue
        out.append(Vote(day=_safe_int(v.get("Day")), target=target, date=_opt_str(v.get("Date"))))
    return out


def _normalize_role_changes(changes: List[Dict[str, Any]]) -> List[RoleChange]:
    return [
        RoleChange(new_role=str(c["NewMainRole"]), date=_opt_str(c.get("RoleChangeDateIrl")))
        for c in changes
        if c.get("NewMainRole")
    ]


def normalize_player(entry: Dict[str, Any]) -> PlayerRecord:
    username = str(entry.get("Username") or "").strip()
    player_id = _opt_str(entry.get("ID")) or username
    return PlayerRecord(
        player_id=player_id,
        username=username,
        initial_role=str(entry.get("MainRoleInitial") or ""),
        victorious=bool(entry.get("Victorious")),
        color=_opt_str(entry.get("Color")),
        role_changes=_normalize_role_changes(entry.get("MainRoleChanges") or []),
        power=_opt_str(entry.get("Power")),
        secondary_role=_opt_str(entry.get("SecondaryRole")),
        death_date=_opt_str(entry.get("DeathDateIrl")),
        death_timing=_opt_str(entry.get("DeathTiming")),
        death_type=_opt_str(entry.get("DeathType")),
        killer_name=_opt_str(entry.get("KillerName")),
        votes=_normalize_votes(entry.get("Votes") or []),
        seconds_talked_outside=_safe_float(entry.get("SecondsTalkedOutsideMeeting")),
        seconds_talked_during=_safe_float(entry.get("SecondsTalkedDuringMeeting")),
        collected_loot=_safe_int(entry.get("TotalCollectedLoot")),
    )


def normalize_game(entry: Dict[str, Any]) -> GameRecord:
    game_id = _opt_str(entry.get("Id"))
    if not game_id:
        raise ValueError("Game entry without Id: " + json.dumps(entry)[:200])
    legacy = entry.get("LegacyData") or {}
    return GameRecord(
        game_id=game_id,
        start_date=str(entry.get("StartDate") or ""),
        end_date=str(entry.get("EndDate") or ""),
        players=[normalize_player(p) for p in entry.get("PlayerStats") or []],
        displayed_id=_opt_str(entry.get("DisplayedId")),
        map_name=_opt_str(entry.get("MapName")),
        harvest_goal=_safe_int(entry.get("HarvestGoal")),
        harvest_done=_safe_int(entry.get("HarvestDone")),
        end_timing=_opt_str(entry.get("EndTiming")),
        version=_opt_str(entry.get("Version")),
        modded=bool(entry.get("Modded")),
        victory_type=_opt_str(legacy.get("VictoryType")),
    )


def normalize_game_log(raw: Any) -> List[GameRecord]:
    """Turn a raw gameLog document (or its bare GameStats list) into records."""
    if isinstance(raw, dict):
        entries = raw.get("GameStats")
        if entries is None:
            raise ValueError("Game log document has no GameStats array")
    elif isinstance(raw, list):
        entries = raw
    else:
        raise ValueError(f"Unsupported game log payload: {type(raw).__name__}")
    return [normalize_game(g) for g in entries]


def _load_roster_file(path: Path) -> Dict[str, str]:
    data = json.loads(path.read_text(encoding="utf-8"))
    return roster_from_json(data)


def roster_from_json(data: Dict[str, Any]) -> Dict[str, str]:
    roster: Dict[str, str] = {}
    for p in data.get("Players") or []:
        steam_id = p.get("SteamID") or p.get("ID")
        name = p.get("Joueur")
        if steam_id and name:
            roster[str(steam_id)] = str(name)
    return roster


def load_roster(path: Optional[str] = None) -> Dict[str, str]:
    # Allow override via env var; no roster means usernames are used as-is
    candidate = path or os.environ.get("LYCANS_ROSTER_FILE")
    if candidate:
        roster_path = Path(candidate)
        if roster_path.exists():
            return _load_roster_file(roster_path)
    return {}


def canonical_name(player: PlayerRecord, roster: Optional[Dict[str, str]] = None) -> str:
    if roster and player.player_id in roster:
        return roster[player.player_id]
    return player.username
