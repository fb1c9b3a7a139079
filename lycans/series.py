"""Consecutive-game series (streaks) per player.

Four series are tracked for every player, in chronological game order:

* Villageois series: consecutive games in the villager main camp;
* Loup series: consecutive games in the wolf main camp;
* win series and loss series, with the camps played along the way.

Only the longest occurrence of each series is kept per player. A streak that
ties the current longest replaces it, so the most recent one is reported.
"""

from __future__ import annotations

import copy
from collections import Counter
from dataclasses import asdict, dataclass, field, replace
from typing import Any, Dict, Iterable, List, Optional, Tuple

from .camps import LOUP, VILLAGEOIS, player_main_camp
from .normalize import GameRecord, canonical_name
from .timeline import displayed_labels, format_game_date, parse_game_id, sort_games


@dataclass
class SeriesRecord:
    player: str
    player_name: str
    series_length: int
    start_game: str
    end_game: str
    start_date: str
    end_date: str
    game_ids: List[str]
    camp: Optional[str] = None
    camp_counts: Optional[Dict[str, int]] = None
    is_ongoing: bool = False


@dataclass
class Streak:
    length: int = 0
    start_game: Optional[str] = None
    start_date: Optional[str] = None
    game_ids: List[str] = field(default_factory=list)
    camps: List[str] = field(default_factory=list)
    longest: Optional[SeriesRecord] = None

    def extend(self, game_id: str, date: str, camp: str) -> None:
        if self.length == 0:
            self.start_game = game_id
            self.start_date = date
            self.game_ids = []
            self.camps = []
        self.length += 1
        self.game_ids.append(game_id)
        self.camps.append(camp)

    def reset(self) -> None:
        self.length = 0
        self.start_game = None
        self.start_date = None
        self.game_ids = []
        self.camps = []

    def record(
        self,
        player_id: str,
        player_name: str,
        game_id: str,
        date: str,
        camp_label: Optional[str] = None,
        with_camp_counts: bool = False,
    ) -> None:
        if self.longest is not None and self.length < self.longest.series_length:
            return
        self.longest = SeriesRecord(
            player=player_id,
            player_name=player_name,
            series_length=self.length,
            start_game=self.start_game or game_id,
            end_game=game_id,
            start_date=self.start_date or date,
            end_date=date,
            game_ids=list(self.game_ids),
            camp=camp_label,
            camp_counts=dict(Counter(self.camps)) if with_camp_counts else None,
        )

    def ongoing(self) -> bool:
        return self.longest is not None and self.length > 0 and self.length == self.longest.series_length


@dataclass
class PlayerSeriesState:
    player_name: str
    villageois: Streak = field(default_factory=Streak)
    loup: Streak = field(default_factory=Streak)
    win: Streak = field(default_factory=Streak)
    loss: Streak = field(default_factory=Streak)


@dataclass
class SeriesData:
    all_villageois_series: List[SeriesRecord]
    all_loups_series: List[SeriesRecord]
    all_win_series: List[SeriesRecord]
    all_loss_series: List[SeriesRecord]
    total_games_analyzed: int
    total_players: int


SeriesState = Dict[str, PlayerSeriesState]


def _process_camp_series(
    state: PlayerSeriesState, player_id: str, camp: str, game_id: str, date: str
) -> None:
    if camp == VILLAGEOIS:
        state.villageois.extend(game_id, date, camp)
        state.villageois.record(player_id, state.player_name, game_id, date, camp_label="Villageois")
        state.loup.reset()
    elif camp == LOUP:
        state.loup.extend(game_id, date, camp)
        state.loup.record(player_id, state.player_name, game_id, date, camp_label="Loups")
        state.villageois.reset()
    else:
        # a special role breaks both camp series
        state.villageois.reset()
        state.loup.reset()


def _process_outcome_series(
    state: PlayerSeriesState, player_id: str, won: bool, camp: str, game_id: str, date: str
) -> None:
    current, broken = (state.win, state.loss) if won else (state.loss, state.win)
    current.extend(game_id, date, camp)
    current.record(player_id, state.player_name, game_id, date, with_camp_counts=True)
    broken.reset()


def process_game(
    states: SeriesState,
    game: GameRecord,
    roster: Optional[Dict[str, str]] = None,
    label: Optional[str] = None,
) -> None:
    game_id = label or game.displayed_id or game.game_id
    date = format_game_date(game.start_date)
    for player in game.players:
        name = canonical_name(player, roster)
        state = states.get(player.player_id)
        if state is None:
            state = PlayerSeriesState(player_name=name)
            states[player.player_id] = state
        state.player_name = name

        camp = player_main_camp(player)
        _process_camp_series(state, player.player_id, camp, game_id, date)
        _process_outcome_series(state, player.player_id, player.victorious, camp, game_id, date)


def _finalize(streak: Streak) -> Optional[SeriesRecord]:
    if streak.longest is None:
        return None
    return replace(streak.longest, game_ids=list(streak.longest.game_ids), is_ongoing=streak.ongoing())


def series_output(states: SeriesState, total_games: int) -> SeriesData:
    buckets: Dict[str, List[SeriesRecord]] = {"villageois": [], "loup": [], "win": [], "loss": []}
    for state in states.values():
        for key in buckets:
            rec = _finalize(getattr(state, key))
            if rec is not None:
                buckets[key].append(rec)

    for rows in buckets.values():
        rows.sort(key=lambda r: r.series_length, reverse=True)

    return SeriesData(
        all_villageois_series=buckets["villageois"],
        all_loups_series=buckets["loup"],
        all_win_series=buckets["win"],
        all_loss_series=buckets["loss"],
        total_games_analyzed=total_games,
        total_players=len(states),
    )


def compute_series(
    games: List[GameRecord],
    roster: Optional[Dict[str, str]] = None,
) -> Optional[SeriesData]:
    data, _ = compute_series_with_state(games, roster)
    return data


def compute_series_with_state(
    games: List[GameRecord],
    roster: Optional[Dict[str, str]] = None,
) -> Tuple[Optional[SeriesData], SeriesState]:
    if not games:
        return None, {}
    # games already numbered keep their number, so subsets reuse the global numbering
    labels = displayed_labels(games)
    ordered = sort_games(games)

    states: SeriesState = {}
    for game in ordered:
        process_game(states, game, roster, labels[game.game_id])
    return series_output(states, len(ordered)), states


def update_series(
    state: SeriesState,
    new_games: Iterable[GameRecord],
    existing_count: int,
    roster: Optional[Dict[str, str]] = None,
) -> Tuple[SeriesData, SeriesState]:
    """Fold newly recorded games into a persisted series state.

    New games are numbered after ``existing_count`` and must be more recent
    than every game already folded into ``state``. The input state is not
    modified.
    """
    new_games = list(new_games)
    working = copy.deepcopy(state)
    ordered = sorted(new_games, key=lambda g: parse_game_id(g.game_id))
    for idx, game in enumerate(ordered):
        process_game(working, game, roster, game.displayed_id or str(existing_count + idx + 1))
    return series_output(working, existing_count + len(new_games)), working


def player_series(data: SeriesData, player_id: str) -> Dict[str, Optional[SeriesRecord]]:
    def _find(rows: List[SeriesRecord]) -> Optional[SeriesRecord]:
        return next((r for r in rows if r.player == player_id), None)

    return {
        "villageois": _find(data.all_villageois_series),
        "loup": _find(data.all_loups_series),
        "win": _find(data.all_win_series),
        "loss": _find(data.all_loss_series),
    }


def series_state_to_json(state: SeriesState) -> Dict[str, Any]:
    return {pid: asdict(s) for pid, s in state.items()}


def _streak_from_json(data: Dict[str, Any]) -> Streak:
    longest = data.get("longest")
    return Streak(
        length=int(data.get("length") or 0),
        start_game=data.get("start_game"),
        start_date=data.get("start_date"),
        game_ids=list(data.get("game_ids") or []),
        camps=list(data.get("camps") or []),
        longest=SeriesRecord(**longest) if longest else None,
    )


def series_state_from_json(data: Dict[str, Any]) -> SeriesState:
    return {
        pid: PlayerSeriesState(
            player_name=entry.get("player_name") or pid,
            villageois=_streak_from_json(entry.get("villageois") or {}),
            loup=_streak_from_json(entry.get("loup") or {}),
            win=_streak_from_json(entry.get("win") or {}),
            loss=_streak_from_json(entry.get("loss") or {}),
        )
        for pid, entry in data.items()
    }

