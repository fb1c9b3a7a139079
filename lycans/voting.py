from __future__ import annotations

import math
from collections import defaultdict
from typing import Any, Dict, List, Optional

from .camps import GROUPED_OPTIONS, LOUP, VILLAGEOIS, camp_bucket, player_camp
from .normalize import GameRecord, PlayerRecord, Vote, canonical_name
from .timeline import alive_at_meeting, parse_iso


SKIP_WEIGHT = 0.5
ABSTENTION_WEIGHT = 0.7
EARLY_VOTE_SHARE = 0.33


def _pct(num: float, den: float) -> Optional[float]:
    return (num / den) * 100.0 if den else None


def _aggressiveness(votes: int, skips: int, abstentions: int, meetings: int) -> Optional[float]:
    if not meetings:
        return None
    return (
        _pct(votes, meetings)
        - SKIP_WEIGHT * _pct(skips, meetings)
        - ABSTENTION_WEIGHT * _pct(abstentions, meetings)
    )


def _vote_for_meeting(player: PlayerRecord, meeting: int) -> Optional[Vote]:
    return next((v for v in player.votes if v.day == meeting), None)


def _new_behavior() -> Dict[str, Any]:
    return {
        "meetings": 0,
        "votes": 0,
        "skips": 0,
        "abstentions": 0,
        "by_camp": {k: {"meetings": 0, "votes": 0, "skips": 0, "abstentions": 0} for k in ("villageois", "loup", "solo")},
    }


def _new_accuracy() -> Dict[str, Any]:
    return {
        "votes": 0,
        "enemy": 0,
        "own": 0,
        "self": 0,
        "by_camp": {k: {"votes": 0, "enemy": 0} for k in ("villageois", "loup", "solo")},
    }


def _new_targets() -> Dict[str, int]:
    return {
        "targeted": 0,
        "by_enemy": 0,
        "by_own": 0,
        "as_villager": 0,
        "as_wolf": 0,
        "as_special": 0,
        "eliminations": 0,
    }


def compute_voting_stats(
    games: List[GameRecord], roster: Optional[Dict[str, str]] = None
) -> Dict[str, List[Dict[str, Any]]]:
    behavior: Dict[str, Dict[str, Any]] = defaultdict(_new_behavior)
    accuracy: Dict[str, Dict[str, Any]] = defaultdict(_new_accuracy)
    targets: Dict[str, Dict[str, int]] = defaultdict(_new_targets)
    first_votes: Dict[str, Dict[str, int]] = defaultdict(lambda: {"meetings_with_votes": 0, "first": 0, "early": 0})
    names: Dict[str, str] = {}

    for g in games:
        by_name = {p.username: p for p in g.players}
        camps = {p.player_id: player_camp(p, GROUPED_OPTIONS) for p in g.players}
        for p in g.players:
            names[p.player_id] = canonical_name(p, roster)
            # touch the entries so every player shows up in the output
            behavior[p.player_id]
            accuracy[p.player_id]
            targets[p.player_id]

        last_meeting = max((v.day for p in g.players for v in p.votes), default=0)
        for meeting in range(1, last_meeting + 1):
            alive = [p for p in g.players if alive_at_meeting(p.death_timing, meeting)]
            # only votes cast by players attending the meeting are counted
            real_votes = []

            for p in alive:
                camp = camps[p.player_id]
                key = camp_bucket(camp)
                b = behavior[p.player_id]
                b["meetings"] += 1
                b["by_camp"][key]["meetings"] += 1

                vote = _vote_for_meeting(p, meeting)
                if vote is None:
                    b["abstentions"] += 1
                    b["by_camp"][key]["abstentions"] += 1
                    continue
                if vote.is_skip:
                    b["skips"] += 1
                    b["by_camp"][key]["skips"] += 1
                    continue
                b["votes"] += 1
                b["by_camp"][key]["votes"] += 1
                real_votes.append((p, vote))

                a = accuracy[p.player_id]
                a["votes"] += 1
                target = by_name.get(vote.target)
                if target is None:
                    continue
                a["by_camp"][key]["votes"] += 1
                if target.player_id == p.player_id:
                    a["self"] += 1
                elif camps[target.player_id] != camp:
                    a["enemy"] += 1
                    a["by_camp"][key]["enemy"] += 1
                else:
                    a["own"] += 1

            for p, vote in real_votes:
                target = by_name.get(vote.target)
                if target is None:
                    continue
                t = targets[target.player_id]
                t["targeted"] += 1
                target_camp = camps[target.player_id]
                if target_camp != camps[p.player_id]:
                    t["by_enemy"] += 1
                else:
                    t["by_own"] += 1
                if target_camp == VILLAGEOIS:
                    t["as_villager"] += 1
                elif target_camp == LOUP:
                    t["as_wolf"] += 1
                else:
                    t["as_special"] += 1
                if target.death_type == "VOTED" and target.death_timing == f"M{meeting}":
                    t["eliminations"] += 1

            timed = [(p, v) for p, v in real_votes if parse_iso(v.date)]
            timed.sort(key=lambda pv: parse_iso(pv[1].date))
            early_cutoff = math.ceil(len(timed) * EARLY_VOTE_SHARE)
            for idx, (p, _) in enumerate(timed):
                fv = first_votes[p.player_id]
                fv["meetings_with_votes"] += 1
                if idx == 0:
                    fv["first"] += 1
                if idx < early_cutoff:
                    fv["early"] += 1

    return {
        "behavior": [_behavior_row(pid, names[pid], b) for pid, b in behavior.items()],
        "accuracy": [_accuracy_row(pid, names[pid], a) for pid, a in accuracy.items()],
        "targets": [_target_row(pid, names[pid], t) for pid, t in targets.items()],
        "first_votes": [
            {
                "player": pid,
                "player_name": names[pid],
                "meetings_with_votes": fv["meetings_with_votes"],
                "times_first_to_vote": fv["first"],
                "times_early_vote": fv["early"],
                "first_vote_rate": _pct(fv["first"], fv["meetings_with_votes"]) or 0.0,
                "early_vote_rate": _pct(fv["early"], fv["meetings_with_votes"]) or 0.0,
            }
            for pid, fv in first_votes.items()
        ],
    }


def _behavior_row(pid: str, name: str, b: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "player": pid,
        "player_name": name,
        "total_meetings": b["meetings"],
        "total_votes": b["votes"],
        "total_skips": b["skips"],
        "total_abstentions": b["abstentions"],
        "voting_rate": _pct(b["votes"], b["meetings"]) or 0.0,
        "skipping_rate": _pct(b["skips"], b["meetings"]) or 0.0,
        "abstention_rate": _pct(b["abstentions"], b["meetings"]) or 0.0,
        "aggressiveness": _aggressiveness(b["votes"], b["skips"], b["abstentions"], b["meetings"]) or 0.0,
        "aggressiveness_by_camp": {
            k: _aggressiveness(c["votes"], c["skips"], c["abstentions"], c["meetings"])
            for k, c in b["by_camp"].items()
        },
    }


def _accuracy_row(pid: str, name: str, a: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "player": pid,
        "player_name": name,
        "total_votes": a["votes"],
        "votes_for_enemy_camp": a["enemy"],
        "votes_for_own_camp": a["own"],
        "votes_for_self": a["self"],
        "accuracy_rate": _pct(a["enemy"], a["votes"]) or 0.0,
        "friendly_fire_rate": _pct(a["own"], a["votes"]) or 0.0,
        "accuracy_by_camp": {k: _pct(c["enemy"], c["votes"]) for k, c in a["by_camp"].items()},
    }


def _target_row(pid: str, name: str, t: Dict[str, int]) -> Dict[str, Any]:
    survival = 100.0
    if t["targeted"]:
        survival = (t["targeted"] - t["eliminations"]) / t["targeted"] * 100.0
    return {
        "player": pid,
        "player_name": name,
        "total_times_targeted": t["targeted"],
        "times_targeted_by_enemy_camp": t["by_enemy"],
        "times_targeted_by_own_camp": t["by_own"],
        "times_targeted_as_villager": t["as_villager"],
        "times_targeted_as_wolf": t["as_wolf"],
        "times_targeted_as_special": t["as_special"],
        "eliminations_by_vote": t["eliminations"],
        "survival_rate": survival,
    }
