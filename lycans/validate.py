from __future__ import annotations

import logging
from collections import Counter, defaultdict
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List

from .camps import VILLAGEOIS, VILLAGER_ROLES, player_final_role
from .normalize import GameRecord, PlayerRecord
from .timeline import alive_at_meeting


logger = logging.getLogger(__name__)

VILLAGER_CAMP_ROLES = (VILLAGEOIS,) + VILLAGER_ROLES
AGENT = "Agent"
AGENT_COUNT = 2


@dataclass
class Issue:
    type: str
    game_id: str
    message: str
    players: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _label(p: PlayerRecord) -> str:
    return f"{p.username} ({player_final_role(p)})"


def validate_victory_consistency(games: List[GameRecord]) -> List[Issue]:
    """Players sharing a camp or a role must share the outcome.

    ``Agent`` is the exception: two agents play against each other, so at
    most one of them may win.
    """
    issues: List[Issue] = []
    for g in games:
        if not g.players:
            issues.append(Issue("error", g.game_id, f"Game {g.game_id} has no player data"))
            continue

        by_role: Dict[str, List[PlayerRecord]] = defaultdict(list)
        for p in g.players:
            by_role[player_final_role(p)].append(p)

        villagers = [p for p in g.players if player_final_role(p) in VILLAGER_CAMP_ROLES]
        winners = [p for p in villagers if p.victorious]
        losers = [p for p in villagers if not p.victorious]
        if winners and losers:
            issues.append(
                Issue(
                    "villageois_inconsistency",
                    g.game_id,
                    f"Villageois camp inconsistency: {len(winners)} winners but {len(losers)} losers",
                    [_label(p) for p in villagers],
                )
            )

        for role, holders in by_role.items():
            if role in VILLAGER_CAMP_ROLES or role == AGENT:
                continue
            winners = [p for p in holders if p.victorious]
            losers = [p for p in holders if not p.victorious]
            if winners and losers:
                issues.append(
                    Issue(
                        "role_inconsistency",
                        g.game_id,
                        f"Role {role} inconsistency: {len(winners)} winners but {len(losers)} losers",
                        [p.username for p in holders],
                    )
                )

        agents = by_role.get(AGENT)
        if agents:
            if len(agents) != AGENT_COUNT:
                issues.append(
                    Issue(
                        "agent_count_error",
                        g.game_id,
                        f"Agent role should have exactly {AGENT_COUNT} players, found {len(agents)}",
                        [p.username for p in agents],
                    )
                )
            agent_winners = [p for p in agents if p.victorious]
            if len(agent_winners) > 1:
                issues.append(
                    Issue(
                        "agent_multiple_winners",
                        g.game_id,
                        f"Multiple Agent winners found ({len(agent_winners)}), only one should win",
                        [p.username for p in agent_winners],
                    )
                )
    return issues


def detect_invalid_votes(games: List[GameRecord]) -> List[Issue]:
    issues: List[Issue] = []
    for g in games:
        for p in g.players:
            if not p.death_timing:
                continue
            invalid = [v for v in p.votes if not alive_at_meeting(p.death_timing, v.day)]
            if not invalid:
                continue
            days = ", ".join(str(v.day) for v in invalid)
            issues.append(
                Issue(
                    "invalid_vote",
                    g.game_id,
                    f"{p.username} died at {p.death_timing} but voted on day(s) {days}",
                    [p.username],
                )
            )
    return issues


def detect_duplicate_votes(games: List[GameRecord]) -> List[Issue]:
    issues: List[Issue] = []
    for g in games:
        for p in g.players:
            per_day = Counter(v.day for v in p.votes)
            for day, count in sorted(per_day.items()):
                if count > 1:
                    issues.append(
                        Issue(
                            "duplicate_vote",
                            g.game_id,
                            f"{p.username} voted {count} times on day {day}",
                            [p.username],
                        )
                    )
    return issues


def validate_game_log(games: List[GameRecord]) -> List[Issue]:
    issues = validate_victory_consistency(games) + detect_invalid_votes(games) + detect_duplicate_votes(games)
    if issues:
        counts = Counter(i.type for i in issues)
        logger.warning("Found %d issue(s) in %d games: %s", len(issues), len(games), dict(counts))
    else:
        logger.info("No issue found in %d games", len(games))
    return issues


def summarize_issues(issues: List[Issue]) -> Dict[str, Any]:
    return {
        "total": len(issues),
        "by_type": dict(Counter(i.type for i in issues)),
        "games": len({i.game_id for i in issues}),
    }
