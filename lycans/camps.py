"""Role to camp resolution.

Every statistic in the package groups players by camp through this module,
so the role table lives here and nowhere else.

Two recording formats coexist in the logs:

* legacy: ``MainRoleInitial`` is ``Chasseur`` or ``Alchimiste``, no power;
* current: ``MainRoleInitial`` is ``Villageois Élite`` and ``Power`` holds
  ``Chasseur``, ``Alchimiste``, ``Protecteur`` or ``Disciple``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence

from .normalize import GameRecord, PlayerRecord, RoleChange


VILLAGEOIS = "Villageois"
LOUP = "Loup"
AMOUREUX = "Amoureux"
VAUDOU = "Vaudou"
AUTRES = "Autres"

VILLAGEOIS_ELITE = "Villageois Élite"
VILLAGEOIS_ELITE_POWERS = ("Chasseur", "Alchimiste", "Protecteur", "Disciple")
LEGACY_ELITE_ROLES = ("Chasseur", "Alchimiste")

LOVER_ROLES = ("Amoureux Loup", "Amoureux Villageois")
VILLAGER_ROLES = (VILLAGEOIS_ELITE,) + VILLAGEOIS_ELITE_POWERS
WOLF_SUB_ROLES = ("Traître", "Louveteau")


@dataclass(frozen=True)
class CampGroupOptions:
    regroup_lovers: bool = True
    regroup_villagers: bool = True
    regroup_wolf_sub_roles: bool = False


DEFAULT_OPTIONS = CampGroupOptions()
GROUPED_OPTIONS = CampGroupOptions(regroup_wolf_sub_roles=True)
UNGROUPED_OPTIONS = CampGroupOptions(regroup_villagers=False, regroup_wolf_sub_roles=False)


def effective_power(initial_role: Optional[str], power: Optional[str]) -> Optional[str]:
    if initial_role == VILLAGEOIS_ELITE:
        return power or None
    if initial_role in LEGACY_ELITE_ROLES:
        return initial_role
    return power or None


def final_role(initial_role: Optional[str], role_changes: Sequence[RoleChange]) -> str:
    if role_changes:
        return role_changes[-1].new_role
    return initial_role or ""


def camp_from_role(
    role: Optional[str],
    options: Optional[CampGroupOptions] = None,
    power: Optional[str] = None,
) -> str:
    """Map a recorded role to its camp.

    Args:
        role: Role name as recorded (initial or final)
        options: Grouping switches; defaults regroup lovers and villagers only
        power: Recorded power, used to resolve ``Villageois Élite``

    Returns:
        Camp name. Roles outside the known groups are their own camp.
    """
    if not role:
        return VILLAGEOIS
    opts = options or DEFAULT_OPTIONS

    if role == VILLAGEOIS_ELITE and power:
        role = power

    if role in LOVER_ROLES:
        return AMOUREUX if opts.regroup_lovers else role

    if role in VILLAGER_ROLES:
        return VILLAGEOIS if opts.regroup_villagers else role

    if role == "Zombie":
        return VAUDOU

    if role in WOLF_SUB_ROLES:
        return LOUP if opts.regroup_wolf_sub_roles else role

    return role


def main_camp(role: Optional[str], power: Optional[str] = None) -> str:
    """Collapse a role into ``Villageois``, ``Loup`` or ``Autres``."""
    camp = camp_from_role(role, GROUPED_OPTIONS, power)
    if camp in (LOUP, VILLAGEOIS):
        return camp
    return AUTRES


def camp_bucket(camp: str) -> str:
    if camp == VILLAGEOIS:
        return "villageois"
    if camp == LOUP:
        return "loup"
    return "solo"


def player_final_role(player: PlayerRecord) -> str:
    return final_role(player.initial_role, player.role_changes)


def player_main_camp(player: PlayerRecord) -> str:
    return main_camp(player.initial_role, player.power)


def player_camp(player: PlayerRecord, options: Optional[CampGroupOptions] = None) -> str:
    """Camp of the player's final role (after in-game role changes)."""
    return camp_from_role(player_final_role(player), options, player.power)


def winner_camp(game: GameRecord) -> str:
    winners: List[PlayerRecord] = [p for p in game.players if p.victorious]
    if not winners:
        return VILLAGEOIS

    camps = [camp_from_role(p.initial_role, GROUPED_OPTIONS, p.power) for p in winners]
    if LOUP in camps:
        return LOUP
    if AMOUREUX in camps:
        return AMOUREUX
    if VILLAGEOIS in camps:
        return VILLAGEOIS
    return camps[0]


def has_elite_power(player: PlayerRecord, power: str, role_after: Optional[str] = None) -> bool:
    if effective_power(player.initial_role, player.power) == power and (
        player.initial_role in LEGACY_ELITE_ROLES or player.initial_role == VILLAGEOIS_ELITE
    ):
        return True
    return role_after == power


def is_hunter(player: PlayerRecord, role_after: Optional[str] = None) -> bool:
    return has_elite_power(player, "Chasseur", role_after)
