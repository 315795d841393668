"""Role assignment for one team of five (pure functions).

Declared positions are trusted when they are canonical and unclaimed; the
summoner-spell kit is the fallback signal. This is a best-effort heuristic:
a lobby with no positions and an unusual spell kit can be placed wrongly,
which is expected rather than an error.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from enum import IntEnum

from src.contracts.common import ROLE_ORDER, RoleSlot, TeamSide
from src.contracts.participants import Participant
from src.core.data.summoner_spells import (
    AFFINITY_RANK,
    DAMAGE_LEANING_SPELLS,
    SUPPORT_LEANING_SPELLS,
    SpellAffinity,
    spell_affinities,
)
from src.core.utils.name_normalizer import normalize_position

logger = logging.getLogger(__name__)

ROLE_RANK: dict[RoleSlot, int] = {
    RoleSlot.TOP: 1,
    RoleSlot.JUNGLE: 2,
    RoleSlot.MIDDLE: 3,
    RoleSlot.BOTTOM: 4,
    RoleSlot.UTILITY: 5,
}
UNKNOWN_RANK = 6


class LaneLean(IntEnum):
    """Bottom-lane duo split; the value doubles as the in-rank sort order."""

    DAMAGE = 0
    NEUTRAL = 1
    SUPPORT = 2


def role_sort_key(participant: Participant) -> int:
    """Heuristic rank (1=TOP .. 5=UTILITY, 6=unknown) for ``participant``."""
    affinities = spell_affinities(participant.spell_ids)
    declared = normalize_position(participant.team_position)

    if declared is not None:
        # Sources often label both bot laners BOTTOM; exhaust marks the support
        if declared is RoleSlot.BOTTOM and SpellAffinity.CROWD_CONTROL in affinities:
            return ROLE_RANK[RoleSlot.UTILITY]
        return ROLE_RANK[declared]

    for affinity, rank in AFFINITY_RANK:
        if affinity in affinities:
            return rank
    return UNKNOWN_RANK


def lane_lean(participant: Participant) -> LaneLean:
    spells = set(participant.spell_ids)
    support = bool(spells & SUPPORT_LEANING_SPELLS)
    damage = bool(spells & DAMAGE_LEANING_SPELLS)
    if damage and not support:
        return LaneLean.DAMAGE
    if support and not damage:
        return LaneLean.SUPPORT
    return LaneLean.NEUTRAL


def heuristic_order(participants: Iterable[Participant]) -> list[Participant]:
    """Stable-sort by heuristic rank, then put carries ahead of supports on ties.

    The lean tie-break only reorders a rank group that holds both a
    damage-leaning and a support-leaning kit; other groups keep input order.
    """
    ordered = sorted(participants, key=role_sort_key)

    result: list[Participant] = []
    index = 0
    while index < len(ordered):
        rank = role_sort_key(ordered[index])
        group_end = index
        while group_end < len(ordered) and role_sort_key(ordered[group_end]) == rank:
            group_end += 1

        group = ordered[index:group_end]
        leans = {lane_lean(p) for p in group}
        if LaneLean.DAMAGE in leans and LaneLean.SUPPORT in leans:
            group = sorted(group, key=lane_lean)
        result.extend(group)
        index = group_end

    return result


def _pick_leftovers(leftovers: list[Participant], free: Sequence[RoleSlot]) -> list[Participant]:
    """Keep at most ``len(free)`` leftovers, preferring kits that point at a free slot.

    Survivors keep their heuristic order.
    """
    if len(leftovers) <= len(free):
        return leftovers

    free_ranks = {ROLE_RANK[role] for role in free}
    preferred = sorted(
        range(len(leftovers)), key=lambda i: role_sort_key(leftovers[i]) not in free_ranks
    )
    kept = sorted(preferred[: len(free)])
    dropped = [leftovers[i].participant_key for i in preferred[len(free) :]]
    logger.debug(f"No free slot left for {dropped}")
    return [leftovers[i] for i in kept]


def assign_roles(
    participants: Iterable[Participant],
    role_order: Sequence[RoleSlot | str] = ROLE_ORDER,
) -> dict[RoleSlot, Participant]:
    """Assign each participant of one team to at most one role slot.

    Declared positions are placed first. Leftovers then fill the empty slots
    in canonical order (TOP .. UTILITY), whatever order ``role_order`` lists
    them in, so they line up with the heuristic sort.

    Args:
        participants: Up to five participants of the same team, any order
        role_order: Slots to fill

    Returns:
        Role -> participant, in ``role_order`` order. Partial when fewer
        participants than roles were given.

    Raises:
        ValueError: If ``role_order`` contains a non-canonical label
    """
    roles = tuple(RoleSlot(r) for r in role_order)
    ordered = heuristic_order(participants)

    if len(ordered) > len(ROLE_ORDER):
        dropped = [p.participant_key for p in ordered[len(ROLE_ORDER) :]]
        logger.warning(f"More participants than role slots; ignoring {dropped}")
        ordered = ordered[: len(ROLE_ORDER)]

    by_role: dict[RoleSlot, Participant] = {}
    leftovers: list[Participant] = []

    for participant in ordered:
        position = normalize_position(participant.team_position)
        if position is not None and position in roles and position not in by_role:
            by_role[position] = participant
        else:
            leftovers.append(participant)

    free = sorted((role for role in set(roles) if role not in by_role), key=ROLE_RANK.__getitem__)
    by_role.update(zip(free, _pick_leftovers(leftovers, free)))

    return {role: by_role[role] for role in roles if role in by_role}


def assign_match_roles(
    participants: Iterable[Participant],
    role_order: Sequence[RoleSlot | str] = ROLE_ORDER,
) -> dict[TeamSide, dict[RoleSlot, Participant]]:
    """Split a full match roster by team and assign roles on both sides."""
    teams: dict[TeamSide, list[Participant]] = {TeamSide.BLUE: [], TeamSide.RED: []}
    for participant in participants:
        if participant.team_id is None:
            logger.debug(f"Skipping participant without team: {participant.participant_key}")
            continue
        teams[TeamSide(participant.team_id)].append(participant)

    return {side: assign_roles(members, role_order) for side, members in teams.items()}
