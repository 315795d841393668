"""Summoner spell role-affinity table.

Spell IDs are the numeric keys from Data Dragon ``summoner.json``. The role
assigner only reads the affinity tag, so new spells (or mode-specific
variants) are added here without touching the sorting logic.
"""

from __future__ import annotations

from enum import Enum
from typing import Final


class SpellAffinity(str, Enum):
    """What a summoner spell says about the role of whoever took it."""

    JUNGLE_CLEAR = "jungle_clear"
    TEAM_SUSTAIN = "team_sustain"
    CROWD_CONTROL = "crowd_control"
    GLOBAL_MOBILITY = "global_mobility"
    SINGLE_TARGET = "single_target"
    CARRY_DEFENSIVE = "carry_defensive"


CLEANSE: Final = 1
EXHAUST: Final = 3
FLASH: Final = 4
GHOST: Final = 6
HEAL: Final = 7
SMITE: Final = 11
TELEPORT: Final = 12
IGNITE: Final = 14
BARRIER: Final = 21
UNLEASHED_TELEPORT: Final = 54
PRIMAL_SMITE: Final = 55

SPELL_AFFINITY: Final[dict[int, SpellAffinity]] = {
    SMITE: SpellAffinity.JUNGLE_CLEAR,
    PRIMAL_SMITE: SpellAffinity.JUNGLE_CLEAR,
    HEAL: SpellAffinity.TEAM_SUSTAIN,
    EXHAUST: SpellAffinity.CROWD_CONTROL,
    TELEPORT: SpellAffinity.GLOBAL_MOBILITY,
    UNLEASHED_TELEPORT: SpellAffinity.GLOBAL_MOBILITY,
    IGNITE: SpellAffinity.SINGLE_TARGET,
    BARRIER: SpellAffinity.CARRY_DEFENSIVE,
    CLEANSE: SpellAffinity.CARRY_DEFENSIVE,
    GHOST: SpellAffinity.CARRY_DEFENSIVE,
    # FLASH is taken by every role and carries no signal
}

# Heuristic rank per affinity, checked in this order (first hit wins).
# Ranks follow the canonical role order TOP=1 .. UTILITY=5.
AFFINITY_RANK: Final[tuple[tuple[SpellAffinity, int], ...]] = (
    (SpellAffinity.JUNGLE_CLEAR, 2),
    (SpellAffinity.TEAM_SUSTAIN, 4),
    (SpellAffinity.CROWD_CONTROL, 5),
    (SpellAffinity.GLOBAL_MOBILITY, 1),
    (SpellAffinity.SINGLE_TARGET, 3),
)

# Bottom-lane duo split. The two sets must stay disjoint.
SUPPORT_LEANING_SPELLS: Final[frozenset[int]] = frozenset({EXHAUST, IGNITE})
DAMAGE_LEANING_SPELLS: Final[frozenset[int]] = frozenset({HEAL, BARRIER, CLEANSE, GHOST})


def spell_affinities(spell_ids: tuple[int, ...]) -> set[SpellAffinity]:
    """Affinity tags present in a two-spell kit; unknown IDs are ignored."""
    return {SPELL_AFFINITY[s] for s in spell_ids if s in SPELL_AFFINITY}
