"""Scoring tables: component weights and adjustment rules.

Tuning happens here; the calculator only walks these tables.

NOTE: Adjustment magnitudes are provisional and pending product review.
They must stay small next to the 100-point component base so they never
flip an otherwise clear ranking.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Final

from src.contracts.participants import Participant


@dataclass(frozen=True)
class ComponentSpec:
    """One weighted score component.

    ``full_marks`` is the raw value at which the component earns its whole
    weight; raw values above it are capped.
    """

    name: str
    weight: float
    full_marks: float


DAMAGE_SHARE: Final = ComponentSpec("damage_share", 26.0, 0.35)
KILL_PARTICIPATION: Final = ComponentSpec("kill_participation", 21.0, 1.0)
KDA: Final = ComponentSpec("kda", 18.0, 6.0)
GOLD_SHARE: Final = ComponentSpec("gold_share", 13.0, 0.26)
FARM: Final = ComponentSpec("farm", 12.0, 8.0)  # CS per minute
VISION: Final = ComponentSpec("vision", 10.0, 2.0)  # vision score per minute

COMPONENTS: Final[tuple[ComponentSpec, ...]] = (
    DAMAGE_SHARE,
    KILL_PARTICIPATION,
    KDA,
    GOLD_SHARE,
    FARM,
    VISION,
)

MAX_TOTAL: Final = 120.0
DEFAULT_VICTORY_BONUS: Final = 10.0
SHORT_GAME_SECONDS: Final = 15 * 60

# Tier floors, best first
TIER_THRESHOLDS: Final[tuple[tuple[str, float], ...]] = (
    ("S", 90.0),
    ("A", 75.0),
    ("B", 60.0),
    ("C", 45.0),
)
LOWEST_TIER: Final = "D"


@dataclass(frozen=True)
class AdjustmentContext:
    participant: Participant
    kda: float
    duration_seconds: float


@dataclass(frozen=True)
class AdjustmentRule:
    """Signed correction; a positive ``penalty`` lowers the total."""

    name: str
    applies: Callable[[AdjustmentContext], bool]
    penalty: Callable[[AdjustmentContext], float]


def _deathless(ctx: AdjustmentContext) -> bool:
    p = ctx.participant
    return p.deaths == 0 and (p.kills + p.assists) > 0


def _heavy_feeding(ctx: AdjustmentContext) -> bool:
    return ctx.participant.deaths >= 10 and ctx.kda < 1.0


def _short_game(ctx: AdjustmentContext) -> bool:
    return 0 < ctx.duration_seconds < SHORT_GAME_SECONDS


ADJUSTMENT_RULES: Final[tuple[AdjustmentRule, ...]] = (
    AdjustmentRule("deathless", _deathless, lambda ctx: -3.0),
    AdjustmentRule(
        "objective_steal",
        lambda ctx: ctx.participant.objectives_stolen > 0,
        lambda ctx: -min(2.0, float(ctx.participant.objectives_stolen)),
    ),
    AdjustmentRule("heavy_feeding", _heavy_feeding, lambda ctx: 4.0),
    AdjustmentRule("short_game", _short_game, lambda ctx: 3.0),
)
