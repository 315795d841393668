"""Scoring data models with strict type safety.

SOLID: Single Responsibility - Data structures only, no business logic.
"""

from pydantic import BaseModel, ConfigDict, Field

from src.core.scoring.rules import (
    DAMAGE_SHARE,
    FARM,
    GOLD_SHARE,
    KDA,
    KILL_PARTICIPATION,
    MAX_TOTAL,
    VISION,
)


class ScoreBreakdown(BaseModel):
    """Weighted performance score for one participant.

    total = sum(components) + victory_bonus - penalty, clamped to [0, MAX_TOTAL].
    Recomputed on demand; never persisted.
    """

    model_config = ConfigDict(frozen=True)

    participant_key: str
    team_id: int | None = None

    # Weighted components, each bounded by its weight
    damage_share: float = Field(..., ge=0, le=DAMAGE_SHARE.weight)
    kill_participation: float = Field(..., ge=0, le=KILL_PARTICIPATION.weight)
    kda: float = Field(..., ge=0, le=KDA.weight)
    gold_share: float = Field(..., ge=0, le=GOLD_SHARE.weight)
    farm: float = Field(..., ge=0, le=FARM.weight)
    vision: float = Field(..., ge=0, le=VISION.weight)

    victory_bonus: float = Field(0.0, ge=0)
    penalty: float = Field(0.0, description="Signed; positive values lower the total")
    adjustments: tuple[str, ...] = Field(default=(), description="Adjustment rules that fired")
    total: float = Field(..., ge=0, le=MAX_TOTAL)

    # Raw metrics for display
    raw_kda: float = Field(..., ge=0)
    raw_kill_participation: float = Field(..., ge=0, le=1)
    cs_per_min: float = Field(..., ge=0)
    vision_per_min: float = Field(..., ge=0)

    @property
    def components_total(self) -> float:
        """Sum of the six weighted components (never above 100)."""
        return round(
            self.damage_share
            + self.kill_participation
            + self.kda
            + self.gold_share
            + self.farm
            + self.vision,
            2,
        )


class RankedParticipant(BaseModel):
    """One row of the match-wide ranking."""

    model_config = ConfigDict(frozen=True)

    participant_key: str
    rank: int = Field(..., ge=1)
    total: float = Field(..., ge=0, le=MAX_TOTAL)
    tier: str


class MatchScoreSummary(BaseModel):
    """Ranked scores plus MVP/ACE for one match."""

    duration_seconds: float = Field(..., ge=0)
    rankings: list[RankedParticipant]
    breakdowns: dict[str, ScoreBreakdown]
    mvp_key: str | None = None
    ace_key: str | None = Field(None, description="Best player on the losing side")
    team_average_scores: dict[int, float] = Field(default_factory=dict)
