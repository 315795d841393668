"""
Common data types and base models for the reconciliation engine.
All models use Pydantic V2 with strict type checking.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class TeamSide(int, Enum):
    """Match-V5 team identifiers."""

    BLUE = 100
    RED = 200

    @classmethod
    def coerce(cls, value: object) -> "TeamSide | None":
        """Map any upstream team marker (100/200, "ORDER"/"CHAOS") to a side."""
        if isinstance(value, TeamSide):
            return value
        if isinstance(value, str):
            marker = value.strip().upper()
            if marker in ("ORDER", "BLUE", "100"):
                return cls.BLUE
            if marker in ("CHAOS", "RED", "200"):
                return cls.RED
            return None
        try:
            return cls(int(value))  # type: ignore[arg-type]
        except (TypeError, ValueError):
            return None


class RoleSlot(str, Enum):
    """Canonical Summoner's Rift role labels."""

    TOP = "TOP"
    JUNGLE = "JUNGLE"
    MIDDLE = "MIDDLE"
    BOTTOM = "BOTTOM"
    UTILITY = "UTILITY"


# Canonical display order: TOP -> JUNGLE -> MID -> ADC -> SUPPORT
ROLE_ORDER: tuple[RoleSlot, ...] = (
    RoleSlot.TOP,
    RoleSlot.JUNGLE,
    RoleSlot.MIDDLE,
    RoleSlot.BOTTOM,
    RoleSlot.UTILITY,
)


class BaseContract(BaseModel):
    """Base model for all data contracts with common configuration."""

    model_config = ConfigDict(
        # Validate data on assignment
        validate_assignment=True,
        # Forbid extra fields to ensure data integrity
        extra="forbid",
    )


class FeedContract(BaseModel):
    """Base model for records parsed straight from upstream feeds.

    Riot payloads are camelCase and carry far more keys than the engine
    reads, so unknown keys are ignored and snake_case names are accepted too.
    Feed records are never mutated after construction.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        frozen=True,
    )
