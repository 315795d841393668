"""
Rune/perk asset metadata contracts.
"""

from pydantic import ConfigDict, Field

from .common import BaseContract


class PerkAsset(BaseContract):
    """Display metadata for one perk or keystone ID."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    icon: str = Field(..., description="Absolute icon URL")
    name: str = Field(..., description="Localized display name")
