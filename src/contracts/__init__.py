"""Contract models for data validation."""

from .assets import PerkAsset
from .common import ROLE_ORDER, BaseContract, FeedContract, RoleSlot, TeamSide
from .participants import (
    LIVE_ITEM_SLOTS,
    ActivePlayer,
    LiveParticipant,
    Participant,
    PerkSelection,
)

__all__ = [
    "ActivePlayer",
    "BaseContract",
    "FeedContract",
    "LIVE_ITEM_SLOTS",
    "LiveParticipant",
    "Participant",
    "PerkAsset",
    "PerkSelection",
    "ROLE_ORDER",
    "RoleSlot",
    "TeamSide",
]
