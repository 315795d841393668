"""Service layer implementing business logic.

Services connect ports (interfaces) with adapters (implementations),
providing high-level operations to callers.
"""

from src.core.services.asset_request_coalescer import (
    AssetRequestCoalescer,
    get_asset_coalescer,
)
from src.core.services.live_match_resolver import (
    MATCH_POINTS,
    reconcile_item_slots,
    resolve_live_participant,
    score_candidate,
)

__all__ = [
    "AssetRequestCoalescer",
    "get_asset_coalescer",
    "MATCH_POINTS",
    "reconcile_item_slots",
    "resolve_live_participant",
    "score_candidate",
]
