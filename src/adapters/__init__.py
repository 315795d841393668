"""Adapter implementations for external services."""

from .perk_assets_adapter import CommunityDragonPerkAdapter

__all__ = ["CommunityDragonPerkAdapter"]
