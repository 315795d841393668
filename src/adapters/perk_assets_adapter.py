import asyncio
import logging
from collections.abc import Mapping, Sequence
from typing import Any

import aiohttp

from src.config.settings import get_settings
from src.contracts.assets import PerkAsset
from src.core.observability import trace_adapter
from src.core.ports.asset_lookup_port import AssetLookupPort

logger = logging.getLogger(__name__)

# Prefix of Community Dragon game-data paths; the remainder maps onto the DDragon img CDN
GAME_DATA_ASSET_PREFIX = "/lol-game-data/assets/v1/"


def to_icon_url(icon_path: str, base_url: str) -> str:
    """Convert a game-data ``iconPath`` into an absolute CDN URL."""
    relative = icon_path.strip()
    lowered = relative.lower()
    if lowered.startswith(GAME_DATA_ASSET_PREFIX):
        relative = relative[len(GAME_DATA_ASSET_PREFIX) :]
    relative = relative.lstrip("/")
    return f"{base_url.rstrip('/')}/{relative}"


def parse_perk_catalog(payload: Any, base_url: str) -> dict[int, PerkAsset]:
    """Build ``id -> PerkAsset`` from a ``perks.json`` payload.

    Entries without a numeric id, an icon path and a name are skipped.
    """
    if not isinstance(payload, list):
        logger.warning(f"Unexpected perk catalog payload type: {type(payload).__name__}")
        return {}

    catalog: dict[int, PerkAsset] = {}
    for entry in payload:
        if not isinstance(entry, dict):
            continue
        perk_id = entry.get("id")
        icon_path = entry.get("iconPath")
        name = entry.get("name")
        if not isinstance(perk_id, int) or isinstance(perk_id, bool):
            continue
        if not isinstance(icon_path, str) or not icon_path or not isinstance(name, str):
            continue
        catalog[perk_id] = PerkAsset(icon=to_icon_url(icon_path, base_url), name=name)
    return catalog


class CommunityDragonPerkAdapter(AssetLookupPort):
    """Perk metadata from the Community Dragon ``perks.json`` catalog.

    The whole catalog is one small document, so it is downloaded once and
    kept in ``self.cache``; every batch is then served from memory.
    """

    def __init__(
        self,
        catalog_url: str | None = None,
        icon_base_url: str | None = None,
        timeout_seconds: float | None = None,
    ) -> None:
        settings = get_settings()
        self.catalog_url = catalog_url or settings.perk_catalog_url
        self.icon_base_url = icon_base_url or settings.perk_icon_base_url
        self.timeout = aiohttp.ClientTimeout(
            total=timeout_seconds or settings.asset_http_timeout_seconds
        )
        self.cache: dict[str, dict[int, PerkAsset]] = {}
        self.session: aiohttp.ClientSession | None = None
        # Overlapping batches wait on one download instead of starting their own
        self._catalog_lock = asyncio.Lock()

    async def __aenter__(self) -> "CommunityDragonPerkAdapter":
        self.session = aiohttp.ClientSession(timeout=self.timeout)
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    async def close(self) -> None:
        if self.session:
            await self.session.close()
            self.session = None

    async def _get_catalog(self) -> dict[int, PerkAsset]:
        cache_key = "perks"
        if cache_key in self.cache:
            return self.cache[cache_key]

        async with self._catalog_lock:
            if cache_key in self.cache:
                return self.cache[cache_key]
            return await self._download_catalog(cache_key)

    async def _download_catalog(self, cache_key: str) -> dict[int, PerkAsset]:
        try:
            if not self.session:
                self.session = aiohttp.ClientSession(timeout=self.timeout)

            async with self.session.get(self.catalog_url) as response:
                if response.status != 200:
                    logger.warning(f"Failed to fetch perk catalog. Status: {response.status}")
                    return {}
                payload = await response.json(content_type=None)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.warning(f"Network error while fetching perk catalog: {e}")
            return {}

        catalog = parse_perk_catalog(payload, self.icon_base_url)
        if catalog:
            self.cache[cache_key] = catalog
        return catalog

    @trace_adapter
    async def fetch_assets(self, ids: Sequence[int]) -> Mapping[int, PerkAsset]:
        """Resolve the requested perk IDs; unknown IDs are left out."""
        if not ids:
            return {}
        catalog = await self._get_catalog()
        return {perk_id: catalog[perk_id] for perk_id in ids if perk_id in catalog}

    def clear_cache(self) -> None:
        """Drop the cached catalog so the next batch refetches it"""
        self.cache.clear()
