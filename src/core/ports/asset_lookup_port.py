"""Port interface for batched perk/keystone asset lookups.

Abstracts the asset metadata service so the request coalescer can be driven
by any backend (Community Dragon catalog, an internal API, a test double).
"""

from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence

from src.contracts.assets import PerkAsset


class AssetLookupPort(ABC):
    """Port interface for resolving perk IDs to display metadata."""

    @abstractmethod
    async def fetch_assets(self, ids: Sequence[int]) -> Mapping[int, PerkAsset]:
        """Resolve a batch of perk IDs in one call.

        Args:
            ids: Distinct positive perk/keystone IDs

        Returns:
            Mapping for the IDs that could be resolved. Missing IDs are
            simply absent; partial results are valid.

        Raises:
            Any transport error. Callers treat failures as "unavailable".
        """
        pass

    async def close(self) -> None:
        """Release transport resources; no-op by default."""
        return None
