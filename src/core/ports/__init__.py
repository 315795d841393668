"""Port interfaces for hexagonal architecture.

These ports define the contracts between the core domain and external adapters.
"""

from src.core.ports.asset_lookup_port import AssetLookupPort

__all__ = ["AssetLookupPort"]
