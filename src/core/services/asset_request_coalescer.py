"""Asset Request Coalescer - batch per-ID perk lookups into single round-trips.

Many components ask for perk icons for overlapping ID sets within a few
milliseconds of each other (ten scoreboard rows rendering at once). Requests
arriving inside one debounce window are merged into a single call to the
lookup port; IDs that are cached or already travelling are never refetched.

Concurrency model (single asyncio event loop):
- ``_pending``: IDs waiting for the next flush
- ``_flush_future``: shared by every caller of the batch being collected
- ``_in_flight``: ID -> future of the batch that is fetching it right now
- Once a batch is drained, new calls start a fresh batch and future
"""

import asyncio
import logging
from collections.abc import Iterable, Mapping

from src.config.settings import get_settings
from src.contracts.assets import PerkAsset
from src.core.ports.asset_lookup_port import AssetLookupPort

logger = logging.getLogger(__name__)

DEFAULT_DEBOUNCE_SECONDS = 0.05


def _valid_ids(ids: Iterable[object] | None) -> list[int]:
    """Distinct positive integer IDs in first-seen order."""
    seen: dict[int, None] = {}
    for value in ids or ():
        if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
            continue
        seen.setdefault(value, None)
    return list(seen)


class AssetRequestCoalescer:
    """Debounced, single-flight, process-lifetime cache of perk metadata.

    Entries are never evicted; the perk catalog is small and immutable
    within a patch.
    """

    def __init__(
        self,
        lookup: AssetLookupPort,
        *,
        debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS,
    ) -> None:
        self.lookup = lookup
        self.debounce_seconds = max(0.0, debounce_seconds)
        self._cache: dict[int, PerkAsset] = {}
        self._pending: set[int] = set()
        self._in_flight: dict[int, asyncio.Future[None]] = {}
        self._flush_future: asyncio.Future[None] | None = None
        self._timer: asyncio.TimerHandle | None = None
        self._tasks: set[asyncio.Task[None]] = set()
        self.batches_sent = 0

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def request_assets(self, ids: Iterable[object] | None) -> None:
        """Ensure metadata for ``ids`` is cached (or known to be unavailable).

        Resolves once every requested ID has been looked up. IDs missing from
        the response, or lost to a failed batch, are simply absent from the
        cache afterwards. Never raises for lookup failures.
        """
        wanted = [i for i in _valid_ids(ids) if i not in self._cache]
        if not wanted:
            return

        waits: set[asyncio.Future[None]] = set()
        for asset_id in wanted:
            in_flight = self._in_flight.get(asset_id)
            if in_flight is not None:
                waits.add(in_flight)
            else:
                self._pending.add(asset_id)

        if self._pending:
            waits.add(self._schedule_flush())

        # One caller being cancelled must not cancel the shared batch
        await asyncio.gather(*(asyncio.shield(w) for w in waits))

    async def get(self, ids: Iterable[object] | None) -> dict[int, PerkAsset]:
        """Request ``ids`` and return whichever of them resolved."""
        id_list = list(ids or ())
        await self.request_assets(id_list)
        return self.peek(id_list)

    def peek(self, ids: Iterable[object] | None) -> dict[int, PerkAsset]:
        """Cached subset of ``ids``; never triggers a lookup."""
        return {i: self._cache[i] for i in _valid_ids(ids) if i in self._cache}

    def cached_ids(self) -> frozenset[int]:
        return frozenset(self._cache)

    async def close(self) -> None:
        """Wait for in-flight batches, then release the lookup backend."""
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)
        await self.lookup.close()

    # ------------------------------------------------------------------
    # Batching
    # ------------------------------------------------------------------

    def _schedule_flush(self) -> asyncio.Future[None]:
        loop = asyncio.get_running_loop()
        if self._flush_future is None:
            self._flush_future = loop.create_future()
        if self._timer is None:
            self._timer = loop.call_later(self.debounce_seconds, self._start_flush)
        return self._flush_future

    def _start_flush(self) -> None:
        """Drain the pending set into one batch and reset for the next window."""
        self._timer = None
        batch_future = self._flush_future
        self._flush_future = None
        batch = sorted(i for i in self._pending if i not in self._cache)
        self._pending.clear()

        if batch_future is None:
            return
        if not batch:
            batch_future.set_result(None)
            return

        for asset_id in batch:
            self._in_flight[asset_id] = batch_future

        task = asyncio.get_running_loop().create_task(self._flush(batch, batch_future))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _flush(self, batch: list[int], batch_future: asyncio.Future[None]) -> None:
        self.batches_sent += 1
        try:
            result = await self.lookup.fetch_assets(batch)
            self._store(batch, result)
        except Exception as e:
            logger.warning(f"Perk asset lookup failed for {len(batch)} ids: {e}")
        finally:
            for asset_id in batch:
                if self._in_flight.get(asset_id) is batch_future:
                    del self._in_flight[asset_id]
            if not batch_future.done():
                batch_future.set_result(None)

    def _store(self, batch: list[int], result: Mapping[int, PerkAsset] | None) -> None:
        requested = set(batch)
        for asset_id, asset in (result or {}).items():
            if asset_id not in requested:
                continue
            if not isinstance(asset, PerkAsset):
                logger.debug(f"Skipping malformed asset entry for {asset_id}")
                continue
            self._cache[asset_id] = asset

        missing = requested.difference(self._cache)
        if missing:
            logger.debug(f"No asset metadata for ids {sorted(missing)}")


_coalescer: AssetRequestCoalescer | None = None


def get_asset_coalescer() -> AssetRequestCoalescer:
    """Process-wide coalescer backed by the Community Dragon perk catalog."""
    global _coalescer
    if _coalescer is None:
        from src.adapters.perk_assets_adapter import CommunityDragonPerkAdapter

        settings = get_settings()
        _coalescer = AssetRequestCoalescer(
            CommunityDragonPerkAdapter(),
            debounce_seconds=settings.asset_debounce_seconds,
        )
    return _coalescer


def reset_asset_coalescer() -> None:
    """Forget the process-wide coalescer (tests, settings reload)."""
    global _coalescer
    _coalescer = None
