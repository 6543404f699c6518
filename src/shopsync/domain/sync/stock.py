"""Stock: set on-hand quantities at the primary location."""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import partial
from itertools import batched
from logging import getLogger
from typing import TYPE_CHECKING

from shopsync.config.sync import SyncConfig
from shopsync.domain.concurrency import WorkerPool
from shopsync.domain.model import NotFound, ResolvedStockInput, StockQuantity
from shopsync.domain.normalization import normalize_sku

from .summary import FlowSummary

if TYPE_CHECKING:
    from collections.abc import Sequence

    from shopsync.domain.ports import CatalogSource, IdentityResolver, InventoryGateway

log = getLogger(__name__)


@dataclass(slots=True)
class SyncStock:
    source: CatalogSource
    resolver: IdentityResolver
    inventory: InventoryGateway
    config: SyncConfig = field(default_factory=SyncConfig)

    async def run(self) -> FlowSummary:
        summary = FlowSummary("stock")
        rows = await self.source.list_stock()

        quantities: dict[str, int] = {}
        for row in rows:
            sku = normalize_sku(row.sku)
            if not sku:
                summary.skip("empty_sku")
                continue
            if sku in quantities:
                summary.note("duplicates")
            quantities[sku] = row.quantity

        valid: list[tuple[str, int]] = []
        for sku, quantity in quantities.items():
            if quantity < 0:
                log.warning("Skipping %s: negative quantity %d", sku, quantity)
                summary.skip("negative")
                continue
            valid.append((sku, quantity))
        if not valid:
            return summary

        pool: WorkerPool[None] = WorkerPool(self.config.concurrency, name="stock")
        for batch in batched(valid, self.config.stock_batch_size):
            pool.submit(partial(self._sync_batch, batch, summary))
        await pool.wait()
        return summary

    async def _sync_batch(self, batch: Sequence[tuple[str, int]], summary: FlowSummary) -> None:
        resolved: list[ResolvedStockInput] = []
        for sku, quantity in batch:
            resolution = await self.resolver.resolve_inventory_item(sku)
            if isinstance(resolution, NotFound):
                log.warning("Stock skipped, no inventory item for SKU %s", sku)
                summary.skip("not_found")
                continue
            resolved.append(
                ResolvedStockInput(
                    sku=sku,
                    inventory_item_id=resolution.inventory_item_id,
                    tracked=resolution.tracked,
                    quantity=quantity,
                )
            )
        if not resolved:
            return

        location_id = await self.inventory.primary_location_id()
        for item in resolved:
            if not item.tracked:
                await self.inventory.mark_tracked(item.inventory_item_id)
                summary.note("tracking_enabled")
            await self.inventory.activate(item.inventory_item_id, location_id)

        await self.inventory.set_on_hand(
            location_id,
            [StockQuantity(item.inventory_item_id, item.quantity) for item in resolved],
        )
        summary.processed += len(resolved)
        summary.updated += len(resolved)
