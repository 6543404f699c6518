"""Product order: manual sort positions inside each category collection."""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import partial
from itertools import batched
from logging import getLogger
from typing import TYPE_CHECKING

from shopsync.config.sync import SyncConfig
from shopsync.domain.concurrency import WorkerPool
from shopsync.domain.model import CollectionMove, NotFound
from shopsync.domain.normalization import normalize_key, normalize_sku

from ._shared import add_to_collection
from .summary import FlowSummary

if TYPE_CHECKING:
    from shopsync.domain.ports import CatalogSource, CollectionGateway, IdentityResolver

log = getLogger(__name__)


@dataclass(slots=True)
class _CategoryOrder:
    title: str
    # lower-cased SKU -> (SKU as first seen, lowest order number)
    entries: dict[str, tuple[str, int]] = field(default_factory=dict)

    def add(self, sku: str, order: int) -> None:
        key = sku.lower()
        current = self.entries.get(key)
        if current is None or order < current[1]:
            self.entries[key] = (current[0] if current else sku, order)

    def ordered(self) -> list[tuple[str, int]]:
        return sorted(self.entries.values(), key=lambda entry: (entry[1], entry[0]))


@dataclass(slots=True)
class SyncProductOrder:
    source: CatalogSource
    resolver: IdentityResolver
    collections: CollectionGateway
    config: SyncConfig = field(default_factory=SyncConfig)

    async def run(self) -> FlowSummary:
        summary = FlowSummary("product order")
        rows = await self.source.list_product_order()

        categories: dict[str, _CategoryOrder] = {}
        for row in rows:
            sku = normalize_sku(row.sku)
            if not sku:
                summary.skip("empty_sku")
                continue
            title = row.category_title
            key = normalize_key(title)
            if not key:
                summary.skip("empty_category")
                continue
            if row.order_number < 0:
                summary.skip("negative_order")
                continue
            categories.setdefault(key, _CategoryOrder(title=title.strip())).add(
                sku, row.order_number
            )

        pool: WorkerPool[None] = WorkerPool(self.config.concurrency, name="product order")
        for key in sorted(categories):
            pool.submit(partial(self._sync_category, categories[key], summary))
        await pool.wait()
        return summary

    async def _sync_category(self, category: _CategoryOrder, summary: FlowSummary) -> None:
        collection_id = await self.collections.find_collection_by_title(category.title)
        if collection_id is None:
            log.warning("Product order skipped, no collection titled %r", category.title)
            summary.skip("missing_collection")
            return

        await self.collections.set_manual_sort(collection_id)

        moves: list[CollectionMove] = []
        for sku, order in category.ordered():
            resolution = await self.resolver.resolve_by_sku(sku)
            if isinstance(resolution, NotFound):
                log.warning("Product order skipped, no product for SKU %s", sku)
                summary.skip("not_found")
                continue
            await add_to_collection(
                self.collections,
                collection_id=collection_id,
                product_id=resolution.product_id,
                fatal=self.config.collection_add_failures_fatal,
                summary=summary,
            )
            moves.append(CollectionMove(product_id=resolution.product_id, new_position=order))

        for batch in batched(moves, self.config.reorder_moves_batch_size):
            await self.collections.reorder_products(collection_id, batch)
        summary.processed += 1
        summary.updated += len(moves)
