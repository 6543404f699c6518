"""Products: create or update each ERP item by SKU."""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import partial
from logging import getLogger
from typing import TYPE_CHECKING

from shopsync.config.sync import SyncConfig
from shopsync.domain.concurrency import WorkerPool
from shopsync.domain.errors import SyncError
from shopsync.domain.model import Found
from shopsync.domain.normalization import normalize_sku

from ._shared import translate_best_effort
from .summary import FlowSummary

if TYPE_CHECKING:
    from collections.abc import Iterable

    from shopsync.domain.model import Product
    from shopsync.domain.ports import (
        CatalogSource,
        IdentityResolver,
        ProductGateway,
        TranslationGateway,
    )

log = getLogger(__name__)


@dataclass(slots=True)
class SyncProducts:
    source: CatalogSource
    resolver: IdentityResolver
    products: ProductGateway
    translations: TranslationGateway
    config: SyncConfig = field(default_factory=SyncConfig)

    async def run(self) -> FlowSummary:
        summary = FlowSummary("products")
        seen: set[str] = set()
        page = 1
        while True:
            result = await self.source.list_products(
                page=page, page_size=self.config.products_page_size
            )
            log.info(
                "Fetched products page %d/%d (%d items)",
                page,
                result.total_pages,
                len(result.products),
            )
            await self._sync_page(result.products, seen, summary)
            if not result.products or page >= result.total_pages:
                break
            page += 1
        return summary

    async def _sync_page(
        self, products: Iterable[Product], seen: set[str], summary: FlowSummary
    ) -> None:
        pool: WorkerPool[None] = WorkerPool(self.config.concurrency, name="products")
        for product in products:
            sku = normalize_sku(product.sku)
            if not sku:
                summary.skip("empty_sku")
                continue
            if not product.title:
                log.warning("Skipping product %s: no title", sku)
                summary.skip("empty_title")
                continue
            if sku in seen:
                summary.skip("duplicate")
                continue
            seen.add(sku)
            pool.submit(partial(self._sync_product, product, summary))
        await pool.wait()

    async def _sync_product(self, product: Product, summary: FlowSummary) -> None:
        resolution = await self.resolver.resolve_by_sku(product.sku)
        if isinstance(resolution, Found):
            product_id = resolution.product_id
            await self.products.update_product(product_id, product)
            variant_id: str | None = resolution.variant_id
            summary.updated += 1
        else:
            product_id = await self.products.create_product(product)
            variant_id = await self.products.primary_variant_id(product_id)
            summary.created += 1
        if not variant_id:
            raise SyncError(f"shopify product {product_id} has no variants to update")

        await self.products.update_variant_identifiers(product_id, variant_id, product)

        hebrew = product.hebrew_title.strip()
        if hebrew and hebrew.lower() != product.title.lower():
            await translate_best_effort(
                self.translations,
                resource_id=product_id,
                key="title",
                value=hebrew,
                summary=summary,
            )
        summary.processed += 1
