"""Prices: base-currency variant prices plus local-currency fixed prices."""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import partial
from itertools import batched
from logging import getLogger
from typing import TYPE_CHECKING

from shopsync.config.sync import MarketSettings, SyncConfig
from shopsync.domain.concurrency import WorkerPool
from shopsync.domain.errors import SyncError
from shopsync.domain.model import NotFound, ResolvedPriceInput, VariantPrice
from shopsync.domain.normalization import normalize_sku

from .summary import FlowSummary

if TYPE_CHECKING:
    from collections.abc import Sequence

    from shopsync.domain.model import PriceRow
    from shopsync.domain.ports import CatalogSource, IdentityResolver, PricingGateway
    from shopsync.domain.provisioning import MarketProvisioner

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class _EligiblePrice:
    sku: str
    base_amount: float
    local_amount: float


@dataclass(slots=True)
class SyncPrices:
    source: CatalogSource
    resolver: IdentityResolver
    pricing: PricingGateway
    provisioner: MarketProvisioner
    config: SyncConfig = field(default_factory=SyncConfig)
    settings: MarketSettings = field(default_factory=MarketSettings)

    async def run(self) -> FlowSummary:
        summary = FlowSummary("prices")
        rows = await self.source.list_prices()
        eligible = self._select_eligible(rows, summary)
        if not eligible:
            log.warning("No SKUs carry both %s and %s prices", *self._currencies)
            return summary

        resources = await self.provisioner.ensure()
        resolved = await self._resolve_all(eligible, summary)

        by_product: dict[str, list[ResolvedPriceInput]] = {}
        for item in resolved:
            by_product.setdefault(item.product_id, []).append(item)

        pool: WorkerPool[None] = WorkerPool(self.config.concurrency, name="variant prices")
        for product_id, items in by_product.items():
            for batch in batched(items, self.config.variant_prices_batch_size):
                pool.submit(partial(self._write_base_prices, product_id, batch))
        await pool.wait()

        pool = WorkerPool(self.config.concurrency, name="fixed prices")
        for batch in batched(resolved, self.config.fixed_prices_batch_size):
            pool.submit(partial(self._write_local_prices, resources.price_list_id, batch))
        await pool.wait()

        summary.processed = len(resolved)
        summary.updated = len(resolved)
        return summary

    @property
    def _currencies(self) -> tuple[str, str]:
        return self.settings.base_currency, self.settings.local_currency

    def _select_eligible(
        self, rows: Sequence[PriceRow], summary: FlowSummary
    ) -> list[_EligiblePrice]:
        base_currency, local_currency = self._currencies
        by_sku: dict[str, dict[str, float]] = {}
        for row in rows:
            sku = normalize_sku(row.sku)
            if not sku:
                summary.skip("empty_sku")
                continue
            currency = row.currency.strip().upper()
            if currency not in (base_currency, local_currency):
                summary.note("ignored_currency")
                continue
            # the ERP reports the latest price per list; a later row wins
            by_sku.setdefault(sku, {})[currency] = row.amount

        eligible: list[_EligiblePrice] = []
        for sku, prices in by_sku.items():
            base = prices.get(base_currency)
            local = prices.get(local_currency)
            if base is None or local is None:
                summary.skip("missing")
                continue
            if base < 0 or local < 0:
                log.warning("Skipping %s: negative price (base=%s local=%s)", sku, base, local)
                summary.skip("negative")
                continue
            eligible.append(_EligiblePrice(sku=sku, base_amount=base, local_amount=local))
        return eligible

    async def _resolve_all(
        self, eligible: Sequence[_EligiblePrice], summary: FlowSummary
    ) -> list[ResolvedPriceInput]:
        pool: WorkerPool[ResolvedPriceInput | None] = WorkerPool(
            self.config.concurrency, name="price lookups"
        )
        for item in eligible:
            pool.submit(partial(self._resolve, item, summary))
        return [item for item in await pool.wait() if item is not None]

    async def _resolve(
        self, item: _EligiblePrice, summary: FlowSummary
    ) -> ResolvedPriceInput | None:
        resolution = await self.resolver.resolve_by_sku(item.sku)
        if isinstance(resolution, NotFound):
            log.warning("Price skipped, no variant for SKU %s", item.sku)
            summary.skip("not_found")
            return None
        product_id = resolution.product_id or await self.resolver.product_id_for_variant(
            resolution.variant_id
        )
        if not product_id:
            raise SyncError(f"shopify variant {resolution.variant_id} has no product")
        return ResolvedPriceInput(
            sku=item.sku,
            product_id=product_id,
            variant_id=resolution.variant_id,
            base_amount=item.base_amount,
            local_amount=item.local_amount,
        )

    async def _write_base_prices(
        self, product_id: str, items: Sequence[ResolvedPriceInput]
    ) -> None:
        await self.pricing.update_variant_prices(
            product_id,
            [VariantPrice(variant_id=item.variant_id, amount=item.base_amount) for item in items],
        )

    async def _write_local_prices(
        self, price_list_id: str, items: Sequence[ResolvedPriceInput]
    ) -> None:
        await self.pricing.add_fixed_prices(
            price_list_id,
            self.settings.local_currency,
            [VariantPrice(variant_id=item.variant_id, amount=item.local_amount) for item in items],
        )
