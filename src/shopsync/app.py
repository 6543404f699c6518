"""Application orchestration entry points."""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, Final

from shopsync.adapters.erp import ErpClient
from shopsync.adapters.notifications import open_notifier
from shopsync.adapters.shopify import open_storefront
from shopsync.config import (
    MarketSettings,
    get_erp_config,
    get_notification_config,
    get_shopify_config,
    get_sync_config,
)
from shopsync.domain.errors import SyncError
from shopsync.domain.provisioning import MarketProvisioner
from shopsync.domain.reset import StorefrontReset
from shopsync.domain.sync import (
    FlowOutcome,
    SyncAttributes,
    SyncCategories,
    SyncPrices,
    SyncProductOrder,
    SyncProducts,
    SyncRelatedProducts,
    SyncStock,
    report_flow,
)

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Awaitable, Callable, Sequence

    from shopsync.adapters.shopify import ShopifyStorefront
    from shopsync.config import SyncConfig
    from shopsync.domain.ports import CatalogSource, Notifier
    from shopsync.domain.reset import ResetSummary
    from shopsync.domain.sync import FlowSummary

log = getLogger(__name__)

DAILY_FLOWS: Final = (
    "products",
    "categories",
    "attributes",
    "prices",
    "stock",
    "product order",
    "related products",
)


@dataclass(slots=True)
class SyncContext:
    """Adapters shared by every flow of one run."""

    source: CatalogSource
    storefront: ShopifyStorefront
    notifier: Notifier
    config: SyncConfig
    provisioner: MarketProvisioner

    def flow(self, name: str) -> Callable[[], Awaitable[FlowSummary]]:
        store = self.storefront
        match name:
            case "products":
                return SyncProducts(
                    self.source, store.identity, store.products, store.translations, self.config
                ).run
            case "categories":
                return SyncCategories(
                    self.source, store.identity, store.collections, store.translations, self.config
                ).run
            case "attributes":
                return SyncAttributes(
                    self.source, store.identity, store.metafields, store.translations, self.config
                ).run
            case "prices":
                return SyncPrices(
                    self.source,
                    store.identity,
                    store.pricing,
                    self.provisioner,
                    self.config,
                    self.provisioner.settings,
                ).run
            case "stock":
                return SyncStock(self.source, store.identity, store.inventory, self.config).run
            case "product order":
                return SyncProductOrder(
                    self.source, store.identity, store.collections, self.config
                ).run
            case "related products":
                return SyncRelatedProducts(
                    self.source, store.identity, store.metafields, self.config
                ).run
            case _:
                raise ValueError(f"Unknown flow {name!r}")


def build_context(
    source: CatalogSource,
    storefront: ShopifyStorefront,
    notifier: Notifier,
    config: SyncConfig | None = None,
    settings: MarketSettings | None = None,
) -> SyncContext:
    return SyncContext(
        source=source,
        storefront=storefront,
        notifier=notifier,
        config=config or get_sync_config(),
        provisioner=MarketProvisioner(storefront.markets, settings or MarketSettings()),
    )


@asynccontextmanager
async def notifier_scope(notifier: Notifier | None = None) -> AsyncIterator[Notifier]:
    """Use the caller's notifier, or open and later close the configured one."""

    if notifier is not None:
        yield notifier
        return
    async with open_notifier(get_notification_config()) as owned:
        yield owned


@asynccontextmanager
async def open_context(notifier: Notifier | None = None) -> AsyncIterator[SyncContext]:
    """Open the ERP and storefront clients from the environment."""

    erp_config = get_erp_config()
    shopify_config = get_shopify_config()
    sync_config = get_sync_config()
    async with (
        notifier_scope(notifier) as effective_notifier,
        ErpClient(erp_config) as source,
        open_storefront(shopify_config, sync_config=sync_config) as storefront,
    ):
        yield build_context(source, storefront, effective_notifier, sync_config)


async def run_flows(context: SyncContext, names: Sequence[str]) -> list[FlowOutcome]:
    """Run flows one after another; a failed flow is reported and the next one starts."""

    outcomes: list[FlowOutcome] = []
    for name in names:
        outcomes.append(await report_flow(name, context.flow(name), context.notifier))
    return outcomes


async def run_daily(context: SyncContext) -> list[FlowOutcome]:
    outcomes = await run_flows(context, DAILY_FLOWS)
    try:
        await context.source.trigger_file_sync()
    except SyncError as exc:
        log.warning("File sync trigger failed: %s", exc)
        context.notifier.warning(f"file sync trigger failed: {exc}")
    failed = [outcome.name for outcome in outcomes if not outcome.ok]
    if failed:
        log.warning("Daily sync finished with failures: %s", ", ".join(failed))
    else:
        log.info("Daily sync finished")
    return outcomes


async def _run_one(name: str, notifier: Notifier | None) -> FlowOutcome:
    async with open_context(notifier) as context:
        (outcome,) = await run_flows(context, (name,))
    return outcome


def sync_products(*, notifier: Notifier | None = None) -> FlowOutcome:
    return asyncio.run(_run_one("products", notifier))


def sync_categories(*, notifier: Notifier | None = None) -> FlowOutcome:
    return asyncio.run(_run_one("categories", notifier))


def sync_attributes(*, notifier: Notifier | None = None) -> FlowOutcome:
    return asyncio.run(_run_one("attributes", notifier))


def sync_prices(*, notifier: Notifier | None = None) -> FlowOutcome:
    return asyncio.run(_run_one("prices", notifier))


def sync_stock(*, notifier: Notifier | None = None) -> FlowOutcome:
    return asyncio.run(_run_one("stock", notifier))


def sync_product_order(*, notifier: Notifier | None = None) -> FlowOutcome:
    return asyncio.run(_run_one("product order", notifier))


def sync_related_products(*, notifier: Notifier | None = None) -> FlowOutcome:
    return asyncio.run(_run_one("related products", notifier))


def run_daily_sync(*, notifier: Notifier | None = None) -> list[FlowOutcome]:
    """Run every flow in order, then ask the ERP to sync its files."""

    async def _daily() -> list[FlowOutcome]:
        async with open_context(notifier) as context:
            return await run_daily(context)

    return asyncio.run(_daily())


def trigger_file_sync() -> None:
    async def _trigger() -> None:
        async with ErpClient(get_erp_config()) as source:
            await source.trigger_file_sync()

    asyncio.run(_trigger())


def wipe_storefront(
    *, notifier: Notifier | None = None, timeout_seconds: float | None = None
) -> ResetSummary:
    """Delete every storefront resource the sync manages."""

    async def _wipe() -> ResetSummary:
        config = get_sync_config()
        async with (
            notifier_scope(notifier) as effective_notifier,
            open_storefront(get_shopify_config(), sync_config=config) as storefront,
        ):
            reset = StorefrontReset(
                storefront.reset,
                effective_notifier,
                concurrency=config.reset_concurrency,
                timeout_seconds=timeout_seconds or config.reset_timeout_seconds,
            )
            return await reset.run()

    return asyncio.run(_wipe())
