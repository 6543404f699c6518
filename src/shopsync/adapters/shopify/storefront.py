"""Wire the Shopify capability clients around one shared GraphQL transport."""

from __future__ import annotations

from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import TYPE_CHECKING

from shopsync.config.sync import SyncConfig

from .client import ShopifyGraphQLClient
from .collections import ShopifyCollections
from .identity import ShopifyIdentityResolver
from .inventory import ShopifyInventory
from .markets import ShopifyMarkets
from .metafields import ShopifyMetafields
from .pricing import ShopifyPricing
from .products import ShopifyProducts
from .reset import ShopifyReset
from .translations import ShopifyTranslations

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Callable

    from shopsync.adapters.http_resilience import ResilientClient
    from shopsync.config.http_resilience import ResilienceConfig
    from shopsync.config.shopify import ShopifyConfig


@dataclass(frozen=True, slots=True)
class ShopifyStorefront:
    graphql: ShopifyGraphQLClient
    identity: ShopifyIdentityResolver
    products: ShopifyProducts
    collections: ShopifyCollections
    translations: ShopifyTranslations
    metafields: ShopifyMetafields
    markets: ShopifyMarkets
    pricing: ShopifyPricing
    inventory: ShopifyInventory
    reset: ShopifyReset


def build_storefront(
    graphql: ShopifyGraphQLClient, config: SyncConfig | None = None
) -> ShopifyStorefront:
    config = config or SyncConfig()
    return ShopifyStorefront(
        graphql=graphql,
        identity=ShopifyIdentityResolver(graphql),
        products=ShopifyProducts(graphql),
        collections=ShopifyCollections(graphql),
        translations=ShopifyTranslations(graphql),
        metafields=ShopifyMetafields(graphql, page_size=config.metafield_definitions_page_size),
        markets=ShopifyMarkets(graphql, page_size=config.markets_page_size),
        pricing=ShopifyPricing(graphql),
        inventory=ShopifyInventory(graphql),
        reset=ShopifyReset(graphql, page_size=config.reset_page_size),
    )


@asynccontextmanager
async def open_storefront(
    config: ShopifyConfig,
    *,
    sync_config: SyncConfig | None = None,
    client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
) -> AsyncIterator[ShopifyStorefront]:
    """Yield a storefront whose HTTP client is closed on exit."""

    if client_factory is None:
        graphql = ShopifyGraphQLClient(config)
    else:
        graphql = ShopifyGraphQLClient(config, client_factory=client_factory)
    async with graphql:
        yield build_storefront(graphql, sync_config)
