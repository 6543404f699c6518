"""Capability ports for the storefront platform.

Each protocol is one named operation group. Flows receive only the groups they
use, so no runtime capability probing is needed.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from shopsync.domain.model import (
        Catalog,
        CatalogDetails,
        CollectionMove,
        InventoryResolution,
        Market,
        MetafieldDefinition,
        MetafieldRecord,
        MetafieldValue,
        NewMetafieldDefinition,
        Page,
        PriceList,
        Product,
        Publication,
        ResetKind,
        SkuResolution,
        StockQuantity,
        VariantPrice,
    )


@runtime_checkable
class IdentityResolver(Protocol):
    async def resolve_by_sku(self, sku: str) -> SkuResolution: ...

    async def resolve_inventory_item(self, sku: str) -> InventoryResolution: ...

    async def product_id_for_variant(self, variant_id: str) -> str | None: ...


@runtime_checkable
class ProductGateway(Protocol):
    async def create_product(self, product: Product) -> str: ...

    async def update_product(self, product_id: str, product: Product) -> None: ...

    async def primary_variant_id(self, product_id: str) -> str | None: ...

    async def update_variant_identifiers(
        self, product_id: str, variant_id: str, product: Product
    ) -> None: ...


@runtime_checkable
class CollectionGateway(Protocol):
    async def find_collection_by_title(self, title: str) -> str | None: ...

    async def create_collection(self, title: str) -> str: ...

    async def update_collection(self, collection_id: str, title: str) -> None: ...

    async def add_products(self, collection_id: str, product_ids: Sequence[str]) -> None: ...

    async def set_manual_sort(self, collection_id: str) -> None: ...

    async def reorder_products(
        self, collection_id: str, moves: Sequence[CollectionMove]
    ) -> None: ...


@runtime_checkable
class TranslationGateway(Protocol):
    async def register_translation(self, resource_id: str, key: str, value: str) -> bool:
        """Register a Hebrew translation; return False when there is nothing to translate."""
        ...


@runtime_checkable
class MetafieldGateway(Protocol):
    async def list_definitions(self, namespace: str) -> list[MetafieldDefinition]: ...

    async def create_definition(self, definition: NewMetafieldDefinition) -> MetafieldDefinition: ...

    async def set_metafields(self, values: Sequence[MetafieldValue]) -> list[MetafieldRecord]: ...


@runtime_checkable
class MarketGateway(Protocol):
    async def list_markets(self) -> list[Market]: ...

    async def create_market(
        self, *, name: str, handle: str, country_code: str, currency: str
    ) -> Market: ...

    async def update_market_currency(self, market_id: str, currency: str) -> None: ...

    async def find_catalog_by_title(self, title: str) -> Catalog | None: ...

    async def create_catalog(self, title: str, market_id: str) -> Catalog: ...

    async def market_has_catalog(self, market_id: str, catalog_id: str) -> bool: ...

    async def attach_catalog(self, market_id: str, catalog_id: str) -> None: ...

    async def catalog_details(self, catalog_id: str) -> CatalogDetails: ...

    async def create_publication(self, catalog_id: str) -> Publication: ...

    async def enable_auto_publish(self, publication_id: str) -> Publication: ...

    async def create_price_list(self, catalog_id: str, name: str, currency: str) -> PriceList: ...


@runtime_checkable
class PricingGateway(Protocol):
    async def update_variant_prices(
        self, product_id: str, prices: Sequence[VariantPrice]
    ) -> None: ...

    async def add_fixed_prices(
        self, price_list_id: str, currency: str, prices: Sequence[VariantPrice]
    ) -> None: ...


@runtime_checkable
class InventoryGateway(Protocol):
    async def primary_location_id(self) -> str:
        """Inventory location for every write; implementations look it up once."""
        ...

    async def mark_tracked(self, inventory_item_id: str) -> None: ...

    async def activate(self, inventory_item_id: str, location_id: str) -> None: ...

    async def set_on_hand(self, location_id: str, quantities: Sequence[StockQuantity]) -> None: ...


@runtime_checkable
class ResetGateway(Protocol):
    async def list_page(self, kind: ResetKind, after: str | None) -> Page[str]: ...

    async def delete(self, kind: ResetKind, resource_id: str) -> None: ...


__all__ = [
    "CollectionGateway",
    "IdentityResolver",
    "InventoryGateway",
    "MarketGateway",
    "MetafieldGateway",
    "PricingGateway",
    "ProductGateway",
    "ResetGateway",
    "TranslationGateway",
]
