"""In-memory fakes for the ERP source and the storefront capability ports."""

from __future__ import annotations

import asyncio
from collections import Counter
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from shopsync.domain.model import (
    AttributeCatalog,
    Catalog,
    CatalogDetails,
    Found,
    InventoryItemFound,
    Market,
    MetafieldDefinition,
    MetafieldRecord,
    NotFound,
    PriceList,
    ProductPage,
    Publication,
)

if TYPE_CHECKING:
    from collections.abc import Sequence

    from shopsync.domain.model import (
        CategoryAssignment,
        CollectionMove,
        InventoryResolution,
        MetafieldValue,
        NewMetafieldDefinition,
        OrderAssignment,
        PriceRow,
        Product,
        RelatedAssignment,
        SkuResolution,
        StockQuantity,
        StockRow,
        VariantPrice,
    )


@dataclass
class FakeSource:
    products: list[Product] = field(default_factory=list)
    page_size: int | None = None
    categories: list[CategoryAssignment] = field(default_factory=list)
    attributes: AttributeCatalog = field(default_factory=lambda: AttributeCatalog((), ()))
    prices: list[PriceRow] = field(default_factory=list)
    stock: list[StockRow] = field(default_factory=list)
    order: list[OrderAssignment] = field(default_factory=list)
    related: list[RelatedAssignment] = field(default_factory=list)
    file_sync_error: Exception | None = None
    file_syncs: int = 0
    requested_pages: list[int] = field(default_factory=list)

    async def list_products(self, *, page: int, page_size: int) -> ProductPage:
        self.requested_pages.append(page)
        size = self.page_size or page_size
        total_pages = max(1, -(-len(self.products) // size))
        start = (page - 1) * size
        return ProductPage(tuple(self.products[start : start + size]), total_pages)

    async def list_category_assignments(self) -> list[CategoryAssignment]:
        return list(self.categories)

    async def list_attributes(self) -> AttributeCatalog:
        return self.attributes

    async def list_prices(self) -> list[PriceRow]:
        return list(self.prices)

    async def list_stock(self) -> list[StockRow]:
        return list(self.stock)

    async def list_product_order(self) -> list[OrderAssignment]:
        return list(self.order)

    async def list_related(self) -> list[RelatedAssignment]:
        return list(self.related)

    async def trigger_file_sync(self) -> None:
        if self.file_sync_error is not None:
            raise self.file_sync_error
        self.file_syncs += 1


@dataclass
class FakeShop:
    """A tiny storefront: products, collections, metafields, prices and stock.

    ``failures`` maps a method name to an exception raised on every call.
    """

    calls: Counter[str] = field(default_factory=Counter)
    failures: dict[str, Exception] = field(default_factory=dict)
    # SKU -> (product id, variant id)
    variants: dict[str, tuple[str, str]] = field(default_factory=dict)
    product_titles: dict[str, str] = field(default_factory=dict)
    product_variants: dict[str, str] = field(default_factory=dict)
    collections: dict[str, str] = field(default_factory=dict)
    members: dict[str, list[str]] = field(default_factory=dict)
    manual_sort: set[str] = field(default_factory=set)
    moves: dict[str, list[CollectionMove]] = field(default_factory=dict)
    translations: list[tuple[str, str, str]] = field(default_factory=list)
    definitions: dict[tuple[str, str], MetafieldDefinition] = field(default_factory=dict)
    metafields: dict[tuple[str, str, str], str] = field(default_factory=dict)
    variant_prices: dict[str, float] = field(default_factory=dict)
    fixed_prices: dict[str, tuple[str, str, float]] = field(default_factory=dict)
    # SKU -> (inventory item id, tracked)
    inventory_items: dict[str, tuple[str, bool]] = field(default_factory=dict)
    location_id: str = "gid://shopify/Location/1"
    active: set[tuple[str, str]] = field(default_factory=set)
    on_hand: dict[str, int] = field(default_factory=dict)
    _ids: Counter[str] = field(default_factory=Counter)

    def _call(self, name: str) -> None:
        self.calls[name] += 1
        failure = self.failures.get(name)
        if failure is not None:
            raise failure

    def _new_id(self, kind: str) -> str:
        self._ids[kind] += 1
        return f"gid://shopify/{kind}/{self._ids[kind]}"

    def add_product(self, sku: str, title: str = "Existing") -> str:
        product_id = self._new_id("Product")
        variant_id = self._new_id("ProductVariant")
        self.variants[sku] = (product_id, variant_id)
        self.product_titles[product_id] = title
        self.product_variants[product_id] = variant_id
        return product_id

    def add_inventory_item(self, sku: str, *, tracked: bool = True) -> str:
        item_id = self._new_id("InventoryItem")
        self.inventory_items[sku] = (item_id, tracked)
        return item_id

    # IdentityResolver

    async def resolve_by_sku(self, sku: str) -> SkuResolution:
        self._call("resolve_by_sku")
        await asyncio.sleep(0)
        entry = self.variants.get(sku.strip())
        if entry is None:
            return NotFound(sku=sku)
        return Found(product_id=entry[0], variant_id=entry[1])

    async def resolve_inventory_item(self, sku: str) -> InventoryResolution:
        self._call("resolve_inventory_item")
        entry = self.inventory_items.get(sku.strip())
        if entry is None:
            return NotFound(sku=sku)
        variant = self.variants.get(sku.strip(), ("", ""))[1]
        return InventoryItemFound(variant_id=variant, inventory_item_id=entry[0], tracked=entry[1])

    async def product_id_for_variant(self, variant_id: str) -> str | None:
        self._call("product_id_for_variant")
        for product_id, variant in self.product_variants.items():
            if variant == variant_id:
                return product_id
        return None

    # ProductGateway

    async def create_product(self, product: Product) -> str:
        self._call("create_product")
        product_id = self._new_id("Product")
        self.product_titles[product_id] = product.title
        self.product_variants[product_id] = self._new_id("ProductVariant")
        return product_id

    async def update_product(self, product_id: str, product: Product) -> None:
        self._call("update_product")
        self.product_titles[product_id] = product.title

    async def primary_variant_id(self, product_id: str) -> str | None:
        self._call("primary_variant_id")
        return self.product_variants.get(product_id)

    async def update_variant_identifiers(
        self, product_id: str, variant_id: str, product: Product
    ) -> None:
        self._call("update_variant_identifiers")
        self.variants[product.sku.strip()] = (product_id, variant_id)

    # CollectionGateway

    async def find_collection_by_title(self, title: str) -> str | None:
        self._call("find_collection_by_title")
        for collection_id, existing in self.collections.items():
            if existing.lower() == title.strip().lower():
                return collection_id
        return None

    async def create_collection(self, title: str) -> str:
        self._call("create_collection")
        collection_id = self._new_id("Collection")
        self.collections[collection_id] = title
        return collection_id

    async def update_collection(self, collection_id: str, title: str) -> None:
        self._call("update_collection")
        self.collections[collection_id] = title

    async def add_products(self, collection_id: str, product_ids: Sequence[str]) -> None:
        self._call("add_products")
        members = self.members.setdefault(collection_id, [])
        members.extend(pid for pid in product_ids if pid not in members)

    async def set_manual_sort(self, collection_id: str) -> None:
        self._call("set_manual_sort")
        self.manual_sort.add(collection_id)

    async def reorder_products(self, collection_id: str, moves: Sequence[CollectionMove]) -> None:
        self._call("reorder_products")
        self.moves.setdefault(collection_id, []).extend(moves)

    # TranslationGateway

    async def register_translation(self, resource_id: str, key: str, value: str) -> bool:
        self._call("register_translation")
        self.translations.append((resource_id, key, value))
        return True

    # MetafieldGateway

    async def list_definitions(self, namespace: str) -> list[MetafieldDefinition]:
        self._call("list_definitions")
        return [item for (ns, _), item in self.definitions.items() if ns == namespace]

    async def create_definition(self, definition: NewMetafieldDefinition) -> MetafieldDefinition:
        self._call("create_definition")
        created = MetafieldDefinition(
            id=self._new_id("MetafieldDefinition"),
            namespace=definition.namespace,
            key=definition.key,
            name=definition.name,
        )
        self.definitions[(definition.namespace, definition.key)] = created
        return created

    async def set_metafields(self, values: Sequence[MetafieldValue]) -> list[MetafieldRecord]:
        self._call("set_metafields")
        records: list[MetafieldRecord] = []
        for value in values:
            self.metafields[(value.owner_id, value.namespace, value.key)] = value.value
            records.append(
                MetafieldRecord(
                    id=f"{value.owner_id}/{value.namespace}.{value.key}",
                    namespace=value.namespace,
                    key=value.key,
                    value=value.value,
                )
            )
        return records

    # PricingGateway

    async def update_variant_prices(self, product_id: str, prices: Sequence[VariantPrice]) -> None:
        self._call("update_variant_prices")
        for price in prices:
            self.variant_prices[price.variant_id] = price.amount

    async def add_fixed_prices(
        self, price_list_id: str, currency: str, prices: Sequence[VariantPrice]
    ) -> None:
        self._call("add_fixed_prices")
        for price in prices:
            self.fixed_prices[price.variant_id] = (price_list_id, currency, price.amount)

    # InventoryGateway

    async def primary_location_id(self) -> str:
        self._call("primary_location_id")
        return self.location_id

    async def mark_tracked(self, inventory_item_id: str) -> None:
        self._call("mark_tracked")
        for sku, (item_id, _) in list(self.inventory_items.items()):
            if item_id == inventory_item_id:
                self.inventory_items[sku] = (item_id, True)

    async def activate(self, inventory_item_id: str, location_id: str) -> None:
        self._call("activate")
        self.active.add((inventory_item_id, location_id))

    async def set_on_hand(self, location_id: str, quantities: Sequence[StockQuantity]) -> None:
        self._call("set_on_hand")
        for quantity in quantities:
            self.on_hand[quantity.inventory_item_id] = quantity.quantity


@dataclass
class FakeMarkets:
    """Market/catalog/publication/price-list state for provisioning tests."""

    calls: Counter[str] = field(default_factory=Counter)
    markets: list[Market] = field(default_factory=list)
    catalogs: dict[str, Catalog] = field(default_factory=dict)
    attachments: dict[str, set[str]] = field(default_factory=dict)
    publications: dict[str, Publication] = field(default_factory=dict)
    price_lists: dict[str, PriceList] = field(default_factory=dict)
    # attach_catalog succeeds without attaching
    ignore_attach: bool = False
    _ids: Counter[str] = field(default_factory=Counter)

    def _new_id(self, kind: str) -> str:
        self._ids[kind] += 1
        return f"gid://shopify/{kind}/{self._ids[kind]}"

    async def list_markets(self) -> list[Market]:
        self.calls["list_markets"] += 1
        return list(self.markets)

    async def create_market(
        self, *, name: str, handle: str, country_code: str, currency: str
    ) -> Market:
        self.calls["create_market"] += 1
        market = Market(
            id=self._new_id("Market"),
            name=name,
            handle=handle,
            enabled=True,
            currency=currency,
            local_currencies=False,
            country_codes=frozenset({country_code}),
        )
        self.markets.append(market)
        return market

    async def update_market_currency(self, market_id: str, currency: str) -> None:
        self.calls["update_market_currency"] += 1
        self.markets = [
            Market(
                id=m.id,
                name=m.name,
                handle=m.handle,
                enabled=m.enabled,
                currency=currency,
                local_currencies=False,
                country_codes=m.country_codes,
            )
            if m.id == market_id
            else m
            for m in self.markets
        ]

    async def find_catalog_by_title(self, title: str) -> Catalog | None:
        self.calls["find_catalog_by_title"] += 1
        for catalog in self.catalogs.values():
            if catalog.title == title:
                return catalog
        return None

    async def create_catalog(self, title: str, market_id: str) -> Catalog:
        self.calls["create_catalog"] += 1
        catalog = Catalog(id=self._new_id("Catalog"), title=title, status="ACTIVE")
        self.catalogs[catalog.id] = catalog
        self.attachments.setdefault(market_id, set()).add(catalog.id)
        return catalog

    async def market_has_catalog(self, market_id: str, catalog_id: str) -> bool:
        self.calls["market_has_catalog"] += 1
        return catalog_id in self.attachments.get(market_id, set())

    async def attach_catalog(self, market_id: str, catalog_id: str) -> None:
        self.calls["attach_catalog"] += 1
        if not self.ignore_attach:
            self.attachments.setdefault(market_id, set()).add(catalog_id)

    async def catalog_details(self, catalog_id: str) -> CatalogDetails:
        self.calls["catalog_details"] += 1
        return CatalogDetails(
            catalog_id=catalog_id,
            publication=self.publications.get(catalog_id),
            price_list=self.price_lists.get(catalog_id),
        )

    async def create_publication(self, catalog_id: str) -> Publication:
        self.calls["create_publication"] += 1
        publication = Publication(id=self._new_id("Publication"), auto_publish=True)
        self.publications[catalog_id] = publication
        return publication

    async def enable_auto_publish(self, publication_id: str) -> Publication:
        self.calls["enable_auto_publish"] += 1
        for catalog_id, publication in self.publications.items():
            if publication.id == publication_id:
                self.publications[catalog_id] = Publication(id=publication_id, auto_publish=True)
                return self.publications[catalog_id]
        raise AssertionError(f"unknown publication {publication_id}")

    async def create_price_list(self, catalog_id: str, name: str, currency: str) -> PriceList:
        self.calls["create_price_list"] += 1
        price_list = PriceList(id=self._new_id("PriceList"), name=name, currency=currency)
        self.price_lists[catalog_id] = price_list
        return price_list


@dataclass
class RecordingNotifier:
    messages: list[tuple[str, str]] = field(default_factory=list)

    def info(self, message: str) -> None:
        self.messages.append(("info", message))

    def warning(self, message: str) -> None:
        self.messages.append(("warning", message))

    def error(self, message: str) -> None:
        self.messages.append(("error", message))

    def success(self, message: str) -> None:
        self.messages.append(("success", message))

    def of(self, level: str) -> list[str]:
        return [message for lvl, message in self.messages if lvl == level]
