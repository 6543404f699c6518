"""Value types exchanged between the ERP, the flows and the storefront."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum


def _pick_title(english: str, hebrew: str) -> str:
    return english.strip() or hebrew.strip()


# --- source records -----------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Product:
    sku: str
    hebrew_title: str = ""
    english_title: str = ""
    barcode: str = ""
    description: str = ""
    is_published: bool = False

    @property
    def title(self) -> str:
        return _pick_title(self.english_title, self.hebrew_title)


@dataclass(frozen=True, slots=True)
class ProductPage:
    products: tuple[Product, ...]
    total_pages: int


@dataclass(frozen=True, slots=True)
class CategoryAssignment:
    sku: str
    title_hebrew: str = ""
    title_english: str = ""

    @property
    def title(self) -> str:
        return _pick_title(self.title_english, self.title_hebrew)


@dataclass(frozen=True, slots=True)
class AttributeDefinition:
    attribute_id: int
    name_hebrew: str = ""
    name_english: str = ""


@dataclass(frozen=True, slots=True)
class AttributeAssignment:
    sku: str
    attribute_id: int
    value_hebrew: str = ""
    value_english: str = ""


@dataclass(frozen=True, slots=True)
class AttributeCatalog:
    definitions: tuple[AttributeDefinition, ...]
    assignments: tuple[AttributeAssignment, ...]


@dataclass(frozen=True, slots=True)
class PriceRow:
    sku: str
    currency: str
    amount: float


@dataclass(frozen=True, slots=True)
class StockRow:
    sku: str
    quantity: int


@dataclass(frozen=True, slots=True)
class OrderAssignment:
    sku: str
    category_title_hebrew: str
    category_title_english: str
    order_number: int

    @property
    def category_title(self) -> str:
        return _pick_title(self.category_title_english, self.category_title_hebrew)


@dataclass(frozen=True, slots=True)
class RelatedAssignment:
    sku: str
    similar_skus: tuple[str, ...] = ()


# --- identity -----------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Found:
    product_id: str
    variant_id: str


@dataclass(frozen=True, slots=True)
class InventoryItemFound:
    variant_id: str
    inventory_item_id: str
    tracked: bool


@dataclass(frozen=True, slots=True)
class NotFound:
    sku: str


type SkuResolution = Found | NotFound
type InventoryResolution = InventoryItemFound | NotFound


# --- provisioning -------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Market:
    id: str
    name: str
    handle: str
    enabled: bool
    currency: str
    local_currencies: bool
    country_codes: frozenset[str] = field(default_factory=frozenset)


@dataclass(frozen=True, slots=True)
class Catalog:
    id: str
    title: str
    status: str = ""


@dataclass(frozen=True, slots=True)
class Publication:
    id: str
    auto_publish: bool


@dataclass(frozen=True, slots=True)
class PriceList:
    id: str
    name: str
    currency: str


@dataclass(frozen=True, slots=True)
class CatalogDetails:
    catalog_id: str
    publication: Publication | None = None
    price_list: PriceList | None = None


@dataclass(frozen=True, slots=True)
class IsraelMarketResources:
    """The provisioned chain that localized prices are written through."""

    market_id: str
    catalog_id: str
    publication_id: str
    price_list_id: str

    def __post_init__(self) -> None:
        for name in ("market_id", "catalog_id", "publication_id", "price_list_id"):
            if not getattr(self, name).strip():
                raise ValueError(f"IsraelMarketResources.{name} must not be empty")


# --- resolved inputs and write payloads ---------------------------------------------


@dataclass(frozen=True, slots=True)
class ResolvedPriceInput:
    sku: str
    product_id: str
    variant_id: str
    base_amount: float
    local_amount: float


@dataclass(frozen=True, slots=True)
class ResolvedStockInput:
    sku: str
    inventory_item_id: str
    tracked: bool
    quantity: int


@dataclass(frozen=True, slots=True)
class VariantPrice:
    variant_id: str
    amount: float


@dataclass(frozen=True, slots=True)
class StockQuantity:
    inventory_item_id: str
    quantity: int


@dataclass(frozen=True, slots=True)
class CollectionMove:
    product_id: str
    new_position: int


@dataclass(frozen=True, slots=True)
class MetafieldDefinition:
    id: str
    namespace: str
    key: str
    name: str = ""


@dataclass(frozen=True, slots=True)
class NewMetafieldDefinition:
    namespace: str
    key: str
    name: str
    type: str
    owner_type: str = "PRODUCT"


@dataclass(frozen=True, slots=True)
class MetafieldValue:
    owner_id: str
    namespace: str
    key: str
    type: str
    value: str


@dataclass(frozen=True, slots=True)
class MetafieldRecord:
    id: str
    namespace: str
    key: str
    value: str


# --- destructive reset --------------------------------------------------------------


class ResetKind(StrEnum):
    PRODUCTS = "products"
    COLLECTIONS = "collections"
    METAFIELD_DEFINITIONS = "metafield definitions"
    PRICE_LISTS = "price lists"
    CATALOGS = "catalogs"
    MARKETS = "markets"


@dataclass(frozen=True, slots=True)
class Page[T]:
    items: tuple[T, ...]
    next_cursor: str | None = None
