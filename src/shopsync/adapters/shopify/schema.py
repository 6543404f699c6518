"""Pydantic models describing the Shopify Admin GraphQL payloads we read."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _blank_to_empty(value: object) -> object:
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    return value


class ShopifyBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class GraphQLErrorPayload(ShopifyBaseModel):
    message: str = ""
    path: list[str | int] | None = None
    extensions: dict[str, Any] = Field(default_factory=dict)

    def describe(self) -> str:
        message = self.message.strip()
        if self.path:
            return f"{message} (path: {self.path})"
        return message


class GraphQLEnvelope(ShopifyBaseModel):
    data: dict[str, Any] | None = None
    errors: list[GraphQLErrorPayload] = Field(default_factory=list)


class UserErrorPayload(ShopifyBaseModel):
    field: list[str] | None = None
    message: str = ""

    _normalize_message = field_validator("message", mode="before")(_blank_to_empty)


class PageInfo(ShopifyBaseModel):
    has_next_page: bool = Field(default=False, alias="hasNextPage")
    end_cursor: str | None = Field(default=None, alias="endCursor")

    @property
    def next_cursor(self) -> str | None:
        if self.has_next_page and self.end_cursor:
            return self.end_cursor
        return None


class IdNode(ShopifyBaseModel):
    id: str

    _normalize_id = field_validator("id", mode="before")(_blank_to_empty)


class IdConnection(ShopifyBaseModel):
    nodes: list[IdNode] = Field(default_factory=list)
    page_info: PageInfo = Field(default_factory=PageInfo, alias="pageInfo")


class VariantNode(ShopifyBaseModel):
    id: str
    sku: str | None = None
    product: IdNode | None = None


class VariantConnection(ShopifyBaseModel):
    nodes: list[VariantNode] = Field(default_factory=list)


class InventoryItemNode(ShopifyBaseModel):
    id: str
    tracked: bool = False


class InventoryVariantNode(ShopifyBaseModel):
    id: str
    sku: str | None = None
    inventory_item: InventoryItemNode | None = Field(default=None, alias="inventoryItem")


class InventoryVariantConnection(ShopifyBaseModel):
    nodes: list[InventoryVariantNode] = Field(default_factory=list)


class ProductVariantsNode(ShopifyBaseModel):
    variants: IdConnection = Field(default_factory=IdConnection)


class TranslatableContent(ShopifyBaseModel):
    key: str = ""
    value: str | None = None
    digest: str | None = None
    locale: str | None = None


class TranslatableResource(ShopifyBaseModel):
    resource_id: str = Field(default="", alias="resourceId")
    translatable_content: list[TranslatableContent] = Field(
        default_factory=list, alias="translatableContent"
    )


class CollectionNode(ShopifyBaseModel):
    id: str
    title: str = ""


class CollectionConnection(ShopifyBaseModel):
    nodes: list[CollectionNode] = Field(default_factory=list)


class MetafieldDefinitionNode(ShopifyBaseModel):
    id: str
    name: str = ""
    namespace: str = ""
    key: str = ""


class MetafieldDefinitionConnection(ShopifyBaseModel):
    nodes: list[MetafieldDefinitionNode] = Field(default_factory=list)
    page_info: PageInfo = Field(default_factory=PageInfo, alias="pageInfo")


class MetafieldNode(ShopifyBaseModel):
    id: str
    namespace: str = ""
    key: str = ""
    value: str = ""


class CurrencyCodeNode(ShopifyBaseModel):
    currency_code: str = Field(default="", alias="currencyCode")


class CurrencySettingsNode(ShopifyBaseModel):
    base_currency: CurrencyCodeNode = Field(default_factory=CurrencyCodeNode, alias="baseCurrency")
    local_currencies: bool = Field(default=False, alias="localCurrencies")


class RegionNode(ShopifyBaseModel):
    code: str | None = None


class RegionConnection(ShopifyBaseModel):
    nodes: list[RegionNode] = Field(default_factory=list)


class MarketNode(ShopifyBaseModel):
    id: str
    name: str = ""
    handle: str = ""
    enabled: bool = False
    currency_settings: CurrencySettingsNode = Field(
        default_factory=CurrencySettingsNode, alias="currencySettings"
    )
    regions: RegionConnection = Field(default_factory=RegionConnection)


class MarketConnection(ShopifyBaseModel):
    nodes: list[MarketNode] = Field(default_factory=list)
    page_info: PageInfo = Field(default_factory=PageInfo, alias="pageInfo")


class CatalogNode(ShopifyBaseModel):
    id: str
    title: str = ""
    status: str = ""


class CatalogConnection(ShopifyBaseModel):
    nodes: list[CatalogNode] = Field(default_factory=list)
    page_info: PageInfo = Field(default_factory=PageInfo, alias="pageInfo")


class PublicationNode(ShopifyBaseModel):
    id: str
    auto_publish: bool = Field(default=False, alias="autoPublish")


class PriceListNode(ShopifyBaseModel):
    id: str
    name: str = ""
    currency: str = ""


class CatalogDetailsNode(ShopifyBaseModel):
    id: str
    title: str = ""
    publication: PublicationNode | None = None
    price_list: PriceListNode | None = Field(default=None, alias="priceList")


class LocationNode(ShopifyBaseModel):
    id: str
    name: str = ""
    is_active: bool = Field(default=False, alias="isActive")


class LocationConnection(ShopifyBaseModel):
    nodes: list[LocationNode] = Field(default_factory=list)
