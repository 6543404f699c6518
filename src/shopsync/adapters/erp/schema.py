"""Pydantic models describing the ERP endpoint payloads."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _to_text(value: object) -> object:
    if value is None:
        return ""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    if isinstance(value, str):
        return value.strip()
    return value


class ErpBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class ProductPayload(ErpBaseModel):
    item_key: str = Field(default="", alias="ItemKey")
    item_name: str = Field(default="", alias="ItemName")
    foreign_name: str = Field(default="", alias="ForignName")
    barcode: str = Field(default="", alias="BarCode")
    status: bool = False

    _normalize_text = field_validator(
        "item_key", "item_name", "foreign_name", "barcode", mode="before"
    )(_to_text)

    @field_validator("status", mode="before")
    @classmethod
    def _parse_status(cls, value: object) -> object:
        return False if value is None else value


class ProductsResponse(ErpBaseModel):
    total_pages: int = Field(default=0, alias="totalPages")
    products: list[ProductPayload] = Field(default_factory=list)


class CategoryPayload(ErpBaseModel):
    hebrew: str = Field(default="", alias="NoteHebrew")
    english: str = Field(default="", alias="NoteEnglish")

    _normalize_text = field_validator("hebrew", "english", mode="before")(_to_text)


class CategoryResult(ErpBaseModel):
    sku: str = Field(default="", alias="kef")
    categories: list[CategoryPayload] = Field(default_factory=list)

    _normalize_sku = field_validator("sku", mode="before")(_to_text)


class CategoriesResponse(ErpBaseModel):
    results: list[CategoryResult] = Field(default_factory=list)


class AttributeMainPayload(ErpBaseModel):
    note_id: int = Field(alias="NoteID")
    name: str = Field(default="", alias="NoteName")
    name_english: str = Field(default="", alias="NoteNameEnglish")

    _normalize_text = field_validator("name", "name_english", mode="before")(_to_text)


class AttributeProductPayload(ErpBaseModel):
    sku: str = Field(default="", alias="KeF")
    note_id: int = Field(alias="NoteID")
    note: str = Field(default="", alias="Note")
    note_english: str = Field(default="", alias="NoteEnglish")

    _normalize_text = field_validator("sku", "note", "note_english", mode="before")(_to_text)


class AttributesResponse(ErpBaseModel):
    main: list[AttributeMainPayload] = Field(default_factory=list, alias="attributesMain")
    products: list[AttributeProductPayload] = Field(
        default_factory=list, alias="attributesProducts"
    )


class PricePayload(ErpBaseModel):
    item_key: str = Field(default="", alias="ItemKey")
    price: float | None = Field(default=None, alias="Price")
    currency_code: str = Field(default="", alias="CurrencyCode")

    _normalize_text = field_validator("item_key", "currency_code", mode="before")(_to_text)


class PricesResponse(ErpBaseModel):
    prices: list[PricePayload] = Field(default_factory=list)


class StockPayload(ErpBaseModel):
    item_key: str = Field(default="", alias="ITEMKEY")
    balance: float = Field(default=0.0, alias="ITEMWARHBAL")

    _normalize_key = field_validator("item_key", mode="before")(_to_text)

    @field_validator("balance", mode="before")
    @classmethod
    def _parse_balance(cls, value: object) -> object:
        return 0.0 if value is None else value


class StockResponse(ErpBaseModel):
    items: list[StockPayload] = Field(default_factory=list)


class OrderCategoryPayload(ErpBaseModel):
    value: str = Field(default="", alias="categoryValue")
    english: str = Field(default="", alias="categoryEnglish")
    order_number: int = Field(default=0, alias="orderNumber")

    _normalize_text = field_validator("value", "english", mode="before")(_to_text)


class OrderProductPayload(ErpBaseModel):
    sku: str = ""
    categories: list[OrderCategoryPayload] = Field(default_factory=list)

    _normalize_sku = field_validator("sku", mode="before")(_to_text)


class ProductOrderResponse(ErpBaseModel):
    products: list[OrderProductPayload] = Field(default_factory=list)


class SimilarProductPayload(ErpBaseModel):
    sku: str = ""
    similar_skus: list[str] = Field(default_factory=list, alias="similarSkus")

    _normalize_sku = field_validator("sku", mode="before")(_to_text)

    @field_validator("similar_skus", mode="before")
    @classmethod
    def _normalize_similar(cls, value: object) -> object:
        if value is None:
            return []
        if isinstance(value, list):
            return [str(item) for item in value if item is not None]
        return value


class SimilarProductsResponse(ErpBaseModel):
    products: list[SimilarProductPayload] = Field(default_factory=list)
