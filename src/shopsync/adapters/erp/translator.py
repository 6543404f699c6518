"""Translate ERP payloads into domain records."""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

from shopsync.domain.model import (
    AttributeAssignment,
    AttributeCatalog,
    AttributeDefinition,
    CategoryAssignment,
    OrderAssignment,
    PriceRow,
    Product,
    ProductPage,
    RelatedAssignment,
    StockRow,
)

if TYPE_CHECKING:
    from .schema import (
        AttributesResponse,
        CategoriesResponse,
        PricePayload,
        ProductOrderResponse,
        ProductPayload,
        ProductsResponse,
        SimilarProductsResponse,
        StockPayload,
    )

_CURRENCY_ALIASES = {
    "$": "USD",
    'ש"ח': "ILS",
    "₪": "ILS",
}


def normalize_currency(raw: str) -> str:
    value = raw.strip()
    return _CURRENCY_ALIASES.get(value, value.upper())


def round_quantity(balance: float) -> int:
    """Round half away from zero; non-finite balances count as zero."""
    if not math.isfinite(balance):
        return 0
    return int(math.copysign(math.floor(abs(balance) + 0.5), balance))


def parse_product(payload: ProductPayload) -> Product:
    return Product(
        sku=payload.item_key.strip(),
        hebrew_title=payload.item_name,
        english_title=payload.foreign_name,
        barcode=payload.barcode,
        is_published=payload.status,
    )


def parse_product_page(response: ProductsResponse) -> ProductPage:
    return ProductPage(
        products=tuple(parse_product(item) for item in response.products),
        total_pages=response.total_pages,
    )


def parse_category_assignments(response: CategoriesResponse) -> list[CategoryAssignment]:
    return [
        CategoryAssignment(sku=result.sku, title_hebrew=category.hebrew, title_english=category.english)
        for result in response.results
        for category in result.categories
        if category.hebrew or category.english
    ]


def parse_attribute_catalog(response: AttributesResponse) -> AttributeCatalog:
    return AttributeCatalog(
        definitions=tuple(
            AttributeDefinition(
                attribute_id=item.note_id, name_hebrew=item.name, name_english=item.name_english
            )
            for item in response.main
        ),
        assignments=tuple(
            AttributeAssignment(
                sku=item.sku,
                attribute_id=item.note_id,
                value_hebrew=item.note,
                value_english=item.note_english,
            )
            for item in response.products
        ),
    )


def parse_price(payload: PricePayload) -> PriceRow | None:
    if payload.price is None:
        return None
    return PriceRow(
        sku=payload.item_key,
        currency=normalize_currency(payload.currency_code),
        amount=payload.price,
    )


def parse_stock(payload: StockPayload) -> StockRow:
    return StockRow(sku=payload.item_key, quantity=round_quantity(payload.balance))


def parse_order_assignments(response: ProductOrderResponse) -> list[OrderAssignment]:
    return [
        OrderAssignment(
            sku=product.sku,
            category_title_hebrew=category.value,
            category_title_english=category.english,
            order_number=category.order_number,
        )
        for product in response.products
        for category in product.categories
    ]


def parse_related(response: SimilarProductsResponse) -> list[RelatedAssignment]:
    return [
        RelatedAssignment(sku=product.sku, similar_skus=tuple(product.similar_skus))
        for product in response.products
    ]
