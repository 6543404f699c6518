from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence

    from shopsync.domain.model import VariantPrice

    from .client import ShopifyGraphQLClient

VARIANT_PRICES_MUTATION = """
mutation productVariantsBulkUpdate($productId: ID!, $variants: [ProductVariantsBulkInput!]!) {
    productVariantsBulkUpdate(productId: $productId, variants: $variants) {
        productVariants { id }
        userErrors { field message }
    }
}
"""

FIXED_PRICES_MUTATION = """
mutation priceListFixedPricesAdd($priceListId: ID!, $prices: [PriceListPriceInput!]!) {
    priceListFixedPricesAdd(priceListId: $priceListId, prices: $prices) {
        prices { variant { id } }
        userErrors { field message }
    }
}
"""


def format_amount(amount: float) -> str:
    return f"{amount:.2f}"


@dataclass(slots=True)
class ShopifyPricing:
    graphql: ShopifyGraphQLClient

    async def update_variant_prices(
        self, product_id: str, prices: Sequence[VariantPrice]
    ) -> None:
        if not prices:
            return
        await self.graphql.mutate(
            "productVariantsBulkUpdate",
            VARIANT_PRICES_MUTATION,
            {
                "productId": product_id,
                "variants": [
                    {"id": price.variant_id, "price": format_amount(price.amount)}
                    for price in prices
                ],
            },
        )

    async def add_fixed_prices(
        self, price_list_id: str, currency: str, prices: Sequence[VariantPrice]
    ) -> None:
        if not prices:
            return
        await self.graphql.mutate(
            "priceListFixedPricesAdd",
            FIXED_PRICES_MUTATION,
            {
                "priceListId": price_list_id,
                "prices": [
                    {
                        "variantId": price.variant_id,
                        "price": {"amount": format_amount(price.amount), "currencyCode": currency},
                    }
                    for price in prices
                ],
            },
        )
