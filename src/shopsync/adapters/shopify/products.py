"""Product create/update against the Admin API."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from shopsync.domain.errors import RecordValidationError, SyncError

from .schema import IdNode, ProductVariantsNode

if TYPE_CHECKING:
    from shopsync.domain.model import Product

    from .client import ShopifyGraphQLClient

PRODUCT_CREATE_MUTATION = """
mutation productCreate($input: ProductInput!) {
    productCreate(input: $input) {
        product { id }
        userErrors { field message }
    }
}
"""

PRODUCT_UPDATE_MUTATION = """
mutation productUpdate($input: ProductInput!) {
    productUpdate(input: $input) {
        product { id }
        userErrors { field message }
    }
}
"""

PRIMARY_VARIANT_QUERY = """
query productVariant($id: ID!) {
    product(id: $id) {
        variants(first: 1) { nodes { id } }
    }
}
"""

VARIANTS_BULK_UPDATE_MUTATION = """
mutation productVariantsBulkUpdate($productId: ID!, $variants: [ProductVariantsBulkInput!]!) {
    productVariantsBulkUpdate(productId: $productId, variants: $variants) {
        productVariants { id }
        userErrors { field message }
    }
}
"""


def product_status(is_published: bool) -> str:
    return "ACTIVE" if is_published else "DRAFT"


def _product_input(product: Product) -> dict[str, Any]:
    payload: dict[str, Any] = {"status": product_status(product.is_published)}
    if product.title:
        payload["title"] = product.title
    if product.description.strip():
        payload["descriptionHtml"] = product.description
    return payload


@dataclass(slots=True)
class ShopifyProducts:
    graphql: ShopifyGraphQLClient

    async def create_product(self, product: Product) -> str:
        if not product.title:
            raise RecordValidationError("empty_title", "shopify product title is required")
        payload = await self.graphql.mutate(
            "productCreate", PRODUCT_CREATE_MUTATION, {"input": _product_input(product)}
        )
        created = payload.get("product")
        if not created:
            raise SyncError("shopify product create returned empty product id")
        return IdNode.model_validate(created).id

    async def update_product(self, product_id: str, product: Product) -> None:
        product_input = {"id": product_id, **_product_input(product)}
        await self.graphql.mutate(
            "productUpdate", PRODUCT_UPDATE_MUTATION, {"input": product_input}
        )

    async def primary_variant_id(self, product_id: str) -> str | None:
        data = await self.graphql.execute(PRIMARY_VARIANT_QUERY, {"id": product_id})
        raw = data.get("product")
        if not raw:
            return None
        nodes = ProductVariantsNode.model_validate(raw).variants.nodes
        return nodes[0].id if nodes else None

    async def update_variant_identifiers(
        self, product_id: str, variant_id: str, product: Product
    ) -> None:
        variant: dict[str, Any] = {"id": variant_id}
        if product.sku.strip():
            variant["inventoryItem"] = {"sku": product.sku.strip()}
        if product.barcode.strip():
            variant["barcode"] = product.barcode.strip()
        await self.graphql.mutate(
            "productVariantsBulkUpdate",
            VARIANTS_BULK_UPDATE_MUTATION,
            {"productId": product_id, "variants": [variant]},
        )
