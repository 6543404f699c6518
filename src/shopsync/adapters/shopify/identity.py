"""SKU to storefront identity resolution."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from shopsync.domain.model import Found, InventoryItemFound, NotFound

from .schema import InventoryVariantConnection, VariantConnection, VariantNode
from .search import build_search_query

if TYPE_CHECKING:
    from shopsync.domain.model import InventoryResolution, SkuResolution

    from .client import ShopifyGraphQLClient

VARIANT_BY_SKU_QUERY = """
query productVariantBySku($first: Int!, $query: String!) {
    productVariants(first: $first, query: $query) {
        nodes { id sku product { id } }
    }
}
"""

INVENTORY_ITEM_BY_SKU_QUERY = """
query inventoryItemBySku($first: Int!, $query: String!) {
    productVariants(first: $first, query: $query) {
        nodes { id sku inventoryItem { id tracked } }
    }
}
"""

VARIANT_PRODUCT_QUERY = """
query productVariant($id: ID!) {
    productVariant(id: $id) { id product { id } }
}
"""


@dataclass(slots=True)
class ShopifyIdentityResolver:
    """Resolve SKUs with a targeted variant search, first match wins."""

    graphql: ShopifyGraphQLClient

    async def resolve_by_sku(self, sku: str) -> SkuResolution:
        sku = sku.strip()
        if not sku:
            return NotFound(sku=sku)
        data = await self.graphql.execute(
            VARIANT_BY_SKU_QUERY, {"first": 1, "query": build_search_query("sku", sku)}
        )
        variants = VariantConnection.model_validate(data.get("productVariants") or {})
        if not variants.nodes:
            return NotFound(sku=sku)
        variant = variants.nodes[0]
        product_id = variant.product.id if variant.product else ""
        return Found(product_id=product_id, variant_id=variant.id.strip())

    async def resolve_inventory_item(self, sku: str) -> InventoryResolution:
        sku = sku.strip()
        if not sku:
            return NotFound(sku=sku)
        data = await self.graphql.execute(
            INVENTORY_ITEM_BY_SKU_QUERY, {"first": 1, "query": build_search_query("sku", sku)}
        )
        variants = InventoryVariantConnection.model_validate(data.get("productVariants") or {})
        variant = variants.nodes[0] if variants.nodes else None
        item = variant.inventory_item if variant else None
        if variant is None or item is None:
            return NotFound(sku=sku)
        return InventoryItemFound(
            variant_id=variant.id.strip(),
            inventory_item_id=item.id.strip(),
            tracked=item.tracked,
        )

    async def product_id_for_variant(self, variant_id: str) -> str | None:
        data = await self.graphql.execute(VARIANT_PRODUCT_QUERY, {"id": variant_id})
        raw = data.get("productVariant")
        if not raw:
            return None
        variant = VariantNode.model_validate(raw)
        return variant.product.id if variant.product and variant.product.id else None
