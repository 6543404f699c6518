"""Public interface for the Shopify Admin GraphQL adapter."""

from __future__ import annotations

from .client import ShopifyGraphQLClient, user_errors_from
from .collections import ShopifyCollections
from .identity import ShopifyIdentityResolver
from .inventory import ShopifyInventory
from .markets import ShopifyMarkets
from .metafields import ShopifyMetafields
from .pricing import ShopifyPricing
from .products import ShopifyProducts
from .reset import ShopifyReset
from .retry import call_with_retry, is_throttled
from .search import build_search_query
from .storefront import ShopifyStorefront, build_storefront, open_storefront
from .translations import ShopifyTranslations

__all__ = [
    "ShopifyCollections",
    "ShopifyGraphQLClient",
    "ShopifyIdentityResolver",
    "ShopifyInventory",
    "ShopifyMarkets",
    "ShopifyMetafields",
    "ShopifyPricing",
    "ShopifyProducts",
    "ShopifyReset",
    "ShopifyStorefront",
    "ShopifyTranslations",
    "build_search_query",
    "build_storefront",
    "call_with_retry",
    "is_throttled",
    "open_storefront",
]
