"""Domain ports used by the reconciliation flows."""

from __future__ import annotations

from .notifications import Notifier
from .source import CatalogSource
from .storefront import (
    CollectionGateway,
    IdentityResolver,
    InventoryGateway,
    MarketGateway,
    MetafieldGateway,
    PricingGateway,
    ProductGateway,
    ResetGateway,
    TranslationGateway,
)

__all__ = [
    "CatalogSource",
    "CollectionGateway",
    "IdentityResolver",
    "InventoryGateway",
    "MarketGateway",
    "MetafieldGateway",
    "Notifier",
    "PricingGateway",
    "ProductGateway",
    "ResetGateway",
    "TranslationGateway",
]
