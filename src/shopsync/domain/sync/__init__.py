"""Reconciliation flows, one per entity kind."""

from __future__ import annotations

from .attributes import SyncAttributes
from .categories import SyncCategories
from .prices import SyncPrices
from .product_order import SyncProductOrder
from .products import SyncProducts
from .related import SyncRelatedProducts
from .stock import SyncStock
from .summary import FlowOutcome, FlowSummary, report_flow

__all__ = [
    "FlowOutcome",
    "FlowSummary",
    "SyncAttributes",
    "SyncCategories",
    "SyncPrices",
    "SyncProductOrder",
    "SyncProducts",
    "SyncRelatedProducts",
    "SyncStock",
    "report_flow",
]
