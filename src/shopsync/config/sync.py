"""Synchronization defaults for the reconciliation flows."""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_CONCURRENCY = 4
DEFAULT_RESET_CONCURRENCY = 5

ERP_PRODUCTS_PAGE_SIZE = 100
RESET_PAGE_SIZE = 50
METAFIELD_DEFINITIONS_PAGE_SIZE = 100
MARKETS_PAGE_SIZE = 50

METAFIELDS_BATCH_SIZE = 25
STOCK_BATCH_SIZE = 100
VARIANT_PRICES_BATCH_SIZE = 250
FIXED_PRICES_BATCH_SIZE = 250
REORDER_MOVES_BATCH_SIZE = 250

RESET_TIMEOUT_SECONDS = 30 * 60.0


@dataclass(frozen=True, slots=True)
class SyncConfig:
    concurrency: int = DEFAULT_CONCURRENCY
    reset_concurrency: int = DEFAULT_RESET_CONCURRENCY
    products_page_size: int = ERP_PRODUCTS_PAGE_SIZE
    reset_page_size: int = RESET_PAGE_SIZE
    metafield_definitions_page_size: int = METAFIELD_DEFINITIONS_PAGE_SIZE
    markets_page_size: int = MARKETS_PAGE_SIZE
    metafields_batch_size: int = METAFIELDS_BATCH_SIZE
    stock_batch_size: int = STOCK_BATCH_SIZE
    variant_prices_batch_size: int = VARIANT_PRICES_BATCH_SIZE
    fixed_prices_batch_size: int = FIXED_PRICES_BATCH_SIZE
    reorder_moves_batch_size: int = REORDER_MOVES_BATCH_SIZE
    reset_timeout_seconds: float = RESET_TIMEOUT_SECONDS
    collection_add_failures_fatal: bool = False


@dataclass(frozen=True, slots=True)
class MarketSettings:
    """Fixed identity of the local market that localized prices are written to."""

    country_code: str = "IL"
    market_name: str = "Israel"
    market_handle: str = "il"
    catalog_title: str = "Israel Catalog"
    price_list_name: str = "Israel ILS"
    base_currency: str = "USD"
    local_currency: str = "ILS"


def get_sync_config() -> SyncConfig:
    return SyncConfig()
