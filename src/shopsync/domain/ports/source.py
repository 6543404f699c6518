"""Port for reading source-of-record data from the ERP."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from shopsync.domain.model import (
        AttributeCatalog,
        CategoryAssignment,
        OrderAssignment,
        PriceRow,
        ProductPage,
        RelatedAssignment,
        StockRow,
    )


@runtime_checkable
class CatalogSource(Protocol):
    """One request per entity kind; products are the only paginated kind."""

    async def list_products(self, *, page: int, page_size: int) -> ProductPage: ...

    async def list_category_assignments(self) -> list[CategoryAssignment]: ...

    async def list_attributes(self) -> AttributeCatalog: ...

    async def list_prices(self) -> list[PriceRow]: ...

    async def list_stock(self) -> list[StockRow]: ...

    async def list_product_order(self) -> list[OrderAssignment]: ...

    async def list_related(self) -> list[RelatedAssignment]: ...

    async def trigger_file_sync(self) -> None: ...


__all__ = ["CatalogSource"]
