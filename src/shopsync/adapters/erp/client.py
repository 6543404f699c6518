"""HTTP client for the ERP collaborator."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING, Any, Final

import httpx
from pydantic import BaseModel, ValidationError

from shopsync.adapters.http_resilience import ResilientClient
from shopsync.domain.errors import ErpError

from .schema import (
    AttributesResponse,
    CategoriesResponse,
    PricesResponse,
    ProductOrderResponse,
    ProductsResponse,
    SimilarProductsResponse,
    StockResponse,
)
from .translator import (
    parse_attribute_catalog,
    parse_category_assignments,
    parse_order_assignments,
    parse_price,
    parse_product_page,
    parse_related,
    parse_stock,
)

if TYPE_CHECKING:
    from collections.abc import Callable
    from types import TracebackType

    from shopsync.config.erp import ErpConfig
    from shopsync.config.http_resilience import ResilienceConfig
    from shopsync.domain.model import (
        AttributeCatalog,
        CategoryAssignment,
        OrderAssignment,
        PriceRow,
        ProductPage,
        RelatedAssignment,
        StockRow,
    )

log = getLogger(__name__)

PRODUCT_NOTE_IDS: Final = ("17", "78", "79", "80", "81")

ATTRIBUTE_NOTE_NAMES: Final = (
    ("סינון", "Filter"),
    ('מידות המוצר (ס"מ)', "Item Size (cm)"),
    ('מידות כולל אריזה (ס"מ)', "Size of packaging (cm)"),
    ('משקל נטו (ק"ג)', "Net weight (kg)"),
    ("משקל כולל אריזה (ק''ג)", "Weight With Packaging"),
    ('קיבולת הכוס (מ"ל)', "Cup capacity (ml)"),
    ("תיאור", "Description"),
    ("Item Size (inch)", "Item Size (inch)"),
    ("מידות אינצ' מוצר עם קופסה", "Packaging Size (inch)"),
)


def _default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)


@dataclass(slots=True)
class ErpClient:
    """Reads catalog records from the ERP; one POST per entity kind.

    Use as an async context manager so the HTTP client is closed.
    """

    config: ErpConfig
    client_factory: Callable[[ResilienceConfig], ResilientClient] = field(
        default=_default_client_factory
    )
    _http: ResilientClient = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._http = self.client_factory(self.config.resilience)

    async def __aenter__(self) -> ErpClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def list_products(self, *, page: int, page_size: int) -> ProductPage:
        response = await self._fetch(
            "/products",
            ProductsResponse,
            page=page,
            pageSize=page_size,
            noteIds=list(PRODUCT_NOTE_IDS),
        )
        return parse_product_page(response)

    async def list_category_assignments(self) -> list[CategoryAssignment]:
        return parse_category_assignments(await self._fetch("/custom-categories", CategoriesResponse))

    async def list_attributes(self) -> AttributeCatalog:
        response = await self._fetch(
            "/attributes",
            AttributesResponse,
            noteName=[list(pair) for pair in ATTRIBUTE_NOTE_NAMES],
        )
        return parse_attribute_catalog(response)

    async def list_prices(self) -> list[PriceRow]:
        response = await self._fetch("/prices-latest", PricesResponse)
        rows: list[PriceRow] = []
        for payload in response.prices:
            row = parse_price(payload)
            if row is None:
                log.debug("Skipping price row without amount for %s", payload.item_key)
                continue
            rows.append(row)
        return rows

    async def list_stock(self) -> list[StockRow]:
        response = await self._fetch("/stocksProducts", StockResponse)
        return [parse_stock(item) for item in response.items]

    async def list_product_order(self) -> list[OrderAssignment]:
        return parse_order_assignments(await self._fetch("/products-order", ProductOrderResponse))

    async def list_related(self) -> list[RelatedAssignment]:
        return parse_related(await self._fetch("/similar-products", SimilarProductsResponse))

    async def trigger_file_sync(self) -> None:
        await self._post("/files/shopify/sync", None)
        log.info("Triggered ERP file sync")

    async def _fetch[M: BaseModel](self, path: str, model: type[M], **extra: Any) -> M:
        body: dict[str, Any] = {"dbName": self.config.db_name, **extra}
        response = await self._post(path, body)
        try:
            return model.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            raise ErpError(f"erp {path} returned an unreadable payload: {exc}") from exc

    @property
    def _headers(self) -> dict[str, str]:
        return {"Authorization": self.config.token}

    async def _post(self, path: str, body: dict[str, Any] | None) -> httpx.Response:
        url = f"{self.config.base_url}{path}"
        try:
            if body is None:
                response = await self._http.post(url, headers=self._headers)
            else:
                response = await self._http.post(url, json=body, headers=self._headers)
        except httpx.HTTPError as exc:
            raise ErpError(f"erp {path} request failed: {exc}") from exc
        if not response.is_success:
            log.error("ERP %s returned %s", path, response.status_code)
            raise ErpError(
                f"erp {path} request failed: {response.status_code} {response.reason_phrase}"
            )
        return response
