from __future__ import annotations

import asyncio
import json
import math
from typing import TYPE_CHECKING, Any

import httpx
import pytest

from shopsync.adapters.erp import ErpClient, normalize_currency, round_quantity
from shopsync.adapters.http_resilience import ResilientClient
from shopsync.config import ErpConfig, ResilienceConfig
from shopsync.domain.errors import ErpError
from shopsync.domain.model import CategoryAssignment, PriceRow, StockRow

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable


def _client(
    responses: dict[str, Any], seen: list[tuple[str, dict[str, Any] | None, httpx.Headers]]
) -> ErpClient:
    def handler(request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content) if request.content else None
        seen.append((request.url.path, body, request.headers))
        payload = responses[request.url.path]
        if isinstance(payload, httpx.Response):
            return payload
        return httpx.Response(200, json=payload)

    def factory(resilience: ResilienceConfig) -> ResilientClient:
        return ResilientClient(resilience, transport=httpx.MockTransport(handler))

    config = ErpConfig(
        base_url="https://erp.example/api",
        token="secret",
        resilience=ResilienceConfig(name="erp-test", retry=None),
    )
    return ErpClient(config, client_factory=factory)


def _call[T](client: ErpClient, action: Callable[[ErpClient], Awaitable[T]]) -> T:
    async def run() -> T:
        async with client:
            return await action(client)

    return asyncio.run(run())


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("$", "USD"), ('ש"ח', "ILS"), ("₪", "ILS"), (" usd ", "USD"), ("eur", "EUR")],
)
def test_normalize_currency(raw: str, expected: str) -> None:
    assert normalize_currency(raw) == expected


@pytest.mark.parametrize(
    ("balance", "expected"),
    [(2.5, 3), (-2.5, -3), (2.49, 2), (0.0, 0), (math.nan, 0), (math.inf, 0)],
)
def test_round_quantity_half_away_from_zero(balance: float, expected: int) -> None:
    assert round_quantity(balance) == expected


def test_list_products_posts_paging_and_note_ids() -> None:
    seen: list[tuple[str, dict[str, Any] | None, httpx.Headers]] = []
    client = _client(
        {
            "/api/products": {
                "totalPages": 3,
                "products": [
                    {
                        "ItemKey": " 1001 ",
                        "ItemName": "ספל",
                        "ForignName": "Mug",
                        "BarCode": 729000,
                        "status": True,
                    }
                ],
            }
        },
        seen,
    )

    page = _call(client, lambda erp: erp.list_products(page=2, page_size=100))

    assert page.total_pages == 3
    (product,) = page.products
    assert product.sku == "1001"
    assert product.title == "Mug"
    assert product.barcode == "729000"
    assert product.is_published
    path, body, headers = seen[0]
    assert path == "/api/products"
    assert body == {
        "dbName": "EMANUEL",
        "page": 2,
        "pageSize": 100,
        "noteIds": ["17", "78", "79", "80", "81"],
    }
    assert headers["Authorization"] == "secret"


def test_category_rows_are_flattened() -> None:
    seen: list[tuple[str, dict[str, Any] | None, httpx.Headers]] = []
    client = _client(
        {
            "/api/custom-categories": {
                "results": [
                    {
                        "kef": "A",
                        "categories": [
                            {"NoteHebrew": "צעצועים", "NoteEnglish": "Toys"},
                            {"NoteHebrew": "", "NoteEnglish": None},
                        ],
                    }
                ]
            }
        },
        seen,
    )

    rows = _call(client, lambda erp: erp.list_category_assignments())

    assert rows == [CategoryAssignment(sku="A", title_hebrew="צעצועים", title_english="Toys")]


def test_prices_and_stock_are_normalised() -> None:
    seen: list[tuple[str, dict[str, Any] | None, httpx.Headers]] = []
    client = _client(
        {
            "/api/prices-latest": {
                "prices": [
                    {"ItemKey": "A", "Price": 10, "CurrencyCode": "$"},
                    {"ItemKey": "A", "Price": 37.5, "CurrencyCode": 'ש"ח'},
                    {"ItemKey": "B", "Price": None, "CurrencyCode": "$"},
                ]
            },
            "/api/stocksProducts": {"items": [{"ITEMKEY": "A", "ITEMWARHBAL": 4.5}]},
        },
        seen,
    )

    async def action(erp: ErpClient) -> tuple[list[PriceRow], list[StockRow]]:
        return await erp.list_prices(), await erp.list_stock()

    prices, stock = _call(client, action)

    assert prices == [PriceRow("A", "USD", 10.0), PriceRow("A", "ILS", 37.5)]
    assert stock == [StockRow("A", 5)]


def test_attributes_request_carries_note_names() -> None:
    seen: list[tuple[str, dict[str, Any] | None, httpx.Headers]] = []
    client = _client(
        {
            "/api/attributes": {
                "attributesMain": [{"NoteID": 7, "NoteName": "סינון", "NoteNameEnglish": "Filter"}],
                "attributesProducts": [
                    {"KeF": "A", "NoteID": 7, "Note": "כחול", "NoteEnglish": "Blue"}
                ],
            }
        },
        seen,
    )

    catalog = _call(client, lambda erp: erp.list_attributes())

    assert catalog.definitions[0].name_english == "Filter"
    assert catalog.assignments[0].value_english == "Blue"
    body = seen[0][1]
    assert body is not None
    assert body["noteName"][0] == ["סינון", "Filter"]
    assert len(body["noteName"]) == 9


def test_non_success_status_raises_erp_error() -> None:
    seen: list[tuple[str, dict[str, Any] | None, httpx.Headers]] = []
    client = _client({"/api/similar-products": httpx.Response(500)}, seen)

    with pytest.raises(ErpError):
        _call(client, lambda erp: erp.list_related())


def test_unreadable_payload_raises_erp_error() -> None:
    seen: list[tuple[str, dict[str, Any] | None, httpx.Headers]] = []
    client = _client({"/api/products-order": httpx.Response(200, text="<html>")}, seen)

    with pytest.raises(ErpError):
        _call(client, lambda erp: erp.list_product_order())


def test_file_sync_trigger_posts_without_body() -> None:
    seen: list[tuple[str, dict[str, Any] | None, httpx.Headers]] = []
    client = _client({"/api/files/shopify/sync": httpx.Response(204)}, seen)

    _call(client, lambda erp: erp.trigger_file_sync())

    assert seen[0][:2] == ("/api/files/shopify/sync", None)
