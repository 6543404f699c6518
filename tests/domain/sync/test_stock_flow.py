from __future__ import annotations

import asyncio

from shopsync.config import SyncConfig
from shopsync.domain.model import StockRow
from shopsync.domain.sync import SyncStock
from tests.helpers.shop import FakeShop, FakeSource


def test_quantities_are_set_at_the_primary_location() -> None:
    shop = FakeShop()
    item_a = shop.add_inventory_item("A")
    item_b = shop.add_inventory_item("B")
    item_c = shop.add_inventory_item("C", tracked=False)
    rows = [
        StockRow("A", 5),
        StockRow("B", -2),
        StockRow("A", 7),
        StockRow("C", 3),
        StockRow("D", 1),
        StockRow(" ", 4),
    ]

    summary = asyncio.run(SyncStock(FakeSource(stock=rows), shop, shop, SyncConfig()).run())

    assert shop.on_hand == {item_a: 7, item_c: 3}
    assert item_b not in shop.on_hand
    assert shop.inventory_items["C"] == (item_c, True)
    assert shop.active == {(item_a, shop.location_id), (item_c, shop.location_id)}
    assert shop.calls["mark_tracked"] == 1
    assert shop.calls["primary_location_id"] == 1
    assert summary.updated == 2
    assert summary.skipped == {"empty_sku": 1, "negative": 1, "not_found": 1}
    assert summary.notes == {"duplicates": 1, "tracking_enabled": 1}


def test_quantities_are_written_in_batches() -> None:
    shop = FakeShop()
    items = [shop.add_inventory_item(f"S-{index}") for index in range(5)]
    rows = [StockRow(f"S-{index}", index) for index in range(5)]

    summary = asyncio.run(
        SyncStock(FakeSource(stock=rows), shop, shop, SyncConfig(stock_batch_size=2)).run()
    )

    assert summary.processed == 5
    assert shop.calls["set_on_hand"] == 3
    assert shop.on_hand == {item: index for index, item in enumerate(items)}
    assert {location for _, location in shop.active} == {shop.location_id}


def test_all_negative_rows_touch_nothing() -> None:
    shop = FakeShop()
    shop.add_inventory_item("A")

    summary = asyncio.run(
        SyncStock(FakeSource(stock=[StockRow("A", -1)]), shop, shop, SyncConfig()).run()
    )

    assert summary.skipped == {"negative": 1}
    assert not shop.calls
