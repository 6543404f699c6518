from __future__ import annotations

import asyncio
from types import SimpleNamespace

import pytest

from shopsync.app import DAILY_FLOWS, SyncContext, build_context, run_daily, run_flows
from shopsync.config import SyncConfig
from shopsync.domain.errors import ErpError, SyncError
from shopsync.domain.model import Product, StockRow
from tests.helpers.shop import FakeMarkets, FakeShop, FakeSource, RecordingNotifier


def _context(source: FakeSource, shop: FakeShop, notifier: RecordingNotifier) -> SyncContext:
    storefront = SimpleNamespace(
        identity=shop,
        products=shop,
        collections=shop,
        translations=shop,
        metafields=shop,
        pricing=shop,
        inventory=shop,
        markets=FakeMarkets(),
    )
    return build_context(source, storefront, notifier, config=SyncConfig())  # type: ignore[arg-type]


def test_daily_run_reports_every_flow_in_order_then_triggers_file_sync() -> None:
    source = FakeSource()
    notifier = RecordingNotifier()

    outcomes = asyncio.run(run_daily(_context(source, FakeShop(), notifier)))

    assert [outcome.name for outcome in outcomes] == list(DAILY_FLOWS)
    assert all(outcome.ok for outcome in outcomes)
    successes = notifier.of("success")
    assert [line.split(":")[0] for line in successes] == list(DAILY_FLOWS)
    assert source.file_syncs == 1


def test_failed_flow_does_not_stop_the_next_one() -> None:
    source = FakeSource(
        products=[Product("A", english_title="Mug")],
        stock=[StockRow("A", 2)],
    )
    shop = FakeShop(failures={"create_product": SyncError("shop is down")})
    item_id = shop.add_inventory_item("A")
    notifier = RecordingNotifier()

    outcomes = asyncio.run(run_daily(_context(source, shop, notifier)))

    by_name = {outcome.name: outcome for outcome in outcomes}
    assert not by_name["products"].ok
    assert by_name["stock"].ok
    assert shop.on_hand == {item_id: 2}
    assert notifier.of("error") == ["products sync failed: shop is down"]
    assert source.file_syncs == 1


def test_file_sync_failure_is_only_a_warning() -> None:
    source = FakeSource(file_sync_error=ErpError("erp file sync returned 503"))
    notifier = RecordingNotifier()

    outcomes = asyncio.run(run_daily(_context(source, FakeShop(), notifier)))

    assert all(outcome.ok for outcome in outcomes)
    assert notifier.of("warning") == ["file sync trigger failed: erp file sync returned 503"]


def test_run_flows_runs_only_the_named_flows() -> None:
    source = FakeSource(stock=[StockRow("A", 1)])
    notifier = RecordingNotifier()

    outcomes = asyncio.run(run_flows(_context(source, FakeShop(), notifier), ["stock"]))

    assert [outcome.name for outcome in outcomes] == ["stock"]
    assert outcomes[0].summary is not None
    assert outcomes[0].summary.skipped == {"not_found": 1}
    assert source.file_syncs == 0


def test_unknown_flow_name_is_rejected() -> None:
    context = _context(FakeSource(), FakeShop(), RecordingNotifier())

    with pytest.raises(ValueError, match="Unknown flow"):
        context.flow("orders")
