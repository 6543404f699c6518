from __future__ import annotations

import asyncio

from shopsync.domain.errors import SyncError
from shopsync.domain.sync import FlowSummary, report_flow
from tests.helpers.shop import RecordingNotifier


def test_describe_lists_counters_and_reasons() -> None:
    summary = FlowSummary("stock", processed=3, updated=3)
    summary.skip("negative", 2)
    summary.skip("not_found")
    summary.note("duplicates")

    assert summary.describe() == (
        "stock: processed=3 created=0 updated=3 skipped=3 "
        "(negative=2, not_found=1) duplicates=1"
    )


def test_report_flow_emits_success_line() -> None:
    notifier = RecordingNotifier()

    async def flow() -> FlowSummary:
        return FlowSummary("prices", processed=1, updated=1)

    outcome = asyncio.run(report_flow("prices", flow, notifier))

    assert outcome.ok
    assert notifier.messages == [
        ("success", "prices: processed=1 created=0 updated=1 skipped=0"),
    ]


def test_report_flow_turns_failures_into_one_error_line() -> None:
    notifier = RecordingNotifier()

    async def flow() -> FlowSummary:
        raise SyncError("boom")

    outcome = asyncio.run(report_flow("products", flow, notifier))

    assert not outcome.ok
    assert isinstance(outcome.error, SyncError)
    assert notifier.messages == [("error", "products sync failed: boom")]
