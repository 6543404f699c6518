from __future__ import annotations

import asyncio
import json
import logging

import httpx
import pytest

from shopsync.adapters import notifications
from shopsync.adapters.notifications import (
    CompositeNotifier,
    LoggingNotifier,
    NullNotifier,
    TelegramNotifier,
    build_notifier,
)
from shopsync.config import LogOutput, NotificationConfig


def test_build_notifier_honours_log_output() -> None:
    assert isinstance(build_notifier(NotificationConfig(LogOutput.NONE)), NullNotifier)
    assert isinstance(build_notifier(NotificationConfig(LogOutput.STDOUT)), LoggingNotifier)

    both = build_notifier(NotificationConfig(LogOutput.BOTH, "chat", "token"))
    assert isinstance(both, CompositeNotifier)
    assert [type(item) for item in both.notifiers] == [LoggingNotifier, TelegramNotifier]

    telegram = build_notifier(NotificationConfig(LogOutput.TELEGRAM, "chat", "token"))
    assert isinstance(telegram, TelegramNotifier)


def test_telegram_without_credentials_falls_back_to_stdout(
    caplog: pytest.LogCaptureFixture,
) -> None:
    with caplog.at_level(logging.WARNING):
        notifier = build_notifier(NotificationConfig(LogOutput.TELEGRAM))

    assert isinstance(notifier, LoggingNotifier)
    assert "credentials missing" in caplog.text


def test_logging_notifier_prefixes_success(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.INFO):
        LoggingNotifier().success("products: processed=1")

    assert "SUCCESS: products: processed=1" in caplog.text


def test_telegram_formats_and_retries_once_after_rate_limit() -> None:
    requests: list[httpx.Request] = []
    responses = [
        httpx.Response(429, json={"ok": False, "parameters": {"retry_after": 3}}),
        httpx.Response(200, json={"ok": True}),
    ]

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return responses.pop(0)

    sleeps: list[float] = []

    async def record_sleep(delay: float) -> None:
        sleeps.append(delay)

    notifier = TelegramNotifier(
        token="abc",
        chat_id="-100",
        transport=httpx.MockTransport(handler),
        sleep=record_sleep,
    )

    async def run() -> int:
        notifier.error("prices sync failed")
        sent_before_close = len(requests)
        await notifier.aclose()
        return sent_before_close

    assert asyncio.run(run()) == 0
    assert sleeps == [3.0]
    assert len(requests) == 2
    assert requests[0].url.path == "/botabc/sendMessage"
    assert json.loads(requests[0].content) == {
        "chat_id": "-100",
        "text": "❌ ERROR: prices sync failed",
    }


def test_telegram_rate_limit_wait_does_not_stall_the_event_loop() -> None:
    responses = [
        httpx.Response(429, json={"ok": False, "parameters": {"retry_after": 0.3}}),
        httpx.Response(200, json={"ok": True}),
    ]
    notifier = TelegramNotifier(
        token="abc",
        chat_id="1",
        transport=httpx.MockTransport(lambda _: responses.pop(0)),
    )

    async def run() -> float:
        loop = asyncio.get_running_loop()
        gaps: list[float] = []
        notifier.warning("shopify wipe: deleting products")
        last = loop.time()
        while responses:
            await asyncio.sleep(0.01)
            now = loop.time()
            gaps.append(now - last)
            last = now
        await notifier.aclose()
        return max(gaps)

    assert asyncio.run(run()) < 0.2


def test_telegram_keeps_lines_in_emission_order() -> None:
    texts: list[str] = []
    responses = [
        httpx.Response(429, json={"ok": False, "parameters": {"retry_after": 0.05}}),
        httpx.Response(200, json={"ok": True}),
        httpx.Response(200, json={"ok": True}),
    ]

    def handler(request: httpx.Request) -> httpx.Response:
        texts.append(json.loads(request.content)["text"])
        return responses.pop(0)

    notifier = TelegramNotifier(token="abc", chat_id="1", transport=httpx.MockTransport(handler))

    async def run() -> None:
        notifier.info("first")
        notifier.success("second")
        await notifier.aclose()

    asyncio.run(run())

    assert texts == ["ℹ️ INFO: first", "ℹ️ INFO: first", "✅ SUCCESS: second"]


def test_telegram_never_raises(caplog: pytest.LogCaptureFixture) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("down", request=request)

    notifier = TelegramNotifier(token="abc", chat_id="1", transport=httpx.MockTransport(handler))

    async def run() -> None:
        notifier.info("hello")
        await notifier.aclose()

    with caplog.at_level(logging.WARNING):
        asyncio.run(run())

    assert "Telegram notification failed" in caplog.text


def test_open_notifier_flushes_pending_lines_on_exit(monkeypatch: pytest.MonkeyPatch) -> None:
    requests: list[httpx.Request] = []
    closed: list[bool] = []
    original = TelegramNotifier.aclose

    async def tracking_aclose(self: TelegramNotifier) -> None:
        await original(self)
        closed.append(True)

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json={"ok": True})

    def build(config: NotificationConfig) -> TelegramNotifier:
        return TelegramNotifier(
            token=config.telegram_token,
            chat_id=config.telegram_chat_id,
            transport=httpx.MockTransport(handler),
        )

    monkeypatch.setattr(notifications, "build_notifier", build)
    monkeypatch.setattr(TelegramNotifier, "aclose", tracking_aclose)

    async def run() -> None:
        config = NotificationConfig(LogOutput.TELEGRAM, "chat", "token")
        async with notifications.open_notifier(config) as notifier:
            notifier.success("daily sync done")

    asyncio.run(run())

    assert len(requests) == 1
    assert closed == [True]
