"""Operator notification sinks: log output, Telegram, or both."""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING, Final, Protocol

import httpx

from shopsync.config.notifications import LogOutput
from shopsync.domain.ports import Notifier

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Awaitable, Callable, Sequence

    from shopsync.config.notifications import NotificationConfig

log = getLogger(__name__)

TELEGRAM_API_URL: Final = "https://api.telegram.org"
_TELEGRAM_TIMEOUT_SECONDS: Final = 10.0

ICONS: Final = {
    "INFO": "ℹ️",
    "ERROR": "❌",
    "WARNING": "⚠️",
    "SUCCESS": "✅",
}


def format_message(level: str, message: str) -> str:
    return f"{ICONS[level]} {level}: {message.strip()}"


class ManagedNotifier(Notifier, Protocol):
    """A notifier owned by the caller that built it; ``aclose`` flushes pending lines."""

    async def aclose(self) -> None: ...


class LoggingNotifier:
    def __init__(self, logger_name: str = "shopsync.status") -> None:
        self._log = getLogger(logger_name)

    def info(self, message: str) -> None:
        self._log.info("%s", message)

    def warning(self, message: str) -> None:
        self._log.warning("%s", message)

    def error(self, message: str) -> None:
        self._log.error("%s", message)

    def success(self, message: str) -> None:
        self._log.info("SUCCESS: %s", message)

    async def aclose(self) -> None:
        pass


class NullNotifier:
    def info(self, message: str) -> None:
        pass

    def warning(self, message: str) -> None:
        pass

    def error(self, message: str) -> None:
        pass

    def success(self, message: str) -> None:
        pass

    async def aclose(self) -> None:
        pass


@dataclass(slots=True)
class CompositeNotifier:
    notifiers: Sequence[ManagedNotifier]

    def info(self, message: str) -> None:
        for notifier in self.notifiers:
            notifier.info(message)

    def warning(self, message: str) -> None:
        for notifier in self.notifiers:
            notifier.warning(message)

    def error(self, message: str) -> None:
        for notifier in self.notifiers:
            notifier.error(message)

    def success(self, message: str) -> None:
        for notifier in self.notifiers:
            notifier.success(message)

    async def aclose(self) -> None:
        for notifier in self.notifiers:
            await notifier.aclose()


@dataclass(slots=True)
class TelegramNotifier:
    """Send status lines to a Telegram chat without blocking the caller.

    Each line is delivered by a background task on the running event loop; lines
    go out in the order they were emitted. Delivery is best effort: failures are
    logged and never raised, so a broken bot cannot fail a sync run. A 429 answer
    is retried once after the ``retry_after`` interval Telegram asks for.
    ``aclose`` waits for pending lines and closes the HTTP client.
    """

    token: str
    chat_id: str
    transport: httpx.AsyncBaseTransport | None = None
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep
    _client: httpx.AsyncClient = field(init=False, repr=False)
    _pending: set[asyncio.Task[bool]] = field(init=False, repr=False, default_factory=set)
    _last: asyncio.Task[bool] | None = field(init=False, repr=False, default=None)

    def __post_init__(self) -> None:
        self._client = httpx.AsyncClient(
            base_url=TELEGRAM_API_URL,
            timeout=_TELEGRAM_TIMEOUT_SECONDS,
            transport=self.transport,
        )

    def info(self, message: str) -> None:
        self._schedule(format_message("INFO", message))

    def warning(self, message: str) -> None:
        self._schedule(format_message("WARNING", message))

    def error(self, message: str) -> None:
        self._schedule(format_message("ERROR", message))

    def success(self, message: str) -> None:
        self._schedule(format_message("SUCCESS", message))

    async def flush(self) -> None:
        while self._pending:
            await asyncio.wait(tuple(self._pending))

    async def aclose(self) -> None:
        await self.flush()
        await self._client.aclose()

    def _schedule(self, text: str) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            log.warning("Telegram notification dropped, no running event loop: %s", text)
            return
        previous = self._last if self._last is not None and not self._last.done() else None
        task = loop.create_task(self._deliver(text, previous))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        self._last = task

    async def _deliver(self, text: str, previous: asyncio.Task[bool] | None) -> bool:
        if previous is not None:
            await asyncio.wait((previous,))
        try:
            response = await self._post(text)
            if response.status_code == httpx.codes.TOO_MANY_REQUESTS:
                delay = _retry_after(response)
                log.warning("Telegram rate limited, retrying in %ss", delay)
                await self.sleep(delay)
                response = await self._post(text)
        except httpx.HTTPError as exc:
            log.warning("Telegram notification failed: %s", exc)
            return False
        if not response.is_success:
            log.warning(
                "Telegram notification rejected: %s %s",
                response.status_code,
                response.text.strip(),
            )
            return False
        return True

    async def _post(self, text: str) -> httpx.Response:
        return await self._client.post(
            f"/bot{self.token}/sendMessage", json={"chat_id": self.chat_id, "text": text}
        )


def _retry_after(response: httpx.Response) -> float:
    try:
        payload = response.json()
    except ValueError:
        return 1.0
    parameters = payload.get("parameters") if isinstance(payload, dict) else None
    if isinstance(parameters, dict):
        value = parameters.get("retry_after")
        if isinstance(value, (int, float)) and value > 0:
            return float(value)
    return 1.0


def build_notifier(config: NotificationConfig) -> ManagedNotifier:
    """Pick the notification sink for the configured ``LOG_OUTPUT``."""

    if config.output is LogOutput.NONE:
        return NullNotifier()

    stdout = LoggingNotifier()
    if config.output is LogOutput.STDOUT:
        return stdout

    if not config.has_telegram_credentials:
        log.warning("Telegram credentials missing, sending status lines to stdout")
        return stdout

    telegram = TelegramNotifier(token=config.telegram_token, chat_id=config.telegram_chat_id)
    if config.output is LogOutput.TELEGRAM:
        return telegram
    return CompositeNotifier([stdout, telegram])


@asynccontextmanager
async def open_notifier(config: NotificationConfig) -> AsyncIterator[ManagedNotifier]:
    """Yield the configured notifier and flush and close it on exit."""

    notifier = build_notifier(config)
    try:
        yield notifier
    finally:
        await notifier.aclose()
