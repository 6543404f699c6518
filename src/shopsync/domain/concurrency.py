"""Bounded concurrency helpers shared by every flow."""

from __future__ import annotations

import asyncio
from logging import getLogger
from typing import TYPE_CHECKING, Final, cast

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

log = getLogger(__name__)


class _Skipped:
    __slots__ = ()


_SKIPPED: Final = _Skipped()


class WorkerPool[T]:
    """Run submitted units with at most ``limit`` in flight.

    The first unit that raises sets the shared cancellation signal: queued units
    skip their remote call and in-flight units are cancelled. ``wait`` re-raises
    that first error once every unit has settled. Work completed before the
    failure is kept; nothing is rolled back.
    """

    def __init__(self, limit: int, *, name: str = "pool") -> None:
        if limit < 1:
            raise ValueError("WorkerPool limit must be at least 1")
        self.name = name
        self._semaphore = asyncio.Semaphore(limit)
        self._cancelled = asyncio.Event()
        self._tasks: list[asyncio.Task[T | _Skipped]] = []
        self._error: BaseException | None = None
        self._closed = False

    def submit(self, unit: Callable[[], Awaitable[T]]) -> None:
        if self._closed:
            raise RuntimeError(f"{self.name}: cannot submit after wait()")
        self._tasks.append(asyncio.create_task(self._run(unit)))

    async def wait(self) -> list[T]:
        self._closed = True
        outcomes = await asyncio.gather(*self._tasks, return_exceptions=True)
        if self._error is not None:
            raise self._error
        results: list[T] = []
        for outcome in outcomes:
            if isinstance(outcome, BaseException):
                # only reachable when the pool was cancelled from outside
                raise outcome
            if outcome is _SKIPPED:
                continue
            results.append(cast("T", outcome))
        return results

    async def _run(self, unit: Callable[[], Awaitable[T]]) -> T | _Skipped:
        async with self._semaphore:
            if self._cancelled.is_set():
                return _SKIPPED
            try:
                return await unit()
            except Exception as exc:
                self._fail(exc)
                raise

    def _fail(self, exc: BaseException) -> None:
        if self._error is not None:
            return
        self._error = exc
        self._cancelled.set()
        log.debug("%s: cancelling remaining units after %s", self.name, exc)
        current = asyncio.current_task()
        for task in self._tasks:
            if task is not current and not task.done():
                task.cancel()


class AsyncOnce[T]:
    """Lazily computed value shared by concurrent callers.

    The factory runs at most once while it succeeds; a failed computation leaves
    the cell empty so the next caller retries.
    """

    def __init__(self, factory: Callable[[], Awaitable[T]]) -> None:
        self._factory = factory
        self._lock = asyncio.Lock()
        self._value: T | None = None
        self._ready = False

    async def get(self) -> T:
        if self._ready:
            return cast("T", self._value)
        async with self._lock:
            if not self._ready:
                self._value = await self._factory()
                self._ready = True
        return cast("T", self._value)
