"""Bulk destructive reset of the storefront catalog."""

from __future__ import annotations

import asyncio
from collections import Counter
from dataclasses import dataclass, field
from enum import StrEnum
from functools import partial
from logging import getLogger
from typing import TYPE_CHECKING

from shopsync.config.sync import DEFAULT_RESET_CONCURRENCY, RESET_TIMEOUT_SECONDS
from shopsync.domain.concurrency import WorkerPool
from shopsync.domain.errors import SyncError
from shopsync.domain.model import ResetKind

if TYPE_CHECKING:
    from collections.abc import Sequence

    from shopsync.domain.ports import Notifier, ResetGateway

log = getLogger(__name__)

# Deletion failures the platform reports for resources we are not allowed to remove.
SKIPPABLE_FAILURES: dict[ResetKind, str] = {
    ResetKind.CATALOGS: "Cannot delete a catalog for an app",
    ResetKind.MARKETS: "last region market",
}
STOPPING_FAILURES: dict[ResetKind, str] = {
    ResetKind.METAFIELD_DEFINITIONS: "Access denied for metafieldDefinitionDelete field",
}


class _DeleteOutcome(StrEnum):
    DELETED = "deleted"
    SKIPPED = "skipped"


class _StopStep(Exception):  # noqa: N818
    """Internal signal that a sub-step cannot continue but is not a failure."""


@dataclass(slots=True)
class ResetSummary:
    deleted: Counter[ResetKind] = field(default_factory=Counter)
    skipped: Counter[ResetKind] = field(default_factory=Counter)
    errors: list[SyncError] = field(default_factory=list)

    def describe(self) -> str:
        parts = [
            f"{kind}={self.deleted[kind]}"
            + (f" (skipped {self.skipped[kind]})" if self.skipped[kind] else "")
            for kind in ResetKind
        ]
        return ", ".join(parts)


@dataclass(slots=True)
class StorefrontReset:
    """Delete every product, collection, definition, price list, catalog and market.

    Sub-steps run concurrently and independently. A hard failure in one does not
    stop the others; the first failure observed is re-raised once all finished.
    """

    gateway: ResetGateway
    notifier: Notifier
    concurrency: int = DEFAULT_RESET_CONCURRENCY
    timeout_seconds: float = RESET_TIMEOUT_SECONDS
    kinds: Sequence[ResetKind] = tuple(ResetKind)

    async def run(self) -> ResetSummary:
        summary = ResetSummary()
        try:
            async with asyncio.timeout(self.timeout_seconds):
                await asyncio.gather(*(self._run_step(kind, summary) for kind in self.kinds))
        except TimeoutError:
            self.notifier.error(
                f"shopify wipe timed out after {self.timeout_seconds:g}s: {summary.describe()}"
            )
            raise

        if summary.errors:
            self.notifier.error(f"shopify wipe failed: {summary.errors[0]} ({summary.describe()})")
            raise summary.errors[0]
        self.notifier.success(f"shopify wipe completed: {summary.describe()}")
        return summary

    async def _run_step(self, kind: ResetKind, summary: ResetSummary) -> None:
        self.notifier.info(f"shopify wipe: deleting {kind}")
        try:
            await self._delete_all(kind, summary)
        except _StopStep:
            return
        except SyncError as exc:
            summary.errors.append(exc)
            self.notifier.error(f"shopify wipe {kind} failed: {exc}")
            return
        log.info("Wipe %s: deleted=%d skipped=%d", kind, summary.deleted[kind], summary.skipped[kind])

    async def _delete_all(self, kind: ResetKind, summary: ResetSummary) -> None:
        after: str | None = None
        while True:
            try:
                page = await self.gateway.list_page(kind, after)
            except SyncError as exc:
                self._maybe_stop(kind, exc)
                raise
            if not page.items:
                return

            pool: WorkerPool[_DeleteOutcome] = WorkerPool(
                self.concurrency, name=f"wipe {kind}"
            )
            for resource_id in page.items:
                pool.submit(partial(self._delete_one, kind, resource_id))
            for outcome in await pool.wait():
                if outcome is _DeleteOutcome.DELETED:
                    summary.deleted[kind] += 1
                else:
                    summary.skipped[kind] += 1

            if page.next_cursor is None:
                return
            after = page.next_cursor

    async def _delete_one(self, kind: ResetKind, resource_id: str) -> _DeleteOutcome:
        try:
            await self.gateway.delete(kind, resource_id)
        except SyncError as exc:
            skippable = SKIPPABLE_FAILURES.get(kind)
            if skippable and skippable in str(exc):
                self.notifier.warning(f"shopify wipe {kind}: skipping {resource_id}: {exc}")
                return _DeleteOutcome.SKIPPED
            self._maybe_stop(kind, exc)
            raise
        return _DeleteOutcome.DELETED

    def _maybe_stop(self, kind: ResetKind, exc: SyncError) -> None:
        stopping = STOPPING_FAILURES.get(kind)
        if stopping and stopping in str(exc):
            self.notifier.warning(f"shopify wipe {kind}: access denied, skipping step")
            raise _StopStep from exc
