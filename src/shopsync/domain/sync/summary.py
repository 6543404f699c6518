"""Per-flow counters and the terminal status line."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from shopsync.domain.ports import Notifier

log = getLogger(__name__)


@dataclass(slots=True)
class FlowSummary:
    flow: str
    processed: int = 0
    created: int = 0
    updated: int = 0
    skipped: Counter[str] = field(default_factory=Counter)
    notes: Counter[str] = field(default_factory=Counter)

    def skip(self, reason: str, count: int = 1) -> None:
        self.skipped[reason] += count

    def note(self, name: str, count: int = 1) -> None:
        self.notes[name] += count

    @property
    def total_skipped(self) -> int:
        return sum(self.skipped.values())

    def describe(self) -> str:
        text = (
            f"{self.flow}: processed={self.processed} created={self.created} "
            f"updated={self.updated} skipped={self.total_skipped}"
        )
        if self.skipped:
            reasons = ", ".join(f"{key}={value}" for key, value in sorted(self.skipped.items()))
            text += f" ({reasons})"
        if self.notes:
            text += " " + " ".join(f"{key}={value}" for key, value in sorted(self.notes.items()))
        return text


@dataclass(slots=True, frozen=True)
class FlowOutcome:
    name: str
    summary: FlowSummary | None = None
    error: BaseException | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


async def report_flow(
    name: str,
    flow: Callable[[], Awaitable[FlowSummary]],
    notifier: Notifier,
) -> FlowOutcome:
    """Run one flow and emit exactly one terminal line for it."""

    log.info("Starting %s sync", name)
    try:
        summary = await flow()
    except Exception as exc:
        log.exception("%s sync failed", name)
        notifier.error(f"{name} sync failed: {exc}")
        return FlowOutcome(name=name, error=exc)
    notifier.success(summary.describe())
    return FlowOutcome(name=name, summary=summary)
