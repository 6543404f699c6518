"""Retry loop for Shopify GraphQL calls.

Throttling arrives either as an HTTP status (429, 5xx) or as a 200 response whose
``errors[]`` mention throttling. Both surface as retryable ``TransportError``s
from the client, so one loop handles them.
"""

from __future__ import annotations

import asyncio
import random
from logging import getLogger
from typing import TYPE_CHECKING

from shopsync.domain.errors import RetriesExhaustedError, TransportError

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Iterable

    from shopsync.config.http_resilience import RetryPolicy

    from .schema import GraphQLErrorPayload

type Sleep = Callable[[float], Awaitable[None]]

log = getLogger(__name__)


def is_throttled(errors: Iterable[GraphQLErrorPayload]) -> bool:
    for error in errors:
        if "throttled" in error.message.lower():
            return True
        code = error.extensions.get("code")
        if isinstance(code, str) and code.upper() == "THROTTLED":
            return True
    return False


def backoff_delay(policy: RetryPolicy, attempt: int) -> float:
    delay = policy.delay_for(attempt)
    if policy.backoff_jitter > 0:
        delay += random.uniform(0, policy.backoff_jitter)  # noqa: S311
    return delay


async def call_with_retry[T](
    call: Callable[[], Awaitable[T]],
    policy: RetryPolicy,
    *,
    sleep: Sleep = asyncio.sleep,
    label: str = "shopify graphql",
) -> T:
    """Run ``call`` until it succeeds, fails permanently or the budget runs out.

    Non-retryable errors propagate untouched. Cancelling the surrounding task
    interrupts a backoff sleep immediately.
    """

    last_error: TransportError | None = None
    for attempt in range(policy.total + 1):
        try:
            return await call()
        except TransportError as exc:
            if not exc.retryable:
                raise
            last_error = exc
        if attempt == policy.total:
            break
        delay = backoff_delay(policy, attempt)
        log.warning(
            "%s request failed (%s), retrying in %.2fs (%d/%d)",
            label,
            last_error,
            delay,
            attempt + 1,
            policy.total,
        )
        await sleep(delay)
    raise RetriesExhaustedError(policy.total + 1) from last_error
