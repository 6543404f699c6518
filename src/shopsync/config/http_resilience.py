"""Configuration types for resilient HTTP clients."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import httpx

if TYPE_CHECKING:
    from collections.abc import Mapping

RETRYABLE_STATUS_CODES = frozenset({429, 500, 502, 503, 504})


@dataclass(slots=True, frozen=True)
class RetryPolicy:
    """Retry budget and backoff curve.

    ``total`` counts retries, so a request is attempted at most ``total + 1`` times.
    The delay before retry ``n`` (0-based) is ``backoff_factor * 2**n`` capped at
    ``max_backoff_wait``, plus up to ``backoff_jitter`` seconds of random jitter.
    """

    total: int = 4
    backoff_factor: float = 0.5
    max_backoff_wait: float = 60.0
    respect_retry_after_header: bool = True
    # both collaborators only ever receive POSTs
    allowed_methods: frozenset[str] = frozenset({"POST"})
    status_forcelist: frozenset[int] = field(default_factory=lambda: RETRYABLE_STATUS_CODES)
    retry_on_exceptions: tuple[type[httpx.HTTPError], ...] = (
        httpx.TimeoutException,
        httpx.NetworkError,
        httpx.RemoteProtocolError,
    )
    backoff_jitter: float = 1.0

    def delay_for(self, attempt: int) -> float:
        if attempt < 0:
            return 0.0
        return min(self.backoff_factor * (2**attempt), self.max_backoff_wait)


@dataclass(slots=True, frozen=True)
class RateLimit:
    max_calls: int
    per_seconds: float


@dataclass(slots=True, frozen=True)
class ResilienceConfig:
    name: str
    base_url: str | None = None
    timeout_seconds: float = 30.0
    retry: RetryPolicy | None = field(default_factory=RetryPolicy)
    ratelimit: RateLimit | None = None
    default_headers: Mapping[str, str] | None = None
