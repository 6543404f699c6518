"""Error taxonomy shared by the reconciliation engine and its adapters."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence


class SyncError(RuntimeError):
    """Base class for every failure raised by the engine."""


class TransportError(SyncError):
    """An HTTP level failure talking to a remote collaborator."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        body: str = "",
        retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body
        self.retryable = retryable


class ThrottledError(TransportError):
    """The storefront answered 2xx but reported a throttled query."""

    def __init__(self, message: str) -> None:
        super().__init__(message, retryable=True)


class RetriesExhaustedError(TransportError):
    def __init__(self, attempts: int) -> None:
        super().__init__("shopify graphql request retries exhausted")
        self.attempts = attempts


class GraphQLResponseError(SyncError):
    """Top-level ``errors[]`` entries that do not signal throttling."""

    def __init__(self, messages: Sequence[str]) -> None:
        self.messages = tuple(messages)
        summary = "; ".join(self.messages) or "unknown graphql error"
        super().__init__(f"shopify graphql errors: {summary}")


@dataclass(frozen=True, slots=True)
class UserErrorDetail:
    field: tuple[str, ...]
    message: str

    def describe(self) -> str:
        message = self.message.strip()
        if self.field:
            return f"{'.'.join(self.field)}: {message}"
        return message


class UserErrorSet(SyncError):
    """The storefront accepted the request but rejected the operation."""

    def __init__(self, action: str, errors: Iterable[UserErrorDetail]) -> None:
        self.action = action
        self.errors = tuple(errors)
        parts = [error.describe() for error in self.errors if error.message.strip()]
        if parts:
            message = f"shopify {action} failed: {'; '.join(parts)}"
        else:
            message = f"shopify {action} failed with user errors"
        super().__init__(message)


class RecordValidationError(SyncError):
    """A source record was rejected before any remote call was made."""

    def __init__(self, reason: str, message: str) -> None:
        super().__init__(message)
        self.reason = reason


class ProvisioningError(SyncError):
    """The market resource chain could not be brought to a consistent state."""


class ErpError(SyncError):
    """The ERP collaborator failed or returned an unusable payload."""


__all__ = [
    "ErpError",
    "GraphQLResponseError",
    "ProvisioningError",
    "RecordValidationError",
    "RetriesExhaustedError",
    "SyncError",
    "ThrottledError",
    "TransportError",
    "UserErrorDetail",
    "UserErrorSet",
]
