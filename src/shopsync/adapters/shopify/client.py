"""HTTP client for the Shopify GraphQL Admin API."""

from __future__ import annotations

import asyncio
from functools import partial
from logging import getLogger
from typing import TYPE_CHECKING, Any

import httpx
from pydantic import ValidationError

from shopsync.adapters.http_resilience import ResilientClient
from shopsync.domain.errors import (
    GraphQLResponseError,
    ThrottledError,
    TransportError,
    UserErrorDetail,
    UserErrorSet,
)

from .retry import call_with_retry, is_throttled
from .schema import GraphQLEnvelope, UserErrorPayload

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping
    from types import TracebackType

    from shopsync.config.http_resilience import ResilienceConfig
    from shopsync.config.shopify import ShopifyConfig

    from .retry import Sleep

log = getLogger(__name__)

type GraphQLData = dict[str, Any]


def _default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)


def user_errors_from(action: str, payload: Mapping[str, Any]) -> UserErrorSet | None:
    raw = payload.get("userErrors") or []
    if not raw:
        return None
    details = [
        UserErrorDetail(field=tuple(item.field or ()), message=item.message)
        for item in (UserErrorPayload.model_validate(entry) for entry in raw)
    ]
    return UserErrorSet(action, details)


class ShopifyGraphQLClient:
    """Shared GraphQL transport for every Shopify capability client.

    Use as an async context manager; the underlying HTTP client is opened on
    construction and closed on exit.
    """

    def __init__(
        self,
        config: ShopifyConfig,
        *,
        client_factory: Callable[[ResilienceConfig], ResilientClient] = _default_client_factory,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self.config = config
        self._sleep = sleep
        self._http = client_factory(config.resilience)
        self._headers = {
            "X-Shopify-Access-Token": config.access_token,
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

    async def __aenter__(self) -> ShopifyGraphQLClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def execute(self, query: str, variables: Mapping[str, Any] | None = None) -> GraphQLData:
        """Run a query, retrying throttled and transient failures, and return ``data``."""

        return await call_with_retry(
            partial(self._execute_once, query.strip(), dict(variables or {})),
            self.config.retry,
            sleep=self._sleep,
        )

    async def mutate(
        self, action: str, query: str, variables: Mapping[str, Any] | None = None
    ) -> GraphQLData:
        """Run a mutation and return its ``data[action]`` payload.

        Raises ``UserErrorSet`` when the payload carries ``userErrors``.
        """

        data = await self.execute(query, variables)
        payload = data.get(action) or {}
        error = user_errors_from(action, payload)
        if error is not None:
            log.error("%s", error)
            raise error
        return payload

    async def _execute_once(self, query: str, variables: dict[str, Any]) -> GraphQLData:
        body: dict[str, Any] = {"query": query}
        if variables:
            body["variables"] = variables
        try:
            response = await self._http.post(self.config.endpoint, json=body, headers=self._headers)
        except httpx.HTTPError as exc:
            raise TransportError(f"shopify request failed: {exc}") from exc

        if not response.is_success:
            text = response.text.strip()
            message = f"shopify request failed: {response.status_code} {response.reason_phrase}"
            if text:
                message = f"{message}: {text}"
            raise TransportError(
                message,
                status_code=response.status_code,
                body=text,
                retryable=response.status_code in self.config.retry.status_forcelist,
            )

        try:
            envelope = GraphQLEnvelope.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            raise TransportError(f"shopify graphql response unreadable: {exc}") from exc

        if envelope.errors:
            messages = [error.describe() for error in envelope.errors if error.message.strip()]
            if is_throttled(envelope.errors):
                raise ThrottledError(f"shopify graphql throttled: {'; '.join(messages)}")
            raise GraphQLResponseError(messages)
        if envelope.data is None:
            raise GraphQLResponseError(["response missing data"])
        return envelope.data
