"""Helpers for driving ``ShopifyGraphQLClient`` against ``httpx.MockTransport``."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import httpx

from shopsync.adapters.http_resilience import ResilientClient
from shopsync.adapters.shopify import ShopifyGraphQLClient
from shopsync.config import ResilienceConfig, ShopifyConfig

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable


def make_config() -> ShopifyConfig:
    return ShopifyConfig(
        shop_domain="https://example.myshopify.com",
        access_token="shpat_test",
        resilience=ResilienceConfig(name="shopify-test", retry=None),
    )


@dataclass
class ScriptedShopify:
    """Answer GraphQL requests from a queue of responses and record every request."""

    responses: list[httpx.Response | Callable[[dict[str, Any]], httpx.Response]]
    requests: list[dict[str, Any]] = field(default_factory=list)
    headers: list[httpx.Headers] = field(default_factory=list)
    sleeps: list[float] = field(default_factory=list)

    def handler(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        self.requests.append(body)
        self.headers.append(request.headers)
        response = self.responses.pop(0)
        if callable(response):
            return response(body)
        return response

    async def sleep(self, delay: float) -> None:
        self.sleeps.append(delay)

    def client(
        self,
        config: ShopifyConfig | None = None,
        *,
        sleep: Callable[[float], Awaitable[None]] | None = None,
    ) -> ShopifyGraphQLClient:
        def factory(resilience: ResilienceConfig) -> ResilientClient:
            return ResilientClient(resilience, transport=httpx.MockTransport(self.handler))

        return ShopifyGraphQLClient(
            config or make_config(), client_factory=factory, sleep=sleep or self.sleep
        )


def data(payload: dict[str, Any]) -> httpx.Response:
    return httpx.Response(200, json={"data": payload})


def user_errors(action: str, *errors: tuple[list[str] | None, str]) -> httpx.Response:
    return data(
        {action: {"userErrors": [{"field": fld, "message": message} for fld, message in errors]}}
    )
