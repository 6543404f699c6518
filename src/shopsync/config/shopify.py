"""Shopify Admin API configuration values."""

from __future__ import annotations

from dataclasses import dataclass, field

from .env import env_milliseconds, optional_env_var, require_env_vars
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy

SHOPIFY_DEFAULT_API_VERSION = "2025-01"
SHOPIFY_DEFAULT_TIMEOUT_MS = 5000


def _graphql_retry_policy() -> RetryPolicy:
    return RetryPolicy(total=5, backoff_factor=0.5, max_backoff_wait=10.0, backoff_jitter=0.0)


def normalize_shop_domain(domain: str) -> str:
    value = domain.strip()
    if not value.startswith(("http://", "https://")):
        value = "https://" + value
    return value.rstrip("/")


@dataclass(frozen=True)
class ShopifyConfig:
    """Holds Shopify GraphQL Admin API configuration values."""

    shop_domain: str
    access_token: str
    resilience: ResilienceConfig
    api_version: str = SHOPIFY_DEFAULT_API_VERSION
    retry: RetryPolicy = field(default_factory=_graphql_retry_policy)

    @property
    def endpoint(self) -> str:
        return f"{normalize_shop_domain(self.shop_domain)}/admin/api/{self.api_version}/graphql.json"


def get_shopify_config(*, resilience: ResilienceConfig | None = None) -> ShopifyConfig:
    values = require_env_vars(("SHOPIFY_SHOP_DOMAIN", "SHOPIFY_ACCESS_TOKEN"))
    timeout = env_milliseconds("SHOPIFY_DURATION_MS", SHOPIFY_DEFAULT_TIMEOUT_MS)
    return ShopifyConfig(
        shop_domain=normalize_shop_domain(values["SHOPIFY_SHOP_DOMAIN"]),
        access_token=values["SHOPIFY_ACCESS_TOKEN"],
        api_version=optional_env_var("SHOPIFY_API_VERSION", SHOPIFY_DEFAULT_API_VERSION),
        resilience=resilience
        or ResilienceConfig(
            name="shopify",
            timeout_seconds=timeout,
            # retries happen in the GraphQL layer, which can also see throttled payloads
            retry=None,
            ratelimit=RateLimit(max_calls=4, per_seconds=1.0),
        ),
    )
