"""ERP collaborator configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from .env import env_milliseconds, optional_env_var, require_env_vars
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy

ERP_DEFAULT_DB_NAME = "EMANUEL"
ERP_DEFAULT_TIMEOUT_MS = 10000


@dataclass(frozen=True)
class ErpConfig:
    base_url: str
    token: str
    resilience: ResilienceConfig
    db_name: str = ERP_DEFAULT_DB_NAME


def get_erp_config(*, resilience: ResilienceConfig | None = None) -> ErpConfig:
    values = require_env_vars(("API_BASE_URL", "API_TOKEN"))
    base_url = values["API_BASE_URL"].rstrip("/")
    timeout = env_milliseconds("API_DURATION_MS", ERP_DEFAULT_TIMEOUT_MS)
    return ErpConfig(
        base_url=base_url,
        token=values["API_TOKEN"],
        db_name=optional_env_var("ERP_DB_NAME", ERP_DEFAULT_DB_NAME),
        resilience=resilience
        or ResilienceConfig(
            name="erp",
            base_url=base_url,
            timeout_seconds=timeout,
            retry=RetryPolicy(total=3, backoff_factor=0.5, max_backoff_wait=10.0),
            ratelimit=RateLimit(max_calls=5, per_seconds=1.0),
            default_headers={"Authorization": values["API_TOKEN"]},
        ),
    )
