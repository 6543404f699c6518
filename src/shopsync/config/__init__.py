"""Application configuration helpers."""

from __future__ import annotations

from .env import env_int, env_milliseconds, optional_env_var, require_env_vars
from .erp import ErpConfig, get_erp_config
from .errors import ConfigurationError, MissingConfigurationError
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy
from .logging import configure_logging
from .notifications import LogOutput, NotificationConfig, get_notification_config
from .shopify import ShopifyConfig, get_shopify_config
from .sync import MarketSettings, SyncConfig, get_sync_config

__all__ = [
    "ConfigurationError",
    "ErpConfig",
    "LogOutput",
    "MarketSettings",
    "MissingConfigurationError",
    "NotificationConfig",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "ShopifyConfig",
    "SyncConfig",
    "configure_logging",
    "env_int",
    "env_milliseconds",
    "get_erp_config",
    "get_notification_config",
    "get_shopify_config",
    "get_sync_config",
    "optional_env_var",
    "require_env_vars",
]
