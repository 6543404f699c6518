"""Operator notification settings."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from logging import getLogger

from .env import optional_env_var

log = getLogger(__name__)


class LogOutput(StrEnum):
    STDOUT = "stdout"
    TELEGRAM = "telegram"
    BOTH = "both"
    NONE = "none"


@dataclass(frozen=True, slots=True)
class NotificationConfig:
    output: LogOutput = LogOutput.STDOUT
    telegram_chat_id: str = ""
    telegram_token: str = ""

    @property
    def has_telegram_credentials(self) -> bool:
        return bool(self.telegram_chat_id and self.telegram_token)


def get_notification_config() -> NotificationConfig:
    raw = optional_env_var("LOG_OUTPUT", LogOutput.STDOUT).lower()
    try:
        output = LogOutput(raw)
    except ValueError:
        log.warning("Unknown LOG_OUTPUT=%r, defaulting to stdout", raw)
        output = LogOutput.STDOUT
    return NotificationConfig(
        output=output,
        telegram_chat_id=optional_env_var("TELEGRAM_CHAT_ID"),
        telegram_token=optional_env_var("TELEGRAM_TOKEN"),
    )
