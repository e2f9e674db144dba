"""Environment-driven settings."""

from __future__ import annotations

import os
from dataclasses import dataclass

from .constants import DEFAULT_MAX_ATTEMPTS, DEFAULT_REGION, DEFAULT_TABLE_NAME

_TRUTHY = {"1", "true", "yes", "on"}


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in _TRUTHY


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return int(value)


@dataclass(frozen=True)
class Settings:
    region: str = DEFAULT_REGION
    table_name: str = DEFAULT_TABLE_NAME
    endpoint_url: str | None = None
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    store_backend: str = "dynamodb"
    case_sensitive_status: bool = False
    log_level: str = "INFO"
    environment: str = "production"

    @property
    def is_development(self) -> bool:
        return self.environment.lower() == "development"

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            region=os.getenv("AWS_REGION", DEFAULT_REGION),
            table_name=os.getenv("DYNAMODB_TABLE", DEFAULT_TABLE_NAME),
            endpoint_url=os.getenv("DYNAMODB_ENDPOINT_URL") or None,
            max_attempts=_env_int("TICKET_METRICS_MAX_ATTEMPTS", DEFAULT_MAX_ATTEMPTS),
            store_backend=os.getenv("TICKET_METRICS_STORE", "dynamodb").strip().lower(),
            case_sensitive_status=_env_flag("TICKET_METRICS_STATUS_CASE_SENSITIVE"),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            environment=os.getenv("NODE_ENV") or os.getenv("ENVIRONMENT") or "production",
        )
