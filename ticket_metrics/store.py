"""Conditional upsert of metrics records into a key-value table."""

from __future__ import annotations

import copy
import threading
import time
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Callable, Mapping

import boto3
from boto3.dynamodb.types import TypeDeserializer, TypeSerializer
from botocore.config import Config
from botocore.exceptions import ClientError

from .config import Settings
from .constants import TTL_ATTRIBUTE, TTL_SECONDS
from .exceptions import (
    CapacityExceededError,
    MetricsStoreError,
    StoreNotFoundError,
    StoreValidationError,
)
from .logging_config import get_logger, log_latency
from .models import Metrics, format_timestamp

logger = get_logger(__name__)

CAPACITY_ERROR_CODES = {
    "ProvisionedThroughputExceededException",
    "ThrottlingException",
    "RequestLimitExceeded",
}


def build_dynamodb_client(settings: Settings) -> Any:
    """Create the process-wide DynamoDB client.

    Retries use botocore's standard mode (bounded exponential backoff with
    jitter); the writer itself never retries.
    """
    return boto3.client(
        "dynamodb",
        region_name=settings.region,
        endpoint_url=settings.endpoint_url,
        config=Config(retries={"max_attempts": settings.max_attempts, "mode": "standard"}),
    )


def _to_dynamo(value: Any) -> Any:
    if isinstance(value, bool):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    if isinstance(value, Mapping):
        return {str(k): _to_dynamo(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_dynamo(v) for v in value]
    return value


def translate_client_error(exc: ClientError, table_name: str) -> Exception:
    error = exc.response.get("Error", {})
    code = error.get("Code")
    message = error.get("Message") or str(exc)

    if code == "ResourceNotFoundException":
        return StoreNotFoundError(f"DynamoDB table '{table_name}' not found", table_name, code)
    if code in CAPACITY_ERROR_CODES:
        return CapacityExceededError(
            "DynamoDB write capacity exceeded. Please try again later.", table_name, code
        )
    if code == "ValidationException":
        return StoreValidationError(f"DynamoDB validation error: {message}", table_name, code)
    return exc


class DynamoMetricsTable:
    """DynamoDB binding: a single ``UpdateItem`` returning ``ALL_NEW``."""

    def __init__(self, client: Any, table_name: str):
        self.client = client
        self.table_name = table_name
        self._serializer = TypeSerializer()
        self._deserializer = TypeDeserializer()

    def _serialize(self, values: Mapping[str, Any]) -> dict[str, Any]:
        return {name: self._serializer.serialize(_to_dynamo(value)) for name, value in values.items()}

    def build_update_request(
        self,
        key: Mapping[str, Any],
        set_fields: Mapping[str, Any],
        set_if_absent: Mapping[str, Any],
    ) -> dict[str, Any]:
        clauses = [f"#{name} = :{name}" for name in set_fields]
        clauses.extend(f"#{name} = if_not_exists(#{name}, :{name})" for name in set_if_absent)

        names = list(set_fields) + list(set_if_absent)
        values = {f":{name}": value for name, value in {**set_fields, **set_if_absent}.items()}

        return {
            "TableName": self.table_name,
            "Key": self._serialize(key),
            "UpdateExpression": "SET " + ", ".join(clauses),
            "ExpressionAttributeNames": {f"#{name}": name for name in names},
            "ExpressionAttributeValues": self._serialize(values),
            "ReturnValues": "ALL_NEW",
        }

    def update(
        self,
        key: Mapping[str, Any],
        set_fields: Mapping[str, Any],
        set_if_absent: Mapping[str, Any],
    ) -> dict[str, Any]:
        request = self.build_update_request(key, set_fields, set_if_absent)
        try:
            response = self.client.update_item(**request)
        except ClientError as exc:
            error = exc.response.get("Error", {})
            logger.error(
                "DynamoDB operation failed",
                extra={
                    "error": error.get("Message"),
                    "code": error.get("Code"),
                    "request_id": exc.response.get("ResponseMetadata", {}).get("RequestId"),
                    "status_code": exc.response.get("ResponseMetadata", {}).get("HTTPStatusCode"),
                    "table_name": self.table_name,
                },
            )
            translated = translate_client_error(exc, self.table_name)
            if translated is exc:
                raise
            raise translated from exc

        attributes = response.get("Attributes", {})
        return {name: self._deserializer.deserialize(value) for name, value in attributes.items()}


class InMemoryMetricsTable:
    """Dict-backed table with the same merge semantics as the DynamoDB binding.

    The lock stands in for the store's atomic conditional write.
    """

    def __init__(self, table_name: str = "memory"):
        self.table_name = table_name
        self._items: dict[tuple[Any, ...], dict[str, Any]] = {}
        self._lock = threading.Lock()

    def update(
        self,
        key: Mapping[str, Any],
        set_fields: Mapping[str, Any],
        set_if_absent: Mapping[str, Any],
    ) -> dict[str, Any]:
        item_key = tuple(key[name] for name in sorted(key))
        with self._lock:
            item = self._items.setdefault(item_key, dict(key))
            item.update(copy.deepcopy(dict(set_fields)))
            for name, value in set_if_absent.items():
                item.setdefault(name, value)
            return copy.deepcopy(item)

    def get(self, key: Mapping[str, Any]) -> dict[str, Any] | None:
        item_key = tuple(key[name] for name in sorted(key))
        with self._lock:
            item = self._items.get(item_key)
            return copy.deepcopy(item) if item is not None else None

    def __len__(self) -> int:
        return len(self._items)


class MetricsStoreWriter:
    def __init__(self, table: DynamoMetricsTable | InMemoryMetricsTable, clock: Callable[[], float] = time.time):
        self.table = table
        self._clock = clock

    @property
    def table_name(self) -> str:
        return self.table.table_name

    def persist(self, metrics: Metrics) -> Metrics:
        """Upsert ``metrics`` and return the record as stored.

        Computed fields are overwritten; ``ttl`` is only written when the item
        does not have one yet, so the returned expiration may predate this call.
        """
        now = self._clock()
        set_fields = {
            "severityDistribution": metrics.severity_distribution,
            "averageResolutionTimes": metrics.average_resolution_times,
            "slaCompliance": metrics.sla_compliance,
            "ticketCount": metrics.ticket_count,
            "openTickets": metrics.open_tickets,
            "resolvedTickets": metrics.resolved_tickets,
            "updatedAt": format_timestamp(datetime.fromtimestamp(now, tz=timezone.utc)),
        }
        set_if_absent = {TTL_ATTRIBUTE: int(now) + TTL_SECONDS}

        logger.info(
            "Storing metrics",
            extra={"project_id": metrics.project_id, "timestamp": metrics.timestamp, "table_name": self.table_name},
        )
        try:
            with log_latency(logger, "metrics_upsert", table_name=self.table_name):
                item = self.table.update(metrics.key, set_fields, set_if_absent)
        except MetricsStoreError as exc:
            logger.error(
                exc.message,
                extra={"code": exc.code, "table_name": exc.table_name, "retryable": exc.retryable},
            )
            raise

        return Metrics.from_item(item)


def build_store_writer(settings: Settings, client: Any = None) -> MetricsStoreWriter:
    if settings.store_backend == "memory":
        return MetricsStoreWriter(InMemoryMetricsTable(settings.table_name))
    if settings.store_backend != "dynamodb":
        raise ValueError(f"Unknown store backend: {settings.store_backend!r}")
    if client is None:
        client = build_dynamodb_client(settings)
    return MetricsStoreWriter(DynamoMetricsTable(client, settings.table_name))
