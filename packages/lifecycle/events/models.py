"""Typed lifecycle event taxonomy.

Every event is one flat record: the base envelope fields shared by all
variants (``event_type``, ``timestamp``, ``service``, ``api``, ``host``,
``correlation_id``, ``metadata``) followed by variant-specific fields.
``event_type`` is the discriminant of the closed ``AnyEvent`` union.

Only variants that carry a free-form payload (``payload_fields``) are subject
to PII redaction; all other variants pass through ``redacted`` unchanged.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Annotated, Any, ClassVar, Literal, Mapping, Protocol, Sequence, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    field_validator,
    model_validator,
)

from .types import Actor, Resource, Status


class PayloadRedactor(Protocol):
    """Redaction operations an event needs to scrub its own payload."""

    def redact_mapping(
        self,
        data: Mapping[str, Any],
        sensitivity: Mapping[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Return a redacted copy of one payload mapping."""

    def redact_params(self, params: Sequence[Any]) -> list[Any]:
        """Return a redacted copy of positional query parameters."""


class LifecycleEvent(BaseModel):
    """Base envelope shared by every lifecycle event variant."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    omit_when_empty: ClassVar[frozenset[str]] = frozenset(
        {"correlation_id", "metadata"}
    )
    payload_fields: ClassVar[tuple[str, ...]] = ()

    event_type: str
    timestamp: datetime
    service: str = Field(min_length=1)
    api: str = ""
    host: str = ""
    correlation_id: str = ""
    metadata: dict[str, Any] | None = None

    @field_validator("timestamp")
    @classmethod
    def _normalize_timestamp(cls, value: datetime) -> datetime:
        """Normalize naive/aware timestamps to UTC."""
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    @property
    def event_category(self) -> str:
        """Return the first dot segment of the event type (``api``, ``db``...)."""
        return self.event_type.split(".", 1)[0]

    @property
    def span_name(self) -> str:
        """Return the span name: the first two dot segments of the event type."""
        parts = self.event_type.split(".")
        if len(parts) >= 2:
            return f"{parts[0]}.{parts[1]}"
        return self.event_type

    @property
    def carries_payload(self) -> bool:
        return len(self.payload_fields) > 0

    def redacted(
        self,
        redactor: PayloadRedactor,
        sensitivity: Mapping[str, Any] | None = None,
    ) -> LifecycleEvent:
        """Return a copy whose payload fields went through ``redactor``."""
        update: dict[str, Any] = {}
        for name in self.payload_fields:
            value = getattr(self, name)
            if value is None:
                continue
            update[name] = redactor.redact_mapping(value, sensitivity)
        if not update:
            return self
        return self.model_copy(update=update)

    def to_record(self) -> dict[str, Any]:
        """Return the JSON-ready wire record for this event.

        Top-level ``None`` values are dropped, as are the optional fields in
        ``omit_when_empty`` when they hold an empty/zero value. Payload
        contents are left untouched.
        """
        record = self.model_dump(mode="json")
        for name in list(record):
            value = record[name]
            if value is None:
                del record[name]
            elif name in self.omit_when_empty and value in ("", 0, [], {}):
                del record[name]
        return record


class _OutcomeEvent(LifecycleEvent):
    """Base for outcome variants whose ``status`` is fixed by the variant."""

    fixed_status: ClassVar[Status] = Status.SUCCESS

    status: Status = Status.SUCCESS

    @model_validator(mode="before")
    @classmethod
    def _derive_status(cls, data: Any) -> Any:
        """Pin ``status`` to the variant constant; reject conflicting input."""
        if not isinstance(data, dict):
            return data
        supplied = data.get("status")
        if supplied is not None and Status(supplied) is not cls.fixed_status:
            raise ValueError(
                f"{cls.__name__}.status is always {cls.fixed_status.value!r}"
            )
        return {**data, "status": cls.fixed_status}


# Service lifecycle


class ServiceStartedEvent(LifecycleEvent):
    event_type: Literal["service.started"] = "service.started"
    version: str
    pid: int


class ServiceHealthyEvent(LifecycleEvent):
    event_type: Literal["service.healthy"] = "service.healthy"
    health_checks: list[str] = Field(default_factory=list)


class ServiceShutdownEvent(LifecycleEvent):
    event_type: Literal["service.shutdown"] = "service.shutdown"
    reason: str
    exit_code: int


class ServiceCrashedEvent(LifecycleEvent):
    event_type: Literal["service.crashed"] = "service.crashed"
    reason: str
    stack_trace: str
    exit_code: int


# API requests


class RequestReceivedEvent(LifecycleEvent):
    omit_when_empty: ClassVar[frozenset[str]] = LifecycleEvent.omit_when_empty | {
        "user_agent",
        "remote_addr",
    }

    event_type: Literal["api.request.received"] = "api.request.received"
    method: str
    path: str
    user_agent: str = ""
    remote_addr: str = ""


class RequestHandledEvent(_OutcomeEvent):
    omit_when_empty: ClassVar[frozenset[str]] = LifecycleEvent.omit_when_empty | {
        "response_size_bytes"
    }

    event_type: Literal["api.request.handled"] = "api.request.handled"
    actor: Actor | None = None
    resource: Resource | None = None
    duration_ms: int
    status_code: int
    response_size_bytes: int = 0


class RequestErroredEvent(_OutcomeEvent):
    omit_when_empty: ClassVar[frozenset[str]] = LifecycleEvent.omit_when_empty | {
        "error_code"
    }
    fixed_status: ClassVar[Status] = Status.ERROR

    event_type: Literal["api.request.errored"] = "api.request.errored"
    status: Status = Status.ERROR
    error_message: str
    error_code: str = ""
    status_code: int
    duration_ms: int


class RequestRetriedEvent(LifecycleEvent):
    omit_when_empty: ClassVar[frozenset[str]] = LifecycleEvent.omit_when_empty | {
        "retry_reason"
    }

    event_type: Literal["api.request.retried"] = "api.request.retried"
    retry_count: int
    delay_ms: int
    retry_reason: str = ""


# Database tracing


class QueryStartedEvent(LifecycleEvent):
    omit_when_empty: ClassVar[frozenset[str]] = LifecycleEvent.omit_when_empty | {
        "params"
    }
    payload_fields: ClassVar[tuple[str, ...]] = ("params",)

    event_type: Literal["db.query.started"] = "db.query.started"
    query_id: str
    query: str
    params: list[Any] | None = None

    def redacted(
        self,
        redactor: PayloadRedactor,
        sensitivity: Mapping[str, Any] | None = None,
    ) -> LifecycleEvent:
        """Positional params have no field names: value detection only."""
        del sensitivity
        if self.params is None:
            return self
        return self.model_copy(update={"params": redactor.redact_params(self.params)})


class QueryCompletedEvent(_OutcomeEvent):
    omit_when_empty: ClassVar[frozenset[str]] = LifecycleEvent.omit_when_empty | {
        "rows_affected"
    }

    event_type: Literal["db.query.completed"] = "db.query.completed"
    query_id: str
    duration_ms: int
    rows_affected: int = 0


class QueryErroredEvent(_OutcomeEvent):
    omit_when_empty: ClassVar[frozenset[str]] = LifecycleEvent.omit_when_empty | {
        "error_code"
    }
    fixed_status: ClassVar[Status] = Status.ERROR

    event_type: Literal["db.query.errored"] = "db.query.errored"
    status: Status = Status.ERROR
    query_id: str
    error_message: str
    error_code: str = ""
    duration_ms: int


class TransactionStartedEvent(LifecycleEvent):
    event_type: Literal["db.transaction.started"] = "db.transaction.started"
    transaction_id: str


class TransactionCommittedEvent(LifecycleEvent):
    event_type: Literal["db.transaction.committed"] = "db.transaction.committed"
    transaction_id: str
    duration_ms: int


class TransactionRolledBackEvent(LifecycleEvent):
    omit_when_empty: ClassVar[frozenset[str]] = LifecycleEvent.omit_when_empty | {
        "reason"
    }

    event_type: Literal["db.transaction.rolled_back"] = "db.transaction.rolled_back"
    transaction_id: str
    reason: str = ""
    duration_ms: int


# Resource mutation


class ResourceCreatedEvent(LifecycleEvent):
    omit_when_empty: ClassVar[frozenset[str]] = LifecycleEvent.omit_when_empty | {
        "resource_data"
    }
    payload_fields: ClassVar[tuple[str, ...]] = ("resource_data",)

    event_type: Literal["resource.created"] = "resource.created"
    actor: Actor | None = None
    resource: Resource
    resource_data: dict[str, Any] | None = None


class ResourceUpdatedEvent(LifecycleEvent):
    omit_when_empty: ClassVar[frozenset[str]] = LifecycleEvent.omit_when_empty | {
        "previous_data",
        "new_data",
        "updated_fields",
    }
    payload_fields: ClassVar[tuple[str, ...]] = ("previous_data", "new_data")

    event_type: Literal["resource.updated"] = "resource.updated"
    actor: Actor | None = None
    resource: Resource
    previous_data: dict[str, Any] | None = None
    new_data: dict[str, Any] | None = None
    updated_fields: list[str] | None = None


class ResourceDeletedEvent(LifecycleEvent):
    omit_when_empty: ClassVar[frozenset[str]] = LifecycleEvent.omit_when_empty | {
        "final_data"
    }
    payload_fields: ClassVar[tuple[str, ...]] = ("final_data",)

    event_type: Literal["resource.deleted"] = "resource.deleted"
    actor: Actor | None = None
    resource: Resource
    soft_delete: bool = False
    final_data: dict[str, Any] | None = None


AnyEvent = Annotated[
    Union[
        ServiceStartedEvent,
        ServiceHealthyEvent,
        ServiceShutdownEvent,
        ServiceCrashedEvent,
        RequestReceivedEvent,
        RequestHandledEvent,
        RequestErroredEvent,
        RequestRetriedEvent,
        QueryStartedEvent,
        QueryCompletedEvent,
        QueryErroredEvent,
        TransactionStartedEvent,
        TransactionCommittedEvent,
        TransactionRolledBackEvent,
        ResourceCreatedEvent,
        ResourceUpdatedEvent,
        ResourceDeletedEvent,
    ],
    Field(discriminator="event_type"),
]

EVENT_TYPES: dict[str, type[LifecycleEvent]] = {
    model.model_fields["event_type"].default: model
    for model in (
        ServiceStartedEvent,
        ServiceHealthyEvent,
        ServiceShutdownEvent,
        ServiceCrashedEvent,
        RequestReceivedEvent,
        RequestHandledEvent,
        RequestErroredEvent,
        RequestRetriedEvent,
        QueryStartedEvent,
        QueryCompletedEvent,
        QueryErroredEvent,
        TransactionStartedEvent,
        TransactionCommittedEvent,
        TransactionRolledBackEvent,
        ResourceCreatedEvent,
        ResourceUpdatedEvent,
        ResourceDeletedEvent,
    )
}

_EVENT_ADAPTER: TypeAdapter[Any] = TypeAdapter(AnyEvent)


def parse_event(record: Mapping[str, Any]) -> LifecycleEvent:
    """Rebuild a typed event from one wire record.

    Raises ``pydantic.ValidationError`` for unknown event types or malformed
    records.
    """
    return _EVENT_ADAPTER.validate_python(dict(record))
