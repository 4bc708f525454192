"""Human-oriented terminal rendering of lifecycle events.

``StyledOutput`` renders one ``LEVEL event_type key=value ...`` line per
event through a rich ``Console``, coloring the event type, service, API,
status and HTTP status code from a ``ColorRegistry``. When a secondary JSON
writer is configured the JSON record is written there first, so the same
stream can feed log aggregation while a terminal shows the styled view.
"""

from __future__ import annotations

import json
from typing import Callable, TextIO

from rich.console import Console
from rich.text import Text

from packages.lifecycle.colors import ColorRegistry, format_with_color
from packages.lifecycle.errors import SinkWriteError
from packages.lifecycle.events import (
    LifecycleEvent,
    QueryCompletedEvent,
    QueryErroredEvent,
    QueryStartedEvent,
    RequestErroredEvent,
    RequestHandledEvent,
    RequestReceivedEvent,
    RequestRetriedEvent,
    ResourceCreatedEvent,
    ResourceDeletedEvent,
    ResourceUpdatedEvent,
    ServiceCrashedEvent,
    ServiceHealthyEvent,
    ServiceShutdownEvent,
    ServiceStartedEvent,
    TransactionCommittedEvent,
    TransactionRolledBackEvent,
    TransactionStartedEvent,
)

from .json_sink import JsonRecordSink, encode_event

FieldValue = str | int | Text
Field = tuple[str, FieldValue]

LEVEL_ERROR = "ERROR"
LEVEL_WARN = "WARN"
LEVEL_DEBUG = "DEBUG"
LEVEL_INFO = "INFO"

_LEVEL_STYLES = {
    LEVEL_ERROR: "bold red",
    LEVEL_WARN: "bold yellow",
    LEVEL_DEBUG: "dim",
    LEVEL_INFO: "bold cyan",
}

_LEVEL_MARKERS: tuple[tuple[str, tuple[str, ...]], ...] = (
    (LEVEL_ERROR, ("error", "errored", "failed", "crashed")),
    (LEVEL_WARN, ("warn",)),
    (LEVEL_DEBUG, ("debug", "trace")),
)


def quote_value(value: str) -> str:
    """Quote ``value`` when it would make a ``key=value`` pair ambiguous.

    Empty values and values holding whitespace, ``=``, a double quote or a
    non-printable character are rendered as a double-quoted escaped string.
    """
    if value and value.isprintable() and not any(
        char.isspace() or char in '="' for char in value
    ):
        return value
    return json.dumps(value, ensure_ascii=False)


def level_for(event_type: str) -> str:
    """Derive a display level from substrings of the event type."""
    lowered = event_type.lower()
    for level, markers in _LEVEL_MARKERS:
        if any(marker in lowered for marker in markers):
            return level
    return LEVEL_INFO


class StyledOutput:
    """Dual-sink writer: optional JSON records plus a styled console line."""

    name = "styled"

    def __init__(
        self,
        writer: TextIO,
        *,
        json_output: TextIO | None = None,
        json_only: bool = False,
        color_registry: ColorRegistry | None = None,
        console: Console | None = None,
    ) -> None:
        self._console = console or Console(
            file=writer, highlight=False, soft_wrap=True
        )
        self._json_sink = (
            JsonRecordSink(json_output) if json_output is not None else None
        )
        self._json_only = json_only
        self._colors = color_registry or ColorRegistry()

    @property
    def json_only(self) -> bool:
        return self._json_only

    @property
    def color_registry(self) -> ColorRegistry:
        return self._colors

    def write_event(self, event: LifecycleEvent) -> None:
        """Write the JSON record (when configured) then the styled line."""
        if self._json_sink is not None:
            self._json_sink.write_line(encode_event(event), event_type=event.event_type)
        if self._json_only:
            return
        line = self.render(event)
        try:
            self._console.print(line)
        except (OSError, ValueError) as exc:
            raise SinkWriteError(
                message=f"failed to render {event.event_type} event: {exc}",
                event_type=event.event_type,
                sink=self.name,
            ) from exc

    def render(self, event: LifecycleEvent) -> Text:
        """Build the styled line for ``event`` without writing it."""
        level = level_for(event.event_type)
        line = Text()
        line.append(level, style=_LEVEL_STYLES[level])
        line.append(" ")
        event_color = self._colors.event_color(event.event_type)
        line.append_text(format_with_color(event.event_type, event_color))
        for key, value in self._fields(event):
            line.append(" ")
            line.append(f"{key}=", style="dim")
            if isinstance(value, Text):
                line.append(quote_value(value.plain), style=value.style)
            else:
                line.append(quote_value(str(value)))
        return line

    def _fields(self, event: LifecycleEvent) -> list[Field]:
        fields: list[Field] = []
        if event.service:
            service_color = self._colors.service_color(event.service)
            fields.append(("service", format_with_color(event.service, service_color)))
        if event.api:
            api_color = self._colors.api_color(event.api)
            fields.append(("api", format_with_color(event.api, api_color)))
        if event.host:
            fields.append(("host", event.host))
        if event.correlation_id:
            fields.append(("correlation_id", event.correlation_id))
        fields.append(("timestamp", event.timestamp.isoformat(timespec="seconds")))
        extractor = _FIELD_EXTRACTORS.get(event.event_type)
        if extractor is not None:
            fields.extend(extractor(self, event))
        return fields

    def status_field(self, status: str) -> Field:
        """Return a ``status`` field colored from the status registry."""
        return ("status", format_with_color(status, self._colors.status_color(status)))

    def status_code_field(self, status_code: int) -> Field:
        """Return a ``status_code`` field colored by HTTP status class."""
        color = self._colors.http_status_color(status_code)
        return ("status_code", format_with_color(str(status_code), color))


def _present(*pairs: tuple[str, str | int]) -> list[Field]:
    """Keep only pairs whose value is non-empty and non-zero."""
    return [(key, value) for key, value in pairs if value not in ("", 0)]


def _service_started(out: StyledOutput, event: ServiceStartedEvent) -> list[Field]:
    return _present(("version", event.version), ("pid", event.pid))


def _service_healthy(out: StyledOutput, event: ServiceHealthyEvent) -> list[Field]:
    return _present(("health_checks", ",".join(event.health_checks)))


def _service_shutdown(out: StyledOutput, event: ServiceShutdownEvent) -> list[Field]:
    return _present(("reason", event.reason), ("exit_code", event.exit_code))


def _service_crashed(out: StyledOutput, event: ServiceCrashedEvent) -> list[Field]:
    return _present(
        ("reason", event.reason),
        ("stack_trace", event.stack_trace),
        ("exit_code", event.exit_code),
    )


def _request_received(out: StyledOutput, event: RequestReceivedEvent) -> list[Field]:
    return _present(
        ("method", event.method),
        ("path", event.path),
        ("user_agent", event.user_agent),
        ("remote_addr", event.remote_addr),
    )


def _request_handled(out: StyledOutput, event: RequestHandledEvent) -> list[Field]:
    fields: list[Field] = []
    if event.status_code > 0:
        fields.append(out.status_code_field(event.status_code))
    fields.extend(
        _present(
            ("duration_ms", event.duration_ms),
            ("response_size_bytes", event.response_size_bytes),
            ("actor", event.actor.user_id if event.actor else ""),
            ("resource", event.resource.id if event.resource else ""),
        )
    )
    fields.append(out.status_field(event.status.value))
    return fields


def _request_errored(out: StyledOutput, event: RequestErroredEvent) -> list[Field]:
    fields: list[Field] = []
    if event.status_code > 0:
        fields.append(out.status_code_field(event.status_code))
    fields.extend(
        _present(
            ("duration_ms", event.duration_ms),
            ("error", event.error_message),
            ("error_code", event.error_code),
        )
    )
    fields.append(out.status_field(event.status.value))
    return fields


def _request_retried(out: StyledOutput, event: RequestRetriedEvent) -> list[Field]:
    return _present(
        ("retry_count", event.retry_count),
        ("delay_ms", event.delay_ms),
        ("retry_reason", event.retry_reason),
    )


def _query_started(out: StyledOutput, event: QueryStartedEvent) -> list[Field]:
    return _present(("query_id", event.query_id), ("query", event.query))


def _query_completed(out: StyledOutput, event: QueryCompletedEvent) -> list[Field]:
    return _present(
        ("query_id", event.query_id),
        ("duration_ms", event.duration_ms),
        ("rows_affected", event.rows_affected),
    )


def _query_errored(out: StyledOutput, event: QueryErroredEvent) -> list[Field]:
    return _present(
        ("query_id", event.query_id),
        ("duration_ms", event.duration_ms),
        ("error", event.error_message),
        ("error_code", event.error_code),
    )


def _transaction_started(
    out: StyledOutput, event: TransactionStartedEvent
) -> list[Field]:
    return _present(("transaction_id", event.transaction_id))


def _transaction_committed(
    out: StyledOutput, event: TransactionCommittedEvent
) -> list[Field]:
    return _present(
        ("transaction_id", event.transaction_id), ("duration_ms", event.duration_ms)
    )


def _transaction_rolled_back(
    out: StyledOutput, event: TransactionRolledBackEvent
) -> list[Field]:
    return _present(
        ("transaction_id", event.transaction_id),
        ("reason", event.reason),
        ("duration_ms", event.duration_ms),
    )


def _resource_fields(
    out: StyledOutput,
    event: ResourceCreatedEvent | ResourceUpdatedEvent | ResourceDeletedEvent,
    status: str,
) -> list[Field]:
    fields = _present(
        ("actor", event.actor.user_id if event.actor else ""),
        ("resource", event.resource.id),
    )
    fields.append(out.status_field(status))
    return fields


def _resource_created(out: StyledOutput, event: ResourceCreatedEvent) -> list[Field]:
    return _resource_fields(out, event, "created")


def _resource_updated(out: StyledOutput, event: ResourceUpdatedEvent) -> list[Field]:
    fields = _resource_fields(out, event, "updated")
    if event.updated_fields:
        fields.append(("updated_fields", ",".join(event.updated_fields)))
    return fields


def _resource_deleted(out: StyledOutput, event: ResourceDeletedEvent) -> list[Field]:
    fields = _resource_fields(out, event, "deleted")
    if event.soft_delete:
        fields.append(("soft_delete", "true"))
    return fields


_FIELD_EXTRACTORS: dict[str, Callable[[StyledOutput, LifecycleEvent], list[Field]]] = {
    "service.started": _service_started,
    "service.healthy": _service_healthy,
    "service.shutdown": _service_shutdown,
    "service.crashed": _service_crashed,
    "api.request.received": _request_received,
    "api.request.handled": _request_handled,
    "api.request.errored": _request_errored,
    "api.request.retried": _request_retried,
    "db.query.started": _query_started,
    "db.query.completed": _query_completed,
    "db.query.errored": _query_errored,
    "db.transaction.started": _transaction_started,
    "db.transaction.committed": _transaction_committed,
    "db.transaction.rolled_back": _transaction_rolled_back,
    "resource.created": _resource_created,
    "resource.updated": _resource_updated,
    "resource.deleted": _resource_deleted,
}
