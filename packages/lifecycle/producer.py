"""Lifecycle event producer.

Each ``emit_*`` call runs the same synchronous pipeline on the calling
thread:

1. build the typed event (UTC timestamp, service/host, API precedence),
2. redact payload-bearing variants,
3. open a span and record the event counter/duration histogram,
4. write the event to exactly one sink mode,
5. close the span, on every path.

Telemetry failures are logged and never abort an emission. Sink failures
are logged and re-raised as ``EmissionError`` subclasses.
"""

from __future__ import annotations

import logging
import sys
from datetime import UTC, datetime
from typing import Any, Mapping, Sequence, TextIO

from opentelemetry.context import Context

from packages.lifecycle.colors import ColorRegistry
from packages.lifecycle.context import (
    current_correlation_id,
    current_remote_addr,
    current_user_agent,
)
from packages.lifecycle.errors import EmissionError, SerializationError
from packages.lifecycle.events import (
    Actor,
    LifecycleEvent,
    QueryCompletedEvent,
    QueryErroredEvent,
    QueryStartedEvent,
    RequestErroredEvent,
    RequestHandledEvent,
    RequestReceivedEvent,
    RequestRetriedEvent,
    Resource,
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
from packages.lifecycle.logging import fields, log_context
from packages.lifecycle.output import JsonRecordSink, StyledOutput
from packages.lifecycle.redaction import PiiDetector, Redactor, SensitivityMap
from packages.lifecycle.telemetry import (
    OtelTelemetry,
    SpanHandle,
    Telemetry,
    counter_name,
    event_attributes,
    histogram_name,
)

_LOGGER = logging.getLogger(__name__)


class Producer:
    """Build, redact, instrument and write lifecycle events for one service."""

    def __init__(
        self,
        service: str,
        host: str = "",
        *,
        api: str = "",
        output: TextIO | None = None,
        styled: StyledOutput | None = None,
        color_registry: ColorRegistry | None = None,
        detector: PiiDetector | None = None,
        redactor: Redactor | None = None,
        telemetry: Telemetry | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        if not service:
            raise ValueError("service is required")
        self._service = service
        self._host = host
        self._api = api
        self._json_sink = JsonRecordSink(output if output is not None else sys.stdout)
        self._styled = styled
        if color_registry is not None:
            self._colors = color_registry
        elif styled is not None:
            self._colors = styled.color_registry
        else:
            self._colors = ColorRegistry()
        self._redactor = redactor or Redactor(detector=detector)
        self._telemetry: Telemetry = telemetry or OtelTelemetry()
        self._logger = logger or _LOGGER

    @property
    def service(self) -> str:
        return self._service

    @property
    def host(self) -> str:
        return self._host

    @property
    def api(self) -> str:
        return self._api

    @property
    def color_registry(self) -> ColorRegistry:
        return self._colors

    @property
    def redactor(self) -> Redactor:
        return self._redactor

    # Color registration passthroughs.

    def register_service_color(self, service: str, color: str) -> None:
        self._colors.register_service_color(service, color)

    def register_api_color(self, api: str, color: str) -> None:
        self._colors.register_api_color(api, color)

    def register_event_color(self, event_type: str, color: str) -> None:
        self._colors.register_event_color(event_type, color)

    def register_status_color(self, status: str, color: str) -> None:
        self._colors.register_status_color(status, color)

    # Service lifecycle.

    def emit_service_started(
        self, version: str, pid: int, *, context: Context | None = None
    ) -> None:
        self._emit(
            ServiceStartedEvent(**self._envelope(), version=version, pid=pid),
            context=context,
        )

    def emit_service_healthy(
        self, health_checks: Sequence[str], *, context: Context | None = None
    ) -> None:
        self._emit(
            ServiceHealthyEvent(**self._envelope(), health_checks=list(health_checks)),
            context=context,
        )

    def emit_service_shutdown(
        self, reason: str, exit_code: int, *, context: Context | None = None
    ) -> None:
        event = ServiceShutdownEvent(
            **self._envelope(), reason=reason, exit_code=exit_code
        )
        self._emit(event, context=context)

    def emit_service_crashed(
        self,
        reason: str,
        stack_trace: str,
        exit_code: int,
        *,
        context: Context | None = None,
    ) -> None:
        event = ServiceCrashedEvent(
            **self._envelope(),
            reason=reason,
            stack_trace=stack_trace,
            exit_code=exit_code,
        )
        self._emit(event, context=context)

    # API requests.

    def emit_request_received(
        self,
        correlation_id: str,
        method: str,
        path: str,
        *,
        metadata: Mapping[str, Any] | None = None,
        api: str | None = None,
        context: Context | None = None,
    ) -> None:
        event = RequestReceivedEvent(
            **self._envelope(
                correlation_id=correlation_id,
                api=self._resolve_api(api),
                metadata=dict(metadata) if metadata is not None else None,
            ),
            method=method,
            path=path,
            user_agent=current_user_agent(),
            remote_addr=current_remote_addr(),
        )
        self._emit(event, context=context)

    def emit_request_handled(
        self,
        correlation_id: str,
        *,
        actor: Actor | None,
        resource: Resource | None,
        status_code: int,
        duration_ms: int,
        response_size_bytes: int = 0,
        api: str | None = None,
        context: Context | None = None,
    ) -> None:
        event = RequestHandledEvent(
            **self._envelope(
                correlation_id=correlation_id, api=self._resolve_api(api, resource)
            ),
            actor=actor,
            resource=resource,
            status_code=status_code,
            duration_ms=duration_ms,
            response_size_bytes=response_size_bytes,
        )
        self._emit(event, duration_ms=duration_ms, context=context)

    def emit_request_errored(
        self,
        correlation_id: str,
        error_message: str,
        error_code: str,
        *,
        status_code: int,
        duration_ms: int,
        api: str | None = None,
        context: Context | None = None,
    ) -> None:
        event = RequestErroredEvent(
            **self._envelope(correlation_id=correlation_id, api=self._resolve_api(api)),
            error_message=error_message,
            error_code=error_code,
            status_code=status_code,
            duration_ms=duration_ms,
        )
        self._emit(event, duration_ms=duration_ms, context=context)

    def emit_request_retried(
        self,
        correlation_id: str,
        retry_count: int,
        delay_ms: int,
        retry_reason: str = "",
        *,
        context: Context | None = None,
    ) -> None:
        event = RequestRetriedEvent(
            **self._envelope(correlation_id=correlation_id),
            retry_count=retry_count,
            delay_ms=delay_ms,
            retry_reason=retry_reason,
        )
        self._emit(event, duration_ms=delay_ms, context=context)

    # Database tracing. Correlation comes from the ambient emission context.

    def emit_query_started(
        self,
        query_id: str,
        query: str,
        params: Sequence[Any] | None = None,
        *,
        context: Context | None = None,
    ) -> None:
        event = QueryStartedEvent(
            **self._envelope(correlation_id=current_correlation_id()),
            query_id=query_id,
            query=query,
            params=list(params) if params is not None else None,
        )
        self._emit(event, context=context)

    def emit_query_completed(
        self,
        query_id: str,
        duration_ms: int,
        rows_affected: int = 0,
        *,
        context: Context | None = None,
    ) -> None:
        event = QueryCompletedEvent(
            **self._envelope(correlation_id=current_correlation_id()),
            query_id=query_id,
            duration_ms=duration_ms,
            rows_affected=rows_affected,
        )
        self._emit(event, duration_ms=duration_ms, context=context)

    def emit_query_errored(
        self,
        query_id: str,
        error_message: str,
        error_code: str,
        duration_ms: int,
        *,
        context: Context | None = None,
    ) -> None:
        event = QueryErroredEvent(
            **self._envelope(correlation_id=current_correlation_id()),
            query_id=query_id,
            error_message=error_message,
            error_code=error_code,
            duration_ms=duration_ms,
        )
        self._emit(event, duration_ms=duration_ms, context=context)

    def emit_transaction_started(
        self, transaction_id: str, *, context: Context | None = None
    ) -> None:
        event = TransactionStartedEvent(
            **self._envelope(correlation_id=current_correlation_id()),
            transaction_id=transaction_id,
        )
        self._emit(event, context=context)

    def emit_transaction_committed(
        self, transaction_id: str, duration_ms: int, *, context: Context | None = None
    ) -> None:
        event = TransactionCommittedEvent(
            **self._envelope(correlation_id=current_correlation_id()),
            transaction_id=transaction_id,
            duration_ms=duration_ms,
        )
        self._emit(event, duration_ms=duration_ms, context=context)

    def emit_transaction_rolled_back(
        self,
        transaction_id: str,
        reason: str,
        duration_ms: int,
        *,
        context: Context | None = None,
    ) -> None:
        event = TransactionRolledBackEvent(
            **self._envelope(correlation_id=current_correlation_id()),
            transaction_id=transaction_id,
            reason=reason,
            duration_ms=duration_ms,
        )
        self._emit(event, duration_ms=duration_ms, context=context)

    # Resource mutation.

    def emit_resource_created(
        self,
        correlation_id: str,
        *,
        actor: Actor | None,
        resource: Resource,
        resource_data: Mapping[str, Any] | None,
        sensitivity: SensitivityMap | None = None,
        api: str | None = None,
        context: Context | None = None,
    ) -> None:
        event = ResourceCreatedEvent(
            **self._envelope(
                correlation_id=correlation_id, api=self._resolve_api(api, resource)
            ),
            actor=actor,
            resource=resource,
            resource_data=_copy(resource_data),
        )
        self._emit(event, sensitivity=sensitivity, context=context)

    def emit_resource_updated(
        self,
        correlation_id: str,
        *,
        actor: Actor | None,
        resource: Resource,
        previous_data: Mapping[str, Any] | None,
        new_data: Mapping[str, Any] | None,
        updated_fields: Sequence[str] | None,
        sensitivity: SensitivityMap | None = None,
        api: str | None = None,
        context: Context | None = None,
    ) -> None:
        event = ResourceUpdatedEvent(
            **self._envelope(
                correlation_id=correlation_id, api=self._resolve_api(api, resource)
            ),
            actor=actor,
            resource=resource,
            previous_data=_copy(previous_data),
            new_data=_copy(new_data),
            updated_fields=list(updated_fields) if updated_fields is not None else None,
        )
        self._emit(event, sensitivity=sensitivity, context=context)

    def emit_resource_deleted(
        self,
        correlation_id: str,
        *,
        actor: Actor | None,
        resource: Resource,
        soft_delete: bool,
        final_data: Mapping[str, Any] | None,
        sensitivity: SensitivityMap | None = None,
        api: str | None = None,
        context: Context | None = None,
    ) -> None:
        event = ResourceDeletedEvent(
            **self._envelope(
                correlation_id=correlation_id, api=self._resolve_api(api, resource)
            ),
            actor=actor,
            resource=resource,
            soft_delete=soft_delete,
            final_data=_copy(final_data),
        )
        self._emit(event, sensitivity=sensitivity, context=context)

    # Pipeline.

    def _resolve_api(
        self, explicit: str | None, resource: Resource | None = None
    ) -> str:
        """Explicit argument, then producer default, then resource type."""
        if explicit:
            return explicit
        if self._api:
            return self._api
        if resource is not None:
            return resource.type
        return ""

    def _envelope(
        self,
        *,
        correlation_id: str = "",
        api: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        return {
            "timestamp": datetime.now(UTC),
            "service": self._service,
            "host": self._host,
            "api": self._api if api is None else api,
            "correlation_id": correlation_id,
            "metadata": metadata,
        }

    def _emit(
        self,
        event: LifecycleEvent,
        *,
        duration_ms: int = 0,
        sensitivity: SensitivityMap | None = None,
        context: Context | None = None,
    ) -> None:
        if event.carries_payload:
            event = event.redacted(self._redactor, sensitivity)

        attributes = event_attributes(event)
        span = self._start_span(context, event, attributes)
        try:
            self._record_metrics(event, attributes, duration_ms)
            self._write(event)
        except EmissionError as exc:
            self._log_emission_failure(event, exc)
            raise
        finally:
            if span is not None:
                self._close_span(span, event)

    def _write(self, event: LifecycleEvent) -> None:
        if self._styled is not None:
            self._styled.write_event(event)
        else:
            self._json_sink.write(event)

    def _start_span(
        self,
        context: Context | None,
        event: LifecycleEvent,
        attributes: Mapping[str, str],
    ) -> SpanHandle | None:
        try:
            _, span = self._telemetry.start_span(context, event.span_name, attributes)
        except Exception as exc:  # noqa: BLE001
            self._log_telemetry_failure(event, fields.STAGE_SPAN, exc)
            return None
        return span

    def _record_metrics(
        self,
        event: LifecycleEvent,
        attributes: Mapping[str, str],
        duration_ms: int,
    ) -> None:
        try:
            self._telemetry.record_counter(
                counter_name(event.event_type), 1, attributes
            )
            if duration_ms:
                self._telemetry.record_histogram(
                    histogram_name(event.event_type), duration_ms / 1000.0, attributes
                )
        except Exception as exc:  # noqa: BLE001
            self._log_telemetry_failure(event, fields.STAGE_METRICS, exc)

    def _close_span(self, span: SpanHandle, event: LifecycleEvent) -> None:
        try:
            span.close()
        except Exception as exc:  # noqa: BLE001
            self._log_telemetry_failure(event, fields.STAGE_CLOSE, exc)

    def _log_telemetry_failure(
        self, event: LifecycleEvent, stage: str, exc: Exception
    ) -> None:
        with log_context(
            {
                fields.EVENT: fields.TELEMETRY_FAILURE_EVENT,
                fields.EVENT_TYPE: event.event_type,
                fields.STAGE: stage,
                fields.TELEMETRY: type(self._telemetry).__name__,
                fields.ERRORS: [f"{type(exc).__name__}: {exc}"],
            }
        ):
            self._logger.warning("Lifecycle telemetry failed")

    def _log_emission_failure(self, event: LifecycleEvent, exc: EmissionError) -> None:
        stage = fields.STAGE_WRITE
        if isinstance(exc, SerializationError):
            stage = fields.STAGE_SERIALIZE
        with log_context(
            {
                fields.EVENT: fields.EMISSION_FAILURE_EVENT,
                fields.EVENT_TYPE: event.event_type,
                fields.STAGE: stage,
                fields.SINK: getattr(exc, "sink", None),
                fields.ERRORS: [f"{type(exc).__name__}: {exc}"],
            }
        ):
            self._logger.warning("Lifecycle event emission failed")


def _copy(data: Mapping[str, Any] | None) -> dict[str, Any] | None:
    return dict(data) if data is not None else None
