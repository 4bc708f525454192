"""OpenTelemetry-backed telemetry collaborator."""

from __future__ import annotations

import threading

from opentelemetry import metrics, trace
from opentelemetry.context import Context
from opentelemetry.metrics import Counter, Histogram, Meter
from opentelemetry.trace import Span, Tracer

from .attributes import COUNTER_SUFFIX, HISTOGRAM_SUFFIX
from .protocol import Attributes, SpanHandle


class OtelSpanHandle:
    """Span handle wrapping one OpenTelemetry span."""

    def __init__(self, span: Span) -> None:
        self._span = span

    @property
    def span(self) -> Span:
        return self._span

    def close(self) -> None:
        self._span.end()


class OtelTelemetry:
    """Create spans and lazily-cached instruments through the global providers.

    Instruments are created once per name and reused; creation is guarded so
    concurrent emitters never register the same instrument twice.
    """

    def __init__(
        self,
        *,
        tracer_name: str = "lifecycle",
        meter_name: str = "lifecycle",
        tracer: Tracer | None = None,
        meter: Meter | None = None,
    ) -> None:
        self._tracer = tracer if tracer is not None else trace.get_tracer(tracer_name)
        self._meter = meter if meter is not None else metrics.get_meter(meter_name)
        self._lock = threading.Lock()
        self._counters: dict[str, Counter] = {}
        self._histograms: dict[str, Histogram] = {}

    def start_span(
        self, context: Context | None, name: str, attributes: Attributes
    ) -> tuple[Context | None, SpanHandle]:
        span = self._tracer.start_span(
            name, context=context, attributes=dict(attributes)
        )
        return trace.set_span_in_context(span, context), OtelSpanHandle(span)

    def record_counter(self, name: str, delta: int, attributes: Attributes) -> None:
        self._counter(name).add(delta, attributes=dict(attributes))

    def record_histogram(
        self, name: str, value_seconds: float, attributes: Attributes
    ) -> None:
        self._histogram(name).record(value_seconds, attributes=dict(attributes))

    def _counter(self, name: str) -> Counter:
        with self._lock:
            counter = self._counters.get(name)
            if counter is None:
                event_type = name.removesuffix(COUNTER_SUFFIX)
                counter = self._meter.create_counter(
                    name, description=f"Count of {event_type} events"
                )
                self._counters[name] = counter
            return counter

    def _histogram(self, name: str) -> Histogram:
        with self._lock:
            histogram = self._histograms.get(name)
            if histogram is None:
                event_type = name.removesuffix(HISTOGRAM_SUFFIX)
                histogram = self._meter.create_histogram(
                    name, unit="s", description=f"Duration of {event_type} events"
                )
                self._histograms[name] = histogram
            return histogram
