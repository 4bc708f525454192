"""Canonical field names for the producer's own diagnostic logs.

These keys are shared by the logging context helpers and the producer's
failure warnings so structured diagnostics keep one shape.
"""

TIMESTAMP = "timestamp"
LEVEL = "level"
LOGGER = "logger"
MESSAGE = "message"
EVENT = "event"
EXCEPTION = "exception"

# Emission diagnostics.
EVENT_TYPE = "event_type"
STAGE = "stage"
ERRORS = "errors"
SINK = "sink"
TELEMETRY = "telemetry"
EMISSION_FAILURE_EVENT = "lifecycle_emission_failure"
TELEMETRY_FAILURE_EVENT = "lifecycle_telemetry_failure"

# Emission stages.
STAGE_SERIALIZE = "serialize"
STAGE_WRITE = "write"
STAGE_SPAN = "span"
STAGE_METRICS = "metrics"
STAGE_CLOSE = "close"

# Common service-level fields.
SERVICE = "service"
ENVIRONMENT = "environment"
