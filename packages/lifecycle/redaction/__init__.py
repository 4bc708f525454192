"""Public PII redaction and masking API."""

from .detector import DEFAULT_FIELD_PATTERNS, DEFAULT_VALUE_PATTERNS, PiiDetector
from .redactor import DEFAULT_REDACTION_MARKER, Redactor
from .sensitivity import (
    FieldSensitivity,
    SensitivityMap,
    redactable_fields,
    sensitivity_from_schema_flags,
    should_redact,
)

__all__ = [
    "DEFAULT_FIELD_PATTERNS",
    "DEFAULT_REDACTION_MARKER",
    "DEFAULT_VALUE_PATTERNS",
    "FieldSensitivity",
    "PiiDetector",
    "Redactor",
    "SensitivityMap",
    "redactable_fields",
    "sensitivity_from_schema_flags",
    "should_redact",
]
