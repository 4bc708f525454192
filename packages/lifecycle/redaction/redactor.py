"""Full-replacement PII redaction and separate partial masking helpers.

Redaction (``redact_*``) replaces a sensitive value wholesale with a fixed
marker. Masking (``mask_*``) keeps a few characters for display. The two are
separate operations and are never combined implicitly.

Per-field precedence in ``redact_mapping``:

1. When the field has an entry in the caller's sensitivity map, that entry
   alone decides: any of ``pii``/``encrypted``/``redactable``/``sensitive``
   redacts, otherwise the value is kept. Heuristics are skipped.
2. When the field has no entry, the field is redacted if its name matches the
   name detector or its value matches the value detector.

Redaction is total: it never raises and unknown value types pass through.
Sets and other non-text collections are redacted like sequences and come
back as lists. A container that contains itself is replaced by the marker
where it recurs.
Already-redacted data is a fixed point because the marker matches neither
detector.
"""

from __future__ import annotations

from typing import Any, Collection, Iterable, Mapping, Sequence

from .detector import PiiDetector
from .sensitivity import SensitivityMap, should_redact

DEFAULT_REDACTION_MARKER = "[REDACTED]"

_TEXT_TYPES = (str, bytes, bytearray, memoryview)


class Redactor:
    """Produce redacted copies of scalar values and nested key-value data."""

    def __init__(
        self,
        *,
        marker: str = DEFAULT_REDACTION_MARKER,
        detector: PiiDetector | None = None,
    ) -> None:
        self._marker = marker
        self._detector = detector or PiiDetector()

    @property
    def marker(self) -> str:
        return self._marker

    @property
    def detector(self) -> PiiDetector:
        return self._detector

    def with_marker(self, marker: str) -> Redactor:
        """Return a redactor sharing this detector but using ``marker``."""
        return Redactor(marker=marker, detector=self._detector)

    def redact_value(self, value: Any) -> Any:
        """Replace one scalar with the marker when it looks like PII."""
        if self._detector.is_pii_value(value):
            return self._marker
        return value

    def redact_string(self, value: str) -> str:
        return self._marker if self._detector.is_pii_value(value) else value

    def redact_mapping(
        self,
        data: Mapping[str, Any],
        sensitivity: SensitivityMap | None = None,
    ) -> dict[str, Any]:
        """Return a redacted copy of ``data``, recursing into nested values."""
        return self._redact_mapping(data, sensitivity or {}, frozenset())

    def redact_sequence(
        self,
        items: Iterable[Any],
        sensitivity: SensitivityMap | None = None,
    ) -> list[Any]:
        """Return a redacted copy of a sequence, set or other collection.

        Mapping elements are redacted field by field; scalar elements only go
        through the value detector since they carry no field name.
        """
        return self._redact_sequence(items, sensitivity or {}, frozenset())

    def redact_params(self, params: Sequence[Any]) -> list[Any]:
        """Return positional query parameters with PII-shaped values redacted."""
        return [self.redact_value(param) for param in params]

    def format_redacted(self, field_name: str, value: Any) -> str:
        """Render ``field=value`` for display, hiding the value when sensitive."""
        if self._detector.is_pii_field(field_name) or self._detector.is_pii_value(
            value
        ):
            return f"{field_name}={self._marker}"
        return f"{field_name}={value}"

    def mask_email(self, email: str) -> str:
        """Mask an email local part, keeping its first character.

        ``"user@example.com"`` becomes ``"u***@example.com"``. Values that are
        not ``local@domain`` shaped are replaced by the marker.
        """
        if email == "":
            return email
        parts = email.split("@")
        if len(parts) != 2 or parts[0] == "":
            return self._marker
        local, domain = parts
        return f"{local[0]}{'*' * (len(local) - 1)}@{domain}"

    def mask_phone(self, phone: str) -> str:
        """Mask a phone number, keeping the first two and last two characters."""
        if phone == "":
            return phone
        if len(phone) <= 4:
            return "*" * len(phone)
        return f"{phone[:2]}{'*' * (len(phone) - 4)}{phone[-2:]}"

    def _field_is_sensitive(
        self, key: Any, value: Any, flags: SensitivityMap
    ) -> bool:
        """Apply schema-first, heuristics-second precedence for one field."""
        if key in flags:
            return should_redact(flags[key])
        return self._detector.is_pii_field(str(key)) or self._detector.is_pii_value(
            value
        )

    def _redact_mapping(
        self, data: Mapping[Any, Any], flags: SensitivityMap, active: frozenset[int]
    ) -> dict[Any, Any]:
        active = active | {id(data)}
        redacted: dict[Any, Any] = {}
        for key, value in data.items():
            if self._field_is_sensitive(key, value, flags):
                redacted[key] = self._marker
            else:
                redacted[key] = self._redact_nested(value, flags, active)
        return redacted

    def _redact_sequence(
        self, items: Iterable[Any], flags: SensitivityMap, active: frozenset[int]
    ) -> list[Any]:
        active = active | {id(items)}
        redacted: list[Any] = []
        for item in items:
            if self._detector.is_pii_value(item):
                redacted.append(self._marker)
            else:
                redacted.append(self._redact_nested(item, flags, active))
        return redacted

    def _redact_nested(
        self, value: Any, flags: SensitivityMap, active: frozenset[int]
    ) -> Any:
        """Recurse into mappings and non-text collections; pass others through.

        ``active`` holds the ids of the containers currently being walked.
        """
        if isinstance(value, Mapping):
            if id(value) in active:
                return self._marker
            return self._redact_mapping(value, flags, active)
        if isinstance(value, Collection) and not isinstance(value, _TEXT_TYPES):
            if id(value) in active:
                return self._marker
            return self._redact_sequence(value, flags, active)
        return value
