"""Heuristic PII detection by field name and by value shape."""

from __future__ import annotations

import re
from typing import Iterable, Pattern

# Case-insensitive fragments searched anywhere in a field name.
DEFAULT_FIELD_PATTERNS: tuple[str, ...] = (
    r"(email|e-mail)",
    r"(phone|telephone|mobile)",
    r"(ssn|social.security)",
    r"(credit.card|card.number)",
    r"(password|passwd|pwd)",
    r"(secret|token|key)",
    r"(address|street|city|zip|postal)",
    r"(name|firstname|lastname|fullname)",
    r"(dob|date.of.birth|birthdate)",
    r"(ip.address|ip_addr)",
)

# Whole-value shapes; a string must match one of these end to end.
DEFAULT_VALUE_PATTERNS: tuple[str, ...] = (
    # email
    r"[a-zA-Z0-9._%+\-]+@[a-zA-Z0-9.\-]+\.[a-zA-Z]{2,}",
    # E.164 phone
    r"\+?[1-9]\d{1,14}",
    # NANP phone, e.g. (555) 123-4567
    r"\(?\d{3}\)?[-.\s]?\d{3}[-.\s]?\d{4}",
    # card number in groups of four
    r"\d{4}[\s\-]?\d{4}[\s\-]?\d{4}[\s\-]?\d{4}",
    # SSN
    r"\d{3}-?\d{2}-?\d{4}",
)


class PiiDetector:
    """Two independent detectors: sensitive field names and PII-shaped values."""

    def __init__(
        self,
        *,
        field_patterns: Iterable[str] = DEFAULT_FIELD_PATTERNS,
        value_patterns: Iterable[str] = DEFAULT_VALUE_PATTERNS,
    ) -> None:
        self._field_patterns: tuple[Pattern[str], ...] = tuple(
            re.compile(pattern, re.IGNORECASE) for pattern in field_patterns
        )
        self._value_patterns: tuple[Pattern[str], ...] = tuple(
            re.compile(pattern, re.ASCII) for pattern in value_patterns
        )

    def is_pii_field(self, field_name: str) -> bool:
        """Return ``True`` when the field name contains a sensitive fragment."""
        return any(pattern.search(field_name) for pattern in self._field_patterns)

    def is_pii_value(self, value: object) -> bool:
        """Return ``True`` when ``value`` is a string shaped like PII.

        Bytes are checked as UTF-8 text since they serialize as strings. Other
        non-string values never match.
        """
        if isinstance(value, (bytes, bytearray)):
            value = bytes(value).decode("utf-8", errors="replace")
        if not isinstance(value, str):
            return False
        return any(pattern.fullmatch(value) for pattern in self._value_patterns)
