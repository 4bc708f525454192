"""Per-field sensitivity flags supplied by an external schema/annotation source.

Sensitivity maps are call parameters: callers pass one per emission and this
package never stores or caches them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

_REDACTION_FLAGS = ("pii", "encrypted", "redactable", "sensitive")
_SCHEMA_FLAGS = (
    *_REDACTION_FLAGS,
    "immutable",
    "output_only",
    "input_only",
    "required",
)


@dataclass(frozen=True)
class FieldSensitivity:
    """Schema flags for one field name.

    Only ``pii``, ``encrypted``, ``redactable`` and ``sensitive`` affect
    redaction; the remaining flags are carried through for callers that
    share one annotation map across concerns.
    """

    pii: bool = False
    encrypted: bool = False
    redactable: bool = False
    sensitive: bool = False
    immutable: bool = False
    output_only: bool = False
    input_only: bool = False
    required: bool = False


SensitivityMap = Mapping[str, FieldSensitivity]


def should_redact(sensitivity: FieldSensitivity) -> bool:
    """Return ``True`` when any redaction-relevant flag is set."""
    return (
        sensitivity.pii
        or sensitivity.encrypted
        or sensitivity.redactable
        or sensitivity.sensitive
    )


def sensitivity_from_schema_flags(
    schema_flags: Mapping[str, Any] | None,
) -> dict[str, FieldSensitivity]:
    """Convert loose ``{field: {"pii": True, ...}}`` schema flags.

    Entries whose value is not a mapping are skipped, and flags that are not
    real booleans are ignored rather than coerced.
    """
    if schema_flags is None:
        return {}

    result: dict[str, FieldSensitivity] = {}
    for field_name, flags in schema_flags.items():
        if not isinstance(flags, Mapping):
            continue
        values = {
            name: flags[name]
            for name in _SCHEMA_FLAGS
            if isinstance(flags.get(name), bool)
        }
        result[str(field_name)] = FieldSensitivity(**values)
    return result


def redactable_fields(sensitivity_map: SensitivityMap) -> list[str]:
    """Return the sorted field names whose flags require redaction."""
    return sorted(
        field_name
        for field_name, sensitivity in sensitivity_map.items()
        if should_redact(sensitivity)
    )
