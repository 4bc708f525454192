"""Output sinks for serialized and styled lifecycle events."""

from .json_sink import JsonRecordSink, encode_event
from .styled import StyledOutput, level_for, quote_value

__all__ = [
    "JsonRecordSink",
    "StyledOutput",
    "encode_event",
    "level_for",
    "quote_value",
]
