"""Tests for ambient emission context binding."""

from __future__ import annotations

from packages.lifecycle.context import (
    current_correlation_id,
    current_remote_addr,
    current_user_agent,
    emission_context,
)


def test_emission_context_defaults_to_empty() -> None:
    """Outside any block every ambient value is empty."""
    assert current_correlation_id() == ""
    assert current_user_agent() == ""
    assert current_remote_addr() == ""


def test_nested_emission_context_keeps_unset_values() -> None:
    """Inner blocks override only what they set and restore on exit."""
    with emission_context(correlation_id="req-1", user_agent="curl/8.5"):
        with emission_context(correlation_id="req-2"):
            assert current_correlation_id() == "req-2"
            assert current_user_agent() == "curl/8.5"
        assert current_correlation_id() == "req-1"

    assert current_correlation_id() == ""
    assert current_user_agent() == ""
