"""Exact-match color lookups for services, APIs, event types and statuses.

Service, API and event lookups are partial: an unregistered key resolves to
``""``, which callers treat as "no styling". Status lookup is total: a
registered override, else the built-in default table, else gray.

Each of the four maps is guarded by its own lock so registration may race
with lookups from emitting threads.
"""

from __future__ import annotations

import threading
from typing import Mapping

GRAY = "#808080"

DEFAULT_STATUS_COLORS: Mapping[str, str] = {
    "success": "#00FF00",
    "error": "#FF0000",
    "warning": "#FFA500",
    "info": "#00BFFF",
    "pending": "#FFFF00",
    "in_progress": "#9370DB",
    "completed": "#00FF00",
    "failed": "#FF0000",
    "cancelled": GRAY,
    "created": "#00BFFF",
    "updated": "#FFA500",
    "deleted": "#FF0000",
}


class _ColorMap:
    """One lock-guarded key -> color mapping."""

    def __init__(self, seed: Mapping[str, str] | None = None) -> None:
        self._lock = threading.Lock()
        self._colors: dict[str, str] = dict(seed or {})

    def set(self, key: str, color: str) -> None:
        with self._lock:
            self._colors[key] = color

    def get(self, key: str) -> str | None:
        with self._lock:
            return self._colors.get(key)

    def snapshot(self) -> dict[str, str]:
        with self._lock:
            return dict(self._colors)


class ColorRegistry:
    """Four independent color registries consulted on every emission."""

    def __init__(self) -> None:
        self._services = _ColorMap()
        self._apis = _ColorMap()
        self._events = _ColorMap()
        self._statuses = _ColorMap(DEFAULT_STATUS_COLORS)

    def register_service_color(self, service: str, color: str) -> None:
        self._services.set(service, color)

    def register_api_color(self, api: str, color: str) -> None:
        self._apis.set(api, color)

    def register_event_color(self, event_type: str, color: str) -> None:
        self._events.set(event_type, color)

    def register_status_color(self, status: str, color: str) -> None:
        self._statuses.set(status, color)

    def service_color(self, service: str) -> str:
        return self._services.get(service) or ""

    def api_color(self, api: str) -> str:
        return self._apis.get(api) or ""

    def event_color(self, event_type: str) -> str:
        return self._events.get(event_type) or ""

    def status_color(self, status: str) -> str:
        """Return the color for ``status``; unknown statuses resolve to gray."""
        return self._statuses.get(status) or GRAY

    def http_status_color(self, status_code: int) -> str:
        """Derive a color from an HTTP status code class.

        2xx/3xx/4xx/5xx map to the ``success``/``info``/``warning``/``error``
        status colors. Codes outside 200-599 have no color.
        """
        if 200 <= status_code < 300:
            return self.status_color("success")
        if 300 <= status_code < 400:
            return self.status_color("info")
        if 400 <= status_code < 500:
            return self.status_color("warning")
        if 500 <= status_code < 600:
            return self.status_color("error")
        return ""

    def snapshot(self) -> dict[str, dict[str, str]]:
        """Return a copy of all four maps, keyed by registry name."""
        return {
            "services": self._services.snapshot(),
            "apis": self._apis.snapshot(),
            "events": self._events.snapshot(),
            "statuses": self._statuses.snapshot(),
        }
