"""
spockscan.events - Optional event sink for parser diagnostics.

Parsers report what they found or skipped through an EventSink instead of
writing to a global logger, so parsing stays side-effect free unless a
caller asks for diagnostics.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class EventSink(Protocol):
    """Receiver for parser events."""

    def record(self, event: str, **details: Any) -> None:
        """Record one event.

        Args:
            event: Dotted event name (e.g. "method.accepted").
            **details: Event-specific values.
        """
        ...


class NullEventSink:
    """Sink that discards every event."""

    def record(self, event: str, **details: Any) -> None:
        pass


class LoggingEventSink:
    """Sink that forwards events to a standard-library logger."""

    def __init__(self, logger: logging.Logger | None = None, level: int = logging.DEBUG) -> None:
        self._logger = logger or logging.getLogger("spockscan")
        self._level = level

    def record(self, event: str, **details: Any) -> None:
        if not self._logger.isEnabledFor(self._level):
            return
        if details:
            rendered = ", ".join(f"{key}={value!r}" for key, value in details.items())
            self._logger.log(self._level, "%s: %s", event, rendered)
        else:
            self._logger.log(self._level, "%s", event)


NULL_SINK = NullEventSink()
