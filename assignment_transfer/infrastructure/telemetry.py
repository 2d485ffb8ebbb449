"""Sinks receiving non-fatal failures and lookup misses."""

import logging
from abc import ABC, abstractmethod
from typing import Any, NamedTuple

logger = logging.getLogger(__name__)


class TelemetryEvent(NamedTuple):
    """A reported event."""

    name: str
    error: BaseException | None
    context: dict[str, Any]


class TelemetrySink(ABC):
    """Destination of operational events."""

    @abstractmethod
    def report(self, event: str, error: BaseException | None = None, **context: Any) -> None:
        """Report an event.

        Args:
            event: Short machine-readable event name.
            error: The exception behind the event, if any.
            **context: Additional key/value details.
        """


class LoggingTelemetrySink(TelemetrySink):
    """Sink writing events to the application log."""

    def report(self, event: str, error: BaseException | None = None, **context: Any) -> None:
        if error is not None:
            logger.warning("%s: %s (%s)", event, error, context)
        else:
            logger.warning("%s (%s)", event, context)


class RecordingTelemetrySink(TelemetrySink):
    """Sink keeping events in memory."""

    def __init__(self) -> None:
        self.events: list[TelemetryEvent] = []

    def report(self, event: str, error: BaseException | None = None, **context: Any) -> None:
        self.events.append(TelemetryEvent(event, error, context))

    @property
    def event_names(self) -> list[str]:
        """Names of the recorded events, in order."""
        return [event.name for event in self.events]
