"""Tests for the telemetry sinks and identity providers."""

import logging

import pytest

from assignment_transfer.infrastructure.identity import StaticIdentityProvider
from assignment_transfer.infrastructure.telemetry import (
    LoggingTelemetrySink,
    RecordingTelemetrySink,
    TelemetryEvent,
)


class TestRecordingTelemetrySink:
    """Tests for the in-memory sink."""

    def test_records_in_order(self) -> None:
        """Events are kept with their error and context."""
        sink = RecordingTelemetrySink()
        error = RuntimeError("boom")

        sink.report("first", error, assignment_id="a1")
        sink.report("second")

        assert sink.events == [
            TelemetryEvent("first", error, {"assignment_id": "a1"}),
            TelemetryEvent("second", None, {}),
        ]
        assert sink.event_names == ["first", "second"]


class TestLoggingTelemetrySink:
    """Tests for the logging sink."""

    def test_logs_warning(self, caplog: pytest.LogCaptureFixture) -> None:
        """Events are written as warnings with their details."""
        sink = LoggingTelemetrySink()

        with caplog.at_level(logging.WARNING):
            sink.report("audit_write_failed", ValueError("locked"), assignment_id="a1")
            sink.report("actor_unresolved")

        assert len(caplog.records) == 2
        assert "audit_write_failed: locked" in caplog.records[0].getMessage()
        assert "a1" in caplog.records[0].getMessage()
        assert caplog.records[1].getMessage().startswith("actor_unresolved")


class TestStaticIdentityProvider:
    """Tests for the configured identity."""

    @pytest.mark.parametrize(
        "user_id", ["u-kate", None], ids=["configured", "unconfigured"]
    )
    def test_current_user_id(self, user_id: str | None) -> None:
        """The configured user is returned as is."""
        assert StaticIdentityProvider(user_id).current_user_id() == user_id
