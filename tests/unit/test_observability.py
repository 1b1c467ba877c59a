"""Unit tests for webhook observability logging."""

from __future__ import annotations

import datetime as dt

import pytest

from hookgate.errors import MissingSignatureError, UnknownEventTypeError
from hookgate.events import Event
from hookgate.observability import DispatchStage, WebhookEventLogger, WebhookEventType
from tests.helpers.femtologging_capture import capture_femto_logs

_LOGGER = "hookgate.observability"


class TestWebhookEventLogger:
    """Tests for ``WebhookEventLogger`` structured log events."""

    @pytest.fixture
    def event_logger(self) -> WebhookEventLogger:
        """Return a fresh webhook event logger."""
        return WebhookEventLogger()

    def test_signature_rejected_is_warning(self, event_logger: WebhookEventLogger) -> None:
        """Verification failures log the reason and delivery id at WARN."""
        with capture_femto_logs(_LOGGER) as capture:
            event_logger.log_signature_rejected(
                error=MissingSignatureError(), delivery_id="d-1"
            )
            capture.wait_for_count(1)
            record = capture.records[0]
            assert record.level in {"WARN", "WARNING"}
            assert WebhookEventType.SIGNATURE_REJECTED in record.message
            assert "reason=missing_signature" in record.message
            assert "delivery_id=d-1" in record.message

    def test_dispatch_rejected_includes_stage(
        self, event_logger: WebhookEventLogger
    ) -> None:
        """Dispatch failures log reason, stage and raw event name."""
        with capture_femto_logs(_LOGGER) as capture:
            event_logger.log_dispatch_rejected(
                error=UnknownEventTypeError("push"),
                stage=DispatchStage.RECEIVED,
                event_name="push",
                delivery_id=None,
            )
            capture.wait_for_count(1)
            message = capture.records[0].message
            assert WebhookEventType.DISPATCH_REJECTED in message
            assert "reason=unknown_event_type" in message
            assert "stage=received" in message
            assert "event=push" in message

    def test_handler_completed_reports_duration(
        self, event_logger: WebhookEventLogger
    ) -> None:
        """Completion events carry the handler duration."""
        with capture_femto_logs(_LOGGER) as capture:
            event_logger.log_handler_completed(
                event=Event.ISSUE_COMMENT,
                delivery_id="d-2",
                duration=dt.timedelta(milliseconds=1500),
            )
            capture.wait_for_count(1)
            record = capture.records[0]
            assert record.level == "INFO"
            assert WebhookEventType.HANDLER_COMPLETED in record.message
            assert "event=issue_comment" in record.message
            assert "duration_seconds=1.500" in record.message

    def test_handler_failed_is_error(self, event_logger: WebhookEventLogger) -> None:
        """Handler failures log at ERROR with the exception type."""
        with capture_femto_logs(_LOGGER) as capture:
            event_logger.log_handler_failed(
                event=Event.ISSUES,
                delivery_id=None,
                error=KeyError("missing"),
                duration=dt.timedelta(seconds=0),
            )
            capture.wait_for_count(1)
            record = capture.records[0]
            assert record.level == "ERROR"
            assert WebhookEventType.HANDLER_FAILED in record.message
            assert "error_type=KeyError" in record.message

    def test_secret_material_never_logged(
        self, event_logger: WebhookEventLogger
    ) -> None:
        """Rejection lines contain only the failure kind."""
        with capture_femto_logs(_LOGGER) as capture:
            event_logger.log_signature_rejected(
                error=MissingSignatureError(), delivery_id=None
            )
            capture.wait_for_count(1)
            assert "sha256=" not in capture.records[0].message
