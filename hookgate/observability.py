"""Structured log events for webhook verification and dispatch.

Every rejection, scheduling decision and handler outcome is emitted as one
``[event.type] key=value ...`` line through femtologging. Lines carry the
failure kind and the delivery identifier but never the secret, the presented
signature or the request body.

Usage
-----
>>> event_logger = WebhookEventLogger()
>>> event_logger.log_handler_scheduled(event=Event.ISSUE_COMMENT, delivery_id="d1")

"""

from __future__ import annotations

import enum
import typing as typ

from hookgate.logging import get_logger, log_error, log_info, log_warning

if typ.TYPE_CHECKING:
    import datetime as dt

    from hookgate.errors import DispatchError, VerificationError
    from hookgate.events import Event

logger = get_logger(__name__)


class WebhookEventType(enum.StrEnum):
    """Structured log event types for webhook handling."""

    SIGNATURE_REJECTED = "webhook.signature.rejected"
    DISPATCH_REJECTED = "webhook.dispatch.rejected"
    HANDLER_SCHEDULED = "webhook.handler.scheduled"
    HANDLER_COMPLETED = "webhook.handler.completed"
    HANDLER_FAILED = "webhook.handler.failed"


class DispatchStage(enum.StrEnum):
    """Last stage a delivery reached before being scheduled or rejected."""

    RECEIVED = "received"
    HEADER_PARSED = "header_parsed"
    HANDLER_RESOLVED = "handler_resolved"
    PAYLOAD_DECODED = "payload_decoded"
    HANDLER_SCHEDULED = "handler_scheduled"


class WebhookEventLogger:
    """Emit webhook lifecycle events via femtologging."""

    def log_signature_rejected(
        self,
        *,
        error: VerificationError,
        delivery_id: str | None,
    ) -> None:
        """Log a request that failed signature verification."""
        log_warning(
            logger,
            "[%s] reason=%s delivery_id=%s",
            WebhookEventType.SIGNATURE_REJECTED,
            error.reason,
            delivery_id,
        )

    def log_dispatch_rejected(
        self,
        *,
        error: DispatchError,
        stage: DispatchStage,
        event_name: str | None,
        delivery_id: str | None,
    ) -> None:
        """Log a verified request that could not be routed to a handler.

        Parameters
        ----------
        error
            The dispatch failure.
        stage
            Last stage reached before the failure.
        event_name
            Raw ``X-GitHub-Event`` value, if any.
        delivery_id
            ``X-GitHub-Delivery`` value, if any.

        """
        log_warning(
            logger,
            "[%s] reason=%s stage=%s event=%s delivery_id=%s",
            WebhookEventType.DISPATCH_REJECTED,
            error.reason,
            stage,
            event_name,
            delivery_id,
        )

    def log_handler_scheduled(self, *, event: Event, delivery_id: str | None) -> None:
        """Log that a handler was submitted to the worker pool."""
        log_info(
            logger,
            "[%s] event=%s delivery_id=%s",
            WebhookEventType.HANDLER_SCHEDULED,
            event,
            delivery_id,
        )

    def log_handler_completed(
        self,
        *,
        event: Event,
        delivery_id: str | None,
        duration: dt.timedelta,
    ) -> None:
        """Log a handler that returned normally."""
        log_info(
            logger,
            "[%s] event=%s delivery_id=%s duration_seconds=%.3f",
            WebhookEventType.HANDLER_COMPLETED,
            event,
            delivery_id,
            duration.total_seconds(),
        )

    def log_handler_failed(
        self,
        *,
        event: Event,
        delivery_id: str | None,
        error: BaseException,
        duration: dt.timedelta,
    ) -> None:
        """Log a handler that raised, attaching the exception."""
        log_error(
            logger,
            "[%s] event=%s delivery_id=%s duration_seconds=%.3f error_type=%s",
            WebhookEventType.HANDLER_FAILED,
            event,
            delivery_id,
            duration.total_seconds(),
            type(error).__name__,
            exc_info=error,
        )


__all__ = ["DispatchStage", "WebhookEventLogger", "WebhookEventType"]
