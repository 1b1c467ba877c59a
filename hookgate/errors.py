"""Error taxonomy for webhook verification, dispatch and registration.

Every error here is an expected, recoverable condition at the HTTP boundary.
``hookgate.api.errors`` maps each family to a status code; the messages are
for logs only and are never written to a response body.
"""

from __future__ import annotations

import typing as typ

if typ.TYPE_CHECKING:
    from hookgate.events import Event


class HookgateError(Exception):
    """Base class for hookgate errors."""


class VerificationError(HookgateError):
    """Raised when a request fails signature verification.

    Attributes
    ----------
    reason
        Short machine-friendly label used in log lines.

    """

    reason: typ.ClassVar[str] = "verification_failed"


class MissingSignatureError(VerificationError):
    """Raised when no ``X-Hub-Signature-256`` header is present."""

    reason = "missing_signature"

    def __init__(self) -> None:
        """Initialise with a fixed message."""
        super().__init__("Request carries no X-Hub-Signature-256 header")


class MalformedSignatureError(VerificationError):
    """Raised when the signature header is not ``sha256=<hex>``."""

    reason = "malformed_signature"

    @classmethod
    def bad_format(cls) -> MalformedSignatureError:
        """Return an error for a header without an ``algorithm=digest`` pair."""
        return cls("Signature header is not in algorithm=hexdigest form")

    @classmethod
    def unsupported_algorithm(cls, algorithm: str) -> MalformedSignatureError:
        """Return an error for an algorithm other than sha256."""
        return cls(f"Unsupported signature algorithm: {algorithm!r}")

    @classmethod
    def bad_hex(cls) -> MalformedSignatureError:
        """Return an error for a digest that is not valid hexadecimal."""
        return cls("Signature digest is not valid hexadecimal")


class SignatureMismatchError(VerificationError):
    """Raised when the presented digest does not match the computed one."""

    reason = "signature_mismatch"

    def __init__(self) -> None:
        """Initialise with a fixed message."""
        super().__init__("Signature does not match request body")


class DispatchError(HookgateError):
    """Raised when a verified request cannot be routed to a handler."""

    reason: typ.ClassVar[str] = "dispatch_failed"


class MissingEventHeaderError(DispatchError):
    """Raised when no ``X-GitHub-Event`` header is present."""

    reason = "missing_event_header"

    def __init__(self) -> None:
        """Initialise with a fixed message."""
        super().__init__("No X-GitHub-Event header found")


class UnknownEventTypeError(DispatchError):
    """Raised when the event header names an event hookgate does not know.

    Attributes
    ----------
    event_name
        The raw header value.

    """

    reason = "unknown_event_type"

    def __init__(self, event_name: str) -> None:
        """Initialise with the unrecognised event name."""
        self.event_name = event_name
        super().__init__(f"Received an event of an unsupported type: {event_name!r}")


class NoHandlerRegisteredError(DispatchError):
    """Raised when a known event arrives but nothing is registered for it.

    Attributes
    ----------
    event
        The parsed event.

    """

    reason = "no_handler_registered"

    def __init__(self, event: Event) -> None:
        """Initialise with the event lacking a handler."""
        self.event = event
        super().__init__(f"No handler registered for event '{event}'")


class PayloadDecodeError(DispatchError):
    """Raised when the verified body does not decode into a payload."""

    reason = "payload_decode_error"

    def __init__(self, detail: str) -> None:
        """Initialise with the decoder's error detail."""
        self.detail = detail
        super().__init__(f"Failed to decode webhook payload: {detail}")


class RegistrationError(HookgateError):
    """Raised when handler registration is used incorrectly."""


class DuplicateHandlerError(RegistrationError):
    """Raised when a second handler is registered for the same event."""

    def __init__(self, event: Event) -> None:
        """Initialise with the event that already has a handler."""
        self.event = event
        super().__init__(f"A handler is already registered for event '{event}'")


class RegistryFinalizedError(RegistrationError):
    """Raised when a builder is used after ``build()`` was called."""

    def __init__(self) -> None:
        """Initialise with a fixed message."""
        super().__init__("Handler registry has already been built")


class PayloadConversionError(HookgateError):
    """Raised when a payload lacks a field a specialised view requires.

    Attributes
    ----------
    view
        Name of the specialised payload type.
    field
        Name of the absent field.

    """

    def __init__(self, view: str, field: str) -> None:
        """Initialise with the target view and the missing field."""
        self.view = view
        self.field = field
        super().__init__(f"{view} requires field '{field}', which is absent")


class WebhookConfigError(HookgateError):
    """Raised when webhook configuration is invalid."""

    @classmethod
    def missing_secret(cls) -> WebhookConfigError:
        """Return an error when no webhook secret is configured."""
        return cls("HOOKGATE_WEBHOOK_SECRET is required")

    @classmethod
    def empty_secret(cls) -> WebhookConfigError:
        """Return an error when the provided secret is empty."""
        return cls("Webhook secret must be non-empty")

    @classmethod
    def invalid_path(cls, path: str) -> WebhookConfigError:
        """Return an error for a webhook path that is not absolute."""
        return cls(f"Webhook path must start with '/', got: {path!r}")

    @classmethod
    def invalid_workers(cls, raw: str) -> WebhookConfigError:
        """Return an error for a worker count that is not a positive integer."""
        return cls(f"HOOKGATE_HANDLER_WORKERS must be a positive integer, got: {raw!r}")


__all__ = [
    "DispatchError",
    "DuplicateHandlerError",
    "HookgateError",
    "MalformedSignatureError",
    "MissingEventHeaderError",
    "MissingSignatureError",
    "NoHandlerRegisteredError",
    "PayloadConversionError",
    "PayloadDecodeError",
    "RegistrationError",
    "RegistryFinalizedError",
    "SignatureMismatchError",
    "UnknownEventTypeError",
    "VerificationError",
    "WebhookConfigError",
]
