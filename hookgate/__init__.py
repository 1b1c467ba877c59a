"""Verify and route GitHub webhooks in a Falcon ASGI application.

Every delivery must carry a valid ``X-Hub-Signature-256`` HMAC of its body
before its ``X-GitHub-Event`` header is looked up and the matching handler is
scheduled on a worker pool.

Example
-------
::

    import hookgate
    from hookgate import Event

    app = (
        hookgate.new(b"My GitHub webhook s3cr#t")
        .on(Event.ISSUE_COMMENT, lambda payload: print(payload.repository.name))
        .build()
    )

"""

from __future__ import annotations

from hookgate.builder import WebhookAppBuilder, new
from hookgate.config import WebhookConfig
from hookgate.errors import (
    DispatchError,
    DuplicateHandlerError,
    HookgateError,
    MalformedSignatureError,
    MissingEventHeaderError,
    MissingSignatureError,
    NoHandlerRegisteredError,
    PayloadConversionError,
    PayloadDecodeError,
    RegistrationError,
    RegistryFinalizedError,
    SignatureMismatchError,
    UnknownEventTypeError,
    VerificationError,
    WebhookConfigError,
)
from hookgate.events import Event
from hookgate.payload import (
    IssueCommentAction,
    IssueCommentPayload,
    IssuesPayload,
    Payload,
    PullRequestPayload,
)
from hookgate.signature import sign, verify_signature

__all__ = [
    "DispatchError",
    "DuplicateHandlerError",
    "Event",
    "HookgateError",
    "IssueCommentAction",
    "IssueCommentPayload",
    "IssuesPayload",
    "MalformedSignatureError",
    "MissingEventHeaderError",
    "MissingSignatureError",
    "NoHandlerRegisteredError",
    "Payload",
    "PayloadConversionError",
    "PayloadDecodeError",
    "PullRequestPayload",
    "RegistrationError",
    "RegistryFinalizedError",
    "SignatureMismatchError",
    "UnknownEventTypeError",
    "VerificationError",
    "WebhookAppBuilder",
    "WebhookConfig",
    "WebhookConfigError",
    "new",
    "sign",
    "verify_signature",
]
