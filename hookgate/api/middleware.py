"""Falcon middleware guarding the webhook route.

``WebhookVerificationMiddleware`` is the verification gate. It runs before
routing, reads the whole body once, verifies its signature and leaves the
verified bytes on ``req.context.raw_body`` for the webhook resource. A request
that fails verification raises a ``VerificationError``; the registered error
handler answers it and the resource never runs.

``HandlerPoolLifespan`` releases the dispatcher's worker pool when the ASGI
server shuts down.

Usage
-----
Install the gate in front of a webhook mounted at ``/github``::

    gate = WebhookVerificationMiddleware(secret, path="/github")
    app = falcon.asgi.App(middleware=[gate])

"""

from __future__ import annotations

import asyncio
import typing as typ

from hookgate.config import coerce_secret
from hookgate.errors import VerificationError
from hookgate.observability import WebhookEventLogger
from hookgate.signature import SIGNATURE_HEADER, verify_signature

if typ.TYPE_CHECKING:
    from falcon.asgi import Request, Response

    from hookgate.dispatch import EventDispatcher

__all__ = ["DELIVERY_HEADER", "HandlerPoolLifespan", "WebhookVerificationMiddleware"]

DELIVERY_HEADER = "X-GitHub-Delivery"


class WebhookVerificationMiddleware:
    """Verify ``X-Hub-Signature-256`` on POSTs to the webhook path.

    Requests for other paths or methods pass through untouched.

    Parameters
    ----------
    secret
        Shared webhook secret; text is UTF-8 encoded. Must be non-empty.
    path
        Route of the webhook endpoint.
    event_logger
        Structured event sink for rejections.

    """

    def __init__(
        self,
        secret: bytes | str,
        *,
        path: str = "/",
        event_logger: WebhookEventLogger | None = None,
    ) -> None:
        """Store the secret and the guarded path."""
        self._secret = coerce_secret(secret)
        self._path = path
        self._event_logger = event_logger or WebhookEventLogger()

    def __repr__(self) -> str:
        """Describe the middleware without revealing the secret."""
        return f"WebhookVerificationMiddleware(path={self._path!r})"

    def _guards(self, req: Request) -> bool:
        return req.method == "POST" and req.path == self._path

    async def process_request(self, req: Request, _resp: Response) -> None:
        """Buffer and verify the body of a webhook delivery.

        Parameters
        ----------
        req
            Falcon request; on success ``req.context.raw_body`` holds the
            verified body.
        _resp
            Falcon response (unused).

        Raises
        ------
        VerificationError
            If the signature is missing, malformed or does not match.

        """
        if not self._guards(req):
            return

        raw_body = await req.stream.read()
        try:
            verify_signature(self._secret, raw_body, req.get_header(SIGNATURE_HEADER))
        except VerificationError as exc:
            self._event_logger.log_signature_rejected(
                error=exc,
                delivery_id=req.get_header(DELIVERY_HEADER),
            )
            raise

        req.context.raw_body = raw_body


class HandlerPoolLifespan:
    """Shut the dispatcher's worker pool down with the ASGI app."""

    def __init__(self, dispatcher: EventDispatcher) -> None:
        """Bind to the dispatcher whose pool should be released."""
        self._dispatcher = dispatcher

    async def process_shutdown(
        self,
        _scope: dict[str, typ.Any],
        _event: dict[str, typ.Any],
    ) -> None:
        """Wait for running handlers, then release the pool."""
        await asyncio.to_thread(self._dispatcher.shutdown, wait=True)
