"""Falcon resources for the webhook endpoint and the liveness probe.

``WebhookResource`` only ever sees requests the verification middleware has
already accepted. It hands the verified body to the dispatcher and answers as
soon as the handler is scheduled.

Usage
-----
Register the resources on the Falcon app::

    app.add_route("/", WebhookResource(dispatcher))
    app.add_route("/health", HealthResource())

"""

from __future__ import annotations

import typing as typ
from http import HTTPStatus

from hookgate.api.middleware import DELIVERY_HEADER

if typ.TYPE_CHECKING:
    from falcon.asgi import Request, Response

    from hookgate.dispatch import EventDispatcher

__all__ = ["EVENT_HEADER", "HealthResource", "WebhookResource"]

EVENT_HEADER = "X-GitHub-Event"


class WebhookResource:
    """Accept verified deliveries and schedule their handlers.

    Parameters
    ----------
    dispatcher
        Dispatcher that resolves and schedules handlers.

    """

    def __init__(self, dispatcher: EventDispatcher) -> None:
        """Bind the resource to a dispatcher."""
        self._dispatcher = dispatcher

    async def on_post(self, req: Request, resp: Response) -> None:
        """Handle POST deliveries.

        Raises
        ------
        DispatchError
            Translated to 400 or 501 by the registered error handler.
        RuntimeError
            If the request did not pass through the verification middleware.

        """
        raw_body: bytes | None = getattr(req.context, "raw_body", None)
        if raw_body is None:
            msg = "webhook request reached the resource without verification"
            raise RuntimeError(msg)

        self._dispatcher.dispatch(
            req.get_header(EVENT_HEADER),
            raw_body,
            delivery_id=req.get_header(DELIVERY_HEADER),
        )
        resp.status = HTTPStatus.OK
        resp.data = b""


class HealthResource:
    """Liveness probe returning ``{"status": "ok"}``."""

    async def on_get(self, _req: Request, resp: Response) -> None:
        """Handle GET /health requests."""
        resp.media = {"status": "ok"}
        resp.status = HTTPStatus.OK
