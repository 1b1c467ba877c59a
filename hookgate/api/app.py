"""Application factory for the hookgate Falcon ASGI application.

``create_app()`` wires the verification middleware, the webhook resource, the
health probe and the error handlers around an existing dispatcher. Most
callers go through ``hookgate.new(...).build()`` instead, which also builds
the registry and the dispatcher.

Usage
-----
::

    from hookgate.api.app import AppDependencies, create_app

    deps = AppDependencies(secret=b"s3cr3t", dispatcher=dispatcher)
    app = create_app(deps)

"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

import falcon.asgi

from hookgate.api.errors import register_error_handlers
from hookgate.api.middleware import HandlerPoolLifespan, WebhookVerificationMiddleware
from hookgate.api.resources import HealthResource, WebhookResource
from hookgate.config import coerce_secret
from hookgate.observability import WebhookEventLogger

if typ.TYPE_CHECKING:
    from hookgate.dispatch import EventDispatcher

__all__ = ["HEALTH_PATH", "AppDependencies", "create_app"]

HEALTH_PATH = "/health"


@dc.dataclass(frozen=True, slots=True)
class AppDependencies:
    """Collaborators for the Falcon ASGI application.

    Attributes
    ----------
    secret
        Shared webhook secret. Excluded from ``repr``.
    dispatcher
        Dispatcher bound to a finalised registry.
    webhook_path
        Route the webhook endpoint is mounted on.
    event_logger
        Structured event sink shared by the gate.

    """

    secret: bytes = dc.field(repr=False)
    dispatcher: EventDispatcher
    webhook_path: str = "/"
    event_logger: WebhookEventLogger = dc.field(default_factory=WebhookEventLogger)


def create_app(dependencies: AppDependencies) -> falcon.asgi.App:
    """Create and configure the Falcon ASGI application.

    Parameters
    ----------
    dependencies
        Secret, dispatcher and routing settings.

    Returns
    -------
    falcon.asgi.App
        Application serving ``POST <webhook_path>`` and ``GET /health``.

    """
    gate = WebhookVerificationMiddleware(
        coerce_secret(dependencies.secret),
        path=dependencies.webhook_path,
        event_logger=dependencies.event_logger,
    )
    middleware: list[object] = [gate, HandlerPoolLifespan(dependencies.dispatcher)]
    app = falcon.asgi.App(middleware=middleware)  # type: ignore[no-matching-overload]  # Falcon stubs

    app.add_route(dependencies.webhook_path, WebhookResource(dependencies.dispatcher))
    app.add_route(HEALTH_PATH, HealthResource())

    register_error_handlers(app)
    return app
