"""Fluent construction of a webhook application.

Register a handler per event, then build a Falcon ASGI app that verifies every
delivery before routing it.

Usage
-----
::

    import hookgate
    from hookgate import Event

    def on_comment(payload: hookgate.Payload) -> None:
        print(payload.repository.full_name)

    app = hookgate.new(b"My GitHub webhook s3cr#t").on(
        Event.ISSUE_COMMENT, on_comment
    ).build()

Serve ``app`` with any ASGI server.

"""

from __future__ import annotations

import typing as typ

from hookgate.api.app import AppDependencies, create_app
from hookgate.config import coerce_secret
from hookgate.dispatch import DEFAULT_MAX_WORKERS, EventDispatcher
from hookgate.logging import configure_logging, get_logger, log_info
from hookgate.registry import HandlerRegistryBuilder

if typ.TYPE_CHECKING:
    import concurrent.futures as cf

    import falcon.asgi

    from hookgate.config import WebhookConfig
    from hookgate.events import Event
    from hookgate.registry import Handler

__all__ = ["WebhookAppBuilder", "new"]

logger = get_logger(__name__)


class WebhookAppBuilder:
    """Collect handlers and build the Falcon ASGI application.

    Parameters
    ----------
    secret
        Shared webhook secret; text is UTF-8 encoded. Must be non-empty.
    webhook_path
        Route the webhook endpoint is mounted on.
    executor
        Pool that runs handlers. When omitted the dispatcher owns a thread
        pool of ``max_workers`` threads.
    max_workers
        Size of the owned pool.

    """

    def __init__(
        self,
        secret: bytes | str,
        *,
        webhook_path: str = "/",
        executor: cf.Executor | None = None,
        max_workers: int = DEFAULT_MAX_WORKERS,
    ) -> None:
        """Validate the secret and start an empty registry."""
        self._secret = coerce_secret(secret)
        self._webhook_path = webhook_path
        self._executor = executor
        self._max_workers = max_workers
        self._registry = HandlerRegistryBuilder()

    @classmethod
    def from_config(
        cls,
        config: WebhookConfig,
        *,
        executor: cf.Executor | None = None,
    ) -> WebhookAppBuilder:
        """Create a builder from a ``WebhookConfig``.

        Also configures femtologging at ``config.log_level``.
        """
        configure_logging(config.log_level)
        return cls(
            config.secret,
            webhook_path=config.webhook_path,
            executor=executor,
            max_workers=config.handler_workers,
        )

    def on(self, event: Event | str, handler: Handler) -> typ.Self:
        """Register ``handler`` to run when ``event`` is received.

        The handler receives the decoded ``Payload`` as its single argument
        and its return value is ignored. GitHub does nothing useful with the
        response, so all meaningful work happens as side effects of the
        handler.

        Raises
        ------
        DuplicateHandlerError
            If ``event`` already has a handler.
        RegistryFinalizedError
            If ``build()`` has already been called.

        """
        self._registry.on(event, handler)
        return self

    def build(self) -> falcon.asgi.App:
        """Finalise the registry and return the ASGI application.

        Raises
        ------
        RegistryFinalizedError
            If called more than once.

        """
        registry = self._registry.build()
        dispatcher = EventDispatcher(
            registry,
            executor=self._executor,
            max_workers=self._max_workers,
        )
        log_info(
            logger,
            "Built webhook app on %s with handlers for: %s",
            self._webhook_path,
            ", ".join(sorted(registry)) or "<none>",
        )
        return create_app(
            AppDependencies(
                secret=self._secret,
                dispatcher=dispatcher,
                webhook_path=self._webhook_path,
            )
        )


def new(secret: bytes | str, **kwargs: typ.Any) -> WebhookAppBuilder:  # noqa: ANN401
    """Return a ``WebhookAppBuilder`` for the given webhook secret.

    Keyword arguments are passed through to ``WebhookAppBuilder``.
    """
    return WebhookAppBuilder(secret, **kwargs)
