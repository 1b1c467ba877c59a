"""Route verified webhook bodies to registered handlers.

A delivery moves through ``received → header_parsed → handler_resolved →
payload_decoded → handler_scheduled``. Any failure before scheduling raises a
``DispatchError`` and is logged with the stage it reached; nothing is retried.

Handlers run on a thread pool. ``dispatch`` returns as soon as the handler is
submitted, so the HTTP response never waits for handler work. Each invocation
is wrapped so that an exception raised by one handler is logged and goes no
further.

Usage
-----
>>> dispatcher = EventDispatcher(registry, max_workers=4)
>>> dispatcher.dispatch("issue_comment", raw_body, delivery_id="72d3162e")
<Future at 0x... state=pending>

"""

from __future__ import annotations

import asyncio
import concurrent.futures as cf
import datetime as dt
import inspect
import time
import typing as typ

from hookgate.errors import (
    DispatchError,
    MissingEventHeaderError,
    NoHandlerRegisteredError,
)
from hookgate.events import Event
from hookgate.observability import DispatchStage, WebhookEventLogger
from hookgate.payload import decode_payload

if typ.TYPE_CHECKING:
    from hookgate.payload import Payload
    from hookgate.registry import Handler, HandlerRegistry

DEFAULT_MAX_WORKERS = 4
_THREAD_NAME_PREFIX = "hookgate-handler"


class EventDispatcher:
    """Resolve, decode and schedule webhook deliveries.

    Parameters
    ----------
    registry
        Finalised handler registry.
    executor
        Pool that runs handlers. When omitted the dispatcher creates and owns
        a ``ThreadPoolExecutor`` of ``max_workers`` threads.
    max_workers
        Size of the owned pool; ignored when ``executor`` is given.
    event_logger
        Structured event sink; a default ``WebhookEventLogger`` is used when
        omitted.

    """

    def __init__(
        self,
        registry: HandlerRegistry,
        *,
        executor: cf.Executor | None = None,
        max_workers: int = DEFAULT_MAX_WORKERS,
        event_logger: WebhookEventLogger | None = None,
    ) -> None:
        """Bind the dispatcher to a registry and a worker pool."""
        self._registry = registry
        self._owns_executor = executor is None
        self._executor = executor or cf.ThreadPoolExecutor(
            max_workers=max_workers,
            thread_name_prefix=_THREAD_NAME_PREFIX,
        )
        self._event_logger = event_logger or WebhookEventLogger()

    @property
    def registry(self) -> HandlerRegistry:
        """The registry handlers are resolved from."""
        return self._registry

    def dispatch(
        self,
        event_name: str | None,
        raw_body: bytes,
        *,
        delivery_id: str | None = None,
    ) -> cf.Future[None]:
        """Schedule the handler registered for ``event_name``.

        Parameters
        ----------
        event_name
            Value of the ``X-GitHub-Event`` header, or ``None`` when absent.
        raw_body
            Verified request body.
        delivery_id
            Value of the ``X-GitHub-Delivery`` header, used in log lines.

        Returns
        -------
        concurrent.futures.Future[None]
            Completes when the handler has finished. It never carries the
            handler's exception; failures are logged instead.

        Raises
        ------
        MissingEventHeaderError
            If ``event_name`` is ``None``.
        UnknownEventTypeError
            If ``event_name`` names no known event.
        NoHandlerRegisteredError
            If the event has no registered handler.
        PayloadDecodeError
            If ``raw_body`` does not decode into a ``Payload``.

        """
        stage = DispatchStage.RECEIVED
        try:
            if event_name is None:
                raise MissingEventHeaderError
            event = Event.parse(event_name)
            stage = DispatchStage.HEADER_PARSED

            handler = self._registry.get(event)
            if handler is None:
                raise NoHandlerRegisteredError(event)
            stage = DispatchStage.HANDLER_RESOLVED

            payload = decode_payload(raw_body)
        except DispatchError as exc:
            self._event_logger.log_dispatch_rejected(
                error=exc,
                stage=stage,
                event_name=event_name,
                delivery_id=delivery_id,
            )
            raise

        future = self._executor.submit(
            self._invoke, handler, event, payload, delivery_id
        )
        self._event_logger.log_handler_scheduled(event=event, delivery_id=delivery_id)
        return future

    def _invoke(
        self,
        handler: Handler,
        event: Event,
        payload: Payload,
        delivery_id: str | None,
    ) -> None:
        """Run ``handler`` on a worker thread and log its outcome."""
        started = time.monotonic()
        try:
            result = handler(payload)
            if inspect.iscoroutine(result):
                # Coroutine handlers get a private loop on the worker thread.
                asyncio.run(result)
        except Exception as exc:  # noqa: BLE001 - handler failures stay in the worker
            self._event_logger.log_handler_failed(
                event=event,
                delivery_id=delivery_id,
                error=exc,
                duration=_elapsed(started),
            )
            return
        self._event_logger.log_handler_completed(
            event=event,
            delivery_id=delivery_id,
            duration=_elapsed(started),
        )

    def shutdown(self, *, wait: bool = True) -> None:
        """Shut down the worker pool if the dispatcher created it."""
        if self._owns_executor:
            self._executor.shutdown(wait=wait)


def _elapsed(started: float) -> dt.timedelta:
    return dt.timedelta(seconds=time.monotonic() - started)


__all__ = ["DEFAULT_MAX_WORKERS", "EventDispatcher"]
