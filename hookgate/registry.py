"""Handler registration.

Handlers are collected on a ``HandlerRegistryBuilder`` and frozen into a
``HandlerRegistry`` before the application starts serving. ``build()`` is a
one-way transition: the builder refuses further use afterwards, and the
registry it returns cannot be modified.

Each event has at most one handler. Registering a second one raises
``DuplicateHandlerError`` rather than silently replacing the first.

Usage
-----
>>> registry = (
...     HandlerRegistryBuilder()
...     .on(Event.ISSUE_COMMENT, handle_comment)
...     .on("pull_request", handle_pull_request)
...     .build()
... )
>>> Event.ISSUE_COMMENT in registry
True

"""

from __future__ import annotations

import collections.abc as cabc
import types
import typing as typ

from hookgate.errors import DuplicateHandlerError, RegistryFinalizedError
from hookgate.events import Event

if typ.TYPE_CHECKING:
    from hookgate.payload import Payload

type Handler = cabc.Callable[[Payload], object]


class HandlerRegistry(cabc.Mapping[Event, Handler]):
    """Read-only mapping from event to handler."""

    __slots__ = ("_handlers",)

    def __init__(self, handlers: cabc.Mapping[Event, Handler]) -> None:
        """Snapshot ``handlers``; later changes to the source are not seen."""
        self._handlers = types.MappingProxyType(dict(handlers))

    def __getitem__(self, event: Event) -> Handler:
        """Return the handler for ``event``."""
        return self._handlers[event]

    def __iter__(self) -> cabc.Iterator[Event]:
        """Iterate over registered events."""
        return iter(self._handlers)

    def __len__(self) -> int:
        """Return the number of registered handlers."""
        return len(self._handlers)

    @property
    def events(self) -> frozenset[Event]:
        """Events that have a handler."""
        return frozenset(self._handlers)

    def __repr__(self) -> str:
        """Return a summary naming the registered events."""
        names = ", ".join(sorted(self._handlers))
        return f"HandlerRegistry({names})"


class HandlerRegistryBuilder:
    """Accumulate handlers before building an immutable registry."""

    def __init__(self) -> None:
        """Start with no handlers."""
        self._handlers: dict[Event, Handler] = {}
        self._built = False

    def on(self, event: Event | str, handler: Handler) -> typ.Self:
        """Register ``handler`` for ``event`` and return the builder.

        Parameters
        ----------
        event
            The event, or its ``X-GitHub-Event`` name.
        handler
            Callable receiving the decoded ``Payload``. Coroutine functions
            are accepted and run to completion on the worker pool.

        Raises
        ------
        RegistryFinalizedError
            If ``build()`` has already been called.
        UnknownEventTypeError
            If ``event`` is a string that names no known event.
        DuplicateHandlerError
            If ``event`` already has a handler.
        TypeError
            If ``handler`` is not callable.

        """
        if self._built:
            raise RegistryFinalizedError
        parsed = event if isinstance(event, Event) else Event.parse(event)
        if not callable(handler):
            msg = f"handler for '{parsed}' must be callable, got {type(handler)!r}"
            raise TypeError(msg)
        if parsed in self._handlers:
            raise DuplicateHandlerError(parsed)
        self._handlers[parsed] = handler
        return self

    def build(self) -> HandlerRegistry:
        """Freeze the registered handlers.

        Raises
        ------
        RegistryFinalizedError
            If called more than once.

        """
        if self._built:
            raise RegistryFinalizedError
        self._built = True
        return HandlerRegistry(self._handlers)


__all__ = ["Handler", "HandlerRegistry", "HandlerRegistryBuilder"]
