"""Falcon error handlers translating hookgate errors into HTTP statuses.

Every handler answers with an empty body. Which check failed is recorded in
the logs by the code that raised the error; the sender only sees the status.

Usage
-----
Register error handlers on the Falcon app::

    from hookgate.api.errors import register_error_handlers

    register_error_handlers(app)

"""

from __future__ import annotations

import typing as typ

import falcon

from hookgate.errors import (
    DispatchError,
    MissingEventHeaderError,
    NoHandlerRegisteredError,
    PayloadDecodeError,
    UnknownEventTypeError,
    VerificationError,
)

if typ.TYPE_CHECKING:
    import falcon.asgi
    from falcon.asgi import Request, Response

__all__ = [
    "dispatch_error_status",
    "handle_dispatch_error",
    "handle_verification_error",
    "register_error_handlers",
]

_DISPATCH_STATUS: dict[type[DispatchError], str] = {
    MissingEventHeaderError: falcon.HTTP_400,
    PayloadDecodeError: falcon.HTTP_400,
    UnknownEventTypeError: falcon.HTTP_501,
    NoHandlerRegisteredError: falcon.HTTP_501,
}


def dispatch_error_status(ex: DispatchError) -> str:
    """Return the Falcon status line for a dispatch failure."""
    return _DISPATCH_STATUS.get(type(ex), falcon.HTTP_400)


def _empty(resp: Response, status: str) -> None:
    resp.status = status
    resp.data = b""


async def handle_verification_error(
    _req: Request,
    resp: Response,
    _ex: VerificationError,
    _params: dict[str, typ.Any],
) -> None:
    """Map any ``VerificationError`` to an empty HTTP 400 response.

    Missing, malformed and mismatched signatures answer identically so the
    response does not reveal which part of the check failed.

    Parameters
    ----------
    _req
        Falcon request (unused).
    resp
        Falcon response whose status is set.
    _ex
        The verification failure (unused).
    _params
        URI template parameters (unused).

    """
    _empty(resp, falcon.HTTP_400)


async def handle_dispatch_error(
    _req: Request,
    resp: Response,
    ex: DispatchError,
    _params: dict[str, typ.Any],
) -> None:
    """Map a ``DispatchError`` to an empty 400 or 501 response.

    Unknown events and events without a handler answer ``501 Not
    Implemented``; a missing event header or an undecodable body answers
    ``400 Bad Request``.

    """
    _empty(resp, dispatch_error_status(ex))


def register_error_handlers(app: falcon.asgi.App) -> None:
    """Install the hookgate error handlers on ``app``."""
    app.add_error_handler(VerificationError, handle_verification_error)
    app.add_error_handler(DispatchError, handle_dispatch_error)
