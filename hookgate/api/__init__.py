"""hookgate HTTP layer.

This package provides the Falcon Asynchronous Server Gateway Interface
(ASGI) application: the verification middleware, the webhook and health
resources, and the error handlers that turn hookgate errors into statuses.

Public API
----------
create_app
    Application factory wiring an existing dispatcher behind the gate.
AppDependencies
    Parameter object for ``create_app``.
"""

from hookgate.api.app import AppDependencies, create_app

__all__ = ["AppDependencies", "create_app"]
