"""Configuration for the webhook gate.

Usage
-----
Create a configuration directly:

>>> config = WebhookConfig(secret=b"s3cr3t")
>>> config.webhook_path
'/'

Or load from environment variables:

>>> import os
>>> os.environ["HOOKGATE_WEBHOOK_SECRET"] = "s3cr3t"
>>> os.environ["HOOKGATE_HANDLER_WORKERS"] = "8"
>>> WebhookConfig.from_env().handler_workers
8

"""

from __future__ import annotations

import dataclasses as dc
import os

from hookgate.dispatch import DEFAULT_MAX_WORKERS
from hookgate.errors import WebhookConfigError
from hookgate.logging import normalize_log_level


def coerce_secret(secret: bytes | str) -> bytes:
    """Return ``secret`` as bytes, rejecting empty values.

    Text secrets are UTF-8 encoded.

    Raises
    ------
    WebhookConfigError
        If ``secret`` is empty.

    """
    raw = secret.encode("utf-8") if isinstance(secret, str) else bytes(secret)
    if not raw:
        raise WebhookConfigError.empty_secret()
    return raw


@dc.dataclass(frozen=True, slots=True)
class WebhookConfig:
    """Settings for a webhook application.

    Attributes
    ----------
    secret
        Shared webhook secret. Always required; hookgate has no unsigned mode.
        Excluded from ``repr``.
    webhook_path
        Route the webhook endpoint is mounted on. Default ``/``.
    handler_workers
        Number of threads running handlers. Default 4.
    log_level
        Normalised femtologging level. Default ``INFO``.

    """

    secret: bytes = dc.field(repr=False)
    webhook_path: str = "/"
    handler_workers: int = DEFAULT_MAX_WORKERS
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        """Validate fields and normalise the secret to bytes."""
        object.__setattr__(self, "secret", coerce_secret(self.secret))
        if not self.webhook_path.startswith("/"):
            raise WebhookConfigError.invalid_path(self.webhook_path)
        if self.handler_workers < 1:
            raise WebhookConfigError.invalid_workers(str(self.handler_workers))

    @staticmethod
    def _parse_workers(raw: str) -> int:
        if not raw.strip():
            return DEFAULT_MAX_WORKERS
        try:
            value = int(raw)
        except ValueError as exc:
            raise WebhookConfigError.invalid_workers(raw) from exc
        if value < 1:
            raise WebhookConfigError.invalid_workers(raw)
        return value

    @classmethod
    def from_env(cls) -> WebhookConfig:
        """Create configuration from environment variables.

        Reads:

        - ``HOOKGATE_WEBHOOK_SECRET``: shared secret (required).
        - ``HOOKGATE_WEBHOOK_PATH``: webhook route, default ``/``.
        - ``HOOKGATE_HANDLER_WORKERS``: positive integer, default 4.
        - ``HOOKGATE_LOG_LEVEL``: log level; unknown values become ``INFO``.

        Raises
        ------
        WebhookConfigError
            If the secret is missing or empty, or another value is invalid.

        """
        secret = os.environ.get("HOOKGATE_WEBHOOK_SECRET")
        if secret is None:
            raise WebhookConfigError.missing_secret()

        webhook_path = os.environ.get("HOOKGATE_WEBHOOK_PATH", "").strip() or "/"
        workers = cls._parse_workers(os.environ.get("HOOKGATE_HANDLER_WORKERS", ""))
        log_level, _ = normalize_log_level(os.environ.get("HOOKGATE_LOG_LEVEL"))

        return cls(
            secret=secret.encode("utf-8"),
            webhook_path=webhook_path,
            handler_workers=workers,
            log_level=log_level,
        )


__all__ = ["WebhookConfig", "coerce_secret"]
