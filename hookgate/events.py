"""GitHub webhook event identifiers.

GitHub names the kind of a delivery in the ``X-GitHub-Event`` header. hookgate
recognises a fixed set of those names; adding an event means adding a member
here and, where it carries its own object, a field on ``Payload``.
"""

from __future__ import annotations

import enum

from hookgate.errors import UnknownEventTypeError


class Event(enum.StrEnum):
    """Webhook event types hookgate can route."""

    ISSUE_COMMENT = "issue_comment"
    ISSUES = "issues"
    PULL_REQUEST = "pull_request"

    @classmethod
    def parse(cls, name: str) -> Event:
        """Return the event named by an ``X-GitHub-Event`` header value.

        Raises
        ------
        UnknownEventTypeError
            If ``name`` is not a recognised event.

        """
        try:
            return cls(name.strip())
        except ValueError:
            raise UnknownEventTypeError(name) from None


__all__ = ["Event"]
