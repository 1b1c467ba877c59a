"""Typed webhook payloads.

``Payload`` is the generic shape every supported event decodes into. Fields
that only some events carry (``comment``, ``issue``, ``pull_request``) are
optional there. The specialised views make those fields mandatory and are
derived from a ``Payload`` with ``from_payload``, which fails when the
delivery lacks something the view needs.

JSON members hookgate does not model are ignored while decoding.

Usage
-----
Narrow a payload inside an ``issue_comment`` handler::

    def on_comment(payload: Payload) -> None:
        view = IssueCommentPayload.from_payload(payload)
        print(view.comment.body)

"""

from __future__ import annotations

import datetime as dt  # noqa: TC003 - msgspec resolves annotations at runtime
import enum
import typing as typ

import msgspec

from hookgate.errors import PayloadConversionError, PayloadDecodeError


class User(msgspec.Struct, kw_only=True, frozen=True):
    """GitHub account that owns or acted on something."""

    login: str
    id: int
    type: str | None = None
    html_url: str | None = None


class Repository(msgspec.Struct, kw_only=True, frozen=True):
    """Repository the delivery concerns.

    Attributes
    ----------
    id : int
        GitHub's numeric repository identifier.
    name : str
        Repository name without the owner.
    full_name : str
        ``owner/name`` slug.
    owner : User
        Owning user or organisation.
    private : bool
        Whether the repository is private.

    """

    id: int
    name: str
    full_name: str
    owner: User
    private: bool = False
    html_url: str | None = None
    default_branch: str | None = None


class Issue(msgspec.Struct, kw_only=True, frozen=True):
    """Issue attached to ``issues`` and ``issue_comment`` deliveries."""

    id: int
    number: int
    title: str
    state: str
    user: User
    body: str | None = None
    html_url: str | None = None
    created_at: dt.datetime | None = None
    updated_at: dt.datetime | None = None


class Comment(msgspec.Struct, kw_only=True, frozen=True):
    """Issue or pull request comment."""

    id: int
    body: str
    user: User
    html_url: str | None = None
    created_at: dt.datetime | None = None
    updated_at: dt.datetime | None = None


class PullRequest(msgspec.Struct, kw_only=True, frozen=True):
    """Pull request attached to ``pull_request`` deliveries."""

    id: int
    number: int
    title: str
    state: str
    user: User
    body: str | None = None
    html_url: str | None = None
    draft: bool = False
    merged: bool | None = None


class Payload(msgspec.Struct, kw_only=True, frozen=True):
    """Generic webhook body shared by every supported event.

    Attributes
    ----------
    action : str
        Activity that triggered the delivery, such as ``created``.
    sender : User
        Account that triggered the delivery.
    repository : Repository
        Repository the delivery concerns.
    comment : Comment, optional
        Present on ``issue_comment`` deliveries.
    issue : Issue, optional
        Present on ``issues`` and ``issue_comment`` deliveries.
    pull_request : PullRequest, optional
        Present on ``pull_request`` deliveries.

    """

    action: str
    sender: User
    repository: Repository
    comment: Comment | None = None
    issue: Issue | None = None
    pull_request: PullRequest | None = None


_DECODER = msgspec.json.Decoder(Payload)


def decode_payload(raw_body: bytes) -> Payload:
    """Decode the raw request body into a ``Payload``.

    Raises
    ------
    PayloadDecodeError
        If the body is not JSON or does not match the payload shape.

    """
    try:
        return _DECODER.decode(raw_body)
    except msgspec.DecodeError as exc:
        # ValidationError subclasses DecodeError.
        raise PayloadDecodeError(str(exc)) from exc


_T = typ.TypeVar("_T")


def _require(value: _T | None, view: str, field: str) -> _T:
    if value is None:
        raise PayloadConversionError(view, field)
    return value


class IssueCommentAction(enum.StrEnum):
    """Actions GitHub sends with ``issue_comment`` deliveries."""

    CREATED = "created"
    EDITED = "edited"
    DELETED = "deleted"


class IssueCommentPayload(msgspec.Struct, kw_only=True, frozen=True):
    """``issue_comment`` view with the comment and its issue guaranteed."""

    action: IssueCommentAction
    sender: User
    repository: Repository
    comment: Comment
    issue: Issue

    @classmethod
    def from_payload(cls, payload: Payload) -> IssueCommentPayload:
        """Narrow ``payload``, failing if the comment or issue is absent.

        Raises
        ------
        PayloadConversionError
            If ``comment`` or ``issue`` is missing, or ``action`` is not a
            comment action.

        """
        try:
            action = IssueCommentAction(payload.action)
        except ValueError:
            raise PayloadConversionError(cls.__name__, "action") from None
        return cls(
            action=action,
            sender=payload.sender,
            repository=payload.repository,
            comment=_require(payload.comment, cls.__name__, "comment"),
            issue=_require(payload.issue, cls.__name__, "issue"),
        )


class IssuesPayload(msgspec.Struct, kw_only=True, frozen=True):
    """``issues`` view with the issue guaranteed."""

    action: str
    sender: User
    repository: Repository
    issue: Issue

    @classmethod
    def from_payload(cls, payload: Payload) -> IssuesPayload:
        """Narrow ``payload``, failing if the issue is absent."""
        return cls(
            action=payload.action,
            sender=payload.sender,
            repository=payload.repository,
            issue=_require(payload.issue, cls.__name__, "issue"),
        )


class PullRequestPayload(msgspec.Struct, kw_only=True, frozen=True):
    """``pull_request`` view with the pull request guaranteed."""

    action: str
    sender: User
    repository: Repository
    pull_request: PullRequest

    @classmethod
    def from_payload(cls, payload: Payload) -> PullRequestPayload:
        """Narrow ``payload``, failing if the pull request is absent."""
        return cls(
            action=payload.action,
            sender=payload.sender,
            repository=payload.repository,
            pull_request=_require(payload.pull_request, cls.__name__, "pull_request"),
        )


__all__ = [
    "Comment",
    "Issue",
    "IssueCommentAction",
    "IssueCommentPayload",
    "IssuesPayload",
    "Payload",
    "PullRequest",
    "PullRequestPayload",
    "Repository",
    "User",
    "decode_payload",
]
