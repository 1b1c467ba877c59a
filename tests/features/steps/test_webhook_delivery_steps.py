"""Behavioural coverage for verified webhook delivery."""

from __future__ import annotations

import concurrent.futures as cf
import typing as typ

import falcon.testing
import pytest
from pytest_bdd import given, parsers, scenario, then, when

import hookgate
from hookgate import Event
from tests.helpers.github_payloads import (
    encode,
    issue_comment_body,
    pull_request_body,
    signed_headers,
)

if typ.TYPE_CHECKING:
    from falcon.testing.client import Result

    from tests.conftest import RecordingHandler

_FEATURE = "../webhook_delivery.feature"


class DeliveryContext(typ.TypedDict, total=False):
    """Shared mutable scenario state."""

    client: falcon.testing.TestClient
    executor: cf.ThreadPoolExecutor
    handler: RecordingHandler
    response: Result


@scenario(_FEATURE, "Signed issue comment reaches its handler")
def test_signed_issue_comment() -> None:
    """Wrap the pytest-bdd scenario for a verified delivery."""


@scenario(_FEATURE, "Unsigned delivery is refused")
def test_unsigned_delivery() -> None:
    """Wrap the pytest-bdd scenario for a missing signature."""


@scenario(_FEATURE, "Delivery for an unregistered event is not implemented")
def test_unregistered_event() -> None:
    """Wrap the pytest-bdd scenario for an unregistered event."""


@scenario(_FEATURE, "Signed delivery with malformed JSON is refused")
def test_malformed_json() -> None:
    """Wrap the pytest-bdd scenario for an undecodable body."""


@scenario(_FEATURE, "Identical deliveries are handled independently")
def test_identical_deliveries() -> None:
    """Wrap the pytest-bdd scenario for repeated deliveries."""


@pytest.fixture
def delivery_context(
    executor: cf.ThreadPoolExecutor,
    recording_handler: RecordingHandler,
) -> DeliveryContext:
    """Provision shared state for a scenario."""
    return {"executor": executor, "handler": recording_handler}


@given(parsers.parse('a webhook app with secret "{secret}" and an issue_comment handler'))
def given_webhook_app(delivery_context: DeliveryContext, secret: str) -> None:
    """Build the app with a recording issue_comment handler."""
    app = (
        hookgate.new(secret, executor=delivery_context["executor"])
        .on(Event.ISSUE_COMMENT, delivery_context["handler"])
        .build()
    )
    delivery_context["client"] = falcon.testing.TestClient(app)


def _post(
    delivery_context: DeliveryContext,
    raw_body: bytes,
    headers: dict[str, str],
) -> None:
    client = delivery_context["client"]
    delivery_context["response"] = client.simulate_post("/", body=raw_body, headers=headers)


@when(parsers.parse('an issue_comment delivery signed with "{secret}" is posted'))
def when_signed_comment(delivery_context: DeliveryContext, secret: str) -> None:
    """Post a correctly signed issue_comment delivery."""
    raw_body = encode(issue_comment_body())
    _post(delivery_context, raw_body, signed_headers(raw_body, secret=secret.encode()))


@when("an issue_comment delivery without a signature is posted")
def when_unsigned_comment(delivery_context: DeliveryContext) -> None:
    """Post an issue_comment delivery with no signature header."""
    raw_body = encode(issue_comment_body())
    headers = signed_headers(raw_body)
    del headers["X-Hub-Signature-256"]
    _post(delivery_context, raw_body, headers)


@when(parsers.parse('a pull_request delivery signed with "{secret}" is posted'))
def when_signed_pull_request(delivery_context: DeliveryContext, secret: str) -> None:
    """Post a correctly signed pull_request delivery."""
    raw_body = encode(pull_request_body())
    _post(
        delivery_context,
        raw_body,
        signed_headers(raw_body, event="pull_request", secret=secret.encode()),
    )


@when(parsers.parse('a malformed issue_comment delivery signed with "{secret}" is posted'))
def when_malformed_comment(delivery_context: DeliveryContext, secret: str) -> None:
    """Post a correctly signed body that is not valid JSON."""
    raw_body = b'{"action": "created", "comment": '
    _post(delivery_context, raw_body, signed_headers(raw_body, secret=secret.encode()))


@then(parsers.parse("the response status is {status:d}"))
def then_response_status(delivery_context: DeliveryContext, status: int) -> None:
    """Assert the HTTP response status code."""
    response = delivery_context["response"]
    assert response.status_code == status, (
        f"expected status {status}, got {response.status_code}"
    )


@then("the response body is empty")
def then_response_body_empty(delivery_context: DeliveryContext) -> None:
    """Assert nothing was written to the response body."""
    assert delivery_context["response"].content == b"", "expected an empty body"


@then(parsers.re(r"the issue_comment handler ran (?P<count>\d+) times?"))
def then_handler_ran(delivery_context: DeliveryContext, count: str) -> None:
    """Drain the worker pool and assert the handler call count."""
    delivery_context["executor"].shutdown(wait=True)
    calls = delivery_context["handler"].calls
    assert len(calls) == int(count), f"expected {count} calls, got {len(calls)}"
