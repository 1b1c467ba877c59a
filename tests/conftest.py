"""Shared fixtures for unit and feature tests."""

from __future__ import annotations

import concurrent.futures as cf
import threading
import typing as typ

import pytest

from tests.helpers.github_payloads import SECRET, encode, issue_comment_body

if typ.TYPE_CHECKING:
    from hookgate.payload import Payload


class RecordingHandler:
    """Thread-safe handler that records every payload it receives."""

    def __init__(self) -> None:
        """Start with no calls."""
        self.calls: list[Payload] = []
        self._lock = threading.Lock()

    def __call__(self, payload: Payload) -> None:
        """Record ``payload``."""
        with self._lock:
            self.calls.append(payload)


@pytest.fixture
def secret() -> bytes:
    """Return the shared webhook secret used across tests."""
    return SECRET


@pytest.fixture
def comment_body() -> bytes:
    """Return an encoded ``issue_comment`` delivery."""
    return encode(issue_comment_body())


@pytest.fixture
def recording_handler() -> RecordingHandler:
    """Return a fresh recording handler."""
    return RecordingHandler()


@pytest.fixture
def executor() -> typ.Iterator[cf.ThreadPoolExecutor]:
    """Yield a worker pool that is drained at teardown.

    Tests call ``executor.shutdown(wait=True)`` to wait for scheduled
    handlers before asserting on them.
    """
    pool = cf.ThreadPoolExecutor(max_workers=2, thread_name_prefix="test-handler")
    try:
        yield pool
    finally:
        pool.shutdown(wait=True)
