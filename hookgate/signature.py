"""HMAC-SHA256 verification of GitHub webhook bodies.

GitHub signs each delivery with the webhook secret and sends the result as
``X-Hub-Signature-256: sha256=<hexdigest>``. The digest is always computed over
the bytes exactly as received; hashing a re-encoded copy of the decoded JSON
would not reproduce GitHub's digest.

Usage
-----
Verify a request body, raising on failure::

    verify_signature(secret, raw_body, req.get_header("X-Hub-Signature-256"))

Sign a body the way GitHub does::

    headers = {"X-Hub-Signature-256": sign(secret, raw_body)}

"""

from __future__ import annotations

import dataclasses as dc
import hashlib
import hmac

from hookgate.errors import (
    MalformedSignatureError,
    MissingSignatureError,
    SignatureMismatchError,
)

SIGNATURE_HEADER = "X-Hub-Signature-256"
SHA256 = "sha256"


@dc.dataclass(frozen=True, slots=True)
class Signature:
    """A parsed signature header.

    Attributes
    ----------
    algorithm
        Digest algorithm named in the header; only ``sha256`` is accepted.
    digest
        Decoded digest bytes.

    """

    algorithm: str
    digest: bytes


def parse_signature(header: str) -> Signature:
    """Parse an ``algorithm=hexdigest`` header value.

    Raises
    ------
    MalformedSignatureError
        If the value has no ``=`` separator, names an algorithm other than
        ``sha256``, or carries a digest that is not hexadecimal.

    """
    algorithm, sep, hex_digest = header.strip().partition("=")
    if not sep or not algorithm or not hex_digest:
        raise MalformedSignatureError.bad_format()
    if algorithm != SHA256:
        raise MalformedSignatureError.unsupported_algorithm(algorithm)
    try:
        digest = bytes.fromhex(hex_digest)
    except ValueError:
        raise MalformedSignatureError.bad_hex() from None
    return Signature(algorithm=algorithm, digest=digest)


def compute_signature(secret: bytes, raw_body: bytes) -> bytes:
    """Return the HMAC-SHA256 digest of ``raw_body`` keyed by ``secret``."""
    return hmac.new(secret, raw_body, hashlib.sha256).digest()


def sign(secret: bytes, raw_body: bytes) -> str:
    """Return the ``X-Hub-Signature-256`` value GitHub would send."""
    return f"{SHA256}={compute_signature(secret, raw_body).hex()}"


def verify_signature(secret: bytes, raw_body: bytes, header: str | None) -> None:
    """Check that ``header`` is a valid signature of ``raw_body``.

    The comparison runs in constant time with respect to where the digests
    first differ.

    Parameters
    ----------
    secret
        Shared webhook secret.
    raw_body
        Request body exactly as received.
    header
        Value of the ``X-Hub-Signature-256`` header, or ``None`` when absent.

    Raises
    ------
    MissingSignatureError
        If ``header`` is ``None`` or blank.
    MalformedSignatureError
        If ``header`` cannot be parsed.
    SignatureMismatchError
        If the digest does not match.

    """
    if header is None or not header.strip():
        raise MissingSignatureError
    presented = parse_signature(header)
    expected = compute_signature(secret, raw_body)
    if not hmac.compare_digest(expected, presented.digest):
        raise SignatureMismatchError


__all__ = [
    "SHA256",
    "SIGNATURE_HEADER",
    "Signature",
    "compute_signature",
    "parse_signature",
    "sign",
    "verify_signature",
]
