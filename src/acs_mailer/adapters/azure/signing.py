"""HMAC-SHA256 request signing for the Azure Communication Services REST API.

The provider authenticates a request by recomputing an HMAC over a
canonical string built from the method, the path and query, the request
date, the host, and the SHA-256 digest of the body. Every byte matters:
the digest is taken over the exact body that goes on the wire.

Contents:
    * :func:`sign` - Produce the authentication header values for one request.
    * :class:`SignedHeaders` - Result of :func:`sign`.
    * Building blocks (:func:`format_http_date`, :func:`compute_content_hash`,
      :func:`build_string_to_sign`, :func:`decode_access_key`,
      :func:`normalize_host`) exposed for tests and diagnostics.
"""

from __future__ import annotations

import base64
import binascii
import hashlib
import hmac
from dataclasses import dataclass
from datetime import datetime, timezone
from email.utils import format_datetime

from acs_mailer.domain.errors import ConfigurationError

#: Header names covered by the signature, in string-to-sign order.
SIGNED_HEADERS = "x-ms-date;host;x-ms-content-sha256"

_AUTHORIZATION_PREFIX = f"HMAC-SHA256 SignedHeaders={SIGNED_HEADERS}&Signature="


@dataclass(frozen=True, slots=True)
class SignedHeaders:
    """Authentication header values for one request.

    Attributes:
        authorization: Value of the ``Authorization`` header.
        date: Value of ``x-ms-date`` (and ``repeatability-first-sent``).
        content_hash: Value of ``x-ms-content-sha256``.
    """

    authorization: str
    date: str
    content_hash: str


def format_http_date(timestamp: datetime) -> str:
    """Format a timestamp as an RFC 1123 date in GMT.

    Naive datetimes are taken to be UTC already. The output does not depend
    on the process locale.

    Example:
        >>> format_http_date(datetime(2023, 3, 31, 9, 5, 7, tzinfo=timezone.utc))
        'Fri, 31 Mar 2023 09:05:07 GMT'
    """
    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=timezone.utc)
    return format_datetime(timestamp.astimezone(timezone.utc).replace(microsecond=0), usegmt=True)


def compute_content_hash(body: bytes) -> str:
    """Return the base64-encoded SHA-256 digest of ``body``.

    Example:
        >>> compute_content_hash(b"")
        '47DEQpj8HBSa+/TImW+5JCeuQeRkm5NMpJWZG3hSuFU='
    """
    return base64.b64encode(hashlib.sha256(body).digest()).decode("ascii")


def normalize_host(endpoint: str) -> str:
    """Reduce an endpoint to the bare host the signature covers.

    Strips any ``scheme://`` prefix and anything after the authority.

    Raises:
        ConfigurationError: When no host remains.

    Example:
        >>> normalize_host("https://my-res.communication.azure.com/")
        'my-res.communication.azure.com'
        >>> normalize_host("my-res.communication.azure.com")
        'my-res.communication.azure.com'
    """
    host = endpoint.strip()
    if "://" in host:
        host = host.split("://", 1)[1]
    host = host.split("/", 1)[0]
    if not host:
        raise ConfigurationError("No endpoint host configured for the Azure mailer")
    return host


def decode_access_key(secret_key_base64: str) -> bytes:
    """Decode the base64 access key into raw HMAC key bytes.

    Raises:
        ConfigurationError: When the key is empty or not valid base64.

    Example:
        >>> decode_access_key("c2VjcmV0")
        b'secret'
    """
    if not secret_key_base64 or not secret_key_base64.strip():
        raise ConfigurationError("No access key configured for the Azure mailer")
    try:
        return base64.b64decode(secret_key_base64.strip(), validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ConfigurationError("Azure mailer access key is not valid base64") from exc


def build_string_to_sign(method: str, path_and_query: str, date: str, host: str, content_hash: str) -> str:
    """Assemble the canonical string the signature is computed over.

    Example:
        >>> build_string_to_sign("POST", "/emails:send?api-version=1", "D", "h", "C")
        'POST\\n/emails:send?api-version=1\\nD;h;C'
    """
    return f"{method.upper()}\n{path_and_query}\n{date};{host};{content_hash}"


def sign(
    method: str,
    path_and_query: str,
    host: str,
    serialized_body: bytes,
    secret_key_base64: str,
    timestamp: datetime,
) -> SignedHeaders:
    """Compute the authentication headers for a request.

    Pure function: identical inputs, including ``timestamp``, always give
    identical output. The caller must transmit ``serialized_body`` exactly
    as passed here, otherwise the provider rejects the signature.

    Args:
        method: HTTP verb, upper-cased before signing.
        path_and_query: Request path with query string, e.g.
            ``/emails:send?api-version=2023-03-31``.
        host: Endpoint host; a leading scheme is stripped.
        serialized_body: The exact request body bytes.
        secret_key_base64: Access key as issued by the provider (base64).
        timestamp: Request time; rendered in GMT.

    Returns:
        Header values for ``Authorization``, ``x-ms-date`` and
        ``x-ms-content-sha256``.

    Raises:
        ConfigurationError: When the key is not valid base64 or the host is empty.
    """
    bare_host = normalize_host(host)
    key = decode_access_key(secret_key_base64)
    date = format_http_date(timestamp)
    content_hash = compute_content_hash(serialized_body)
    string_to_sign = build_string_to_sign(method, path_and_query, date, bare_host, content_hash)
    digest = hmac.new(key, string_to_sign.encode("utf-8"), hashlib.sha256).digest()
    signature = base64.b64encode(digest).decode("ascii")
    return SignedHeaders(
        authorization=f"{_AUTHORIZATION_PREFIX}{signature}",
        date=date,
        content_hash=content_hash,
    )


__all__ = [
    "SIGNED_HEADERS",
    "SignedHeaders",
    "build_string_to_sign",
    "compute_content_hash",
    "decode_access_key",
    "format_http_date",
    "normalize_host",
    "sign",
]
