"""Request signer stories: canonical string, known vectors, determinism, key and host errors."""

from __future__ import annotations

import base64
from datetime import datetime, timedelta, timezone

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from acs_mailer.adapters.azure.signing import (
    SIGNED_HEADERS,
    build_string_to_sign,
    compute_content_hash,
    decode_access_key,
    format_http_date,
    normalize_host,
    sign,
)
from acs_mailer.domain.errors import ConfigurationError

PATH = "/emails:send?api-version=2023-03-31"
HOST = "res.communication.azure.com"
KEY = "c2VjcmV0"
WHEN = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
BODY = b'{"a":1}'

# Known-answer values, computed independently with openssl.
BODY_HASH = "AVq9f1zFei3ZS3WQ8ErYCEJzkF7jPsXOvq5iJ2qX+GI="
SIGNATURE = "jYLaQnNCtz9hMr7j4+b5ixOtJuwhNHpFav5xNUegaQA="


# ======================== Known-answer vector ========================


@pytest.mark.os_agnostic
def test_sign_matches_known_vector() -> None:
    """Signing a fixed request reproduces the independently computed HMAC."""
    headers = sign("POST", PATH, HOST, BODY, KEY, WHEN)

    assert headers.date == "Tue, 02 Jan 2024 03:04:05 GMT"
    assert headers.content_hash == BODY_HASH
    assert headers.authorization == (
        f"HMAC-SHA256 SignedHeaders=x-ms-date;host;x-ms-content-sha256&Signature={SIGNATURE}"
    )


@pytest.mark.os_agnostic
def test_string_to_sign_has_three_lines_in_fixed_order() -> None:
    """Method, path-and-query, then date;host;hash joined by newlines."""
    text = build_string_to_sign("post", PATH, "D", HOST, BODY_HASH)

    assert text == f"POST\n{PATH}\nD;{HOST};{BODY_HASH}"


@pytest.mark.os_agnostic
def test_signed_headers_list_is_fixed() -> None:
    assert SIGNED_HEADERS == "x-ms-date;host;x-ms-content-sha256"


# ======================== Content hash ========================


@pytest.mark.os_agnostic
def test_content_hash_of_empty_body_is_sha256_of_nothing() -> None:
    assert compute_content_hash(b"") == "47DEQpj8HBSa+/TImW+5JCeuQeRkm5NMpJWZG3hSuFU="


@pytest.mark.os_agnostic
def test_changing_one_body_byte_changes_hash_and_signature() -> None:
    """The signature covers the exact body bytes."""
    original = sign("POST", PATH, HOST, BODY, KEY, WHEN)
    altered = sign("POST", PATH, HOST, b'{"a":2}', KEY, WHEN)

    assert original.content_hash != altered.content_hash
    assert original.authorization != altered.authorization


@pytest.mark.os_agnostic
def test_changing_the_path_changes_only_the_signature() -> None:
    original = sign("POST", PATH, HOST, BODY, KEY, WHEN)
    other = sign("POST", "/emails:send?api-version=2024-01-01", HOST, BODY, KEY, WHEN)

    assert original.content_hash == other.content_hash
    assert original.authorization != other.authorization


# ======================== Date formatting ========================


@pytest.mark.os_agnostic
def test_date_is_rendered_in_gmt_from_other_offsets() -> None:
    """A timestamp with a non-UTC offset is converted before formatting."""
    plus_two = WHEN.astimezone(timezone(timedelta(hours=2)))

    assert format_http_date(plus_two) == "Tue, 02 Jan 2024 03:04:05 GMT"


@pytest.mark.os_agnostic
def test_naive_timestamp_is_taken_as_utc() -> None:
    assert format_http_date(datetime(2024, 1, 2, 3, 4, 5)) == "Tue, 02 Jan 2024 03:04:05 GMT"


@pytest.mark.os_agnostic
def test_microseconds_do_not_reach_the_date_header() -> None:
    assert format_http_date(WHEN.replace(microsecond=999_999)) == "Tue, 02 Jan 2024 03:04:05 GMT"


# ======================== Host normalization ========================


@pytest.mark.os_agnostic
@pytest.mark.parametrize(
    "endpoint",
    [
        HOST,
        f"https://{HOST}",
        f"https://{HOST}/",
        f"https://{HOST}/emails:send",
        f"  {HOST}  ",
    ],
)
def test_host_is_normalized_before_signing(endpoint: str) -> None:
    """Scheme, path and surrounding whitespace never reach the signed string."""
    assert normalize_host(endpoint) == HOST
    assert sign("POST", PATH, endpoint, BODY, KEY, WHEN).authorization.endswith(SIGNATURE)


@pytest.mark.os_agnostic
@pytest.mark.parametrize("endpoint", ["", "   ", "https://", "https:///path"])
def test_empty_host_is_a_configuration_error(endpoint: str) -> None:
    with pytest.raises(ConfigurationError, match="endpoint"):
        sign("POST", PATH, endpoint, BODY, KEY, WHEN)


# ======================== Access key ========================


@pytest.mark.os_agnostic
def test_access_key_is_base64_decoded() -> None:
    assert decode_access_key(KEY) == b"secret"


@pytest.mark.os_agnostic
@pytest.mark.parametrize("bad_key", ["not base64!", "abc", "c2VjcmV0$"])
def test_invalid_base64_key_is_a_configuration_error(bad_key: str) -> None:
    with pytest.raises(ConfigurationError, match="not valid base64"):
        sign("POST", PATH, HOST, BODY, bad_key, WHEN)


@pytest.mark.os_agnostic
def test_missing_key_is_a_configuration_error() -> None:
    with pytest.raises(ConfigurationError, match="No access key"):
        decode_access_key("")


# ======================== Properties ========================


@pytest.mark.os_agnostic
@given(body=st.binary(max_size=512), key=st.binary(min_size=1, max_size=64))
@settings(max_examples=100)
def test_identical_inputs_always_sign_identically(body: bytes, key: bytes) -> None:
    """sign() is pure: no hidden clock, randomness, or state."""
    key_b64 = base64.b64encode(key).decode("ascii")

    first = sign("POST", PATH, HOST, body, key_b64, WHEN)
    second = sign("POST", PATH, HOST, body, key_b64, WHEN)

    assert first == second
    assert first.content_hash == compute_content_hash(body)
