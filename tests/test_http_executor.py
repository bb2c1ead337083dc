"""httpx executor stories, driven through httpx.MockTransport without network access."""

from __future__ import annotations

import httpx
import pytest

from acs_mailer.adapters.azure.config import AzureMailerConfig
from acs_mailer.adapters.azure.http import HttpxExecutor
from acs_mailer.adapters.azure.transport import AzureApiTransport
from acs_mailer.domain.errors import TransportError
from acs_mailer.domain.models import Envelope, NormalizedEmail, SendFailure, SendSuccess


def _executor(handler: httpx.MockTransport) -> HttpxExecutor:
    return HttpxExecutor(client=httpx.Client(transport=handler))


@pytest.mark.os_agnostic
def test_executor_forwards_method_url_headers_and_body() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(202, text='{"id": "abc"}')

    with _executor(httpx.MockTransport(handler)) as executor:
        response = executor("POST", "https://h.example/emails:send", headers={"x-ms-date": "D"}, body=b'{"a":1}')

    assert response.status_code == 202
    assert response.text == '{"id": "abc"}'
    assert seen[0].method == "POST"
    assert str(seen[0].url) == "https://h.example/emails:send"
    assert seen[0].headers["x-ms-date"] == "D"
    assert seen[0].content == b'{"a":1}'


@pytest.mark.os_agnostic
def test_executor_returns_error_statuses_instead_of_raising() -> None:
    executor = _executor(httpx.MockTransport(lambda request: httpx.Response(503, text="unavailable")))

    response = executor("POST", "https://h.example/", headers={}, body=b"")

    assert (response.status_code, response.text) == (503, "unavailable")


@pytest.mark.os_agnostic
@pytest.mark.parametrize("error", [httpx.ConnectError("refused"), httpx.ReadTimeout("slow")])
def test_executor_turns_connection_failures_into_transport_errors(error: httpx.TransportError) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise error

    executor = _executor(httpx.MockTransport(handler))

    with pytest.raises(TransportError, match="Could not reach the remote Azure server") as exc_info:
        executor("POST", "https://h.example/", headers={}, body=b"")

    assert exc_info.value.__cause__ is error


@pytest.mark.os_agnostic
def test_transport_over_httpx_sends_the_signed_request(
    mailer_config: AzureMailerConfig,
    simple_email: NormalizedEmail,
    simple_envelope: Envelope,
) -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(202, json={"id": "queued-1", "status": "Running"})

    transport = AzureApiTransport(mailer_config, _executor(httpx.MockTransport(handler)))

    result = transport.send(simple_email, simple_envelope)

    assert result == SendSuccess("queued-1")
    request = seen[0]
    assert request.url.host == "res.communication.azure.com"
    assert request.headers["Authorization"].startswith("HMAC-SHA256 SignedHeaders=x-ms-date;host;x-ms-content-sha256")


@pytest.mark.os_agnostic
def test_transport_over_httpx_reports_rejections(
    mailer_config: AzureMailerConfig,
    simple_email: NormalizedEmail,
    simple_envelope: Envelope,
) -> None:
    body = {"error": {"code": "Unauthorized", "message": "Denied by the resource provider."}}
    executor = _executor(httpx.MockTransport(lambda request: httpx.Response(401, json=body)))

    result = AzureApiTransport(mailer_config, executor).send(simple_email, simple_envelope)

    assert result == SendFailure("Unauthorized", "Denied by the resource provider.", 401)
