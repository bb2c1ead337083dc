"""Response interpretation stories: accepted, structured rejection, raw rejection, protocol errors."""

from __future__ import annotations

import pytest

from acs_mailer.adapters.azure.transport import UNKNOWN_ERROR_CODE, interpret_response
from acs_mailer.domain.errors import ApiError, ProtocolError
from acs_mailer.domain.models import SendFailure, SendSuccess


@pytest.mark.os_agnostic
def test_accepted_response_yields_provider_message_id() -> None:
    result = interpret_response(202, '{"id": "9a1f-42", "status": "Running"}')

    assert result == SendSuccess(provider_message_id="9a1f-42")
    assert result.ok is True


@pytest.mark.os_agnostic
def test_structured_error_keeps_code_and_message_verbatim() -> None:
    body = '{"error": {"code": "InvalidArgument", "message": "Sender domain not linked."}}'

    result = interpret_response(400, body)

    assert result == SendFailure(
        error_code="InvalidArgument", error_message="Sender domain not linked.", http_status=400
    )
    assert result.ok is False


@pytest.mark.os_agnostic
@pytest.mark.parametrize("status", [401, 403, 429, 500, 503])
def test_any_status_other_than_202_is_a_failure(status: int) -> None:
    result = interpret_response(status, '{"error": {"code": "Denied", "message": "no"}}')

    assert isinstance(result, SendFailure)
    assert result.http_status == status


@pytest.mark.os_agnostic
def test_200_is_not_treated_as_accepted() -> None:
    """Only 202 means the message was queued."""
    result = interpret_response(200, '{"id": "x"}')

    assert isinstance(result, SendFailure)


@pytest.mark.os_agnostic
def test_unstructured_error_embeds_raw_body_and_status() -> None:
    result = interpret_response(502, "<html>Bad Gateway</html>")

    assert isinstance(result, SendFailure)
    assert result.error_code == UNKNOWN_ERROR_CODE
    assert result.error_message == "Unable to send an email: <html>Bad Gateway</html> (code 502)."


@pytest.mark.os_agnostic
@pytest.mark.parametrize("body", ["", "[]", '{"error": "flat string"}', '{"message": "no error key"}'])
def test_json_without_error_object_is_unstructured(body: str) -> None:
    result = interpret_response(400, body)

    assert isinstance(result, SendFailure)
    assert result.error_code == UNKNOWN_ERROR_CODE


@pytest.mark.os_agnostic
def test_error_object_without_code_falls_back_to_unknown_code() -> None:
    result = interpret_response(400, '{"error": {"message": "only a message"}}')

    assert isinstance(result, SendFailure)
    assert result.error_code == UNKNOWN_ERROR_CODE
    assert result.error_message == "only a message"


@pytest.mark.os_agnostic
@pytest.mark.parametrize("body", ["not json", "[1, 2]", "{}", '{"id": ""}', '{"id": 17}'])
def test_accepted_response_without_readable_id_is_a_protocol_error(body: str) -> None:
    with pytest.raises(ProtocolError) as exc_info:
        interpret_response(202, body)

    assert exc_info.value.http_status == 202
    assert exc_info.value.body == body


@pytest.mark.os_agnostic
def test_failure_raises_api_error_on_request() -> None:
    result = interpret_response(400, '{"error": {"code": "InvalidArgument", "message": "bad"}}')

    with pytest.raises(ApiError, match=r"Unable to send an email \(InvalidArgument\): bad") as exc_info:
        result.raise_for_failure()

    assert exc_info.value.code == "InvalidArgument"
    assert exc_info.value.http_status == 400


@pytest.mark.os_agnostic
def test_success_raise_for_failure_is_a_no_op() -> None:
    interpret_response(202, '{"id": "abc"}').raise_for_failure()
