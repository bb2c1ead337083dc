"""Azure Communication Services email transport.

Builds the signed ``POST /emails:send`` request for a message, hands it to
an injected HTTP executor, and turns the provider's answer into a
:data:`~acs_mailer.domain.models.SendResult`.

The payload is serialized exactly once. The same bytes are hashed, signed
and transmitted, so the ``x-ms-content-sha256`` header always matches the
body on the wire.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, cast

import orjson

from acs_mailer.application.ports import HttpExecutor
from acs_mailer.domain.errors import ProtocolError, TransportError
from acs_mailer.domain.models import Envelope, NormalizedEmail, SendFailure, SendResult, SendSuccess

from .config import AzureMailerConfig
from .payload import build_payload
from .signing import decode_access_key, normalize_host, sign
from .validation import validate_envelope

logger = logging.getLogger(__name__)

#: Status the provider answers with once a message is queued.
HTTP_ACCEPTED = 202

#: Error code reported when a rejection carries no structured error body.
UNKNOWN_ERROR_CODE = "UnknownError"


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _new_request_id() -> str:
    return str(uuid.uuid4())


@dataclass(frozen=True, slots=True)
class SignedRequest:
    """A fully built request, ready for the HTTP executor.

    ``body`` is the single serialization of the payload; the signature in
    ``headers`` covers exactly these bytes.
    """

    method: str
    url: str
    path_and_query: str
    headers: Mapping[str, str]
    body: bytes

    @property
    def request_id(self) -> str:
        return self.headers["repeatability-request-id"]


def interpret_response(http_status: int, body: str) -> SendResult:
    """Classify a provider response.

    Args:
        http_status: HTTP status code of the response.
        body: Decoded response body.

    Returns:
        SendSuccess carrying the provider message id on 202, otherwise a
        SendFailure with the provider's error code and message when the body
        is a structured error, or a generic message embedding the raw body.

    Raises:
        ProtocolError: When a 202 response body is not JSON or has no ``id``.

    Example:
        >>> interpret_response(202, '{"id": "abc-123"}')
        SendSuccess(provider_message_id='abc-123')
        >>> interpret_response(400, '{"error": {"code": "InvalidArgument", "message": "bad address"}}')
        SendFailure(error_code='InvalidArgument', error_message='bad address', http_status=400)
    """
    if http_status == HTTP_ACCEPTED:
        return SendSuccess(provider_message_id=_extract_message_id(http_status, body))

    error = _extract_error(body)
    if error is not None:
        code, message = error
        return SendFailure(error_code=code, error_message=message, http_status=http_status)
    return SendFailure(
        error_code=UNKNOWN_ERROR_CODE,
        error_message=f"Unable to send an email: {body} (code {http_status}).",
        http_status=http_status,
    )


def _extract_message_id(http_status: int, body: str) -> str:
    try:
        data: Any = orjson.loads(body)
    except orjson.JSONDecodeError as exc:
        raise ProtocolError(
            "Provider accepted the message but the response body is not JSON",
            http_status=http_status,
            body=body,
        ) from exc
    message_id = cast(Mapping[str, Any], data).get("id") if isinstance(data, Mapping) else None
    if not isinstance(message_id, str) or not message_id:
        raise ProtocolError(
            "Provider accepted the message but the response has no message id",
            http_status=http_status,
            body=body,
        )
    return message_id


def _extract_error(body: str) -> tuple[str, str] | None:
    """Return ``(code, message)`` from a ``{"error": {...}}`` body, else None."""
    try:
        data: Any = orjson.loads(body)
    except orjson.JSONDecodeError:
        return None
    if not isinstance(data, Mapping):
        return None
    error: Any = cast(Mapping[str, Any], data).get("error")
    if not isinstance(error, Mapping):
        return None
    fields = cast(Mapping[str, Any], error)
    code, message = fields.get("code"), fields.get("message")
    if code is None and message is None:
        return None
    return str(code or UNKNOWN_ERROR_CODE), str(message or "")


class AzureApiTransport:
    """Send email through the Azure Communication Services REST API.

    Holds only immutable configuration and its collaborators, so one
    instance can serve concurrent sends from several threads.

    Args:
        config: Endpoint, access key, API version and tracking flag.
        http_executor: Executes the HTTP request (connection handling,
            timeouts and TLS live there).
        clock: Source of the request timestamp.
        id_factory: Source of the repeatability / operation id.
        owns_executor: Close ``http_executor`` together with the transport.
            Set by :func:`~.factory.create_azure_transport` when it created
            the executor itself.

    Raises:
        ConfigurationError: When the endpoint or access key is missing or
            the key is not valid base64.
    """

    def __init__(
        self,
        config: AzureMailerConfig,
        http_executor: HttpExecutor,
        *,
        clock: Callable[[], datetime] = _utc_now,
        id_factory: Callable[[], str] = _new_request_id,
        owns_executor: bool = False,
    ) -> None:
        normalize_host(config.endpoint or "")
        decode_access_key(config.access_key or "")
        self._config = config
        self._http_executor = http_executor
        self._clock = clock
        self._id_factory = id_factory
        self._owns_executor = owns_executor

    @property
    def config(self) -> AzureMailerConfig:
        return self._config

    def __str__(self) -> str:
        return f"azure+api://{self._config.host}"

    def close(self) -> None:
        """Release the executor's connection pool when this transport created it."""
        close = getattr(self._http_executor, "close", None)
        if self._owns_executor and callable(close):
            close()

    def __enter__(self) -> AzureApiTransport:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def build_request(
        self,
        email: NormalizedEmail,
        envelope: Envelope,
        *,
        request_id: str | None = None,
        timestamp: datetime | None = None,
    ) -> SignedRequest:
        """Build the signed request for one message.

        Args:
            email: Message content.
            envelope: Sender and recipients.
            request_id: Repeatability id; pass the id of a previous attempt
                to let the provider deduplicate a retry. A fresh id is
                generated when omitted.
            timestamp: Request time; defaults to the injected clock.

        Returns:
            SignedRequest whose body bytes are exactly the signed bytes.

        Raises:
            InvalidRecipientError: When the envelope has no ``to`` recipient.
        """
        payload = build_payload(
            email,
            envelope,
            engagement_tracking_enabled=self._config.engagement_tracking,
        )
        body = orjson.dumps(payload)
        signed = sign(
            "POST",
            self._config.path_and_query,
            self._config.host,
            body,
            self._config.access_key or "",
            timestamp if timestamp is not None else self._clock(),
        )
        operation_id = request_id or self._id_factory()
        headers = {
            "Content-Type": "application/json",
            "repeatability-request-id": operation_id,
            "operation-id": operation_id,
            "repeatability-first-sent": signed.date,
            "x-ms-date": signed.date,
            "x-ms-content-sha256": signed.content_hash,
            "x-ms-client-request-id": operation_id,
            "Authorization": signed.authorization,
        }
        return SignedRequest(
            method="POST",
            url=self._config.send_url,
            path_and_query=self._config.path_and_query,
            headers=headers,
            body=body,
        )

    def interpret_response(self, http_status: int, body: str) -> SendResult:
        """Classify a provider response; see :func:`interpret_response`."""
        return interpret_response(http_status, body)

    def send(self, email: NormalizedEmail, envelope: Envelope) -> SendResult:
        """Send one message and report the provider's verdict.

        Returns:
            SendSuccess with the provider message id, or SendFailure when the
            provider rejected the request.

        Raises:
            InvalidRecipientError: When an envelope address is invalid.
            TransportError: When the request never reached the provider.
            ProtocolError: When an accepted response cannot be interpreted.
        """
        validate_envelope(envelope)
        request = self.build_request(email, envelope)

        logger.info(
            "Sending email via Azure Communication Services",
            extra={
                "endpoint": self._config.host,
                "request_id": request.request_id,
                "recipient_count": envelope.recipient_count,
                "attachment_count": len(email.attachments),
                "subject": email.subject,
            },
        )

        try:
            response = self._http_executor(
                request.method,
                request.url,
                headers=request.headers,
                body=request.body,
            )
        except TransportError:
            logger.error(
                "Could not reach the Azure Communication Services endpoint",
                extra={"endpoint": self._config.host, "request_id": request.request_id},
            )
            raise

        result = interpret_response(response.status_code, response.text)
        if isinstance(result, SendSuccess):
            logger.info(
                "Email accepted by provider",
                extra={"request_id": request.request_id, "message_id": result.provider_message_id},
            )
        else:
            logger.warning(
                "Email rejected by provider",
                extra={
                    "request_id": request.request_id,
                    "http_status": result.http_status,
                    "error_code": result.error_code,
                },
            )
        return result


__all__ = [
    "HTTP_ACCEPTED",
    "UNKNOWN_ERROR_CODE",
    "AzureApiTransport",
    "SignedRequest",
    "interpret_response",
]
