"""Domain-specific exceptions for typed error handling at boundaries."""

from __future__ import annotations


class ConfigurationError(Exception):
    """Missing, invalid, or incomplete mailer configuration.

    Raised when the access key is not valid base64, the endpoint host is
    missing, or a transport DSN lacks required parts. Fatal for the send
    attempt and never retried.

    Example:
        >>> err = ConfigurationError("No endpoint configured")
        >>> str(err)
        'No endpoint configured'
    """


class UnsupportedSchemeError(ConfigurationError):
    """Transport DSN uses a scheme no registered factory handles.

    Example:
        >>> err = UnsupportedSchemeError("azure+foo", ("azure", "azure+api"))
        >>> str(err)
        'The "azure+foo" scheme is not supported; supported schemes for mailer "azure" are: "azure", "azure+api".'
        >>> err.scheme
        'azure+foo'
    """

    def __init__(self, scheme: str, supported: tuple[str, ...], mailer: str = "azure") -> None:
        self.scheme = scheme
        self.supported = supported
        quoted = ", ".join(f'"{s}"' for s in supported)
        super().__init__(
            f'The "{scheme}" scheme is not supported; supported schemes for mailer "{mailer}" are: {quoted}.'
        )


class InvalidRecipientError(ValueError):
    """Email address validation failure.

    Raised when an envelope address fails RFC 5321/5322 validation or the
    ``to`` list is empty. Inherits from ValueError so generic
    ``except ValueError`` handlers still catch it.

    Example:
        >>> err = InvalidRecipientError("Invalid email: not-an-email")
        >>> isinstance(err, ValueError)
        True
    """


class TransportError(Exception):
    """The request never reached the provider.

    Connection refused, DNS failure, TLS failure, or timeout raised by the
    HTTP executor. Distinct from a provider failure: no status code exists.

    Example:
        >>> str(TransportError("Could not reach the remote Azure server."))
        'Could not reach the remote Azure server.'
    """


class ProtocolError(Exception):
    """The provider answered but the response could not be interpreted.

    Raised when a 202 Accepted response carries a body that is not JSON or
    lacks the message ``id``. Non-retryable: the send may have been accepted.
    """

    def __init__(self, message: str, *, http_status: int, body: str) -> None:
        super().__init__(message)
        self.http_status = http_status
        self.body = body


class ApiError(Exception):
    """Structured rejection returned by the provider.

    Carries the provider's error code and message verbatim along with the
    HTTP status.

    Example:
        >>> err = ApiError("InvalidArgument", "bad address", 400)
        >>> str(err)
        'Unable to send an email (InvalidArgument): bad address'
        >>> err.http_status
        400
    """

    def __init__(self, code: str, message: str, http_status: int) -> None:
        super().__init__(f"Unable to send an email ({code}): {message}")
        self.code = code
        self.message = message
        self.http_status = http_status


__all__ = [
    "ApiError",
    "ConfigurationError",
    "InvalidRecipientError",
    "ProtocolError",
    "TransportError",
    "UnsupportedSchemeError",
]
