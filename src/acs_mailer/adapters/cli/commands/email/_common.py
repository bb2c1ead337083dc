"""Shared utilities for the send-email command.

Contains mailer configuration resolution, option decorators, option
parsing callbacks, and the error handling that maps mailer exceptions to
exit codes.
"""

from __future__ import annotations

import functools
import logging
import os
from collections.abc import Callable
from typing import Any, NoReturn

import rich_click as click
from pydantic import ValidationError

from acs_mailer import __init__conf__
from acs_mailer.adapters.azure.config import AzureMailerConfig
from acs_mailer.adapters.azure.dsn import dsn_to_config_fields, parse_dsn
from acs_mailer.domain.errors import ConfigurationError, ProtocolError, TransportError
from acs_mailer.domain.models import SendResult, SendSuccess

from ...exit_codes import ExitCode

logger = logging.getLogger(__name__)


def filter_sentinels(**kwargs: Any) -> dict[str, Any]:
    """Drop options left at their ``None`` sentinel.

    Example:
        >>> filter_sentinels(endpoint=None, timeout=5.0, engagement_tracking=False)
        {'timeout': 5.0, 'engagement_tracking': False}
    """
    return {k: v for k, v in kwargs.items() if v is not None}


def apply_validated_overrides(
    base_config: AzureMailerConfig,
    overrides: dict[str, Any],
    *,
    dsn: str | None = None,
) -> AzureMailerConfig:
    """Merge a DSN and option overrides into the configured mailer settings.

    Precedence, lowest first: configuration file, ``--dsn``, explicit
    options. The merged dict goes through ``model_validate`` so every
    validator runs on the overridden values.

    Raises:
        ConfigurationError: When the DSN is malformed or has no access key.
        ValidationError: When an override holds an invalid value.

    Example:
        >>> base = AzureMailerConfig(endpoint="old.communication.azure.com", access_key="b2xk")
        >>> cfg = apply_validated_overrides(base, {"timeout": 5.0}, dsn="azure://bmV3@new.communication.azure.com")
        >>> cfg.endpoint, cfg.access_key, cfg.timeout
        ('new.communication.azure.com', 'bmV3', 5.0)
    """
    if not overrides and not dsn:
        return base_config
    dsn_fields = dsn_to_config_fields(parse_dsn(dsn)) if dsn else {}
    merged = {**base_config.model_dump(), **dsn_fields, **overrides}
    return AzureMailerConfig.model_validate(merged)


def mailer_config_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Apply CLI flags overriding every ``[azure_mailer]`` setting."""
    options = [
        click.option(
            "--dsn",
            default=None,
            help="Transport DSN, e.g. azure+api://ACCESS_KEY@resource.communication.azure.com",
        ),
        click.option("--endpoint", default=None, help="Override the resource endpoint host"),
        click.option("--access-key", default=None, help="Override the base64 resource access key"),
        click.option("--api-version", default=None, help="Override the email API version"),
        click.option(
            "--tracking/--no-tracking",
            "engagement_tracking",
            default=None,
            help="Override user engagement tracking",
        ),
        click.option("--timeout", "timeout", type=float, default=None, help="Override HTTP timeout in seconds"),
    ]
    return functools.reduce(lambda f, opt: opt(f), reversed(options), func)


def parse_header_options(
    ctx: click.Context, param: click.Parameter, values: tuple[str, ...]
) -> dict[str, str]:
    """Parse repeated ``--header "Name: value"`` options into an ordered dict.

    Raises:
        click.BadParameter: When an entry has no ``:`` or an empty name.
    """
    headers: dict[str, str] = {}
    for raw in values:
        name, sep, value = raw.partition(":")
        if not sep or not name.strip():
            raise click.BadParameter(f"expected 'Name: value', got {raw!r}")
        headers[name.strip()] = value.strip()
    return headers


def require_sender(from_address: str | None, config: AzureMailerConfig) -> str:
    """Return the sender from ``--from`` or the configured default.

    Raises:
        ConfigurationError: When neither is set.
    """
    sender = from_address or config.from_address
    if not sender:
        raise ConfigurationError(
            "No sender address. Pass --from or set azure_mailer.from_address "
            f"(see: {__init__conf__.shell_command} config --section azure_mailer)."
        )
    return sender


def execute_with_mailer_error_handling(
    *,
    operation: Callable[[], SendResult | None],
    recipients: list[str],
) -> None:
    """Execute a send with unified error handling.

    Raises:
        SystemExit: On any error (unless DEVELOPMENT_MODE is set).
        Exception: Re-raised in development mode for debugging.

    Exception Priority Order:
        Exceptions are caught most specific first:

        1. ConfigurationError -> CONFIG_ERROR (78): missing endpoint, key, sender
        2. ValueError -> INVALID_ARGUMENT (22): bad recipient or option value
        3. FileNotFoundError -> FILE_NOT_FOUND (2): missing attachment
        4. ProtocolError -> PROTOCOL_ERROR (76): unreadable 202 answer
        5. TransportError -> PROVIDER_FAILURE (69): endpoint unreachable
        6. Exception (catch-all) -> GENERAL_ERROR (1): unexpected errors with traceback

        A provider rejection is a result, not an exception; it also exits
        with PROVIDER_FAILURE. An operation returning None (dry run) prints
        nothing further.

    Development Mode:
        Set the DEVELOPMENT_MODE environment variable to any truthy value to
        re-raise unexpected exceptions instead of catching them.
    """
    try:
        result = operation()
        if result is not None:
            _handle_send_result(result, recipients)
    except click.ClickException:
        raise
    except ConfigurationError as exc:
        _handle_send_error(exc, "Mailer configuration error", "Configuration error", exit_code=ExitCode.CONFIG_ERROR)
    except ValueError as exc:
        _handle_send_error(
            exc, "Invalid email parameters", "Invalid email parameters", exit_code=ExitCode.INVALID_ARGUMENT
        )
    except FileNotFoundError as exc:
        _handle_send_error(
            exc, "Attachment file not found", "Attachment file not found", exit_code=ExitCode.FILE_NOT_FOUND
        )
    except ProtocolError as exc:
        _handle_send_error(
            exc, "Unreadable provider response", "Unexpected provider response", exit_code=ExitCode.PROTOCOL_ERROR
        )
    except TransportError as exc:
        _handle_send_error(exc, "Provider unreachable", "Failed to send email", exit_code=ExitCode.PROVIDER_FAILURE)
    except Exception as exc:
        if os.environ.get("DEVELOPMENT_MODE"):
            raise
        _handle_send_error(
            exc,
            "Unexpected error sending email",
            "Unexpected error",
            exit_code=ExitCode.GENERAL_ERROR,
            log_traceback=True,
        )


def handle_validation_error(exc: ValidationError) -> NoReturn:
    """Report invalid option values; always exits with INVALID_ARGUMENT."""
    _handle_send_error(exc, "Invalid configuration", "Invalid option value", exit_code=ExitCode.INVALID_ARGUMENT)


def handle_configuration_error(exc: ConfigurationError) -> NoReturn:
    """Report a broken DSN or config section; always exits with CONFIG_ERROR."""
    _handle_send_error(exc, "Mailer configuration error", "Configuration error", exit_code=ExitCode.CONFIG_ERROR)


def _handle_send_result(result: SendResult, recipients: list[str]) -> None:
    """Report the provider's verdict.

    Raises:
        SystemExit: With PROVIDER_FAILURE when the provider rejected the message.
    """
    if isinstance(result, SendSuccess):
        click.echo("\nEmail sent successfully!")
        click.echo(f"Message id: {result.provider_message_id}")
        logger.info(
            "Email sent via CLI",
            extra={"recipients": recipients, "message_id": result.provider_message_id},
        )
        return
    logger.error(
        "Provider rejected email",
        extra={"error_code": result.error_code, "http_status": result.http_status},
    )
    click.echo(
        f"\nError: Provider rejected the email ({result.error_code}, HTTP {result.http_status}): "
        f"{result.error_message}",
        err=True,
    )
    raise SystemExit(ExitCode.PROVIDER_FAILURE)


def _handle_send_error(
    exc: Exception,
    log_message: str,
    user_message: str,
    *,
    exit_code: ExitCode = ExitCode.GENERAL_ERROR,
    log_traceback: bool = False,
) -> NoReturn:
    """Log the error, print it to stderr, and exit with ``exit_code``."""
    logger.error(
        log_message,
        extra={"error": str(exc), "error_type": type(exc).__name__},
        exc_info=log_traceback,
    )
    click.echo(f"\nError: {user_message} - {exc}", err=True)
    raise SystemExit(exit_code)


__all__ = [
    "apply_validated_overrides",
    "execute_with_mailer_error_handling",
    "filter_sentinels",
    "handle_configuration_error",
    "handle_validation_error",
    "mailer_config_options",
    "parse_header_options",
    "require_sender",
]
