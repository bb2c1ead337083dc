"""Send email CLI command.

Provides the send-email command: builds the message and envelope from
options, resolves the mailer configuration, and sends through the
injected transport factory. ``--dry-run`` prints the signed request
instead of sending it.
"""

from __future__ import annotations

import contextlib
import functools
import logging
from collections.abc import Mapping
from pathlib import Path

import lib_log_rich.runtime
import orjson
import rich_click as click
from pydantic import ValidationError

from acs_mailer.adapters.azure.config import AzureMailerConfig
from acs_mailer.adapters.azure.transport import AzureApiTransport
from acs_mailer.adapters.azure.validation import validate_envelope
from acs_mailer.adapters.config.display import REDACTED
from acs_mailer.application.ports import CreateTransport
from acs_mailer.domain.enums import Priority
from acs_mailer.domain.errors import ConfigurationError
from acs_mailer.domain.models import Address, Attachment, Envelope, NormalizedEmail, SendResult

from ...constants import CLICK_CONTEXT_SETTINGS
from ...context import get_cli_context
from ._common import (
    apply_validated_overrides,
    execute_with_mailer_error_handling,
    filter_sentinels,
    handle_configuration_error,
    handle_validation_error,
    mailer_config_options,
    parse_header_options,
    require_sender,
)

logger = logging.getLogger(__name__)

_PRIORITY_CHOICES = [p.name.lower() for p in Priority] + [str(int(p)) for p in Priority]


def _build_message(
    *,
    subject: str,
    body: str,
    body_html: str,
    priority: str,
    headers: Mapping[str, str],
    attachments: tuple[str, ...],
    inline: tuple[str, ...],
) -> NormalizedEmail:
    """Assemble the message; attachment files are read here.

    Raises:
        FileNotFoundError: When an attachment path does not exist.
    """
    files = [Attachment.from_path(Path(p)) for p in attachments]
    files.extend(Attachment.from_path(Path(p), inline=True) for p in inline)
    return NormalizedEmail(
        subject=subject,
        html=body_html or None,
        text=body or None,
        priority=Priority.parse(priority),
        headers=dict(headers),
        attachments=tuple(files),
    )


def _build_envelope(
    *,
    sender: str,
    to: tuple[str, ...],
    cc: tuple[str, ...],
    bcc: tuple[str, ...],
    reply_to: tuple[str, ...],
) -> Envelope:
    return Envelope(
        sender=Address.parse(sender),
        to=tuple(Address.parse(a) for a in to),
        cc=tuple(Address.parse(a) for a in cc),
        bcc=tuple(Address.parse(a) for a in bcc),
        reply_to=tuple(Address.parse(a) for a in reply_to),
    )


def _send(
    create_transport: CreateTransport,
    config: AzureMailerConfig,
    email_factory: functools.partial[NormalizedEmail],
    envelope_factory: functools.partial[Envelope],
) -> SendResult:
    envelope = envelope_factory()
    email = email_factory()
    with contextlib.closing(create_transport(config)) as transport:
        return transport.send(email, envelope)


def _dry_run(
    create_transport: CreateTransport,
    config: AzureMailerConfig,
    email_factory: functools.partial[NormalizedEmail],
    envelope_factory: functools.partial[Envelope],
) -> None:
    """Print the signed request as JSON without sending it; the signature is masked."""
    envelope = envelope_factory()
    email = email_factory()
    with contextlib.closing(create_transport(config)) as transport:
        if not isinstance(transport, AzureApiTransport):
            raise click.UsageError("--dry-run is only supported by the Azure API transport")
        validate_envelope(envelope)
        request = transport.build_request(email, envelope)
    headers = dict(request.headers)
    scheme, _, _ = headers["Authorization"].partition("Signature=")
    headers["Authorization"] = f"{scheme}Signature={REDACTED}"
    preview = {
        "method": request.method,
        "url": request.url,
        "headers": headers,
        "body": orjson.loads(request.body),
    }
    click.echo(orjson.dumps(preview, option=orjson.OPT_INDENT_2).decode("utf-8"))
    logger.info("Dry run: request built, not sent", extra={"request_id": request.request_id})


@click.command("send-email", context_settings=CLICK_CONTEXT_SETTINGS)
@click.option("--to", "to", multiple=True, help="Recipient address, 'Name <addr>' allowed (repeatable)")
@click.option("--cc", "cc", multiple=True, help="Carbon-copy recipient (repeatable)")
@click.option("--bcc", "bcc", multiple=True, help="Blind carbon-copy recipient (repeatable)")
@click.option("--reply-to", "reply_to", multiple=True, help="Reply-To address (repeatable)")
@click.option("--subject", required=True, help="Email subject line")
@click.option("--body", default="", help="Plain-text email body")
@click.option("--body-html", default="", help="HTML email body")
@click.option(
    "--from", "from_address", default=None, help="Sender address (uses azure_mailer.from_address if not specified)"
)
@click.option(
    "--attachment",
    "attachments",
    multiple=True,
    type=click.Path(path_type=str),
    help="File to attach (repeatable)",
)
@click.option(
    "--inline",
    "inline",
    multiple=True,
    type=click.Path(path_type=str),
    help="File to embed inline, referenced as cid:<file name> (repeatable)",
)
@click.option(
    "--priority",
    type=click.Choice(_PRIORITY_CHOICES, case_sensitive=False),
    default="normal",
    show_default=True,
    help="Message importance",
)
@click.option(
    "--header",
    "headers",
    multiple=True,
    callback=parse_header_options,
    metavar="'NAME: VALUE'",
    help="Custom header (repeatable); reserved names are dropped",
)
@mailer_config_options
@click.option("--dry-run", is_flag=True, default=False, help="Print the signed request instead of sending it")
@click.pass_context
def cli_send_email(
    ctx: click.Context,
    to: tuple[str, ...],
    cc: tuple[str, ...],
    bcc: tuple[str, ...],
    reply_to: tuple[str, ...],
    subject: str,
    body: str,
    body_html: str,
    from_address: str | None,
    attachments: tuple[str, ...],
    inline: tuple[str, ...],
    priority: str,
    headers: dict[str, str],
    dsn: str | None,
    endpoint: str | None,
    access_key: str | None,
    api_version: str | None,
    engagement_tracking: bool | None,
    timeout: float | None,
    dry_run: bool,
) -> None:
    """Send an email through Azure Communication Services.

    Example:
        >>> from click.testing import CliRunner
        >>> runner = CliRunner()
        >>> # Real invocation tested in test_cli_send_email.py
    """
    cli_ctx = get_cli_context(ctx)
    recipients = list(to)
    extra = {"command": "send-email", "recipients": recipients, "subject": subject, "dry_run": dry_run}

    with lib_log_rich.runtime.bind(job_id="cli-send-email", extra=extra):
        overrides = filter_sentinels(
            endpoint=endpoint,
            access_key=access_key,
            api_version=api_version,
            engagement_tracking=engagement_tracking,
            timeout=timeout,
        )
        try:
            config = apply_validated_overrides(cli_ctx.mailer_config(), overrides, dsn=dsn)
            sender = require_sender(from_address, config)
        except ValidationError as exc:
            handle_validation_error(exc)
        except ConfigurationError as exc:
            handle_configuration_error(exc)

        email_factory = functools.partial(
            _build_message,
            subject=subject,
            body=body,
            body_html=body_html,
            priority=priority,
            headers=headers,
            attachments=attachments,
            inline=inline,
        )
        envelope_factory = functools.partial(
            _build_envelope, sender=sender, to=to, cc=cc, bcc=bcc, reply_to=reply_to
        )

        logger.info(
            "Sending email",
            extra={
                "recipients": recipients,
                "subject": subject,
                "has_html": bool(body_html),
                "attachment_count": len(attachments) + len(inline),
            },
        )

        action = _dry_run if dry_run else _send
        execute_with_mailer_error_handling(
            operation=functools.partial(
                action, cli_ctx.services.create_transport, config, email_factory, envelope_factory
            ),
            recipients=recipients,
        )


__all__ = ["cli_send_email"]
