"""``acs-mailer config``: show what the mailer will actually run with.

The access key and any DSN credentials are masked before printing, so the
output is safe to paste into a ticket.
"""

from __future__ import annotations

import logging

import lib_log_rich.runtime
import rich_click as click

from acs_mailer.domain.enums import OutputFormat

from ..constants import CLICK_CONTEXT_SETTINGS
from ..context import get_cli_context
from ..exit_codes import ExitCode

logger = logging.getLogger(__name__)


@click.command("config", context_settings=CLICK_CONTEXT_SETTINGS)
@click.option(
    "--format",
    "output_format",
    type=click.Choice([f.value for f in OutputFormat], case_sensitive=False),
    default=OutputFormat.HUMAN.value,
    help="human (grouped by section) or json",
)
@click.option(
    "--section",
    type=str,
    default=None,
    help="Print one section only, e.g. azure_mailer or lib_log_rich",
)
@click.option(
    "--profile",
    type=str,
    default=None,
    help="Re-read configuration for this profile; root --set entries still apply",
)
@click.pass_context
def cli_config(ctx: click.Context, output_format: str, section: str | None, profile: str | None) -> None:
    """Show the merged configuration with the access key masked.

    Layers: defaults -> app -> host -> user -> dotenv -> env.
    An unknown --section exits 22.
    """
    cli_ctx = get_cli_context(ctx)
    active_profile = cli_ctx.effective_profile(profile)
    fmt = OutputFormat(output_format.lower())
    context = {"command": "config", "format": fmt.value, "section": section, "profile": active_profile}

    with lib_log_rich.runtime.bind(job_id="cli-config", extra=context):
        config = cli_ctx.config_for(profile)
        logger.info("Showing configuration", extra=context)
        try:
            cli_ctx.services.display_config(config, output_format=fmt, section=section, profile=active_profile)
        except ValueError as exc:
            click.echo(f"Error: {exc}", err=True)
            raise SystemExit(ExitCode.INVALID_ARGUMENT) from exc


__all__ = ["cli_config"]
