"""Package metadata CLI command.

Contents:
    * :func:`cli_info` - Display package metadata and the configured endpoint.
"""

from __future__ import annotations

import logging

import lib_log_rich.runtime
import rich_click as click
from pydantic import ValidationError

from acs_mailer import __init__conf__
from acs_mailer.domain.errors import ConfigurationError

from ..constants import CLICK_CONTEXT_SETTINGS
from ..context import get_cli_context

logger = logging.getLogger(__name__)


@click.command("info", context_settings=CLICK_CONTEXT_SETTINGS)
@click.pass_context
def cli_info(ctx: click.Context) -> None:
    """Print resolved metadata and the mailer endpoint in use.

    A broken ``[azure_mailer]`` section is reported, not fatal.
    """
    cli_ctx = get_cli_context(ctx)
    with lib_log_rich.runtime.bind(job_id="cli-info", extra={"command": "info"}):
        logger.info("Displaying package information")
        __init__conf__.print_info()
        try:
            mailer = cli_ctx.mailer_config()
        except (ConfigurationError, ValidationError) as exc:
            click.echo(f"\n    mailer        = <invalid configuration: {exc}>")
            return
        click.echo(f"\n    endpoint      = {mailer.endpoint or '<not configured>'}")
        click.echo(f"    api_version   = {mailer.api_version}")
        click.echo(f"    tracking      = {'enabled' if mailer.engagement_tracking else 'disabled'}")


__all__ = ["cli_info"]
