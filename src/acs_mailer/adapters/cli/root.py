"""The ``acs-mailer`` command group.

Every subcommand runs after the group has resolved the services, read the
layered configuration for ``--profile``, merged the ``--set`` entries and
started logging. Subcommands find all of it on the :class:`~.context.CLIContext`.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import rich_click as click
from lib_layered_config import Config

from acs_mailer import __init__conf__
from acs_mailer.adapters.config.overrides import apply_overrides

from .constants import CLICK_CONTEXT_SETTINGS
from .context import apply_traceback_preferences, store_cli_context

if TYPE_CHECKING:
    from acs_mailer.composition import AppServices


def _apply_cli_overrides(config: Config, set_overrides: tuple[str, ...]) -> Config:
    """Merge ``--set`` entries; a malformed entry is a usage error (exit 2)."""
    try:
        return apply_overrides(config, set_overrides)
    except (ValueError, TypeError) as exc:
        raise click.UsageError(str(exc)) from exc


@click.group(
    help=__init__conf__.title,
    context_settings=CLICK_CONTEXT_SETTINGS,
    invoke_without_command=True,
)
@click.version_option(
    version=__init__conf__.version,
    prog_name=__init__conf__.shell_command,
    message=f"{__init__conf__.shell_command} version {__init__conf__.version}",
)
@click.option(
    "--traceback/--no-traceback",
    is_flag=True,
    default=False,
    help="Print the full Python traceback when a command fails",
)
@click.option(
    "--profile",
    type=str,
    default=None,
    help="Read configuration from profile/NAME/ in every layer (e.g. 'staging')",
)
@click.option(
    "--set",
    "set_overrides",
    multiple=True,
    default=(),
    metavar="SECTION.KEY=VALUE",
    help="Override a configuration setting, e.g. azure_mailer.timeout=10 (repeatable).",
)
@click.pass_context
def cli(ctx: click.Context, traceback: bool, profile: str | None, set_overrides: tuple[str, ...]) -> None:
    """Send email through Azure Communication Services.

    ``ctx.obj`` arrives as the services factory chosen by the caller
    (``build_production`` or ``build_testing``) and leaves as a
    :class:`~.context.CLIContext`.
    """
    if not callable(ctx.obj):
        raise RuntimeError("acs-mailer was invoked without a services factory in ctx.obj")
    services: AppServices = ctx.obj()  # type: ignore[assignment]  # Click's obj is typed as Any
    config = _apply_cli_overrides(services.get_config(profile=profile), set_overrides)
    services.init_logging(config)
    store_cli_context(
        ctx,
        traceback=traceback,
        config=config,
        services=services,
        profile=profile,
        set_overrides=set_overrides,
    )
    apply_traceback_preferences(traceback)

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


# Commands import the cli package, which imports this module.
def _register_commands() -> None:
    from .commands import cli_config, cli_info, cli_send_email

    for cmd in (cli_info, cli_config, cli_send_email):
        cli.add_command(cmd)


_register_commands()


__all__ = ["cli"]
