"""State the root group hands to ``info``, ``config`` and ``send-email``.

Also holds the helpers that copy ``--traceback`` into ``lib_cli_exit_tools``
and put its previous value back after a run.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import lib_cli_exit_tools
import rich_click as click
from lib_layered_config import Config

from acs_mailer.adapters.config.overrides import apply_overrides

if TYPE_CHECKING:
    from acs_mailer.adapters.azure.config import AzureMailerConfig
    from acs_mailer.composition import AppServices

TracebackState = tuple[bool, bool]
"""Captured traceback configuration: (traceback_enabled, force_color)."""


@dataclass(slots=True)
class CLIContext:
    """Configuration, services and global flags resolved by the root group.

    ``set_overrides`` keeps the raw ``--set`` strings so a subcommand that
    reloads configuration under another profile can reapply them.
    """

    traceback: bool
    config: Config
    services: AppServices
    profile: str | None = None
    set_overrides: tuple[str, ...] = ()

    def effective_profile(self, override: str | None = None) -> str | None:
        """Return ``override`` when given, else the root ``--profile``.

        Example:
            >>> from unittest.mock import MagicMock
            >>> cli_ctx = CLIContext(traceback=False, config=MagicMock(), services=MagicMock(), profile="staging")
            >>> cli_ctx.effective_profile(), cli_ctx.effective_profile("prod")
            ('staging', 'prod')
        """
        return override if override else self.profile

    def config_for(self, profile: str | None = None) -> Config:
        """Return the root config, or a reload under ``profile`` with ``--set`` reapplied."""
        if not profile:
            return self.config
        return apply_overrides(self.services.get_config(profile=profile), self.set_overrides)

    def mailer_config(self, profile: str | None = None) -> AzureMailerConfig:
        """Load the ``[azure_mailer]`` section through the injected loader.

        Raises:
            ConfigurationError: When the configured DSN is malformed.
            pydantic.ValidationError: When a field value is invalid.
        """
        return self.services.load_mailer_config_from_dict(self.config_for(profile).as_dict())


def store_cli_context(
    ctx: click.Context,
    *,
    traceback: bool,
    config: Config,
    services: AppServices,
    profile: str | None = None,
    set_overrides: tuple[str, ...] = (),
) -> None:
    """Replace the services factory in ``ctx.obj`` with a :class:`CLIContext`."""
    ctx.obj = CLIContext(
        traceback=traceback,
        config=config,
        services=services,
        profile=profile,
        set_overrides=set_overrides,
    )


def get_cli_context(ctx: click.Context) -> CLIContext:
    """Fetch the :class:`CLIContext` the root group stored.

    Raises:
        RuntimeError: A subcommand ran without going through the root group.
    """
    if not isinstance(ctx.obj, CLIContext):
        raise RuntimeError("acs-mailer subcommand invoked outside the root group")
    return ctx.obj


def apply_traceback_preferences(enabled: bool) -> None:
    """Mirror the ``--traceback`` flag into ``lib_cli_exit_tools``.

    Example:
        >>> apply_traceback_preferences(False)
        >>> lib_cli_exit_tools.config.traceback
        False
    """
    lib_cli_exit_tools.config.traceback = bool(enabled)
    lib_cli_exit_tools.config.traceback_force_color = bool(enabled)


def snapshot_traceback_state() -> TracebackState:
    """Return ``(traceback, force_color)`` as currently set in ``lib_cli_exit_tools``."""
    return (
        bool(getattr(lib_cli_exit_tools.config, "traceback", False)),
        bool(getattr(lib_cli_exit_tools.config, "traceback_force_color", False)),
    )


def restore_traceback_state(state: TracebackState) -> None:
    """Reapply a state captured by :func:`snapshot_traceback_state`."""
    lib_cli_exit_tools.config.traceback = state[0]
    lib_cli_exit_tools.config.traceback_force_color = state[1]


__all__ = [
    "CLIContext",
    "TracebackState",
    "apply_traceback_preferences",
    "get_cli_context",
    "restore_traceback_state",
    "snapshot_traceback_state",
    "store_cli_context",
]
