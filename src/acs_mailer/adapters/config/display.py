"""Display configuration - delegates to lib_layered_config.

Thin wrapper around lib_layered_config's Rich-styled display_config that
flushes pending log output first and masks the mailer secrets (the access
key and the key embedded in a DSN) before anything is printed.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any, cast

import lib_log_rich.runtime
from lib_layered_config import Config
from lib_layered_config import OutputFormat as LibOutputFormat
from lib_layered_config import display_config as _lib_display
from rich.console import Console

from acs_mailer.adapters.azure.config import CONFIG_SECTION
from acs_mailer.domain.enums import OutputFormat

REDACTED = "***REDACTED***"

_DSN_USERINFO = re.compile(r"^(?P<scheme>[^:/]+://)[^@/]*@")


def redact_dsn(dsn: str) -> str:
    """Replace the credentials part of a DSN.

    Example:
        >>> redact_dsn("azure+api://c2VjcmV0@res.communication.azure.com")
        'azure+api://***REDACTED***@res.communication.azure.com'
        >>> redact_dsn("")
        ''
    """
    return _DSN_USERINFO.sub(lambda m: f"{m.group('scheme')}{REDACTED}@", dsn)


def redact_secrets(config: Config) -> Config:
    """Return a Config with the mailer access key and DSN credentials masked."""
    section: Any = config.get(CONFIG_SECTION, default={})
    if not isinstance(section, Mapping):
        return config
    values = cast(Mapping[str, Any], section)
    masked: dict[str, object] = {}
    if values.get("access_key"):
        masked["access_key"] = REDACTED
    dsn = values.get("dsn")
    if isinstance(dsn, str) and dsn:
        masked["dsn"] = redact_dsn(dsn)
    if not masked:
        return config
    return config.with_overrides({CONFIG_SECTION: masked})


def display_config(
    config: Config,
    *,
    output_format: OutputFormat = OutputFormat.HUMAN,
    section: str | None = None,
    console: Console | None = None,
    profile: str | None = None,
) -> None:
    """Display configuration using lib_layered_config's Rich display.

    Args:
        config: Already-loaded layered configuration object to display.
        output_format: HUMAN for TOML-like display or JSON.
        section: Optional section name to display only that section.
        console: Optional Rich Console for output, mainly for tests.
        profile: Optional profile name to include in provenance comments.

    Side Effects:
        Flushes pending log messages, then writes to stdout.

    Raises:
        ValueError: If a section was requested that doesn't exist.
    """
    if lib_log_rich.runtime.is_initialised():
        lib_log_rich.runtime.flush()

    lib_format = LibOutputFormat(output_format.value)
    _lib_display(redact_secrets(config), output_format=lib_format, section=section, profile=profile, console=console)


__all__ = ["REDACTED", "display_config", "redact_dsn", "redact_secrets"]
