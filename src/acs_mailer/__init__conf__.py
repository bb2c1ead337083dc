"""Static package metadata surfaced to CLI commands and configuration paths.

Values mirror ``pyproject.toml`` so the CLI can report them without reading
installed distribution metadata at runtime.
"""

from __future__ import annotations

#: Distribution name declared in ``pyproject.toml``.
name = "acs_mailer"
#: Human-readable summary shown in CLI help output.
title = "Send transactional email through the Azure Communication Services email API"
#: Current release version.
version = "1.0.0"
#: Repository homepage presented to users.
homepage = "https://github.com/acs-mailer/acs_mailer"
#: Author attribution surfaced in CLI output.
author = "acs_mailer contributors"
#: Contact email surfaced in CLI output.
author_email = "maintainers@acs-mailer.dev"
#: Console-script name published by the package.
shell_command = "acs-mailer"

#: Vendor identifier for lib_layered_config paths (macOS/Windows).
LAYEREDCONF_VENDOR: str = "acs-mailer"
#: Application name for lib_layered_config paths (macOS/Windows).
LAYEREDCONF_APP: str = "acs_mailer"
#: Configuration slug for lib_layered_config Linux paths and environment variables.
LAYEREDCONF_SLUG: str = "acs-mailer"


def print_info() -> None:
    """Print the summarised metadata block used by the CLI ``info`` command.

    Example:
        >>> print_info()  # doctest: +ELLIPSIS
        Info for acs_mailer:
        ...
    """
    fields = [
        ("name", name),
        ("title", title),
        ("version", version),
        ("homepage", homepage),
        ("author", author),
        ("author_email", author_email),
        ("shell_command", shell_command),
    ]
    pad = max(len(label) for label, _ in fields)
    lines = [f"Info for {name}:", ""]
    lines.extend(f"    {label.ljust(pad)} = {value}" for label, value in fields)
    print("\n".join(lines))


__all__ = [
    "LAYEREDCONF_APP",
    "LAYEREDCONF_SLUG",
    "LAYEREDCONF_VENDOR",
    "author",
    "author_email",
    "homepage",
    "name",
    "print_info",
    "shell_command",
    "title",
    "version",
]
