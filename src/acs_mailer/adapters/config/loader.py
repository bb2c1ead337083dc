"""Layered configuration for the mailer.

The merged :class:`~lib_layered_config.Config` holds two sections the
application reads: ``[azure_mailer]`` (endpoint, key, sender, timeouts) and
``[lib_log_rich]`` (logging). Layers are read in the order
defaults → app → host → user → dotenv → env, the bundled
``defaultconfig.toml`` providing the defaults layer.

Environment variables carry the ``ACS_MAILER___`` prefix, so
``ACS_MAILER___AZURE_MAILER__ACCESS_KEY`` sets ``[azure_mailer].access_key``.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Protocol, cast

from lib_layered_config import DEFAULT_MAX_PROFILE_LENGTH, Config, read_config, validate_profile_name

from acs_mailer import __init__conf__

_DEFAULTS_FILE = "defaultconfig.toml"


class ConfigLoaderProtocol(Protocol):
    """``get_config`` plus the ``cache_clear`` hook tests use between profiles."""

    def __call__(self, *, profile: str | None = None, start_dir: str | None = None) -> Config: ...
    def cache_clear(self) -> None: ...


def get_default_config_path() -> Path:
    """Locate the defaults layer shipped inside the package.

    Example:
        >>> get_default_config_path().name
        'defaultconfig.toml'
    """
    return Path(__file__).with_name(_DEFAULTS_FILE)


@lru_cache(maxsize=4)
def _read_layers(profile: str | None, start_dir: str | None) -> Config:
    return read_config(
        vendor=__init__conf__.LAYEREDCONF_VENDOR,
        app=__init__conf__.LAYEREDCONF_APP,
        slug=__init__conf__.LAYEREDCONF_SLUG,
        profile=profile,
        default_file=get_default_config_path(),
        start_dir=start_dir,
    )


def _get_config(*, profile: str | None = None, start_dir: str | None = None) -> Config:
    """Return the merged configuration, read once per ``(profile, start_dir)``.

    A profile such as ``staging`` adds ``profile/staging/`` to every layer
    path; names with path separators or traversal are refused with
    ``ValueError`` before anything is read.

    Example:
        >>> get_config().get("azure_mailer.api_version")  # doctest: +SKIP
        '2023-03-31'
    """
    if profile is not None:
        validate_profile_name(profile, max_length=DEFAULT_MAX_PROFILE_LENGTH)
    return _read_layers(profile, start_dir)


_get_config.cache_clear = _read_layers.cache_clear  # type: ignore[attr-defined]
get_config: ConfigLoaderProtocol = cast(ConfigLoaderProtocol, _get_config)


__all__ = [
    "get_config",
    "get_default_config_path",
]
