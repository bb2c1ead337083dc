"""Transport DSN parsing.

A DSN selects and configures a transport in one string::

    azure+api://ACCESS_KEY@my-res.communication.azure.com?api-version=2023-03-31&tracking=0

The access key is base64 and usually contains ``/``, ``+`` or ``=``; it
must be percent-encoded inside the DSN.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import parse_qsl, unquote, urlsplit

from acs_mailer.domain.errors import ConfigurationError

#: Placeholder host meaning "no explicit endpoint".
DEFAULT_HOST = "default"

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off", ""})


def _empty_options() -> dict[str, str]:
    return {}


@dataclass(frozen=True, slots=True)
class Dsn:
    """Parsed transport DSN with percent-decoded components."""

    scheme: str
    host: str
    user: str | None = None
    password: str | None = None
    port: int | None = None
    options: Mapping[str, str] = field(default_factory=_empty_options)

    def get_option(self, name: str, default: str | None = None) -> str | None:
        return self.options.get(name, default)


def parse_dsn(value: str) -> Dsn:
    """Split a DSN string into its components.

    Raises:
        ConfigurationError: When the string has no scheme or no host.

    Example:
        >>> dsn = parse_dsn("azure+api://a2V5%2B%2F%3D@res.communication.azure.com?tracking=0")
        >>> dsn.scheme, dsn.host, dsn.user
        ('azure+api', 'res.communication.azure.com', 'a2V5+/=')
        >>> dsn.get_option("tracking")
        '0'
    """
    parts = urlsplit(value.strip())
    if not parts.scheme:
        raise ConfigurationError(f"The mailer DSN must contain a scheme: {value!r}")
    if not parts.hostname:
        raise ConfigurationError("The mailer DSN must contain a host (use \"default\" by default).")
    try:
        port = parts.port
    except ValueError as exc:
        raise ConfigurationError("The mailer DSN has an invalid port") from exc
    return Dsn(
        scheme=parts.scheme.lower(),
        host=parts.hostname,
        user=unquote(parts.username) if parts.username else None,
        password=unquote(parts.password) if parts.password else None,
        port=port,
        options=dict(parse_qsl(parts.query, keep_blank_values=True)),
    )


def parse_bool_option(raw: str, *, name: str) -> bool:
    """Interpret a DSN flag value.

    Example:
        >>> parse_bool_option("yes", name="tracking")
        True
        >>> parse_bool_option("0", name="tracking")
        False
    """
    lowered = raw.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ConfigurationError(f"Invalid value for DSN option {name!r}: {raw!r}")


def dsn_to_config_fields(dsn: Dsn) -> dict[str, Any]:
    """Translate a DSN into ``AzureMailerConfig`` field values.

    The access key is the DSN password, falling back to the user part.
    Options that are absent are left out so model defaults apply.

    Raises:
        ConfigurationError: When the DSN carries no access key.
    """
    key = dsn.password or dsn.user
    if not key:
        raise ConfigurationError(f'Invalid "{dsn.scheme}" mailer DSN: the access key is missing.')

    fields: dict[str, Any] = {"access_key": key}
    if dsn.host != DEFAULT_HOST:
        fields["endpoint"] = f"{dsn.host}:{dsn.port}" if dsn.port else dsn.host
    api_version = dsn.get_option("api-version")
    if api_version:
        fields["api_version"] = api_version
    tracking = dsn.get_option("tracking")
    if tracking is not None:
        fields["engagement_tracking"] = parse_bool_option(tracking, name="tracking")
    return fields


__all__ = [
    "DEFAULT_HOST",
    "Dsn",
    "dsn_to_config_fields",
    "parse_bool_option",
    "parse_dsn",
]
