"""``--set SECTION.KEY=VALUE`` handling for the root command.

Lets one invocation tweak the mailer without touching config files, e.g.
``--set azure_mailer.engagement_tracking=false`` or
``--set azure_mailer.timeout=5``. Values go through JSON first, so numbers
and booleans arrive typed; anything else stays a string.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import cast

import orjson
from lib_layered_config import Config

CoercedValue = str | int | float | bool | None | list[object] | dict[str, object]
"""What a ``--set`` value can turn into."""


@dataclass(frozen=True, slots=True)
class ConfigOverride:
    """One ``--set`` entry: ``section`` plus the dotted key path below it."""

    section: str
    key_path: tuple[str, ...]
    value: CoercedValue


def parse_override(raw: str) -> ConfigOverride:
    """Turn ``SECTION.KEY[.SUBKEY...]=VALUE`` into a :class:`ConfigOverride`.

    Only the first ``=`` separates path and value, so base64 access keys
    keep their padding.

    Raises:
        ValueError: Missing ``=``, no dot in the path, or an empty component.

    Examples:
        >>> override = parse_override("azure_mailer.engagement_tracking=false")
        >>> override.section, override.key_path, override.value
        ('azure_mailer', ('engagement_tracking',), False)

        >>> parse_override("azure_mailer.access_key=c2VjcmV0==").value
        'c2VjcmV0=='
    """
    path, sep, value = raw.partition("=")
    if not sep:
        raise ValueError(f"Invalid override {raw!r}: must contain '='")

    section, dot, rest = path.partition(".")
    if not dot:
        raise ValueError(f"Invalid override {raw!r}: key must contain at least one dot (SECTION.KEY)")
    if not section:
        raise ValueError(f"Invalid override {raw!r}: section name is empty")

    key_path = tuple(rest.split("."))
    if "" in key_path:
        raise ValueError(f"Invalid override {raw!r}: key path contains empty component")

    return ConfigOverride(section=section, key_path=key_path, value=coerce_value(value))


def coerce_value(raw: str) -> CoercedValue:
    """Read ``raw`` as JSON when it parses, else keep the string.

    Examples:
        >>> coerce_value("true"), coerce_value("12.5")
        (True, 12.5)
        >>> coerce_value("2023-03-31")
        '2023-03-31'
        >>> coerce_value("")
        ''
    """
    if not raw:
        return raw
    try:
        return cast(CoercedValue, orjson.loads(raw))
    except orjson.JSONDecodeError:
        return raw


def _nest_override(target: dict[str, dict[str, object]], override: ConfigOverride) -> None:
    """Write ``override`` into the nested mapping handed to ``Config.with_overrides``.

    Raises:
        TypeError: An earlier override already put a scalar where this one
            needs a table, e.g. ``a.b=1`` followed by ``a.b.c=2``.

    Examples:
        >>> d: dict[str, dict[str, object]] = {}
        >>> _nest_override(d, ConfigOverride(section="azure_mailer", key_path=("timeout",), value=5))
        >>> d
        {'azure_mailer': {'timeout': 5}}
    """
    *parents, leaf = override.key_path
    node: dict[str, object] = target.setdefault(override.section, {})
    for part in parents:
        child = node.setdefault(part, {})
        if not isinstance(child, dict):
            raise TypeError(f"Expected dict at key {part!r}, got {type(child).__name__}")
        node = cast("dict[str, object]", child)
    node[leaf] = override.value


def apply_overrides(config: Config, raw_overrides: tuple[str, ...]) -> Config:
    """Return ``config`` with every ``--set`` entry merged in.

    With no overrides the same instance comes back untouched.

    Raises:
        ValueError: An entry is malformed (see :func:`parse_override`).

    Examples:
        >>> cfg = Config({"azure_mailer": {"timeout": 30.0}}, {})
        >>> apply_overrides(cfg, ("azure_mailer.timeout=5",))["azure_mailer"]["timeout"]
        5
        >>> apply_overrides(cfg, ()) is cfg
        True
    """
    if not raw_overrides:
        return config

    nested: dict[str, dict[str, object]] = {}
    for override in map(parse_override, raw_overrides):
        _nest_override(nested, override)
    return config.with_overrides(nested)


__all__ = [
    "CoercedValue",
    "ConfigOverride",
    "apply_overrides",
    "coerce_value",
    "parse_override",
]
