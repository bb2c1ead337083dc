"""Azure mailer configuration model and loader.

Provides the AzureMailerConfig Pydantic model for validated, immutable
mailer settings and the loader function that builds it from the layered
configuration dictionary.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, cast

from btx_lib_mail import validate_email_address
from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from acs_mailer.adapters.azure.dsn import dsn_to_config_fields, parse_dsn
from acs_mailer.adapters.azure.signing import normalize_host

#: API version used when none is configured.
DEFAULT_API_VERSION = "2023-03-31"

#: Path of the send operation, relative to the endpoint.
SEND_PATH = "/emails:send"

#: Name of the configuration section read by :func:`load_mailer_config_from_dict`.
CONFIG_SECTION = "azure_mailer"


class AzureMailerConfig(BaseModel):
    """Validated, immutable Azure mailer configuration.

    Safe to share between concurrent sends; nothing in it changes after
    construction.

    Example:
        >>> config = AzureMailerConfig(endpoint="https://res.communication.azure.com", access_key="c2VjcmV0")
        >>> config.api_version
        '2023-03-31'
        >>> config.send_url
        'https://res.communication.azure.com/emails:send?api-version=2023-03-31'
    """

    model_config = ConfigDict(frozen=True)

    endpoint: str | None = None
    access_key: str | None = None
    api_version: str = DEFAULT_API_VERSION
    engagement_tracking: bool = True
    timeout: float = 30.0
    from_address: str | None = None

    @field_validator("endpoint", "access_key", "from_address", mode="before")
    @classmethod
    def _coerce_empty_string_to_none(cls, v: str | None) -> str | None:
        """Treat empty or whitespace-only strings from config files as "not configured"."""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("api_version", mode="before")
    @classmethod
    def _default_blank_api_version(cls, v: Any) -> Any:
        if v is None or (isinstance(v, str) and not v.strip()):
            return DEFAULT_API_VERSION
        return v

    @model_validator(mode="after")
    def _validate_config(self) -> AzureMailerConfig:
        """Catch common configuration mistakes early.

        Endpoint and key are checked when a transport is created, so that a
        partially configured file still loads for display.

        Raises:
            ValueError: When timeout or from_address are invalid.
        """
        if self.timeout <= 0:
            raise ValueError(f"timeout must be positive, got {self.timeout}")

        if self.from_address is not None:
            validate_email_address(self.from_address)

        return self

    @classmethod
    def from_dsn(cls, dsn: str, **overrides: Any) -> AzureMailerConfig:
        """Build a configuration from a transport DSN.

        Example:
            >>> config = AzureMailerConfig.from_dsn("azure://c2VjcmV0@res.communication.azure.com?tracking=off")
            >>> config.endpoint, config.engagement_tracking
            ('res.communication.azure.com', False)
        """
        return cls.model_validate({**dsn_to_config_fields(parse_dsn(dsn)), **overrides})

    @property
    def host(self) -> str:
        """Bare endpoint host as covered by the request signature.

        Raises:
            ConfigurationError: When no endpoint is configured.
        """
        return normalize_host(self.endpoint or "")

    @property
    def path_and_query(self) -> str:
        return f"{SEND_PATH}?api-version={self.api_version}"

    @property
    def base_url(self) -> str:
        """Endpoint with its scheme; ``https`` is assumed when none is given."""
        endpoint = (self.endpoint or "").strip().rstrip("/")
        if "://" in endpoint:
            scheme = endpoint.split("://", 1)[0]
            return f"{scheme}://{self.host}"
        return f"https://{self.host}"

    @property
    def send_url(self) -> str:
        return f"{self.base_url}{self.path_and_query}"

    def __repr__(self) -> str:
        """Return string representation with access_key redacted.

        Example:
            >>> config = AzureMailerConfig(access_key="c2VjcmV0")
            >>> "c2VjcmV0" in repr(config)
            False
            >>> "[REDACTED]" in repr(config)
            True
        """
        fields: list[str] = []
        for name, value in self:
            if name == "access_key" and value is not None:
                fields.append(f"{name}='[REDACTED]'")
            else:
                fields.append(f"{name}={value!r}")
        return f"AzureMailerConfig({', '.join(fields)})"


def load_mailer_config_from_dict(config_dict: Mapping[str, Any]) -> AzureMailerConfig:
    """Load AzureMailerConfig from a configuration dictionary.

    Bridges lib_layered_config's dictionary output with the typed model.
    When the section carries a ``dsn``, its parts fill every field that
    is not set explicitly in the section.

    Args:
        config_dict: Configuration dictionary typically from lib_layered_config,
            with an ``azure_mailer`` section.

    Returns:
        Configured mailer settings with defaults for missing values.

    Raises:
        ConfigurationError: When the DSN is malformed or lacks an access key.
        ValidationError: When field values are invalid.

    Example:
        >>> cfg = load_mailer_config_from_dict(
        ...     {"azure_mailer": {"dsn": "azure+api://c2VjcmV0@res.communication.azure.com", "timeout": 5}}
        ... )
        >>> cfg.endpoint, cfg.timeout
        ('res.communication.azure.com', 5.0)
    """
    section: Any = config_dict.get(CONFIG_SECTION, {})

    if not isinstance(section, Mapping):
        return AzureMailerConfig.model_validate(section)

    raw: dict[str, Any] = dict(cast(Mapping[str, Any], section))
    dsn = raw.pop("dsn", None)
    if isinstance(dsn, str) and dsn.strip():
        explicit = {k: v for k, v in raw.items() if not (isinstance(v, str) and not v.strip())}
        raw = {**dsn_to_config_fields(parse_dsn(dsn)), **explicit}

    return AzureMailerConfig.model_validate(raw)


__all__ = [
    "CONFIG_SECTION",
    "DEFAULT_API_VERSION",
    "SEND_PATH",
    "AzureMailerConfig",
    "load_mailer_config_from_dict",
]
