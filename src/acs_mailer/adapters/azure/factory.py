"""Transport factory and scheme registry.

The host application picks a transport by DSN scheme. Every registered
factory receives the :class:`AzureMailerConfig` parsed from the DSN, so the
registry serves Azure-compatible transports only (the HTTP API transport, a
test double, a variant routed through a proxy). The default registry knows
the ``azure`` and ``azure+api`` schemes.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from acs_mailer.application.ports import HttpExecutor, Transport
from acs_mailer.domain.errors import UnsupportedSchemeError

from .config import AzureMailerConfig
from .dsn import Dsn, dsn_to_config_fields, parse_dsn
from .http import HttpxExecutor
from .transport import AzureApiTransport

logger = logging.getLogger(__name__)

#: Schemes served by :func:`create_azure_transport`.
AZURE_SCHEMES: tuple[str, ...] = ("azure", "azure+api")

TransportFactory = Callable[..., Transport]
"""``factory(config: AzureMailerConfig, *, http_executor=None) -> Transport``."""


def create_azure_transport(
    config: AzureMailerConfig,
    *,
    http_executor: HttpExecutor | None = None,
) -> AzureApiTransport:
    """Build an :class:`AzureApiTransport`, defaulting to an httpx executor.

    An executor created here belongs to the transport and is closed by
    :meth:`AzureApiTransport.close`; an injected one is left to its caller.

    Raises:
        ConfigurationError: When endpoint or access key is missing or invalid.
    """
    if http_executor is not None:
        transport = AzureApiTransport(config, http_executor)
    else:
        executor = HttpxExecutor(timeout=config.timeout)
        try:
            transport = AzureApiTransport(config, executor, owns_executor=True)
        except Exception:
            executor.close()
            raise
    logger.debug("Created Azure mailer transport", extra={"endpoint": config.host, "api_version": config.api_version})
    return transport


class TransportRegistry:
    """Map DSN schemes to transport factories.

    Example:
        >>> registry = TransportRegistry()
        >>> registry.register("azure", create_azure_transport)
        >>> registry.supports("AZURE")
        True
        >>> registry.schemes
        ('azure',)
    """

    def __init__(self, mailer: str = "azure") -> None:
        self._mailer = mailer
        self._factories: dict[str, TransportFactory] = {}

    @property
    def schemes(self) -> tuple[str, ...]:
        return tuple(self._factories)

    def register(self, scheme: str, factory: TransportFactory) -> None:
        self._factories[scheme.lower()] = factory

    def supports(self, scheme: str) -> bool:
        return scheme.lower() in self._factories

    def create(self, dsn: str | Dsn, *, http_executor: HttpExecutor | None = None) -> Transport:
        """Create a transport from a DSN.

        Raises:
            UnsupportedSchemeError: When no factory is registered for the scheme.
            ConfigurationError: When the DSN is incomplete.
        """
        parsed = parse_dsn(dsn) if isinstance(dsn, str) else dsn
        factory = self._factories.get(parsed.scheme.lower())
        if factory is None:
            raise UnsupportedSchemeError(parsed.scheme, self.schemes, self._mailer)
        config = AzureMailerConfig.model_validate(dsn_to_config_fields(parsed))
        return factory(config, http_executor=http_executor)


def default_registry() -> TransportRegistry:
    """Return a registry with the Azure schemes registered."""
    registry = TransportRegistry()
    for scheme in AZURE_SCHEMES:
        registry.register(scheme, create_azure_transport)
    return registry


def transport_from_dsn(dsn: str, *, http_executor: HttpExecutor | None = None) -> Transport:
    """Create a transport from a DSN using the default registry.

    Example:
        >>> transport_from_dsn("azure+foo://key@default")  # doctest: +IGNORE_EXCEPTION_DETAIL
        Traceback (most recent call last):
        ...
        UnsupportedSchemeError: The "azure+foo" scheme is not supported; ...
    """
    return default_registry().create(dsn, http_executor=http_executor)


__all__ = [
    "AZURE_SCHEMES",
    "TransportFactory",
    "TransportRegistry",
    "create_azure_transport",
    "default_registry",
    "transport_from_dsn",
]
