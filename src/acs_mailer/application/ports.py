"""Application ports: Protocol definitions for adapter functions and objects.

Callable Protocols define a ``__call__`` whose signature matches the
corresponding adapter function, so module-level functions satisfy them by
structural subtyping (PEP 544). ``Transport`` and ``HttpExecutor`` describe
the two seams of a send: the capability the host application calls, and
the HTTP collaborator the transport delegates I/O to.

System Role:
    Sits between domain and adapters. Infrastructure types (``Config``,
    ``AzureMailerConfig``) are imported under ``TYPE_CHECKING`` only.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol

from ..domain.enums import OutputFormat
from ..domain.models import Envelope, NormalizedEmail, SendResult

if TYPE_CHECKING:
    from lib_layered_config import Config

    from ..adapters.azure.config import AzureMailerConfig


@dataclass(frozen=True, slots=True)
class HttpResponse:
    """Status and decoded body of a response returned by an :class:`HttpExecutor`."""

    status_code: int
    text: str


class HttpExecutor(Protocol):
    """Execute one HTTP request and return its response.

    Implementations own connection pooling, TLS, and timeouts. They raise
    :class:`~acs_mailer.domain.errors.TransportError` when no response
    was received.
    """

    def __call__(self, method: str, url: str, *, headers: Mapping[str, str], body: bytes) -> HttpResponse: ...


class Transport(Protocol):
    """Capability to send one message and report the provider's verdict.

    ``close`` releases whatever connections the transport opened itself.
    """

    def send(self, email: NormalizedEmail, envelope: Envelope) -> SendResult: ...
    def close(self) -> None: ...


class CreateTransport(Protocol):
    """Build a transport from validated mailer configuration."""

    def __call__(self, config: AzureMailerConfig, *, http_executor: HttpExecutor | None = ...) -> Transport: ...


class GetConfig(Protocol):
    """Load layered configuration with application defaults."""

    def __call__(self, *, profile: str | None = ..., start_dir: str | None = ...) -> Config: ...


class DisplayConfig(Protocol):
    """Display the provided configuration in the requested format."""

    def __call__(
        self, config: Config, *, output_format: OutputFormat = ..., section: str | None = ..., profile: str | None = ...
    ) -> None: ...


class LoadMailerConfigFromDict(Protocol):
    """Load AzureMailerConfig from a configuration dictionary."""

    def __call__(self, config_dict: Mapping[str, Any]) -> AzureMailerConfig: ...


class InitLogging(Protocol):
    """Initialize lib_log_rich runtime with the provided configuration."""

    def __call__(self, config: Config) -> None: ...


__all__ = [
    "CreateTransport",
    "DisplayConfig",
    "GetConfig",
    "HttpExecutor",
    "HttpResponse",
    "InitLogging",
    "LoadMailerConfigFromDict",
    "Transport",
]
