"""In-memory configuration, logging, and transport adapters for testing.

Provide functions that satisfy the same Protocols as the production
adapters while touching no filesystem, no network, and no logging
framework.
"""

from __future__ import annotations

from datetime import datetime, timezone

from lib_layered_config import Config

from acs_mailer.application.ports import CreateTransport, HttpExecutor
from acs_mailer.domain.enums import OutputFormat

from ..azure.config import AzureMailerConfig
from ..azure.transport import AzureApiTransport
from .http import HttpExecutorSpy

#: Fixed request time used by in-memory transports.
FIXED_TIMESTAMP = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)

#: Fixed repeatability id used by in-memory transports.
FIXED_REQUEST_ID = "11111111-2222-4333-8444-555555555555"


def get_config_in_memory(
    *,
    profile: str | None = None,
    start_dir: str | None = None,
) -> Config:
    """Return an empty in-memory Config."""
    return Config({}, {})


def display_config_in_memory(
    config: Config,
    *,
    output_format: OutputFormat = OutputFormat.HUMAN,
    section: str | None = None,
    profile: str | None = None,
) -> None:
    """No-op display -- satisfies the DisplayConfig protocol."""


def init_logging_in_memory(config: Config) -> None:
    """No-op -- satisfies the InitLogging protocol without side effects."""


def transport_factory_in_memory(spy: HttpExecutorSpy) -> CreateTransport:
    """Return a CreateTransport function wired to ``spy`` with a frozen clock and id.

    The injected ``http_executor`` argument is ignored so every request
    lands in ``spy``.
    """

    def _create(config: AzureMailerConfig, *, http_executor: HttpExecutor | None = None) -> AzureApiTransport:
        return AzureApiTransport(
            config,
            spy,
            clock=lambda: FIXED_TIMESTAMP,
            id_factory=lambda: FIXED_REQUEST_ID,
        )

    return _create


__all__ = [
    "FIXED_REQUEST_ID",
    "FIXED_TIMESTAMP",
    "display_config_in_memory",
    "get_config_in_memory",
    "init_logging_in_memory",
    "transport_factory_in_memory",
]
