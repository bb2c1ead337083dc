"""Fixtures for the mailer suite.

Most tests send through an :class:`HttpExecutorSpy` with a frozen clock and
the well-known key ``c2VjcmV0`` (base64 of ``b"secret"``), so signatures and
request ids are reproducible. A ``.env`` at the project root is loaded so
``ACS_MAILER___*`` variables reach the layered configuration.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterator
from dataclasses import dataclass, fields
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Any

import lib_cli_exit_tools
import pytest
from click.testing import CliRunner
from lib_layered_config import Config

from acs_mailer.domain.models import Address, Envelope, NormalizedEmail

if TYPE_CHECKING:
    from acs_mailer.adapters.azure.config import AzureMailerConfig
    from acs_mailer.adapters.azure.transport import AzureApiTransport
    from acs_mailer.adapters.memory.http import HttpExecutorSpy
    from acs_mailer.composition import AppServices


def _load_dotenv() -> None:
    """Load .env file when it exists for integration test configuration."""
    from dotenv import load_dotenv

    env_file = Path(__file__).parent.parent / ".env"
    if env_file.exists():
        load_dotenv(env_file)


_load_dotenv()

ANSI_ESCAPE_PATTERN = re.compile(r"\x1B\[[0-?]*[ -/]*[@-~]")
CONFIG_FIELDS: tuple[str, ...] = tuple(field.name for field in fields(type(lib_cli_exit_tools.config)))

#: base64 of b"secret"; the HMAC key used throughout the suite.
TEST_ACCESS_KEY = "c2VjcmV0"
TEST_ENDPOINT = "res.communication.azure.com"
TEST_TIMESTAMP = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)


def _remove_ansi_codes(text: str) -> str:
    """Return *text* stripped of ANSI escape sequences."""
    return ANSI_ESCAPE_PATTERN.sub("", text)


def _snapshot_cli_config() -> dict[str, object]:
    """Capture every attribute from ``lib_cli_exit_tools.config``."""
    return {name: getattr(lib_cli_exit_tools.config, name) for name in CONFIG_FIELDS}


def _restore_cli_config(snapshot: dict[str, object]) -> None:
    """Reapply a configuration snapshot captured by ``_snapshot_cli_config``."""
    for name, value in snapshot.items():
        setattr(lib_cli_exit_tools.config, name, value)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a fresh CliRunner per test.

    Use result.stdout for clean output (e.g., JSON parsing) so log lines
    written to stderr do not contaminate it.
    """
    return CliRunner()


@pytest.fixture
def production_factory() -> Callable[[], AppServices]:
    """Provide the production services factory for tests."""
    from acs_mailer.composition import build_production

    return build_production


@pytest.fixture
def strip_ansi() -> Callable[[str], str]:
    """Rich-click colours help output; compare against the plain text."""
    return _remove_ansi_codes


@pytest.fixture
def managed_traceback_state() -> Iterator[None]:
    """Start with tracebacks off and put every ``lib_cli_exit_tools`` flag back afterwards."""
    lib_cli_exit_tools.reset_config()
    lib_cli_exit_tools.config.traceback = False
    lib_cli_exit_tools.config.traceback_force_color = False
    snapshot = _snapshot_cli_config()
    try:
        yield
    finally:
        _restore_cli_config(snapshot)


@pytest.fixture
def clear_config_cache() -> Iterator[None]:
    """Force the next ``get_config`` call to re-read every layer."""
    from acs_mailer.adapters.config import loader as config_mod

    config_mod.get_config.cache_clear()
    yield


@pytest.fixture
def config_factory() -> Callable[[dict[str, Any]], Config]:
    """Create real Config instances from test data dicts, without filesystem I/O.

    Example:
        def test_section(config_factory: Callable[[dict[str, Any]], Config]) -> None:
            config = config_factory({"azure_mailer": {"timeout": 5}})
            assert config.get("azure_mailer.timeout") == 5
    """

    def _factory(data: dict[str, Any]) -> Config:
        return Config(data, {})

    return _factory


@pytest.fixture
def mailer_config() -> AzureMailerConfig:
    """Fully configured mailer settings pointing at the test endpoint."""
    from acs_mailer.adapters.azure.config import AzureMailerConfig

    return AzureMailerConfig(endpoint=TEST_ENDPOINT, access_key=TEST_ACCESS_KEY)


@pytest.fixture
def http_spy() -> HttpExecutorSpy:
    """Fresh in-memory HTTP executor answering 202 by default."""
    from acs_mailer.adapters.memory.http import HttpExecutorSpy

    return HttpExecutorSpy()


@pytest.fixture
def transport(mailer_config: AzureMailerConfig, http_spy: HttpExecutorSpy) -> AzureApiTransport:
    """Azure transport wired to ``http_spy`` with a frozen clock and request id."""
    from acs_mailer.adapters.azure.transport import AzureApiTransport
    from acs_mailer.adapters.memory import FIXED_REQUEST_ID

    return AzureApiTransport(
        mailer_config,
        http_spy,
        clock=lambda: TEST_TIMESTAMP,
        id_factory=lambda: FIXED_REQUEST_ID,
    )


@pytest.fixture
def simple_email() -> NormalizedEmail:
    return NormalizedEmail(subject="Hello", text="Plain body")


@pytest.fixture
def simple_envelope() -> Envelope:
    return Envelope(sender=Address("sender@example.com"), to=(Address("rcpt@example.com"),))


@dataclass
class MailerCliContext:
    """Container for send-email CLI test setup.

    Attributes:
        factory: Callable that returns wired AppServices for CLI invocation.
        spy: HttpExecutorSpy capturing every request the transport makes.
    """

    factory: Callable[[], Any]
    spy: HttpExecutorSpy


@pytest.fixture
def mailer_cli_context(
    clear_config_cache: None,
) -> Callable[[dict[str, Any]], MailerCliContext]:
    """Create CLI test context with an ``[azure_mailer]`` section and an HTTP spy.

    Configuration loading is replaced by the given section; the transport
    is the real Azure transport talking to an in-memory executor with a
    frozen clock and request id.

    Example:
        def test_send(cli_runner, mailer_cli_context) -> None:
            ctx = mailer_cli_context({"endpoint": "res.communication.azure.com", "access_key": "c2VjcmV0"})
            result = cli_runner.invoke(cli, ["send-email", ...], obj=ctx.factory)
            assert ctx.spy.last_request.json()["content"]["subject"] == "Hi"
    """
    from acs_mailer.adapters.memory import transport_factory_in_memory
    from acs_mailer.adapters.memory.http import HttpExecutorSpy as HttpExecutorSpyImpl
    from acs_mailer.composition import AppServices, build_production

    def _create(mailer_data: dict[str, Any]) -> MailerCliContext:
        spy = HttpExecutorSpyImpl()
        config = Config({"azure_mailer": mailer_data}, {})
        prod = build_production()

        def _fake_get_config(**_kwargs: Any) -> Config:
            return config

        test_services = AppServices(
            get_config=_fake_get_config,
            display_config=prod.display_config,
            load_mailer_config_from_dict=prod.load_mailer_config_from_dict,
            create_transport=transport_factory_in_memory(spy),
            init_logging=prod.init_logging,
        )
        return MailerCliContext(factory=lambda: test_services, spy=spy)

    return _create


@pytest.fixture
def config_cli_context(
    clear_config_cache: None,
) -> Callable[[dict[str, Any]], Callable[[], AppServices]]:
    """Create CLI test context with injected config and production display."""
    from acs_mailer.composition import AppServices, build_production

    def _create(config_data: dict[str, Any]) -> Callable[[], AppServices]:
        config = Config(config_data, {})
        prod = build_production()

        def _fake_get_config(**_kwargs: Any) -> Config:
            return config

        test_services = AppServices(
            get_config=_fake_get_config,
            display_config=prod.display_config,
            load_mailer_config_from_dict=prod.load_mailer_config_from_dict,
            create_transport=prod.create_transport,
            init_logging=prod.init_logging,
        )
        return lambda: test_services

    return _create
