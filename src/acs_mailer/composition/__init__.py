"""Composition root: the one place that picks concrete adapters.

``build_production`` sends over httpx with the layered configuration;
``build_testing`` keeps the real transport and config model but routes every
request into an :class:`HttpExecutorSpy` under a frozen clock.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..adapters.azure.config import load_mailer_config_from_dict
from ..adapters.azure.factory import create_azure_transport
from ..adapters.config.display import display_config
from ..adapters.config.loader import get_config
from ..adapters.logging.setup import init_logging

# Each adapter must satisfy its port; checked by pyright only.
if TYPE_CHECKING:
    from ..adapters.memory.http import HttpExecutorSpy
    from ..application.ports import (
        CreateTransport,
        DisplayConfig,
        GetConfig,
        InitLogging,
        LoadMailerConfigFromDict,
    )

    _assert_get_config: GetConfig = get_config
    _assert_display_config: DisplayConfig = display_config
    _assert_load_mailer_config_from_dict: LoadMailerConfigFromDict = load_mailer_config_from_dict
    _assert_create_transport: CreateTransport = create_azure_transport
    _assert_init_logging: InitLogging = init_logging


@dataclass(frozen=True, slots=True)
class AppServices:
    """The adapters one CLI run works with, chosen once per process."""

    get_config: GetConfig
    display_config: DisplayConfig
    load_mailer_config_from_dict: LoadMailerConfigFromDict
    create_transport: CreateTransport
    init_logging: InitLogging


def build_production() -> AppServices:
    """Layered config, rich display, lib_log_rich logging and the httpx transport."""
    return AppServices(
        get_config=get_config,
        display_config=display_config,
        load_mailer_config_from_dict=load_mailer_config_from_dict,
        create_transport=create_azure_transport,
        init_logging=init_logging,
    )


def build_testing(*, spy: HttpExecutorSpy | None = None) -> AppServices:
    """Empty config, silent display and logging, transport sending into ``spy``.

    Pass your own ``spy`` to queue responses and inspect the requests
    afterwards; a fresh one is created otherwise.
    """
    from ..adapters.memory import (
        HttpExecutorSpy,
        display_config_in_memory,
        get_config_in_memory,
        init_logging_in_memory,
        transport_factory_in_memory,
    )

    if spy is None:
        spy = HttpExecutorSpy()

    return AppServices(
        get_config=get_config_in_memory,
        display_config=display_config_in_memory,
        load_mailer_config_from_dict=load_mailer_config_from_dict,
        create_transport=transport_factory_in_memory(spy),
        init_logging=init_logging_in_memory,
    )


__all__ = [
    "AppServices",
    "build_production",
    "build_testing",
    "create_azure_transport",
    "display_config",
    "get_config",
    "init_logging",
    "load_mailer_config_from_dict",
]
