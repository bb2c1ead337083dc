"""In-memory adapter implementations for testing.

Provides lightweight implementations of all application ports that operate
entirely in memory -- no filesystem, no network, no logging framework.

Contents:
    * :mod:`.http` - In-memory HTTP executor (HttpExecutorSpy class)
    * :mod:`.services` - In-memory configuration, logging, and transport adapters
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .http import HttpExecutorSpy, RecordedRequest
from .services import (
    FIXED_REQUEST_ID,
    FIXED_TIMESTAMP,
    display_config_in_memory,
    get_config_in_memory,
    init_logging_in_memory,
    transport_factory_in_memory,
)

# Static conformance assertions
if TYPE_CHECKING:
    from acs_mailer.application.ports import (
        DisplayConfig,
        GetConfig,
        HttpExecutor,
        InitLogging,
    )

    _assert_get_config: GetConfig = get_config_in_memory
    _assert_display_config: DisplayConfig = display_config_in_memory
    _assert_init_logging: InitLogging = init_logging_in_memory
    _assert_http_executor: HttpExecutor = HttpExecutorSpy()

__all__ = [
    "FIXED_REQUEST_ID",
    "FIXED_TIMESTAMP",
    "HttpExecutorSpy",
    "RecordedRequest",
    "display_config_in_memory",
    "get_config_in_memory",
    "init_logging_in_memory",
    "transport_factory_in_memory",
]
