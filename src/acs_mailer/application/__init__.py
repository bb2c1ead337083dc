"""Application layer - port definitions.

Contains the Protocols that adapter implementations satisfy.

Contents:
    * :mod:`.ports` - Protocol definitions for adapter functions and objects
"""

from __future__ import annotations

from .ports import (
    CreateTransport,
    DisplayConfig,
    GetConfig,
    HttpExecutor,
    HttpResponse,
    InitLogging,
    LoadMailerConfigFromDict,
    Transport,
)

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
