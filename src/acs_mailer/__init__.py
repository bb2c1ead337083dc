"""Azure Communication Services email transport.

Public API, routed through the architectural layers:
- Domain exports: message, envelope, result types and errors
- Adapter exports: the Azure transport, its signer, mapper, and factory
- Composition exports: wired configuration services
- Metadata: Package information

Example:
    >>> from acs_mailer import Address, Envelope, NormalizedEmail, transport_from_dsn
    >>> transport = transport_from_dsn("azure+api://c2VjcmV0@res.communication.azure.com")  # doctest: +SKIP
    >>> result = transport.send(  # doctest: +SKIP
    ...     NormalizedEmail(subject="Hi", text="Hello"),
    ...     Envelope(sender=Address("app@example.com"), to=(Address("user@example.com"),)),
    ... )
"""

from __future__ import annotations

# Metadata
from .__init__conf__ import print_info

# Adapter exports
from .adapters.azure import (
    AzureApiTransport,
    AzureMailerConfig,
    HttpxExecutor,
    SignedRequest,
    TransportRegistry,
    create_azure_transport,
    default_registry,
    interpret_response,
    load_mailer_config_from_dict,
    sign,
    transport_from_dsn,
)
from .adapters.azure.payload import build_payload

# Composition exports (wired adapters)
from .composition import get_config

# Domain exports
from .domain import (
    Address,
    ApiError,
    Attachment,
    ConfigurationError,
    Envelope,
    InvalidRecipientError,
    NormalizedEmail,
    Priority,
    ProtocolError,
    SendFailure,
    SendResult,
    SendSuccess,
    TransportError,
    UnsupportedSchemeError,
)

__all__ = [
    # Domain
    "Address",
    "ApiError",
    "Attachment",
    "ConfigurationError",
    "Envelope",
    "InvalidRecipientError",
    "NormalizedEmail",
    "Priority",
    "ProtocolError",
    "SendFailure",
    "SendResult",
    "SendSuccess",
    "TransportError",
    "UnsupportedSchemeError",
    # Azure transport
    "AzureApiTransport",
    "AzureMailerConfig",
    "HttpxExecutor",
    "SignedRequest",
    "TransportRegistry",
    "build_payload",
    "create_azure_transport",
    "default_registry",
    "interpret_response",
    "load_mailer_config_from_dict",
    "sign",
    "transport_from_dsn",
    # Configuration
    "get_config",
    # Metadata
    "print_info",
]
