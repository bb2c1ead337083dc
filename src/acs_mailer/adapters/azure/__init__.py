"""Azure adapter - email sending through the Azure Communication Services API.

Structure:
    * :mod:`.signing` - HMAC-SHA256 request signer
    * :mod:`.payload` - Message-to-payload mapping
    * :mod:`.transport` - Signed request builder, response interpretation, send
    * :mod:`.config` - Mailer configuration model and loader
    * :mod:`.dsn` - Transport DSN parsing
    * :mod:`.factory` - Scheme registry and transport factory
    * :mod:`.http` - httpx-backed HTTP executor
    * :mod:`.validation` - Envelope address validation
"""

from __future__ import annotations

from .config import AzureMailerConfig, load_mailer_config_from_dict
from .factory import TransportRegistry, create_azure_transport, default_registry, transport_from_dsn
from .http import HttpxExecutor
from .signing import SignedHeaders, sign
from .transport import AzureApiTransport, SignedRequest, interpret_response

__all__ = [
    "AzureApiTransport",
    "AzureMailerConfig",
    "HttpxExecutor",
    "SignedHeaders",
    "SignedRequest",
    "TransportRegistry",
    "create_azure_transport",
    "default_registry",
    "interpret_response",
    "load_mailer_config_from_dict",
    "sign",
    "transport_from_dsn",
]
