"""Domain layer - pure types and errors with no I/O or framework dependencies.

Contents:
    * :mod:`.enums` - Domain enumerations (Priority, OutputFormat)
    * :mod:`.errors` - Domain exception types
    * :mod:`.models` - Message, envelope, and send-result value objects
"""

from __future__ import annotations

from .enums import OutputFormat, Priority
from .errors import (
    ApiError,
    ConfigurationError,
    InvalidRecipientError,
    ProtocolError,
    TransportError,
    UnsupportedSchemeError,
)
from .models import (
    Address,
    Attachment,
    Envelope,
    NormalizedEmail,
    SendFailure,
    SendResult,
    SendSuccess,
)

__all__ = [
    # Enums
    "OutputFormat",
    "Priority",
    # Errors
    "ApiError",
    "ConfigurationError",
    "InvalidRecipientError",
    "ProtocolError",
    "TransportError",
    "UnsupportedSchemeError",
    # Models
    "Address",
    "Attachment",
    "Envelope",
    "NormalizedEmail",
    "SendFailure",
    "SendResult",
    "SendSuccess",
]
