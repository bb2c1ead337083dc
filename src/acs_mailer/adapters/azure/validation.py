"""Envelope address validation shared between production and test adapters.

Raises domain exceptions (InvalidRecipientError) rather than
library-specific exceptions.
"""

from __future__ import annotations

from btx_lib_mail import validate_email_address

from acs_mailer.domain.errors import InvalidRecipientError
from acs_mailer.domain.models import Address, Envelope


def validate_address(address: Address) -> None:
    """Validate a single email address.

    Raises:
        InvalidRecipientError: When the email address is invalid.

    Example:
        >>> validate_address(Address("valid@example.com"))  # no exception
        >>> validate_address(Address("invalid"))  # doctest: +IGNORE_EXCEPTION_DETAIL
        Traceback (most recent call last):
        ...
        InvalidRecipientError: Invalid email address: invalid
    """
    try:
        validate_email_address(address.address)
    except ValueError as e:
        raise InvalidRecipientError(f"Invalid email address: {address.address}") from e


def validate_envelope(envelope: Envelope) -> None:
    """Validate the sender, every recipient, and every reply-to address.

    Raises:
        InvalidRecipientError: When ``to`` is empty or any address is invalid.
    """
    if not envelope.to:
        raise InvalidRecipientError("At least one 'to' recipient is required")
    for address in envelope.all_addresses():
        validate_address(address)


__all__ = ["validate_address", "validate_envelope"]
