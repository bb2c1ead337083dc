"""Map a normalized email onto the JSON payload of ``POST /emails:send``.

The structure and key order are part of the wire contract. Optional
recipient lists are left out entirely when empty instead of being sent as
empty arrays.
"""

from __future__ import annotations

import base64
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from acs_mailer.domain.errors import InvalidRecipientError
from acs_mailer.domain.models import Address, Attachment, Envelope, NormalizedEmail

#: Header names never forwarded as custom headers (compared lower-cased).
RESERVED_HEADERS: frozenset[str] = frozenset(
    {
        "x-ms-client-request-id",
        "operation-id",
        "repeatability-request-id",
        "repeatability-first-sent",
        "x-ms-date",
        "authorization",
        "x-ms-content-sha256",
        "received",
        "dkim-signature",
        "content-transfer-encoding",
        "from",
        "to",
        "cc",
        "bcc",
        "subject",
        "content-type",
        "reply-to",
    }
)


def address_entry(address: Address) -> dict[str, str]:
    """Render one address; ``displayName`` is omitted when there is none.

    Example:
        >>> address_entry(Address("a@example.com"))
        {'address': 'a@example.com'}
        >>> address_entry(Address("a@example.com", "Ann"))
        {'address': 'a@example.com', 'displayName': 'Ann'}
    """
    entry = {"address": address.address}
    if address.display_name:
        entry["displayName"] = address.display_name
    return entry


def address_entries(addresses: Iterable[Address]) -> list[dict[str, str]]:
    return [address_entry(address) for address in addresses]


def attachment_entry(attachment: Attachment) -> dict[str, str]:
    """Render one attachment; inline parts get ``content_id`` set to the file name.

    Example:
        >>> attachment_entry(Attachment("a.pdf", b"%PDF", "application/pdf", inline=True))
        {'name': 'a.pdf', 'contentInBase64': 'JVBERg==', 'contentType': 'application/pdf', 'content_id': 'a.pdf'}
    """
    entry = {
        "name": attachment.filename,
        "contentInBase64": base64.b64encode(attachment.content).decode("ascii"),
        "contentType": attachment.content_type,
    }
    if attachment.disposition == "inline":
        entry["content_id"] = attachment.filename
    return entry


def custom_headers(headers: Mapping[str, str]) -> dict[str, str] | None:
    """Keep headers outside :data:`RESERVED_HEADERS`, with original name casing.

    Returns:
        The remaining headers in their original order, or None when none remain.

    Example:
        >>> custom_headers({"Subject": "x", "X-Campaign": "spring"})
        {'X-Campaign': 'spring'}
        >>> custom_headers({"Content-Type": "text/plain"}) is None
        True
    """
    kept = {name: value for name, value in headers.items() if name.lower() not in RESERVED_HEADERS}
    return kept or None


def build_payload(
    email: NormalizedEmail,
    envelope: Envelope,
    *,
    engagement_tracking_enabled: bool = True,
) -> dict[str, Any]:
    """Build the request payload for one message.

    Args:
        email: Message content, priority, custom headers and attachments.
        envelope: Sender and recipient addressing.
        engagement_tracking_enabled: Provider-side open/click tracking; sent
            inverted as ``userEngagementTrackingDisabled``.

    Returns:
        Payload dict whose insertion order is the serialized key order.

    Raises:
        InvalidRecipientError: When the envelope has no ``to`` recipient.
    """
    if not envelope.to:
        raise InvalidRecipientError("At least one 'to' recipient is required")

    recipients: dict[str, list[dict[str, str]]] = {"to": address_entries(envelope.to)}
    if envelope.cc:
        recipients["cc"] = address_entries(envelope.cc)
    if envelope.bcc:
        recipients["bcc"] = address_entries(envelope.bcc)

    payload: dict[str, Any] = {
        "content": {
            "html": email.html,
            "plainText": email.text,
            "subject": email.subject,
        },
        "recipients": recipients,
        "senderAddress": envelope.sender.address,
        "attachments": _attachment_entries(email.attachments),
        "userEngagementTrackingDisabled": not engagement_tracking_enabled,
        "headers": custom_headers(email.headers),
        "importance": email.priority.importance,
    }
    if envelope.reply_to:
        payload["replyTo"] = address_entries(envelope.reply_to)
    return payload


def _attachment_entries(attachments: Sequence[Attachment]) -> list[dict[str, str]]:
    return [attachment_entry(attachment) for attachment in attachments]


__all__ = [
    "RESERVED_HEADERS",
    "address_entries",
    "address_entry",
    "attachment_entry",
    "build_payload",
    "custom_headers",
]
