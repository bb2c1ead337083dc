"""Value objects describing a message, its envelope, and the send outcome.

All types are frozen: they are built once per send and read by the
transport, never mutated.
"""

from __future__ import annotations

import base64
import binascii
import mimetypes
import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from email.utils import parseaddr
from pathlib import Path
from typing import Literal, Union

from .enums import Priority
from .errors import ApiError

_WHITESPACE = re.compile(rb"\s+")


@dataclass(frozen=True, slots=True)
class Address:
    """An email address with an optional display name.

    Example:
        >>> Address.parse("Jane Doe <jane@example.com>")
        Address(address='jane@example.com', display_name='Jane Doe')
        >>> Address.parse("jane@example.com").display_name is None
        True
    """

    address: str
    display_name: str | None = None

    @classmethod
    def parse(cls, value: str) -> Address:
        """Parse ``"Name <addr>"`` or a bare address."""
        name, addr = parseaddr(value)
        if not addr:
            addr = value.strip()
        return cls(address=addr, display_name=name or None)

    def __str__(self) -> str:
        if self.display_name:
            return f"{self.display_name} <{self.address}>"
        return self.address


@dataclass(frozen=True, slots=True)
class Attachment:
    """A file attached to the message, carried as raw bytes.

    ``inline`` marks the attachment for embedding (referenced by ``cid:``
    from the HTML body) instead of regular attachment disposition.
    """

    filename: str
    content: bytes
    content_type: str = "application/octet-stream"
    inline: bool = False

    @property
    def disposition(self) -> Literal["inline", "attachment"]:
        return "inline" if self.inline else "attachment"

    @classmethod
    def from_base64(
        cls,
        filename: str,
        encoded: str | bytes,
        *,
        content_type: str = "application/octet-stream",
        inline: bool = False,
    ) -> Attachment:
        """Build an attachment from pre-encoded base64, tolerating MIME line wraps.

        Example:
            >>> Attachment.from_base64("a.txt", "aGVs\\r\\nbG8=").content
            b'hello'
        """
        raw = encoded.encode("ascii") if isinstance(encoded, str) else encoded
        try:
            content = base64.b64decode(_WHITESPACE.sub(b"", raw), validate=True)
        except binascii.Error as exc:
            raise ValueError(f"Attachment {filename!r} is not valid base64") from exc
        return cls(filename=filename, content=content, content_type=content_type, inline=inline)

    @classmethod
    def from_path(cls, path: Path, *, inline: bool = False, content_type: str | None = None) -> Attachment:
        """Read an attachment from disk, guessing the content type from the file name.

        Raises:
            FileNotFoundError: When the path does not exist.
        """
        guessed = content_type or mimetypes.guess_type(path.name)[0] or "application/octet-stream"
        return cls(filename=path.name, content=path.read_bytes(), content_type=guessed, inline=inline)


def _empty_headers() -> Mapping[str, str]:
    return {}


@dataclass(frozen=True, slots=True)
class NormalizedEmail:
    """Message content as read by the transport.

    ``headers`` keeps insertion order; reserved names are filtered out
    when the payload is built.
    """

    subject: str
    html: str | None = None
    text: str | None = None
    priority: Priority = Priority.NORMAL
    headers: Mapping[str, str] = field(default_factory=_empty_headers)
    attachments: Sequence[Attachment] = ()


@dataclass(frozen=True, slots=True)
class Envelope:
    """Sender and recipient addressing, independent of the content headers."""

    sender: Address
    to: tuple[Address, ...]
    cc: tuple[Address, ...] = ()
    bcc: tuple[Address, ...] = ()
    reply_to: tuple[Address, ...] = ()

    @property
    def recipient_count(self) -> int:
        return len(self.to) + len(self.cc) + len(self.bcc)

    def all_addresses(self) -> tuple[Address, ...]:
        """Return the sender followed by every recipient and reply-to address."""
        return (self.sender, *self.to, *self.cc, *self.bcc, *self.reply_to)


@dataclass(frozen=True, slots=True)
class SendSuccess:
    """The provider accepted the message and assigned it an id."""

    provider_message_id: str

    @property
    def ok(self) -> bool:
        return True

    def raise_for_failure(self) -> None:
        """No-op, mirrors :meth:`SendFailure.raise_for_failure`."""


@dataclass(frozen=True, slots=True)
class SendFailure:
    """The provider rejected the message with a non-202 status."""

    error_code: str
    error_message: str
    http_status: int

    @property
    def ok(self) -> bool:
        return False

    def raise_for_failure(self) -> None:
        """Raise :class:`ApiError` carrying the provider's code and message verbatim.

        Example:
            >>> SendFailure("InvalidArgument", "bad address", 400).raise_for_failure()
            Traceback (most recent call last):
            ...
            acs_mailer.domain.errors.ApiError: Unable to send an email (InvalidArgument): bad address
        """
        raise ApiError(self.error_code, self.error_message, self.http_status)


SendResult = Union[SendSuccess, SendFailure]


__all__ = [
    "Address",
    "Attachment",
    "Envelope",
    "NormalizedEmail",
    "SendFailure",
    "SendResult",
    "SendSuccess",
]
