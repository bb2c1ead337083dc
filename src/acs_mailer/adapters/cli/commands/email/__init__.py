"""Email sending CLI commands.

Provides the send-email command for the Azure Communication Services
email API.

Contents:
    * :func:`.send_email.cli_send_email` - Send email with HTML, attachments, and custom headers.
"""

from __future__ import annotations

from ._common import filter_sentinels
from .send_email import cli_send_email

__all__ = ["cli_send_email", "filter_sentinels"]
