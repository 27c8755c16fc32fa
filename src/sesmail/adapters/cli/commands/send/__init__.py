"""Send commands.

Contents:
    * :func:`.send_email.cli_send_email` - HTML email via SendEmail.
    * :func:`.send_invite.cli_send_invite` - HTML email with a calendar invite via SendRawEmail.
"""

from __future__ import annotations

from .send_email import cli_send_email
from .send_invite import cli_send_invite

__all__ = ["cli_send_email", "cli_send_invite"]
