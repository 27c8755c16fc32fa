"""SES adapter - signed HTTPS delivery through the SES v1 query API.

Structure:
    * :mod:`.config` - SES configuration model and loader
    * :mod:`.query` - Form-encoded SendEmail / SendRawEmail bodies
    * :mod:`.transport` - httpx POST and XML response classification
    * :mod:`.validation` - Recipient address validation

Contents:
    * :class:`.config.SesConfig` - SES configuration container
    * :func:`.config.load_ses_config_from_dict` - Config dict loader
    * :func:`.transport.send_signed_request` - Single signed submission
"""

from __future__ import annotations

from .config import SesConfig, endpoint_url, load_ses_config_from_dict
from .query import build_send_email_body, build_send_raw_email_body
from .transport import parse_response, send_signed_request
from .validation import validate_recipient, validate_recipients

__all__ = [
    "SesConfig",
    "build_send_email_body",
    "build_send_raw_email_body",
    "endpoint_url",
    "load_ses_config_from_dict",
    "parse_response",
    "send_signed_request",
    "validate_recipient",
    "validate_recipients",
]
