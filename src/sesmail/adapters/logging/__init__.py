"""Logging adapter - lib_log_rich setup.

Contents:
    * :func:`.setup.init_logging` - Idempotent logging initialization
    * :class:`.setup.CredentialFilter` - Drops sensitive ``extra`` fields
"""

from __future__ import annotations

from .setup import CredentialFilter, init_logging, install_credential_filter

__all__ = ["CredentialFilter", "init_logging", "install_credential_filter"]
