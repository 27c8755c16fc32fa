"""Adapters layer - infrastructure and framework integrations.

Contents:
    * :mod:`.ses` - Signed HTTPS delivery through the SES query API
    * :mod:`.calendar` - iCalendar invite generation
    * :mod:`.config` - Configuration loading, display, and overrides
    * :mod:`.logging` - Logging setup with lib_log_rich
    * :mod:`.memory` - In-memory adapters for tests
    * :mod:`.cli` - Click CLI framework integration
"""

from __future__ import annotations

__all__: list[str] = []
