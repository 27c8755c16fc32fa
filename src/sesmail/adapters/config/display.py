"""Configuration display with credential redaction.

Wraps lib_layered_config's Rich display. Pending log output is flushed
first so records do not interleave with the rendered configuration, and
the SES secret is masked before anything is printed.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Final

import lib_log_rich.runtime
from lib_layered_config import Config
from lib_layered_config import OutputFormat as LibOutputFormat
from lib_layered_config import display_config as _lib_display
from rich.console import Console

from sesmail.domain.enums import OutputFormat

REDACTED: Final[str] = "***REDACTED***"

#: ``(section, key)`` pairs whose values never reach the terminal.
SECRET_KEYS: Final[tuple[tuple[str, str], ...]] = (("ses", "secret_access_key"),)


def redact_secrets(config: Config) -> Config:
    """Return ``config`` with every populated secret replaced by ``***REDACTED***``.

    Example:
        >>> cfg = Config({"ses": {"secret_access_key": "s3cr3t", "region": "eu-west-1"}}, {})
        >>> redact_secrets(cfg)["ses"]["secret_access_key"]
        '***REDACTED***'
        >>> redact_secrets(Config({"ses": {"secret_access_key": ""}}, {}))["ses"]["secret_access_key"]
        ''
    """
    masked: dict[str, dict[str, object]] = {}
    for section, key in SECRET_KEYS:
        values: Any = config.get(section, default={})
        if isinstance(values, Mapping) and values.get(key):
            masked.setdefault(section, {})[key] = REDACTED
    return config.with_overrides(masked) if masked else config


def display_config(
    config: Config,
    *,
    output_format: OutputFormat = OutputFormat.HUMAN,
    section: str | None = None,
    console: Console | None = None,
    profile: str | None = None,
) -> None:
    """Print the (redacted) configuration as TOML-like text or JSON.

    Args:
        config: Loaded layered configuration.
        output_format: HUMAN or JSON.
        section: Restrict output to one section.
        console: Rich console override, mainly for tests.
        profile: Profile name shown in provenance comments.

    Raises:
        ValueError: If ``section`` does not exist.
    """
    if lib_log_rich.runtime.is_initialised():
        lib_log_rich.runtime.flush()

    _lib_display(
        redact_secrets(config),
        output_format=LibOutputFormat(output_format.value),
        section=section,
        profile=profile,
        console=console,
    )


__all__ = ["REDACTED", "display_config", "redact_secrets"]
