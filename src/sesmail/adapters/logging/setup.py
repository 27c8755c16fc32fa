"""Logging initialization shared by every entry point.

Maps the ``[lib_log_rich]`` configuration section onto a lib_log_rich
RuntimeConfig, initializes the runtime once per process, and bridges stdlib
``logging`` so modules can keep using ``logging.getLogger(__name__)``.

A :class:`CredentialFilter` on every root handler drops any ``extra``
field that could carry signing material before a record reaches a handler.
"""

from __future__ import annotations

import logging
from typing import Final, cast

import lib_log_rich.config
import lib_log_rich.runtime
from lib_layered_config import Config
from pydantic import BaseModel, ConfigDict

from sesmail import __init__conf__

#: Substrings of ``extra`` field names that are removed from log records.
SENSITIVE_FIELD_MARKERS: Final[tuple[str, ...]] = ("secret", "authorization", "signature", "password")


class LoggingConfigModel(BaseModel):
    """Typed view of the ``[lib_log_rich]`` section.

    Unknown keys pass through to RuntimeConfig unchanged.

    Example:
        >>> LoggingConfigModel().environment
        'prod'
        >>> LoggingConfigModel(console_level="DEBUG").model_dump(exclude_none=True)["console_level"]
        'DEBUG'
    """

    service: str | None = None
    environment: str = "prod"

    model_config = ConfigDict(extra="allow")


class CredentialFilter(logging.Filter):
    """Strip sensitive ``extra`` attributes from records.

    Example:
        >>> record = logging.LogRecord("sesmail", logging.INFO, __file__, 1, "msg", None, None)
        >>> record.authorization = "AWS4-HMAC-SHA256 ..."
        >>> CredentialFilter().filter(record), hasattr(record, "authorization")
        (True, False)
    """

    def filter(self, record: logging.LogRecord) -> bool:
        for name in [key for key in vars(record) if any(marker in key.lower() for marker in SENSITIVE_FIELD_MARKERS)]:
            delattr(record, name)
        return True


def _build_runtime_config(config: Config) -> lib_log_rich.runtime.RuntimeConfig:
    log_raw: object = config.get("lib_log_rich", default={})
    parsed = LoggingConfigModel.model_validate(cast("dict[str, object]", log_raw) if log_raw else {})
    passthrough = parsed.model_dump(exclude={"service", "environment"}, exclude_none=True)
    return lib_log_rich.runtime.RuntimeConfig(
        service=parsed.service or __init__conf__.name,
        environment=parsed.environment,
        **passthrough,
    )


def install_credential_filter(logger: logging.Logger | None = None) -> int:
    """Attach a CredentialFilter to each handler of ``logger`` (root by default).

    Handler filters see records from every child logger. Handlers that
    already carry one are skipped. Returns the number of handlers updated.
    """
    target = logging.getLogger() if logger is None else logger
    updated = 0
    for handler in target.handlers:
        if not any(isinstance(existing, CredentialFilter) for existing in handler.filters):
            handler.addFilter(CredentialFilter())
            updated += 1
    return updated


def init_logging(config: Config) -> None:
    """Initialize the lib_log_rich runtime once and bridge stdlib logging.

    Loads ``.env`` first so ``LOG_*`` variables are visible to lib_log_rich.
    Later calls return immediately.

    Example:
        >>> init_logging(Config({"lib_log_rich": {"environment": "test"}}, {}))  # doctest: +SKIP
    """
    if lib_log_rich.runtime.is_initialised():
        return
    lib_log_rich.config.enable_dotenv()
    lib_log_rich.runtime.init(_build_runtime_config(config))
    lib_log_rich.runtime.attach_std_logging()
    install_credential_filter()


__all__ = [
    "CredentialFilter",
    "LoggingConfigModel",
    "init_logging",
    "install_credential_filter",
]
