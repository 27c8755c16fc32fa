"""Logging configuration model and credential filtering.

init_logging itself is exercised through the CLI tests.
"""

from __future__ import annotations

import logging

import pytest

from sesmail.adapters.logging.setup import CredentialFilter, LoggingConfigModel, install_credential_filter


@pytest.mark.os_agnostic
def test_logging_config_model_allows_extra_fields() -> None:
    """Extra fields pass through for lib_log_rich RuntimeConfig."""
    parsed = LoggingConfigModel.model_validate({"service": "test", "environment": "dev", "console_level": "DEBUG"})

    assert parsed.service == "test"
    assert parsed.environment == "dev"
    assert parsed.model_dump(exclude={"service", "environment"}, exclude_none=True) == {"console_level": "DEBUG"}


@pytest.mark.os_agnostic
def test_logging_config_model_defaults() -> None:
    parsed = LoggingConfigModel.model_validate({})

    assert parsed.service is None
    assert parsed.environment == "prod"


def _record(**extra: object) -> logging.LogRecord:
    record = logging.LogRecord("sesmail.test", logging.INFO, __file__, 1, "message", None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


@pytest.mark.os_agnostic
def test_credential_filter_drops_sensitive_fields_and_keeps_the_record() -> None:
    record = _record(
        Authorization="AWS4-HMAC-SHA256 Credential=...",
        secret_access_key="s3cr3t",
        signature="abc",
        recipient="a@example.com",
    )

    assert CredentialFilter().filter(record) is True
    assert not hasattr(record, "Authorization")
    assert not hasattr(record, "secret_access_key")
    assert not hasattr(record, "signature")
    assert record.recipient == "a@example.com"  # type: ignore[attr-defined]


@pytest.mark.os_agnostic
def test_filter_installation_covers_child_loggers() -> None:
    """A handler-level filter sees records from every logger below it."""
    captured: list[logging.LogRecord] = []

    class _Collect(logging.Handler):
        def emit(self, record: logging.LogRecord) -> None:
            captured.append(record)

    parent = logging.getLogger("sesmail_filter_test")
    parent.propagate = False
    handler = _Collect()
    parent.addHandler(handler)
    try:
        assert install_credential_filter(parent) == 1
        assert install_credential_filter(parent) == 0

        logging.getLogger("sesmail_filter_test.child").warning("boom", extra={"authorization": "AWS4 ..."})
    finally:
        parent.removeHandler(handler)

    assert len(captured) == 1
    assert not hasattr(captured[0], "authorization")
