"""Shared pieces of the send-email and send-invite commands.

Covers SES config loading and override flags, recipient/sender/body
resolution, outcome reporting, and the mapping of failures to exit codes.
"""

from __future__ import annotations

import functools
import logging
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Any, NoReturn, cast

import orjson
import rich_click as click
from pydantic import ValidationError

from sesmail import __init__conf__
from sesmail.adapters.ses.config import SesConfig
from sesmail.adapters.ses.validation import validate_recipients
from sesmail.application.delivery import Transport
from sesmail.domain.enums import OutputFormat
from sesmail.domain.errors import ConfigurationError, InvalidRecipientError
from sesmail.domain.outcomes import SendFailure, SendOutcome, SendSuccess

from ...context import CLIContext
from ...exit_codes import ExitCode

logger = logging.getLogger(__name__)


def filter_sentinels(**kwargs: Any) -> dict[str, Any]:
    """Drop unset options (None or empty tuple); turn tuples into lists.

    Example:
        >>> filter_sentinels(region=None, timeout=5.0, recipients=())
        {'timeout': 5.0}
    """
    result: dict[str, Any] = {}
    for key, value in kwargs.items():
        if value is None or value == ():
            continue
        result[key] = list(cast(tuple[Any, ...], value)) if isinstance(value, tuple) else value
    return result


def apply_validated_overrides(base_config: SesConfig, overrides: dict[str, Any]) -> SesConfig:
    """Merge ``overrides`` into ``base_config`` and re-run validation.

    Raises:
        ValidationError: When an override is invalid.
    """
    if not overrides:
        return base_config
    return SesConfig.model_validate({**base_config.model_dump(), **overrides})


def ses_config_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Add per-invocation overrides for non-secret ``[ses]`` settings."""
    options = [
        click.option("--region", default=None, help="Override ses.region"),
        click.option("--endpoint-domain", default=None, help="Override ses.endpoint_domain"),
        click.option("--timeout", type=float, default=None, help="Override HTTP timeout in seconds"),
        click.option(
            "--format",
            "output_format",
            type=click.Choice([f.value for f in OutputFormat], case_sensitive=False),
            default=OutputFormat.HUMAN.value,
            help="Result format (human-readable or JSON)",
        ),
    ]
    return functools.reduce(lambda f, opt: opt(f), reversed(options), func)


def fail(user_message: str, exit_code: ExitCode, *, exc: Exception | None = None) -> NoReturn:
    """Log, print ``Error: ...`` to stderr, and exit with ``exit_code``."""
    logger.error(user_message, extra={"error": str(exc) if exc else None, "exit_code": int(exit_code)})
    click.echo(f"\nError: {user_message}" + (f" - {exc}" if exc else ""), err=True)
    raise SystemExit(exit_code)


def load_ses_config(
    cli_ctx: CLIContext,
    *,
    region: str | None,
    endpoint_domain: str | None,
    timeout: float | None,
) -> SesConfig:
    """Load the ``[ses]`` section, apply flag overrides, and require credentials.

    Raises:
        SystemExit: 22 for invalid values, 78 when credentials are missing.
    """
    try:
        ses_config = apply_validated_overrides(
            cli_ctx.ses_config(),
            filter_sentinels(region=region, endpoint_domain=endpoint_domain, timeout=timeout),
        )
    except ValidationError as exc:
        fail("Invalid SES configuration", ExitCode.INVALID_ARGUMENT, exc=exc)

    if not ses_config.is_configured:
        click.echo(
            "\nError: email service not configured. Set ses.access_key_id and ses.secret_access_key "
            "(or AWS_SES_ACCESS_KEY_ID / AWS_SES_SECRET_ACCESS_KEY).",
            err=True,
        )
        click.echo(f"See: {__init__conf__.shell_command} config --section ses", err=True)
        logger.error("SES credentials not configured")
        raise SystemExit(ExitCode.CONFIG_ERROR)
    return ses_config


def resolve_recipients(recipients: Sequence[str], ses_config: SesConfig) -> list[str]:
    """Use ``--to`` values, else the configured defaults; validate and de-duplicate.

    Raises:
        SystemExit: 22 when none are given or one is malformed.
    """
    candidates = list(recipients) if recipients else list(ses_config.recipients)
    if not candidates:
        fail("No recipients. Pass --to or set ses.recipients.", ExitCode.INVALID_ARGUMENT)
    try:
        return validate_recipients(candidates)
    except InvalidRecipientError as exc:
        fail("Invalid recipient", ExitCode.INVALID_ARGUMENT, exc=exc)


def resolve_sender(from_address: str | None, ses_config: SesConfig) -> str:
    """Use ``--from``, else ``ses.from_address``.

    Raises:
        SystemExit: 78 when neither is set.
    """
    sender = from_address or ses_config.from_address
    if not sender:
        fail("No sender. Pass --from or set ses.from_address.", ExitCode.CONFIG_ERROR)
    return sender


def resolve_html(html: str | None, html_file: Path | None) -> str:
    """Return the HTML body from ``--html`` or ``--html-file`` (exactly one).

    Raises:
        SystemExit: 22 when both or neither are given, or the file is unreadable.
    """
    if (html is None) == (html_file is None):
        fail("Pass exactly one of --html or --html-file.", ExitCode.INVALID_ARGUMENT)
    if html is not None:
        return html
    try:
        return cast(Path, html_file).read_text(encoding="utf-8")
    except OSError as exc:
        fail("Cannot read HTML file", ExitCode.INVALID_ARGUMENT, exc=exc)


def bind_transport(cli_ctx: CLIContext, ses_config: SesConfig) -> Transport:
    """Return the configured transport with the SES timeout applied."""
    return functools.partial(cli_ctx.services.send_signed_request, timeout=ses_config.timeout)


def _outcome_record(recipient: str, outcome: SendOutcome) -> dict[str, str | None]:
    if isinstance(outcome, SendSuccess):
        return {"recipient": recipient, "status": "sent", "message_id": outcome.message_id}
    return {
        "recipient": recipient,
        "status": "failed",
        "error": outcome.error_message,
        "error_code": outcome.error_code,
    }


def report_outcomes(recipients: Sequence[str], outcomes: Sequence[SendOutcome], output_format: str) -> None:
    """Print one line (or JSON record) per recipient and set the exit status.

    Raises:
        SystemExit: 69 when any recipient failed.
    """
    records = [_outcome_record(recipient, outcome) for recipient, outcome in zip(recipients, outcomes)]
    failed = sum(1 for outcome in outcomes if isinstance(outcome, SendFailure))

    if OutputFormat(output_format.lower()) is OutputFormat.JSON:
        payload = {"sent": len(records) - failed, "failed": failed, "results": records}
        click.echo(orjson.dumps(payload, option=orjson.OPT_INDENT_2).decode())
    else:
        for record in records:
            detail = record.get("message_id") if record["status"] == "sent" else record.get("error")
            click.echo(f"{record['status']:<7} {record['recipient']}  {detail}")

    logger.info("Delivery finished", extra={"sent": len(records) - failed, "failed": failed})
    if failed:
        click.echo(f"\n{failed} of {len(records)} message(s) not sent.", err=True)
        raise SystemExit(ExitCode.DELIVERY_FAILURE)


def guard_configuration(operation: Callable[[], None]) -> None:
    """Run ``operation``, mapping a late ConfigurationError to exit code 78."""
    try:
        operation()
    except ConfigurationError as exc:
        fail("Configuration error", ExitCode.CONFIG_ERROR, exc=exc)


__all__ = [
    "apply_validated_overrides",
    "bind_transport",
    "fail",
    "filter_sentinels",
    "guard_configuration",
    "load_ses_config",
    "report_outcomes",
    "resolve_html",
    "resolve_recipients",
    "resolve_sender",
    "ses_config_options",
]
