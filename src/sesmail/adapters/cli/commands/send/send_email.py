"""``send-email`` command: one HTML message per recipient via SendEmail."""

from __future__ import annotations

import logging
from pathlib import Path

import lib_log_rich.runtime
import rich_click as click

from sesmail.application.delivery import deliver_all

from ...constants import CLICK_CONTEXT_SETTINGS
from ...context import get_cli_context
from ._common import (
    bind_transport,
    guard_configuration,
    load_ses_config,
    report_outcomes,
    resolve_html,
    resolve_recipients,
    resolve_sender,
    ses_config_options,
)

logger = logging.getLogger(__name__)


@click.command("send-email", context_settings=CLICK_CONTEXT_SETTINGS)
@click.option(
    "--to",
    "recipients",
    multiple=True,
    help="Recipient address (repeatable; defaults to ses.recipients)",
)
@click.option("--subject", required=True, help="Subject line")
@click.option("--html", default=None, help="Rendered HTML body")
@click.option(
    "--html-file",
    type=click.Path(exists=False, dir_okay=False, path_type=Path),
    default=None,
    help="Read the HTML body from a file",
)
@click.option("--from", "from_address", default=None, help="Sender (defaults to ses.from_address)")
@ses_config_options
@click.pass_context
def cli_send_email(
    ctx: click.Context,
    recipients: tuple[str, ...],
    subject: str,
    html: str | None,
    html_file: Path | None,
    from_address: str | None,
    region: str | None,
    endpoint_domain: str | None,
    timeout: float | None,
    output_format: str,
) -> None:
    """Send an HTML email to each recipient independently.

    Exit status: 0 when every recipient was accepted, 69 when any failed,
    78 when SES is not configured, 22 for invalid options.
    """
    cli_ctx = get_cli_context(ctx)
    extra = {"command": "send-email", "recipients": list(recipients), "subject": subject}

    with lib_log_rich.runtime.bind(job_id="cli-send-email", extra=extra):
        ses_config = load_ses_config(cli_ctx, region=region, endpoint_domain=endpoint_domain, timeout=timeout)
        resolved = resolve_recipients(recipients, ses_config)
        sender = resolve_sender(from_address, ses_config)
        html_body = resolve_html(html, html_file)

        def _send() -> None:
            outcomes = deliver_all(
                recipients=resolved,
                subject=subject,
                html_body=html_body,
                from_address=sender,
                credentials=ses_config.signing_credentials(),
                transport=bind_transport(cli_ctx, ses_config),
                endpoint_domain=ses_config.endpoint_domain,
            )
            report_outcomes(resolved, outcomes, output_format)

        logger.info("Sending email", extra={"recipients": len(resolved), "subject": subject})
        guard_configuration(_send)


__all__ = ["cli_send_email"]
