"""``info`` command: package metadata and SES readiness."""

from __future__ import annotations

import logging

import lib_log_rich.runtime
import rich_click as click
from pydantic import ValidationError

from sesmail import __init__conf__

from ..constants import CLICK_CONTEXT_SETTINGS
from ..context import get_cli_context

logger = logging.getLogger(__name__)


@click.command("info", context_settings=CLICK_CONTEXT_SETTINGS)
@click.pass_context
def cli_info(ctx: click.Context) -> None:
    """Print package metadata and whether SES credentials are configured.

    Never prints credential values; only the region, endpoint, and a
    configured yes/no.
    """
    cli_ctx = get_cli_context(ctx)
    with lib_log_rich.runtime.bind(job_id="cli-info", extra={"command": "info"}):
        logger.info("Displaying package information")
        __init__conf__.print_info()
        try:
            ses = cli_ctx.ses_config()
        except ValidationError as exc:
            click.echo(f"\n    ses config       = invalid ({exc.error_count()} error(s))")
            return
        click.echo(f"\n    ses configured   = {'yes' if ses.is_configured else 'no'}")
        click.echo(f"    ses region       = {ses.region}")
        click.echo(f"    ses endpoint     = {ses.endpoint_url}")
        click.echo(f"    ses sender       = {ses.from_address or '(not set)'}")


__all__ = ["cli_info"]
