"""CLI utilities."""

from __future__ import annotations

import json
from typing import Any, NoReturn

import click
import structlog

from sqladvisor.advisor.facade import Advisor
from sqladvisor.config.models import AdvisorConfig
from sqladvisor.core.errors import AdvisorError
from sqladvisor.core.logging import get_log_file_path

log = structlog.get_logger()


def get_advisor(ctx: click.Context) -> Advisor:
    """Build the advisor once per invocation from the loaded config.

    Raises:
        click.ClickException: If the knowledge sources fail to load
    """
    obj = ctx.ensure_object(dict)
    advisor = obj.get("advisor")
    if advisor is None:
        config: AdvisorConfig = obj.get("config") or AdvisorConfig()
        try:
            advisor = Advisor.from_config(config)
        except AdvisorError as e:
            fail(ctx, e)
        obj["advisor"] = advisor
    return advisor


def echo_json(data: Any) -> None:
    click.echo(json.dumps(data, indent=2, sort_keys=False))


def fail(ctx: click.Context, error: AdvisorError) -> NoReturn:
    """Report an advisor error and exit with status 1.

    With --json the structured error goes to stdout so scripts can parse it.
    Otherwise the message points at the log file when one is configured.
    """
    log.error(
        "command_failed",
        command=ctx.info_name,
        error=error.error_name,
        message=error.message,
        details=error.details,
    )
    if ctx.params.get("as_json"):
        echo_json({"error": error.to_dict()})
        ctx.exit(1)
    log_file = get_log_file_path()
    if log_file:
        raise click.ClickException(f"{error}. See {log_file} for details.")
    raise click.ClickException(str(error))
