"""Capability commands - capability, compare, capabilities."""

from __future__ import annotations

import click

from sqladvisor.capabilities.models import CapabilityCategory, Environment
from sqladvisor.cli.render import render_status, render_status_table
from sqladvisor.cli.utils import echo_json, fail, get_advisor
from sqladvisor.core.errors import AdvisorError


@click.command()
@click.argument("name")
@click.argument("environment")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def capability_command(ctx: click.Context, name: str, environment: str, as_json: bool) -> None:
    """Resolve capability NAME in ENVIRONMENT (on-prem, azure-iaas, managed-instance)."""
    advisor = get_advisor(ctx)
    try:
        status = advisor.resolve_capability(name, environment)
    except AdvisorError as e:
        fail(ctx, e)
    if as_json:
        echo_json(status.to_dict())
    else:
        render_status(status)


@click.command()
@click.argument("name")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def compare_command(ctx: click.Context, name: str, as_json: bool) -> None:
    """Show capability NAME across every environment."""
    advisor = get_advisor(ctx)
    try:
        by_env = advisor.compare_capability(name)
    except AdvisorError as e:
        fail(ctx, e)
    if as_json:
        echo_json({env.value: status.to_dict() for env, status in by_env.items()})
    else:
        render_status_table(by_env.values())


@click.command()
@click.option(
    "--environment",
    "-e",
    type=click.Choice([e.value for e in Environment], case_sensitive=False),
    help="Only this environment",
)
@click.option(
    "--category",
    "-c",
    type=click.Choice([c.value for c in CapabilityCategory], case_sensitive=False),
    help="Only this category",
)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def capabilities_command(
    ctx: click.Context, environment: str | None, category: str | None, as_json: bool
) -> None:
    """List the capability matrix."""
    advisor = get_advisor(ctx)
    try:
        entries = advisor.list_capabilities(environment, category)
    except AdvisorError as e:
        fail(ctx, e)
    if as_json:
        echo_json([s.to_dict() for s in entries])
    else:
        render_status_table(entries)
