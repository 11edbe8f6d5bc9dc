"""SQL Advisor CLI - sqladvisor command."""

from pathlib import Path

import click

from sqladvisor import __version__
from sqladvisor.cli.advise import construct_command, fragmentation_command, merge_command
from sqladvisor.cli.capability import capabilities_command, capability_command, compare_command
from sqladvisor.cli.rules import rules_command, validate_command
from sqladvisor.config.loader import load_config
from sqladvisor.core.errors import ConfigError
from sqladvisor.core.logging import configure_logging, set_request_id


@click.group()
@click.version_option(version=__version__, prog_name="sqladvisor")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Config file (default: .sqladvisor/config.yaml)",
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool, config_path: Path | None) -> None:
    """SQL Advisor - rule-driven guidance for SQL Server engineering choices."""
    ctx.ensure_object(dict)
    try:
        config = load_config(config_path=config_path)
    except ConfigError as e:
        raise click.ClickException(str(e)) from e
    if verbose:
        config.logging.level = "DEBUG"
    configure_logging(config=config.logging)
    set_request_id()
    ctx.obj["verbose"] = verbose
    ctx.obj["config"] = config


cli.add_command(construct_command, name="construct")
cli.add_command(fragmentation_command, name="fragmentation")
cli.add_command(merge_command, name="merge")
cli.add_command(capability_command, name="capability")
cli.add_command(compare_command, name="compare")
cli.add_command(capabilities_command, name="capabilities")
cli.add_command(rules_command, name="rules")
cli.add_command(validate_command, name="validate")


if __name__ == "__main__":
    cli()
