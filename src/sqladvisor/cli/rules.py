"""Rule commands - rules, validate."""

from __future__ import annotations

from pathlib import Path

import click

from sqladvisor.advisor.snapshot import load_snapshot
from sqladvisor.cli.render import get_console, render_rule_set
from sqladvisor.cli.utils import echo_json, fail, get_advisor
from sqladvisor.config.models import AdvisorConfig
from sqladvisor.core.errors import AdvisorError
from sqladvisor.core.formatting import pluralize, truncate_at_word


@click.command()
@click.argument("rule_set_id", required=False)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def rules_command(ctx: click.Context, rule_set_id: str | None, as_json: bool) -> None:
    """Show the ordered rules of RULE_SET_ID, or list rule set ids."""
    advisor = get_advisor(ctx)
    if rule_set_id is None:
        ids = advisor.rule_set_ids()
        if as_json:
            echo_json(ids)
        else:
            for rid in ids:
                description = advisor.describe_rules(rid).description
                click.echo(f"{rid:<24} {truncate_at_word(description, 60)}".rstrip())
        return

    try:
        rule_set = advisor.describe_rules(rule_set_id)
    except AdvisorError as e:
        fail(ctx, e)
    if as_json:
        echo_json(
            {
                "id": rule_set.id,
                "fact": rule_set.fact_type.__name__,
                "outcomes": rule_set.outcome_type.__name__,
                "rules": [
                    {
                        "order": r.order,
                        "name": r.name,
                        "when": r.describe(),
                        "outcome": r.outcome.name,
                        "rationale": list(r.rationale),
                    }
                    for r in rule_set.rules
                ],
            }
        )
    else:
        render_rule_set(rule_set)


@click.command()
@click.option(
    "--rules",
    "rules_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Rules file (default: configured or bundled)",
)
@click.option(
    "--capabilities",
    "capabilities_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Capability matrix file (default: configured or bundled)",
)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def validate_command(
    ctx: click.Context,
    rules_path: Path | None,
    capabilities_path: Path | None,
    as_json: bool,
) -> None:
    """Load and validate the knowledge sources without serving requests."""
    config: AdvisorConfig = ctx.ensure_object(dict).get("config") or AdvisorConfig()
    knowledge = config.knowledge
    if rules_path is None and knowledge.rules_path:
        rules_path = Path(knowledge.rules_path)
    if capabilities_path is None and knowledge.capabilities_path:
        capabilities_path = Path(knowledge.capabilities_path)

    try:
        snapshot = load_snapshot(
            rules_path, capabilities_path, strict_totality=knowledge.strict_totality
        )
    except AdvisorError as e:
        fail(ctx, e)

    repository = snapshot.engine.repository
    rule_count = sum(len(rs.rules) for rs in repository)
    entry_count = len(snapshot.resolver.matrix)
    if as_json:
        echo_json(
            {
                "valid": True,
                "rules": snapshot.rules_location,
                "rule_sets": repository.ids(),
                "rule_count": rule_count,
                "capabilities": snapshot.capabilities_location,
                "capability_entries": entry_count,
            }
        )
        return

    console = get_console()
    console.print(
        f"Rules OK: {pluralize(len(repository), 'rule set')}, "
        f"{pluralize(rule_count, 'rule')} ({snapshot.rules_location})",
        markup=False,
    )
    console.print(
        f"Capabilities OK: {pluralize(entry_count, 'entry', 'entries')} "
        f"({snapshot.capabilities_location})",
        markup=False,
    )
