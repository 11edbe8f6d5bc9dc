"""Recommendation commands - construct, fragmentation, merge."""

from __future__ import annotations

import click

from sqladvisor.cli.render import render_recommendation
from sqladvisor.cli.utils import echo_json, fail, get_advisor
from sqladvisor.core.errors import AdvisorError
from sqladvisor.core.formatting import format_percent
from sqladvisor.facts.models import Fact, FragmentationFact, MergeDecisionFact, QueryShapeFact
from sqladvisor.rules.models import Recommendation


def _emit(fact: Fact, rec: Recommendation, as_json: bool, subject: str | None = None) -> None:
    if as_json:
        echo_json({"fact": fact.to_dict(), "recommendation": rec.to_dict()})
        return
    if subject:
        click.echo(subject)
    render_recommendation(rec)


@click.command()
@click.option("--recursive", "needs_recursion", is_flag=True, help="Query walks a hierarchy")
@click.option("--correlated", "is_correlated", is_flag=True, help="References outer columns")
@click.option(
    "--tvf", "invokes_tvf", is_flag=True, help="Invokes a table-valued function per outer row"
)
@click.option("--reuse-count", type=int, default=0, show_default=True, help="Times referenced")
@click.option(
    "--cardinality",
    type=click.Choice(["scalar", "set"], case_sensitive=False),
    default="scalar",
    show_default=True,
    help="Single value or row set",
)
@click.option("--optional", "relation_optional", is_flag=True, help="Outer rows must survive")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def construct_command(
    ctx: click.Context,
    needs_recursion: bool,
    is_correlated: bool,
    invokes_tvf: bool,
    reuse_count: int,
    cardinality: str,
    relation_optional: bool,
    as_json: bool,
) -> None:
    """Recommend CTE, subquery or APPLY for a query shape."""
    advisor = get_advisor(ctx)
    try:
        fact = QueryShapeFact.from_mapping(
            {
                "needs_recursion": needs_recursion,
                "is_correlated": is_correlated,
                "invokes_table_valued_function": invokes_tvf,
                "reuse_count": reuse_count,
                "result_cardinality_hint": cardinality,
                "relation_optional": relation_optional,
            }
        )
        rec = advisor.select_construct(fact)
    except AdvisorError as e:
        fail(ctx, e)
    _emit(fact, rec, as_json)


@click.command()
@click.argument("percent", type=float)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def fragmentation_command(ctx: click.Context, percent: float, as_json: bool) -> None:
    """Recommend index maintenance for PERCENT average fragmentation."""
    advisor = get_advisor(ctx)
    try:
        fact = FragmentationFact.from_mapping({"fragmentation_percent": percent})
        rec = advisor.fragmentation_action(fact)
    except AdvisorError as e:
        fail(ctx, e)
    _emit(fact, rec, as_json, f"Fragmentation: {format_percent(percent)}")


@click.command()
@click.option("--branches", type=int, default=0, show_default=True, help="Conditional WHEN branches")
@click.option("--audit", is_flag=True, help="Row-level audit of changes is required")
@click.option(
    "--rows",
    type=click.Choice(["small", "large"], case_sensitive=False),
    default="small",
    show_default=True,
    help="Estimated rows touched",
)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def merge_command(
    ctx: click.Context, branches: int, audit: bool, rows: str, as_json: bool
) -> None:
    """Recommend a single MERGE or UPDATE then INSERT."""
    advisor = get_advisor(ctx)
    try:
        fact = MergeDecisionFact.from_mapping(
            {
                "conditional_branch_count": branches,
                "needs_row_level_audit": audit,
                "estimated_row_count": rows,
            }
        )
        rec = advisor.merge_or_split(fact)
    except AdvisorError as e:
        fail(ctx, e)
    _emit(fact, rec, as_json)
