"""Rich renderers for recommendations and capability statuses."""

from __future__ import annotations

from collections.abc import Iterable

from rich.console import Console
from rich.table import Table
from rich.text import Text

from sqladvisor.capabilities.models import Availability, CapabilityStatus
from sqladvisor.core.formatting import format_rationale, humanize_constant, pluralize
from sqladvisor.rules.models import Recommendation, RuleSet

_STATUS_STYLES = {
    Availability.FULL: "green",
    Availability.PARTIAL: "yellow",
    Availability.NOT_AVAILABLE: "red",
    Availability.MANAGED_EXTERNALLY: "cyan",
}


def get_console() -> Console:
    # Created per call so click's output capture sees it
    return Console(highlight=False, soft_wrap=True)


def render_recommendation(rec: Recommendation, console: Console | None = None) -> None:
    console = console or get_console()
    headline = Text("Recommendation: ", style="bold")
    headline.append(rec.outcome.name, style="bold green")
    headline.append(f"  ({humanize_constant(rec.outcome.name)})", style="dim")
    console.print(headline)
    console.print(
        Text(f"Rule: {rec.rule_set_id} #{rec.rule_order} {rec.rule_name}", style="dim")
    )
    console.print(Text("Rationale:", style="bold"))
    for line in format_rationale(rec.rationale).splitlines():
        console.print(Text(f"  {line}"))


def _status_text(status: Availability) -> Text:
    return Text(status.value, style=_STATUS_STYLES[status])


def render_status(status: CapabilityStatus, console: Console | None = None) -> None:
    console = console or get_console()
    line = Text(f"{status.name} @ {status.environment.value}: ", style="bold")
    line.append_text(_status_text(status.status))
    console.print(line)
    if status.constraint_note:
        console.print(Text(f"  {status.constraint_note}"))


def render_status_table(
    statuses: Iterable[CapabilityStatus],
    *,
    title: str | None = None,
    console: Console | None = None,
) -> None:
    console = console or get_console()
    rows = list(statuses)
    table = Table(title=title, show_lines=False, pad_edge=False)
    table.add_column("Capability", no_wrap=True)
    table.add_column("Environment", no_wrap=True)
    table.add_column("Status", no_wrap=True)
    table.add_column("Note")
    for s in rows:
        table.add_row(
            Text(s.name),
            Text(s.environment.value),
            _status_text(s.status),
            Text(s.constraint_note or ""),
        )
    console.print(table)
    console.print(Text(pluralize(len(rows), "entry", "entries"), style="dim"))


def render_rule_set(rule_set: RuleSet, console: Console | None = None) -> None:
    console = console or get_console()
    table = Table(title=f"{rule_set.id}: {rule_set.description}".rstrip(": "), pad_edge=False)
    table.add_column("#", justify="right", no_wrap=True)
    table.add_column("Rule", no_wrap=True)
    table.add_column("When")
    table.add_column("Outcome", no_wrap=True)
    for rule in rule_set.rules:
        table.add_row(
            str(rule.order),
            Text(rule.name),
            Text(rule.describe()),
            Text(rule.outcome.name, style="bold"),
        )
    console.print(table)
