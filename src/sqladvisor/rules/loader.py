"""Rule source loader - YAML rows to validated, immutable rule sets.

Source layout::

    rule_sets:
      - id: merge-vs-split
        fact: MergeDecisionFact
        outcomes: MergeStrategy
        rules:
          - order: 1
            name: audit-needs-merge
            when:
              - {field: needs_row_level_audit, op: eq, value: true}
            outcome: MERGE
            rationale:
              - Row-level audit via OUTPUT needs the single-statement form.

Validation is strict and fails fast: unknown keys, fact types, outcome
constants, condition fields or operators are all MALFORMED_SOURCE, and
duplicate (rule set, order) pairs are DUPLICATE_RULE_ORDER.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Any

import structlog
from pydantic import BaseModel, ConfigDict, Field, StrictInt, ValidationError, field_validator

from sqladvisor.config.constants import RULES_RESOURCE
from sqladvisor.core.errors import LoadError
from sqladvisor.core.sources import malformed_from_validation, read_yaml_source
from sqladvisor.facts.models import FACT_TYPES, Fact
from sqladvisor.rules.models import OUTCOME_TYPES, Condition, Operator, Rule, RuleSet
from sqladvisor.rules.repository import RuleRepository

log = structlog.get_logger()

_SOURCE = "rules"


class _ConditionRow(BaseModel):
    model_config = ConfigDict(extra="forbid")

    field: str
    op: str = "eq"
    value: Any


class _RuleRow(BaseModel):
    model_config = ConfigDict(extra="forbid")

    order: StrictInt
    name: str
    outcome: str
    rationale: list[str] = Field(min_length=1)
    when: list[_ConditionRow] = Field(default_factory=list)

    @field_validator("rationale", mode="before")
    @classmethod
    def single_line_rationale(cls, v: Any) -> Any:
        return [v] if isinstance(v, str) else v

    @field_validator("rationale")
    @classmethod
    def no_blank_lines(cls, v: list[str]) -> list[str]:
        if any(not line.strip() for line in v):
            raise ValueError("rationale lines must not be blank")
        return [line.strip() for line in v]


class _RuleSetRow(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: str
    fact: str
    outcomes: str
    description: str = ""
    rules: list[_RuleRow] = Field(min_length=1)


class _RulesDocument(BaseModel):
    model_config = ConfigDict(extra="forbid")

    version: int = 1
    rule_sets: list[_RuleSetRow]


def _coerce_value(hint: type, op: Operator, raw: Any, location: str) -> Any:
    """Check a condition constant against the fact field type."""
    if isinstance(hint, type) and issubclass(hint, Enum):
        if op.is_ordering:
            raise LoadError.malformed(_SOURCE, location, f"'{op.value}' not valid for enum field")
        if isinstance(raw, str):
            try:
                return hint[raw.upper()]
            except KeyError:
                pass
        allowed = ", ".join(m.name for m in hint)
        raise LoadError.malformed(_SOURCE, location, f"value {raw!r} is not one of {allowed}")
    if hint is bool:
        if op.is_ordering:
            raise LoadError.malformed(_SOURCE, location, f"'{op.value}' not valid for bool field")
        if not isinstance(raw, bool):
            raise LoadError.malformed(_SOURCE, location, f"value {raw!r} is not a bool")
        return raw
    if hint is int:
        if isinstance(raw, bool) or not isinstance(raw, int):
            raise LoadError.malformed(_SOURCE, location, f"value {raw!r} is not an int")
        return raw
    if hint is float:
        if isinstance(raw, bool) or not isinstance(raw, int | float):
            raise LoadError.malformed(_SOURCE, location, f"value {raw!r} is not a number")
        return float(raw)
    raise LoadError.malformed(_SOURCE, location, f"unsupported field type {hint!r}")


def _build_condition(
    row: _ConditionRow, fact_type: type[Fact], field_types: dict[str, type], location: str
) -> Condition:
    if row.field not in field_types:
        raise LoadError.malformed(
            _SOURCE, location, f"'{row.field}' is not a field of {fact_type.__name__}"
        )
    try:
        op = Operator(row.op.lower())
    except ValueError:
        allowed = ", ".join(o.value for o in Operator)
        raise LoadError.malformed(
            _SOURCE, location, f"unknown operator '{row.op}' (expected {allowed})"
        ) from None
    value = _coerce_value(field_types[row.field], op, row.value, location)
    return Condition(field=row.field, op=op, value=value)


def _build_rule_set(row: _RuleSetRow, location: str) -> RuleSet:
    where = f"{location}:{row.id}"
    fact_type = FACT_TYPES.get(row.fact)
    if fact_type is None:
        raise LoadError.malformed(_SOURCE, where, f"unknown fact type '{row.fact}'")
    outcome_type = OUTCOME_TYPES.get(row.outcomes)
    if outcome_type is None:
        raise LoadError.malformed(_SOURCE, where, f"unknown outcome type '{row.outcomes}'")

    field_types = fact_type.field_types()
    rules: list[Rule] = []
    seen: set[int] = set()
    for rule_row in row.rules:
        if rule_row.order in seen:
            raise LoadError.duplicate_rule_order(row.id, rule_row.order)
        seen.add(rule_row.order)

        rule_where = f"{where}#{rule_row.order}"
        try:
            outcome = outcome_type[rule_row.outcome.upper()]
        except KeyError:
            allowed = ", ".join(m.name for m in outcome_type)
            raise LoadError.malformed(
                _SOURCE,
                rule_where,
                f"outcome '{rule_row.outcome}' is not one of {allowed}",
            ) from None
        conditions = tuple(
            _build_condition(c, fact_type, field_types, rule_where) for c in rule_row.when
        )
        rules.append(
            Rule(
                order=rule_row.order,
                name=rule_row.name,
                outcome=outcome,
                rationale=tuple(rule_row.rationale),
                when=conditions,
            )
        )

    rules.sort(key=lambda r: r.order)
    return RuleSet(
        id=row.id,
        fact_type=fact_type,
        outcome_type=outcome_type,
        rules=tuple(rules),
        description=row.description,
    )


def parse_rules(data: dict[str, Any], location: str = "<memory>") -> RuleRepository:
    """Validate a rules document and build the repository."""
    try:
        doc = _RulesDocument.model_validate(data)
    except ValidationError as e:
        raise malformed_from_validation(_SOURCE, location, e) from e
    return RuleRepository(_build_rule_set(row, location) for row in doc.rule_sets)


def load_rules(path: Path | None = None, *, strict_totality: bool = False) -> RuleRepository:
    """Load rules from *path*, or the rules bundled with the package.

    Args:
        path: Rules YAML file. None selects the bundled rules.
        strict_totality: Warn for rule sets without a trailing catch-all.

    Raises:
        LoadError: On malformed rows or duplicate order indexes.
        ConfigError: If an explicit path does not exist.
    """
    data, location = read_yaml_source(path, RULES_RESOURCE, _SOURCE)
    repository = parse_rules(data, location)
    if strict_totality:
        for rule_set in repository:
            if not rule_set.is_total:
                log.warning(
                    "rule_set_not_total",
                    rule_set=rule_set.id,
                    last_rule=rule_set.rules[-1].name,
                )
    log.info("rules_loaded", location=location, rule_sets=repository.ids())
    return repository
