"""Rule models - conditions, rules, rule sets and recommendations."""

from __future__ import annotations

import operator
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from sqladvisor.facts.models import Fact

# =============================================================================
# Outcomes
# =============================================================================


class ConstructChoice(Enum):
    """Query construct recommended for a query shape."""

    CTE = "CTE"
    SUBQUERY_INLINE = "SUBQUERY_INLINE"
    SUBQUERY_CORRELATED = "SUBQUERY_CORRELATED"
    CROSS_APPLY = "CROSS_APPLY"
    OUTER_APPLY = "OUTER_APPLY"


class FragmentationAction(Enum):
    """Index maintenance action for a fragmentation level."""

    NO_ACTION = "NO_ACTION"
    REORGANIZE = "REORGANIZE"
    REBUILD = "REBUILD"


class MergeStrategy(Enum):
    """Single MERGE statement or separate UPDATE then INSERT."""

    MERGE = "MERGE"
    UPDATE_THEN_INSERT = "UPDATE_THEN_INSERT"


OUTCOME_TYPES: dict[str, type[Enum]] = {
    cls.__name__: cls for cls in (ConstructChoice, FragmentationAction, MergeStrategy)
}
"""Outcome enums by name, as referenced from rule sources."""


# =============================================================================
# Conditions
# =============================================================================


class Operator(Enum):
    """Comparison applied between a fact field and a rule constant."""

    EQ = "eq"
    NE = "ne"
    LT = "lt"
    LE = "le"
    GT = "gt"
    GE = "ge"

    @property
    def symbol(self) -> str:
        return _SYMBOLS[self]

    @property
    def is_ordering(self) -> bool:
        return self not in (Operator.EQ, Operator.NE)

    def apply(self, left: Any, right: Any) -> bool:
        return _FUNCS[self](left, right)


_FUNCS: dict[Operator, Callable[[Any, Any], bool]] = {
    Operator.EQ: operator.eq,
    Operator.NE: operator.ne,
    Operator.LT: operator.lt,
    Operator.LE: operator.le,
    Operator.GT: operator.gt,
    Operator.GE: operator.ge,
}

_SYMBOLS: dict[Operator, str] = {
    Operator.EQ: "==",
    Operator.NE: "!=",
    Operator.LT: "<",
    Operator.LE: "<=",
    Operator.GT: ">",
    Operator.GE: ">=",
}


@dataclass(frozen=True, slots=True)
class Condition:
    """One comparison of a fact field against a constant."""

    field: str
    op: Operator
    value: Any

    def holds(self, fact: Fact) -> bool:
        return self.op.apply(getattr(fact, self.field), self.value)

    def describe(self) -> str:
        value = self.value.name if isinstance(self.value, Enum) else self.value
        if isinstance(value, bool):
            value = str(value).lower()
        return f"{self.field} {self.op.symbol} {value}"


# =============================================================================
# Rules
# =============================================================================


@dataclass(frozen=True, slots=True)
class Rule:
    """A guarded outcome. Matches when every condition holds."""

    order: int
    name: str
    outcome: Enum
    rationale: tuple[str, ...]
    when: tuple[Condition, ...] = ()

    @property
    def is_unconditional(self) -> bool:
        return not self.when

    def matches(self, fact: Fact) -> bool:
        return all(c.holds(fact) for c in self.when)

    def describe(self) -> str:
        """Predicate in readable form, e.g. 'reuse_count >= 2 AND ...'."""
        if not self.when:
            return "always"
        return " AND ".join(c.describe() for c in self.when)


@dataclass(frozen=True, slots=True)
class RuleSet:
    """Ordered rules for one advisory domain. Evaluated first-match-wins."""

    id: str
    fact_type: type[Fact]
    outcome_type: type[Enum]
    rules: tuple[Rule, ...]
    description: str = ""

    @property
    def is_total(self) -> bool:
        """True when the last rule is a catch-all."""
        return bool(self.rules) and self.rules[-1].is_unconditional


@dataclass(frozen=True, slots=True)
class Recommendation:
    """Outcome of evaluating a fact against a rule set.

    ``rationale`` is the matched rule's justification and is never empty.
    """

    rule_set_id: str
    outcome: Enum
    rationale: tuple[str, ...]
    rule_order: int
    rule_name: str

    @classmethod
    def from_rule(cls, rule_set_id: str, rule: Rule) -> Recommendation:
        return cls(
            rule_set_id=rule_set_id,
            outcome=rule.outcome,
            rationale=rule.rationale,
            rule_order=rule.order,
            rule_name=rule.name,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "rule_set_id": self.rule_set_id,
            "outcome": self.outcome.value,
            "rationale": list(self.rationale),
            "rule_order": self.rule_order,
            "rule_name": self.rule_name,
        }
