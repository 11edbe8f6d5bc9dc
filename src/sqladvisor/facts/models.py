"""Fact models - what the caller declares about a query or a table.

Facts carry no logic beyond domain checks. They are frozen once built and
the rule engine validates them with ``check()`` before evaluating, so an
out-of-domain fact is reported with the fact itself attached.
"""

from __future__ import annotations

import math
import typing
from dataclasses import asdict, dataclass, fields
from enum import Enum
from typing import Any, ClassVar, Self

from sqladvisor.config.constants import FRAGMENTATION_MAX, FRAGMENTATION_MIN
from sqladvisor.core.errors import FactError


class CardinalityHint(Enum):
    """Whether a subquery yields one value or a set of rows."""

    SCALAR = "SCALAR"
    SET = "SET"


class RowCountEstimate(Enum):
    """Rough size of the rows touched by an upsert."""

    SMALL = "SMALL"
    LARGE = "LARGE"


@dataclass(frozen=True, slots=True)
class Fact:
    """Base for all facts. Subclasses are frozen dataclasses."""

    kind: ClassVar[str] = "fact"

    @classmethod
    def field_types(cls) -> dict[str, type]:
        """Resolved field annotations, keyed by field name."""
        hints = typing.get_type_hints(cls)
        return {f.name: hints[f.name] for f in fields(cls)}

    @classmethod
    def from_mapping(cls, data: dict[str, Any]) -> Self:
        """Build a fact from loosely typed input (JSON, CLI options).

        Enum fields accept their member names in any case. Unknown keys are
        rejected so a typo never silently falls back to a default.
        """
        types = cls.field_types()
        unknown = sorted(set(data) - set(types))
        if unknown:
            raise FactError.invalid_fact(unknown[0], data[unknown[0]], "unknown field")
        values: dict[str, Any] = {}
        for name, raw in data.items():
            hint = types[name]
            if isinstance(hint, type) and issubclass(hint, Enum) and isinstance(raw, str):
                try:
                    values[name] = hint[raw.upper()]
                except KeyError:
                    allowed = ", ".join(m.name for m in hint)
                    raise FactError.invalid_fact(
                        name, raw, f"expected one of {allowed}"
                    ) from None
            else:
                values[name] = raw
        try:
            fact = cls(**values)
        except TypeError as e:
            raise FactError.invalid_fact("*", data, str(e)) from e
        fact.check()
        return fact

    def to_dict(self) -> dict[str, Any]:
        """Plain representation used in error details and JSON output."""
        return {k: (v.value if isinstance(v, Enum) else v) for k, v in asdict(self).items()}

    def check(self) -> None:
        """Raise FactError if any field is outside its domain."""
        for name, hint in self.field_types().items():
            value = getattr(self, name)
            if hint is bool:
                ok = isinstance(value, bool)
            elif hint is int:
                ok = isinstance(value, int) and not isinstance(value, bool)
            elif hint is float:
                ok = isinstance(value, int | float) and not isinstance(value, bool)
            elif isinstance(hint, type) and issubclass(hint, Enum):
                ok = isinstance(value, hint)
            else:
                ok = True
            if not ok:
                raise FactError.invalid_fact(
                    name, repr(value), f"expected {hint.__name__}", self.to_dict()
                )

    def _reject(self, field: str, reason: str) -> FactError:
        return FactError.invalid_fact(field, getattr(self, field), reason, self.to_dict())


@dataclass(frozen=True, slots=True)
class QueryShapeFact(Fact):
    """Shape of a query fragment that needs a construct.

    ``relation_optional`` marks a table-valued relation whose absence must be
    tolerated (outer semantics). It defaults to False, which yields
    CROSS APPLY rather than OUTER APPLY.
    """

    kind: ClassVar[str] = "query-shape"

    needs_recursion: bool = False
    is_correlated: bool = False
    invokes_table_valued_function: bool = False
    reuse_count: int = 0
    result_cardinality_hint: CardinalityHint = CardinalityHint.SCALAR
    relation_optional: bool = False

    def check(self) -> None:
        Fact.check(self)
        if self.reuse_count < 0:
            raise self._reject("reuse_count", "must be >= 0")


@dataclass(frozen=True, slots=True)
class FragmentationFact(Fact):
    """Average index fragmentation, as a percentage."""

    kind: ClassVar[str] = "fragmentation"

    fragmentation_percent: float = 0.0

    def check(self) -> None:
        Fact.check(self)
        value = float(self.fragmentation_percent)
        if math.isnan(value) or not (FRAGMENTATION_MIN <= value <= FRAGMENTATION_MAX):
            raise self._reject(
                "fragmentation_percent",
                f"must be between {FRAGMENTATION_MIN:g} and {FRAGMENTATION_MAX:g}",
            )


@dataclass(frozen=True, slots=True)
class MergeDecisionFact(Fact):
    """Characteristics of an upsert: one MERGE or UPDATE then INSERT."""

    kind: ClassVar[str] = "merge-decision"

    conditional_branch_count: int = 0
    needs_row_level_audit: bool = False
    estimated_row_count: RowCountEstimate = RowCountEstimate.SMALL

    def check(self) -> None:
        Fact.check(self)
        if self.conditional_branch_count < 0:
            raise self._reject("conditional_branch_count", "must be >= 0")


FACT_TYPES: dict[str, type[Fact]] = {
    cls.__name__: cls for cls in (QueryShapeFact, FragmentationFact, MergeDecisionFact)
}
"""Fact classes by name, as referenced from rule sources."""
