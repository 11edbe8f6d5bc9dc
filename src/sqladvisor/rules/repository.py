"""Rule repository - read-only registry of rule sets keyed by id."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from types import MappingProxyType

from sqladvisor.core.errors import LoadError
from sqladvisor.rules.models import RuleSet

CONSTRUCT_SELECTION = "construct-selection"
FRAGMENTATION_ACTION = "fragmentation-action"
MERGE_VS_SPLIT = "merge-vs-split"


class RuleRepository:
    """Registry of rule sets.

    Populated once in the constructor and read-only afterwards; replacing the
    rules means building a new repository.
    """

    def __init__(self, rule_sets: Iterable[RuleSet] = ()) -> None:
        sets: dict[str, RuleSet] = {}
        for rule_set in rule_sets:
            if rule_set.id in sets:
                raise LoadError.duplicate_rule_set(rule_set.id)
            seen: set[int] = set()
            for rule in rule_set.rules:
                if rule.order in seen:
                    raise LoadError.duplicate_rule_order(rule_set.id, rule.order)
                seen.add(rule.order)
            sets[rule_set.id] = rule_set
        self._sets = MappingProxyType(sets)

    def get(self, rule_set_id: str) -> RuleSet | None:
        """Get rule set by id."""
        return self._sets.get(rule_set_id)

    def ids(self) -> list[str]:
        return list(self._sets)

    def all(self) -> list[RuleSet]:
        """Get all registered rule sets."""
        return list(self._sets.values())

    def __contains__(self, rule_set_id: object) -> bool:
        return rule_set_id in self._sets

    def __iter__(self) -> Iterator[RuleSet]:
        return iter(self._sets.values())

    def __len__(self) -> int:
        return len(self._sets)
