"""Rule engine - first-match-wins evaluation of a fact against a rule set."""

from __future__ import annotations

import structlog

from sqladvisor.core.errors import FactError, RuleError
from sqladvisor.facts.models import Fact
from sqladvisor.rules.models import Recommendation, Rule, RuleSet
from sqladvisor.rules.repository import RuleRepository

log = structlog.get_logger()


class RuleEngine:
    """Evaluates facts against the rule sets of one repository.

    Stateless apart from the repository it was built with, which is never
    mutated, so one engine may serve concurrent callers.
    """

    def __init__(self, repository: RuleRepository) -> None:
        self._repository = repository

    @property
    def repository(self) -> RuleRepository:
        return self._repository

    def rule_set(self, rule_set_id: str) -> RuleSet:
        """Get a rule set, raising UNKNOWN_RULE_SET if absent."""
        rule_set = self._repository.get(rule_set_id)
        if rule_set is None:
            raise RuleError.unknown_rule_set(rule_set_id, self._repository.ids())
        return rule_set

    def evaluate(self, rule_set_id: str, fact: Fact) -> Recommendation:
        """Return the recommendation of the first rule whose predicate holds.

        Rules are consulted in ascending order; later rules are never
        evaluated once one matches.

        Raises:
            RuleError: UNKNOWN_RULE_SET, or NO_RULE_MATCHED when every
                predicate is false for the fact.
            FactError: The fact is out of domain or of the wrong type for
                the rule set.
        """
        rule_set = self.rule_set(rule_set_id)
        if not isinstance(fact, rule_set.fact_type):
            raise FactError.invalid_fact(
                "*",
                type(fact).__name__,
                f"rule set '{rule_set_id}' expects {rule_set.fact_type.__name__}",
                fact.to_dict() if isinstance(fact, Fact) else None,
            )
        fact.check()

        rule = self._first_match(rule_set, fact)
        if rule is None:
            log.warning("no_rule_matched", rule_set=rule_set_id, fact=fact.to_dict())
            raise RuleError.no_rule_matched(rule_set_id, fact.to_dict())

        log.debug(
            "rule_matched",
            rule_set=rule_set_id,
            rule=rule.name,
            order=rule.order,
            outcome=rule.outcome.name,
        )
        return Recommendation.from_rule(rule_set_id, rule)

    @staticmethod
    def _first_match(rule_set: RuleSet, fact: Fact) -> Rule | None:
        for rule in rule_set.rules:
            if rule.matches(fact):
                return rule
        return None
