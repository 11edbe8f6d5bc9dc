"""Tests for first-match-wins rule evaluation."""

import pytest

from sqladvisor.core.errors import ErrorCode, FactError, RuleError
from sqladvisor.facts.models import FragmentationFact, MergeDecisionFact
from sqladvisor.rules.engine import RuleEngine
from sqladvisor.rules.models import (
    Condition,
    FragmentationAction,
    Operator,
    Rule,
    RuleSet,
)
from sqladvisor.rules.repository import RuleRepository


def _engine(*rules: Rule) -> RuleEngine:
    rule_set = RuleSet("frag", FragmentationFact, FragmentationAction, tuple(rules))
    return RuleEngine(RuleRepository([rule_set]))


def _above(order: int, threshold: float, outcome: FragmentationAction) -> Rule:
    return Rule(
        order=order,
        name=f"above-{threshold}",
        outcome=outcome,
        rationale=(f"above {threshold}",),
        when=(Condition("fragmentation_percent", Operator.GE, threshold),),
    )


class TestEvaluate:
    def test_first_match_wins(self) -> None:
        # Both rules hold for 50%; the lower order decides.
        engine = _engine(
            _above(1, 10.0, FragmentationAction.REORGANIZE),
            _above(2, 40.0, FragmentationAction.REBUILD),
        )

        rec = engine.evaluate("frag", FragmentationFact(fragmentation_percent=50.0))

        assert rec.outcome is FragmentationAction.REORGANIZE
        assert rec.rule_order == 1
        assert rec.rule_name == "above-10.0"
        assert rec.rationale == ("above 10.0",)

    def test_falls_through_to_later_rule(self) -> None:
        engine = _engine(
            _above(1, 40.0, FragmentationAction.REBUILD),
            Rule(2, "rest", FragmentationAction.NO_ACTION, ("rest",)),
        )

        rec = engine.evaluate("frag", FragmentationFact(fragmentation_percent=12.0))

        assert rec.outcome is FragmentationAction.NO_ACTION

    def test_no_rule_matched(self) -> None:
        engine = _engine(_above(1, 40.0, FragmentationAction.REBUILD))

        with pytest.raises(RuleError) as exc_info:
            engine.evaluate("frag", FragmentationFact(fragmentation_percent=12.0))

        err = exc_info.value
        assert err.code == ErrorCode.NO_RULE_MATCHED
        assert err.details["rule_set_id"] == "frag"
        assert err.details["fact"] == {"fragmentation_percent": 12.0}

    def test_unknown_rule_set(self) -> None:
        engine = _engine(_above(1, 0.0, FragmentationAction.NO_ACTION))

        with pytest.raises(RuleError) as exc_info:
            engine.evaluate("index-advice", FragmentationFact())

        assert exc_info.value.code == ErrorCode.UNKNOWN_RULE_SET
        assert exc_info.value.details["known"] == ["frag"]

    def test_wrong_fact_type(self) -> None:
        engine = _engine(_above(1, 0.0, FragmentationAction.NO_ACTION))

        with pytest.raises(FactError) as exc_info:
            engine.evaluate("frag", MergeDecisionFact())  # type: ignore[arg-type]

        assert exc_info.value.code == ErrorCode.INVALID_FACT
        assert "expects FragmentationFact" in exc_info.value.message

    def test_out_of_domain_fact(self) -> None:
        engine = _engine(Rule(1, "any", FragmentationAction.NO_ACTION, ("x",)))

        with pytest.raises(FactError) as exc_info:
            engine.evaluate("frag", FragmentationFact(fragmentation_percent=150.0))

        assert exc_info.value.details["field"] == "fragmentation_percent"

    def test_deterministic(self) -> None:
        engine = _engine(
            _above(1, 30.0, FragmentationAction.REBUILD),
            Rule(2, "rest", FragmentationAction.NO_ACTION, ("rest",)),
        )
        fact = FragmentationFact(fragmentation_percent=31.0)

        assert engine.evaluate("frag", fact) == engine.evaluate("frag", fact)


class TestRuleSetLookup:
    def test_rule_set(self) -> None:
        engine = _engine(_above(1, 0.0, FragmentationAction.NO_ACTION))

        assert engine.rule_set("frag").id == "frag"

    def test_unknown(self) -> None:
        engine = RuleEngine(RuleRepository())

        with pytest.raises(RuleError):
            engine.rule_set("frag")
