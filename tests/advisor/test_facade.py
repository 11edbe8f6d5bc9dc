"""Tests for the Advisor facade and snapshot reloading."""

from pathlib import Path

import pytest

from sqladvisor.advisor import Advisor, KnowledgeSnapshot, load_snapshot
from sqladvisor.capabilities.models import Availability, CapabilityCategory, Environment
from sqladvisor.config.models import AdvisorConfig, KnowledgeConfig
from sqladvisor.core.errors import ConfigError, ErrorCode, FactError, LoadError, RuleError
from sqladvisor.facts.models import (
    CardinalityHint,
    FragmentationFact,
    MergeDecisionFact,
    QueryShapeFact,
)
from sqladvisor.rules.models import ConstructChoice, FragmentationAction, MergeStrategy

_ALWAYS_REBUILD = """
rule_sets:
  - id: fragmentation-action
    fact: FragmentationFact
    outcomes: FragmentationAction
    rules:
      - order: 1
        name: always-rebuild
        outcome: REBUILD
        rationale: Rebuild regardless.
"""

_SMALL_MATRIX = """
capabilities:
  - name: Query Store
    category: PLATFORM
    rows:
      - {environment: ON_PREM, status: NOT_AVAILABLE}
"""


class TestRecommendations:
    def test_select_construct(self, advisor: Advisor) -> None:
        rec = advisor.select_construct(QueryShapeFact(needs_recursion=True))

        assert rec.outcome is ConstructChoice.CTE
        assert rec.rule_set_id == "construct-selection"

    def test_fragmentation_accepts_bare_percent(self, advisor: Advisor) -> None:
        assert advisor.fragmentation_action(35.0).outcome is FragmentationAction.REBUILD
        assert advisor.fragmentation_action(5).outcome is FragmentationAction.REORGANIZE

    def test_fragmentation_out_of_range(self, advisor: Advisor) -> None:
        with pytest.raises(FactError):
            advisor.fragmentation_action(-1.0)

    def test_merge_or_split(self, advisor: Advisor) -> None:
        rec = advisor.merge_or_split(MergeDecisionFact(needs_row_level_audit=True))

        assert rec.outcome is MergeStrategy.MERGE

    def test_evaluate_by_id(self, advisor: Advisor) -> None:
        rec = advisor.evaluate("fragmentation-action", FragmentationFact(4.9))

        assert rec.outcome is FragmentationAction.NO_ACTION

    def test_evaluate_unknown_rule_set(self, advisor: Advisor) -> None:
        with pytest.raises(RuleError) as exc_info:
            advisor.evaluate("statistics-refresh", FragmentationFact())

        assert exc_info.value.code == ErrorCode.UNKNOWN_RULE_SET

    def test_describe_rules(self, advisor: Advisor) -> None:
        rule_set = advisor.describe_rules("merge-vs-split")

        assert [r.name for r in rule_set.rules][0] == "audit-needs-merge"
        assert advisor.rule_set_ids() == [
            "construct-selection",
            "fragmentation-action",
            "merge-vs-split",
        ]


class TestCapabilities:
    def test_resolve(self, advisor: Advisor) -> None:
        status = advisor.resolve_capability("Query Store", "managed-instance")

        assert status.status is Availability.FULL

    def test_compare(self, advisor: Advisor) -> None:
        assert set(advisor.compare_capability("OS Access")) == set(Environment)

    def test_list(self, advisor: Advisor) -> None:
        entries = advisor.list_capabilities(category=CapabilityCategory.SECURITY)

        assert entries
        assert all(e.category is CapabilityCategory.SECURITY for e in entries)


class TestConstruction:
    def test_from_default_config_uses_bundled_sources(self) -> None:
        advisor = Advisor.from_config()

        assert advisor.snapshot.rules_location == "bundled"
        assert advisor.snapshot.capabilities_location == "bundled"

    def test_from_config_paths(self, write_yaml) -> None:  # type: ignore[no-untyped-def]
        rules = write_yaml(_ALWAYS_REBUILD, "rules.yaml")
        config = AdvisorConfig(knowledge=KnowledgeConfig(rules_path=str(rules)))

        advisor = Advisor.from_config(config)

        assert advisor.snapshot.rules_location == str(rules)
        assert advisor.fragmentation_action(0.0).outcome is FragmentationAction.REBUILD

    def test_missing_source_fails(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError):
            Advisor.load(rules_path=tmp_path / "missing.yaml")

    def test_construct_needs_rule_set(self, write_yaml) -> None:  # type: ignore[no-untyped-def]
        advisor = Advisor.load(rules_path=write_yaml(_ALWAYS_REBUILD))

        with pytest.raises(RuleError) as exc_info:
            advisor.select_construct(QueryShapeFact())

        assert exc_info.value.code == ErrorCode.UNKNOWN_RULE_SET


class TestReload:
    def test_reload_swaps_snapshot(self, write_yaml) -> None:  # type: ignore[no-untyped-def]
        advisor = Advisor.load()
        before = advisor.snapshot

        after = advisor.reload(
            rules_path=write_yaml(_ALWAYS_REBUILD, "rules.yaml"),
            capabilities_path=write_yaml(_SMALL_MATRIX, "caps.yaml"),
        )

        assert advisor.snapshot is after
        assert after is not before
        assert advisor.fragmentation_action(1.0).outcome is FragmentationAction.REBUILD
        status = advisor.resolve_capability("Query Store", Environment.ON_PREM)
        assert status.status is Availability.NOT_AVAILABLE

    def test_old_snapshot_still_answers(self, write_yaml) -> None:  # type: ignore[no-untyped-def]
        advisor = Advisor.load()
        before = advisor.snapshot

        advisor.reload(rules_path=write_yaml(_ALWAYS_REBUILD))

        rec = before.engine.evaluate("fragmentation-action", FragmentationFact(1.0))
        assert rec.outcome is FragmentationAction.NO_ACTION

    def test_failed_reload_keeps_snapshot(self, write_yaml) -> None:  # type: ignore[no-untyped-def]
        advisor = Advisor.load()
        before = advisor.snapshot
        bad = write_yaml(
            """
rule_sets:
  - id: fragmentation-action
    fact: FragmentationFact
    outcomes: FragmentationAction
    rules:
      - {order: 1, name: a, outcome: REBUILD, rationale: x}
      - {order: 1, name: b, outcome: NO_ACTION, rationale: y}
"""
        )

        with pytest.raises(LoadError) as exc_info:
            advisor.reload(rules_path=bad)

        assert exc_info.value.code == ErrorCode.DUPLICATE_RULE_ORDER
        assert advisor.snapshot is before
        assert advisor.fragmentation_action(1.0).outcome is FragmentationAction.NO_ACTION

    def test_reload_defaults_to_configured_sources(self) -> None:
        advisor = Advisor.load()

        snapshot = advisor.reload()

        assert snapshot.rules_location == "bundled"
        assert len(snapshot.engine.repository) == 3


def test_load_snapshot_is_immutable() -> None:
    snapshot = load_snapshot()

    assert isinstance(snapshot, KnowledgeSnapshot)
    with pytest.raises(AttributeError):
        snapshot.rules_location = "elsewhere"  # type: ignore[misc]
    assert snapshot.resolver.resolve(
        "Query Store", Environment.MANAGED_INSTANCE
    ).constraint_note == "always enabled"
    assert snapshot.engine.evaluate(
        "construct-selection",
        QueryShapeFact(result_cardinality_hint=CardinalityHint.SET, is_correlated=True),
    ).outcome is ConstructChoice.CROSS_APPLY
