"""Advisor facade - the single entry point for callers.

Composes the rule engine and the capability resolver over one knowledge
snapshot. Every call reads the snapshot reference exactly once, so a
concurrent ``reload()`` is never observed half-way: a call either sees the
old snapshot or the new one.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path

import structlog

from sqladvisor.advisor.snapshot import KnowledgeSnapshot, load_snapshot
from sqladvisor.capabilities.models import CapabilityCategory, CapabilityStatus, Environment
from sqladvisor.config.models import AdvisorConfig, KnowledgeConfig
from sqladvisor.core.errors import AdvisorError, InternalError
from sqladvisor.facts.models import Fact, FragmentationFact, MergeDecisionFact, QueryShapeFact
from sqladvisor.rules.models import (
    ConstructChoice,
    FragmentationAction,
    MergeStrategy,
    Recommendation,
    RuleSet,
)
from sqladvisor.rules.repository import CONSTRUCT_SELECTION, FRAGMENTATION_ACTION, MERGE_VS_SPLIT

log = structlog.get_logger()


class Advisor:
    """SQL Server engineering advisor.

    Build with ``Advisor.from_config()`` (or ``Advisor.load()``) once at
    startup; afterwards no method performs I/O except ``reload()``.
    """

    def __init__(
        self, snapshot: KnowledgeSnapshot, knowledge: KnowledgeConfig | None = None
    ) -> None:
        self._snapshot = snapshot
        self._knowledge = knowledge or KnowledgeConfig()

    @classmethod
    def from_config(cls, config: AdvisorConfig | None = None) -> Advisor:
        """Load the knowledge sources named by *config* (bundled by default)."""
        knowledge = (config or AdvisorConfig()).knowledge
        snapshot = load_snapshot(
            _as_path(knowledge.rules_path),
            _as_path(knowledge.capabilities_path),
            strict_totality=knowledge.strict_totality,
        )
        return cls(snapshot, knowledge)

    @classmethod
    def load(
        cls,
        rules_path: Path | None = None,
        capabilities_path: Path | None = None,
    ) -> Advisor:
        knowledge = KnowledgeConfig(
            rules_path=str(rules_path) if rules_path else None,
            capabilities_path=str(capabilities_path) if capabilities_path else None,
        )
        return cls.from_config(AdvisorConfig(knowledge=knowledge))

    @property
    def snapshot(self) -> KnowledgeSnapshot:
        return self._snapshot

    # =========================================================================
    # Recommendations
    # =========================================================================

    def evaluate(self, rule_set_id: str, fact: Fact) -> Recommendation:
        """Evaluate any registered rule set."""
        return self._snapshot.engine.evaluate(rule_set_id, fact)

    def select_construct(self, fact: QueryShapeFact) -> Recommendation:
        """Recommend CTE, subquery or APPLY for a query shape."""
        rec = self.evaluate(CONSTRUCT_SELECTION, fact)
        return _expect(rec, ConstructChoice)

    def fragmentation_action(self, fact: FragmentationFact | float) -> Recommendation:
        """Recommend NO_ACTION, REORGANIZE or REBUILD for a fragmentation level.

        Accepts a fact or the bare percentage.
        """
        if not isinstance(fact, FragmentationFact):
            fact = FragmentationFact(fragmentation_percent=fact)
        rec = self.evaluate(FRAGMENTATION_ACTION, fact)
        return _expect(rec, FragmentationAction)

    def merge_or_split(self, fact: MergeDecisionFact) -> Recommendation:
        """Recommend a single MERGE or UPDATE then INSERT."""
        rec = self.evaluate(MERGE_VS_SPLIT, fact)
        return _expect(rec, MergeStrategy)

    def describe_rules(self, rule_set_id: str) -> RuleSet:
        """The ordered rules of a rule set, for rendering explanations."""
        return self._snapshot.engine.rule_set(rule_set_id)

    def rule_set_ids(self) -> list[str]:
        return self._snapshot.engine.repository.ids()

    # =========================================================================
    # Capabilities
    # =========================================================================

    def resolve_capability(self, name: str, environment: Environment | str) -> CapabilityStatus:
        return self._snapshot.resolver.resolve(name, environment)

    def compare_capability(self, name: str) -> dict[Environment, CapabilityStatus]:
        return self._snapshot.resolver.compare(name)

    def list_capabilities(
        self,
        environment: Environment | str | None = None,
        category: CapabilityCategory | str | None = None,
    ) -> list[CapabilityStatus]:
        return self._snapshot.resolver.entries(environment, category)

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def reload(
        self,
        rules_path: Path | None = None,
        capabilities_path: Path | None = None,
    ) -> KnowledgeSnapshot:
        """Load a fresh snapshot and swap it in.

        Paths default to the configured sources. The new snapshot is fully
        built before the swap; if loading fails, the current snapshot stays
        in service and the error propagates.
        """
        rules = rules_path or _as_path(self._knowledge.rules_path)
        capabilities = capabilities_path or _as_path(self._knowledge.capabilities_path)
        try:
            snapshot = load_snapshot(
                rules, capabilities, strict_totality=self._knowledge.strict_totality
            )
        except AdvisorError as e:
            log.error("snapshot_reload_failed", error=e.error_name, message=e.message)
            raise
        self._snapshot = snapshot
        log.info(
            "snapshot_reloaded",
            rules=snapshot.rules_location,
            capabilities=snapshot.capabilities_location,
        )
        return snapshot


def _as_path(value: str | None) -> Path | None:
    return Path(value) if value else None


def _expect(rec: Recommendation, outcome_type: type[Enum]) -> Recommendation:
    if not isinstance(rec.outcome, outcome_type):
        raise InternalError.unexpected(
            f"rule set '{rec.rule_set_id}' yields {type(rec.outcome).__name__}, "
            f"expected {outcome_type.__name__}",
            rule_set_id=rec.rule_set_id,
        )
    return rec
