"""Knowledge snapshot - rule sets and capability matrix loaded as one unit."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from pathlib import Path

import structlog

from sqladvisor.capabilities.matrix import load_matrix
from sqladvisor.capabilities.resolver import CapabilityResolver
from sqladvisor.rules.engine import RuleEngine
from sqladvisor.rules.loader import load_rules

log = structlog.get_logger()


@dataclass(frozen=True, slots=True)
class KnowledgeSnapshot:
    """Immutable pairing of a rule engine and a capability resolver.

    A snapshot is complete or it does not exist: loading either source
    raises before the snapshot is constructed.
    """

    engine: RuleEngine
    resolver: CapabilityResolver
    rules_location: str
    capabilities_location: str
    loaded_at: float = field(default_factory=time.time)


def load_snapshot(
    rules_path: Path | None = None,
    capabilities_path: Path | None = None,
    *,
    strict_totality: bool = False,
) -> KnowledgeSnapshot:
    """Load both knowledge sources. None selects the bundled file."""
    repository = load_rules(rules_path, strict_totality=strict_totality)
    matrix = load_matrix(capabilities_path)
    snapshot = KnowledgeSnapshot(
        engine=RuleEngine(repository),
        resolver=CapabilityResolver(matrix),
        rules_location=str(rules_path) if rules_path else "bundled",
        capabilities_location=str(capabilities_path) if capabilities_path else "bundled",
    )
    log.debug(
        "snapshot_loaded",
        rule_sets=len(repository),
        capabilities=len(matrix),
    )
    return snapshot
