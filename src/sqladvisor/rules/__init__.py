"""Rules module - declarative rule sets and the first-match-wins engine."""

from sqladvisor.rules.engine import RuleEngine
from sqladvisor.rules.loader import load_rules, parse_rules
from sqladvisor.rules.models import (
    OUTCOME_TYPES,
    Condition,
    ConstructChoice,
    FragmentationAction,
    MergeStrategy,
    Operator,
    Recommendation,
    Rule,
    RuleSet,
)
from sqladvisor.rules.repository import (
    CONSTRUCT_SELECTION,
    FRAGMENTATION_ACTION,
    MERGE_VS_SPLIT,
    RuleRepository,
)

__all__ = [
    "CONSTRUCT_SELECTION",
    "FRAGMENTATION_ACTION",
    "MERGE_VS_SPLIT",
    "OUTCOME_TYPES",
    "Condition",
    "ConstructChoice",
    "FragmentationAction",
    "MergeStrategy",
    "Operator",
    "Recommendation",
    "Rule",
    "RuleEngine",
    "RuleRepository",
    "RuleSet",
    "load_rules",
    "parse_rules",
]
