"""Fact module - typed descriptions the advisor reasons over."""

from sqladvisor.facts.models import (
    FACT_TYPES,
    CardinalityHint,
    Fact,
    FragmentationFact,
    MergeDecisionFact,
    QueryShapeFact,
    RowCountEstimate,
)

__all__ = [
    "FACT_TYPES",
    "CardinalityHint",
    "Fact",
    "FragmentationFact",
    "MergeDecisionFact",
    "QueryShapeFact",
    "RowCountEstimate",
]
