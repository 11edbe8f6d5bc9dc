"""Advisor module - facade over the rule engine and capability resolver."""

from sqladvisor.advisor.facade import Advisor
from sqladvisor.advisor.snapshot import KnowledgeSnapshot, load_snapshot

__all__ = ["Advisor", "KnowledgeSnapshot", "load_snapshot"]
