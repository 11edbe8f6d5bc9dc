"""Capabilities module - feature availability per deployment environment."""

from sqladvisor.capabilities.matrix import CapabilityMatrix, load_matrix, parse_matrix
from sqladvisor.capabilities.models import (
    Availability,
    CapabilityCategory,
    CapabilityStatus,
    Environment,
)
from sqladvisor.capabilities.resolver import CapabilityResolver

__all__ = [
    "Availability",
    "CapabilityCategory",
    "CapabilityMatrix",
    "CapabilityResolver",
    "CapabilityStatus",
    "Environment",
    "load_matrix",
    "parse_matrix",
]
