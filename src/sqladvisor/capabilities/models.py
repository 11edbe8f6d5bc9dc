"""Capability models - environments, availability and matrix entries."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class Environment(Enum):
    """Deployment environment of a SQL Server engine."""

    ON_PREM = "ON_PREM"
    AZURE_IAAS = "AZURE_IAAS"
    MANAGED_INSTANCE = "MANAGED_INSTANCE"

    @classmethod
    def parse(cls, value: str | Environment) -> Environment | None:
        """Resolve a user-supplied environment name, or None if unknown.

        Accepts member names in any case with '-' or ' ' separators
        ("managed-instance", "Managed Instance") and a few common aliases.
        """
        if isinstance(value, Environment):
            return value
        key = value.strip().upper().replace("-", "_").replace(" ", "_")
        key = _ENVIRONMENT_ALIASES.get(key, key)
        try:
            return cls[key]
        except KeyError:
            return None


_ENVIRONMENT_ALIASES = {
    "ONPREM": "ON_PREM",
    "ON_PREMISES": "ON_PREM",
    "IAAS": "AZURE_IAAS",
    "AZURE_VM": "AZURE_IAAS",
    "MI": "MANAGED_INSTANCE",
    "SQL_MI": "MANAGED_INSTANCE",
}


class Availability(Enum):
    """How a capability is available in an environment.

    MANAGED_EXTERNALLY means the platform provides the outcome (backups,
    HA, patching) and the customer cannot operate the mechanism directly.
    """

    FULL = "FULL"
    PARTIAL = "PARTIAL"
    NOT_AVAILABLE = "NOT_AVAILABLE"
    MANAGED_EXTERNALLY = "MANAGED_EXTERNALLY"


class CapabilityCategory(Enum):
    """Grouping used for listings. Never affects resolution."""

    INDEXING = "INDEXING"
    BACKUP = "BACKUP"
    HIGH_AVAILABILITY = "HIGH_AVAILABILITY"
    SECURITY = "SECURITY"
    PLATFORM = "PLATFORM"


@dataclass(frozen=True, slots=True)
class CapabilityStatus:
    """Resolved availability of one capability in one environment."""

    name: str
    environment: Environment
    status: Availability
    category: CapabilityCategory
    constraint_note: str | None = None

    @property
    def is_usable(self) -> bool:
        """True when the customer can use the capability in some form."""
        return self.status in (Availability.FULL, Availability.PARTIAL)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "environment": self.environment.value,
            "status": self.status.value,
            "category": self.category.value,
            "constraint_note": self.constraint_note,
        }
