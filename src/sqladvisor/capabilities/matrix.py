"""Capability matrix - (capability, environment) to availability, loaded once.

Source layout::

    capabilities:
      - name: Query Store
        category: PLATFORM
        rows:
          - {environment: MANAGED_INSTANCE, status: FULL, note: always enabled}

Rows are a list rather than a mapping keyed by environment so a repeated
environment is caught as DUPLICATE_CAPABILITY_ENTRY instead of being
silently collapsed by the YAML parser.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from pathlib import Path
from types import MappingProxyType
from typing import Any

import structlog
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from sqladvisor.capabilities.models import (
    Availability,
    CapabilityCategory,
    CapabilityStatus,
    Environment,
)
from sqladvisor.config.constants import CAPABILITIES_RESOURCE
from sqladvisor.core.errors import LoadError
from sqladvisor.core.sources import malformed_from_validation, read_yaml_source

log = structlog.get_logger()

_SOURCE = "capability matrix"


def _key(name: str) -> str:
    return " ".join(name.split()).casefold()


class CapabilityMatrix:
    """Read-only lookup table of capability statuses.

    Names are matched case-insensitively and with whitespace collapsed;
    the spelling from the source is kept for display.
    """

    def __init__(self, entries: Iterable[CapabilityStatus] = ()) -> None:
        table: dict[tuple[str, Environment], CapabilityStatus] = {}
        names: dict[str, str] = {}
        for entry in entries:
            key = (_key(entry.name), entry.environment)
            if key in table:
                raise LoadError.duplicate_capability_entry(entry.name, entry.environment.value)
            table[key] = entry
            names.setdefault(key[0], entry.name)
        self._table = MappingProxyType(table)
        self._names = MappingProxyType(names)

    def canonical_name(self, name: str) -> str | None:
        """Source spelling of *name*, or None if it has no entries."""
        return self._names.get(_key(name))

    def get(self, name: str, environment: Environment) -> CapabilityStatus | None:
        return self._table.get((_key(name), environment))

    def environments(self, name: str) -> list[Environment]:
        """Environments with an entry for *name*, in declaration order of the enum."""
        key = _key(name)
        return [env for env in Environment if (key, env) in self._table]

    def names(self) -> list[str]:
        return sorted(self._names.values(), key=str.casefold)

    def __iter__(self) -> Iterator[CapabilityStatus]:
        return iter(self._table.values())

    def __len__(self) -> int:
        return len(self._table)


class _RowModel(BaseModel):
    model_config = ConfigDict(extra="forbid")

    environment: Environment
    status: Availability
    note: str | None = None

    @field_validator("environment", "status", mode="before")
    @classmethod
    def upper_constant(cls, v: Any) -> Any:
        return v.strip().upper() if isinstance(v, str) else v

    @field_validator("note")
    @classmethod
    def blank_note_is_none(cls, v: str | None) -> str | None:
        if v is None or not v.strip():
            return None
        return v.strip()


class _CapabilityModel(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str = Field(min_length=1)
    category: CapabilityCategory
    rows: list[_RowModel] = Field(min_length=1)

    @field_validator("category", mode="before")
    @classmethod
    def upper_constant(cls, v: Any) -> Any:
        return v.strip().upper() if isinstance(v, str) else v


class _MatrixDocument(BaseModel):
    model_config = ConfigDict(extra="forbid")

    version: int = 1
    capabilities: list[_CapabilityModel]


def parse_matrix(data: dict[str, Any], location: str = "<memory>") -> CapabilityMatrix:
    """Validate a matrix document and build the lookup table."""
    try:
        doc = _MatrixDocument.model_validate(data)
    except ValidationError as e:
        raise malformed_from_validation(_SOURCE, location, e) from e

    categories: dict[str, CapabilityCategory] = {}
    entries: list[CapabilityStatus] = []
    for cap in doc.capabilities:
        name = " ".join(cap.name.split())
        previous = categories.setdefault(_key(name), cap.category)
        if previous is not cap.category:
            raise LoadError.malformed(
                _SOURCE,
                f"{location}:{name}",
                f"category {cap.category.value} conflicts with earlier {previous.value}",
            )
        entries.extend(
            CapabilityStatus(
                name=name,
                environment=row.environment,
                status=row.status,
                category=cap.category,
                constraint_note=row.note,
            )
            for row in cap.rows
        )
    return CapabilityMatrix(entries)


def load_matrix(path: Path | None = None) -> CapabilityMatrix:
    """Load the capability matrix from *path*, or the bundled matrix.

    Raises:
        LoadError: On malformed rows or duplicate (name, environment) pairs.
        ConfigError: If an explicit path does not exist.
    """
    data, location = read_yaml_source(path, CAPABILITIES_RESOURCE, _SOURCE)
    matrix = parse_matrix(data, location)
    log.info("capability_matrix_loaded", location=location, entries=len(matrix))
    return matrix
