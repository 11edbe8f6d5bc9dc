"""Tests for the capability matrix and its loader."""

from pathlib import Path
from typing import Any

import pytest

from sqladvisor.capabilities.matrix import CapabilityMatrix, load_matrix, parse_matrix
from sqladvisor.capabilities.models import (
    Availability,
    CapabilityCategory,
    CapabilityStatus,
    Environment,
)
from sqladvisor.core.errors import ConfigError, ErrorCode, LoadError


def _status(
    name: str, env: Environment, status: Availability = Availability.FULL
) -> CapabilityStatus:
    return CapabilityStatus(name, env, status, CapabilityCategory.PLATFORM)


_ON_PREM_FULL = {"environment": "ON_PREM", "status": "FULL"}


def _doc(*capabilities: dict[str, Any]) -> dict[str, Any]:
    return {"version": 1, "capabilities": list(capabilities)}


class TestCapabilityMatrix:
    def test_lookup_is_case_and_space_insensitive(self) -> None:
        matrix = CapabilityMatrix([_status("Query Store", Environment.ON_PREM)])

        assert matrix.get("query  store", Environment.ON_PREM) is not None
        assert matrix.get("QUERY STORE", Environment.MANAGED_INSTANCE) is None
        assert matrix.canonical_name("query store") == "Query Store"
        assert matrix.canonical_name("Query") is None

    def test_duplicate_entry(self) -> None:
        with pytest.raises(LoadError) as exc_info:
            CapabilityMatrix(
                [
                    _status("Query Store", Environment.ON_PREM),
                    _status("query store", Environment.ON_PREM, Availability.PARTIAL),
                ]
            )

        err = exc_info.value
        assert err.code == ErrorCode.DUPLICATE_CAPABILITY_ENTRY
        assert err.details == {"name": "query store", "environment": "ON_PREM"}

    def test_environments_in_enum_order(self) -> None:
        matrix = CapabilityMatrix(
            [
                _status("X", Environment.MANAGED_INSTANCE),
                _status("X", Environment.ON_PREM),
            ]
        )

        assert matrix.environments("x") == [Environment.ON_PREM, Environment.MANAGED_INSTANCE]

    def test_names_sorted(self) -> None:
        matrix = CapabilityMatrix(
            [_status("beta", Environment.ON_PREM), _status("Alpha", Environment.ON_PREM)]
        )

        assert matrix.names() == ["Alpha", "beta"]
        assert len(matrix) == 2


class TestParseMatrix:
    def test_rows_become_statuses(self) -> None:
        matrix = parse_matrix(
            _doc(
                {
                    "name": "  Query   Store ",
                    "category": "platform",
                    "rows": [
                        {
                            "environment": "managed_instance",
                            "status": "full",
                            "note": "always enabled",
                        },
                        {"environment": "ON_PREM", "status": "PARTIAL", "note": "  "},
                    ],
                }
            )
        )

        mi = matrix.get("Query Store", Environment.MANAGED_INSTANCE)
        assert mi == CapabilityStatus(
            "Query Store",
            Environment.MANAGED_INSTANCE,
            Availability.FULL,
            CapabilityCategory.PLATFORM,
            "always enabled",
        )
        on_prem = matrix.get("Query Store", Environment.ON_PREM)
        assert on_prem is not None
        assert on_prem.constraint_note is None

    def test_duplicate_environment_row(self) -> None:
        row = {"environment": "ON_PREM", "status": "FULL"}

        with pytest.raises(LoadError) as exc_info:
            parse_matrix(_doc({"name": "X", "category": "PLATFORM", "rows": [row, row]}))

        assert exc_info.value.code == ErrorCode.DUPLICATE_CAPABILITY_ENTRY

    def test_duplicate_across_blocks(self) -> None:
        block = {
            "name": "X",
            "category": "PLATFORM",
            "rows": [{"environment": "ON_PREM", "status": "FULL"}],
        }

        with pytest.raises(LoadError) as exc_info:
            parse_matrix(_doc(block, dict(block, name="x")))

        assert exc_info.value.code == ErrorCode.DUPLICATE_CAPABILITY_ENTRY

    def test_conflicting_category(self) -> None:
        first = {
            "name": "X",
            "category": "PLATFORM",
            "rows": [{"environment": "ON_PREM", "status": "FULL"}],
        }
        second = {
            "name": "X",
            "category": "SECURITY",
            "rows": [{"environment": "AZURE_IAAS", "status": "FULL"}],
        }

        with pytest.raises(LoadError, match="conflicts with earlier PLATFORM"):
            parse_matrix(_doc(first, second))

    @pytest.mark.parametrize(
        "capability",
        [
            {"name": "X", "category": "PLATFORM", "rows": []},
            {"name": "X", "category": "NETWORK", "rows": [_ON_PREM_FULL]},
            {"name": "X", "category": "PLATFORM", "rows": [dict(_ON_PREM_FULL, environment="AWS")]},
            {"name": "X", "category": "PLATFORM", "rows": [dict(_ON_PREM_FULL, status="MAYBE")]},
            {"name": "", "category": "PLATFORM", "rows": [_ON_PREM_FULL]},
        ],
    )
    def test_malformed(self, capability: dict[str, Any]) -> None:
        with pytest.raises(LoadError) as exc_info:
            parse_matrix(_doc(capability), "caps.yaml")

        assert exc_info.value.code == ErrorCode.MALFORMED_SOURCE
        assert exc_info.value.details["location"].startswith("caps.yaml:capabilities.0")


class TestLoadMatrix:
    def test_bundled_matrix_covers_every_environment(self) -> None:
        matrix = load_matrix()

        names = matrix.names()
        assert len(names) >= 30
        for name in names:
            assert matrix.environments(name) == list(Environment)

    def test_explicit_path(self, write_yaml) -> None:  # type: ignore[no-untyped-def]
        path = write_yaml(
            """
capabilities:
  - name: Query Store
    category: PLATFORM
    rows:
      - {environment: MANAGED_INSTANCE, status: FULL, note: always enabled}
"""
        )

        matrix = load_matrix(path)

        assert len(matrix) == 1

    def test_missing_path(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError):
            load_matrix(tmp_path / "nope.yaml")

    def test_top_level_must_be_mapping(self, write_yaml) -> None:  # type: ignore[no-untyped-def]
        with pytest.raises(LoadError, match="top level must be a mapping"):
            load_matrix(write_yaml("- just\n- a list\n"))
