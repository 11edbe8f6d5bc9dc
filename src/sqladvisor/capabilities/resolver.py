"""Capability resolver - availability lookups over the capability matrix."""

from __future__ import annotations

import structlog

from sqladvisor.capabilities.matrix import CapabilityMatrix
from sqladvisor.capabilities.models import CapabilityCategory, CapabilityStatus, Environment
from sqladvisor.core.errors import CapabilityError

log = structlog.get_logger()


class CapabilityResolver:
    """Resolves (capability, environment) pairs.

    A missing pair is always an error, never NOT_AVAILABLE: a gap in the
    matrix is a data-completeness problem that the caller must see.
    """

    def __init__(self, matrix: CapabilityMatrix) -> None:
        self._matrix = matrix

    @property
    def matrix(self) -> CapabilityMatrix:
        return self._matrix

    def resolve(self, name: str, environment: Environment | str) -> CapabilityStatus:
        """Resolve the status of *name* in *environment*.

        Raises:
            CapabilityError: UNKNOWN_CAPABILITY if the name has no entries
                at all; UNKNOWN_ENVIRONMENT if the environment is not
                recognised or the known capability has no row for it.
        """
        canonical = self._require_name(name)
        env = Environment.parse(environment)
        if env is None:
            raise CapabilityError.unknown_environment(
                canonical, str(environment), [e.value for e in Environment]
            )
        status = self._matrix.get(canonical, env)
        if status is None:
            raise CapabilityError.unknown_environment(
                canonical, env.value, [e.value for e in self._matrix.environments(canonical)]
            )
        log.debug(
            "capability_resolved",
            capability=canonical,
            environment=env.value,
            status=status.status.value,
        )
        return status

    def compare(self, name: str) -> dict[Environment, CapabilityStatus]:
        """All environment rows for one capability, in enum order."""
        canonical = self._require_name(name)
        result: dict[Environment, CapabilityStatus] = {}
        for env in self._matrix.environments(canonical):
            status = self._matrix.get(canonical, env)
            if status is not None:
                result[env] = status
        return result

    def entries(
        self,
        environment: Environment | str | None = None,
        category: CapabilityCategory | str | None = None,
    ) -> list[CapabilityStatus]:
        """Matrix entries, optionally filtered, sorted by name then environment."""
        env: Environment | None = None
        if environment is not None:
            env = Environment.parse(environment)
            if env is None:
                raise CapabilityError.unknown_environment(
                    "*", str(environment), [e.value for e in Environment]
                )
        cat: CapabilityCategory | None = None
        if category is not None:
            cat = _parse_category(category)

        order = {e: i for i, e in enumerate(Environment)}
        entries = [
            s
            for s in self._matrix
            if (env is None or s.environment is env) and (cat is None or s.category is cat)
        ]
        return sorted(entries, key=lambda s: (s.name.casefold(), order[s.environment]))

    def names(self) -> list[str]:
        return self._matrix.names()

    def _require_name(self, name: str) -> str:
        canonical = self._matrix.canonical_name(name)
        if canonical is None:
            raise CapabilityError.unknown_capability(name)
        return canonical


def _parse_category(value: CapabilityCategory | str) -> CapabilityCategory:
    if isinstance(value, CapabilityCategory):
        return value
    key = value.strip().upper().replace("-", "_").replace(" ", "_")
    try:
        return CapabilityCategory[key]
    except KeyError:
        allowed = ", ".join(c.value for c in CapabilityCategory)
        raise CapabilityError.unknown_capability(
            f"category '{value}' (expected one of {allowed})"
        ) from None
