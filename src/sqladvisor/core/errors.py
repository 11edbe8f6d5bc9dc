"""SQL Advisor error types with typed error codes.

Error code ranges:
- 2xxx: Config
- 3xxx: Rule evaluation
- 4xxx: Facts
- 5xxx: Capability lookup
- 6xxx: Knowledge source loading
- 9xxx: Internal

Nothing here is retryable: every condition is caused by the caller or by the
loaded data, never by a transient failure.
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002
    CONFIG_FILE_NOT_FOUND = 2004

    # Rule evaluation (3xxx)
    UNKNOWN_RULE_SET = 3001
    NO_RULE_MATCHED = 3002

    # Facts (4xxx)
    INVALID_FACT = 4001

    # Capabilities (5xxx)
    UNKNOWN_CAPABILITY = 5001
    UNKNOWN_ENVIRONMENT = 5002

    # Loading (6xxx)
    DUPLICATE_CAPABILITY_ENTRY = 6001
    DUPLICATE_RULE_ORDER = 6002
    DUPLICATE_RULE_SET = 6003
    MALFORMED_SOURCE = 6004

    # Internal (9xxx)
    INTERNAL_ERROR = 9001


@dataclass(frozen=True, slots=True)
class AdvisorError(Exception):
    """Base error with structured context for CLI and service responses."""

    code: ErrorCode
    message: str
    retryable: bool = False
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'NO_RULE_MATCHED')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON responses."""
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "retryable": self.retryable,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class ConfigError(AdvisorError):
    """Configuration-related errors."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )

    @classmethod
    def file_not_found(cls, path: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_FILE_NOT_FOUND,
            message=f"Config file not found: {path}",
            details={"path": path},
        )


class RuleError(AdvisorError):
    """Rule set lookup and evaluation errors."""

    @classmethod
    def unknown_rule_set(cls, rule_set_id: str, known: list[str]) -> "RuleError":
        return cls(
            code=ErrorCode.UNKNOWN_RULE_SET,
            message=f"Unknown rule set: {rule_set_id}",
            details={"rule_set_id": rule_set_id, "known": sorted(known)},
        )

    @classmethod
    def no_rule_matched(cls, rule_set_id: str, fact: dict[str, Any]) -> "RuleError":
        return cls(
            code=ErrorCode.NO_RULE_MATCHED,
            message=f"No rule in '{rule_set_id}' matched the given fact",
            details={"rule_set_id": rule_set_id, "fact": fact},
        )


class FactError(AdvisorError):
    """Facts outside the domain a rule set accepts."""

    @classmethod
    def invalid_fact(
        cls, field: str, value: Any, reason: str, fact: dict[str, Any] | None = None
    ) -> "FactError":
        details: dict[str, Any] = {"field": field, "value": value, "reason": reason}
        if fact is not None:
            details["fact"] = fact
        return cls(
            code=ErrorCode.INVALID_FACT,
            message=f"Invalid fact field '{field}': {reason}",
            details=details,
        )


class CapabilityError(AdvisorError):
    """Capability matrix lookup errors."""

    @classmethod
    def unknown_capability(cls, name: str) -> "CapabilityError":
        return cls(
            code=ErrorCode.UNKNOWN_CAPABILITY,
            message=f"Unknown capability: {name}",
            details={"name": name},
        )

    @classmethod
    def unknown_environment(
        cls, name: str, environment: str, known: list[str] | None = None
    ) -> "CapabilityError":
        details: dict[str, Any] = {"name": name, "environment": environment}
        if known is not None:
            details["known"] = known
        return cls(
            code=ErrorCode.UNKNOWN_ENVIRONMENT,
            message=f"No entry for capability '{name}' in environment '{environment}'",
            details=details,
        )


class LoadError(AdvisorError):
    """Fatal errors raised while loading rule or capability sources."""

    @classmethod
    def duplicate_capability_entry(cls, name: str, environment: str) -> "LoadError":
        return cls(
            code=ErrorCode.DUPLICATE_CAPABILITY_ENTRY,
            message=f"Duplicate capability entry: ({name}, {environment})",
            details={"name": name, "environment": environment},
        )

    @classmethod
    def duplicate_rule_order(cls, rule_set_id: str, order: int) -> "LoadError":
        return cls(
            code=ErrorCode.DUPLICATE_RULE_ORDER,
            message=f"Duplicate rule order {order} in rule set '{rule_set_id}'",
            details={"rule_set_id": rule_set_id, "order": order},
        )

    @classmethod
    def duplicate_rule_set(cls, rule_set_id: str) -> "LoadError":
        return cls(
            code=ErrorCode.DUPLICATE_RULE_SET,
            message=f"Duplicate rule set: {rule_set_id}",
            details={"rule_set_id": rule_set_id},
        )

    @classmethod
    def malformed(cls, source: str, location: str, reason: str) -> "LoadError":
        return cls(
            code=ErrorCode.MALFORMED_SOURCE,
            message=f"Malformed {source} at {location}: {reason}",
            details={"source": source, "location": location, "reason": reason},
        )


class InternalError(AdvisorError):
    """Internal/unexpected errors."""

    @classmethod
    def unexpected(cls, reason: str, **details: Any) -> "InternalError":
        return cls(
            code=ErrorCode.INTERNAL_ERROR,
            message=f"Internal error: {reason}",
            details=details,
        )
