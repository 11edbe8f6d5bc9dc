"""Core module exports."""

from sqladvisor.core.errors import (
    AdvisorError,
    CapabilityError,
    ConfigError,
    ErrorCode,
    FactError,
    InternalError,
    LoadError,
    RuleError,
)
from sqladvisor.core.logging import (
    clear_request_id,
    configure_logging,
    get_logger,
    get_request_id,
    set_request_id,
)

__all__ = [
    # Errors
    "AdvisorError",
    "CapabilityError",
    "ConfigError",
    "ErrorCode",
    "FactError",
    "InternalError",
    "LoadError",
    "RuleError",
    # Logging
    "clear_request_id",
    "configure_logging",
    "get_logger",
    "get_request_id",
    "set_request_id",
]
