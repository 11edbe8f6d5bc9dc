"""Config module exports."""

from sqladvisor.config.loader import load_config
from sqladvisor.config.models import (
    AdvisorConfig,
    KnowledgeConfig,
    LoggingConfig,
    LogOutputConfig,
)

__all__ = [
    "load_config",
    "AdvisorConfig",
    "KnowledgeConfig",
    "LoggingConfig",
    "LogOutputConfig",
]
