"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (SQLADVISOR__SECTION__KEY)
3. Project YAML (.sqladvisor/config.yaml)
4. Global YAML (~/.config/sqladvisor/config.yaml)
5. Built-in defaults (this file)

Environment Variable Format:
    SQLADVISOR__<SECTION>__<KEY>=<VALUE>

Examples:
    SQLADVISOR__LOGGING__LEVEL=DEBUG
    SQLADVISOR__KNOWLEDGE__RULES_PATH=/etc/sqladvisor/rules.yaml
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration.

    Env vars: Not directly configurable via env (use YAML for multi-output).
    """

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        SQLADVISOR__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="WARNING",
        description="Root log level. The CLI raises this to DEBUG with --verbose.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class KnowledgeConfig(BaseModel):
    """Rule and capability source configuration.

    Env vars:
        SQLADVISOR__KNOWLEDGE__RULES_PATH: Replace the bundled rules.yaml
        SQLADVISOR__KNOWLEDGE__CAPABILITIES_PATH: Replace the bundled capabilities.yaml
        SQLADVISOR__KNOWLEDGE__STRICT_TOTALITY: Warn on rule sets without a catch-all
    """

    rules_path: str | None = Field(
        default=None,
        description="Rule source file. Default: the rules shipped with the package.",
    )
    capabilities_path: str | None = Field(
        default=None,
        description="Capability matrix file. Default: the matrix shipped with the package.",
    )
    strict_totality: bool = Field(
        default=False,
        description="Log a warning at load time for every rule set whose last rule "
        "has conditions, i.e. where some facts may end in NO_RULE_MATCHED.",
    )

    @field_validator("rules_path", "capabilities_path")
    @classmethod
    def expand_path(cls, v: str | None) -> str | None:
        if v is None:
            return None
        return str(Path(v).expanduser())


class AdvisorConfig(BaseModel):
    """Root configuration for the SQL Advisor.

    All settings can be configured via:
    1. Environment variables: SQLADVISOR__SECTION__KEY
    2. YAML config files (project or global)
    3. Direct kwargs to load_config()
    """

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    knowledge: KnowledgeConfig = Field(default_factory=KnowledgeConfig)
