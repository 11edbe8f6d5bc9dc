"""Configuration constants.

Values here are fixed by the rule and matrix formats and are not
user-configurable. For configurable values, see models.py.
"""

CONFIG_DIR_NAME = ".sqladvisor"
"""Per-project directory holding config.yaml."""

CONFIG_FILE_NAME = "config.yaml"

ENV_PREFIX = "SQLADVISOR__"

# =============================================================================
# Bundled knowledge sources
# =============================================================================
# Resolved with importlib.resources relative to their packages.

RULES_RESOURCE = ("sqladvisor.rules.data", "rules.yaml")
CAPABILITIES_RESOURCE = ("sqladvisor.capabilities.data", "capabilities.yaml")

# =============================================================================
# Fact domains
# =============================================================================

FRAGMENTATION_MIN = 0.0
FRAGMENTATION_MAX = 100.0
"""Valid fragmentation percentage range (inclusive on both ends)."""
