"""Reading the YAML knowledge sources (rules and capability matrix).

Sources are read once at startup. Any failure here is fatal for the
snapshot being built: callers get a LoadError or ConfigError and no
partially loaded data.
"""

from __future__ import annotations

from importlib import resources
from pathlib import Path
from typing import Any

import structlog
import yaml
from pydantic import ValidationError

from sqladvisor.core.errors import ConfigError, LoadError

log = structlog.get_logger()


def read_yaml_source(
    path: Path | None,
    resource: tuple[str, str],
    source: str,
) -> tuple[dict[str, Any], str]:
    """Read a YAML source from *path*, or from the bundled *resource*.

    Args:
        path: Explicit file. None selects the packaged default.
        resource: (package, filename) of the packaged default
        source: Human name used in errors ("rules", "capability matrix")

    Returns:
        (document, location) where location is the path or resource name.
    """
    if path is not None:
        if not path.exists():
            raise ConfigError.file_not_found(str(path))
        location = str(path)
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise LoadError.malformed(source, location, f"unreadable: {e}") from e
    else:
        package, filename = resource
        location = f"{package}/{filename}"
        text = resources.files(package).joinpath(filename).read_text(encoding="utf-8")

    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise LoadError.malformed(source, location, f"invalid YAML: {e}") from e

    if not isinstance(data, dict):
        raise LoadError.malformed(source, location, "top level must be a mapping")

    log.debug("knowledge_source_read", source=source, location=location)
    return data, location


def malformed_from_validation(source: str, location: str, error: ValidationError) -> LoadError:
    """Convert the first pydantic validation error into a LoadError."""
    err = error.errors()[0]
    where = ".".join(str(loc) for loc in err["loc"])
    return LoadError.malformed(source, f"{location}:{where}", err["msg"])
