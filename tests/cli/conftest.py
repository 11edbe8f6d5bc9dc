"""CLI test fixtures."""

import logging
from collections.abc import Generator
from pathlib import Path
from unittest.mock import patch

import pytest


@pytest.fixture(autouse=True)
def _isolated_config(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> Generator[Path, None, None]:
    """Run each command in an empty project with no global config."""
    project = tmp_path / "project"
    project.mkdir()
    monkeypatch.chdir(project)
    for name in ("SQLADVISOR__LOGGING__LEVEL", "SQLADVISOR__KNOWLEDGE__RULES_PATH"):
        monkeypatch.delenv(name, raising=False)
    with patch("sqladvisor.config.loader.GLOBAL_CONFIG_PATH", tmp_path / "global.yaml"):
        yield project
    # Handlers were bound to the runner's captured streams
    logging.getLogger().handlers.clear()
