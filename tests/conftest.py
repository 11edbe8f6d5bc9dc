"""Root conftest.py for test configuration.

Ensures local src/ directory takes priority over any installed packages.
"""

import sys
from pathlib import Path

import pytest

# Insert local src directory at the beginning of sys.path
# This ensures that the local sqladvisor package is used, not any installed one
_src_dir = Path(__file__).parent.parent / "src"
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

# Force reimport of sqladvisor modules if already imported
for module_name in list(sys.modules.keys()):
    if module_name.startswith("sqladvisor"):
        del sys.modules[module_name]


@pytest.fixture(scope="session")
def advisor():  # type: ignore[no-untyped-def]
    """Advisor over the bundled rules and capability matrix."""
    from sqladvisor.advisor import Advisor

    return Advisor.load()


@pytest.fixture
def write_yaml(tmp_path: Path):  # type: ignore[no-untyped-def]
    """Write a YAML document to a temp file and return its path."""

    def _write(text: str, name: str = "source.yaml") -> Path:
        path = tmp_path / name
        path.write_text(text)
        return path

    return _write
