"""Tests for the sqladvisor command group."""

import json
from pathlib import Path

from click.testing import CliRunner

from sqladvisor import __version__
from sqladvisor.cli.main import cli

runner = CliRunner()


class TestGroup:
    def test_version(self) -> None:
        result = runner.invoke(cli, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.output

    def test_help_lists_commands(self) -> None:
        result = runner.invoke(cli, ["--help"])

        assert result.exit_code == 0
        for command in (
            "construct",
            "fragmentation",
            "merge",
            "capability",
            "compare",
            "capabilities",
            "rules",
            "validate",
        ):
            assert command in result.output

    def test_config_file_selects_rules(self, tmp_path: Path) -> None:
        rules = tmp_path / "rules.yaml"
        rules.write_text(
            """
rule_sets:
  - id: fragmentation-action
    fact: FragmentationFact
    outcomes: FragmentationAction
    rules:
      - {order: 1, name: always-rebuild, outcome: REBUILD, rationale: Rebuild.}
"""
        )
        config = tmp_path / "config.yaml"
        config.write_text(f"knowledge:\n  rules_path: {rules}\n")

        result = runner.invoke(cli, ["--config", str(config), "fragmentation", "1", "--json"])

        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data["recommendation"]["rule_name"] == "always-rebuild"

    def test_project_config_is_read(self, _isolated_config: Path) -> None:
        config_dir = _isolated_config / ".sqladvisor"
        config_dir.mkdir()
        (config_dir / "config.yaml").write_text("knowledge:\n  rules_path: missing.yaml\n")

        result = runner.invoke(cli, ["fragmentation", "1"])

        assert result.exit_code == 1
        assert "CONFIG_FILE_NOT_FOUND" in result.output

    def test_missing_config_file(self, tmp_path: Path) -> None:
        result = runner.invoke(cli, ["--config", str(tmp_path / "nope.yaml"), "rules"])

        assert result.exit_code == 1
        assert "CONFIG_FILE_NOT_FOUND" in result.output

    def test_invalid_config_value(self, tmp_path: Path) -> None:
        config = tmp_path / "config.yaml"
        config.write_text("logging:\n  level: LOUD\n")

        result = runner.invoke(cli, ["--config", str(config), "rules"])

        assert result.exit_code == 1
        assert "CONFIG_INVALID_VALUE" in result.output

    def test_error_points_at_log_file(self, tmp_path: Path) -> None:
        log_file = tmp_path / "logs" / "advisor.log"
        config = tmp_path / "config.yaml"
        config.write_text(f"logging:\n  outputs:\n    - destination: {log_file}\n")

        result = runner.invoke(cli, ["--config", str(config), "fragmentation", "150"])

        assert result.exit_code == 1
        assert "INVALID_FACT" in result.output
        assert f"See {log_file} for details." in result.output
        assert "command_failed" in log_file.read_text()
