"""Tests for the export CLI group."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from leafpress.cli import cli


@pytest.mark.usefixtures("_isolated_site")
class TestExportSearch:
    def test_records_on_stdout(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--env", "prod", "--json", "export", "search"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert [r["objectID"] for r in data["data"]["records"]] == [
            "second-post",
            "first-post",
            "about",
        ]

    def test_output_file(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        target = tmp_path / "records.json"
        result = cli_runner.invoke(
            cli, ["--env", "prod", "export", "search", "--output", str(target)]
        )
        assert result.exit_code == 0
        assert len(json.loads(target.read_text(encoding="utf-8"))) == 3

    def test_warns_outside_export_env(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["export", "search"])
        assert result.exit_code == 0
        assert "WARNING: Search export is empty" in result.stderr

    def test_json_keeps_warnings_in_payload(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "export", "search"])
        data = json.loads(result.stdout)
        assert data["data"]["count"] == 0
        assert len(data["warnings"]) == 1
