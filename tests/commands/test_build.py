"""Tests for the build CLI command."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from leafpress.cli import cli


@pytest.mark.usefixtures("_isolated_site")
class TestBuildCommand:
    def test_build(self, cli_runner: CliRunner, site_root: Path) -> None:
        result = cli_runner.invoke(cli, ["build"])
        assert result.exit_code == 0
        assert "OK" in result.stdout
        assert (site_root / "dist" / "about" / "index.html").is_file()

    def test_build_json(self, cli_runner: CliRunner, site_root: Path) -> None:
        result = cli_runner.invoke(cli, ["--json", "build"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["ok"] is True
        assert data["op"] == "build"
        assert data["data"]["page_count"] == 4
        assert data["data"]["output_dir"] == str(site_root / "dist")
        assert data["data"]["search_export"] is None

    def test_build_output_option(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        target = tmp_path / "elsewhere"
        result = cli_runner.invoke(cli, ["--json", "build", "--output", str(target)])
        assert result.exit_code == 0
        assert (target / "en" / "blog" / "first-post" / "index.html").is_file()

    def test_build_prod_writes_search_export(
        self, cli_runner: CliRunner, site_root: Path
    ) -> None:
        result = cli_runner.invoke(cli, ["--env", "prod", "--json", "build"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["data"]["search_records"] == 3
        assert (site_root / "dist" / "algolia.json").is_file()

    def test_env_from_environment(
        self, cli_runner: CliRunner, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("LEAFPRESS_ENV", "prod")
        result = cli_runner.invoke(cli, ["--json", "build"])
        assert json.loads(result.stdout)["data"]["search_records"] == 3

    def test_build_quiet(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["-q", "build"])
        assert result.exit_code == 0
        assert result.stdout.strip() == "OK: build"

    def test_verbose_attaches_telemetry(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["-v", "--json", "build"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["meta"]["telemetry"]["name"] == "BuildService.build"

    def test_build_failure(self, cli_runner: CliRunner, site_root: Path) -> None:
        (site_root / "content" / "en" / "extra.md").write_text(
            "---\nslug: first-post\ndate: 2020-01-01\n---\nDup.\n", encoding="utf-8"
        )
        result = cli_runner.invoke(cli, ["--json", "build"])
        assert result.exit_code == 1
        assert result.stdout == ""
        payload = json.loads(result.stderr)
        assert payload["ok"] is False
        assert payload["error"]["code"] == "DUPLICATE_SLUG"
