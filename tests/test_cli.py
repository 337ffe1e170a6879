"""Tests for the root leafpress CLI."""

from pathlib import Path

import pytest
from click.testing import CliRunner

from leafpress import __version__
from leafpress.cli import cli


def test_cli_help(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--help"])
    assert result.exit_code == 0
    assert "leafpress" in result.output


def test_cli_version(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_cli_no_args(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, [])
    assert result.exit_code == 0
    assert "Usage" in result.output


# --- Global flags ---


@pytest.mark.parametrize("flag", ["--json", "-q", "-v", "--log-json"])
def test_flag_accepted(cli_runner: CliRunner, flag: str) -> None:
    result = cli_runner.invoke(cli, [flag, "--version"])
    assert result.exit_code == 0


def test_missing_config_file(cli_runner: CliRunner, tmp_path: Path) -> None:
    result = cli_runner.invoke(cli, ["-c", str(tmp_path / "nope.toml"), "build"])
    assert result.exit_code == 1
    assert "Config file not found" in result.output


def test_explicit_config_file(cli_runner: CliRunner, site_root: Path) -> None:
    config = site_root / "leafpress.toml"
    result = cli_runner.invoke(cli, ["-q", "-c", str(config), "lookup", "first-post"])
    assert result.exit_code == 0
    assert result.stdout.strip() == "/en/blog/first-post/"


# --- Commands registered ---


@pytest.mark.parametrize("name", ["build", "collections", "export", "lookup"])
def test_command_registered(name: str) -> None:
    assert name in cli.commands
