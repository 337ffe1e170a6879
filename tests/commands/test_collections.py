"""Tests for the collections CLI group."""

from __future__ import annotations

import json

import pytest
from click.testing import CliRunner

from leafpress.cli import cli


@pytest.mark.usefixtures("_isolated_site")
class TestCollectionsList:
    def test_list(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["collections", "list"])
        assert result.exit_code == 0
        assert "postsWithLighthouse" in result.stdout

    def test_list_json(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "collections", "list"])
        data = json.loads(result.stdout)
        assert [row["name"] for row in data["data"]["collections"]] == [
            "all",
            "posts",
            "postsWithLighthouse",
            "recentPosts",
            "feed",
            "memoized",
            "algolia",
        ]

    def test_list_quiet(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["-q", "collections", "list"])
        assert result.stdout.splitlines()[0] == "all"


@pytest.mark.usefixtures("_isolated_site")
class TestCollectionsShow:
    def test_show_quiet(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["-q", "collections", "show", "posts"])
        assert result.exit_code == 0
        assert result.stdout.splitlines() == ["second-post", "first-post", "about"]

    def test_show_json(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "collections", "show", "recentPosts"])
        data = json.loads(result.stdout)
        assert data["data"]["count"] == 3

    def test_show_algolia_in_prod(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--env", "prod", "-q", "collections", "show", "algolia"])
        assert result.stdout.splitlines() == ["second-post", "first-post", "about"]

    def test_show_unknown(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "collections", "show", "nope"])
        assert result.exit_code == 1
        payload = json.loads(result.stderr)
        assert payload["error"]["code"] == "UNKNOWN_COLLECTION"
