"""Tests for LeafSettings — unified settings with TOML source."""

from pathlib import Path

import pytest

from leafpress.config.models import MarkdownConfig
from leafpress.config.settings import LeafSettings
from leafpress.domain.errors import ConfigurationError


class TestDefaults:
    def test_all_defaults(self, tmp_path: Path) -> None:
        """With no TOML and no env vars, all fields use code defaults."""
        settings = LeafSettings.from_cli(site_root=tmp_path)
        assert settings.site_root == tmp_path
        assert settings.config_path is None
        assert settings.env is None
        assert settings.template_formats == ["njk", "md"]
        assert settings.html_template_engine == "njk"
        assert settings.markdown_template_engine == "njk"
        assert settings.passthrough_file_copy is False
        assert settings.collections.recent_window == 3
        assert settings.collections.duplicate_slugs == "error"
        assert settings.markdown.anchor_level == 2
        assert settings.build.workers == 1

    def test_resolved_directories(self, tmp_path: Path) -> None:
        settings = LeafSettings.from_cli(site_root=tmp_path)
        content = (tmp_path / "src" / "site" / "content").resolve()
        assert settings.input_dir == content
        assert settings.output_dir == (tmp_path / "dist").resolve()
        assert settings.data_dir == content.parent / "_data"
        assert settings.includes_dir == content.parent / "_includes"

    def test_frozen(self, tmp_path: Path) -> None:
        settings = LeafSettings.from_cli(site_root=tmp_path)
        with pytest.raises(Exception):
            settings.quiet = True  # type: ignore[misc]


class TestTomlSource:
    def test_sparse_override(self, tmp_path: Path) -> None:
        (tmp_path / "leafpress.toml").write_text(
            '[collections]\nrecent_window = 5\n[markdown]\npermalink_symbol = "¶"\n',
            encoding="utf-8",
        )
        settings = LeafSettings.from_cli(site_root=tmp_path)
        assert settings.collections.recent_window == 5
        assert settings.collections.feed_size == 10  # default preserved
        assert settings.markdown.permalink_symbol == "¶"

    def test_top_level_options(self, tmp_path: Path) -> None:
        (tmp_path / "leafpress.toml").write_text(
            'template_formats = [".MD", "html"]\nmarkdown_template_engine = false\n'
        )
        settings = LeafSettings.from_cli(site_root=tmp_path)
        assert settings.template_formats == ["md", "html"]
        assert settings.markdown_template_engine is None

    def test_site_root_from_config_location(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        (tmp_path / "leafpress.toml").write_text("")
        nested = tmp_path / "content" / "en"
        nested.mkdir(parents=True)
        monkeypatch.chdir(nested)
        settings = LeafSettings.from_cli()
        assert settings.site_root == tmp_path.resolve()
        assert settings.config_path == tmp_path.resolve() / "leafpress.toml"

    def test_explicit_config_path(self, tmp_path: Path) -> None:
        custom = tmp_path / "custom" / "my.toml"
        custom.parent.mkdir(parents=True)
        custom.write_text("[build]\nworkers = 4\n")
        settings = LeafSettings.from_cli(config_path=str(custom), site_root=tmp_path)
        assert settings.build.workers == 4
        assert settings.config_path == custom

    def test_missing_explicit_config(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigurationError, match="not found"):
            LeafSettings.from_cli(config_path=str(tmp_path / "nope.toml"))

    def test_invalid_toml(self, tmp_path: Path) -> None:
        (tmp_path / "leafpress.toml").write_text("[build\n")
        with pytest.raises(ConfigurationError, match="Invalid TOML"):
            LeafSettings.from_cli(site_root=tmp_path)


class TestValidation:
    @pytest.mark.parametrize(
        "toml",
        [
            "[build]\nworkers = 0\n",
            "[collections]\nrecent_window = -1\n",
            '[collections]\nduplicate_slugs = "first_wins"\n',
            "[markdown]\nanchor_level = 7\n",
            'html_template_engine = "liquid"\n',
            "template_formats = [\"\"]\n",
        ],
    )
    def test_malformed_options(self, tmp_path: Path, toml: str) -> None:
        (tmp_path / "leafpress.toml").write_text(toml)
        with pytest.raises(ConfigurationError, match="Invalid configuration"):
            LeafSettings.from_cli(site_root=tmp_path)

    def test_bad_attribute_pattern(self) -> None:
        with pytest.raises(ValueError, match="Invalid attribute pattern"):
            MarkdownConfig(allowed_attribute_patterns=["[unclosed"])


class TestPriority:
    def test_env_var_overrides_toml(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "leafpress.toml").write_text('env = "dev"\n')
        monkeypatch.setenv("LEAFPRESS_ENV", "prod")
        assert LeafSettings.from_cli(site_root=tmp_path).env == "prod"

    def test_nested_env_var(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "leafpress.toml").write_text("[build]\nworkers = 2\n")
        monkeypatch.setenv("LEAFPRESS_BUILD__TOLERATE_RENDER_ERRORS", "true")
        settings = LeafSettings.from_cli(site_root=tmp_path)
        assert settings.build.tolerate_render_errors is True
        assert settings.build.workers == 2

    def test_cli_flags_override_env_and_toml(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        (tmp_path / "leafpress.toml").write_text('env = "dev"\n')
        monkeypatch.setenv("LEAFPRESS_ENV", "staging")
        settings = LeafSettings.from_cli(site_root=tmp_path, env="prod", json_output=True)
        assert settings.env == "prod"
        assert settings.json_output is True

    def test_none_flags_are_not_given(self, tmp_path: Path) -> None:
        (tmp_path / "leafpress.toml").write_text("quiet = true\n")
        settings = LeafSettings.from_cli(site_root=tmp_path, quiet=None)
        assert settings.quiet is True
