"""Unified settings — CLI flags, env vars, and TOML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs  — CLI flags passed by Click
  2. Env vars     — ``LEAFPRESS_*`` prefix (``LEAFPRESS_ENV`` is the
     build-environment flag)
  3. TOML file    — ``leafpress.toml`` discovered via walk-up
  4. Code defaults — baked into the section models

Uses Pydantic Settings v2 with a custom :class:`TomlSettingsSource` that
reuses the walk-up discovery from :mod:`leafpress.config.discovery`.
"""

from __future__ import annotations

import threading
import tomllib
from pathlib import Path
from typing import Any, ClassVar

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from leafpress.config.discovery import find_config
from leafpress.config.models import (
    TEMPLATE_ENGINES,
    BuildConfig,
    CollectionsConfig,
    DirsConfig,
    MarkdownConfig,
    SiteConfig,
)
from leafpress.domain.errors import ConfigurationError


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Read settings from a ``leafpress.toml`` file discovered via walk-up."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        if toml_path and toml_path.is_file():
            raw = toml_path.read_text(encoding="utf-8")
            try:
                self._data = tomllib.loads(raw)
            except tomllib.TOMLDecodeError as exc:
                msg = f"Invalid TOML in {toml_path}: {exc}"
                raise ConfigurationError(msg) from exc

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        """Return ``(value, field_name, value_is_complex)``."""
        val = self._data.get(field_name)
        return val, field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        """Return the full TOML data dict for Pydantic to merge."""
        return self._data


# Thread-local storage for TOML path during construction.
_tls = threading.local()


class LeafSettings(BaseSettings):
    """Unified settings for a leafpress build.

    Merges CLI flags, environment variables, TOML config sections,
    and code-baked defaults into a single frozen object.

    Attributes:
        site_root: Resolved project directory (parent of ``leafpress.toml``,
            or CWD if no config found).  Relative ``dirs`` resolve here.
        env: Build-environment flag; gates the search-export collection.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "LEAFPRESS_",
        "env_nested_delimiter": "__",
    }

    site_root: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None

    # --- CLI flags ---
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False
    env: str | None = None

    # --- Top-level build options ---
    template_formats: list[str] = Field(default_factory=lambda: ["njk", "md"])
    html_template_engine: str | None = "njk"
    markdown_template_engine: str | None = "njk"
    passthrough_file_copy: bool = False

    # --- TOML sections ---
    dirs: DirsConfig = Field(default_factory=DirsConfig)
    markdown: MarkdownConfig = Field(default_factory=MarkdownConfig)
    collections: CollectionsConfig = Field(default_factory=CollectionsConfig)
    site: SiteConfig = Field(default_factory=SiteConfig)
    build: BuildConfig = Field(default_factory=BuildConfig)

    # Retained for type-checker visibility; not used at runtime.
    _toml_path: ClassVar[Path | None] = None

    @field_validator("html_template_engine", "markdown_template_engine", mode="before")
    @classmethod
    def _check_engine(cls, value: Any) -> str | None:
        if value is None or value is False or value == "":
            return None
        if value not in TEMPLATE_ENGINES:
            msg = f"Unknown template engine {value!r}; expected one of {sorted(TEMPLATE_ENGINES)}"
            raise ValueError(msg)
        return str(value)

    @field_validator("template_formats")
    @classmethod
    def _normalize_formats(cls, formats: list[str]) -> list[str]:
        normalized = [fmt.strip().lstrip(".").lower() for fmt in formats]
        if not all(normalized):
            msg = "Template formats must be non-empty extensions"
            raise ValueError(msg)
        return normalized

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert TOML source between env vars and defaults."""
        toml_path = getattr(_tls, "toml_path", None)
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, toml_path),
        )

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        site_root: Path | None = None,
        **cli_flags: Any,
    ) -> LeafSettings:
        """Construct settings from a CLI invocation.

        Discovers ``leafpress.toml`` via walk-up (or explicit *config_path*),
        resolves *site_root* from the config file's parent directory,
        and merges CLI flags as highest-priority overrides.  Flags passed
        as ``None`` are treated as "not given".

        Raises:
            ConfigurationError: If the TOML is invalid or any recognized
                option fails validation.
        """
        toml_path: Path | None = None
        if config_path:
            p = Path(config_path)
            if not p.is_file():
                msg = f"Config file not found: {config_path}"
                raise ConfigurationError(msg)
            toml_path = p
        else:
            toml_path = find_config(site_root)

        resolved_root = site_root
        if resolved_root is None:
            resolved_root = toml_path.parent if toml_path else Path.cwd()

        flags = {key: value for key, value in cli_flags.items() if value is not None}

        _tls.toml_path = toml_path
        try:
            return cls(site_root=resolved_root, config_path=toml_path, **flags)
        except ValidationError as exc:
            msg = f"Invalid configuration: {exc}"
            raise ConfigurationError(msg) from exc
        finally:
            _tls.toml_path = None

    # --- Resolved directories ---

    @property
    def input_dir(self) -> Path:
        return (self.site_root / self.dirs.input).resolve()

    @property
    def output_dir(self) -> Path:
        return (self.site_root / self.dirs.output).resolve()

    @property
    def data_dir(self) -> Path:
        return (self.input_dir / self.dirs.data).resolve()

    @property
    def includes_dir(self) -> Path:
        return (self.input_dir / self.dirs.includes).resolve()
