"""Configuration models and loading logic."""

from __future__ import annotations

import os
from pathlib import Path
from typing import ClassVar, Literal

from pydantic import AliasChoices, BaseModel, Field, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

DEFAULT_SETTINGS_FILE = Path("configs/settings.yaml")
SETTINGS_FILE_ENV = "EUI_THEMES_SETTINGS_FILE"
TARGET_THEME_ENV = "TARGET_THEME"


class ProjectConfig(BaseModel):
    """Project metadata settings."""

    name: str = "eui_themes"
    env: str = "dev"


class PathsConfig(BaseModel):
    """Filesystem paths used by the theme build."""

    project_root: Path = Path(".")
    dist_root: Path = Path("dist")
    docs_vars_root: Path = Path("src-docs/src/views/theme/_json")
    artifacts_root: Path = Path("artifacts")
    logs_root: Path = Path("logs")

    def resolved(self, project_root: Path) -> "PathsConfig":
        """Return a copy with project-relative paths resolved to absolute paths."""

        updates: dict[str, Path] = {}
        for field_name in type(self).model_fields:
            value = getattr(self, field_name)
            updates[field_name] = value if value.is_absolute() else (project_root / value).resolve()
        return self.model_copy(update=updates)


class ThemeFamilyConfig(BaseModel):
    """One family of theme sources sharing a glob pattern."""

    name: str
    source_pattern: str = Field(min_length=1)


def _default_families() -> list[ThemeFamilyConfig]:
    return [
        ThemeFamilyConfig(name="legacy", source_pattern="src/themes/legacy/legacy_*.scss"),
        ThemeFamilyConfig(name="amsterdam", source_pattern="src/themes/amsterdam/theme_*.scss"),
    ]


class SassConfig(BaseModel):
    """libsass rendering options."""

    output_style: Literal["expanded", "nested", "compact"] = "expanded"
    precision: int = Field(default=5, ge=1, le=20)
    include_paths: list[Path] = Field(default_factory=list)


class PostprocessSettings(BaseModel):
    """Stylesheet postprocessing options."""

    banner: str | None = None

    @field_validator("banner")
    @classmethod
    def _reject_comment_terminator(cls, value: str | None) -> str | None:
        if value is not None and "*/" in value:
            raise ValueError("banner must not contain '*/'")
        return value


class BuildConfig(BaseModel):
    """Artifact naming and run policy."""

    artifact_prefix: str = "eui_"
    named_theme_dir: Path = Path("src/themes/amsterdam")
    named_theme_prefix: str = "theme_"
    source_extension: str = ".scss"
    fail_on_error: bool = False
    write_run_summary: bool = True


class AppSettings(BaseSettings):
    """Top-level application settings."""

    _yaml_file_override: ClassVar[Path | None] = None

    project: ProjectConfig = Field(default_factory=ProjectConfig)
    paths: PathsConfig = Field(default_factory=PathsConfig)
    families: list[ThemeFamilyConfig] = Field(default_factory=_default_families)
    sass: SassConfig = Field(default_factory=SassConfig)
    postprocess: PostprocessSettings = Field(default_factory=PostprocessSettings)
    build: BuildConfig = Field(default_factory=BuildConfig)
    target_theme: str | None = Field(
        default=None,
        validation_alias=AliasChoices("target_theme", TARGET_THEME_ENV),
    )

    model_config = SettingsConfigDict(
        env_prefix="EUI_THEMES_",
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("target_theme")
    @classmethod
    def _blank_theme_is_unset(cls, value: str | None) -> str | None:
        if value is None:
            return None
        stripped = value.strip()
        return stripped or None

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Use YAML defaults while allowing env vars to override values."""

        yaml_file = resolve_settings_file(cls._yaml_file_override)
        yaml_settings = YamlConfigSettingsSource(settings_cls, yaml_file=yaml_file)
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            yaml_settings,
            file_secret_settings,
        )

    def named_theme_dir(self) -> Path:
        """Directory that holds named `theme_<name>` sources, resolved against the project root."""

        directory = self.build.named_theme_dir
        return directory if directory.is_absolute() else (self.paths.project_root / directory).resolve()

    def as_dict(self) -> dict[str, object]:
        """Return settings as a standard nested dictionary."""

        return self.model_dump(mode="json")


def find_project_root(start: Path | None = None) -> Path:
    """Locate the project root by traversing upward for config markers."""

    current = (start or Path.cwd()).resolve()
    for candidate in (current, *current.parents):
        if (candidate / DEFAULT_SETTINGS_FILE).exists():
            return candidate
    return current


def resolve_settings_file(override: Path | None = None) -> Path:
    """Resolve settings file from explicit override, env var, or default."""

    chosen = override
    if chosen is None:
        env_value = os.getenv(SETTINGS_FILE_ENV)
        if env_value:
            chosen = Path(env_value)
    if chosen is None:
        chosen = DEFAULT_SETTINGS_FILE

    if not chosen.is_absolute():
        chosen = (find_project_root() / chosen).resolve()
    return chosen


def load_settings(config_file: Path | None = None, **overrides: object) -> AppSettings:
    """Load settings with YAML defaults and environment variable overrides.

    Keyword overrides take precedence over every other source (CLI options use this).
    """

    settings_file = resolve_settings_file(config_file)
    project_root = settings_file.parent.parent.resolve()
    AppSettings._yaml_file_override = settings_file
    try:
        settings = AppSettings(**overrides)
    finally:
        AppSettings._yaml_file_override = None
    resolved_paths = settings.paths.resolved(project_root=project_root)
    return settings.model_copy(update={"paths": resolved_paths})
