"""Application configuration with pydantic-settings + TOML."""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict, TomlConfigSettingsSource


def _default_config_dir() -> Path:
    return Path.home() / ".fabforge"


class HistorySettings(BaseSettings):
    """Undo/redo history limits."""

    max_entries: int = Field(default=100, ge=1)


class ContentSettings(BaseSettings):
    """Where fabs and sprites live inside a game directory."""

    search_dirs: list[str] = Field(default_factory=lambda: ["data/fabs", "src/renderer/gfx"])
    image_extensions: list[str] = Field(
        default_factory=lambda: [".png", ".jpg", ".jpeg", ".webp"]
    )
    fab_extensions: list[str] = Field(default_factory=lambda: [".fab.json"])
    sprite_root: str = "src/renderer/gfx"
    image_node_size: float = Field(default=0.25, gt=0)
    default_rotation: float = 270.0  # degrees


class PreviewSettings(BaseSettings):
    """Defaults for rendered preview images."""

    width: int = Field(default=512, gt=0)
    height: int = Field(default=512, gt=0)
    size: float = 100.0
    direction: float = 270.0  # degrees
    background: tuple[int, int, int] = (24, 24, 32)
    joint_radius: int = Field(default=4, ge=0)
    line_width: int = Field(default=2, ge=1)


class AppConfig(BaseSettings):
    """Root application configuration."""

    model_config = SettingsConfigDict(
        env_prefix="FABFORGE_",
        env_nested_delimiter="__",
    )

    config_dir: Path = Field(default_factory=_default_config_dir)
    history: HistorySettings = Field(default_factory=HistorySettings)
    content: ContentSettings = Field(default_factory=ContentSettings)
    preview: PreviewSettings = Field(default_factory=PreviewSettings)

    @classmethod
    def settings_customise_sources(cls, settings_cls, **kwargs):  # type: ignore[override]
        toml_path = _default_config_dir() / "config.toml"
        sources = (
            kwargs.get("init_settings"),
            kwargs.get("env_settings"),
        )
        if toml_path.exists():
            sources = (*sources, TomlConfigSettingsSource(settings_cls, toml_file=toml_path))
        return (*sources, kwargs.get("dotenv_settings"), kwargs.get("file_secret_settings"))


def load_config() -> AppConfig:
    """Load application config from the environment and ``config.toml``."""
    return AppConfig()
