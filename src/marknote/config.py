"""Configuration management for marknote.

Loads from environment variables, .env files, and an optional TOML file.

Default root directory: ~/.config/marknote/
  notes/                — Markdown notes (any depth)
  notes/daily-notes/    — YYYY-MM-DD.md daily notes
  tasks.json            — Task collection
  marknote.log          — Log output (the terminal belongs to curses)
"""

from __future__ import annotations

import tomllib
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from marknote.errors import IoFailure

MARKNOTE_HOME = Path.home() / ".config" / "marknote"


class WatchConfig(BaseSettings):
    """External-change watcher configuration."""

    enabled: bool = True
    debounce_ms: int = 200


class UIConfig(BaseSettings):
    """Terminal loop configuration."""

    poll_ms: int = 50
    tick_seconds: float = 1.0


class Settings(BaseSettings):
    """Root configuration."""

    model_config = SettingsConfigDict(
        env_prefix="MARKNOTE_",
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    root: Path = Field(default=MARKNOTE_HOME, description="Config root holding notes and tasks")
    notes_folder: str = "notes"
    daily_folder: str = "daily-notes"
    tasks_file: str = "tasks.json"
    log_file: str = "marknote.log"
    watch: WatchConfig = Field(default_factory=WatchConfig)
    ui: UIConfig = Field(default_factory=UIConfig)

    @field_validator("root")
    @classmethod
    def expand_root(cls, v: Path) -> Path:
        return v.expanduser()

    @property
    def notes_dir(self) -> Path:
        return self.root / self.notes_folder

    @property
    def daily_dir(self) -> Path:
        return self.notes_dir / self.daily_folder

    @property
    def tasks_path(self) -> Path:
        return self.root / self.tasks_file

    @property
    def log_path(self) -> Path:
        return self.root / self.log_file

    def ensure_layout(self) -> None:
        """Create the notes and daily-notes directories.

        Raises IoFailure if the tree cannot be created; callers treat that
        as a fatal startup error.
        """
        try:
            self.daily_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise IoFailure(self.root, e) from e

    @classmethod
    def from_toml(cls, path: Path | None = None, **overrides: object) -> Settings:
        """Load settings from TOML file, with env var overrides."""
        data: dict[str, object] = {}
        if path is not None and path.exists():
            with open(path, "rb") as f:
                data = tomllib.load(f)
        data.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**data)


def load_settings(config_path: Path | None = None, root: Path | None = None) -> Settings:
    """Load and validate settings. Entry point for all config access."""
    return Settings.from_toml(config_path, root=root)
