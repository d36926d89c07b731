"""Configuration for focustree.

Settings live in ~/.focustree/config.json; a few can be overridden with
environment variables.
"""

import json
import os
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

DEFAULT_DEBOUNCE_DELAY = 0.5

ENV_DATA_DIR = "FOCUSTREE_DATA_DIR"
ENV_DEBOUNCE = "FOCUSTREE_DEBOUNCE"
ENV_LOG_LEVEL = "FOCUSTREE_LOG_LEVEL"


class Settings(BaseModel):
    """User settings."""

    data_dir: Path = Field(default_factory=Path.cwd)
    debounce_delay: float = Field(default=DEFAULT_DEBOUNCE_DELAY, ge=0)
    host: str = "127.0.0.1"
    port: int = 8000
    api_url: str | None = None
    log_level: str = "WARNING"


def get_config_dir() -> Path:
    """Get the focustree config directory."""
    config_dir = Path.home() / ".focustree"
    config_dir.mkdir(exist_ok=True)
    return config_dir


def _apply_env(settings: Settings) -> Settings:
    overrides: dict = {}
    if data_dir := os.environ.get(ENV_DATA_DIR):
        overrides["data_dir"] = Path(data_dir)
    if delay := os.environ.get(ENV_DEBOUNCE):
        try:
            overrides["debounce_delay"] = float(delay)
        except ValueError:
            pass
    if level := os.environ.get(ENV_LOG_LEVEL):
        overrides["log_level"] = level.upper()
    return settings.model_copy(update=overrides) if overrides else settings


def load_settings() -> Settings:
    """Load settings from the config file, then apply environment overrides.

    A missing or invalid config file yields the defaults.
    """
    config_file = get_config_dir() / "config.json"
    settings = Settings()
    if config_file.exists():
        try:
            data = json.loads(config_file.read_text(encoding="utf-8"))
            settings = Settings(**data)
        except (json.JSONDecodeError, ValidationError, TypeError):
            pass
    return _apply_env(settings)


def save_settings(settings: Settings) -> None:
    """Save settings to the config file."""
    config_file = get_config_dir() / "config.json"
    config_file.write_text(
        json.dumps(settings.model_dump(mode="json"), indent=2),
        encoding="utf-8",
    )
