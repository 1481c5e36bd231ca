"""
DiffWatch Configuration Module.

Centralizes all configuration settings using Pydantic Settings.
Requires Python 3.11+.
"""

from functools import lru_cache
from pathlib import Path
from typing import Annotated

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

# Load .env file into os.environ at module import time
# This ensures nested BaseSettings classes can read the values
_env_file = Path(__file__).parent.parent / ".env"
if _env_file.exists():
    load_dotenv(_env_file)
else:
    # Try current working directory
    load_dotenv()


class WatcherSettings(BaseSettings):
    """File watcher configuration settings."""

    model_config = SettingsConfigDict(env_prefix="WATCHER_")

    repo_path: Path = Field(default_factory=Path.cwd, description="Working tree to watch")
    debounce_delay_ms: int = Field(default=2000, ge=50, le=60000)
    recursive: bool = Field(default=True)
    ignore_hidden: bool = Field(default=True, description="Skip paths with a dot-prefixed component")

    ignore_patterns: Annotated[list[str], NoDecode] = Field(
        default=[
            "node_modules",
            ".git",
            "__pycache__",
            ".venv",
            "dist",
            "build",
        ],
        description="Path components (names or glob patterns) to ignore",
    )

    @field_validator("ignore_patterns", mode="before")
    @classmethod
    def parse_ignore_patterns(cls, v: str | list[str]) -> list[str]:
        """Parse ignore patterns from comma-separated string or list."""
        if isinstance(v, str):
            return [p.strip() for p in v.split(",") if p.strip()]
        return v


class WebhookSettings(BaseSettings):
    """Outbound notification settings."""

    model_config = SettingsConfigDict(env_prefix="WEBHOOK_")

    url: str = Field(default="http://localhost:3000/autodocs/git")
    timeout_seconds: float = Field(default=10.0, gt=0.0)


class GitSettings(BaseSettings):
    """git executable settings."""

    model_config = SettingsConfigDict(env_prefix="GIT_")

    executable: str = Field(default="git")
    timeout_seconds: float = Field(default=30.0, gt=0.0)


class APISettings(BaseSettings):
    """Receiver server configuration settings."""

    model_config = SettingsConfigDict(env_prefix="API_")

    host: str = Field(default="0.0.0.0")
    port: int = Field(default=3000, ge=1, le=65535)
    debug: bool = Field(default=False)


class StorageSettings(BaseSettings):
    """Receiver persistence settings."""

    model_config = SettingsConfigDict(env_prefix="STORAGE_")

    log_file: Path = Field(default=Path("webhook-logs.json"))
    diff_dir: Path = Field(default=Path("diffs"))
    max_log_entries: int = Field(default=100, ge=1)


class LoggingSettings(BaseSettings):
    """Logging configuration settings."""

    model_config = SettingsConfigDict(env_prefix="LOG_")

    level: str = Field(default="INFO")
    format: str = Field(default="console")  # "json" or "console"


class Settings(BaseSettings):
    """Main application settings aggregating all sub-settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application metadata
    app_name: str = Field(default="DiffWatch")
    app_version: str = Field(default="0.1.0")
    environment: str = Field(default="development")

    # Sub-settings
    watcher: WatcherSettings = Field(default_factory=WatcherSettings)
    webhook: WebhookSettings = Field(default_factory=WebhookSettings)
    git: GitSettings = Field(default_factory=GitSettings)
    api: APISettings = Field(default_factory=APISettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment.lower() in ("development", "dev", "local")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Get cached application settings.

    Returns singleton instance of Settings for performance.
    """
    return Settings()
