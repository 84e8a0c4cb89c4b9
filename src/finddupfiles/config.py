"""Configuration management for finddupfiles."""

from pathlib import Path

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from finddupfiles.services.exceptions import ConfigError

DATABASE_NAME = "finddupfiles.db"
LOG_NAME = "finddupfiles.log"


class FindDupFilesConfig(BaseSettings):
    """Settings for a finddupfiles run."""

    # Default to ~/.finddupfiles but allow override with env var
    home: Path = Field(
        default_factory=lambda: Path.home() / ".finddupfiles",
        description="Base path for the index database and log file",
    )

    hash_algorithm: str = Field(
        default="md5", description="hashlib algorithm used for content digests"
    )
    chunk_size: int = Field(default=64 * 1024, gt=0, description="Read buffer size in bytes")
    hash_workers: int = Field(default=4, ge=1, description="Files hashed concurrently")
    include_empty_files: bool = Field(
        default=False, description="Report groups of zero-byte files"
    )
    log_level: str = Field(default="INFO", description="Log level for stderr output")

    model_config = SettingsConfigDict(
        env_prefix="FINDDUPFILES_",
        extra="ignore",
        env_file=".env",
        env_file_encoding="utf-8",
    )

    @property
    def database_path(self) -> Path:
        """Get SQLite database path."""
        return self.home / DATABASE_NAME

    @property
    def log_path(self) -> Path:
        return self.home / LOG_NAME

    @field_validator("home")
    @classmethod
    def ensure_path_exists(cls, v: Path) -> Path:
        """Ensure config home exists."""
        if v.exists() and not v.is_dir():
            raise ValueError(f"{v} is not a directory")
        if not v.exists():
            try:
                v.mkdir(parents=True)
            except OSError as e:
                raise ValueError(f"cannot create {v}: {e.strerror or e}") from e
        return v


def get_config() -> FindDupFilesConfig:
    """
    Load configuration from the environment.

    Raises:
        ConfigError: If a setting is invalid or the home directory cannot be created
    """
    try:
        return FindDupFilesConfig()
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(loc) for loc in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        raise ConfigError(f"invalid configuration: {problems}") from e
