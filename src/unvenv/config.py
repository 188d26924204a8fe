"""Configuration management for unvenv."""

from functools import lru_cache

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Updater settings loaded from ``UNVENV_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="UNVENV_",
        case_sensitive=False,
        extra="ignore",
    )

    # Release source
    github_repo: str = Field(default="workhelix/unvenv", description="owner/repo on GitHub")
    github_api_url: str = Field(default="https://api.github.com", description="GitHub API base")
    github_url: str = Field(default="https://github.com", description="GitHub web base")
    github_token: SecretStr | None = Field(
        default=None, description="Optional token for the release index"
    )

    # Artifact naming
    binary_name: str = Field(default="unvenv", description="Installed binary name")
    tag_prefix: str = Field(default="unvenv-v", description="Release tag prefix")

    # Network (seconds)
    check_timeout: float = Field(default=5.0, gt=0, description="Read-only version check")
    update_check_timeout: float = Field(
        default=10.0, gt=0, description="Version check that precedes an update"
    )
    download_timeout: float = Field(default=300.0, gt=0, description="Archive download")
    user_agent: str = Field(default="unvenv-updater", description="HTTP User-Agent")

    # Policy
    require_checksum: bool = Field(
        default=False, description="Treat a missing .sha256 companion as fatal"
    )

    # Application
    environment: str = Field(default="production", description="Environment name")
    log_level: str = Field(default="ERROR", description="Logging level")
    log_file: str | None = Field(default=None, description="Also write JSON logs to this file")
    log_file_max_bytes: int = Field(default=10 * 1024 * 1024, gt=0, description="Rotate size")
    log_file_backup_count: int = Field(default=3, ge=0, description="Rotated files kept")

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment.lower() == "development"

    @property
    def latest_release_url(self) -> str:
        """Release index endpoint for the latest published release."""
        return f"{self.github_api_url.rstrip('/')}/repos/{self.github_repo}/releases/latest"

    @property
    def release_download_base(self) -> str:
        """Base URL that release tags are appended to."""
        return f"{self.github_url.rstrip('/')}/{self.github_repo}/releases/download"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
