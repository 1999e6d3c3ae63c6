"""Runtime configuration — env-driven via pydantic-settings.

Reads from a .env file and ARTIFACTSOURCE_* environment variables.

Examples
--------
Override via environment::

    export ARTIFACTSOURCE_GITHUB_TOKEN=ghp_...
    export ARTIFACTSOURCE_LOG_LEVEL=DEBUG
    export ARTIFACTSOURCE_CLONE_DEPTH=50
"""

from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class SourceSettings(BaseSettings):
    """Settings shared by the readers, writers, cloner and remote clients."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="ARTIFACTSOURCE_",
        env_file_encoding="utf-8",
    )

    log_level: str = "INFO"

    # Remote host
    github_token: str = ""
    github_api_url: str = "https://api.github.com"
    github_url: str = "https://github.com"
    default_branch: str = "master"
    http_timeout_seconds: float = 30.0

    # Cloning
    clone_depth: int = 10
    clone_timeout_seconds: int = 300

    # Binary sniffing
    binary_sample_size: int = 8000

    @property
    def has_token(self) -> bool:
        return bool(self.github_token.strip())


# Module-level singleton; import as `from artifactsource.config import config`
config = SourceSettings()
