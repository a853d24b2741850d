"""Application configuration settings."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_FILE = ".env"
ENV_FILE_ENCODING = "utf-8"

_MIN_BATCH_SIZE = 10
_MAX_BATCH_SIZE = 500


class Settings(BaseSettings):
    """Application configuration values loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE, env_file_encoding=ENV_FILE_ENCODING, extra="ignore"
    )

    database_url: str = Field(
        description="Database connection URL used by SQLAlchemy to connect to the DB",
        min_length=1,
    )
    app_timezone: str = Field(
        default="UTC",
        description="Timezone used when a user has not configured one",
    )
    default_page_size: int = Field(
        default=20,
        description="Number of notifications returned per page when no limit is given",
    )
    default_batch_size: int = Field(
        default=100,
        description="Chunk size used by tunable bulk mutations when none is given",
    )
    digest_batch_size: int = Field(
        default=100,
        description="Chunk size used when stamping notifications included in a digest",
    )
    marketing_types: list[str] = Field(
        default_factory=lambda: ["marketing"],
        description="Notification types classified as marketing content",
    )
    promotional_types: list[str] = Field(
        default_factory=lambda: ["promotional", "promotion"],
        description="Notification types classified as promotional content",
    )
    log_level: str = Field(default="INFO", description="Root logging level")

    @model_validator(mode="after")
    def _validate_sizes(self) -> "Settings":
        if not 1 <= self.default_page_size <= 100:
            raise ValueError("DEFAULT_PAGE_SIZE must be between 1 and 100")
        for name in ("default_batch_size", "digest_batch_size"):
            value = getattr(self, name)
            if not _MIN_BATCH_SIZE <= value <= _MAX_BATCH_SIZE:
                raise ValueError(
                    f"{name.upper()} must be between {_MIN_BATCH_SIZE} and {_MAX_BATCH_SIZE}"
                )
        return self


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings instance."""

    return Settings()


def reset_settings_cache() -> None:
    """Clear the settings cache to force reloading from the environment."""

    get_settings.cache_clear()


__all__ = ["Settings", "get_settings", "reset_settings_cache"]
