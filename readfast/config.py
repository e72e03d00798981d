"""Application configuration settings."""

from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="READFAST_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # App
    app_name: str = "ReadFast"
    debug: bool = False
    log_level: str = "INFO"
    cors_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:5173", "http://localhost:3000"]
    )

    # Playback
    min_wpm: int = Field(default=100, ge=1)
    max_wpm: int = Field(default=1000, ge=1)
    default_wpm: int = 300
    wpm_step: int = Field(default=25, ge=1)

    # Free tier / premium
    free_max_wpm: int = 400
    free_max_words_per_day: int = Field(default=5000, ge=0)
    free_max_documents_per_day: int = Field(default=3, ge=0)
    premium_duration_days: int = Field(default=365, ge=1)

    # Local storage
    storage_path: str = "./data/readfast.json"
    max_recent_documents: int = Field(default=10, ge=1)
    fingerprint_sample_chars: int = Field(default=500, ge=1)
    progress_save_interval: int = Field(default=25, ge=1)

    # Text extraction
    url_fetch_timeout_seconds: float = Field(default=15.0, gt=0)
    min_extracted_chars: int = 100
    main_content_min_chars: int = 500
    max_upload_bytes: int = 10 * 1024 * 1024

    @model_validator(mode="after")
    def validate_rate_bounds(self) -> "Settings":
        if self.min_wpm > self.max_wpm:
            raise ValueError("min_wpm must not exceed max_wpm")
        if not self.min_wpm <= self.default_wpm <= self.max_wpm:
            raise ValueError("default_wpm must lie within [min_wpm, max_wpm]")
        if not self.min_wpm <= self.free_max_wpm <= self.max_wpm:
            raise ValueError("free_max_wpm must lie within [min_wpm, max_wpm]")
        return self


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings."""
    return Settings()


def reset_settings() -> None:
    """Clear the cached settings so the next call re-reads the environment."""
    get_settings.cache_clear()
