"""Configuration management via environment variables."""

from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_FEED_URL = "https://feeds.feedburner.com/ndtvnews-latest"
DEFAULT_LISTING_URL = "https://www.ndtv.com/latest"

# SigV4 presigned URLs are capped at seven days.
MAX_SIGNED_URL_EXPIRY = 7 * 24 * 60 * 60


class Config(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    gemini_api_key: str
    storage_endpoint_url: str
    storage_access_key_id: str
    storage_secret_access_key: str
    publish_url: str

    publish_token: str | None = None
    storage_bucket: str = "images"
    storage_region: str = "us-east-1"
    signed_url_expiry: int = MAX_SIGNED_URL_EXPIRY

    feed_url: str = DEFAULT_FEED_URL
    listing_url: str = DEFAULT_LISTING_URL

    gemini_base_url: str = "https://generativelanguage.googleapis.com"
    gemini_text_model: str = "gemini-2.0-flash"
    gemini_image_model: str = "gemini-2.0-flash-preview-image-generation"

    article_count: int = 15
    article_delay_seconds: float = 1.5
    image_backup_dir: Path | None = None
    log_level: str = "INFO"

    @field_validator(
        "gemini_api_key",
        "storage_endpoint_url",
        "storage_access_key_id",
        "storage_secret_access_key",
        "publish_url",
    )
    @classmethod
    def must_not_be_empty(cls, v: str) -> str:
        """Reject empty or whitespace-only values."""
        if not v or not v.strip():
            raise ValueError("must not be empty or whitespace")
        return v

    @field_validator("signed_url_expiry")
    @classmethod
    def expiry_within_sigv4_limit(cls, v: int) -> int:
        if v <= 0 or v > MAX_SIGNED_URL_EXPIRY:
            raise ValueError(f"must be between 1 and {MAX_SIGNED_URL_EXPIRY} seconds")
        return v

    @field_validator("article_count")
    @classmethod
    def count_must_be_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("must be at least 1")
        return v

    @field_validator("article_delay_seconds")
    @classmethod
    def delay_not_negative(cls, v: float) -> float:
        if v < 0:
            raise ValueError("must not be negative")
        return v
