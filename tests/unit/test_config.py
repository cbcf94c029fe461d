"""Unit tests for configuration loading."""

import pytest
from pydantic import ValidationError

from news_rewrite.config import DEFAULT_FEED_URL, MAX_SIGNED_URL_EXPIRY, Config

REQUIRED_ENV = {
    "GEMINI_API_KEY": "test-gemini-key",
    "STORAGE_ENDPOINT_URL": "https://storage.example.com/s3",
    "STORAGE_ACCESS_KEY_ID": "test-access-key",
    "STORAGE_SECRET_ACCESS_KEY": "test-secret-key",
    "PUBLISH_URL": "https://api.example.com/functions/v1/publish-article",
}


@pytest.fixture
def required_env(monkeypatch):
    """Set every required variable."""
    for name, value in REQUIRED_ENV.items():
        monkeypatch.setenv(name, value)


class TestConfig:
    """Tests for the Config model."""

    @pytest.mark.parametrize("missing", sorted(REQUIRED_ENV))
    def test_config_requires_each_value(self, monkeypatch, required_env, missing):
        """Each required variable missing should raise ValidationError naming it."""
        monkeypatch.delenv(missing)

        with pytest.raises(ValidationError) as exc_info:
            Config(_env_file=None)

        assert missing.lower() in str(exc_info.value).lower()

    def test_config_loads_from_environment(self, required_env):
        """Config should load values from environment variables."""
        config = Config(_env_file=None)

        assert config.gemini_api_key == "test-gemini-key"
        assert config.storage_endpoint_url == "https://storage.example.com/s3"
        assert config.publish_url.endswith("/publish-article")

    def test_config_defaults(self, required_env):
        """Optional settings should fall back to their defaults."""
        config = Config(_env_file=None)

        assert config.storage_bucket == "images"
        assert config.feed_url == DEFAULT_FEED_URL
        assert config.article_count == 15
        assert config.article_delay_seconds == 1.5
        assert config.signed_url_expiry == MAX_SIGNED_URL_EXPIRY
        assert config.publish_token is None
        assert config.image_backup_dir is None

    def test_config_rejects_empty_api_key(self, monkeypatch, required_env):
        """Config with empty string API key should raise ValidationError."""
        monkeypatch.setenv("GEMINI_API_KEY", "")

        with pytest.raises(ValidationError):
            Config(_env_file=None)

    def test_config_rejects_whitespace_publish_url(self, monkeypatch, required_env):
        """Whitespace-only publish URL should raise ValidationError."""
        monkeypatch.setenv("PUBLISH_URL", "   ")

        with pytest.raises(ValidationError):
            Config(_env_file=None)

    def test_config_rejects_expiry_beyond_sigv4_limit(self, monkeypatch, required_env):
        """Signed URLs cannot outlive seven days."""
        monkeypatch.setenv("SIGNED_URL_EXPIRY", str(MAX_SIGNED_URL_EXPIRY + 1))

        with pytest.raises(ValidationError):
            Config(_env_file=None)

    def test_config_rejects_zero_count(self, monkeypatch, required_env):
        monkeypatch.setenv("ARTICLE_COUNT", "0")

        with pytest.raises(ValidationError):
            Config(_env_file=None)

    def test_config_rejects_negative_delay(self, monkeypatch, required_env):
        monkeypatch.setenv("ARTICLE_DELAY_SECONDS", "-1")

        with pytest.raises(ValidationError):
            Config(_env_file=None)

    def test_config_reads_optional_overrides(self, monkeypatch, required_env, tmp_path):
        monkeypatch.setenv("STORAGE_BUCKET", "news-images")
        monkeypatch.setenv("ARTICLE_COUNT", "3")
        monkeypatch.setenv("IMAGE_BACKUP_DIR", str(tmp_path))

        config = Config(_env_file=None)

        assert config.storage_bucket == "news-images"
        assert config.article_count == 3
        assert config.image_backup_dir == tmp_path
