"""Tests for service settings."""

from pydantic import ValidationError
import pytest

from buildlab.config import Settings, get_settings


class TestSettings:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("SLUG_MAX_LENGTH", raising=False)
        monkeypatch.delenv("LLM_MODEL", raising=False)
        settings = Settings(_env_file=None)
        assert settings.slug_max_length == 30  # noqa: PLR2004
        assert settings.upstream_excerpt_chars == 8000  # noqa: PLR2004
        assert settings.prd_excerpt_chars == 2000  # noqa: PLR2004
        assert settings.tech_spec_excerpt_chars == 2000  # noqa: PLR2004
        assert settings.document_preview_chars == 500  # noqa: PLR2004
        assert settings.github_repo_prefix == "buildlab"
        assert settings.llm_model == "gpt-4o"

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("GITHUB_TOKEN", "ghs_env")
        monkeypatch.setenv("S3_BUCKET", "previews-staging")
        monkeypatch.setenv("LLM_PROVIDER", "openrouter")

        settings = Settings(_env_file=None)

        assert settings.github_token == "ghs_env"  # noqa: S105
        assert settings.s3_bucket == "previews-staging"
        assert settings.llm_provider == "openrouter"

    def test_log_level_normalised(self):
        assert Settings(_env_file=None, log_level="debug").log_level == "DEBUG"

    def test_invalid_log_level(self):
        with pytest.raises(ValidationError, match="Invalid log level"):
            Settings(_env_file=None, log_level="LOUD")

    def test_invalid_provider(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, llm_provider="anthropic")

    def test_get_settings_cached(self):
        get_settings.cache_clear()
        assert get_settings() is get_settings()
        get_settings.cache_clear()
