"""Unit tests for application settings."""

import pytest
from pydantic import ValidationError

from groupscope.core.config import Settings, get_settings


def test_defaults():
    settings = Settings(_env_file=None)

    assert settings.app_name == "GroupScope"
    assert settings.api_prefix == "/api/v1"
    assert settings.membership_scope_mode == "primary"
    assert settings.actor_header == "X-User-Id"
    assert settings.is_development is True


def test_reads_prefixed_environment(monkeypatch):
    monkeypatch.setenv("GROUPSCOPE_MEMBERSHIP_SCOPE_MODE", "union")
    monkeypatch.setenv("GROUPSCOPE_ENVIRONMENT", "production")

    settings = Settings(_env_file=None)

    assert settings.membership_scope_mode == "union"
    assert settings.is_production is True


def test_rejects_unknown_scope_mode():
    with pytest.raises(ValidationError):
        Settings(_env_file=None, membership_scope_mode="everything")


def test_parses_comma_separated_cors_origins():
    settings = Settings(_env_file=None, cors_origins="http://a.test, http://b.test,")

    assert settings.cors_origins == ["http://a.test", "http://b.test"]


def test_sqlite_rejects_multiple_workers():
    with pytest.raises(ValidationError, match="SQLite does not support multiple worker"):
        Settings(_env_file=None, workers=4)


def test_get_settings_is_cached():
    assert get_settings() is get_settings()
