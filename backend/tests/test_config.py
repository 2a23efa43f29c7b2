"""Tests for application settings."""
import pytest
from pydantic import ValidationError
from nihongo_kaiwa.core.config import Settings


def test_defaults(monkeypatch):
    monkeypatch.delenv("OPENROUTER_API_KEY", raising=False)
    settings = Settings(_env_file=None)

    assert settings.OPENROUTER_API_KEY == ""
    assert settings.OPENROUTER_BASE_URL == "https://openrouter.ai/api/v1"
    assert settings.OPENROUTER_DEFAULT_MODEL == "google/gemma-3-4b-it:free"
    assert settings.OPENROUTER_TIMEOUT == 60.0
    assert settings.PORT == 3000
    assert settings.cors_origins_list == ["*"]


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("OPENROUTER_API_KEY", "sk-or-env")
    monkeypatch.setenv("OPENROUTER_BASE_URL", "https://proxy.example.com/v1/")
    monkeypatch.setenv("OPENROUTER_AUTH_PATH", "key")
    monkeypatch.setenv("CORS_ORIGINS", "http://localhost:3000, https://kaiwa.example.com")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    settings = Settings(_env_file=None)

    assert settings.OPENROUTER_API_KEY == "sk-or-env"
    assert settings.OPENROUTER_BASE_URL == "https://proxy.example.com/v1"
    assert settings.OPENROUTER_AUTH_PATH == "/key"
    assert settings.cors_origins_list == ["http://localhost:3000", "https://kaiwa.example.com"]
    assert settings.LOG_LEVEL == "DEBUG"


@pytest.mark.parametrize("field,value", [
    ("OPENROUTER_BASE_URL", "openrouter.ai/api/v1"),
    ("OPENROUTER_APP_URL", "http://"),
    ("OPENROUTER_TIMEOUT", "0"),
    ("LOG_LEVEL", "LOUD"),
])
def test_invalid_values(monkeypatch, field, value):
    monkeypatch.setenv(field, value)

    with pytest.raises(ValidationError):
        Settings(_env_file=None)
