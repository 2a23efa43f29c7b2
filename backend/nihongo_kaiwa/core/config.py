"""Application configuration."""
from pathlib import Path
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List
from urllib.parse import urlparse

from nihongo_kaiwa.services.openrouter.catalog import DEFAULT_MODEL

# Get the project root directory (4 levels up from this file: backend/nihongo_kaiwa/core/config.py)
PROJECT_ROOT = Path(__file__).parent.parent.parent.parent
ENV_FILE = PROJECT_ROOT / ".env"


class Settings(BaseSettings):
    """Application settings."""

    # Application
    APP_NAME: str = "AI Nihongo Kaiwa"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    HOST: str = "0.0.0.0"
    PORT: int = 3000

    # CORS - stored as string in env, converted to list
    CORS_ORIGINS: str = "*"

    @property
    def cors_origins_list(self) -> List[str]:
        """Get CORS origins as a list."""
        origins = [origin.strip() for origin in self.CORS_ORIGINS.split(',') if origin.strip()]
        return origins if origins else ["*"]

    # Front end assets (served only when the directory exists)
    STATIC_DIR: Path = PROJECT_ROOT / "public"

    # Logging
    LOG_DIR: Path = PROJECT_ROOT / "logs"
    LOG_LEVEL: str = "INFO"
    LOG_TO_FILE: bool = True

    # OpenRouter
    OPENROUTER_API_KEY: str = ""
    OPENROUTER_BASE_URL: str = "https://openrouter.ai/api/v1"
    OPENROUTER_AUTH_PATH: str = "/auth/key"  # Lightweight authenticated endpoint used by connect()
    OPENROUTER_APP_URL: str = "http://localhost:3000"  # Sent as HTTP-Referer
    OPENROUTER_APP_TITLE: str = "AI Nihongo Kaiwa"  # Sent as X-Title
    OPENROUTER_DEFAULT_MODEL: str = DEFAULT_MODEL.value
    OPENROUTER_TIMEOUT: float = 60.0  # seconds

    # Persona
    PERSONA_NAME: str = "Sakura"
    PERSONA_VERSION: str = "v1"
    LEARNER_LANGUAGE: str = "Indonesian"

    model_config = SettingsConfigDict(
        env_file=str(ENV_FILE) if ENV_FILE.exists() else ".env",
        case_sensitive=True,
        env_file_encoding="utf-8",
        extra="ignore",  # Ignore extra fields from .env that aren't in this model
    )

    @field_validator('OPENROUTER_BASE_URL', 'OPENROUTER_APP_URL')
    @classmethod
    def validate_http_url(cls, v: str) -> str:
        """Validate that upstream and referer URLs are absolute http(s) URLs."""
        if not v.startswith(('http://', 'https://')):
            raise ValueError('URL must start with http:// or https://')
        parsed = urlparse(v)
        if not parsed.netloc:
            raise ValueError(f'Invalid URL, missing host: {v}')
        return v.rstrip('/')

    @field_validator('OPENROUTER_AUTH_PATH')
    @classmethod
    def validate_auth_path(cls, v: str) -> str:
        """Ensure the probe path is relative to the base URL."""
        return v if v.startswith('/') else f'/{v}'

    @field_validator('OPENROUTER_TIMEOUT')
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        """Validate request timeout."""
        if v <= 0:
            raise ValueError('OPENROUTER_TIMEOUT must be greater than 0')
        return v

    @field_validator('LOG_LEVEL')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize log level name."""
        level = v.upper()
        if level not in ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'):
            raise ValueError(f'Unknown LOG_LEVEL: {v}')
        return level


settings = Settings()
