"""Application settings"""

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

_PROJECT_ROOT = Path(__file__).resolve().parents[3]
_ENV_FILE = _PROJECT_ROOT / ".env"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # e.g. postgresql+asyncpg://user:pass@db/reliefhub
    database_url: str = Field(...)

    # Captcha
    captcha_expire_minutes: int = 5

    # CORS
    cors_allow_origin: str = "*"

    # Hosted auth provider (GoTrue-compatible)
    auth_provider_url: str | None = None
    auth_provider_api_key: str | None = None
    auth_provider_timeout_seconds: float = 10.0
    admin_email_domain: str = "@g.bracu.ac.bd"

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    @property
    def auth_provider_configured(self) -> bool:
        return bool(self.auth_provider_url and self.auth_provider_api_key)


settings = Settings()
