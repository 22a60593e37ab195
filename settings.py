from __future__ import annotations
from functools import lru_cache
from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_ORIGINS = "http://localhost:5173,http://localhost:3000"

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    EMAIL_USER: str = ""
    EMAIL_PASS: str = ""
    # When unset, admin notices go to the submitter's own address
    ADMIN_EMAIL: Optional[str] = None
    SMTP_HOST: str = "smtp.gmail.com"
    SMTP_PORT: int = 587
    SMTP_TIMEOUT: float = 10.0

    HOST: str = "0.0.0.0"
    PORT: int = 10000
    APP_ENV: str = "development"
    LOG_LEVEL: str = "INFO"
    ALLOWED_ORIGINS: str = DEFAULT_ORIGINS

    @property
    def allowed_origins(self) -> list[str]:
        return [o.strip() for o in self.ALLOWED_ORIGINS.split(",") if o.strip()]

@lru_cache()
def get_settings() -> Settings:
    return Settings()
