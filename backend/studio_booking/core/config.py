"""
Application configuration using pydantic-settings.
All config is loaded from environment variables with sensible defaults.
"""

from typing import Optional

from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    # Application
    APP_NAME: str = "Studio Booking API"
    APP_VERSION: str = "1.0.0"
    ENVIRONMENT: str = "development"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: str = "*"

    # Firebase (identity provider + Firestore)
    FIREBASE_PROJECT_ID: str = "booking-app-1af02"
    FIREBASE_CREDENTIALS_FILE: Optional[str] = None  # falls back to ADC
    FIRESTORE_APP_ID: Optional[str] = None  # path segment under artifacts/

    # Google Calendar
    GOOGLE_CALENDAR_ID: str = "primary"
    GOOGLE_CALENDAR_CREDENTIALS_FILE: Optional[str] = None
    CALENDAR_TIMEZONE: str = "Asia/Makassar"
    CALENDAR_TIMEOUT_SECONDS: float = 10.0

    # SMTP
    SMTP_HOST: str = "smtp.gmail.com"
    SMTP_PORT: int = 587
    SMTP_USERNAME: str = ""
    SMTP_PASSWORD: str = ""
    SMTP_USE_TLS: bool = True
    SMTP_TIMEOUT_SECONDS: int = 30
    MAIL_FROM: Optional[str] = None  # defaults to SMTP_USERNAME
    ADMIN_EMAILS: str = ""  # comma separated

    # Links embedded in emails
    FRONTEND_URL: Optional[str] = None
    ADMIN_DASHBOARD_URL: str = "http://localhost:5173"

    model_config = {
        "env_file": ".env",
        "case_sensitive": True,
    }

    @property
    def firestore_app_id(self) -> str:
        return self.FIRESTORE_APP_ID or self.FIREBASE_PROJECT_ID

    @property
    def admin_email_list(self) -> list[str]:
        return [e.strip() for e in self.ADMIN_EMAILS.split(",") if e.strip()]

    @property
    def cors_origin_list(self) -> list[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]

    @property
    def mail_sender(self) -> str:
        return self.MAIL_FROM or self.SMTP_USERNAME


@lru_cache()
def get_settings() -> Settings:
    return Settings()
