"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

from attendance_ledger.adapters.sheets_client import SHEETS_BASE_URL

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    google_sheet_id: str
    google_credentials: str
    sheets_base_url: str = SHEETS_BASE_URL
    sheets_timeout_seconds: float = 15
    lock_grace_seconds: float = 3.0
    duplicate_release_seconds: float = 1.0
    lock_max_hold_seconds: float = 60.0
    day_boundary_timezone: str = "UTC"
    cascade_session_delete: bool = False
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )
