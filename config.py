"""
config.py

Centralized configuration management using pydantic-settings.
All modules must import settings from this file.
Direct os.getenv() calls are prohibited elsewhere.
"""

from typing import Literal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application-wide settings loaded from .env file."""

    # Device telemetry API
    api_base: str = ""
    source_timeout_seconds: float = 5.0
    source_user_agent: str = "i-copy-api/1.0"

    # Unit of DeviceStatusRecord.last_timestamp as emitted by the device API
    heart_rate_timestamp_unit: Literal["ns", "ms"] = "ns"

    # CORS
    cors_allow_origins: list[str] = ["*"]

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
    }


settings = Settings()
