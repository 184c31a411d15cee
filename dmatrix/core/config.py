"""
Library configuration.

Centralized configuration management with environment variables.
"""

from functools import lru_cache
from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """dmatrix settings"""

    model_config = SettingsConfigDict(
        env_prefix="DMATRIX_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Text format
    DEFAULT_DELIMITER: str = " "
    FILE_ENCODING: str = "utf-8"

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "text"  # json or text
    LOG_FILE: Optional[str] = None

    @field_validator("DEFAULT_DELIMITER")
    @classmethod
    def _validate_delimiter(cls, value: str) -> str:
        from ..codec import is_valid_delimiter

        if not is_valid_delimiter(value):
            raise ValueError(f"delimiter must be non-empty and free of digits and '.', got {value!r}")
        return value

    @field_validator("LOG_FORMAT")
    @classmethod
    def _validate_log_format(cls, value: str) -> str:
        if value not in ("json", "text"):
            raise ValueError(f"LOG_FORMAT must be 'json' or 'text', got {value!r}")
        return value


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()
