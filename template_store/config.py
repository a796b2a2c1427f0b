"""Configuration settings for Template Store."""

from typing import Optional
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    # Application
    app_name: str = Field(default="Template Store")
    debug: bool = Field(default=False)
    environment: str = Field(default="development", validation_alias="APP_ENV")

    # Backend selection: "local" or "rest"
    templates_backend: str = Field(default="local")

    # Local store
    data_path: Path = Field(default=Path("./data"))
    storage_key: str = Field(default="emailTemplates")
    send_test_delay: float = Field(default=0.4)

    # Remote store
    api_base_url: str = Field(
        default="http://localhost:8009/api/v1", validation_alias="TEMPLATES_API_BASE"
    )
    api_key: Optional[str] = Field(default=None, validation_alias="TEMPLATES_API_KEY")
    request_timeout: float = Field(default=10.0)

    # Logging
    log_level: str = Field(default="INFO")
    log_file: Optional[str] = Field(default=None)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )


# Create global settings instance
settings = Settings()
