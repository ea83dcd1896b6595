"""Application configuration utilities."""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import AliasChoices, BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class LoggingConfig(BaseModel):
    level: str = Field(default="INFO", description="Root logger level")
    json_logs: bool = Field(default=True, description="Enable JSON formatted logs")


class Settings(BaseSettings):
    """Central application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        populate_by_name=True,
        env_file=(Path(__file__).resolve().parent.parent / ".env"),
        env_file_encoding="utf-8",
    )

    app_name: str = Field(default="paybysquare")
    environment: Literal["development", "staging", "production"] = Field(default="development")
    api_key: str = Field(default="dev-secret-key")
    compression_backend: Literal["lzma", "xz"] = Field(
        default="lzma",
        validation_alias=AliasChoices("PAYBYSQUARE_BACKEND", "COMPRESSION_BACKEND"),
    )
    xz_path: str | None = Field(default=None, description="Explicit path to the xz binary")
    xz_timeout_seconds: float | None = Field(default=10.0, gt=0)
    qr_box_size: int = Field(default=10, ge=1, le=50)
    qr_border: int = Field(default=4, ge=0, le=20)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return memoized application settings."""

    return Settings()


settings = get_settings()
