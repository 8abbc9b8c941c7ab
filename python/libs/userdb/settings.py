"""Environment-driven settings for the store connector and the HTTP service."""

from __future__ import annotations

from functools import lru_cache
from typing import Literal, Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class StoreSettings(BaseSettings):
    """
    MongoDB connection settings.

    Env support:
      - MONGOURI (or MONGO_URI): connection string, required at startup
      - MONGO_DATABASE, MONGO_CONNECT_TIMEOUT_SECONDS, MONGO_REQUEST_TIMEOUT_SECONDS
    """

    mongo_uri: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("MONGOURI", "MONGO_URI"),
    )
    database: str = Field(
        default="userApi",
        validation_alias="MONGO_DATABASE",
    )
    connect_timeout_seconds: float = Field(
        default=10.0,
        validation_alias="MONGO_CONNECT_TIMEOUT_SECONDS",
    )
    request_timeout_seconds: float = Field(
        default=10.0,
        validation_alias="MONGO_REQUEST_TIMEOUT_SECONDS",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
        populate_by_name=True,
    )


class AppSettings(BaseSettings):
    # flat = easy env overrides: APP_HOST, APP_PORT, APP_LOG_LEVEL, APP_LOG_FORMAT
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["plain", "json"] = "plain"

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        env_file=".env",
        extra="ignore",
    )


@lru_cache
def get_store_settings(**kwargs) -> StoreSettings:
    # None overrides fall back to field defaults
    filtered = {k: v for k, v in kwargs.items() if v is not None}
    return StoreSettings(**filtered)


@lru_cache
def get_app_settings(**kwargs) -> AppSettings:
    filtered = {k: v for k, v in kwargs.items() if v is not None}
    return AppSettings(**filtered)
