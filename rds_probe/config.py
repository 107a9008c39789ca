"""
Configuration settings for the RDS probe handler.

Uses Pydantic Settings to load environment variables for the deployment
environment, database timeouts, and logging. `HandlerConfig` is the explicit,
immutable slice of these settings that a `RequestHandler` is constructed with.
"""
from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_ENVIRONMENT = "dev"
DEFAULT_DB_TIMEOUT_SECONDS = 10
DEFAULT_RECENT_ITEMS_LIMIT = 5


class Settings(BaseSettings):
    # Deployment
    environment_name: str = Field(DEFAULT_ENVIRONMENT, alias="ENVIRONMENT")
    aws_region: Optional[str] = Field(None, alias="AWS_REGION")

    # Database
    db_timeout_seconds: int = Field(DEFAULT_DB_TIMEOUT_SECONDS, alias="DB_TIMEOUT_SECONDS", gt=0)
    recent_items_limit: int = Field(DEFAULT_RECENT_ITEMS_LIMIT, alias="RECENT_ITEMS_LIMIT", gt=0)

    # Logging
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    json_logs: bool = Field(True, alias="JSON_LOGS")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


@dataclass(frozen=True)
class HandlerConfig:
    """
    Per-process configuration handed to `RequestHandler` at construction time.
    """

    environment_name: str = DEFAULT_ENVIRONMENT
    db_timeout_seconds: int = DEFAULT_DB_TIMEOUT_SECONDS
    recent_items_limit: int = DEFAULT_RECENT_ITEMS_LIMIT

    @property
    def secret_name(self) -> str:
        return f"{self.environment_name}/rds/credentials"

    @classmethod
    def from_settings(cls, settings: Settings) -> "HandlerConfig":
        return cls(
            environment_name=settings.environment_name or DEFAULT_ENVIRONMENT,
            db_timeout_seconds=settings.db_timeout_seconds,
            recent_items_limit=settings.recent_items_limit,
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Retrieve a cached instance of Settings to avoid repeated env parsing.
    """
    return Settings()


__all__ = ["HandlerConfig", "Settings", "get_settings"]
