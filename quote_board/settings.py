"""Environment-backed settings for the quote board."""

from functools import cached_property
from typing import Any, Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

BroadcastMode = Literal["inline", "deferred"]


class DBSettings(BaseSettings):
    """Database connection and SQLAlchemy kwargs."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    connection_url: str = Field(
        default="sqlite+aiosqlite:///quotes.db", alias="QUOTES_DB_CONNECTION"
    )
    engine_kwargs: dict[str, Any] | None = Field(default=None, alias="QUOTES_ENGINE_KWARGS")
    session_kwargs: dict[str, Any] | None = Field(default=None, alias="QUOTES_SESSION_KWARGS")


class Settings(BaseSettings):
    """Application settings loaded from environment and .env."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    broadcast_mode: BroadcastMode = Field(default="inline", alias="BROADCAST_MODE")
    subscriber_queue_size: int = Field(default=100, alias="SUBSCRIBER_QUEUE_SIZE")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    debug_loggers: str | None = Field(default=None, alias="DEBUG_LOGGERS")

    @cached_property
    def db(self) -> DBSettings:
        return DBSettings()  # pyright: ignore[reportCallIssue]

    @property
    def db_connection(self) -> str:
        return self.db.connection_url
