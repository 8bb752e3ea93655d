"""Define configuration for the project."""

import os
import socket
import tomllib
from pathlib import Path
from typing import Literal

from pydantic import Field, computed_field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

__all__ = ["Settings", "settings"]


_app_config_path = Path(__file__).parent / "resources" / "app.toml"

with Path.open(_app_config_path, "rb") as f:
    _config = tomllib.load(f)
    _app_config = _config.get("app", {})
    _server_config = _app_config.get("server", {})
    _db_config = _app_config.get("db", {})
    _queue_config = _app_config.get("queue", {})
    _worker_config = _app_config.get("worker", {})
    _log_config = _app_config.get("logging", {})


class Settings(BaseSettings):
    """Application configuration settings."""

    # Environment configuration
    app_env: Literal["development", "testing", "production"] = Field(
        default="development",
        description="Current application environment determining behavior.",
        validation_alias="ENV",
    )

    # Server configuration
    host_binding: str = Field(
        default=_server_config.get("host_binding", "127.0.0.1"),
        description="Host address the server binds to.",
    )

    port: int = Field(
        default=_server_config.get("port", 8000),
        description="Network port the server listens on.",
    )

    version: str = Field(
        default=_server_config.get("version", "0.1.0"),
        description="Version of the application.",
    )

    allow_origin: list[str] = Field(
        default=_server_config.get("allow_origin", ["http://localhost:3000"]),
        description="CORS allowed origins for cross-origin requests.",
    )

    # Database configuration
    db_url: str = Field(
        default="sqlite+aiosqlite:///app.db",
        description="Database connection URL.",
        validation_alias="DATABASE_URL",
    )

    db_logging: bool = Field(
        default=_db_config.get("logging", False),
        description="Whether to enable SQL query logging.",
    )

    db_future: bool = Field(
        default=_db_config.get("future", True),
        description="Whether to use future SQLAlchemy features.",
    )

    db_timeout: int = Field(
        default=_db_config.get("timeout", 30),
        description="Timeout for database operations in seconds.",
    )

    db_pool_size: int = Field(
        default=_db_config.get("pool_size", 5),
        description="Size of the database connection pool.",
    )

    db_max_overflow: int = Field(
        default=_db_config.get("max_overflow", 10),
        description="Maximum number of connections to create beyond the pool size.",
    )

    db_pool_timeout: int = Field(
        default=_db_config.get("pool_timeout", 30),
        description="Timeout for acquiring a connection from the pool.",
    )

    db_pool_recycle: int = Field(
        default=_db_config.get("pool_recycle", 300),
        description="Time in seconds to recycle a connection.",
    )

    db_pool_pre_ping: bool = Field(
        default=_db_config.get("pool_pre_ping", True),
        description="Whether to check if a connection is alive before using it.",
    )

    clear_db_on_restart: bool = Field(
        default=False,
        validation_alias="CLEAR_DB_ON_RESTART",
        description="Whether to clear the database on application restart.",
    )

    # Queue configuration
    queue_backend: Literal["redis", "memory"] = Field(
        default=_queue_config.get("backend", "redis"),
        validation_alias="QUEUE_BACKEND",
        description="Message channel implementation used by producer and worker.",
    )

    redis_url: str = Field(
        default=_queue_config.get("redis_url", "redis://localhost:6379/0"),
        validation_alias="REDIS_URL",
        description="Redis connection URL for the task stream.",
    )

    queue_stream: str = Field(
        default=_queue_config.get("stream", "tasks"),
        description="Name of the stream (topic) carrying processing requests.",
    )

    queue_group: str = Field(
        default=_queue_config.get("group", "task-workers"),
        description="Consumer group the worker subscribes under.",
    )

    queue_consumer: str = Field(
        default_factory=lambda: f"{socket.gethostname()}-{os.getpid()}",
        validation_alias="QUEUE_CONSUMER",
        description="Name of this consumer inside the consumer group, unique per "
        "process unless set explicitly.",
    )

    queue_publish_timeout: float = Field(
        default=_queue_config.get("publish_timeout", 5.0),
        gt=0,
        description="Timeout in seconds for a single publish call.",
    )

    queue_block_ms: int = Field(
        default=_queue_config.get("block_ms", 2000),
        ge=1,
        description="Milliseconds a single blocking stream read waits.",
    )

    queue_claim_idle_ms: int = Field(
        default=_queue_config.get("claim_idle_ms", 60000),
        ge=0,
        description="Idle time after which unacknowledged messages are redelivered "
        "(0 disables claiming).",
    )

    queue_max_len: int = Field(
        default=_queue_config.get("max_len", 100000),
        ge=1,
        description="Approximate maximum length of the stream.",
    )

    # Worker configuration
    worker_enabled: bool = Field(
        default=_worker_config.get("enabled", True),
        validation_alias="WORKER_ENABLED",
        description="Whether the API process runs the task worker in the background.",
    )

    processing_delay: float = Field(
        default=_worker_config.get("processing_delay", 10.0),
        ge=0,
        validation_alias="PROCESSING_DELAY",
        description="Seconds a task is held in processing before it is marked done.",
    )

    # Log configuration
    log_dir: str = Field(
        default=_log_config.get("log_dir", "log"),
        description="Directory for storing log files.",
    )

    log_file: str = Field(
        default=_log_config.get("log_file", "app.log"),
        description="Name of the log file.",
    )

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        validation_alias="LOG_LEVEL",
        description="Logging level (e.g., DEBUG, INFO, WARNING, ERROR).",
    )

    rotation: str = Field(
        default=_log_config.get("rotation", "10 MB"),
        description="Log rotation strategy (time or size-based).",
    )

    loki_url: str = Field(
        default=_log_config.get("loki_url", "http://alloy:9999/loki/api/v1/push"),
        validation_alias="LOKI_URL",
        description="Loki push endpoint used in production.",
    )

    @computed_field
    @property
    def log_path(self) -> Path:
        """Path where application logs are stored."""
        return Path(self.log_dir) / self.log_file

    @computed_field
    @property
    def reload(self) -> bool:
        """Whether to enable auto-reload on code changes."""
        return bool(_server_config.get("reload")) and self.app_env == "development"

    @model_validator(mode="after")
    def validate_log_level(self) -> "Settings":
        """Adjust log level based on environment."""
        if self.app_env == "production" and self.log_level == "DEBUG":
            self.log_level = "INFO"
        return self

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )


# Create a single instance of Settings to use throughout the application
settings = Settings()
