"""Configuration module for the task tracker.

This module provides centralized configuration management for the service,
including database connections, logging setup, error codes and the message
queue settings shared by the producer and the background worker.

Key Components:
- settings: Application configuration loaded from environment variables and TOML files
- Database: SQLAlchemy async engine and session management
- Logging: Loguru-based logging configuration with development/production modes
- Error handling: Centralized error codes
- Channel: Factory for the configured message channel backend
"""

from tasktracker.config.config import Settings, settings
from tasktracker.config.db import engine, get_session
from tasktracker.config.errors import ErrorCode, ErrorNames
from tasktracker.config.logger import config_logger

__all__ = [
    "ErrorCode",
    "ErrorNames",
    "Settings",
    "config_logger",
    "engine",
    "get_session",
    "settings",
]
