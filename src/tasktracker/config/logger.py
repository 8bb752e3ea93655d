"""Logger configuration.

The API process and the stand-alone worker log through the same sinks, the
``component`` label tells them apart in Loki.
"""

import logging
import sys
from collections.abc import Mapping
from typing import Any, Literal

from loguru import logger
from loki_logger_handler.formatters.loguru_formatter import LoguruFormatter
from loki_logger_handler.loki_logger_handler import LokiLoggerHandler

from .config import settings

__all__ = ["config_logger"]


Component = Literal["api", "worker"]

# Libraries whose records are only forwarded from WARNING upwards
_NOISY_LOGGERS = ("aiosqlite", "sqlalchemy.engine", "redis")


def config_logger(component: Component = "api") -> None:
    """Configure loguru sinks for the current environment.

    Args:
        component: Process the logs come from.
    """
    is_production = settings.app_env == "production"
    if is_production:
        _intercept_stdlib()

    logger.remove()
    logger.configure(extra={"component": component})

    if settings.app_env == "development":
        logger.add(
            settings.log_path,
            rotation=settings.rotation,
            format=_development_format,
            enqueue=True,
            backtrace=False,
            diagnose=False,
            compression="zip",
            colorize=False,
            level=logging.DEBUG,
        )

    logger.add(
        sys.stderr if is_production else sys.stdout,
        format=_production_format if is_production else _development_format,
        level=settings.log_level,
        colorize=not is_production,
        enqueue=True,
        backtrace=not is_production,
        diagnose=not is_production,
        catch=not is_production,
    )

    if is_production:
        logger.add(
            LokiLoggerHandler(
                url=settings.loki_url,
                labels={
                    "application": "tasktracker",
                    "component": component,
                    "environment": settings.app_env,
                    "version": settings.version,
                },
                timeout=5,
                enable_structured_loki_metadata=True,
                default_formatter=LoguruFormatter(),  # type: ignore[arg-type]
            ),
            serialize=True,
            enqueue=True,
            level=settings.log_level,
        )


def _intercept_stdlib() -> None:
    """Route records of the standard logging module through loguru."""
    logging.root.handlers = [InterceptHandler()]
    logging.root.setLevel(settings.log_level)

    for name in list(logging.root.manager.loggerDict):
        std_logger = logging.getLogger(name)
        std_logger.handlers = []
        std_logger.propagate = True

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


class InterceptHandler(logging.Handler):
    """Forwards standard logging records to loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        """Emit the record with the loguru level of the same name."""
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        frame, depth = logging.currentframe(), 2
        while frame and frame.f_back and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).bind(
            stdlib=record.name
        ).log(level, record.getMessage())


def _production_format(record: Mapping[str, Any]) -> str:
    """Structured single-line format for production."""
    ts = record["time"].strftime("%Y-%m-%d %H:%M:%S.%f")[:-3]
    extra = dict(record["extra"])
    component = extra.pop("component", "-")

    line = (
        f"{ts} | {record['level']:<8} | {component:<6} | "
        f"{record['name']}:{record['line']} - {_escape(record['message'])}"
    )
    if extra:
        line += " | " + " | ".join(f"{k}={_escape(str(v))}" for k, v in extra.items())

    return line + "\n{exception}"


def _development_format(record: Mapping[str, Any]) -> str:
    """Detailed format for development with colors and extras."""
    ts = record["time"].strftime("%Y-%m-%d %H:%M:%S.%f")[:-3]
    extra = {k: v for k, v in record["extra"].items() if k != "component"}

    line = (
        f"<green>{ts}</green> | "
        f"<level>{record['level']:<8}</level> | "
        f"<cyan>{record['name']}:{record['function']}:{record['line']}</cyan> - "
        f"{_escape(record['message'])}"
    )

    if extra:
        extras = " | ".join(
            f"<yellow>{k}</yellow>=<cyan>{_escape(str(v))}</cyan>"
            for k, v in extra.items()
        )
        line += f" | {extras}"

    return line + "\n{exception}"


def _escape(text: str) -> str:
    """Escape braces and color tags so loguru does not format them again."""
    return text.replace("{", "{{").replace("}", "}}").replace("<", r"\<")
