"""
Logging configuration for the session API.

Access log lines for quiet paths (health probes by default) are dropped so
they don't drown out session errors.
"""

import logging
import logging.config
from typing import Any, Dict, Iterable, Tuple

DEFAULT_QUIET_PATHS: Tuple[str, ...] = ("/health",)


class AccessLogFilter(logging.Filter):
    """Drop uvicorn access log lines for GET requests to the given paths."""

    def __init__(self, paths: Iterable[str] = DEFAULT_QUIET_PATHS):
        super().__init__()
        self.paths = tuple(paths)

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name != "uvicorn.access":
            return True
        message = record.getMessage()
        for path in self.paths:
            # Match the whole path, with or without a query string
            if f"GET {path} " in message or f"GET {path}?" in message:
                return False
        return True


def get_logging_config(
    level: str = "INFO", quiet_paths: Iterable[str] = DEFAULT_QUIET_PATHS
) -> Dict[str, Any]:
    """
    Build a dictConfig for the service.

    Args:
        level: Level for the multisession logger and the root logger
        quiet_paths: Request paths whose access log lines are suppressed
    """
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "filters": {
            "quiet_paths": {
                "()": AccessLogFilter,
                "paths": tuple(quiet_paths),
            }
        },
        "formatters": {
            "default": {"format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s"},
            "access": {"format": "%(message)s"},
        },
        "handlers": {
            "default": {
                "class": "logging.StreamHandler",
                "formatter": "default",
                "stream": "ext://sys.stdout",
            },
            "access": {
                "class": "logging.StreamHandler",
                "formatter": "access",
                "stream": "ext://sys.stdout",
                "filters": ["quiet_paths"],
            },
        },
        "loggers": {
            # uvicorn.error propagates here
            "uvicorn": {"handlers": ["default"], "level": "INFO", "propagate": False},
            "uvicorn.access": {"handlers": ["access"], "level": "INFO", "propagate": False},
            "multisession": {"handlers": ["default"], "level": level, "propagate": False},
        },
        "root": {"level": level, "handlers": ["default"]},
    }


def setup_logging(level: str = "INFO", quiet_paths: Iterable[str] = DEFAULT_QUIET_PATHS) -> None:
    """Apply the logging configuration."""
    logging.config.dictConfig(get_logging_config(level, quiet_paths))
