"""
Logging configuration for the session cache service.

Health probes hit the service every few seconds; their access-log lines
are dropped so revocation and cleanup messages stay readable.
"""

import logging
import logging.config
from typing import Any, Dict, Iterable

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
QUIET_PATHS = ("/health",)


class HealthCheckFilter(logging.Filter):
    """Drop uvicorn access-log lines for GET requests on quiet paths."""

    def __init__(self, paths: Iterable[str] = QUIET_PATHS):
        super().__init__()
        self.paths = tuple(paths)

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name != "uvicorn.access":
            return True
        message = record.getMessage()
        return not ("GET" in message and any(path in message for path in self.paths))


def get_logging_config(level: str = "INFO") -> Dict[str, Any]:
    """
    Build a dictConfig dictionary.

    Args:
        level: Level for the ``rauth`` logger hierarchy

    Returns:
        Dictionary accepted by logging.config.dictConfig and uvicorn's log_config
    """
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "filters": {
            "health_check_filter": {"()": HealthCheckFilter},
        },
        "formatters": {
            "default": {"format": LOG_FORMAT},
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
                "filters": ["health_check_filter"],
            },
        },
        "loggers": {
            "uvicorn": {"handlers": ["default"], "level": "INFO", "propagate": False},
            "uvicorn.access": {"handlers": ["access"], "level": "INFO", "propagate": False},
            "rauth": {"handlers": ["default"], "level": level.upper(), "propagate": False},
        },
        "root": {"level": "WARNING", "handlers": ["default"]},
    }


def configure_logging(level: str = "INFO") -> None:
    """Apply the logging configuration process-wide."""
    logging.config.dictConfig(get_logging_config(level))
