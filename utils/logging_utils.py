"""
Logging setup shared by the API, the server script and the contract harness.

`setup_logging()` is called from `weather_api.main.create_app` and
`run_server.py`; modules get their logger with

    logger = get_tagged_logger(__name__, tag="weather_api/api")

Records at INFO and below go to stdout, WARNING and above to stderr, and every
line carries the service name and the component tag:

    2026-10-19 09:00:00 | INFO | weather_api | weather_api/api | weather_api.api | Weather forecast requested
"""

from __future__ import annotations

import logging
import logging.config
from typing import Any, Dict, Optional

# Early records (module imports, settings load) still get timestamps.
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(levelname)s | %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(service)s | %(tag)s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
DEFAULT_SERVICE_NAME = "weather_api"

_CONFIGURED: bool = False


class MaxLevelFilter(logging.Filter):
    """Pass only records at or below `max_level`."""

    def __init__(self, max_level: int) -> None:
        super().__init__()
        self.max_level = max_level

    def filter(self, record: logging.LogRecord) -> bool:  # type: ignore[override]
        return record.levelno <= self.max_level


class EnsureTagFilter(logging.Filter):
    """
    Give untagged records (uvicorn, fastapi) a tag from their logger name,
    e.g. "uvicorn.access" -> "access".
    """

    def filter(self, record: logging.LogRecord) -> bool:  # type: ignore[override]
        if not hasattr(record, "tag"):
            record.tag = record.name.split(".")[-1] if record.name else "-"
        return True


class ServiceNameFilter(logging.Filter):
    """Stamp every record with the process-wide service name."""

    def __init__(self, service_name: Optional[str] = None) -> None:
        super().__init__()
        self._service_name = service_name or "-"

    def filter(self, record: logging.LogRecord) -> bool:  # type: ignore[override]
        if not hasattr(record, "service"):
            record.service = self._service_name
        return True


def _stream_handler(stream: str, level: str, filters: list[str]) -> Dict[str, Any]:
    return {
        "class": "logging.StreamHandler",
        "formatter": "standard",
        "filters": filters,
        "level": level,
        "stream": f"ext://sys.{stream}",
    }


def build_logging_config(
    *,
    level: str | int = "INFO",
    service_name: Optional[str] = DEFAULT_SERVICE_NAME,
) -> Dict[str, Any]:
    """Return the dictConfig mapping for the stdout/stderr split."""
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "filters": {
            "ensure_tag": {"()": EnsureTagFilter},
            "service_name": {"()": ServiceNameFilter, "service_name": service_name},
            "info_and_below": {"()": MaxLevelFilter, "max_level": logging.INFO},
        },
        "formatters": {
            "standard": {"format": LOG_FORMAT, "datefmt": DATE_FORMAT},
        },
        "handlers": {
            "stdout": _stream_handler("stdout", "DEBUG", ["ensure_tag", "service_name", "info_and_below"]),
            "stderr": _stream_handler("stderr", "WARNING", ["ensure_tag", "service_name"]),
        },
        "root": {"level": level, "handlers": ["stdout", "stderr"]},
    }


def setup_logging(
    *,
    level: str | int = "INFO",
    service_name: Optional[str] = DEFAULT_SERVICE_NAME,
    override_existing: bool = False,
) -> None:
    """Install the handlers once per process (again if `override_existing`)."""
    global _CONFIGURED

    if _CONFIGURED and not override_existing:
        return

    logging.config.dictConfig(build_logging_config(level=level, service_name=service_name))
    _CONFIGURED = True


def get_tagged_logger(name: str, *, tag: Optional[str] = None) -> logging.LoggerAdapter:
    """Return an adapter that adds `tag` (default: last segment of `name`) to each record."""
    if tag is None:
        tag = name.split(".")[-1]
    return logging.LoggerAdapter(logging.getLogger(name), {"tag": tag})
