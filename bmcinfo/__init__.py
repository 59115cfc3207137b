"""Cached identity and firmware information for a remote management controller.

Queries the controller's SMASH CLP shell over SSH and keeps the parsed
result in a time-bounded, single-flight cache so that callers never pay the
cost of a controller round trip per request.
"""

__version__ = "0.1.0"

import os
import sys
from typing import Any, Callable, Dict

from loguru import logger as glogger

glogger.disable(__name__)


def _loguru_skiplog_filter(record: dict) -> bool:  # type: ignore[type-arg]
    """Filter function to hide records with ``extra['skiplog']`` set."""
    return not record.get("extra", {}).get("skiplog", False)


def configure_logging(
    loguru_filter: Callable[[Dict[str, Any]], bool] = _loguru_skiplog_filter,
) -> None:
    """Configure a default ``loguru`` sink and enable the package logger."""
    os.environ["LOGURU_LEVEL"] = os.getenv("LOGURU_LEVEL", "DEBUG")
    glogger.remove()
    logger_fmt: str = (
        "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | <cyan>{module}</cyan>::<cyan>{extra[classname]}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
    )
    glogger.add(sys.stderr, level=os.getenv("LOGURU_LEVEL"), format=logger_fmt, filter=loguru_filter)  # type: ignore[arg-type]
    glogger.configure(extra={"classname": "None", "skiplog": False})
    glogger.enable(__name__)


from bmcinfo.cache import CACHE_TTL_SECONDS, SystemInfoCache  # noqa: E402
from bmcinfo.exceptions import (  # noqa: E402
    AuthenticationError,
    BMCError,
    CommandError,
    ConfigError,
    SSHError,
)
from bmcinfo.fetcher import SystemInfoFetcher  # noqa: E402
from bmcinfo.models import ControllerSettings, SystemInformation  # noqa: E402

__all__ = [
    "glogger",
    "configure_logging",
    "CACHE_TTL_SECONDS",
    "SystemInfoCache",
    "SystemInfoFetcher",
    "SystemInformation",
    "ControllerSettings",
    "BMCError",
    "AuthenticationError",
    "SSHError",
    "CommandError",
    "ConfigError",
]
