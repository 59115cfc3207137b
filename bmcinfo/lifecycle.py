"""Background warmup of the system information cache."""

from __future__ import annotations

import threading
from typing import Callable

from loguru import logger

from bmcinfo.cache import SystemInfoCache
from bmcinfo.models import ControllerSettings, SystemInformation


def warm_up_on_start(cache: SystemInfoCache, is_configured: Callable[[], bool]) -> threading.Thread:
    """Warm *cache* in a daemon thread if the controller is configured.

    The readiness check runs once inside the thread. Its failures are logged
    and treated as "not configured"; nothing is raised to the caller.
    """

    def _run() -> None:
        try:
            configured = is_configured()
        except Exception as e:
            logger.error(f"Error checking controller configuration status: {e}")
            return

        if not configured:
            logger.info("Controller not yet configured, cache will initialize after setup completion")
            return

        logger.info("Controller is configured, initializing system information cache...")
        _get_and_log(cache.get)

    thread = threading.Thread(target=_run, name="bmcinfo-warmup", daemon=True)
    thread.start()
    return thread


def warm_up_after_setup(cache: SystemInfoCache) -> Callable[[ControllerSettings], None]:
    """Return a setup listener that refreshes *cache* in the background.

    ``refresh()`` joins a fetch that was already in flight when setup
    completed, and that fetch may have used the old settings. An unavailable
    result is therefore refreshed once more so the new settings get a try.
    """

    def _refresh() -> SystemInformation:
        info = cache.refresh()
        if not info.is_available:
            logger.debug("First refresh after setup was unavailable, refreshing again")
            info = cache.refresh()
        return info

    def _listener(settings: ControllerSettings) -> None:
        logger.info(f"Controller setup completed for {settings.host}, refreshing system information cache...")
        threading.Thread(target=_get_and_log, args=(_refresh,), name="bmcinfo-setup-warmup", daemon=True).start()

    return _listener


def _get_and_log(load: Callable[[], object]) -> None:
    try:
        info = load()
    except Exception as e:
        logger.error(f"Failed to initialize system information cache: {e}")
        return
    logger.debug(f"System information cache warmed: {info!r}")
