"""Controller configuration stored as JSON with environment overrides."""

from __future__ import annotations

import json
import os
import threading
from pathlib import Path
from typing import Callable

from loguru import logger
from pydantic import ValidationError

from bmcinfo.exceptions import ConfigError
from bmcinfo.models import ControllerSettings

CONFIG_ENV_VAR = "BMCINFO_CONFIG"
DEFAULT_CONFIG_PATH = Path("~/.config/bmcinfo/controller.json")

# Environment variable -> settings field
ENV_OVERRIDES = {
    "BMCINFO_HOST": "host",
    "BMCINFO_USERNAME": "username",
    "BMCINFO_PASSWORD": "password",
    "BMCINFO_PORT": "port",
}

SetupListener = Callable[[ControllerSettings], None]


def default_config_path() -> Path:
    return Path(os.getenv(CONFIG_ENV_VAR) or DEFAULT_CONFIG_PATH).expanduser()


class ConfigStore:
    """Load and save :class:`ControllerSettings`.

    Listeners registered with :meth:`add_listener` are called after every
    successful :meth:`save`, which is how a completed setup triggers the
    deferred cache warmup.
    """

    def __init__(self, path: Path | str | None = None):
        self.path = Path(path).expanduser() if path is not None else default_config_path()
        self._listeners: list[SetupListener] = []
        self._lock = threading.Lock()

    def load(self) -> ControllerSettings | None:
        """Return the configured settings, or ``None`` if nothing is configured.

        Raises:
            ConfigError: The file cannot be read or the settings are invalid.
        """
        data: dict[str, object] = {}
        if self.path.is_file():
            try:
                data = json.loads(self.path.read_text())
            except (OSError, ValueError) as e:
                raise ConfigError(f"Cannot read controller configuration {self.path}: {e}") from e
            if not isinstance(data, dict):
                raise ConfigError(f"Controller configuration {self.path} must be a JSON object")

        for env_var, field in ENV_OVERRIDES.items():
            value = os.getenv(env_var)
            if value:
                data[field] = value

        if not data:
            return None
        try:
            return ControllerSettings.model_validate(data)
        except ValidationError as e:
            raise ConfigError(f"Invalid controller configuration: {e}") from e

    def require(self) -> ControllerSettings:
        settings = self.load()
        if settings is None:
            raise ConfigError(f"Controller is not configured (no {self.path} and no BMCINFO_* variables)")
        return settings

    def is_configured(self) -> bool:
        """Whether complete controller settings are available."""
        return self.load() is not None

    def save(self, settings: ControllerSettings) -> None:
        """Persist *settings* and notify setup listeners."""
        with self._lock:
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                fd = os.open(self.path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
                with os.fdopen(fd, "w") as f:
                    # An existing file keeps its mode on open.
                    os.fchmod(f.fileno(), 0o600)
                    f.write(settings.model_dump_json(indent=2))
            except OSError as e:
                raise ConfigError(f"Cannot write controller configuration {self.path}: {e}") from e
            listeners = list(self._listeners)

        logger.info(f"Controller configuration saved to {self.path}")
        for listener in listeners:
            listener(settings)

    def add_listener(self, listener: SetupListener) -> None:
        with self._lock:
            self._listeners.append(listener)
