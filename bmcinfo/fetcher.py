"""Fetch controller identity with three concurrent CLP queries."""

from __future__ import annotations

import concurrent.futures
from typing import Callable

from loguru import logger

from bmcinfo.models import SystemInformation
from bmcinfo.parsing import assemble_system_information
from bmcinfo.transport.base import BaseTransport

SYSTEM_IDENTITY_COMMAND = "show system1"
CONTROLLER_FIRMWARE_COMMAND = "show /map1/firmware1"
SYSTEM_ROM_FIRMWARE_COMMAND = "show system1/firmware1"

_COMMANDS = (SYSTEM_IDENTITY_COMMAND, CONTROLLER_FIRMWARE_COMMAND, SYSTEM_ROM_FIRMWARE_COMMAND)


class SystemInfoFetcher:
    """Query the controller and assemble a :class:`SystemInformation`.

    A fresh transport is obtained from *transport_factory* for every fetch
    and closed afterwards. :meth:`fetch` never raises: any failure yields
    :meth:`SystemInformation.unavailable`.
    """

    def __init__(self, transport_factory: Callable[[], BaseTransport]):
        self.transport_factory = transport_factory
        self._log = logger.bind(classname=self.__class__.__name__)

    def fetch(self) -> SystemInformation:
        try:
            self._log.info("Fetching system information from controller...")
            with self.transport_factory() as transport:
                outputs = self._run_commands(transport)

            for command, output in outputs.items():
                self._log.debug(f"Output of '{command}':\n{output}")

            info = assemble_system_information(
                outputs[SYSTEM_IDENTITY_COMMAND],
                outputs[CONTROLLER_FIRMWARE_COMMAND],
                outputs[SYSTEM_ROM_FIRMWARE_COMMAND],
            )
        except Exception as e:
            self._log.error(f"Error fetching system information: {e}")
            return SystemInformation.unavailable()

        self._log.info(f"System information fetched successfully: {info!r}")
        return info

    @staticmethod
    def _run_commands(transport: BaseTransport) -> dict[str, str]:
        """Run all identity commands in parallel; the first failure propagates."""
        with concurrent.futures.ThreadPoolExecutor(max_workers=len(_COMMANDS)) as pool:
            futures = {command: pool.submit(transport.run_command, command) for command in _COMMANDS}
            return {command: future.result() for command, future in futures.items()}
