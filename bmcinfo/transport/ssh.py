"""SMASH CLP transport over SSH."""

from __future__ import annotations

import socket

import paramiko
from loguru import logger

from bmcinfo.exceptions import AuthenticationError, CommandError, SSHError
from bmcinfo.models import ControllerSettings
from bmcinfo.parsing import parse_value
from bmcinfo.transport.base import BaseTransport

DEFAULT_TIMEOUT = 10.0


class SMASHCLPTransport(BaseTransport):
    """SSH transport for a controller exposing a SMASH CLP shell.

    Each command runs on its own exec channel, so several threads may share
    one connected transport. CLP replies start with ``status=`` and
    ``status_tag=`` lines; a non-zero status is raised as
    :class:`CommandError`.
    """

    def __init__(
        self,
        host: str,
        username: str,
        password: str,
        port: int = 22,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        super().__init__(host, username, password, port)
        self.timeout = timeout
        self._client: paramiko.SSHClient | None = None
        self._log = logger.bind(classname=self.__class__.__name__)

    @classmethod
    def from_settings(cls, settings: ControllerSettings) -> SMASHCLPTransport:
        return cls(
            host=settings.host,
            username=settings.username,
            password=settings.password,
            port=settings.port,
            timeout=settings.timeout,
        )

    def connect(self) -> None:
        """Establish the SSH connection."""
        self._client = paramiko.SSHClient()
        self._client.set_missing_host_key_policy(paramiko.AutoAddPolicy())

        try:
            self._client.connect(
                hostname=self.host,
                port=self.port or 22,
                username=self.username,
                password=self.password,
                look_for_keys=False,
                allow_agent=False,
                timeout=self.timeout,
            )
        except paramiko.AuthenticationException as e:
            self._client = None
            raise AuthenticationError(f"SSH authentication failed: {e}") from e
        except Exception as e:
            self._client = None
            raise SSHError(f"SSH connection failed: {e}") from e

        self._log.info(f"SSH connected to {self.host}")

    def disconnect(self) -> None:
        """Close the SSH connection."""
        if self._client:
            try:
                self._client.close()
            except Exception as e:
                self._log.debug(f"Ignoring error while closing SSH client: {e}")
            self._client = None
            self._log.debug(f"SSH disconnected from {self.host}")

    def is_connected(self) -> bool:
        """Check if the SSH connection is active."""
        if self._client is None:
            return False
        transport = self._client.get_transport()
        return transport is not None and transport.is_active()

    def run_command(self, command: str) -> str:
        """Execute a CLP command and return its output.

        Args:
            command: CLP command line, e.g. ``"show system1"``.

        Returns:
            The decoded standard output of the command.

        Raises:
            SSHError: Not connected, timed out, or the channel failed.
            CommandError: The controller reported a non-zero status.
        """
        if not self.is_connected():
            raise SSHError("Not connected. Call connect() first.")
        assert self._client is not None

        try:
            _, stdout, _ = self._client.exec_command(command, timeout=self.timeout)
            output = stdout.read().decode("utf-8", errors="replace")
            exit_status = stdout.channel.recv_exit_status()
        except socket.timeout as e:
            raise SSHError(f"Command '{command}' timed out after {self.timeout}s") from e
        except paramiko.SSHException as e:
            raise SSHError(f"Command '{command}' failed: {e}") from e

        status = _clp_status(output)
        if status:
            error_tag = parse_value(output, "error_tag=") or parse_value(output, "status_tag=") or "unknown error"
            raise CommandError(f"Command '{command}' failed: {error_tag}", status=status)
        if exit_status not in (0, -1):
            raise CommandError(f"Command '{command}' exited with status {exit_status}", status=exit_status)

        return output


def _clp_status(output: str) -> int | None:
    raw = parse_value(output, "status=")
    if raw is None:
        return None
    try:
        return int(raw)
    except ValueError:
        return None
