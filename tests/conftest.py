"""Shared fixtures for the bmcinfo test suite."""

from __future__ import annotations

import threading

import pytest

from bmcinfo.fetcher import (
    CONTROLLER_FIRMWARE_COMMAND,
    SYSTEM_IDENTITY_COMMAND,
    SYSTEM_ROM_FIRMWARE_COMMAND,
)
from bmcinfo.models import SystemInformation
from bmcinfo.transport.base import BaseTransport

# ── sample CLP output ─────────────────────────────────────────────────

SYSTEM1_OUTPUT = """status=0
status_tag=COMMAND COMPLETED
Mon Jan 15 10:22:31 2024

/system1
  Targets
    firmware1
    bootconfig1
  Properties
    name=ProLiant DL380 Gen10
    number=CZJ12345XY
    oemhp_server_name=web01.example.com
    enabled_state=enabled
  Verbs
    cd version exit show reset start stop
"""

MAP1_FIRMWARE1_OUTPUT = """status=0
status_tag=COMMAND COMPLETED
Mon Jan 15 10:22:31 2024

/map1/firmware1
  Targets
  Properties
    version=2.72
    date=Sep 04 2022
    name=iLO 5
  Verbs
    cd version exit show
"""

SYSTEM1_FIRMWARE1_OUTPUT = """status=0
status_tag=COMMAND COMPLETED
Mon Jan 15 10:22:31 2024

/system1/firmware1
  Targets
  Properties
    version=U30
    date=05/21/2019
  Verbs
    cd version exit show
"""

DEFAULT_OUTPUTS = {
    SYSTEM_IDENTITY_COMMAND: SYSTEM1_OUTPUT,
    CONTROLLER_FIRMWARE_COMMAND: MAP1_FIRMWARE1_OUTPUT,
    SYSTEM_ROM_FIRMWARE_COMMAND: SYSTEM1_FIRMWARE1_OUTPUT,
}


class StubTransport(BaseTransport):
    """In-memory transport answering commands from a dict.

    Values that are exceptions are raised instead of returned.
    """

    def __init__(self, outputs: dict[str, str | Exception] | None = None):
        super().__init__("stub", "admin", "secret")
        self.outputs = dict(DEFAULT_OUTPUTS if outputs is None else outputs)
        self.commands: list[str] = []
        self.connected = False
        self.connect_count = 0
        self._lock = threading.Lock()

    def connect(self) -> None:
        self.connected = True
        self.connect_count += 1

    def disconnect(self) -> None:
        self.connected = False

    def is_connected(self) -> bool:
        return self.connected

    def run_command(self, command: str) -> str:
        with self._lock:
            self.commands.append(command)
        result = self.outputs[command]
        if isinstance(result, Exception):
            raise result
        return result


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class CountingFetcher:
    """Fetcher stub that counts calls and can block until released."""

    def __init__(self, results=None, gate: threading.Event | None = None):
        self.results = list(results) if results else [SystemInformation(model="ProLiant DL380 Gen10")]
        self.gate = gate
        self.calls = 0
        self.started = threading.Event()
        self._lock = threading.Lock()

    def fetch(self):
        with self._lock:
            self.calls += 1
            index = min(self.calls, len(self.results)) - 1
        self.started.set()
        if self.gate is not None:
            self.gate.wait(timeout=5)
        result = self.results[index]
        if isinstance(result, BaseException):
            raise result
        return result


# ── fixtures ──────────────────────────────────────────────────────────


@pytest.fixture()
def stub_transport():
    """StubTransport answering the three identity commands."""
    return StubTransport()


@pytest.fixture()
def fake_clock():
    return FakeClock()


@pytest.fixture()
def clean_env(monkeypatch):
    """Remove BMCINFO_* variables so tests see only their own configuration."""
    for var in ("BMCINFO_CONFIG", "BMCINFO_HOST", "BMCINFO_USERNAME", "BMCINFO_PASSWORD", "BMCINFO_PORT"):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture()
def clp_outputs():
    """Sample outputs of the three identity commands, keyed by command."""
    return dict(DEFAULT_OUTPUTS)


@pytest.fixture()
def make_transport():
    """Factory fixture returning a StubTransport for the given outputs."""

    def _make(outputs=None):
        return StubTransport(outputs)

    return _make


@pytest.fixture()
def make_fetcher():
    """Factory fixture returning a CountingFetcher."""

    def _make(results=None, gate=None):
        return CountingFetcher(results, gate)

    return _make
