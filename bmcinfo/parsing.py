"""Parsers for SMASH CLP ``show`` output.

The controller answers ``show <target>`` with a block of indented
``key=value`` property lines, e.g.::

    /system1
      Targets
        firmware1
      Properties
        name=ProLiant DL380 Gen10
        number=CZJ12345XY
      Verbs
        cd version exit show reset start stop
"""

from __future__ import annotations

from bmcinfo.models import UNKNOWN, SystemInformation

_QUOTES = ("'", '"')


def parse_value(output: str, prefix: str) -> str | None:
    """Return the value of the first line starting with *prefix*.

    Lines are compared after stripping surrounding whitespace. The value is
    everything after the prefix, stripped, with one layer of matching
    surrounding quotes removed.

    Args:
        output: Raw multi-line command output.
        prefix: Field prefix including the separator, e.g. ``"name="``.

    Returns:
        The field value, or ``None`` if no line carries the prefix.
    """
    for line in output.splitlines():
        stripped = line.strip()
        if not stripped.startswith(prefix):
            continue
        value = stripped[len(prefix) :].strip()
        if len(value) >= 2 and value[0] in _QUOTES and value[0] == value[-1]:
            value = value[1:-1]
        return value
    return None


def compose_version_date(version: str | None, date: str | None) -> str:
    """Combine a firmware version and its release date into one label."""
    if version and date:
        return f"{version} ({date})"
    return version or date or UNKNOWN


def assemble_system_information(
    system_info_text: str,
    controller_firmware_text: str,
    system_rom_firmware_text: str,
) -> SystemInformation:
    """Build a :class:`SystemInformation` from the three ``show`` outputs.

    Args:
        system_info_text: Output of the system identity target.
        controller_firmware_text: Output of the controller firmware target.
        system_rom_firmware_text: Output of the system ROM firmware target.
    """
    return SystemInformation(
        model=parse_value(system_info_text, "name=") or UNKNOWN,
        serial_number=parse_value(system_info_text, "number=") or UNKNOWN,
        controller_generation=parse_value(controller_firmware_text, "name=") or UNKNOWN,
        system_rom=compose_version_date(
            parse_value(system_rom_firmware_text, "version="),
            parse_value(system_rom_firmware_text, "date="),
        ),
        controller_firmware=compose_version_date(
            parse_value(controller_firmware_text, "version="),
            parse_value(controller_firmware_text, "date="),
        ),
    )
