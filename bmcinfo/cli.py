"""CLI for one-off controller queries and configuration, standalone-capable.

Examples:
  # Store connection settings
  bmcinfo controller configure --host 10.0.0.5 --username admin --password <PW>

  # Query identity and firmware once
  bmcinfo controller show
  bmcinfo controller show --json

  # Check whether settings are present
  bmcinfo controller status
"""

from __future__ import annotations

import argparse
import json
import sys

from pydantic import ValidationError
from tabulate import tabulate

from bmcinfo.config import ConfigStore
from bmcinfo.exceptions import BMCError
from bmcinfo.fetcher import SystemInfoFetcher
from bmcinfo.models import ControllerSettings, SystemInformation
from bmcinfo.transport.ssh import SMASHCLPTransport


def format_table(info: SystemInformation) -> str:
    rows = [
        ["Model", info.model],
        ["Serial number", info.serial_number],
        ["Controller generation", info.controller_generation],
        ["System ROM", info.system_rom],
        ["Controller firmware", info.controller_firmware],
    ]
    return tabulate(rows, tablefmt="simple_grid")


def cmd_show(store: ConfigStore, args: argparse.Namespace) -> None:
    """Fetch and print system information."""
    settings = store.require()
    info = SystemInfoFetcher(lambda: SMASHCLPTransport.from_settings(settings)).fetch()
    if args.json:
        print(json.dumps(info.to_json_dict(), indent=2))
    else:
        print(format_table(info))
    if not info.is_available:
        sys.exit(2)


def cmd_configure(store: ConfigStore, args: argparse.Namespace) -> None:
    """Save controller settings."""
    try:
        settings = ControllerSettings(
            host=args.host,
            username=args.username,
            password=args.password,
            port=args.port,
            timeout=args.timeout,
        )
    except ValidationError as e:
        print(f"Error: invalid settings: {e}", file=sys.stderr)
        sys.exit(1)
    store.save(settings)
    print(f"Controller {settings.host} configured in {store.path}")


def cmd_status(store: ConfigStore, args: argparse.Namespace) -> None:
    """Report whether the controller is configured."""
    settings = store.load()
    if settings is None:
        print("Controller: not configured")
        sys.exit(1)
    print(f"Controller: {settings.username}@{settings.host}:{settings.port}")


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for controller commands."""
    parser = argparse.ArgumentParser(
        prog="bmcinfo controller",
        description="Query and configure the management controller",
    )
    parser.add_argument("--config", help="Controller configuration file (default: $BMCINFO_CONFIG)")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    show = subparsers.add_parser("show", help="Fetch identity and firmware information")
    show.add_argument("--json", action="store_true", help="Print JSON instead of a table")

    configure = subparsers.add_parser("configure", help="Store controller connection settings")
    configure.add_argument("--host", required=True, help="Controller IP address or hostname")
    configure.add_argument("--username", required=True, help="SSH username")
    configure.add_argument("--password", required=True, help="SSH password")
    configure.add_argument("--port", type=int, default=22, help="SSH port (default: 22)")
    configure.add_argument("--timeout", type=float, default=10.0, help="Command timeout in seconds (default: 10)")

    subparsers.add_parser("status", help="Show whether the controller is configured")

    return parser


COMMANDS = {
    "show": cmd_show,
    "configure": cmd_configure,
    "status": cmd_status,
}


def main(args: list[str] | None = None) -> None:
    """Main entry point for controller CLI."""
    parser = build_parser()
    parsed = parser.parse_args(args)

    if not parsed.command:
        parser.print_help()
        sys.exit(1)

    store = ConfigStore(parsed.config)
    try:
        COMMANDS[parsed.command](store, parsed)
    except BMCError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except KeyboardInterrupt:
        print("\nAborted.", file=sys.stderr)
        sys.exit(130)


if __name__ == "__main__":
    main()
