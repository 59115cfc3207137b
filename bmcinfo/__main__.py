"""Orchestrator CLI: dispatches to sub-CLIs.

Sub-commands:
  controller  Query or configure the management controller
  serve       Serve cached system information over HTTP

Examples:
  bmcinfo controller configure --host 10.0.0.5 --username admin --password <PW>
  bmcinfo controller show --json
  bmcinfo serve --port 8080
"""

from __future__ import annotations

import os
import sys

from tabulate import tabulate

from bmcinfo import __version__, configure_logging
from bmcinfo import glogger

COMMANDS = {
    "controller": ("bmcinfo.cli", "Query or configure the management controller"),
    "serve": ("bmcinfo.server", "Serve cached system information over HTTP"),
}


def _print_usage() -> None:
    print("usage: bmcinfo <command> [options]\n")
    print("Available commands:")
    for cmd, (_, desc) in COMMANDS.items():
        print(f"  {cmd:14s}  {desc}")
    print("\nRun 'bmcinfo <command> --help' for command-specific options.")


def _print_startup_banner() -> None:
    rows = [
        ["version", __version__],
        ["config", os.environ.get("BMCINFO_CONFIG", "~/.config/bmcinfo/controller.json")],
        ["log level", os.environ.get("LOGURU_LEVEL", "DEBUG")],
    ]
    glogger.opt(raw=True).info("\n{}\n", tabulate(rows, headers=["bmcinfo", ""], tablefmt="rounded_outline"))


def main() -> None:
    """Main entry point, dispatch to sub-CLI."""
    configure_logging()
    _print_startup_banner()

    if len(sys.argv) < 2 or sys.argv[1] in ("-h", "--help"):
        _print_usage()
        sys.exit(0 if len(sys.argv) >= 2 else 1)

    command = sys.argv[1]
    if command not in COMMANDS:
        print(f"bmcinfo: unknown command '{command}'\n", file=sys.stderr)
        _print_usage()
        sys.exit(1)

    module_path, _ = COMMANDS[command]

    from importlib import import_module

    module = import_module(module_path)
    module.main(sys.argv[2:])


if __name__ == "__main__":
    main()
