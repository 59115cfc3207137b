"""HTTP endpoint serving cached controller system information.

Routes:
  GET  /api/system-info           cached record (refetched when stale)
  POST /api/system-info/refresh   force a refetch
  POST /api/setup                 save controller settings, warm the cache

Examples:
  bmcinfo serve --bind 0.0.0.0 --port 8080
  curl http://127.0.0.1:8080/api/system-info
"""

from __future__ import annotations

import argparse
import http.server
import json
import sys
from typing import Any

from loguru import logger
from pydantic import ValidationError

from bmcinfo.cache import SystemInfoCache
from bmcinfo.config import ConfigStore
from bmcinfo.fetcher import SystemInfoFetcher
from bmcinfo.lifecycle import warm_up_after_setup, warm_up_on_start
from bmcinfo.models import ControllerSettings
from bmcinfo.transport.ssh import SMASHCLPTransport

DEFAULT_PORT = 8080
MAX_BODY_BYTES = 64 * 1024


class SystemInfoHandler(http.server.BaseHTTPRequestHandler):
    """HTTP handler bound to one cache and config store via class attributes."""

    cache: SystemInfoCache
    store: ConfigStore

    def do_GET(self) -> None:
        if self.path == "/api/system-info":
            self._handle(lambda: (200, self.cache.get().to_json_dict()))
        else:
            self._send_json(404, {"error": "not found"})

    def do_POST(self) -> None:
        if self.path == "/api/system-info/refresh":
            self._handle(lambda: (200, self.cache.refresh().to_json_dict()))
        elif self.path == "/api/setup":
            self._handle(self._setup)
        else:
            self._send_json(404, {"error": "not found"})

    def _setup(self) -> tuple[int, dict[str, Any]]:
        try:
            length = int(self.headers.get("Content-Length") or 0)
        except ValueError:
            return 400, {"error": "invalid Content-Length"}
        if length < 0:
            return 400, {"error": "invalid Content-Length"}
        if length > MAX_BODY_BYTES:
            return 413, {"error": "request body too large"}
        body = self.rfile.read(length)
        try:
            settings = ControllerSettings.model_validate_json(body)
        except ValidationError as e:
            return 400, {"error": str(e)}
        self.store.save(settings)
        return 200, {"configured": True}

    def _handle(self, route: Any) -> None:
        try:
            status, payload = route()
        except Exception as e:
            logger.exception(f"Error handling {self.command} {self.path}")
            status, payload = 500, {"error": str(e)}
        self._send_json(status, payload)

    def _send_json(self, status: int, payload: dict[str, Any]) -> None:
        data = json.dumps(payload).encode()
        self.send_response(status)
        self.send_header("Content-Type", "application/json")
        self.send_header("Content-Length", str(len(data)))
        self.end_headers()
        self.wfile.write(data)

    def log_message(self, format: str, *args: object) -> None:
        logger.debug(f"{self.address_string()} - {format % args}")


def create_app_cache(store: ConfigStore) -> SystemInfoCache:
    """Wire transport, fetcher and cache; settings are resolved on every fetch."""
    fetcher = SystemInfoFetcher(lambda: SMASHCLPTransport.from_settings(store.require()))
    return SystemInfoCache(fetcher)


def build_server(
    cache: SystemInfoCache, store: ConfigStore, host: str = "127.0.0.1", port: int = DEFAULT_PORT
) -> http.server.ThreadingHTTPServer:
    """Create a threading HTTP server whose handler serves *cache*."""
    handler = type("BoundSystemInfoHandler", (SystemInfoHandler,), {"cache": cache, "store": store})
    server = http.server.ThreadingHTTPServer((host, port), handler)
    server.daemon_threads = True
    return server


def parse_args(args: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="bmcinfo serve",
        description="Serve cached controller system information over HTTP",
    )
    parser.add_argument("--bind", default="127.0.0.1", help="Bind address (default: 127.0.0.1)")
    parser.add_argument("--port", type=int, default=DEFAULT_PORT, help=f"Port (default: {DEFAULT_PORT})")
    parser.add_argument("--config", help="Controller configuration file (default: $BMCINFO_CONFIG)")
    return parser.parse_args(args)


def main(args: list[str] | None = None) -> None:
    """Entry point for ``bmcinfo serve``."""
    parsed = parse_args(args)

    store = ConfigStore(parsed.config)
    cache = create_app_cache(store)
    store.add_listener(warm_up_after_setup(cache))

    try:
        server = build_server(cache, store, parsed.bind, parsed.port)
    except OSError as e:
        print(f"Error: cannot bind {parsed.bind}:{parsed.port}: {e}", file=sys.stderr)
        sys.exit(1)

    warm_up_on_start(cache, store.is_configured)

    logger.info(f"Serving system information at http://{parsed.bind}:{parsed.port}/api/system-info")
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        print("\nStopped.", file=sys.stderr)
    finally:
        server.server_close()


if __name__ == "__main__":
    main()
