"""
Process entry point: bind the listening socket, print the banner, serve with uvicorn.

The socket is bound here rather than by uvicorn so a port conflict can be
reported with remediation steps instead of a bare traceback.
"""
from __future__ import annotations

import errno
import logging
import socket
import sys
from typing import Optional

import uvicorn

from status_relay.config import Settings, get_settings
from status_relay.errors import PortInUse
from status_relay.main import create_app
from status_relay.middleware_logging import configure_logging

logger = logging.getLogger("status_relay.server")

BANNER = """
============================================================
  Job Status Relay running
------------------------------------------------------------
  Frontend:    http://localhost:{port}
  SSE Events:  http://localhost:{port}/events?jobId=<id>
  Status API:  POST http://localhost:{port}/status
  Complete:    POST http://localhost:{port}/complete
  Health:      http://localhost:{port}/health
------------------------------------------------------------
  Status update payload:
    {{"jobId": "job_123", "status": "processing" | "complete" | "error",
     "title": "Step title", "subtitle": "Step description"}}

  Job complete payload:
    {{"jobId": "job_123", "title": "Analysis Complete",
     "subtitle": "Report ready", "filesUrl": "https://..."}}
============================================================
"""


def bind_socket(host: str, port: int) -> socket.socket:
    """Bind a listening TCP socket. Raises PortInUse on EADDRINUSE; other errors propagate."""
    family = socket.AF_INET6 if ":" in host else socket.AF_INET
    sock = socket.socket(family, socket.SOCK_STREAM)
    sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
    try:
        sock.bind((host, port))
    except OSError as e:
        sock.close()
        if e.errno == errno.EADDRINUSE:
            raise PortInUse(port) from e
        raise
    sock.set_inheritable(True)
    return sock


def port_in_use_help(port: int) -> str:
    return "\n".join([
        "",
        f"Port {port} is already in use!",
        "",
        "Try one of these solutions:",
        "",
        "  1. Kill the existing process:",
        f"     lsof -i :{port}",
        "     kill -9 <PID>",
        "",
        "  2. Use a different port:",
        f"     PORT={port + 1} status-relay",
        "",
    ])


def run(settings: Optional[Settings] = None) -> None:
    settings = settings or get_settings()
    configure_logging(settings.LOG_LEVEL)

    try:
        sock = bind_socket(settings.HOST, settings.PORT)
    except PortInUse as e:
        print(port_in_use_help(e.port), file=sys.stderr)
        sys.exit(1)

    app = create_app(settings)
    print(BANNER.format(port=settings.PORT))
    logger.info("Listening on %s:%d", settings.HOST, settings.PORT)

    # open SSE streams would otherwise hold shutdown indefinitely
    config = uvicorn.Config(
        app,
        log_level=settings.LOG_LEVEL.lower(),
        timeout_graceful_shutdown=settings.SHUTDOWN_TIMEOUT_SECONDS,
    )
    server = uvicorn.Server(config)
    server.run(sockets=[sock])


def main() -> None:
    run()


if __name__ == "__main__":
    main()
