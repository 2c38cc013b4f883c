"""todoserver CLI: run the HTTP + WebSocket server.

Usage:
    todoserver serve                              # 0.0.0.0:9001, 16 concurrent
    todoserver serve --port 8080 --json-logs      # override env settings
    python -m todoserver serve

Every flag defaults to the matching TODOSERVER_* setting (see config.py).
"""

from __future__ import annotations

from typing import Optional

import click
import structlog
import uvicorn

from todoserver import __version__
from todoserver.config import settings
from todoserver.logging_config import configure_logging


@click.group()
@click.version_option(version=__version__, prog_name="todoserver")
def main():
    """todoserver: in-memory todo list with WebSocket change notifications."""


@main.command()
@click.option("--host", default=None, help=f"Bind address [default: {settings.host}]")
@click.option("--port", "-p", type=int, default=None, help=f"Listen port [default: {settings.port}]")
@click.option(
    "--max-concurrency",
    type=click.IntRange(min=1),
    default=None,
    help=f"Concurrent connections before 503 [default: {settings.max_concurrency}]",
)
@click.option(
    "--backlog",
    type=click.IntRange(min=1),
    default=None,
    help=f"Pending connections queued by the socket [default: {settings.backlog}]",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default=None,
    help=f"[default: {settings.log_level}]",
)
@click.option("--json-logs", is_flag=True, help="One JSON object per log line")
def serve(host: Optional[str], port: Optional[int], max_concurrency: Optional[int],
          backlog: Optional[int], log_level: Optional[str], json_logs: bool):
    """Start the server and block until SIGINT/SIGTERM."""
    host = host if host is not None else settings.host
    port = port if port is not None else settings.port
    max_concurrency = max_concurrency if max_concurrency is not None else settings.max_concurrency
    backlog = backlog if backlog is not None else settings.backlog
    log_level = (log_level if log_level is not None else settings.log_level).upper()
    json_logs = json_logs or settings.log_json

    configure_logging(log_level, json=json_logs)
    logger = structlog.get_logger()
    logger.info(
        "todoserver.serve",
        host=host,
        port=port,
        max_concurrency=max_concurrency,
        backlog=backlog,
    )

    # settings.port is what the lifespan logs
    settings.port = port

    uvicorn.run(
        "todoserver.main:app",
        host=host,
        port=port,
        limit_concurrency=max_concurrency,
        backlog=backlog,
        log_level=log_level.lower(),
        log_config=None,
    )


if __name__ == "__main__":
    main()
