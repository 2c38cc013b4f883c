"""structlog setup for the server process.

Learn: Modules just call structlog.get_logger() and log dotted event names
with key/value context (logger.info("todo.created", id=3)). This module
decides how those events are rendered: a colored console line in
development, one JSON object per line when log_json is on.

Request-scoped context (request_id, method, path) is merged from
contextvars, so anything bound by RequestContextMiddleware shows up on
every log line of that request.
"""

import logging
import sys

import structlog


def configure_logging(level: str = "INFO", json: bool = False) -> None:
    """Configure structlog and the stdlib root logger. Call once at startup."""
    log_level = logging.getLevelName(level.upper())
    if not isinstance(log_level, int):
        raise ValueError(f"Unknown log level: {level}")

    # uvicorn and friends log through stdlib logging
    logging.basicConfig(
        level=log_level,
        format="%(message)s",
        stream=sys.stdout,
    )

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]
    if json:
        processors += [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        # ConsoleRenderer pretty-prints exc_info itself
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
