"""Logging for the debpack CLI — structlog events rendered through stdlib logging.

Events go to stderr so stdout carries only command output. Pipeline code binds
run context (``source``, ``package``) with :mod:`structlog.contextvars`; it is
merged into every event logged during the run.
"""

from __future__ import annotations

import logging
import logging.config
import os
import sys

import structlog

DEFAULT_LEVEL = "INFO"
LOG_FORMATS = ("console", "json")


def _resolve_level(verbose: bool) -> str:
    if verbose:
        return "DEBUG"
    level = os.environ.get("DEBPACK_LOG_LEVEL", DEFAULT_LEVEL).upper()
    # getLevelName maps known names to ints and anything else to a "Level x" string
    return level if isinstance(logging.getLevelName(level), int) else DEFAULT_LEVEL


def _renderer(log_format: str) -> structlog.types.Processor:
    if log_format == "json":
        return structlog.processors.JSONRenderer(sort_keys=True)
    return structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())


def setup_logging(verbose: bool = False) -> None:
    """Configure structlog and the ``debpack`` stdlib logger.

    Reads from environment variables:
        DEBPACK_LOG_LEVEL  — log level (default: INFO; ``-v`` forces DEBUG)
        DEBPACK_LOG_FORMAT — console | json (default: console)

    Console output is meant for a terminal and carries no timestamps; json
    output adds an ISO-8601 UTC ``timestamp`` for build logs.
    """
    log_level = _resolve_level(verbose)
    log_format = os.environ.get("DEBPACK_LOG_FORMAT", "console").lower()
    if log_format not in LOG_FORMATS:
        log_format = "console"

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
    ]
    if log_format == "json":
        shared_processors += [
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.format_exc_info,
        ]

    structlog.configure(
        processors=shared_processors
        + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "debpack": {
                    "()": structlog.stdlib.ProcessorFormatter,
                    "foreign_pre_chain": shared_processors,
                    "processors": [
                        structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                        _renderer(log_format),
                    ],
                },
            },
            "handlers": {
                "stderr": {
                    "class": "logging.StreamHandler",
                    "stream": "ext://sys.stderr",
                    "formatter": "debpack",
                },
            },
            # Third-party loggers stay at WARNING; only debpack follows -v
            "root": {"handlers": ["stderr"], "level": "WARNING"},
            "loggers": {"debpack": {"level": log_level}},
        }
    )
