"""Structured logging for newsbias.

All modules log through structlog with snake_case event names and keyword
context. ``setup_logging`` routes structlog and stdlib records through the
same formatter so third-party output (httpx, trafilatura) shares the format.
"""

import logging
import sys
from contextlib import AbstractContextManager
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path
from typing import Literal, Optional

import structlog

LOG_FILE_NAME = "newsbias.log"
LOG_RETENTION_DAYS = 14

# Libraries that log every request at INFO
NOISY_LOGGERS = ("httpx", "httpcore", "trafilatura", "charset_normalizer")


def _renderer(log_format: str, colors: bool = True):
    if log_format == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=colors)


def setup_logging(
    log_level: str = "INFO",
    log_format: Literal["json", "console"] = "json",
    log_dir: Optional[Path] = None,
) -> None:
    """Configure structured logging with structlog.

    Calling this again replaces the previously installed handlers, so the
    CLI can reconfigure logging between commands in one process.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Console output format ("json" or "console")
        log_dir: Directory for log files. If provided, plain-text logs are
            also written there with daily rotation and 14-day retention.
    """
    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    structlog.configure(
        processors=shared_processors + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
    root_logger.setLevel(getattr(logging, log_level.upper()))

    handlers = [(logging.StreamHandler(sys.stderr), _renderer(log_format))]

    if log_dir:
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = TimedRotatingFileHandler(
            filename=log_dir / LOG_FILE_NAME,
            when="midnight",
            backupCount=LOG_RETENTION_DAYS,
            encoding="utf-8",
        )
        handlers.append((file_handler, _renderer("console", colors=False)))

    for handler, renderer in handlers:
        handler.setFormatter(
            structlog.stdlib.ProcessorFormatter(
                processor=renderer,
                foreign_pre_chain=shared_processors,
            )
        )
        root_logger.addHandler(handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a structured logger instance.

    Args:
        name: Logger name (usually __name__)

    Returns:
        Structured logger instance
    """
    return structlog.get_logger(name)


def run_context(run_id: str) -> AbstractContextManager:
    """Attach run_id to every event logged inside the block.

    Context variables are copied into tasks created inside the block, so
    concurrent per-article work is tagged as well.
    """
    return structlog.contextvars.bound_contextvars(run_id=run_id)
