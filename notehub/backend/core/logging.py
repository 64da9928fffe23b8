"""
Centralized Logging Configuration.

structlog on top of the stdlib root logger, configured from the validated
logging section (config/settings/logging.yaml). Entry points may override
the level, format and handlers.

Every record carries timestamp, level, logger, event, func_name and lineno,
plus whatever is bound in structlog contextvars: request_id, frontend and
path inside HTTP requests (RequestContextMiddleware), event_id, event_type
and source inside relayed change events (EventLoggingMiddleware).

Fields passed as ``extra={...}`` are merged into the record itself, so
``collection`` or ``username`` become top-level keys of the JSON line.

Usage:
    from notehub.backend.core.logging import get_logger, setup_logging

    setup_logging()
    logger = get_logger(__name__)
    logger.info("Course added", extra={"course": "Algorithms"})
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

import structlog
from structlog.typing import EventDict, Processor, WrappedLogger

from notehub.backend.core.config import find_project_root, get_app_config

# Libraries that are chatty below WARNING
QUIET_LOGGERS = ("uvicorn.access", "sqlalchemy.engine", "aiosqlite", "faststream")


def merge_extra(_: WrappedLogger, __: str, event_dict: EventDict) -> EventDict:
    """Lift the stdlib-style ``extra`` mapping into the event dict."""
    extra = event_dict.pop("extra", None)
    if extra:
        for key, value in extra.items():
            event_dict.setdefault(key, value)
    return event_dict


def _resolve_log_path(configured_path: str) -> Path:
    return find_project_root() / configured_path


def _shared_processors() -> list[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        merge_extra,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        structlog.processors.CallsiteParameterAdder(
            parameters=[
                structlog.processors.CallsiteParameter.FUNC_NAME,
                structlog.processors.CallsiteParameter.LINENO,
            ],
        ),
    ]


def setup_logging(
    level: str | None = None,
    format_type: str | None = None,
    enable_console: bool | None = None,
    enable_file_logging: bool | None = None,
) -> None:
    """
    Configure structured logging for the process.

    Arguments left as None fall back to the logging configuration.

    Args:
        level: DEBUG, INFO, WARNING, ERROR or CRITICAL.
        format_type: 'json' or 'console' for the console handler. The file
            handler always writes JSON lines.
        enable_console: Write records to stdout.
        enable_file_logging: Write records to the rotating JSONL file.
    """
    config = get_app_config().logging
    file_config = config.handlers.file

    level = level or config.level
    format_type = format_type or config.format
    if enable_console is None:
        enable_console = config.handlers.console.enabled
    if enable_file_logging is None:
        enable_file_logging = file_config.enabled

    shared = _shared_processors()
    structlog.configure(
        processors=shared + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    json_formatter = structlog.stdlib.ProcessorFormatter(
        processor=structlog.processors.JSONRenderer(),
        foreign_pre_chain=shared,
    )
    console_renderer = (
        structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())
        if format_type == "console"
        else structlog.processors.JSONRenderer()
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper()))
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    if enable_console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(
            structlog.stdlib.ProcessorFormatter(processor=console_renderer, foreign_pre_chain=shared)
        )
        root_logger.addHandler(console_handler)

    if enable_file_logging:
        log_path = _resolve_log_path(file_config.path)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            filename=str(log_path),
            maxBytes=file_config.max_bytes,
            backupCount=file_config.backup_count,
            encoding="utf-8",
        )
        file_handler.setFormatter(json_formatter)
        root_logger.addHandler(file_handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> Any:
    """Get a structlog logger, typically for ``__name__``."""
    return structlog.get_logger(name)
