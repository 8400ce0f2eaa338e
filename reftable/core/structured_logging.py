"""
Structured logging with structlog.

Configures structlog to output JSON lines, optionally to a rotating file.
Backward-compatible with stdlib logging: module-level logger.info() calls
are rendered through the same processors and enriched with the lifecycle
context (operation, table_id).
"""
from __future__ import annotations

import logging
import logging.handlers
import os
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator, Optional

import structlog

# ── Context vars for correlation ──────────────────────────────────────
operation_var: ContextVar[str | None] = ContextVar("operation", default=None)
table_id_var: ContextVar[str | None] = ContextVar("table_id", default=None)

APP_VERSION = "0.1.0"
SERVICE_NAME = "reftable"


def _inject_context(logger_name: str, method_name: str, event_dict: dict) -> dict:
    """Structlog processor: inject lifecycle context from contextvars."""
    event_dict["service"] = SERVICE_NAME
    event_dict["version"] = APP_VERSION

    op = operation_var.get(None)
    if op:
        event_dict["operation"] = op

    tid = table_id_var.get(None)
    if tid:
        event_dict["table_id"] = tid

    return event_dict


def _add_log_level_lower(logger_name: str, method_name: str, event_dict: dict) -> dict:
    """Normalize log level to lowercase for consistency."""
    level = event_dict.get("level")
    if level:
        event_dict["level"] = level.lower()
    return event_dict


@contextmanager
def operation_context(operation: str, table_id: Optional[str] = None) -> Iterator[None]:
    """Bind operation/table_id for every log line emitted inside the block."""
    op_token = operation_var.set(operation)
    tid_token = table_id_var.set(table_id)
    try:
        yield
    finally:
        table_id_var.reset(tid_token)
        operation_var.reset(op_token)


def setup_logging(
    log_level: int | str = logging.INFO,
    log_to_file: bool = False,
    log_dir: str = "logs",
    log_file: str = "reftable.jsonl",
    max_bytes: int = 10 * 1024 * 1024,  # 10MB
    backup_count: int = 5,
) -> None:
    """Initialize structlog + stdlib logging with JSON output.

    Call once at startup. After this, both structlog.get_logger() and
    logging.getLogger() produce JSON-formatted output with lifecycle context.
    """
    shared_processors: list = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        _add_log_level_lower,
        structlog.stdlib.add_logger_name,
        _inject_context,
        structlog.processors.TimeStamper(fmt="iso", utc=True, key="ts"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.JSONRenderer(),
        ],
    )

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(log_level)
    root.addHandler(console_handler)

    if log_to_file:
        os.makedirs(log_dir, exist_ok=True)
        try:
            file_handler = logging.handlers.RotatingFileHandler(
                os.path.join(log_dir, log_file),
                maxBytes=max_bytes,
                backupCount=backup_count,
                encoding="utf-8",
            )
        except OSError:
            # Stay on stderr only
            file_handler = None
        if file_handler:
            file_handler.setFormatter(formatter)
            root.addHandler(file_handler)

    # Quiet noisy third-party loggers
    for noisy in ("httpcore", "httpx", "asyncio"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


def setup_logging_from_settings(settings) -> None:
    """Apply the logging section of a Settings instance."""
    setup_logging(
        log_level=settings.log_level,
        log_to_file=settings.log_to_file,
        log_dir=settings.log_dir,
        log_file=settings.log_file,
    )
