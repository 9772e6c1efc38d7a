import logging
import os
import sys
import uuid
from contextvars import ContextVar
from datetime import datetime
from logging.handlers import RotatingFileHandler
from typing import Optional

import pytz
from fastapi import FastAPI

from configs import LoggingConfig, app_config

trace_id_var: ContextVar[Optional[str]] = ContextVar("trace_id", default=None)

# Third-party loggers that log every connection at INFO
NOISY_LOGGERS = ("httpx", "httpcore")


def trace_id_generator() -> str:
    return str(uuid.uuid4().hex)


def init_app(app: FastAPI):
    setup_logging(app_config)


def setup_logging(config: LoggingConfig) -> None:
    """Configure root logging; usable by hosts that do not run the FastAPI surface."""
    log_handlers: list[logging.Handler] = []
    log_file = config.LOG_FILE
    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        log_handlers.append(
            RotatingFileHandler(
                filename=log_file,
                maxBytes=config.LOG_FILE_MAX_SIZE * 1024 * 1024,
                backupCount=config.LOG_FILE_BACKUP_COUNT,
            )
        )

    # Always add StreamHandler to log to console
    log_handlers.append(logging.StreamHandler(sys.stdout))

    for handler in log_handlers:
        handler.addFilter(TraceIdFilter())

    logging.basicConfig(
        level=config.LOG_LEVEL,
        format=config.LOG_FORMAT,
        datefmt=config.LOG_DATEFORMAT,
        handlers=log_handlers,
        force=True,
    )

    for handler in logging.root.handlers:
        handler.setFormatter(TraceIdFormatter(config.LOG_FORMAT, config.LOG_DATEFORMAT))

    if config.LOG_LEVEL.upper() != "DEBUG":
        for name in NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    if config.LOG_TZ:
        timezone = pytz.timezone(config.LOG_TZ)

        def time_converter(seconds):
            return datetime.fromtimestamp(seconds, tz=timezone).timetuple()

        for handler in logging.root.handlers:
            if handler.formatter:
                handler.formatter.converter = time_converter


class TraceIdFilter(logging.Filter):
    # Exposes the current trace id to the format string; outside a request it is None
    def filter(self, record):
        record.trace_id = trace_id_var.get()
        return True


class TraceIdFormatter(logging.Formatter):
    def format(self, record):
        if not hasattr(record, "trace_id") or record.trace_id is None:
            record.trace_id = ""
        return super().format(record)
