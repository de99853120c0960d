"""
Api.Template — Structured Logging Configuration
=================================================

What:  Configures the stdlib logging tree and enriches every record with
       process, thread, environment and request-correlation metadata.
How:   `configure_logging()` sets up the root logger (basicConfig to stdout, or
       dictConfig when LOG_CONFIG is provided) and attaches a
       ContextEnrichmentFilter to each root handler. `logging_scope()` wraps it
       in a context manager that flushes and closes handlers on exit.
Who:   Called once by the process entry point (api_template.__main__).

Enriched fields (available to formatters as %(name)s placeholders):
    process_id, process_name, environment_name, thread_id, thread_name,
    client_ip, correlation_id, span_id

Concurrency:
    stdlib handlers serialize emit() with a per-handler lock, so records from
    concurrent requests are never interleaved. Request-scoped fields are read
    from ContextVars, so each record reports its own request.
"""

import logging
import logging.config
import os
import sys
from contextlib import contextmanager
from typing import Iterator

from api_template.config import Settings
from api_template.middleware.correlation import (
    client_ip_var,
    correlation_id_var,
    span_id_var,
)

APP_LOGGER_NAME = "api_template"

LOG_FORMAT = (
    "%(asctime)s [%(levelname)s] %(name)s "
    "[%(environment_name)s pid=%(process_id)s tid=%(thread_id)s] "
    "[%(correlation_id)s/%(span_id)s %(client_ip)s] %(message)s"
)

_EMPTY = "-"


def _process_name() -> str:
    name = os.path.basename(sys.argv[0]) if sys.argv and sys.argv[0] else ""
    return name or os.path.basename(sys.executable) or "python"


class ContextEnrichmentFilter(logging.Filter):
    """
    Attaches fixed and request-scoped metadata to every log record.

    Never rejects a record and never raises: existing attributes (e.g. ones
    passed via `extra=`) are left untouched.
    """

    def __init__(self, environment_name: str) -> None:
        super().__init__()
        self.environment_name = environment_name
        self.process_id = os.getpid()
        self.process_name = _process_name()

    def filter(self, record: logging.LogRecord) -> bool:
        values = {
            "process_id": self.process_id,
            "process_name": self.process_name,
            "environment_name": self.environment_name,
            "thread_id": record.thread,
            "thread_name": record.threadName,
            "client_ip": client_ip_var.get("") or _EMPTY,
            "correlation_id": correlation_id_var.get("") or _EMPTY,
            "span_id": span_id_var.get("") or _EMPTY,
        }
        for key, value in values.items():
            if not hasattr(record, key):
                setattr(record, key, value)
        return True


def configure_logging(settings: Settings) -> logging.Logger:
    """
    Configure logging for the entire process and return the application logger.

    When `settings.log_config` is set it is applied verbatim with dictConfig;
    otherwise a single stdout StreamHandler using LOG_FORMAT is installed.
    Either way every root handler gets the enrichment filter.
    """
    if settings.log_config:
        logging.config.dictConfig(settings.log_config)
    else:
        logging.basicConfig(
            level=getattr(logging, settings.log_level, logging.INFO),
            format=LOG_FORMAT,
            datefmt="%Y-%m-%dT%H:%M:%S",
            handlers=[
                logging.StreamHandler(sys.stdout),
            ],
            force=True,
        )

    enrichment = ContextEnrichmentFilter(environment_name=settings.environment)
    for handler in logging.getLogger().handlers:
        if not any(isinstance(f, ContextEnrichmentFilter) for f in handler.filters):
            handler.addFilter(enrichment)

    # Request logging middleware already covers access logs
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

    return logging.getLogger(APP_LOGGER_NAME)


@contextmanager
def logging_scope(settings: Settings) -> Iterator[logging.Logger]:
    """Configure logging for the lifetime of the block; flush and close on exit."""
    log = configure_logging(settings)
    try:
        yield log
    finally:
        logging.shutdown()
