"""
Api.Template — Process Entry Point
====================================

Usage:
    python -m api_template

Startup sequence:
    1. Load settings and configure logging (flushed when the scope exits)
    2. Build the app: service registration, then middleware pipeline
    3. Serve with uvicorn until a termination signal arrives

A fatal error escaping the server loop is logged at CRITICAL and turned into
a non-zero exit code (1, or the code uvicorn exits with when it fails to
start); it is not re-raised.
"""

import sys
from typing import Optional

import uvicorn

from api_template.config import Settings, settings as default_settings
from api_template.logging_config import logging_scope
from api_template.main import create_app


def main(settings: Optional[Settings] = None) -> int:
    settings = settings or default_settings

    with logging_scope(settings) as log:
        try:
            app = create_app(settings, log)
            log.info("Starting application")
            uvicorn.run(
                app,
                host=settings.host,
                port=settings.port,
                log_config=None,  # keep the handlers installed by logging_scope
            )
        except SystemExit as exc:
            # uvicorn exits with code 3 when the server cannot start
            if not exc.code:
                return 0
            log.critical("Application terminated unexpectedly", exc_info=True)
            return exc.code if isinstance(exc.code, int) else 1
        except Exception:
            log.critical("Application terminated unexpectedly", exc_info=True)
            return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
