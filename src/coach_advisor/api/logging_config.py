"""Logging for the HTTP service: every record carries the id of the request it belongs to."""

from __future__ import annotations

import logging
import sys
from contextvars import ContextVar

# "-" outside a request (startup, shutdown, background work)
request_id_var: ContextVar[str] = ContextVar("request_id", default="-")

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | req=%(request_id)s | %(name)s | %(message)s"


class RequestIdFilter(logging.Filter):
    """Stamp ``record.request_id`` from the current request context."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "request_id"):
            record.request_id = request_id_var.get()
        return True


def setup_logging(level: str = "INFO") -> None:
    """Send all logs to stdout in one format.

    uvicorn's own handlers are dropped so its records flow through the root
    handler; its access log is raised to WARNING since
    :class:`~coach_advisor.api.middleware.RequestLoggingMiddleware` already logs
    each request with timing.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler.addFilter(RequestIdFilter())

    root = logging.getLogger()
    root.setLevel(log_level)
    for existing in root.handlers[:]:
        root.removeHandler(existing)
    root.addHandler(handler)

    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        uv_logger = logging.getLogger(name)
        uv_logger.handlers.clear()
        uv_logger.propagate = True
    logging.getLogger("uvicorn.access").setLevel(max(log_level, logging.WARNING))
