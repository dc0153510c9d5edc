"""Per-request id and access logging."""

from __future__ import annotations

import logging
import re
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from coach_advisor.api.logging_config import request_id_var

logger = logging.getLogger("coach_advisor.api.access")

REQUEST_ID_HEADER = "X-Request-ID"
_CLIENT_ID_RE = re.compile(r"^[A-Za-z0-9._-]{1,64}$")

# health checks are logged at DEBUG
_QUIET_PATHS = frozenset({"/health", "/ready"})


def _request_id(request: Request) -> str:
    """Reuse a caller-supplied id when it is safe to echo, else mint one."""
    supplied = request.headers.get(REQUEST_ID_HEADER, "")
    if _CLIENT_ID_RE.match(supplied):
        return supplied
    return uuid.uuid4().hex[:12]


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Tag the request with an id, log its outcome and echo the id back."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = _request_id(request)
        request.state.request_id = request_id
        token = request_id_var.set(request_id)
        start = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            logger.error(
                "%s %s failed after %.0fms",
                request.method,
                request.url.path,
                (time.perf_counter() - start) * 1000,
                exc_info=True,
            )
            raise
        else:
            elapsed_ms = (time.perf_counter() - start) * 1000
            if response.status_code >= 500:
                level = logging.ERROR
            elif response.status_code >= 400:
                level = logging.WARNING
            elif request.url.path in _QUIET_PATHS:
                level = logging.DEBUG
            else:
                level = logging.INFO
            logger.log(
                level,
                "%s %s %d %.0fms",
                request.method,
                request.url.path,
                response.status_code,
                elapsed_ms,
            )
            response.headers[REQUEST_ID_HEADER] = request_id
            response.headers["Server-Timing"] = f"app;dur={elapsed_ms:.1f}"
            return response
        finally:
            request_id_var.reset(token)
