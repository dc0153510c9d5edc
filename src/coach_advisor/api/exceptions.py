"""Error responses.

Every error body has the shape ``{"error", "code", "requestId", "detail"?}`` so the
wizard can show the message and quote the id when a user reports a problem.
"""

from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

logger = logging.getLogger("coach_advisor.api.errors")


class APIException(Exception):
    """Base for errors the routers raise on purpose."""

    code = "INVALID_REQUEST"
    status_code = 400

    def __init__(self, message: str, detail: str | None = None):
        super().__init__(message)
        self.message = message
        self.detail = detail


class InvalidRequestError(APIException):
    """Well-formed input that cannot be acted on, e.g. promoting an estimate with no value."""


class AuthenticationError(APIException):
    code = "AUTH_FAILED"
    status_code = 401


class NotFoundError(APIException):
    status_code = 404
    resource = "Resource"

    def __init__(self, resource_id: str):
        super().__init__(f"{self.resource} '{resource_id}' not found")
        self.resource_id = resource_id


class InteractionNotFoundError(NotFoundError):
    code = "INTERACTION_NOT_FOUND"
    resource = "Interaction"


class BenchmarkNotFoundError(NotFoundError):
    code = "BENCHMARK_NOT_FOUND"
    resource = "Benchmark"


class DatabaseConnectionError(APIException):
    """The coach library needs Postgres; estimates do not."""

    code = "DB_CONNECTION_ERROR"
    status_code = 503

    def __init__(self, detail: str | None = None):
        super().__init__("Coach library is unavailable", detail)


def _error_body(request: Request, message: str, code: str, detail: str | None = None) -> Dict[str, Any]:
    body: Dict[str, Any] = {
        "error": message,
        "code": code,
        "requestId": getattr(request.state, "request_id", None),
    }
    if detail:
        body["detail"] = detail
    return body


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(APIException)
    async def api_exception_handler(request: Request, exc: APIException) -> JSONResponse:
        # DSNs can carry credentials; keep them in the log only
        detail = None if isinstance(exc, DatabaseConnectionError) else exc.detail
        if exc.status_code >= 500:
            logger.error("%s: %s", exc.code, exc.detail or exc.message)
        else:
            logger.info("%s: %s", exc.code, exc.message)
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(request, exc.message, exc.code, detail),
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error("Unhandled %s on %s %s", type(exc).__name__, request.method, request.url.path, exc_info=exc)
        return JSONResponse(
            status_code=500,
            content=_error_body(request, "Internal server error", "INTERNAL_ERROR"),
        )
