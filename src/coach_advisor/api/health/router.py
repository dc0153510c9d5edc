"""Health check endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Request
from pydantic import BaseModel

from coach_advisor.api.version import BUILD_VERSION
from coach_advisor.db.database import AdvisorDatabase

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str = BUILD_VERSION


class ReadyResponse(BaseModel):
    """Readiness check response."""

    status: str
    database: str
    estimation_source: str
    details: dict | None = None


@router.get("/health", response_model=HealthResponse)
def health_check() -> HealthResponse:
    """Liveness probe: 200 whenever the process is serving."""
    return HealthResponse(status="ok")


@router.get("/ready", response_model=ReadyResponse)
def readiness_check(request: Request) -> ReadyResponse:
    """
    Readiness probe.

    In memory mode there is nothing to check. Otherwise the database must
    answer ``SELECT 1``; estimates still work without it, but nothing is logged.
    """
    state = request.app.state
    source = getattr(state, "estimation_source_name", "heuristic")
    if getattr(state, "benchmarks", None) is not None:
        return ReadyResponse(status="ready", database="memory", estimation_source=source)

    db_status = "unknown"
    details = {}
    try:
        db = AdvisorDatabase(state.settings)
        try:
            db.ping()
            db_status = "connected"
        finally:
            db.close()
    except Exception as e:
        db_status = "error"
        details["database_error"] = str(e)

    overall_status = "ready" if db_status == "connected" else "not_ready"

    return ReadyResponse(
        status=overall_status,
        database=db_status,
        estimation_source=source,
        details=details if details else None,
    )
