"""Shared FastAPI dependencies for dependency injection."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Annotated, Generator, Optional

from fastapi import Depends, Request

from coach_advisor.advisor.service import AIAdvisor
from coach_advisor.api.exceptions import AuthenticationError, DatabaseConnectionError
from coach_advisor.config.settings import Settings
from coach_advisor.db.database import AdvisorDatabase
from coach_advisor.db.stores import (
    BenchmarkStore,
    InteractionLog,
    PostgresBenchmarkStore,
    PostgresInteractionLog,
)

logger = logging.getLogger("coach_advisor.api.deps")


@dataclass
class AdvisorStores:
    benchmarks: Optional[BenchmarkStore]
    interactions: Optional[InteractionLog]


# -----------------------------------------------------------------------------
# Stateless service dependencies (cached at app startup via app.state)
# -----------------------------------------------------------------------------


def get_settings(request: Request) -> Settings:
    """Get Settings instance from app state."""
    return request.app.state.settings


# -----------------------------------------------------------------------------
# Per-request dependencies (create fresh, cleanup after request)
# -----------------------------------------------------------------------------


def _memory_stores(request: Request) -> Optional[AdvisorStores]:
    state = request.app.state
    if getattr(state, "benchmarks", None) is None:
        return None
    return AdvisorStores(benchmarks=state.benchmarks, interactions=state.interactions)


def get_stores(request: Request) -> Generator[AdvisorStores, None, None]:
    """Stores for library management; a missing database is a 503."""
    memory = _memory_stores(request)
    if memory is not None:
        yield memory
        return
    try:
        db = AdvisorDatabase(request.app.state.settings)
    except RuntimeError as exc:
        raise DatabaseConnectionError(str(exc)) from exc
    try:
        yield AdvisorStores(PostgresBenchmarkStore(db), PostgresInteractionLog(db))
    finally:
        db.close()


def get_advisor(request: Request) -> Generator[AIAdvisor, None, None]:
    """Advisor for estimate requests.

    Estimates never depend on the database being up: without a connection the
    advisor answers from the reference tables and skips logging.
    """
    source = request.app.state.estimation_source
    memory = _memory_stores(request)
    if memory is not None:
        yield AIAdvisor(memory.benchmarks, memory.interactions, source)
        return
    try:
        db = AdvisorDatabase(request.app.state.settings)
    except RuntimeError as exc:
        logger.warning("Advisor running without benchmarks or interaction log: %s", exc)
        yield AIAdvisor(None, None, source)
        return
    try:
        yield AIAdvisor(PostgresBenchmarkStore(db), PostgresInteractionLog(db), source)
    finally:
        db.close()


# -----------------------------------------------------------------------------
# Authentication dependencies
# -----------------------------------------------------------------------------


async def verify_api_key(request: Request) -> str | None:
    """
    Verify API key if configured in settings.
    Returns the API key if valid, or None if no key is required.
    """
    settings: Settings = request.app.state.settings
    expected_key = settings.api_key
    if not expected_key:
        return None

    x_api_key = request.headers.get("X-API-Key")
    if not x_api_key:
        raise AuthenticationError("Missing API key")
    if x_api_key != expected_key.get_secret_value():
        raise AuthenticationError("Invalid API key")
    return x_api_key


# -----------------------------------------------------------------------------
# Type aliases for cleaner route signatures
# -----------------------------------------------------------------------------

SettingsDep = Annotated[Settings, Depends(get_settings)]
StoresDep = Annotated[AdvisorStores, Depends(get_stores)]
AdvisorDep = Annotated[AIAdvisor, Depends(get_advisor)]
