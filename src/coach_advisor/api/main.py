"""FastAPI application factory and configuration."""

from __future__ import annotations

import os
from contextlib import asynccontextmanager
from pathlib import Path

from dotenv import load_dotenv
from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.openapi.utils import get_openapi

from coach_advisor.api.deps import verify_api_key
from coach_advisor.api.exceptions import register_exception_handlers
from coach_advisor.api.logging_config import setup_logging
from coach_advisor.api.middleware import RequestLoggingMiddleware
from coach_advisor.api.version import BUILD_VERSION
from coach_advisor.clients.openai_client import build_estimation_source, describe_source
from coach_advisor.config.settings import Settings
from coach_advisor.db.stores import InMemoryBenchmarkStore, InMemoryInteractionLog


def _load_default_env() -> None:
    """Load .env file from project root if not already loaded."""
    project_root = Path(__file__).resolve().parents[3]
    load_dotenv(dotenv_path=project_root / ".env", override=False)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.
    Builds settings and the estimation source once; per-request stores come from deps.
    """
    _load_default_env()

    settings = Settings()
    source = build_estimation_source(settings)

    app.state.settings = settings
    app.state.estimation_source = source
    app.state.estimation_source_name = describe_source(source)

    # Memory mode: one shared library for the app lifetime instead of Postgres
    if settings.use_memory_stores:
        app.state.benchmarks = InMemoryBenchmarkStore()
        app.state.interactions = InMemoryInteractionLog()
    else:
        app.state.benchmarks = None
        app.state.interactions = None

    yield


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance.
    """
    log_level = os.environ.get("LOG_LEVEL", "INFO")
    setup_logging(log_level)

    app = FastAPI(
        title="Coach Advisor API",
        description=(
            "Estimation and validation API for the business-coaching forecast wizard. "
            "Provides salary and project-cost suggestions, forecast reviews, "
            "forecast input checks, and the coach benchmark library."
        ),
        version=BUILD_VERSION,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    cors_origins = os.environ.get("API_CORS_ORIGINS", "*")
    origins = [o.strip() for o in cors_origins.split(",") if o.strip()]

    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins or ["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Request logging middleware (outermost, wraps everything)
    app.add_middleware(RequestLoggingMiddleware)

    register_exception_handlers(app)

    from coach_advisor.api.advisor.router import router as advisor_router
    from coach_advisor.api.health.router import router as health_router
    from coach_advisor.api.library.router import router as library_router
    from coach_advisor.api.validation.router import router as validation_router

    # Health endpoints at root level, no API key
    app.include_router(health_router, tags=["health"])

    secured = [Depends(verify_api_key)]
    app.include_router(
        advisor_router, prefix="/api/v1/advisor", tags=["advisor"], dependencies=secured
    )
    app.include_router(
        validation_router, prefix="/api/v1/validation", tags=["validation"], dependencies=secured
    )
    app.include_router(library_router, prefix="/api/v1", tags=["library"], dependencies=secured)

    @app.get("/", include_in_schema=False)
    def root():
        """Root endpoint - points at docs."""
        return {
            "message": "Coach Advisor API",
            "docs": "/docs",
            "health": "/health",
            "ready": "/ready",
        }

    app.openapi_schema = None

    def custom_openapi():
        if app.openapi_schema:
            return app.openapi_schema
        openapi_schema = get_openapi(
            title=app.title,
            version=app.version,
            description=app.description,
            routes=app.routes,
        )
        openapi_schema.setdefault("components", {})["securitySchemes"] = {
            "ApiKeyAuth": {
                "type": "apiKey",
                "in": "header",
                "name": "X-API-Key",
                "description": "API key for authentication. Set in .env as API_KEY.",
            }
        }
        openapi_schema["security"] = [{"ApiKeyAuth": []}]
        app.openapi_schema = openapi_schema
        return app.openapi_schema

    app.openapi = custom_openapi

    return app


# Create the app instance for uvicorn
app = create_app()
