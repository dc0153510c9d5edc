"""Convenience entry point for the Coach Advisor API server."""

import uvicorn

from coach_advisor.api.main import app
from coach_advisor.config.settings import Settings


def main():
    settings = Settings()
    uvicorn.run(
        app,
        host=settings.api_host,
        port=settings.api_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
