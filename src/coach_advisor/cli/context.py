from __future__ import annotations

import logging
from dataclasses import dataclass, field
from functools import cached_property
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from coach_advisor.advisor.service import AIAdvisor
from coach_advisor.clients.openai_client import build_estimation_source
from coach_advisor.config.settings import Settings
from coach_advisor.db.database import AdvisorDatabase
from coach_advisor.db.stores import (
    BenchmarkStore,
    InMemoryBenchmarkStore,
    InMemoryInteractionLog,
    InteractionLog,
    PostgresBenchmarkStore,
    PostgresInteractionLog,
)

logger = logging.getLogger("coach_advisor.cli")


def load_default_env() -> None:
    """
    Load a project-level .env if present.
    Resolves to the repository root (three levels up from this file).
    """
    project_root = Path(__file__).resolve().parents[3]
    env_path = project_root / ".env"
    load_dotenv(dotenv_path=env_path, override=False)


@dataclass
class CLIContext:
    settings: Settings
    use_memory: bool = False
    _db: Optional[AdvisorDatabase] = field(default=None, repr=False)

    @property
    def db(self) -> AdvisorDatabase:
        """Postgres connection, opened on first use so pure checks never need one."""
        if self._db is None:
            self._db = AdvisorDatabase(self.settings)
        return self._db

    @cached_property
    def benchmarks(self) -> BenchmarkStore:
        if self.use_memory:
            return InMemoryBenchmarkStore()
        return PostgresBenchmarkStore(self.db)

    @cached_property
    def interactions(self) -> InteractionLog:
        if self.use_memory:
            return InMemoryInteractionLog()
        return PostgresInteractionLog(self.db)

    @cached_property
    def advisor(self) -> AIAdvisor:
        """Advisor for estimate commands; answers without stores when Postgres is down."""
        source = build_estimation_source(self.settings)
        try:
            benchmarks, interactions = self.benchmarks, self.interactions
        except RuntimeError as exc:
            logger.warning("Advisor running without benchmarks or interaction log: %s", exc)
            return AIAdvisor(None, None, source)
        return AIAdvisor(
            benchmarks=benchmarks,
            interactions=interactions,
            estimation_source=source,
        )

    def close(self) -> None:
        if self._db is not None:
            self._db.close()
            self._db = None


def build_context(db_url: Optional[str] = None, use_memory: bool = False) -> CLIContext:
    load_default_env()

    settings = Settings()
    if db_url:
        settings.db_url = db_url

    return CLIContext(settings=settings, use_memory=use_memory or settings.use_memory_stores)
