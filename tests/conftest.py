from __future__ import annotations

import pytest

from coach_advisor.advisor.service import AIAdvisor
from coach_advisor.core.models import AdvisorContext
from coach_advisor.db.stores import InMemoryBenchmarkStore, InMemoryInteractionLog
from tests.helpers import RecordingEstimationSource


@pytest.fixture()
def benchmarks() -> InMemoryBenchmarkStore:
    return InMemoryBenchmarkStore()


@pytest.fixture()
def interactions() -> InMemoryInteractionLog:
    return InMemoryInteractionLog()


@pytest.fixture()
def recording_source() -> RecordingEstimationSource:
    return RecordingEstimationSource()


@pytest.fixture()
def advisor(benchmarks, interactions) -> AIAdvisor:
    return AIAdvisor(benchmarks=benchmarks, interactions=interactions)


@pytest.fixture()
def coach_context() -> AdvisorContext:
    return AdvisorContext(
        business_id="biz-1",
        user_id="user-1",
        coach_id="coach-1",
        industry="trades",
        revenue_range="1m-2m",
        state="NSW",
    )


@pytest.fixture()
def memory_env(monkeypatch):
    """Environment for API/CLI runs that must never touch Postgres or OpenAI."""
    monkeypatch.setenv("USE_MEMORY_STORES", "true")
    monkeypatch.setenv("USE_OPENAI_STUB", "1")
    monkeypatch.setenv("USE_AI_ESTIMATES", "false")
    monkeypatch.delenv("API_KEY", raising=False)
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    return monkeypatch
