"""Test doubles shared by unit and integration tests."""

from __future__ import annotations

from typing import List

from coach_advisor.core.models import (
    AdvisorRequest,
    Confidence,
    Suggestion,
    SuggestionSource,
)
from coach_advisor.db.stores import InMemoryBenchmarkStore, InMemoryInteractionLog


class RecordingEstimationSource:
    """Returns a fixed low-confidence range and remembers every request."""

    def __init__(self):
        self.requests: List[AdvisorRequest] = []

    def estimate(self, request: AdvisorRequest) -> Suggestion:
        self.requests.append(request)
        return Suggestion(
            suggestion="$1,000 - $2,000",
            reasoning="recorded",
            confidence=Confidence.low,
            source=SuggestionSource.ai_estimate,
            min_value=1000,
            max_value=2000,
            typical_value=1500,
        )


class FailingEstimationSource:
    def estimate(self, request: AdvisorRequest) -> Suggestion:
        raise RuntimeError("model unavailable")


class BrokenBenchmarkStore(InMemoryBenchmarkStore):
    def get_benchmark(self, coach_id, benchmark_type, category):
        raise ConnectionError("benchmark store unreachable")


class BrokenUsageBenchmarkStore(InMemoryBenchmarkStore):
    def mark_used(self, coach_id, benchmark_type, category):
        raise ConnectionError("usage counter write failed")


class BrokenInteractionLog(InMemoryInteractionLog):
    def log_interaction(self, request, suggestion):
        raise ConnectionError("interaction log write failed")

    def record_action(self, interaction_id, action, user_value=None):
        raise ConnectionError("interaction log write failed")
