"""Collaborators of the advisor: the coach benchmark store and the interaction log.

Both come in a Postgres flavour (backed by :class:`AdvisorDatabase`) and an
in-memory flavour for tests and offline CLI runs.
"""

from __future__ import annotations

import re
import threading
import uuid
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Protocol

from coach_advisor.core.models import (
    AdvisorRequest,
    BenchmarkType,
    CoachBenchmark,
    Confidence,
    Interaction,
    InteractionAction,
    QuestionType,
    Suggestion,
)
from coach_advisor.core.normalize import normalize_project_type, normalize_role
from coach_advisor.db.database import AdvisorDatabase


class BenchmarkStore(Protocol):
    def get_benchmark(
        self, coach_id: str, benchmark_type: BenchmarkType, category: str
    ) -> Optional[CoachBenchmark]: ...

    def mark_used(self, coach_id: str, benchmark_type: BenchmarkType, category: str) -> None: ...

    def add_benchmark(self, benchmark: CoachBenchmark) -> CoachBenchmark: ...

    def list_benchmarks(self, coach_id: str | None = None) -> List[CoachBenchmark]: ...

    def delete_benchmark(self, benchmark_id: str) -> bool: ...


class InteractionLog(Protocol):
    def log_interaction(self, request: AdvisorRequest, suggestion: Suggestion) -> Optional[str]: ...

    def record_action(
        self, interaction_id: str, action: InteractionAction, user_value: float | None = None
    ) -> bool: ...

    def get_interaction(self, interaction_id: str) -> Optional[Interaction]: ...

    def list_interactions(
        self,
        question_type: QuestionType | None = None,
        search: str | None = None,
        limit: int = 100,
    ) -> List[Interaction]: ...

    def mark_reviewed(self, interaction_id: str) -> bool: ...

    def mark_added_to_library(self, interaction_id: str) -> bool: ...


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _is_row_id(value: str) -> bool:
    """Postgres row ids are UUIDs; anything else cannot match a row."""
    try:
        uuid.UUID(str(value))
    except ValueError:
        return False
    return True


def _interaction_row(request: AdvisorRequest, suggestion: Suggestion) -> Dict[str, Any]:
    ctx = request.advisor_context
    return {
        "business_id": ctx.business_id,
        "user_id": ctx.user_id,
        "coach_id": ctx.coach_id,
        "question": request.question,
        "question_type": request.question_type.value,
        "context": request.context,
        "context_data": dict(request.context_data),
        "ai_response": suggestion.to_dict(),
        "confidence": suggestion.confidence.value,
        "business_industry": ctx.industry,
        "business_revenue_range": ctx.revenue_range,
        "business_state": ctx.state,
    }


def _benchmark_from_row(row: Dict[str, Any]) -> CoachBenchmark:
    return CoachBenchmark(
        id=str(row["id"]) if row.get("id") is not None else None,
        coach_id=row.get("coach_id"),
        benchmark_type=BenchmarkType(row["benchmark_type"]),
        category=row["category"],
        min_value=row.get("min_value"),
        max_value=row.get("max_value"),
        typical_value=row.get("typical_value"),
        notes=row.get("notes"),
        industry_filter=row.get("industry_filter"),
        times_used=row.get("times_used") or 0,
        last_used_at=row.get("last_used_at"),
    )


def _interaction_from_row(row: Dict[str, Any]) -> Interaction:
    action = row.get("action_taken")
    return Interaction(
        id=str(row["id"]),
        question=row["question"],
        question_type=QuestionType(row["question_type"]),
        context=row["context"],
        context_data=row.get("context_data") or {},
        ai_response=row.get("ai_response") or {},
        confidence=Confidence(row["confidence"]),
        business_id=row.get("business_id"),
        user_id=row.get("user_id"),
        coach_id=row.get("coach_id"),
        business_industry=row.get("business_industry"),
        business_revenue_range=row.get("business_revenue_range"),
        business_state=row.get("business_state"),
        action_taken=InteractionAction(action) if action else None,
        user_value=row.get("user_value"),
        coach_reviewed=bool(row.get("coach_reviewed")),
        added_to_library=bool(row.get("added_to_library")),
        created_at=row.get("created_at"),
    )


# -----------------------------------------------------------------------------
# Postgres
# -----------------------------------------------------------------------------


class PostgresBenchmarkStore(BenchmarkStore):
    def __init__(self, db: AdvisorDatabase):
        self.db = db

    def get_benchmark(
        self, coach_id: str, benchmark_type: BenchmarkType, category: str
    ) -> Optional[CoachBenchmark]:
        try:
            row = self.db.fetch_benchmark(coach_id, benchmark_type.value, category)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        return _benchmark_from_row(row) if row else None

    def mark_used(self, coach_id: str, benchmark_type: BenchmarkType, category: str) -> None:
        try:
            self.db.increment_benchmark_usage(coach_id, benchmark_type.value, category)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

    def add_benchmark(self, benchmark: CoachBenchmark) -> CoachBenchmark:
        try:
            row = self.db.upsert_benchmark(
                {
                    "coach_id": benchmark.coach_id,
                    "benchmark_type": benchmark.benchmark_type.value,
                    "category": benchmark.category,
                    "min_value": benchmark.min_value,
                    "max_value": benchmark.max_value,
                    "typical_value": benchmark.typical_value,
                    "notes": benchmark.notes,
                    "industry_filter": benchmark.industry_filter,
                }
            )
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        return _benchmark_from_row(row)

    def list_benchmarks(self, coach_id: str | None = None) -> List[CoachBenchmark]:
        try:
            rows = self.db.fetch_benchmarks(coach_id)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        return [_benchmark_from_row(r) for r in rows]

    def delete_benchmark(self, benchmark_id: str) -> bool:
        if not _is_row_id(benchmark_id):
            return False
        try:
            deleted = self.db.remove_benchmark(benchmark_id)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        return deleted


class PostgresInteractionLog(InteractionLog):
    def __init__(self, db: AdvisorDatabase):
        self.db = db

    def _update(self, interaction_id: str, **fields: Any) -> bool:
        if not _is_row_id(interaction_id):
            return False
        try:
            updated = self.db.update_interaction(interaction_id, **fields)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        return updated

    def log_interaction(self, request: AdvisorRequest, suggestion: Suggestion) -> Optional[str]:
        try:
            interaction_id = self.db.insert_interaction(_interaction_row(request, suggestion))
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        return interaction_id

    def record_action(
        self, interaction_id: str, action: InteractionAction, user_value: float | None = None
    ) -> bool:
        return self._update(interaction_id, action_taken=action.value, user_value=user_value)

    def get_interaction(self, interaction_id: str) -> Optional[Interaction]:
        if not _is_row_id(interaction_id):
            return None
        try:
            row = self.db.fetch_interaction(interaction_id)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        return _interaction_from_row(row) if row else None

    def list_interactions(
        self,
        question_type: QuestionType | None = None,
        search: str | None = None,
        limit: int = 100,
    ) -> List[Interaction]:
        try:
            rows = self.db.fetch_interactions(
                question_type.value if question_type else None, search, limit
            )
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        return [_interaction_from_row(r) for r in rows]

    def mark_reviewed(self, interaction_id: str) -> bool:
        return self._update(interaction_id, coach_reviewed=True)

    def mark_added_to_library(self, interaction_id: str) -> bool:
        return self._update(interaction_id, added_to_library=True)


# -----------------------------------------------------------------------------
# In-memory
# -----------------------------------------------------------------------------


class InMemoryBenchmarkStore(BenchmarkStore):
    """Drop-in BenchmarkStore replacement backed by a dict."""

    def __init__(self, benchmarks: List[CoachBenchmark] | None = None):
        self._lock = threading.Lock()
        self._rows: Dict[str, CoachBenchmark] = {}
        for benchmark in benchmarks or []:
            self.add_benchmark(benchmark)

    def _find(self, coach_id: str | None, benchmark_type: BenchmarkType, category: str):
        for row in self._rows.values():
            if (
                row.coach_id == coach_id
                and row.benchmark_type == benchmark_type
                and row.category == category
            ):
                return row
        return None

    def get_benchmark(
        self, coach_id: str, benchmark_type: BenchmarkType, category: str
    ) -> Optional[CoachBenchmark]:
        with self._lock:
            row = self._find(coach_id, benchmark_type, category)
            return replace(row) if row else None

    def mark_used(self, coach_id: str, benchmark_type: BenchmarkType, category: str) -> None:
        with self._lock:
            row = self._find(coach_id, benchmark_type, category)
            if row:
                row.times_used += 1
                row.last_used_at = _utcnow()

    def add_benchmark(self, benchmark: CoachBenchmark) -> CoachBenchmark:
        with self._lock:
            existing = self._find(benchmark.coach_id, benchmark.benchmark_type, benchmark.category)
            if existing:
                stored = replace(
                    existing,
                    min_value=benchmark.min_value,
                    max_value=benchmark.max_value,
                    typical_value=benchmark.typical_value,
                    notes=benchmark.notes,
                    industry_filter=benchmark.industry_filter,
                )
            else:
                stored = replace(benchmark, id=benchmark.id or str(uuid.uuid4()))
            self._rows[stored.id] = stored
            return replace(stored)

    def list_benchmarks(self, coach_id: str | None = None) -> List[CoachBenchmark]:
        with self._lock:
            rows = [r for r in self._rows.values() if coach_id is None or r.coach_id == coach_id]
        rows.sort(key=lambda r: (-r.times_used, r.category))
        return [replace(r) for r in rows]

    def delete_benchmark(self, benchmark_id: str) -> bool:
        with self._lock:
            return self._rows.pop(benchmark_id, None) is not None


class InMemoryInteractionLog(InteractionLog):
    """Drop-in InteractionLog replacement backed by a dict."""

    def __init__(self):
        self._lock = threading.Lock()
        self._rows: Dict[str, Interaction] = {}

    def log_interaction(self, request: AdvisorRequest, suggestion: Suggestion) -> Optional[str]:
        row = _interaction_row(request, suggestion)
        row["id"] = str(uuid.uuid4())
        row["created_at"] = _utcnow()
        interaction = _interaction_from_row(row)
        with self._lock:
            self._rows[interaction.id] = interaction
        return interaction.id

    def _update(self, interaction_id: str, **fields: Any) -> bool:
        with self._lock:
            row = self._rows.get(interaction_id)
            if row is None:
                return False
            self._rows[interaction_id] = replace(row, **fields)
            return True

    def record_action(
        self, interaction_id: str, action: InteractionAction, user_value: float | None = None
    ) -> bool:
        return self._update(interaction_id, action_taken=action, user_value=user_value)

    def get_interaction(self, interaction_id: str) -> Optional[Interaction]:
        with self._lock:
            row = self._rows.get(interaction_id)
            return replace(row) if row else None

    def list_interactions(
        self,
        question_type: QuestionType | None = None,
        search: str | None = None,
        limit: int = 100,
    ) -> List[Interaction]:
        with self._lock:
            rows = list(reversed(self._rows.values()))
        if question_type:
            rows = [r for r in rows if r.question_type == question_type]
        if search:
            needle = search.lower()
            rows = [r for r in rows if needle in r.question.lower()]
        rows.sort(key=lambda r: r.created_at, reverse=True)
        return [replace(r) for r in rows[:limit]]

    def mark_reviewed(self, interaction_id: str) -> bool:
        return self._update(interaction_id, coach_reviewed=True)

    def mark_added_to_library(self, interaction_id: str) -> bool:
        return self._update(interaction_id, added_to_library=True)


# -----------------------------------------------------------------------------
# Coach library
# -----------------------------------------------------------------------------


def benchmark_category(text: str) -> str:
    return re.sub(r"\s+", "_", text.lower())


def promote_interaction_to_benchmark(
    interactions: InteractionLog,
    benchmarks: BenchmarkStore,
    interaction_id: str,
    coach_id: str | None,
) -> Optional[CoachBenchmark]:
    """Copy a logged estimate into the coach's benchmark library.

    The category is the normalized role or project type the client asked about,
    so the new benchmark is picked up by the next matching estimate.
    Returns None when the interaction is unknown or carried no typical value.
    """
    interaction = interactions.get_interaction(interaction_id)
    if interaction is None:
        return None
    response = interaction.ai_response
    if not response.get("typicalValue"):
        return None

    if interaction.question_type == QuestionType.salary_estimate:
        benchmark_type = BenchmarkType.salary
        subject = interaction.context_data.get("position")
        category = normalize_role(subject) if subject else benchmark_category(interaction.question)
    else:
        benchmark_type = BenchmarkType.project_cost
        subject = interaction.context_data.get("projectType")
        category = (
            normalize_project_type(subject) if subject else benchmark_category(interaction.question)
        )
    stored = benchmarks.add_benchmark(
        CoachBenchmark(
            coach_id=coach_id,
            benchmark_type=benchmark_type,
            category=category,
            min_value=response.get("minValue"),
            max_value=response.get("maxValue"),
            typical_value=response.get("typicalValue"),
            notes=f'From client question: "{interaction.question}"',
            industry_filter=interaction.business_industry,
        )
    )
    interactions.mark_added_to_library(interaction_id)
    return stored
