"""Pydantic schemas for the coach library: benchmarks and logged interactions."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import Field, model_validator

from coach_advisor.api.advisor.schemas import CamelModel
from coach_advisor.core.models import (
    BenchmarkType,
    CoachBenchmark,
    Confidence,
    Interaction,
    InteractionAction,
    QuestionType,
)
from coach_advisor.db.stores import benchmark_category


class BenchmarkCreateRequest(CamelModel):
    coach_id: Optional[str] = None
    benchmark_type: BenchmarkType
    category: str = Field(..., min_length=1, max_length=200)
    min_value: Optional[float] = Field(default=None, ge=0)
    max_value: Optional[float] = Field(default=None, ge=0)
    typical_value: Optional[float] = Field(default=None, ge=0)
    notes: Optional[str] = Field(default=None, max_length=2000)
    industry_filter: Optional[str] = None

    @model_validator(mode="after")
    def check_range(self) -> "BenchmarkCreateRequest":
        if (
            self.min_value is not None
            and self.max_value is not None
            and self.min_value > self.max_value
        ):
            raise ValueError("minValue must not exceed maxValue")
        return self

    def to_benchmark(self) -> CoachBenchmark:
        return CoachBenchmark(
            coach_id=self.coach_id,
            benchmark_type=self.benchmark_type,
            category=benchmark_category(self.category),
            min_value=self.min_value,
            max_value=self.max_value,
            typical_value=self.typical_value,
            notes=self.notes,
            industry_filter=self.industry_filter,
        )


class BenchmarkSchema(CamelModel):
    id: Optional[str] = None
    coach_id: Optional[str] = None
    benchmark_type: BenchmarkType
    category: str
    min_value: Optional[float] = None
    max_value: Optional[float] = None
    typical_value: Optional[float] = None
    notes: Optional[str] = None
    industry_filter: Optional[str] = None
    times_used: int = 0
    last_used_at: Optional[datetime] = None

    @classmethod
    def from_benchmark(cls, benchmark: CoachBenchmark) -> "BenchmarkSchema":
        return cls(
            id=benchmark.id,
            coach_id=benchmark.coach_id,
            benchmark_type=benchmark.benchmark_type,
            category=benchmark.category,
            min_value=benchmark.min_value,
            max_value=benchmark.max_value,
            typical_value=benchmark.typical_value,
            notes=benchmark.notes,
            industry_filter=benchmark.industry_filter,
            times_used=benchmark.times_used,
            last_used_at=benchmark.last_used_at,
        )


class BenchmarkListResponse(CamelModel):
    benchmarks: List[BenchmarkSchema]
    total: int


class InteractionSchema(CamelModel):
    id: str
    question: str
    question_type: QuestionType
    context: str
    ai_response: Dict[str, Any]
    confidence: Confidence
    context_data: Dict[str, Any] = Field(default_factory=dict)
    business_id: Optional[str] = None
    user_id: Optional[str] = None
    coach_id: Optional[str] = None
    business_industry: Optional[str] = None
    action_taken: Optional[InteractionAction] = None
    user_value: Optional[float] = None
    coach_reviewed: bool = False
    added_to_library: bool = False
    created_at: Optional[datetime] = None

    @classmethod
    def from_interaction(cls, interaction: Interaction) -> "InteractionSchema":
        return cls(
            id=interaction.id,
            question=interaction.question,
            question_type=interaction.question_type,
            context=interaction.context,
            ai_response=interaction.ai_response,
            confidence=interaction.confidence,
            context_data=interaction.context_data,
            business_id=interaction.business_id,
            user_id=interaction.user_id,
            coach_id=interaction.coach_id,
            business_industry=interaction.business_industry,
            action_taken=interaction.action_taken,
            user_value=interaction.user_value,
            coach_reviewed=interaction.coach_reviewed,
            added_to_library=interaction.added_to_library,
            created_at=interaction.created_at,
        )


class InteractionListResponse(CamelModel):
    interactions: List[InteractionSchema]
    total: int


class PromoteRequest(CamelModel):
    coach_id: Optional[str] = None
