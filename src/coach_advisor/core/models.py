from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional


class Confidence(str, Enum):
    high = "high"
    medium = "medium"
    low = "low"


class SuggestionSource(str, Enum):
    coach_benchmark = "coach_benchmark"
    market_data = "market_data"
    ai_estimate = "ai_estimate"


class Severity(str, Enum):
    error = "error"
    warning = "warning"
    info = "info"


class QuestionType(str, Enum):
    salary_estimate = "salary_estimate"
    cost_estimate = "cost_estimate"
    margin_advice = "margin_advice"
    forecast_validation = "forecast_validation"
    general = "general"


class InteractionAction(str, Enum):
    used = "used"
    adjusted = "adjusted"
    ignored = "ignored"
    asked_coach = "asked_coach"


class BenchmarkType(str, Enum):
    salary = "salary"
    project_cost = "project_cost"


@dataclass(frozen=True)
class CompensationBand:
    """A min/max/typical range. Used for salaries and one-off project costs alike."""

    min: int
    max: int
    typical: int


@dataclass(frozen=True)
class MarginBenchmark:
    gross_margin: float
    net_margin: float


@dataclass
class AdvisorContext:
    business_id: Optional[str] = None
    user_id: Optional[str] = None
    coach_id: Optional[str] = None
    industry: Optional[str] = None
    revenue_range: Optional[str] = None
    state: Optional[str] = None


@dataclass
class AdvisorRequest:
    question_type: QuestionType
    question: str
    context: str
    advisor_context: AdvisorContext
    context_data: Dict[str, Any] = field(default_factory=dict)


@dataclass
class Suggestion:
    suggestion: str
    reasoning: str
    confidence: Confidence
    source: SuggestionSource
    min_value: Optional[float] = None
    max_value: Optional[float] = None
    typical_value: Optional[float] = None
    caveats: List[str] = field(default_factory=list)
    interaction_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Render the payload stored as ``ai_response`` and returned over HTTP."""
        payload: Dict[str, Any] = {
            "suggestion": self.suggestion,
            "reasoning": self.reasoning,
            "confidence": self.confidence.value,
            "source": self.source.value,
            "caveats": list(self.caveats),
        }
        for key, value in (
            ("minValue", self.min_value),
            ("maxValue", self.max_value),
            ("typicalValue", self.typical_value),
            ("interactionId", self.interaction_id),
        ):
            if value is not None:
                payload[key] = value
        return payload


@dataclass
class ValidationIssue:
    severity: Severity
    field: str
    message: str
    value: Any = None
    suggestion: Optional[str] = None


@dataclass
class ValidationResult:
    issues: List[ValidationIssue]
    completeness: int

    @property
    def is_valid(self) -> bool:
        return not any(issue.severity == Severity.error for issue in self.issues)


@dataclass
class CoachBenchmark:
    coach_id: Optional[str]
    benchmark_type: BenchmarkType
    category: str
    min_value: Optional[float] = None
    max_value: Optional[float] = None
    typical_value: Optional[float] = None
    notes: Optional[str] = None
    industry_filter: Optional[str] = None
    times_used: int = 0
    last_used_at: Optional[datetime] = None
    id: Optional[str] = None


@dataclass
class Interaction:
    id: str
    question: str
    question_type: QuestionType
    context: str
    ai_response: Dict[str, Any]
    confidence: Confidence
    context_data: Dict[str, Any] = field(default_factory=dict)
    business_id: Optional[str] = None
    user_id: Optional[str] = None
    coach_id: Optional[str] = None
    business_industry: Optional[str] = None
    business_revenue_range: Optional[str] = None
    business_state: Optional[str] = None
    action_taken: Optional[InteractionAction] = None
    user_value: Optional[float] = None
    coach_reviewed: bool = False
    added_to_library: bool = False
    created_at: Optional[datetime] = None
