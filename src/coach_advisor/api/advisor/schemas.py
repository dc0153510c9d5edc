"""Pydantic schemas for advisor API requests and responses.

Field names are exposed in camelCase to match the stored ``ai_response`` payload;
snake_case is accepted on input as well.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from coach_advisor.core.models import (
    AdvisorContext,
    Confidence,
    InteractionAction,
    Suggestion,
    SuggestionSource,
)


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AdvisorContextSchema(CamelModel):
    business_id: Optional[str] = None
    user_id: Optional[str] = None
    coach_id: Optional[str] = None
    industry: Optional[str] = None
    revenue_range: Optional[str] = None
    state: Optional[str] = None

    def to_context(self) -> AdvisorContext:
        return AdvisorContext(**self.model_dump())


# -----------------------------------------------------------------------------
# Request Models
# -----------------------------------------------------------------------------


class SalaryEstimateRequest(CamelModel):
    position: str = Field(..., min_length=1, max_length=200, description="Free-text role title")
    context: AdvisorContextSchema = Field(default_factory=AdvisorContextSchema)
    experience: Optional[str] = Field(default=None, max_length=200)
    location: Optional[str] = Field(default=None, max_length=200)


class ProjectCostRequest(CamelModel):
    project_type: str = Field(..., min_length=1, max_length=200)
    context: AdvisorContextSchema = Field(default_factory=AdvisorContextSchema)
    scope: Optional[str] = Field(default=None, max_length=1000)
    complexity: Optional[str] = Field(default=None, max_length=200)


class ForecastReviewRequest(CamelModel):
    revenue: float
    gross_profit: float
    net_profit: float
    team_costs: float = 0.0
    opex_costs: float = 0.0
    context: AdvisorContextSchema = Field(default_factory=AdvisorContextSchema)


class RecordActionRequest(CamelModel):
    action: InteractionAction
    user_value: Optional[float] = None


# -----------------------------------------------------------------------------
# Response Models
# -----------------------------------------------------------------------------


class SuggestionSchema(CamelModel):
    suggestion: str
    reasoning: str
    confidence: Confidence
    source: SuggestionSource
    min_value: Optional[float] = None
    max_value: Optional[float] = None
    typical_value: Optional[float] = None
    caveats: List[str] = Field(default_factory=list)
    interaction_id: Optional[str] = None

    @classmethod
    def from_suggestion(cls, suggestion: Suggestion) -> "SuggestionSchema":
        return cls(
            suggestion=suggestion.suggestion,
            reasoning=suggestion.reasoning,
            confidence=suggestion.confidence,
            source=suggestion.source,
            min_value=suggestion.min_value,
            max_value=suggestion.max_value,
            typical_value=suggestion.typical_value,
            caveats=list(suggestion.caveats),
            interaction_id=suggestion.interaction_id,
        )


class RecordActionResponse(CamelModel):
    interaction_id: str
    action: InteractionAction
    recorded: bool
