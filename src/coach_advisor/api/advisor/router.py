"""Advisor API endpoints: estimates, forecast review, and suggestion feedback."""

from __future__ import annotations

from fastapi import APIRouter

from coach_advisor.api.advisor.schemas import (
    ForecastReviewRequest,
    ProjectCostRequest,
    RecordActionRequest,
    RecordActionResponse,
    SalaryEstimateRequest,
    SuggestionSchema,
)
from coach_advisor.api.deps import AdvisorDep

router = APIRouter()


@router.post("/salary", response_model=SuggestionSchema)
def salary_estimate(request: SalaryEstimateRequest, advisor: AdvisorDep) -> SuggestionSchema:
    """
    Suggest an annual salary range for a role.

    Precedence: the coach's benchmark, then Australian market data (adjusted for
    Sydney / Melbourne / regional locations), then a low-confidence estimate.
    """
    suggestion = advisor.get_salary_estimate(
        request.position,
        request.context.to_context(),
        experience=request.experience,
        location=request.location,
    )
    return SuggestionSchema.from_suggestion(suggestion)


@router.post("/project-cost", response_model=SuggestionSchema)
def project_cost_estimate(request: ProjectCostRequest, advisor: AdvisorDep) -> SuggestionSchema:
    """Suggest a one-off cost range for a project."""
    suggestion = advisor.get_project_cost_estimate(
        request.project_type,
        request.context.to_context(),
        scope=request.scope,
        complexity=request.complexity,
    )
    return SuggestionSchema.from_suggestion(suggestion)


@router.post("/forecast-review", response_model=SuggestionSchema)
def forecast_review(request: ForecastReviewRequest, advisor: AdvisorDep) -> SuggestionSchema:
    """Check forecast margins and team cost share against the industry benchmark."""
    suggestion = advisor.validate_forecast(
        request.revenue,
        request.gross_profit,
        request.net_profit,
        request.team_costs,
        request.opex_costs,
        request.context.to_context(),
    )
    return SuggestionSchema.from_suggestion(suggestion)


@router.post("/interactions/{interaction_id}/action", response_model=RecordActionResponse)
def record_action(
    interaction_id: str,
    request: RecordActionRequest,
    advisor: AdvisorDep,
) -> RecordActionResponse:
    """Record what the user did with a suggestion. Best effort: never fails the caller."""
    recorded = advisor.record_action(interaction_id, request.action, request.user_value)
    return RecordActionResponse(
        interaction_id=interaction_id,
        action=request.action,
        recorded=recorded,
    )
