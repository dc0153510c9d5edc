"""Forecast validation endpoints. Pure checks; no database access."""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter

from coach_advisor.api.deps import SettingsDep
from coach_advisor.api.validation.schemas import (
    CogsRequest,
    CompletenessRequest,
    CompletenessResponse,
    ForecastInputsRequest,
    ForecastVsGoalsRequest,
    FormulasRequest,
    IssueResponse,
    IssuesResponse,
    MonthsRequest,
    PLLineRequest,
    RevenueGoalRequest,
    ValidationIssueSchema,
    ValidationResultResponse,
)
from coach_advisor.core.models import ValidationIssue
from coach_advisor.validation.forecast import ForecastValidationService as FVS

router = APIRouter()


def _one(issue: Optional[ValidationIssue]) -> IssueResponse:
    return IssueResponse(issue=ValidationIssueSchema.from_issue(issue) if issue else None)


def _many(issues: List[ValidationIssue]) -> IssuesResponse:
    return IssuesResponse(issues=[ValidationIssueSchema.from_issue(i) for i in issues])


@router.post("/revenue-goal", response_model=IssueResponse)
def revenue_goal(request: RevenueGoalRequest) -> IssueResponse:
    return _one(FVS.validate_revenue_goal(request.value))


@router.post("/cogs", response_model=IssueResponse)
def cogs(request: CogsRequest) -> IssueResponse:
    return _one(FVS.validate_cogs_percentage(request.percentage))


@router.post("/forecast-vs-goals", response_model=IssueResponse)
def forecast_vs_goals(request: ForecastVsGoalsRequest, settings: SettingsDep) -> IssueResponse:
    tolerance = settings.forecast_tolerance if request.tolerance is None else request.tolerance
    return _one(FVS.validate_forecast_vs_goals(request.forecast_total, request.goal_total, tolerance))


@router.post("/pl-line", response_model=IssueResponse)
def pl_line(request: PLLineRequest) -> IssueResponse:
    return _one(FVS.validate_pl_line_value(request.value, request.category, request.account_name))


@router.post("/completeness", response_model=CompletenessResponse)
def completeness(request: CompletenessRequest) -> CompletenessResponse:
    score = FVS.calculate_completeness(
        request.has_revenue_goal,
        request.has_distribution_method,
        request.has_cogs,
        request.forecast_months_count,
        request.expected_months_count,
        request.has_revenue_line,
        request.has_expense_line,
    )
    return CompletenessResponse(completeness=score)


@router.post("/formulas", response_model=IssuesResponse)
def formulas(request: FormulasRequest) -> IssuesResponse:
    """Detect circular references between formula cells."""
    return _many(FVS.validate_formulas(request.formulas, request.references))


@router.post("/months", response_model=IssuesResponse)
def months(request: MonthsRequest) -> IssuesResponse:
    return _many(FVS.validate_months_complete(request.months, request.expected))


@router.post("/forecast", response_model=ValidationResultResponse)
def forecast(request: ForecastInputsRequest, settings: SettingsDep) -> ValidationResultResponse:
    """Run the wizard-level checks together and score completeness."""
    result = FVS.validate_forecast_inputs(
        request.revenue_goal,
        cogs_percentage=request.cogs_percentage,
        forecast_total=request.forecast_total,
        forecast_months=request.months,
        expected_month_keys=request.expected_months,
        has_distribution_method=request.has_distribution_method,
        revenue_line_count=request.revenue_line_count,
        expense_line_count=request.expense_line_count,
        tolerance=settings.forecast_tolerance if request.tolerance is None else request.tolerance,
    )
    return ValidationResultResponse.from_result(result)
