"""Pydantic schemas for forecast validation endpoints."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import Field

from coach_advisor.api.advisor.schemas import CamelModel
from coach_advisor.core.models import Severity, ValidationIssue, ValidationResult


class ValidationIssueSchema(CamelModel):
    severity: Severity
    field: str
    message: str
    value: Any = None
    suggestion: Optional[str] = None

    @classmethod
    def from_issue(cls, issue: ValidationIssue) -> "ValidationIssueSchema":
        return cls(
            severity=issue.severity,
            field=issue.field,
            message=issue.message,
            value=issue.value,
            suggestion=issue.suggestion,
        )


# -----------------------------------------------------------------------------
# Request Models
# -----------------------------------------------------------------------------


class RevenueGoalRequest(CamelModel):
    value: float


class CogsRequest(CamelModel):
    percentage: float


class ForecastVsGoalsRequest(CamelModel):
    forecast_total: float
    goal_total: float
    tolerance: Optional[float] = Field(default=None, ge=0.0)


class PLLineRequest(CamelModel):
    value: float
    category: str
    account_name: str


class CompletenessRequest(CamelModel):
    has_revenue_goal: bool = False
    has_distribution_method: bool = False
    has_cogs: bool = False
    forecast_months_count: int = Field(default=0, ge=0)
    expected_months_count: int = Field(default=12, ge=0)
    has_revenue_line: bool = False
    has_expense_line: bool = False


class FormulasRequest(CamelModel):
    formulas: Dict[str, str] = Field(..., description="cell id -> formula text")
    references: Dict[str, List[str]] = Field(
        default_factory=dict, description="cell id -> cells its formula reads"
    )


class MonthsRequest(CamelModel):
    months: Dict[str, Optional[float]] = Field(default_factory=dict)
    expected: List[str] = Field(default_factory=list)


class ForecastInputsRequest(CamelModel):
    revenue_goal: float
    cogs_percentage: Optional[float] = None
    forecast_total: Optional[float] = None
    months: Dict[str, Optional[float]] = Field(default_factory=dict)
    expected_months: List[str] = Field(default_factory=list)
    has_distribution_method: bool = False
    revenue_line_count: int = Field(default=0, ge=0)
    expense_line_count: int = Field(default=0, ge=0)
    tolerance: Optional[float] = Field(default=None, ge=0.0)


# -----------------------------------------------------------------------------
# Response Models
# -----------------------------------------------------------------------------


class IssueResponse(CamelModel):
    issue: Optional[ValidationIssueSchema] = None


class IssuesResponse(CamelModel):
    issues: List[ValidationIssueSchema] = Field(default_factory=list)


class CompletenessResponse(CamelModel):
    completeness: int


class ValidationResultResponse(CamelModel):
    is_valid: bool
    issues: List[ValidationIssueSchema]
    completeness: int

    @classmethod
    def from_result(cls, result: ValidationResult) -> "ValidationResultResponse":
        return cls(
            is_valid=result.is_valid,
            issues=[ValidationIssueSchema.from_issue(i) for i in result.issues],
            completeness=result.completeness,
        )
