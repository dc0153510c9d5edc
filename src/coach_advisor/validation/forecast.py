"""Data-quality checks for forecast wizard input.

All checks are pure and never raise on bad business input: a problem is reported
as a :class:`ValidationIssue`, a clean value as ``None`` (or an empty list).
"""

from __future__ import annotations

import math
from typing import Iterable, List, Mapping, Optional, Sequence

from coach_advisor.core.models import Severity, ValidationIssue, ValidationResult
from coach_advisor.core.rounding import format_currency as _format_currency
from coach_advisor.core.rounding import round_half_away_from_zero, round_whole

DEFAULT_TOLERANCE = 0.05
LARGE_VALUE_LIMIT = 1_000_000_000
LOW_REVENUE_GOAL = 10_000

EXPENSE_CATEGORIES = ("Cost of Sales", "Operating Expenses")

COMPLETENESS_WEIGHTS = {
    "revenue_goal": 20,
    "distribution_method": 10,
    "cogs": 15,
    "forecast_months": 30,
    "revenue_lines": 15,
    "expense_lines": 10,
}


def _plain_number(value: float) -> str:
    text = f"{value:,.3f}".rstrip("0").rstrip(".")
    return text or "0"


def _is_missing(value) -> bool:
    return value is None or (isinstance(value, float) and math.isnan(value))


class ForecastValidationService:
    @staticmethod
    def validate_cogs_percentage(percentage: float) -> Optional[ValidationIssue]:
        if percentage < 0 or percentage > 100:
            return ValidationIssue(
                severity=Severity.error,
                field="cogs_percentage",
                message="COGS percentage must be between 0% and 100%",
                value=percentage,
                suggestion="Enter a valid percentage between 0 and 100",
            )
        if percentage < 5:
            return ValidationIssue(
                severity=Severity.warning,
                field="cogs_percentage",
                message="COGS percentage seems unusually low (<5%)",
                value=percentage,
                suggestion="Most businesses have COGS between 20-60%. Please verify this is correct.",
            )
        if percentage > 95:
            return ValidationIssue(
                severity=Severity.warning,
                field="cogs_percentage",
                message="COGS percentage seems unusually high (>95%)",
                value=percentage,
                suggestion="This leaves very little gross profit. Please verify this is correct.",
            )
        return None

    @staticmethod
    def validate_revenue_goal(revenue: float) -> Optional[ValidationIssue]:
        if revenue < 0:
            return ValidationIssue(
                severity=Severity.error,
                field="revenue_goal",
                message="Revenue goal cannot be negative",
                value=revenue,
                suggestion="Enter a positive revenue target",
            )
        if revenue == 0:
            return ValidationIssue(
                severity=Severity.error,
                field="revenue_goal",
                message="Revenue goal is required",
                value=revenue,
                suggestion="Enter your annual revenue target to continue",
            )
        if revenue < LOW_REVENUE_GOAL:
            return ValidationIssue(
                severity=Severity.warning,
                field="revenue_goal",
                message="Revenue goal seems unusually low",
                value=revenue,
                suggestion="Most businesses target at least $10,000 in annual revenue",
            )
        return None

    @staticmethod
    def validate_forecast_vs_goals(
        forecast_total: float,
        goal_total: float,
        tolerance: float = DEFAULT_TOLERANCE,
    ) -> Optional[ValidationIssue]:
        if goal_total == 0:
            return None

        variance = abs(forecast_total - goal_total) / goal_total
        if variance <= tolerance:
            return None

        pct_diff = f"{round_half_away_from_zero(variance * 100, 1):.1f}"
        direction = "higher" if forecast_total > goal_total else "lower"
        return ValidationIssue(
            severity=Severity.warning,
            field="forecast_total",
            message=f"Forecast total is {pct_diff}% {direction} than goal",
            value=forecast_total,
            suggestion=(
                f"Goal: ${_plain_number(goal_total)}, Forecast: ${_plain_number(forecast_total)}. "
                "Consider adjusting your forecast or goals."
            ),
        )

    @staticmethod
    def validate_pl_line_value(value: float, category: str, account_name: str) -> Optional[ValidationIssue]:
        if category == "Revenue" and value < 0:
            return ValidationIssue(
                severity=Severity.warning,
                field=account_name,
                message="Revenue values are typically positive",
                value=value,
                suggestion='Use "Other Expenses" category for refunds or discounts',
            )
        if category in EXPENSE_CATEGORIES and value < 0:
            return ValidationIssue(
                severity=Severity.warning,
                field=account_name,
                message="Expense values are typically positive (they reduce profit)",
                value=value,
                suggestion="Enter the amount as a positive number",
            )
        if abs(value) > LARGE_VALUE_LIMIT:
            return ValidationIssue(
                severity=Severity.warning,
                field=account_name,
                message="Value seems unusually large",
                value=value,
                suggestion="Please verify this amount is correct (over $1 billion)",
            )
        return None

    @staticmethod
    def calculate_completeness(
        has_revenue_goal: bool,
        has_distribution_method: bool,
        has_cogs: bool,
        forecast_months_count: int,
        expected_months_count: int,
        has_revenue_line: bool,
        has_expense_line: bool,
    ) -> int:
        """Weighted 0-100 score of how much of the forecast has been filled in."""
        w = COMPLETENESS_WEIGHTS
        score: float = 0
        if has_revenue_goal:
            score += w["revenue_goal"]
        if has_distribution_method:
            score += w["distribution_method"]
        if has_cogs:
            score += w["cogs"]
        if has_revenue_line:
            score += w["revenue_lines"]
        if has_expense_line:
            score += w["expense_lines"]
        if expected_months_count > 0:
            ratio = min(forecast_months_count / expected_months_count, 1)
            score += w["forecast_months"] * ratio
        return round_whole(score)

    @staticmethod
    def validate_months_complete(
        forecast_months: Mapping[str, Optional[float]],
        expected_month_keys: Sequence[str],
    ) -> List[ValidationIssue]:
        missing = [key for key in expected_month_keys if _is_missing(forecast_months.get(key))]
        if not missing:
            return []
        more = "..." if len(missing) > 3 else ""
        return [
            ValidationIssue(
                severity=Severity.warning,
                field="forecast_months",
                message=f"{len(missing)} month(s) missing forecast data",
                value=missing,
                suggestion=f"Missing: {', '.join(missing[:3])}{more}",
            )
        ]

    @staticmethod
    def validate_formulas(
        formulas: Mapping[str, str],
        cell_references: Mapping[str, Iterable[str]],
    ) -> List[ValidationIssue]:
        """Report every formula cell whose reference chain runs into a cycle.

        Each formula cell gets its own depth-first walk; a cell that only feeds
        into a cycle elsewhere is reported too, since it can never be evaluated.
        """
        issues: List[ValidationIssue] = []
        for cell_id, formula in formulas.items():
            if _reaches_cycle(cell_id, cell_references):
                issues.append(
                    ValidationIssue(
                        severity=Severity.error,
                        field=cell_id,
                        message="Circular reference detected in formula",
                        value=formula,
                        suggestion="Remove the circular reference to prevent calculation errors",
                    )
                )
        return issues

    @staticmethod
    def round_to_precision(value: float, decimals: int = 2) -> float:
        # ordinary rounding, half away from zero (not banker's rounding)
        return round_half_away_from_zero(value, decimals)

    @staticmethod
    def format_currency(value: float, currency: str = "AUD") -> str:
        return _format_currency(value, currency)

    @classmethod
    def validate_forecast_inputs(
        cls,
        revenue_goal: float,
        *,
        cogs_percentage: float | None = None,
        forecast_total: float | None = None,
        forecast_months: Mapping[str, Optional[float]] | None = None,
        expected_month_keys: Sequence[str] = (),
        has_distribution_method: bool = False,
        revenue_line_count: int = 0,
        expense_line_count: int = 0,
        tolerance: float = DEFAULT_TOLERANCE,
    ) -> ValidationResult:
        """Run the wizard-level checks together and score completeness."""
        issues: List[ValidationIssue] = []
        months = forecast_months or {}

        for issue in (
            cls.validate_revenue_goal(revenue_goal),
            cls.validate_cogs_percentage(cogs_percentage) if cogs_percentage is not None else None,
            cls.validate_forecast_vs_goals(forecast_total, revenue_goal, tolerance)
            if forecast_total is not None
            else None,
        ):
            if issue is not None:
                issues.append(issue)
        issues.extend(cls.validate_months_complete(months, expected_month_keys))

        filled = sum(1 for key in expected_month_keys if not _is_missing(months.get(key)))
        completeness = cls.calculate_completeness(
            revenue_goal > 0,
            has_distribution_method,
            cogs_percentage is not None,
            filled,
            len(expected_month_keys),
            revenue_line_count > 0,
            expense_line_count > 0,
        )
        return ValidationResult(issues=issues, completeness=completeness)


def _reaches_cycle(start: str, cell_references: Mapping[str, Iterable[str]]) -> bool:
    # grey = on the current path, black = fully explored
    grey = {start}
    black = set()
    stack = [(start, iter(cell_references.get(start, ())))]
    while stack:
        node, children = stack[-1]
        for child in children:
            if child in grey:
                return True
            if child not in black:
                grey.add(child)
                stack.append((child, iter(cell_references.get(child, ()))))
                break
        else:
            stack.pop()
            grey.discard(node)
            black.add(node)
    return False
