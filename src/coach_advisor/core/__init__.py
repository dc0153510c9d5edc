from .models import (
    AdvisorContext,
    Confidence,
    Severity,
    Suggestion,
    SuggestionSource,
    ValidationIssue,
    ValidationResult,
)
from .normalize import normalize_industry, normalize_project_type, normalize_role

__all__ = [
    "AdvisorContext",
    "Confidence",
    "Severity",
    "Suggestion",
    "SuggestionSource",
    "ValidationIssue",
    "ValidationResult",
    "normalize_industry",
    "normalize_project_type",
    "normalize_role",
]
