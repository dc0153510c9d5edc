"""Estimation sources used when neither a coach benchmark nor market data matches.

The advisor always goes benchmark -> reference table -> estimation source. The
source is pluggable: the heuristic keyword bands below are the default, and
``coach_advisor.clients.openai_client.OpenAIEstimationSource`` can be swapped in
when an LLM is configured.
"""

from __future__ import annotations

from typing import Protocol, Tuple

from coach_advisor.core.models import (
    AdvisorRequest,
    CompensationBand,
    Confidence,
    QuestionType,
    Suggestion,
    SuggestionSource,
)
from coach_advisor.core.rounding import format_amount

DEFAULT_SALARY_BAND = CompensationBand(min=55000, max=85000, typical=68000)

# First keyword group present in the title wins.
SALARY_KEYWORD_BANDS: Tuple[Tuple[Tuple[str, ...], CompensationBand], ...] = (
    (("senior", "lead", "head"), CompensationBand(min=95000, max=150000, typical=115000)),
    (("manager", "director"), CompensationBand(min=85000, max=140000, typical=105000)),
    (("coordinator", "officer"), CompensationBand(min=55000, max=80000, typical=65000)),
    (("assistant", "support", "junior"), CompensationBand(min=50000, max=70000, typical=58000)),
    (("executive", "chief", "vp"), CompensationBand(min=130000, max=250000, typical=175000)),
)

PROJECT_COST_FALLBACK = CompensationBand(min=5000, max=50000, typical=20000)

SALARY_ESTIMATE_CAVEATS = [
    "This is a general estimate - actual salary varies by industry and experience",
    "Your coach can provide more specific guidance for your industry",
]
COST_ESTIMATE_CAVEATS = [
    "Get specific quotes for accurate pricing",
    "Your coach can help scope this more precisely",
]
GENERAL_CAVEATS = [
    "Consider getting specific quotes",
    "Your coach can provide industry-specific guidance",
]


class EstimationSource(Protocol):
    def estimate(self, request: AdvisorRequest) -> Suggestion: ...


def salary_band_for_title(position: str) -> CompensationBand:
    title = (position or "").lower()
    for keywords, band in SALARY_KEYWORD_BANDS:
        if any(keyword in title for keyword in keywords):
            return band
    return DEFAULT_SALARY_BAND


def range_text(band: CompensationBand) -> str:
    return f"{format_amount(band.min)} - {format_amount(band.max)}"


class HeuristicEstimationSource(EstimationSource):
    """Keyword bands and fixed ranges; deterministic and offline."""

    def estimate(self, request: AdvisorRequest) -> Suggestion:
        if request.question_type == QuestionType.salary_estimate:
            position = request.context_data.get("position") or "this role"
            band = salary_band_for_title(position)
            return Suggestion(
                suggestion=range_text(band),
                reasoning=f"Estimated range for {position} based on similar roles in the Australian market.",
                confidence=Confidence.low,
                source=SuggestionSource.ai_estimate,
                min_value=band.min,
                max_value=band.max,
                typical_value=band.typical,
                caveats=list(SALARY_ESTIMATE_CAVEATS),
            )

        if request.question_type == QuestionType.cost_estimate:
            band = PROJECT_COST_FALLBACK
            return Suggestion(
                suggestion=range_text(band),
                reasoning="General project cost range - varies significantly by scope and complexity.",
                confidence=Confidence.low,
                source=SuggestionSource.ai_estimate,
                min_value=band.min,
                max_value=band.max,
                typical_value=band.typical,
                caveats=list(COST_ESTIMATE_CAVEATS),
            )

        return Suggestion(
            suggestion="I need more context to provide a confident estimate",
            reasoning="This is outside my typical knowledge. I'd recommend discussing with your coach.",
            confidence=Confidence.low,
            source=SuggestionSource.ai_estimate,
            caveats=list(GENERAL_CAVEATS),
        )
