from __future__ import annotations

import json
import logging
import os
from typing import Any, Dict, Optional, Tuple

from openai import OpenAI
from pydantic import BaseModel, Field, ValidationError

from coach_advisor.config.settings import Settings
from coach_advisor.core.estimation import (
    COST_ESTIMATE_CAVEATS,
    SALARY_ESTIMATE_CAVEATS,
    EstimationSource,
    HeuristicEstimationSource,
    range_text,
)
from coach_advisor.core.models import (
    AdvisorRequest,
    CompensationBand,
    Confidence,
    QuestionType,
    Suggestion,
    SuggestionSource,
)
from coach_advisor.core.rounding import round_whole

logger = logging.getLogger("coach_advisor.clients.openai")

_TRUTHY = {"1", "true", "yes", "on"}

# (lowest min, highest max) an LLM answer may use before it is discarded
SANITY_BOUNDS: Dict[QuestionType, Tuple[int, int]] = {
    QuestionType.salary_estimate: (20_000, 1_000_000),
    QuestionType.cost_estimate: (500, 5_000_000),
}


def _env_flag(name: str) -> bool:
    value = os.environ.get(name)
    return value is not None and str(value).lower() in _TRUTHY


class LLMRangeEstimate(BaseModel):
    """Structured range returned by the LLM."""

    min_value: float = Field(description="Low end of the range in AUD.")
    max_value: float = Field(description="High end of the range in AUD.")
    typical_value: float = Field(description="Most common value in AUD.")
    reasoning: str = Field(description="One sentence explaining the range.")


class GuardrailViolation(ValueError):
    """Raised when an LLM answer falls outside what we are willing to show."""


def check_guardrails(question_type: QuestionType, estimate: LLMRangeEstimate) -> CompensationBand:
    band = CompensationBand(
        min=round_whole(estimate.min_value),
        max=round_whole(estimate.max_value),
        typical=round_whole(estimate.typical_value),
    )
    if band.min <= 0:
        raise GuardrailViolation(f"non-positive range: {band}")
    if not band.min <= band.typical <= band.max:
        raise GuardrailViolation(f"range out of order: {band}")
    bounds = SANITY_BOUNDS.get(question_type)
    if bounds and (band.min < bounds[0] or band.max > bounds[1]):
        raise GuardrailViolation(f"range {band} outside {bounds}")
    return band


class OpenAIEstimationSource(EstimationSource):
    """Ask the chat model for a range; fall back to the heuristic bands on any problem."""

    SYSTEM_PROMPT = """
    You are a financial advisor helping Australian small business owners build a
    12-month forecast. Estimate a realistic range in Australian dollars for the
    question below. Prefer conservative, widely observed market ranges. Do not
    invent precision: round to the nearest thousand for salaries and the nearest
    hundred for project costs.
    """

    def __init__(
        self,
        settings: Settings,
        client: Any | None = None,
        fallback: EstimationSource | None = None,
    ):
        self.settings = settings
        if client is None:
            if not settings.openai_api_key_str:
                raise ValueError("OPENAI_API_KEY is not set.")
            client = OpenAI(api_key=settings.openai_api_key_str)
        self.client = client
        self.fallback = fallback or HeuristicEstimationSource()

    def _ask(self, request: AdvisorRequest) -> LLMRangeEstimate:
        schema = json.dumps(LLMRangeEstimate.model_json_schema(), indent=2)
        ctx = request.advisor_context
        details = {
            **request.context_data,
            **{k: v for k, v in (("industry", ctx.industry), ("state", ctx.state)) if v},
        }
        messages = [
            {
                "role": "system",
                "content": (
                    f"{self.SYSTEM_PROMPT}\n\n"
                    "You must respond with JSON matching the following schema:\n"
                    f"{schema}"
                ),
            },
            {
                "role": "user",
                "content": f"{request.question}\n\nDetails:\n{json.dumps(details, indent=2)}",
            },
        ]
        response = self.client.chat.completions.create(
            model=self.settings.openai_model,
            response_format={"type": "json_object"},
            messages=messages,
        )
        content = response.choices[0].message.content
        return LLMRangeEstimate.model_validate_json(content)

    def estimate(self, request: AdvisorRequest) -> Suggestion:
        if request.question_type not in SANITY_BOUNDS:
            return self.fallback.estimate(request)
        try:
            estimate = self._ask(request)
            band = check_guardrails(request.question_type, estimate)
        except (GuardrailViolation, ValidationError) as exc:
            logger.warning("Discarding LLM estimate for %r: %s", request.question, exc)
            return self.fallback.estimate(request)
        except Exception as exc:
            logger.warning("LLM estimate failed for %r: %s", request.question, exc, exc_info=True)
            return self.fallback.estimate(request)

        caveats = (
            SALARY_ESTIMATE_CAVEATS
            if request.question_type == QuestionType.salary_estimate
            else COST_ESTIMATE_CAVEATS
        )
        return Suggestion(
            suggestion=range_text(band),
            reasoning=estimate.reasoning,
            confidence=Confidence.low,
            source=SuggestionSource.ai_estimate,
            min_value=band.min,
            max_value=band.max,
            typical_value=band.typical,
            caveats=list(caveats),
        )


def build_estimation_source(settings: Settings) -> EstimationSource:
    """Pick the estimation source for this process from settings and environment."""
    force_stub = _env_flag("USE_OPENAI_STUB")
    if force_stub or not settings.use_ai_estimates or not settings.openai_api_key_str:
        return HeuristicEstimationSource()
    return OpenAIEstimationSource(settings)


def describe_source(source: Optional[EstimationSource]) -> str:
    return type(source).__name__ if source is not None else "none"
