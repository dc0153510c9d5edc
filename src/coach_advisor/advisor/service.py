"""Advisor service behind the forecast wizard's suggestion popovers.

Every estimate goes through the same precedence:

1. the coach's own benchmark for the normalized category (``high`` confidence),
2. the static Australian market tables (``medium``),
3. the configured estimation source (``low``).

Whatever is produced is written to the interaction log before it is returned, so
coaches can later review what their clients were told. Benchmark and log failures
are logged and swallowed; they never fail the estimate.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple

from coach_advisor.core.estimation import (
    EstimationSource,
    HeuristicEstimationSource,
    range_text,
)
from coach_advisor.core.guides import (
    DEFAULT_INDUSTRY,
    MARGIN_GUIDES,
    PROJECT_COST_GUIDES,
    SALARY_GUIDES,
)
from coach_advisor.core.models import (
    AdvisorContext,
    AdvisorRequest,
    BenchmarkType,
    CoachBenchmark,
    CompensationBand,
    Confidence,
    InteractionAction,
    MarginBenchmark,
    QuestionType,
    Suggestion,
    SuggestionSource,
)
from coach_advisor.core.normalize import normalize_industry, normalize_project_type, normalize_role
from coach_advisor.core.rounding import format_amount, round_whole
from coach_advisor.db.stores import BenchmarkStore, InteractionLog

logger = logging.getLogger("coach_advisor.advisor")

SALARY_CONTEXT = "forecast_wizard.step3.team"
PROJECT_CONTEXT = "forecast_wizard.step5.projects"
REVIEW_CONTEXT = "forecast_wizard.step6.review"

# substring of the lower-cased location -> multiplier; first hit wins
LOCATION_ADJUSTMENTS: Tuple[Tuple[str, float], ...] = (
    ("sydney", 1.10),
    ("melbourne", 1.05),
    ("regional", 0.90),
)

SALARY_MARKET_CAVEATS = [
    "Adjust based on experience level",
    "Industry-specific roles may vary",
]
PROJECT_MARKET_CAVEATS = [
    "Costs vary by scope and provider",
    "Get quotes for accurate pricing",
]

GROSS_MARGIN_SLACK = 10
LOW_NET_MARGIN = 5
STRONG_NET_MARGIN = 15
HIGH_TEAM_COST_SHARE = 45


def location_multiplier(location: str | None) -> float:
    text = (location or "").lower()
    for needle, factor in LOCATION_ADJUSTMENTS:
        if needle in text:
            return factor
    return 1.0


def adjust_band(band: CompensationBand, factor: float) -> CompensationBand:
    return CompensationBand(
        min=round_whole(band.min * factor),
        max=round_whole(band.max * factor),
        typical=round_whole(band.typical * factor),
    )


def _percent(part: float, whole: float) -> float:
    return (part / whole) * 100 if whole > 0 else 0.0


def _extras(**values: Any) -> Dict[str, Any]:
    return {k: v for k, v in values.items() if v is not None}


class AIAdvisor:
    def __init__(
        self,
        benchmarks: BenchmarkStore | None = None,
        interactions: InteractionLog | None = None,
        estimation_source: EstimationSource | None = None,
    ):
        self.benchmarks = benchmarks
        self.interactions = interactions
        self.estimation_source = estimation_source or HeuristicEstimationSource()
        self._fallback_source = HeuristicEstimationSource()

    # ------------------------------------------------------------------
    # Estimates
    # ------------------------------------------------------------------

    def get_salary_estimate(
        self,
        position: str,
        context: AdvisorContext,
        experience: str | None = None,
        location: str | None = None,
    ) -> Suggestion:
        """Suggest an annual salary range for a free-text role title."""
        context_data = {"position": position, **_extras(experience=experience, location=location)}
        request = AdvisorRequest(
            question_type=QuestionType.salary_estimate,
            question=f"What salary for {position}?",
            context=SALARY_CONTEXT,
            advisor_context=context,
            context_data=context_data,
        )
        role_key = normalize_role(position)

        benchmark = self._coach_benchmark(context.coach_id, BenchmarkType.salary, role_key)
        if benchmark:
            return self._log(
                request,
                self._benchmark_suggestion(
                    benchmark, "Based on your coach's benchmark for this role."
                ),
            )

        guide = SALARY_GUIDES.get(role_key)
        if guide:
            band = adjust_band(guide, location_multiplier(location))
            return self._log(
                request,
                Suggestion(
                    suggestion=range_text(band),
                    reasoning=f"Based on current Australian market data for {position} roles.",
                    confidence=Confidence.medium,
                    source=SuggestionSource.market_data,
                    min_value=band.min,
                    max_value=band.max,
                    typical_value=band.typical,
                    caveats=list(SALARY_MARKET_CAVEATS),
                ),
            )

        request.question = f"What is a typical salary range for a {position} in Australia?"
        return self._log(request, self._estimate(request))

    def get_project_cost_estimate(
        self,
        project_type: str,
        context: AdvisorContext,
        scope: str | None = None,
        complexity: str | None = None,
    ) -> Suggestion:
        """Suggest a one-off cost range for a free-text project description."""
        context_data = {"projectType": project_type, **_extras(scope=scope, complexity=complexity)}
        request = AdvisorRequest(
            question_type=QuestionType.cost_estimate,
            question=f"What cost for {project_type}?",
            context=PROJECT_CONTEXT,
            advisor_context=context,
            context_data=context_data,
        )
        type_key = normalize_project_type(project_type)

        benchmark = self._coach_benchmark(context.coach_id, BenchmarkType.project_cost, type_key)
        if benchmark:
            return self._log(
                request,
                self._benchmark_suggestion(
                    benchmark, "Based on your coach's benchmark for this type of project."
                ),
            )

        guide = PROJECT_COST_GUIDES.get(type_key)
        if guide:
            return self._log(
                request,
                Suggestion(
                    suggestion=range_text(guide),
                    reasoning=f"Based on typical Australian market rates for {project_type}.",
                    confidence=Confidence.medium,
                    source=SuggestionSource.market_data,
                    min_value=guide.min,
                    max_value=guide.max,
                    typical_value=guide.typical,
                    caveats=list(PROJECT_MARKET_CAVEATS),
                ),
            )

        request.question = f"What is a typical cost range for {project_type} in Australia?"
        return self._log(request, self._estimate(request))

    # ------------------------------------------------------------------
    # Forecast review
    # ------------------------------------------------------------------

    def validate_forecast(
        self,
        revenue: float,
        gross_profit: float,
        net_profit: float,
        team_costs: float,
        opex_costs: float,
        context: AdvisorContext,
    ) -> Suggestion:
        """Compare forecast margins and team cost share against the industry benchmark."""
        gross_margin = _percent(gross_profit, revenue)
        net_margin = _percent(net_profit, revenue)
        team_share = _percent(team_costs, revenue)
        benchmark = industry_benchmark(context.industry)

        issues: List[str] = []
        positives: List[str] = []

        if gross_margin < benchmark.gross_margin - GROSS_MARGIN_SLACK:
            issues.append(
                f"Gross margin ({round_whole(gross_margin)}%) is below typical for your "
                f"industry ({benchmark.gross_margin:g}%)"
            )
        elif gross_margin >= benchmark.gross_margin:
            positives.append(f"Gross margin is healthy at {round_whole(gross_margin)}%")

        if net_margin < LOW_NET_MARGIN:
            issues.append(f"Net margin of {round_whole(net_margin)}% leaves little room for error")
        elif net_margin >= STRONG_NET_MARGIN:
            positives.append(f"Strong net margin of {round_whole(net_margin)}%")

        if team_share > HIGH_TEAM_COST_SHARE:
            issues.append(f"Team costs at {round_whole(team_share)}% of revenue is high")

        if not issues:
            confidence, overall = Confidence.high, "Your forecast looks solid!"
        elif len(issues) <= 2:
            confidence = Confidence.medium
            overall = "Your forecast is reasonable with some areas to watch."
        else:
            confidence = Confidence.low
            overall = "Your forecast has some concerns that should be addressed."

        request = AdvisorRequest(
            question_type=QuestionType.forecast_validation,
            question="Is this forecast realistic?",
            context=REVIEW_CONTEXT,
            advisor_context=context,
            context_data={
                "revenue": revenue,
                "grossProfit": gross_profit,
                "netProfit": net_profit,
                "teamCosts": team_costs,
                "opexCosts": opex_costs,
            },
        )
        return self._log(
            request,
            Suggestion(
                suggestion=overall,
                reasoning=" ".join(positives + issues),
                confidence=confidence,
                source=SuggestionSource.market_data,
                caveats=issues,
            ),
        )

    # ------------------------------------------------------------------
    # Interaction feedback
    # ------------------------------------------------------------------

    def record_action(
        self,
        interaction_id: str,
        action: InteractionAction | str,
        user_value: float | None = None,
    ) -> bool:
        """Record what the user did with a suggestion. Returns False if nothing was recorded."""
        action = InteractionAction(action)
        if self.interactions is None or not interaction_id:
            return False
        try:
            return self.interactions.record_action(interaction_id, action, user_value)
        except Exception as exc:
            logger.error("Failed to record AI interaction action: %s", exc, exc_info=True)
            return False

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _coach_benchmark(
        self, coach_id: str | None, benchmark_type: BenchmarkType, category: str
    ) -> Optional[CoachBenchmark]:
        if not coach_id or self.benchmarks is None:
            return None
        try:
            benchmark = self.benchmarks.get_benchmark(coach_id, benchmark_type, category)
        except Exception as exc:
            logger.warning(
                "Coach benchmark lookup failed for %s/%s/%s: %s",
                coach_id,
                benchmark_type.value,
                category,
                exc,
                exc_info=True,
            )
            return None
        if benchmark is None:
            return None
        try:
            self.benchmarks.mark_used(coach_id, benchmark_type, category)
        except Exception as exc:
            logger.warning("Failed to update benchmark usage for %s: %s", category, exc, exc_info=True)
        return benchmark

    @staticmethod
    def _benchmark_suggestion(benchmark: CoachBenchmark, default_reason: str) -> Suggestion:
        if benchmark.min_value is not None and benchmark.max_value is not None:
            text = f"{format_amount(benchmark.min_value)} - {format_amount(benchmark.max_value)}"
        elif benchmark.typical_value is not None:
            text = format_amount(benchmark.typical_value)
        else:
            text = "See your coach's notes"
        return Suggestion(
            suggestion=text,
            reasoning=benchmark.notes or default_reason,
            confidence=Confidence.high,
            source=SuggestionSource.coach_benchmark,
            min_value=benchmark.min_value,
            max_value=benchmark.max_value,
            typical_value=benchmark.typical_value,
        )

    def _estimate(self, request: AdvisorRequest) -> Suggestion:
        try:
            return self.estimation_source.estimate(request)
        except Exception as exc:
            logger.warning(
                "Estimation source %s failed, using heuristic bands: %s",
                type(self.estimation_source).__name__,
                exc,
                exc_info=True,
            )
            return self._fallback_source.estimate(request)

    def _log(self, request: AdvisorRequest, suggestion: Suggestion) -> Suggestion:
        if self.interactions is None:
            return suggestion
        try:
            interaction_id = self.interactions.log_interaction(request, suggestion)
        except Exception as exc:
            logger.warning("Failed to log advisor interaction: %s", exc, exc_info=True)
            return suggestion
        if interaction_id:
            suggestion.interaction_id = interaction_id
        return suggestion


def industry_benchmark(industry: str | None) -> MarginBenchmark:
    return MARGIN_GUIDES.get(normalize_industry(industry)) or MARGIN_GUIDES[DEFAULT_INDUSTRY]
