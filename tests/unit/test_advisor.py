from __future__ import annotations

import logging

import pytest

from coach_advisor.advisor.service import (
    PROJECT_MARKET_CAVEATS,
    SALARY_MARKET_CAVEATS,
    AIAdvisor,
    industry_benchmark,
    location_multiplier,
)
from coach_advisor.core.guides import MARGIN_GUIDES
from coach_advisor.core.models import (
    AdvisorContext,
    BenchmarkType,
    CoachBenchmark,
    Confidence,
    InteractionAction,
    QuestionType,
    SuggestionSource,
)
from tests.helpers import (
    BrokenBenchmarkStore,
    BrokenInteractionLog,
    BrokenUsageBenchmarkStore,
    FailingEstimationSource,
)


def _bookkeeper_benchmark(**overrides) -> CoachBenchmark:
    values = dict(
        coach_id="coach-1",
        benchmark_type=BenchmarkType.salary,
        category="bookkeeper",
        min_value=60000,
        max_value=90000,
        typical_value=75000,
        notes="Bookkeepers in my client base earn more than the market.",
    )
    values.update(overrides)
    return CoachBenchmark(**values)


# ---------------------------------------------------------------------------
# Salary
# ---------------------------------------------------------------------------


def test_salary_from_market_data_is_logged(advisor, interactions, coach_context) -> None:
    suggestion = advisor.get_salary_estimate("Bookkeeper", coach_context)

    assert suggestion.confidence == Confidence.medium
    assert suggestion.source == SuggestionSource.market_data
    assert (suggestion.min_value, suggestion.max_value, suggestion.typical_value) == (
        58000,
        78000,
        68000,
    )
    assert suggestion.suggestion == "$58,000 - $78,000"
    assert suggestion.caveats == SALARY_MARKET_CAVEATS

    logged = interactions.get_interaction(suggestion.interaction_id)
    assert logged is not None
    assert logged.question_type == QuestionType.salary_estimate
    assert logged.context == "forecast_wizard.step3.team"
    assert logged.context_data == {"position": "Bookkeeper"}
    assert logged.coach_id == "coach-1"
    assert logged.business_industry == "trades"
    assert logged.ai_response["typicalValue"] == 68000
    assert "interactionId" not in logged.ai_response


@pytest.mark.parametrize(
    ("location", "expected"),
    [
        ("Sydney", (63800, 85800, 74800)),
        ("Melbourne CBD", (60900, 81900, 71400)),
        ("Regional Victoria", (52200, 70200, 61200)),
        ("Perth", (58000, 78000, 68000)),
    ],
)
def test_salary_location_adjustment(advisor, location: str, expected) -> None:
    suggestion = advisor.get_salary_estimate("Bookkeeper", AdvisorContext(), location=location)
    assert (suggestion.min_value, suggestion.max_value, suggestion.typical_value) == expected


def test_location_multiplier_first_match_wins() -> None:
    assert location_multiplier("Sydney") == 1.10
    assert location_multiplier("regional NSW") == 0.90
    assert location_multiplier(None) == 1.0


def test_coach_benchmark_takes_precedence(benchmarks, interactions, coach_context) -> None:
    benchmarks.add_benchmark(_bookkeeper_benchmark())
    advisor = AIAdvisor(benchmarks, interactions)

    suggestion = advisor.get_salary_estimate("Senior Bookkeeper", coach_context, location="Sydney")

    assert suggestion.confidence == Confidence.high
    assert suggestion.source == SuggestionSource.coach_benchmark
    assert (suggestion.min_value, suggestion.max_value, suggestion.typical_value) == (
        60000,
        90000,
        75000,
    )
    assert suggestion.suggestion == "$60,000 - $90,000"
    assert suggestion.reasoning == "Bookkeepers in my client base earn more than the market."

    stored = benchmarks.get_benchmark("coach-1", BenchmarkType.salary, "bookkeeper")
    assert stored.times_used == 1
    assert stored.last_used_at is not None


def test_other_coaches_benchmarks_are_ignored(benchmarks, coach_context) -> None:
    benchmarks.add_benchmark(_bookkeeper_benchmark(coach_id="coach-2"))
    suggestion = AIAdvisor(benchmarks).get_salary_estimate("Bookkeeper", coach_context)
    assert suggestion.source == SuggestionSource.market_data


def test_no_coach_id_skips_benchmarks(benchmarks) -> None:
    benchmarks.add_benchmark(_bookkeeper_benchmark())
    suggestion = AIAdvisor(benchmarks).get_salary_estimate("Bookkeeper", AdvisorContext())
    assert suggestion.source == SuggestionSource.market_data


@pytest.mark.parametrize(
    ("overrides", "text"),
    [
        ({"min_value": None}, "$75,000"),
        ({"min_value": None, "max_value": None, "typical_value": None}, "See your coach's notes"),
    ],
)
def test_partial_benchmark_text(benchmarks, coach_context, overrides, text: str) -> None:
    benchmarks.add_benchmark(_bookkeeper_benchmark(**overrides))
    suggestion = AIAdvisor(benchmarks).get_salary_estimate("Bookkeeper", coach_context)
    assert suggestion.source == SuggestionSource.coach_benchmark
    assert suggestion.suggestion == text


def test_benchmark_lookup_failure_falls_through(coach_context, caplog) -> None:
    store = BrokenBenchmarkStore([_bookkeeper_benchmark()])
    with caplog.at_level(logging.WARNING, logger="coach_advisor.advisor"):
        suggestion = AIAdvisor(store).get_salary_estimate("Bookkeeper", coach_context)
    assert suggestion.source == SuggestionSource.market_data
    assert suggestion.typical_value == 68000
    assert "benchmark lookup failed" in caplog.text


def test_usage_counter_failure_keeps_benchmark(coach_context) -> None:
    store = BrokenUsageBenchmarkStore([_bookkeeper_benchmark()])
    suggestion = AIAdvisor(store).get_salary_estimate("Bookkeeper", coach_context)
    assert suggestion.source == SuggestionSource.coach_benchmark
    assert suggestion.typical_value == 75000


def test_log_failure_does_not_fail_estimate(coach_context) -> None:
    advisor = AIAdvisor(interactions=BrokenInteractionLog())
    suggestion = advisor.get_salary_estimate("Bookkeeper", coach_context)
    assert suggestion.typical_value == 68000
    assert suggestion.interaction_id is None


def test_unknown_role_uses_estimation_source(interactions, recording_source, coach_context) -> None:
    advisor = AIAdvisor(interactions=interactions, estimation_source=recording_source)

    suggestion = advisor.get_salary_estimate("Wizard", coach_context, experience="5 years")

    assert suggestion.source == SuggestionSource.ai_estimate
    assert suggestion.typical_value == 1500
    [request] = recording_source.requests
    assert request.question == "What is a typical salary range for a Wizard in Australia?"
    assert request.context_data == {"position": "Wizard", "experience": "5 years"}
    assert interactions.get_interaction(suggestion.interaction_id).question == request.question


def test_failing_estimation_source_falls_back_to_keyword_bands(coach_context) -> None:
    advisor = AIAdvisor(estimation_source=FailingEstimationSource())
    suggestion = advisor.get_salary_estimate("Wizard Lead", coach_context)
    assert suggestion.confidence == Confidence.low
    assert suggestion.typical_value == 115000


def test_market_match_never_calls_estimation_source(recording_source) -> None:
    AIAdvisor(estimation_source=recording_source).get_salary_estimate("Plumber", AdvisorContext())
    assert recording_source.requests == []


# ---------------------------------------------------------------------------
# Project cost
# ---------------------------------------------------------------------------


def test_project_cost_from_market_data(advisor, interactions, coach_context) -> None:
    suggestion = advisor.get_project_cost_estimate("New website", coach_context, scope="10 pages")

    assert suggestion.confidence == Confidence.medium
    assert suggestion.source == SuggestionSource.market_data
    assert (suggestion.min_value, suggestion.max_value, suggestion.typical_value) == (
        5000,
        50000,
        15000,
    )
    assert suggestion.caveats == PROJECT_MARKET_CAVEATS
    logged = interactions.get_interaction(suggestion.interaction_id)
    assert logged.question_type == QuestionType.cost_estimate
    assert logged.context_data == {"projectType": "New website", "scope": "10 pages"}


def test_project_cost_coach_benchmark(benchmarks, coach_context) -> None:
    benchmarks.add_benchmark(
        CoachBenchmark(
            coach_id="coach-1",
            benchmark_type=BenchmarkType.project_cost,
            category="crm_implementation",
            min_value=8000,
            max_value=12000,
            typical_value=10000,
        )
    )
    suggestion = AIAdvisor(benchmarks).get_project_cost_estimate("CRM", coach_context)
    assert suggestion.source == SuggestionSource.coach_benchmark
    assert suggestion.reasoning == "Based on your coach's benchmark for this type of project."
    assert suggestion.typical_value == 10000


def test_unknown_project_uses_generic_range(coach_context) -> None:
    suggestion = AIAdvisor().get_project_cost_estimate("Zzz widget", coach_context)
    assert suggestion.confidence == Confidence.low
    assert (suggestion.min_value, suggestion.max_value) == (5000, 50000)


# ---------------------------------------------------------------------------
# Forecast review
# ---------------------------------------------------------------------------


def test_forecast_review_solid(advisor) -> None:
    suggestion = advisor.validate_forecast(
        1_000_000, 600_000, 200_000, 300_000, 100_000,
        AdvisorContext(industry="Professional Services"),
    )
    assert suggestion.confidence == Confidence.high
    assert suggestion.suggestion == "Your forecast looks solid!"
    assert suggestion.reasoning == "Gross margin is healthy at 60% Strong net margin of 20%"
    assert suggestion.caveats == []


def test_forecast_review_concerns(advisor, interactions) -> None:
    suggestion = advisor.validate_forecast(
        100_000, 20_000, 2_000, 50_000, 10_000, AdvisorContext(industry="technology")
    )
    assert suggestion.confidence == Confidence.low
    assert suggestion.suggestion == "Your forecast has some concerns that should be addressed."
    assert suggestion.caveats == [
        "Gross margin (20%) is below typical for your industry (70%)",
        "Net margin of 2% leaves little room for error",
        "Team costs at 50% of revenue is high",
    ]
    logged = interactions.get_interaction(suggestion.interaction_id)
    assert logged.question_type == QuestionType.forecast_validation
    assert logged.context_data["grossProfit"] == 20_000


def test_forecast_review_zero_revenue_is_guarded(advisor) -> None:
    suggestion = advisor.validate_forecast(0, 0, 0, 0, 0, AdvisorContext())
    assert suggestion.confidence == Confidence.medium
    assert suggestion.suggestion == "Your forecast is reasonable with some areas to watch."
    assert len(suggestion.caveats) == 2


def test_unknown_industry_uses_default_benchmark() -> None:
    assert industry_benchmark("Space Tourism") == MARGIN_GUIDES["other"]
    assert industry_benchmark(None) == MARGIN_GUIDES["other"]
    assert industry_benchmark("Healthcare") == MARGIN_GUIDES["healthcare"]


# ---------------------------------------------------------------------------
# Interaction feedback
# ---------------------------------------------------------------------------


def test_record_action_updates_interaction(advisor, interactions) -> None:
    suggestion = advisor.get_salary_estimate("Plumber", AdvisorContext())

    assert advisor.record_action(suggestion.interaction_id, "adjusted", 90000) is True

    logged = interactions.get_interaction(suggestion.interaction_id)
    assert logged.action_taken == InteractionAction.adjusted
    assert logged.user_value == 90000


def test_record_action_unknown_or_unlogged(advisor) -> None:
    assert advisor.record_action("missing", InteractionAction.used) is False
    assert AIAdvisor().record_action("anything", InteractionAction.used) is False


def test_record_action_swallows_log_errors() -> None:
    advisor = AIAdvisor(interactions=BrokenInteractionLog())
    assert advisor.record_action("some-id", InteractionAction.ignored) is False


def test_record_action_rejects_unknown_action(advisor) -> None:
    with pytest.raises(ValueError):
        advisor.record_action("some-id", "shrugged")
