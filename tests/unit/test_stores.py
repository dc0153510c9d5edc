from __future__ import annotations

import pytest

from coach_advisor.advisor.service import AIAdvisor
from coach_advisor.core.models import (
    AdvisorContext,
    BenchmarkType,
    CoachBenchmark,
    InteractionAction,
    QuestionType,
    SuggestionSource,
)
from coach_advisor.db.stores import (
    PostgresBenchmarkStore,
    PostgresInteractionLog,
    benchmark_category,
    promote_interaction_to_benchmark,
)


def _benchmark(category: str, coach_id: str = "coach-1", typical: float = 70000) -> CoachBenchmark:
    return CoachBenchmark(
        coach_id=coach_id,
        benchmark_type=BenchmarkType.salary,
        category=category,
        min_value=typical - 10000,
        max_value=typical + 10000,
        typical_value=typical,
    )


def test_add_benchmark_upserts_on_coach_type_category(benchmarks) -> None:
    first = benchmarks.add_benchmark(_benchmark("bookkeeper", typical=70000))
    second = benchmarks.add_benchmark(_benchmark("bookkeeper", typical=72000))

    assert first.id is not None
    assert second.id == first.id
    [stored] = benchmarks.list_benchmarks("coach-1")
    assert stored.typical_value == 72000


def test_benchmarks_are_scoped_by_coach_and_type(benchmarks) -> None:
    benchmarks.add_benchmark(_benchmark("bookkeeper"))
    assert benchmarks.get_benchmark("coach-2", BenchmarkType.salary, "bookkeeper") is None
    assert benchmarks.get_benchmark("coach-1", BenchmarkType.project_cost, "bookkeeper") is None
    assert benchmarks.get_benchmark("coach-1", BenchmarkType.salary, "bookkeeper") is not None


def test_list_benchmarks_most_used_first(benchmarks) -> None:
    benchmarks.add_benchmark(_benchmark("accountant"))
    benchmarks.add_benchmark(_benchmark("plumber"))
    benchmarks.add_benchmark(_benchmark("chef", coach_id="coach-2"))
    benchmarks.mark_used("coach-1", BenchmarkType.salary, "plumber")

    assert [b.category for b in benchmarks.list_benchmarks("coach-1")] == ["plumber", "accountant"]
    assert len(benchmarks.list_benchmarks()) == 3


def test_returned_benchmarks_are_copies(benchmarks) -> None:
    stored = benchmarks.add_benchmark(_benchmark("plumber"))
    stored.typical_value = 1
    assert benchmarks.get_benchmark("coach-1", BenchmarkType.salary, "plumber").typical_value == 70000


def test_delete_benchmark(benchmarks) -> None:
    stored = benchmarks.add_benchmark(_benchmark("plumber"))
    assert benchmarks.delete_benchmark(stored.id) is True
    assert benchmarks.delete_benchmark(stored.id) is False
    assert benchmarks.list_benchmarks() == []


def test_interactions_newest_first_with_filters(advisor, interactions) -> None:
    ctx = AdvisorContext()
    first = advisor.get_salary_estimate("Plumber", ctx)
    second = advisor.get_project_cost_estimate("website", ctx)
    third = advisor.get_salary_estimate("Chef", ctx)

    listed = interactions.list_interactions()
    assert [i.id for i in listed] == [third.interaction_id, second.interaction_id, first.interaction_id]

    salaries = interactions.list_interactions(question_type=QuestionType.salary_estimate)
    assert [i.id for i in salaries] == [third.interaction_id, first.interaction_id]

    assert [i.id for i in interactions.list_interactions(search="PLUMBER")] == [first.interaction_id]
    assert len(interactions.list_interactions(limit=1)) == 1


def test_mark_reviewed(advisor, interactions) -> None:
    suggestion = advisor.get_salary_estimate("Plumber", AdvisorContext())
    assert interactions.mark_reviewed(suggestion.interaction_id) is True
    assert interactions.get_interaction(suggestion.interaction_id).coach_reviewed is True
    assert interactions.mark_reviewed("missing") is False


def test_benchmark_category() -> None:
    assert benchmark_category("Office  Manager") == "office_manager"


def test_promote_interaction_feeds_next_estimate(benchmarks, interactions) -> None:
    advisor = AIAdvisor(benchmarks, interactions)
    ctx = AdvisorContext(coach_id="coach-1", industry="trades")
    logged = advisor.get_salary_estimate("Senior Bookkeeper", ctx, location="Sydney")

    promoted = promote_interaction_to_benchmark(
        interactions, benchmarks, logged.interaction_id, "coach-1"
    )

    assert promoted.benchmark_type == BenchmarkType.salary
    assert promoted.category == "bookkeeper"
    assert (promoted.min_value, promoted.max_value, promoted.typical_value) == (63800, 85800, 74800)
    assert promoted.notes == 'From client question: "What salary for Senior Bookkeeper?"'
    assert promoted.industry_filter == "trades"
    assert interactions.get_interaction(logged.interaction_id).added_to_library is True

    again = advisor.get_salary_estimate("Bookkeeper", ctx)
    assert again.source == SuggestionSource.coach_benchmark
    assert again.typical_value == 74800


def test_promote_project_cost(benchmarks, interactions) -> None:
    advisor = AIAdvisor(benchmarks, interactions)
    logged = advisor.get_project_cost_estimate("New website", AdvisorContext())
    promoted = promote_interaction_to_benchmark(interactions, benchmarks, logged.interaction_id, "c")
    assert promoted.benchmark_type == BenchmarkType.project_cost
    assert promoted.category == "website_redesign"


def test_promote_refuses_without_typical_value(benchmarks, interactions) -> None:
    advisor = AIAdvisor(benchmarks, interactions)
    review = advisor.validate_forecast(100, 50, 10, 10, 10, AdvisorContext())

    assert promote_interaction_to_benchmark(interactions, benchmarks, review.interaction_id, "c") is None
    assert promote_interaction_to_benchmark(interactions, benchmarks, "missing", "c") is None
    assert benchmarks.list_benchmarks() == []


class FakeDatabase:
    """Stands in for AdvisorDatabase; records calls and transaction outcomes."""

    def __init__(self, fail: bool = False, fail_reads: bool = False):
        self.fail = fail
        self.fail_reads = fail_reads
        self.aborted = False
        self.calls = []
        self.commits = 0
        self.rollbacks = 0

    def commit(self) -> None:
        self.commits += 1

    def rollback(self) -> None:
        self.rollbacks += 1
        self.aborted = False

    def _read(self, name, *args):
        self.calls.append((name, *args))
        if self.aborted:
            raise RuntimeError("current transaction is aborted")
        if self.fail_reads:
            # like Postgres, a failed statement poisons the open transaction
            self.aborted = True
            raise RuntimeError("relation does not exist")

    def fetch_benchmark(self, coach_id, benchmark_type, category):
        self._read("fetch_benchmark", coach_id, benchmark_type, category)
        return None

    def fetch_benchmarks(self, coach_id):
        self._read("fetch_benchmarks", coach_id)
        return []

    def fetch_interactions(self, question_type, search, limit):
        self._read("fetch_interactions", question_type, search, limit)
        return []

    def insert_interaction(self, row):
        self.calls.append(("insert_interaction", row["question_type"]))
        if self.aborted:
            raise RuntimeError("current transaction is aborted")
        return "1b4e28ba-2fa1-11d2-883f-0016d3cca427"

    def update_interaction(self, interaction_id, **fields):
        self.calls.append(("update_interaction", interaction_id, fields))
        if self.fail:
            raise RuntimeError("connection lost")
        return True

    def fetch_interaction(self, interaction_id):
        self._read("fetch_interaction", interaction_id)
        return None

    def increment_benchmark_usage(self, coach_id, benchmark_type, category):
        self.calls.append(("increment_benchmark_usage", coach_id, benchmark_type, category))


def test_postgres_log_skips_malformed_ids() -> None:
    db = FakeDatabase()
    log = PostgresInteractionLog(db)
    assert log.get_interaction("nope") is None
    assert log.mark_reviewed("nope") is False
    assert db.calls == []


def test_postgres_log_commits_and_rolls_back() -> None:
    row_id = "1b4e28ba-2fa1-11d2-883f-0016d3cca427"
    db = FakeDatabase()
    assert PostgresInteractionLog(db).record_action(row_id, InteractionAction.used, 10.0) is True
    assert db.calls == [
        ("update_interaction", row_id, {"action_taken": "used", "user_value": 10.0})
    ]
    assert db.commits == 1

    failing = FakeDatabase(fail=True)
    with pytest.raises(RuntimeError):
        PostgresInteractionLog(failing).mark_reviewed(row_id)
    assert failing.rollbacks == 1
    assert failing.commits == 0


def test_postgres_benchmark_usage_passes_enum_values() -> None:
    db = FakeDatabase()
    PostgresBenchmarkStore(db).mark_used("coach-1", BenchmarkType.salary, "bookkeeper")
    assert db.calls == [("increment_benchmark_usage", "coach-1", "salary", "bookkeeper")]
    assert db.commits == 1


@pytest.mark.parametrize(
    "read",
    [
        lambda db: PostgresBenchmarkStore(db).get_benchmark("coach-1", BenchmarkType.salary, "chef"),
        lambda db: PostgresBenchmarkStore(db).list_benchmarks("coach-1"),
        lambda db: PostgresInteractionLog(db).get_interaction("1b4e28ba-2fa1-11d2-883f-0016d3cca427"),
        lambda db: PostgresInteractionLog(db).list_interactions(QuestionType.salary_estimate),
    ],
)
def test_postgres_reads_roll_back_on_failure(read) -> None:
    db = FakeDatabase(fail_reads=True)
    with pytest.raises(RuntimeError):
        read(db)
    assert db.rollbacks == 1
    assert db.aborted is False
    assert db.commits == 0


def test_failed_benchmark_lookup_still_logs_the_interaction() -> None:
    db = FakeDatabase(fail_reads=True)
    advisor = AIAdvisor(PostgresBenchmarkStore(db), PostgresInteractionLog(db))

    suggestion = advisor.get_salary_estimate("Bookkeeper", AdvisorContext(coach_id="coach-1"))

    assert suggestion.source == SuggestionSource.market_data
    assert suggestion.interaction_id == "1b4e28ba-2fa1-11d2-883f-0016d3cca427"
    assert [c[0] for c in db.calls] == ["fetch_benchmark", "insert_interaction"]
