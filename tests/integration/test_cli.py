from __future__ import annotations

import json

import pytest
from click.testing import CliRunner

from coach_advisor.cli import cli


@pytest.fixture()
def run(memory_env):
    runner = CliRunner()

    def _run(*args: str, expect_exit: int = 0):
        result = runner.invoke(cli, ["--memory", *args])
        assert result.exit_code == expect_exit, result.output
        return result.output

    return _run


def test_salary_command(run) -> None:
    payload = json.loads(run("salary", "Bookkeeper", "--location", "Sydney", "--coach-id", "c1"))
    assert (payload["minValue"], payload["maxValue"], payload["typicalValue"]) == (
        63800,
        85800,
        74800,
    )
    assert payload["source"] == "market_data"
    assert payload["interactionId"]


def test_project_cost_command_falls_back(run) -> None:
    payload = json.loads(run("project-cost", "Zzz widget", "--scope", "small"))
    assert payload["confidence"] == "low"
    assert (payload["minValue"], payload["maxValue"]) == (5000, 50000)


def test_review_forecast_command(run) -> None:
    payload = json.loads(
        run(
            "review-forecast",
            "--revenue", "1000000",
            "--gross-profit", "600000",
            "--net-profit", "200000",
            "--team-costs", "300000",
            "--industry", "professional services",
        )
    )
    assert payload["confidence"] == "high"
    assert payload["suggestion"] == "Your forecast looks solid!"


@pytest.mark.parametrize(
    ("args", "expected"),
    [
        (("BDM",), "business_development"),
        (("book keeper",), "bookkeeper"),
        (("website", "--kind", "project"), "website_redesign"),
        (("Professional Services", "--kind", "industry"), "professional_services"),
    ],
)
def test_normalize_command(run, args, expected: str) -> None:
    assert run("normalize", *args).strip() == expected


def test_record_action_unknown_interaction(run) -> None:
    output = run("record-action", "missing", "used", expect_exit=1)
    assert "was not updated" in output


def test_check_commands(run) -> None:
    issue = json.loads(run("check", "revenue-goal", "--value", "0"))
    assert issue["severity"] == "error"
    assert json.loads(run("check", "cogs", "--percentage", "40")) is None

    goal = json.loads(run("check", "forecast-vs-goal", "--forecast", "110000", "--goal", "100000"))
    assert "10.0% higher" in goal["message"]
    assert json.loads(
        run("check", "forecast-vs-goal", "--forecast", "103000", "--goal", "100000")
    ) is None

    pl = json.loads(
        run("check", "pl-line", "--value", "-5", "--category", "Cost of Sales", "--account", "Stock")
    )
    assert pl["field"] == "Stock"

    score = run(
        "check", "completeness",
        "--revenue-goal", "--distribution-method", "--cogs",
        "--months", "12", "--revenue-line", "--expense-line",
    )
    assert score.strip() == "100"

    assert run("check", "round", "--value", "2.5", "--decimals", "0").strip() == "3.0"
    assert run("check", "format-currency", "--value", "-1234.5").strip() == "-$1,234.50"


def test_check_file_commands(run, tmp_path) -> None:
    formulas = tmp_path / "formulas.json"
    formulas.write_text(
        json.dumps({"formulas": {"A": "=B1", "B": "=A1"}, "references": {"A": ["B"], "B": ["A"]}})
    )
    issues = json.loads(run("check", "formulas", "--file", str(formulas)))
    assert [i["field"] for i in issues] == ["A", "B"]

    months = tmp_path / "months.json"
    months.write_text(json.dumps({"months": {"jan": 1}, "expected": ["jan", "feb"]}))
    [issue] = json.loads(run("check", "months", "--file", str(months)))
    assert issue["value"] == ["feb"]

    bad = tmp_path / "bad.json"
    bad.write_text("[]")
    run("check", "formulas", "--file", str(bad), expect_exit=2)


def test_benchmarks_add_and_list(run) -> None:
    stored = json.loads(
        run(
            "benchmarks", "add",
            "--coach-id", "c1",
            "--category", "Office Manager",
            "--min", "70000",
            "--max", "90000",
            "--typical", "80000",
        )
    )
    assert stored["category"] == "office_manager"
    assert stored["benchmark_type"] == "salary"
    assert stored["id"]

    run("benchmarks", "add", "--coach-id", "c1", "--category", "x", "--min", "9", "--max", "1",
        "--typical", "5", expect_exit=2)


def test_memory_library_starts_empty(run) -> None:
    assert json.loads(run("benchmarks", "list")) == []
    assert json.loads(run("interactions", "list")) == []
    run("interactions", "promote", "missing", "--coach-id", "c1", expect_exit=1)
    run("benchmarks", "delete", "missing", expect_exit=1)


def test_env_info(run) -> None:
    output = run("env-info")
    assert "HeuristicEstimationSource" in output
    assert "OPENAI_API_KEY:     (unset)" in output


def test_salary_answers_when_postgres_is_unreachable(memory_env, caplog) -> None:
    import coach_advisor.db.database as database

    def refuse(*args, **kwargs):
        raise OSError("Connection refused")

    memory_env.setenv("USE_MEMORY_STORES", "false")
    memory_env.setattr(database.psycopg, "connect", refuse)

    with caplog.at_level("WARNING", logger="coach_advisor.cli"):
        result = CliRunner().invoke(
            cli, ["--db-url", "postgresql://x:y@127.0.0.1:1/none", "salary", "Bookkeeper"]
        )

    assert result.exit_code == 0, result.output
    output = result.output
    payload = json.loads(output[output.index("{") : output.rindex("}") + 1])
    assert payload["source"] == "market_data"
    assert payload.get("interactionId") is None
    assert "without benchmarks or interaction log" in caplog.text
