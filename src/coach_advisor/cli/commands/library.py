from __future__ import annotations

import click

from coach_advisor.cli.context import CLIContext
from coach_advisor.cli.shared import echo_json
from coach_advisor.core.models import BenchmarkType, CoachBenchmark, QuestionType
from coach_advisor.db.stores import benchmark_category, promote_interaction_to_benchmark


def register(cli: click.Group) -> None:
    @cli.group("benchmarks")
    def benchmarks_group() -> None:
        """Manage a coach's benchmark library."""

    @benchmarks_group.command("add")
    @click.option("--coach-id", type=str, required=True)
    @click.option(
        "--type",
        "benchmark_type",
        type=click.Choice([t.value for t in BenchmarkType]),
        default=BenchmarkType.salary.value,
        show_default=True,
    )
    @click.option("--category", type=str, required=True, help="Role or project type, e.g. 'bookkeeper'.")
    @click.option("--min", "min_value", type=float, default=None)
    @click.option("--max", "max_value", type=float, default=None)
    @click.option("--typical", "typical_value", type=float, required=True)
    @click.option("--notes", type=str, default=None)
    @click.option("--industry", "industry_filter", type=str, default=None)
    @click.pass_obj
    def add_cmd(
        ctx: CLIContext,
        coach_id: str,
        benchmark_type: str,
        category: str,
        min_value,
        max_value,
        typical_value: float,
        notes,
        industry_filter,
    ) -> None:
        """Add (or replace) a benchmark for one category."""
        if min_value is not None and max_value is not None and min_value > max_value:
            raise click.BadParameter("--min must not exceed --max", param_hint="--min")
        stored = ctx.benchmarks.add_benchmark(
            CoachBenchmark(
                coach_id=coach_id,
                benchmark_type=BenchmarkType(benchmark_type),
                category=benchmark_category(category.strip()),
                min_value=min_value,
                max_value=max_value,
                typical_value=typical_value,
                notes=notes,
                industry_filter=industry_filter,
            )
        )
        echo_json(stored)

    @benchmarks_group.command("list")
    @click.option("--coach-id", type=str, default=None)
    @click.pass_obj
    def list_cmd(ctx: CLIContext, coach_id) -> None:
        """List benchmarks, most used first."""
        echo_json(ctx.benchmarks.list_benchmarks(coach_id))

    @benchmarks_group.command("delete")
    @click.argument("benchmark_id")
    @click.pass_obj
    def delete_cmd(ctx: CLIContext, benchmark_id: str) -> None:
        if not ctx.benchmarks.delete_benchmark(benchmark_id):
            raise click.ClickException(f"Benchmark '{benchmark_id}' not found")
        click.echo(f"Deleted benchmark {benchmark_id}")

    @cli.group("interactions")
    def interactions_group() -> None:
        """Review what the advisor told clients."""

    @interactions_group.command("list")
    @click.option(
        "--type",
        "question_type",
        type=click.Choice([q.value for q in QuestionType]),
        default=None,
    )
    @click.option("--search", type=str, default=None, help="Substring of the question.")
    @click.option("--limit", type=int, default=100, show_default=True)
    @click.pass_obj
    def interactions_list_cmd(ctx: CLIContext, question_type, search, limit: int) -> None:
        echo_json(
            ctx.interactions.list_interactions(
                QuestionType(question_type) if question_type else None, search, limit
            )
        )

    @interactions_group.command("review")
    @click.argument("interaction_id")
    @click.pass_obj
    def review_cmd(ctx: CLIContext, interaction_id: str) -> None:
        """Mark an interaction as reviewed by the coach."""
        if not ctx.interactions.mark_reviewed(interaction_id):
            raise click.ClickException(f"Interaction '{interaction_id}' not found")
        click.echo(f"Marked {interaction_id} as reviewed")

    @interactions_group.command("promote")
    @click.argument("interaction_id")
    @click.option("--coach-id", type=str, required=True)
    @click.pass_obj
    def promote_cmd(ctx: CLIContext, interaction_id: str, coach_id: str) -> None:
        """Copy a logged estimate into the coach's benchmark library."""
        stored = promote_interaction_to_benchmark(
            ctx.interactions, ctx.benchmarks, interaction_id, coach_id
        )
        if stored is None:
            raise click.ClickException(
                f"Interaction '{interaction_id}' not found or has no typical value"
            )
        echo_json(stored)
