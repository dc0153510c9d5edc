from __future__ import annotations

import click

from coach_advisor.cli.context import CLIContext
from coach_advisor.cli.shared import echo_json, load_json_file
from coach_advisor.validation.forecast import ForecastValidationService as FVS


def register(cli: click.Group) -> None:
    @cli.group("check")
    def check_group() -> None:
        """Forecast data-quality checks (no database needed)."""

    @check_group.command("revenue-goal")
    @click.option("--value", type=float, required=True, help="Annual revenue goal.")
    def revenue_goal_cmd(value: float) -> None:
        echo_json(FVS.validate_revenue_goal(value))

    @check_group.command("cogs")
    @click.option("--percentage", type=float, required=True)
    def cogs_cmd(percentage: float) -> None:
        echo_json(FVS.validate_cogs_percentage(percentage))

    @check_group.command("forecast-vs-goal")
    @click.option("--forecast", type=float, required=True, help="Forecast total.")
    @click.option("--goal", type=float, required=True, help="Goal total.")
    @click.option("--tolerance", type=float, default=None, help="Allowed variance (default from settings).")
    @click.pass_obj
    def forecast_vs_goal_cmd(ctx: CLIContext, forecast: float, goal: float, tolerance) -> None:
        tol = ctx.settings.forecast_tolerance if tolerance is None else tolerance
        echo_json(FVS.validate_forecast_vs_goals(forecast, goal, tol))

    @check_group.command("pl-line")
    @click.option("--value", type=float, required=True)
    @click.option("--category", type=str, required=True, help="Revenue, Cost of Sales, Operating Expenses, ...")
    @click.option("--account", type=str, required=True, help="Account name.")
    def pl_line_cmd(value: float, category: str, account: str) -> None:
        echo_json(FVS.validate_pl_line_value(value, category, account))

    @check_group.command("completeness")
    @click.option("--revenue-goal/--no-revenue-goal", default=False)
    @click.option("--distribution-method/--no-distribution-method", default=False)
    @click.option("--cogs/--no-cogs", default=False)
    @click.option("--months", type=int, default=0, show_default=True, help="Months with forecast data.")
    @click.option("--expected-months", type=int, default=12, show_default=True)
    @click.option("--revenue-line/--no-revenue-line", default=False)
    @click.option("--expense-line/--no-expense-line", default=False)
    def completeness_cmd(
        revenue_goal: bool,
        distribution_method: bool,
        cogs: bool,
        months: int,
        expected_months: int,
        revenue_line: bool,
        expense_line: bool,
    ) -> None:
        score = FVS.calculate_completeness(
            revenue_goal,
            distribution_method,
            cogs,
            months,
            expected_months,
            revenue_line,
            expense_line,
        )
        click.echo(str(score))

    @check_group.command("formulas")
    @click.option(
        "--file",
        "path",
        type=click.Path(exists=True, dir_okay=False),
        required=True,
        help='JSON: {"formulas": {cell: formula}, "references": {cell: [cells]}}',
    )
    def formulas_cmd(path: str) -> None:
        payload = load_json_file(path)
        if not isinstance(payload, dict) or not isinstance(payload.get("formulas"), dict):
            raise click.BadParameter("expected an object with a 'formulas' mapping", param_hint="--file")
        echo_json(FVS.validate_formulas(payload["formulas"], payload.get("references") or {}))

    @check_group.command("months")
    @click.option(
        "--file",
        "path",
        type=click.Path(exists=True, dir_okay=False),
        required=True,
        help='JSON: {"months": {key: value}, "expected": [keys]}',
    )
    def months_cmd(path: str) -> None:
        payload = load_json_file(path)
        if not isinstance(payload, dict):
            raise click.BadParameter("expected a JSON object", param_hint="--file")
        echo_json(FVS.validate_months_complete(payload.get("months") or {}, payload.get("expected") or []))

    @check_group.command("round")
    @click.option("--value", type=float, required=True)
    @click.option("--decimals", type=int, default=2, show_default=True)
    def round_cmd(value: float, decimals: int) -> None:
        click.echo(repr(FVS.round_to_precision(value, decimals)))

    @check_group.command("format-currency")
    @click.option("--value", type=float, required=True)
    @click.option("--currency", type=str, default="AUD", show_default=True)
    def format_currency_cmd(value: float, currency: str) -> None:
        click.echo(FVS.format_currency(value, currency))
