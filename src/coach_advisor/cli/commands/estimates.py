from __future__ import annotations

import click

from coach_advisor.cli.context import CLIContext
from coach_advisor.cli.shared import advisor_context_options, build_advisor_context, echo_json
from coach_advisor.core.models import InteractionAction
from coach_advisor.core.normalize import normalize_industry, normalize_project_type, normalize_role


def register(cli: click.Group) -> None:
    @cli.command("salary")
    @click.argument("position")
    @click.option("--experience", type=str, default=None, help="e.g. '5 years'")
    @click.option("--location", type=str, default=None, help="e.g. Sydney, Melbourne, regional NSW")
    @advisor_context_options
    @click.pass_obj
    def salary_cmd(ctx: CLIContext, position: str, experience, location, **context) -> None:
        """Suggest a salary range for POSITION."""
        suggestion = ctx.advisor.get_salary_estimate(
            position,
            build_advisor_context(**context),
            experience=experience,
            location=location,
        )
        echo_json(suggestion)

    @cli.command("project-cost")
    @click.argument("project_type")
    @click.option("--scope", type=str, default=None)
    @click.option("--complexity", type=str, default=None)
    @advisor_context_options
    @click.pass_obj
    def project_cost_cmd(ctx: CLIContext, project_type: str, scope, complexity, **context) -> None:
        """Suggest a one-off cost range for PROJECT_TYPE."""
        suggestion = ctx.advisor.get_project_cost_estimate(
            project_type,
            build_advisor_context(**context),
            scope=scope,
            complexity=complexity,
        )
        echo_json(suggestion)

    @cli.command("review-forecast")
    @click.option("--revenue", type=float, required=True)
    @click.option("--gross-profit", type=float, required=True)
    @click.option("--net-profit", type=float, required=True)
    @click.option("--team-costs", type=float, default=0.0, show_default=True)
    @click.option("--opex-costs", type=float, default=0.0, show_default=True)
    @advisor_context_options
    @click.pass_obj
    def review_forecast_cmd(
        ctx: CLIContext,
        revenue: float,
        gross_profit: float,
        net_profit: float,
        team_costs: float,
        opex_costs: float,
        **context,
    ) -> None:
        """Compare forecast margins against the industry benchmark."""
        suggestion = ctx.advisor.validate_forecast(
            revenue,
            gross_profit,
            net_profit,
            team_costs,
            opex_costs,
            build_advisor_context(**context),
        )
        echo_json(suggestion)

    @cli.command("record-action")
    @click.argument("interaction_id")
    @click.argument("action", type=click.Choice([a.value for a in InteractionAction]))
    @click.option("--user-value", type=float, default=None, help="Value the user settled on.")
    @click.pass_obj
    def record_action_cmd(ctx: CLIContext, interaction_id: str, action: str, user_value) -> None:
        """Record what the user did with a logged suggestion."""
        recorded = ctx.advisor.record_action(interaction_id, action, user_value)
        if not recorded:
            raise click.ClickException(f"Interaction '{interaction_id}' was not updated.")
        click.echo(f"Recorded '{action}' for {interaction_id}")

    @cli.command("normalize")
    @click.argument("text")
    @click.option(
        "--kind",
        type=click.Choice(["role", "project", "industry"]),
        default="role",
        show_default=True,
    )
    def normalize_cmd(text: str, kind: str) -> None:
        """Show the canonical lookup key for TEXT."""
        if kind == "role":
            key = normalize_role(text)
        elif kind == "project":
            key = normalize_project_type(text)
        else:
            key = normalize_industry(text)
        click.echo(key)
