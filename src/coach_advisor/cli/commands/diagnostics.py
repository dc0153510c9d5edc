from __future__ import annotations

import click

from coach_advisor.cli.context import CLIContext
from coach_advisor.cli.shared import mask_secret
from coach_advisor.clients.openai_client import build_estimation_source, describe_source
from coach_advisor.core.guides import MARGIN_GUIDES, PROJECT_COST_GUIDES, SALARY_GUIDES


def register(cli: click.Group) -> None:
    @cli.command("env-info")
    @click.pass_obj
    def env_info_cmd(ctx: CLIContext) -> None:
        """Print env detection (API keys masked)."""
        settings = ctx.settings

        click.echo("--- Loaded from Settings ---")
        click.echo(f"OPENAI_API_KEY:     {mask_secret(settings.openai_api_key_str)}")
        click.echo(f"OPENAI_MODEL:       {settings.openai_model}")
        click.echo(f"USE_AI_ESTIMATES:   {settings.use_ai_estimates}")
        click.echo(f"ESTIMATION_SOURCE:  {describe_source(build_estimation_source(settings))}")
        click.echo(f"FORECAST_TOLERANCE: {settings.forecast_tolerance}")
        click.echo(f"DB_URL:             {settings.db_url}")
        click.echo(
            f"Reference data:     {len(SALARY_GUIDES)} roles | "
            f"{len(PROJECT_COST_GUIDES)} project types | {len(MARGIN_GUIDES)} industries"
        )

    @cli.command("init-db")
    @click.pass_obj
    def init_db_cmd(ctx: CLIContext) -> None:
        """Initialize (or re-initialize) the Postgres schema."""
        db = ctx.db
        try:
            db.initialize_schema()
            click.echo(f"Initialized database at {db.dsn}")
            click.echo(f"Tables: {', '.join(db.check_tables()) or '(none)'}")
        finally:
            ctx.close()
